import math
import unittest
from fractions import Fraction

from cantor.ontology import UnsupportedDerivativeError, EvaluationError
from cantor.values import Number, Lambda, TRUE, FALSE, from_python, to_python
from cantor.sets import NAT, INT, REAL, COMPLEX, BOOL, STR, UNIV
from cantor.symbolic import (
	Const, VarRef, BinaryOp, UnaryOp, FuncRef, ZERO, ONE, TWO,
	add, sub, mul, div, power, neg, call, mentions, substitute,
)
from cantor.calculus import differentiate
from cantor.evaluator import evaluate, apply
from cantor.inference import infer_set, rung

x, y, z = VarRef("x"), VarRef("y"), VarRef("z")

def at(expr, **bindings):
	return evaluate(expr, {k: from_python(v) for k, v in bindings.items()})

def quadratic():
	""" x^2 - 2x + 1 """
	return BinaryOp("+", BinaryOp("-", BinaryOp("^", x, TWO), BinaryOp("*", TWO, x)), ONE)

class Folding(unittest.TestCase):
	def test_constants_fold(self):
		self.assertEqual(Const(3), add(ONE, TWO))
		self.assertEqual(Const(Fraction(1, 2)), div(ONE, TWO))
		self.assertEqual(Const(8), power(TWO, Const(3)))

	def test_identities(self):
		self.assertIs(x, add(ZERO, x))
		self.assertIs(x, mul(ONE, x))
		self.assertEqual(ZERO, mul(x, ZERO))
		self.assertEqual(ZERO, sub(x, x))
		self.assertIs(x, neg(neg(x)))
		self.assertEqual(ONE, power(x, ZERO))

	def test_failed_folds_stay_symbolic(self):
		self.assertEqual(BinaryOp("/", ONE, ZERO), div(ONE, ZERO))

	def test_mentions_and_substitute(self):
		e = call("sin", mul(x, y))
		self.assertTrue(mentions(e, "y"))
		self.assertFalse(mentions(e, "z"))
		self.assertTrue(mentions(FuncRef("f"), "z"))
		self.assertEqual(call("sin", BinaryOp("*", z, y)), substitute(e, {"x": z}))
		self.assertEqual(mul(call("sin", z), y), substitute(mul(FuncRef("sin"), VarRef("t")), {"t": y}, z))

	def test_render(self):
		for expect, e in [
			("x - (y - z)", BinaryOp("-", x, BinaryOp("-", y, z))),
			("x - y - z", BinaryOp("-", BinaryOp("-", x, y), z)),
			("(x ^ y) ^ z", BinaryOp("^", BinaryOp("^", x, y), z)),
			("x ^ y ^ z", BinaryOp("^", x, BinaryOp("^", y, z))),
			("(x + y) * z", BinaryOp("*", BinaryOp("+", x, y), z)),
			("-(x + y)", UnaryOp("-", BinaryOp("+", x, y))),
			("NOT x == y", UnaryOp("NOT", BinaryOp("==", x, y))),
			("sin(x) * 2", BinaryOp("*", call("sin", x), TWO)),
			("x ^ (-1)", BinaryOp("^", x, Const(-1))),
		]:
			with self.subTest(expect):
				self.assertEqual(expect, e.render())

class Evaluate(unittest.TestCase):
	def test_exact_arithmetic(self):
		self.assertEqual(Number(Fraction(3, 2)), at(BinaryOp("+", ONE, BinaryOp("/", ONE, TWO))))
		self.assertEqual(Number(2), at(BinaryOp("^", Const(8), Const(Fraction(1, 3)))))
		self.assertEqual(Number(1), at(BinaryOp("MOD", Const(-5), Const(3))))

	def test_failures(self):
		for e in [
			BinaryOp("/", ONE, ZERO),
			BinaryOp("^", ZERO, ZERO),
			BinaryOp("+", ONE, Const("a")),
			BinaryOp("<", Const(1j), ONE),
			VarRef("nowhere"),
			call("nonesuch", ONE),
		]:
			with self.subTest(e=e):
				with self.assertRaises(EvaluationError):
					at(e)

	def test_logic_short_circuits(self):
		boom = BinaryOp("==", BinaryOp("/", ONE, ZERO), ONE)
		self.assertEqual(FALSE, at(BinaryOp("AND", Const(False), boom)))
		self.assertEqual(TRUE, at(BinaryOp("OR", BinaryOp("<", x, TWO), boom), x=1))
		self.assertEqual(TRUE, at(UnaryOp("NOT", BinaryOp("!=", x, x)), x="a"))

	def test_builtins(self):
		self.assertEqual(Number(3), at(call("sqrt", Const(9))))
		self.assertEqual(Number(1j), at(call("sqrt", Const(-1))))
		self.assertAlmostEqual(math.sin(1), to_python(at(call("sin", ONE))))
		self.assertEqual(Number(2), at(call("abs", Const(-2))))

	def test_functions(self):
		hyp = Lambda("hyp", ["a", "b"], call("sqrt", add(power(VarRef("a"), TWO), power(VarRef("b"), TWO))))
		self.assertEqual(Number(5), apply(hyp, [Number(3), Number(4)]))
		self.assertEqual(Number(5), apply(hyp, [from_python((3, 4))]))
		self.assertEqual(Number(13), at(call("hyp", Const(5), Const(12)), hyp=hyp))
		with self.assertRaises(EvaluationError):
			apply(hyp, [Number(3)])

	def test_point_free(self):
		square_of_sine = BinaryOp("^", FuncRef("sin"), TWO)
		self.assertAlmostEqual(math.sin(1)**2, to_python(evaluate(square_of_sine, {}, Number(1))))

	def test_runaway_recursion(self):
		loop = Lambda("loop", ["n"], call("loop", VarRef("n")))
		loop.captures["loop"] = loop
		with self.assertRaises(EvaluationError):
			apply(loop, [Number(1)])

class Differentiate(unittest.TestCase):
	def test_quadratic(self):
		derivative = differentiate(quadratic(), "x")
		self.assertEqual(Number(4), at(derivative, x=3))
		for sample in (-1, 0, Fraction(1, 2), 5):
			with self.subTest(x=sample):
				self.assertEqual(Number(2*sample - 2), at(derivative, x=sample))
		self.assertEqual("2 * x - 2", derivative.render())

	def test_leaves(self):
		self.assertEqual(ZERO, differentiate(Const(7), "x"))
		self.assertEqual(ZERO, differentiate(y, "x"))
		self.assertEqual(ONE, differentiate(x, "x"))

	def test_product_and_quotient(self):
		product = differentiate(mul(x, call("sin", x)), "x")
		self.assertAlmostEqual(math.sin(2) + 2*math.cos(2), to_python(at(product, x=2)))
		reciprocal = differentiate(div(ONE, x), "x")
		self.assertEqual(Number(Fraction(-1, 4)), at(reciprocal, x=2))

	def test_powers(self):
		self.assertEqual(Number(1), at(differentiate(power(x, x), "x"), x=1))
		self.assertAlmostEqual(math.log(2), to_python(at(differentiate(power(TWO, x), "x"), x=0)))
		self.assertEqual(Number(Fraction(1, 4)), at(differentiate(call("sqrt", x), "x"), x=4))

	def test_chain_rule(self):
		e = call("sin", power(x, TWO))
		self.assertAlmostEqual(2*3*math.cos(9), to_python(at(differentiate(e, "x"), x=3)))
		self.assertEqual(ZERO, differentiate(call("abs", y), "x"))

	def test_point_free(self):
		derivative = differentiate(BinaryOp("^", FuncRef("sin"), TWO), "x")
		self.assertAlmostEqual(math.sin(2), to_python(evaluate(derivative, {"x": Number(1)}, Number(1))))
		self.assertEqual(FuncRef("f'"), differentiate(FuncRef("f"), "x"))

	def test_unknown_functions_use_lagrange_notation(self):
		self.assertEqual(mul(call("g'", power(x, TWO)), mul(TWO, x)), differentiate(call("g", power(x, TWO)), "x"))

	def test_user_functions_are_inlined(self):
		square = Lambda("square", ["t"], mul(VarRef("t"), VarRef("t")))
		derivative = differentiate(call("square", x), "x", {"square": square})
		self.assertEqual(Number(6), at(derivative, x=3))

	def test_inlining_applies_point_free_references_to_the_argument(self):
		sine_squared = Lambda("f", ["t"], BinaryOp("^", FuncRef("sin"), TWO))
		derivative = differentiate(call("f", mul(TWO, x)), "x", {"f": sine_squared})
		self.assertAlmostEqual(4*math.sin(2)*math.cos(2), to_python(at(derivative, x=1)))

	def test_conjugate(self):
		self.assertEqual(UnaryOp("CONJ", ONE), differentiate(UnaryOp("CONJ", x), "x"))
		self.assertEqual(neg(ONE), differentiate(neg(x), "x"))

	def test_unsupported(self):
		recursive = Lambda("r", ["t"], call("r", VarRef("t")))
		for e, functions in [
			(call("abs", x), None),
			(call("floor", x), None),
			(BinaryOp("MOD", x, TWO), None),
			(UnaryOp("NOT", x), None),
			(BinaryOp("<", x, TWO), None),
			(call("h", x, y), None),
			(call("r", x), {"r": recursive}),
		]:
			with self.subTest(e=e):
				with self.assertRaises(UnsupportedDerivativeError):
					differentiate(e, "x", functions)

class Inference(unittest.TestCase):
	def test_rung(self):
		self.assertEqual("Nat", rung(NAT))
		self.assertEqual("Real", rung(REAL))
		self.assertIsNone(rung(STR))

	def test_arithmetic(self):
		env = {"x": NAT, "y": NAT, "z": REAL}
		for expect, e in [
			(NAT, add(x, y)),
			(INT, sub(x, y)),
			(REAL, div(x, y)),
			(NAT, power(x, y)),
			(REAL, mul(x, z)),
			(INT, neg(x)),
			(INT, BinaryOp("MOD", x, Const(-3))),
			(BOOL, BinaryOp("<", x, z)),
			(REAL, call("sin", x)),
			(COMPLEX, call("sqrt", z)),
			(UNIV, add(x, Const("a"))),
		]:
			with self.subTest(e=e):
				self.assertEqual(expect, infer_set(e, env))

	def test_constants(self):
		self.assertEqual(NAT, infer_set(TWO))
		self.assertEqual(INT, infer_set(Const(-2)))
		self.assertEqual(REAL, infer_set(Const(Fraction(1, 2))))
		self.assertEqual(COMPLEX, infer_set(Const(1j)))

	def test_user_functions_contribute_their_codomains(self):
		f = Lambda("f", ["t"], VarRef("t"), REAL, NAT)
		self.assertEqual(NAT, infer_set(call("f", x), {"x": REAL}, {"f": f}))
		self.assertEqual(INT, infer_set(sub(FuncRef("f"), ONE), {}, {"f": f}))

	def test_point_free_builtins(self):
		self.assertEqual(REAL, infer_set(FuncRef("cos"), point=INT))
		self.assertEqual(UNIV, infer_set(FuncRef("cos")))

if __name__ == '__main__':
	unittest.main()
