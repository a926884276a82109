import io
import unittest
from contextlib import redirect_stdout
from fractions import Fraction
from unittest import mock

from cantor.ontology import TypeConstructionError
from cantor.values import Number, Str, TupleValue
from cantor.sets import Mapping, NamedAlias, INT, REAL, COMPLEX, UNIV, NAT, BOOL
from cantor.symbolic import Const, VarRef, BinaryOp, ONE, TWO, call
from cantor.syntax import (
	TypeName, SetLiteral, TupleSpec, PowerSpec, ListSpec, ArrowSpec, SetOpSpec, ComplementSpec,
	ComprehensionSpec, DataDecl, Assign, Param, FunctionDecl, DerivativeDecl,
)
from cantor.space import Layer, AlreadyExists
from cantor.diagnostics import Report, TooManyIssues, Annotation
from cantor.executive import Session
from cantor.binder import Policy
from cantor.evaluator import apply
from cantor import cmdline, core, primitive

class Silence(Report):
	def __init__(self):
		super().__init__(verbose=False, max_issues=30)
		self.complain_to_console = mock.Mock()
	pass

x, n = VarRef("x"), VarRef("n")

def reciprocal_is_positive():
	return ComprehensionSpec("x", TypeName("Int"), BinaryOp(">", BinaryOp("/", ONE, x), Const(0)))

def quadratic():
	""" x^2 - 2x + 1 """
	return BinaryOp("+", BinaryOp("-", BinaryOp("^", x, TWO), BinaryOp("*", TWO, x)), ONE)

class Annotations(unittest.TestCase):
	""" Type annotations resolve to set-expressions. """

	def setUp(self):
		self.session = Session(Silence())

	def test_shapes(self):
		for expect, ast in [
			("(Int, Str)", TupleSpec([TypeName("Int"), TypeName("Str")])),
			("Int", TupleSpec([TypeName("Int")])),
			("Bool^3", PowerSpec(TypeName("Bool"), 3)),
			("[Nat]", ListSpec(TypeName("Nat"))),
			("(Int, Int) -> Real", ArrowSpec(TupleSpec([TypeName("Int"), TypeName("Int")]), TypeName("Real"))),
			("Int | Str", SetOpSpec("|", TypeName("Int"), TypeName("Str"))),
			("(Int \\ Nat) | (Nat \\ Int)", SetOpSpec("~", TypeName("Int"), TypeName("Nat"))),
			("Univ \\ Int", ComplementSpec(TypeName("Int"))),
			("{1, 1/2}", SetLiteral([ONE, BinaryOp("/", ONE, TWO)])),
		]:
			with self.subTest(expect):
				self.assertEqual(expect, self.session.resolve(ast).render())

	def test_interned(self):
		ast = SetOpSpec("&", TypeName("Int"), TypeName("Real"))
		self.assertIs(self.session.resolve(ast), self.session.resolve(ast))

	def test_symbolic_exponent(self):
		self.session.run([Assign("k", None, TWO)])
		self.assertEqual("Nat^2", self.session.resolve(PowerSpec(TypeName("Nat"), VarRef("k"))).render())

	def test_bad_annotations(self):
		for ast in [
			TypeName("Nope"),
			TupleSpec([]),
			PowerSpec(TypeName("Int"), -1),
			ListSpec(TupleSpec([TypeName("Int"), TypeName("Nope")])),
		]:
			with self.subTest(ast=ast.render()):
				with self.assertRaises(TypeConstructionError):
					self.session.resolve(ast)

	def test_innermost_culprit(self):
		inner = TypeName("Nope")
		try: self.session.resolve(ListSpec(TupleSpec([TypeName("Int"), inner])))
		except TypeConstructionError as ex: self.assertIs(inner, ex.culprit)
		else: self.fail("Should have complained.")

class Statements(unittest.TestCase):
	def setUp(self):
		self.report = Silence()
		self.session = Session(self.report)

	def test_bind_and_mismatch(self):
		self.assertTrue(self.session.run([
			DataDecl("Small", SetLiteral([Const(1), Const(2), Const(3)])),
			Assign("a", TypeName("Small"), Const(2)),
		]))
		self.assertEqual(Number(2), self.session.lookup("a").value)
		self.assertIsInstance(self.session.lookup("a").typeset, NamedAlias)
		self.assertFalse(self.session.execute(Assign("b", TypeName("Small"), Const(5))))
		self.assertIsNone(self.session.lookup("b"))
		self.assertTrue(self.report.sick())
		self.assertIn("5 is not a member of Small.", self.report.issues()[0].as_text())
		# The session carries on.
		self.assertTrue(self.session.execute(Assign("c", TypeName("Small"), Const(3))))

	def test_undecided_is_refused_by_default(self):
		self.assertFalse(self.session.execute(Assign("c", reciprocal_is_positive(), Const(0))))
		self.assertIsNone(self.session.lookup("c"))
		self.assertTrue(self.report.ok())
		self.assertEqual(1, len(self.report.warnings()))
		self.assertIn("Undecided", self.report.warnings()[0].as_text())

	def test_undecided_under_other_policies(self):
		for policy, warnings in [(Policy.WARN, 1), (Policy.ACCEPT, 0)]:
			with self.subTest(policy=policy):
				report = Silence()
				session = Session(report, policy)
				self.assertTrue(session.execute(Assign("c", reciprocal_is_positive(), Const(0))))
				self.assertEqual(Number(0), session.lookup("c").value)
				self.assertEqual(warnings, len(report.warnings()))

	def test_unannotated_assignment_infers(self):
		self.session.execute(Assign("three", None, BinaryOp("+", ONE, TWO)))
		self.assertEqual(Number(3), self.session.lookup("three").value)
		self.assertEqual(NAT, self.session.lookup("three").typeset)

	def test_many_failures_do_not_end_the_session(self):
		session = Session()
		for i in range(5):
			self.assertFalse(session.execute(Assign("a%d"%i, TypeName("Nat"), Const(-1))))
		self.assertEqual(5, len(session.report.issues()))
		self.assertTrue(session.execute(Assign("b", TypeName("Nat"), ONE)))

	def test_names_are_taken_once(self):
		self.assertTrue(self.session.execute(Assign("a", None, ONE)))
		self.assertFalse(self.session.execute(Assign("a", None, TWO)))
		self.assertFalse(self.session.execute(Assign("Int", None, TWO)))
		self.assertFalse(self.session.execute(DataDecl("Int", SetLiteral([ONE]))))
		self.assertFalse(self.session.execute(DataDecl("a", SetLiteral([ONE]))))
		self.assertEqual(Number(1), self.session.lookup("a").value)
		self.assertEqual(4, len(self.report.issues()))

	def test_recursive_data(self):
		self.assertTrue(self.session.run([
			DataDecl("L", SetOpSpec("|", SetLiteral([Const(0)]), TupleSpec([TypeName("Int"), TypeName("L")]))),
			Assign("l", TypeName("L"), Const((1, (2, 0)))),
		]))
		self.assertFalse(self.session.execute(Assign("m", TypeName("L"), Const((1, 2)))))

	def test_circular_data_is_refused_and_forgotten(self):
		self.assertFalse(self.session.execute(DataDecl("A", SetOpSpec("|", TypeName("A"), SetLiteral([ONE])))))
		self.assertIn("goes in circles", self.report.issues()[0].as_text())
		self.assertTrue(self.session.execute(DataDecl("A", SetLiteral([ONE]))))

	def test_comprehension_sees_session_constants(self):
		multiple = BinaryOp("==", BinaryOp("MOD", x, VarRef("m")), Const(0))
		self.assertTrue(self.session.run([
			Assign("m", None, Const(3)),
			DataDecl("Mult", ComprehensionSpec("x", TypeName("Int"), multiple)),
			Assign("six", TypeName("Mult"), Const(6)),
		]))
		self.assertFalse(self.session.execute(Assign("seven", TypeName("Mult"), Const(7))))

class Functions(unittest.TestCase):
	def setUp(self):
		self.report = Silence()
		self.session = Session(self.report)

	def test_declare_and_derive(self):
		self.assertTrue(self.session.run([
			FunctionDecl("f", [Param("x", TypeName("Real"))], TypeName("Real"), quadratic()),
			DerivativeDecl("g", "f"),
		]))
		self.assertEqual([], self.report.warnings())
		f, g = self.session.lookup("f"), self.session.lookup("g")
		self.assertEqual(Mapping(REAL, REAL), f.typeset)
		self.assertEqual(Mapping(REAL, REAL), g.typeset)
		self.assertEqual(Number(4), apply(g.value, [Number(3)]))
		self.assertEqual(Number(4), apply(f.value, [Number(3)]))

	def test_call_from_assignment(self):
		self.assertTrue(self.session.run([
			FunctionDecl("f", [Param("x", TypeName("Real"))], TypeName("Real"), quadratic()),
			Assign("y", TypeName("Whole"), call("f", Const(4))),
		]))
		self.assertEqual(Number(9), self.session.lookup("y").value)

	def test_codomain_checks(self):
		self.assertFalse(self.session.execute(FunctionDecl("h", [Param("n", TypeName("Int"))], TypeName("Str"), BinaryOp("+", n, ONE))))
		self.assertIn("nothing in common with Str", self.report.issues()[0].as_text())
		self.assertTrue(self.session.execute(FunctionDecl("k", [Param("n", TypeName("Int"))], TypeName("Nat"), BinaryOp("*", n, n))))
		self.assertEqual(1, len(self.report.warnings()))

	def test_one_fold_power_codomain_is_its_base(self):
		self.assertTrue(self.session.execute(FunctionDecl("f", [Param("n", TypeName("Int"))], PowerSpec(TypeName("Nat"), 1), n)))
		self.assertEqual(1, len(self.report.warnings()))
		self.assertTrue(self.session.execute(FunctionDecl("g", [Param("n", TypeName("Int"))], PowerSpec(TypeName("Int"), 1), n)))
		self.assertEqual(1, len(self.report.warnings()))
		self.assertTrue(self.report.ok())

	def test_inferred_codomain(self):
		self.session.execute(FunctionDecl("half", [Param("n", TypeName("Int"))], None, BinaryOp("/", n, TWO)))
		self.assertEqual(Mapping(INT, REAL), self.session.lookup("half").typeset)

	def test_needs_a_parameter(self):
		self.assertFalse(self.session.execute(FunctionDecl("c", [], None, ONE)))

	def test_several_parameters(self):
		a, b = VarRef("a"), VarRef("b")
		self.assertTrue(self.session.run([
			FunctionDecl("plus", [Param("a", TypeName("Int")), Param("b", None)], None, BinaryOp("+", a, b)),
			Assign("s", None, call("plus", TWO, Const(3))),
			DerivativeDecl("da", "plus", "a"),
		]))
		self.assertEqual(Number(5), self.session.lookup("s").value)
		self.assertEqual("(Int, Univ) -> Univ", self.session.lookup("plus").typeset.render())
		self.assertEqual(Mapping(self.session.lookup("plus").value.domain, COMPLEX), self.session.lookup("da").typeset)
		self.assertFalse(self.session.execute(DerivativeDecl("d", "plus")))
		self.assertFalse(self.session.execute(DerivativeDecl("d", "plus", "q")))
		self.assertFalse(self.session.execute(DerivativeDecl("d", "nonesuch")))

	def test_unsupported_derivative_is_reported(self):
		self.session.execute(FunctionDecl("m", [Param("n", TypeName("Int"))], None, BinaryOp("MOD", n, TWO)))
		self.assertFalse(self.session.execute(DerivativeDecl("dm", "m")))
		self.assertIn("MOD operator", self.report.issues()[0].as_text())

class Diagnostics(unittest.TestCase):
	def test_too_many_issues(self):
		report = Report(max_issues=2)
		report.issue("one")
		with self.assertRaises(TooManyIssues):
			report.issue("two")

	def test_no_limit(self):
		report = Report(max_issues=None)
		for i in range(10): report.issue(str(i))
		self.assertEqual(10, len(report.issues()))

	def test_assert_no_issues(self):
		report = Silence()
		report.assert_no_issues("fine")
		report.issue("trouble")
		with self.assertRaises(AssertionError):
			report.assert_no_issues("not fine")
		self.assertEqual(1, report.complain_to_console.call_count)

	def test_annotation_finds_the_culprit(self):
		ann = Annotation(Assign("b", TypeName("Small"), Const(5)), Const(5))
		self.assertEqual((12, 1), (ann.col, ann.width))
		missing = Annotation(Assign("b", TypeName("Small"), Const(5)), Const(6))
		self.assertEqual((0, len("b : Small = 5")), (missing.col, missing.width))

class Spaces(unittest.TestCase):
	def test_no_duplicates_and_no_shadowing(self):
		layer = Layer()
		layer.define("a", 1)
		with self.assertRaises(AlreadyExists):
			layer.define("a", 2)
		scope = primitive.root_sets.child()
		with self.assertRaises(AlreadyExists):
			scope.define("Int", None)
		scope.define("Mine", BOOL)
		self.assertIs(BOOL, scope.symbol("Mine"))
		self.assertIs(INT, scope.symbol("Int"))
		self.assertIsNone(primitive.root_sets.symbol("Mine"))
		scope.forget("Mine")
		self.assertNotIn("Mine", scope)

class PublicFace(unittest.TestCase):
	def test_four_queries(self):
		self.assertIs(True, core.contains(INT, Number(-4)))
		self.assertIs(core.Countability.UNCOUNTABLE, core.classify(UNIV))
		self.assertEqual([Number(0), Number(1)], core.enumerate(INT).take(2))
		self.assertEqual(ONE, core.differentiate(x, "x"))
		self.assertEqual("Int", core.resolve_type_annotation(TypeName("Int"), primitive.root_sets).render())

class CommandLine(unittest.TestCase):
	def run_cli(self, *argv):
		out = io.StringIO()
		with redirect_stdout(out), mock.patch.object(Report, "complain_to_console"):
			code = cmdline.run(cmdline.parser.parse_args(argv))
		return code, out.getvalue().split()

	def test_classify(self):
		self.assertEqual((None, ["Countable"]), self.run_cli("classify", "Int", "Bool"))
		self.assertEqual((None, ["Uncountable"]), self.run_cli("classify", "Int", "Real"))

	def test_enumerate(self):
		self.assertEqual((None, ["0", "1", "-1"]), self.run_cli("enumerate", "-n", "3", "Int"))
		self.assertEqual(1, self.run_cli("enumerate", "Real")[0])

	def test_contains(self):
		self.assertEqual((None, ["True"]), self.run_cli("contains", "--value", "3", "Nat"))
		self.assertEqual((1, ["False"]), self.run_cli("contains", "--value", "-3", "Nat"))
		self.assertEqual(1, self.run_cli("classify", "Nope")[0])

	def test_parse_value(self):
		self.assertEqual(Number(Fraction(3, 4)), cmdline.parse_value("3/4"))
		self.assertEqual(Number(1+2j), cmdline.parse_value("1+2j"))
		self.assertEqual(Str("abc"), cmdline.parse_value("'abc'"))
		self.assertEqual(Str("abc"), cmdline.parse_value("abc"))
		self.assertIsInstance(cmdline.parse_value("(1, 2)"), TupleValue)

if __name__ == '__main__':
	unittest.main()
