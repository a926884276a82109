"""
Symbolic differentiation, by the rules everybody learns in school.

Only the structure of the expression matters here. Nothing gets evaluated,
and the answer is a new tree built with the folding constructors, which keep
the multiplications by one and additions of zero out of it.

A point-free function reference like `f` in `f^2` stands for f(x),
where x is the variable of differentiation, so the chain rule applies to it
just as it would to a call.
"""
from typing import Mapping as _Mapping, Optional
from boozetools.support.foundation import Visitor
from .ontology import UnsupportedDerivativeError
from .values import Function, Lambda
from .symbolic import (
	SymbolicExpr, Const, VarRef, BinaryOp, UnaryOp, Call, FuncRef,
	ZERO, ONE, TWO, add, sub, mul, div, power, neg, conj, call, mentions, substitute,
)
from .primitive import BUILTIN_FUNCTIONS

def _inverse_sqrt_of_one_minus_square(u):
	return div(ONE, call("sqrt", sub(ONE, power(u, TWO))))

# Each maps the inner expression u to the outer derivative f'(u).
# The chain rule supplies the factor of u'.
DERIVATIVES = {
	"sin": lambda u: call("cos", u),
	"cos": lambda u: neg(call("sin", u)),
	"tan": lambda u: div(ONE, power(call("cos", u), TWO)),
	"exp": lambda u: call("exp", u),
	"ln": lambda u: div(ONE, u),
	"log": lambda u: div(ONE, u),
	"sqrt": lambda u: div(ONE, mul(TWO, call("sqrt", u))),
	"asin": _inverse_sqrt_of_one_minus_square,
	"acos": lambda u: neg(_inverse_sqrt_of_one_minus_square(u)),
	"atan": lambda u: div(ONE, add(ONE, power(u, TWO))),
	"sinh": lambda u: call("cosh", u),
	"cosh": lambda u: call("sinh", u),
	"tanh": lambda u: sub(ONE, power(call("tanh", u), TWO)),
}

def differentiate(expr:SymbolicExpr, wrt:str, functions:Optional[_Mapping[str, Function]]=None) -> SymbolicExpr:
	"""
	The derivative of expr with respect to the variable named wrt.
	Where `functions` supplies a user-defined function by name, calls to it
	get differentiated through its body. Other unknown functions come out
	in Lagrange's notation: The derivative of f is f'.
	"""
	return Derivative(wrt, functions or {}).visit(expr)

class Derivative(Visitor):
	def __init__(self, wrt:str, functions:_Mapping[str, Function]):
		self.wrt = wrt
		self.functions = functions
		self._inlining = set()

	def visit_Const(self, e:Const): return ZERO

	def visit_VarRef(self, e:VarRef): return ONE if e.name == self.wrt else ZERO

	def visit_BinaryOp(self, e:BinaryOp):
		u, v = e.lhs, e.rhs
		if e.glyph == "+": return add(self.visit(u), self.visit(v))
		if e.glyph == "-": return sub(self.visit(u), self.visit(v))
		if e.glyph == "*":
			return add(mul(self.visit(u), v), mul(u, self.visit(v)))
		if e.glyph == "/":
			top = sub(mul(self.visit(u), v), mul(u, self.visit(v)))
			return div(top, power(v, TWO))
		if e.glyph == "^": return self._power(u, v)
		raise UnsupportedDerivativeError("There is no derivative of the %s operator."%e.glyph, e)

	def _power(self, u:SymbolicExpr, v:SymbolicExpr):
		if not mentions(v, self.wrt):
			return mul(mul(v, power(u, sub(v, ONE))), self.visit(u))
		if not mentions(u, self.wrt):
			return mul(mul(power(u, v), call("ln", u)), self.visit(v))
		# Logarithmic differentiation: (u^v)' = u^v * (v' ln u + v u' / u)
		inner = add(mul(self.visit(v), call("ln", u)), div(mul(v, self.visit(u)), u))
		return mul(power(u, v), inner)

	def visit_UnaryOp(self, e:UnaryOp):
		if e.glyph == "-": return neg(self.visit(e.arg))
		if e.glyph == "CONJ": return conj(self.visit(e.arg))
		raise UnsupportedDerivativeError("There is no derivative of the %s operator."%e.glyph, e)

	def visit_Call(self, e:Call):
		fn = self.functions.get(e.name)
		if isinstance(fn, Lambda) and len(e.args) == fn.arity():
			return self._inline(fn, e.args, e)
		if not any(mentions(a, self.wrt) for a in e.args): return ZERO
		if e.name in DERIVATIVES and len(e.args) == 1:
			u = e.args[0]
			return mul(DERIVATIVES[e.name](u), self.visit(u))
		if e.name in BUILTIN_FUNCTIONS or len(e.args) != 1:
			raise UnsupportedDerivativeError("There is no rule for differentiating %s."%e.name, e)
		u = e.args[0]
		return mul(call(e.name+"'", u), self.visit(u))

	def visit_FuncRef(self, e:FuncRef):
		fn = self.functions.get(e.name)
		x = VarRef(self.wrt)
		if isinstance(fn, Lambda) and fn.arity() == 1:
			return self._inline(fn, [x], e)
		if e.name in DERIVATIVES: return DERIVATIVES[e.name](x)
		if e.name in BUILTIN_FUNCTIONS:
			raise UnsupportedDerivativeError("There is no rule for differentiating %s."%e.name, e)
		return FuncRef(e.name+"'")

	def _inline(self, fn:Lambda, args, culprit:SymbolicExpr):
		if fn.name in self._inlining:
			raise UnsupportedDerivativeError("Cannot differentiate through the recursive function %s."%fn.name, culprit)
		self._inlining.add(fn.name)
		point = args[0] if len(args) == 1 else None
		try: return self.visit(substitute(fn.body, dict(zip(fn.params, args)), point))
		finally: self._inlining.discard(fn.name)
