"""
What set does an expression's value belong to, given the sets its variables belong to?

This is the inferred set a function declaration checks against its declared codomain.
The answer is an over-approximation: the value is certainly in it, if there is a value.
For arithmetic, it climbs the numeric ladder (Nat, Whole, Int, Real, Complex)
by the closure properties of each operator, because exact answers for Real and
Complex arithmetic are usually out of reach.
"""
from typing import Mapping as _Mapping, Optional
from boozetools.support.foundation import Visitor
from .values import Number, Str, Char, Bool, Function
from .sets import SetExpr, Builtin, UNIV, BOOL, STR, CHAR
from .symbolic import SymbolicExpr, Const, VarRef, BinaryOp, UnaryOp, Call, FuncRef, ARITHMETIC
from .primitive import NUMERIC_LADDER, BUILTIN_FUNCTIONS
from .membership import is_subset

_LOGICAL = frozenset(["==", "!=", "<", "<=", ">", ">=", "AND", "OR"])
_NATURAL = frozenset(["Nat", "Whole"])

def infer_set(expr:SymbolicExpr, env:_Mapping[str, SetExpr]=None, functions:_Mapping[str, Function]=None, point:SetExpr=None) -> SetExpr:
	"""
	env gives the set of each variable; functions gives user-defined functions
	by name, which contribute their declared codomains. A point-free function
	reference is applied to a member of the point set.
	"""
	return InferSet(env or {}, functions or {}, point).visit(expr)

def rung(s:SetExpr) -> Optional[str]:
	""" The narrowest step of the numeric ladder known to contain s, or None. """
	for kind in NUMERIC_LADDER:
		if is_subset(s, Builtin(kind)) is True: return kind

def _join(a:str, b:str) -> str:
	return max(a, b, key=NUMERIC_LADDER.index)

def _element_rung(n:Number) -> str:
	if n.is_complex(): return "Complex"
	if not n.is_integral(): return "Real"
	if n.n >= 1: return "Nat"
	return "Whole" if n.n == 0 else "Int"

def _arithmetic(glyph:str, a:str, b:str) -> str:
	if "Complex" in (a, b): return "Complex"
	top = _join(a, b)
	if glyph in ("+", "*"): return top
	if glyph == "-": return "Int" if top in _NATURAL else top
	if glyph == "/": return "Real"
	assert glyph == "^", glyph
	if b in _NATURAL: return a
	if b == "Int": return "Real"
	# Negative bases with fractional exponents leave the real line.
	return "Real" if a in _NATURAL else "Complex"

def _modulus(a:str, b:str) -> Optional[str]:
	if "Complex" in (a, b): return None
	return "Real" if "Real" in (a, b) else _join("Int", _join(a, b))

class InferSet(Visitor):
	def __init__(self, env:_Mapping[str, SetExpr], functions:_Mapping[str, Function], point:Optional[SetExpr]):
		self.env, self.functions, self.point = env, functions, point

	def _rung(self, e:SymbolicExpr) -> Optional[str]:
		return rung(self.visit(e))

	def visit_Const(self, e:Const):
		v = e.value
		if isinstance(v, Number): return Builtin(_element_rung(v))
		if isinstance(v, Str): return STR
		if isinstance(v, Char): return CHAR
		if isinstance(v, Bool): return BOOL
		return UNIV

	def visit_VarRef(self, e:VarRef):
		return self.env.get(e.name, UNIV)

	def visit_BinaryOp(self, e:BinaryOp):
		if e.glyph in _LOGICAL: return BOOL
		a, b = self._rung(e.lhs), self._rung(e.rhs)
		if a is None or b is None: return UNIV
		if e.glyph in ARITHMETIC: return Builtin(_arithmetic(e.glyph, a, b))
		result = _modulus(a, b)
		return UNIV if result is None else Builtin(result)

	def visit_UnaryOp(self, e:UnaryOp):
		if e.glyph == "NOT": return BOOL
		a = self._rung(e.arg)
		if a is None: return UNIV
		if e.glyph == "-" and a in _NATURAL: return Builtin("Int")
		return Builtin(a)

	def _builtin(self, name:str, arg:Optional[str]):
		result = BUILTIN_FUNCTIONS[name].result.get(arg)
		return UNIV if result is None else Builtin(result)

	def _declared(self, name:str) -> SetExpr:
		fn = self.functions.get(name)
		if isinstance(fn, Function) and fn.codomain is not None: return fn.codomain
		return UNIV

	def visit_Call(self, e:Call):
		if e.name in self.functions: return self._declared(e.name)
		if e.name in BUILTIN_FUNCTIONS and len(e.args) == 1:
			return self._builtin(e.name, self._rung(e.args[0]))
		return UNIV

	def visit_FuncRef(self, e:FuncRef):
		if e.name in self.functions: return self._declared(e.name)
		if e.name in BUILTIN_FUNCTIONS and self.point is not None:
			return self._builtin(e.name, rung(self.point))
		return UNIV
