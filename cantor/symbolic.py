"""
Symbolic expressions: The algebraic terms that appear as function bodies,
comprehension predicates, and the inputs and outputs of differentiation.

Trees are immutable. Anything that "changes" a tree builds a new one.

The smart constructors (add, sub, mul, ...) fold constants with exact
arithmetic and drop the obvious identities, so that differentiation does not
drown its answers in multiplications by one. That is the whole extent of
simplification here: there is no general computer-algebra system.
"""
from typing import Optional, Sequence, Mapping as _Mapping
from boozetools.support.foundation import Visitor
from .ontology import Phrase, Value, EvaluationError
from .values import Element, Number, from_python
from . import primitive

BINARY_GLYPHS = frozenset(["+", "-", "*", "/", "^", "MOD", "==", "!=", "<", "<=", ">", ">=", "AND", "OR"])
UNARY_GLYPHS = frozenset(["-", "CONJ", "NOT"])
ARITHMETIC = frozenset(["+", "-", "*", "/", "^"])

class SymbolicExpr(Value, Phrase):
	def render(self) -> str: return Render().visit(self)
	def __repr__(self): return "<%s>"%self.render()

class Const(SymbolicExpr):
	def __init__(self, value:Element):
		self.value = from_python(value)
		super().__init__(self.value)

class VarRef(SymbolicExpr):
	def __init__(self, name:str):
		assert isinstance(name, str) and name, name
		self.name = name
		super().__init__(name)

class BinaryOp(SymbolicExpr):
	def __init__(self, glyph:str, lhs:SymbolicExpr, rhs:SymbolicExpr):
		assert glyph in BINARY_GLYPHS, glyph
		assert isinstance(lhs, SymbolicExpr) and isinstance(rhs, SymbolicExpr), (lhs, rhs)
		self.glyph, self.lhs, self.rhs = glyph, lhs, rhs
		super().__init__(glyph, lhs, rhs)

class UnaryOp(SymbolicExpr):
	def __init__(self, glyph:str, arg:SymbolicExpr):
		assert glyph in UNARY_GLYPHS, glyph
		assert isinstance(arg, SymbolicExpr), arg
		self.glyph, self.arg = glyph, arg
		super().__init__(glyph, arg)

class Call(SymbolicExpr):
	def __init__(self, name:str, args:Sequence[SymbolicExpr]):
		self.name = name
		self.args = tuple(args)
		assert all(isinstance(a, SymbolicExpr) for a in self.args), self.args
		super().__init__(name, self.args)

class FuncRef(SymbolicExpr):
	"""
	A function by name, used point-free: In `f^2`, the f stands for f(x)
	where x is whatever the whole expression is a function of.
	"""
	def __init__(self, name:str):
		self.name = name
		super().__init__(name)

ZERO, ONE, TWO = Const(0), Const(1), Const(2)
MINUS_ONE = Const(-1)

###############################################################################

def _number(e:SymbolicExpr):
	if isinstance(e, Const) and isinstance(e.value, Number): return e.value

def _fold(fn, *args):
	try: return Const(fn(*args))
	except EvaluationError: return None

def add(a, b):
	x, y = _number(a), _number(b)
	if x is not None and y is not None: return _fold(primitive.num_add, x, y) or BinaryOp("+", a, b)
	if a == ZERO: return b
	if b == ZERO: return a
	return BinaryOp("+", a, b)

def sub(a, b):
	x, y = _number(a), _number(b)
	if x is not None and y is not None: return _fold(primitive.num_sub, x, y) or BinaryOp("-", a, b)
	if b == ZERO: return a
	if a == ZERO: return neg(b)
	if a == b: return ZERO
	return BinaryOp("-", a, b)

def mul(a, b):
	x, y = _number(a), _number(b)
	if x is not None and y is not None: return _fold(primitive.num_mul, x, y) or BinaryOp("*", a, b)
	if a == ZERO or b == ZERO: return ZERO
	if a == ONE: return b
	if b == ONE: return a
	if a == MINUS_ONE: return neg(b)
	if b == MINUS_ONE: return neg(a)
	return BinaryOp("*", a, b)

def div(a, b):
	x, y = _number(a), _number(b)
	if x is not None and y is not None: return _fold(primitive.num_div, x, y) or BinaryOp("/", a, b)
	if b == ONE: return a
	if a == ZERO and y is None: return ZERO
	return BinaryOp("/", a, b)

def power(a, b):
	x, y = _number(a), _number(b)
	if x is not None and y is not None: return _fold(primitive.num_pow, x, y) or BinaryOp("^", a, b)
	if b == ZERO: return ONE
	if b == ONE: return a
	if a == ONE: return ONE
	return BinaryOp("^", a, b)

def neg(a):
	x = _number(a)
	if x is not None: return Const(primitive.num_neg(x))
	if isinstance(a, UnaryOp) and a.glyph == "-": return a.arg
	return UnaryOp("-", a)

def conj(a): return UnaryOp("CONJ", a)

def call(name:str, *args): return Call(name, args)

###############################################################################

class _Mentions(Visitor):
	def __init__(self, name:str):
		self.name = name
	def visit_Const(self, e:Const): return False
	def visit_VarRef(self, e:VarRef): return e.name == self.name
	def visit_BinaryOp(self, e:BinaryOp): return self.visit(e.lhs) or self.visit(e.rhs)
	def visit_UnaryOp(self, e:UnaryOp): return self.visit(e.arg)
	def visit_Call(self, e:Call): return any(self.visit(a) for a in e.args)
	def visit_FuncRef(self, e:FuncRef): return True

def mentions(expr:SymbolicExpr, name:str) -> bool:
	"""
	Does the expression depend on the variable?
	A point-free function reference depends on whatever the argument is.
	"""
	return _Mentions(name).visit(expr)

class Substitute(Visitor):
	"""
	Replace variables by expressions, all at once.
	Given a point, a point-free function reference becomes a call at that point.
	"""
	def __init__(self, gamma:_Mapping[str, SymbolicExpr], point:Optional[SymbolicExpr]=None):
		self.gamma = gamma
		self.point = point
	def visit_Const(self, e:Const): return e
	def visit_VarRef(self, e:VarRef): return self.gamma.get(e.name, e)
	def visit_BinaryOp(self, e:BinaryOp): return BinaryOp(e.glyph, self.visit(e.lhs), self.visit(e.rhs))
	def visit_UnaryOp(self, e:UnaryOp): return UnaryOp(e.glyph, self.visit(e.arg))
	def visit_Call(self, e:Call): return Call(e.name, [self.visit(a) for a in e.args])
	def visit_FuncRef(self, e:FuncRef):
		return e if self.point is None else Call(e.name, [self.point])

def substitute(expr:SymbolicExpr, gamma:_Mapping[str, SymbolicExpr], point:Optional[SymbolicExpr]=None) -> SymbolicExpr:
	return Substitute(gamma, point).visit(expr)

###############################################################################

# Binding strength. Higher binds tighter.
PRECEDENCE = {
	"OR":1, "AND":2, "NOT":3,
	"==":4, "!=":4, "<":4, "<=":4, ">":4, ">=":4,
	"+":5, "-":5,
	"*":6, "/":6, "MOD":6,
	"NEG":7,
	"^":8,
}
_ATOM = 9
_LEFT_ONLY = frozenset(["-", "/", "MOD", "==", "!=", "<", "<=", ">", ">="])

class Render(Visitor):
	""" Return a string representation of the term, with no more brackets than it needs. """
	def _strength(self, e:SymbolicExpr) -> int:
		if isinstance(e, BinaryOp): return PRECEDENCE[e.glyph]
		if isinstance(e, UnaryOp):
			return PRECEDENCE["NOT"] if e.glyph == "NOT" else (_ATOM if e.glyph == "CONJ" else PRECEDENCE["NEG"])
		if isinstance(e, Const):
			text = e.value.render()
			if text.startswith("-"): return PRECEDENCE["NEG"]
			if "/" in text: return PRECEDENCE["/"]
			if "+" in text or "-" in text[1:]: return PRECEDENCE["+"]
		return _ATOM
	def _wrap(self, e:SymbolicExpr, need:int) -> str:
		text = self.visit(e)
		return "(%s)"%text if self._strength(e) < need else text
	def visit_Const(self, e:Const): return e.value.render()
	def visit_VarRef(self, e:VarRef): return e.name
	def visit_BinaryOp(self, e:BinaryOp):
		p = PRECEDENCE[e.glyph]
		if e.glyph == "^":  # Right-associative
			left, right = self._wrap(e.lhs, p+1), self._wrap(e.rhs, p)
		else:
			left, right = self._wrap(e.lhs, p), self._wrap(e.rhs, p+1 if e.glyph in _LEFT_ONLY else p)
		return "%s %s %s"%(left, e.glyph, right)
	def visit_UnaryOp(self, e:UnaryOp):
		if e.glyph == "CONJ": return "conj(%s)"%self.visit(e.arg)
		if e.glyph == "NOT": return "NOT %s"%self._wrap(e.arg, PRECEDENCE["NOT"])
		return "-%s"%self._wrap(e.arg, PRECEDENCE["NEG"]+1)
	def visit_Call(self, e:Call):
		return "%s(%s)"%(e.name, ", ".join(self.visit(a) for a in e.args))
	def visit_FuncRef(self, e:FuncRef): return e.name
