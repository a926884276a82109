"""
Run-time values: The things that belong to sets.
Each is tagged by its class, so that (for instance) the character 'a'
and the one-letter string "a" are different values in different sets.

Numbers keep an exact payload whenever they can:
int, or Fraction for non-integral rationals.
Floating point and complex payloads come from the approximate kernels.
"""
from fractions import Fraction
from numbers import Number as _PyNumber
from typing import Optional, Sequence, Callable
from .ontology import Phrase, Value

class Element(Value, Phrase):
	def phylum(self):
		""" Values in distinct phyla can never be equal, nor share a builtin kind. """
		raise NotImplementedError(type(self))

def _normalize(n):
	if isinstance(n, bool) or not isinstance(n, _PyNumber):
		raise TypeError(n)
	if isinstance(n, complex):
		if n.imag: return n
		n = n.real
	if isinstance(n, Fraction) and n.denominator == 1:
		return n.numerator
	return n

def _render_real(n) -> str:
	if isinstance(n, Fraction): return "%d/%d"%(n.numerator, n.denominator)
	if isinstance(n, float) and n.is_integer() and abs(n) < 1e16: return str(int(n))
	return repr(n)

class Number(Element):
	def __init__(self, n):
		self.n = _normalize(n)
		super().__init__(self.n)
	def render(self):
		n = self.n
		if isinstance(n, complex):
			sign = "-" if n.imag < 0 else "+"
			if n.real: return "%s%s%si"%(_render_real(n.real), sign, _render_real(abs(n.imag)))
			return "%si"%_render_real(n.imag)
		return _render_real(n)
	def phylum(self): return Number
	def is_complex(self): return isinstance(self.n, complex)
	def is_integral(self):
		n = self.n
		if isinstance(n, int): return True
		if isinstance(n, float): return n.is_integer()
		return False

class Str(Element):
	def __init__(self, text:str):
		assert isinstance(text, str), type(text)
		self.text = text
		super().__init__(text)
	def render(self): return '"%s"'%self.text.replace('"', '\\"')
	def phylum(self): return Str

class Char(Element):
	def __init__(self, text:str):
		assert isinstance(text, str) and len(text) == 1, text
		self.text = text
		super().__init__(text)
	def render(self): return repr(self.text)
	def phylum(self): return Char

class Bool(Element):
	def __init__(self, flag:bool):
		self.flag = bool(flag)
		super().__init__(self.flag)
	def render(self): return "true" if self.flag else "false"
	def phylum(self): return Bool

TRUE, FALSE = Bool(True), Bool(False)

class TupleValue(Element):
	def __init__(self, items:Sequence[Element]):
		self.items = tuple(items)
		assert all(isinstance(i, Element) for i in self.items), self.items
		super().__init__(self.items)
	def render(self): return "(%s)"%", ".join(i.render() for i in self.items)
	def phylum(self): return TupleValue, len(self.items)

class ListValue(Element):
	def __init__(self, items:Sequence[Element]):
		self.items = tuple(items)
		assert all(isinstance(i, Element) for i in self.items), self.items
		super().__init__(self.items)
	def render(self): return "[%s]"%", ".join(i.render() for i in self.items)
	def phylum(self): return ListValue

###############################################################################

class Function(Element):
	"""
	A run-time object that can be applied. The declared domain and codomain
	are set-expressions, or None where nothing was declared.
	Application lives in the evaluator, so values stay plain data.
	"""
	name: str
	domain: Optional["SetExpr"]
	codomain: Optional["SetExpr"]
	def arity(self) -> int: raise NotImplementedError(type(self))
	def phylum(self): return Function
	def render(self): return "<%s/%d>"%(self.name, self.arity())

class Lambda(Function):
	""" A user-defined function. These have identity, not structure. """
	def __init__(self, name:str, params:Sequence[str], body:"SymbolicExpr", domain=None, codomain=None, captures:dict=None):
		self.name = name
		self.params = tuple(params)
		self.body = body
		self.domain, self.codomain = domain, codomain
		self.captures = dict(captures or {})
		super().__init__(object())
	def arity(self) -> int: return len(self.params)
	def retyped(self, domain, codomain) -> "Lambda":
		return Lambda(self.name, self.params, self.body, domain, codomain, self.captures)

class Primitive(Function):
	""" A builtin function over numbers, backed by a Python callable. """
	def __init__(self, name:str, native:Callable, arity:int=1):
		self.name = name
		self.native = native
		self._arity = arity
		self.domain = self.codomain = None
		super().__init__(name)
	def arity(self) -> int: return self._arity

class Table(Function):
	"""
	A function given by its graph: Pairs of (argument, result).
	The default, if any, answers for arguments absent from the graph.
	Enumerating a set of mappings produces these.
	"""
	def __init__(self, pairs, domain, codomain, default:Element=None):
		self.name = "table"
		self.graph = dict(pairs)
		self.domain, self.codomain = domain, codomain
		self.default = default
		super().__init__(frozenset(self.graph.items()), domain, codomain, default)
	def arity(self) -> int: return 1
	def render(self):
		pairs = ["%s: %s"%(k.render(), v.render()) for k, v in self.graph.items()]
		if self.default is not None: pairs.append("_: %s"%self.default.render())
		return "{%s}"%", ".join(pairs)

###############################################################################

def from_python(x) -> Element:
	""" Plain Python values play the corresponding elements. """
	if isinstance(x, Element): return x
	if isinstance(x, bool): return Bool(x)
	if isinstance(x, _PyNumber): return Number(x)
	if isinstance(x, str): return Str(x)
	if isinstance(x, tuple): return TupleValue(map(from_python, x))
	if isinstance(x, list): return ListValue(map(from_python, x))
	raise TypeError("No element corresponds to %r"%(x,))

def to_python(e:Element):
	if isinstance(e, Number): return e.n
	if isinstance(e, (Str, Char)): return e.text
	if isinstance(e, Bool): return e.flag
	if isinstance(e, TupleValue): return tuple(map(to_python, e.items))
	if isinstance(e, ListValue): return list(map(to_python, e.items))
	return e
