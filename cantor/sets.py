"""
The data model of the set/type engine: Every set is a type, and vice versa.

A SetExpr is an immutable tree over a closed family of variants.
Each of the core operations (membership, countability, enumeration,
and so forth) is a Visitor with one method per variant, so a new variant
would mean a new method in each of them. That is the intended cost.

Nothing here normalizes the algebra. Union(A, B) and Union(B, A) are
structurally distinct, but every query treats them alike.

Recursive definitions go through NamedAlias, which refers to its body
by index into a DefinitionTable rather than embedding it.
That indirection is what breaks the cycles.
"""
from typing import Iterable, Optional, Sequence
from boozetools.support.foundation import Visitor
from .ontology import Phrase, Value, TypeConstructionError
from .values import Element
from .space import Layer, AlreadyExists

class SetExpr(Value, Phrase):
	def render(self) -> str: return Render().visit(self)
	def __repr__(self): return "<%s>"%self.render()

KINDS = ("Whole", "Nat", "Int", "Real", "Complex", "Str", "Char", "Bool", "Univ", "Empty")

class Builtin(SetExpr):
	def __init__(self, kind:str):
		if kind not in KINDS: raise TypeConstructionError("There is no builtin set called %r."%kind)
		self.kind = kind
		super().__init__(kind)

WHOLE, NAT, INT, REAL, COMPLEX, STR, CHAR, BOOL, UNIV, EMPTY = map(Builtin, KINDS)

class Finite(SetExpr):
	""" An explicit set of elements. Order is kept for enumeration; equality ignores it. """
	def __init__(self, elements:Iterable[Element]):
		self.elements = tuple(dict.fromkeys(elements))
		assert all(isinstance(e, Element) for e in self.elements), self.elements
		super().__init__(frozenset(self.elements))

class Tuple(SetExpr):
	def __init__(self, components:Sequence[SetExpr]):
		self.components = tuple(components)
		if not self.components:
			raise TypeConstructionError("A tuple-set needs components. The empty product is spelled Power(_, 0).")
		assert all(isinstance(c, SetExpr) for c in self.components), self.components
		super().__init__(self.components)

class Power(SetExpr):
	""" Power(base, n) is the n-fold tuple of base. """
	def __init__(self, base:SetExpr, n:int):
		if isinstance(n, bool) or not isinstance(n, int):
			raise TypeConstructionError("The exponent of a tuple-power must be an integer, not %r."%(n,), base)
		if n < 0:
			raise TypeConstructionError("The exponent of a tuple-power cannot be negative.", base)
		assert isinstance(base, SetExpr), base
		self.base, self.n = base, n
		super().__init__(base, n)

class ListOf(SetExpr):
	def __init__(self, element:SetExpr):
		assert isinstance(element, SetExpr), element
		self.element = element
		super().__init__(element)

class Mapping(SetExpr):
	""" The set of functions from domain to codomain. """
	def __init__(self, domain:SetExpr, codomain:SetExpr):
		assert isinstance(domain, SetExpr) and isinstance(codomain, SetExpr)
		self.domain, self.codomain = domain, codomain
		super().__init__(domain, codomain)

class _Binary(SetExpr):
	glyph: str
	def __init__(self, a:SetExpr, b:SetExpr):
		assert isinstance(a, SetExpr) and isinstance(b, SetExpr)
		self.a, self.b = a, b
		super().__init__(a, b)

class Union(_Binary): glyph = "|"
class Intersection(_Binary): glyph = "&"
class Difference(_Binary): glyph = "\\"

class Comprehension(SetExpr):
	""" Those elements of base which satisfy the predicate, with the binder standing for the element. """
	def __init__(self, base:SetExpr, binder:str, predicate:"SymbolicExpr"):
		assert isinstance(base, SetExpr) and isinstance(binder, str)
		self.base, self.binder, self.predicate = base, binder, predicate
		super().__init__(base, binder, predicate)

class NamedAlias(SetExpr):
	"""
	A name bound by a `data` declaration. It is transparent to every query,
	but the definition is fetched from the table only on demand.
	"""
	def __init__(self, name:str, table:"DefinitionTable", index:int):
		self.name, self.table, self.index = name, table, index
		super().__init__(name, table, index)
	@property
	def definition(self) -> SetExpr:
		return self.table.definition(self.index)

def components(s:SetExpr) -> tuple[SetExpr, ...]:
	""" The factors of a product, with Power spelled out as a Tuple would be. """
	if isinstance(s, Tuple): return s.components
	if isinstance(s, Power): return (s.base,) * s.n
	raise TypeError(s)

def collapse(s:SetExpr) -> SetExpr:
	""" Spell a degenerate product as what it denotes: Power(b, 1) is b, and Power(b, 0) is Empty. """
	if isinstance(s, Power):
		if s.n == 0: return EMPTY
		if s.n == 1: return s.base
	if isinstance(s, Tuple) and len(s.components) == 1: return s.components[0]
	return s

def unalias(s:SetExpr) -> SetExpr:
	seen = set()
	while isinstance(s, NamedAlias):
		if s in seen:
			raise TypeConstructionError("The definition of %s goes in circles."%s.name, s)
		seen.add(s)
		s = s.definition
	return s

###############################################################################

class DefinitionTable:
	"""
	Where NamedAlias finds its body. Names get declared first, so that a body
	may refer to its own name, and only then defined.
	The table belongs to whoever owns the scope (a session, typically).
	"""
	def __init__(self):
		self._names = Layer()
		self._bodies : list[Optional[SetExpr]] = []

	def declare(self, name:str) -> NamedAlias:
		alias = NamedAlias(name, self, len(self._bodies))
		try: self._names.define(name, alias)
		except AlreadyExists:
			raise TypeConstructionError("The name %s is defined already."%name, alias) from None
		self._bodies.append(None)
		return alias

	def define(self, alias:NamedAlias, body:SetExpr):
		assert alias.table is self and self._bodies[alias.index] is None
		assert isinstance(body, SetExpr), body
		self._bodies[alias.index] = body

	def retract(self, alias:NamedAlias):
		""" Take back a declaration which turned out to be bogus. """
		self._names.forget(alias.name)
		self._bodies[alias.index] = None

	def lookup(self, name:str) -> Optional[NamedAlias]:
		return self._names.symbol(name)

	def definition(self, index:int) -> SetExpr:
		body = self._bodies[index]
		if body is None:
			raise TypeConstructionError("A set-name is used before it has a definition.")
		return body

	def each_alias(self) -> Iterable[NamedAlias]:
		return self._names.each_symbol()

###############################################################################

class Render(Visitor):
	""" Return a string representation of the set. """
	def _sub(self, s:SetExpr) -> str:
		text = self.visit(s)
		return "(%s)"%text if isinstance(s, (_Binary, Mapping)) else text
	def visit_Builtin(self, s:Builtin): return s.kind
	def visit_Finite(self, s:Finite):
		return "{%s}"%", ".join(e.render() for e in s.elements)
	def visit_Tuple(self, s:Tuple):
		return "(%s)"%", ".join(self.visit(c) for c in s.components)
	def visit_Power(self, s:Power):
		return "%s^%d"%(self._sub(s.base), s.n)
	def visit_ListOf(self, s:ListOf):
		return "[%s]"%self.visit(s.element)
	def visit_Mapping(self, s:Mapping):
		return "%s -> %s"%(self._sub(s.domain), self.visit(s.codomain))
	def _binary(self, s:_Binary):
		return "%s %s %s"%(self._sub(s.a), s.glyph, self._sub(s.b))
	visit_Union = visit_Intersection = visit_Difference = _binary
	def visit_Comprehension(self, s:Comprehension):
		return "{%s in %s : %s}"%(s.binder, self.visit(s.base), s.predicate.render())
	def visit_NamedAlias(self, s:NamedAlias): return s.name
