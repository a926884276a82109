"""
Constructing set-expressions: The public way to build them.
These check the structural preconditions and say so in terms a user can act on.

Also here:
	* Phylum analysis, which the oracle uses to prove sets disjoint.
	* The SetPool, which lets structurally-equal sets share one representative.
"""
from typing import Iterable
from boozetools.support.foundation import Visitor, EquivalenceClassifier
from .ontology import TypeConstructionError
from .values import Element, Number, Str, Char, Bool, TupleValue, ListValue, Function, from_python
from .sets import (
	SetExpr, Builtin, Finite, Tuple, Power, ListOf, Mapping,
	Union, Intersection, Difference, Comprehension, NamedAlias, UNIV,
)

def _must_be_set(*them):
	for s in them:
		if not isinstance(s, SetExpr):
			raise TypeConstructionError("Expected a set here, but got %s."%(s,), s if isinstance(s, Element) else None)

def union(a:SetExpr, b:SetExpr) -> SetExpr:
	_must_be_set(a, b)
	return Union(a, b)

def intersect(a:SetExpr, b:SetExpr) -> SetExpr:
	_must_be_set(a, b)
	return Intersection(a, b)

def difference(a:SetExpr, b:SetExpr) -> SetExpr:
	_must_be_set(a, b)
	return Difference(a, b)

def complement(a:SetExpr) -> SetExpr:
	""" Everything not in a. """
	return difference(UNIV, a)

def symmetric_difference(a:SetExpr, b:SetExpr) -> SetExpr:
	return union(difference(a, b), difference(b, a))

def power(base:SetExpr, n:int) -> SetExpr:
	_must_be_set(base)
	return Power(base, n)

def tuple_of(components:Iterable[SetExpr]) -> SetExpr:
	"""
	A product of the given sets. A product of one set is that set,
	just as Power(base, 1) is base.
	"""
	them = tuple(components)
	_must_be_set(*them)
	if len(them) == 1: return them[0]
	return Tuple(them)

def list_of(element:SetExpr) -> SetExpr:
	_must_be_set(element)
	return ListOf(element)

def mapping_of(domain:SetExpr, codomain:SetExpr) -> SetExpr:
	_must_be_set(domain, codomain)
	return Mapping(domain, codomain)

def comprehend(base:SetExpr, binder:str, predicate) -> SetExpr:
	_must_be_set(base)
	if not (isinstance(binder, str) and binder):
		raise TypeConstructionError("A set-comprehension needs a name for its elements.", base)
	return Comprehension(base, binder, predicate)

def finite(elements:Iterable) -> SetExpr:
	""" Plain Python values are welcome here too. """
	return Finite(map(from_python, elements))

###############################################################################

_NUMERIC = frozenset(["Whole", "Nat", "Int", "Real", "Complex"])
_TAGGED = {"Str":Str, "Char":Char, "Bool":Bool}

class _Phylum(Visitor):
	"""
	The phylum all members of a set share, if one can be seen.
	None means a mixture, or that nothing can be said.
	"""
	def __init__(self):
		self._seen = set()
	def visit_Builtin(self, s:Builtin):
		if s.kind in _NUMERIC: return Number
		return _TAGGED.get(s.kind)
	def visit_Finite(self, s:Finite):
		phyla = {e.phylum() for e in s.elements}
		return phyla.pop() if len(phyla) == 1 else None
	def visit_Tuple(self, s:Tuple):
		if len(s.components) == 1: return self.visit(s.components[0])
		return TupleValue, len(s.components)
	def visit_Power(self, s:Power):
		# Power(b, 1) is b, and Power(b, 0) has no members at all.
		if s.n == 1: return self.visit(s.base)
		if s.n == 0: return None
		return TupleValue, s.n
	def visit_ListOf(self, s:ListOf): return ListValue
	def visit_Mapping(self, s:Mapping): return Function
	def visit_Union(self, s:Union):
		p = self.visit(s.a)
		return p if p == self.visit(s.b) else None
	def visit_Intersection(self, s:Intersection):
		p = self.visit(s.a)
		return self.visit(s.b) if p is None else p
	def visit_Difference(self, s:Difference): return self.visit(s.a)
	def visit_Comprehension(self, s:Comprehension): return self.visit(s.base)
	def visit_NamedAlias(self, s:NamedAlias):
		if s in self._seen: return None
		self._seen.add(s)
		return self.visit(s.definition)

def phylum(s:SetExpr):
	return _Phylum().visit(s)

###############################################################################

class SetPool:
	"""
	Interning for set-expressions: structurally-equal sets come back as one
	shared representative. Owned by a session, not the process.
	"""
	def __init__(self):
		self._classifier = EquivalenceClassifier()

	def intern(self, s:SetExpr) -> SetExpr:
		return self._classifier.exemplars[self._classifier.classify(s)]

	def number(self, s:SetExpr) -> int:
		return self._classifier.classify(s)
