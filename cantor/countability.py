"""
Countability: Can the elements of a set be listed one after another,
such that each turns up at some finite position?

The classifier composes a fixed table of rules bottom-up.
It never raises. When the table cannot decide, it says so.

The census is here too. It bounds how many elements a set has,
which is where facts like "finite" and "has at least two elements" come from.
"""
import math
from enum import Enum
from typing import NamedTuple
from boozetools.support.foundation import Visitor
from .ontology import CantorError
from .sets import (
	SetExpr, Builtin, Finite, Tuple, Power, ListOf, Mapping, Union, Intersection,
	Difference, Comprehension, NamedAlias,
)

class Countability(Enum):
	COUNTABLE = "Countable"
	UNCOUNTABLE = "Uncountable"
	UNKNOWN = "Unknown"

COUNTABLE, UNCOUNTABLE, UNKNOWN = Countability

###############################################################################

# Finite counts beyond this are kept at this. Both bounds stay sound for the
# comparisons anyone makes, and nobody has to compute 2**(2**64).
_BIG = 2**64

def _saturate(n):
	return n if n == math.inf or n <= _BIG else _BIG

def _add(a, b): return _saturate(a + b)

def _mul(a, b):
	if a == 0 or b == 0: return 0
	return _saturate(a * b)

def _exp(base, n):
	""" base ** n, for counts. """
	if n == 0: return 1
	if base in (0, 1): return base
	if math.inf in (base, n): return math.inf
	if n * math.log2(base) > 64: return _BIG
	return base ** n

class Size(NamedTuple):
	low: float
	high: float
	def is_finite(self) -> bool: return self.high < math.inf
	def is_infinite(self) -> bool: return self.low == math.inf

_ANY = Size(0, math.inf)
_INFINITE = Size(math.inf, math.inf)

_BUILTIN_SIZE = {
	"Empty": Size(0, 0),
	"Bool": Size(2, 2),
	"Char": Size(0x110000, 0x110000),
}

class Census(Visitor):
	def __init__(self):
		self._in_progress = set()

	def visit_Builtin(self, s:Builtin):
		return _BUILTIN_SIZE.get(s.kind, _INFINITE)

	def visit_Finite(self, s:Finite):
		n = len(s.elements)
		return Size(n, n)

	def visit_Tuple(self, s:Tuple):
		low = high = 1
		for c in s.components:
			size = self.visit(c)
			low, high = _mul(low, size.low), _mul(high, size.high)
		return Size(low, high)

	def visit_Power(self, s:Power):
		size = self.visit(s.base)
		return Size(_exp(size.low, s.n), _exp(size.high, s.n))

	def visit_ListOf(self, s:ListOf):
		size = self.visit(s.element)
		if size.high == 0: return Size(1, 1)
		return _INFINITE if size.low >= 1 else Size(1, math.inf)

	def visit_Mapping(self, s:Mapping):
		d, r = self.visit(s.domain), self.visit(s.codomain)
		if d.high == 0: return Size(1, 1)
		if r.high == 0: return Size(0, 0) if d.low >= 1 else Size(0, 1)
		low = _exp(r.low, d.low) if r.low >= 1 else 0
		return Size(low, _exp(r.high, d.high))

	def visit_Union(self, s:Union):
		a, b = self.visit(s.a), self.visit(s.b)
		return Size(max(a.low, b.low), _add(a.high, b.high))

	def visit_Intersection(self, s:Intersection):
		return Size(0, min(self.visit(s.a).high, self.visit(s.b).high))

	def visit_Difference(self, s:Difference):
		a, b = self.visit(s.a), self.visit(s.b)
		low = a.low - b.high if b.is_finite() else 0
		return Size(max(0, low), a.high)

	def visit_Comprehension(self, s:Comprehension):
		return Size(0, self.visit(s.base).high)

	def visit_NamedAlias(self, s:NamedAlias):
		if s in self._in_progress: return _ANY
		self._in_progress.add(s)
		try: return self.visit(s.definition)
		finally: self._in_progress.discard(s)

def census(s:SetExpr) -> Size:
	""" Bounds on the number of elements. Where nothing can be said, (0, inf). """
	try: return Census().visit(s)
	except (CantorError, RecursionError): return _ANY

###############################################################################

_COUNTABLE_KINDS = frozenset(["Whole", "Nat", "Int", "Str", "Char", "Bool", "Empty"])

class Classify(Visitor):
	def __init__(self):
		self._in_progress = set()

	def visit_Builtin(self, s:Builtin):
		return COUNTABLE if s.kind in _COUNTABLE_KINDS else UNCOUNTABLE

	def visit_Finite(self, s:Finite): return COUNTABLE

	def _product(self, factors):
		sizes = [census(f) for f in factors]
		if any(size.high == 0 for size in sizes): return COUNTABLE
		verdicts = [self.visit(f) for f in factors]
		if all(v is COUNTABLE for v in verdicts): return COUNTABLE
		if UNCOUNTABLE in verdicts and all(size.low >= 1 for size in sizes): return UNCOUNTABLE
		return UNKNOWN

	def visit_Tuple(self, s:Tuple): return self._product(s.components)

	def visit_Power(self, s:Power):
		if s.n == 0: return COUNTABLE
		return self._product([s.base])

	def visit_ListOf(self, s:ListOf):
		if census(s.element).high == 0: return COUNTABLE
		return self.visit(s.element)

	def visit_Mapping(self, s:Mapping):
		d, r = census(s.domain), census(s.codomain)
		if d.high == 0 or r.high <= 1: return COUNTABLE
		inner, outer = self.visit(s.domain), self.visit(s.codomain)
		if d.is_finite():
			if outer is COUNTABLE: return COUNTABLE
			if outer is UNCOUNTABLE and d.low >= 1: return UNCOUNTABLE
			return UNKNOWN
		if r.low >= 2:
			# Cantor's diagonal argument, as for Int -> Bool.
			if d.is_infinite() or inner is UNCOUNTABLE: return UNCOUNTABLE
		return UNKNOWN

	def visit_Union(self, s:Union):
		a, b = self.visit(s.a), self.visit(s.b)
		if a is COUNTABLE and b is COUNTABLE: return COUNTABLE
		if UNCOUNTABLE in (a, b): return UNCOUNTABLE
		return UNKNOWN

	def visit_Intersection(self, s:Intersection):
		from .membership import is_subset
		a, b = self.visit(s.a), self.visit(s.b)
		# A subset of a countable set is countable.
		if COUNTABLE in (a, b): return COUNTABLE
		if census(s.a).high == 0 or census(s.b).high == 0: return COUNTABLE
		if is_subset(s.a, s.b) is True: return a
		if is_subset(s.b, s.a) is True: return b
		return UNKNOWN

	def visit_Difference(self, s:Difference):
		from .membership import is_subset
		a = self.visit(s.a)
		if a is COUNTABLE: return COUNTABLE
		if is_subset(s.a, s.b) is True: return COUNTABLE
		if a is UNCOUNTABLE and self.visit(s.b) is COUNTABLE: return UNCOUNTABLE
		return UNKNOWN

	def visit_Comprehension(self, s:Comprehension):
		# Some subsets of an uncountable set are countable, and the predicate is opaque.
		return COUNTABLE if self.visit(s.base) is COUNTABLE else UNKNOWN

	def visit_NamedAlias(self, s:NamedAlias):
		# A recursive definition denotes its least fixed point, which is built
		# up in countably many finite steps from whatever else it involves.
		if s in self._in_progress: return COUNTABLE
		self._in_progress.add(s)
		try: return self.visit(s.definition)
		finally: self._in_progress.discard(s)

def classify(s:SetExpr) -> Countability:
	try: return Classify().visit(s)
	except (CantorError, RecursionError): return UNKNOWN
