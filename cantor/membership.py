"""
The membership oracle: Is x in S?

The answer is True, False, or UNKNOWN. The oracle never raises.
It says UNKNOWN in preference to guessing, so a False or a True from here
is always the truth. Whoever asks decides what to make of UNKNOWN.

Also here are the other questions that boil down to membership:
subset, disjointness, and equality of sets. They are sound but incomplete
in the same way: They may shrug, but they never lie.
"""
from boozetools.support.foundation import Visitor
from .ontology import UNKNOWN, CantorError, EvaluationError, either, both, negate
from .values import Element, Number, Str, Char, Bool, TupleValue, ListValue, Function
from .sets import (
	SetExpr, Builtin, Finite, Tuple, Power, ListOf, Mapping, Union, Intersection,
	Difference, Comprehension, NamedAlias, components, collapse, UNIV,
)
from .algebra import phylum
from .evaluator import evaluate, apply
from .primitive import NUMERIC_LADDER

# Finite sets at most this big may be checked one element at a time.
PROBE_LIMIT = 4096

_TAGGED = {"Str":Str, "Char":Char, "Bool":Bool}

def contains(s:SetExpr, x:Element):
	""" The membership oracle. """
	try: return Membership().visit(s, x)
	except (CantorError, RecursionError):
		return UNKNOWN

class Membership(Visitor):
	def __init__(self):
		self._in_progress = set()

	def visit_Builtin(self, s:Builtin, x:Element):
		kind = s.kind
		if kind == "Univ": return True
		if kind == "Empty": return False
		if kind in _TAGGED: return isinstance(x, _TAGGED[kind])
		if not isinstance(x, Number): return False
		if kind == "Complex": return True
		if x.is_complex(): return False
		if kind == "Real": return True
		if not x.is_integral(): return False
		if kind == "Int": return True
		if kind == "Whole": return x.n >= 0
		assert kind == "Nat", kind
		return x.n >= 1

	def visit_Finite(self, s:Finite, x:Element):
		return x in s.elements

	def _product(self, factors, x:Element):
		if len(factors) == 1: return self.visit(factors[0], x)
		if not isinstance(x, TupleValue) or len(x.items) != len(factors): return False
		return both(lambda f=f, i=i: self.visit(f, i) for f, i in zip(factors, x.items))

	def visit_Tuple(self, s:Tuple, x:Element):
		return self._product(s.components, x)

	def visit_Power(self, s:Power, x:Element):
		if s.n == 0: return False
		return self._product(components(s), x)

	def visit_ListOf(self, s:ListOf, x:Element):
		if not isinstance(x, ListValue): return False
		return both(lambda i=i: self.visit(s.element, i) for i in x.items)

	def visit_Mapping(self, s:Mapping, x:Element):
		if not isinstance(x, Function): return False
		if x.domain is not None and x.codomain is not None:
			return both([lambda: is_subset(x.domain, s.domain), lambda: is_subset(x.codomain, s.codomain)])
		if x.domain is None:
			return _probe(x, s.domain, s.codomain)
		return both([lambda: is_subset(x.domain, s.domain), lambda: _probe(x, x.domain, s.codomain)])

	def visit_Union(self, s:Union, x:Element):
		return either([lambda: self.visit(s.a, x), lambda: self.visit(s.b, x)])

	def visit_Intersection(self, s:Intersection, x:Element):
		return both([lambda: self.visit(s.a, x), lambda: self.visit(s.b, x)])

	def visit_Difference(self, s:Difference, x:Element):
		return both([lambda: self.visit(s.a, x), lambda: negate(self.visit(s.b, x))])

	def visit_Comprehension(self, s:Comprehension, x:Element):
		in_base = self.visit(s.base, x)
		if in_base is False: return False
		try: verdict = evaluate(s.predicate, {s.binder: x})
		except EvaluationError: return UNKNOWN
		if not isinstance(verdict, Bool): return UNKNOWN
		if not verdict.flag: return False
		return in_base

	def visit_NamedAlias(self, s:NamedAlias, x:Element):
		key = s, x
		if key in self._in_progress: return UNKNOWN
		self._in_progress.add(key)
		try: return self.visit(s.definition, x)
		finally: self._in_progress.discard(key)

def _small_finite(s:SetExpr):
	""" The elements of s, if s is finite, countable, and small enough to check one by one. """
	from .countability import census, classify, Countability
	size = census(s)
	if size.high <= PROBE_LIMIT and classify(s) is Countability.COUNTABLE:
		from .enumeration import enumerate_set
		return list(enumerate_set(s))

def _probe(fn:Function, domain:SetExpr, codomain:SetExpr):
	""" Check a function with no declared type by trying it at every point of a small domain. """
	points = _small_finite(domain)
	if points is None: return UNKNOWN
	def each():
		for p in points:
			try: result = apply(fn, [p])
			except EvaluationError: yield UNKNOWN
			else: yield contains(codomain, result)
	return both(each())

###############################################################################

def _nonempty(s:SetExpr) -> bool:
	from .countability import census
	return census(s).low >= 1

def _empty(s:SetExpr) -> bool:
	from .countability import census
	return census(s).high == 0

def _builtin_subset(a:str, b:str):
	if a == b or b == "Univ": return True
	if a in NUMERIC_LADDER and b in NUMERIC_LADDER:
		return NUMERIC_LADDER.index(a) <= NUMERIC_LADDER.index(b)
	return False

_PRODUCT = (Tuple, Power)

class _Relations:
	"""
	Subset and disjointness, sharing one set of assumptions.
	Recursive aliases are compared co-inductively: A pair of aliases met again
	while still being compared is assumed to be in the relation.
	"""
	def __init__(self):
		self._assumed = set()

	def subset(self, a:SetExpr, b:SetExpr):
		a, b = collapse(a), collapse(b)
		if a == b or b == UNIV: return True
		if isinstance(a, NamedAlias) or isinstance(b, NamedAlias):
			if (a, b) in self._assumed: return True
			self._assumed.add((a, b))
			return self.subset(_open(a), _open(b))
		if _empty(a): return True
		verdict = self._structural_subset(a, b)
		if verdict is UNKNOWN:
			verdict = self._generic_subset(a, b)
		return verdict

	def _structural_subset(self, a:SetExpr, b:SetExpr):
		if isinstance(a, Finite):
			return both(lambda e=e: contains(b, e) for e in a.elements)
		if isinstance(a, Union):
			return both([lambda: self.subset(a.a, b), lambda: self.subset(a.b, b)])
		if isinstance(b, Intersection):
			return both([lambda: self.subset(a, b.a), lambda: self.subset(a, b.b)])
		if isinstance(a, Intersection):
			if either([lambda: self.subset(a.a, b), lambda: self.subset(a.b, b)]) is True: return True
			return UNKNOWN
		if isinstance(a, Difference):
			return True if self.subset(a.a, b) is True else UNKNOWN
		if isinstance(a, Comprehension):
			return True if self.subset(a.base, b) is True else UNKNOWN
		if isinstance(b, Union):
			if either([lambda: self.subset(a, b.a), lambda: self.subset(a, b.b)]) is True: return True
			if both([lambda: self.disjoint(a, b.a), lambda: self.disjoint(a, b.b)]) is True and _nonempty(a): return False
			return UNKNOWN
		if isinstance(b, Difference):
			outer = self.subset(a, b.a)
			if outer is False: return False
			if outer is True and self.disjoint(a, b.b) is True: return True
			return UNKNOWN
		if isinstance(b, Comprehension):
			return False if self.subset(a, b.base) is False else UNKNOWN
		if isinstance(a, Builtin) and isinstance(b, Builtin):
			return _builtin_subset(a.kind, b.kind)
		if isinstance(a, _PRODUCT) and isinstance(b, _PRODUCT):
			left, right = components(a), components(b)
			if len(left) != len(right): return UNKNOWN
			verdict = both(lambda x=x, y=y: self.subset(x, y) for x, y in zip(left, right))
			return UNKNOWN if verdict is False and not _nonempty(a) else verdict
		if isinstance(a, ListOf) and isinstance(b, ListOf):
			return self.subset(a.element, b.element)
		if isinstance(a, Mapping) and isinstance(b, Mapping):
			return both([lambda: self.subset(a.domain, b.domain), lambda: self.subset(a.codomain, b.codomain)])
		return UNKNOWN

	def _generic_subset(self, a:SetExpr, b:SetExpr):
		from .countability import census
		if census(a).low > census(b).high: return False
		points = _small_finite(a)
		if points is not None:
			return both(lambda e=e: contains(b, e) for e in points)
		if self.disjoint(a, b) is True and _nonempty(a): return False
		return UNKNOWN

	def disjoint(self, a:SetExpr, b:SetExpr):
		a, b = collapse(a), collapse(b)
		if isinstance(a, NamedAlias) or isinstance(b, NamedAlias):
			key = "disjoint", a, b
			if key in self._assumed: return UNKNOWN
			self._assumed.add(key)
			return self.disjoint(_open(a), _open(b))
		if _empty(a) or _empty(b): return True
		pa, pb = phylum(a), phylum(b)
		if pa is not None and pb is not None and pa != pb: return True
		if isinstance(a, Finite):
			return both(lambda e=e: negate(contains(b, e)) for e in a.elements)
		if isinstance(b, Finite):
			return both(lambda e=e: negate(contains(a, e)) for e in b.elements)
		if isinstance(a, Union):
			return both([lambda: self.disjoint(a.a, b), lambda: self.disjoint(a.b, b)])
		if isinstance(b, Union):
			return both([lambda: self.disjoint(a, b.a), lambda: self.disjoint(a, b.b)])
		if isinstance(a, Builtin) and isinstance(b, Builtin):
			# Builtins of one phylum always overlap: Nat is inside every numeric kind.
			return False
		if _nonempty(a) and self.subset(a, b) is True: return False
		if _nonempty(b) and self.subset(b, a) is True: return False
		return UNKNOWN

def _open(s:SetExpr) -> SetExpr:
	return s.definition if isinstance(s, NamedAlias) else s

def is_subset(a:SetExpr, b:SetExpr):
	try: return _Relations().subset(a, b)
	except (CantorError, RecursionError): return UNKNOWN

def is_disjoint(a:SetExpr, b:SetExpr):
	try: return _Relations().disjoint(a, b)
	except (CantorError, RecursionError): return UNKNOWN

def same_set(a:SetExpr, b:SetExpr):
	""" Set equality, as far as it can be decided. """
	if a == b: return True
	return both([lambda: is_subset(a, b), lambda: is_subset(b, a)])
