"""
Enumeration: Listing the elements of a countable set, lazily.

The order is deterministic, but nothing promises any particular order.
What is promised: Every element of the set turns up at some finite position,
and nothing turns up that is not in the set.

Products walk diagonals of index vectors with a common sum, as in Cantor's
pairing, however many factors there are. Lists go by diagonals over
(length, index) pairs. Unions take turns.
Filtered sets (comprehension, difference, intersection) walk some other
enumeration and keep what passes. A sparse filter may make for long gaps.

An Enumeration may be iterated as often as you like. Each time starts over.

Internally, a filter that turns an element away yields a GAP in its place.
That way, whatever takes turns among several enumerations never waits on
a sparse one for long. The gaps get dropped on the way out.
"""
import itertools
from typing import Callable, Iterable, Iterator
from boozetools.support.foundation import Visitor
from .ontology import NotCountableError, EvaluationError
from .values import Element, Number, Str, Char, TRUE, FALSE, TupleValue, ListValue, Table
from .sets import (
	SetExpr, Builtin, Finite, Tuple, Power, ListOf, Mapping, Union, Intersection,
	Difference, Comprehension, NamedAlias,
)
from .countability import classify, census, Countability
from .membership import contains
from .evaluator import evaluate

GAP = object()

def _solid(items):
	return (x for x in items if x is not GAP)

class Enumeration:
	""" A restartable lazy sequence of the elements of a set. """
	def __init__(self, s:SetExpr):
		self.s = s
	def __iter__(self) -> Iterator[Element]:
		return _solid(_Enumerate().visit(self.s))
	def take(self, n:int) -> list[Element]:
		return list(itertools.islice(self, n))
	def __repr__(self): return "<Enumeration of %s>"%self.s.render()

def enumerate_set(s:SetExpr) -> Enumeration:
	if classify(s) is not Countability.COUNTABLE:
		raise NotCountableError("%s is not known to be countable, so it cannot be enumerated."%s.render(), s)
	return Enumeration(s)

###############################################################################

class Stream:
	"""
	Random access into a lazy sequence, remembering whatever has been pulled.
	The source is not consulted until the first pull.

	Each call to `has` pulls at most once from the source, so a False from
	`has` means only "not yet", unless `beyond` says the source has run dry.
	A stream asked for more while it is busy producing its next element
	(which a recursive set may do) also answers "not yet".
	"""
	def __init__(self, source:Callable[[], Iterable[Element]]):
		self._source = source
		self._iterator = None
		self._cache = []
		self._busy = False
		self.length = None  # Known once the source runs dry.

	def has(self, index:int) -> bool:
		if index < len(self._cache): return True
		if self.length is not None or self._busy: return False
		self._busy = True
		try:
			if self._iterator is None: self._iterator = iter(self._source())
			item = next(self._iterator)
		except StopIteration:
			self.length = len(self._cache)
			return False
		finally:
			self._busy = False
		if item is not GAP: self._cache.append(item)
		return index < len(self._cache)

	def beyond(self, index:int) -> bool:
		return self.length is not None and index >= self.length

	def __getitem__(self, index:int): return self._cache[index]

	def __iter__(self):
		for index in itertools.count():
			while not self.has(index):
				if self.beyond(index): return
				yield GAP
			yield self._cache[index]

def _lift(fn, items):
	return (x if x is GAP else fn(x) for x in items)

def _index_vectors(total:int, caps:list[int]) -> Iterator[tuple]:
	"""
	Every vector of indices summing to total, with each index at most its cap,
	in lexicographic order. A stack stands in for recursion, since products may be wide.
	"""
	last = len(caps) - 1
	room = [0] * (len(caps) + 1)  # The most that positions k and after can absorb.
	for k in reversed(range(len(caps))):
		room[k] = room[k+1] + caps[k]
	stack = [(0, total, ())]
	while stack:
		k, left, prefix = stack.pop()
		if k == last:
			if left <= caps[k]: yield prefix + (left,)
			continue
		for i in reversed(range(min(left, caps[k]) + 1)):
			if left - i <= room[k+1]: stack.append((k+1, left-i, prefix + (i,)))

def _tuples(streams:list[Stream]) -> Iterator[tuple]:
	"""
	Walk the diagonals of an n-ary product: Diagonal d holds the index vectors
	summing to d. Any stream may turn out to be finite.
	A vector that is not ready on its turn waits to be tried again.
	"""
	waiting = []
	for d in itertools.count():
		if any(s.length == 0 for s in streams): return
		lengths = [s.length for s in streams]
		if None not in lengths and d > sum(lengths) - len(lengths) and not waiting: return
		caps = [d if n is None else min(d, n - 1) for n in lengths]
		still = []
		for vector in itertools.chain(waiting, _index_vectors(d, caps)):
			if all(s.has(i) for s, i in zip(streams, vector)):
				yield tuple(s[i] for s, i in zip(streams, vector))
			elif not any(s.beyond(i) for s, i in zip(streams, vector)):
				still.append(vector)
		waiting = still
		yield GAP

def _sequences(element:Stream) -> Iterator[tuple]:
	""" Every finite sequence over the element stream. Row n holds the n-tuples. """
	yield ()
	rows = [None]
	waiting = []
	for d in itertools.count():
		element.has(0)
		if element.length == 0: return
		rows.append(Stream(lambda n=d+1: _tuples([element] * n)))
		still = []
		for n, k in waiting + [(n, d+1-n) for n in range(1, d+2)]:
			if rows[n].has(k): yield rows[n][k]
			elif not rows[n].beyond(k): still.append((n, k))
		waiting = still
		yield GAP

def _round_robin(*iterators):
	live = list(iterators)
	while live:
		for it in list(live):
			try: yield next(it)
			except StopIteration: live.remove(it)

def _zigzag():
	yield Number(0)
	for n in itertools.count(1):
		yield Number(n)
		yield Number(-n)

def _code_points():
	return map(Char, map(chr, range(0x110000)))

BUILTIN_SOURCES = {
	"Whole": lambda: map(Number, itertools.count(0)),
	"Nat": lambda: map(Number, itertools.count(1)),
	"Int": _zigzag,
	"Bool": lambda: iter((FALSE, TRUE)),
	"Char": _code_points,
	"Empty": lambda: iter(()),
}

class _Enumerate(Visitor):
	"""
	Each visit returns a fresh iterator. One instance serves one pass over
	the outermost set, so that a recursive alias gets one shared stream.
	"""
	def __init__(self):
		self._streams = {}

	def _sub(self, s:SetExpr) -> Iterator[Element]:
		if classify(s) is Countability.COUNTABLE: return self.visit(s)
		if census(s).high == 0: return iter(())
		raise NotCountableError("%s is not known to be countable, so it cannot be enumerated."%s.render(), s)

	def _stream(self, s:SetExpr) -> Stream:
		return Stream(lambda: self._sub(s))

	def visit_Builtin(self, s:Builtin):
		if s.kind == "Str":
			chars = Stream(_code_points)
			return _lift(lambda seq: Str("".join(c.text for c in seq)), _sequences(chars))
		try: source = BUILTIN_SOURCES[s.kind]
		except KeyError: raise NotCountableError("%s is uncountable."%s.kind, s) from None
		return source()

	def visit_Finite(self, s:Finite): return iter(s.elements)

	def _product(self, streams:list[Stream]):
		return _lift(TupleValue, _tuples(streams))

	def visit_Tuple(self, s:Tuple):
		if any(census(c).high == 0 for c in s.components): return iter(())
		if len(s.components) == 1: return self._sub(s.components[0])
		return self._product([self._stream(c) for c in s.components])

	def visit_Power(self, s:Power):
		if s.n == 0 or census(s.base).high == 0: return iter(())
		if s.n == 1: return self._sub(s.base)
		return self._product([self._stream(s.base)] * s.n)

	def visit_ListOf(self, s:ListOf):
		return _lift(ListValue, _sequences(self._stream(s.element)))

	def visit_Mapping(self, s:Mapping):
		d = census(s.domain)
		if d.is_finite():
			points = list(_solid(self._sub(s.domain)))
			if not points: return iter([Table((), s.domain, s.codomain)])
			images = self._stream(s.codomain)
			return _lift(lambda row: Table(zip(points, row), s.domain, s.codomain), _tuples([images] * len(points)))
		# Otherwise the codomain has at most one element: Each one makes a constant function.
		return _lift(lambda v: Table((), s.domain, s.codomain, default=v), self._sub(s.codomain))

	def visit_Union(self, s:Union):
		# What the left side will produce anyway, the right side need not repeat.
		right = (GAP if x is GAP or contains(s.a, x) is True else x for x in self._sub(s.b))
		return _round_robin(self._sub(s.a), right)

	def visit_Intersection(self, s:Intersection):
		candidates = [x for x in (s.a, s.b) if classify(x) is Countability.COUNTABLE]
		if not candidates:
			if census(s).high == 0: return iter(())
			raise NotCountableError("Neither side of %s is known to be countable."%s.render(), s)
		walk = min(candidates, key=lambda x: census(x).high)
		other = s.b if walk is s.a else s.a
		return (x if x is not GAP and contains(other, x) is True else GAP for x in self.visit(walk))

	def visit_Difference(self, s:Difference):
		if classify(s.a) is not Countability.COUNTABLE: return iter(())  # a is inside b.
		return (x if x is not GAP and contains(s.b, x) is False else GAP for x in self.visit(s.a))

	def visit_Comprehension(self, s:Comprehension):
		for x in self._sub(s.base):
			if x is not GAP:
				try: verdict = evaluate(s.predicate, {s.binder: x})
				except EvaluationError: verdict = None
				if verdict == TRUE:
					yield x
					continue
			yield GAP

	def visit_NamedAlias(self, s:NamedAlias):
		try: stream = self._streams[s]
		except KeyError:
			stream = self._streams[s] = Stream(lambda: self.visit(s.definition))
		return iter(stream)
