"""
Build the primitive namespace.
Also, the arithmetic kernel behind operator syntax and the builtin functions.

Arithmetic stays exact (int and Fraction) for as long as it can.
Things like sin(1) have no exact answer, so those fall back to math and cmath.
"""
import cmath, math, operator
from fractions import Fraction
from typing import Callable, NamedTuple
from .ontology import EvaluationError
from .values import Element, Number, Bool, Primitive
from .space import Layer
from . import sets

root_sets = Layer()
for _s in (sets.WHOLE, sets.NAT, sets.INT, sets.REAL, sets.COMPLEX, sets.STR, sets.CHAR, sets.BOOL, sets.UNIV, sets.EMPTY):
	root_sets.define(_s.kind, _s)

# From narrowest to widest. Each is a subset of the next.
NUMERIC_LADDER = ("Nat", "Whole", "Int", "Real", "Complex")

###############################################################################

def _numbers(*args) -> tuple:
	for a in args:
		if not isinstance(a, Number):
			raise EvaluationError("Arithmetic needs numbers, but got %s."%a.render(), a)
	return tuple(a.n for a in args)

def _reals(*args) -> tuple:
	them = _numbers(*args)
	for a, n in zip(args, them):
		if isinstance(n, complex):
			raise EvaluationError("Complex numbers have no ordering.", a)
	return them

def _is_exact(n): return isinstance(n, (int, Fraction))

def _guard(fn, *args):
	try: return fn(*args)
	except (ArithmeticError, ValueError) as ex:
		raise EvaluationError("%s: %s"%(type(ex).__name__, ex)) from ex

def num_add(a, b): return Number(_guard(operator.add, *_numbers(a, b)))
def num_sub(a, b): return Number(_guard(operator.sub, *_numbers(a, b)))
def num_mul(a, b): return Number(_guard(operator.mul, *_numbers(a, b)))

def num_div(a, b):
	x, y = _numbers(a, b)
	if y == 0: raise EvaluationError("Division by zero.", b)
	if _is_exact(x) and _is_exact(y): return Number(Fraction(x) / y)
	return Number(_guard(operator.truediv, x, y))

def num_mod(a, b):
	x, y = _reals(a, b)
	if y == 0: raise EvaluationError("Modulus by zero.", b)
	return Number(_guard(operator.mod, x, y))

def _exact_root(x, q:int):
	""" The exact q-th root of a non-negative rational, or None. """
	def root(k:int):
		try: guess = round(k ** (1.0/q))
		except OverflowError: return None
		for r in (guess-1, guess, guess+1):
			if r >= 0 and r ** q == k: return r
	if x < 0 or q > 64: return None
	x = Fraction(x)
	num, den = root(x.numerator), root(x.denominator)
	if num is not None and den is not None: return Fraction(num, den)

def num_pow(a, b):
	x, y = _numbers(a, b)
	if x == 0 and y == 0: raise EvaluationError("Zero to the power of zero is undefined.", a)
	if x == 0 and not isinstance(y, complex) and y < 0:
		raise EvaluationError("Zero cannot be raised to a negative power.", a)
	if _is_exact(x) and isinstance(y, int):
		return Number(_guard(operator.pow, Fraction(x), y))
	if _is_exact(x) and isinstance(y, Fraction):
		r = _exact_root(x, y.denominator)
		if r is not None: return Number(_guard(operator.pow, r, y.numerator))
	if not isinstance(x, complex) and x < 0 and not isinstance(y, int):
		return Number(_guard(operator.pow, complex(x), complex(y)))
	return Number(_guard(operator.pow, x, y))

def num_neg(a): return Number(-_numbers(a)[0])

def num_conj(a):
	n = _numbers(a)[0]
	return Number(n.conjugate() if isinstance(n, complex) else n)

def _compare(op):
	def compare(a, b):
		return Bool(op(*_reals(a, b)))
	return compare

def _equal(a:Element, b:Element): return Bool(a == b)
def _unequal(a:Element, b:Element): return Bool(a != b)

PRIMITIVE_BINARY : dict[str, Callable] = {
	"+" : num_add,
	"-" : num_sub,
	"*" : num_mul,
	"/" : num_div,
	"^" : num_pow,
	"MOD" : num_mod,
	"==" : _equal,
	"!=" : _unequal,
	"<" : _compare(operator.lt),
	"<=" : _compare(operator.le),
	">" : _compare(operator.gt),
	">=" : _compare(operator.ge),
}
PRIMITIVE_UNARY : dict[str, Callable] = {
	"-" : num_neg,
	"CONJ" : num_conj,
}
SHORTCUT = {
	"AND":False,
	"OR":True,
}

###############################################################################

def _real_or_complex(real_fn, complex_fn, real_domain=lambda x:True):
	def fn(n):
		if isinstance(n, complex) or not real_domain(n):
			return complex_fn(n)
		return real_fn(n)
	return fn

def _sqrt(n):
	if _is_exact(n):
		r = _exact_root(n, 2)
		if r is not None: return r
	if isinstance(n, complex) or n < 0: return cmath.sqrt(n)
	return math.sqrt(n)

def _ln(n):
	if n == 0: raise EvaluationError("The logarithm of zero is undefined.")
	if n == 1: return 0
	if isinstance(n, complex) or n < 0: return cmath.log(n)
	return math.log(n)

def _unit_interval(n): return -1 <= n <= 1

def _real_only(name, fn):
	def real_fn(n):
		if isinstance(n, complex): raise EvaluationError("%s needs a real argument."%name)
		return fn(n)
	return real_fn

class BuiltinFunction(NamedTuple):
	native: Callable
	# Inferred result: the rung of the numeric ladder for each rung of argument.
	result: dict[str, str]

_TRANSCENDENTAL = {"Nat":"Real", "Whole":"Real", "Int":"Real", "Real":"Real", "Complex":"Complex"}
_ROOTISH = {"Nat":"Real", "Whole":"Real", "Int":"Complex", "Real":"Complex", "Complex":"Complex"}
_INVERSE_TRIG = {"Nat":"Complex", "Whole":"Complex", "Int":"Complex", "Real":"Complex", "Complex":"Complex"}

BUILTIN_FUNCTIONS : dict[str, BuiltinFunction] = {
	"sin": BuiltinFunction(_real_or_complex(math.sin, cmath.sin), _TRANSCENDENTAL),
	"cos": BuiltinFunction(_real_or_complex(math.cos, cmath.cos), _TRANSCENDENTAL),
	"tan": BuiltinFunction(_real_or_complex(math.tan, cmath.tan), _TRANSCENDENTAL),
	"exp": BuiltinFunction(_real_or_complex(math.exp, cmath.exp), _TRANSCENDENTAL),
	"ln": BuiltinFunction(_ln, _ROOTISH),
	"log": BuiltinFunction(_ln, _ROOTISH),
	"sqrt": BuiltinFunction(_sqrt, _ROOTISH),
	"asin": BuiltinFunction(_real_or_complex(math.asin, cmath.asin, _unit_interval), _INVERSE_TRIG),
	"acos": BuiltinFunction(_real_or_complex(math.acos, cmath.acos, _unit_interval), _INVERSE_TRIG),
	"atan": BuiltinFunction(_real_or_complex(math.atan, cmath.atan), _TRANSCENDENTAL),
	"sinh": BuiltinFunction(_real_or_complex(math.sinh, cmath.sinh), _TRANSCENDENTAL),
	"cosh": BuiltinFunction(_real_or_complex(math.cosh, cmath.cosh), _TRANSCENDENTAL),
	"tanh": BuiltinFunction(_real_or_complex(math.tanh, cmath.tanh), _TRANSCENDENTAL),
	"abs": BuiltinFunction(abs, {"Nat":"Nat", "Whole":"Whole", "Int":"Whole", "Real":"Real", "Complex":"Real"}),
	"floor": BuiltinFunction(_real_only("floor", math.floor), {"Nat":"Nat", "Whole":"Whole", "Int":"Int", "Real":"Int"}),
	"ceil": BuiltinFunction(_real_only("ceil", math.ceil), {"Nat":"Nat", "Whole":"Whole", "Int":"Int", "Real":"Int"}),
}

def apply_builtin(name:str, args:list[Element]) -> Element:
	try: fn = BUILTIN_FUNCTIONS[name]
	except KeyError: raise EvaluationError("There is no builtin function called %s."%name) from None
	if len(args) != 1:
		raise EvaluationError("%s takes 1 argument, but got %d instead."%(name, len(args)))
	return Number(_guard(fn.native, *_numbers(*args)))

def builtin_value(name:str) -> Primitive:
	""" A builtin function as a first-class value. """
	return Primitive(name, lambda x: apply_builtin(name, [x]))
