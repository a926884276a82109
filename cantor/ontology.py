"""
These most-fundamental bits are separate from the rest to avoid
various circular-import scenarios: the abstract base for everything
that can be rendered in a diagnostic, the third truth-value,
and the family of exceptions the engine may raise.
"""

class Phrase:
	"""
	Anything that can be shown to a user as (part of) a line of text.
	Set-expressions, symbolic expressions, and the surface syntax all qualify.
	"""
	def render(self) -> str: raise NotImplementedError(type(self))
	def __str__(self): return self.render()

class Value:
	"""
	Immutable value objects: equality and hashing by key.
	The key is fixed at construction, so the hash gets computed exactly once.
	"""
	def __init__(self, *key):
		self._key = key
		self._hash = hash((type(self).__name__, key))
	def __hash__(self): return self._hash
	def __eq__(self, other): return type(self) is type(other) and self._key == other._key

#######################################################################

class _Unknown:
	"""
	The third truth-value. It refuses to be coerced to bool,
	so that nobody accidentally reads "unknown" as "no".
	"""
	_instance = None
	def __new__(cls):
		if cls._instance is None:
			cls._instance = super().__new__(cls)
		return cls._instance
	def __repr__(self): return "Unknown"
	def __bool__(self): raise TypeError("The truth of UNKNOWN is unknown.")

UNKNOWN = _Unknown()

def is_known(verdict) -> bool:
	return verdict is not UNKNOWN

def negate(verdict):
	return verdict if verdict is UNKNOWN else not verdict

def either(verdicts):
	"""
	Short-circuit ternary OR over an iterable of verdicts (or thunks of verdicts).
	Nothing after the first True gets evaluated.
	"""
	result = False
	for v in verdicts:
		if callable(v): v = v()
		if v is True: return True
		if v is UNKNOWN: result = UNKNOWN
	return result

def both(verdicts):
	""" Short-circuit ternary AND, in the same manner as `either`. """
	result = True
	for v in verdicts:
		if callable(v): v = v()
		if v is False: return False
		if v is UNKNOWN: result = UNKNOWN
	return result

#######################################################################

class CantorError(Exception):
	"""
	Root of the family. The culprit is the offending sub-expression,
	which the diagnostics will underline within its statement.
	"""
	def __init__(self, message:str, culprit:Phrase=None):
		super().__init__(message)
		self.message = message
		self.culprit = culprit

class TypeConstructionError(CantorError):
	""" A malformed set-expression: Negative powers, circular definitions, and suchlike. """

class NotCountableError(CantorError):
	""" Enumeration was requested of a set not known to be countable. """

class TypeMismatchError(CantorError):
	""" A value was found not to be a member of its declared set. """

class TypeUndecidedError(CantorError):
	""" The oracle could not decide membership, and policy is to reject. """

class UnsupportedDerivativeError(CantorError):
	""" No rule for differentiating this sub-expression. """

class EvaluationError(CantorError):
	""" The evaluator could not produce a value. """
