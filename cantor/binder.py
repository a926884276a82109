"""
The type binder: where the oracle's ternary answers turn into decisions.

A value gets bound to a name only if it is a member of the declared set.
A clear "no" is a TypeMismatchError. An "unknown" goes by the policy,
which by default refuses with a TypeUndecidedError.

Function declarations are judged more leniently, because the set an
arithmetic expression lands in can rarely be computed exactly:
Only a body whose inferred set is provably disjoint from the declared
codomain gets refused. Anything short of a proven fit gets a warning.
"""
from enum import Enum
from typing import NamedTuple, Optional, Sequence
from .ontology import Phrase, TypeMismatchError, TypeUndecidedError, TypeConstructionError, UnsupportedDerivativeError
from .values import Element, Lambda
from .sets import SetExpr, UNIV, REAL, COMPLEX
from .membership import contains, is_subset, is_disjoint
from .evaluator import evaluate
from .inference import infer_set
from .calculus import differentiate
from .diagnostics import Report
from . import algebra

class Policy(Enum):
	""" What to do when the oracle cannot say whether a value fits its set. """
	REJECT = "reject"
	WARN = "warn"
	ACCEPT = "accept"

class Binding(NamedTuple):
	name: str
	typeset: SetExpr
	value: Element

class TypeBinder:
	def __init__(self, report:Report, policy:Policy=Policy.REJECT):
		self.report = report
		self.policy = policy

	def bind(self, name:str, typeset:SetExpr, value:Element, site:Phrase=None) -> Binding:
		""" The site is what to blame, should the value not fit. """
		verdict = contains(typeset, value)
		if verdict is False:
			raise TypeMismatchError("%s is not a member of %s."%(value.render(), typeset.render()), site or value)
		if verdict is not True:
			message = "Cannot tell whether %s is a member of %s."%(value.render(), typeset.render())
			if self.policy is Policy.REJECT: raise TypeUndecidedError(message, site or value)
			if self.policy is Policy.WARN: self.report.warn(message, site or value)
		return Binding(name, typeset, value)

	def bind_expression(self, name:str, typeset:SetExpr, expr, env=None) -> Binding:
		return self.bind(name, typeset, evaluate(expr, env), expr)

	def declare_function(self, name:str, params:Sequence[tuple[str, Optional[SetExpr]]], result:Optional[SetExpr], body, env=None, functions=None) -> Binding:
		"""
		Parameters come as (name, set) pairs; a missing set means Univ.
		Several parameters make a tuple for the domain. Where no result set
		is declared, the inferred one stands in for it.

		The env holds the values the body may capture; functions, the known
		user functions, which inference consults for their codomains.
		"""
		if not params:
			raise TypeConstructionError("The function %s needs at least one parameter."%name, body)
		names = [p for p, _ in params]
		sets = [UNIV if s is None else s for _, s in params]
		domain = algebra.tuple_of(sets)
		functions = dict(functions or {})
		inferred = infer_set(body, dict(zip(names, sets)), functions, domain if len(sets) == 1 else None)
		if result is None:
			codomain = inferred
		else:
			codomain = result
			self._check_codomain(name, inferred, result, body)
		fn = Lambda(name, names, body, domain, codomain, env)
		fn.captures.setdefault(name, fn)  # So it may call itself.
		self.report.info("%s : %s"%(name, algebra.mapping_of(domain, codomain).render()))
		return Binding(name, algebra.mapping_of(domain, codomain), fn)

	def _check_codomain(self, name:str, inferred:SetExpr, declared:SetExpr, body):
		if is_subset(inferred, declared) is True: return
		if is_disjoint(inferred, declared) is True:
			raise TypeMismatchError("The body of %s yields members of %s, which has nothing in common with %s."%(name, inferred.render(), declared.render()), body)
		self.report.warn("The body of %s yields members of %s, which may not always lie within %s."%(name, inferred.render(), declared.render()), body)

	def derive(self, binding:Binding, wrt:str=None, name:str=None, functions=None) -> Binding:
		"""
		The derivative of a user-defined function. It keeps the domain.
		Its codomain is Real if the original's is known to be real, or else Complex.
		"""
		fn = binding.value
		if not isinstance(fn, Lambda):
			raise UnsupportedDerivativeError("Only user-defined functions can be differentiated, and %s is not one."%binding.name, fn)
		if wrt is None:
			if fn.arity() != 1:
				raise UnsupportedDerivativeError("%s has several parameters. Which one is the variable?"%binding.name, fn)
			wrt = fn.params[0]
		elif wrt not in fn.params:
			raise UnsupportedDerivativeError("%s has no parameter called %s."%(binding.name, wrt), fn)
		body = differentiate(fn.body, wrt, functions)
		hull = REAL if is_subset(fn.codomain or UNIV, REAL) is True else COMPLEX
		domain = fn.domain or UNIV
		derivative = Lambda(name or binding.name+"'", fn.params, body, domain, hull, fn.captures)
		return Binding(derivative.name, algebra.mapping_of(domain, hull), derivative)
