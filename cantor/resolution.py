"""
Turning type annotations into set-expressions.

Names resolve against a scope of sets: the builtins, atop which a session
stacks whatever its `data` declarations bind. A `data` declaration may refer
to itself through its NamedAlias, but every such
circle must pass through a constructor (tuple, power, list, or mapping).
A definition like `data A = A | {1}` says nothing, and is refused.
"""
from typing import Mapping as _Mapping
from boozetools.support.foundation import Visitor, strongly_connected_components_hashable
from . import syntax, algebra
from .ontology import CantorError, TypeConstructionError
from .values import Element, Number, to_python
from .sets import (
	SetExpr, Builtin, Finite, Tuple, Power, ListOf, Mapping, Union, Intersection,
	Difference, Comprehension, NamedAlias, DefinitionTable,
)
from .space import Space, AlreadyExists
from .symbolic import SymbolicExpr, Const, substitute
from .evaluator import evaluate

SET_OPERATORS = {
	"|": algebra.union,
	"&": algebra.intersect,
	"\\": algebra.difference,
	"~": algebra.symmetric_difference,
}

def resolve_type_annotation(ast:syntax.TypeExpression, scope:Space[SetExpr], constants:_Mapping[str, Element]=None) -> SetExpr:
	"""
	The constants are values already bound in the session. Set literals may
	use them, and comprehension predicates get them substituted in, so that
	the resulting set means the same thing wherever it travels.
	"""
	return ResolveType(scope, constants or {}).visit(ast)

class ResolveType(Visitor):
	def __init__(self, scope:Space[SetExpr], constants:_Mapping[str, Element]):
		self.scope = scope
		self.constants = constants

	def visit(self, ast, *args):
		# Blame the innermost annotation that went wrong.
		try: return super().visit(ast, *args)
		except TypeConstructionError as ex:
			if not isinstance(ex.culprit, syntax.TypeExpression): ex.culprit = ast
			raise

	def visit_TypeName(self, ast:syntax.TypeName):
		s = self.scope.symbol(ast.name)
		if s is None: raise TypeConstructionError("There is no set called %s."%ast.name, ast)
		return s

	def visit_SetLiteral(self, ast:syntax.SetLiteral):
		return algebra.finite(evaluate(item, self.constants) for item in ast.items)

	def visit_TupleSpec(self, ast:syntax.TupleSpec):
		if not ast.components:
			raise TypeConstructionError("A tuple-set needs at least one component.", ast)
		return algebra.tuple_of(self.visit(c) for c in ast.components)

	def visit_PowerSpec(self, ast:syntax.PowerSpec):
		n = ast.exponent
		if isinstance(n, SymbolicExpr): n = evaluate(n, self.constants)
		if isinstance(n, Number): n = to_python(n)
		return algebra.power(self.visit(ast.base), n)

	def visit_ListSpec(self, ast:syntax.ListSpec):
		return algebra.list_of(self.visit(ast.element))

	def visit_ArrowSpec(self, ast:syntax.ArrowSpec):
		return algebra.mapping_of(self.visit(ast.domain), self.visit(ast.codomain))

	def visit_SetOpSpec(self, ast:syntax.SetOpSpec):
		return SET_OPERATORS[ast.glyph](self.visit(ast.lhs), self.visit(ast.rhs))

	def visit_ComplementSpec(self, ast:syntax.ComplementSpec):
		return algebra.complement(self.visit(ast.arg))

	def visit_ComprehensionSpec(self, ast:syntax.ComprehensionSpec):
		gamma = {name: Const(value) for name, value in self.constants.items() if name != ast.binder}
		return algebra.comprehend(self.visit(ast.base), ast.binder, substitute(ast.predicate, gamma))

###############################################################################

def declare_data(name:str, body:syntax.TypeExpression, scope:Space[SetExpr], table:DefinitionTable, constants:_Mapping[str, Element]=None) -> NamedAlias:
	"""
	Bind a name to a set, once. The body may refer to the name being defined.
	If anything goes wrong, the name is left unbound.
	"""
	alias = table.declare(name)
	try: scope.define(name, alias)
	except AlreadyExists:
		table.retract(alias)
		raise TypeConstructionError("The name %s is already taken."%name, body) from None
	try:
		table.define(alias, resolve_type_annotation(body, scope, constants))
		_check_well_founded(table, body)
	except CantorError:
		scope.forget(name)
		table.retract(alias)
		raise
	return alias

class _Unguarded(Visitor):
	""" The aliases a set refers to other than through some constructor. """
	def visit_Builtin(self, s:Builtin): return set()
	def visit_Finite(self, s:Finite): return set()
	def visit_Tuple(self, s:Tuple): return set()
	def visit_Power(self, s:Power): return set()
	def visit_ListOf(self, s:ListOf): return set()
	def visit_Mapping(self, s:Mapping): return set()
	def _binary(self, s): return self.visit(s.a) | self.visit(s.b)
	visit_Union = visit_Intersection = visit_Difference = _binary
	def visit_Comprehension(self, s:Comprehension): return self.visit(s.base)
	def visit_NamedAlias(self, s:NamedAlias): return {s}

def _check_well_founded(table:DefinitionTable, culprit:syntax.TypeExpression):
	unguarded = _Unguarded()
	graph = {alias: unguarded.visit(alias.definition) for alias in table.each_alias()}
	for scc in strongly_connected_components_hashable(graph):
		if len(scc) > 1 or scc[0] in graph[scc[0]]:
			names = ", ".join(sorted(a.name for a in scc))
			raise TypeConstructionError("The definition of %s goes in circles without any constructor in between."%names, culprit)
