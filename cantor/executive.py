"""
The session: Statements go in one at a time, and either take effect or get reported.
A statement that fails leaves the session as it was, and the next one carries on.

The session owns every bit of mutable state there is:
the names of sets, the bindings of values, and the pool of shared set-expressions.
"""
from typing import Optional
from . import syntax, primitive
from .ontology import CantorError, TypeUndecidedError
from .values import Element, Function
from .sets import SetExpr, DefinitionTable
from .space import Layer
from .algebra import SetPool
from .resolution import resolve_type_annotation, declare_data
from .inference import infer_set
from .evaluator import evaluate
from .binder import TypeBinder, Binding, Policy
from .diagnostics import Report

class Session:
	def __init__(self, report:Report=None, policy:Policy=Policy.REJECT):
		self.report = report or Report(verbose=0, max_issues=None)
		self.binder = TypeBinder(self.report, policy)
		self.table = DefinitionTable()
		self.types = primitive.root_sets.child()
		self.bindings = Layer()
		self.pool = SetPool()

	def run(self, statements) -> bool:
		""" Execute each statement in turn. Answer whether every one took effect. """
		results = [self.execute(s) for s in statements]
		return all(results)

	def execute(self, stmt:syntax.Statement) -> bool:
		self.report.focus(stmt)
		try:
			EXECUTE[type(stmt)](self, stmt)
		except TypeUndecidedError as ex:
			self.report.undecided(ex)
			return False
		except CantorError as ex:
			self.report.failed(ex)
			return False
		finally:
			self.report.focus(None)
		return True

	def values(self) -> dict[str, Element]:
		return {b.name: b.value for b in self.bindings.each_symbol()}

	def functions(self) -> dict[str, Function]:
		return {b.name: b.value for b in self.bindings.each_symbol() if isinstance(b.value, Function)}

	def lookup(self, name:str) -> Optional[Binding]:
		return self.bindings.symbol(name)

	def resolve(self, ast:syntax.TypeExpression) -> SetExpr:
		return self.pool.intern(resolve_type_annotation(ast, self.types, self.values()))

	def _install(self, binding:Binding, stmt:syntax.Statement):
		if binding.name in self.bindings or binding.name in self.types:
			raise CantorError("The name %s is already taken."%binding.name, stmt)
		self.bindings.define(binding.name, binding)
		self.report.info("%s : %s"%(binding.name, binding.typeset.render()))

	def _data(self, stmt:syntax.DataDecl):
		if stmt.name in self.bindings:
			raise CantorError("The name %s is already taken."%stmt.name, stmt)
		alias = declare_data(stmt.name, stmt.body, self.types, self.table, self.values())
		self.report.info("data %s = %s"%(alias.name, alias.definition.render()))

	def _assign(self, stmt:syntax.Assign):
		env = self.values()
		if stmt.type_expr is None:
			typeset = infer_set(stmt.expr, {b.name: b.typeset for b in self.bindings.each_symbol()}, self.functions())
			binding = Binding(stmt.name, self.pool.intern(typeset), evaluate(stmt.expr, env))
		else:
			binding = self.binder.bind_expression(stmt.name, self.resolve(stmt.type_expr), stmt.expr, env)
		self._install(binding, stmt)

	def _function(self, stmt:syntax.FunctionDecl):
		params = [(p.name, None if p.type_expr is None else self.resolve(p.type_expr)) for p in stmt.params]
		result = None if stmt.result is None else self.resolve(stmt.result)
		functions = self.functions()
		binding = self.binder.declare_function(stmt.name, params, result, stmt.body, self.values(), functions)
		self._install(binding, stmt)

	def _derivative(self, stmt:syntax.DerivativeDecl):
		source = self.bindings.symbol(stmt.source)
		if source is None:
			raise CantorError("There is no function called %s."%stmt.source, stmt)
		self._install(self.binder.derive(source, stmt.wrt, stmt.name, self.functions()), stmt)

EXECUTE = {
	syntax.DataDecl: Session._data,
	syntax.Assign: Session._assign,
	syntax.FunctionDecl: Session._function,
	syntax.DerivativeDecl: Session._derivative,
}
