"""
The abstract syntax the engine accepts from whatever parses the surface language.
Type annotations are little trees of their own; expressions are SymbolicExpr already.

Each node renders back to surface text. Diagnostics rely on that to find and
underline the offending part of a statement.
"""
from typing import NamedTuple, Optional, Sequence
from .ontology import Phrase
from .symbolic import SymbolicExpr

class TypeExpression(Phrase):
	pass

class TypeName(TypeExpression):
	""" A builtin set, or one bound by a `data` declaration. """
	def __init__(self, name:str):
		self.name = name
	def render(self): return self.name

class SetLiteral(TypeExpression):
	""" Braces around explicit elements, each given as a (constant) expression. """
	def __init__(self, items:Sequence[SymbolicExpr]):
		self.items = tuple(items)
	def render(self): return "{%s}"%", ".join(i.render() for i in self.items)

def _sub(t:TypeExpression) -> str:
	text = t.render()
	return "(%s)"%text if isinstance(t, (SetOpSpec, ArrowSpec)) else text

class TupleSpec(TypeExpression):
	def __init__(self, components:Sequence[TypeExpression]):
		self.components = tuple(components)
	def render(self): return "(%s)"%", ".join(c.render() for c in self.components)

class PowerSpec(TypeExpression):
	def __init__(self, base:TypeExpression, exponent):
		self.base, self.exponent = base, exponent
	def render(self): return "%s^%s"%(_sub(self.base), self.exponent)

class ListSpec(TypeExpression):
	def __init__(self, element:TypeExpression):
		self.element = element
	def render(self): return "[%s]"%self.element.render()

class ArrowSpec(TypeExpression):
	def __init__(self, domain:TypeExpression, codomain:TypeExpression):
		self.domain, self.codomain = domain, codomain
	def render(self): return "%s -> %s"%(_sub(self.domain), self.codomain.render())

class SetOpSpec(TypeExpression):
	"""
	Union (|), intersection (&), difference (\\), or symmetric difference (~).
	"""
	GLYPHS = ("|", "&", "\\", "~")
	def __init__(self, glyph:str, lhs:TypeExpression, rhs:TypeExpression):
		assert glyph in self.GLYPHS, glyph
		self.glyph, self.lhs, self.rhs = glyph, lhs, rhs
	def render(self): return "%s %s %s"%(_sub(self.lhs), self.glyph, _sub(self.rhs))

class ComplementSpec(TypeExpression):
	def __init__(self, arg:TypeExpression):
		self.arg = arg
	def render(self): return "~%s"%_sub(self.arg)

class ComprehensionSpec(TypeExpression):
	def __init__(self, binder:str, base:TypeExpression, predicate:SymbolicExpr):
		self.binder, self.base, self.predicate = binder, base, predicate
	def render(self): return "{%s in %s : %s}"%(self.binder, self.base.render(), self.predicate.render())

###############################################################################

class Statement(Phrase):
	pass

class DataDecl(Statement):
	""" data Name = type-expression; the body may mention Name itself. """
	def __init__(self, name:str, body:TypeExpression):
		self.name, self.body = name, body
	def render(self): return "data %s = %s"%(self.name, self.body.render())

class Assign(Statement):
	def __init__(self, name:str, type_expr:Optional[TypeExpression], expr:SymbolicExpr):
		self.name, self.type_expr, self.expr = name, type_expr, expr
	def render(self):
		if self.type_expr is None: return "%s = %s"%(self.name, self.expr.render())
		return "%s : %s = %s"%(self.name, self.type_expr.render(), self.expr.render())

class Param(NamedTuple):
	name: str
	type_expr: Optional[TypeExpression]
	def render(self):
		if self.type_expr is None: return self.name
		return "%s : %s"%(self.name, self.type_expr.render())

class FunctionDecl(Statement):
	def __init__(self, name:str, params:Sequence[Param], result:Optional[TypeExpression], body:SymbolicExpr):
		self.name, self.params, self.result, self.body = name, tuple(params), result, body
	def render(self):
		head = "%s(%s)"%(self.name, ", ".join(p.render() for p in self.params))
		if self.result is not None: head += " -> %s"%self.result.render()
		return "%s = %s"%(head, self.body.render())

class DerivativeDecl(Statement):
	""" name = d(function), or d(function)/d(variable) where there are several. """
	def __init__(self, name:str, source:str, wrt:str=None):
		self.name, self.source, self.wrt = name, source, wrt
	def render(self):
		if self.wrt is None: return "%s = d(%s)"%(self.name, self.source)
		return "%s = d(%s)/d(%s)"%(self.name, self.source, self.wrt)
