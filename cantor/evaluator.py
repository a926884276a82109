"""
Strict, direct interpretation of symbolic expressions against concrete bindings.
This is what comprehension predicates run on, and what gives a user-defined
function its values.

Any way an expression can fail to produce a value comes out as EvaluationError.
The membership oracle depends on that: It turns exactly those into UNKNOWN.
"""
from typing import Mapping, NamedTuple, Optional, Sequence
from .ontology import EvaluationError
from .values import Element, Bool, TupleValue, Function, Lambda, Primitive, Table
from .symbolic import SymbolicExpr, Const, VarRef, BinaryOp, UnaryOp, Call, FuncRef
from . import primitive

class Context(NamedTuple):
	bindings: Mapping[str, Element]
	# What a point-free function reference gets applied to, if anything.
	point: Optional[Element]

def evaluate(expr:SymbolicExpr, env:Mapping[str, Element]=None, point:Element=None) -> Element:
	return _evaluate(expr, Context(env or {}, point))

def _evaluate(expr:SymbolicExpr, ctx:Context) -> Element:
	try: fn = EVALUATE[type(expr)]
	except KeyError: raise EvaluationError("Cannot evaluate %r."%(expr,)) from None
	else: return fn(expr, ctx)

def _flag(expr:SymbolicExpr, ctx:Context) -> Bool:
	it = _evaluate(expr, ctx)
	if not isinstance(it, Bool):
		raise EvaluationError("Expected true or false, but got %s."%it.render(), expr)
	return it

def _eval_const(expr:Const, ctx:Context):
	return expr.value

def _eval_var_ref(expr:VarRef, ctx:Context):
	try: return ctx.bindings[expr.name]
	except KeyError: raise EvaluationError("The name %s has no value here."%expr.name, expr) from None

def _eval_binary_op(expr:BinaryOp, ctx:Context):
	if expr.glyph in primitive.SHORTCUT:
		lhs = _flag(expr.lhs, ctx)
		return lhs if lhs.flag == primitive.SHORTCUT[expr.glyph] else _flag(expr.rhs, ctx)
	op = primitive.PRIMITIVE_BINARY[expr.glyph]
	try: return op(_evaluate(expr.lhs, ctx), _evaluate(expr.rhs, ctx))
	except EvaluationError as ex:
		if ex.culprit is None: ex.culprit = expr
		raise

def _eval_unary_op(expr:UnaryOp, ctx:Context):
	if expr.glyph == "NOT":
		return Bool(not _flag(expr.arg, ctx).flag)
	return primitive.PRIMITIVE_UNARY[expr.glyph](_evaluate(expr.arg, ctx))

def _eval_call(expr:Call, ctx:Context):
	args = [_evaluate(a, ctx) for a in expr.args]
	fn = ctx.bindings.get(expr.name)
	if isinstance(fn, Function):
		return apply(fn, args)
	try: return primitive.apply_builtin(expr.name, args)
	except EvaluationError as ex:
		if ex.culprit is None: ex.culprit = expr
		raise

def _eval_func_ref(expr:FuncRef, ctx:Context):
	fn = ctx.bindings.get(expr.name)
	if fn is None and expr.name in primitive.BUILTIN_FUNCTIONS:
		fn = primitive.builtin_value(expr.name)
	if not isinstance(fn, Function):
		raise EvaluationError("The name %s does not refer to a function."%expr.name, expr)
	return fn if ctx.point is None else apply(fn, [ctx.point])

EVALUATE = {
	Const: _eval_const,
	VarRef: _eval_var_ref,
	BinaryOp: _eval_binary_op,
	UnaryOp: _eval_unary_op,
	Call: _eval_call,
	FuncRef: _eval_func_ref,
}

###############################################################################

def _spread(fn:Function, args:Sequence[Element]) -> list[Element]:
	""" A function of several parameters also accepts one tuple of that many. """
	arity = fn.arity()
	if arity > 1 and len(args) == 1 and isinstance(args[0], TupleValue) and len(args[0].items) == arity:
		return list(args[0].items)
	if len(args) != arity:
		plural = '' if arity == 1 else 's'
		raise EvaluationError("%s takes %d argument%s, but got %d instead."%(fn.name, arity, plural, len(args)), fn)
	return list(args)

def apply(fn:Function, args:Sequence[Element]) -> Element:
	if isinstance(fn, Lambda):
		args = _spread(fn, args)
		inner = dict(fn.captures)
		inner.update(zip(fn.params, args))
		point = args[0] if len(args) == 1 else None
		try: return _evaluate(fn.body, Context(inner, point))
		except RecursionError:
			raise EvaluationError("%s recurses too deeply."%fn.name, fn) from None
	if isinstance(fn, Primitive):
		return fn.native(*_spread(fn, args))
	if isinstance(fn, Table):
		key = args[0] if len(args) == 1 else TupleValue(args)
		try: return fn.graph[key]
		except KeyError:
			if fn.default is not None: return fn.default
			raise EvaluationError("%s is outside the graph of this function."%key.render(), fn) from None
	raise EvaluationError("Dunno how to call %s as a function."%fn.render(), fn)
