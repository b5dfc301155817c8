import math
import operator
from typing import Sequence
from .. import syntax, primitive
from ..ontology import SUPER, THIS, INIT
from .environment import Environment, Absent
from .evaluator import (
	EVALUATE, EXECUTE, attach_evaluation_methods, is_truthy, Return,
	IncompatibleOperandType, UndefinedVariable, NotValidCallable,
	InvalidArgumentCount, NotAnInstance, UndefinedProperty, SuperclassMustBeAClass,
)
from .types import VALUE
from .values import Callable, Function, Class, Instance

def _divide(a:float, b:float) -> float:
	# Division by zero gives the IEEE answer rather than raising.
	if b: return a / b
	if a != a or a == 0: return math.nan
	return math.copysign(math.inf, a) * math.copysign(1.0, b)

ARITHMETIC = {
	"MINUS" : operator.sub,
	"STAR"  : operator.mul,
	"SLASH" : _divide,
	"GREATER" : operator.gt,
	"GREATER_EQUAL" : operator.ge,
	"LESS" : operator.lt,
	"LESS_EQUAL" : operator.le,
}
EQUALITY = {
	"EQUAL_EQUAL" : True,
	"BANG_EQUAL" : False,
}
SHORTCUT = {
	"AND" : False,
	"OR" : True,
}

def is_equal(a:VALUE, b:VALUE) -> bool:
	# No coercion: true is not 1, and "1" is not 1. Objects compare by identity.
	return type(a) is type(b) and a == b

def stringify(value:VALUE) -> str:
	""" The way print shows a value. """
	if value is None: return "nil"
	if value is True: return "true"
	if value is False: return "false"
	if isinstance(value, float): return _number_text(value)
	return str(value)

def _number_text(n:float) -> str:
	if math.isnan(n): return "NaN"
	if math.isinf(n): return "inf" if n > 0 else "-inf"
	if n.is_integer():
		return "-0" if n == 0 and math.copysign(1.0, n) < 0 else "%d" % n
	return repr(n)

###############################################################################

class TreeWalker:
	"""
	Holds the one fixed global frame and a pointer to the current frame.
	Statements run to completion or raise: LoxRuntimeError for trouble,
	or Return, which a function call catches.
	"""
	globals: Environment
	environment: Environment

	def __init__(self):
		self.globals = Environment()
		primitive.install(self.globals)
		self.environment = self.globals

	def evaluate(self, expr:syntax.ValueExpression) -> VALUE:
		try: fn = EVALUATE[type(expr)]
		except KeyError: raise NotImplementedError(type(expr), expr)
		return fn(expr, self)

	def execute(self, stmt:syntax.Statement):
		try: fn = EXECUTE[type(stmt)]
		except KeyError: raise NotImplementedError(type(stmt), stmt)
		fn(stmt, self)

	def interpret(self, stmt:syntax.Statement):
		""" Run one top-level statement. """
		try: self.execute(stmt)
		except Return:
			raise AssertionError("A return escaped to the top level; the resolver should have refused it.")

	def interpret_block(self, statements:Sequence[syntax.Statement], environment:Environment):
		""" Run statements in the given frame, then put back whichever frame was current. """
		previous = self.environment
		self.environment = environment
		try:
			for stmt in statements:
				self.execute(stmt)
		finally:
			self.environment = previous

	def look_up(self, ref:syntax.Reference, key:str) -> VALUE:
		try:
			if ref.distance is None: return self.globals.get(key)
			return self.environment.get_at(key, ref.distance)
		except Absent:
			raise UndefinedVariable(ref.name) from None

###############################################################################

def _exec_expr_stmt(stmt:syntax.ExprStmt, tw:TreeWalker):
	tw.evaluate(stmt.expr)

def _exec_print(stmt:syntax.Print, tw:TreeWalker):
	print(stringify(tw.evaluate(stmt.expr)))

def _exec_var_decl(stmt:syntax.VarDecl, tw:TreeWalker):
	value = None if stmt.initializer is None else tw.evaluate(stmt.initializer)
	tw.environment.define(stmt.name.lexeme, value)

def _exec_block(stmt:syntax.Block, tw:TreeWalker):
	tw.interpret_block(stmt.statements, Environment(tw.environment))

def _exec_if_stmt(stmt:syntax.IfStmt, tw:TreeWalker):
	if is_truthy(tw.evaluate(stmt.condition)):
		tw.execute(stmt.then_part)
	elif stmt.else_part is not None:
		tw.execute(stmt.else_part)

def _exec_while_stmt(stmt:syntax.WhileStmt, tw:TreeWalker):
	while is_truthy(tw.evaluate(stmt.condition)):
		tw.execute(stmt.body)

def _exec_return_stmt(stmt:syntax.ReturnStmt, tw:TreeWalker):
	raise Return(None if stmt.value is None else tw.evaluate(stmt.value))

def _exec_fun_decl(stmt:syntax.FunDecl, tw:TreeWalker):
	# Closing over the frame itself, so later assignments out there are visible in here.
	tw.environment.define(stmt.name.lexeme, Function(stmt, tw.environment))

def _exec_class_decl(stmt:syntax.ClassDecl, tw:TreeWalker):
	# Predeclare the name so methods may refer to their own class.
	tw.environment.define(stmt.name.lexeme, None)
	frame = tw.environment
	superclass = None
	if stmt.superclass is not None:
		superclass = tw.evaluate(stmt.superclass)
		if not isinstance(superclass, Class):
			raise SuperclassMustBeAClass(stmt.superclass.name)
		frame = Environment(frame)
		frame.define(SUPER, superclass)
	methods = {
		m.name.lexeme: Function(m, frame, is_initializer=m.name.lexeme == INIT)
		for m in stmt.methods
	}
	tw.environment.assign(stmt.name, Class(stmt.name.lexeme, methods, superclass))

###############################################################################

def _eval_literal(expr:syntax.Literal, tw:TreeWalker):
	return expr.value

def _eval_grouping(expr:syntax.Grouping, tw:TreeWalker):
	return tw.evaluate(expr.expr)

def _eval_unary_exp(expr:syntax.UnaryExp, tw:TreeWalker):
	arg = tw.evaluate(expr.arg)
	if expr.op.kind == "BANG":
		return not is_truthy(arg)
	if not isinstance(arg, float):
		raise IncompatibleOperandType(expr.op, "Operand must be a number.")
	return -arg

def _eval_bin_exp(expr:syntax.BinExp, tw:TreeWalker):
	a = tw.evaluate(expr.lhs)
	b = tw.evaluate(expr.rhs)
	kind = expr.op.kind
	if kind in EQUALITY:
		return is_equal(a, b) == EQUALITY[kind]
	if kind == "PLUS":
		if isinstance(a, float) and isinstance(b, float): return a + b
		if isinstance(a, str) and isinstance(b, str): return a + b
		raise IncompatibleOperandType(expr.op, "Operands must be two numbers or two strings.")
	if isinstance(a, float) and isinstance(b, float):
		return ARITHMETIC[kind](a, b)
	raise IncompatibleOperandType(expr.op, "Operands must be numbers.")

def _eval_shortcut_exp(expr:syntax.ShortCutExp, tw:TreeWalker):
	# The result is whichever operand decided it, not a coerced boolean.
	lhs = tw.evaluate(expr.lhs)
	return lhs if is_truthy(lhs) == SHORTCUT[expr.op.kind] else tw.evaluate(expr.rhs)

def _eval_lookup(expr:syntax.Lookup, tw:TreeWalker):
	return tw.look_up(expr, expr.name.lexeme)

def _eval_assign(expr:syntax.Assign, tw:TreeWalker):
	value = tw.evaluate(expr.expr)
	if expr.distance is None: tw.globals.assign(expr.name, value)
	else: tw.environment.assign_at(expr.name, value, expr.distance)
	return value

def _eval_call(expr:syntax.Call, tw:TreeWalker):
	callee = tw.evaluate(expr.callee)
	if not isinstance(callee, Callable):
		raise NotValidCallable(expr.paren)
	if len(expr.args) != callee.arity():
		raise InvalidArgumentCount(expr.paren, callee.arity(), len(expr.args))
	args = [tw.evaluate(a) for a in expr.args]
	return callee.call(tw, args)

def _eval_get_field(expr:syntax.GetField, tw:TreeWalker):
	obj = tw.evaluate(expr.obj)
	if not isinstance(obj, Instance):
		raise NotAnInstance(expr.field_name, "Only instances have properties.")
	return obj.get(expr.field_name)

def _eval_set_field(expr:syntax.SetField, tw:TreeWalker):
	obj = tw.evaluate(expr.obj)
	if not isinstance(obj, Instance):
		raise NotAnInstance(expr.field_name, "Only instances have fields.")
	value = tw.evaluate(expr.expr)
	obj.set(expr.field_name, value)
	return value

def _eval_this(expr:syntax.This, tw:TreeWalker):
	return tw.look_up(expr, THIS)

def _eval_super(expr:syntax.Super, tw:TreeWalker):
	# "this" always lives one scope inside the scope that holds "super".
	superclass = tw.look_up(expr, SUPER)
	instance = tw.environment.get_at(THIS, expr.distance - 1)
	method = superclass.find_method(expr.method.lexeme)
	if method is None:
		raise UndefinedProperty(expr.method)
	return method.bind(instance)

attach_evaluation_methods(globals())
