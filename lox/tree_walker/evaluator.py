"""
The generic machinery that everything needs,
without the specific methods corresponding to particular syntax.
"""
from typing import Any
from ..ontology import Token

EVALUATE = {}
EXECUTE = {}

def attach_evaluation_methods(python_scope):
	"""
	Fill the dispatch tables from functions named _eval_* and _exec_*,
	keyed by the annotated type of their first parameter.
	"""
	for _k, _v in list(python_scope.items()):
		if _k.startswith("_eval_"):
			_t = _v.__annotations__["expr"]
			assert isinstance(_t, type), (_k, _t)
			EVALUATE[_t] = _v
		elif _k.startswith("_exec_"):
			_t = _v.__annotations__["stmt"]
			assert isinstance(_t, type), (_k, _t)
			EXECUTE[_t] = _v

def is_truthy(value:Any) -> bool:
	""" Only nil and false are falsy. Zero and the empty string are true. """
	return not (value is None or value is False)

###############################################################################

class Return(Exception):
	"""
	Not an error: this is how a return statement gets back to the call that
	is running it, through however many blocks and loops lie in between.
	"""
	def __init__(self, value:Any):
		super().__init__(value)
		self.value = value

class LoxRuntimeError(Exception):
	""" Each carries the offending token so the complaint can cite a line. """
	def __init__(self, token:Token, message:str):
		super().__init__(token, message)
		self.token = token
		self.message = message

	def __str__(self):
		return "%s\n[line %d]" % (self.message, self.token.line)

class IncompatibleOperandType(LoxRuntimeError):
	pass

class UndefinedVariable(LoxRuntimeError):
	def __init__(self, name:Token):
		super().__init__(name, "Undefined variable '%s'." % name.lexeme)

class NotValidCallable(LoxRuntimeError):
	def __init__(self, paren:Token):
		super().__init__(paren, "Can only call functions and classes.")

class InvalidArgumentCount(LoxRuntimeError):
	def __init__(self, paren:Token, expected:int, actual:int):
		super().__init__(paren, "Expected %d arguments but got %d." % (expected, actual))
		self.expected = expected
		self.actual = actual

class NotAnInstance(LoxRuntimeError):
	pass

class UndefinedProperty(LoxRuntimeError):
	def __init__(self, name:Token):
		super().__init__(name, "Undefined property '%s'." % name.lexeme)

class SuperclassMustBeAClass(LoxRuntimeError):
	def __init__(self, name:Token):
		super().__init__(name, "Superclass must be a class.")
