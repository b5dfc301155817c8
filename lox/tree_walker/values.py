"""
This module defines the specialized value-types that the tree-walker operates in terms of.
Basic primitive values play themselves, but closures, classes, and instances need more help.

Functions, classes, and instances compare by identity:
copying one of these values copies a reference to the same object.
"""
from abc import abstractmethod
from typing import Callable as PyCallable, Optional
from .. import syntax
from ..ontology import Token, THIS, INIT
from .environment import Environment
from .evaluator import Return, UndefinedProperty
from .types import LoxValue, ARGS, VALUE

class Callable(LoxValue):
	""" A run-time object that can be applied to arguments. """
	@abstractmethod
	def arity(self) -> int: pass

	@abstractmethod
	def call(self, walker, args: ARGS) -> VALUE:
		""" The caller has already checked the argument count. """
		pass

class Function(Callable):
	""" The run-time manifestation of a function declaration: code tied to its natal environment. """
	# The same class serves for plain functions, methods, and bound methods.
	closure: Environment

	def __init__(self, decl: syntax.FunDecl, closure: Environment, is_initializer: bool = False):
		self.decl = decl
		self.closure = closure
		self.is_initializer = is_initializer

	def __str__(self): return "<fn %s>" % self.decl.name.lexeme
	def __repr__(self): return str(self)

	def arity(self) -> int: return len(self.decl.params)

	def bind(self, instance: "Instance") -> "Function":
		"""
		A fresh function every time: same code, but closed over
		a one-off frame where "this" means the given instance.
		"""
		frame = Environment(self.closure)
		frame.define(THIS, instance)
		return Function(self.decl, frame, self.is_initializer)

	def call(self, walker, args: ARGS) -> VALUE:
		# A child of the closure, not of the caller's frame: that's what makes it lexical.
		frame = Environment(self.closure)
		for param, arg in zip(self.decl.params, args):
			frame.define(param.lexeme, arg)
		try:
			walker.interpret_block(self.decl.body, frame)
		except Return as signal:
			result = signal.value
		else:
			result = None
		if self.is_initializer:
			return self.closure.get_at(THIS, 0)
		return result

class NativeFunction(Callable):
	""" Parameters to primitive functions arrive already evaluated, like any other call. """
	def __init__(self, name: str, arity: int, fn: PyCallable):
		self.name = name
		self._arity = arity
		self._fn = fn

	def __str__(self): return "<native fn>"
	def __repr__(self): return "<native fn %s>" % self.name

	def arity(self) -> int: return self._arity

	def call(self, walker, args: ARGS) -> VALUE:
		return self._fn(*args)

class Class(Callable):
	"""
	Calling a class makes an instance. If "init" is anywhere in the
	ancestry, it runs on the new instance with the same arguments,
	but whatever it returns, the call produces the instance.
	"""
	def __init__(self, name: str, methods: dict[str, Function], superclass: Optional["Class"]):
		self.name = name
		self.methods = methods
		self.superclass = superclass

	def __str__(self): return self.name
	def __repr__(self): return "<class %s>" % self.name

	def find_method(self, name: str) -> Optional[Function]:
		klass = self
		while klass is not None:
			if name in klass.methods: return klass.methods[name]
			klass = klass.superclass

	def arity(self) -> int:
		initializer = self.find_method(INIT)
		return 0 if initializer is None else initializer.arity()

	def call(self, walker, args: ARGS) -> "Instance":
		instance = Instance(self)
		initializer = self.find_method(INIT)
		if initializer is not None:
			initializer.bind(instance).call(walker, args)
		return instance

class Instance(LoxValue):
	""" No schema: any field may be set, and setting creates it. """
	def __init__(self, klass: Class):
		self.klass = klass
		self.fields = {}

	def __str__(self): return "%s instance" % self.klass.name
	def __repr__(self): return "<%s instance>" % self.klass.name

	def get(self, name: Token) -> VALUE:
		""" Fields shadow methods. Methods come back bound, and never get cached. """
		try: return self.fields[name.lexeme]
		except KeyError: pass
		method = self.klass.find_method(name.lexeme)
		if method is None: raise UndefinedProperty(name)
		return method.bind(self)

	def set(self, name: Token, value: VALUE):
		self.fields[name.lexeme] = value
