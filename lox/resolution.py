"""
All the static binding resolution stuff goes here.
By the time this pass is finished, every local variable reference
(including "this" and "super") knows how many scopes out its binding lives.
References left with no distance are globals, to be found by name at run-time.
"""
from typing import Sequence, Iterable
from boozetools.support.foundation import Visitor
from . import syntax
from .diagnostics import Report, Pic
from .ontology import Token, THIS, SUPER, INIT
from .space import Layer, AlreadyExists

# What kind of code are we in the middle of?
NORMAL = "normal"
FUNCTION = "function"
METHOD = "method"
INITIALIZER = "initializer"

# What kind of class body, if any, surrounds us?
NO_CLASS = "none"
CLASS = "class"
SUBCLASS = "subclass"

class TopDown(Visitor):
	"""
	Convenience base-class to handle the dreary bits of a
	perfectly ordinary top-down walk through a syntax tree.
	"""

	def tour(self, items:Iterable):
		for i in items:
			self.visit(i)

	def visit_Literal(self, l:syntax.Literal): pass

	def visit_Grouping(self, it:syntax.Grouping):
		self.visit(it.expr)

	def visit_UnaryExp(self, expr:syntax.UnaryExp):
		self.visit(expr.arg)

	def visit_BinExp(self, it:syntax.BinExp):
		self.visit(it.lhs)
		self.visit(it.rhs)

	def visit_ShortCutExp(self, it:syntax.ShortCutExp):
		self.visit(it.lhs)
		self.visit(it.rhs)

	def visit_Call(self, expr:syntax.Call):
		self.visit(expr.callee)
		self.tour(expr.args)

	def visit_GetField(self, expr:syntax.GetField):
		# Properties are looked up dynamically, so only the object matters here.
		self.visit(expr.obj)

	def visit_SetField(self, expr:syntax.SetField):
		self.visit(expr.expr)
		self.visit(expr.obj)

	def visit_ExprStmt(self, stmt:syntax.ExprStmt):
		self.visit(stmt.expr)

	def visit_Print(self, stmt:syntax.Print):
		self.visit(stmt.expr)

	def visit_IfStmt(self, stmt:syntax.IfStmt):
		self.visit(stmt.condition)
		self.visit(stmt.then_part)
		if stmt.else_part is not None:
			self.visit(stmt.else_part)

	def visit_WhileStmt(self, stmt:syntax.WhileStmt):
		self.visit(stmt.condition)
		self.visit(stmt.body)

class Resolver(TopDown):
	"""
	One pass, once, before anything runs. It does two jobs:

	* Annotate each variable, assignment, this, and super with its scope distance.
	* Reject programs that break the scoping rules.

	Every problem goes into the report; the pass never stops early.
	Top-level code has no scope on the stack: those names are globals.
	"""
	report: Report
	_scopes: list[Layer]
	_function: str
	_class: str

	def __init__(self, report:Report):
		self.report = report
		self._scopes = []
		self._function = NORMAL
		self._class = NO_CLASS

	def _begin_scope(self) -> Layer:
		layer = Layer()
		self._scopes.append(layer)
		return layer

	def _end_scope(self):
		self._scopes.pop()

	def _declare(self, name:Token):
		if not self._scopes: return
		scope = self._scopes[-1]
		try: scope.declare(name)
		except AlreadyExists:
			self.report.already_declared(scope.locate(name.lexeme), name)

	def _define(self, name:Token):
		if self._scopes: self._scopes[-1].define(name.lexeme)

	def _resolve_local(self, ref:syntax.Reference, key:str):
		for distance, scope in enumerate(reversed(self._scopes)):
			if key in scope:
				ref.distance = distance
				return

	def _resolve_function(self, fn:syntax.FunDecl, kind:str):
		enclosing = self._function
		self._function = kind
		self._begin_scope()
		for p in fn.params:
			self._declare(p)
			self._define(p)
		self.tour(fn.body)
		self._end_scope()
		self._function = enclosing

	def visit_Block(self, stmt:syntax.Block):
		self._begin_scope()
		self.tour(stmt.statements)
		self._end_scope()

	def visit_VarDecl(self, stmt:syntax.VarDecl):
		self._declare(stmt.name)
		if stmt.initializer is not None:
			self.visit(stmt.initializer)
		self._define(stmt.name)

	def visit_FunDecl(self, stmt:syntax.FunDecl):
		# Define eagerly, so the function can refer to itself recursively.
		self._declare(stmt.name)
		self._define(stmt.name)
		self._resolve_function(stmt, FUNCTION)

	def visit_ClassDecl(self, stmt:syntax.ClassDecl):
		enclosing = self._class
		self._class = CLASS
		self._declare(stmt.name)
		self._define(stmt.name)

		if stmt.superclass is not None:
			if stmt.superclass.name.lexeme == stmt.name.lexeme:
				self.report.inherit_from_self(stmt.superclass.name)
			self._class = SUBCLASS
			self.visit(stmt.superclass)
			self._begin_scope().plant(SUPER)

		self._begin_scope().plant(THIS)
		for method in stmt.methods:
			kind = INITIALIZER if method.name.lexeme == INIT else METHOD
			self._resolve_function(method, kind)
		self._end_scope()

		if stmt.superclass is not None:
			self._end_scope()
		self._class = enclosing

	def visit_ReturnStmt(self, stmt:syntax.ReturnStmt):
		if self._function == NORMAL:
			self.report.return_at_top_level(stmt.keyword)
		if stmt.value is not None:
			if self._function == INITIALIZER:
				self.report.return_value_from_initializer(stmt.keyword)
			self.visit(stmt.value)

	def visit_Lookup(self, expr:syntax.Lookup):
		key = expr.name.lexeme
		if self._scopes and self._scopes[-1].is_pending(key):
			self.report.read_own_initializer(expr.name)
		self._resolve_local(expr, key)

	def visit_Assign(self, expr:syntax.Assign):
		self.visit(expr.expr)
		self._resolve_local(expr, expr.name.lexeme)

	def visit_This(self, expr:syntax.This):
		if self._class == NO_CLASS:
			self.report.this_outside_class(expr.name)
		else:
			self._resolve_local(expr, THIS)

	def visit_Super(self, expr:syntax.Super):
		if self._class == NO_CLASS:
			self.report.super_outside_class(expr.name)
		elif self._class == CLASS:
			self.report.super_without_superclass(expr.name)
		else:
			self._resolve_local(expr, SUPER)

def resolve(statements:Sequence[syntax.Statement], report:Report) -> list[Pic]:
	"""
	Annotate the statements in place and return whatever static errors turned up.
	The caller must not run the program if this list is not empty.
	"""
	before = len(report.issues)
	Resolver(report).tour(statements)
	return report.issues[before:]
