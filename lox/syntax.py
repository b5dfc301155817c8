"""
The set of parse-nodes in simple form.
The parser calls these constructors directly as it descends.
Class-level type annotations make peace with the IDE wherever later passes add fields.
"""
from typing import Optional, Sequence, Any
from .ontology import Phrase, Token

class ValueExpression(Phrase): pass

class Statement(Phrase): pass

class Literal(ValueExpression):
	def __init__(self, value:Any, token:Token):
		self.value = value
		self.token = token
	def left(self): return self.token
	def right(self): return self.token
	def __repr__(self): return "<lit %r>" % (self.value,)

class Grouping(ValueExpression):
	def __init__(self, _open:Token, expr:ValueExpression, _close:Token):
		self._open, self.expr, self._close = _open, expr, _close
	def left(self): return self._open
	def right(self): return self._close

class UnaryExp(ValueExpression):
	def __init__(self, op:Token, arg:ValueExpression):
		self.op, self.arg = op, arg
	def left(self): return self.op
	def right(self): return self.arg.right()

class BinExp(ValueExpression):
	def __init__(self, lhs:ValueExpression, op:Token, rhs:ValueExpression):
		self.lhs, self.op, self.rhs = lhs, op, rhs
	def left(self): return self.lhs.left()
	def right(self): return self.rhs.right()

class ShortCutExp(BinExp):
	""" The "and" / "or" forms: they decide whether to evaluate the right-hand side. """
	pass

class Reference(ValueExpression):
	"""
	Anything the resolver binds to a scope. The distance counts
	enclosing-scope hops from the point of use to the declaring scope.
	It stays None for globals, which are found by name at run-time.
	"""
	name: Token
	distance: Optional[int] = None  # Resolver fills this in.
	def left(self): return self.name
	def right(self): return self.name

class Lookup(Reference):
	def __init__(self, name:Token): self.name = name
	def __repr__(self): return "<ref:%s>" % self.name.lexeme

class Assign(Reference):
	def __init__(self, name:Token, expr:ValueExpression):
		self.name, self.expr = name, expr
	def right(self): return self.expr.right()

class This(Reference):
	def __init__(self, keyword:Token): self.name = keyword
	def __repr__(self): return "<this>"

class Super(Reference):
	def __init__(self, keyword:Token, method:Token):
		self.name, self.method = keyword, method
	def right(self): return self.method
	def __repr__(self): return "<super.%s>" % self.method.lexeme

class Call(ValueExpression):
	def __init__(self, callee:ValueExpression, paren:Token, args:Sequence[ValueExpression]):
		self.callee, self.paren, self.args = callee, paren, args
	def left(self): return self.callee.left()
	def right(self): return self.paren

class GetField(ValueExpression):
	def __init__(self, obj:ValueExpression, field_name:Token):
		self.obj, self.field_name = obj, field_name
	def left(self): return self.obj.left()
	def right(self): return self.field_name

class SetField(ValueExpression):
	def __init__(self, obj:ValueExpression, field_name:Token, expr:ValueExpression):
		self.obj, self.field_name, self.expr = obj, field_name, expr
	def left(self): return self.obj.left()
	def right(self): return self.expr.right()

###############################################################################

class ExprStmt(Statement):
	def __init__(self, expr:ValueExpression): self.expr = expr
	def left(self): return self.expr.left()
	def right(self): return self.expr.right()

class Print(Statement):
	def __init__(self, keyword:Token, expr:ValueExpression):
		self.keyword, self.expr = keyword, expr
	def left(self): return self.keyword
	def right(self): return self.expr.right()

class VarDecl(Statement):
	def __init__(self, name:Token, initializer:Optional[ValueExpression]):
		self.name, self.initializer = name, initializer
	def left(self): return self.name
	def right(self): return (self.initializer or self.name).right()
	def __repr__(self): return "<var %s>" % self.name.lexeme

class Block(Statement):
	def __init__(self, _open:Token, statements:Sequence[Statement], _close:Token):
		self._open, self.statements, self._close = _open, statements, _close
	def left(self): return self._open
	def right(self): return self._close

class IfStmt(Statement):
	def __init__(self, keyword:Token, condition:ValueExpression, then_part:Statement, else_part:Optional[Statement]):
		self.keyword = keyword
		self.condition = condition
		self.then_part = then_part
		self.else_part = else_part
	def left(self): return self.keyword
	def right(self): return (self.else_part or self.then_part).right()

class WhileStmt(Statement):
	def __init__(self, keyword:Token, condition:ValueExpression, body:Statement):
		self.keyword, self.condition, self.body = keyword, condition, body
	def left(self): return self.keyword
	def right(self): return self.body.right()

class ReturnStmt(Statement):
	def __init__(self, keyword:Token, value:Optional[ValueExpression]):
		self.keyword, self.value = keyword, value
	def left(self): return self.keyword
	def right(self): return (self.value or self.keyword).right()

class FunDecl(Statement):
	""" Serves for free-standing functions and for methods alike. """
	def __init__(self, name:Token, params:Sequence[Token], body:Sequence[Statement], _close:Token):
		self.name, self.params, self.body, self._close = name, params, body, _close
	def left(self): return self.name
	def right(self): return self._close
	def __repr__(self): return "<fun %s/%d>" % (self.name.lexeme, len(self.params))

class ClassDecl(Statement):
	def __init__(self, name:Token, superclass:Optional[Lookup], methods:Sequence[FunDecl], _close:Token):
		self.name, self.superclass, self.methods, self._close = name, superclass, methods, _close
	def left(self): return self.name
	def right(self): return self._close
	def __repr__(self): return "<class %s>" % self.name.lexeme
