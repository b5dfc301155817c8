"""
Parenthesized prefix forms for syntax trees, as in (+ 1.0 (group 2.0)).
Mainly for looking at what the parser made of something.
"""
from boozetools.support.foundation import Visitor
from . import syntax

class Sexp(Visitor):

	def _form(self, head:str, *parts) -> str:
		return "(%s)" % " ".join([head] + [self.visit(p) for p in parts])

	def visit_Literal(self, l:syntax.Literal):
		if l.value is None: return "nil"
		if l.value is True: return "true"
		if l.value is False: return "false"
		if isinstance(l.value, float): return repr(l.value)
		return l.value

	def visit_Grouping(self, it:syntax.Grouping): return self._form("group", it.expr)
	def visit_UnaryExp(self, it:syntax.UnaryExp): return self._form(it.op.lexeme, it.arg)
	def visit_BinExp(self, it:syntax.BinExp): return self._form(it.op.lexeme, it.lhs, it.rhs)
	def visit_Lookup(self, it:syntax.Lookup): return it.name.lexeme
	def visit_Assign(self, it:syntax.Assign): return "(= %s %s)" % (it.name.lexeme, self.visit(it.expr))
	def visit_This(self, it:syntax.This): return "this"
	def visit_Super(self, it:syntax.Super): return "(super %s)" % it.method.lexeme

	def visit_ShortCutExp(self, it:syntax.ShortCutExp): return self._form(it.op.lexeme, it.lhs, it.rhs)

	def visit_Call(self, it:syntax.Call):
		if not it.args: return "(call %s)" % self.visit(it.callee)
		return "(call %s %s)" % (self.visit(it.callee), ", ".join(self.visit(a) for a in it.args))

	def visit_GetField(self, it:syntax.GetField):
		return "(get %s %s)" % (self.visit(it.obj), it.field_name.lexeme)

	def visit_SetField(self, it:syntax.SetField):
		return "(set %s %s %s)" % (self.visit(it.obj), it.field_name.lexeme, self.visit(it.expr))

	def visit_ExprStmt(self, it:syntax.ExprStmt): return self._form(";", it.expr)
	def visit_Print(self, it:syntax.Print): return self._form("print", it.expr)
	def visit_ReturnStmt(self, it:syntax.ReturnStmt):
		return "(return)" if it.value is None else self._form("return", it.value)

	def visit_VarDecl(self, it:syntax.VarDecl):
		if it.initializer is None: return "(var %s)" % it.name.lexeme
		return "(var %s %s)" % (it.name.lexeme, self.visit(it.initializer))

	def visit_Block(self, it:syntax.Block): return self._form("block", *it.statements)

	def visit_IfStmt(self, it:syntax.IfStmt):
		if it.else_part is None: return self._form("if", it.condition, it.then_part)
		return self._form("if-else", it.condition, it.then_part, it.else_part)

	def visit_WhileStmt(self, it:syntax.WhileStmt): return self._form("while", it.condition, it.body)

	def visit_FunDecl(self, it:syntax.FunDecl):
		params = " ".join(p.lexeme for p in it.params)
		body = " ".join(self.visit(s) for s in it.body)
		return "(fun %s (%s) %s)" % (it.name.lexeme, params, body)

	def visit_ClassDecl(self, it:syntax.ClassDecl):
		head = it.name.lexeme
		if it.superclass is not None: head += " < " + it.superclass.name.lexeme
		return "(class %s %s)" % (head, " ".join(self.visit(m) for m in it.methods))

_sexp = Sexp()

def show(node) -> str:
	return _sexp.visit(node)
