"""
These most-fundamental classes are separate from the rest
to avoid various circular-import scenarios. Every AST node
is a Phrase, and every Phrase can say which tokens bound it,
which is how diagnostics find their way back to the source.
"""
from typing import Any, Optional

class Phrase:
	def left(self) -> "Token":
		""" Return the leftmost token of this phrase """
		raise NotImplementedError(type(self))
	def right(self) -> "Token":
		""" Return the rightmost token of this phrase """
		raise NotImplementedError(type(self))
	def span(self) -> tuple["Token", "Token"]: return self.left(), self.right()

class Token(Phrase):
	"""
	The scanner hands these to the parser. The kind is an upper-case name
	like LEFT_PAREN or IDENTIFIER; reserved words use their own name (VAR, CLASS).
	"""
	__slots__ = ("kind", "lexeme", "literal", "line", "offset")
	
	def __init__(self, kind:str, lexeme:str, literal:Any, line:int, offset:int=0):
		self.kind = kind
		self.lexeme = lexeme
		self.literal = literal
		self.line = line
		self.offset = offset
	
	def __repr__(self): return "<%s %r @%d>" % (self.kind, self.lexeme, self.line)
	
	def left(self): return self
	def right(self): return self
	
	def describe(self) -> str:
		""" The one-line form the tokenizer prints. """
		return "%s %s %s" % (self.kind, self.lexeme, _literal_text(self.literal))

def _literal_text(literal:Optional[Any]) -> str:
	if literal is None: return "null"
	if isinstance(literal, float): return repr(literal)
	return str(literal)

THIS = "this"
SUPER = "super"
INIT = "init"
