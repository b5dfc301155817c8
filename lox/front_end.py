"""
Text in, statements out.

The scanner is pattern-driven: each alternative of one big regular expression
names a scan_* method that decides what (if any) token to emit.
The parser is plain recursive descent with one token of look-ahead.
"""
import re
import sys
from typing import Optional
from . import syntax
from .diagnostics import Report
from .ontology import Token

class LoxParseError(Exception):
	""" Unwinds the parser to the nearest statement boundary. """
	pass

RESERVED = frozenset("""
	and class else false for fun if nil or print return super this true var while
""".split())

PUNCTUATION = {
	"(": "LEFT_PAREN", ")": "RIGHT_PAREN", "{": "LEFT_BRACE", "}": "RIGHT_BRACE",
	",": "COMMA", ".": "DOT", "-": "MINUS", "+": "PLUS", ";": "SEMICOLON",
	"*": "STAR", "/": "SLASH",
	"!": "BANG", "!=": "BANG_EQUAL", "=": "EQUAL", "==": "EQUAL_EQUAL",
	"<": "LESS", "<=": "LESS_EQUAL", ">": "GREATER", ">=": "GREATER_EQUAL",
}

_PATTERN = re.compile(r"""
	(?P<ignore>[ \t\r]+|//[^\n]*)
	|(?P<newline>\n)
	|(?P<punctuation>[!=<>]=?|[(){},.\-+;*/])
	|(?P<number>[0-9]+(?:\.[0-9]+)?)
	|(?P<string>"[^"]*")
	|(?P<unterminated>"[^"]*\Z)
	|(?P<word>[A-Za-z_][A-Za-z0-9_]*)
	|(?P<stray>.)
""", re.VERBOSE)

class Scanner:
	def __init__(self, text:str, report:Report):
		self.text = text
		self.report = report
		self.tokens = []
		self.line = 1

	def run(self) -> list[Token]:
		for match in _PATTERN.finditer(self.text):
			getattr(self, "scan_"+match.lastgroup)(match)
		self.tokens.append(Token("EOF", "", None, self.line, len(self.text)))
		return self.tokens

	def _token(self, kind:str, match, literal=None):
		self.tokens.append(Token(kind, match.group(), literal, self.line, match.start()))

	def scan_ignore(self, match): pass

	def scan_newline(self, match):
		self.line += 1

	def scan_punctuation(self, match):
		self._token(PUNCTUATION[match.group()], match)

	def scan_number(self, match):
		self._token("NUMBER", match, float(match.group()))

	def scan_string(self, match):
		self._token("STRING", match, match.group()[1:-1])
		self.line += match.group().count("\n")

	def scan_unterminated(self, match):
		self.report.unterminated_string(self.line, match.start(), match.group())
		self.line += match.group().count("\n")

	def scan_word(self, match):
		word = sys.intern(match.group())
		self._token(word.upper() if word in RESERVED else "IDENTIFIER", match)

	def scan_stray(self, match):
		self.report.unexpected_character(self.line, match.start(), match.group())

def scan(text:str, report:Report) -> list[Token]:
	return Scanner(text, report).run()

###############################################################################

MAX_ARGUMENTS = 255

_SYNC_POINTS = frozenset(["CLASS", "FUN", "VAR", "FOR", "IF", "WHILE", "PRINT", "RETURN"])

class Parser:
	def __init__(self, tokens:list[Token], report:Report):
		assert tokens and tokens[-1].kind == "EOF"
		self.tokens = tokens
		self.report = report
		self.current = 0

	# The bits of machinery every rule uses:

	def peek(self) -> Token:
		return self.tokens[self.current]

	def previous(self) -> Token:
		return self.tokens[self.current - 1]

	def at_end(self) -> bool:
		return self.peek().kind == "EOF"

	def check(self, *kinds:str) -> bool:
		return self.peek().kind in kinds

	def advance(self) -> Token:
		if not self.at_end(): self.current += 1
		return self.previous()

	def match(self, *kinds:str) -> Optional[Token]:
		if self.check(*kinds): return self.advance()

	def consume(self, kind:str, message:str) -> Token:
		if self.check(kind): return self.advance()
		self.report.parse_error(self.peek(), message)
		raise LoxParseError(self.peek())

	def synchronize(self):
		self.advance()
		while not self.at_end():
			if self.previous().kind == "SEMICOLON": return
			if self.peek().kind in _SYNC_POINTS: return
			self.advance()

	# Declarations and statements:

	def program(self) -> list[syntax.Statement]:
		statements = []
		while not self.at_end():
			stmt = self.declaration()
			if stmt is not None: statements.append(stmt)
		return statements

	def declaration(self) -> Optional[syntax.Statement]:
		try:
			if self.match("CLASS"): return self.class_declaration()
			if self.match("FUN"): return self.function("function")
			if self.match("VAR"): return self.var_declaration()
			return self.statement()
		except LoxParseError:
			self.synchronize()
			return None

	def class_declaration(self) -> syntax.ClassDecl:
		name = self.consume("IDENTIFIER", "Expect class name.")
		superclass = None
		if self.match("LESS"):
			superclass = syntax.Lookup(self.consume("IDENTIFIER", "Expect superclass name."))
		self.consume("LEFT_BRACE", "Expect '{' before class body.")
		methods = []
		while not self.check("RIGHT_BRACE") and not self.at_end():
			methods.append(self.function("method"))
		close = self.consume("RIGHT_BRACE", "Expect '}' after class body.")
		return syntax.ClassDecl(name, superclass, methods, close)

	def function(self, kind:str) -> syntax.FunDecl:
		name = self.consume("IDENTIFIER", "Expect %s name." % kind)
		self.consume("LEFT_PAREN", "Expect '(' after %s name." % kind)
		params = []
		if not self.check("RIGHT_PAREN"):
			while True:
				if len(params) >= MAX_ARGUMENTS:
					self.report.too_many(self.peek(), "parameters")
				params.append(self.consume("IDENTIFIER", "Expect parameter name."))
				if not self.match("COMMA"): break
		self.consume("RIGHT_PAREN", "Expect ')' after parameters.")
		self.consume("LEFT_BRACE", "Expect '{' before %s body." % kind)
		body, close = self.block_contents()
		return syntax.FunDecl(name, params, body, close)

	def var_declaration(self) -> syntax.VarDecl:
		name = self.consume("IDENTIFIER", "Expect variable name.")
		initializer = self.expression() if self.match("EQUAL") else None
		self.consume("SEMICOLON", "Expect ';' after variable declaration.")
		return syntax.VarDecl(name, initializer)

	def statement(self) -> syntax.Statement:
		if self.match("FOR"): return self.for_statement()
		if self.match("IF"): return self.if_statement()
		if self.match("PRINT"): return self.print_statement()
		if self.match("RETURN"): return self.return_statement()
		if self.match("WHILE"): return self.while_statement()
		if self.match("LEFT_BRACE"):
			_open = self.previous()
			statements, close = self.block_contents()
			return syntax.Block(_open, statements, close)
		return self.expression_statement()

	def block_contents(self) -> tuple[list[syntax.Statement], Token]:
		""" Call this just after consuming the opening brace. """
		statements = []
		while not self.check("RIGHT_BRACE") and not self.at_end():
			stmt = self.declaration()
			if stmt is not None: statements.append(stmt)
		close = self.consume("RIGHT_BRACE", "Expect '}' after block.")
		return statements, close

	def for_statement(self) -> syntax.Statement:
		"""
		There is no for-loop node: it becomes a while-loop,
		with blocks around it for the initializer and the increment.
		"""
		keyword = self.previous()
		self.consume("LEFT_PAREN", "Expect '(' after 'for'.")
		if self.match("SEMICOLON"): initializer = None
		elif self.match("VAR"): initializer = self.var_declaration()
		else: initializer = self.expression_statement()

		condition = None if self.check("SEMICOLON") else self.expression()
		self.consume("SEMICOLON", "Expect ';' after loop condition.")
		increment = None if self.check("RIGHT_PAREN") else self.expression()
		self.consume("RIGHT_PAREN", "Expect ')' after for clauses.")
		body = self.statement()

		if increment is not None:
			body = syntax.Block(body.left(), [body, syntax.ExprStmt(increment)], body.right())
		if condition is None:
			condition = syntax.Literal(True, keyword)
		loop = syntax.WhileStmt(keyword, condition, body)
		if initializer is None: return loop
		return syntax.Block(keyword, [initializer, loop], loop.right())

	def if_statement(self) -> syntax.IfStmt:
		keyword = self.previous()
		self.consume("LEFT_PAREN", "Expect '(' after 'if'.")
		condition = self.expression()
		self.consume("RIGHT_PAREN", "Expect ')' after if condition.")
		then_part = self.statement()
		else_part = self.statement() if self.match("ELSE") else None
		return syntax.IfStmt(keyword, condition, then_part, else_part)

	def print_statement(self) -> syntax.Print:
		keyword = self.previous()
		value = self.expression()
		self.consume("SEMICOLON", "Expect ';' after value.")
		return syntax.Print(keyword, value)

	def return_statement(self) -> syntax.ReturnStmt:
		keyword = self.previous()
		value = None if self.check("SEMICOLON") else self.expression()
		self.consume("SEMICOLON", "Expect ';' after return value.")
		return syntax.ReturnStmt(keyword, value)

	def while_statement(self) -> syntax.WhileStmt:
		keyword = self.previous()
		self.consume("LEFT_PAREN", "Expect '(' after 'while'.")
		condition = self.expression()
		self.consume("RIGHT_PAREN", "Expect ')' after condition.")
		return syntax.WhileStmt(keyword, condition, self.statement())

	def expression_statement(self) -> syntax.ExprStmt:
		expr = self.expression()
		self.consume("SEMICOLON", "Expect ';' after expression.")
		return syntax.ExprStmt(expr)

	# Expressions, loosest-binding first:

	def expression(self) -> syntax.ValueExpression:
		return self.assignment()

	def assignment(self) -> syntax.ValueExpression:
		expr = self.logical_or()
		equals = self.match("EQUAL")
		if equals is None: return expr
		value = self.assignment()
		if isinstance(expr, syntax.Lookup):
			return syntax.Assign(expr.name, value)
		if isinstance(expr, syntax.GetField):
			return syntax.SetField(expr.obj, expr.field_name, value)
		# Complain, but there's no need to resynchronize.
		self.report.invalid_assignment_target(equals, expr)
		return expr

	def logical_or(self) -> syntax.ValueExpression:
		expr = self.logical_and()
		while self.check("OR"):
			op = self.advance()
			expr = syntax.ShortCutExp(expr, op, self.logical_and())
		return expr

	def logical_and(self) -> syntax.ValueExpression:
		expr = self.equality()
		while self.check("AND"):
			op = self.advance()
			expr = syntax.ShortCutExp(expr, op, self.equality())
		return expr

	def _left_assoc(self, operand, *kinds:str) -> syntax.ValueExpression:
		expr = operand()
		while self.check(*kinds):
			op = self.advance()
			expr = syntax.BinExp(expr, op, operand())
		return expr

	def equality(self):
		return self._left_assoc(self.comparison, "BANG_EQUAL", "EQUAL_EQUAL")

	def comparison(self):
		return self._left_assoc(self.term, "GREATER", "GREATER_EQUAL", "LESS", "LESS_EQUAL")

	def term(self):
		return self._left_assoc(self.factor, "MINUS", "PLUS")

	def factor(self):
		return self._left_assoc(self.unary, "SLASH", "STAR")

	def unary(self) -> syntax.ValueExpression:
		if self.check("BANG", "MINUS"):
			op = self.advance()
			return syntax.UnaryExp(op, self.unary())
		return self.call()

	def call(self) -> syntax.ValueExpression:
		expr = self.primary()
		while True:
			if self.match("LEFT_PAREN"):
				expr = self.finish_call(expr)
			elif self.match("DOT"):
				name = self.consume("IDENTIFIER", "Expect property name after '.'.")
				expr = syntax.GetField(expr, name)
			else:
				return expr

	def finish_call(self, callee:syntax.ValueExpression) -> syntax.Call:
		args = []
		if not self.check("RIGHT_PAREN"):
			while True:
				if len(args) >= MAX_ARGUMENTS:
					self.report.too_many(self.peek(), "arguments")
				args.append(self.expression())
				if not self.match("COMMA"): break
		paren = self.consume("RIGHT_PAREN", "Expect ')' after arguments.")
		return syntax.Call(callee, paren, args)

	def primary(self) -> syntax.ValueExpression:
		token = self.peek()
		kind = token.kind
		if kind in _CONSTANTS:
			self.advance()
			return syntax.Literal(_CONSTANTS[kind], token)
		if kind in ("NUMBER", "STRING"):
			self.advance()
			return syntax.Literal(token.literal, token)
		if kind == "THIS":
			self.advance()
			return syntax.This(token)
		if kind == "SUPER":
			self.advance()
			self.consume("DOT", "Expect '.' after 'super'.")
			method = self.consume("IDENTIFIER", "Expect superclass method name.")
			return syntax.Super(token, method)
		if kind == "IDENTIFIER":
			self.advance()
			return syntax.Lookup(token)
		if kind == "LEFT_PAREN":
			self.advance()
			expr = self.expression()
			close = self.consume("RIGHT_PAREN", "Expect ')' after expression.")
			return syntax.Grouping(token, expr, close)
		self.report.parse_error(token, "Expect expression.")
		raise LoxParseError(token)

_CONSTANTS = {"TRUE": True, "FALSE": False, "NIL": None}

###############################################################################

def parse_text(text:str, report:Report) -> list[syntax.Statement]:
	""" Scan and parse a whole program. Check the report before trusting the result. """
	return Parser(scan(text, report), report).program()

def parse_expression(text:str, report:Report) -> Optional[syntax.ValueExpression]:
	""" For evaluating a lone expression, as opposed to a program. """
	parser = Parser(scan(text, report), report)
	try:
		expr = parser.expression()
	except LoxParseError:
		return None
	if not parser.at_end():
		report.parse_error(parser.peek(), "Expect end of expression.")
	return expr
