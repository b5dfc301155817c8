import sys, random
from typing import Optional
from boozetools.support.failureprone import SourceText, illustration

from .ontology import Phrase, Token

class TooManyIssues(Exception):
	pass

def _outburst():
	particle = ["Oh, ", "Well, ", "Aw, ", "", ""]
	minced_oaths = [
		'Blast', 'Bother', 'Confound it', 'Crud', 'Drat', 'Fiddlesticks',
		'Gadzooks', 'Good Grief', 'Great Scott', 'Nuts', 'Rats', 'Shucks',
	]
	resignations = [
		'I cannot continue.',
		'This program will not run as written.',
		'Something needs fixing first.',
	]
	return "%s%s! %s"%tuple(map(random.choice, (particle, minced_oaths, resignations)))

class Report:
	"""
	Collects the issues found by the scanner, parser, resolver, and run-time.
	Nothing is printed until somebody asks: the scanner and parser keep going
	after a mistake, and the resolver notes every scoping error before giving up.
	"""
	_issues : list["Pic"]

	def __init__(self, *, verbose:int=0, max_issues:Optional[int]=None):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._max_issues = max_issues
		self._source = None
		self._size = 0

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)

	@property
	def issues(self) -> list["Pic"]: return list(self._issues)

	def set_source(self, text:str, path=None):
		""" Keep the program text around so complaints can illustrate it. """
		self._source = SourceText(text, filename=None if path is None else str(path))
		self._size = len(text)

	def issue(self, it:"Pic"):
		self._issues.append(it)
		if len(self._issues) == self._max_issues:
			raise TooManyIssues(self)

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		_bemoan(self._issues, self._source, self._size)

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(_outburst()+" "+message)

	# Methods the scanner calls:
	def unexpected_character(self, line:int, offset:int, char:str):
		where = Token("ERROR", char, None, line, offset)
		self.issue(Pic("Unexpected character: %s" % char, [Annotation(where, "here")]))

	def unterminated_string(self, line:int, offset:int, text:str):
		where = Token("ERROR", text, None, line, offset)
		self.issue(Pic("Unterminated string.", [Annotation(where, "starts here")]))

	# Methods the parser calls:
	def parse_error(self, token:Token, message:str):
		where = "at end" if token.kind == "EOF" else "at '%s'" % token.lexeme
		self.issue(Pic("Error %s: %s" % (where, message), [Annotation(token, "got confused here")]))

	def invalid_assignment_target(self, equals:Token, target:Phrase):
		intro = "Error at '=': Invalid assignment target."
		self.issue(Pic(intro, [Annotation(target, "can't assign to this")]))

	def too_many(self, token:Token, what:str):
		intro = "Error at '%s': Can't have more than 255 %s." % (token.lexeme, what)
		self.issue(Pic(intro, [Annotation(token)]))

	# Methods the resolver calls:
	def already_declared(self, first:Token, guilty:Token):
		intro = "Error at '%s': Already a variable with this name in this scope." % guilty.lexeme
		problem = [Annotation(guilty, "Redeclared here"), Annotation(first, "Earliest definition")]
		self.issue(Pic(intro, problem))

	def read_own_initializer(self, guilty:Token):
		intro = "Error at '%s': Can't read local variable in its own initializer." % guilty.lexeme
		self.issue(Pic(intro, [Annotation(guilty)]))

	def return_at_top_level(self, keyword:Token):
		self.issue(Pic("Error at 'return': Can't return from top-level code.", [Annotation(keyword)]))

	def return_value_from_initializer(self, keyword:Token):
		self.issue(Pic("Error at 'return': Can't return a value from an initializer.", [Annotation(keyword)]))

	def this_outside_class(self, keyword:Token):
		self.issue(Pic("Error at 'this': Can't use 'this' outside of a class.", [Annotation(keyword)]))

	def super_outside_class(self, keyword:Token):
		self.issue(Pic("Error at 'super': Can't use 'super' outside of a class.", [Annotation(keyword)]))

	def super_without_superclass(self, keyword:Token):
		intro = "Error at 'super': Can't use 'super' in a class with no superclass."
		self.issue(Pic(intro, [Annotation(keyword)]))

	def inherit_from_self(self, guilty:Token):
		intro = "Error at '%s': A class can't inherit from itself." % guilty.lexeme
		self.issue(Pic(intro, [Annotation(guilty)]))

	# The run-time gets exactly one complaint before it stops:
	def runtime_failure(self, ex):
		self.issue(Pic(ex.message, [Annotation(ex.token)]))


class Annotation:
	token: Token
	width: int
	caption: str
	def __init__(self, node:Phrase, caption:str=""):
		first, last = node.span()
		self.token = first
		self.width = max(1, last.offset + len(last.lexeme) - first.offset)
		self.caption = caption

	@property
	def line(self): return self.token.line

	def illustrate(self, source:Optional[SourceText], size:int=0):
		if source is None or not size:
			return "% 6d | %s  %s" % (self.line, self.token.lexeme, self.caption)
		offset = min(self.token.offset, size - 1)
		row, col = source.find_row_col(offset)
		single_line = source.line_of_text(row)
		return illustration(single_line, col, self.width, prefix='% 6d |' % row, caption=self.caption)

class Pic:
	def __init__(self, intro:str, anns:list[Annotation]):
		self._intro, self._anns = intro, anns

	@property
	def intro(self): return self._intro

	@property
	def lines(self) -> list[int]: return [ann.line for ann in self._anns]

	def headline(self):
		""" The classic one-liner, e.g. "[line 3] Error at 'x': ..." """
		if self._anns: return "[line %d] %s" % (self._anns[0].line, self._intro)
		return self._intro

	def as_text(self, source:Optional[SourceText]=None, size:int=0):
		lines = [self.headline(), ""]
		for ann in self._anns:
			lines.append(ann.illustrate(source, size))
		return '\n'.join(lines)

def _bemoan(issues, source:Optional[SourceText]=None, size:int=0):
	""" Emit all the issues to the console. """
	if issues:
		print("*"*60, file=sys.stderr)
		print(_outburst(), file=sys.stderr)
	for i in issues:
		print("  -"*20, file=sys.stderr)
		print(i.as_text(source, size), file=sys.stderr)
	sys.stderr.flush()
