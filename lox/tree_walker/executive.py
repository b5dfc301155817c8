"""
The overall control for the run-time:
get a program from text to resolved statements, then run them.
"""
from pathlib import Path
from typing import Optional, Sequence
from .. import syntax
from ..diagnostics import Report
from ..front_end import scan, Parser, parse_expression
from ..resolution import resolve
from .runtime import TreeWalker, stringify

class Yuck(Exception):
	"""
	The first argument will be the name of the pass fraught with error.
	The end-user might not care about this, but it's handy for testing.
	"""
	pass

def prepare(text:str, report:Report, path:Optional[Path]=None) -> list[syntax.Statement]:
	""" Scan, parse, and resolve. Anything wrong raises Yuck, leaving the details in the report. """
	report.set_source(text, path)
	tokens = scan(text, report)
	if report.sick(): raise Yuck("scan")
	report.info("Scanned", len(tokens), "tokens")
	statements = Parser(tokens, report).program()
	if report.sick(): raise Yuck("parse")
	report.info("Parsed", len(statements), "top-level statement(s)")
	resolve(statements, report)
	if report.sick(): raise Yuck("resolve")
	report.info("Resolved", path or "<text>")
	return statements

def run_program(statements:Sequence[syntax.Statement], walker:Optional[TreeWalker]=None) -> TreeWalker:
	"""
	Statements must already be resolved, and without complaint.
	A runtime error stops the run and propagates to the caller.
	"""
	if walker is None: walker = TreeWalker()
	for stmt in statements:
		walker.interpret(stmt)
	return walker

def evaluate_expression(text:str, report:Report) -> str:
	"""
	A lone expression needs no resolver: with no scopes, every name is global.
	Returns the value the way print would show it.
	"""
	report.set_source(text)
	expr = parse_expression(text, report)
	if report.sick(): raise Yuck("parse")
	return stringify(TreeWalker().evaluate(expr))
