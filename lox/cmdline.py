"""
This is a tree-walking interpreter for the Lox scripting language.

{0}

For example:

    lox program.lox

will run program.lox if possible, or else try to explain why not.

    lox -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path

EX_DATAERR = 65   # Scan, parse, or resolve trouble: the program is bad.
EX_SOFTWARE = 70  # The program went wrong while running.

parser = argparse.ArgumentParser(
	prog="lox",
	description="Tree-walking interpreter for the Lox scripting language.",
)
parser.add_argument("program", help="Path to a Lox source file.")
parser.add_argument('-c', "--check", action="count", help="Check the program verbosely but do not actually execute the program.")
parser.add_argument('-t', "--tokenize", action="store_true", help="Print the tokens, one per line, and stop.")
parser.add_argument('-p', "--parse", action="store_true", help="Print the syntax tree of each top-level statement, and stop.")
parser.add_argument('-e', "--evaluate", action="store_true", help="Treat the file as a single expression and print its value.")

def run(args):
	from .diagnostics import Report, TooManyIssues
	from .tree_walker.executive import Yuck, prepare, run_program, evaluate_expression
	from .tree_walker.evaluator import LoxRuntimeError
	path = Path.cwd() / args.program
	text = path.read_text(encoding="utf-8")
	report = Report(verbose=args.check, max_issues=20)
	try:
		if args.tokenize: return _tokenize(text, report)
		if args.parse: return _parse(text, report)
		if args.evaluate:
			print(evaluate_expression(text, report))
			return 0
		statements = prepare(text, report, path)
	except Yuck:
		assert report.sick()
		report.complain_to_console()
		return EX_DATAERR
	except TooManyIssues:
		report.complain_to_console()
		print(" *"*35, file=sys.stderr)
		print("Giving up after a few issues. One crisis at a time, eh?", file=sys.stderr)
		return EX_DATAERR
	except LoxRuntimeError as ex:
		# Only the lone-expression mode can get here.
		report.runtime_failure(ex)
		report.complain_to_console()
		return EX_SOFTWARE
	if args.check:
		print("Looks plausible to me.", file=sys.stderr)
		return 0
	try:
		run_program(statements)
	except LoxRuntimeError as ex:
		report.runtime_failure(ex)
		report.complain_to_console()
		return EX_SOFTWARE
	return 0

def _tokenize(text, report):
	from .front_end import scan
	report.set_source(text)
	for token in scan(text, report):
		print(token.describe())
	if report.sick():
		report.complain_to_console()
		return EX_DATAERR
	return 0

def _parse(text, report):
	from .front_end import parse_text
	from .pretty import show
	report.set_source(text)
	statements = parse_text(text, report)
	if report.sick():
		report.complain_to_console()
		return EX_DATAERR
	for stmt in statements:
		print(show(stmt))
	return 0

def main():
	if len(sys.argv) > 1:
		exit(run(parser.parse_args()))
	else:
		print(__doc__.strip().format(parser.format_usage()))
