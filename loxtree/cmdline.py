"""
This is a tree-walking interpreter for the Lox programming language.

For example:

    loxtree program.lox

will run program.lox if possible, or else try to explain why not.

    loxtree

with no program starts an interactive prompt. Each line you type
runs straight away, and later lines can see what earlier lines defined.

    loxtree -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path

NO_INPUT = 66

parser = argparse.ArgumentParser(
	prog="loxtree",
	description="Tree-walking interpreter for the Lox programming language.",
)
parser.add_argument("program", nargs="?", help="try examples/classes.lox for example.")
parser.add_argument('-c', "--check", action="count", help="Check the program verbosely but do not actually execute the program.")
parser.add_argument('-u', "--unused", action="store_true", help="Also complain about local variables that are never used.")
parser.add_argument("--max-issues", type=int, metavar="N", help="Give up after N static issues.")

def run(args) -> int:
	from .diagnostics import Report, TooManyIssues
	from .resolution import Yuck
	from .tree_walker.executive import Session, OK, STATIC
	report = Report(verbose=args.check, max_issues=args.max_issues)
	session = Session(report=report, check_unused=args.unused)
	try:
		if args.program is None:
			return repl(session)
		path = Path.cwd() / args.program
		if args.check:
			try: text = path.read_text(encoding="utf-8")
			except OSError as ex:
				print("Could not read %s: %s" % (path, ex.strerror), file=sys.stderr)
				return NO_INPUT
			try: session.check(text, path)
			except Yuck:
				report.complain_to_console()
				return STATIC
			print("Looks plausible to me.", file=sys.stderr)
			return OK
		try: return session.run_file(path)
		except OSError as ex:
			print("Could not read %s: %s" % (path, ex.strerror), file=sys.stderr)
			return NO_INPUT
	except TooManyIssues:
		report.complain_to_console()
		print(" *"*35, file=sys.stderr)
		print("Giving up after a few issues. One crisis at a time, eh?", file=sys.stderr)
		return STATIC

def repl(session) -> int:
	""" Each line is its own submission. Errors spoil only the line that made them. """
	from .diagnostics import TooManyIssues
	while True:
		try: line = input("> ")
		except EOFError:
			print()
			return 0
		try: session.run(line)
		except TooManyIssues: session.report.complain_to_console()

def main():
	sys.exit(run(parser.parse_args()))
