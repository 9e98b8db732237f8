"""
This is the overall control for running Lox text: parse, resolve, interpret.

One Session holds one global environment, so a sequence of submissions
(as at the interactive prompt) can build on one another's definitions.
Each submission lands in one of three outcome classes, which double as
the conventional process exit codes.
"""
from pathlib import Path
from typing import Optional, TextIO
from ..diagnostics import Report
from ..front_end import parse_text
from ..ontology import Stmt
from ..resolution import resolve_program, Yuck
from .evaluator import Evaluator

OK = 0
STATIC = 65    # Scan, parse, or resolution problem. Nothing ran.
RUNTIME = 70   # Something ran, and then went wrong.

class Session:
	def __init__(self, *, out:Optional[TextIO]=None, err:Optional[TextIO]=None, report:Optional[Report]=None, check_unused:bool=False):
		self.report = Report() if report is None else report
		self.evaluator = Evaluator(out=out, err=err)
		self._check_unused = check_unused

	def check(self, text:str, path:Optional[Path]=None) -> list[Stmt]:
		"""
		Parse and resolve one submission, or raise Yuck naming the phase that failed.
		Issues from any previous submission are forgotten first.
		"""
		self.report.reset()
		statements = parse_text(text, path, self.report)
		if self.report.sick(): raise Yuck("parse")
		resolve_program(statements, self.report, check_unused=self._check_unused)
		return statements

	def run(self, text:str, path:Optional[Path]=None) -> int:
		try: statements = self.check(text, path)
		except Yuck as ex:
			self.report.info("Stopped in phase", ex.args[0])
			self.report.complain_to_console()
			return STATIC
		self.report.info("Running", path or "<input>")
		return OK if self.evaluator.interpret(statements) else RUNTIME

	def run_file(self, path:Path) -> int:
		""" May raise OSError if the file cannot be read. """
		with open(path, encoding="utf-8") as fh:
			text = fh.read()
		return self.run(text, path)
