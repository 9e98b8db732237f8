import sys, random
from pathlib import Path
from typing import Optional, Sequence
from boozetools.support.failureprone import illustration

from .location import lookup_span, segment_path, segment_source
from .ontology import Phrase, Token, EOF_KIND

class TooManyIssues(Exception):
	pass

class LoxRuntimeError(Exception):
	"""
	Raised by the evaluator and the object model when a running program goes wrong.
	Carries the offending token so the driver can say which line did it.
	"""
	def __init__(self, token:Token, message:str):
		super().__init__(message)
		self.token = token
		self.message = message

	def describe(self) -> str:
		return "%s\n[line %d]" % (self.message, self.token.line)

def _outburst():
	particle = ["Oh, ", "Well, ", "Hmm. ", "", ""]

	minced_oaths = [
		'Drat', 'Rats', 'Nuts', 'Bother', 'Blast', 'Crumbs',
		'Fiddlesticks', 'Good Grief', 'Great Scott', 'Jeepers',
		'Oh Dear', 'Snap', 'Woe is me', 'Yikes',
	]

	resignations = [
		'I cannot run this.',
		'This program is not ready yet.',
		'Something here does not add up.',
		'Please have a look at the following.',
	]

	return "%s%s! %s"%tuple(map(random.choice, (particle, minced_oaths, resignations)))

class Report:
	""" Collects every static issue found in one submission, then complains about all of them at once. """
	_issues : list["Pic"]

	def __init__(self, *, verbose:int=0, max_issues:Optional[int]=None):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._redefined = {}
		self._max_issues = max_issues

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)

	@property
	def issues(self) -> list["Pic"]: return list(self._issues)

	def issue(self, it:"Pic"):
		self._issues.append(it)
		if len(self._issues) == self._max_issues:
			raise TooManyIssues(self)

	def reset(self):
		self._issues.clear()
		self._redefined.clear()

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def error(self, guilty: Sequence[Phrase], msg: str):
		""" Actually make an entry of an issue """
		for g in guilty: assert isinstance(g, Phrase), g
		problem = [Annotation(g) for g in guilty]
		self.issue(Pic(msg, problem))

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		_bemoan(self._issues)

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(_outburst()+" "+message)

	# Methods the scanner and parser are likely to call:
	def unexpected_character(self, where:Token):
		self.issue(Pic("Unexpected character.", [Annotation(where, "this one")]))

	def unterminated(self, where:Token, what:str):
		self.issue(Pic("Unterminated %s."%what, [Annotation(where, "starts here")]))

	def parse_error(self, where:Token, message:str, hint:Optional[str]=None):
		footer = [hint] if hint else []
		self.issue(Pic(message, [Annotation(where)], footer))

	# Methods the resolver calls:
	def redefined(self, first:Token, guilty:Token):
		key = first.lexeme, first.spot
		if key not in self._redefined:
			intro = "Already a variable with this name in this scope."
			issue = Pic(intro, [Annotation(guilty), Annotation(first, "Earliest definition")])
			self.issue(issue)
			self._redefined[key] = issue
		else:
			self._redefined[key].also(guilty)

	def read_in_own_initializer(self, guilty:Token):
		self.error([guilty], "Can't read local variable in its own initializer.")

	def return_from_top_level(self, guilty:Token):
		self.error([guilty], "Can't return from top-level code.")

	def return_value_from_initializer(self, guilty:Token):
		self.error([guilty], "Can't return a value from an initializer.")

	def this_outside_class(self, guilty:Token):
		self.error([guilty], "Can't use 'this' outside of a class.")

	def super_outside_class(self, guilty:Token):
		self.error([guilty], "Can't use 'super' outside of a class.")

	def super_without_superclass(self, guilty:Token):
		self.error([guilty], "Can't use 'super' in a class with no superclass.")

	def inherits_from_itself(self, guilty:Token):
		self.error([guilty], "A class can't inherit from itself.")

	def unused_local(self, guilty:Token):
		self.error([guilty], "Local variable '%s' is never used." % guilty.lexeme)

class Annotation:
	path: Optional[Path]
	slice: slice
	caption: str
	def __init__(self, node:Phrase, caption:str=""):
		span = lookup_span(*node.span())
		self.segment = span.segment
		self.path = segment_path(span.segment)
		self.slice = span.slice
		self.caption = caption
		self.token = node if isinstance(node, Token) else None
	def illustrate(self):
		source = segment_source(self.segment)
		row, col = source.find_row_col(self.slice.start)
		single_line = source.line_of_text(row)
		width = self.slice.stop - self.slice.start
		return illustration(single_line, col, width, prefix='% 6d |' % row, caption=self.caption)
	def where(self) -> str:
		token = self.token
		if token is None: return ""
		if token.kind == EOF_KIND: return " at end"
		return " at '%s'" % token.lexeme

class Pic:
	def __init__(self, intro:str, anns:list[Annotation], footer=()):
		self.intro, self.anns, self.footer = intro, anns, footer
	def also(self, node, caption:str=""): self.anns.append(Annotation(node, caption))
	def line(self) -> Optional[int]:
		for ann in self.anns:
			if ann.token is not None: return ann.token.line
	def brief(self) -> str:
		""" The one-line form, as in: [line 3] Error at 'x': message """
		if self.anns:
			return "[line %s] Error%s: %s" % (self.line(), self.anns[0].where(), self.intro)
		return "Error: " + self.intro
	def as_text(self):
		lines = [self.brief(), ""]
		path = None
		for ann in self.anns:
			if ann.path != path:
				path = ann.path
				lines.append(str(path) if path else "<input>")
			lines.append(ann.illustrate())
		lines.extend(self.footer)
		return '\n'.join(lines)

def _bemoan(issues):
	""" Emit all the issues to the console. """
	if issues:
		print("*"*60, file=sys.stderr)
		print(_outburst(), file=sys.stderr)
	for i in issues:
		print("  -"*20, file=sys.stderr)
		print(i.as_text(), file=sys.stderr)
	sys.stderr.flush()
