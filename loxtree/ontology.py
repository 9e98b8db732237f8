"""
These most-fundamental classes in the syntax class hierarchy
are separate from the rest to avoid various circular-import
scenarios. The concrete AST types have fields that get filled
in during the resolution pass, and I use type-annotations
to get help from the IDE to make sure those fields stay sane,
but in consequence these abstract base classes need to remain
separate from the rest.
"""
from typing import Any, NamedTuple

class Phrase:
	def left(self) -> int:
		""" Return the spot of the leftmost token of this phrase """
		raise NotImplementedError(type(self))
	def right(self) -> int:
		""" Return the spot of the rightmost token of this phrase """
		raise NotImplementedError(type(self))
	def span(self) -> tuple[int, int]: return self.left(), self.right()

class Token(Phrase):
	""" Representing the occurrence of a lexeme anywhere. """
	spot: int  # zero-spot means built-in or synthetic.
	def __init__(self, kind:str, lexeme:str, literal:Any, line:int, spot:int=0):
		assert isinstance(lexeme, str)
		self.kind, self.lexeme, self.literal, self.line, self.spot = kind, lexeme, literal, line, spot or 0
	def __repr__(self): return "<%s %r>" % (self.kind, self.lexeme)
	def left(self): return self.spot
	def right(self): return self.spot

class Expr(Phrase):
	""" Root of the closed set of expression kinds. """

class Stmt(Phrase):
	""" Root of the closed set of statement kinds. """

class Binding(NamedTuple):
	"""
	Where the resolver found a local: how many frames out,
	and the declaration order within that frame.
	"""
	distance: int
	slot: int

EOF_KIND = "<END>"
