"""
All the scope resolution stuff goes here.
By the time this pass is finished, every local reference knows how many
frames out its variable lives, and every static rule about scope has been checked.
Anything left unbound is a global, looked up by name at run-time.
"""
from typing import Iterable, Sequence
from boozetools.support.foundation import Visitor
from . import syntax
from .diagnostics import Report
from .ontology import Binding, Expr, Stmt, Token
from .space import Layer, AlreadyExists

class Yuck(Exception):
	"""
	The first argument will be the name of the pass fraught with error.
	The end-user might not care about this, but it's handy for testing.
	"""
	pass

# What sort of function body are we in?
NO_FUNCTION = "none"
FUNCTION = "function"
INITIALIZER = "initializer"
METHOD = "method"

# What sort of class body are we in?
NO_CLASS = "none"
CLASS = "class"
SUBCLASS = "subclass"

class TopDown(Visitor):
	"""
	Convenience base-class to handle the dreary bits of a
	perfectly ordinary top-down walk through a syntax tree.
	"""

	def tour(self, items: Iterable):
		for i in items:
			self.visit(i)

	def visit_Expression(self, stmt: syntax.Expression): self.visit(stmt.expr)
	def visit_Print(self, stmt: syntax.Print): self.visit(stmt.expr)

	def visit_If(self, stmt: syntax.If):
		self.visit(stmt.condition)
		self.visit(stmt.then_branch)
		if stmt.else_branch is not None: self.visit(stmt.else_branch)

	def visit_While(self, stmt: syntax.While):
		self.visit(stmt.condition)
		self.visit(stmt.body)

	def visit_Literal(self, expr: syntax.Literal): pass

	def visit_Binary(self, expr: syntax.Binary):
		self.visit(expr.lhs)
		self.visit(expr.rhs)

	def visit_Logical(self, expr: syntax.Logical):
		self.visit(expr.lhs)
		self.visit(expr.rhs)

	def visit_Unary(self, expr: syntax.Unary): self.visit(expr.arg)
	def visit_Grouping(self, expr: syntax.Grouping): self.visit(expr.inner)

	def visit_Call(self, expr: syntax.Call):
		self.visit(expr.callee)
		self.tour(expr.args)

	def visit_Get(self, expr: syntax.Get):
		# Properties are looked up dynamically: only the object needs resolving.
		self.visit(expr.obj)

	def visit_Set(self, expr: syntax.Set):
		self.visit(expr.value)
		self.visit(expr.obj)

class Resolver(TopDown):
	"""
	This single top-down tree-walk does several things:

	* Connect every local reference to its binding: distance and slot.
	* Complain about names declared twice in one scope.
	* Complain about reading a local in its own initializer.
	* Complain about misplaced `return`, `this`, and `super`.
	* Complain about a class that inherits from itself.
	* Optionally, complain about locals nobody ever uses.

	Complaints go to the report. They do not stop the walk,
	so that one pass finds every problem in the program.
	"""
	_scopes: list[Layer]
	_current_function: str
	_current_class: str

	def __init__(self, report: Report, *, check_unused: bool = False):
		self._report = report
		self._check_unused = check_unused
		self._scopes = []
		self._current_function = NO_FUNCTION
		self._current_class = NO_CLASS

	def resolve(self, statements: Sequence[Stmt]) -> bool:
		""" Returns True if resolution found nothing to complain about. """
		before = len(self._report.issues)
		self.tour(statements)
		assert not self._scopes
		return len(self._report.issues) == before

	# Scope housekeeping:

	def _begin_scope(self) -> Layer:
		layer = Layer()
		self._scopes.append(layer)
		return layer

	def _end_scope(self):
		layer = self._scopes.pop()
		if self._check_unused:
			for local in layer.each_local():
				if not local.is_used:
					self._report.unused_local(local.token)

	def _declare(self, name: Token):
		if not self._scopes: return  # Globals may be redeclared at will.
		layer = self._scopes[-1]
		try: layer.mount(name)
		except AlreadyExists: self._report.redefined(layer.entry(name.lexeme).token, name)

	def _define(self, name: Token):
		if not self._scopes: return
		local = self._scopes[-1].entry(name.lexeme)
		if local is None: local = self._scopes[-1].mount(name)
		local.is_defined = True

	def _resolve_local(self, expr: Expr, name: Token):
		for distance, layer in enumerate(reversed(self._scopes)):
			local = layer.entry(name.lexeme)
			if local is not None:
				local.is_used = True
				expr.binding = Binding(distance, local.slot)
				return
		expr.binding = None

	def _resolve_function(self, fn, kind: str):
		enclosing = self._current_function
		self._current_function = kind
		self._begin_scope()
		for param in fn.params:
			self._declare(param)
			self._define(param)
		self.tour(fn.body)
		self._end_scope()
		self._current_function = enclosing

	# Statements:

	def visit_Block(self, stmt: syntax.Block):
		self._begin_scope()
		self.tour(stmt.statements)
		self._end_scope()

	def visit_Var(self, stmt: syntax.Var):
		self._declare(stmt.name)
		if stmt.initializer is not None:
			self.visit(stmt.initializer)
		self._define(stmt.name)

	def visit_Function(self, stmt: syntax.Function):
		# Defined before the body, so that the function may call itself.
		self._declare(stmt.name)
		self._define(stmt.name)
		self._resolve_function(stmt, FUNCTION)

	def visit_Class(self, stmt: syntax.Class):
		enclosing = self._current_class
		self._current_class = CLASS
		self._declare(stmt.name)
		self._define(stmt.name)

		if stmt.superclass is not None:
			if stmt.superclass.name.lexeme == stmt.name.lexeme:
				self._report.inherits_from_itself(stmt.superclass.name)
			self._current_class = SUBCLASS
			self.visit(stmt.superclass)
			self._begin_scope().intrinsic(_keyword("super", stmt.superclass.name))

		self._begin_scope().intrinsic(_keyword("this", stmt.name))
		for method in stmt.methods:
			kind = INITIALIZER if method.name.lexeme == syntax.INITIALIZER_NAME else METHOD
			self._resolve_function(method, kind)
		self._end_scope()

		if stmt.superclass is not None: self._end_scope()
		self._current_class = enclosing

	def visit_Return(self, stmt: syntax.Return):
		if self._current_function == NO_FUNCTION:
			self._report.return_from_top_level(stmt.keyword)
		if stmt.value is not None:
			if self._current_function == INITIALIZER:
				self._report.return_value_from_initializer(stmt.keyword)
			self.visit(stmt.value)

	# Expressions:

	def visit_Variable(self, expr: syntax.Variable):
		if self._scopes:
			local = self._scopes[-1].entry(expr.name.lexeme)
			if local is not None and not local.is_defined:
				self._report.read_in_own_initializer(expr.name)
		self._resolve_local(expr, expr.name)

	def visit_Assign(self, expr: syntax.Assign):
		self.visit(expr.value)
		self._resolve_local(expr, expr.name)

	def visit_This(self, expr: syntax.This):
		if self._current_class == NO_CLASS:
			self._report.this_outside_class(expr.keyword)
		else:
			self._resolve_local(expr, expr.keyword)

	def visit_Super(self, expr: syntax.Super):
		if self._current_class == NO_CLASS:
			self._report.super_outside_class(expr.keyword)
		elif self._current_class != SUBCLASS:
			self._report.super_without_superclass(expr.keyword)
		else:
			self._resolve_local(expr, expr.keyword)

	def visit_Lambda(self, expr: syntax.Lambda):
		self._resolve_function(expr, FUNCTION)

def _keyword(text: str, near: Token) -> Token:
	""" A synthetic token standing for an implicit binding, located near where it arises. """
	return Token(text.upper(), text, None, near.line, near.spot)

def resolve_program(statements: Sequence[Stmt], report: Report, *, check_unused: bool = False):
	""" Resolve or raise Yuck. Issues remain in the report either way. """
	Resolver(report, check_unused=check_unused).resolve(statements)
	if report.sick(): raise Yuck("resolve")
	report.info("Resolved", len(statements), "top-level statement(s)")
