"""
The tree-walking evaluator proper.

Expressions evaluate to values. Statements execute for effect and report how they finished:
None means they ran to completion; a Returning means a `return` is on its way out to the
nearest enclosing call. Blocks, loops and conditionals pass a Returning outward unchanged,
and LoxFunction.call is where it finally lands. Genuine errors are LoxRuntimeError exceptions,
which only `interpret` catches.
"""
import sys
from typing import Any, NamedTuple, Optional, Sequence, TextIO
from boozetools.support.foundation import Visitor
from .. import syntax
from ..diagnostics import LoxRuntimeError
from ..environment import Environment
from ..ontology import Expr, Stmt, Token
from ..primitive import install_natives
from .runtime import is_truthy, binary_operation, check_number_operand, stringify
from .types import LoxCallable
from .values import LoxFunction, LoxClass, LoxInstance, INITIALIZER_NAME

class Returning(NamedTuple):
	value: Any

OUTCOME = Optional[Returning]

class Evaluator(Visitor):
	globals: Environment
	_env: Environment

	def __init__(self, *, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
		# A sink of None means whatever sys.stdout (or sys.stderr) is at the time.
		self._out = out
		self._err = err
		self.globals = self._env = Environment()
		install_natives(self.globals)

	def interpret(self, statements: Sequence[Stmt]) -> bool:
		""" Run statements in order until done or until a runtime error. True means no error. """
		try:
			for stmt in statements:
				outcome = self.execute(stmt)
				assert outcome is None, "The resolver lets no return escape to top level."
		except LoxRuntimeError as ex:
			print(ex.describe(), file=self._err or sys.stderr)
			return False
		return True

	def evaluate(self, expr: Expr) -> Any:
		return self.visit(expr)

	def execute(self, stmt: Stmt) -> OUTCOME:
		return self.visit(stmt)

	def execute_block(self, statements: Sequence[Stmt], env: Environment) -> OUTCOME:
		previous = self._env
		try:
			self._env = env
			for stmt in statements:
				outcome = self.execute(stmt)
				if outcome is not None: return outcome
			return None
		finally:
			self._env = previous

	def _look_up(self, name: Token, expr) -> Any:
		if expr.binding is None: return self.globals.get(name)
		return self._env.get_at(expr.binding.distance, name.lexeme)

	# Statements:

	def visit_Block(self, stmt: syntax.Block) -> OUTCOME:
		return self.execute_block(stmt.statements, Environment(self._env))

	def visit_Var(self, stmt: syntax.Var) -> OUTCOME:
		value = None if stmt.initializer is None else self.evaluate(stmt.initializer)
		self._env.define(stmt.name.lexeme, value)

	def visit_Function(self, stmt: syntax.Function) -> OUTCOME:
		self._env.define(stmt.name.lexeme, LoxFunction(stmt, self._env))

	def visit_Class(self, stmt: syntax.Class) -> OUTCOME:
		superclass = None
		if stmt.superclass is not None:
			superclass = self.evaluate(stmt.superclass)
			if not isinstance(superclass, LoxClass):
				raise LoxRuntimeError(stmt.superclass.name, "Superclass must be a class.")

		self._env.define(stmt.name.lexeme, None)

		method_env = self._env
		if superclass is not None:
			method_env = Environment(self._env)
			method_env.define("super", superclass)

		methods = {
			method.name.lexeme: LoxFunction(method, method_env, method.name.lexeme == INITIALIZER_NAME)
			for method in stmt.methods
		}
		self._env.assign(stmt.name, LoxClass(stmt.name.lexeme, superclass, methods))

	def visit_Expression(self, stmt: syntax.Expression) -> OUTCOME:
		self.evaluate(stmt.expr)

	def visit_If(self, stmt: syntax.If) -> OUTCOME:
		if is_truthy(self.evaluate(stmt.condition)):
			return self.execute(stmt.then_branch)
		elif stmt.else_branch is not None:
			return self.execute(stmt.else_branch)

	def visit_While(self, stmt: syntax.While) -> OUTCOME:
		while is_truthy(self.evaluate(stmt.condition)):
			outcome = self.execute(stmt.body)
			if outcome is not None: return outcome

	def visit_Print(self, stmt: syntax.Print) -> OUTCOME:
		print(stringify(self.evaluate(stmt.expr)), file=self._out or sys.stdout)

	def visit_Return(self, stmt: syntax.Return) -> OUTCOME:
		value = None if stmt.value is None else self.evaluate(stmt.value)
		return Returning(value)

	# Expressions:

	def visit_Literal(self, expr: syntax.Literal):
		return expr.value

	def visit_Grouping(self, expr: syntax.Grouping):
		return self.evaluate(expr.inner)

	def visit_Variable(self, expr: syntax.Variable):
		return self._look_up(expr.name, expr)

	def visit_Assign(self, expr: syntax.Assign):
		value = self.evaluate(expr.value)
		if expr.binding is None: self.globals.assign(expr.name, value)
		else: self._env.assign_at(expr.binding.distance, expr.name.lexeme, value)
		return value

	def visit_Logical(self, expr: syntax.Logical):
		lhs = self.evaluate(expr.lhs)
		if expr.op.kind == "OR":
			if is_truthy(lhs): return lhs
		elif not is_truthy(lhs):
			return lhs
		return self.evaluate(expr.rhs)

	def visit_Unary(self, expr: syntax.Unary):
		arg = self.evaluate(expr.arg)
		if expr.op.kind == "!": return not is_truthy(arg)
		check_number_operand(expr.op, arg)
		return -arg

	def visit_Binary(self, expr: syntax.Binary):
		lhs = self.evaluate(expr.lhs)
		rhs = self.evaluate(expr.rhs)
		return binary_operation(expr.op, lhs, rhs)

	def visit_Call(self, expr: syntax.Call):
		callee = self.evaluate(expr.callee)
		args = [self.evaluate(a) for a in expr.args]
		if not isinstance(callee, LoxCallable):
			raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")
		if len(args) != callee.arity():
			raise LoxRuntimeError(expr.paren, "Expected %d arguments but got %d." % (callee.arity(), len(args)))
		return callee.call(self, args)

	def visit_Get(self, expr: syntax.Get):
		obj = self.evaluate(expr.obj)
		if isinstance(obj, LoxInstance): return obj.get(expr.name)
		raise LoxRuntimeError(expr.name, "Only instances have properties.")

	def visit_Set(self, expr: syntax.Set):
		obj = self.evaluate(expr.obj)
		if not isinstance(obj, LoxInstance):
			raise LoxRuntimeError(expr.name, "Only instances have fields.")
		value = self.evaluate(expr.value)
		obj.set(expr.name, value)
		return value

	def visit_This(self, expr: syntax.This):
		return self._look_up(expr.keyword, expr)

	def visit_Super(self, expr: syntax.Super):
		distance = expr.binding.distance
		superclass = self._env.get_at(distance, "super")
		# `this` is always exactly one frame closer than `super`.
		instance = self._env.get_at(distance - 1, "this")
		method = superclass.find_method(expr.method.lexeme)
		if method is None:
			raise LoxRuntimeError(expr.method, "Undefined property '%s'." % expr.method.lexeme)
		return method.bind(instance)

	def visit_Lambda(self, expr: syntax.Lambda):
		return LoxFunction(expr, self._env)

assert all(hasattr(Evaluator, "visit_"+kind.__name__) for kind in syntax.EXPRESSION_KINDS + syntax.STATEMENT_KINDS)
