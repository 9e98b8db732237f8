"""
This module defines the specialized value-types that the tree-walker operates in terms of.
Basic primitive values play themselves, but functions, classes and instances need more help.
"""
from typing import Any, Callable, Optional, Union
from .. import syntax
from ..diagnostics import LoxRuntimeError
from ..environment import Environment
from ..ontology import Token
from .types import LoxCallable, ARGS

INITIALIZER_NAME = syntax.INITIALIZER_NAME

class LoxFunction(LoxCallable):
	""" The run-time manifestation of a function: a callable value tied to its natal environment. """
	# The same class serves for functions, methods, and anonymous functions.

	def __init__(self, declaration: Union[syntax.Function, syntax.Lambda], closure: Environment, is_initializer: bool = False):
		self._declaration = declaration
		self._closure = closure
		self._is_initializer = is_initializer

	def __str__(self):
		if self._declaration.name is None: return "<fn anonymous>"
		return "<fn %s>" % self._declaration.name.lexeme

	def bind(self, instance: "LoxInstance") -> "LoxFunction":
		""" Same declaration, but with `this` meaning the given instance. """
		frame = Environment(self._closure)
		frame.define("this", instance)
		return LoxFunction(self._declaration, frame, self._is_initializer)

	def arity(self) -> int:
		return len(self._declaration.params)

	def call(self, evaluator, args: ARGS) -> Any:
		frame = Environment(self._closure)
		for param, arg in zip(self._declaration.params, args):
			frame.define(param.lexeme, arg)
		outcome = evaluator.execute_block(self._declaration.body, frame)
		# An initializer always yields its instance, however it finishes.
		if self._is_initializer: return self._closure.get_at(0, "this")
		if outcome is None: return None
		return outcome.value

class LoxClass(LoxCallable):
	def __init__(self, name: str, superclass: Optional["LoxClass"], methods: dict[str, LoxFunction]):
		self.name = name
		self.superclass = superclass
		self._methods = methods

	def __str__(self): return self.name

	def find_method(self, name: str) -> Optional[LoxFunction]:
		klass = self
		while klass is not None:
			if name in klass._methods:
				return klass._methods[name]
			klass = klass.superclass
		return None

	def arity(self) -> int:
		initializer = self.find_method(INITIALIZER_NAME)
		return 0 if initializer is None else initializer.arity()

	def call(self, evaluator, args: ARGS) -> "LoxInstance":
		instance = LoxInstance(self)
		initializer = self.find_method(INITIALIZER_NAME)
		if initializer is not None:
			initializer.bind(instance).call(evaluator, args)
		return instance

class LoxInstance:
	def __init__(self, klass: LoxClass):
		self.klass = klass
		self._fields = {}

	def __str__(self): return "%s instance" % self.klass.name

	def get(self, name: Token) -> Any:
		if name.lexeme in self._fields:
			return self._fields[name.lexeme]
		method = self.klass.find_method(name.lexeme)
		if method is not None: return method.bind(self)
		raise LoxRuntimeError(name, "Undefined property '%s'." % name.lexeme)

	def set(self, name: Token, value: Any):
		self._fields[name.lexeme] = value

class NativeFunction(LoxCallable):
	""" All the host's contribution: a Python callable with a fixed arity. """
	def __init__(self, name: str, arity: int, fn: Callable[..., Any]):
		self.name = name
		self._arity = arity
		self._fn = fn

	def __str__(self): return "<native fn>"

	def arity(self) -> int: return self._arity

	def call(self, evaluator, args: ARGS) -> Any:
		return self._fn(*args)
