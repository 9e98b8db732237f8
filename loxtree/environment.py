"""
Simplest possible environment concept: the canonical list-structured search.

Each frame is a plain dictionary of bindings and a static link to the frame
that encloses it. Frames are shared by reference, so every closure and every
bound method that captured a frame sees the writes everyone else makes to it.
Python's own reference-counting reclaims a frame once the last holder lets go.
"""
from typing import Any, Optional
from .diagnostics import LoxRuntimeError
from .ontology import Token

class Environment:
	_bindings: dict[str, Any]
	static_link: Optional["Environment"]

	def __init__(self, static_link: Optional["Environment"] = None):
		self._bindings = {}
		self.static_link = static_link

	def __repr__(self):
		return "<Environment %s>" % ", ".join(self._bindings)

	def holds(self, name: str) -> bool: return name in self._bindings

	def define(self, name: str, value: Any):
		# No duplicate check: that is the resolver's job, and globals may be redefined.
		self._bindings[name] = value

	def ancestor(self, distance: int) -> "Environment":
		frame = self
		for _ in range(distance):
			frame = frame.static_link
		return frame

	def get_at(self, distance: int, name: str) -> Any:
		return self.ancestor(distance)._bindings[name]

	def assign_at(self, distance: int, name: str, value: Any):
		self.ancestor(distance)._bindings[name] = value

	def get(self, name: Token) -> Any:
		frame = self
		while frame is not None:
			if name.lexeme in frame._bindings:
				return frame._bindings[name.lexeme]
			frame = frame.static_link
		raise LoxRuntimeError(name, "Undefined variable '%s'." % name.lexeme)

	def assign(self, name: Token, value: Any):
		frame = self
		while frame is not None:
			if name.lexeme in frame._bindings:
				frame._bindings[name.lexeme] = value
				return
			frame = frame.static_link
		raise LoxRuntimeError(name, "Undefined variable '%s'." % name.lexeme)
