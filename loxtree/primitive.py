"""
Build the primitive namespace: the native functions every program starts with.
Additional natives register by name, arity, and a plain Python callable.
"""
import time
from typing import Any, Callable
from .environment import Environment
from .tree_walker.values import NativeFunction

NATIVES: dict[str, NativeFunction] = {}

def register(name: str, arity: int, fn: Callable[..., Any]) -> NativeFunction:
	NATIVES[name] = native = NativeFunction(name, arity, fn)
	return native

def native(name: str, arity: int):
	""" Decorator form of `register` """
	def decorate(fn):
		register(name, arity, fn)
		return fn
	return decorate

@native("clock", 0)
def clock() -> float:
	""" Seconds since the Unix epoch, as a float. """
	return time.time()

def install_natives(env: Environment):
	for name, fn in NATIVES.items():
		env.define(name, fn)
