"""
This module aims to express an interface agreement
between the evaluator and various kinds of data.
"""

from abc import ABC, abstractmethod
from typing import Any, Sequence, Union, TYPE_CHECKING

if TYPE_CHECKING:
	from .evaluator import Evaluator

NATIVE_DATA = Union[None, bool, float, str]

class LoxCallable(ABC):
	""" The capability of being invoked with arguments: functions, classes, and natives. """
	@abstractmethod
	def arity(self) -> int: pass

	@abstractmethod
	def call(self, evaluator: "Evaluator", args: "ARGS") -> Any: pass

LOX_VALUE = Union[NATIVE_DATA, LoxCallable, Any]
ARGS = Sequence[LOX_VALUE]
