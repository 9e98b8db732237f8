"""
The primitive semantics of plain data: truth, equality, arithmetic, and how things print.
Numbers are Python floats, strings are str, booleans are bool, and nil is None.
"""
import operator
from typing import Any
from ..diagnostics import LoxRuntimeError
from ..ontology import Token

ARITHMETIC = {
	"-" : operator.sub,
	"*" : operator.mul,
	"/" : operator.truediv,
}
COMPARISON = {
	">" : operator.gt,
	">=" : operator.ge,
	"<" : operator.lt,
	"<=" : operator.le,
}

def is_number(x) -> bool:
	# bool is a subclass of int, not of float, so this does not admit true or false.
	return type(x) is float

def is_truthy(x) -> bool:
	if x is None: return False
	if isinstance(x, bool): return x
	return True

def is_equal(a, b) -> bool:
	if a is None: return b is None
	if type(a) is not type(b): return False
	return a == b

def check_number_operand(op:Token, x):
	if not is_number(x): raise LoxRuntimeError(op, "Operand must be a number.")

def check_number_operands(op:Token, a, b):
	if not (is_number(a) and is_number(b)): raise LoxRuntimeError(op, "Operands must be numbers.")

def binary_operation(op:Token, a, b) -> Any:
	glyph = op.kind
	if glyph == "==": return is_equal(a, b)
	if glyph == "!=": return not is_equal(a, b)
	if glyph == "+":
		if is_number(a) and is_number(b): return a + b
		if isinstance(a, str) and isinstance(b, str): return a + b
		raise LoxRuntimeError(op, "Operands must be two numbers or two strings.")
	check_number_operands(op, a, b)
	if glyph in COMPARISON: return COMPARISON[glyph](a, b)
	if glyph == "/" and b == 0: raise LoxRuntimeError(op, "Division by zero.")
	return ARITHMETIC[glyph](a, b)

def stringify(x) -> str:
	if x is None: return "nil"
	if isinstance(x, bool): return "true" if x else "false"
	if is_number(x):
		# repr keeps the sign of -0.0 and switches to exponents for huge magnitudes.
		text = repr(x)
		return text[:-2] if text.endswith(".0") else text
	return str(x)
