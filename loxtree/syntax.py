"""
The set of parse-nodes in simple form.
The parser calls these constructors with subordinate semantic-values as it descends.
Class-level type annotations make peace with pycharm wherever later passes add fields.

The set of kinds is closed: EXPRESSION_KINDS and STATEMENT_KINDS list them all,
and every tree-walk is expected to supply a visit_ method for each.
"""
from typing import Any, Optional, Sequence
from .ontology import Token, Expr, Stmt, Binding

# The method a class runs on each new instance.
INITIALIZER_NAME = "init"

class Literal(Expr):
	def __init__(self, value: Any, spot: int):
		assert isinstance(spot, int) or spot is None, type(spot)
		self.value, self._spot = value, spot or 0
	def __str__(self): return "<Literal %r>" % self.value
	def left(self): return self._spot
	def right(self): return self._spot

class Variable(Expr):
	binding: Optional[Binding] = None  # Resolver fills this in, unless global.
	def __init__(self, name: Token): self.name = name
	def __str__(self): return self.name.lexeme
	def left(self): return self.name.left()
	def right(self): return self.name.right()

class Assign(Expr):
	binding: Optional[Binding] = None  # Resolver fills this in, unless global.
	def __init__(self, name: Token, value: Expr):
		self.name, self.value = name, value
	def left(self): return self.name.left()
	def right(self): return self.value.right()

class Binary(Expr):
	def __init__(self, lhs: Expr, op: Token, rhs: Expr):
		self.lhs, self.op, self.rhs = lhs, op, rhs
	def left(self): return self.lhs.left()
	def right(self): return self.rhs.right()

class Logical(Binary):
	# Short-cut operators: AND, OR.
	pass

class Unary(Expr):
	def __init__(self, op: Token, arg: Expr):
		self.op, self.arg = op, arg
	def left(self): return self.op.left()
	def right(self): return self.arg.right()

class Grouping(Expr):
	def __init__(self, inner: Expr): self.inner = inner
	def left(self): return self.inner.left()
	def right(self): return self.inner.right()

class Call(Expr):
	def __init__(self, callee: Expr, paren: Token, args: Sequence[Expr]):
		self.callee, self.paren, self.args = callee, paren, args
	def __str__(self):
		return "%s(%s)" % (self.callee, ', '.join(map(str, self.args)))
	def left(self): return self.callee.left()
	def right(self): return self.paren.right()

class Get(Expr):
	def __init__(self, obj: Expr, name: Token):
		self.obj, self.name = obj, name
	def __str__(self): return "(%s.%s)" % (self.obj, self.name.lexeme)
	def left(self): return self.obj.left()
	def right(self): return self.name.right()

class Set(Expr):
	def __init__(self, obj: Expr, name: Token, value: Expr):
		self.obj, self.name, self.value = obj, name, value
	def left(self): return self.obj.left()
	def right(self): return self.value.right()

class This(Expr):
	binding: Optional[Binding] = None
	def __init__(self, keyword: Token): self.keyword = keyword
	def left(self): return self.keyword.left()
	def right(self): return self.keyword.right()

class Super(Expr):
	binding: Optional[Binding] = None
	def __init__(self, keyword: Token, method: Token):
		self.keyword, self.method = keyword, method
	def left(self): return self.keyword.left()
	def right(self): return self.method.right()

class Lambda(Expr):
	# An anonymous function: just like a Function statement, only without a name.
	name = None
	def __init__(self, keyword: Token, params: Sequence[Token], body: Sequence[Stmt]):
		self.keyword, self.params, self.body = keyword, params, body
	def __repr__(self): return "{fn|anonymous(%s)}" % ", ".join(p.lexeme for p in self.params)
	def left(self): return self.keyword.left()
	def right(self): return self.keyword.right()

###############################################################################

class Block(Stmt):
	def __init__(self, statements: Sequence[Stmt]): self.statements = statements

class Var(Stmt):
	def __init__(self, name: Token, initializer: Optional[Expr]):
		self.name, self.initializer = name, initializer
	def left(self): return self.name.left()
	def right(self): return self.name.right()

class Function(Stmt):
	def __init__(self, name: Token, params: Sequence[Token], body: Sequence[Stmt]):
		self.name, self.params, self.body = name, params, body
	def __repr__(self): return "{fn|%s(%s)}" % (self.name.lexeme, ", ".join(p.lexeme for p in self.params))
	def left(self): return self.name.left()
	def right(self): return self.name.right()

class Class(Stmt):
	def __init__(self, name: Token, superclass: Optional[Variable], methods: Sequence[Function]):
		self.name, self.superclass, self.methods = name, superclass, methods
	def left(self): return self.name.left()
	def right(self): return (self.superclass or self.name).right()

class Expression(Stmt):
	def __init__(self, expr: Expr): self.expr = expr
	def left(self): return self.expr.left()
	def right(self): return self.expr.right()

class If(Stmt):
	def __init__(self, condition: Expr, then_branch: Stmt, else_branch: Optional[Stmt]):
		self.condition, self.then_branch, self.else_branch = condition, then_branch, else_branch

class While(Stmt):
	def __init__(self, condition: Expr, body: Stmt):
		self.condition, self.body = condition, body

class Print(Stmt):
	def __init__(self, expr: Expr): self.expr = expr
	def left(self): return self.expr.left()
	def right(self): return self.expr.right()

class Return(Stmt):
	def __init__(self, keyword: Token, value: Optional[Expr]):
		self.keyword, self.value = keyword, value
	def left(self): return self.keyword.left()
	def right(self): return (self.value or self.keyword).right()

EXPRESSION_KINDS = (Literal, Variable, Assign, Binary, Logical, Unary, Grouping, Call, Get, Set, This, Super, Lambda)
STATEMENT_KINDS = (Block, Var, Function, Class, Expression, If, While, Print, Return)
