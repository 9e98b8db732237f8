"""
Scanner and recursive-descent parser: source text in, list of statements out.
Problems go to the Report; the parser resynchronizes at statement boundaries
so that one submission can yield several complaints.
"""
import sys
from bisect import bisect_left
from pathlib import Path
from typing import Optional
from boozetools.scanning import miniscan
from boozetools.scanning.engine import IterableScanner
from boozetools.parsing.interface import ParseError
from . import syntax
from .diagnostics import Report
from .location import start_segment, insert_token
from .ontology import Token, Expr, Stmt, EOF_KIND

class LoxParseError(ParseError):
	# Arguments: stack symbols (none, in recursive descent), lookahead kind, token.
	pass

RESERVED = frozenset("""
	and class else false for fun if nil or print return super this true var while
""".upper().split())

MAX_ARGS = 255

LEXICON = miniscan.Definition()

# Each token carries (slice, literal). Complaints point at just the opening delimiter.

@LEXICON.on(r"[ \t\r\n]+")
def scan_ignore(yy: IterableScanner): pass

@LEXICON.on(r"\/\/[^\n]*")
def scan_line_comment(yy: IterableScanner): pass

@LEXICON.on(r"\/\*([^*]|\*+[^*\/])*\*+\/")
def scan_block_comment(yy: IterableScanner): pass

@LEXICON.on(r"\/\*([^*]|\*+[^*\/])*\**")
def scan_open_block_comment(yy: IterableScanner):
	start = yy.slice().start
	yy.token("unterminated", (slice(start, start+2), "block comment"))

@LEXICON.on(r'"[^"]*"')
def scan_string(yy: IterableScanner): yy.token("string", (yy.slice(), yy.match()[1:-1]))

@LEXICON.on(r'"[^"]*')
def scan_open_string(yy: IterableScanner):
	start = yy.slice().start
	yy.token("unterminated", (slice(start, start+1), "string"))

@LEXICON.on(r"[0-9]+(\.[0-9]+)?")
def scan_number(yy: IterableScanner): yy.token("number", (yy.slice(), float(yy.match())))

@LEXICON.on(r"[A-Za-z_][A-Za-z_0-9]*")
def scan_word(yy: IterableScanner):
	word = yy.match()
	upper = word.upper()
	if upper in RESERVED and word.islower(): yy.token(upper, (yy.slice(), None))
	else: yy.token("name", (yy.slice(), None))

@LEXICON.on(r"[!=<>]=?|\(|\)|\{|\}|,|\.|\-|\+|;|\*|\/")
def scan_punctuation(yy: IterableScanner):
	yy.token(sys.intern(yy.match()), (yy.slice(), None))

@LEXICON.on(r"[^ \t\r\n\"A-Za-z_0-9!=<>\(\)\{\},.+;*\/\-]")
def scan_stray(yy: IterableScanner): yy.token("stray", (yy.slice(), None))

class Scanner:
	""" Turns text into a list of tokens, each with its line and its spot in the location index. """
	def __init__(self, text:str, report:Report):
		self._text = text
		self._report = report
		self._breaks = [i for i, c in enumerate(text) if c == "\n"]

	def _line_at(self, offset:int) -> int:
		return bisect_left(self._breaks, offset) + 1

	def _token(self, kind:str, where:slice, literal=None) -> Token:
		spot = insert_token(where)
		return Token(kind, self._text[where], literal, self._line_at(where.start), spot)

	def scan(self) -> list[Token]:
		tokens = []
		for kind, (where, value) in LEXICON.scan(self._text):
			token = self._token(kind, where, value)
			if kind == "unterminated": self._report.unterminated(token, value)
			elif kind == "stray": self._report.unexpected_character(token)
			else: tokens.append(token)
		end = len(self._text)
		tokens.append(self._token(EOF_KIND, slice(end, end)))
		return tokens

def scan_text(text:str, path:Optional[Path], report:Report) -> list[Token]:
	start_segment(path, text)
	return Scanner(text, report).scan()

###############################################################################

class Parser:
	"""
	Straightforward recursive descent: one method per precedence level.
	"""
	def __init__(self, tokens:list[Token], report:Report):
		self._tokens = tokens
		self._report = report
		self._current = 0

	def parse(self) -> list[Stmt]:
		statements = []
		while not self._at_end():
			stmt = self._declaration()
			if stmt is not None: statements.append(stmt)
		return statements

	# Plumbing:

	def _peek(self) -> Token: return self._tokens[self._current]
	def _previous(self) -> Token: return self._tokens[self._current - 1]
	def _at_end(self) -> bool: return self._peek().kind == EOF_KIND
	def _check(self, kind:str) -> bool: return self._peek().kind == kind

	def _advance(self) -> Token:
		if not self._at_end(): self._current += 1
		return self._previous()

	def _match(self, *kinds:str) -> bool:
		if self._peek().kind in kinds:
			self._advance()
			return True
		return False

	def _consume(self, kind:str, message:str) -> Token:
		if self._check(kind): return self._advance()
		raise self._error(self._peek(), message)

	def _error(self, token:Token, message:str) -> LoxParseError:
		self._report.parse_error(token, message, _best_hint(message, token))
		return LoxParseError((), token.kind, token)

	def _synchronize(self):
		self._advance()
		while not self._at_end():
			if self._previous().kind == ";": return
			if self._peek().kind in ("CLASS", "FUN", "VAR", "FOR", "IF", "WHILE", "PRINT", "RETURN"): return
			self._advance()

	# Declarations:

	def _declaration(self) -> Optional[Stmt]:
		try:
			if self._check("FUN") and self._tokens[self._current+1].kind == "name":
				self._advance()
				return self._function("function")
			if self._match("CLASS"): return self._class_declaration()
			if self._match("VAR"): return self._var_declaration()
			return self._statement()
		except LoxParseError:
			self._synchronize()
			return None

	def _class_declaration(self) -> syntax.Class:
		name = self._consume("name", "Expect class name.")
		superclass = None
		if self._match("<"):
			superclass = syntax.Variable(self._consume("name", "Expect superclass name."))
		self._consume("{", "Expect '{' before class body.")
		methods = []
		while not self._check("}") and not self._at_end():
			methods.append(self._function("method"))
		self._consume("}", "Expect '}' after class body.")
		return syntax.Class(name, superclass, methods)

	def _function(self, kind:str) -> syntax.Function:
		name = self._consume("name", "Expect %s name." % kind)
		params, body = self._signature_and_body(kind)
		return syntax.Function(name, params, body)

	def _signature_and_body(self, kind:str):
		self._consume("(", "Expect '(' after %s name." % kind)
		params = []
		if not self._check(")"):
			while True:
				if len(params) >= MAX_ARGS:
					self._error(self._peek(), "Can't have more than %d parameters." % MAX_ARGS)
				params.append(self._consume("name", "Expect parameter name."))
				if not self._match(","): break
		self._consume(")", "Expect ')' after parameters.")
		self._consume("{", "Expect '{' before %s body." % kind)
		return params, self._block()

	def _var_declaration(self) -> syntax.Var:
		name = self._consume("name", "Expect variable name.")
		initializer = self._expression() if self._match("=") else None
		self._consume(";", "Expect ';' after variable declaration.")
		return syntax.Var(name, initializer)

	# Statements:

	def _statement(self) -> Stmt:
		if self._match("FOR"): return self._for_statement()
		if self._match("IF"): return self._if_statement()
		if self._match("PRINT"): return self._print_statement()
		if self._match("RETURN"): return self._return_statement()
		if self._match("WHILE"): return self._while_statement()
		if self._match("{"): return syntax.Block(self._block())
		return self._expression_statement()

	def _for_statement(self) -> Stmt:
		keyword = self._previous()
		self._consume("(", "Expect '(' after 'for'.")
		if self._match(";"): initializer = None
		elif self._match("VAR"): initializer = self._var_declaration()
		else: initializer = self._expression_statement()
		condition = None if self._check(";") else self._expression()
		self._consume(";", "Expect ';' after loop condition.")
		increment = None if self._check(")") else self._expression()
		self._consume(")", "Expect ')' after for clauses.")
		body = self._statement()
		# There is no For node: it desugars to a while-loop in a block.
		if increment is not None:
			body = syntax.Block([body, syntax.Expression(increment)])
		if condition is None:
			condition = syntax.Literal(True, keyword.spot)
		body = syntax.While(condition, body)
		if initializer is not None:
			body = syntax.Block([initializer, body])
		return body

	def _if_statement(self) -> syntax.If:
		self._consume("(", "Expect '(' after 'if'.")
		condition = self._expression()
		self._consume(")", "Expect ')' after if condition.")
		then_branch = self._statement()
		else_branch = self._statement() if self._match("ELSE") else None
		return syntax.If(condition, then_branch, else_branch)

	def _print_statement(self) -> syntax.Print:
		value = self._expression()
		self._consume(";", "Expect ';' after value.")
		return syntax.Print(value)

	def _return_statement(self) -> syntax.Return:
		keyword = self._previous()
		value = None if self._check(";") else self._expression()
		self._consume(";", "Expect ';' after return value.")
		return syntax.Return(keyword, value)

	def _while_statement(self) -> syntax.While:
		self._consume("(", "Expect '(' after 'while'.")
		condition = self._expression()
		self._consume(")", "Expect ')' after condition.")
		return syntax.While(condition, self._statement())

	def _block(self) -> list[Stmt]:
		statements = []
		while not self._check("}") and not self._at_end():
			stmt = self._declaration()
			if stmt is not None: statements.append(stmt)
		self._consume("}", "Expect '}' after block.")
		return statements

	def _expression_statement(self) -> syntax.Expression:
		expr = self._expression()
		self._consume(";", "Expect ';' after expression.")
		return syntax.Expression(expr)

	# Expressions, loosest binding first:

	def _expression(self) -> Expr:
		return self._assignment()

	def _assignment(self) -> Expr:
		expr = self._or()
		if self._match("="):
			equals = self._previous()
			value = self._assignment()
			if isinstance(expr, syntax.Variable):
				return syntax.Assign(expr.name, value)
			if isinstance(expr, syntax.Get):
				return syntax.Set(expr.obj, expr.name, value)
			# Report, but carry on: the parser is not confused.
			self._error(equals, "Invalid assignment target.")
		return expr

	def _or(self) -> Expr:
		expr = self._and()
		while self._match("OR"):
			op = self._previous()
			expr = syntax.Logical(expr, op, self._and())
		return expr

	def _and(self) -> Expr:
		expr = self._equality()
		while self._match("AND"):
			op = self._previous()
			expr = syntax.Logical(expr, op, self._equality())
		return expr

	def _left_associative(self, operand, *kinds:str) -> Expr:
		expr = operand()
		while self._match(*kinds):
			op = self._previous()
			expr = syntax.Binary(expr, op, operand())
		return expr

	def _equality(self) -> Expr:
		return self._left_associative(self._comparison, "!=", "==")

	def _comparison(self) -> Expr:
		return self._left_associative(self._term, ">", ">=", "<", "<=")

	def _term(self) -> Expr:
		return self._left_associative(self._factor, "-", "+")

	def _factor(self) -> Expr:
		return self._left_associative(self._unary, "/", "*")

	def _unary(self) -> Expr:
		if self._match("!", "-"):
			op = self._previous()
			return syntax.Unary(op, self._unary())
		return self._call()

	def _call(self) -> Expr:
		expr = self._primary()
		while True:
			if self._match("("):
				expr = self._finish_call(expr)
			elif self._match("."):
				name = self._consume("name", "Expect property name after '.'.")
				expr = syntax.Get(expr, name)
			else:
				return expr

	def _finish_call(self, callee:Expr) -> syntax.Call:
		args = []
		if not self._check(")"):
			while True:
				if len(args) >= MAX_ARGS:
					self._error(self._peek(), "Can't have more than %d arguments." % MAX_ARGS)
				args.append(self._expression())
				if not self._match(","): break
		paren = self._consume(")", "Expect ')' after arguments.")
		return syntax.Call(callee, paren, args)

	def _primary(self) -> Expr:
		token = self._peek()
		if self._match("FALSE"): return syntax.Literal(False, token.spot)
		if self._match("TRUE"): return syntax.Literal(True, token.spot)
		if self._match("NIL"): return syntax.Literal(None, token.spot)
		if self._match("number", "string"): return syntax.Literal(token.literal, token.spot)
		if self._match("THIS"): return syntax.This(token)
		if self._match("name"): return syntax.Variable(token)
		if self._match("SUPER"):
			self._consume(".", "Expect '.' after 'super'.")
			method = self._consume("name", "Expect superclass method name.")
			return syntax.Super(token, method)
		if self._match("FUN"):
			params, body = self._signature_and_body("function")
			return syntax.Lambda(token, params, body)
		if self._match("("):
			expr = self._expression()
			self._consume(")", "Expect ')' after expression.")
			return syntax.Grouping(expr)
		raise self._error(token, "Expect expression.")

def parse_text(text:str, path:Optional[Path], report:Report) -> list[Stmt]:
	""" Submit text to scanner and parser. Check the report before trusting the result. """
	assert isinstance(path, Path) or path is None
	tokens = scan_text(text, path, report)
	statements = Parser(tokens, report).parse()
	report.info("Parsed", len(statements), "top-level statement(s) from", path or "<input>")
	return statements

##########################
#
#  Parse errors get a little extra advice when the situation is recognizable.
#

_HINTS = {
	("Expect ';' after expression.", "name"): "Probably missing a semicolon at the end of the previous line.",
	("Expect ';' after value.", "name"): "Probably missing a semicolon at the end of the previous line.",
	("Expect ';' after variable declaration.", "name"): "Probably missing a semicolon at the end of the previous line.",
	("Expect expression.", ")"): "Perhaps a stray comma, or an extra ')' nearby.",
	("Expect expression.", "}"): "Perhaps a statement that ends too early.",
	("Expect ')' after expression.", ";"): "I suspect a missing ')' closing parentheses.",
	("Expect '}' after block.", EOF_KIND): "A '{' somewhere is never closed.",
}

def _best_hint(message:str, lookahead:Token) -> Optional[str]:
	hint = _HINTS.get((message, lookahead.kind))
	if hint: return "Here's my best guess: " + hint
