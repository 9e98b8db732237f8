import io
import unittest
from unittest import mock

from loxtree import syntax, primitive
from loxtree.diagnostics import Report, LoxRuntimeError
from loxtree.ontology import Token
from loxtree.tree_walker import runtime
from loxtree.tree_walker.evaluator import Evaluator, Returning
from loxtree.tree_walker.executive import Session, OK, STATIC, RUNTIME
from loxtree.tree_walker.values import LoxFunction, LoxClass, LoxInstance, NativeFunction

class Silence(Report):
	def __init__(self):
		super().__init__(verbose=False, max_issues=30)
		self.complain_to_console = mock.Mock()

class Harness:
	""" One session with its output captured. """
	def __init__(self):
		self.out, self.err = io.StringIO(), io.StringIO()
		self.session = Session(out=self.out, err=self.err, report=Silence())

	def run(self, text):
		return self.session.run(text)

	def printed(self):
		return self.out.getvalue().splitlines()

def _output(text):
	harness = Harness()
	outcome = harness.run(text)
	assert outcome == OK, harness.err.getvalue()
	return harness.printed()

class PrimitiveSemantics(unittest.TestCase):

	def test_truthiness(self):
		self.assertFalse(runtime.is_truthy(None))
		self.assertFalse(runtime.is_truthy(False))
		for value in (True, 0.0, "", "false", LoxInstance(LoxClass("A", None, {}))):
			with self.subTest(value):
				self.assertTrue(runtime.is_truthy(value))

	def test_equality_does_not_coerce(self):
		self.assertTrue(runtime.is_equal(None, None))
		self.assertFalse(runtime.is_equal(None, False))
		self.assertFalse(runtime.is_equal(1.0, True))
		self.assertFalse(runtime.is_equal(0.0, False))
		self.assertFalse(runtime.is_equal("1", 1.0))
		self.assertTrue(runtime.is_equal("a", "a"))
		self.assertTrue(runtime.is_equal(2.0, 2.0))

	def test_stringify(self):
		cases = [
			(None, "nil"), (True, "true"), (False, "false"),
			(3.0, "3"), (-7.0, "-7"), (2.5, "2.5"), ("raw text", "raw text"),
			(-0.0, "-0"), (0.0, "0"), (1e23, "1e+23"), (123456789.0, "123456789"), (0.1, "0.1"),
			(LoxClass("Thing", None, {}), "Thing"),
			(LoxInstance(LoxClass("Thing", None, {})), "Thing instance"),
			(NativeFunction("clock", 0, lambda:0.0), "<native fn>"),
		]
		for value, text in cases:
			with self.subTest(text):
				self.assertEqual(text, runtime.stringify(value))

	def test_binary_operation_errors(self):
		plus = Token("+", "+", None, 4)
		with self.assertRaises(LoxRuntimeError) as context:
			runtime.binary_operation(plus, "a", 1.0)
		self.assertEqual("Operands must be two numbers or two strings.\n[line 4]", context.exception.describe())
		slash = Token("/", "/", None, 5)
		with self.assertRaises(LoxRuntimeError) as context:
			runtime.binary_operation(slash, 1.0, 0.0)
		self.assertEqual("Division by zero.", context.exception.message)
		with self.assertRaises(LoxRuntimeError):
			runtime.binary_operation(Token("<", "<", None, 1), True, False)

class OutcomeTests(unittest.TestCase):
	""" Statements report how they finished, rather than raising for `return`. """

	def setUp(self):
		self.evaluator = Evaluator(out=io.StringIO(), err=io.StringIO())
		self.keyword = Token("RETURN", "return", None, 1)

	def test_return_is_an_outcome(self):
		outcome = self.evaluator.execute(syntax.Return(self.keyword, syntax.Literal(4.0, 0)))
		self.assertEqual(Returning(4.0), outcome)

	def test_bare_return_carries_nil(self):
		self.assertEqual(Returning(None), self.evaluator.execute(syntax.Return(self.keyword, None)))

	def test_ordinary_statements_complete(self):
		self.assertIsNone(self.evaluator.execute(syntax.Print(syntax.Literal("hi", 0))))

	def test_blocks_pass_the_outcome_outward(self):
		block = syntax.Block([
			syntax.Block([syntax.Return(self.keyword, syntax.Literal("out", 0))]),
			syntax.Print(syntax.Literal("never", 0)),
		])
		self.assertEqual(Returning("out"), self.evaluator.execute(block))
		self.assertEqual("", self.evaluator._out.getvalue())

	def test_environment_is_restored_after_a_block(self):
		before = self.evaluator._env
		self.evaluator.execute(syntax.Block([syntax.Return(self.keyword, None)]))
		self.assertIs(before, self.evaluator._env)

class ProgramTests(unittest.TestCase):

	def test_call_arity_is_checked(self):
		harness = Harness()
		self.assertEqual(RUNTIME, harness.run("fun f(a, b) {}\nf(1, 2, 3);"))
		self.assertEqual("Expected 2 arguments but got 3.\n[line 2]\n", harness.err.getvalue())

	def test_runtime_error_stops_the_program(self):
		harness = Harness()
		self.assertEqual(RUNTIME, harness.run('print "before";\nprint -nil;\nprint "after";'))
		self.assertEqual(["before"], harness.printed())
		self.assertEqual("Operand must be a number.\n[line 2]\n", harness.err.getvalue())

	def test_runtime_error_deep_in_calls_restores_globals(self):
		harness = Harness()
		self.assertEqual(RUNTIME, harness.run("fun f() { { var x = 1; return 1 + nil; } }\nf();"))
		self.assertIs(harness.session.evaluator.globals, harness.session.evaluator._env)
		self.assertEqual(OK, harness.run("print 1;"))

	def test_static_error_runs_nothing(self):
		harness = Harness()
		self.assertEqual(STATIC, harness.run('print "ran";\nreturn 1;'))
		self.assertEqual([], harness.printed())

	def test_submissions_share_globals(self):
		harness = Harness()
		self.assertEqual(OK, harness.run("var a = 1;"))
		self.assertEqual(OK, harness.run("fun show() { print a; }"))
		self.assertEqual(STATIC, harness.run("print ;"))
		self.assertEqual(RUNTIME, harness.run("a = a + nil;"))
		self.assertEqual(OK, harness.run("show();"))
		self.assertEqual(["1"], harness.printed())

	def test_report_is_reset_between_submissions(self):
		harness = Harness()
		harness.run("print ;")
		self.assertTrue(harness.session.report.sick())
		harness.run("print 1;")
		self.assertTrue(harness.session.report.ok())

	def test_closures_capture_frames_not_values(self):
		text = """
			fun make() {
				var n = 0;
				fun inc() { n = n + 1; }
				fun get() { return n; }
				inc(); inc();
				return get;
			}
			print make()();
		"""
		self.assertEqual(["2"], _output(text))

	def test_functions_are_values(self):
		harness = Harness()
		harness.run("fun f() {} var g = f; print g == f;")
		self.assertEqual(["true"], harness.printed())
		value = harness.session.evaluator.globals.get(Token("name", "f", None, 1))
		self.assertIsInstance(value, LoxFunction)
		self.assertEqual(0, value.arity())

	def test_class_arity_comes_from_init(self):
		harness = Harness()
		harness.run("class A { init(a, b, c) {} } class B < A {} class C {}")
		globals = harness.session.evaluator.globals
		self.assertEqual(3, globals.get(Token("name", "B", None, 1)).arity())
		self.assertEqual(0, globals.get(Token("name", "C", None, 1)).arity())

	def test_init_always_returns_this(self):
		text = """
			class A {
				init() { this.tag = "a"; return; }
			}
			var a = A();
			print a.init() == a;
			print a.tag;
		"""
		self.assertEqual(["true", "a"], _output(text))

	def test_method_lookup_climbs_the_chain(self):
		text = """
			class A { name() { return "A"; } both() { return this.name() + "?"; } }
			class B < A { name() { return "B"; } }
			print B().both();
			print A().both();
		"""
		self.assertEqual(["B?", "A?"], _output(text))

	def test_super_binds_to_the_declaring_class(self):
		text = """
			class A { say() { print "A"; } }
			class B < A { say() { print "B"; super.say(); } }
			class C < B { say() { print "C"; super.say(); } }
			C().say();
		"""
		self.assertEqual(["C", "B", "A"], _output(text))

	def test_undefined_super_method(self):
		harness = Harness()
		self.assertEqual(RUNTIME, harness.run("class A {}\nclass B < A { m() { return super.nope; } }\nB().m();"))
		self.assertEqual("Undefined property 'nope'.\n[line 2]\n", harness.err.getvalue())

	def test_set_evaluates_object_before_value(self):
		harness = Harness()
		self.assertEqual(RUNTIME, harness.run('var s = "str";\ns.field = undefinedName;'))
		self.assertEqual("Only instances have fields.\n[line 2]\n", harness.err.getvalue())

	def test_local_class_and_functions(self):
		text = """
			{
				class Local { get() { return "local"; } }
				fun use() { return Local().get(); }
				print use();
			}
		"""
		self.assertEqual(["local"], _output(text))

	def test_lambdas_close_over_their_scope(self):
		text = """
			var fns;
			{
				var base = 10;
				fns = fun (x) { return x + base; };
			}
			print fns(5);
			print fns;
		"""
		self.assertEqual(["15", "<fn anonymous>"], _output(text))

	def test_operands_and_arguments_evaluate_left_to_right(self):
		text = """
			fun p(x) { print x; return x; }
			fun f(a, b, c) {}
			p(1) + p(2);
			f(p("a"), p("b"), p("c"));
			print p(3) < p(4);
			p(5) == p(6);
		"""
		self.assertEqual(["1", "2", "a", "b", "c", "3", "4", "true", "5", "6"], _output(text))

	def test_callee_evaluates_before_arguments(self):
		text = """
			fun p(x) { print x; return x; }
			fun pick() { print "callee"; return p; }
			pick()(p("argument"));
		"""
		self.assertEqual(["callee", "argument", "argument"], _output(text))

	def test_string_concatenation_and_comparison(self):
		self.assertEqual(["ab", "true", "false"], _output('print "a" + "b"; print "a" == "a"; print "a" == "b";'))

class NativeTests(unittest.TestCase):

	def test_clock(self):
		self.assertEqual(["true", "<native fn>"], _output("print clock() >= 0; print clock;"))

	def test_registered_native_is_installed(self):
		primitive.register("double", 1, lambda x: x * 2)
		try:
			self.assertEqual(["8"], _output("print double(4);"))
		finally:
			del primitive.NATIVES["double"]

	def test_native_arity_is_checked(self):
		harness = Harness()
		self.assertEqual(RUNTIME, harness.run("clock(1);"))
		self.assertEqual("Expected 0 arguments but got 1.\n[line 1]\n", harness.err.getvalue())

if __name__ == '__main__':
	unittest.main()
