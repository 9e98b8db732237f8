import io
from pathlib import Path
import unittest
from unittest import mock

from loxtree.diagnostics import Report
from loxtree.resolution import Yuck
from loxtree.tree_walker.executive import Session

class Silence(Report):
	def __init__(self):
		super().__init__(verbose=False, max_issues=30)
		self.complain_to_console = mock.Mock()
	pass

base_folder = Path(__file__).parent.parent
zoo_fail = base_folder/"zoo/fail"

SPECIMENS = {
	"parse": [
		"expect_expression",
		"invalid_assignment",
		"missing_semicolon",
		"super_without_dot",
		"unclosed_block",
		"unexpected_character",
		"unterminated_comment",
		"unterminated_string",
	],
	"resolve": [
		"duplicate_local",
		"duplicate_parameter",
		"inherits_from_itself",
		"own_initializer",
		"return_top_level",
		"return_value_from_init",
		"super_outside_class",
		"super_without_superclass",
		"this_outside_class",
	],
	"runtime": [
		"add_mismatch",
		"assign_undefined",
		"call_non_callable",
		"class_arity",
		"compare_mixed",
		"division_by_zero",
		"field_on_non_instance",
		"negate_string",
		"property_of_non_instance",
		"superclass_not_class",
		"undefined_property",
		"undefined_variable",
		"wrong_arity",
	],
}

def _identify_problem(folder:Path, filename:str):
	specimen_path = folder / filename
	assert specimen_path.exists(), specimen_path
	report = Silence()
	session = Session(out=io.StringIO(), err=io.StringIO(), report=report)
	try:
		statements = session.check(specimen_path.read_text(), specimen_path)
	except Yuck as ex:
		assert 0 == report.complain_to_console.call_count
		assert report.sick()
		return ex.args[0]
	else:
		report.assert_no_issues("Resolution passed with issues outstanding.")
		if session.evaluator.interpret(statements): return "failed to fail"
		else: return "runtime"

class ZooOfFail(unittest.TestCase):
	""" Tests that assert about failure modes. """

	def expect(self, folder, cases):
		for basename in cases:
			with self.subTest(basename):
				self.assertEqual(folder, _identify_problem(zoo_fail / folder, basename + ".lox"))

	def test_00_parse(self): self.expect("parse", SPECIMENS["parse"])
	def test_01_resolve(self): self.expect("resolve", SPECIMENS["resolve"])
	def test_02_runtime(self): self.expect("runtime", SPECIMENS["runtime"])

	def test_zoo_is_fully_listed(self):
		# A specimen nobody mentions is a specimen nobody tests.
		self.assertEqual(set(SPECIMENS), {folder.name for folder in zoo_fail.iterdir()})
		for phase, names in SPECIMENS.items():
			with self.subTest(phase):
				self.assertEqual(sorted(names), sorted(p.stem for p in (zoo_fail/phase).glob("*.lox")))

class RuntimeMessages(unittest.TestCase):
	""" Each runtime specimen should fail for the reason its name suggests. """

	def check(self, basename, message, line):
		err = io.StringIO()
		session = Session(out=io.StringIO(), err=err, report=Silence())
		session.run_file(zoo_fail/"runtime"/(basename+".lox"))
		self.assertEqual("%s\n[line %d]\n" % (message, line), err.getvalue())

	def test_messages(self):
		cases = [
			("add_mismatch", "Operands must be two numbers or two strings.", 1),
			("assign_undefined", "Undefined variable 'neverDeclared'.", 1),
			("call_non_callable", "Can only call functions and classes.", 2),
			("class_arity", "Expected 2 arguments but got 1.", 4),
			("compare_mixed", "Operands must be numbers.", 1),
			("division_by_zero", "Division by zero.", 1),
			("field_on_non_instance", "Only instances have fields.", 1),
			("negate_string", "Operand must be a number.", 1),
			("property_of_non_instance", "Only instances have properties.", 2),
			("superclass_not_class", "Superclass must be a class.", 2),
			("undefined_property", "Undefined property 'missing'.", 2),
			("undefined_variable", "Undefined variable 'notDefinedAnywhere'.", 1),
			("wrong_arity", "Expected 2 arguments but got 1.", 2),
		]
		for basename, message, line in cases:
			with self.subTest(basename):
				self.check(basename, message, line)

if __name__ == '__main__':
	unittest.main()
