import contextlib, io, math
import unittest

from lox import diagnostics
from lox.ontology import Token
from lox.tree_walker import executive, evaluator
from lox.tree_walker.runtime import TreeWalker, stringify, is_equal
from lox.tree_walker.values import Class, Instance, NativeFunction

def _prepare(text):
	report = diagnostics.Report()
	try:
		return executive.prepare(text, report)
	except executive.Yuck as ex:
		report.complain_to_console()
		raise AssertionError("Failed in %s phase" % ex.args[0])

def _run(text, walker=None) -> list[str]:
	buffer = io.StringIO()
	with contextlib.redirect_stdout(buffer):
		executive.run_program(_prepare(text), walker)
	return buffer.getvalue().splitlines()

class ProgramTests(unittest.TestCase):
	""" Whole programs, checked by what they print. """

	def test_print_forms(self):
		self.assertEqual(
			["nil", "true", "false", "3", "2.5", "-0", "text"],
			_run('print nil; print true; print false; print 3; print 2.5; print -0; print "text";'),
		)

	def test_division_by_zero_is_not_an_error(self):
		self.assertEqual(["inf", "-inf", "NaN", "false"], _run("""
			print 1/0;
			print -1/0;
			print 0/0;
			var n = 0/0;
			print n == n;
		"""))

	def test_closures_see_later_assignments(self):
		self.assertEqual(["2"], _run("""
			var f;
			{
				var x = 1;
				fun show() { print x; }
				x = 2;
				f = show;
			}
			f();
		"""))

	def test_closures_from_one_declaration_are_distinct(self):
		self.assertEqual(["false", "true"], _run("""
			fun make() { fun f() {} return f; }
			print make() == make();
			var g = make();
			print g == g;
		"""))

	def test_instances_compare_by_identity(self):
		self.assertEqual(["false", "true"], _run("""
			class A {}
			var a = A();
			print A() == a;
			var b = a;
			print b == a;
		"""))

	def test_instances_are_shared_not_copied(self):
		self.assertEqual(["changed"], _run("""
			class Box {}
			var a = Box();
			var b = a;
			b.content = "changed";
			print a.content;
		"""))

	def test_return_unwinds_blocks_and_loops(self):
		self.assertEqual(["3", "after"], _run("""
			fun find() {
				for (var i = 0; i < 10; i = i + 1) {
					{ if (i == 3) return i; }
				}
				return nil;
			}
			print find();
			print "after";
		"""))
		self.assertEqual(["3"], _run("""
			fun find() { var i = 0; while (true) { i = i + 1; if (i == 3) return i; } }
			print find();
		"""))

	def test_logic_returns_the_deciding_operand(self):
		self.assertEqual(["hi", "nil", "0"], _run('print nil or "hi"; print nil and 1; print 0 or 1;'))

	def test_right_side_of_shortcut_is_not_evaluated(self):
		self.assertEqual(["done"], _run('fun loud() { print "loud"; return true; } false and loud(); true or loud(); print "done";'))

	def test_bound_method_remembers_its_instance(self):
		self.assertEqual(["Jane"], _run("""
			class Person { name() { return this.n; } }
			var p = Person();
			p.n = "Jane";
			var m = p.name;
			p = nil;
			print m();
		"""))

	def test_super_is_static(self):
		self.assertEqual(["A"], _run("""
			class A { who() { return "A"; } }
			class B < A { who() { return "B"; } ask() { return super.who(); } }
			class C < B { who() { return "C"; } }
			print C().ask();
		"""))

	def test_initializer_returns_the_instance(self):
		self.assertEqual(["true", "1"], _run("""
			class P { init(x) { this.x = x; } }
			var p = P(1);
			print p.init(2) == p;
			var q = P(1);
			print q.x;
		"""))

	def test_shared_walker_keeps_globals(self):
		walker = TreeWalker()
		_run("var total = 40;", walker)
		self.assertEqual(["42"], _run("total = total + 2; print total;", walker))

class RuntimeErrorTests(unittest.TestCase):

	def crash(self, text, kind=evaluator.LoxRuntimeError):
		buffer = io.StringIO()
		walker = TreeWalker()
		with contextlib.redirect_stdout(buffer):
			with self.assertRaises(kind) as cm:
				executive.run_program(_prepare(text), walker)
		self.assertIs(walker.globals, walker.environment)
		return cm.exception, buffer.getvalue().splitlines()

	def test_messages(self):
		for text, message in [
			('print 1 + "a";', "Operands must be two numbers or two strings."),
			('print 1 < "a";', "Operands must be numbers."),
			('print -"a";', "Operand must be a number."),
			('print missing;', "Undefined variable 'missing'."),
			('missing = 1;', "Undefined variable 'missing'."),
			('"text"();', "Can only call functions and classes."),
			('fun f(a) {} f();', "Expected 1 arguments but got 0."),
			('print 1.field;', "Only instances have properties."),
			('var n = 1; n.field = 2;', "Only instances have fields."),
			('class A {} print A().nope;', "Undefined property 'nope'."),
			('var S = 1; class B < S {}', "Superclass must be a class."),
		]:
			with self.subTest(text):
				ex, _ = self.crash(text)
				self.assertEqual(message, ex.message)

	def test_error_cites_its_line(self):
		ex, printed = self.crash('print "before";\n\nprint nothing;\nprint "after";', evaluator.UndefinedVariable)
		self.assertEqual(3, ex.token.line)
		self.assertEqual("Undefined variable 'nothing'.\n[line 3]", str(ex))
		self.assertEqual(["before"], printed)

	def test_arity_is_checked_before_arguments(self):
		ex, printed = self.crash('fun g() { print "evaluated"; } fun f(a) {} f(g(), g());', evaluator.InvalidArgumentCount)
		self.assertEqual((1, 2), (ex.expected, ex.actual))
		self.assertEqual([], printed)

	def test_class_arity_follows_init(self):
		ex, _ = self.crash("class A { init(a, b) {} } class B < A {} B(1);", evaluator.InvalidArgumentCount)
		self.assertEqual(2, ex.expected)

	def test_native_arity(self):
		self.crash("clock(1);", evaluator.InvalidArgumentCount)

	def test_frame_is_restored_after_failure_inside_call(self):
		self.crash("fun f() { { var x = 1; print x + nil; } } f();", evaluator.IncompatibleOperandType)

class ValueTests(unittest.TestCase):

	def test_stringify(self):
		self.assertEqual("7", stringify(7.0))
		self.assertEqual("0.1", stringify(0.1))
		self.assertEqual("-0", stringify(-0.0))
		self.assertEqual("NaN", stringify(math.nan))

	def test_equality_does_not_coerce(self):
		self.assertTrue(is_equal(None, None))
		self.assertFalse(is_equal(None, False))
		self.assertFalse(is_equal(True, 1.0))
		self.assertFalse(is_equal(0.0, False))
		self.assertFalse(is_equal("1", 1.0))
		self.assertTrue(is_equal("a", "a"))

	def test_truthiness(self):
		self.assertFalse(evaluator.is_truthy(None))
		self.assertFalse(evaluator.is_truthy(False))
		for value in (True, 0.0, "", Instance(Class("A", {}, None))):
			self.assertTrue(evaluator.is_truthy(value))

	def test_class_machinery(self):
		base = Class("Base", {}, None)
		derived = Class("Derived", {}, base)
		self.assertIsNone(derived.find_method("anything"))
		self.assertEqual(0, derived.arity())
		thing = derived.call(TreeWalker(), [])
		self.assertIs(derived, thing.klass)
		self.assertEqual("Derived instance", str(thing))
		self.assertEqual("Derived", str(derived))

	def test_instance_fields(self):
		thing = Instance(Class("Thing", {}, None))
		name = Token("IDENTIFIER", "size", None, 1)
		with self.assertRaises(evaluator.UndefinedProperty):
			thing.get(name)
		thing.set(name, 3.0)
		self.assertEqual(3.0, thing.get(name))

	def test_native_function(self):
		native = NativeFunction("twice", 1, lambda x: x * 2)
		self.assertEqual("<native fn>", str(native))
		self.assertEqual(8.0, native.call(TreeWalker(), [4.0]))

	def test_clock_is_installed(self):
		clock = TreeWalker().globals.get("clock")
		self.assertEqual(0, clock.arity())
		self.assertGreater(clock.call(None, []), 0)

if __name__ == '__main__':
	unittest.main()
