import unittest

from lox import diagnostics, syntax
from lox.front_end import parse_text
from lox.resolution import resolve

def _resolve(text):
	report = diagnostics.Report()
	statements = parse_text(text, report)
	report.assert_no_issues("Should have parsed.")
	return statements, resolve(statements, report)

class DistanceTests(unittest.TestCase):

	def resolved(self, text):
		statements, issues = _resolve(text)
		assert not issues, [i.intro for i in issues]
		return statements

	def test_globals_stay_unresolved(self):
		_, show = self.resolved("var a = 1; print a;")
		self.assertIsNone(show.expr.distance)

	def test_one_block_out(self):
		block, = self.resolved("{ var a = 1; { print a; } }")
		show = block.statements[1].statements[0]
		self.assertEqual(1, show.expr.distance)

	def test_shadow_wins(self):
		block, = self.resolved("{ var a = 1; { var a = 2; print a; } }")
		show = block.statements[1].statements[1]
		self.assertEqual(0, show.expr.distance)

	def test_parameters_and_closures(self):
		outer, = self.resolved("fun outer(x) { fun inner() { return x; } return x; }")
		inner, direct = outer.body
		self.assertEqual(0, direct.value.distance)
		self.assertEqual(1, inner.body[0].value.distance)

	def test_assignment(self):
		block, = self.resolved("{ var a; { a = 2; } }")
		assign = block.statements[1].statements[0].expr
		self.assertIsInstance(assign, syntax.Assign)
		self.assertEqual(1, assign.distance)

	def test_later_shadow_does_not_capture(self):
		block, = self.resolved('{ fun show() { print a; } var a = "b"; }')
		fn = block.statements[0]
		self.assertIsNone(fn.body[0].expr.distance)

	def test_this_and_super(self):
		_, sub = self.resolved("class A { m() {} } class B < A { m() { super.m(); return this; } }")
		call, ret = sub.methods[0].body
		self.assertEqual(2, call.expr.callee.distance)
		self.assertEqual(1, ret.value.distance)

	def test_function_may_recur(self):
		block, = self.resolved("{ fun f(n) { return f(n); } }")
		self.assertEqual(1, block.statements[0].body[0].value.callee.distance)

	def test_globals_may_repeat(self):
		self.resolved("var a = 1; var a = 2;")

	def test_bare_return_in_initializer(self):
		self.resolved("class A { init() { return; } }")

class StaticErrorTests(unittest.TestCase):

	def complaints(self, text):
		_, issues = _resolve(text)
		return [i.intro for i in issues]

	def test_duplicate_local(self):
		self.assertEqual(
			["Error at 'a': Already a variable with this name in this scope."],
			self.complaints("{ var a = 1; var a = 2; }"),
		)

	def test_duplicate_parameter(self):
		self.assertEqual(1, len(self.complaints("fun f(a, a) {}")))

	def test_own_initializer(self):
		self.assertEqual(
			["Error at 'a': Can't read local variable in its own initializer."],
			self.complaints("{ var a = a; }"),
		)

	def test_own_initializer_is_fine_at_global_scope(self):
		self.assertEqual([], self.complaints("var a = a;"))

	def test_return_rules(self):
		self.assertEqual(["Error at 'return': Can't return from top-level code."], self.complaints("return;"))
		self.assertEqual(
			["Error at 'return': Can't return a value from an initializer."],
			self.complaints("class A { init() { return 1; } }"),
		)

	def test_this_and_super_outside_class(self):
		self.assertEqual(["Error at 'this': Can't use 'this' outside of a class."], self.complaints("print this;"))
		self.assertEqual(
			["Error at 'super': Can't use 'super' outside of a class."],
			self.complaints("fun f() { super.g(); }"),
		)
		self.assertEqual(
			["Error at 'super': Can't use 'super' in a class with no superclass."],
			self.complaints("class A { m() { super.m(); } }"),
		)

	def test_inherit_from_self(self):
		self.assertEqual(["Error at 'A': A class can't inherit from itself."], self.complaints("class A < A {}"))

	def test_every_error_is_reported(self):
		self.assertEqual(3, len(self.complaints("return 1; print this; { var x; var x; }")))

	def test_headline_cites_the_line(self):
		_, issues = _resolve("{\n  var a;\n  var a;\n}")
		self.assertEqual([3, 2], issues[0].lines)
		self.assertEqual("[line 3] Error at 'a': Already a variable with this name in this scope.", issues[0].headline())

if __name__ == '__main__':
	unittest.main()
