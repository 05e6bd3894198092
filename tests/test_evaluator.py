"""
Type aliases, the recursion budget, and the reports that come out of it all.
"""
import io
import unittest
from unittest import mock

from condtype.calculus import TypeParameter, TupleType, ConditionalType, TypeAlias, NEVER, union_of
from condtype.mapper import IDENTITY
from condtype.evaluator import Evaluator, Settings
from condtype.diagnostics import Report, Pic, RecursionLimitExceeded, TooManyIssues
from condtype.primitive import STRING, NUMBER, NULL, TRUE, FALSE, standard_oracle

class Silence(Report):
	def __init__(self):
		super().__init__(verbose=False, max_issues=30)
		self.complain_to_console = mock.Mock()

def _looping_alias():
	# Loop[X] = X extends string ? Loop[X] : never
	x = TypeParameter("X")
	loop = TypeAlias("Loop", [x])
	return loop.define(ConditionalType(x, STRING, loop(x), NEVER))

class AliasTests(unittest.TestCase):

	def test_alias_expands(self):
		x = TypeParameter("X")
		check_null = TypeAlias("CheckNull", [x]).define(ConditionalType(x, NULL, NUMBER, x))
		evaluator = Evaluator(standard_oracle())
		self.assertEqual(union_of([NUMBER, STRING]), evaluator.instantiate(check_null(union_of([NULL, STRING]))))

	def test_alias_argument_from_outer_scope(self):
		x, t = TypeParameter("X"), TypeParameter("T")
		box = TypeAlias("Box", [x]).define(TupleType([x, x]))
		evaluator = Evaluator(standard_oracle(), scope=[t])
		self.assertEqual(TupleType([t, t]), evaluator.instantiate(box(t)))
		self.assertEqual(TupleType([STRING, STRING]), evaluator.instantiate(box(t), IDENTITY.bind(t, STRING)))

	def test_self_reference_defers_when_undecided(self):
		loop = _looping_alias()
		y = TypeParameter("Y")
		evaluator = Evaluator(standard_oracle(), scope=[y])
		residual = evaluator.instantiate(loop(y))
		self.assertIsInstance(residual, ConditionalType)
		self.assertIs(NEVER, evaluator.instantiate(residual, IDENTITY.bind(y, NUMBER)))

	def test_self_reference_hits_the_limit(self):
		loop = _looping_alias()
		evaluator = Evaluator(standard_oracle(), settings=Settings(depth_limit=20))
		with self.assertRaises(RecursionLimitExceeded) as caught:
			evaluator.instantiate(loop(STRING))
		self.assertEqual(20, caught.exception.limit)

	def test_evaluate_files_a_report(self):
		loop = _looping_alias()
		report = Silence()
		evaluator = Evaluator(standard_oracle(), settings=Settings(depth_limit=20), report=report)
		self.assertIsNone(evaluator.evaluate(loop(STRING)))
		self.assertTrue(report.sick())
		self.assertIn("refers to itself", report.issues[0].as_text())
		self.assertIs(NEVER, evaluator.evaluate(loop(NUMBER)))
		self.assertEqual(1, len(report.issues))

	def test_limit_counts_nesting(self):
		deep = TRUE
		for _ in range(10):
			deep = ConditionalType(STRING, STRING, deep, FALSE)
		self.assertIs(TRUE, Evaluator(standard_oracle()).instantiate(deep))
		with self.assertRaises(RecursionLimitExceeded):
			Evaluator(standard_oracle(), settings=Settings(depth_limit=5)).instantiate(deep)

class ReportTests(unittest.TestCase):

	def test_too_many_issues(self):
		report = Report(max_issues=2)
		report.issue(Pic("one"))
		with self.assertRaises(TooManyIssues):
			report.issue(Pic("two"))

	def test_assert_no_issues(self):
		report = Silence()
		report.assert_no_issues("fine")
		report.issue(Pic("trouble", ["here"]))
		with self.assertRaises(AssertionError):
			report.assert_no_issues("not fine")
		self.assertEqual(1, report.complain_to_console.call_count)
		report.reset()
		self.assertTrue(report.ok())

	@mock.patch("sys.stderr", new_callable=io.StringIO)
	def test_trace(self, stderr):
		x = TypeParameter("X")
		evaluator = Evaluator(standard_oracle(), scope=[x], settings=Settings(verbose=2))
		evaluator.instantiate(ConditionalType(x, NULL, NUMBER, x))
		self.assertIn("permissive True restrictive False", stderr.getvalue())
		self.assertIn("deferred", stderr.getvalue())

	@mock.patch("sys.stderr", new_callable=io.StringIO)
	def test_quiet_by_default(self, stderr):
		x = TypeParameter("X")
		Evaluator(standard_oracle(), scope=[x]).instantiate(ConditionalType(x, NULL, NUMBER, x))
		self.assertEqual("", stderr.getvalue())
