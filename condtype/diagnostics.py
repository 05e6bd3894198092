"""
Things that go wrong, and the means to tell someone about them.

There are two sorts of trouble. A malformed term or a self-contradicting oracle
means the surrounding checker has a bug: those exceptions propagate and nobody
here tries to recover. Running out of recursion budget is the user's problem
(some type alias refers to itself without end) and so it can become an issue
in a Report, to be shown alongside whatever else the checker found.
"""
import sys
from typing import Any, Sequence

class ResolutionError(Exception):
	pass

class MalformedTerm(ResolutionError):
	""" A type parameter turned up with no binding and no enclosing scope. """
	def __init__(self, param):
		super().__init__(param)
		self.param = param
	def __str__(self): return "Type parameter %r is neither bound nor in scope."%self.param

class RecursionLimitExceeded(ResolutionError):
	def __init__(self, limit:int, term):
		super().__init__(limit, term)
		self.limit, self.term = limit, term
	def __str__(self): return "Instantiation depth exceeded %d at %r"%(self.limit, self.term)

class OracleInconsistency(ResolutionError):
	"""
	The permissive test failed while the restrictive test passed.
	The permissive test is strictly weaker, so the oracle must be confused.
	"""
	def __init__(self, source, target):
		super().__init__(source, target)
		self.source, self.target = source, target
	def __str__(self): return "Oracle contradicts itself relating %r to %r"%(self.source, self.target)

class TooManyIssues(Exception):
	pass

class Pic:
	def __init__(self, intro:str, lines:Sequence[str]=(), footer:Sequence[str]=()):
		self._intro, self._lines, self._footer = intro, list(lines), footer
	def also(self, line:str): self._lines.append(line)
	def as_text(self):
		lines = [self._intro, ""]
		lines.extend("    "+line for line in self._lines)
		lines.extend(self._footer)
		return '\n'.join(lines)

class Report:
	""" Collects issues for the embedding type checker to show, and traces when asked. """
	_issues : list[Pic]

	def __init__(self, *, verbose:int=0, max_issues=3):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._max_issues = max_issues

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)

	@property
	def issues(self) -> list[Pic]: return list(self._issues)

	def issue(self, it:Any):
		self._issues.append(it)
		if len(self._issues) == self._max_issues:
			raise TooManyIssues(self)

	def reset(self):
		self._issues.clear()

	def info(self, *args, level=1):
		if self._verbose >= level:
			print(*args, file=sys.stderr)

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		if self._issues:
			print("*"*60, file=sys.stderr)
		for i in self._issues:
			print("  -"*20, file=sys.stderr)
			print(i.as_text(), file=sys.stderr)
		sys.stderr.flush()

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(message)

	# Methods the evaluator is likely to call:

	def recursion_limit(self, ex:RecursionLimitExceeded, request):
		intro = "This type never finishes expanding. It probably refers to itself without end."
		lines = [
			"While instantiating: %r"%(request,),
			"Gave up at: %r"%(ex.term,),
		]
		footer = ["(The limit is %d nested instantiations.)"%ex.limit]
		self.issue(Pic(intro, lines, footer))
