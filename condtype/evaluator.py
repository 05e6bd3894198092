"""
The entry point for instantiating types which may contain conditional terms.

Substitution is a structural homomorphism over the type terms, except at
conditional terms: substituting into one of those can split it over a union,
short-circuit it to NEVER, or pick one of its branches. So the Rewriter does
the structural part itself and hands conditional terms to the distribution
engine, which hands them on to the resolution engine.

A Rewriter is the context for one step of that recursion: the mapper in force,
the parameters that may legitimately stay free, and how deep the recursion has
gone. Rewriters are never modified; going deeper makes a new one. So there is
no shared state between independent requests, or even between the members of
a union being distributed over.
"""
from typing import NamedTuple, Iterable, Optional
from .calculus import (
	CondType, TypeVisitor, TypeParameter, AtomicType, UnionType, TupleType,
	ConditionalType, AliasCall, UNKNOWN, union_of,
)
from .mapper import Mapper, Composed, IDENTITY
from .relation import RelationOracle
from .diagnostics import Report, MalformedTerm, RecursionLimitExceeded
from . import distribution

class Settings(NamedTuple):
	depth_limit: int = 100   # Nested conditional and alias instantiations.
	verbose: int = 0         # Trace level for the default Report.


class Evaluator:
	def __init__(self, oracle:RelationOracle, *, scope:Iterable[TypeParameter]=(), settings:Settings=Settings(), report:Report=None):
		"""
		The scope lists type parameters that may remain free in a result:
		typically, those of the generic declaration being checked.
		Any other parameter must be bound by the mapper.
		"""
		self.oracle = oracle
		self.scope = frozenset(scope)
		self.settings = settings
		self.report = Report(verbose=settings.verbose) if report is None else report

	def _root(self, mapper:Mapper) -> "Rewriter":
		return Rewriter(self, mapper, self.scope, 0)

	def instantiate(self, typ:CondType, mapper:Mapper=IDENTITY) -> CondType:
		return self._root(mapper).rewrite(typ)

	def resolve_kind(self, cond:ConditionalType, mapper:Mapper=IDENTITY) -> "distribution.Outcome":
		""" For diagnostic tools that care whether a conditional resolved or deferred. """
		assert isinstance(cond, ConditionalType), cond
		return distribution.distribute(cond, self._root(mapper))

	def operands(self, cond:ConditionalType, mapper:Mapper=IDENTITY) -> tuple[CondType, CondType]:
		"""
		The check and extends types of `cond` as they read under its own bindings
		and then `mapper`. For a residual term, the `check` and `extends` fields
		are the declared ones; this is where the substituted versions come from.
		"""
		context = self._root(mapper).enter(cond)
		return context.rewrite(cond.check), context.widened(cond.infer).rewrite(cond.extends)

	def evaluate(self, typ:CondType, mapper:Mapper=IDENTITY) -> Optional[CondType]:
		"""
		Like instantiate, but a runaway recursion becomes an issue in the report
		and the answer is None.
		"""
		try:
			return self.instantiate(typ, mapper)
		except RecursionLimitExceeded as ex:
			self.report.recursion_limit(ex, typ)
			return None


class Rewriter(TypeVisitor):
	def __init__(self, evaluator:Evaluator, mapper:Mapper, scope:frozenset, depth:int):
		self.evaluator = evaluator
		self.mapper = mapper
		self.scope = scope
		self.depth = depth

	@property
	def oracle(self) -> RelationOracle: return self.evaluator.oracle
	@property
	def report(self) -> Report: return self.evaluator.report

	def rewrite(self, typ:CondType) -> CondType:
		return typ.visit(self)

	def _derive(self, mapper:Mapper, scope:frozenset, depth:int) -> "Rewriter":
		return Rewriter(self.evaluator, mapper, scope, depth)

	def under(self, mapper:Mapper) -> "Rewriter":
		return self._derive(mapper, self.scope, self.depth)

	def widened(self, params:Iterable[TypeParameter]) -> "Rewriter":
		if not params: return self
		return self._derive(self.mapper, self.scope.union(params), self.depth)

	def deeper(self, mapper:Mapper, term:CondType) -> "Rewriter":
		limit = self.evaluator.settings.depth_limit
		if self.depth >= limit:
			raise RecursionLimitExceeded(limit, term)
		return self._derive(mapper, self.scope, self.depth + 1)

	def estimate(self, mapper:Mapper, stand_in:Optional[CondType]=None) -> "Estimate":
		return Estimate(self.evaluator, mapper, self.scope, self.depth, stand_in, frozenset())

	def enter(self, cond:ConditionalType) -> "Rewriter":
		""" The context for evaluating the fields of `cond` under this rewriter's mapper. """
		return self.deeper(self.compose(cond.bindings, self.mapper), cond)

	def compose(self, first:Mapper, second:Mapper) -> Mapper:
		if first is IDENTITY: return second
		if second is IDENTITY: return first
		return Composed(first, second, lambda typ, mapper: self.under(mapper).rewrite(typ))

	def on_parameter(self, p: TypeParameter):
		found = self.mapper.lookup(p)
		if found is not None: return found
		if p in self.scope: return p
		raise MalformedTerm(p)

	def on_atomic(self, a: AtomicType): return a

	def on_union(self, u: UnionType):
		members = [m.visit(self) for m in u.members]
		if all(x is y for x, y in zip(members, u.members)): return u
		return union_of(members)

	def on_tuple(self, t: TupleType):
		elements = [e.visit(self) for e in t.elements]
		if all(x is y for x, y in zip(elements, t.elements)): return t
		return TupleType(elements)

	def on_conditional(self, c: ConditionalType):
		return distribution.distribute(c, self).result

	def on_alias_call(self, a: AliasCall):
		alias = a.alias
		assert alias.body is not None, alias
		args = [x.visit(self) for x in a.args]
		inner = self.deeper(IDENTITY.extend(zip(alias.params, args)), AliasCall(alias, args))
		return alias.body.visit(inner)

	def on_never(self, n): return n
	def on_wildcard(self, w): return w


class Estimate(Rewriter):
	"""
	Rewrites the operands of a resolution test under one of its synthetic mappers.

	A conditional term met along the way has already deferred under the real
	mapper. Deciding it again under a synthetic one would be a decision about an
	instantiation nobody will ever make, so it is estimated instead: it becomes
	the `stand_in`, or failing that, the union of both its branches.
	Alias calls inside those branches expand once per alias. A second visit
	gives up: the call becomes the `stand_in`, or failing that, UNKNOWN.
	"""
	def __init__(self, evaluator:Evaluator, mapper:Mapper, scope:frozenset, depth:int, stand_in:Optional[CondType], expanding:frozenset):
		super().__init__(evaluator, mapper, scope, depth)
		self.stand_in = stand_in
		self.expanding = expanding

	def _derive(self, mapper, scope, depth):
		return Estimate(self.evaluator, mapper, scope, depth, self.stand_in, self.expanding)

	def on_conditional(self, c: ConditionalType):
		if self.stand_in is not None: return self.stand_in
		inner = self.enter(c)
		return union_of([inner.rewrite(c.when_true), inner.rewrite(c.when_false)])

	def on_alias_call(self, a: AliasCall):
		if a.alias in self.expanding:
			return UNKNOWN if self.stand_in is None else self.stand_in
		inner = Estimate(self.evaluator, self.mapper, self.scope, self.depth, self.stand_in, self.expanding | {a.alias})
		return Rewriter.on_alias_call(inner, a)
