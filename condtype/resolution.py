"""
Deciding a conditional: true, false, or not yet.

By the time a conditional gets here, distribution has done its work and the
check type is no longer a union or NEVER. Some type parameters may still be
free, and a later instantiation might bind them to anything their constraints
allow. So the question is not "does the check type extend the extends type?"
but "does it, no matter what the free parameters turn out to be?"

Two instantiations of the free parameters answer that:

* The permissive instantiation replaces each one with WILDCARD, which relates
  to everything. If the relation fails even then, it fails for every possible
  instantiation, and the answer is the false branch.

* The restrictive instantiation assumes the worst: a free parameter in the
  check type becomes its constraint (the biggest thing it could be), and a free
  parameter in the extends type becomes NEVER (the smallest). If the relation
  holds even then, it holds for every possible instantiation, and the answer is
  the true branch.

Anything in between depends on information nobody has yet, so the conditional
defers. The two tests are always two separate trips to the oracle.

A conditional nested inside the check or extends type has already deferred by
the time the tests run. The tests estimate it rather than decide it again.
The permissive test sees WILDCARD. The restrictive test sees NEVER on the
extends side, and the union of both branches on the check side.
"""
from typing import NamedTuple, Union
from .calculus import CondType, ConditionalType, NEVER, WILDCARD, UNKNOWN
from .mapper import Mapper, IDENTITY
from .diagnostics import OracleInconsistency
from .deferral import residual

class Resolved(NamedTuple):
	branch: CondType
	@property
	def result(self) -> CondType: return self.branch

class Deferred(NamedTuple):
	term: CondType
	@property
	def result(self) -> CondType: return self.term

Outcome = Union[Resolved, Deferred]

class _Uniform(Mapper):
	""" Maps every parameter to the same thing. Only for transient test instantiations. """
	def __init__(self, typ:CondType): self.typ = typ
	def lookup(self, param): return self.typ
	def domain(self): return frozenset()

class _Constraints(Mapper):
	""" Maps every parameter to its constraint, itself erased the same way. """
	def __init__(self, context, active:frozenset=frozenset()):
		self._context, self._active = context, active
	def lookup(self, param):
		if param in self._active: return UNKNOWN
		inner = _Constraints(self._context, self._active | {param})
		return self._context.estimate(inner).rewrite(self._context.oracle.constraint_of(param))
	def domain(self): return frozenset()

_PERMISSIVE = _Uniform(WILDCARD)
_FLOOR = _Uniform(NEVER)

def _inference(cond:ConditionalType, context, check:CondType, extends:CondType) -> list:
	oracle = context.oracle
	found = oracle.infer(check, extends, cond.infer)
	return [(param, found[param] if param in found else oracle.constraint_of(param)) for param in cond.infer]

def resolve(cond:ConditionalType, context, check:CondType) -> Outcome:
	"""
	`context` carries the mapper in force for the fields of `cond`,
	and `check` is the check type with that mapper already applied.

	Inferred values come from the check type, so the restrictive test gives
	them the check type's worst case rather than the extends type's.
	"""
	oracle, report = context.oracle, context.report
	declared = context.widened(cond.infer).rewrite(cond.extends)
	extends, branch_mapper, inferred = declared, context.mapper, []
	if cond.infer:
		inferred = _inference(cond, context, check, declared)
		extends = context.under(IDENTITY.extend(inferred)).rewrite(declared)
		branch_mapper = IDENTITY.extend(inferred).atop(branch_mapper)

	wild = context.estimate(_PERMISSIVE, WILDCARD)
	permissive = oracle.is_related(wild.rewrite(check), wild.rewrite(extends))
	worst = context.estimate(_Constraints(context))
	floor = IDENTITY.extend((param, worst.rewrite(value)) for param, value in inferred).atop(_FLOOR)
	restrictive = oracle.is_related(worst.rewrite(check), context.estimate(floor, NEVER).rewrite(declared))
	report.info("resolve", check, "extends", extends, ": permissive", permissive, "restrictive", restrictive, level=2)

	if restrictive and not permissive:
		raise OracleInconsistency(check, extends)
	if not permissive:
		return Resolved(context.rewrite(cond.when_false))
	if restrictive:
		return Resolved(context.under(branch_mapper).rewrite(cond.when_true))
	term = residual(cond, context.mapper)
	report.info("deferred", term)
	return Deferred(term)
