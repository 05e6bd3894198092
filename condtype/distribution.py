"""
Distribution over unions.

A distributive conditional (one whose check type was declared as a bare type
parameter) behaves like a map over the members of whatever union that parameter
stands for, and the results get unioned back together. NEVER is the empty union,
so it maps to NEVER without so much as a glance at the branches. Any other
check type goes to resolution in one piece.

Each member of a union is evaluated independently of the others, under its own
extension of the mapper. Nothing is shared between them.
"""
from .calculus import ConditionalType, UnionType, NEVER, union_of
from .resolution import Outcome, Resolved, Deferred, resolve

def distribute(cond:ConditionalType, outer) -> Outcome:
	""" Instantiate `cond` under the mapper of the `outer` rewriter. """
	return _distribute(cond, outer.enter(cond))

def _distribute(cond:ConditionalType, context) -> Outcome:
	if not cond.is_distributive:
		return resolve(cond, context, context.rewrite(cond.check))
	param = cond.check
	value = context.rewrite(param)
	if value is NEVER:
		return Resolved(NEVER)
	if isinstance(value, UnionType):
		mapper = context.mapper
		outcomes = [_distribute(cond, context.under(mapper.bind(param, m))) for m in value.members]
		joined = union_of(o.result for o in outcomes)
		if all(isinstance(o, Resolved) for o in outcomes):
			return Resolved(joined)
		return Deferred(joined)
	return resolve(cond, context, value)
