"""
Building the residual term when a conditional cannot be decided yet.
"""
from .calculus import ConditionalType, FreeParameters
from .mapper import Mapper

def residual(cond:ConditionalType, mapper:Mapper) -> ConditionalType:
	"""
	The declared fields stay exactly as they were, so a distributive check type
	stays a bare parameter and the distributive flag is never re-derived.
	What changes is the environment: the mapper in force, cut down to the
	parameters the fields actually mention, becomes the term's bindings.
	"""
	collector = FreeParameters()
	for field in (cond.check, cond.extends, cond.when_true, cond.when_false):
		field.visit(collector)
	mentioned = [p for p in collector.found if p not in cond.infer]
	return ConditionalType(
		cond.check, cond.extends, cond.when_true, cond.when_false,
		infer=cond.infer,
		is_distributive=cond.is_distributive,
		bindings=mapper.restrict(mentioned),
	)
