"""
The relation oracle decides whether one type is assignable to another.

The evaluator treats it as a black box. The surrounding type checker supplies
the real thing; SubtypeOracle is a small reference oracle, good enough for
tests and for embedding in simple checkers. It understands the shapes in the
calculus and a declared lattice of atomic types.
"""
from abc import ABC, abstractmethod
from typing import Sequence
from .calculus import (
	CondType, TypeParameter, AtomicType, UnionType, TupleType,
	NEVER, WILDCARD, UNKNOWN, union_of,
)

class RelationOracle(ABC):
	@abstractmethod
	def is_related(self, source:CondType, target:CondType) -> bool:
		"""
		Is `source` assignable to `target`? WILDCARD must count as
		assignable to and from anything at all, NEVER included.
		"""

	def infer(self, source:CondType, target:CondType, candidates:Sequence[TypeParameter]) -> dict[TypeParameter, CondType]:
		"""
		The inference side-channel: while matching `source` against `target`,
		say what each of the `candidates` appearing in `target` must have been.
		Candidates with nothing to go on are simply left out.
		"""
		return {}

	def constraint_of(self, param:TypeParameter) -> CondType:
		return param.constraint


class SubtypeOracle(RelationOracle):
	def __init__(self):
		self._supers: dict[AtomicType, set[AtomicType]] = {}

	def declare(self, sub:AtomicType, *supers:AtomicType) -> AtomicType:
		self._supers.setdefault(sub, set()).update(supers)
		return sub

	def _is_subatom(self, sub:AtomicType, sup:AtomicType) -> bool:
		seen, agenda = {sub}, [sub]
		while agenda:
			for parent in self._supers.get(agenda.pop(), ()):
				if parent == sup: return True
				if parent not in seen:
					seen.add(parent)
					agenda.append(parent)
		return False

	def is_related(self, source, target):
		if source is WILDCARD or target is WILDCARD: return True
		if source == target or source is NEVER or target is UNKNOWN: return True
		if isinstance(source, UnionType):
			return all(self.is_related(m, target) for m in source.members)
		if isinstance(target, UnionType):
			return any(self.is_related(source, m) for m in target.members)
		if isinstance(source, TypeParameter):
			return self.is_related(self.constraint_of(source), target)
		if isinstance(source, TupleType) and isinstance(target, TupleType):
			return len(source.elements) == len(target.elements) and all(
				self.is_related(s, t) for s, t in zip(source.elements, target.elements)
			)
		if isinstance(source, AtomicType) and isinstance(target, AtomicType):
			return self._is_subatom(source, target)
		return False

	def infer(self, source, target, candidates):
		found = {}
		def match(s, t):
			if t in candidates:
				found[t] = union_of([found[t], s]) if t in found else s
			elif isinstance(s, TupleType) and isinstance(t, TupleType) and len(s.elements) == len(t.elements):
				for x, y in zip(s.elements, t.elements): match(x, y)
			elif isinstance(s, UnionType) and not isinstance(t, UnionType):
				for x in s.members: match(x, t)
		match(source, target)
		return found
