"""
Mappers: immutable substitutions from type parameters to types.

A mapper is a chain of delegation. Extending one with a binding is O(1)
and leaves the original untouched, so a single instantiation request can
fan out (for instance, once per member of a union) without any copying.

Mappers never look inside the types they hand back. Applying a mapper
to a whole term is the job of the evaluator's Rewriter, because conditional
terms do not substitute compositionally.
"""
from typing import Callable, Iterable, Iterator, Optional

class Mapper:
	def lookup(self, param) -> Optional["CondType"]:
		""" The type bound to `param`, or None if this mapper leaves it alone. """
		raise NotImplementedError(type(self))
	def domain(self) -> frozenset:
		""" The parameters this mapper binds. """
		raise NotImplementedError(type(self))

	def apply(self, param) -> "CondType":
		found = self.lookup(param)
		return param if found is None else found
	def bind(self, param, typ) -> "Mapper":
		return Binding(self, param, typ)
	def extend(self, pairs:Iterable[tuple]) -> "Mapper":
		mapper = self
		for param, typ in pairs:
			mapper = mapper.bind(param, typ)
		return mapper
	def atop(self, other:"Mapper") -> "Mapper":
		""" Consult self first, then fall back to other. """
		if self is IDENTITY: return other
		if other is IDENTITY: return self
		return Chain(self, other)
	def restrict(self, params:Iterable) -> "Mapper":
		"""
		A flat binding chain holding just what this mapper says about `params`.
		Useful when a mapper must outlive the request that built it.
		"""
		mapper = IDENTITY
		for param in params:
			found = self.lookup(param)
			if found is not None and found is not param:
				mapper = mapper.bind(param, found)
		return mapper
	def pairs(self) -> Iterator[tuple]:
		for param in sorted(self.domain(), key=lambda p:p.number):
			yield param, self.apply(param)
	def key(self) -> tuple:
		return tuple((p.number, t.number) for p, t in self.pairs())
	def __repr__(self):
		return "{%s}"%(", ".join("%s:=%s"%pair for pair in self.pairs()))


class _Identity(Mapper):
	def lookup(self, param): return None
	def domain(self): return frozenset()
	def key(self): return ()

IDENTITY = _Identity()

class Binding(Mapper):
	def __init__(self, base:Mapper, param, typ):
		self.base, self.param, self.typ = base, param, typ
	def lookup(self, param):
		mapper = self
		while isinstance(mapper, Binding):
			if mapper.param is param: return mapper.typ
			mapper = mapper.base
		return mapper.lookup(param)
	def domain(self):
		found, mapper = set(), self
		while isinstance(mapper, Binding):
			found.add(mapper.param)
			mapper = mapper.base
		return frozenset(found) | mapper.domain()

class Chain(Mapper):
	def __init__(self, top:Mapper, rest:Mapper):
		self.top, self._rest = top, rest
	def lookup(self, param):
		found = self.top.lookup(param)
		return self._rest.lookup(param) if found is None else found
	def domain(self): return self.top.domain() | self._rest.domain()

class Composed(Mapper):
	"""
	Functional composition: first `first`, then `second` over the result.
	Parameters that `first` leaves alone go straight to `second`.
	The `rewrite` callback applies a mapper to a whole term.
	"""
	def __init__(self, first:Mapper, second:Mapper, rewrite:Callable[["CondType", Mapper], "CondType"]):
		self.first, self.second, self._rewrite = first, second, rewrite
	def lookup(self, param):
		found = self.first.lookup(param)
		if found is None: return self.second.lookup(param)
		return self._rewrite(found, self.second)
	def domain(self): return self.first.domain() | self.second.domain()
