"""
The terms over which conditional-type evaluation operates.

Every term is a value object: once built, it never changes.
Rewriting makes new terms, sharing whatever subterms did not change.

Structurally-equal terms get the same number from an equivalence classifier,
which makes equality and hashing cheap no matter how big the terms grow.
The exception is type parameters, which have identity instead:
two parameters with the same name and constraint are still different parameters.
"""
from typing import Iterable, Sequence, Optional
from boozetools.support.foundation import EquivalenceClassifier
from .mapper import Mapper, IDENTITY

_type_numbering_subsystem = EquivalenceClassifier()

class CondType:
	""" Value objects so they can play well with the classifier """
	number: int

	def visit(self, visitor:"TypeVisitor"): raise NotImplementedError(type(self))

	def __init__(self, *key):
		self._key = key
		self._hash = hash(key)
		self.number = _type_numbering_subsystem.classify(self)
	def __hash__(self): return self._hash
	def __eq__(self, other): return type(self) is type(other) and self._key == other._key
	def __repr__(self) -> str: return self.visit(Render())


class TypeParameter(CondType):
	"""Did I say value-object? Not for type parameters! These have identity."""
	def __init__(self, name:str, constraint:"CondType"=None):
		self.name = name
		self.constraint = UNKNOWN if constraint is None else constraint
		super().__init__(len(_type_numbering_subsystem.catalog))
	def visit(self, visitor:"TypeVisitor"): return visitor.on_parameter(self)

class AtomicType(CondType):
	"""
	Primitives, object shapes, whatever: This engine cannot see inside.
	Only the relation oracle knows how these relate to one another.
	"""
	def __init__(self, name:str):
		self.name = name
		super().__init__(name)
	def visit(self, visitor:"TypeVisitor"): return visitor.on_atomic(self)

class UnionType(CondType):
	"""
	Build these with union_of(...), which maintains the invariants:
	at least two members, none of them unions, none of them NEVER.
	Member order is kept for display but does not affect equality.
	"""
	def __init__(self, members:Sequence[CondType]):
		assert len(members) > 1
		self.members = tuple(members)
		super().__init__(frozenset(m.number for m in self.members))
	def visit(self, visitor:"TypeVisitor"): return visitor.on_union(self)

class TupleType(CondType):
	def __init__(self, elements:Iterable[CondType]):
		self.elements = tuple(elements)
		super().__init__(*(e.number for e in self.elements))
	def visit(self, visitor:"TypeVisitor"): return visitor.on_tuple(self)

class ConditionalType(CondType):
	"""
	check extends extends ? when_true : when_false

	Distributivity is a property of the declaration: it holds when the check type
	is a bare type parameter at the moment of construction. Residual terms built
	after a deferred resolution pass the original flag along explicitly.

	The four fields are read under `bindings`. For a declared term that is the
	identity mapper. A residual term carries whatever substitution was in force
	when resolution had to give up, restricted to the parameters the term mentions.
	Re-instantiating a residual composes those bindings with the new mapper.
	So a residual's `check` and `extends` are the declared fields, not the
	substituted ones. Evaluator.operands reads them under the bindings.

	The `infer` parameters are declared by the extends clause. They scope over
	the extends type and the true branch, and get their values from the oracle.
	"""
	def __init__(
			self, check:CondType, extends:CondType, when_true:CondType, when_false:CondType,
			infer:Sequence[TypeParameter]=(),
			is_distributive:Optional[bool]=None,
			bindings:Mapper=IDENTITY,
	):
		self.check, self.extends = check, extends
		self.when_true, self.when_false = when_true, when_false
		self.infer = tuple(infer)
		if is_distributive is None:
			is_distributive = isinstance(check, TypeParameter)
		self.is_distributive = is_distributive
		self.bindings = bindings
		super().__init__(
			check.number, extends.number, when_true.number, when_false.number,
			tuple(p.number for p in self.infer), is_distributive, bindings.key(),
		)
	def visit(self, visitor:"TypeVisitor"): return visitor.on_conditional(self)
	def declared(self) -> bool: return self.bindings is IDENTITY

class TypeAlias:
	"""
	A named, parameterized type. Not itself a type: an AliasCall is.
	The body comes after construction so that it can mention the alias itself.
	"""
	body: CondType = None
	def __init__(self, name:str, params:Sequence[TypeParameter]):
		self.name = name
		self.params = tuple(params)
	def define(self, body:CondType) -> "TypeAlias":
		assert self.body is None, self.name
		self.body = body
		return self
	def __call__(self, *args:CondType) -> "AliasCall":
		return AliasCall(self, args)
	def __repr__(self): return "<alias %s/%d>"%(self.name, len(self.params))

class AliasCall(CondType):
	def __init__(self, alias:TypeAlias, args:Iterable[CondType]):
		self.alias = alias
		self.args = tuple(args)
		assert len(self.args) == len(alias.params), (alias, self.args)
		super().__init__(alias, *(a.number for a in self.args))
	def visit(self, visitor:"TypeVisitor"): return visitor.on_alias_call(self)

class _Never(CondType):
	""" The empty union. Identity element for union_of. """
	def visit(self, visitor:"TypeVisitor"): return visitor.on_never(self)

class _Wildcard(CondType):
	"""
	Assignable to and from everything, NEVER included.
	Lives only for the duration of a permissive test; never in a finished term.
	"""
	def visit(self, visitor:"TypeVisitor"): return visitor.on_wildcard(self)

NEVER = _Never("never")
WILDCARD = _Wildcard("*")
UNKNOWN = AtomicType("unknown")

def union_of(types:Iterable[CondType]) -> CondType:
	members, seen = [], set()
	def add(t):
		if isinstance(t, UnionType):
			for m in t.members: add(m)
		elif t is not NEVER and t.number not in seen:
			seen.add(t.number)
			members.append(t)
	for each in types: add(each)
	if not members: return NEVER
	if len(members) == 1: return members[0]
	return UnionType(members)

###################
#

class TypeVisitor:
	def on_parameter(self, p:TypeParameter): raise NotImplementedError(type(self))
	def on_atomic(self, a:AtomicType): raise NotImplementedError(type(self))
	def on_union(self, u:UnionType): raise NotImplementedError(type(self))
	def on_tuple(self, t:TupleType): raise NotImplementedError(type(self))
	def on_conditional(self, c:ConditionalType): raise NotImplementedError(type(self))
	def on_alias_call(self, a:AliasCall): raise NotImplementedError(type(self))
	def on_never(self, n:_Never): raise NotImplementedError(type(self))
	def on_wildcard(self, w:_Wildcard): raise NotImplementedError(type(self))


class Render(TypeVisitor):
	""" Return a string representation of the term. """
	def on_parameter(self, p: TypeParameter): return p.name
	def on_atomic(self, a: AtomicType): return a.name
	def on_union(self, u: UnionType): return " | ".join(self._operand(m) for m in u.members)
	def on_tuple(self, t: TupleType): return "[%s]"%(", ".join(e.visit(self) for e in t.elements))
	def on_conditional(self, c: ConditionalType):
		extends = c.extends.visit(self)
		if c.infer:
			extends += " infer(%s)"%(", ".join(p.name for p in c.infer))
		text = "%s extends %s ? %s : %s" % (
			self._operand(c.check), extends, c.when_true.visit(self), c.when_false.visit(self),
		)
		if c.declared(): return text
		env = ", ".join("%s:=%s"%(p.name, t.visit(self)) for p, t in c.bindings.pairs())
		return "(%s){%s}"%(text, env)
	def on_alias_call(self, a: AliasCall):
		return a.alias.name + "[%s]"%(", ".join(x.visit(self) for x in a.args))
	def on_never(self, n): return "never"
	def on_wildcard(self, w): return "*"

	def _operand(self, t:CondType):
		text = t.visit(self)
		if isinstance(t, ConditionalType) and t.declared(): return "(%s)"%text
		return text

class FreeParameters(TypeVisitor):
	""" Collect the parameters a term still depends on, in order of first mention. """
	def __init__(self):
		self.found = {}
	def on_parameter(self, p: TypeParameter): self.found.setdefault(p, None)
	def on_atomic(self, a: AtomicType): pass
	def on_union(self, u: UnionType):
		for m in u.members: m.visit(self)
	def on_tuple(self, t: TupleType):
		for e in t.elements: e.visit(self)
	def on_conditional(self, c: ConditionalType):
		inner = FreeParameters()
		for field in (c.check, c.extends, c.when_true, c.when_false):
			field.visit(inner)
		for p in inner.found:
			if p in c.infer: continue
			value = c.bindings.lookup(p)
			if value is None: self.found.setdefault(p, None)
			else: value.visit(self)
	def on_alias_call(self, a: AliasCall):
		for x in a.args: x.visit(self)
	def on_never(self, n): pass
	def on_wildcard(self, w): pass

def free_parameters(typ:CondType) -> tuple[TypeParameter, ...]:
	collector = FreeParameters()
	typ.visit(collector)
	return tuple(collector.found)

def is_ground(typ:CondType) -> bool:
	return not free_parameters(typ)
