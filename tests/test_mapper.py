import unittest

from condtype.calculus import TypeParameter
from condtype.mapper import IDENTITY, Composed
from condtype.primitive import STRING, NUMBER, NULL

def _shallow(typ, mapper):
	# Enough of a rewrite for parameters standing alone.
	return mapper.apply(typ) if isinstance(typ, TypeParameter) else typ

class MapperTests(unittest.TestCase):

	def setUp(self) -> None:
		self.x, self.y, self.z = TypeParameter("X"), TypeParameter("Y"), TypeParameter("Z")

	def test_identity(self):
		self.assertIs(self.x, IDENTITY.apply(self.x))
		self.assertIsNone(IDENTITY.lookup(self.x))
		self.assertEqual(frozenset(), IDENTITY.domain())

	def test_bind_does_not_disturb_the_base(self):
		first = IDENTITY.bind(self.x, STRING)
		second = first.bind(self.x, NUMBER)
		self.assertIs(STRING, first.apply(self.x))
		self.assertIs(NUMBER, second.apply(self.x))
		self.assertIs(self.y, second.apply(self.y))
		self.assertIs(self.x, IDENTITY.apply(self.x))

	def test_extend_and_domain(self):
		mapper = IDENTITY.extend([(self.x, STRING), (self.y, NUMBER)])
		self.assertEqual({self.x, self.y}, mapper.domain())
		self.assertIs(NUMBER, mapper.apply(self.y))

	def test_atop_consults_the_top_first(self):
		top = IDENTITY.bind(self.x, STRING)
		rest = IDENTITY.extend([(self.x, NUMBER), (self.y, NULL)])
		chain = top.atop(rest)
		self.assertIs(STRING, chain.apply(self.x))
		self.assertIs(NULL, chain.apply(self.y))
		self.assertIs(self.z, chain.apply(self.z))
		self.assertIs(top, top.atop(IDENTITY))
		self.assertIs(rest, IDENTITY.atop(rest))

	def test_restrict(self):
		mapper = IDENTITY.extend([(self.x, STRING), (self.y, NUMBER), (self.z, self.z)])
		cut = mapper.restrict([self.x, self.z])
		self.assertEqual({self.x}, cut.domain())
		self.assertIs(IDENTITY, mapper.restrict([]))

	def test_key_ignores_binding_order(self):
		one = IDENTITY.bind(self.x, STRING).bind(self.y, NUMBER)
		two = IDENTITY.bind(self.y, NUMBER).bind(self.x, STRING)
		self.assertEqual(one.key(), two.key())
		self.assertEqual(one.key(), IDENTITY.bind(self.x, NULL).bind(self.x, STRING).bind(self.y, NUMBER).key())
		self.assertNotEqual(one.key(), IDENTITY.bind(self.x, STRING).key())
		self.assertEqual((), IDENTITY.key())

	def test_composition(self):
		first = IDENTITY.bind(self.x, self.y)
		second = IDENTITY.extend([(self.y, STRING), (self.z, NUMBER)])
		both = Composed(first, second, _shallow)
		self.assertIs(STRING, both.apply(self.x))
		self.assertIs(STRING, both.apply(self.y))
		self.assertIs(NUMBER, both.apply(self.z))
		self.assertEqual({self.x, self.y, self.z}, both.domain())
