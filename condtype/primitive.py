"""
The usual atomic types, and a reference oracle that knows how they relate.
"""

from .calculus import AtomicType
from .relation import SubtypeOracle

STRING = AtomicType("string")
NUMBER = AtomicType("number")
BOOLEAN = AtomicType("boolean")
TRUE = AtomicType("true")
FALSE = AtomicType("false")
NULL = AtomicType("null")

def literal(text:str) -> AtomicType:
	""" The singleton type of a string literal. Declare it to the oracle with its base. """
	return AtomicType(repr(text))

def standard_oracle(*literals:AtomicType) -> SubtypeOracle:
	oracle = SubtypeOracle()
	oracle.declare(TRUE, BOOLEAN)
	oracle.declare(FALSE, BOOLEAN)
	for each in literals:
		oracle.declare(each, STRING)
	return oracle
