import unittest
from fractions import Fraction

from cantor.ontology import TypeConstructionError, UNKNOWN, either, both, negate
from cantor.values import Number, Str, Char, Bool, TupleValue, ListValue, from_python, to_python
from cantor.sets import (
	Tuple, Power, ListOf, Mapping, Union, Intersection, Difference, NamedAlias,
	DefinitionTable, collapse, components, INT, NAT, REAL, STR, BOOL, EMPTY,
)
from cantor.symbolic import VarRef, BinaryOp, Const
from cantor import algebra

class TernaryLogic(unittest.TestCase):
	def test_unknown_refuses_to_be_a_bool(self):
		with self.assertRaises(TypeError):
			if UNKNOWN: pass

	def test_connectives(self):
		self.assertIs(True, either([False, UNKNOWN, True]))
		self.assertIs(UNKNOWN, either([False, UNKNOWN]))
		self.assertIs(False, both([True, UNKNOWN, False]))
		self.assertIs(UNKNOWN, both([True, UNKNOWN]))
		self.assertIs(UNKNOWN, negate(UNKNOWN))
		self.assertIs(False, negate(True))

	def test_short_circuit(self):
		def boom(): raise AssertionError("should not be evaluated")
		self.assertIs(True, either([lambda: True, boom]))
		self.assertIs(False, both([lambda: False, boom]))

class Elements(unittest.TestCase):
	def test_numbers_normalize(self):
		self.assertEqual(Number(2), Number(Fraction(4, 2)))
		self.assertEqual(Number(3), Number(complex(3, 0)))
		self.assertIsInstance(Number(Fraction(4, 2)).n, int)

	def test_phyla_keep_apart(self):
		self.assertNotEqual(Char("a"), Str("a"))
		self.assertNotEqual(Number(1), Bool(True))
		self.assertNotEqual(TupleValue([Number(1)]), ListValue([Number(1)]))

	def test_from_python(self):
		self.assertIsInstance(from_python(True), Bool)
		self.assertEqual(TupleValue([Number(1), Str("a")]), from_python((1, "a")))
		self.assertEqual([1, (2, "b")], to_python(from_python([1, (2, "b")])))

	def test_render(self):
		for expect, value in [
			("1/2", Number(Fraction(1, 2))),
			("1+2i", Number(1+2j)),
			("-3i", Number(-3j)),
			('"hi"', Str("hi")),
			("(1, [true])", from_python((1, [True]))),
		]:
			with self.subTest(expect):
				self.assertEqual(expect, value.render())

class Construction(unittest.TestCase):
	""" Malformed set-expressions are refused at construction time. """

	def test_bad_powers(self):
		for n in (-1, 1.5, True):
			with self.subTest(n=n):
				with self.assertRaises(TypeConstructionError):
					algebra.power(INT, n)

	def test_not_a_set(self):
		with self.assertRaises(TypeConstructionError):
			algebra.union(INT, Number(3))

	def test_empty_tuple(self):
		with self.assertRaises(TypeConstructionError):
			Tuple([])

	def test_unnamed_binder(self):
		with self.assertRaises(TypeConstructionError):
			algebra.comprehend(INT, "", Const(True))

	def test_tuple_of_one_is_that_one(self):
		self.assertIs(INT, algebra.tuple_of([INT]))
		self.assertEqual(Tuple([INT, STR]), algebra.tuple_of([INT, STR]))

	def test_degenerate_products(self):
		self.assertEqual(EMPTY, collapse(Power(INT, 0)))
		self.assertEqual(INT, collapse(Power(INT, 1)))
		self.assertEqual(INT, collapse(Tuple([INT])))
		self.assertEqual((BOOL, BOOL, BOOL), components(Power(BOOL, 3)))

	def test_complement_and_symmetric_difference(self):
		self.assertEqual("Univ \\ Int", algebra.complement(INT).render())
		self.assertEqual(Union(Difference(INT, NAT), Difference(NAT, INT)), algebra.symmetric_difference(INT, NAT))

class Structure(unittest.TestCase):
	def test_finite_ignores_order_and_repeats(self):
		a = algebra.finite([1, 2, 2])
		self.assertEqual(a, algebra.finite([2, 1]))
		self.assertEqual(2, len(a.elements))

	def test_union_is_not_normalized(self):
		self.assertNotEqual(Union(INT, STR), Union(STR, INT))

	def test_render(self):
		x = VarRef("x")
		for expect, s in [
			("Int | Str", Union(INT, STR)),
			("(Int, Int) -> Real", Mapping(Tuple([INT, INT]), REAL)),
			("(Int | Str)^2", Power(Union(INT, STR), 2)),
			("[Nat & Bool]", ListOf(Intersection(NAT, BOOL))),
			("{1, 2}", algebra.finite([1, 2])),
			("{x in Nat : x MOD 3 == 1}", algebra.comprehend(NAT, "x", BinaryOp("==", BinaryOp("MOD", x, Const(3)), Const(1)))),
		]:
			with self.subTest(expect):
				self.assertEqual(expect, s.render())

	def test_pool_shares_representatives(self):
		pool = algebra.SetPool()
		a, b = Union(INT, STR), Union(INT, STR)
		self.assertIsNot(a, b)
		self.assertIs(pool.intern(a), pool.intern(b))
		self.assertNotEqual(pool.number(a), pool.number(Union(STR, INT)))

	def test_phylum(self):
		self.assertIs(Number, algebra.phylum(Union(NAT, REAL)))
		self.assertIsNone(algebra.phylum(Union(NAT, STR)))
		self.assertEqual((TupleValue, 2), algebra.phylum(Power(INT, 2)))

class Definitions(unittest.TestCase):
	def test_alias_refers_to_itself(self):
		table = DefinitionTable()
		alias = table.declare("L")
		table.define(alias, Union(algebra.finite([0]), Tuple([INT, alias])))
		self.assertIsInstance(alias.definition.b.components[1], NamedAlias)
		self.assertIs(alias, table.lookup("L"))
		self.assertEqual("{0} | (Int, L)", alias.definition.render())

	def test_use_before_definition(self):
		table = DefinitionTable()
		alias = table.declare("A")
		with self.assertRaises(TypeConstructionError):
			alias.definition

	def test_declare_twice(self):
		table = DefinitionTable()
		table.declare("A")
		with self.assertRaises(TypeConstructionError):
			table.declare("A")

	def test_retract(self):
		table = DefinitionTable()
		table.retract(table.declare("A"))
		self.assertIsNone(table.lookup("A"))
		table.declare("A")

if __name__ == '__main__':
	unittest.main()
