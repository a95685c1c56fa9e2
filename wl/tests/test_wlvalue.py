#!/usr/bin/env python3

import unittest

import wlast

from wlvalue import Integer, List, ValueType

class TestWlValue(unittest.TestCase):
    def test_integer(self):
        n = Integer(42)
        self.assertIs(n.as_integer(), n)
        self.assertEqual(n.type, ValueType.Int)
        self.assertEqual(str(n), '42')
        self.assertEqual(n.negate(), Integer(-42))

    def test_integer_is_not_list(self):
        with self.assertRaisesRegex(wlast.TypeMismatch, 'expected list, got int'):
            Integer(1).as_list()

    def test_list_is_not_integer(self):
        with self.assertRaisesRegex(wlast.TypeMismatch, 'expected int, got list'):
            List([Integer(1)]).as_integer()
        with self.assertRaises(wlast.TypeMismatch):
            List().negate()

    def test_zero_or_empty(self):
        self.assertTrue(Integer(0).is_zero_or_empty())
        self.assertFalse(Integer(-3).is_zero_or_empty())
        self.assertTrue(List().is_zero_or_empty())
        self.assertFalse(List([Integer(0)]).is_zero_or_empty())

    def test_str(self):
        inner = List([Integer(3)])
        outer = List([Integer(1), Integer(-2), inner, List()])
        self.assertEqual(str(outer), '[1, -2, [3], []]')

    def test_str_self_containing(self):
        seq = List([Integer(1)])
        seq.items.append(seq)
        self.assertEqual(str(seq), '[1, [...]]')

    def test_get_set(self):
        seq = List([Integer(1), Integer(2)])
        self.assertEqual(seq.get(1), Integer(2))
        seq.set(0, Integer(7))
        self.assertEqual(seq, List([Integer(7), Integer(2)]))

    def test_index_out_of_range(self):
        seq = List([Integer(1)])
        with self.assertRaises(wlast.IndexOutOfRange):
            seq.get(1)
        with self.assertRaises(wlast.IndexOutOfRange):
            seq.get(-1)
        with self.assertRaises(wlast.IndexOutOfRange):
            seq.set(5, Integer(0))
        self.assertEqual(seq, List([Integer(1)]))

    def test_concat_shares_elements(self):
        inner = List([Integer(5)])
        first = List([inner])
        second = List([Integer(0)])
        combined = first.concat(second)
        self.assertIsNot(combined, first)
        self.assertIsNot(combined, second)
        self.assertIs(combined.items[0], inner)
        self.assertEqual(str(combined), '[[5], 0]')

    def test_deep_copy(self):
        inner = List([Integer(5)])
        outer = List([Integer(1), inner])
        copy = outer.deep_copy()
        self.assertEqual(copy, outer)
        self.assertIsNot(copy, outer)
        self.assertIsNot(copy.items[1], inner)
        inner.set(0, Integer(9))
        self.assertEqual(str(copy), '[1, [5]]')

    def test_deep_copy_keeps_shape(self):
        inner = List([Integer(5)])
        outer = List([inner, inner])
        copy = outer.deep_copy()
        self.assertIs(copy.items[0], copy.items[1])
        self.assertIsNot(copy.items[0], inner)

    def test_deep_copy_self_containing(self):
        seq = List([Integer(1)])
        seq.items.append(seq)
        copy = seq.deep_copy()
        self.assertIsNot(copy, seq)
        self.assertIs(copy.items[1], copy)

    def test_deep_copy_integer(self):
        n = Integer(3)
        self.assertEqual(n.deep_copy(), n)

    def test_self_containing_eq_repr(self):
        seq = List([Integer(1)])
        seq.items.append(seq)
        other = List([Integer(1)])
        other.items.append(other)
        self.assertEqual(seq, other)
        self.assertNotEqual(seq, List([Integer(1), List()]))
        self.assertNotEqual(seq, Integer(1))
        self.assertEqual(repr(seq), 'List([1, [...]])')

    def test_deep_nesting(self):
        depth = 20000
        seq = List()
        for _ in range(depth):
            seq = List([Integer(0), seq])
        copy = seq.deep_copy()
        self.assertIsNot(copy, seq)
        self.assertEqual(copy, seq)
        text = str(copy)
        self.assertTrue(text.startswith('[0, [0, ['))
        self.assertTrue(text.endswith('[]' + ']' * depth))
