"""
Utils module behavioral tests (sentinel, coalescing, renaming, mirroring, ordinals).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import unittest
from unittest import TestCase

from commandline.utils import Unset, UnsetType, coalesce, rename, mirror, ordinal


class TestUnset(TestCase):
    def testUnsetIsFalsey(self):
        self.assertFalse(Unset)

    def testUnsetIsSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testUnsetSurvivesCopies(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testUnsetRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testUnsetTypeCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):  # NOQA: F-841
                pass


class TestCoalesce(TestCase):
    def testCoalesceReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")

    def testCoalescePreservesFalseyValues(self):
        for value in (None, 0, "", []):
            self.assertEqual(coalesce(value, "fallback"), value)

    def testCoalesceDefaultsToNone(self):
        self.assertIsNone(coalesce(Unset))


class TestRename(TestCase):
    def testRenameDecorator(self):
        @rename("decorated")
        def function():
            pass

        self.assertEqual(function.__name__, "decorated")
        self.assertEqual(function.__qualname__, "decorated")

    def testRenameRejectsNonStringName(self):
        with self.assertRaises(TypeError):
            rename(42)

    def testRenameRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            rename("name")(42)

    def testMirrorGetterIsRenamed(self):
        self.assertEqual(Holder.items.fget.__name__, "items")


class Holder:
    items = mirror("items")

    def __init__(self):
        self._items = ["a", "b"]


class TestMirror(TestCase):
    def testMirrorExposesFrozenCopies(self):
        holder = Holder()
        self.assertEqual(holder.items, ("a", "b"))
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testMirrorRejectsNonString(self):
        with self.assertRaises(TypeError):
            mirror(1)


class TestOrdinal(TestCase):
    def testOrdinalWords(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(3), "third")
        self.assertEqual(ordinal(10), "tenth")

    def testOrdinalSuffixes(self):
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(103), "103rd")
        self.assertEqual(ordinal(112), "112th")


if __name__ == "__main__":
    unittest.main()
