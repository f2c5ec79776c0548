"""
Name maps behavioral tests (lookups both ways, ordering, declaration rules).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import enum
import unittest
import warnings
from unittest import TestCase

from commandline import NameMap, Lookup, UNKNOWN, DeclarationError, FaultCode, NameMapOrderWarning


class Color(enum.Enum):
    red = 1
    green = 2
    blue = 3


class Level(enum.Enum):
    high = 30
    low = 10
    middle = 20


class TestNameMapLookups(TestCase):
    def testNameOfDeclaredValue(self):
        self.assertEqual(NameMap.of(Color).name(Color.green), "green")

    def testNameOfAbsentValueIsUnknown(self):
        colors = NameMap.of(Color, exclude=[Color.blue])
        self.assertEqual(colors.name(Color.blue), UNKNOWN)
        self.assertEqual(UNKNOWN, "<unknown>")

    def testNameOfUnhashableValueIsUnknown(self):
        self.assertEqual(NameMap.of(Color).name([1]), UNKNOWN)

    def testValOfDeclaredName(self):
        self.assertEqual(NameMap.of(Color).val("red"), Lookup(Color.red, True))

    def testValOfAbsentName(self):
        lookup = NameMap.of(Color).val("purple")
        self.assertFalse(lookup.found)
        self.assertIsNone(lookup.value)

    def testValIsCaseSensitive(self):
        self.assertFalse(NameMap.of(Color).val("Red").found)

    def testRoundTripForEveryPair(self):
        pairs = [(1, "one"), (2, "two"), (3, "three")]
        numbers = NameMap(pairs)
        for value, name in pairs:
            self.assertEqual(numbers.name(value), name)
            self.assertEqual(numbers.val(name), (value, True))
            self.assertEqual(numbers.name(numbers.val(name).value), name)


class TestNameMapOrdering(TestCase):
    def testByValueOrderedByValue(self):
        letters = NameMap([(3, "c"), (1, "a"), (2, "b")])
        self.assertEqual(list(letters.by_value), [1, 2, 3])
        self.assertEqual(letters.names(), ["a", "b", "c"])
        self.assertEqual(letters.values(), [1, 2, 3])

    def testByNameOrderedByName(self):
        words = NameMap([(1, "zeta"), (2, "alpha"), (3, "mu")])
        self.assertEqual(list(words.by_name), ["alpha", "mu", "zeta"])

    def testEnumMembersOrderedByValue(self):
        self.assertEqual(NameMap.of(Level).names(), ["low", "middle", "high"])

    def testIterationYieldsPairsInValueOrder(self):
        self.assertEqual(list(NameMap([(2, "b"), (1, "a")])), [(1, "a"), (2, "b")])

    def testUnorderableValuesKeepDeclarationOrder(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            mixed = NameMap([(1, "one"), ("two", "two")])
        self.assertTrue(any(isinstance(w.message, NameMapOrderWarning) for w in caught))
        self.assertEqual(mixed.names(), ["one", "two"])


class TestNameMapDeclaration(TestCase):
    def testDuplicateValueRejected(self):
        with self.assertRaises(DeclarationError) as context:
            NameMap([(1, "one"), (1, "uno")])
        self.assertEqual(context.exception.code, FaultCode.DUPLICATE_ENTRY)

    def testDuplicateNameRejected(self):
        with self.assertRaises(DeclarationError) as context:
            NameMap([(1, "one"), (2, "one")])
        self.assertEqual(context.exception.code, FaultCode.DUPLICATE_ENTRY)

    def testEmptyNameRejected(self):
        with self.assertRaises(DeclarationError):
            NameMap([(1, "")])

    def testPaddedNameRejected(self):
        with self.assertRaises(DeclarationError):
            NameMap([(1, " one")])

    def testNonStringNameRejected(self):
        with self.assertRaises(DeclarationError):
            NameMap([(1, 1)])

    def testUnhashableValueRejected(self):
        with self.assertRaises(DeclarationError):
            NameMap([([1], "list")])

    def testMalformedEntryRejected(self):
        with self.assertRaises(DeclarationError):
            NameMap([(1, "one", "extra")])

    def testStringSourceRejected(self):
        with self.assertRaises(DeclarationError):
            NameMap("ab")

    def testOfRejectsNonEnum(self):
        with self.assertRaises(TypeError):
            NameMap.of(int)

    def testOfSkipsAliases(self):
        class Shade(enum.Enum):
            dark = 1
            black = 1
            light = 2

        self.assertEqual(NameMap.of(Shade).names(), ["dark", "light"])


class TestNameMapViews(TestCase):
    def testViewsAreReadOnly(self):
        colors = NameMap.of(Color)
        with self.assertRaises(TypeError):
            colors.by_value[Color.red] = "rouge"  # type: ignore[index]
        with self.assertRaises(TypeError):
            colors.by_name["rouge"] = Color.red  # type: ignore[index]

    def testSizeAndLen(self):
        colors = NameMap.of(Color)
        self.assertEqual(colors.size(), 3)
        self.assertEqual(len(colors), 3)
        self.assertEqual(len(NameMap([])), 0)

    def testContainsTestsValues(self):
        colors = NameMap.of(Color)
        self.assertIn(Color.red, colors)
        self.assertNotIn("red", colors)
        self.assertNotIn([1], colors)


if __name__ == "__main__":
    unittest.main()
