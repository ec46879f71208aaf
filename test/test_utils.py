"""
Utilities module tests (Unset sentinel, coalesce, rename, mirror).

Scope
- Unset: singleton identity, falsy semantics, representation, finality.
- coalesce: Unset is replaced, every other value (falsy ones included) is kept.
- rename: decorator form and argument validation.
- mirror: read-only properties over private fields.

Conventions
- Test method names follow CamelCase per project convention.
"""
import copy
import unittest
from unittest import TestCase

from flagset.utils import *


class UnsetTest(TestCase):
    """Semantic guarantees of the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.copy(Unset), Unset)

    def testFalsy(self):
        self.assertFalse(Unset)
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testFinalClass(self):
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class CoalesceTest(TestCase):

    def testUnsetIsReplaced(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testFalsyValuesAreKept(self):
        self.assertIs(coalesce(False, True), False)
        self.assertEqual(coalesce(0, 1), 0)
        self.assertEqual(coalesce("", "x"), "")
        self.assertIsNone(coalesce(None, "x"))


class RenameTest(TestCase):

    def testDecorator(self):
        @rename("renamed")
        def function():
            pass

        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename(42)
        with self.assertRaises(TypeError):
            rename("name")(42)


class MirrorTest(TestCase):

    def setUp(self):
        class Holder:
            count = mirror("count")

            def __init__(self):
                self._count = 3

        self.holder = Holder()

    def testReadsBackingField(self):
        self.assertEqual(self.holder.count, 3)
        self.assertEqual(type(self.holder).count.fget.__name__, "count")

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            self.holder.count = 4

    def testRejectsNonStringName(self):
        with self.assertRaises(TypeError):
            mirror(42)


if __name__ == '__main__':
    unittest.main()
