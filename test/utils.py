"""
Tests for the shared helpers.

This module verifies:
- The Unset sentinel (singleton identity, falsiness, pickling, finality).
- coalesce() resolution of Unset only.
- rename() in both call forms.
- mirror() read-only, frozen views.
- isname() under both option-name charsets.
"""
import copy
import pickle
import unittest
from types import MappingProxyType
from unittest import TestCase

from argvex.utils import Unset, UnsetType, coalesce, rename, mirror, isname, CHARSETS


class UnsetTest(TestCase):
    """Semantic guarantees of the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testFalsyButNotNone(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, 0)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testCopiesKeepIdentity(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            class Subclass(UnsetType):
                pass


class CoalesceTest(TestCase):

    def testUnsetIsReplaced(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testFalseyValuesArePreserved(self):
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertEqual(coalesce("", "x"), "")


class RenameTest(TestCase):

    def testDirectForm(self):
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testDecoratorForm(self):
        @rename("renamed")
        def function():
            pass

        self.assertEqual(function.__name__, "renamed")

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename(1)


class MirrorTest(TestCase):
    """mirror() exposes private state through frozen views."""

    class Holder:
        items = mirror("items")
        names = mirror("names")
        table = mirror("table")
        text = mirror("text")

        def __init__(self):
            self._items = [1, 2]
            self._names = {"a"}
            self._table = {"k": "v"}
            self._text = "plain"

    def testFrozenViews(self):
        holder = self.Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertEqual(holder.names, frozenset({"a"}))
        self.assertIsInstance(holder.table, MappingProxyType)
        self.assertEqual(holder.text, "plain")

    def testViewsCannotMutateState(self):
        holder = self.Holder()
        with self.assertRaises(TypeError):
            holder.table["k"] = "w"
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testPropertyIsNamed(self):
        self.assertEqual(self.Holder.items.fget.__name__, "items")

    def testRejectsNonString(self):
        with self.assertRaises(TypeError):
            mirror(1)


class IsNameTest(TestCase):

    def testRelaxedCharset(self):
        for name in ("", "verbose", "dry-run", "req2_alias", "cmnd1", "x.y"):
            with self.subTest(name=name):
                self.assertTrue(isname(name, "relaxed"))
        for name in ("9lives", "-flag", "a=b", "a b", "it's", 'say"'):
            with self.subTest(name=name):
                self.assertFalse(isname(name, "relaxed"))

    def testStrictCharset(self):
        for name in ("verbose", "dry-run", "f"):
            with self.subTest(name=name):
                self.assertTrue(isname(name, "strict"))
        for name in ("", "req2", "a_b", "x.y"):
            with self.subTest(name=name):
                self.assertFalse(isname(name, "strict"))

    def testDefaultCharsetIsRelaxed(self):
        self.assertTrue(isname(""))

    def testErrors(self):
        with self.assertRaises(TypeError):
            isname(1)
        with self.assertRaises(ValueError):
            isname("name", "loose")

    def testCharsetsAreReadOnly(self):
        self.assertEqual(set(CHARSETS), {"strict", "relaxed"})
        with self.assertRaises(TypeError):
            CHARSETS["loose"] = None


if __name__ == "__main__":
    unittest.main()
