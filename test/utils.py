"""
Tests for the shared utilities.

This module verifies:
- Semantic guarantees of the `Unset` sentinel (singleton, falsy, copy/pickle
  identity, thread-safe construction, finality).
- coalesce()/rename()/mirror() helper contracts.
- kebabize() command-line spellings.
- escape_json() in its default (newline/quote only) and strict modes.
"""
import copy
import json
import pickle
import unittest
from threading import Thread, Lock
from unittest import TestCase

from argscribe.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` singleton.
    """

    def setUp(self) -> None:
        self.unset: UnsetType = UnsetType()

    def testSingleton(self) -> None:
        """
        The constructor returns the same object reference on every call.
        """
        self.assertIs(self.unset, UnsetType())
        self.assertIs(Unset, self.unset)

    def testRepr(self) -> None:
        self.assertEqual(repr(self.unset), "Unset")

    def testFalsely(self) -> None:
        """
        The sentinel is falsy but not equal to other falsy values.
        """
        self.assertFalse(bool(self.unset))
        self.assertNotEqual(self.unset, None)
        self.assertNotEqual(self.unset, False)  # noqa: E712

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        self.assertIs(copy.copy(self.unset), self.unset)
        self.assertIs(copy.deepcopy(self.unset), self.unset)

    def testPickleRoundTrip(self) -> None:
        self.assertIs(pickle.loads(pickle.dumps(self.unset)), self.unset)

    def testThreadSafetySingleton(self) -> None:
        """
        Concurrent constructions return the same instance.
        """
        results: list[UnsetType] = []
        lock: Lock = Lock()

        def worker():
            instance = UnsetType()
            with lock:
                results.append(instance)

        threads: list[Thread] = [Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(results), 16)
        for instance in results:
            self.assertIs(instance, self.unset)

    def testFinalClass(self) -> None:
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})

    def testUnionAnnotations(self) -> None:
        self.assertTrue(isinstance("x", str | Unset))
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertFalse(isinstance(1, str | Unset))


class HelpersTest(TestCase):

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertEqual(coalesce("", "fallback"), "")

    def testRenameDirect(self) -> None:
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testRenameDecorator(self) -> None:
        @rename("renamed")
        def function():
            pass

        self.assertEqual(function.__name__, "renamed")

    def testRenameRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename()

    def testMirrorSnapshots(self) -> None:
        class Holder:
            items = mirror("items")
            table = mirror("table")

        holder = Holder()
        holder._items = [1, [2, 3]]
        holder._table = {"a": [1]}

        self.assertEqual(holder.items, (1, (2, 3)))
        self.assertEqual(holder.table["a"], (1,))
        with self.assertRaises(TypeError):
            holder.table["b"] = 2
        with self.assertRaises(AttributeError):
            holder.items = ()


class KebabizeTest(TestCase):

    def testUnderscoresBecomeDashes(self) -> None:
        self.assertEqual(kebabize("dry_run"), "dry-run")
        self.assertEqual(kebabize("a__b"), "a-b")

    def testEdgeUnderscoresDropped(self) -> None:
        self.assertEqual(kebabize("_input_"), "input")

    def testPlainNameUnchanged(self) -> None:
        self.assertEqual(kebabize("verbose"), "verbose")

    def testRejectsNonStrings(self) -> None:
        with self.assertRaises(TypeError):
            kebabize(1)


class EscapeJsonTest(TestCase):

    def testQuotesAndNewlines(self) -> None:
        self.assertEqual(escape_json('say "hi"\nthere'), 'say \\"hi\\"\\nthere')

    def testBackslashesPassThroughByDefault(self) -> None:
        self.assertEqual(escape_json("C:\\temp\t"), "C:\\temp\t")

    def testStrictEscapesEverything(self) -> None:
        text = 'C:\\temp\t"quoted"\nnext \u00e9'
        escaped = escape_json(text, strict=True)
        self.assertEqual(json.loads('"%s"' % escaped), text)
        self.assertIn("\u00e9", escaped)

    def testRejectsNonStrings(self) -> None:
        with self.assertRaises(TypeError):
            escape_json(None)


if __name__ == '__main__':
    unittest.main()
