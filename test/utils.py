# python
"""
Utils module behavioral tests.

Scope
- Validate the Unset sentinel (singleton, falsy, sealed, union-friendly).
- Validate coalesce, rename, mirror, settle and immediate.
- Validate the package metadata exports.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import asyncio
import unittest
from unittest import IsolatedAsyncioTestCase, TestCase

import argot
from argot.utils import Unset, UnsetType, coalesce, immediate, mirror, rename, settle


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsyAndPrintable(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testSealed(self):
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})

    def testUnionInIsinstance(self):
        self.assertTrue(isinstance("x", str | Unset))
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertFalse(isinstance(1, str | Unset))


class TestHelpers(TestCase):
    """Behavioral tests for coalesce, rename and mirror."""

    def testCoalesceReplacesOnlyUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 5), 0)
        self.assertIsNone(coalesce(Unset))

    def testRenameFunctionForm(self):
        def work():
            pass

        self.assertIs(rename(work, "job"), work)
        self.assertEqual(work.__name__, "job")
        self.assertEqual(work.__qualname__, "job")

    def testRenameDecoratorForm(self):
        @rename("job")
        def work():
            pass

        self.assertEqual(work.__name__, "job")

    def testRenameValidation(self):
        with self.assertRaises(TypeError):
            rename(42, "job")
        with self.assertRaises(TypeError):
            rename(len, "job")
        with self.assertRaises(TypeError):
            rename()

    def testMirrorReturnsImmutableCopies(self):
        class Holder:
            items = mirror("items")
            table = mirror("table")

            def __init__(self):
                self._items = ["a", ["b"]]
                self._table = {"k": ["v"]}

        holder = Holder()
        self.assertEqual(holder.items, ("a", ("b",)))
        self.assertEqual(holder.table, {"k": ("v",)})
        holder.table["k"] = "changed"
        self.assertEqual(holder._table, {"k": ["v"]})
        with self.assertRaises(AttributeError):
            holder.items = ()


class TestSettle(IsolatedAsyncioTestCase):
    """Behavioral tests for settle()."""

    async def testPlainValuePassesThrough(self):
        self.assertEqual(await settle(3), 3)

    async def testAwaitableIsAwaited(self):
        self.assertEqual(await settle(asyncio.sleep(0, "done")), "done")

    async def testCoroutineFunctionResult(self):
        async def produce():
            return [1, 2]

        self.assertEqual(await settle(produce()), [1, 2])


class TestImmediate(TestCase):
    """Behavioral tests for immediate()."""

    def testPlainValuePassesThrough(self):
        self.assertIs(immediate(False, "allow"), False)

    def testAwaitableRejected(self):
        async def answer():
            return True

        coroutine = answer()
        with self.assertRaises(TypeError):
            immediate(coroutine, "allow")
        self.assertIsNone(coroutine.cr_frame)


class TestPackageMetadata(TestCase):
    """Behavioral tests for the package metadata."""

    def testVersionInfoFollowsVersion(self):
        self.assertEqual(".".join(map(str, argot.version_info[:3])), argot.__version__)

    def testExportedMetadata(self):
        self.assertEqual(
            [name for name in argot.__all__ if name.startswith("__")],
            ["__title__", "__license__", "__version__"],
        )
        self.assertFalse(hasattr(argot, "__author__"))


if __name__ == "__main__":
    unittest.main()
