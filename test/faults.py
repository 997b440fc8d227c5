# python
"""
Faults module behavioral tests (codes, triggering, rendering).

Scope
- Validate FaultCode values and host remapping through __main__.__codes__.
- Validate trigger(): errors raise, warnings warn, options merge.
- Validate rich rendering of errors and warnings (plain and fancy).
- Validate getdoc() and CommandCancelled.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import __main__
import unittest
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console

from argot import Argument, Command, FaultCode, getdoc, trigger
from argot import (
    CommandCancelled,
    CommandException,
    CommandWarning,
    DuplicatedIdentifierWarning,
    MissingPrefixError,
    UnknownMatchError,
)
from argot.utils import Unset


def render(renderable):
    console = Console(record=True, width=100, color_system=None)
    console.print(renderable)
    return console.export_text()


class TestFaultCode(TestCase):
    """Behavioral tests for FaultCode."""

    def testStableValues(self):
        self.assertEqual(FaultCode.UNKNOWN_MATCH, 21101)
        self.assertEqual(FaultCode.MISSING_PREFIX, 21102)
        self.assertEqual(FaultCode.DUPLICATED_IDENTIFIER, 22101)

    def testNormalizeDefaultsToNumber(self):
        with patch.object(__main__, "__codes__", {}, create=True):
            self.assertEqual(FaultCode.MISSING_PREFIX.normalize(), "21102")

    def testNormalizeUsesHostMapping(self):
        with patch.object(__main__, "__codes__", {FaultCode.MISSING_PREFIX: "E-PREFIX"}, create=True):
            self.assertEqual(FaultCode.MISSING_PREFIX.normalize(), "E-PREFIX")


class TestTrigger(TestCase):
    """Behavioral tests for trigger()."""

    def testErrorsAreRaisedWithMergedOptions(self):
        with self.assertRaises(UnknownMatchError) as context:
            trigger(UnknownMatchError("bad match", code=FaultCode.UNKNOWN_MATCH), hint="pick another")
        self.assertEqual(context.exception.message, "bad match")
        self.assertEqual(context.exception.options["code"], FaultCode.UNKNOWN_MATCH)
        self.assertEqual(context.exception.options["hint"], "pick another")

    def testSourceFaultIsUntouched(self):
        fault = MissingPrefixError("no prefix")
        with self.assertRaises(MissingPrefixError) as context:
            trigger(fault, hint="add one")
        self.assertIsNot(context.exception, fault)
        self.assertNotIn("hint", fault.options)

    def testWarningsAreEmitted(self):
        with self.assertWarns(DuplicatedIdentifierWarning) as context:
            trigger(DuplicatedIdentifierWarning("twice", argument="a"))
        self.assertIsInstance(context.warning, CommandWarning)
        self.assertEqual(context.warning.options["argument"], "a")

    def testNonFaultRejected(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))

    def testOptionsAreReadOnly(self):
        fault = UnknownMatchError("x", hint="y")
        with self.assertRaises(TypeError):
            fault.options["hint"] = "z"

    def testErrorHierarchy(self):
        self.assertTrue(issubclass(UnknownMatchError, CommandException))
        self.assertTrue(issubclass(MissingPrefixError, CommandException))
        self.assertTrue(issubclass(DuplicatedIdentifierWarning, Warning))


class TestRendering(TestCase):
    """Behavioral tests for the rich renderables of faults."""

    def testErrorRendering(self):
        text = render(UnknownMatchError(
            "unknown match 'bogus' for argument 'value'",
            title="unknown match",
            code=FaultCode.UNKNOWN_MATCH,
            hint="use one of word, rest",
        ))
        self.assertIn("21101", text)
        self.assertIn("Unknown Match", text)
        self.assertIn("unknown match 'bogus' for argument 'value'", text)
        self.assertIn("use one of word, rest", text)

    def testTitleFallsBackToClassName(self):
        self.assertIn("Missingprefixerror", render(MissingPrefixError("no prefix")))

    def testToolNameHeadsRender(self):
        tool = Command(lambda context, results: None, name="kickmember")
        self.assertIn("kickmember", render(MissingPrefixError("x", tool=tool)))

    def testHostProgramNameWins(self):
        tool = Command(lambda context, results: None, name="kickmember")
        with patch.object(__main__, "__prog__", "modbot", create=True):
            self.assertIn("modbot", render(MissingPrefixError("x", tool=tool)))

    def testFancyRenderingUsesPanel(self):
        text = render(DuplicatedIdentifierWarning(
            "argument id 'a' is declared more than once",
            title="duplicated identifier",
            code=FaultCode.DUPLICATED_IDENTIFIER,
            fancy=True,
        ))
        self.assertIn("22101", text)
        self.assertIn("╭", text)

    def testColorfulRenderingKeepsText(self):
        text = render(UnknownMatchError("plain words", colorful=True, code=FaultCode.UNKNOWN_MATCH))
        self.assertIn("plain words", text)

    def testCommandForwardsRenderingOptions(self):
        command = Command(lambda context, results: None, args=[Argument("value")], colorful=True, fancy=True)
        with self.assertRaises(UnknownMatchError) as context:
            command.trigger(UnknownMatchError("x"))
        self.assertTrue(context.exception.options["colorful"])
        self.assertTrue(context.exception.options["fancy"])
        self.assertIs(context.exception.options["tool"], command)


class TestGetdoc(TestCase):
    """Behavioral tests for getdoc()."""

    def testMissingDocIsNone(self):
        with patch.object(__main__, "__docs__", {}, create=True):
            self.assertIsNone(getdoc(FaultCode.UNKNOWN_MATCH))

    def testHostDoc(self):
        with patch.object(__main__, "__docs__", {FaultCode.UNKNOWN_MATCH: "see the match list"}, create=True):
            self.assertEqual(getdoc(FaultCode.UNKNOWN_MATCH), "see the match list")

    def testRejectsNonCodes(self):
        with self.assertRaises(TypeError):
            getdoc(21101)


class TestCommandCancelled(TestCase):
    """Behavioral tests for the cancellation signal."""

    def testFeedback(self):
        self.assertEqual(CommandCancelled("stop").feedback, "stop")
        self.assertIs(CommandCancelled().feedback, Unset)

    def testMessageAndRepr(self):
        self.assertEqual(str(CommandCancelled()), "command cancelled")
        self.assertEqual(repr(CommandCancelled("stop")), "CommandCancelled('stop')")
        self.assertEqual(repr(CommandCancelled()), "CommandCancelled()")


if __name__ == "__main__":
    unittest.main()
