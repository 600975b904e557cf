"""
Faults module behavioral tests (codes, rendering, trigger).

Scope
- Validate stable codes and host remapping through __main__.__codes__.
- Validate structured details exposed as read-only properties.
- Validate rich rendering (header, message, hint, panel).
- Validate trigger(): raising outside shell mode, exiting inside it.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from summit import App, Command, parse
from summit import faults
from summit.faults import (
    FaultCode,
    CommandException,
    ParseError,
    UnknownOptionError,
    DuplicateRegistrationError,
    trigger,
)


def add(arguments, options):
    """Adds two numbers"""


def render(renderable):
    console = Console(file=io.StringIO(), width=100, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


class TestFaultCode(TestCase):
    """Stable numeric codes."""

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "11112")

    def testNormalizeHonorsHostMapping(self):
        with mock.patch.object(sys.modules["__main__"], "__codes__", {FaultCode.UNKNOWN_OPTION: "E-OPT"}, create=True):
            self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "E-OPT")


class TestFaultDetails(TestCase):
    """Structured context on faults."""

    def setUp(self):
        self.app = App("calc", commands=[Command(add, arguments=("num1", "num2"))])
        self.fault = parse(self.app, ["add", "--bogus", "1", "2"])

    def testHierarchy(self):
        self.assertIsInstance(self.fault, UnknownOptionError)
        self.assertIsInstance(self.fault, ParseError)
        self.assertIsInstance(self.fault, CommandException)
        self.assertTrue(issubclass(DuplicateRegistrationError, ValueError))

    def testDetails(self):
        self.assertEqual(self.fault.token, "--bogus")
        self.assertEqual(self.fault.index, 2)
        self.assertEqual(self.fault.title, "unknown option")
        self.assertEqual(str(self.fault), "unknown option '--bogus' at second position")

    def testOptionsAreReadOnly(self):
        with self.assertRaises(TypeError):
            self.fault.options["token"] = "--other"

    def testReplaceMergesOptions(self):
        replaced = self.fault.__replace__(shell=True)
        self.assertIsInstance(replaced, UnknownOptionError)
        self.assertTrue(replaced.options["shell"])
        self.assertEqual(replaced.token, "--bogus")
        self.assertNotIn("shell", self.fault.options)


class TestFaultRendering(TestCase):
    """Rich rendering of faults."""

    def setUp(self):
        self.app = App("calc", commands=[Command(add, arguments=("num1", "num2"))])
        self.fault = parse(self.app, ["add", "1"]).__replace__(app=self.app)

    def testHeaderMessageHint(self):
        output = render(self.fault)
        self.assertIn("[ calc", output)
        self.assertIn("11121", output)
        self.assertIn("Arity Mismatch", output)
        self.assertIn("'calc add' expects 2 positional arguments but 1 was given", output)
        self.assertIn("add the missing values", output)

    def testFancyPanel(self):
        output = render(self.fault.__replace__(fancy=True))
        self.assertIn("╭", output)


class TestTrigger(TestCase):
    """Surfacing faults."""

    def setUp(self):
        self.fault = CommandException("boom", title="failure", hint="try again")

    def testRaisesOutsideShell(self):
        with self.assertRaises(CommandException) as context:
            trigger(self.fault)
        self.assertEqual(str(context.exception), "boom")

    def testExitsInShell(self):
        buffer = io.StringIO()
        with mock.patch.object(faults, "console", Console(file=buffer, width=100)):
            with self.assertRaises(SystemExit) as context:
                trigger(self.fault, shell=True)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("boom", buffer.getvalue())
        self.assertIn("try again", buffer.getvalue())

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("x"))


if __name__ == "__main__":
    unittest.main()
