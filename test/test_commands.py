"""
Commands module behavioral tests (construction, collisions, builders).

Scope
- Validate Command construction from handlers (name/descr derivation).
- Validate name/alias rules and option collision faults.
- Validate immutability of builders (with_argument, with_option).
- Validate the command() factory in direct and decorator modes.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from summit import Command, Argument, Option, command
from summit.faults import DuplicateRegistrationError, FaultCode


def div(arguments, options):
    """Divides two numbers"""
    return str(float(arguments[0]) / float(arguments[1]))


def bare(arguments, options):
    pass


class TestCommandConstruction(TestCase):
    """Behavioral tests for Command construction."""

    def testNameAndDescrFromHandler(self):
        cmd = Command(div)
        self.assertEqual(cmd.name, "div")
        self.assertEqual(cmd.descr, "Divides two numbers")
        self.assertIs(cmd.handler, div)

    def testMissingDocstringLeavesDescrEmpty(self):
        self.assertIsNone(Command(bare).descr)

    def testArgumentsFromStrings(self):
        cmd = Command(div, arguments=("num1", "num2"))
        self.assertEqual([argument.name for argument in cmd.arguments], ["num1", "num2"])
        self.assertTrue(all(isinstance(argument, Argument) for argument in cmd.arguments))
        self.assertEqual(cmd.arity, 2)

    def testAliasMayEqualName(self):
        cmd = Command(div, "div", "div")
        self.assertEqual(cmd.identifiers, frozenset({"div"}))

    def testEmptyAliasMeansNoAlias(self):
        self.assertIsNone(Command(div, alias="").alias)

    def testNameRequiredWithoutHandler(self):
        with self.assertRaises(TypeError):
            Command()

    def testHandlerMustBeCallable(self):
        with self.assertRaises(TypeError):
            Command("div")

    def testInvalidNamesRejected(self):
        for name in ("", "-div", "two words"):
            with self.subTest(name=name), self.assertRaises(ValueError):
                Command(div, name)

    def testSwitchesIncludeGlobalHelp(self):
        cmd = Command(div, options=[Option("round", "r")])
        self.assertEqual(set(cmd.switches), {"--round", "-r", "--help", "-h"})

    def testTopLevelRecognizesVersion(self):
        cmd = Command(None, "calc", toplevel=True)
        self.assertEqual(set(cmd.switches), {"--help", "-h", "--version", "-v"})

    def testTopLevelNameMayContainSpaces(self):
        cmd = Command(None, " My Calculator ", toplevel=True)
        self.assertEqual(cmd.name, "My Calculator")

    def testTopLevelNameCannotBeEmpty(self):
        with self.assertRaises(ValueError):
            Command(None, "  ", toplevel=True)

    def testTopLevelRejectsArguments(self):
        with self.assertRaises(ValueError):
            Command(None, "calc", arguments=("x",), toplevel=True)

    def testTopLevelRejectsOptions(self):
        with self.assertRaises(ValueError):
            Command(None, "calc", options=[Option("round")], toplevel=True)

    def testSwitchesAreReadOnly(self):
        cmd = Command(div)
        with self.assertRaises(TypeError):
            cmd.switches["--x"] = Option("x")


class TestCommandCollisions(TestCase):
    """Behavioral tests for option collision faults."""

    def testDuplicateOptionName(self):
        with self.assertRaises(DuplicateRegistrationError) as context:
            Command(div, options=[Option("round"), Option("round", "r")])
        self.assertEqual(context.exception.code, FaultCode.DUPLICATE_REGISTRATION)
        self.assertEqual(context.exception.name, "round")
        self.assertEqual(context.exception.owner, "div")

    def testDuplicateOptionAlias(self):
        with self.assertRaises(DuplicateRegistrationError):
            Command(div, options=[Option("round", "r"), Option("radix", "r")])

    def testHelpIsReserved(self):
        with self.assertRaises(DuplicateRegistrationError):
            Command(div, options=[Option("help")])
        with self.assertRaises(DuplicateRegistrationError):
            Command(div, options=[Option("hide", "h")])

    def testVersionIsFreeBelowTopLevel(self):
        cmd = Command(div, options=[Option("verbose", "v")])
        self.assertIn("-v", cmd.switches)

    def testIsValueError(self):
        with self.assertRaises(ValueError):
            Command(div, options=[Option("round"), Option("round")])


class TestCommandBuilders(TestCase):
    """Behavioral tests for fluent copies."""

    def testWithArgumentReturnsCopy(self):
        original = Command(div)
        extended = original.with_argument("num1").with_argument("num2", "Divisor")
        self.assertEqual(original.arity, 0)
        self.assertEqual(extended.arity, 2)
        self.assertEqual(extended.arguments[1].descr, "Divisor")

    def testWithOptionReturnsCopy(self):
        original = Command(div)
        extended = original.with_option("round", "r", "Round the result")
        self.assertEqual(original.options, ())
        self.assertEqual(extended.options[0].name, "round")
        self.assertIs(extended.switches["-r"], extended.options[0])

    def testWithOptionInstance(self):
        option = Option("width", "w", takes_value=True)
        self.assertIs(Command(div).with_option(option).options[0], option)

    def testWithOptionCollision(self):
        with self.assertRaises(DuplicateRegistrationError):
            Command(div).with_option("round").with_option("round")

    def testBuildersKeepIdentity(self):
        cmd = Command(div, "div", "d").with_option("round")
        self.assertEqual((cmd.name, cmd.alias, cmd.descr), ("div", "d", "Divides two numbers"))
        self.assertIs(cmd.handler, div)


class TestCommandFactory(TestCase):
    """Behavioral tests for the command() factory and decorator."""

    def testDirect(self):
        cmd = command(div, alias="d")
        self.assertIsInstance(cmd, Command)
        self.assertEqual(cmd.alias, "d")

    def testBareDecorator(self):
        @command
        def add(arguments, options):
            """Adds two numbers"""

        self.assertIsInstance(add, Command)
        self.assertEqual(add.name, "add")
        self.assertEqual(add.descr, "Adds two numbers")

    def testDecoratorWithMetadata(self):
        @command(alias="a", arguments=("num1", "num2"))
        def add(arguments, options):
            pass

        self.assertEqual(add.alias, "a")
        self.assertEqual(add.arity, 2)

    def testDecoratorRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            command(alias="a")(42)


if __name__ == "__main__":
    unittest.main()
