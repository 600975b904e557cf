"""
Arguments module behavioral tests (Argument, Option, global options).

Scope
- Validate construction and normalization of Argument and Option.
- Validate option identity rules: shell-style names, single-character aliases.
- Validate metavar defaults for value-taking options.
- Validate the reserved HELP/VERSION options.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from summit import Argument, Option, HELP, VERSION


class TestArgument(TestCase):
    """Behavioral tests for positional Argument descriptors."""

    def testNameIsTrimmed(self):
        self.assertEqual(Argument("  num1 ").name, "num1")

    def testMetavarIsUpperCased(self):
        self.assertEqual(Argument("num1").metavar, "<NUM1>")

    def testDescrDefaultsToNone(self):
        self.assertIsNone(Argument("num1").descr)

    def testEmptyNameRejected(self):
        with self.assertRaises(ValueError):
            Argument("   ")

    def testNonStringNameRejected(self):
        with self.assertRaises(TypeError):
            Argument(1)

    def testEmptyDescrRejected(self):
        with self.assertRaises(ValueError):
            Argument("num1", "  ")

    def testImmutable(self):
        argument = Argument("num1")
        with self.assertRaises(AttributeError):
            argument.name = "num2"


class TestOption(TestCase):
    """Behavioral tests for named Option descriptors."""

    def testFlagDefaults(self):
        option = Option("round")
        self.assertIsNone(option.alias)
        self.assertIsNone(option.descr)
        self.assertFalse(option.takes_value)
        self.assertIsNone(option.metavar)

    def testNames(self):
        self.assertEqual(Option("round", "r").names, ("--round", "-r"))
        self.assertEqual(Option("round").names, ("--round",))

    def testIdentifiers(self):
        self.assertEqual(Option("round", "r").identifiers, frozenset({"round", "r"}))

    def testEmptyAliasMeansNoAlias(self):
        self.assertIsNone(Option("round", "").alias)

    def testHyphenatedName(self):
        self.assertEqual(Option("dry-run").names, ("--dry-run",))

    def testLeadingDashesRejected(self):
        with self.assertRaises(ValueError):
            Option("--round")

    def testMultiCharacterAliasRejected(self):
        with self.assertRaises(ValueError):
            Option("round", "rd")

    def testValueTakingMetavarDefault(self):
        self.assertEqual(Option("dry-run", takes_value=True).metavar, "DRY_RUN")

    def testExplicitMetavar(self):
        self.assertEqual(Option("width", "w", takes_value=True, metavar="COLS").metavar, "COLS")

    def testMetavarRequiresTakesValue(self):
        with self.assertRaises(TypeError):
            Option("round", metavar="N")

    def testImmutable(self):
        option = Option("round")
        with self.assertRaises(AttributeError):
            option.takes_value = True

    def testRepr(self):
        self.assertTrue(repr(Option("round")).startswith("option(name='round'"))


class TestGlobalOptions(TestCase):
    """Behavioral tests for the reserved global options."""

    def testHelp(self):
        self.assertEqual(HELP.names, ("--help", "-h"))
        self.assertFalse(HELP.takes_value)

    def testVersion(self):
        self.assertEqual(VERSION.names, ("--version", "-v"))
        self.assertFalse(VERSION.takes_value)


if __name__ == "__main__":
    unittest.main()
