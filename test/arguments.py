# python
"""
Arguments module behavioral tests.

Scope
- Validate field descriptors (Positional, Switch, Option, SubCommand):
  construction, normalization, display names.
- Validate name rules (long/short spellings, duplicates, single-dash longs).
- Validate binding from parameter names and immutability.

Conventions
- Test method names follow CamelCase per project convention.
- Descriptions are optional at construction; their absence is reported by the
  help renderers, never here.
"""

from __future__ import annotations

import copy
import unittest
from unittest import TestCase

from argscribe import (
    Positional,
    Switch,
    Option,
    SubCommand,
    Optionality,
    FieldKind,
    MalformedSchemaError,
)


class FakeCommands:
    def __commands__(self):
        return (("build", "builds it"),)


class TestPositional(TestCase):
    """Behavioral tests for positional fields."""

    def testDefaults(self):
        field = Positional("foo")
        self.assertEqual(field.kind, FieldKind.POSITIONAL)
        self.assertEqual(field.name, "foo")
        self.assertIs(field.optionality, Optionality.REQUIRED)
        self.assertIsNone(field.descr)
        self.assertIsNone(field.long_name)
        self.assertIsNone(field.short_name)

    def testDescrIsTrimmed(self):
        self.assertEqual(Positional("foo", descr="  the input file \n").descr, "the input file")

    def testBlankDescrBecomesNone(self):
        self.assertIsNone(Positional("foo", descr="   ").descr)

    def testDescrMustBeString(self):
        with self.assertRaises(TypeError):
            Positional("foo", descr=1)

    def testOptionalityMustBeMember(self):
        with self.assertRaises(TypeError):
            Positional("foo", optionality=1)

    def testEmptyNameRejected(self):
        with self.assertRaises(ValueError):
            Positional("  ")

    def testDisplayNamePrefersArgName(self):
        self.assertEqual(Positional("foo", arg_name="FILE").display_name(), "FILE")
        self.assertEqual(Positional("foo").display_name(), "foo")

    def testUnnamedDisplayNameIsMalformed(self):
        with self.assertRaises(MalformedSchemaError):
            Positional().display_name()

    def testLocationCaptured(self):
        field = Positional("foo")
        path, line = field.location.rsplit(":", 1)
        self.assertTrue(path.endswith(".py"))
        self.assertTrue(line.isdigit())


class TestSwitch(TestCase):
    """Behavioral tests for switches."""

    def testNamesSplit(self):
        field = Switch("--force", "-f", descr="force")
        self.assertEqual(field.kind, FieldKind.SWITCH)
        self.assertEqual(field.long_name, "--force")
        self.assertEqual(field.short_name, "f")
        self.assertEqual(field.display_name(), "--force")
        self.assertIs(field.optionality, Optionality.OPTIONAL)

    def testRepeatingAllowed(self):
        self.assertIs(Switch("-v", optionality=Optionality.REPEATING).optionality, Optionality.REPEATING)

    def testCannotBeRequired(self):
        with self.assertRaises(ValueError):
            Switch("--force", optionality=Optionality.REQUIRED)

    def testSingleDashLongNameRejected(self):
        with self.assertRaises(ValueError):
            Switch("-force")

    def testInvalidNameRejected(self):
        for name in ("--", "force", "--1st", "---x", "--a_b"):
            with self.subTest(name=name), self.assertRaises(ValueError):
                Switch(name)

    def testUnicodeNameAccepted(self):
        self.assertEqual(Switch("--grüße").long_name, "--grüße")

    def testDuplicateLongNameRejected(self):
        with self.assertRaises(ValueError):
            Switch("--force", "--strong")

    def testDuplicateShortNameRejected(self):
        with self.assertRaises(ValueError):
            Switch("-f", "-g")

    def testNonStringNameRejected(self):
        with self.assertRaises(TypeError):
            Switch(1)

    def testUnboundDisplayNameIsMalformed(self):
        with self.assertRaises(MalformedSchemaError):
            Switch("-f").display_name()


class TestOption(TestCase):
    """Behavioral tests for value-bearing options."""

    def testDefaults(self):
        field = Option("--tag", "-t")
        self.assertEqual(field.kind, FieldKind.OPTION)
        self.assertIs(field.optionality, Optionality.REQUIRED)
        self.assertEqual(field.display_name(), "tag")

    def testArgNameOverridesDisplayName(self):
        self.assertEqual(Option("--tag", arg_name="label").display_name(), "label")

    def testEmptyArgNameRejected(self):
        with self.assertRaises(ValueError):
            Option("--tag", arg_name=" ")

    def testReprShowsTypename(self):
        self.assertTrue(repr(Option("--tag", descr="a tag")).startswith("option(long_name='--tag'"))


class TestSubCommand(TestCase):
    """Behavioral tests for the sub-command link."""

    def testTargetNeedsCapability(self):
        with self.assertRaises(TypeError):
            SubCommand(object())

    def testKeepsTarget(self):
        target = FakeCommands()
        field = SubCommand(target, optionality=Optionality.OPTIONAL)
        self.assertIs(field.commands, target)
        self.assertEqual(field.kind, FieldKind.SUBCOMMAND)
        self.assertEqual(field.display_name(), "command")

    def testTypename(self):
        self.assertEqual(type(SubCommand(FakeCommands())).__typename__, "sub-command")


class TestBinding(TestCase):
    """Binding names taken from parameter names."""

    def testBindFillsLongName(self):
        field = Switch(descr="only print")
        bound = field.bind("dry_run")
        self.assertEqual(bound.long_name, "--dry-run")
        self.assertEqual(bound.name, "dry_run")
        self.assertIsNone(field.long_name)

    def testBindKeepsDeclaredNames(self):
        field = Option("--label", "-l")
        bound = field.bind("tag")
        self.assertEqual(bound.long_name, "--label")
        self.assertEqual(bound.short_name, "l")

    def testBindPositionalName(self):
        bound = Positional(descr="the input file").bind("foo")
        self.assertEqual(bound.display_name(), "foo")
        self.assertIsNone(bound.long_name)

    def testReplaceReturnsCopy(self):
        field = Option("--tag")
        updated = copy.replace(field, descr="a tag")
        self.assertIsNot(updated, field)
        self.assertIsNone(field.descr)
        self.assertEqual(updated.descr, "a tag")

    def testReplaceUnknownFieldRejected(self):
        with self.assertRaises(TypeError):
            copy.replace(Option("--tag"), color="red")

    def testFieldsAreReadOnly(self):
        with self.assertRaises(AttributeError):
            Option("--tag").descr = "a tag"


if __name__ == "__main__":
    unittest.main()
