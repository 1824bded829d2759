"""
Template tests (deferred command-name and sub-command substitution).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argscribe.layout import CommandInfo, print_subcommands
from argscribe.templates import COMMAND_NAME_TOKEN, Placeholder, Pattern, HelpTemplate


class Source:
    def __init__(self, *entries):
        self.entries = list(entries)

    def __commands__(self):
        return tuple(self.entries)


class TestPattern(TestCase):
    """Phase-1 construction."""

    def testAdjacentLiteralsMerge(self):
        pattern = Pattern("a").push("b").placeholder(Placeholder.COMMAND_NAME).push("c").push("d")
        self.assertEqual(pattern.freeze().parts, ("ab", Placeholder.COMMAND_NAME, "cd"))

    def testInterpolateOnlyReplacesExactToken(self):
        pattern = Pattern().interpolate("{command_name} --all {other} {command_name}")
        self.assertEqual(
            pattern.freeze().parts,
            (Placeholder.COMMAND_NAME, " --all {other} ", Placeholder.COMMAND_NAME),
        )

    def testStrShowsPlaceholders(self):
        pattern = Pattern("Usage: ").placeholder(Placeholder.COMMAND_NAME).push(" <foo>")
        self.assertEqual(str(pattern), "Usage: " + COMMAND_NAME_TOKEN + " <foo>")
        self.assertEqual(str(pattern.freeze()), str(pattern))

    def testPushRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            Pattern().push(1)

    def testPlaceholderRejectsStrings(self):
        with self.assertRaises(TypeError):
            Pattern().placeholder("command_name")


class TestHelpTemplate(TestCase):
    """Phase-2 materialization."""

    def testRenderJoinsPathComponents(self):
        template = Pattern("Usage: ").placeholder(Placeholder.COMMAND_NAME).freeze()
        self.assertEqual(template.render("tool"), "Usage: tool")
        self.assertEqual(template.render(["tool", "sub", "leaf"]), "Usage: tool sub leaf")
        self.assertEqual(template.render(()), "Usage: ")

    def testRenderRejectsNonStringComponents(self):
        template = Pattern().placeholder(Placeholder.COMMAND_NAME).freeze()
        with self.assertRaises(TypeError):
            template.render(["tool", 1])

    def testBracesAreLiteral(self):
        template = Pattern().interpolate('{"usage": "{command_name}"} {{x}}').freeze()
        self.assertEqual(template.render("tool"), '{"usage": "tool"} {{x}}')

    def testEscapeAppliesToCommandName(self):
        template = Pattern().placeholder(Placeholder.COMMAND_NAME).freeze(escape=str.upper)
        self.assertEqual(template.render("tool"), "TOOL")

    def testSubcommandsResolvedAtRenderTime(self):
        source = Source(("build", "builds it"))
        template = Pattern("Commands:").placeholder(Placeholder.SUBCOMMANDS).freeze(source, print_subcommands)
        first = template.render("tool")
        source.entries.append(CommandInfo("run", "runs it"))
        second = template.render("tool")

        self.assertEqual(first, "Commands:\n  build             builds it")
        self.assertEqual(second, first + "\n  run               runs it")

    def testSubcommandsNormalized(self):
        template = Pattern().freeze(Source(("build", "builds it")))
        self.assertEqual(template.subcommands(), (CommandInfo("build", "builds it"),))
        self.assertEqual(Pattern().freeze().subcommands(), ())

    def testMalformedSubcommandEntriesRejected(self):
        template = Pattern().placeholder(Placeholder.SUBCOMMANDS).freeze(Source(("build", 1)), print_subcommands)
        with self.assertRaises(TypeError):
            template.render("tool")

    def testEquality(self):
        self.assertEqual(Pattern("a").freeze(), Pattern("a").freeze())
        self.assertNotEqual(Pattern("a").freeze(), Pattern("b").freeze())
        self.assertEqual(hash(Pattern("a").freeze()), hash(HelpTemplate(["a"])))

    def testRenderIsIdempotent(self):
        template = Pattern("x ").placeholder(Placeholder.COMMAND_NAME).freeze()
        self.assertEqual(template.render("tool"), template.render("tool"))


if __name__ == "__main__":
    unittest.main()
