"""
Command tree validation tests.

Scope
- Name and alias patterns, reserved words at any depth.
- Handler/children shape (exactly one of both).
- Sibling uniqueness over names and aliases.
- Idempotence and in-place sorting.

Conventions
- Test method names follow CamelCase per project convention.
"""
from __future__ import annotations

import unittest
from unittest import TestCase

from cmdtree import Command, validate
from cmdtree.faults import (
    ConfigurationError,
    DuplicateCommandError,
    HandlerConflictError,
    InvalidAliasError,
    InvalidNameError,
    MissingHandlerError,
    ReservedNameError,
)


def nop(context, args):
    pass


def tree():
    return [
        Command("test", descr="some test command", children=[
            Command("foo", children=[Command("for", nop)]),
            Command("bar", nop),
        ]),
        Command("status", nop, alias="s"),
    ]


class TestValidate(TestCase):
    """Structural checks performed by validate()."""

    def testWellFormedTreePassesTwice(self):
        commands = tree()
        validate(commands)
        validate(commands)

    def testNamePattern(self):
        validate([Command("app:cre.ate", nop), Command("a_b-C9", nop)])
        for name in ("", "foo%", "with space", "ünï"):
            with self.subTest(name=name):
                with self.assertRaises(InvalidNameError) as context:
                    validate([Command(name, nop)])
                self.assertIn(repr(name), str(context.exception))

    def testAliasPattern(self):
        with self.assertRaises(InvalidAliasError) as context:
            validate([Command("foo", nop, alias="%")])
        self.assertEqual(str(context.exception), "command alias '%' must contain only letters, digits, '_', ':', '.' and '-'")

    def testNameCheckedBeforeShape(self):
        with self.assertRaises(InvalidNameError):
            validate([Command("foo%")])

    def testReservedNames(self):
        for name in ("help", "version"):
            with self.subTest(name=name):
                with self.assertRaises(ReservedNameError) as context:
                    validate([Command(name, nop)])
                self.assertEqual(str(context.exception), "command %r is reserved" % name)

                with self.assertRaises(ReservedNameError) as context:
                    validate([Command("foo", nop, alias=name)])
                self.assertEqual(str(context.exception), "command alias %r is reserved" % name)

    def testReservedNamesAtAnyDepth(self):
        commands = [
            Command("a", children=[
                Command("b", children=[
                    Command("c", children=[Command("help", nop)]),
                ]),
            ]),
        ]
        with self.assertRaises(ReservedNameError):
            validate(commands)

    def testReservedCanBeLifted(self):
        validate([Command("help", nop)], reserved=())

    def testHandlerAndChildren(self):
        command = Command("foobar", nop, children=[Command("nested", nop)])
        with self.assertRaises(HandlerConflictError) as context:
            validate([command])
        self.assertIn("'foobar'", str(context.exception))
        self.assertIs(context.exception.options["command"], command)

    def testNeitherHandlerNorChildren(self):
        with self.assertRaises(MissingHandlerError) as context:
            validate([Command("foo")])
        self.assertEqual(str(context.exception), "command 'foo' must have exactly one of a handler or subcommands")

    def testDuplicateNames(self):
        with self.assertRaises(DuplicateCommandError) as context:
            validate([Command("a", nop), Command("a", nop)])
        self.assertEqual(str(context.exception), "duplicate command 'a'")
        self.assertEqual(context.exception.options["input"], "a")

    def testDuplicateAliases(self):
        for commands in (
            [Command("aaa", nop), Command("b", nop, alias="aaa")],
            [Command("aaa", nop, alias="a"), Command("bbb", nop, alias="a")],
            [Command("a", nop), Command("b", nop, alias="a")],
        ):
            with self.subTest(commands=commands):
                with self.assertRaises(DuplicateCommandError) as context:
                    validate(commands)
                self.assertTrue(str(context.exception).startswith("duplicate command alias"))

    def testNameCollidingWithEarlierAlias(self):
        with self.assertRaises(DuplicateCommandError) as context:
            validate([Command("a", nop, alias="x"), Command("x", nop)])
        self.assertEqual(str(context.exception), "duplicate command 'x'")

    def testNestedDuplicates(self):
        commands = [Command("group", children=[Command("x", nop), Command("y", nop, alias="x")])]
        with self.assertRaises(DuplicateCommandError) as context:
            validate(commands)
        self.assertEqual(context.exception.options["parent"].name, "group")

    def testSameNameInDifferentGroups(self):
        validate([
            Command("a", children=[Command("run", nop)]),
            Command("b", children=[Command("run", nop)]),
        ])

    def testIllFormedTreeFailsTheSameWayTwice(self):
        commands = [Command("z", nop), Command("a", children=[Command("bad%", nop)])]
        for _ in range(2):
            with self.assertRaises(InvalidNameError):
                validate(commands)

    def testSortsEveryLevel(self):
        commands = [
            Command("foo", nop),
            Command("xyz", children=[Command("a", nop), Command("c", nop), Command("b", nop)]),
            Command("cake", nop),
            Command("foo2", nop),
        ]
        validate(commands)
        self.assertEqual([command.name for command in commands], ["cake", "foo", "foo2", "xyz"])
        self.assertEqual([command.name for command in commands[-1].children], ["a", "b", "c"])

    def testFaultsAreConfigurationErrors(self):
        with self.assertRaises(ConfigurationError):
            validate([Command("foo")])

    def testRejectsNonList(self):
        with self.assertRaises(TypeError):
            validate((Command("foo", nop),))
        with self.assertRaises(TypeError):
            validate(["foo"])


if __name__ == "__main__":
    unittest.main()
