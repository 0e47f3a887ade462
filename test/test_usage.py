"""
Usage text behavioral tests (short usage, flag and argument help blocks).

Scope
- Validate the conventional flag help layout (type labels, defaults, one-letter bools).
- Validate argument notation per cardinality.
- Validate the assembled usage text.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from flagset import FlagSet


class TestFlagDefaults(TestCase):
    """Behavioral tests for flag help blocks."""

    def testNumberFlag(self):
        fs = FlagSet("subcommand")
        fs.number("times", 1, "Number help string")
        self.assertEqual(fs.flag_defaults(), "  -times float\n    \tNumber help string (default 1)\n")

    def testZeroDefaultIsHidden(self):
        fs = FlagSet("subcommand")
        fs.int("times", 0, "Int help string")
        self.assertEqual(fs.flag_defaults(), "  -times int\n    \tInt help string\n")

    def testOneLetterBoolStaysOnOneLine(self):
        fs = FlagSet("subcommand")
        fs.bool("q", False, "quiet")
        self.assertEqual(fs.flag_defaults(), "  -q\tquiet\n")

    def testLongBoolWithDefault(self):
        fs = FlagSet("subcommand")
        fs.bool("verbose", True, "talk more")
        self.assertEqual(fs.flag_defaults(), "  -verbose\n    \ttalk more (default true)\n")

    def testStringDefaultIsQuoted(self):
        fs = FlagSet("subcommand")
        fs.string("name", "foo", "String help string")
        self.assertEqual(fs.flag_defaults(), '  -name string\n    \tString help string (default "foo")\n')

    def testSequenceFlagsShowValue(self):
        fs = FlagSet("subcommand")
        fs.ints("n", "values")
        self.assertEqual(fs.flag_defaults(), "  -n value\n    \tvalues\n")

    def testBackQuotedTypeLabel(self):
        fs = FlagSet("subcommand")
        fs.string("out", "", "write to `path`")
        self.assertEqual(fs.flag_defaults(), "  -out path\n    \twrite to path\n")

    def testFlagsAreSorted(self):
        fs = FlagSet("subcommand")
        fs.bool("z", False, "last")
        fs.bool("a", False, "first")
        self.assertEqual(fs.flag_defaults(), "  -a\tfirst\n  -z\tlast\n")


class TestShortUsage(TestCase):
    """Behavioral tests for the one-line usage."""

    def testOptionsOnlyWhenFlagsExist(self):
        self.assertEqual(FlagSet("tool").short_usage(), "tool")
        fs = FlagSet("tool")
        fs.bool("f")
        self.assertEqual(fs.short_usage(), "tool [options]")

    def testArgumentNotations(self):
        fs = FlagSet("cp")
        fs.bool("f")
        fs.int_arg("count", 2)
        fs.string_arg("name", "?")
        fs.string_arg("files", "*")
        self.assertEqual(fs.short_usage(), "cp [options] count count [name] [files...]")

    def testOneOrMoreNotation(self):
        fs = FlagSet("cat")
        fs.string_arg("file", "+")
        self.assertEqual(fs.short_usage(), "cat file [file...]")


class TestUsage(TestCase):
    """Behavioral tests for the assembled usage text."""

    def testArgDefaults(self):
        fs = FlagSet("tool")
        fs.string_arg("file", 1, "input file")
        fs.number_arg("ratio", "?", "scale ratio")
        self.assertEqual(
            fs.arg_defaults(),
            "  file string\n    \tinput file\n  [ratio] float\n    \tscale ratio\n",
        )

    def testUsage(self):
        fs = FlagSet("subcommand")
        fs.number("times", 1, "Number help string")
        fs.string_arg("file", 1, "input file")
        self.assertEqual(
            fs.usage(),
            "usage: subcommand [options] file\n"
            "  -times float\n    \tNumber help string (default 1)\n"
            "  file string\n    \tinput file\n",
        )


if __name__ == "__main__":
    unittest.main()
