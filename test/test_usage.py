"""
Usage renderer tests (layout snapshot, metavariables, default formatting).

Scope
- Full usage text of the reference utility, byte for byte.
- Sorting by key, description line, empty flag sets.
- Metavariable extraction from back-quoted usage text.
- Default suffix per kind, with %g-style floats.
- stylize() keeps the characters and only adds styles.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from rich.text import Text

from flagset import FlagSet, IntOption, FloatOption, StringOption, SwitchOption, BoolOption
from flagset.usage import *

UTILITY_USAGE = """\
Utility that does stuff
Usage:
  util|utility [-h|l line_number|o directory|s percentage|v bool]
Options:
  -h, --help
     Help
  -l, --line line_number
     Start counting at line_number (default=1)
  -o, --output directory
     Output directory (default=/var/log/output)
  -s, --skew percentage
     Skew percentage (default=2.33)
  -v, --verbose bool
     Print extra debugging information (default=false)"""


def _utility():
    flags = FlagSet("util", "utility")
    flags.description = "Utility that does stuff"
    flags.add_bool("verbose", "v", "Print extra debugging information", False)
    flags.add_switch("help", "h", "Help")
    flags.add_int("line", "l", "Start counting at `line_number`", 1)
    flags.add_string("output", "o", "Output `directory`", "/var/log/output")
    flags.add_float("skew", "s", "Skew `percentage`", 2.33)
    return flags


class TestUsageLayout(TestCase):

    def testUtilitySnapshot(self):
        self.assertEqual(_utility().usage(), UTILITY_USAGE)

    def testDeterministic(self):
        flags = _utility()
        self.assertEqual(flags.usage(), flags.usage())

    def testNotGatedAndShowsDefaults(self):
        flags = _utility()
        flags.parse(["util", "--line", "9"])
        self.assertEqual(flags.usage(), UTILITY_USAGE)

    def testRegistrationOrderIrrelevant(self):
        flags = FlagSet("util", "utility", description="Utility that does stuff")
        flags.add_float("skew", "s", "Skew `percentage`", 2.33)
        flags.add_string("output", "o", "Output `directory`", "/var/log/output")
        flags.add_int("line", "l", "Start counting at `line_number`", 1)
        flags.add_switch("help", "h", "Help")
        flags.add_bool("verbose", "v", "Print extra debugging information", False)
        self.assertEqual(flags.usage(), UTILITY_USAGE)

    def testEmptyFlagSet(self):
        self.assertEqual(FlagSet("tool").usage(), "Usage:\n  tool")
        self.assertEqual(FlagSet().usage(), "Usage:\n  ")

    def testDescriptionOnly(self):
        self.assertEqual(FlagSet("tool", description="Does things").usage(), "Does things\nUsage:\n  tool")

    def testKindNamesAsMetavars(self):
        flags = FlagSet("tool")
        flags.add_string("name", "n", "Name to greet", "")
        flags.add_int("count", "c", "How many times", 3)
        self.assertEqual(
            flags.usage(),
            "Usage:\n"
            "  tool [-c int|n string]\n"
            "Options:\n"
            "  -c, --count int\n"
            "     How many times (default=3)\n"
            "  -n, --name string\n"
            "     Name to greet",
        )

    def testSwitchLineHasNoTrailingSpace(self):
        self.assertEqual(render_option(SwitchOption("help", "h", "Help")), "\n  -h, --help\n     Help")
        self.assertEqual(render_option(IntOption("line", "l", "Line", 1)), "\n  -l, --line int\n     Line (default=1)")

    def testSortedByCodePoint(self):
        options = [
            SwitchOption("b", "x", ""),
            SwitchOption("B", "y", ""),
            SwitchOption("a", "z", ""),
        ]
        self.assertEqual([option.key for option in sort_options(options)], ["B", "a", "b"])


class TestUnquote(TestCase):

    def testFirstBackQuotedWord(self):
        option = StringOption("output", "o", "Write `dir` into `file`", "")
        self.assertEqual(unquote(option), ("dir", "Write dir into `file`"))
        self.assertEqual(option.usage, "Write `dir` into `file`")

    def testSingleBackQuote(self):
        option = IntOption("line", "l", "Line `number", 1)
        self.assertEqual(unquote(option), ("int", "Line `number"))

    def testNoBackQuote(self):
        self.assertEqual(unquote(FloatOption("skew", "s", "Skew", 1)), ("float", "Skew"))
        self.assertEqual(unquote(BoolOption("verbose", "v", "Verbose", False)), ("bool", "Verbose"))
        self.assertEqual(unquote(SwitchOption("help", "h", "Help")), ("", "Help"))

    def testBackQuotedSwitch(self):
        option = SwitchOption("help", "h", "Show `topic` help")
        self.assertEqual(unquote(option), ("topic", "Show topic help"))


class TestFormatDefault(TestCase):

    def testBoolAndInt(self):
        self.assertEqual(format_default(BoolOption("v", "v", "", True)), " (default=true)")
        self.assertEqual(format_default(IntOption("n", "n", "", -3)), " (default=-3)")

    def testSwitchAndEmptyString(self):
        self.assertEqual(format_default(SwitchOption("h", "h", "")), "")
        self.assertEqual(format_default(StringOption("o", "o", "", "")), "")
        self.assertEqual(format_default(StringOption("o", "o", "", "a b")), " (default=a b)")

    def testFloatShortestForm(self):
        for value, expected in (
            (2.33, "2.33"),
            (2, "2"),
            (0.1, "0.1"),
            (0.0001, "0.0001"),
            (0.00001, "1e-05"),
            (1.5e-05, "1.5e-05"),
            (100000.0, "100000"),
            (1e6, "1e+06"),
            (12345678.9, "1.23456789e+07"),
            (-2.5, "-2.5"),
            (1e100, "1e+100"),
            (0.0, "0"),
            (-0.0, "-0"),
            (float("inf"), "+Inf"),
            (float("-inf"), "-Inf"),
            (float("nan"), "NaN"),
        ):
            with self.subTest(value=value):
                self.assertEqual(format_default(FloatOption("s", "s", "", value)), " (default=%s)" % expected)


class TestStylize(TestCase):

    def testKeepsCharacters(self):
        text = stylize(UTILITY_USAGE)
        self.assertIsInstance(text, Text)
        self.assertEqual(text.plain, UTILITY_USAGE)
        self.assertTrue(text.spans)

    def testPlainWhenNotColorful(self):
        text = stylize(UTILITY_USAGE, colorful=False)
        self.assertEqual(text.plain, UTILITY_USAGE)
        self.assertFalse(text.spans)

    def testStylesOverride(self):
        text = stylize("Usage:\n  tool", styles={"usage-section": "underline"})
        self.assertIn("underline", [str(span.style) for span in text.spans])


if __name__ == "__main__":
    unittest.main()
