"""
Values module behavioral tests (kinds, coercion, rendering, cardinality).

Scope
- Validate Kind metadata (element, repeated, typename, zero, accepts).
- Validate coerce() conversions and TypeMismatchError reporting.
- Validate render() display forms used by usage text and completion context.
- Validate Cardinality construction, shorthand parsing, consumption and notation.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from flagset import Kind, Cardinality, coerce, render
from flagset.faults import TypeMismatchError, InvalidCardinalityError, FaultCode


class TestKind(TestCase):
    """Behavioral tests for the Kind variant."""

    def testRepeatedKindsKnowTheirElement(self):
        self.assertIs(Kind.INTS.element, Kind.INT)
        self.assertIs(Kind.FLOATS.element, Kind.FLOAT)
        self.assertIs(Kind.STRINGS.element, Kind.STRING)
        self.assertIs(Kind.BOOL.element, Kind.BOOL)

    def testRepeatedFlag(self):
        self.assertTrue(Kind.INTS.repeated)
        self.assertFalse(Kind.STRING.repeated)

    def testTypenames(self):
        self.assertEqual(Kind.BOOL.typename, "")
        self.assertEqual(Kind.INT.typename, "int")
        self.assertEqual(Kind.FLOAT.typename, "float")
        self.assertEqual(Kind.STRING.typename, "string")
        self.assertEqual(Kind.STRINGS.typename, "value")

    def testZeroValues(self):
        self.assertIs(Kind.BOOL.zero, False)
        self.assertEqual(Kind.INT.zero, 0)
        self.assertEqual(Kind.STRING.zero, "")
        self.assertEqual(Kind.FLOATS.zero, ())

    def testAcceptsRejectsBoolForNumbers(self):
        self.assertTrue(Kind.INT.accepts(3))
        self.assertFalse(Kind.INT.accepts(True))
        self.assertFalse(Kind.FLOAT.accepts(False))

    def testAcceptsIntForFloat(self):
        self.assertTrue(Kind.FLOAT.accepts(1))
        self.assertFalse(Kind.INT.accepts(1.5))

    def testAcceptsSequences(self):
        self.assertTrue(Kind.STRINGS.accepts(["a", "b"]))
        self.assertTrue(Kind.INTS.accepts(()))
        self.assertFalse(Kind.INTS.accepts((1, "2")))
        self.assertFalse(Kind.INTS.accepts(1))


class TestCoerce(TestCase):
    """Behavioral tests for coerce()."""

    def testIntDecimal(self):
        self.assertEqual(coerce(Kind.INT, "42"), 42)

    def testIntBasePrefixes(self):
        self.assertEqual(coerce(Kind.INT, "0x1f"), 31)
        self.assertEqual(coerce(Kind.INT, "0b101"), 5)
        self.assertEqual(coerce(Kind.INT, "1_000"), 1000)

    def testIntLeadingZeros(self):
        self.assertEqual(coerce(Kind.INT, "010"), 10)

    def testIntNegative(self):
        self.assertEqual(coerce(Kind.INT, "-3"), -3)

    def testIntInvalidRaises(self):
        with self.assertRaises(TypeMismatchError) as context:
            coerce(Kind.INT, "abc")
        self.assertEqual(str(context.exception), "'abc' is not a valid int")
        self.assertIs(context.exception.options["code"], FaultCode.TYPE_MISMATCH)

    def testFloat(self):
        self.assertEqual(coerce(Kind.FLOAT, "2.5"), 2.5)
        self.assertIsInstance(coerce(Kind.FLOAT, "2"), float)

    def testFloatInvalidRaises(self):
        with self.assertRaises(TypeMismatchError):
            coerce(Kind.FLOAT, "two")

    def testBoolSpellings(self):
        for raw in ("1", "t", "T", "TRUE", "true", "True"):
            self.assertIs(coerce(Kind.BOOL, raw), True)
        for raw in ("0", "f", "F", "FALSE", "false", "False"):
            self.assertIs(coerce(Kind.BOOL, raw), False)

    def testBoolInvalidRaises(self):
        with self.assertRaises(TypeMismatchError):
            coerce(Kind.BOOL, "yes")

    def testStringIsVerbatim(self):
        self.assertEqual(coerce(Kind.STRING, " spaced "), " spaced ")

    def testRepeatedKindsCoerceOneElement(self):
        self.assertEqual(coerce(Kind.INTS, "4"), 4)
        self.assertEqual(coerce(Kind.FLOATS, "4.3"), 4.3)
        self.assertEqual(coerce(Kind.STRINGS, "x"), "x")

    def testNonStringRawRejected(self):
        with self.assertRaises(TypeError):
            coerce(Kind.INT, 4)

    def testNonKindRejected(self):
        with self.assertRaises(TypeError):
            coerce(int, "4")


class TestRender(TestCase):
    """Behavioral tests for render()."""

    def testFloatsDropTrailingZero(self):
        self.assertEqual(render(Kind.FLOAT, 1.0), "1")
        self.assertEqual(render(Kind.FLOAT, 2.5), "2.5")

    def testBool(self):
        self.assertEqual(render(Kind.BOOL, True), "true")
        self.assertEqual(render(Kind.BOOL, False), "false")

    def testSequencesAreCommaJoined(self):
        self.assertEqual(render(Kind.INTS, (2, 4)), "2,4")
        self.assertEqual(render(Kind.FLOATS, (2.4, 4.3)), "2.4,4.3")
        self.assertEqual(render(Kind.STRINGS, ("foo", "bar")), "foo,bar")
        self.assertEqual(render(Kind.STRINGS, ()), "")


class TestCardinality(TestCase):
    """Behavioral tests for Cardinality."""

    def testShorthands(self):
        self.assertIs(Cardinality.parse("?"), Cardinality.OPTIONAL)
        self.assertIs(Cardinality.parse("*"), Cardinality.ZERO_OR_MORE)
        self.assertIs(Cardinality.parse("+"), Cardinality.ONE_OR_MORE)
        self.assertEqual(Cardinality.parse(2), Cardinality.exact(2))

    def testParsePassesThroughInstances(self):
        cardinality = Cardinality.exact(3)
        self.assertIs(Cardinality.parse(cardinality), cardinality)

    def testInvalidSpecifiersRaise(self):
        for spec in (0, -1, "x", True, 1.5):
            with self.assertRaises(InvalidCardinalityError) as context:
                Cardinality.parse(spec)
            self.assertEqual(str(context.exception), "nargs should be an integer or one of '?', '*', or '+'")

    def testConsume(self):
        self.assertIsNone(Cardinality.exact(2).consume(1))
        self.assertEqual(Cardinality.exact(2).consume(3), 2)
        self.assertEqual(Cardinality.OPTIONAL.consume(0), 0)
        self.assertEqual(Cardinality.OPTIONAL.consume(4), 1)
        self.assertEqual(Cardinality.ZERO_OR_MORE.consume(5), 5)
        self.assertIsNone(Cardinality.ONE_OR_MORE.consume(0))
        self.assertEqual(Cardinality.ONE_OR_MORE.consume(2), 2)

    def testVariadic(self):
        self.assertTrue(Cardinality.ZERO_OR_MORE.variadic)
        self.assertTrue(Cardinality.ONE_OR_MORE.variadic)
        self.assertFalse(Cardinality.OPTIONAL.variadic)

    def testShortUsage(self):
        self.assertEqual(Cardinality.exact(1).short_usage("file"), "file")
        self.assertEqual(Cardinality.exact(3).short_usage("n"), "n n n")
        self.assertEqual(Cardinality.OPTIONAL.short_usage("file"), "[file]")
        self.assertEqual(Cardinality.ONE_OR_MORE.short_usage("file"), "file [file...]")
        self.assertEqual(Cardinality.ZERO_OR_MORE.short_usage("file"), "[file...]")

    def testRepr(self):
        self.assertEqual(repr(Cardinality.exact(2)), "Cardinality.exact(2)")
        self.assertEqual(repr(Cardinality.parse("+")), "Cardinality.ONE_OR_MORE")

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            Cardinality.OPTIONAL.minimum = 3


if __name__ == "__main__":
    unittest.main()
