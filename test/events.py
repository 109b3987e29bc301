"""
Event record behavioral tests.

Scope
- Validate EventKind membership and the describable subset.
- Validate EventData payload checks per kind, class-pattern matching and the
  describe()/with_describe() accessors.
- Validate Event positions and record immutability.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from argscript import EventKind, EventData, Event, FlagOptionParam, PositionalParam


class TestEventKind(TestCase):
    """Behavioral tests for the closed set of kinds."""

    def testDescribable(self):
        self.assertEqual(
            {kind for kind in EventKind if kind.describable},
            {EventKind.DESCRIBE, EventKind.CMD, EventKind.FLAG_OPTION, EventKind.POSITIONAL}
        )

    def testValues(self):
        self.assertIs(EventKind("flag-option"), EventKind.FLAG_OPTION)


class TestEventData(TestCase):
    """Behavioral tests for kind-tagged payloads."""

    def testTextPayload(self):
        data = EventData(EventKind.CMD, "Build")
        self.assertIs(data.kind, EventKind.CMD)
        self.assertEqual(data.value, "Build")

    def testKindMustBeEventKind(self):
        with self.assertRaises(TypeError):
            EventData("cmd", "Build")

    def testPayloadTypeChecked(self):
        with self.assertRaises(TypeError):
            EventData(EventKind.CMD, 1)
        with self.assertRaises(TypeError):
            EventData(EventKind.FLAG_OPTION, PositionalParam("foo"))
        with self.assertRaises(TypeError):
            EventData(EventKind.POSITIONAL, "foo")

    def testAliasesNormalized(self):
        self.assertEqual(EventData(EventKind.ALIASES, ["a", "b"]).value, ("a", "b"))
        with self.assertRaises(TypeError):
            EventData(EventKind.ALIASES, "ab")
        with self.assertRaises(TypeError):
            EventData(EventKind.ALIASES, ["a", 1])

    def testPatternMatching(self):
        match EventData(EventKind.FUNC, "build"):
            case EventData(EventKind.FUNC, name):
                self.assertEqual(name, "build")
            case _:
                self.fail("class pattern did not match")

    def testDescribe(self):
        self.assertEqual(EventData(EventKind.DESCRIBE, "A cli").describe(), "A cli")
        self.assertEqual(EventData(EventKind.POSITIONAL, PositionalParam("foo", describe="A foo")).describe(), "A foo")
        with self.assertRaises(TypeError):
            EventData(EventKind.VERSION, "1.0.0").describe()

    def testWithDescribeText(self):
        data = EventData(EventKind.CMD, "Build")
        self.assertEqual(data.with_describe("Build it"), EventData(EventKind.CMD, "Build it"))
        self.assertEqual(data.value, "Build")

    def testWithDescribeParam(self):
        param = FlagOptionParam("foo", short="f", describe="A foo")
        data = EventData(EventKind.FLAG_OPTION, param).with_describe("A foo\nmore")
        self.assertEqual(data.value.describe, "A foo\nmore")
        self.assertEqual(data.value.short, "f")
        self.assertEqual(param.describe, "A foo")

    def testWithDescribeRejected(self):
        with self.assertRaises(TypeError):
            EventData(EventKind.ALIASES, ["a"]).with_describe("text")

    def testImmutable(self):
        data = EventData(EventKind.CMD, "Build")
        with self.assertRaises(AttributeError):
            data.value = "Other"  # type: ignore[misc]


class TestEvent(TestCase):
    """Behavioral tests for positioned events."""

    def testPosition(self):
        event = Event(EventData(EventKind.FUNC, "build"), 3)
        self.assertEqual(event.position, 3)
        self.assertEqual(event.data.value, "build")

    def testPositionMustBePositive(self):
        data = EventData(EventKind.FUNC, "build")
        for position in (0, -1, True, "1"):
            with self.subTest(position=position):
                with self.assertRaises(ValueError):
                    Event(data, position)

    def testDataChecked(self):
        with self.assertRaises(TypeError):
            Event("build", 1)

    def testEquality(self):
        self.assertEqual(
            Event(EventData(EventKind.FUNC, "build"), 3),
            Event(EventData(EventKind.FUNC, "build"), 3)
        )
        self.assertNotEqual(
            Event(EventData(EventKind.FUNC, "build"), 3),
            Event(EventData(EventKind.FUNC, "build"), 4)
        )

    def testRepr(self):
        self.assertEqual(repr(Event(EventData(EventKind.FUNC, "build"), 3)), (
            "event(data=event-data(kind=<EventKind.FUNC: 'func'>, value='build'), position=3)"
        ))


if __name__ == "__main__":
    unittest.main()
