"""
Fault behavioral tests (raising, rendering and host configuration).

Scope
- Validate the faults raised by parse(): type, code, message, position and line.
- Validate trigger(): raising outside shell mode, rich rendering on stderr and
  exit status 1 in shell mode, and its argument contract.
- Validate copy.replace on faults and the __main__ hooks (__prog__, __codes__, __docs__).

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured with a non-terminal rich Console writing to a StringIO.
"""
import copy
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from argscript import *
from argscript import faults


def render(renderable, width=120):
    console = Console(file=io.StringIO(), width=width, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


class TestRaisedFaults(TestCase):
    """Behavioral tests for the faults surfaced by parse()."""

    def testDirectiveBodyInvalid(self):
        with self.assertRaises(DirectiveBodyInvalid) as context:
            parse("# @describe A cli\n# @flag --foo!\n")
        fault = context.exception
        self.assertIsInstance(fault, ParseException)
        self.assertEqual(str(fault), "syntax error at line 2")
        self.assertEqual(fault.position, 2)
        self.assertEqual(fault.line, "# @flag --foo!")
        self.assertIs(fault.options["code"], FaultCode.DIRECTIVE_BODY_INVALID)

    def testMalformedOptionsTag(self):
        with self.assertRaises(DirectiveBodyInvalid) as context:
            parse("# @options --foo")
        self.assertEqual(context.exception.position, 1)

    def testStructuralParseFailure(self):
        with self.assertRaises(StructuralParseFailure) as context:
            parse("# @cmd Build\n\n# @arg foo=\"abc\n")
        fault = context.exception
        self.assertEqual(str(fault), "fail to parse at line 3, unterminated quoted string")
        self.assertEqual(fault.position, 3)
        self.assertIs(fault.options["code"], FaultCode.STRUCTURAL_PARSE_FAILURE)

    def testFaultHidesScannerError(self):
        with self.assertRaises(StructuralParseFailure) as context:
            parse("# @arg foo='abc")
        self.assertTrue(context.exception.__suppress_context__)


class TestTrigger(TestCase):
    """Behavioral tests for trigger() and shell mode."""

    def testRaisesOutsideShell(self):
        with self.assertRaises(DirectiveBodyInvalid):
            trigger(DirectiveBodyInvalid("syntax error at line 1", position=1, line="# @arg"))

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))

    def testShellModeExits(self):
        output = Console(file=io.StringIO(), width=120, color_system=None)
        with mock.patch.object(faults, "console", output):
            with self.assertRaises(SystemExit) as context:
                parse("# @arg foo!x", shell=True)
        self.assertEqual(context.exception.code, 1)
        rendered = output.file.getvalue()
        self.assertIn("syntax error at line 1", rendered)
        self.assertIn("Invalid Directive", rendered)
        self.assertIn("# @arg foo!x", rendered)

    def testShellModeFancy(self):
        output = Console(file=io.StringIO(), width=120, color_system=None)
        with mock.patch.object(faults, "console", output):
            with self.assertRaises(SystemExit):
                parse("# @arg foo='x", shell=True, fancy=True, colorful=False)
        rendered = output.file.getvalue()
        self.assertIn("unterminated quoted string", rendered)
        self.assertIn("Structural Parse Failure", rendered)


class TestFaultObject(TestCase):
    """Behavioral tests for fault construction, copying and rendering."""

    def testDefaultsFromType(self):
        fault = StructuralParseFailure("boom")
        self.assertEqual(fault.options["title"], "structural parse failure")
        self.assertTrue(fault.options["hint"])
        self.assertFalse(fault.options["shell"])
        self.assertIsNone(fault.position)
        self.assertIsNone(fault.line)

    def testOptionsAreReadOnly(self):
        fault = DirectiveBodyInvalid("boom")
        with self.assertRaises(TypeError):
            fault.options["shell"] = True  # type: ignore[index]

    def testReplace(self):
        fault = DirectiveBodyInvalid("syntax error at line 4", position=4)
        replaced = copy.replace(fault, fancy=True)
        self.assertIsInstance(replaced, DirectiveBodyInvalid)
        self.assertEqual(replaced.message, "syntax error at line 4")
        self.assertEqual(replaced.position, 4)
        self.assertTrue(replaced.options["fancy"])
        self.assertFalse(fault.options["fancy"])

    def testRenderPlain(self):
        rendered = render(DirectiveBodyInvalid("syntax error at line 4", position=4, line="# @arg foo!x"))
        self.assertIn("21102", rendered)
        self.assertIn("Invalid Directive", rendered)
        self.assertIn("syntax error at line 4", rendered)
        self.assertIn("4 | # @arg foo!x", rendered)
        self.assertIn("→", rendered)

    def testRenderWithoutColors(self):
        fault = StructuralParseFailure("boom", colorful=False, fancy=True)
        self.assertIn("boom", render(fault))


class TestHostConfiguration(TestCase):
    """Behavioral tests for the __main__ presentation hooks."""

    def setUp(self):
        self.main = sys.modules["__main__"]

    def testProgramName(self):
        with mock.patch.object(self.main, "__prog__", "demo", create=True):
            self.assertIn("demo", render(DirectiveBodyInvalid("boom")))

    def testCodeLabels(self):
        labels = {FaultCode.DIRECTIVE_BODY_INVALID: "E-BODY"}
        with mock.patch.object(self.main, "__codes__", labels, create=True):
            self.assertEqual(FaultCode.DIRECTIVE_BODY_INVALID.normalize(), "E-BODY")
            self.assertEqual(FaultCode.STRUCTURAL_PARSE_FAILURE.normalize(), "21101")
            self.assertIn("E-BODY", render(DirectiveBodyInvalid("boom")))

    def testDocs(self):
        docs = {FaultCode.STRUCTURAL_PARSE_FAILURE: "a quoted value is never closed"}
        with mock.patch.object(self.main, "__docs__", docs, create=True):
            self.assertEqual(getdoc(FaultCode.STRUCTURAL_PARSE_FAILURE), "a quoted value is never closed")
            self.assertIsNone(getdoc(FaultCode.DIRECTIVE_BODY_INVALID))

    def testGetdocRejectsNonCodes(self):
        with self.assertRaises(TypeError):
            getdoc(21101)


if __name__ == "__main__":
    unittest.main()
