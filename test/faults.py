"""
Faults module behavioral tests (codes, fault annotation, rendering).

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is checked on an in-memory rich Console without colors.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console

from commandline.faults import (
    FaultCode,
    DeclarationError,
    ParseFault,
    MissingValueError,
    ValidationError,
    CommandWarning,
    NameMapOrderWarning,
    render,
)


def output():
    return Console(file=io.StringIO(), width=120, color_system=None)


class TestFaultCode(TestCase):
    def testNormalizeWithoutHostMapping(self):
        self.assertEqual(FaultCode.VALUE_REQUIRED.normalize(), "11101")

    def testCodesAreUnique(self):
        self.assertEqual(len({code.value for code in FaultCode}), len(FaultCode))


class TestDeclarationError(TestCase):
    def testDeclarationErrorIsValueError(self):
        error = DeclarationError("broken", FaultCode.MISSING_NAME)
        self.assertIsInstance(error, ValueError)
        self.assertEqual(error.code, FaultCode.MISSING_NAME)

    def testDeclarationErrorDefaultCode(self):
        self.assertEqual(DeclarationError("broken").code, FaultCode.INVALID_DECLARATION)


class TestParseFault(TestCase):
    def testMessageAndCode(self):
        fault = MissingValueError("option '--count' requires a value", code=FaultCode.VALUE_REQUIRED)
        self.assertEqual(str(fault), "option '--count' requires a value")
        self.assertEqual(fault.code, FaultCode.VALUE_REQUIRED)

    def testOptionsAreReadOnly(self):
        fault = ParseFault("message", title="title")
        with self.assertRaises(TypeError):
            fault.options["title"] = "other"  # type: ignore[index]

    def testReplaceKeepsTypeAndMergesOptions(self):
        fault = MissingValueError("message", title="missing value", index=1)
        annotated = fault.replace(index=3, input="-c")
        self.assertIsInstance(annotated, MissingValueError)
        self.assertEqual(annotated.message, "message")
        self.assertEqual(annotated.options["index"], 3)
        self.assertEqual(annotated.options["input"], "-c")
        self.assertEqual(annotated.options["title"], "missing value")
        self.assertEqual(fault.options["index"], 1)

    def testReplaceRejectsPositionalArguments(self):
        with self.assertRaises(AssertionError):
            ParseFault("message").replace("other")

    def testFaultWithoutCodeHasNoneCode(self):
        self.assertIsNone(ParseFault("message").code)


class TestRender(TestCase):
    def testRenderPrintsHeaderMessageAndHint(self):
        console = output()
        render(ValidationError(
            "command line was rejected",
            title="invalid command line",
            code=FaultCode.VALIDATION_FAILED,
            hint="try again",
            prog="myprog",
        ), output=console, colorful=False)
        text = console.file.getvalue()
        self.assertIn("myprog", text)
        self.assertIn("11201", text)
        self.assertIn("Invalid Command Line", text)
        self.assertIn("command line was rejected", text)
        self.assertIn("try again", text)

    def testRenderFancyStillShowsMessage(self):
        console = output()
        render(ParseFault("boxed message", prog="myprog"), output=console, fancy=True)
        self.assertIn("boxed message", console.file.getvalue())

    def testRenderRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            render(ValueError("not a fault"), output=output())


class TestWarnings(TestCase):
    def testWarningCarriesCode(self):
        warning = NameMapOrderWarning("unordered", code=FaultCode.UNORDERED_NAMEMAP)
        self.assertIsInstance(warning, CommandWarning)
        self.assertEqual(warning.code, FaultCode.UNORDERED_NAMEMAP)
        self.assertEqual(warning.message, "unordered")


if __name__ == "__main__":
    unittest.main()
