"""
Commandline faults (declaration errors, parse faults, warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain to keep copy consistent and logs searchable.
- DeclarationError: raised while options, name maps and registries are being
  declared (duplicate or missing names, duplicate enum entries). These are
  programming mistakes in the embedding program and surface immediately.
- ParseFault family: describe why a parse was rejected (a value could not be
  consumed, or the validation hook refused the result). The parser records
  them; it never raises them, so no exception crosses the parse boundary.
- CommandWarning family: non-fatal diagnostics emitted through `warnings`.
- render(): print any fault with rich, respecting colorful/fancy switches.

UX goals
- Position-first messages: consumption faults include the ordinal position of
  the offending token (“at third position”).
- Soft but technical language: short titles, one-sentence bodies, a single hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - consumption (111xx)
      • VALUE_REQUIRED, EMPTY_VALUE, UNCASTABLE_VALUE, INLINE_FORBIDDEN,
        INLINE_REQUIRED, NOT_ENOUGH_VALUES, INVALID_CHOICE
    - validation (112xx)
      • VALIDATION_FAILED, UNEXPECTED_POSITIONAL, DELEGATED_ERROR
    - declaration (131xx)
      • MISSING_NAME, INVALID_NAME, DUPLICATE_NAME, DUPLICATE_ENTRY, INVALID_DECLARATION
    - warnings (12xxx)
      • UNORDERED_NAMEMAP, ALREADY_PARSED

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- consumption faults (111xx) ---
    VALUE_REQUIRED              = 11101
    EMPTY_VALUE                 = 11102
    UNCASTABLE_VALUE            = 11103
    INLINE_FORBIDDEN            = 11104
    INLINE_REQUIRED             = 11105
    NOT_ENOUGH_VALUES           = 11106
    INVALID_CHOICE              = 11107

    # --- validation faults (112xx) ---
    VALIDATION_FAILED           = 11201
    UNEXPECTED_POSITIONAL       = 11202
    DELEGATED_ERROR             = 11203

    # --- warnings (12xxx) ---
    UNORDERED_NAMEMAP           = 12101
    ALREADY_PARSED              = 12102

    # --- declaration errors (131xx) ---
    MISSING_NAME                = 13101
    INVALID_NAME                = 13102
    DUPLICATE_NAME              = 13103
    DUPLICATE_ENTRY             = 13104
    INVALID_DECLARATION         = 13105

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class DeclarationError(ValueError):
    """
    invalid option, name map or registry declaration.

    raised eagerly at declaration time; `code` tells which rule was broken.
    """

    def __init__(self, message, /, code=FaultCode.INVALID_DECLARATION):
        super().__init__(message)
        self.code = code


class ParseFault(Exception):
    """
    base type for the reasons a parse can be rejected.

    a fault carries a message plus a read-only mapping of options (code, title,
    hint, input, index, ...). options are annotated after the fact through
    replace(), which returns a new fault of the same type; copy.replace()
    works too on interpreters that support it.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str) or message is Unset
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __str__(self):
        return self.message or ""

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", self.options.get("prog") or "commandline"), styler("prog-name"))
        code = self.code.normalize() if isinstance(self.code, FaultCode) else "-"

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code, styler("code")),
            " | ",
            text(self.options.get("title", "parse fault").title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def replace(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})

    __replace__ = replace


class MissingValueError(ParseFault): ...
class EmptyValueError(ParseFault): ...
class UncastableValueError(ParseFault): ...
class InlineForbiddenError(ParseFault): ...
class InlineRequiredError(ParseFault): ...
class NotEnoughValuesError(ParseFault): ...
class InvalidChoiceError(ParseFault): ...
class ValidationError(ParseFault): ...
class UnexpectedPositionalError(ParseFault): ...
class DelegatedValidationError(ParseFault): ...


class CommandWarning(Warning):
    """
    base type for non-fatal diagnostics, emitted through `warnings.warn`.
    """

    def __init__(self, message, /, code=Unset):
        super().__init__(message)
        self.message = message
        self.code = code


class NameMapOrderWarning(CommandWarning): ...
class AlreadyParsedWarning(CommandWarning): ...


def render(fault, /, *, output=None, colorful=True, fancy=False):
    """
    print a fault with rich.

    the framework never prints on its own; embedding programs call this after
    a rejected parse (typically before showing help and exiting non-zero).

    parameters
    - fault: ParseFault
    - output: rich Console to print on (defaults to the module stderr console).
    - colorful / fancy: rendering switches (fancy wraps the fault in a panel).
    """
    if not isinstance(fault, ParseFault):
        raise TypeError("render() argument must be a parse fault")
    (output if output is not None else console).print(fault.replace(colorful=colorful, fancy=fancy))


__all__ = (
    "FaultCode",
    "DeclarationError",
    "ParseFault",
    "MissingValueError",
    "EmptyValueError",
    "UncastableValueError",
    "InlineForbiddenError",
    "InlineRequiredError",
    "NotEnoughValuesError",
    "InvalidChoiceError",
    "ValidationError",
    "UnexpectedPositionalError",
    "DelegatedValidationError",
    "CommandWarning",
    "NameMapOrderWarning",
    "AlreadyParsedWarning",
    "render",
)
