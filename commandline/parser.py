"""
Commandline parser: declared options in, validated state out.

Overview
- Parser: options are declared as class attributes of a subclass (collected in
  definition order along the MRO) and/or passed to the constructor. Each
  instance works on its own copies, reachable as instance attributes.
- parse(argv) walks the tokens once:
  • a token is split at its first "=" into a name and an inline value;
  • unknown names go to the positional list as the original, unsplit token;
  • known names mark their option as specified and hand it the token cursor;
  • the first rejected consumption ends the parse (state INVALID, fault kept);
  • after all tokens the validation hook has the final word.
- States: UNPARSED -> VALID | INVALID. Both outcomes are terminal; a parser is
  single-use and a second parse() answers False without touching anything.
- StrictParser: a parser whose validation refuses positional tokens.

Help
- render_help() builds a rich Text: a "Syntax:" header, then one aligned row
  per option (short name, long name, help text) and its extra lines.
- format_help() returns the same layout as plain text; show_help() prints it.
- Palette entries can be overridden through a __styles__ mapping in __main__.

Failure policy
- Nothing raised by consumption or by the validation hook escapes parse();
  every rejection is recorded on `fault` as a ParseFault.
- Declaration mistakes (duplicate names, options shadowing parser attributes)
  raise DeclarationError as soon as the class or the instance is built.
"""
import copy
import enum
import sys
import warnings
from collections import defaultdict, deque

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .faults import *
from .options import Option
from .registry import Registry
from .utils import *


class ParseState(enum.Enum):
    UNPARSED = "unparsed"
    VALID = "valid"
    INVALID = "invalid"


def _declared(cls):
    options = {}
    for klass in reversed(cls.__mro__):
        for name, value in vars(klass).items():
            if isinstance(value, Option):
                options[name] = value
    return options


class Parser:
    """
    Parse an argv list against a set of declared options.

    Parameters
    - *options: extra Option instances, registered after the class-declared ones.
    - validate: callable(parser) -> bool used by the default validate().
    - colorful: style help and faults (default True).
    - fancy: wrap printed help in a panel (default False).

    Example
        >>> class Options(Parser):
        ...     count = Scalar("-c", "--count", int, default=1, help="How many.")
        ...     verbose = Switch("-v", "--verbose", help="Talk more.")
        >>> options = Options.from_argv(["prog", "-c", "3", "extra"])
        >>> options.valid, options.count.value, options.positional
        (True, 3, ('extra',))
    """

    __declared__ = {}

    def __init_subclass__(cls, **options):
        super().__init_subclass__(**options)
        declared = _declared(cls)
        for name in declared:
            if hasattr(Parser, name):
                raise DeclarationError(
                    "option attribute %r of %s shadows a parser attribute" % (name, cls.__name__),
                    FaultCode.INVALID_NAME
                )
        Registry(*declared.values())  # rejects duplicate names early
        cls.__declared__ = declared

    def __init__(self, *options, validate=None, colorful=True, fancy=False):
        if validate is not None and not callable(validate):
            raise TypeError("Parser() 'validate' must be callable")

        self._validate = validate
        self.colorful = bool(colorful)
        self.fancy = bool(fancy)

        for name, option in type(self).__declared__.items():
            setattr(self, name, copy.copy(option))

        self._registry = Registry(*(getattr(self, name) for name in type(self).__declared__), *options)
        self._state = ParseState.UNPARSED
        self._fault = None
        self._prog = None

    @classmethod
    def from_argv(cls, argv=None, /, *args, **kwargs):
        """Construct a parser and parse `argv` in one call; the parser is returned either way."""
        parser = cls(*args, **kwargs)
        parser.parse(argv)
        return parser

    @property
    def state(self):
        return self._state

    @property
    def valid(self):
        return self._state is ParseState.VALID

    @property
    def registry(self):
        return self._registry

    @property
    def options(self):
        return self._registry.options

    @property
    def positional(self):
        return self._registry.positional

    @property
    def fault(self):
        """The ParseFault explaining an INVALID state, or None."""
        return self._fault

    @property
    def prog(self):
        """Program name taken from argv[0], or None before parsing."""
        return self._prog

    def __bool__(self):
        return self.valid

    def parse(self, argv=None, /):
        """
        Parse `argv` (defaults to sys.argv); argv[0] is the program name.

        Returns
        - True when every token was consumed and the validation hook agreed.

        Notes
        - Only an UNPARSED parser parses. Any other state answers False
          and emits an AlreadyParsedWarning; values, positional tokens, state
          and fault stay as they were.
        """
        if self._state is not ParseState.UNPARSED:
            warnings.warn(AlreadyParsedWarning(
                "parser was already parsed (state %s); create a new parser to parse again" % self._state.value,
                code=FaultCode.ALREADY_PARSED,
            ), stacklevel=2)
            return False

        argv = list(sys.argv if argv is None else argv)
        if not all(isinstance(token, str) for token in argv):
            raise TypeError("parse() argument must be a sequence of strings")

        tokens = deque(argv)
        self._prog = tokens.popleft() if tokens else None

        index = 1
        while tokens:
            token = tokens.popleft()
            name, separator, inline = token.partition("=")

            if (option := self._registry.lookup(name)) is None:
                self._registry.append_positional(token)
                index += 1
                continue

            option.specified = True
            remaining = len(tokens)
            try:
                consumed = option.consume(tokens, inline if separator else None)
            except Exception as exception:
                option.fault = ParseFault(
                    "%s %r raised %s: %s" % (option.__typename__, option.label, type(exception).__name__, exception),
                    title="rejected option",
                    option=option,
                    exception=exception,
                )
                consumed = False
            if not consumed:
                self._fail(option, name, index)
                return False
            index += 1 + remaining - len(tokens)

        try:
            verdict = self.validate()
        except Exception as exception:
            self._fault = DelegatedValidationError(
                "validation raised %s: %s" % (type(exception).__name__, exception),
                title="validation error",
                code=FaultCode.DELEGATED_ERROR,
                exception=exception,
                prog=self._prog,
            )
            verdict = False

        if verdict:
            self._state = ParseState.VALID
            self._fault = None
            return True

        if self._fault is None:
            self._fault = ValidationError(
                "command line was rejected by validation",
                title="invalid command line",
                code=FaultCode.VALIDATION_FAILED,
                prog=self._prog,
            )
        self._state = ParseState.INVALID
        return False

    def _fail(self, option, name, index, /):
        fault = option.fault
        if fault is None:
            fault = ParseFault(
                "%s %r rejected its input" % (option.__typename__, option.label),
                title="rejected option",
                option=option,
            )
        self._fault = type(fault)(
            "%s at %s position" % (fault.message, ordinal(index)),
            **{**fault.options, "input": name, "index": index, "prog": self._prog}
        )
        self._state = ParseState.INVALID

    def validate(self):
        """
        Validation hook, run once after every token has been consumed.

        Subclasses override it to enforce cross-option rules or derive values
        (for example, promoting a positional token to an option value). The
        default defers to the constructor's `validate` callable, if any.

        Returns
        - a truthy verdict to accept the parse. A falsy verdict rejects it
          (see reject() to attach a meaningful fault). Exceptions are captured
          as DelegatedValidationError.
        """
        if self._validate is None:
            return True
        return self._validate(self)

    def reject(self, fault, /, **options):
        """
        Record why validation failed and return False, for `return self.reject(...)`.

        Parameters
        - fault: a ParseFault, or a message for a ValidationError.
        - **options: fault options (title, hint, ...) to set or override.
        """
        if isinstance(fault, str):
            fault = ValidationError(fault, **{
                "title": "invalid command line",
                "code": FaultCode.VALIDATION_FAILED,
            } | options)
        elif isinstance(fault, ParseFault):
            fault = fault.replace(**options)
        else:
            raise TypeError("reject() argument must be a message or a parse fault")
        self._fault = fault.replace(prog=self._prog)
        return False

    def render_help(self):
        """
        Build the help text.

        Layout
        - "Syntax:" header.
        - one row per option in registration order: short name + usage suffix,
          long name + usage suffix, help text + help suffix; the first two
          columns are padded to their widest entry, columns are indented by two
          spaces.
        - each extra_help() line under the help column, as "- line".

        Palette keys
        - syntax-label, option-name, metavar, option-help, extra-dot, extra-help
        """
        styles = defaultdict(str, {
            "syntax-label": "bold #00E6FF",  # CYAN header
            "option-name": "bold #36C5F0",  # SKY-BLUE names
            "metavar": "bold #FFD600",  # AMBER value placeholders
            "option-help": "#9CA3AF",  # Muted gray
            "extra-dot": "#FF4D94 dim",
            "extra-help": "bold #FF4D94",  # MAGENTA choices
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self.colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not self.colorful:
                return Text(str(fragment))
            return Text(str(fragment), style)

        def column(name, suffix, width):
            if not name:
                return Text(" " * width)
            cell = Text.assemble(text(name, styler("option-name")), text(suffix, styler("metavar")))
            return cell.append(" " * (width - len(cell)))

        indent = "  "
        rows = []
        for option in self._registry:
            suffix = option.usage_suffix()
            description = " ".join(part for part in (option.help, option.help_suffix()) if part)
            rows.append((option, suffix, description))

        shorts = max((len(option.short + suffix) for option, suffix, _ in rows if option.short), default=0)
        longs = max((len(option.long + suffix) for option, suffix, _ in rows if option.long), default=0)

        lines = [Text.assemble(text("Syntax", styler("syntax-label")), ":")]
        for option, suffix, description in rows:
            line = Text.assemble(
                indent, column(option.short, suffix, shorts),
                indent, column(option.long, suffix, longs),
                indent, text(description, styler("option-help")),
            )
            line.rstrip()
            lines.append(line)
            for extra in option.extra_help():
                lines.append(Text.assemble(
                    indent, " " * shorts, indent, " " * longs, indent,
                    text("- ", styler("extra-dot")), text(extra, styler("extra-help")),
                ))

        return Text("\n").join(lines)

    def format_help(self):
        """Help as plain text (no styles), one line per row."""
        return self.render_help().plain

    def show_help(self, console=None):
        """Print the help on `console` (a stdout rich Console by default)."""
        console = console if console is not None else Console()
        renderable = self.render_help()
        if self.fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[ ", str(coalesce(getattr(__import__("__main__"), "__prog__", Unset), self._prog or "help")), " ]"),
                title_align="left",
            )
        console.print(renderable)

    def __repr__(self):
        return "%s(state=%s, options=%d, positional=%r)" % (
            type(self).__name__, self._state.value, len(self._registry), self.positional
        )


class StrictParser(Parser):
    """
    Parser whose validation refuses any positional token.

    Subclasses overriding validate() should return `super().validate() and ...`
    to keep the check.
    """

    def validate(self):
        if positional := self.positional:
            return self.reject(UnexpectedPositionalError(
                "unexpected argument %r" % positional[0],
                title="unexpected argument",
                code=FaultCode.UNEXPECTED_POSITIONAL,
                input=positional[0],
                hint="this program takes no positional arguments; check the spelling of option names",
            ))
        return super().validate()


__all__ = (
    "ParseState",
    "Parser",
    "StrictParser",
)
