r"""
Commandline option declarations and their consumption protocol.

Overview
- Option: common identity and state shared by every kind of option.
  • short/long: identity strings (at least one), e.g. "-c" / "--count".
  • help: human-readable description (or None).
  • specified: False until the parser matches one of the option's names.
  • fault: the ParseFault explaining the last rejected consumption, or None.
  • usage_suffix()/help_suffix()/extra_help(): help rendering hooks.
  • consume(tokens, inline): the consumption protocol (see below).

- Variants
  • Switch: presence-only; consumes nothing.
  • Scalar[_T]: exactly one following token ("--count 5").
  • EqOnlyScalar[_T]: inline value only ("--height=4").
  • ScalarList[_T]: greedy run of following tokens up to the next "-"-prefixed one.
  • EnumScalar[_E]: one following token, mapped through a NameMap.
  • EnumList[_E]: greedy run of tokens, each mapped through a NameMap.

Consumption protocol
- The parser pops the matched token, marks the option as specified, then calls
  option.consume(tokens, inline) where
  • tokens is the deque of the remaining argv tokens (a forward-only cursor),
  • inline is the text after the first "=" of the matched token, or None.
- An implementation pops exactly the tokens it owns and answers True; on
  False it has recorded `fault` and the whole parse is rejected.
- Consumption never raises: conversion errors are captured as faults.

Value parsing (read)
- str takes the token verbatim; bool accepts true/false/yes/no/on/off/1/0;
  anything else is produced by calling the declared type on the token.
- Tokens with surrounding whitespace are rejected for non-str types, and
  partial parses ("5abc" for int) are rejected by the converters themselves.

Declaration rules (checked on construction, DeclarationError on violation)
- Names match r"--?[^\W\d_][^\s=]*": one or two prefix dashes, a letter, then
  no whitespace and no "=". Short and long names must differ.
- help, when given, is a non-empty string after trimming.
- minimum (lists) is a non-negative integer.

Quick example:
    >>> count = Scalar("-c", "--count", int, default=1, help="Number of things.")
    >>> count.consume(deque(["5"]), None)
    True
    >>> count.value
    5
"""
import builtins
import difflib
import re
from collections.abc import Iterable
from typing import NamedTuple, Any

from .faults import *
from .namemaps import NameMap
from .utils import *

PREFIX = "-"
"""Option prefix character; lists stop consuming at the first token starting with it."""

_TRUTHS = {
    "true": True, "yes": True, "on": True, "1": True,
    "false": False, "no": False, "off": False, "0": False,
}


def read(token, type=str, /):
    """
    Parse one token as `type`.

    Parameters
    - token: str, non-empty.
    - type: converter (str, int, float, bool, pathlib.Path, any callable).

    Returns
    - the converted value.

    Raises
    - ValueError: when the token is not a complete, valid literal for `type`;
      any exception raised by the converter is re-raised as ValueError.
    """
    if not isinstance(token, str) or not token:
        raise ValueError("a non-empty token is required")
    if type is str:
        return token
    if token != token.strip():
        raise ValueError("token %r is padded with whitespace" % token)
    if type is bool:
        try:
            return _TRUTHS[token.lower()]
        except KeyError:
            raise ValueError("token %r is not a boolean" % token) from None
    try:
        return type(token)
    except ValueError:
        raise
    except Exception as exception:
        raise ValueError(str(exception) or builtins.type(exception).__name__) from exception


class Hidden(NamedTuple):
    """
    Default value wrapper that keeps the default out of the help text.

    Used with EnumScalar: the hidden value stands for “not specified”, is not
    listed among the choices and is not announced as “Default is ...”.
    """
    value: Any


def hide(value, /):
    """Wrap an enum default so it is treated as a hidden sentinel (see Hidden)."""
    return Hidden(value)


def _sanitize_names(cls, short, long, /):
    if short is None and long is None:
        raise DeclarationError(f"{cls.__typename__} must specify a short or a long name", FaultCode.MISSING_NAME)

    for name in (short, long):
        if name is None:
            continue
        if not isinstance(name, str):
            raise DeclarationError(f"{cls.__typename__} names must be strings", FaultCode.INVALID_NAME)
        elif not re.fullmatch(r"--?[^\W\d_][^\s=]*", name):
            raise DeclarationError(
                f"{cls.__typename__} name {name!r} must start with {PREFIX!r} and a letter, "
                "and cannot contain whitespace or '='",
                FaultCode.INVALID_NAME
            )

    if short == long:
        raise DeclarationError(f"{cls.__typename__} names cannot contain duplicates", FaultCode.DUPLICATE_NAME)


def _sanitize_help(cls, help, /):
    if help is None:
        return None
    if not isinstance(help, str):
        raise DeclarationError(f"{cls.__typename__} 'help' must be a string")
    elif not (help := help.strip()):
        raise DeclarationError(f"{cls.__typename__} 'help' cannot be empty")
    return help


def _sanitize_minimum(cls, minimum, /):
    if not isinstance(minimum, int) or isinstance(minimum, bool):
        raise DeclarationError(f"{cls.__typename__} 'minimum' must be an integer")
    if minimum < 0:
        raise DeclarationError(f"{cls.__typename__} 'minimum' cannot be negative")
    return minimum


def _sanitize_type(cls, type, /):
    if not callable(type):
        raise DeclarationError(f"{cls.__typename__} 'type' must be callable")
    return type


def _sanitize_namemap(cls, namemap, /):
    if not isinstance(namemap, NameMap):
        raise DeclarationError(f"{cls.__typename__} requires a NameMap of its choices")
    return namemap


def _sanitize_sequence(cls, default, /):
    if default is Unset:
        return Unset
    if not isinstance(default, Iterable) or isinstance(default, str):
        raise DeclarationError(f"{cls.__typename__} 'default' must be an iterable of values")
    return tuple(default)


def _describe(values, /):
    """Render a list default the way help suffixes show it: none, x or {x, y}."""
    values = list(values)
    if not values:
        return "none"
    if len(values) == 1:
        return str(values[0])
    return "{" + ", ".join(map(str, values)) + "}"


class Option:
    """
    Base capability shared by all option kinds.

    Subclasses override consume() and the help hooks. Identity (short, long,
    help) is read-only after declaration; `specified` and `fault` are written
    by the parser and by consume() respectively.
    """

    __introspectable__ = ("short", "long", "help", "specified")
    __typename__ = "option"

    short = mirror("short")
    long = mirror("long")
    help = mirror("help")

    def __init_subclass__(cls, **options):
        super().__init_subclass__(**options)
        cls.__typename__ = re.sub(r"(?<!^)(?=[A-Z])", r"-", cls.__name__).lower()

    def __init__(self, short=None, long=None, /, help=None):
        _sanitize_names(type(self), short, long)
        self._short = short
        self._long = long
        self._help = _sanitize_help(type(self), help)
        self.specified = False
        self.fault = None

    @property
    def names(self):
        """Declared names, short first."""
        return tuple(name for name in (self._short, self._long) if name is not None)

    @property
    def label(self):
        """Preferred display name (long when declared)."""
        return self._long or self._short

    def usage_suffix(self):
        """Annotation appended to the names in help, like " <value>"."""
        return ""

    def help_suffix(self):
        """Boilerplate appended to the help text, like "Default is x. Choices:"."""
        return ""

    def extra_help(self):
        """Additional help lines shown under the option (enum choices)."""
        return []

    def consume(self, tokens, inline, /):
        return True

    def _fail(self, fault, /):
        self.fault = fault
        return False

    def _read(self, token, type, /):
        """
        Convert one value token; record a fault and answer Unset on failure.
        """
        if not token:
            self._fail(EmptyValueError(
                "empty value for %s %r" % (self.__typename__, self.label),
                title="empty value",
                code=FaultCode.EMPTY_VALUE,
                option=self,
                token=token,
                hint="provide a non-empty value (for example: %s%s)" % (self.label, self.usage_suffix()),
            ))
            return Unset
        try:
            return read(token, type)
        except ValueError as exception:
            self._fail(UncastableValueError(
                "cannot read %r as %s for %s %r" % (token, getattr(type, "__name__", "value"), self.__typename__, self.label),
                title="invalid value",
                code=FaultCode.UNCASTABLE_VALUE,
                option=self,
                token=token,
                exception=exception,
                hint="check the value spelling (for example: %s%s)" % (self.label, self.usage_suffix()),
            ))
            return Unset

    def _forbid_inline(self, inline, /):
        if inline is None:
            return True
        return self._fail(InlineForbiddenError(
            "%s %r does not accept an inline value (%s=%s)" % (self.__typename__, self.label, self.label, inline),
            title="inline value not allowed",
            code=FaultCode.INLINE_FORBIDDEN,
            option=self,
            token=inline,
            hint="pass the value after a space (for example: %s%s)" % (self.label, self.usage_suffix()),
        ))

    def __copy__(self):
        clone = object.__new__(type(self))
        clone.__dict__.update({
            name: list(value) if isinstance(value, list) else value for name, value in self.__dict__.items()
        })
        clone.specified = False
        clone.fault = None
        return clone

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "%s(%s)" % (type(self).__typename__, ", ".join("%s=%r" % pair for pair in self.__rich_repr__()))


class Switch(Option):
    """
    Presence-only option: true when any of its names appears on the command line.

    Switches never consume tokens and never fail; an inline tail ("--verbose=x")
    is ignored.
    """

    def __bool__(self):
        return self.specified

    def consume(self, tokens, inline, /):
        return True


class Scalar[_T](Option):
    """
    Option bound to exactly one following token ("--count 5").

    Parameters
    - short, long: names (one may be None).
    - type: converter applied to the token (default str).
    - default: initial value; announced in help when declared.
    - help: description.

    The inline form ("--count=5") is rejected. The following token is taken
    even when it starts with the prefix, so negative numbers work.
    """

    __introspectable__ = ("short", "long", "type", "default", "help", "specified", "value")

    def __init__(self, short=None, long=None, /, type=str, *, default=Unset, help=None):
        super().__init__(short, long, help=help)
        self.type = _sanitize_type(builtins.type(self), type)
        self.default = default
        self.value = coalesce(default)

    def usage_suffix(self):
        return " <value>"

    def help_suffix(self):
        return "" if self.default is Unset else "Default is %s." % (self.default,)

    def consume(self, tokens, inline, /):
        if not self._forbid_inline(inline):
            return False
        if not tokens:
            return self._fail(MissingValueError(
                "%s %r requires a value" % (self.__typename__, self.label),
                title="missing value",
                code=FaultCode.VALUE_REQUIRED,
                option=self,
                hint="provide a value (for example: %s%s)" % (self.label, self.usage_suffix()),
            ))
        if (value := self._read(tokens.popleft(), self.type)) is Unset:
            return False
        self.value = value
        return True


class EqOnlyScalar[_T](Option):
    """
    Option whose value must be given inline ("--height=4").

    The token cursor is never advanced. A bare "--height 4" is rejected: the
    option is marked specified, the fault is recorded and the parse stops.
    """

    __introspectable__ = ("short", "long", "type", "default", "help", "specified", "value")

    def __init__(self, short=None, long=None, /, type=str, *, default=Unset, help=None):
        super().__init__(short, long, help=help)
        self.type = _sanitize_type(builtins.type(self), type)
        self.default = default
        self.value = coalesce(default)

    def usage_suffix(self):
        return "=<value>"

    def help_suffix(self):
        return "" if self.default is Unset else "Default is %s." % (self.default,)

    def consume(self, tokens, inline, /):
        if inline is None:
            return self._fail(InlineRequiredError(
                "%s %r requires an inline value" % (self.__typename__, self.label),
                title="inline value required",
                code=FaultCode.INLINE_REQUIRED,
                option=self,
                hint="attach the value with '=' (for example: %s=<value>)" % self.label,
            ))
        if (value := self._read(inline, self.type)) is Unset:
            return False
        self.value = value
        return True


class ScalarList[_T](Option):
    """
    Option bound to a run of following tokens ("--dims 7 8 9").

    Parameters
    - type: converter applied to each token (default str).
    - default: initial list, replaced entirely when the option is consumed.
    - minimum: fewest tokens accepted (default 1).

    The run stops at the first token starting with the prefix, so a negative
    number ends the list early. The inline form is rejected.
    """

    __introspectable__ = ("short", "long", "type", "default", "minimum", "help", "specified", "values")

    def __init__(self, short=None, long=None, /, type=str, *, default=Unset, minimum=1, help=None):
        super().__init__(short, long, help=help)
        self.type = _sanitize_type(builtins.type(self), type)
        self.default = _sanitize_sequence(builtins.type(self), default)
        self.minimum = _sanitize_minimum(builtins.type(self), minimum)
        self.values = list(coalesce(self.default, ()))

    def usage_suffix(self):
        return " <value> ..."

    def help_suffix(self):
        return "" if self.default is Unset else "Default is %s." % _describe(self.default)

    def _take(self, tokens, /):
        taken = []
        while tokens and not tokens[0].startswith(PREFIX):
            taken.append(tokens.popleft())
        if len(taken) < self.minimum:
            self._fail(NotEnoughValuesError(
                "%s %r requires at least %d value%s but %d %s given" % (
                    self.__typename__, self.label, self.minimum, "s" * (self.minimum != 1),
                    len(taken), "was" if len(taken) == 1 else "were"
                ),
                title="not enough values",
                code=FaultCode.NOT_ENOUGH_VALUES,
                option=self,
                hint="list the values after the option, before any other option (for example: %s%s)" % (
                    self.label, self.usage_suffix()
                ),
            ))
            return None
        return taken

    def consume(self, tokens, inline, /):
        if not self._forbid_inline(inline):
            return False
        if (taken := self._take(tokens)) is None:
            return False
        values = []
        for token in taken:
            if (value := self._read(token, self.type)) is Unset:
                return False
            values.append(value)
        self.values = values
        return True

    def __iter__(self):
        return iter(self.values)

    def __len__(self):
        return len(self.values)

    def __getitem__(self, index):
        return self.values[index]


class EnumScalar[_E](Option):
    """
    Option bound to one following token naming a value of a NameMap.

    Parameters
    - namemap: NameMap of the accepted names.
    - default: initial value, or hide(value) for a hidden sentinel default.

    A hidden default lets one stored field represent “not specified”: it is
    omitted from the choices listed in help and from the “Default is” phrase.
    """

    __introspectable__ = ("short", "long", "namemap", "default", "hidden", "help", "specified", "value")

    def __init__(self, short=None, long=None, namemap=Unset, /, *, default=Unset, help=None):
        super().__init__(short, long, help=help)
        self.namemap = _sanitize_namemap(builtins.type(self), namemap)
        self.hidden = isinstance(default, Hidden)
        self.default = default.value if self.hidden else default
        self.value = coalesce(self.default)

    @property
    def name(self):
        """Name of the current value (UNKNOWN when unmapped)."""
        return self.namemap.name(self.value)

    def usage_suffix(self):
        return " <value>"

    def help_suffix(self):
        if self.hidden or self.default is Unset:
            return "Choices:"
        return "Default is %s. Choices:" % self.namemap.name(self.default)

    def extra_help(self):
        return [name for value, name in self.namemap if not (self.hidden and value == self.default)]

    def _lookup(self, token, /):
        if not token:
            self._read(token, str)
            return Unset
        if (lookup := self.namemap.val(token)).found:
            return lookup.value
        suggestions = difflib.get_close_matches(token, self.namemap.by_name.keys(), 3)
        try:
            hint = "did you mean %r? choices are: %s" % (suggestions[0], ", ".join(self.extra_help()))
        except IndexError:
            hint = "choices are: %s" % ", ".join(self.extra_help())
        self._fail(InvalidChoiceError(
            "%r is not a valid choice for %s %r" % (token, self.__typename__, self.label),
            title="invalid choice",
            code=FaultCode.INVALID_CHOICE,
            option=self,
            token=token,
            suggestions=suggestions,
            hint=hint,
        ))
        return Unset

    def consume(self, tokens, inline, /):
        if not self._forbid_inline(inline):
            return False
        if not tokens:
            return self._fail(MissingValueError(
                "%s %r requires a value" % (self.__typename__, self.label),
                title="missing value",
                code=FaultCode.VALUE_REQUIRED,
                option=self,
                hint="choices are: %s" % ", ".join(self.extra_help()),
            ))
        if (value := self._lookup(tokens.popleft())) is Unset:
            return False
        self.value = value
        return True


class EnumList[_E](ScalarList):
    """
    Option bound to a run of following tokens, each naming a value of a NameMap.

    Same arity and stop rules as ScalarList; same name rules as EnumScalar.
    The default list (possibly empty) is always announced in help.
    """

    __introspectable__ = ("short", "long", "namemap", "default", "minimum", "help", "specified", "values")

    def __init__(self, short=None, long=None, namemap=Unset, /, *, default=Unset, minimum=1, help=None):
        super().__init__(short, long, str, default=default, minimum=minimum, help=help)
        self.namemap = _sanitize_namemap(builtins.type(self), namemap)

    def value_names(self):
        """Names of the current values, in order."""
        return [self.namemap.name(value) for value in self.values]

    def help_suffix(self):
        return "Default is %s. Choices:" % _describe(map(self.namemap.name, coalesce(self.default, ())))

    def extra_help(self):
        return self.namemap.names()

    _lookup = EnumScalar._lookup

    def consume(self, tokens, inline, /):
        if not self._forbid_inline(inline):
            return False
        if (taken := self._take(tokens)) is None:
            return False
        values = []
        for token in taken:
            if (value := self._lookup(token)) is Unset:
                return False
            values.append(value)
        self.values = values
        return True


__all__ = (
    # Constants
    "PREFIX",

    # Helpers
    "read",
    "hide",
    "Hidden",

    # Capability and variants
    "Option",
    "Switch",
    "Scalar",
    "EqOnlyScalar",
    "ScalarList",
    "EnumScalar",
    "EnumList",
)
