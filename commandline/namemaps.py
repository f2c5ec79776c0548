"""
Bidirectional name maps between enumerated values and their canonical names.

Overview
- NameMap[_E]: immutable table built once from (value, name) pairs.
  • name(value) never fails: absent values map to the UNKNOWN sentinel.
  • val(name) never raises: it answers a Lookup(value, found) pair and the
    caller checks `found` before trusting `value`.
  • Two ordered views: by_value (value order) and by_name (name order), so
    help text can list choices either way.
- NameMap.of(enum_type): explicit factory for Python enums (member -> member.name).
  Name maps are passed to enum options at declaration time; there is no
  per-type global registry to look them up from.

Declaration rules (checked on construction)
- Every entry is a 2-item (value, name) pair, value hashable.
- Names are non-empty strings without surrounding whitespace.
- Values and names are unique within one map; a duplicate is a
  DeclarationError(code=DUPLICATE_ENTRY) rather than a silent overwrite.

Ordering
- Enum members order by their .value; other values by themselves.
- When values cannot be compared with each other, declaration order is kept
  and a NameMapOrderWarning is emitted.

Quick example:
    >>> class Color(enum.Enum):
    ...     red = 1
    ...     green = 2
    >>> colors = NameMap.of(Color)
    >>> colors.name(Color.green)
    'green'
    >>> colors.val("red")
    Lookup(value=<Color.red: 1>, found=True)
    >>> colors.val("purple").found
    False
"""
import enum
import warnings
from collections.abc import Iterable
from types import MappingProxyType
from typing import NamedTuple, Any

from .faults import DeclarationError, NameMapOrderWarning, FaultCode

UNKNOWN = "<unknown>"
"""Name reported for values that are absent from a map."""


class Lookup(NamedTuple):
    """
    Result of a name -> value lookup. `value` is None when `found` is False.
    """
    value: Any
    found: bool


def _rank(value):
    return value.value if isinstance(value, enum.Enum) else value


def _ordered(items):
    try:
        return sorted(items, key=lambda item: _rank(item[0]))
    except TypeError:
        warnings.warn(NameMapOrderWarning(
            "namemap values cannot be ordered; declaration order is kept",
            code=FaultCode.UNORDERED_NAMEMAP,
        ), stacklevel=4)
        return list(items)


class NameMap[_E]:
    """
    Immutable bidirectional mapping between values and names.

    Parameters
    - pairs: Iterable[tuple[_E, str]]
      The (value, name) entries, in declaration order.

    Raises
    - DeclarationError: malformed entries, empty names, unhashable values,
      duplicate values or duplicate names.
    """

    def __init__(self, pairs, /):
        if not isinstance(pairs, Iterable) or isinstance(pairs, str):
            raise DeclarationError("namemap entries must be an iterable of (value, name) pairs")

        names = {}
        values = {}
        for entry in pairs:
            try:
                value, name = entry
            except (TypeError, ValueError):
                raise DeclarationError("namemap entries must be (value, name) pairs") from None
            if not isinstance(name, str):
                raise DeclarationError("namemap names must be strings")
            elif not name or name != name.strip():
                raise DeclarationError("namemap names cannot be empty or padded with whitespace: %r" % name)
            try:
                hash(value)
            except TypeError:
                raise DeclarationError("namemap values must be hashable") from None
            if value in values:
                raise DeclarationError("namemap value %r is declared twice" % (value,), FaultCode.DUPLICATE_ENTRY)
            if name in names:
                raise DeclarationError("namemap name %r is declared twice" % name, FaultCode.DUPLICATE_ENTRY)
            values[value] = name
            names[name] = value

        self._by_value = MappingProxyType(dict(_ordered(values.items())))
        self._by_name = MappingProxyType(dict(sorted(names.items())))

    @classmethod
    def of(cls, enum_type, /, exclude=()):
        """
        Build a name map from an enum type, naming each member by its Python name.

        Aliases are skipped (enum iteration yields canonical members only);
        members listed in `exclude` are left out.
        """
        if not isinstance(enum_type, type) or not issubclass(enum_type, enum.Enum):
            raise TypeError("NameMap.of() argument must be an enum type")
        excluded = frozenset(exclude)
        return cls((member, member.name) for member in enum_type if member not in excluded)

    @property
    def by_value(self):
        """Read-only mapping value -> name, in value order."""
        return self._by_value

    @property
    def by_name(self):
        """Read-only mapping name -> value, in name order."""
        return self._by_name

    def name(self, value, /):
        try:
            return self._by_value.get(value, UNKNOWN)
        except TypeError:  # unhashable probe
            return UNKNOWN

    def val(self, name, /):
        try:
            return Lookup(self._by_name[name], True)
        except (KeyError, TypeError):
            return Lookup(None, False)

    def size(self):
        return len(self._by_value)

    def names(self):
        """Names in value order."""
        return list(self._by_value.values())

    def values(self):
        """Values in value order."""
        return list(self._by_value.keys())

    def __len__(self):
        return len(self._by_value)

    def __iter__(self):
        return iter(self._by_value.items())

    def __contains__(self, value):
        try:
            return value in self._by_value
        except TypeError:
            return False

    def __repr__(self):
        return "name-map(%s)" % ", ".join("%r=%r" % (name, value) for value, name in self)


__all__ = (
    "UNKNOWN",
    "Lookup",
    "NameMap",
)
