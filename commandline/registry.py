"""
Option registry: the ordered set of options a parser knows about.

Overview
- Registry keeps three things:
  • the options in registration order (help output walks this order),
  • an index from every declared name (short and long) to its option,
  • the positional list: tokens the parser could not match, in encounter order.
- Registration is explicit and happens once all options exist; a rejected
  option leaves the registry untouched.
- There are no removal operations.
"""
from types import MappingProxyType

from .faults import DeclarationError, FaultCode
from .options import Option


class Registry:
    """
    Ordered option table with a name index and a positional list.

    Lookups are exact full-string matches: no abbreviations, no prefix
    matching, no case folding.
    """

    def __init__(self, *options):
        self._options = []
        self._names = {}
        self._positional = []
        self.register(*options)

    def register(self, *options):
        """
        Register options in order.

        Raises
        - TypeError: an argument is not an Option.
        - DeclarationError(DUPLICATE_NAME): the option is already registered,
          or one of its names is bound to a different option.
        """
        for option in options:
            if not isinstance(option, Option):
                raise TypeError("register() arguments must be options, not %r" % type(option).__name__)
            if any(option is other for other in self._options):
                raise DeclarationError(
                    "%s %r is already registered" % (option.__typename__, option.label),
                    FaultCode.DUPLICATE_NAME
                )
            for name in option.names:
                if name in self._names:
                    raise DeclarationError(
                        "name %r is already bound to %s %r" % (
                            name, self._names[name].__typename__, self._names[name].label
                        ),
                        FaultCode.DUPLICATE_NAME
                    )
            self._options.append(option)
            self._names.update(dict.fromkeys(option.names, option))
        return self

    def lookup(self, name, /):
        """Return the option declared under `name`, or None."""
        return self._names.get(name)

    @property
    def options(self):
        return tuple(self._options)

    @property
    def names(self):
        """Read-only mapping name -> option."""
        return MappingProxyType(self._names)

    @property
    def positional(self):
        return tuple(self._positional)

    def append_positional(self, token, /):
        if not isinstance(token, str):
            raise TypeError("positional tokens must be strings")
        self._positional.append(token)

    def __len__(self):
        return len(self._options)

    def __iter__(self):
        return iter(self._options)

    def __contains__(self, name):
        return name in self._names

    def __repr__(self):
        return "registry(%s)" % ", ".join("/".join(option.names) for option in self._options)


__all__ = (
    "Registry",
)
