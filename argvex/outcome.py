"""
argvex outcome: the read-only record returned by parse().

Fields
- name: the invocation name (first token, verbatim).
- flags: frozenset of canonical flag names that were set.
- params: read-only mapping of canonical parameter names to their raw text.
- unnamed: tuple of tokens not consumed as options, values or subcommand trigger.
- subcommand: canonical subcommand name, or None.
- tail: tuple starting with the subcommand name followed by every later token,
  untouched; empty when no subcommand was found.

Typed access
- Parameter values stay text inside the record. value(name) converts on demand
  with the converter registered for that parameter (Registry.add_param(type=...)),
  convert(name, type) with an explicit one. A converter raising ValueError or
  TypeError surfaces as ArgumentParsingError(name, raw).
"""
from .faults import ArgumentParsingError
from .utils import mirror


class Outcome:
    """
    Immutable result of a successful parse.

    Instances compare equal when every field is equal, so parsing the same
    tokens twice against the same registry yields equal outcomes.
    """
    __slots__ = ("_name", "_flags", "_params", "_unnamed", "_tail", "_registry")

    name = mirror("name")
    flags = mirror("flags")
    params = mirror("params")
    unnamed = mirror("unnamed")
    tail = mirror("tail")

    def __init__(self, name, flags=(), params=(), unnamed=(), tail=(), *, registry=None):
        self._name = name
        self._flags = frozenset(flags)
        self._params = dict(params)
        self._unnamed = tuple(unnamed)
        self._tail = tuple(tail)
        self._registry = registry

    @property
    def subcommand(self):
        """Canonical name of the subcommand being invoked, or None."""
        return self._tail[0] if self._tail else None

    def has_flag(self, name, /):
        return name in self._flags

    def get(self, name, default=None, /):
        """Raw text of a parameter, or `default` when it was not given."""
        return self._params.get(name, default)

    def convert(self, name, type, default=None, /):
        """
        Raw text of a parameter converted with `type`, or `default` when it was
        not given (the default is returned as-is, never converted).
        """
        try:
            raw = self._params[name]
        except KeyError:
            return default
        try:
            return type(raw)
        except (ValueError, TypeError):
            raise ArgumentParsingError(name, raw) from None

    def value(self, name, default=None, /):
        """
        Like convert(), using the converter registered for the parameter.

        Falls back to the raw text when the outcome was built without a registry
        or the name is not a registered parameter.
        """
        try:
            converter = self._registry.params()[name].type
        except (AttributeError, KeyError):
            converter = str
        return self.convert(name, converter, default)

    def __eq__(self, other):
        if not isinstance(other, Outcome):
            return NotImplemented
        return (
            self._name == other._name and
            self._flags == other._flags and
            self._params == other._params and
            self._unnamed == other._unnamed and
            self._tail == other._tail
        )

    __hash__ = None

    def __rich_repr__(self):
        yield "name", self._name
        yield "flags", sorted(self._flags)
        yield "params", dict(self._params)
        yield "unnamed", list(self._unnamed)
        yield "subcommand", self.subcommand
        yield "tail", list(self._tail)

    def __repr__(self):
        return "outcome(%s)" % ", ".join("%s=%r" % x for x in self.__rich_repr__())


__all__ = (
    "Outcome",
)
