"""
argvex utilities shared by the registry, the engine and the outcome record.

Contents
- Unset: the "no value given" marker, for places where None is a real value
  (a subcommand index that was never configured, an option lookup that missed).
- coalesce(object, default): Unset -> default, everything else untouched.
- rename(): give generated accessors a readable __name__ for tracebacks.
- mirror("field"): property returning a frozen view of self._field.
- isname(name, charset): option/subcommand name validation ("strict" / "relaxed").

    >>> coalesce(Unset, 0)
    0
    >>> coalesce(None, 0) is None
    True
    >>> isname("dry-run", "strict")
    True
    >>> isname("", "relaxed")
    True
"""
import builtins
import functools
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker.

    Only one instance ever exists; it is falsy, prints as "Unset", survives
    copy and pickle as itself and cannot be subclassed.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")


def coalesce(object, default=None, /):
    """Return `default` when `object` is Unset, `object` otherwise (None, 0 and "" included)."""
    return default if object is Unset else object


def rename(*parameters):
    """
    rename(callable, name) renames in place and returns the callable;
    rename(name) returns a decorator doing the same.

    TypeError for a non-callable, a non-string name or any other arity.
    """
    if len(parameters) == 1:
        name, = parameters
        if not isinstance(name, str):
            raise TypeError("rename() name must be a string")
        return functools.partial(lambda name, target: rename(target, name), name)
    if len(parameters) != 2:
        raise TypeError("rename() expects 1 or 2 arguments, got %d" % len(parameters))
    target, name = parameters
    if not builtins.callable(target):
        raise TypeError("rename() target must be callable")
    if not isinstance(name, str):
        raise TypeError("rename() name must be a string")
    target.__name__ = target.__qualname__ = name
    return target


def _freeze(object):
    """
    Shallow, read-only view of a container.

    - Mapping           → MappingProxyType
    - Set               → frozenset
    - Sequence (non-str) → tuple
    - anything else     → returned as-is
    """
    if isinstance(object, Mapping):
        return MappingProxyType(object)
    if isinstance(object, Set):
        return frozenset(object)
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" on the instance and returns a frozen
    view for container types, so public state cannot be mutated through it.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


# letters and hyphens only, never empty
_STRICT = re.compile(r"(?:[^\W\d_]|-)+")
# no whitespace, '=', quotes; empty or starting with a letter
_RELAXED = re.compile(r"(?:[^\W\d_][^\s='\"]*)?")

CHARSETS = MappingProxyType({
    "strict": _STRICT,
    "relaxed": _RELAXED,
})


def isname(name, charset="relaxed", /):
    """
    Return True when name is acceptable under the given charset.

    charsets
    - "strict": letters and hyphens only, at least one character.
    - "relaxed": no whitespace, '=', apostrophe or quotation mark, and either
      the empty string (naked hyphen) or starting with an alphabetic character.
    """
    if not isinstance(name, str):
        raise TypeError("isname() first argument must be a string")
    try:
        pattern = CHARSETS[charset]
    except KeyError:
        raise ValueError("isname() charset must be one of %s" % ", ".join(map(repr, CHARSETS))) from None
    return pattern.fullmatch(name) is not None


Unset = UnsetType()


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "isname",

    # Types
    "UnsetType",

    # Constants
    "Unset",
    "CHARSETS",
)
