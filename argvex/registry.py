r"""
argvex configuration registry: the catalog a token stream is parsed against.

Overview
- Descriptors
  • Flag: named, presence-only option (no payload).
  • Param: named, value-bearing option; optionally required, with a converter
    (str -> T) applied lazily by the outcome accessors, never by the engine.
  • Alias: alternate name of a Flag or Param. Chains are collapsed when the alias
    is registered, so a stored target is always a Flag or Param name.

- Registry
  • One namespace for flags, params and aliases (mutually unique names).
  • One disjoint namespace for subcommands.
  • Feature toggles selecting which syntaxes the engine accepts and how edge
    cases are handled (see __toggles__).

Lifecycle
- Every insertion is validated against the current state; defects raise
  RegistryError (a ValueError) right away, TypeError for wrong argument types.
- parse() seals the registry on first use; a sealed registry is read-only and can
  be shared by any number of parse calls.

Quick start
    from argvex import Registry, parse

    registry = Registry(assignment=True)
    registry.add_flag("verbose").add_alias("v", "verbose")
    registry.add_param("output", required=True).add_alias("o", "output")
    registry.add_subcommand("build")

    outcome = parse(["tool", "-v", "--out", "dist", "build", "--fast"], registry)
"""
import logging
from collections.abc import Callable
from types import MappingProxyType
from typing import NamedTuple

from .faults import RegistryError
from .utils import Unset, mirror, isname, CHARSETS

logger = logging.getLogger(__name__)


class Flag(NamedTuple):
    """Presence-only option."""


class Param(NamedTuple):
    """Value-bearing option; `type` converts the raw text on demand."""
    required: bool = False
    type: Callable = str


class Alias(NamedTuple):
    """Alternate name; `target` is always a Flag or Param name."""
    target: str


class Registry:
    """
    Immutable-after-seal catalog of flags, parameters, aliases and subcommands.

    Toggles (keyword-only, see __toggles__ for defaults)
    - marker / store_marker: '--' ends option interpretation / is kept as unnamed.
    - single_hyphen, double_hyphen, double_hyphen_assignment, assignment: syntaxes.
    - stacking: several parameters in one single-hyphen bundle.
    - duplication: a parameter may be given more than once (last value wins).
    - completion: unambiguous prefixes resolve to option names.
    - subcommand_index: position in the unnamed tokens where a subcommand is looked for.
    - subcommand_completion: prefix completion for subcommands (requires an index).
    - subcommand_required: parsing fails when no subcommand was found.
    - charset: "relaxed" or "strict" option-name charset.
    """

    __toggles__ = MappingProxyType({
        "marker": True,
        "store_marker": False,
        "single_hyphen": True,
        "double_hyphen": True,
        "double_hyphen_assignment": True,
        "assignment": False,
        "stacking": True,
        "duplication": False,
        "completion": True,
        "subcommand_completion": False,
        "subcommand_index": Unset,
        "subcommand_required": False,
        "charset": "relaxed",
    })

    marker = mirror("marker")
    store_marker = mirror("store_marker")
    single_hyphen = mirror("single_hyphen")
    double_hyphen = mirror("double_hyphen")
    double_hyphen_assignment = mirror("double_hyphen_assignment")
    assignment = mirror("assignment")
    stacking = mirror("stacking")
    duplication = mirror("duplication")
    completion = mirror("completion")
    subcommand_completion = mirror("subcommand_completion")
    subcommand_index = mirror("subcommand_index")
    subcommand_required = mirror("subcommand_required")
    charset = mirror("charset")

    options = mirror("options")
    sealed = mirror("sealed")

    def __init__(self, **toggles):
        self._options = {}
        self._subcommands = {}
        self._sealed = False
        for name, default in type(self).__toggles__.items():
            setattr(self, "_" + name, default)
        self.configure(**toggles)

    @classmethod
    def disabled(cls, **toggles):
        """
        Return a registry with every syntax and feature turned off.

        Toggles given here are applied on top, so a registry enabling exactly one
        syntax reads Registry.disabled(double_hyphen=True).
        """
        defaults = {
            name: False for name, value in cls.__toggles__.items() if isinstance(value, bool)
        }
        return cls(**(defaults | toggles))

    def configure(self, **toggles):
        """
        Update feature toggles; returns the registry for chaining.

        Errors
        - TypeError: unknown toggle or wrong value type.
        - ValueError: negative subcommand_index or unknown charset.
        - RegistryError: the registry is sealed.
        """
        self._check_sealed()
        for name, value in toggles.items():
            if name not in type(self).__toggles__:
                raise TypeError("configure() got an unexpected keyword argument %r" % name)
            if name == "subcommand_index":
                if value is not Unset and (not isinstance(value, int) or isinstance(value, bool)):
                    raise TypeError("registry 'subcommand_index' must be an integer")
                if value is not Unset and value < 0:
                    raise ValueError("registry 'subcommand_index' must be non-negative")
            elif name == "charset":
                if not isinstance(value, str):
                    raise TypeError("registry 'charset' must be a string")
                if value not in CHARSETS:
                    raise ValueError("registry 'charset' must be one of %s" % ", ".join(map(repr, CHARSETS)))
            elif not isinstance(value, bool):
                raise TypeError("registry %r must be a boolean" % name)
            setattr(self, "_" + name, value)
        return self

    @property
    def subcommands(self):
        """Subcommand names, a namespace disjoint from the options."""
        return frozenset(self._subcommands)

    def seal(self):
        """Freeze the registry; further mutation raises RegistryError."""
        self._sealed = True
        return self

    def _check_sealed(self):
        if self._sealed:
            raise RegistryError("registry is sealed and cannot be modified")

    def _claim(self, name, kind):
        """
        Validate that `name` can be registered as a `kind`.
        """
        self._check_sealed()
        if not isinstance(name, str):
            raise TypeError("registry %s name must be a string" % kind)
        if not isname(name, self._charset):
            raise RegistryError("registry %s name %r is invalid" % (kind, name))
        if name in self._options or name in self._subcommands:
            raise RegistryError("registry %s name %r is already in use" % (kind, name))

    def add_flag(self, name):
        """Register a flag; returns the registry for chaining."""
        self._claim(name, "flag")
        self._options[name] = Flag()
        logger.debug("registered flag %r", name)
        return self

    def add_param(self, name, required=False, type=str):
        """
        Register a parameter; returns the registry for chaining.

        - required: parsing fails with MissingRequiredParameters when absent.
        - type: converter applied by Outcome.value(); never called by the engine.
        """
        self._claim(name, "parameter")
        if not isinstance(required, bool):
            raise TypeError("registry parameter 'required' must be a boolean")
        if not callable(type):
            raise TypeError("registry parameter 'type' must be callable")
        self._options[name] = Param(required, type)
        logger.debug("registered parameter %r (required=%s)", name, required)
        return self

    def add_alias(self, name, target):
        """
        Register `name` as an alias of `target`; returns the registry for chaining.

        When `target` is itself an alias, the new alias points to that alias's
        target, so every stored alias is exactly one hop from a flag or parameter.
        """
        self._claim(name, "alias")
        if not isinstance(target, str):
            raise TypeError("registry alias target must be a string")
        if name == target:
            raise RegistryError("registry alias %r cannot target itself" % name)
        try:
            descriptor = self._options[target]
        except KeyError:
            raise RegistryError("registry alias %r must point to a flag or parameter, not %r" % (name, target)) from None
        if isinstance(descriptor, Alias):
            target = descriptor.target
        self._options[name] = Alias(target)
        logger.debug("registered alias %r -> %r", name, target)
        return self

    def add_subcommand(self, name):
        """Register a subcommand; returns the registry for chaining."""
        if name == "":
            raise RegistryError("registry subcommand name cannot be empty")
        self._claim(name, "subcommand")
        self._subcommands[name] = None
        logger.debug("registered subcommand %r", name)
        return self

    def remove(self, name):
        """
        Remove an option, alias or subcommand; unknown names are ignored.

        Removing a flag or parameter also removes every alias pointing to it;
        removing an alias removes only that alias.
        """
        self._check_sealed()
        if self._subcommands.pop(name, Unset) is not Unset:
            logger.debug("removed subcommand %r", name)
            return self
        descriptor = self._options.pop(name, Unset)
        if descriptor is Unset:
            return self
        if not isinstance(descriptor, Alias):
            for alias in [x for x, y in self._options.items() if isinstance(y, Alias) and y.target == name]:
                del self._options[alias]
                logger.debug("removed alias %r of %r", alias, name)
        logger.debug("removed %s %r", type(descriptor).__name__.lower(), name)
        return self

    def describe(self, name, /):
        """
        Return (canonical, descriptor, via) for a registered option name.

        - canonical: the flag/parameter name (the alias target for aliases).
        - descriptor: always a Flag or Param.
        - via: the alias name when `name` is an alias, otherwise None.

        Raises KeyError for unregistered names.
        """
        descriptor = self._options[name]
        if isinstance(descriptor, Alias):
            return descriptor.target, self._options[descriptor.target], name
        return name, descriptor, None

    def _select(self, kind):
        return MappingProxyType({name: x for name, x in self._options.items() if isinstance(x, kind)})

    def flags(self):
        """Read-only mapping of flag names to their descriptors."""
        return self._select(Flag)

    def params(self):
        """Read-only mapping of parameter names to their descriptors."""
        return self._select(Param)

    def aliases(self):
        """Read-only mapping of alias names to their descriptors."""
        return self._select(Alias)

    def required(self):
        """Names of required parameters, in registration order."""
        return tuple(name for name, x in self._options.items() if isinstance(x, Param) and x.required)

    def __contains__(self, name):
        return name in self._options

    def __getitem__(self, name):
        return self._options[name]

    def __iter__(self):
        return iter(tuple(self._options))

    def __len__(self):
        return len(self._options)

    def __rich_repr__(self):
        yield "options", dict(self._options)
        yield "subcommands", tuple(self._subcommands)
        for name in type(self).__toggles__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "registry(%s)" % ", ".join("%s=%r" % x for x in self.__rich_repr__())


__all__ = (
    "Flag",
    "Param",
    "Alias",
    "Registry",
)
