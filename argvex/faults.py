"""
argvex faults (parsing errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing
  parsing error. Codes are grouped by domain to keep copy consistent and make
  logs/searches predictable.
- ParsingError: base type of the closed runtime taxonomy. Faults are plain data
  (a fixed payload per kind) that compare equal by kind and payload, and know
  how to render themselves in a friendly, lowercased, and actionable way.
- RegistryError: configuration-time defect raised while building a registry.
- trigger(): central entry point to surface a fault (raise, or print and exit in shell mode).

UX goals
- One short title, one sentence naming the offending token, one hint.
- Canonical names first: alias-aware kinds name the canonical option and the
  alias the user typed ("option 'output' (given as 'o')").
- Lowercase copy; colors can be overridden by a __styles__ mapping in __main__.

Integration
- The engine raises faults; hosts catch ParsingError and either render it
  themselves (rich.console.Console.print(fault)) or call trigger(fault, shell=True).
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • UNRECOGNIZED_SUBCOMMAND, AMBIGUOUS_SUBCOMMAND, MISSING_SUBCOMMAND
    - options (1111x)
      • UNRECOGNIZED_OPTION, AMBIGUOUS_OPTION, FLAG_ASSIGNMENT,
        DUPLICATED_PARAMETER, MISSING_ARGUMENT, MISSING_PARAMETERS
    - conversion (1113x)
      • UNCASTABLE_ARGUMENT

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- routing errors (1110x) ---
    UNRECOGNIZED_SUBCOMMAND     = 11101
    AMBIGUOUS_SUBCOMMAND        = 11102
    MISSING_SUBCOMMAND          = 11103

    # --- option errors (1111x) ---
    UNRECOGNIZED_OPTION         = 11112
    AMBIGUOUS_OPTION            = 11113
    FLAG_ASSIGNMENT             = 11114
    DUPLICATED_PARAMETER        = 11115
    MISSING_ARGUMENT            = 11116
    MISSING_PARAMETERS          = 11117

    # --- conversion errors (1113x) ---
    UNCASTABLE_ARGUMENT         = 11131

    def normalize(self):
        """
        label shown for this code: __main__.__codes__[self] when the host
        defines that mapping, the number itself otherwise.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class RegistryError(ValueError):
    """
    configuration-time defect: invalid or duplicated name, dangling alias target,
    or mutation of a sealed registry. raised eagerly while wiring the cli surface.
    """


def _quoted(names):
    return ", ".join(map(repr, names))


class ParsingError(Exception):
    """
    base of the runtime fault taxonomy.

    each concrete kind declares
    - __fields__: names of its payload, bound positionally at construction.
    - code / title: stable identifier and short heading for rendering.
    - message / hint: one-line body and actionable suggestion, computed from the payload.

    rendering options (fancy, colorful, prog, ratio) are carried apart from the
    payload and never take part in equality.
    """
    __fields__ = ()

    code = Unset
    title = Unset

    def __init__(self, *payload, **options):
        fields = type(self).__fields__
        if len(payload) != len(fields):
            raise TypeError("%s() takes %d payload arguments but %d were given" % (
                type(self).__name__, len(fields), len(payload)
            ))
        payload = tuple(tuple(x) if isinstance(x, list | tuple) else x for x in payload)
        super().__init__(*payload)
        for field, value in zip(fields, payload):
            setattr(self, field, value)
        self.options = MappingProxyType(options)

    def __eq__(self, other):
        if not isinstance(other, ParsingError):
            return NotImplemented
        return type(self) is type(other) and self.args == other.args

    def __hash__(self):
        return hash((type(self), self.args))

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join(map(repr, self.args)))

    def __str__(self):
        return self.message

    @property
    def message(self):
        raise NotImplementedError

    @property
    def hint(self):
        return "run the command with --help to see the accepted usage"

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold white",
            "code": "bold cyan",
            "error-title": "bold magenta",

            # body
            "error-message": "default",
            "hint-arrow": "dim green",
            "hint": "italic green",
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

        prog = text(getattr(main, "__prog__", self.options.get("prog", "argvex")), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.code.normalize(), styler("code")),
            " | ",
            text(self.title.title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint")))

        if fancy:
            try:
                width = int((console.width - 4) * self.options["ratio"])
            except KeyError:
                width = None
            return Panel(Group(message, hint), title=header, title_align="left", width=width)

        return Group(header, message, hint)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(*self.args, **{**self.options, **overrides})


class UnrecognizedOption(ParsingError):
    __fields__ = ("name",)
    code = FaultCode.UNRECOGNIZED_OPTION
    title = "unrecognized option"

    @property
    def message(self):
        return "unrecognized option %r" % self.name

    @property
    def hint(self):
        return "check the spelling; run the command with --help to see all options"


class AmbiguousOption(ParsingError):
    __fields__ = ("name", "candidates")
    code = FaultCode.AMBIGUOUS_OPTION
    title = "ambiguous option"

    @property
    def message(self):
        return "option %r is ambiguous; it could be %s" % (self.name, _quoted(self.candidates))

    @property
    def hint(self):
        return "type more characters of the option name (for example: %r)" % self.candidates[0]


class AssignmentToFlag(ParsingError):
    __fields__ = ("name",)
    code = FaultCode.FLAG_ASSIGNMENT
    title = "flag cannot take a value"

    @property
    def message(self):
        return "flag %r cannot take a value" % self.name

    @property
    def hint(self):
        return "remove the value given to the flag"


class AssignmentToFlagAlias(AssignmentToFlag):
    __fields__ = ("name", "alias")

    @property
    def message(self):
        return "flag %r (given as %r) cannot take a value" % (self.name, self.alias)


class ParameterDuplication(ParsingError):
    __fields__ = ("name",)
    code = FaultCode.DUPLICATED_PARAMETER
    title = "duplicated parameter"

    @property
    def message(self):
        return "option %r can be specified only once" % self.name

    @property
    def hint(self):
        return "keep a single occurrence of the option"


class ParameterDuplicationAlias(ParameterDuplication):
    __fields__ = ("name", "alias")

    @property
    def message(self):
        return "option %r (given again as %r) can be specified only once" % (self.name, self.alias)


class MissingArgument(ParsingError):
    __fields__ = ("name",)
    code = FaultCode.MISSING_ARGUMENT
    title = "missing argument"

    @property
    def message(self):
        return "option %r is missing an argument" % self.name

    @property
    def hint(self):
        return "pass a value right after the option"


class MissingArgumentAlias(MissingArgument):
    __fields__ = ("name", "alias")

    @property
    def message(self):
        return "option %r (given as %r) is missing an argument" % (self.name, self.alias)


class UnrecognizedSubcommand(ParsingError):
    __fields__ = ("name",)
    code = FaultCode.UNRECOGNIZED_SUBCOMMAND
    title = "unrecognized subcommand"

    @property
    def message(self):
        return "unrecognized subcommand %r" % self.name

    @property
    def hint(self):
        return "run the command with --help to see available subcommands"


class AmbiguousSubcommand(ParsingError):
    __fields__ = ("name", "candidates")
    code = FaultCode.AMBIGUOUS_SUBCOMMAND
    title = "ambiguous subcommand"

    @property
    def message(self):
        return "subcommand %r is ambiguous; it could be %s" % (self.name, _quoted(self.candidates))

    @property
    def hint(self):
        return "type more characters of the subcommand (for example: %r)" % self.candidates[0]


class MissingRequiredSubcommand(ParsingError):
    code = FaultCode.MISSING_SUBCOMMAND
    title = "missing subcommand"

    @property
    def message(self):
        return "a subcommand is required"

    @property
    def hint(self):
        return "run the command with --help to see available subcommands"


class MissingRequiredParameters(ParsingError):
    __fields__ = ("names",)
    code = FaultCode.MISSING_PARAMETERS
    title = "missing required options"

    @property
    def message(self):
        if len(self.names) == 1:
            return "required option %r is missing" % self.names[0]
        return "required options %s are missing" % _quoted(self.names)

    @property
    def hint(self):
        return "add the missing options with their values"


class ArgumentParsingError(ParsingError):
    __fields__ = ("name", "value")
    code = FaultCode.UNCASTABLE_ARGUMENT
    title = "invalid value"

    @property
    def message(self):
        return "argument %r is not a valid value for option %r" % (self.value, self.name)

    @property
    def hint(self):
        return "check the expected type of the option value"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParsingError).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, the fault is rendered on the stderr console and the process
      exits with status 1; otherwise it is raised.

    typical options
    - shell, fancy, colorful, prog, ratio.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def render(fault, /, **options):
    """
    return the plain-text rendering of a fault (no colors, no panel).

    useful for logs and tests; the layout matches what trigger() prints in
    shell mode with colorful=False.
    """
    capture = Console(color_system=None, force_terminal=False, width=coalesce(options.pop("width", Unset), 100))
    with capture.capture() as output:
        capture.print(fault.__replace__(**({"colorful": False} | options)))
    return output.get()


__all__ = (
    "FaultCode",
    "RegistryError",
    "ParsingError",
    "UnrecognizedOption",
    "AmbiguousOption",
    "AssignmentToFlag",
    "AssignmentToFlagAlias",
    "ParameterDuplication",
    "ParameterDuplicationAlias",
    "MissingArgument",
    "MissingArgumentAlias",
    "UnrecognizedSubcommand",
    "AmbiguousSubcommand",
    "MissingRequiredSubcommand",
    "MissingRequiredParameters",
    "ArgumentParsingError",
    "trigger",
    "render",
)
