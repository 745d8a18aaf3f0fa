"""
argvex parsing engine: one forward pass from raw tokens to an Outcome.

What this module provides
- parse(tokens, registry): interpret a token stream against a Registry and return
  an Outcome, or raise the first ParsingError met (see argvex.faults).

Token precedence (first applicable rule wins; disabled syntaxes are skipped)
1. marker                    '--' → every later token is unnamed, verbatim.
2. double hyphen assignment  '--name=value' → parameter value.
3. double hyphen             '--name' → flag, or parameter taking the next token.
                             with the marker disabled, a bare '--' is the empty
                             prefix and completes like any other ('--' alone
                             names the only registered option).
4. single hyphen             '-abc', '-p value', '-p495', '-' (naked hyphen).
5. assignment                'name=value' → parameter value.
6. subcommand                token (at the configured index) naming a subcommand →
                             it and every later token become the subcommand tail.
7. unnamed                   anything else, verbatim.

Invariants
- the first token is the invocation name and is never interpreted.
- a value consumed from the next token is taken as-is, even when it looks like an option.
- only canonical names reach the outcome; alias spellings only appear in faults.
- after the pass, a missing required subcommand is reported before missing
  required parameters, and every missing parameter is reported at once.
"""
import logging
import shlex
from collections import deque
from collections.abc import Iterable

from .faults import (
    UnrecognizedOption,
    AssignmentToFlag,
    AssignmentToFlagAlias,
    ParameterDuplication,
    ParameterDuplicationAlias,
    MissingArgument,
    MissingArgumentAlias,
    UnrecognizedSubcommand,
    MissingRequiredSubcommand,
    MissingRequiredParameters,
)
from .outcome import Outcome
from .registry import Registry, Flag
from .resolver import resolve_option, resolve_letter, resolve_subcommand
from .utils import Unset

logger = logging.getLogger(__name__)


def _aliased(canonical, aliased, name, via):
    """Pick the alias-aware fault kind when the option was reached through an alias."""
    return canonical(name) if via is None else aliased(name, via)


def _tokenize(tokens):
    """
    Normalize the input into a deque of tokens.

    - str: shell-like string, split via shlex.split.
    - Iterable[str]: used verbatim (no trimming, no filtering).
    """
    if isinstance(tokens, str):
        return deque(shlex.split(tokens))
    if not isinstance(tokens, Iterable):
        raise TypeError("parse() first argument must be a string or an iterable of strings")
    tokens = deque(tokens)
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("parse() first argument must be a string or an iterable of strings")
    return tokens


class _Scan:
    """
    per-call parsing state: the remaining tokens and what was collected so far.
    """
    __slots__ = ("registry", "tokens", "flags", "params", "unnamed", "tail")

    def __init__(self, registry, tokens):
        self.registry = registry
        self.tokens = tokens
        self.flags = set()
        self.params = {}
        self.unnamed = []
        self.tail = []

    def store(self, target, via, value):
        """record a parameter value, honoring the duplication policy."""
        if target in self.params and not self.registry.duplication:
            raise _aliased(ParameterDuplication, ParameterDuplicationAlias, target, via)
        self.params[target] = value

    def take(self, target, via):
        """consume the next whole token as the value of `target`."""
        try:
            return self.tokens.popleft()
        except IndexError:
            raise _aliased(MissingArgument, MissingArgumentAlias, target, via) from None

    def assign(self, candidate, value):
        """'--name=value' and 'name=value': only parameters accept an inline value."""
        target, descriptor, via = resolve_option(self.registry, candidate)
        if isinstance(descriptor, Flag):
            raise _aliased(AssignmentToFlag, AssignmentToFlagAlias, target, via)
        self.store(target, via, value)

    def double_hyphen(self, candidate):
        """'--name' sets a flag or takes the next token as a parameter value."""
        target, descriptor, via = resolve_option(self.registry, candidate)
        if isinstance(descriptor, Flag):
            self.flags.add(target)
        else:
            self.store(target, via, self.take(target, via))

    def naked_hyphen(self, token, value):
        """'-' and '-495': the option registered under the empty name, if any."""
        if "" not in self.registry:
            if value:
                raise UnrecognizedOption(value)
            self.unnamed.append(token)
            return
        target, descriptor, via = self.registry.describe("")
        if isinstance(descriptor, Flag):
            if value:
                raise _aliased(AssignmentToFlag, AssignmentToFlagAlias, target, via)
            self.flags.add(target)
        else:
            self.store(target, via, value or self.take(target, via))

    def single_hyphen(self, token):
        """
        '-abc', '-p value', '-p495', '-fpq v1 v2'.

        the leading run of letters names one-letter options; the first other
        character starts the inline value, which belongs to the last parameter.
        """
        body = token[1:]
        split = next((index for index, char in enumerate(body) if not char.isalpha()), len(body))
        letters, value = body[:split], body[split:]

        if not letters:
            return self.naked_hyphen(token, value)

        flag = None  # (target, via) of the last flag letter
        pending = []  # (target, via) of parameter letters, left to right
        trailing = False  # the run ends on a flag letter
        for letter in letters:
            target, descriptor, via = resolve_letter(self.registry, letter)
            if isinstance(descriptor, Flag):
                self.flags.add(target)
                flag = (target, via)
                trailing = True
            else:
                pending.append((target, via))
                trailing = False

        if not pending:
            if value:
                raise _aliased(AssignmentToFlag, AssignmentToFlagAlias, *flag)
            return

        if self.registry.stacking:
            if trailing and value:
                raise _aliased(AssignmentToFlag, AssignmentToFlagAlias, *flag)
            values = [self.take(*x) for x in pending[:-1]]
            values.append(value or self.take(*pending[-1]))
        else:
            if trailing or len(pending) > 1:
                raise _aliased(MissingArgument, MissingArgumentAlias, *pending[0])
            values = [value or self.take(*pending[0])]

        for (target, via), value in zip(pending, values):
            self.store(target, via, value)

    def delegate(self, token):
        """
        hand `token` and every later token over to a subcommand; False when the
        token does not name one (at this position).
        """
        registry = self.registry
        index = registry.subcommand_index
        if index is Unset:
            name = token if token in registry.subcommands else None
        elif len(self.unnamed) != index:
            return False
        else:
            name = resolve_subcommand(registry, token, completion=registry.subcommand_completion)
            if name is None and registry.subcommand_required:
                raise UnrecognizedSubcommand(token)
        if name is None:
            return False
        self.tail = [name, *self.tokens]
        self.tokens.clear()
        logger.debug("delegating %d token(s) to subcommand %r", len(self.tail) - 1, name)
        return True


def parse(tokens, registry, /):
    """
    Parse argv-like tokens against a registry.

    Parameters
    - tokens: Iterable[str] (first item is the invocation name) or a shell-like
      string split with shlex.split.
    - registry: Registry; sealed on first use and never modified.

    Returns
    - Outcome holding the invocation name, flags, parameter values, unnamed
      tokens and the subcommand tail.

    Raises
    - ParsingError subclasses for malformed input (see argvex.faults).
    - TypeError for a non-Registry registry or non-string tokens.
    - ValueError from shlex.split for a string with an unclosed quote.
    """
    if not isinstance(registry, Registry):
        raise TypeError("parse() second argument must be a registry")
    registry.seal()

    scan = _Scan(registry, _tokenize(tokens))
    name = scan.tokens.popleft() if scan.tokens else ""

    while scan.tokens:
        token = scan.tokens.popleft()

        if registry.marker and token == "--":
            if registry.store_marker:
                scan.unnamed.append(token)
            scan.unnamed.extend(scan.tokens)
            scan.tokens.clear()
            logger.debug("marker reached; remaining tokens kept as unnamed")
            break

        if registry.double_hyphen_assignment and token.startswith("--") and "=" in token:
            candidate, _, value = token[2:].partition("=")
            scan.assign(candidate, value)
            continue

        if registry.double_hyphen and token.startswith("--"):
            scan.double_hyphen(token[2:])
            continue

        if registry.single_hyphen and token.startswith("-"):
            scan.single_hyphen(token)
            continue

        if registry.assignment and "=" in token:
            candidate, _, value = token.partition("=")
            scan.assign(candidate, value)
            continue

        if scan.delegate(token):
            break

        scan.unnamed.append(token)

    if registry.subcommand_required and not scan.tail:
        raise MissingRequiredSubcommand()

    if missing := [x for x in registry.required() if x not in scan.params]:
        raise MissingRequiredParameters(missing)

    return Outcome(name, scan.flags, scan.params, scan.unnamed, scan.tail, registry=registry)


__all__ = (
    "parse",
)
