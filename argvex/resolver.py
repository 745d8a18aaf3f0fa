"""
argvex name resolver: exact-then-prefix lookup of option and subcommand names.

Rules
- An exact match always wins, even when other names merely start with the candidate.
- Without an exact match (and with completion enabled) every name starting with the
  candidate is a match: none → unrecognized, one → resolved, several → ambiguous.
- Ambiguity payloads list the matching names sorted ascending.
- Resolution of options always ends on a Flag or Param: aliases are followed once
  (their targets are collapsed at registration time) and reported as `via`.
"""
from .faults import UnrecognizedOption, AmbiguousOption, AmbiguousSubcommand


def match(names, candidate, /):
    """
    Return the names matched by `candidate`.

    - [candidate] when it is one of `names` (exact match short-circuits).
    - otherwise every name starting with `candidate`, sorted ascending.
    """
    matches = []
    for name in names:
        if name == candidate:
            return [name]
        if name.startswith(candidate):
            matches.append(name)
    matches.sort()
    return matches


def resolve_option(registry, candidate, /):
    """
    Resolve `candidate` to (canonical, descriptor, via) using the registry's
    completion policy.

    Raises UnrecognizedOption or AmbiguousOption.
    """
    if registry.completion:
        matches = match(registry, candidate)
        if not matches:
            raise UnrecognizedOption(candidate)
        if len(matches) > 1:
            raise AmbiguousOption(candidate, matches)
        name, = matches
    elif candidate in registry:
        name = candidate
    else:
        raise UnrecognizedOption(candidate)
    return registry.describe(name)


def resolve_letter(registry, letter, /):
    """
    Resolve a single-hyphen letter; exact lookup only, completion never applies.

    Raises UnrecognizedOption.
    """
    if letter not in registry:
        raise UnrecognizedOption(letter)
    return registry.describe(letter)


def resolve_subcommand(registry, candidate, /, *, completion=False):
    """
    Resolve `candidate` to a subcommand name, or None when nothing matches.

    With completion, an unambiguous prefix resolves too and several matches raise
    AmbiguousSubcommand; without it only an exact name resolves.
    """
    if not completion:
        return candidate if candidate in registry.subcommands else None
    matches = match(registry.subcommands, candidate)
    if len(matches) > 1:
        raise AmbiguousSubcommand(candidate, matches)
    return matches[0] if matches else None


__all__ = (
    "match",
    "resolve_option",
    "resolve_letter",
    "resolve_subcommand",
)
