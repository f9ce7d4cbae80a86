"""
Scope resolution: which subcommand was invoked, and which options it can see.

Encoding (same as Scope.value)
- 1: root, no subcommand consumed.
- n >= 2: the subcommand at index n - 2 of the command table.

Relevance
- An option is relevant iff it is global, or it is root-only and no subcommand
  was resolved, or its subcommand scope equals the resolved one. Irrelevant
  options cannot be matched, cannot be reported as unknown, and do not count
  toward positional arity.
"""
import logging

from .descriptors import Scope

_logger = logging.getLogger(__name__)

ROOT = Scope.ROOT.value


def resolve(commands, argv, /):
    """
    resolve the invoked subcommand from argv[1].

    returns
    - int: 2-based index of the first command named argv[1], or 1 (root) when
      argv has no second token or it names no command.
    """
    if len(argv) < 2:
        return ROOT
    for index, command in enumerate(commands):
        if command.name == argv[1]:
            _logger.debug("resolved subcommand %r at index %d", command.name, index)
            return index + 2
    return ROOT


def command_of(commands, resolved, /):
    """The resolved Command, or None at root."""
    return commands[resolved - 2] if resolved > ROOT else None


def relevant(option, resolved, /):
    """Whether 'option' participates when 'resolved' is the active scope value."""
    if option.scope.is_global:
        return True
    return option.scope.value == resolved


def visible(options, resolved, /):
    """Relevant options, in declaration order."""
    return [option for option in options if relevant(option, resolved)]


def positionals(options, resolved, /):
    """Relevant positional options, in declaration order."""
    return [option for option in options if option.positional and relevant(option, resolved)]


__all__ = (
    "ROOT",
    "resolve",
    "command_of",
    "relevant",
    "visible",
    "positionals",
)
