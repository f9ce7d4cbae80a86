"""
Per-parse state and the outcome handed back to the caller.

Session
- Tracks which options were matched and the value bound to each, keyed by
  option identity. Declarations stay immutable, so one table can be parsed
  many times; each parse gets a fresh Session.
- A Session is not shared between concurrent parses.

Outcome
- subcommand: name of the invoked subcommand, or None for a root invocation.
- values: long name -> bound value (the option default when unmatched).
- provided: long names that were matched during the parse.
"""
from types import MappingProxyType

from .utils import mirror


class Session:
    """Mutable matched/value state for a single parse."""

    def __init__(self, options, resolved, /):
        self._options = tuple(options)
        self._resolved = resolved
        self._matched = set()
        self._values = {}

    resolved = mirror("resolved")

    @property
    def options(self):
        return self._options

    def bind(self, option, value, /):
        """Mark 'option' matched and record its value; a later bind overwrites."""
        self._matched.add(option)
        self._values[option] = value

    def is_matched(self, option, /):
        return option in self._matched

    def params(self, option, /):
        """Option params with the matched bit of this session applied."""
        params = option.params
        return params.with_matched() if option in self._matched else params

    def value(self, option, /):
        return self._values.get(option, option.default)

    def lookup(self, name, /):
        """Declared option with long name 'name', or None."""
        for option in self._options:
            if option.name == name:
                return option
        return None

    def outcome(self, subcommand, /):
        return Outcome(
            subcommand,
            {option.name: self.value(option) for option in self._options},
            frozenset(option.name for option in self._matched),
        )


class Outcome:
    """
    Result of a successful parse.

    >>> outcome.subcommand, outcome["port"], "port" in outcome.provided
    ('run', 8080, True)
    """

    __slots__ = ("_subcommand", "_values", "_provided")

    def __init__(self, subcommand, values, provided, /):
        self._subcommand = subcommand
        self._values = MappingProxyType(dict(values))
        self._provided = frozenset(provided)

    subcommand = mirror("subcommand")
    values = mirror("values")
    provided = mirror("provided")

    def __getitem__(self, name):
        return self._values[name]

    def get(self, name, default=None, /):
        return self._values.get(name, default)

    def __eq__(self, other):
        if not isinstance(other, Outcome):
            return NotImplemented
        return (self._subcommand, dict(self._values), self._provided) == (
            other._subcommand, dict(other._values), other._provided
        )

    __hash__ = None

    def __repr__(self):
        return "outcome(subcommand=%r, values=%r, provided=%r)" % (
            self._subcommand, dict(self._values), sorted(self._provided)
        )


__all__ = (
    "Session",
    "Outcome",
)
