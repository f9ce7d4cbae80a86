r"""
Tabulargs descriptor model: option, command, exclusion and example tables.

Overview
- Kind: value kind of an option (boolean, string, integer, unsigned integer).
- Scope: visibility of an option (global, root-only, or one subcommand).
- Params: the compact metadata of an option with explicit fields and O(1)
  predicates; packs to and from the 16-bit layout ``rpmccccccccttttt``.
- Option: one declared option (named or positional).
- Command: one declared subcommand.
- Exclusion: an at-most-one-of pairing between two options.
- Example: a usage example shown in the help menu.
- validate(): single pass over the tables, run before any token is consumed.

Metadata (checked on construction)
- Construction only checks types (TypeError). Content rules that describe a
  malformed table (empty long name, missing metavar, out of range scope, ...)
  are reported by validate() as TableDefinitionError, so a table can be built
  first and rejected as a whole.

Packed layout
- r (bit 15): required
- p (bit 14): positional
- m (bit 13): matched
- c (bits 5..12): scope, 0 = global, 1 = root, n + 2 = subcommand n
- t (bits 0..4): kind, 1 = boolean, 2 = string, 4 = integer, 8 = unsigned
- The all-zero value is the terminator record, never a real option.

Quick example:
    >>> from tabulargs.descriptors import Option, Command, Kind, Scope
    >>> commands = [Command("run", "run the thing")]
    >>> options = [
    ...     Option("port", Kind.UNSIGNED, short="p", metavar="PORT", required=True),
    ...     Option("dry", Kind.BOOLEAN, scope=Scope.subcommand(0)),
    ...     Option("file", Kind.STRING, positional=True),
    ... ]
"""
import logging
import re
from enum import IntEnum
from typing import NamedTuple, final

from rich.text import Text

from .faults import TableDefinitionError
from .utils import Unset, coalesce, dashed, mirror

_logger = logging.getLogger(__name__)

_REQ_MASK = 0b1000000000000000
_POS_MASK = 0b0100000000000000
_MAT_MASK = 0b0010000000000000
_CMD_MASK = 0b0001111111100000
_TYP_MASK = 0b0000000000011111
_CMD_SHIFT = 5


class Kind(IntEnum):
    """
    Value kind of an option. The values match the type bits of the packed layout.
    """
    BOOLEAN = 1
    STRING = 2
    INTEGER = 4
    UNSIGNED = 8


@final
class Scope:
    """
    Visibility of an option.

    Encoding
    - 0: global, visible under every subcommand and at root.
    - 1: root-only, visible only when no subcommand was invoked.
    - n >= 2: visible only under the subcommand at index n - 2.

    Instances are immutable, hashable and compare by encoded value.
    """
    __slots__ = ("_value",)

    def __new__(cls, value=0, /):
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError("scope value must be an integer")
        if not 0 <= value <= _CMD_MASK >> _CMD_SHIFT:
            raise ValueError("scope value must be between 0 and %d" % (_CMD_MASK >> _CMD_SHIFT))
        self = super().__new__(cls)
        object.__setattr__(self, "_value", value)
        return self

    def __setattr__(self, name, value):
        raise AttributeError("scope is immutable")

    @classmethod
    def subcommand(cls, index, /):
        """Scope of the subcommand at 'index' in the command table."""
        if not isinstance(index, int) or index < 0:
            raise ValueError("subcommand index must be a non-negative integer")
        return cls(index + 2)

    @property
    def value(self):
        return self._value

    @property
    def is_global(self):
        return self._value == 0

    @property
    def is_root(self):
        return self._value == 1

    @property
    def index(self):
        """Command table index for subcommand scopes; None for global and root."""
        return self._value - 2 if self._value >= 2 else None

    def __eq__(self, other):
        if not isinstance(other, Scope):
            return NotImplemented
        return self._value == other._value

    def __hash__(self):
        return hash((Scope, self._value))

    def __repr__(self):
        match self._value:
            case 0:
                return "Scope.GLOBAL"
            case 1:
                return "Scope.ROOT"
            case _:
                return "Scope.subcommand(%d)" % self.index


Scope.GLOBAL = Scope(0)
Scope.ROOT = Scope(1)


class Params(NamedTuple):
    """
    Compact option metadata with explicit fields.

    The predicates are plain attribute reads; the packed form is only computed
    on demand (``packed``) or decoded from an integer (``unpack``). During a
    parse the scanner and the constraint checks read an option's state through
    ``Session.params``, which sets the matched bit for options already bound.
    """
    kind: Kind | None
    scope: Scope = Scope.GLOBAL
    required: bool = False
    positional: bool = False
    matched: bool = False

    @property
    def is_global(self):
        return self.scope.is_global

    @property
    def is_root(self):
        return self.scope.is_root

    @property
    def is_required(self):
        return self.required

    @property
    def is_positional(self):
        return self.positional

    @property
    def is_matched(self):
        return self.matched

    @property
    def is_terminator(self):
        return self.packed == 0

    @property
    def type_of(self):
        return self.kind

    @property
    def scope_index(self):
        return self.scope.index

    def with_matched(self):
        return self._replace(matched=True)

    @property
    def packed(self):
        """The 16-bit layout ``rpmccccccccttttt``."""
        return (
            (_REQ_MASK if self.required else 0)
            | (_POS_MASK if self.positional else 0)
            | (_MAT_MASK if self.matched else 0)
            | (self.scope.value << _CMD_SHIFT)
            | (int(self.kind) if self.kind else 0)
        )

    @classmethod
    def unpack(cls, value, /):
        """Decode a packed value; unknown type bits raise ValueError."""
        if not isinstance(value, int) or not 0 <= value <= 0xFFFF:
            raise ValueError("packed params must be a 16-bit unsigned integer")
        kind = value & _TYP_MASK
        return cls(
            Kind(kind) if kind else None,
            Scope((value & _CMD_MASK) >> _CMD_SHIFT),
            bool(value & _REQ_MASK),
            bool(value & _POS_MASK),
            bool(value & _MAT_MASK),
        )


Params.NULL = Params(None)


def _describe(self):
    return "%s(%s)" % (
        type(self).__typename__,
        ", ".join("%s=%r" % pair for pair in self.__rich_repr__()),
    )


def _introspect(self):
    for name in type(self).__introspectable__:
        yield name, getattr(self, name)


class DescriptorType(type):
    """
    Metaclass for table records.

    - Every name in __introspectable__ becomes a read-only property over the
      private "_{name}" field.
    - __repr__/__rich_repr__ list those fields; __typename__ is the hyphenated
      lowercase class name used in messages.
    """

    def __new__(cls, name, bases, namespace, **options):
        fields = {field: mirror(field) for field in namespace.get("__introspectable__", ())}
        return super().__new__(cls, name, bases, {
            "__typename__": re.sub(r"(?<!^)(?=[A-Z])", "-", name).lower(),
            "__repr__": _describe,
            "__rich_repr__": _introspect,
            **namespace,
            **fields,
        })


def _sanitize_text(cls, metadata, key, /):
    # Optional help text: Unset or a string/Text; stored trimmed, None when absent.
    if not isinstance(value := metadata[key], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} {key!r} must be a string")
    if isinstance(value, str):
        value = value.strip() or Unset
    metadata[key] = coalesce(value)


class Option(metaclass=DescriptorType):
    """
    One declared option.

    Parameters
    - name: str
      Long name without dashes (``"port"`` for ``--port``). Required and unique.
    - kind: Kind
      Value kind; booleans never consume a value token.
    - short: Unset | str
      Single character short name (``"p"`` for ``-p``).
    - scope: Scope
      Visibility; defaults to Scope.GLOBAL.
    - required / positional: bool
    - descr: Unset | str
      Help description.
    - metavar: Unset | str
      Value description shown in help. Required unless boolean or positional.
    - default: Any
      Value reported for the option when it is not matched; False for
      booleans and None for other kinds when omitted.

    Options are immutable; per-parse state lives in a Session.
    """

    __introspectable__ = (
        "name",
        "kind",
        "short",
        "scope",
        "required",
        "positional",
        "descr",
        "metavar",
        "default",
    )

    def __init__(
            self,
            name,
            /,
            kind=Kind.BOOLEAN,
            *,
            short=Unset,
            scope=Scope.GLOBAL,
            required=False,
            positional=False,
            descr=Unset,
            metavar=Unset,
            default=Unset,
    ):
        cls = type(self)
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        if not isinstance(kind, Kind):
            try:
                kind = Kind(kind)
            except ValueError:
                raise TypeError(f"{cls.__typename__} 'kind' must be a Kind") from None
        if not isinstance(short, str | Unset):
            raise TypeError(f"{cls.__typename__} 'short' must be a string")
        if not isinstance(scope, Scope):
            raise TypeError(f"{cls.__typename__} 'scope' must be a Scope")

        metadata = {
            "name": name.strip(),
            "kind": kind,
            "short": coalesce(short),
            "scope": scope,
            "required": bool(required),
            "positional": bool(positional),
            "descr": descr,
            "metavar": metavar,
            "default": coalesce(default, False if kind is Kind.BOOLEAN else None),
        }
        _sanitize_text(cls, metadata, "descr")
        _sanitize_text(cls, metadata, "metavar")

        for key, value in metadata.items():
            setattr(self, "_" + key, value)

    @property
    def params(self):
        return Params(self._kind, self._scope, self._required, self._positional)

    @property
    def is_global(self):
        return self._scope.is_global

    @property
    def is_root(self):
        return self._scope.is_root

    @property
    def is_boolean(self):
        return self._kind is Kind.BOOLEAN

    @property
    def flags(self):
        """Command-line spellings of this option, short first (``("-p", "--port")``)."""
        if self._short:
            return dashed(self._short, short=True), dashed(self._name)
        return dashed(self._name),

    def spelled(self, token, /):
        """Whether 'token' spells this option (``--name`` or ``-x``)."""
        if token == dashed(self._name):
            return True
        return bool(self._short) and token == dashed(self._short, short=True)


class Command(metaclass=DescriptorType):
    """
    One declared subcommand. Identified by position in its table.
    """

    __introspectable__ = ("name", "descr")

    def __init__(self, name, /, descr=Unset):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        metadata = {"name": name.strip(), "descr": descr}
        _sanitize_text(type(self), metadata, "descr")
        for key, value in metadata.items():
            setattr(self, "_" + key, value)


class Exclusion(metaclass=DescriptorType):
    """
    At most one of two options may be matched; when both are required, exactly one must be.

    Names are long names without dashes.
    """

    __introspectable__ = ("one", "other")

    def __init__(self, one, other, /):
        if not isinstance(one, str) or not isinstance(other, str):
            raise TypeError(f"{type(self).__typename__} names must be strings")
        self._one = one.strip()
        self._other = other.strip()

    @property
    def names(self):
        return self._one, self._other

    def involves(self, name, /):
        return name in (self._one, self._other)


class Example(metaclass=DescriptorType):
    """
    A usage example printed in the help menu as ``<prog> <options>  <descr>``.
    """

    __introspectable__ = ("options", "descr")

    def __init__(self, options, descr=Unset, /):
        if not isinstance(options, str):
            raise TypeError(f"{type(self).__typename__} 'options' must be a string")
        metadata = {"options": options.strip(), "descr": descr}
        _sanitize_text(type(self), metadata, "descr")
        for key, value in metadata.items():
            setattr(self, "_" + key, value)


HELP = Option("help", Kind.BOOLEAN, short="h", descr="Show this help menu")
"""
Prototype of the help option. Parsers inject their own copy; the names
``help`` and ``h`` are reserved in user tables.
"""


def validate(options, commands=(), exclusions=(), /):
    """
    Walk the tables once and raise TableDefinitionError on the first defect.

    Checks
    - options: Option instances, non-empty unique long names, short names of one
      non-dash character, a metavar for every non-boolean non-positional option,
      subcommand scopes that index into the command table, reserved help names.
    - commands: Command instances with non-empty unique names.
    - exclusions: Exclusion instances naming two distinct declared options.

    Validation has no side effects and can be repeated.
    """
    names = set()
    for index, option in enumerate(options):
        if not isinstance(option, Option):
            raise TableDefinitionError("invalid option at index %d: expected an option descriptor" % index)
        if not option.name:
            raise TableDefinitionError("invalid option at index %d: long option is always required" % index)
        if option.name in names:
            raise TableDefinitionError("invalid option %r: long option names must be unique" % option.name)
        names.add(option.name)
        if option.short is not None and (len(option.short) != 1 or option.short == "-"):
            raise TableDefinitionError("invalid option %r: short option must be a single non-dash character" % option.name)
        if not option.is_boolean and not option.positional and option.metavar is None:
            raise TableDefinitionError("invalid option %r: if option is not boolean a metavar is required" % option.name)
        if option.scope.index is not None and option.scope.index >= len(commands):
            raise TableDefinitionError("invalid option %r: scope refers to an undeclared subcommand" % option.name)
        if option.name == HELP.name or option.short == HELP.short:
            raise TableDefinitionError("invalid option %r: '-h' and '--help' are reserved" % option.name)

    seen = set()
    for index, command in enumerate(commands):
        if not isinstance(command, Command):
            raise TableDefinitionError("invalid command at index %d: expected a command descriptor" % index)
        if not command.name:
            raise TableDefinitionError("invalid command at index %d: command name is always required" % index)
        if command.name in seen:
            raise TableDefinitionError("invalid command %r: command names must be unique" % command.name)
        seen.add(command.name)

    for index, exclusion in enumerate(exclusions):
        if not isinstance(exclusion, Exclusion):
            raise TableDefinitionError("invalid exclusion at index %d: expected an exclusion descriptor" % index)
        if not exclusion.one or not exclusion.other:
            raise TableDefinitionError("invalid exclusion at index %d: empty exclusion" % index)
        if exclusion.one == exclusion.other:
            raise TableDefinitionError("invalid exclusion at index %d: an option cannot exclude itself" % index)
        for name in exclusion.names:
            if name not in names:
                raise TableDefinitionError("invalid exclusion at index %d: unknown option %r" % (index, name))

    _logger.debug("validated %d options, %d commands, %d exclusions", len(names), len(seen), len(exclusions))


__all__ = (
    "Kind",
    "Scope",
    "Params",
    "Option",
    "Command",
    "Exclusion",
    "Example",
    "HELP",
    "validate",
)

# Keep the metaclass out of star-imports.
del DescriptorType
