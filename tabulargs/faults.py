"""
Faults raised while declaring tables or parsing argv, and their rendering.

- FaultCode: stable numeric identifier of every user-facing parse failure,
  grouped by domain (lexical, values, positionals, constraints).
- TableDefinitionError: a malformed declaration table. It is a programming
  mistake of the caller and never rendered for the end user.
- ParseException: base of every user-input and constraint failure. It holds a
  message plus keyword options and renders itself through rich.
- trigger(): surface a fault. Library mode raises it; shell mode prints it to
  stderr and exits with status 1. Every violation aborts, there are no warnings.

The host program may define these on __main__:
- __styles__: palette overrides for the rendered header, message and hint.
- __codes__: FaultCode -> label shown instead of the number.
- __docs__: FaultCode -> documentation attached to the fault.
- __prog__: program name shown in headers.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)

_PALETTE = {
    "prog-name": "bold #E6E6F0",
    "code": "bold #00E5FF",
    "error-title": "bold #FF4DA6",
    "error-message": "#C8C8D0",
    "hint-arrow": "#9CE19C dim",
    "hint": "italic #9CE19C",
}


def _host(name, default, /):
    return getattr(sys.modules.get("__main__"), name, default)


class FaultCode(IntEnum):
    """
    Fault codes, grouped by domain.

    - 2110x lexical: unknown argument, clustered short options, '=' on a flag
    - 2111x values: missing, malformed number, negative unsigned, too long
    - 2112x positionals: excess, too many, too few
    - 2113x constraints: missing required, mutually exclusive, exclusive pair unmet
    """
    UNKNOWN_ARGUMENT            = 21101
    CLUSTERED_SHORT_OPTIONS     = 21102
    FLAG_ASSIGNMENT             = 21103

    MISSING_VALUE               = 21111
    INVALID_NUMBER              = 21112
    INVALID_UNSIGNED            = 21113
    VALUE_TOO_LONG              = 21114

    EXCESS_POSITIONAL           = 21121
    TOO_MANY_POSITIONALS        = 21122
    TOO_FEW_POSITIONALS         = 21123

    MISSING_REQUIRED            = 21131
    MUTUALLY_EXCLUSIVE          = 21132
    EXCLUSION_REQUIRED          = 21133

    def normalize(self):
        """Label for headers: the host's __codes__ entry, or the number."""
        return str(_host("__codes__", {}).get(self, self.value))


class TableDefinitionError(ValueError):
    """
    A descriptor, command or exclusion table is malformed.

    Raised during validation, before any token is consumed.
    """


class ParseException(Exception):
    """
    Base class of every failure found while scanning or validating argv.

    Options (all optional, merged by trigger())
    - title, code, hint, docs: header and footer copy.
    - token, option, index, expected, given: context of the failing input.
    - prog: program name for the header.
    - shell, fancy, colorful: reporting flags.
    """

    def __init__(self, message=Unset, /, **options):
        if not isinstance(message, str | Unset):
            raise TypeError("fault message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        colorful = self.options.get("colorful", False)
        palette = defaultdict(str, _PALETTE | _host("__styles__", {}))

        def styled(fragment, key):
            if not fragment:
                return Text("")
            return Text(str(fragment), palette[key] if colorful else "")

        code = self.code
        title = self.options.get("title", type(self).__name__)
        header = Text.assemble(
            "[ ",
            styled(_host("__prog__", self.options.get("prog", "")), "prog-name"),
            " — ",
            styled(code.normalize() if code else "", "code"),
            " | ",
            styled(title.title(), "error-title"),
            " ]",
        )

        body = [styled(self.message, "error-message")]
        if hint := self.options.get("hint"):
            body.append(Text.assemble(styled(" → ", "hint-arrow"), styled(hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*body), title=header, title_align="left")
        return Group(header, *body)

    def __trigger__(self):
        if self.options.get("shell", False):
            console.print(self)
            sys.exit(1)
        raise self from None

    def __replace__(self, /, **changes):
        return type(self)(self.message, **(dict(self.options) | changes))


class UnknownArgumentError(ParseException): ...
class ClusteredShortOptionsError(ParseException): ...
class FlagAssignmentError(ParseException): ...
class MissingValueError(ParseException): ...
class InvalidNumberError(ParseException): ...
class InvalidUnsignedError(ParseException): ...
class ValueTooLongError(ParseException): ...
class ExcessPositionalError(ParseException): ...
class TooManyPositionalsError(ParseException): ...
class TooFewPositionalsError(ParseException): ...
class MissingRequiredError(ParseException): ...
class MutuallyExclusiveError(ParseException): ...
class ExclusionRequiredError(ParseException): ...


def trigger(fault, /, **options):
    """
    Surface 'fault' after merging 'options' into it.

    The fault must provide __replace__ and __trigger__ (see ParseException).
    """
    for method in ("__replace__", "__trigger__"):
        if not callable(getattr(fault, method, None)):
            raise TypeError("trigger() argument must provide %s()" % method)
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """Host documentation for 'code' from __main__.__docs__, or None."""
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a FaultCode")
    return _host("__docs__", {}).get(code)


# Every parse fault class, by code; used by renderers and tests to stay in sync.
FAULTS = MappingProxyType({
    FaultCode.UNKNOWN_ARGUMENT: UnknownArgumentError,
    FaultCode.CLUSTERED_SHORT_OPTIONS: ClusteredShortOptionsError,
    FaultCode.FLAG_ASSIGNMENT: FlagAssignmentError,
    FaultCode.MISSING_VALUE: MissingValueError,
    FaultCode.INVALID_NUMBER: InvalidNumberError,
    FaultCode.INVALID_UNSIGNED: InvalidUnsignedError,
    FaultCode.VALUE_TOO_LONG: ValueTooLongError,
    FaultCode.EXCESS_POSITIONAL: ExcessPositionalError,
    FaultCode.TOO_MANY_POSITIONALS: TooManyPositionalsError,
    FaultCode.TOO_FEW_POSITIONALS: TooFewPositionalsError,
    FaultCode.MISSING_REQUIRED: MissingRequiredError,
    FaultCode.MUTUALLY_EXCLUSIVE: MutuallyExclusiveError,
    FaultCode.EXCLUSION_REQUIRED: ExclusionRequiredError,
})


def fault(code, message, /, **options):
    """
    build the fault registered for 'code' with the given message and options.

    the fault code is always recorded in the options; title defaults to a
    lowercased rendering of the code name and the host docs are attached when
    present.
    """
    options.setdefault("title", code.name.replace("_", " ").lower())
    options.setdefault("docs", getdoc(code))
    return FAULTS[code](message, code=code, **options)


__all__ = (
    "FaultCode",
    "TableDefinitionError",
    "ParseException",
    "UnknownArgumentError",
    "ClusteredShortOptionsError",
    "FlagAssignmentError",
    "MissingValueError",
    "InvalidNumberError",
    "InvalidUnsignedError",
    "ValueTooLongError",
    "ExcessPositionalError",
    "TooManyPositionalsError",
    "TooFewPositionalsError",
    "MissingRequiredError",
    "MutuallyExclusiveError",
    "ExclusionRequiredError",
    "FAULTS",
    "fault",
    "trigger",
    "getdoc",
)
