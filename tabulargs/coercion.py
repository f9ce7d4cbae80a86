r"""
Value coercion: string tokens into typed values.

Numeric literal surface
- decimal: "42", "-7", "+7"
- hexadecimal: "0x2a" (lowercase prefix, length > 2)
- binary: "0b101010" (lowercase prefix, length > 2)

Exactly one base must consume the entire text: trailing garbage, empty input,
whitespace and out-of-range values are failures, never truncations. Bases are
tried in order (decimal, hexadecimal, binary).

Ranges
- parse_signed: -2**63 .. 2**63 - 1
- parse_unsigned: 0 .. 2**64 - 1 (no minus sign in any base)

Strings
- copy_bounded enforces a maximum length in UTF-8 bytes; longer input fails
  instead of being truncated.
"""
import re

from .descriptors import Kind

SIGNED_MIN = -(1 << 63)
SIGNED_MAX = (1 << 63) - 1
UNSIGNED_MAX = (1 << 64) - 1
DEFAULT_LIMIT = 1024

_DECIMAL_SIGNED = re.compile(r"[+-]?[0-9]+")
_DECIMAL_UNSIGNED = re.compile(r"\+?[0-9]+")
_HEXADECIMAL = re.compile(r"0x[0-9a-fA-F]+")
_BINARY = re.compile(r"[01]+")


class CoercionError(ValueError):
    """A token cannot be converted to the requested kind."""


class LengthError(CoercionError):
    """A string token exceeds the configured maximum length."""


def _parse(text, decimal, lower, upper):
    if not isinstance(text, str):
        raise TypeError("numeric coercion argument must be a string")

    if decimal.fullmatch(text):
        value = int(text, 10)
    elif len(text) > 2 and text.startswith("0x") and _HEXADECIMAL.fullmatch(text):
        value = int(text[2:], 16)
    elif len(text) > 2 and text.startswith("0b") and _BINARY.fullmatch(text[2:]):
        value = int(text[2:], 2)
    else:
        raise CoercionError("invalid numerical sequence %r" % text)

    if not lower <= value <= upper:
        raise CoercionError("numerical value %r is out of range" % text)
    return value


def parse_signed(text, /):
    """
    Parse a signed 64-bit integer in decimal, 0x hexadecimal or 0b binary form.

    >>> parse_signed("0x2a"), parse_signed("0b101010"), parse_signed("-7")
    (42, 42, -7)
    """
    return _parse(text, _DECIMAL_SIGNED, SIGNED_MIN, SIGNED_MAX)


def parse_unsigned(text, /):
    """Parse an unsigned 64-bit integer; same forms as parse_signed, without '-'."""
    return _parse(text, _DECIMAL_UNSIGNED, 0, UNSIGNED_MAX)


def copy_bounded(text, limit=DEFAULT_LIMIT, /):
    """
    Return 'text' unchanged when its UTF-8 length is at most 'limit' bytes.

    Raises LengthError otherwise.
    """
    if not isinstance(text, str):
        raise TypeError("copy_bounded() argument must be a string")
    size = len(text.encode("utf-8", "surrogateescape"))
    if size > limit:
        raise LengthError("value is %d bytes long, the maximum is %d" % (size, limit))
    return text


def coerce(kind, text, limit=DEFAULT_LIMIT, /):
    """
    Convert 'text' to the value of an option of the given kind.

    - BOOLEAN: always True (presence).
    - STRING: bounded copy.
    - INTEGER / UNSIGNED: numeric parsing.
    """
    match kind:
        case Kind.BOOLEAN:
            return True
        case Kind.STRING:
            return copy_bounded(text, limit)
        case Kind.INTEGER:
            return parse_signed(text)
        case Kind.UNSIGNED:
            return parse_unsigned(text)
        case _:
            raise TypeError("unrecognized option kind %r" % (kind,))


__all__ = (
    "SIGNED_MIN",
    "SIGNED_MAX",
    "UNSIGNED_MAX",
    "DEFAULT_LIMIT",
    "CoercionError",
    "LengthError",
    "parse_signed",
    "parse_unsigned",
    "copy_bounded",
    "coerce",
)
