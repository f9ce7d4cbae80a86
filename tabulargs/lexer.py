"""
Lexical classification of raw command-line tokens.

Rules (checked in this order)
- terminator: exactly "--" or "-".
- long option: length >= 3 and starts with two dashes ("--name").
- short option: length == 2, one dash, second character not a dash ("-x").
- clustered short options: length >= 3, one dash, second character not a dash
  ("-xyz"). Recognized so it can be rejected; combined flags are unsupported.
- positional: anything else, including every token not starting with a dash.

Notes
- "-7" classifies as a short option; the scanner decides whether a signed
  option may still take it as its value.
"""
from enum import Enum

TERMINATORS = ("--", "-")


class TokenKind(Enum):
    TERMINATOR = "terminator"
    LONG = "long"
    SHORT = "short"
    CLUSTER = "cluster"
    POSITIONAL = "positional"


def classify(token, /):
    """
    classify a single token.

    returns
    - TokenKind member, see the module rules.
    """
    if not isinstance(token, str):
        raise TypeError("classify() argument must be a string")

    if token in TERMINATORS:
        return TokenKind.TERMINATOR
    if len(token) >= 3 and token[0] == "-" and token[1] == "-":
        return TokenKind.LONG
    if len(token) >= 2 and token[0] == "-" and token[1] != "-":
        return TokenKind.SHORT if len(token) == 2 else TokenKind.CLUSTER
    return TokenKind.POSITIONAL


def is_option(token, /):
    """Whether 'token' looks like an option (long, short or clustered)."""
    return classify(token) in (TokenKind.LONG, TokenKind.SHORT, TokenKind.CLUSTER)


def split_assignment(token, /):
    """
    split 'name=value' at the first '='.

    returns
    - tuple[str, str]: (name, value); value may be empty or contain further '='.
    - None when the token has no '='.
    """
    name, sep, value = token.partition("=")
    if not sep:
        return None
    return name, value


__all__ = (
    "TERMINATORS",
    "TokenKind",
    "classify",
    "is_option",
    "split_assignment",
)
