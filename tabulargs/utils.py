"""
Small helpers shared by the descriptor model, the scanner and the fault layer.

- Unset: "not provided" marker, distinct from None; falsy; usable in
  isinstance unions (``str | Unset``).
- coalesce(value, default): resolve Unset to a default.
- mirror(name): read-only property over the private "_name" field.
- ordinal(n): "first", "second", ..., "11th", "22nd" for messages.
- dashed(name, short=False): command-line spelling of a name.
"""
import functools
from typing import final

_ORDINAL_WORDS = (
    "first", "second", "third", "fourth", "fifth",
    "sixth", "seventh", "eighth", "ninth", "tenth",
)


@final
class UnsetType:
    """
    Type of the Unset marker. Only one instance ever exists and it cannot be
    subclassed.
    """

    __slots__ = ()

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")

    def __or__(self, other, /):
        # ``Unset | str`` in annotations and isinstance() checks.
        try:
            return UnsetType | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | UnsetType
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return UnsetType, ()


Unset = UnsetType()


def coalesce(value, default=None, /):
    """
    ``default`` when ``value`` is Unset, ``value`` otherwise.

    Falsy values other than Unset (None, 0, "") are kept.
    """
    return default if value is Unset else value


def mirror(name, /):
    """Read-only property returning ``self._<name>``."""
    if not isinstance(name, str):
        raise TypeError("mirror() expects an attribute name")
    attribute = "_" + name

    def fget(self):
        return getattr(self, attribute)

    fget.__name__ = fget.__qualname__ = name
    return property(fget)


@functools.cache
def ordinal(number, /):
    """Position label used in messages: words up to ten, then 11th, 21st, 102nd."""
    if 1 <= number <= len(_ORDINAL_WORDS):
        return _ORDINAL_WORDS[number - 1]
    if number % 100 in (11, 12, 13):
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return "%d%s" % (number, suffix)


def dashed(name, /, short=False):
    """``dashed("port") == "--port"``; ``dashed("p", short=True) == "-p"``."""
    return ("-" if short else "--") + name


__all__ = (
    "Unset",
    "UnsetType",
    "coalesce",
    "mirror",
    "ordinal",
    "dashed",
)
