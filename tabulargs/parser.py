"""
Tabulargs entry points.

Parser
- Owns validated option, command, exclusion and example tables plus the
  runtime configuration (value length limit, program name, help renderer and
  reporting flags).
- Parser.parse(argv) scans one argument vector and returns an Outcome. A parser
  holds no per-parse state, so it can parse any number of vectors.

parse()
- Functional form: builds a Parser for the given tables, parses argv, writes
  every value onto 'namespace' when one is given, and returns the invoked
  subcommand name (None for root).

Reporting flags
- shell: print faults to stderr and exit with status 1 instead of raising.
- colorful / fancy: rich styling and panel framing for faults and help.
"""
import copy
import logging
import os
import sys

from . import help
from .coercion import DEFAULT_LIMIT
from .descriptors import HELP, Option, validate
from .engine import Scanner
from .utils import Unset, coalesce, mirror

_logger = logging.getLogger(__name__)


class Parser:
    """
    Validated tables plus parse configuration.

    Parameters
    - commands: Iterable[Command]
    - options: Iterable[Option]
    - exclusions: Iterable[Exclusion]
    - examples: Iterable[Example]
      Usage examples printed by the help menu.
    - limit: int
      Maximum length of string values in UTF-8 bytes (default 1024).
    - prog: Unset | str
      Program name; defaults to the basename of argv[0] at parse time.
    - helper: Unset | Callable[[Parser, str | None, list[str]], None]
      Help renderer; defaults to tabulargs.help.render.
    - shell / colorful / fancy: bool

    Raises TableDefinitionError when a table is malformed.
    """

    def __init__(
            self,
            commands=(),
            options=(),
            exclusions=(),
            *,
            examples=(),
            limit=DEFAULT_LIMIT,
            prog=Unset,
            helper=Unset,
            shell=False,
            colorful=False,
            fancy=False,
    ):
        if not isinstance(limit, int) or isinstance(limit, bool) or limit <= 0:
            raise ValueError("limit must be a positive integer")
        if not isinstance(prog, str | Unset):
            raise TypeError("prog must be a string")
        if helper is not Unset and not callable(helper):
            raise TypeError("helper must be callable")

        self._commands = tuple(commands)
        self._options = tuple(options)
        self._exclusions = tuple(exclusions)
        self._examples = tuple(examples)
        validate(self._options, self._commands, self._exclusions)

        self._limit = limit
        self._prog = coalesce(prog)
        self._helper = coalesce(helper, help.render)
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._help = Option(HELP.name, HELP.kind, short=HELP.short, descr=HELP.descr)

    commands = mirror("commands")
    options = mirror("options")
    exclusions = mirror("exclusions")
    examples = mirror("examples")
    limit = mirror("limit")
    helper = mirror("helper")
    shell = mirror("shell")
    colorful = mirror("colorful")
    fancy = mirror("fancy")
    help = mirror("help")

    @property
    def prog(self):
        return self._prog if self._prog is not None else os.path.basename(sys.argv[0]) if sys.argv else ""

    def parse(self, argv=Unset, /):
        """
        Scan 'argv' (defaults to sys.argv) and return an Outcome.

        "-h"/"--help" anywhere before a terminator renders help and exits with
        status 0. Failures raise a ParseException subclass, or print and exit
        with status 1 in shell mode.
        """
        argv = list(coalesce(argv, sys.argv))
        if not argv:
            raise ValueError("argv must contain at least the program name")
        if not all(isinstance(token, str) for token in argv):
            raise TypeError("argv must contain only strings")

        parser = self
        if self._prog is None:
            # Name taken from this argv; the configured parser stays untouched.
            parser = copy.copy(self)
            parser._prog = os.path.basename(argv[0])

        _logger.debug("parsing %d tokens as %r", len(argv) - 1, parser.prog)
        return Scanner(parser, argv).run()

    def __repr__(self):
        return "parser(prog=%r, commands=%d, options=%d, exclusions=%d)" % (
            self._prog, len(self._commands), len(self._options), len(self._exclusions)
        )


def parse(commands, options, argv=Unset, exclusions=(), /, *, namespace=Unset, **config):
    """
    Parse 'argv' against the given tables and return the subcommand name.

    Every option's value (bound or default) is set on 'namespace' when given,
    under its long name with dashes turned into underscores.

    >>> import types
    >>> args = types.SimpleNamespace()
    >>> parse([Command("run")], [Option("port", Kind.UNSIGNED, metavar="PORT")],
    ...       ["app", "run", "--port", "80"], namespace=args)
    'run'
    >>> args.port
    80
    """
    outcome = Parser(commands, options, exclusions, **config).parse(argv)
    if namespace is not Unset:
        for name, value in outcome.values.items():
            setattr(namespace, name.replace("-", "_"), value)
    return outcome.subcommand


__all__ = (
    "Parser",
    "parse",
)
