"""
Tabulargs matching engine: one pass over argv, binding tokens to options.

phases
- help pre-pass
  • scan argv[1:] for "--help"/"-h" before anything else; stop at the first
    terminator ("--" or "-"). on a hit, render help and exit with status 0.
- scan
  • cursor starts after argv[0] and after the subcommand token when one was
    resolved.
  • per token:
      – terminator: bind every remaining token positionally, then validate.
      – contains '=': split at the first '=' and bind the value part to the
        named option (booleans reject it). no following token is consumed.
      – positional: fill the first relevant, still-unmatched positional.
      – long/short: match a relevant named option; booleans bind True, other
        kinds consume the next token as value.
      – clustered short options ("-abc"): rejected, unsupported.
- validate
  • mutual exclusions and required options (see constraints).

value tokens
- a value token must exist and must not look like an option; "-" and "--"
  are terminators, not options, so "-o -" binds "-" to a string option. the
  exception is a signed integer option followed by a token that parses as a
  signed integer ("--offset -7"). an unsigned option followed by an
  option-like token is an invalid unsigned value.

faults
- every failure goes through Scanner.fail(), which triggers the fault with the
  parser's reporting flags: raised in library mode, printed and exited in shell
  mode. nothing after a failure is observable by the caller.
"""
import logging
import sys

from . import constraints, scopes
from .coercion import CoercionError, LengthError, coerce, parse_signed
from .descriptors import Kind
from .faults import FaultCode, fault, trigger
from .lexer import TERMINATORS, TokenKind, classify, is_option, split_assignment
from .session import Session
from .utils import dashed, ordinal

_logger = logging.getLogger(__name__)

HELP_TOKENS = ("--help", "-h")


def find_help(argv, /):
    """
    whether a help token occurs in argv[1:] before any terminator.
    """
    for token in argv[1:]:
        if token in TERMINATORS:
            return False
        if token in HELP_TOKENS:
            return True
    return False


class Scanner:
    """
    Single-use scanner binding one argv against a parser's tables.

    parameters
    - parser: Parser
      provides commands, options, exclusions, limit and reporting flags.
    - argv: list[str]
      the full vector, argv[0] included.
    """

    def __init__(self, parser, argv, /):
        self._parser = parser
        self._argv = list(argv)
        self._resolved = scopes.resolve(parser.commands, self._argv)
        self._command = scopes.command_of(parser.commands, self._resolved)
        self._session = Session(parser.options, self._resolved)
        self._cursor = 1 + (self._command is not None)

    @property
    def session(self):
        return self._session

    @property
    def subcommand(self):
        return self._command.name if self._command is not None else None

    @property
    def route(self):
        return " ".join(filter(None, (self._parser.prog, self.subcommand)))

    def fail(self, code, message, /, *, hint=True, **options):
        """
        trigger the fault registered for 'code'.

        hint=True attaches the "see --help" pointer; pass hint=False for
        classes that carry none, or a string for a custom hint.
        """
        if hint is True:
            hint = "for more information see '%s --help'" % self.route
        trigger(
            fault(code, message, hint=hint or None, index=self._cursor, **options),
            prog=self._parser.prog,
            shell=self._parser.shell,
            colorful=self._parser.colorful,
            fancy=self._parser.fancy,
        )

    def run(self):
        """
        scan argv, validate constraints and return the session outcome.
        """
        if find_help(self._argv):
            _logger.debug("help requested for %r", self.subcommand)
            self._parser.helper(self._parser, self.subcommand, self._argv)
            sys.exit(0)

        while self._cursor < len(self._argv):
            token = self._argv[self._cursor]
            kind = classify(token)

            if kind is TokenKind.TERMINATOR:
                _logger.debug("terminator %r at %s position", token, ordinal(self._cursor))
                self._remaining(self._argv[self._cursor + 1:])
                break

            if (pair := split_assignment(token)) is not None:
                self._assignment(token, *pair)
            elif kind is TokenKind.POSITIONAL:
                self._positional(token)
            elif kind is TokenKind.CLUSTER:
                self.fail(
                    FaultCode.CLUSTERED_SHORT_OPTIONS,
                    "multiple shorthand options at once are not yet supported: %r" % token,
                    hint="pass each short option separately (for example: %s)" % " ".join(
                        dashed(char, short=True) for char in token[1:]
                    ),
                    token=token,
                )
            else:
                self._named(token)

            self._cursor += 1

        constraints.check(self._session, self._parser.exclusions, self.fail)
        return self._session.outcome(self.subcommand)

    def _lookup(self, token):
        for option in self._parser.options:
            if option.positional or not scopes.relevant(option, self._resolved):
                continue
            if option.spelled(token):
                return option
        return None

    def _unknown(self, token):
        self.fail(FaultCode.UNKNOWN_ARGUMENT, "unknown argument %r" % token, token=token)

    def _bind(self, option, text, token):
        try:
            value = coerce(option.kind, text, self._parser.limit)
        except LengthError as error:
            self.fail(
                FaultCode.VALUE_TOO_LONG,
                "value for option %r is too long: %s" % (option.name, error),
                token=token,
                option=option,
            )
        except CoercionError:
            self.fail(
                FaultCode.INVALID_NUMBER,
                "invalid numerical sequence for option %r: %s" % (option.name, text),
                hint=False,
                token=token,
                option=option,
            )
        self._session.bind(option, value)
        _logger.debug("bound %r = %r at %s position", option.name, value, ordinal(self._cursor))

    def _assignment(self, token, name, value):
        option = self._lookup(name)
        if option is None:
            self._unknown(token)
        if option.is_boolean:
            self.fail(
                FaultCode.FLAG_ASSIGNMENT,
                "invalid flag usage: option %r does not expect an argument" % option.name,
                hint="remove everything from '=' (for example: %s)" % name,
                token=token,
                option=option,
            )
        self._bind(option, value, token)

    def _positional(self, token):
        declared = scopes.positionals(self._parser.options, self._resolved)
        if not declared:
            self._unknown(token)
        for option in declared:
            if not self._session.params(option).is_matched:
                self._bind(option, token, token)
                return
        self.fail(
            FaultCode.EXCESS_POSITIONAL,
            "excess positional argument %r: expected %d" % (token, len(declared)),
            token=token,
            expected=len(declared),
        )

    def _named(self, token):
        option = self._lookup(token)
        if option is None:
            self._unknown(token)
        if option.is_boolean:
            self._session.bind(option, True)
            _logger.debug("bound %r = True at %s position", option.name, ordinal(self._cursor))
            return

        index = self._cursor + 1
        if index >= len(self._argv):
            self._missing(option, token)
        value = self._argv[index]

        if is_option(value):
            if option.kind is Kind.INTEGER:
                try:
                    number = parse_signed(value)
                except CoercionError:
                    self._missing(option, token)
                self._cursor = index
                self._session.bind(option, number)
                _logger.debug("bound %r = %r at %s position", option.name, number, ordinal(self._cursor))
                return
            if option.kind is Kind.UNSIGNED:
                self.fail(
                    FaultCode.INVALID_UNSIGNED,
                    "invalid unsigned numerical value for option %r: %s" % (option.name, value),
                    token=value,
                    option=option,
                )
            self._missing(option, token)

        self._cursor = index
        self._bind(option, value, value)

    def _missing(self, option, token):
        self.fail(
            FaultCode.MISSING_VALUE,
            "missing argument: option %r requires an argument but none was given" % option.name,
            token=token,
            option=option,
        )

    def _remaining(self, tokens):
        slots = [
            option
            for option in scopes.positionals(self._parser.options, self._resolved)
            if not self._session.params(option).is_matched
        ]
        if len(tokens) > len(slots):
            self.fail(
                FaultCode.TOO_MANY_POSITIONALS,
                "too many positional arguments: expected %d got %d" % (len(slots), len(tokens)),
                expected=len(slots),
                given=len(tokens),
            )

        for option, token in zip(slots, tokens):
            self._cursor += 1
            self._bind(option, token, token)

        if len(tokens) != len(slots):
            self.fail(
                FaultCode.TOO_FEW_POSITIONALS,
                "too few positional arguments: expected %d got %d" % (len(slots), len(tokens)),
                expected=len(slots),
                given=len(tokens),
            )


__all__ = (
    "HELP_TOKENS",
    "find_help",
    "Scanner",
)
