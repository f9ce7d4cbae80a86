# python
"""
Parser behavioral tests (scan, values, positionals, scopes, help, reporting).

Scope
- Validate the token grammar: --name, --name value, --name=value, -x, -x value.
- Validate value consumption rules and numeric/string coercion failures.
- Validate positional binding in normal and terminator mode.
- Validate subcommand scoping, help pre-pass and shell-mode reporting.

Conventions
- Test method names follow CamelCase per project convention.
- Parsers are built with an explicit prog so hints are deterministic.
"""

from __future__ import annotations

import io
import types
import unittest
from unittest import TestCase, mock

from rich.console import Console

from tabulargs import (
    Command,
    Kind,
    Option,
    Parser,
    Scope,
    TableDefinitionError,
    parse,
)
from tabulargs import faults
from tabulargs.faults import (
    ClusteredShortOptionsError,
    ExcessPositionalError,
    FaultCode,
    FlagAssignmentError,
    InvalidNumberError,
    InvalidUnsignedError,
    MissingValueError,
    ParseException,
    TooFewPositionalsError,
    TooManyPositionalsError,
    UnknownArgumentError,
    ValueTooLongError,
)

COMMANDS = (
    Command("run", "run the service"),
    Command("debug", "inspect the service"),
)

OPTIONS = (
    Option("verbose", Kind.BOOLEAN, short="v"),
    Option("timeout", Kind.INTEGER, short="t", metavar="SECONDS", default=30),
    Option("port", Kind.UNSIGNED, short="p", scope=Scope.subcommand(0), metavar="PORT"),
    Option("level", Kind.INTEGER, scope=Scope.subcommand(1), metavar="N"),
    Option("name", Kind.STRING, scope=Scope.ROOT, metavar="NAME"),
    Option("src", Kind.STRING, scope=Scope.ROOT, positional=True),
    Option("dst", Kind.STRING, scope=Scope.ROOT, positional=True),
)


def make(**config):
    config.setdefault("prog", "tool")
    return Parser(COMMANDS, OPTIONS, **config)


class TestNamedOptions(TestCase):
    """Long, short and assignment forms."""

    def testRootInvocation(self):
        outcome = make().parse(["tool"])
        self.assertIsNone(outcome.subcommand)
        self.assertEqual(outcome["timeout"], 30)
        self.assertIs(outcome["verbose"], False)
        self.assertEqual(outcome.provided, frozenset())

    def testSubcommandResolved(self):
        outcome = make().parse(["tool", "run", "--port", "80"])
        self.assertEqual(outcome.subcommand, "run")
        self.assertEqual(outcome["port"], 80)
        self.assertIn("port", outcome.provided)

    def testBooleanConsumesNothing(self):
        outcome = make().parse(["tool", "--verbose", "a"])
        self.assertIs(outcome["verbose"], True)
        self.assertEqual(outcome["src"], "a")

    def testValuedOptionConsumesExactlyOneToken(self):
        outcome = make().parse(["tool", "--name", "x", "y"])
        self.assertEqual(outcome["name"], "x")
        self.assertEqual(outcome["src"], "y")
        self.assertIsNone(outcome["dst"])

    def testShortSpelling(self):
        outcome = make().parse(["tool", "-v", "-t", "5"])
        self.assertIs(outcome["verbose"], True)
        self.assertEqual(outcome["timeout"], 5)

    def testAssignmentMatchesSeparateValue(self):
        self.assertEqual(
            make().parse(["tool", "--timeout=10"]),
            make().parse(["tool", "--timeout", "10"]),
        )

    def testShortAssignment(self):
        self.assertEqual(make().parse(["tool", "-t=0x10"])["timeout"], 16)

    def testAssignmentKeepsLaterEquals(self):
        self.assertEqual(make().parse(["tool", "--name=a=b"])["name"], "a=b")

    def testAssignmentDoesNotConsumeNextToken(self):
        outcome = make().parse(["tool", "--name=x", "y"])
        self.assertEqual(outcome["name"], "x")
        self.assertEqual(outcome["src"], "y")

    def testAssignmentOnBooleanRejected(self):
        with self.assertRaises(FlagAssignmentError):
            make().parse(["tool", "--verbose=1"])

    def testAssignmentToUnknownName(self):
        with self.assertRaises(UnknownArgumentError):
            make().parse(["tool", "--nope=1"])

    def testLastWriteWins(self):
        self.assertEqual(make().parse(["tool", "--timeout", "1", "-t", "2"])["timeout"], 2)

    def testUnknownArgumentHint(self):
        with self.assertRaises(UnknownArgumentError) as context:
            make().parse(["tool", "--nope"])
        self.assertEqual(context.exception.code, FaultCode.UNKNOWN_ARGUMENT)
        self.assertEqual(context.exception.options["token"], "--nope")
        self.assertIn("tool --help", context.exception.options["hint"])

    def testUnknownArgumentHintNamesSubcommand(self):
        with self.assertRaises(UnknownArgumentError) as context:
            make().parse(["tool", "run", "--nope"])
        self.assertIn("tool run --help", context.exception.options["hint"])

    def testClusteredShortOptionsRejected(self):
        with self.assertRaises(ClusteredShortOptionsError):
            make().parse(["tool", "-vt"])


class TestValues(TestCase):
    """Value token rules and coercion failures."""

    def testMissingValueAtEnd(self):
        with self.assertRaises(MissingValueError):
            make().parse(["tool", "--timeout"])

    def testOptionLikeTokenIsNotAValue(self):
        with self.assertRaises(MissingValueError):
            make().parse(["tool", "--name", "--verbose"])

    def testTerminatorBindsAsStringValue(self):
        self.assertEqual(make().parse(["tool", "--name", "--"])["name"], "--")
        self.assertEqual(make().parse(["tool", "--name", "-"])["name"], "-")

    def testDashValueForShortOption(self):
        parser = Parser((), [Option("output", Kind.STRING, short="o", metavar="FILE")], prog="tool")
        self.assertEqual(parser.parse(["tool", "-o", "-"])["output"], "-")
        self.assertEqual(parser.parse(["tool", "--output", "--"])["output"], "--")

    def testTerminatorValueLeavesPositionalsUntouched(self):
        outcome = make().parse(["tool", "--name", "--", "a"])
        self.assertEqual(outcome["name"], "--")
        self.assertEqual(outcome["src"], "a")
        self.assertIsNone(outcome["dst"])

    def testTerminatorIsNotANumber(self):
        with self.assertRaises(InvalidNumberError):
            make().parse(["tool", "--timeout", "-"])
        with self.assertRaises(InvalidNumberError):
            make().parse(["tool", "run", "--port", "--"])

    def testSignedOptionTakesNegativeNumber(self):
        self.assertEqual(make().parse(["tool", "--timeout", "-7"])["timeout"], -7)
        self.assertEqual(make().parse(["tool", "-t", "-12"])["timeout"], -12)

    def testSignedOptionFollowedByOption(self):
        with self.assertRaises(MissingValueError):
            make().parse(["tool", "--timeout", "--verbose"])

    def testUnsignedOptionFollowedByOption(self):
        with self.assertRaises(InvalidUnsignedError) as context:
            make().parse(["tool", "run", "--port", "-1"])
        self.assertEqual(context.exception.options["token"], "-1")

    def testInvalidNumberHasNoHint(self):
        with self.assertRaises(InvalidNumberError) as context:
            make().parse(["tool", "run", "--port", "80x"])
        self.assertIsNone(context.exception.options["hint"])

    def testUnsignedOverflow(self):
        with self.assertRaises(InvalidNumberError):
            make().parse(["tool", "run", "--port", "18446744073709551616"])

    def testStringOverLimitFails(self):
        with self.assertRaises(ValueTooLongError):
            make(limit=4).parse(["tool", "--name", "abcde"])
        self.assertEqual(make(limit=4).parse(["tool", "--name", "abcd"])["name"], "abcd")

    def testDefaultLimit(self):
        with self.assertRaises(ValueTooLongError):
            make().parse(["tool", "--name", "x" * 1025])


class TestPositionals(TestCase):
    """Positional slots in normal and terminator mode."""

    def testDeclarationOrder(self):
        outcome = make().parse(["tool", "a", "b"])
        self.assertEqual((outcome["src"], outcome["dst"]), ("a", "b"))

    def testExcessPositional(self):
        with self.assertRaises(ExcessPositionalError):
            make().parse(["tool", "a", "b", "c"])

    def testNoPositionalSlotInScope(self):
        with self.assertRaises(UnknownArgumentError):
            make().parse(["tool", "run", "x"])

    def testTerminatorBindsOneTokenPerSlot(self):
        outcome = make().parse(["tool", "--", "foo", "bar"])
        self.assertEqual(outcome["src"], "foo")
        self.assertEqual(outcome["dst"], "bar")

    def testTerminatorTakesOptionLikeTokensLiterally(self):
        outcome = make().parse(["tool", "--", "--verbose", "-h"])
        self.assertEqual((outcome["src"], outcome["dst"]), ("--verbose", "-h"))
        self.assertIs(outcome["verbose"], False)

    def testSingleDashTerminator(self):
        outcome = make().parse(["tool", "a", "-", "b"])
        self.assertEqual((outcome["src"], outcome["dst"]), ("a", "b"))

    def testTooManyAfterTerminator(self):
        with self.assertRaises(TooManyPositionalsError) as context:
            make().parse(["tool", "--", "a", "b", "c"])
        self.assertEqual(context.exception.options["expected"], 2)
        self.assertEqual(context.exception.options["given"], 3)

    def testTooFewAfterTerminator(self):
        with self.assertRaises(TooFewPositionalsError):
            make().parse(["tool", "--", "a"])

    def testBooleanPositional(self):
        parser = Parser((), [Option("force", Kind.BOOLEAN, positional=True)], prog="tool")
        self.assertIs(parser.parse(["tool", "yes"])["force"], True)

    def testNumericPositional(self):
        parser = Parser((), [Option("count", Kind.UNSIGNED, positional=True)], prog="tool")
        self.assertEqual(parser.parse(["tool", "0x10"])["count"], 16)
        with self.assertRaises(InvalidNumberError):
            parser.parse(["tool", "ten"])


class TestScopes(TestCase):
    """Options scoped to one subcommand are invisible elsewhere."""

    def testSubcommandOptionUnknownUnderOtherSubcommand(self):
        with self.assertRaises(UnknownArgumentError):
            make().parse(["tool", "debug", "--port", "80"])

    def testSubcommandOptionUnknownAtRoot(self):
        with self.assertRaises(UnknownArgumentError):
            make().parse(["tool", "--port", "80"])

    def testRootOptionUnknownUnderSubcommand(self):
        with self.assertRaises(UnknownArgumentError):
            make().parse(["tool", "run", "--name", "x"])

    def testGlobalOptionEverywhere(self):
        for argv in (["tool", "-v"], ["tool", "run", "-v"], ["tool", "debug", "-v"]):
            with self.subTest(argv=argv):
                self.assertIs(make().parse(argv)["verbose"], True)

    def testCommandNameOnlyAtSecondPosition(self):
        outcome = make().parse(["tool", "a", "run"])
        self.assertIsNone(outcome.subcommand)
        self.assertEqual(outcome["dst"], "run")


class TestHelp(TestCase):
    """The help pre-pass runs before anything else."""

    def setUp(self):
        self.calls = []

    def helper(self, parser, subcommand, argv):
        self.calls.append((parser, subcommand, argv))

    def testHelpExitsSuccessfully(self):
        parser = make(helper=self.helper)
        with self.assertRaises(SystemExit) as context:
            parser.parse(["tool", "--help"])
        self.assertEqual(context.exception.code, 0)
        self.assertEqual(self.calls, [(parser, None, ["tool", "--help"])])

    def testHelpForSubcommand(self):
        with self.assertRaises(SystemExit):
            make(helper=self.helper).parse(["tool", "run", "-h"])
        self.assertEqual(self.calls[0][1], "run")

    def testHelpWinsOverEarlierErrors(self):
        with self.assertRaises(SystemExit) as context:
            make(helper=self.helper).parse(["tool", "--nope", "-t", "--help"])
        self.assertEqual(context.exception.code, 0)

    def testTerminatorSuppressesHelp(self):
        make(helper=self.helper).parse(["tool", "--", "a", "--help"])
        self.assertEqual(self.calls, [])


class TestReporting(TestCase):
    """Shell mode prints and exits; library mode raises."""

    def testShellModeExitsWithFailureStatus(self):
        buffer = io.StringIO()
        with mock.patch.object(faults, "console", Console(file=buffer, width=120)):
            with self.assertRaises(SystemExit) as context:
                make(shell=True).parse(["tool", "--nope"])
        self.assertEqual(context.exception.code, 1)
        self.assertIn("unknown argument '--nope'", buffer.getvalue())
        self.assertIn("tool --help", buffer.getvalue())

    def testFaultsAreParseExceptions(self):
        with self.assertRaises(ParseException):
            make().parse(["tool", "--nope"])

    def testProgDefaultsToArgvBasename(self):
        parser = Parser(COMMANDS, OPTIONS)
        with self.assertRaises(UnknownArgumentError) as context:
            parser.parse(["/usr/local/bin/svc", "--nope"])
        self.assertEqual(context.exception.options["prog"], "svc")
        self.assertIn("svc --help", context.exception.options["hint"])


class TestParserConfiguration(TestCase):

    def testInvalidTableRejectedAtConstruction(self):
        with self.assertRaises(TableDefinitionError):
            Parser((), [Option("port", Kind.UNSIGNED)])

    def testLimitMustBePositive(self):
        with self.assertRaises(ValueError):
            Parser((), (), limit=0)

    def testHelperMustBeCallable(self):
        with self.assertRaises(TypeError):
            Parser((), (), helper="help")

    def testEmptyArgvRejected(self):
        with self.assertRaises(ValueError):
            make().parse([])

    def testParserIsReusable(self):
        parser = make()
        first = parser.parse(["tool", "-v", "a"])
        second = parser.parse(["tool"])
        self.assertIs(first["verbose"], True)
        self.assertIs(second["verbose"], False)
        self.assertIsNone(second["src"])

    def testHelpOptionIsPerParser(self):
        self.assertIsNot(make().help, make().help)
        self.assertEqual(make().help.flags, ("-h", "--help"))


class TestFunctionalParse(TestCase):

    def testReturnsSubcommandAndFillsNamespace(self):
        namespace = types.SimpleNamespace()
        result = parse(COMMANDS, OPTIONS, ["tool", "run", "-p", "8080"], namespace=namespace, prog="tool")
        self.assertEqual(result, "run")
        self.assertEqual(namespace.port, 8080)
        self.assertEqual(namespace.timeout, 30)
        self.assertIs(namespace.verbose, False)

    def testRootReturnsNone(self):
        self.assertIsNone(parse(COMMANDS, OPTIONS, ["tool"], prog="tool"))

    def testDashesBecomeUnderscores(self):
        namespace = types.SimpleNamespace()
        parse((), [Option("dry-run")], ["tool", "--dry-run"], namespace=namespace)
        self.assertIs(namespace.dry_run, True)


if __name__ == "__main__":
    unittest.main()
