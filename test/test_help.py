# python
"""
Help menu rendering tests.

Conventions
- Test method names follow CamelCase per project convention.
- Output is captured with a recording rich Console and compared as plain text.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console

from tabulargs import Command, Example, Kind, Option, Parser, Scope
from tabulargs.help import render


def capture(parser, subcommand, argv):
    console = Console(file=io.StringIO(), width=100, record=True)
    render(parser, subcommand, argv, console=console)
    return console.export_text()


class TestHelpMenu(TestCase):

    def setUp(self):
        self.parser = Parser(
            [Command("serve", "Serve files"), Command("clean")],
            [
                Option("verbose", short="v", descr="Print more"),
                Option("port", Kind.UNSIGNED, short="p", metavar="PORT", scope=Scope.subcommand(0),
                       descr="Port to bind", required=True),
                Option("root", Kind.STRING, positional=True, scope=Scope.subcommand(0), descr="Directory"),
                Option("config", Kind.STRING, metavar="FILE", scope=Scope.ROOT, descr="Config file"),
            ],
            examples=[Example("serve -p 80 www", "serve www on port 80")],
            prog="tool",
        )

    def testRootUsageListsCommands(self):
        text = capture(self.parser, None, ["tool", "--help"])
        self.assertIn("usage: tool [command]", text)
        self.assertIn("tool [options]", text)
        self.assertIn("commands", text)
        self.assertIn("serve", text)
        self.assertIn("Serve files", text)
        self.assertIn("run 'tool clean --help' for details", text)

    def testRootShowsRelevantOptionsOnly(self):
        text = capture(self.parser, None, ["tool", "--help"])
        self.assertIn("-v --verbose", text)
        self.assertIn("--config <FILE>", text)
        self.assertIn("-h --help", text)
        self.assertIn("Show this help menu", text)
        self.assertNotIn("--port", text)

    def testRootTrailer(self):
        text = capture(self.parser, None, ["tool", "--help"])
        self.assertIn("Use 'tool [command] --help' to get help for a specific command", text)

    def testSubcommandMenu(self):
        text = capture(self.parser, "serve", ["tool", "serve", "--help"])
        self.assertIn("usage: tool serve [options] <root>", text)
        self.assertIn("-p --port <PORT>", text)
        self.assertIn("(required)", text)
        self.assertIn("positional options", text)
        self.assertIn("Directory", text)
        self.assertNotIn("--config", text)
        self.assertNotIn("[command]", text)
        self.assertNotIn("Use 'tool", text)

    def testExamples(self):
        text = capture(self.parser, None, ["tool", "--help"])
        self.assertIn("examples", text)
        self.assertIn("tool serve -p 80 www", text)
        self.assertIn("serve www on port 80", text)

    def testWithoutCommands(self):
        parser = Parser((), [Option("file", Kind.STRING, positional=True)], prog="cat")
        text = capture(parser, None, ["cat", "-h"])
        self.assertIn("usage: cat [options] <file>", text)
        self.assertNotIn("commands", text)
        self.assertNotIn("[command]", text)

    def testFancyPanelTitle(self):
        parser = Parser((), (), prog="tool", fancy=True, colorful=True)
        self.assertIn("TOOL HELP", capture(parser, None, ["tool", "-h"]))


if __name__ == "__main__":
    unittest.main()
