import logging
import sys

from rich.logging import RichHandler
from rich.pretty import pprint

from tabulargs import *

__prog__ = "bundle"

COMMANDS = [
    Command("serve", "Serve a directory over HTTP"),
    Command("pack", "Pack files into an archive"),
]

OPTIONS = [
    Option("verbose", Kind.BOOLEAN, short="v", descr="Print debug records"),
    Option("port", Kind.UNSIGNED, short="p", scope=Scope.subcommand(0), metavar="PORT", default=8000,
           descr="Port to listen on"),
    Option("root", Kind.STRING, scope=Scope.subcommand(0), positional=True, required=True,
           descr="Directory to serve"),
    Option("level", Kind.INTEGER, short="l", scope=Scope.subcommand(1), metavar="LEVEL", default=6,
           descr="Compression level, negative values favour speed"),
    Option("output", Kind.STRING, short="o", scope=Scope.subcommand(1), metavar="FILE", required=True,
           descr="Archive to write"),
    Option("stdout", Kind.BOOLEAN, scope=Scope.subcommand(1), required=True,
           descr="Write the archive to standard output"),
    Option("input", Kind.STRING, scope=Scope.subcommand(1), positional=True, descr="File to pack"),
    Option("version", Kind.BOOLEAN, scope=Scope.ROOT, descr="Show the version and exit"),
]

EXCLUSIONS = [
    Exclusion("output", "stdout"),
]

EXAMPLES = [
    Example("serve --port 8080 ./public", "serve ./public on port 8080"),
    Example("pack -l -7 -o out.tar notes.txt", "fast compression"),
]


if __name__ == '__main__':
    verbose = any(token in ("-v", "--verbose") for token in sys.argv[1:])
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )
    parser = Parser(COMMANDS, OPTIONS, EXCLUSIONS, examples=EXAMPLES, prog=__prog__, shell=True, colorful=True)
    pprint(parser.parse())
