"""
Help menu rendering through rich.

Layout
- usage: "<prog> [command]" when commands exist and none was invoked, then
  "<prog> [<command>] [options] <positional> ..." for the active scope.
- commands: table of subcommands (root invocation only).
- options: every relevant named option ("-p --port <PORT>  description"),
  followed by the help option.
- positional options: relevant positionals in declaration order.
- examples: "<prog> <options>  description" per declared example.
- trailer: "Use '<prog> [command] --help' ..." when commands exist at root.

Palette keys
- usage-label, program-name, usage-section
- group-label, option-name, metavar, positional-name, argument-description,
  required-marker
- children-title, children-table, children, children-description
- examples-label, examples-dot, example, epilog-section
- panel-title

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- Styling is only applied when the parser is colorful.
"""
from collections import defaultdict

from rich.box import ROUNDED
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from . import scopes
from .utils import Unset, dashed


def render(parser, subcommand, argv, /, *, console=Unset):
    """
    Render the help menu for 'subcommand' (None for root) to the console.

    'argv' is the vector that requested help; only its scope matters here.
    """
    console = console or Console()
    resolved = scopes.resolve(parser.commands, argv) if subcommand is not None else scopes.ROOT

    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",
        "program-name": "bold #FF4D94",
        "usage-section": "bold #36C5F0",

        "group-label": "bold #FFFFFF",
        "option-name": "bold #00E6FF",
        "metavar": "bold #FFD600",
        "positional-name": "bold #22C55E",
        "argument-description": "#9CA3AF",
        "required-marker": "bold #EF4444",

        "children-title": "bold #FFFFFF",
        "children-table": "#4B5563",
        "children": "bold #36C5F0",
        "children-description": "#9CA3AF",

        "examples-label": "bold #22C55E",
        "examples-dot": "#22C55E dim",
        "example": "#E5E7EB",
        "epilog-section": "#737373",

        "panel-title": "bold #FF4D94",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if parser.colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not parser.colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    width = console.width - 4 * parser.fancy
    visible = scopes.visible(parser.options, resolved)
    named = [option for option in visible if not option.positional]
    positionals = [option for option in visible if option.positional]
    at_root = subcommand is None

    # Usage
    usage = Text()
    usage.append("usage", styler("usage-label")).append(":")
    offset = len(usage) + 1

    if parser.commands and at_root:
        usage.append(" ").append(text(parser.prog, styler("program-name")))
        usage.append(" ").append(text("[command]", styler("usage-section")))
        usage.append("\n").append(" " * offset)
    else:
        usage.append(" ")

    usage.append(text(parser.prog, styler("program-name")))
    if not at_root:
        usage.append(" ").append(text(subcommand, styler("usage-section")))
    usage.append(" ").append(text("[options]", styler("usage-section")))
    for option in positionals:
        usage.append(" ").append(text("<%s>" % option.name, styler("metavar")))

    renders = [usage.append("\n")]

    # Commands
    if parser.commands and at_root:
        table = Table(
            "name", "help",
            title=text("commands", styler("children-title")),
            width=int(width * (2 / 3)),
            box=ROUNDED,
            style=styler("children-table"),
            header_style=styler("children-title"),
        )
        for command in parser.commands:
            if command.descr:
                help = text(command.descr, styler("children-description"))
            else:
                help = text("run '%s %s --help' for details" % (parser.prog, command.name), styler("children-description"))
            table.add_row(text(command.name, styler("children")), help)
        renders.append(table)

    padding = 2
    indent = 24

    def row(names, descr, required=False):
        section = Text(" " * padding)
        section.append(names)
        description = text(descr, styler("argument-description"))
        if required:
            marker = text("(required)", styler("required-marker"))
            description = Text.assemble(description, " ", marker) if description else marker
        if not description:
            return section
        if len(section) >= indent:
            section.append("\n").append(" " * indent)
        else:
            section.append(" " * (indent - len(section)))
        wrapped = description.wrap(console, max(width - indent, 1))
        section.append(wrapped[0])
        for line in wrapped[1:]:
            section.append("\n").append(" " * indent).append(line)
        return section

    def spelled(option):
        segments = [text(flag, styler("option-name")) for flag in option.flags]
        if not option.is_boolean:
            segments.append(text("<%s>" % option.metavar, styler("metavar")))
        return Text(" ").join(segments)

    # Named options
    options = Text("\n" if parser.commands and at_root else "")
    options.append(text("options", styler("group-label"))).append(":").append("\n")
    for option in [*named, parser.help]:
        options.append(row(spelled(option), option.descr, option.required)).append("\n")
    renders.append(options)

    # Positional options
    if positionals:
        section = Text()
        section.append(text("positional options", styler("group-label"))).append(":").append("\n")
        for option in positionals:
            section.append(row(text(option.name, styler("positional-name")), option.descr, option.required))
            section.append("\n")
        renders.append(section)

    # Examples
    if parser.examples:
        dot = text(" • ", styler("examples-dot"))
        examples = Text()
        examples.append(text("examples", styler("examples-label"))).append(":").append("\n")
        for example in parser.examples:
            line = Text.assemble(dot, text("%s %s" % (parser.prog, example.options), styler("example")))
            if example.descr:
                line.append("  ").append(text(example.descr, styler("argument-description")))
            examples.append(line).append("\n")
        renders.append(examples)

    if parser.commands and at_root:
        renders.append(text(
            "Use '%s [command] %s' to get help for a specific command" % (parser.prog, dashed(parser.help.name)),
            styler("epilog-section"),
        ))

    renders[-1].rstrip()
    renderable = Group(*renders)

    if parser.fancy:
        renderable = Panel(
            renderable,
            title=Text.assemble("[ ", ("%s HELP" % parser.prog).upper(), " ]", style=styler("panel-title")),
            title_align="left",
        )

    console.print(renderable)


__all__ = (
    "render",
)
