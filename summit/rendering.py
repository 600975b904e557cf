"""
Summit help and version rendering.

Both renderings are pure functions of the application (and, for help, an
optional command). They never look at the token stream.

- build_help(app, command=None) / build_version(app): rich renderables, used by
  App.run to print directly.
- render_help(...) / render_version(app): the same content as plain strings.

Application-level help lists the global options and every registered command
once, in registration order. Command-level help lists the command's arguments
and options once each, in declaration order, followed by the global help
option.

Palette keys
- program-name, program-version, description-section, epilog-section
- usage-label, usage-section
- group-label, argument-description
- option-name, metavar, command-name
- panel-title

Define a mapping named __styles__ in __main__ to override any palette entry.
Styling is only applied when colorful is set.
"""
import io
from collections import defaultdict

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .arguments import HELP, VERSION
from .utils import Unset, coalesce


def _palette(colorful):
    styles = defaultdict(str, {
        # === Head sections ===
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "program-version": "bold #00E6FF",  # CYAN version
        "description-section": "italic #A3A3A3",  # Neutral gray
        "epilog-section": "#737373",  # Dim footer gray

        "usage-label": "bold #00E6FF",
        "usage-section": "bold #36C5F0",  # SKY-BLUE → softer than cyan

        # === Groups ===
        "group-label": "bold #FFFFFF",  # Pure white headers
        "argument-description": "#9CA3AF",  # Muted gray

        # === Names ===
        "option-name": "bold #00E6FF",
        "metavar": "bold #FFD600",  # AMBER for parameters
        "command-name": "bold #36C5F0",

        # === Fancy panel ===
        "panel-title": "bold #FF4D94",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    return styler, text


def _wrap(console, fragment, width, indent=0):
    """
    Wrap a Text to `width`, indenting continuation lines by `indent`.
    """
    section = Text()
    for index, line in enumerate(fragment.wrap(console, max(width - indent, 1))):
        if index:
            section.append("\n").append(" " * indent)
        section.append(line)
    return section


def _table(console, label, rows, width, *, styler, text):
    """
    Render a labeled two-column section: names, then a hanging-indent description.
    """
    padding = 2
    indent = min(max(len(name) for name, _ in rows) + padding * 2, width // 2)

    section = Text()
    section.append(text(label, styler("group-label"))).append(":")
    for name, descr in rows:
        section.append("\n").append(" " * padding).append(name)
        if descr := text(descr, styler("argument-description")):
            if padding + len(name) + padding > indent:
                section.append("\n").append(" " * indent)
            else:
                section.append(" " * (indent - padding - len(name)))
            section.append(_wrap(console, descr, width, indent))
    return section.append("\n")


def _option_name(option, *, styler, text):
    name = Text()
    if option.alias:
        name.append(text("-" + option.alias, styler("option-name"))).append(", ")
    else:
        name.append("    ")
    name.append(text("--" + option.name, styler("option-name")))
    if option.takes_value:
        name.append(" ").append(text("<%s>" % option.metavar, styler("metavar")))
    return name


def _command_name(command, *, styler, text):
    name = text(command.name, styler("command-name"))
    if command.alias and command.alias != command.name:
        name = Text.assemble(name, ", ", text(command.alias, styler("command-name")))
    return name


def build_help(app, command=None, /, *, console=Unset, colorful=Unset, fancy=Unset):
    """
    Build the help renderable for `app`, or for one of its commands.

    `colorful` and `fancy` default to the application's flags; `console` is
    only used to measure and wrap text.
    """
    if console is Unset:
        console = Console()
    colorful = coalesce(colorful, app.colorful)
    fancy = coalesce(fancy, app.fancy)
    styler, text = _palette(colorful)

    renders = []
    width = console.width - 4 * fancy

    if command is None or command.toplevel:
        renders.append(Text.assemble(
            text(app.name, styler("program-name")),
            " ",
            text(app.version, styler("program-version")),
        ))
        if app.descr:
            renders.append(_wrap(console, text(app.descr, styler("description-section")), width).append("\n"))
        else:
            renders[-1].append("\n")

        usage = Text()
        usage.append(text("USAGE", styler("usage-label"))).append(": ")
        if app.usage:
            usage.append(text(app.usage, styler("usage-section")))
        else:
            usage.append(text(app.name, styler("program-name")))
            usage.append(text(" [OPTIONS] [COMMAND]", styler("usage-section")))
        renders.append(_wrap(console, usage, width, len("USAGE: ")).append("\n"))

        options = [(_option_name(option, styler=styler, text=text), option.descr) for option in (HELP, VERSION)]
        renders.append(_table(console, "OPTIONS", options, width, styler=styler, text=text))

        if app.commands:
            commands = [(_command_name(command, styler=styler, text=text), command.descr) for command in app.commands]
            renders.append(_table(console, "COMMANDS", commands, width, styler=styler, text=text))

        epilog = app.epilog or (
            "Run '%s [COMMAND] --help' to see help information for a specific command" % app.name
        )
        renders.append(_wrap(console, text(epilog, styler("epilog-section")), width))
        title = "%s HELP" % app.name
    else:
        if command.descr:
            renders.append(_wrap(console, text(command.descr, styler("description-section")), width).append("\n"))

        usage = Text()
        usage.append(text("USAGE", styler("usage-label"))).append(": ")
        usage.append(text(app.name, styler("program-name"))).append(" ")
        usage.append(text(command.name, styler("command-name")))
        usage.append(text(" [OPTIONS]", styler("usage-section")))
        for argument in command.arguments:
            usage.append(" ").append(text(argument.metavar, styler("metavar")))
        renders.append(_wrap(console, usage, width, len("USAGE: ")).append("\n"))

        if command.arguments:
            arguments = [(text(argument.metavar, styler("metavar")), argument.descr) for argument in command.arguments]
            renders.append(_table(console, "ARGS", arguments, width, styler=styler, text=text))

        options = [(_option_name(option, styler=styler, text=text), option.descr) for option in (*command.options, HELP)]
        renders.append(_table(console, "OPTIONS", options, width, styler=styler, text=text))
        title = "%s %s HELP" % (app.name, command.name)

    renders[-1].rstrip()
    renderable = Group(*renders)

    if fancy:
        renderable = Panel(
            renderable,
            title=Text.assemble("[", " ", title.upper(), " ", "]", style=styler("panel-title")),
            title_align="left",
        )

    return renderable


def build_version(app, /, *, colorful=Unset, fancy=Unset):
    """
    Build the version renderable: "<name> <version>".
    """
    colorful = coalesce(colorful, app.colorful)
    styler, text = _palette(colorful)

    renderable = Text.assemble(
        text(app.name, styler("program-name")),
        " ",
        text(app.version, styler("program-version")),
    )

    if coalesce(fancy, app.fancy):
        renderable = Panel(
            renderable,
            title=Text.assemble("[", " ", "%s VERSION" % app.name.upper(), " ", "]", style=styler("panel-title")),
            title_align="left",
        )

    return renderable


def _capture(renderable_factory, width, colorful):
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        width=width,
        color_system="truecolor" if colorful else None,
        force_terminal=bool(colorful),
        highlight=False,
        legacy_windows=False,
    )
    console.print(renderable_factory(console))
    return "\n".join(line.rstrip() for line in buffer.getvalue().rstrip("\n").splitlines())


def render_help(app, command=None, /, *, width=100, colorful=False):
    """
    Return help for `app` (or one of its commands) as a string.

    Lines are wrapped to `width`; ANSI styling is only emitted when
    `colorful` is set. The application's fancy flag is ignored here.
    """
    return _capture(
        lambda console: build_help(app, command, console=console, colorful=colorful, fancy=False),
        width,
        colorful,
    )


def render_version(app, /):
    """
    Return "<name> <version>".
    """
    return "%s %s" % (app.name, app.version)


__all__ = (
    "build_help",
    "build_version",
    "render_help",
    "render_version",
)
