"""
Summit faults (errors) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing fault, grouped by
  domain so logs and searches stay predictable.
- CommandException: base type carrying a message plus read-only options
  (title, code, hint and structured context) that renders itself with rich.
- ParseError: the closed set of parse-time faults. The parser returns these as
  values; they are only raised when surfaced through trigger().
- DuplicateRegistrationError: construction-time fault raised while assembling
  commands and applications.
- trigger(): central entry point to surface a fault (shell rendering vs raising).

UX goals
- Position-first messages ("unknown option '--x' at third position").
- Short titles, one-sentence bodies, a single clear hint.
- Lowercased tone; colors configurable via __styles__ in __main__.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, rename

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - routing (1110x): UNKNOWN_COMMAND
    - options (1111x): UNKNOWN_OPTION, OPTION_MISSING_VALUE
    - positionals (1112x): ARITY_MISMATCH
    - registration (1115x): DUPLICATE_REGISTRATION

    normalize() lets the host remap codes to custom labels through a
    __codes__ mapping in __main__ while the numbers stay stable.
    """
    # --- routing errors ---
    UNKNOWN_COMMAND             = 11101

    # --- option errors ---
    UNKNOWN_OPTION              = 11112
    OPTION_MISSING_VALUE        = 11117

    # --- positional errors ---
    ARITY_MISMATCH              = 11121

    # --- registration errors ---
    DUPLICATE_REGISTRATION      = 11151

    def normalize(self):
        """
        return a host-normalized string for this code.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _detail(name, /):
    """
    read-only property exposing options[name] (None when absent).
    """
    @rename(name)
    def getter(self):
        return self.options.get(name)

    return property(getter)


class CommandException(Exception):
    """
    base fault: a message plus a read-only mapping of rendering/context options.

    well-known options
    - title, code, hint: rendering copy.
    - app: the application the fault belongs to (used for the program name).
    - shell, fancy, colorful: runtime flags merged in by trigger().
    """
    title = _detail("title")
    code = _detail("code")
    hint = _detail("hint")
    index = _detail("index")

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

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

        app = self.options.get("app")
        prog = text(getattr(main, "__prog__", getattr(app, "name", None) or "summit"), styler("prog-name"))
        code = self.code.normalize() if isinstance(self.code, FaultCode) else "-"

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code, styler("code")),
            " | ",
            text((self.title or "error").title(), styler("error-title")),
            " ]"
        )
        message = text(str(self), styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint")))

        if fancy:
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ParseError(CommandException):
    """
    base of the closed set of parse-time faults.
    """
    command = _detail("command")
    token = _detail("token")


class UnknownCommandError(ParseError):
    suggestions = _detail("suggestions")


class UnknownOptionError(ParseError):
    suggestions = _detail("suggestions")


class OptionMissingValueError(ParseError):
    option = _detail("option")


class ArityMismatchError(ParseError):
    expected = _detail("expected")
    actual = _detail("actual")


class DuplicateRegistrationError(CommandException, ValueError):
    """
    raised while assembling commands or applications when a name or alias is
    already taken (or reserved).
    """
    name = _detail("name")
    owner = _detail("owner")


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode the fault is rendered on stderr and the process exits;
      otherwise it is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "CommandException",
    "ParseError",
    "UnknownCommandError",
    "UnknownOptionError",
    "OptionMissingValueError",
    "ArityMismatchError",
    "DuplicateRegistrationError",
    "trigger",
)
