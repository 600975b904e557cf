"""
Summit parser: from raw tokens to a validated invocation.

parse(app, tokens) is pure. It returns exactly one of
- Invocation: a resolved command with its bound positionals and options.
- HelpRequest: help was asked for (application-level or for one command).
- VersionRequest: the version was asked for at the top level.
- ParseError: UnknownCommandError, UnknownOptionError,
  OptionMissingValueError or ArityMismatchError, returned as a value.

Token syntax
- "--name" selects an option by name, "-a" by its one-character alias.
  Both are matched literally: "--name=value" and bundled "-ab" are unknown.
- A value-taking option consumes the next token, which must exist and must
  not start with "-".
- Every other token is positional.
- Repeated options are accepted; the last occurrence wins.
"""
import difflib
import logging
import shlex
import sys
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .arguments import HELP, VERSION
from .faults import (
    FaultCode,
    UnknownCommandError,
    UnknownOptionError,
    OptionMissingValueError,
    ArityMismatchError,
)
from .utils import Unset, ordinal

logger = logging.getLogger(__name__)


def tokenize(prompt=Unset, /):
    """
    Normalize a prompt into a tuple of tokens.

    - Unset: read tokens from sys.argv[1:].
    - str: shell-like string, split with shlex.split.
    - Iterable[str]: pre-tokenized sequence; blank items are dropped.

    Dropping blank items is the one place where tokenize() and parse()
    disagree: App.parse(["add", "", "2"]) sees two tokens, while
    parse(app, ["add", "", "2"]) binds "" as the first positional.

    Raises TypeError for anything else, or for non-string items.
    """
    if prompt is Unset:
        return tuple(sys.argv[1:])
    elif isinstance(prompt, str):
        return tuple(shlex.split(prompt))
    elif isinstance(prompt, Iterable):
        tokens = []
        for item in prompt:
            if not isinstance(item, str):
                raise TypeError("tokenize() argument must be a string or an iterable of strings")
            if item.strip():
                tokens.append(item)
        return tuple(tokens)
    raise TypeError("tokenize() argument must be a string or an iterable of strings")


@dataclass(frozen=True, eq=False)
class Invocation:
    """
    A fully validated call: calling it runs the command's handler as
    handler(arguments, options) and returns its result unchanged.

    Invocations compare and hash by identity (options is a read-only mapping).
    """
    command: object
    arguments: tuple = ()
    options: Mapping = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "arguments", tuple(self.arguments))
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    @property
    def bound(self):
        """
        Positional values keyed by their argument names.
        """
        return MappingProxyType({
            argument.name: value for argument, value in zip(self.command.arguments, self.arguments)
        })

    def __call__(self):
        if self.command.handler is None:
            raise TypeError("command %r has no handler" % self.command.name)
        return self.command.handler(self.arguments, self.options)


@dataclass(frozen=True)
class HelpRequest:
    """
    Help short-circuit. `command` is None for application-level help.
    """
    app: object
    command: object = None

    def render(self, *, width=100, colorful=False):
        from .rendering import render_help
        return render_help(self.app, self.command, width=width, colorful=colorful)


@dataclass(frozen=True)
class VersionRequest:
    """
    Version short-circuit (top level only).
    """
    app: object

    def render(self):
        from .rendering import render_version
        return render_version(self.app)


def _route(app, command):
    return app.name if command is None or command.toplevel else "%s %s" % (app.name, command.name)


def _unknown_command(app, token):
    suggestions = difflib.get_close_matches(token, app.routes.keys(), 5)
    try:
        hint = "did you mean %r? you can also run '%s --help' to see available commands" % (
            suggestions[0], app.name
        )
    except IndexError:
        hint = "run '%s --help' to see available commands" % app.name

    return UnknownCommandError(
        "unknown command %r at %s position" % (token, ordinal(1)),
        title="unknown command",
        code=FaultCode.UNKNOWN_COMMAND,
        token=token,
        index=1,
        suggestions=tuple(suggestions),
        hint=hint,
    )


def _unknown_option(app, command, token, index):
    route = _route(app, command)
    suggestions = difflib.get_close_matches(token, command.switches.keys(), 5)
    if "=" in token and token.partition("=")[0] in command.switches:
        hint = "pass the value as a separate token: '%s %s'" % tuple(token.partition("=")[::2])
    elif suggestions:
        hint = "did you mean %r? you can also run '%s --help' to see available options" % (suggestions[0], route)
    else:
        hint = "run '%s --help' to see available options" % route

    return UnknownOptionError(
        "unknown option %r at %s position" % (token, ordinal(index)),
        title="unknown option",
        code=FaultCode.UNKNOWN_OPTION,
        token=token,
        index=index,
        command=command,
        suggestions=tuple(suggestions),
        hint=hint,
    )


def _missing_value(app, command, option, token, index):
    return OptionMissingValueError(
        "option %r at %s position requires a value" % (token, ordinal(index)),
        title="missing value",
        code=FaultCode.OPTION_MISSING_VALUE,
        token=token,
        index=index,
        command=command,
        option=option,
        hint="pass a value right after it: '%s %s <%s>'" % (_route(app, command), token, option.metavar),
    )


def _arity_mismatch(app, command, actual):
    expected = command.arity
    return ArityMismatchError(
        "%r expects %d positional argument%s but %d %s given" % (
            _route(app, command),
            expected,
            "s" * (expected != 1),
            actual,
            "was" if actual == 1 else "were",
        ),
        title="arity mismatch",
        code=FaultCode.ARITY_MISMATCH,
        command=command,
        expected=expected,
        actual=actual,
        hint="%s; run '%s --help' to see the expected usage" % (
            "remove the extra values" if actual > expected else "add the missing values",
            _route(app, command),
        ),
    )


def parse(app, tokens, /):
    """
    Resolve `tokens` (program name excluded) against `app`.

    Steps
    1. No tokens: the default command, with nothing bound.
    2. A first token not starting with "-" must be a command name or alias;
       otherwise the application help (or version) when asked for, and
       UnknownCommandError if not. A leading "-" selects the default
       command and keeps every token for it.
    3. "-h"/"--help" anywhere wins; "-v"/"--version" wins next, for the
       default command only.
    4. Options are looked up literally; positional count must equal the
       command's arity.

    Positions in faults are 1-based over the whole token sequence.
    """
    tokens = tuple(tokens)

    if not tokens:
        logger.debug("no tokens; running the default command")
        return Invocation(app.default)

    if tokens[0].startswith("-"):
        command, remaining, offset = app.default, tokens, 1
    else:
        try:
            command = app.routes[tokens[0]]
        except KeyError:
            logger.debug("unknown command %r", tokens[0])
            if any(token in HELP.names for token in tokens[1:]):
                logger.debug("help requested after an unknown command")
                return HelpRequest(app)
            if any(token in VERSION.names for token in tokens[1:]):
                logger.debug("version requested after an unknown command")
                return VersionRequest(app)
            return _unknown_command(app, tokens[0])
        remaining, offset = tokens[1:], 2
    logger.debug("resolved command %r from %r", command.name, tokens)

    if any(token in HELP.names for token in remaining):
        logger.debug("help requested for %r", command.name)
        return HelpRequest(app, None if command.toplevel else command)

    if command.toplevel and any(token in VERSION.names for token in remaining):
        logger.debug("version requested")
        return VersionRequest(app)

    arguments = []
    options = {}
    index = 0
    while index < len(remaining):
        token = remaining[index]

        if not token.startswith("-"):
            arguments.append(token)
            index += 1
            continue

        try:
            option = command.switches[token]
        except KeyError:
            logger.debug("unknown option %r for %r", token, command.name)
            return _unknown_option(app, command, token, index + offset)

        if option.takes_value:
            if index + 1 >= len(remaining) or remaining[index + 1].startswith("-"):
                logger.debug("option %r has no value", token)
                return _missing_value(app, command, option, token, index + offset)
            options[option.name] = remaining[index + 1]
            index += 2
        else:
            options[option.name] = None
            index += 1

    if len(arguments) != command.arity:
        logger.debug("arity mismatch for %r: %d != %d", command.name, len(arguments), command.arity)
        return _arity_mismatch(app, command, len(arguments))

    return Invocation(command, arguments, options)


__all__ = (
    "tokenize",
    "Invocation",
    "HelpRequest",
    "VersionRequest",
    "parse",
)
