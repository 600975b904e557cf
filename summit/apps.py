"""
Summit applications: the command registry and its runner.

An App owns the application's metadata (name, description, version), its
commands in registration order (unique by name and alias across the whole
collection) and one default command, run when no command name is given.

Quick start
    from summit import App, command

    @command(arguments=("num1", "num2"))
    def add(arguments, options):
        "Adds two numbers"
        return str(sum(map(float, arguments)))

    app = App("calc", "A simple calculator", "1.0.0", [add])
    app.run()                      # reads sys.argv[1:]
    app.parse(["add", "1", "2"])   # Invocation / HelpRequest / ... / ParseError

Builders (with_name, with_descr, with_version, with_command, with_default)
return new, fully validated applications; the original is never changed.
"""
from collections.abc import Iterable
from importlib import metadata as importlib_metadata

from rich.console import Console
from rich.text import Text

from .commands import Command, command
from .faults import FaultCode, ParseError, DuplicateRegistrationError, trigger
from .parsing import tokenize, parse, Invocation, HelpRequest, VersionRequest
from .rendering import build_help, build_version
from .utils import *

APP_DEFAULT_NAME = "unnamed_app"
APP_DEFAULT_DESCR = "default_description"
APP_DEFAULT_VERSION = "0.1.0"

RESERVED_COMMANDS = frozenset({"help", "version"})


def _sanitize_text(cls, metadata, name, /, default=Unset):
    """
    Internal: a string (or Text) field; Unset resolves to `default`.
    """
    if not isinstance(value := metadata[name], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} {name!r} must be a string")
    elif isinstance(value, str):
        value = value.strip() or Unset
    metadata[name] = coalesce(value, default)


def _process_commands(cls, metadata):
    """
    Normalize commands (callables are wrapped with command()) and index them
    by name and alias, rejecting collisions and reserved names.
    """
    if not isinstance(metadata["commands"], Iterable) or isinstance(metadata["commands"], str):
        raise TypeError(f"{cls.__typename__} 'commands' must be an iterable of commands")

    routes = {}
    commands = []
    for object in metadata["commands"]:
        if not isinstance(object, Command):
            if not callable(object):
                raise TypeError(f"{cls.__typename__} 'commands' must be an iterable of commands")
            object = command(object)
        for identifier in sorted(object.identifiers, key=len, reverse=True):
            if identifier in RESERVED_COMMANDS:
                raise DuplicateRegistrationError(
                    "command name %r is reserved" % identifier,
                    title="duplicate registration",
                    code=FaultCode.DUPLICATE_REGISTRATION,
                    hint="use the '--%s' option instead of a %r command" % (identifier, identifier),
                    name=identifier,
                    owner=None,
                )
            if identifier in routes:
                raise DuplicateRegistrationError(
                    "command %r collides with command %r on %r" % (object.name, routes[identifier].name, identifier),
                    title="duplicate registration",
                    code=FaultCode.DUPLICATE_REGISTRATION,
                    hint="pick another name or alias for command %r" % object.name,
                    name=identifier,
                    owner=routes[identifier].name,
                )
            routes[identifier] = object
        commands.append(object)

    metadata["commands"] = tuple(commands)
    metadata["routes"] = routes


def _process_default(cls, metadata):
    """
    Rebuild the default command as the application's top-level command.

    It takes the application's name and description, keeps only its handler,
    and recognizes the global help and version options.
    """
    default = metadata["default"]
    if isinstance(default, Command):
        if default.arguments or default.options:
            raise ValueError(f"{cls.__typename__} 'default' command cannot declare arguments or options")
        handler = default.handler
    elif default is None or callable(default):
        handler = default
    else:
        raise TypeError(f"{cls.__typename__} 'default' must be a command, a callable or None")

    metadata["default"] = Command(
        handler,
        name=metadata["name"],
        descr=metadata["descr"],
        toplevel=True,
    )


class App(metaclass=IntrospectableType):
    """
    Immutable command registry.

    Properties
    - name, descr, version: application metadata.
    - commands: tuple[Command, ...] in registration order.
    - routes: Mapping[str, Command] from every name and alias to its command.
    - default: the top-level Command (arity 0, global options only).
    - usage, epilog: optional overrides for the application help.
    - shell, fancy, colorful: runtime flags used by run().
    """

    __introspectable__ = (
        "name",
        "descr",
        "version",
        "commands",
        "routes",
        "default",
        "usage",
        "epilog",
        "shell",
        "fancy",
        "colorful",
    )

    __displayable__ = (
        "name",
        "descr",
        "version",
        "commands",
    )

    def __new__(
            cls,
            name=Unset,
            descr=Unset,
            version=Unset,
            commands=(),
            default=None,
            *,
            usage=Unset,
            epilog=Unset,
            shell=False,
            fancy=False,
            colorful=False,
    ):
        """
        Construct an App.

        Parameters
        - name, descr, version: str | Unset
          Default to "unnamed_app", "default_description" and "0.1.0".
        - commands: Iterable[Command | Callable]
          Registered commands; plain callables go through command().
        - default: Command | Callable | None
          Handler for the default command; None prints the application help.
        - usage, epilog: str | Unset
          Replace the synthesized usage line / footer of the application help.
        - shell: bool
          run() prints faults and exits with status 1 instead of raising.
        - fancy, colorful: bool
          Panel chrome and colors for everything run() prints.

        Raises
        - TypeError/ValueError on malformed metadata.
        - DuplicateRegistrationError on command name/alias collisions, or
          when a command uses the reserved names 'help'/'version'.
        """
        metadata = {
            "name": name,
            "descr": descr,
            "version": version,
            "commands": commands,
            "default": default,
            "usage": usage,
            "epilog": epilog,
            "shell": bool(shell),
            "fancy": bool(fancy),
            "colorful": bool(colorful),
        }

        _sanitize_text(cls, metadata, "name", APP_DEFAULT_NAME)
        _sanitize_text(cls, metadata, "descr", APP_DEFAULT_DESCR)
        _sanitize_text(cls, metadata, "version", APP_DEFAULT_VERSION)
        _sanitize_text(cls, metadata, "usage", None)
        _sanitize_text(cls, metadata, "epilog", None)

        _process_commands(cls, metadata)
        _process_default(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(**{
            "name": self.name,
            "descr": self.descr,
            "version": self.version,
            "commands": self.commands,
            "default": self.default.handler,
            "usage": self.usage or Unset,
            "epilog": self.epilog or Unset,
            "shell": self.shell,
            "fancy": self.fancy,
            "colorful": self.colorful,
        } | overrides)

    def with_name(self, name, /):
        return self.__replace__(name=name)

    def with_descr(self, descr, /):
        return self.__replace__(descr=descr)

    def with_version(self, version, /):
        return self.__replace__(version=version)

    def with_command(self, object, /, *args, **kwargs):
        """
        Return a copy with one more command registered after the others.

        `object` is a Command or a handler; in the latter case the remaining
        parameters are forwarded to command(...).
        """
        if not isinstance(object, Command):
            object = command(object, *args, **kwargs)
        return self.__replace__(commands=(*self.commands, object))

    def with_default(self, default, /):
        """
        Return a copy whose default command runs `default` (a handler, a
        Command without arguments or options, or None).
        """
        return self.__replace__(default=default)

    def parse(self, prompt=Unset, /):
        """
        Parse a prompt (see tokenize()) against this application.

        Blank items of a pre-tokenized prompt are dropped before parsing.
        """
        return parse(self, tokenize(prompt))

    def run(self, prompt=Unset, /):
        """
        Parse a prompt and act on the result.

        - help/version requests are printed to stdout; returns None.
        - parse errors are surfaced through trigger(): printed after the
          relevant help with exit status 1 in shell mode, raised otherwise.
        - a default command without handler prints the application help.
        - otherwise the handler runs and its result is returned unchanged.
        """
        result = self.parse(prompt)

        match result:
            case HelpRequest(command=target):
                Console().print(build_help(self, target))
            case VersionRequest():
                Console().print(build_version(self))
            case ParseError():
                if self.shell:
                    target = result.command
                    Console(stderr=True).print(build_help(self, None if target is None or target.toplevel else target))
                    Console(stderr=True).print()
                trigger(result, app=self, shell=self.shell, fancy=self.fancy, colorful=self.colorful)
            case Invocation(command=target) if target.handler is None:
                Console().print(build_help(self))
            case Invocation():
                return result()
        return None

    def __invoke__(self, prompt=Unset):
        return self.run(prompt)


def default_app(distribution=Unset, /, **kwargs):
    """
    Build an App whose name, description and version come from the metadata
    of an installed distribution.

    Missing metadata (or a missing distribution) falls back to
    "unnamed_app", "default_description" and "0.1.0". Extra keyword
    arguments are forwarded to App(...).
    """
    name = descr = version = Unset
    if distribution is not Unset:
        try:
            info = importlib_metadata.metadata(distribution)
        except importlib_metadata.PackageNotFoundError:
            pass
        else:
            name = info.get("Name") or Unset
            descr = info.get("Summary") or Unset
            version = info.get("Version") or Unset
    return App(name, descr, version, **kwargs)


def invoke(object, prompt=Unset, /):
    """
    Convenience runner.

    - object implementing __invoke__ (an App): object.__invoke__(prompt).
    - plain callable: wrapped as the default command of an application
      named after it, then invoked.

    Returns whatever the handler returned.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)

    if callable(object):
        return invoke(App(getattr(object, "__name__", Unset), default=object), prompt)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None


__all__ = (
    "APP_DEFAULT_NAME",
    "APP_DEFAULT_DESCR",
    "APP_DEFAULT_VERSION",
    "App",
    "default_app",
    "invoke",
)
