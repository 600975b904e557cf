"""
Summit command layer: named units of functionality with a fixed arity.

What this module provides
- Command: an immutable definition binding a handler to a name, an optional alias,
  a description, an ordered sequence of Arguments (its exact arity) and a
  set of Options unique by name and alias.
- command(...): build a Command from a plain callable, directly or as a
  decorator (name and description default to the callable's __name__ and
  docstring).

Handlers
- A handler is any callable accepting (arguments, options):
  • arguments: tuple[str, ...] bound in declaration order.
  • options: Mapping[str, str | None] keyed by canonical option name; the
    value is None for options that do not take one.
- Its return value (typically str | None) is passed back untouched, and so
  are the exceptions it raises.

Quick start
    from summit import command

    @command(alias="d", arguments=("num1", "num2"))
    def div(arguments, options):
        "Divides two numbers"
        ...

    div = div.with_option("round", "r", "Round the result")

Every builder (with_argument, with_option) returns a new Command validated
from scratch; collisions raise DuplicateRegistrationError right away so the
parser never sees a malformed command.
"""
import inspect
from collections.abc import Iterable

from rich.text import Text

from .arguments import Argument, Option, HELP, VERSION
from .faults import FaultCode, DuplicateRegistrationError
from .utils import *


def _sanitize_word(cls, metadata, name, /, *, required, routed=True):
    """
    Internal: validate a command name or alias.

    - must be a non-empty string.
    - when routed, it must also be a single word not starting with '-' (it
      would read as an option on the command line).
    - when not required, Unset/None/"" mean "absent" and become None.
    """
    word = metadata[name]
    if not required and (word is Unset or word is None or word == ""):
        metadata[name] = None
        return
    if not isinstance(word, str):
        raise TypeError(f"{cls.__typename__} {name!r} must be a string")
    elif not (word := word.strip()):
        raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
    elif routed and (word.startswith("-") or any(character.isspace() for character in word)):
        raise ValueError(f"{cls.__typename__} {name!r} must be a single word not starting with '-', got {word!r}")
    metadata[name] = word


def _process_arguments(cls, metadata):
    """
    Normalize 'arguments' into a tuple of Argument (strings are promoted).
    """
    if not isinstance(metadata["arguments"], Iterable) or isinstance(metadata["arguments"], str):
        raise TypeError(f"{cls.__typename__} 'arguments' must be an iterable of arguments")
    arguments = []
    for argument in metadata["arguments"]:
        if isinstance(argument, str):
            argument = Argument(argument)
        elif not isinstance(argument, Argument):
            raise TypeError(f"{cls.__typename__} 'arguments' must be an iterable of arguments")
        arguments.append(argument)
    metadata["arguments"] = tuple(arguments)


def _process_options(cls, metadata):
    """
    Validate options and build the switch table.

    - every option name/alias must be unique within the command.
    - help/h is reserved everywhere; version/v is reserved on the top-level
      (default) command.
    - 'switches' maps each literal token ("--name", "-a") to its Option and
      includes the global options.
    """
    if not isinstance(metadata["options"], Iterable) or isinstance(metadata["options"], str):
        raise TypeError(f"{cls.__typename__} 'options' must be an iterable of options")

    reserved = (HELP, VERSION) if metadata["toplevel"] else (HELP,)
    owners = {identifier: option for option in reserved for identifier in option.identifiers}
    options = []

    for option in metadata["options"]:
        if not isinstance(option, Option):
            raise TypeError(f"{cls.__typename__} 'options' must be an iterable of options")
        for identifier in sorted(option.identifiers, key=len, reverse=True):
            if identifier in owners:
                kind = "reserved" if owners[identifier] in reserved else "already in use"
                raise DuplicateRegistrationError(
                    "option %r of command %r is %s" % (identifier, metadata["name"], kind),
                    title="duplicate registration",
                    code=FaultCode.DUPLICATE_REGISTRATION,
                    hint="pick another name or alias for option %r" % option.name,
                    name=identifier,
                    owner=metadata["name"],
                )
            owners[identifier] = option
        options.append(option)

    metadata["options"] = tuple(options)
    metadata["switches"] = {
        switch: option for option in (*options, *reserved) for switch in option.names
    }


class Command(metaclass=IntrospectableType):
    """
    Immutable command definition.

    Properties
    - name, alias, descr: identity and help copy (alias is None when absent).
    - arguments: tuple[Argument, ...]; its length is the exact arity.
    - options: tuple[Option, ...] in declaration order (global options excluded).
    - switches: Mapping[str, Option] from literal tokens to options, including
      the global help (and version, for the top-level command).
    - handler: the callable invoked with validated inputs, or None.
    - toplevel: True for an application's default command.
    """

    __introspectable__ = (
        "name",
        "alias",
        "descr",
        "arguments",
        "options",
        "switches",
        "handler",
        "toplevel",
    )

    __displayable__ = (
        "name",
        "alias",
        "descr",
        "arguments",
        "options",
    )

    def __new__(
            cls,
            handler=None,
            /,
            name=Unset,
            alias=Unset,
            descr=Unset,
            arguments=(),
            options=(),
            *,
            toplevel=False,
    ):
        """
        Construct a Command.

        Parameters
        - handler: callable | None
          Invoked as handler(arguments, options) once inputs are validated.
        - name: str | Unset
          Defaults to handler.__name__.
        - alias: str | Unset
          Alternative name; empty means none. It may equal the name.
        - descr: str | Text | Unset
          Defaults to the handler's docstring.
        - arguments: Iterable[Argument | str]
          Positional arguments in binding order.
        - options: Iterable[Option]
          Recognized options; unique by name and alias.
        - toplevel: bool (keyword-only)
          Marks an application's default command: no arguments, no options
          of its own, and the global version option is recognized. Its name
          only has to be non-empty (it may contain spaces).

        Raises
        - TypeError/ValueError on malformed metadata.
        - DuplicateRegistrationError on option name/alias collisions.
        """
        if handler is not None and not callable(handler):
            raise TypeError(f"{cls.__typename__} 'handler' must be callable")

        if name is Unset and handler is None:
            raise TypeError(f"{cls.__typename__} without a handler must specify a 'name'")

        metadata = {
            "name": coalesce(name, getattr(handler, "__name__", Unset)),
            "alias": alias,
            "descr": coalesce(descr, inspect.getdoc(handler) or Unset if handler is not None else Unset),
            "arguments": arguments,
            "options": options,
            "handler": handler,
            "toplevel": bool(toplevel),
        }

        _sanitize_word(cls, metadata, "name", required=True, routed=not metadata["toplevel"])
        _sanitize_word(cls, metadata, "alias", required=False)

        if not isinstance(descr := metadata["descr"], str | Text | Unset):
            raise TypeError(f"{cls.__typename__} 'descr' must be a string")
        elif isinstance(descr, str):
            descr = descr.strip() or Unset
        metadata["descr"] = coalesce(descr)

        _process_arguments(cls, metadata)

        if metadata["toplevel"] and (metadata["arguments"] or tuple(metadata["options"])):
            raise ValueError(f"default {cls.__typename__} cannot declare arguments or options")

        _process_options(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def arity(self):
        """
        Exact number of positional tokens this command requires.
        """
        return len(self._arguments)

    @property
    def identifiers(self):
        """
        Name and alias (when present), used for routing and collision checks.
        """
        return frozenset(filter(None, (self.name, self.alias)))

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(
            overrides.pop("handler", self.handler),
            **{
                "name": self.name,
                "alias": self.alias,
                "descr": self.descr or Unset,
                "arguments": self.arguments,
                "options": self.options,
                "toplevel": self.toplevel,
            } | overrides
        )

    def with_argument(self, argument, /, descr=Unset):
        """
        Return a copy with one more positional argument appended.

        `argument` is an Argument or a display name.
        """
        if not isinstance(argument, Argument):
            argument = Argument(argument, descr)
        return self.__replace__(arguments=(*self.arguments, argument))

    def with_option(self, option, /, alias=Unset, descr=Unset, *, takes_value=False, metavar=Unset):
        """
        Return a copy recognizing one more option.

        `option` is an Option or a name; the remaining parameters are
        forwarded to Option(...) in the latter case.
        """
        if not isinstance(option, Option):
            option = Option(option, alias, descr, takes_value=takes_value, metavar=metavar)
        return self.__replace__(options=(*self.options, option))


def command(handler=Unset, /, *args, **kwargs):
    """
    Create a Command or return a decorator to build it later.

    Invocation modes
    - Direct:
        cmd = command(func, name="x", arguments=("a", "b"))
    - Decorator:
        @command(alias="x")
        def func(arguments, options): ...
    - Bare decorator:
        @command
        def func(arguments, options): ...

    Parameters
    - handler: Unset | Callable
      When Unset, a decorator is returned.
    - *args, **kwargs: forwarded to Command(...) (name, alias, descr,
      arguments, options).
    """
    @rename("command")
    def wrapper(handler, /):
        if not callable(handler):
            raise TypeError("@command() must be applied to a callable")
        return Command(handler, *args, **kwargs)

    return wrapper(handler) if handler is not Unset else wrapper


__all__ = (
    "Command",
    "command",
)
