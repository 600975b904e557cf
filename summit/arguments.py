r"""
Summit argument descriptors.

Overview
- Argument: positional slot of a command, identified by its display name.
  A command's ordered arguments define its exact arity.
- Option: named modifier selected by "--name" or by "-a" (one-character
  alias). When takes_value is set, the following token is its value.
- HELP / VERSION: the global options every command (resp. the default
  command) recognizes. Their names and aliases are reserved.

Metadata (sanitized on construction)
- Argument: name (non-empty), descr (optional).
- Option: name matching r"[^\W\d_](-?[^\W_]+)*", alias (single letter or digit,
  optional), descr (optional), takes_value (bool), metavar (value label in
  help; only for value-taking options, defaults to the upper-cased name).

Descriptors are immutable: every field is exposed through a read-only property.
"""
import re

from rich.text import Text

from .utils import *


def _sanitize_descr(cls, metadata, /):
    """
    Internal: 'descr' must be Unset or a non-empty (trimmed) string; Unset → None.
    """
    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


def _sanitize_option_metadata(cls, metadata, /):
    r"""
    Internal: validate the identity of a named option.

    - name: required, a shell-style word (letters first, digits allowed,
      single hyphens between segments, no leading dashes).
    - alias: Unset or "" for none; otherwise exactly one letter or digit.
    - metavar: forbidden unless takes_value; defaults to NAME for value-taking
      options.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif not re.fullmatch(r"[^\W\d_](-?[^\W_]+)*", name):
        raise ValueError(f"{cls.__typename__} 'name' must be a shell-style word without leading dashes, got {name!r}")
    metadata["name"] = name

    if not isinstance(alias := metadata["alias"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'alias' must be a string")
    elif alias and not re.fullmatch(r"[^\W_]", alias):
        raise ValueError(f"{cls.__typename__} 'alias' must be a single letter or digit, got {alias!r}")
    metadata["alias"] = alias or None

    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    if metavar and not metadata["takes_value"]:
        raise TypeError(f"{cls.__typename__} 'metavar' requires 'takes_value'")
    if metadata["takes_value"]:
        metadata["metavar"] = coalesce(metavar, name.upper().replace("-", "_"))
    else:
        metadata["metavar"] = None


class Argument(metaclass=IntrospectableType):
    """
    Positional argument of a command.

    Only its display name matters to parsing (through its position in the
    command's argument sequence); help shows it upper-cased as <NAME>.
    """

    __introspectable__ = (
        "name",
        "descr",
    )

    def __new__(cls, name, /, descr=Unset):
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} 'name' cannot be empty")

        metadata = {
            "name": name,
            "descr": descr,
        }
        _sanitize_descr(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def metavar(self):
        """
        Label used in usage lines and the ARGS table (e.g. "<NUM1>").
        """
        return "<%s>" % self.name.upper()


class Option(metaclass=IntrospectableType):
    """
    Named option of a command.

    Parameters
    - name: canonical name, selected on the command line with "--name".
    - alias: optional one-character shorthand, selected with "-a".
    - descr: short help line.
    - takes_value: when True the next token is consumed as the value.
    - metavar: label for the value in help (value-taking options only).

    The literal switch tokens are available through `names`; the parser
    matches them exactly, so "--name=value" and bundled "-ab" never match.
    """

    __introspectable__ = (
        "name",
        "alias",
        "descr",
        "takes_value",
        "metavar",
    )

    def __new__(cls, name, alias=Unset, /, descr=Unset, *, takes_value=False, metavar=Unset):
        metadata = {
            "name": name,
            "alias": alias,
            "descr": descr,
            "takes_value": bool(takes_value),
            "metavar": metavar,
        }
        _sanitize_descr(cls, metadata)
        _sanitize_option_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def names(self):
        """
        Literal switch tokens selecting this option, long form first.
        """
        return ("--" + self.name,) + (("-" + self.alias,) if self.alias else ())

    @property
    def identifiers(self):
        """
        Bare name and alias, used for collision checks.
        """
        return frozenset(filter(None, (self.name, self.alias)))


HELP = Option("help", "h", "Print help")
VERSION = Option("version", "v", "Print version")


__all__ = (
    "Argument",
    "Option",
    "HELP",
    "VERSION",
)
