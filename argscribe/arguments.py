r"""
Argscribe field descriptors.

Overview
- Kinds
  • Positional: an argument identified by its position, e.g. `<file>`.
  • Switch: a named, presence-only flag, e.g. `-f/--force`.
  • Option: a named, value-bearing argument, e.g. `-t/--tag <tag>`.
  • SubCommand: the link to a set of sub-commands (at most one per command).

- Optionality
  • REQUIRED, OPTIONAL, REPEATING; governs `[...]` bracketing and the `...`
    ellipsis in the rendered usage line.

- Introspection & representation
  • FieldType metaclass exposes the fields listed in __introspectable__ as
    read-only properties and provides stable __repr__/__rich_repr__.
  • Descriptors are immutable; copy.replace() returns an updated copy (this is
    how the metadata extractor binds names taken from parameter names).

Metadata (sanitized on construction)
- descr: Unset | str (trimmed). Omitted or blank descriptions are kept as None;
  they are reported later by the help renderers, all at once.
- names (Switch/Option): validated against r"--?[^\W\d_](-?[^\W_]+)*". A name
  starting with "--" is the long name; "-x" is the short name. At most one of
  each; names may be omitted and bound later.
- arg_name (Positional/Option): Unset | non-empty str; the placeholder shown
  between angle brackets.
- optionality: an Optionality member. Switches cannot be required.

Invalid metadata raises TypeError/ValueError right away; missing descriptions
never do.

Example
    >>> tag = Option("--tag", "-t", arg_name="tag", optionality=Optionality.REPEATING, descr="a tag")
    >>> tag.display_name()
    'tag'
"""
import copy
import re
from enum import IntEnum

from .faults import MalformedSchemaError
from .utils import *


class Optionality(IntEnum):
    REQUIRED  = 0
    OPTIONAL  = 1
    REPEATING = 2

    def is_required(self):
        return self is Optionality.REQUIRED


class FieldKind(IntEnum):
    POSITIONAL = 0
    SWITCH     = 1
    OPTION     = 2
    SUBCOMMAND = 3


class FieldType(IntrospectableType):
    """
    Metaclass of field descriptors.

    Field exposes its __introspectable__ names as read-only properties; the
    concrete kinds only narrow __displayable__ and set __kind__.
    """


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize the metadata shared by every field kind.

    - descr: Unset | str. Trimmed; Unset or blank becomes None (reported later
      by the renderers, never here).
    - optionality: must be an Optionality member.
    """
    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    metadata["descr"] = coalesce(descr, "").strip() or None

    if not isinstance(metadata["optionality"], Optionality):
        raise TypeError(f"{cls.__typename__} 'optionality' must be an Optionality member")


def _sanitize_arg_name(cls, metadata, /):
    """
    Internal: normalize the explicit placeholder name (Positional/Option).
    """
    if not isinstance(arg_name := metadata["arg_name"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'arg_name' must be a string")
    elif isinstance(arg_name, str) and not (arg_name := arg_name.strip()):
        raise ValueError(f"{cls.__typename__} 'arg_name' cannot be empty")
    metadata["arg_name"] = coalesce(arg_name)


def _sanitize_named_metadata(cls, metadata, /):
    r"""
    Internal: split and validate the names of a Switch/Option.

    - Each name must match r"--?[^\W\d_](-?[^\W_]+)*".
    - "--name" is the long name; "-x" (one character) is the short name, stored
      without its dash. Single-dash long spellings ("-name") are rejected.
    - At most one long and one short name; duplicates are rejected.
    """
    long_name = short_name = None
    for name in metadata.pop("names"):
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif not re.fullmatch(r"--?[^\W\d_](-?[^\W_]+)*", name):
            raise ValueError(f"{cls.__typename__} names must be valid shell-style option names (unicodes are allowed)")
        elif name.startswith("--"):
            if long_name is not None:
                raise ValueError(f"{cls.__typename__} accepts a single long name")
            long_name = name
        elif len(name) == 2:
            if short_name is not None:
                raise ValueError(f"{cls.__typename__} accepts a single short name")
            short_name = name[1]
        else:
            raise ValueError(f"{cls.__typename__} short names must be a single character (got {name!r})")

    metadata["long_name"] = long_name
    metadata["short_name"] = short_name


class Field(metaclass=FieldType):
    """
    Common base of every field descriptor.

    Properties
    - kind: the FieldKind of the concrete class.
    - name: the declared name (a parameter name once bound), or None.
    - long_name / short_name: named-field spellings; None where not applicable.
    - arg_name: explicit placeholder override, or None.
    - optionality: an Optionality member.
    - descr: trimmed description, or None when missing.
    - location: "file:line" of the declaration, attached to diagnostics.
    """

    __introspectable__ = (
        "name",
        "long_name",
        "short_name",
        "arg_name",
        "optionality",
        "descr",
        "location",
    )
    __kind__ = Unset

    @property
    def kind(self):
        return type(self).__kind__

    def _setup(self, metadata, /):
        for name in Field.__introspectable__:
            setattr(self, "_" + name, metadata.get(name))
        return self

    def display_name(self):
        raise NotImplementedError

    def __copy__(self):
        clone = object.__new__(type(self))
        clone.__dict__.update(self.__dict__)
        return clone

    def __replace__(self, *unused, **changes):
        """
        Return a copy with some introspectable fields replaced.

        Used by the metadata extractor to bind names and locations; only fields
        that are still unset should be replaced that way.
        """
        assert not unused, "positional arguments are not allowed"
        clone = copy.copy(self)
        for name, object in changes.items():
            if name not in Field.__introspectable__:
                raise TypeError(f"{type(self).__typename__} has no field {name!r}")
            setattr(clone, "_" + name, object)
        return clone

    def bind(self, name, /, location=None):
        """
        Fill the blanks left at declaration time from a parameter name.

        - name: kept as the field name when none was declared.
        - long_name: "--" + kebabized name for Switch/Option without one.
        - location: kept when none was captured.
        """
        changes = {}
        if self.name is None:
            changes["name"] = name
        if self.kind in (FieldKind.SWITCH, FieldKind.OPTION) and self.long_name is None:
            changes["long_name"] = "--" + kebabize(name)
        if self.location is None and location is not None:
            changes["location"] = location
        return copy.replace(self, **changes) if changes else self


class Positional(Field):
    """
    Positional argument, rendered as `<name>` in usage lines.

    Parameters
    - name: Unset | str
      Field name; bound from the parameter name when omitted.
    - optionality: Optionality
      REQUIRED by default; OPTIONAL adds brackets, REPEATING adds "...".
    - descr: Unset | str
      Help description (required for rendering, reported when missing).
    - arg_name: Unset | str
      Display name overriding `name`.
    """
    __displayable__ = ("name", "arg_name", "optionality", "descr")
    __kind__ = FieldKind.POSITIONAL

    def __new__(cls, name=Unset, /, optionality=Optionality.REQUIRED, descr=Unset, *, arg_name=Unset):
        if not isinstance(name, str | Unset):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        elif isinstance(name, str) and not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} 'name' cannot be empty")

        metadata = {
            "name": coalesce(name),
            "optionality": optionality,
            "descr": descr,
            "arg_name": arg_name,
            "location": locate(1),
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_arg_name(cls, metadata)
        return super().__new__(cls)._setup(metadata)

    def display_name(self):
        if (name := self.arg_name or self.name) is None:
            raise MalformedSchemaError(
                "positional field has no name",
                location=self.location,
                hint="declare it as a command parameter or pass a name",
            )
        return name


class Switch(Field):
    """
    Presence-only named field, e.g. Switch("--force", "-f").

    Switches are never required: optionality is OPTIONAL (default) or
    REPEATING (counted switches like -vvv).
    """
    __displayable__ = ("long_name", "short_name", "optionality", "descr")
    __kind__ = FieldKind.SWITCH

    def __new__(cls, *names, optionality=Optionality.OPTIONAL, descr=Unset):
        metadata = {
            "names": names,
            "optionality": optionality,
            "descr": descr,
            "location": locate(1),
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)
        if metadata["optionality"].is_required():
            raise ValueError(f"{cls.__typename__} cannot be required")
        return super().__new__(cls)._setup(metadata)

    def display_name(self):
        if self.long_name is None:
            raise MalformedSchemaError(
                f"{type(self).__typename__} has no long name",
                location=self.location,
                hint="declare it as a command parameter or pass a '--name'",
            )
        return self.long_name


class Option(Field):
    """
    Value-bearing named field, e.g. Option("--tag", "-t", arg_name="tag").

    The value placeholder is `arg_name` when given, otherwise the long name
    without its leading dashes.
    """
    __displayable__ = ("long_name", "short_name", "arg_name", "optionality", "descr")
    __kind__ = FieldKind.OPTION

    def __new__(cls, *names, arg_name=Unset, optionality=Optionality.REQUIRED, descr=Unset):
        metadata = {
            "names": names,
            "arg_name": arg_name,
            "optionality": optionality,
            "descr": descr,
            "location": locate(1),
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)
        _sanitize_arg_name(cls, metadata)
        return super().__new__(cls)._setup(metadata)

    def display_name(self):
        if self.arg_name is not None:
            return self.arg_name
        if self.long_name is None:
            raise MalformedSchemaError(
                f"{type(self).__typename__} has no long name",
                location=self.location,
                hint="declare it as a command parameter or pass a '--name'",
            )
        return self.long_name.removeprefix("--")


class SubCommand(Field):
    """
    Link to a set of sub-commands.

    Parameters
    - commands: any object implementing __commands__() -> Sequence[CommandInfo]
      (see argscribe.commands.Commands). Queried at render time, never at
      declaration time, so the set may be filled after the parent is built.
    - optionality: REQUIRED renders `<command>`, anything else `[<command>]`.
    """
    __displayable__ = ("commands", "optionality", "descr")
    __kind__ = FieldKind.SUBCOMMAND

    def __new__(cls, commands, /, optionality=Optionality.REQUIRED, descr=Unset):
        if not callable(getattr(commands, "__commands__", None)):
            raise TypeError(f"{cls.__typename__} target must implement __commands__()")

        metadata = {
            "optionality": optionality,
            "descr": descr,
            "location": locate(1),
        }
        _sanitize_metadata(cls, metadata)
        self = super().__new__(cls)._setup(metadata)
        self._commands = commands
        return self

    @property
    def commands(self):
        return self._commands

    def display_name(self):
        return "command"


__all__ = (
    "Optionality",
    "FieldKind",
    "Field",
    "Positional",
    "Switch",
    "Option",
    "SubCommand",
)
