"""
Argscribe command layer: describe commands and synthesize their help.

What this module provides
- Command: the descriptor of one argument-accepting command:
  • Field discovery from a callable's parameter defaults (Positional, Switch,
    Option, SubCommand), names bound from the parameter names.
  • Command-level metadata: description (docstring by default), examples,
    notes, and error codes.
  • Two help templates (text and JSON) synthesized once, when the command is
    defined; missing descriptions are all reported at that moment.
  • help()/help_json() materialize the templates for an invocation path.
- Commands: the sub-command capability, an ordered registry of child
  commands plus optional dynamically discovered ones.
- command(...): create a Command or a decorator that produces one.

Quick start
    from argscribe import command, Commands, Positional, Option, Switch, SubCommand, Optionality

    @command(examples=["{command_name} input.txt -t red"])
    def tool(
        foo=Positional(descr="the input file"),
        /,
        tag=Option("-t", arg_name="tag", optionality=Optionality.REPEATING, descr="a tag"),
        *,
        verbose=Switch("-v", descr="talk more"),
    ):
        "does a thing"

    print(tool.help("tool"))
    print(tool.help_json(["tool"]))

Hierarchies
- A command declares SubCommand(Commands()) to route to children; children are
  mounted with @parent.command (or Commands.add) at any time before help is
  requested, since the listing is resolved at render time.
- help() without an argument uses the names along Command.path.
"""
import inspect
import os.path
from collections.abc import Iterable, Mapping

from rich.console import Console

from .arguments import Field, FieldKind
from .faults import Errors, MalformedSchemaError, trigger
from .help import TypeAttrs, help, help_json
from .layout import CommandInfo
from .utils import *

console = Console()


class CommandType(IntrospectableType):
    """
    Metaclass of Command: read-only metadata properties and a repr that
    leaves out rendering options and templates.
    """


def _location(callback, /):
    try:
        return "%s:%d" % (os.path.relpath(inspect.getsourcefile(callback)), callback.__code__.co_firstlineno)
    except (TypeError, AttributeError):
        return None


def _process_source(cls, metadata, /):
    """
    Read field descriptors from the callback's parameter defaults.

    Each default that is a Field is bound to its parameter name (names and
    long names left blank at declaration are filled in), in signature order.
    Explicit `fields` are appended after the discovered ones.
    """
    fields = []

    if (callback := metadata["callback"]) is not Unset:
        try:
            signature = inspect.signature(callback)
        except TypeError:
            raise TypeError(f"{cls.__typename__} 'callback' must be callable") from None
        except ValueError:
            raise ValueError(f"{cls.__typename__} 'callback' must be an inspectable callable") from None

        for parameter in signature.parameters.values():
            if isinstance(parameter.default, Field):
                fields.append(parameter.default.bind(parameter.name, location=metadata["location"]))

    if isinstance(metadata["fields"], str) or not isinstance(metadata["fields"], Iterable):
        raise TypeError(f"{cls.__typename__} 'fields' must be an iterable of fields")
    for field in metadata["fields"]:
        if not isinstance(field, Field):
            raise TypeError(f"{cls.__typename__} 'fields' must only contain fields")
        fields.append(field)

    subcommands = [field for field in fields if field.kind is FieldKind.SUBCOMMAND]
    if len(subcommands) > 1:
        raise MalformedSchemaError(
            f"{cls.__typename__} declares {len(subcommands)} sub-command fields",
            location=subcommands[1].location,
            hint="a command routes to at most one set of sub-commands",
        )

    metadata["fields"] = fields
    metadata["subcommand"] = subcommands[0] if subcommands else None


def _process_strings(cls, metadata, /):
    """
    Normalize name/descr: explicit values win, then the callback's name and
    docstring. descr stays None when nothing is available; it is reported by
    the renderers, together with every other missing description.
    """
    callback = metadata["callback"]

    if not isinstance(name := metadata["name"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif isinstance(name, str) and not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif name is Unset and callback is Unset:
        raise TypeError(f"{cls.__typename__} without a callback must specify a 'name'")
    metadata["name"] = coalesce(name) or kebabize(callback.__name__)

    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    if descr is Unset and callback is not Unset:
        descr = inspect.getdoc(callback) or Unset
    metadata["descr"] = coalesce(descr, "").strip() or None


def _process_iterables(cls, metadata, /):
    """
    Normalize examples/notes (a single string is one literal) and error codes
    (a mapping or an iterable of (code, text) pairs; codes are stringified).
    """
    for key in ("examples", "notes"):
        if isinstance(lits := metadata[key], str):
            lits = (lits,)
        if not isinstance(lits, Iterable):
            raise TypeError(f"{cls.__typename__} '{key}' must be an iterable of strings")
        lits = tuple(lits)
        if not all(isinstance(lit, str) for lit in lits):
            raise TypeError(f"{cls.__typename__} '{key}' must only contain strings")
        metadata[key] = lits

    error_codes = metadata["error_codes"]
    if isinstance(error_codes, Mapping):
        error_codes = error_codes.items()
    if isinstance(error_codes, str) or not isinstance(error_codes, Iterable):
        raise TypeError(f"{cls.__typename__} 'error_codes' must be a mapping or an iterable of pairs")

    sanitized = []
    for entry in error_codes:
        try:
            code, text = entry
        except (TypeError, ValueError):
            raise TypeError(f"{cls.__typename__} 'error_codes' entries must be (code, text) pairs") from None
        if not isinstance(code, str | int) or isinstance(code, bool):
            raise TypeError(f"{cls.__typename__} error codes must be strings or integers")
        if not isinstance(text, str):
            raise TypeError(f"{cls.__typename__} error code texts must be strings")
        sanitized.append((str(code), text))
    metadata["error_codes"] = tuple(sanitized)


def _attach_to_parent(self, parent, /):
    """
    Mount self into the sub-command registry of parent.
    """
    if not isinstance(parent, Command):
        raise TypeError(f"{type(self).__typename__} 'parent' must be a command")
    if parent.subcommand is None:
        raise TypeError(f"{type(parent).__typename__} {parent.name!r} declares no sub-command field")
    if not isinstance(registry := parent.subcommand.commands, Commands):
        raise TypeError(f"{type(parent).__typename__} {parent.name!r} sub-commands are not a registry")
    registry.add(self)


class Command(metaclass=CommandType):
    """
    Descriptor of one argument-accepting command.

    Lifecycle
    - Constructed from a callback (fields read from its parameter defaults) or
      from explicit `fields`.
    - Metadata is sanitized; invalid values raise TypeError/ValueError.
    - Both help templates are synthesized right away, each render with its own
      Errors collector. Missing descriptions are surfaced together through
      trigger(): raised as SchemaExit, or printed and exited with status 1
      when shell=True.
    - help()/help_json() substitute the command name and the sub-command
      listing on every call.

    Runtime options
    - strict: escape every JSON string fully instead of newlines/quotes only.
    - shell, colorful, fancy: how definition-time diagnostics are surfaced.
    """

    __introspectable__ = (
        "name",
        "descr",
        "examples",
        "notes",
        "error_codes",
        "fields",
        "subcommand",
        "parent",
        "location",
        "strict",
        "shell",
        "colorful",
        "fancy",
    )

    __displayable__ = (
        "name",
        "descr",
        "fields",
        "parent",
        "strict",
    )

    @property
    def root(self):
        """
        Return the topmost command in the current command hierarchy.
        """
        child, parent = self, self.parent
        while parent:
            child, parent = parent, parent.parent
        return child

    @property
    def path(self):
        """
        Return the full ancestry from root to this command as a tuple.
        """
        path = [command := self]
        while command.parent:
            path.append(command := command.parent)
        return tuple(reversed(path))

    @property
    def template(self):
        return self._template

    @property
    def json_template(self):
        return self._json_template

    def __new__(
            cls,
            callback=Unset,
            /,
            parent=Unset,
            name=Unset,
            descr=Unset,
            examples=(),
            notes=(),
            error_codes=(),
            fields=(),
            *,
            strict=False,
            shell=False,
            colorful=True,
            fancy=False,
    ):
        """
        Construct a Command.

        Parameters
        - callback: Unset | Callable
          Source of fields (parameter defaults), name and docstring description.
        - parent: Unset | Command
          Mount the new command in parent's sub-command registry.
        - name: Unset | str
          Sub-command name; defaults to the kebabized callback name.
        - descr: Unset | str
          Description; defaults to the callback docstring.
        - examples, notes: Iterable[str] | str
          Literal sections; may contain "{command_name}".
        - error_codes: Mapping | Iterable[(code, text)]
        - fields: Iterable[Field]
          Extra fields appended after the discovered ones.
        """
        if callback is not Unset and not callable(callback):
            raise TypeError(f"{cls.__typename__} 'callback' must be callable")

        metadata = {
            "callback": callback,
            "name": name,
            "descr": descr,
            "examples": examples,
            "notes": notes,
            "error_codes": error_codes,
            "fields": fields,
            "location": _location(callback) if callback is not Unset else locate(1),
        }
        options = {
            "shell": bool(shell),
            "colorful": bool(colorful),
            "fancy": bool(fancy),
        }

        _process_strings(cls, metadata)
        _process_iterables(cls, metadata)
        try:
            _process_source(cls, metadata)
        except MalformedSchemaError as fault:
            trigger(fault, prog=metadata["name"], **options)

        self = super().__new__(cls)
        self._callback = metadata.pop("callback")
        for name, object in (metadata | options).items():
            setattr(self, "_" + name, object)
        self._strict = bool(strict)
        self._parent = None

        ty = TypeAttrs(self.descr, self.examples, self.notes, self.error_codes, self.location)
        try:
            errors = Errors()
            self._template = help(errors, ty, self.fields, self.subcommand)
            errors.check(prog=self.name, **options)

            errors = Errors()
            self._json_template = help_json(errors, ty, self.fields, self.subcommand, strict=self.strict)
            errors.check(prog=self.name, **options)
        except MalformedSchemaError as fault:
            trigger(fault, prog=self.name, **options)

        if parent is not Unset:
            _attach_to_parent(self, parent)
            self._parent = parent
        return self

    def _command_name(self, command_name, /):
        return coalesce(command_name, [step.name for step in self.path])

    def help(self, command_name=Unset, /):
        """
        Materialize the text help for an invocation path.

        command_name: a string, or the path components (program name followed
        by every sub-command name typed to reach this command). Defaults to the
        names along self.path.
        """
        return self._template.render(self._command_name(command_name))

    def help_json(self, command_name=Unset, /):
        """
        Materialize the JSON help for an invocation path (see help()).
        """
        return self._json_template.render(self._command_name(command_name))

    def print_help(self, command_name=Unset, /, *, json=False):
        """
        Write the text (or JSON) help to stdout through the rich console,
        verbatim: no markup, highlighting or re-wrapping.
        """
        document = self.help_json(command_name) if json else self.help(command_name)
        console.out(document, end="", highlight=False)

    def command(self, source=Unset, /, *args, **kwargs):
        """
        Create a child command mounted in this command's sub-command registry.

        Same invocation modes as the module-level command(...): direct
        (self.command(func, ...)) or decorator (@self.command(...)).
        """
        return command(source, self, *args, **kwargs)

    def __commands__(self):
        return (CommandInfo(self.name, self.descr or ""),)

    def __call__(self, *args, **kwargs):
        if self._callback is Unset:
            raise TypeError(f"{type(self).__typename__} {self.name!r} has no callback")
        return self._callback(*args, **kwargs)


class Commands:
    """
    Ordered registry of sub-commands; implements the sub-command capability.

    - static commands keep their registration order and must have unique names.
    - dynamic: optional zero-argument callable returning (name, description)
      pairs, queried on every render and listed after the static commands.
    """

    def __init__(self, *commands, dynamic=Unset):
        if dynamic is not Unset and not callable(dynamic):
            raise TypeError("commands 'dynamic' must be callable")
        self._commands = {}
        self._dynamic = dynamic
        for command in commands:
            self.add(command)

    def add(self, command, /):
        if not isinstance(command, Command):
            raise TypeError("add() argument must be a command")
        if command.name in self._commands:
            raise ValueError(f"duplicate sub-command {command.name!r}")
        self._commands[command.name] = command
        return command

    def command(self, source=Unset, /, *args, **kwargs):
        """
        Create a command and register it (direct or decorator mode).

        The command is not given a parent; use Command.command for that.
        """
        @rename("command")
        def wrapper(source, /):
            return self.add(Command(source, Unset, *args, **kwargs))

        return wrapper(source) if source is not Unset else wrapper

    def __commands__(self):
        infos = []
        for command in self._commands.values():
            infos.extend(command.__commands__())
        if self._dynamic is not Unset:
            infos.extend(CommandInfo(*entry) for entry in self._dynamic())
        return tuple(infos)

    def __getitem__(self, name):
        return self._commands[name]

    def __contains__(self, name):
        return name in self._commands

    def __iter__(self):
        return iter(tuple(self._commands.values()))

    def __len__(self):
        return len(self._commands)

    def __repr__(self):
        return "commands(%s)" % ", ".join(map(repr, self._commands))


def command(source=Unset, /, *args, **kwargs):
    """
    Create a Command or return a decorator to build it later.

    Invocation modes
    - Direct callback:
        cmd = command(func, name="x")
    - Decorator:
        @command(examples=["{command_name} --all"])
        def func(...): ...

    Parameters
    - source: Unset | Callable
      When Unset, a decorator is returned. Otherwise a Command is created.
    - *args, **kwargs: forwarded to Command.__new__.
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source):
            raise TypeError("@command() must be applied to a callable")
        return Command(source, *args, **kwargs)

    return wrapper(source) if source is not Unset else wrapper


__all__ = (
    "Command",
    "Commands",
    "command",
)

del CommandType
