"""
Deferred help templates.

Help documents are synthesized in two phases:

1. When a command is defined, the renderers in argscribe.help assemble a
   Pattern: literal text interleaved with two placeholders, COMMAND_NAME and
   SUBCOMMANDS. The pattern is frozen into a HelpTemplate.
2. When help is requested, HelpTemplate.render(command_name) substitutes the
   invocation path (program name plus every sub-command typed to get here)
   and asks the sub-command source for its current listing.

Only the exact token "{command_name}" inside text pushed through
Pattern.interpolate() becomes a placeholder; every other character, braces
included, is literal. No str.format() is involved.
"""
from enum import Enum

from .layout import CommandInfo

COMMAND_NAME_TOKEN = "{command_name}"


class Placeholder(Enum):
    COMMAND_NAME = "command_name"
    SUBCOMMANDS  = "subcommands"

    def __str__(self):
        return "{%s}" % self.value


class Pattern:
    """
    mutable builder for a HelpTemplate.

    every method returns the pattern itself so pushes can be chained:

        Pattern("Usage: ").placeholder(Placeholder.COMMAND_NAME).push(" <file>")
    """

    def __init__(self, text="", /):
        self._parts = []
        self.push(text)

    def push(self, text, /):
        if not isinstance(text, str):
            raise TypeError("push() argument must be a string")
        if not text:
            return self
        if self._parts and isinstance(self._parts[-1], str):
            self._parts[-1] += text
        else:
            self._parts.append(text)
        return self

    def placeholder(self, placeholder, /):
        if not isinstance(placeholder, Placeholder):
            raise TypeError("placeholder() argument must be a Placeholder")
        self._parts.append(placeholder)
        return self

    def interpolate(self, text, /):
        """
        push text, turning every "{command_name}" token into a placeholder.
        """
        head, *tail = text.split(COMMAND_NAME_TOKEN)
        self.push(head)
        for chunk in tail:
            self.placeholder(Placeholder.COMMAND_NAME).push(chunk)
        return self

    def freeze(self, /, commands=None, listing=None, *, escape=None):
        return HelpTemplate(self._parts, commands=commands, listing=listing, escape=escape)

    def __str__(self):
        return "".join(map(str, self._parts))


class HelpTemplate:
    """
    immutable two-slot template.

    attributes
    - parts: tuple of literal strings and Placeholder members.
    - commands: the sub-command source (anything with __commands__()), or None.
    - listing: callable turning a tuple of CommandInfo into the text that
      replaces SUBCOMMANDS.
    - escape: callable applied to the joined command name before insertion;
      identity when None.

    str(template) is the phase-1 pattern, placeholders shown as "{name}".
    """

    __slots__ = ("_parts", "_commands", "_listing", "_escape")

    def __init__(self, parts, /, commands=None, listing=None, *, escape=None):
        self._parts = tuple(parts)
        self._commands = commands
        self._listing = listing
        self._escape = escape

    @property
    def parts(self):
        return self._parts

    @property
    def commands(self):
        return self._commands

    def subcommands(self):
        """
        query the sub-command source, normalizing entries to CommandInfo.
        """
        if self._commands is None:
            return ()
        infos = []
        for entry in self._commands.__commands__():
            name, description = entry
            if not isinstance(name, str) or not isinstance(description, str):
                raise TypeError("sub-command entries must be (name, description) string pairs")
            infos.append(CommandInfo(name, description))
        return tuple(infos)

    def render(self, command_name, /):
        """
        materialize the document for one invocation path.

        command_name is either a single string (used as-is) or an iterable of
        path components joined with single spaces.
        """
        if not isinstance(command_name, str):
            command_name = tuple(command_name)
            if not all(isinstance(component, str) for component in command_name):
                raise TypeError("command name components must be strings")
            command_name = " ".join(command_name)

        values = {Placeholder.COMMAND_NAME: command_name if self._escape is None else self._escape(command_name)}
        if Placeholder.SUBCOMMANDS in self._parts:
            infos = self.subcommands()
            values[Placeholder.SUBCOMMANDS] = self._listing(infos) if self._listing is not None else ""

        return "".join(part if isinstance(part, str) else values[part] for part in self._parts)

    def __eq__(self, other):
        if not isinstance(other, HelpTemplate):
            return NotImplemented
        return self._parts == other._parts and self._commands is other._commands

    def __hash__(self):
        return hash(self._parts)

    def __str__(self):
        return "".join(map(str, self._parts))

    def __repr__(self):
        return "HelpTemplate(%r)" % str(self)


__all__ = (
    "COMMAND_NAME_TOKEN",
    "Placeholder",
    "Pattern",
    "HelpTemplate",
)
