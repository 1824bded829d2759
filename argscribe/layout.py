"""
Two-column entry layout shared by every help section.

An entry is a name column (flags, a positional name, or a sub-command name)
followed by its description, word-wrapped under a hanging indent:

      -f, --force       force, ignore minor errors. This description
                        is so long that it wraps to the next line.

The geometry is fixed: entries start after INDENT, descriptions start at
column DESCRIPTION_INDENT and no line grows past WRAP_WIDTH unless a single
word is wider than the description column (rich folds such words).
"""
from typing import NamedTuple

from rich.console import Console
from rich.text import Text

INDENT = "  "
DESCRIPTION_INDENT = 20
WRAP_WIDTH = 80

console = Console(width=WRAP_WIDTH, color_system=None, highlight=False)


class CommandInfo(NamedTuple):
    """
    name/description pair, the unit of the sub-command capability.
    """
    name: str
    description: str


def write_description(info, /):
    """
    Render a single entry, newline first, so entries can be concatenated
    directly after a section heading.

    When the name column already reaches DESCRIPTION_INDENT the description
    starts on its own line; an empty description renders the name alone.
    Whitespace runs in the description, newlines included, are reflowed.
    """
    name, description = info
    line = INDENT + name

    if not description:
        return "\n" + line

    if len(line) < DESCRIPTION_INDENT:
        out = "\n" + line.ljust(DESCRIPTION_INDENT)
    else:
        out = "\n" + line + "\n" + " " * DESCRIPTION_INDENT

    wrapped = Text(" ".join(description.split())).wrap(console, WRAP_WIDTH - DESCRIPTION_INDENT)
    return out + ("\n" + " " * DESCRIPTION_INDENT).join(str(segment).rstrip() for segment in wrapped)


def print_subcommands(commands, /):
    """
    Concatenate the entries of every (name, description) pair, in order.
    """
    return "".join(write_description(CommandInfo(*command)) for command in commands)


__all__ = (
    "CommandInfo",
    "INDENT",
    "DESCRIPTION_INDENT",
    "WRAP_WIDTH",
    "write_description",
    "print_subcommands",
)
