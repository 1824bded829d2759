"""
Help/usage synthesis.

help() and help_json() turn a command's metadata (TypeAttrs) and its ordered
field descriptors into HelpTemplates: the text document and its JSON twin.
Both walk the same fields independently and leave two slots open, the
command name and the sub-command listing, because those depend on how deep
in a sub-command chain the program was invoked.

Every description goes through require_description(), which records a
MissingDescriptionError into the per-render Errors collector and substitutes
an empty string, so one render reports every omission at once. Schema
inconsistencies (an option without a long name reaching option rendering)
raise MalformedSchemaError immediately.

Text layout

    Usage: {command_name} <foo> [-t <tag...>]

    does a thing

    Positional Arguments:
      foo               the input file

    Options:
      -t, --tag         a tag
      --help            display usage information
      --help-json       display usage information encoded in JSON
"""
import functools
from typing import NamedTuple

from .arguments import FieldKind, Optionality
from .faults import MissingDescriptionError, MalformedSchemaError
from .layout import INDENT, CommandInfo, write_description, print_subcommands
from .templates import Pattern, Placeholder
from .utils import escape_json

SECTION_SEPARATOR = "\n\n"

HELP_FLAG = "--help"
HELP_DESCRIPTION = "display usage information"
HELP_JSON_FLAG = "--help-json"
HELP_JSON_DESCRIPTION = "display usage information encoded in JSON"


class TypeAttrs(NamedTuple):
    """
    command-level metadata consumed by the renderers.
    """
    descr: str | None = None
    examples: tuple[str, ...] = ()
    notes: tuple[str, ...] = ()
    error_codes: tuple[tuple[str, str], ...] = ()
    location: str | None = None


def require_description(errors, location, description, kind, /, name=None):
    """
    Return the trimmed description, or record a missing-description fault and
    return "" so rendering can go on.

    kind is the thing being described ("type" or "field").
    """
    if description is not None and (description := description.strip()):
        return description
    errors.err(MissingDescriptionError(
        f"{kind} {name!r} with no description" if name else f"{kind} with no description",
        location=location,
        hint="add a docstring or a descr=\"...\" argument",
    ))
    return ""


def _long_name(field, /):
    if field.long_name is None:
        raise MalformedSchemaError(
            f"{field.kind.name.lower()} field reached option rendering without a long name",
            location=field.location,
        )
    return field.long_name


def _options(fields, /):
    return [field for field in fields if field.kind in (FieldKind.SWITCH, FieldKind.OPTION)]


def _positionals(fields, /):
    return [field for field in fields if field.kind is FieldKind.POSITIONAL]


def positional_usage(field, /):
    """
    `<foo>`, `[<foo>]`, `<foo...>` or `[<foo...>]`.
    """
    usage = "<" + field.display_name()
    if field.optionality is Optionality.REPEATING:
        usage += "..."
    usage += ">"
    if not field.optionality.is_required():
        usage = "[" + usage + "]"
    return usage


def option_usage(field, /):
    """
    `-f`, `--force`, `[-t <tag...>]`, ...; the short name wins when present.
    """
    long_name = _long_name(field)
    usage = "-" + field.short_name if field.short_name is not None else long_name

    match field.kind:
        case FieldKind.SWITCH:
            pass
        case FieldKind.OPTION:
            usage += " <" + field.display_name()
            if field.optionality is Optionality.REPEATING:
                usage += "..."
            usage += ">"
        case _:
            raise MalformedSchemaError(f"{field.kind.name.lower()} field cannot be rendered as an option")

    if not field.optionality.is_required():
        usage = "[" + usage + "]"
    return usage


def build_usage_command_line(fields, subcommand=None, /):
    """
    Build the part of the usage line that follows the command name.

    Positionals come first, then options in declaration order, then the
    sub-command slot.
    """
    out = ""
    for field in _positionals(fields):
        out += " " + positional_usage(field)

    for field in _options(fields):
        out += " " + option_usage(field)

    if subcommand is not None:
        if subcommand.optionality.is_required():
            out += " <command>"
        else:
            out += " [<command>]"
        out += " [<args>]"
    return out


def option_description(errors, field, /):
    """
    Describe an option like this:
      -f, --force       force, ignore minor errors. This description
                        is so long that it wraps to the next line.
    """
    long_name = _long_name(field)
    description = require_description(errors, field.location, field.descr, "field", name=long_name)
    return option_description_format(field.short_name, long_name, description)


def option_description_format(short, long_with_leading_dashes, description, /):
    name = ""
    if short is not None:
        name += "-" + short + ", "
    name += long_with_leading_dashes
    return write_description(CommandInfo(name, description))


def positional_description(errors, field, /):
    """
    Describe a positional argument like this:
      hello             positional argument description
    """
    name = field.display_name()
    description = require_description(errors, field.location, field.descr, "field", name=name)
    return write_description(CommandInfo(name, description))


def lits_section(out, heading, lits, /):
    """
    A section composed of exactly the literals provided, one indented line per
    line of each literal.
    """
    if lits:
        out.push(SECTION_SEPARATOR).push(heading)
        for lit in lits:
            for line in lit.split("\n"):
                out.push("\n" + INDENT).interpolate(line)


def help(errors, ty, fields, subcommand=None, /):
    """
    Build the text help template.

    Note: `fields` entries of the SUBCOMMAND kind are ignored in favor of the
    `subcommand` argument.
    """
    format_lit = Pattern("Usage: ").placeholder(Placeholder.COMMAND_NAME)
    format_lit.push(build_usage_command_line(fields, subcommand))

    format_lit.push(SECTION_SEPARATOR)
    format_lit.push(require_description(errors, ty.location, ty.descr, "type"))

    if positional := _positionals(fields):
        format_lit.push(SECTION_SEPARATOR).push("Positional Arguments:")
        for field in positional:
            format_lit.push(positional_description(errors, field))

    format_lit.push(SECTION_SEPARATOR).push("Options:")
    for field in _options(fields):
        format_lit.push(option_description(errors, field))
    format_lit.push(option_description_format(None, HELP_FLAG, HELP_DESCRIPTION))
    format_lit.push(option_description_format(None, HELP_JSON_FLAG, HELP_JSON_DESCRIPTION))

    if subcommand is not None:
        format_lit.push(SECTION_SEPARATOR).push("Commands:").placeholder(Placeholder.SUBCOMMANDS)

    lits_section(format_lit, "Examples:", ty.examples)
    lits_section(format_lit, "Notes:", ty.notes)

    if ty.error_codes:
        format_lit.push(SECTION_SEPARATOR).push("Error codes:")
        for code, text in ty.error_codes:
            format_lit.push("\n" + INDENT + f"{code} {text}")

    format_lit.push("\n")

    return format_lit.freeze(
        commands=subcommand.commands if subcommand is not None else None,
        listing=print_subcommands,
    )


class OptionHelp(NamedTuple):
    short: str
    long: str
    description: str


class PositionalHelp(NamedTuple):
    name: str
    description: str


class HelpJSON:
    """
    staging aggregate for the JSON document; built once per render.

    string values are stored already escaped.
    """

    def __init__(self):
        self.usage = ""
        self.description = ""
        self.positional_args = []
        self.options = []
        self.examples = ""
        self.notes = ""
        self.error_codes = []

    def option_elements_json(self):
        return ",\n    ".join(
            '{"short": "%s", "long": "%s", "description": "%s"}' % (option.short, option.long, option.description)
            for option in self.options
        )

    @staticmethod
    def help_elements_json(elements, /):
        return ",\n    ".join(
            '{"name": "%s", "description": "%s"}' % (element.name, element.description)
            for element in elements
        )


def help_json(errors, ty, fields, subcommand=None, /, *, strict=False):
    """
    Build the JSON help template.

    Key order: usage, description, options, positional, examples, notes,
    error_codes, subcommands. Every string goes through escape_json(); with
    strict=False (the default) only newlines and double quotes are escaped.

    Note: `fields` entries of the SUBCOMMAND kind are ignored in favor of the
    `subcommand` argument.
    """
    escape = functools.partial(escape_json, strict=strict)

    help_obj = HelpJSON()
    help_obj.usage = escape(build_usage_command_line(fields, subcommand))

    for field in _positionals(fields):
        name = field.display_name()
        description = require_description(errors, field.location, field.descr, "field", name=name)
        help_obj.positional_args.append(PositionalHelp(escape(name), escape(description)))

    for field in _options(fields):
        long_with_leading_dashes = _long_name(field)
        description = require_description(errors, field.location, field.descr, "field", name=long_with_leading_dashes)
        help_obj.options.append(OptionHelp(
            escape(field.short_name or ""),
            escape(long_with_leading_dashes),
            escape(description),
        ))
    help_obj.options.append(OptionHelp("", HELP_FLAG, HELP_DESCRIPTION))
    help_obj.options.append(OptionHelp("", HELP_JSON_FLAG, HELP_JSON_DESCRIPTION))

    help_obj.description = escape(require_description(errors, ty.location, ty.descr, "type"))
    help_obj.examples = escape("".join(ty.examples))
    help_obj.notes = escape("".join(ty.notes))

    for code, text in ty.error_codes:
        help_obj.error_codes.append(PositionalHelp(escape(str(code)), escape(text)))

    json_help_string = Pattern("{\n")
    json_help_string.push('"usage": "').placeholder(Placeholder.COMMAND_NAME).push(help_obj.usage).push('",\n')
    json_help_string.push('"description": "%s",\n' % help_obj.description)
    json_help_string.push('"options": [%s],\n' % help_obj.option_elements_json())
    json_help_string.push('"positional": [%s],\n' % HelpJSON.help_elements_json(help_obj.positional_args))
    json_help_string.push('"examples": "').interpolate(help_obj.examples).push('",\n')
    json_help_string.push('"notes": "').interpolate(help_obj.notes).push('",\n')
    json_help_string.push('"error_codes": [%s],\n' % HelpJSON.help_elements_json(help_obj.error_codes))
    json_help_string.push('"subcommands": [').placeholder(Placeholder.SUBCOMMANDS).push("]\n")
    json_help_string.push("}\n")

    def listing(infos):
        return HelpJSON.help_elements_json([PositionalHelp(escape(info.name), escape(info.description)) for info in infos])

    return json_help_string.freeze(
        commands=subcommand.commands if subcommand is not None else None,
        listing=listing,
        escape=escape,
    )


__all__ = (
    "SECTION_SEPARATOR",
    "HELP_FLAG",
    "HELP_DESCRIPTION",
    "HELP_JSON_FLAG",
    "HELP_JSON_DESCRIPTION",
    "TypeAttrs",
    "require_description",
    "build_usage_command_line",
    "help",
    "help_json",
)
