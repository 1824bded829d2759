"""
Argscribe faults (schema diagnostics) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every schema issue.
- SchemaException: base type that carries message + options and knows how to
  render itself in a friendly, lowercased, and actionable way.
- MissingDescriptionError: recoverable; collected, never fail-fast.
- MalformedSchemaError: internal-consistency violation; raised on the spot.
- SchemaExit: the group of all diagnostics collected by one render.
- Errors: the per-render collector passed through the help renderers.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).

Integration
- Renderers record missing descriptions into an Errors instance and keep going,
  substituting an empty string, so a single pass reports every omission.
- After the render, the owner calls Errors.check(**options): nothing happens
  when no fault was recorded; otherwise every fault is surfaced at once.
- In non-shell mode exceptions are raised; in shell mode they are printed to
  stderr via rich and the process exits with status 1.

Configuration (optional attributes on __main__)
- __styles__: palette overrides (see SchemaException.__rich__ keys).
- __codes__: FaultCode -> label mapping used by FaultCode.normalize().
- __prog__: program label shown in fault headers.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the schema layer (stable identifiers).

    grouping
    - documentation (2110x)
      • MISSING_DESCRIPTION
    - schema consistency (2111x)
      • MALFORMED_SCHEMA
    """
    MISSING_DESCRIPTION = 21101

    MALFORMED_SCHEMA    = 21111

    def normalize(self):
        """
        label shown in diagnostics: the numeric value, unless __main__.__codes__
        maps this member to something else.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _palette(defaults, colorful, /):
    styles = defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment if colorful else Text(fragment.plain)
        return Text(str(fragment), style if colorful else "")

    return styler, text


def _prog(options, /):
    return getattr(__import__("__main__"), "__prog__", options.get("prog") or "argscribe")


class Surfacing:
    """
    mixin for anything trigger() can surface; expects an `options` mapping.

    __trigger__ raises self, or with shell=True prints self to stderr and
    exits with status 1.
    """

    def __trigger__(self) -> None:
        if self.options.get("shell", False):
            console.print(self)
            sys.exit(1)
        raise self from None

    def _merge(self, overrides, /):
        return dict(self.options) | overrides


class SchemaException(Surfacing, Exception):
    __faultcode__ = FaultCode.MALFORMED_SCHEMA
    __faulttitle__ = "schema error"

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code", type(self).__faultcode__)

    @property
    def title(self):
        return self.options.get("title", type(self).__faulttitle__)

    @property
    def location(self):
        return self.options.get("location")

    @property
    def hint(self):
        return self.options.get("hint")

    def __rich__(self):
        styler, text = _palette({
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "location": "#9CA3AF",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        }, self.options.get("colorful", False))

        header = Text.assemble(
            "[ ",
            text(_prog(self.options), styler("prog-name")),
            " — ",
            text(self.code.normalize(), styler("code")),
            " | ",
            text(self.title.title(), styler("error-title")),
            " ]"
        )
        renders = []
        if self.location:
            renders.append(text("at " + self.location, styler("location")))
        renders.append(text(self.message, styler("error-message")))
        if self.hint:
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint"))))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)

    def __replace__(self, /, **overrides):
        return type(self)(self.message, **self._merge(overrides))


class MissingDescriptionError(SchemaException):
    __faultcode__ = FaultCode.MISSING_DESCRIPTION
    __faulttitle__ = "missing description"


class MalformedSchemaError(SchemaException):
    __faultcode__ = FaultCode.MALFORMED_SCHEMA
    __faulttitle__ = "malformed schema"


class SchemaExit(Surfacing, ExceptionGroup):
    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "invalid schema", tuple(exceptions))

    def __init__(self, exceptions, **options):
        super().__init__("invalid schema", tuple(exceptions))
        self.options = MappingProxyType(options)

    def __rich__(self):
        styler, text = _palette({
            "prog-name": "bold #E6E6F0",
            "title": "bold #FF4DA6",
        }, self.options.get("colorful", False))

        header = Text.assemble(
            "[ ",
            text(_prog(self.options), styler("prog-name")),
            " — ",
            text("%d %s" % (len(self.exceptions), self.message), styler("title")),
            " ]"
        )
        renders = [copy.replace(exception, **self._merge({"fancy": False})) for exception in self.exceptions]

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)

    def __replace__(self, /, **overrides):
        return type(self)(self.exceptions, **self._merge(overrides))


class Errors:
    """
    per-render diagnostic collector.

    contract
    - one instance per render call; never shared between unrelated renders.
    - err() only records; it never raises.
    - check() surfaces everything recorded so far as a single SchemaExit.
    """

    def __init__(self):
        self._faults = []

    def err(self, fault, /):
        if not isinstance(fault, SchemaException):
            raise TypeError("err() argument must be a schema exception")
        self._faults.append(fault)

    def check(self, **options):
        if self._faults:
            trigger(SchemaExit(self._faults), **options)

    def __iter__(self):
        return iter(tuple(self._faults))

    def __len__(self):
        return len(self._faults)

    def __bool__(self):
        return bool(self._faults)

    def __repr__(self):
        return "Errors(%r)" % (self._faults,)


def trigger(fault, /, **options):
    """
    merge runtime options into a fault (copy.replace) and surface the result.

    shell decides between raising and printing + exit(1); prog, colorful,
    fancy, hint and location only change how the fault renders.
    """
    for hook in ("__trigger__", "__replace__"):
        if not callable(getattr(fault, hook, None)):
            raise TypeError(f"trigger() argument must implement {hook}()")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "Surfacing",
    "SchemaException",
    "MissingDescriptionError",
    "MalformedSchemaError",
    "SchemaExit",
    "Errors",
    "trigger",
)
