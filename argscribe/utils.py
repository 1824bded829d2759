"""
Argscribe utilities.

Scope
- Small building blocks shared by the arguments, commands and help layers.
- Everything listed in __all__ is stable; other names may change.

Overview
- Unset: sentinel for "argument not given", distinct from None.
- coalesce(value, default): resolve Unset, keep every other value (None included).
- rename(...): give generated callables a readable __name__/__qualname__.
- mirror(name): read-only property over "_name", returning immutable snapshots.
- kebabize(identifier): parameter name -> command-line spelling.
- escape_json(text, strict=False): escape text for a JSON string literal.
- locate(depth): "file:line" of a caller, attached to schema diagnostics.
- IntrospectableType: metaclass shared by field and command descriptors.

Examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> kebabize("dry_run")
    'dry-run'
    >>> escape_json('say "hi"')
    'say \\\\"hi\\\\"'
"""
import builtins
import functools
import json
import os.path
import re
import sys
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel.

    - falsy, but never equal to None, 0 or "".
    - one instance per process; UnsetType() returns it.
    - usable in PEP 604 unions: isinstance(value, str | Unset).
    - sealed: subclassing raises TypeError.
    """

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return default when object is Unset, object otherwise.

    Only the sentinel is replaced: coalesce(None, 1) is None, coalesce(0, 1) is 0.
    """
    if object is Unset:
        return default
    return object


def _set_name(target, name, /):
    if not builtins.callable(target):
        raise TypeError("rename() first argument must be callable")
    if not isinstance(name, str):
        raise TypeError("rename() second argument must be a string")
    try:
        target.__name__ = target.__qualname__ = name
    except (AttributeError, TypeError):
        raise TypeError("rename() first argument must be a updatable callable") from None
    return target


def rename(*parameters):
    """
    rename(callable, name) sets __name__ and __qualname__ and returns callable;
    rename(name) returns a decorator doing the same.

    Raises TypeError for non-callables, non-string names, and callables whose
    names cannot be set.
    """
    match parameters:
        case (target, name):
            return _set_name(target, name)
        case (name,):
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def decorator(target):
                return _set_name(target, name)

            return _set_name(decorator, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    match object:
        case str():
            return object
        case Sequence():
            return tuple(_freeze(item) for item in object)
        case Mapping():
            return MappingProxyType({key: _freeze(value) for key, value in object.items()})
        case Set():
            return frozenset(_freeze(item) for item in object)
        case _:
            return object


def mirror(name, /):
    """
    Property reading "_<name>" from the instance, with no setter.

    Containers are returned as snapshots (sequences as tuples, mappings as
    read-only views, sets as frozensets), recursively, so callers can never
    mutate a descriptor through its public attributes.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def kebabize(text, /):
    """
    Convert a Python identifier into its command-line spelling.

    Leading/trailing underscores are dropped and inner runs of underscores
    become a single dash: "dry_run" -> "dry-run", "_input_" -> "input".
    """
    if not isinstance(text, str):
        raise TypeError("kebabize() argument must be a string")
    return "-".join(part for part in text.split("_") if part)


def escape_json(text, /, *, strict=False):
    """
    Escape a string for insertion between JSON double quotes.

    By default only newlines and double quotes are escaped, which keeps the
    output byte-compatible with previously published help documents. Any
    backslash or other control character is passed through untouched and may
    therefore produce invalid JSON.

    With strict=True the full JSON string escaping rules are applied (non-ASCII
    text is kept as-is).
    """
    if not isinstance(text, str):
        raise TypeError("escape_json() argument must be a string")
    if strict:
        return json.dumps(text, ensure_ascii=False)[1:-1]
    return text.replace("\n", "\\n").replace('"', '\\"')


def locate(depth=1, /):
    """
    Return "file:line" for the frame `depth` levels above the caller.

    Returns None when the interpreter does not expose frames that deep.
    """
    try:
        frame = sys._getframe(depth + 1)
    except ValueError:
        return None
    return "%s:%d" % (os.path.relpath(frame.f_code.co_filename), frame.f_lineno)


Unset = UnsetType()


def _describe(self):
    return "%s(%s)" % (type(self).__typename__, ", ".join("%s=%r" % pair for pair in self.__rich_repr__()))


def _rich_describe(self):
    owner = type(self)
    for name in coalesce(owner.__displayable__, owner.__introspectable__):
        yield name, getattr(self, name)


class IntrospectableType(type):
    """
    Metaclass for read-only descriptor classes.

    - __typename__: the class name split on capitals and hyphenated
      ("SubCommand" -> "sub-command"), used in messages and reprs.
    - every name in the class body's own __introspectable__ becomes a
      mirror() property backed by "_<name>".
    - __repr__/__rich_repr__ list __displayable__ (default: everything
      introspectable), unless the class body defines its own.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        namespace = dict(namespace)
        namespace["__typename__"] = re.sub(r"(?<!^)(?=[A-Z])", "-", name).lower()
        for field in namespace.get("__introspectable__", ()):
            namespace[field] = mirror(field)
        namespace.setdefault("__repr__", rename(_describe, "__repr__"))
        namespace.setdefault("__rich_repr__", rename(_rich_describe, "__rich_repr__"))
        return super().__new__(cls, name, bases, namespace, **options)


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "kebabize",
    "escape_json",
    "locate",

    # Types
    "UnsetType",
    "IntrospectableType",

    # Constants
    "Unset",
)
