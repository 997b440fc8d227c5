"""
Argot utilities shared by the splits, arguments, matching and commands layers.

Contents
- Unset / UnsetType
  • The "argument omitted" marker. None is a meaningful value for defaults and
    descriptions, so omission needs its own falsy singleton.

- coalesce(object, default=None)
  • Turn Unset into `default`; every other value, falsy or not, is kept.

- rename(callable, name) / @rename(name)
  • Give generated closures a readable __name__/__qualname__ for tracebacks
    and reprs.

- mirror(name)
  • Property reading `self._<name>`. Lists come back as tuples, sets as
    frozensets and mappings as fresh dicts, so callers cannot edit a parsed
    command or argument through its attributes.

- IntrospectableType
  • Metaclass of Argument and Command: mirrored read-only fields, a
    hyphenated `__typename__`, and reprs listing the mirrored fields.

- settle(object)
  • Await the object when it is awaitable and hand it back otherwise. Every
    user hook (resolver, default, probe, context.send) goes through it.

- immediate(object, name)
  • The opposite guard for the hooks that must stay synchronous: an awaitable
    result raises TypeError instead of silently counting as truthy.

Examples
    >>> coalesce(Unset, 3)
    3
    >>> coalesce("", 3)
    ''
    >>> await settle(asyncio.sleep(0, "done"))
    'done'
"""
import builtins
import functools
import inspect
import re
from collections.abc import Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker.

    There is exactly one instance. It is falsy, prints as "Unset", refuses
    subclasses, and can take part in `X | Unset` unions given to isinstance().
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __or__(self, other, /):
        try:
            return UnsetType | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | UnsetType
        except TypeError:
            return NotImplemented


def coalesce(object, default=None, /):
    """
    Return `default` when `object` is Unset, `object` otherwise.
    """
    if object is Unset:
        return default
    return object


def _rename(callable, name):
    if not builtins.callable(callable):
        raise TypeError("rename() expects a callable")
    if not isinstance(name, str):
        raise TypeError("rename() expects the name as a string")
    try:
        callable.__name__ = callable.__qualname__ = name
    except (AttributeError, TypeError):
        raise TypeError("rename() cannot update %r" % (callable,)) from None
    return callable


def rename(*parameters):
    """
    rename(callable, name) renames in place and returns the callable.
    rename(name) returns a decorator doing the same.

    Builtins and other read-only callables raise TypeError.
    """
    if len(parameters) == 2:
        return _rename(*parameters)
    if len(parameters) != 1:
        raise TypeError("rename() takes 1 or 2 arguments (%d given)" % len(parameters))

    name, = parameters
    if not isinstance(name, str):
        raise TypeError("@rename() expects the name as a string")

    def decorator(callable):
        return _rename(callable, name)

    return _rename(decorator, "rename")


def _freeze(object):
    # Strings are sequences too; they are already immutable.
    if isinstance(object, str):
        return object
    if isinstance(object, Mapping):
        return {key: _freeze(value) for key, value in object.items()}
    if isinstance(object, Sequence):
        return tuple(_freeze(item) for item in object)
    if isinstance(object, Set):
        return frozenset(_freeze(item) for item in object)
    return object


def mirror(name, /):
    """
    Build a read-only property exposing a frozen copy of `self._<name>`.

    Used by the Argument and Command metaclasses for every name listed in
    `__introspectable__`.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() expects the attribute name as a string")
    attribute = "_" + name

    def getter(self):
        return _freeze(getattr(self, attribute))

    return property(_rename(getter, name))


def _rich_repr(self):
    for name in type(self).__introspectable__:
        yield name, getattr(self, name)


def _repr(self):
    return "%s(%s)" % (type(self).__typename__, ", ".join("%s=%r" % field for field in self.__rich_repr__()))


class IntrospectableType(type):
    """
    Metaclass of the declaration objects (Argument, Command).

    A class declaring `__introspectable__ = ("id", ...)` gets
    - one mirror() property per listed name,
    - `__typename__`, its class name hyphenated and lowercased (used in
      error messages and reprs),
    - `__rich_repr__` yielding the listed names, and a `__repr__` built on it.
    """

    def __new__(mcs, name, bases, namespace, **options):
        namespace = dict(namespace, __typename__=re.sub(r"(?<!^)(?=[A-Z])", "-", name).lower())
        namespace.update((field, mirror(field)) for field in namespace.get("__introspectable__", ()))
        namespace.setdefault("__rich_repr__", _rename(_rich_repr, "__rich_repr__"))
        namespace.setdefault("__repr__", _rename(_repr, "__repr__"))
        return super().__new__(mcs, name, bases, namespace, **options)


async def settle(object, /):
    """
    Await `object` if it is awaitable; otherwise return it unchanged.
    """
    if inspect.isawaitable(object):
        return await object
    return object


def immediate(object, name, /):
    """
    Return `object` unless it is awaitable.

    Guards the hooks that must answer synchronously (`allow`, dynamic `match`).
    A coroutine handed back by such a hook is closed before raising TypeError.
    """
    if not inspect.isawaitable(object):
        return object
    if inspect.iscoroutine(object):
        object.close()
    raise TypeError("%s must return a value, not an awaitable" % name)


Unset = UnsetType()


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "settle",
    "immediate",
    "IntrospectableType",
    "UnsetType",
    "Unset",
)
