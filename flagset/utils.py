"""
Flagset internal helpers.

- Unset: "not provided" marker for parameters where None is a real value
  (a flag set name, a flag default).
- coalesce(value, default): swap Unset for a default, keep everything else.
- mirror("attr"): read-only property over self._attr that hands out frozen
  snapshots of container values.

    >>> coalesce(Unset, "subcommand")
    'subcommand'
    >>> coalesce(None, "subcommand") is None
    True
"""
import functools
from collections.abc import Mapping, Sequence, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker.

    There is exactly one instance per process; it is falsy, prints as "Unset"
    and cannot be subclassed.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return UnsetType, ()

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """Return default when object is Unset, object otherwise (None, 0 and "" included)."""
    return default if object is Unset else object


def _snapshot(object):
    # str is a Sequence but already immutable
    match object:
        case str():
            return object
        case Mapping():
            return MappingProxyType(dict(object))
        case Set():
            return frozenset(object)
        case Sequence():
            return tuple(object)
    return object


def mirror(name, /):
    """
    Read-only property exposing self._<name>.

    Lists come back as tuples, dicts as read-only mappings and sets as
    frozensets, so callers cannot mutate registries through the public view.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")
    attribute = "_" + name

    def getter(self):
        return _snapshot(getattr(self, attribute))

    getter.__name__ = getter.__qualname__ = name
    return property(getter)


Unset = UnsetType()


__all__ = (
    "coalesce",
    "mirror",
    "UnsetType",
    "Unset",
)
