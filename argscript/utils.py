"""
argscript record plumbing.

Overview
- Unset: the "not provided" sentinel, for options where None is meaningful.
- StorageGuard: '-' prefixed backing attributes, writable only while a record
  is being built, unreadable through normal attribute access afterwards.
- view("field"): read-only property over a backing attribute.
- RecordType / Record: turn a __fields__ declaration into an immutable record
  with equality, hashing, __repr__, __rich_repr__ and __replace__.
- fields(record): the declared fields of a record as a fresh dict.

Building a record
    with super().__new__(cls) as self:
        setattr(self, "-name", value)
    # from here on, self is frozen; copy.replace(self, name=...) builds a new one
"""
import functools
import re
from collections.abc import Sequence, Mapping, Set
from contextlib import contextmanager
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset singleton: falsy, printed as "Unset", never subclassed.

    It supports `str | Unset` in isinstance checks.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


class StorageGuard:
    """
    Guard over the '-' prefixed backing attributes of a record.

    Backing attributes are only writable inside the `with` block opened by
    __new__ and never readable by name; every other attribute is read-only.
    """
    __slots__ = ("__building",)

    @contextmanager
    def __new__(cls):
        self = super().__new__(cls)
        object.__setattr__(self, "_StorageGuard__building", True)
        try:
            yield self
        finally:
            object.__setattr__(self, "_StorageGuard__building", False)

    def __getattribute__(self, name, /):
        if isinstance(name, str) and name.startswith("-"):
            raise AttributeError("internal storage is not accessible")
        return object.__getattribute__(self, name)

    def __setattr__(self, name, value, /):
        if isinstance(name, str) and name.startswith("-") and self.__building:
            return object.__setattr__(self, name, value)
        raise AttributeError(f"{type(self).__name__!r} object is read-only")

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__name__!r} object is read-only")


def view(name, /):
    """
    Read-only property over the backing attribute '-name'.

    Sequences come back as tuples, mappings as MappingProxyType and sets as
    frozensets, so a record never hands out mutable state.
    """
    if not isinstance(name, str):
        raise TypeError("view() argument must be a string")

    def getter(self):
        value = object.__getattribute__(self, "-" + name)
        if isinstance(value, Sequence) and not isinstance(value, str):
            return tuple(value)
        if isinstance(value, Mapping):
            return MappingProxyType(value)
        if isinstance(value, Set):
            return frozenset(value)
        return value

    getter.__name__ = getter.__qualname__ = name
    return property(getter)


class RecordType(type):
    """
    Metaclass that turns __fields__ declarations into read-only records.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens).
    - Expose every name listed in __fields__ as a read-only property via view().
    - Default __match_args__ to __fields__ so records work with class patterns.
    """
    __fields__ = ()

    def __new__(cls, name, bases, namespace, **options):
        fields = namespace.get("__fields__", ())
        namespace = namespace | {
            "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
        } | {
            field: view(field) for field in fields
        }
        namespace.setdefault("__match_args__", tuple(fields))
        return super().__new__(cls, name, bases, namespace, **options)


class Record(StorageGuard, metaclass=RecordType):
    """
    Base for immutable records whose state is fully described by __fields__.

    Subclasses build themselves in __new__ (see StorageGuard) and accept every
    field as a keyword argument, so __replace__ can rebuild them.
    """
    __slots__ = ()

    def __eq__(self, other, /):
        if type(self) is not type(other):
            return NotImplemented
        return fields(self) == fields(other)

    def __hash__(self):
        return hash((type(self), *fields(self).values()))

    def __rich_repr__(self):
        """
        Yield (name, value) pairs for pretty printers (e.g., rich).
        """
        for name in type(self).__fields__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "%s(%s)" % (type(self).__typename__, ", ".join("%s=%r" % item for item in self.__rich_repr__()))

    def __replace__(self, *unused, **changes):
        assert not unused, "positional arguments are not allowed"
        if unknown := set(changes) - set(type(self).__fields__):
            raise TypeError(f"{type(self).__typename__} has no field(s) {', '.join(sorted(unknown))}")
        return type(self)(**(fields(self) | changes))


def fields(record, /):
    """
    Return a fresh dict mapping each declared field of `record` to its value.
    """
    if not isinstance(record, Record):
        raise TypeError("fields() argument must be a record")
    return {name: getattr(record, name) for name in type(record).__fields__}


Unset = UnsetType()


__all__ = (
    # Functions
    "view",
    "fields",

    # Types
    "UnsetType",
    "StorageGuard",
    "RecordType",
    "Record",

    # Constants
    "Unset",
)
