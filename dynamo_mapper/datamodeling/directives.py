"""
Mapping directives.

Directives are small frozen values that describe how a property of a model
class maps onto an attribute of a DynamoDB item. The same directive can be
attached in two places:

- on an accessor, by decorating a `property` getter (above or below
  `@property`):

      @HashKey()
      @property
      def order_id(self) -> str: ...

- on a field, inside `typing.Annotated`:

      _order_id: Annotated[str, HashKey()]

`Table` is the only class-level directive.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Annotated, Any, Protocol, get_args, get_origin, runtime_checkable

DIRECTIVES_ATTR = "__dynamo_directives__"
TABLE_ATTR = "__dynamo_table__"


@runtime_checkable
class Marshaller(Protocol):
    """Converts one property value to and from its stored string form."""

    def marshall(self, value: Any) -> str: ...

    def unmarshall(self, value_type: Any, value: str) -> Any: ...


class Directive:
    """Base class for property-level directives."""

    def __call__(self, target: Any) -> Any:
        fn = target.fget if isinstance(target, property) else target
        if not inspect.isfunction(fn):
            raise TypeError(
                f"{type(self).__name__} can only decorate a property or its getter, "
                f"not {type(target).__name__}"
            )
        # Decorators apply bottom-up; prepend to keep source order.
        existing = fn.__dict__.get(DIRECTIVES_ATTR, ())
        setattr(fn, DIRECTIVES_ATTR, (self, *existing))
        return target


@dataclass(frozen=True)
class HashKey(Directive):
    attribute_name: str | None = None


@dataclass(frozen=True)
class RangeKey(Directive):
    attribute_name: str | None = None


@dataclass(frozen=True, init=False)
class IndexHashKey(Directive):
    """Partition key of one or more global secondary indexes."""

    index_names: tuple[str, ...]
    attribute_name: str | None = None

    def __init__(self, *index_names: str, attribute_name: str | None = None):
        if not index_names:
            raise TypeError("IndexHashKey requires at least one index name")
        object.__setattr__(self, "index_names", tuple(index_names))
        object.__setattr__(self, "attribute_name", attribute_name)


@dataclass(frozen=True, init=False)
class IndexRangeKey(Directive):
    """Sort key of one or more global and/or local secondary indexes."""

    index_names: tuple[str, ...]
    local_index_names: tuple[str, ...] = ()
    attribute_name: str | None = None

    def __init__(
        self,
        *index_names: str,
        local_index_names: str | tuple[str, ...] | list[str] = (),
        attribute_name: str | None = None,
    ):
        if isinstance(local_index_names, str):
            local_index_names = (local_index_names,)
        if not index_names and not local_index_names:
            raise TypeError("IndexRangeKey requires at least one global or local index name")
        object.__setattr__(self, "index_names", tuple(index_names))
        object.__setattr__(self, "local_index_names", tuple(local_index_names))
        object.__setattr__(self, "attribute_name", attribute_name)


@dataclass(frozen=True)
class Attribute(Directive):
    attribute_name: str | None = None


@dataclass(frozen=True)
class AutoGeneratedKey(Directive):
    pass


@dataclass(frozen=True)
class Version(Directive):
    attribute_name: str | None = None


@dataclass(frozen=True)
class Marshalling(Directive):
    marshaller: Any


@dataclass(frozen=True)
class Ignore(Directive):
    pass


@dataclass(frozen=True)
class Table:
    """Class decorator naming the table a model is stored in."""

    table_name: str

    def __call__(self, cls: type) -> type:
        if not isinstance(cls, type):
            raise TypeError(f"Table can only decorate a class, not {type(cls).__name__}")
        setattr(cls, TABLE_ATTR, self)
        return cls


def directives_of(obj: Any) -> tuple[Directive, ...]:
    """Return the directives attached to a getter, a property or an `Annotated` type."""
    if obj is None:
        return ()
    if isinstance(obj, property):
        obj = obj.fget
        if obj is None:
            return ()
    if get_origin(obj) is Annotated:
        return tuple(m for m in get_args(obj)[1:] if isinstance(m, Directive))
    return tuple(getattr(obj, DIRECTIVES_ATTR, ()))


def table_of(cls: type) -> Table | None:
    # Nearest declaration along the MRO; subclasses inherit their base's table.
    for klass in cls.__mro__:
        table = vars(klass).get(TABLE_ATTR)
        if isinstance(table, Table):
            return table
    return None
