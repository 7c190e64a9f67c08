from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator

from .errors import MISSING_KEY_VALUE, READ_ONLY_PROPERTY, MappingError, model_name


@dataclass(frozen=True, slots=True)
class Mapping:
    """How one property of a model class maps onto one item attribute."""

    property_name: str
    attribute_name: str
    getter: Callable[[Any], Any]
    setter: Callable[[Any, Any], None] | None
    declaring_class: type
    is_hash_key: bool = False
    is_range_key: bool = False
    index_hash_key_names: frozenset[str] = frozenset()
    index_range_key_names: frozenset[str] = frozenset()
    is_auto_generated_key: bool = False
    is_version: bool = False
    marshaller: Any = None
    value_type: Any = None

    @property
    def index_names(self) -> frozenset[str]:
        return self.index_hash_key_names | self.index_range_key_names

    @property
    def is_key(self) -> bool:
        return self.is_hash_key or self.is_range_key

    @property
    def is_index_key(self) -> bool:
        return bool(self.index_hash_key_names or self.index_range_key_names)

    def get(self, instance: Any) -> Any:
        return self.getter(instance)

    def set(self, instance: Any, value: Any) -> None:
        if self.setter is None:
            raise MappingError(
                message=f"{model_name(self.declaring_class)}.{self.property_name} has no write accessor",
                model=self.declaring_class,
                property_name=self.property_name,
                attribute_name=self.attribute_name,
                reason=READ_ONLY_PROPERTY,
            )
        self.setter(instance, value)

    def marshall(self, value: Any) -> Any:
        if self.marshaller is None or value is None:
            return value
        return self.marshaller.marshall(value)

    def unmarshall(self, value: Any) -> Any:
        if self.marshaller is None or value is None:
            return value
        return self.marshaller.unmarshall(self.value_type, value)


@dataclass(frozen=True, slots=True)
class Mappings:
    """The validated, immutable attribute mappings of one model class."""

    model: type
    table_name: str | None
    mappings: tuple[Mapping, ...]
    hash_key: Mapping
    range_key: Mapping | None = None
    _by_attribute: dict[str, Mapping] = field(default_factory=dict, repr=False, compare=False)
    _by_property: dict[str, Mapping] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def of(cls, model: type, entries: list[Mapping], *, table_name: str | None = None) -> Mappings:
        # Callers validate first; exactly one hash key is guaranteed here.
        hash_key = next(m for m in entries if m.is_hash_key)
        range_key = next((m for m in entries if m.is_range_key), None)
        return cls(
            model=model,
            table_name=table_name,
            mappings=tuple(entries),
            hash_key=hash_key,
            range_key=range_key,
            _by_attribute={m.attribute_name: m for m in entries},
            _by_property={m.property_name: m for m in entries},
        )

    def __len__(self) -> int:
        return len(self.mappings)

    def __iter__(self) -> Iterator[Mapping]:
        return iter(self.mappings)

    def by_attribute_name(self, attribute_name: str) -> Mapping | None:
        return self._by_attribute.get(attribute_name)

    def by_property_name(self, property_name: str) -> Mapping | None:
        return self._by_property.get(property_name)

    @property
    def attribute_names(self) -> tuple[str, ...]:
        return tuple(m.attribute_name for m in self.mappings)

    @property
    def version(self) -> Mapping | None:
        return next((m for m in self.mappings if m.is_version), None)

    @property
    def auto_generated_keys(self) -> tuple[Mapping, ...]:
        return tuple(m for m in self.mappings if m.is_auto_generated_key)

    @property
    def marshalled(self) -> tuple[Mapping, ...]:
        return tuple(m for m in self.mappings if m.marshaller is not None)

    @property
    def index_names(self) -> frozenset[str]:
        out: set[str] = set()
        for m in self.mappings:
            out |= m.index_names
        return frozenset(out)

    def index_keys(self, index_name: str) -> tuple[Mapping | None, Mapping | None]:
        """Return the (hash, range) mappings backing a secondary index."""
        hash_key = next((m for m in self.mappings if index_name in m.index_hash_key_names), None)
        range_key = next((m for m in self.mappings if index_name in m.index_range_key_names), None)
        return hash_key, range_key

    def key_of(self, instance: Any) -> dict[str, Any]:
        """Primary key attributes of `instance`, marshalled when a marshaller is declared."""
        out: dict[str, Any] = {}
        for m in (self.hash_key, self.range_key):
            if m is None:
                continue
            value = m.get(instance)
            if value is None:
                raise MappingError(
                    message=f"{model_name(self.model)} has no value for key attribute '{m.attribute_name}'",
                    model=self.model,
                    property_name=m.property_name,
                    attribute_name=m.attribute_name,
                    reason=MISSING_KEY_VALUE,
                )
            out[m.attribute_name] = m.marshall(value)
        return out
