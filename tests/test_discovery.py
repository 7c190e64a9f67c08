from __future__ import annotations

import decimal
from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated, ClassVar

import pytest

from dynamo_mapper.datamodeling.directives import HashKey, Ignore, RangeKey
from dynamo_mapper.datamodeling.discovery import (
    SiteKind,
    declared_sites,
    discover_properties,
    field_getter,
    model_classes,
)
from dynamo_mapper.datamodeling.errors import MappingConfigurationError
from dynamo_mapper.settings import Settings

if TYPE_CHECKING:
    from decimal import Decimal


@dataclass
class Order:
    order_id: Annotated[str, HashKey()]
    placed_at: Annotated[str, RangeKey()]
    total: int = 0
    currency: str = "USD"
    SCHEMA_VERSION: ClassVar[int] = 2
    _cache: Annotated[dict | None, Ignore()] = None


class Customer:
    _customer_id: Annotated[str, HashKey()]
    _nickname: str  # no accessor: not readable
    __secret: str

    def __init__(self, customer_id: str):
        self._customer_id = customer_id
        self._display = customer_id.upper()

    @property
    def customer_id(self) -> str:
        return self._customer_id

    @customer_id.setter
    def customer_id(self, value: str) -> None:
        self._customer_id = value

    @property
    def display_name(self) -> str:
        return self._display

    def describe(self) -> str:
        return f"customer {self._customer_id}"


class VipCustomer(Customer):
    tier: str = "gold"


class BrokenAnnotations:
    _thing: Annotated[DoesNotExist, HashKey()]  # noqa: F821


class DoublyDeclared:
    value: str
    _value: str


def test_model_classes_skip_object_and_order_root_first():
    assert model_classes(VipCustomer) == (Customer, VipCustomer)


def test_declared_sites_for_dataclass_fields():
    sites = declared_sites(Order, settings=Settings())

    assert list(sites) == ["order_id", "placed_at", "total", "currency", "cache"]
    assert sites["order_id"].kind is SiteKind.FIELD
    assert sites["order_id"].public_field
    assert sites["order_id"].field_directives == (HashKey(),)
    assert "SCHEMA_VERSION" not in sites
    assert not sites["cache"].public_field


def test_declared_sites_pair_private_fields_with_accessors():
    sites = declared_sites(Customer, settings=Settings())

    assert sites["customer_id"].kind is SiteKind.BOTH
    assert sites["customer_id"].field_name == "_customer_id"
    assert sites["customer_id"].accessor is Customer.customer_id
    assert sites["display_name"].kind is SiteKind.ACCESSOR
    assert sites["nickname"].kind is SiteKind.FIELD
    assert "describe" not in sites


def test_discover_excludes_unreadable_sites():
    names = [p.name for p in discover_properties(Customer, settings=Settings())]

    # nickname has only a private field, secret is name-mangled and private
    assert names == ["customer_id", "display_name"]


def test_discover_uses_field_getters_for_public_fields():
    props = {p.name: p for p in discover_properties(Order, settings=Settings())}

    order = Order(order_id="o-1", placed_at="2024-01-01", total=3)
    assert props["order_id"].getter(order) == "o-1"
    assert props["order_id"].getter is field_getter(Order, "order_id")
    assert props["order_id"].value_type is str
    props["total"].setter(order, 7)
    assert order.total == 7
    # `_cache` is private and has no accessor
    assert "cache" not in props


def test_discover_walks_the_inheritance_chain():
    props = {p.name: p for p in discover_properties(VipCustomer, settings=Settings())}

    assert list(props) == ["customer_id", "display_name", "tier"]
    assert props["customer_id"].getter is Customer.customer_id.fget
    assert props["customer_id"].site.declaring_class is Customer
    assert props["tier"].site.declaring_class is VipCustomer


def test_discover_honors_configured_field_prefix():
    class Prefixed:
        m_id: Annotated[str, HashKey()]

        @property
        def id(self) -> str:
            return "x"

    sites = declared_sites(Prefixed, settings=Settings(field_prefix="m_"))
    assert sites["id"].kind is SiteKind.BOTH


def test_unresolvable_annotations_are_a_configuration_error():
    with pytest.raises(MappingConfigurationError) as exc:
        declared_sites(BrokenAnnotations, settings=Settings())
    assert exc.value.reason == "unresolvable_annotation"
    assert exc.value.model is BrokenAnnotations


def test_two_fields_for_one_property_are_rejected():
    with pytest.raises(MappingConfigurationError) as exc:
        declared_sites(DoublyDeclared, settings=Settings())
    assert exc.value.reason == "duplicate_property_site"
    assert exc.value.property_name == "value"


class Priced:
    id: Annotated[str, HashKey()]
    price: Decimal | None = None
    PRICE_CAP: ClassVar[Decimal]


class MissingModuleAttribute:
    _thing: Annotated[decimal.NoSuchType, HashKey()]


def test_type_checking_only_annotations_without_directives_stay_plain(registry):
    sites = declared_sites(Priced, settings=Settings())

    assert sites["price"].annotation == "Decimal | None"
    assert sites["price"].field_directives == ()
    assert "PRICE_CAP" not in sites

    mappings = registry.mappings_of(Priced)
    assert mappings.hash_key.property_name == "id"
    assert mappings.by_property_name("price") is not None


def test_annotated_fields_must_resolve_whatever_the_error():
    with pytest.raises(MappingConfigurationError) as exc:
        declared_sites(MissingModuleAttribute, settings=Settings())
    assert exc.value.reason == "unresolvable_annotation"
    assert exc.value.property_name == "_thing"
    assert isinstance(exc.value.cause, AttributeError)
