from __future__ import annotations

import inspect
from typing import Any

from ..observability.logging import get_logger
from ..settings import Settings
from .errors import MappingConfigurationError, model_name
from .inheritance import ResolvedProperty, resolve_properties, resolve_table_name
from .mappings import Mapping, Mappings
from .validation import validate_mappings

log = get_logger("dynamo_mapper.builder")


def _marshaller_instance(marshaller: Any) -> Any:
    if marshaller is None:
        return None
    if inspect.isclass(marshaller):
        return marshaller()
    return marshaller


def build_mapping(prop: ResolvedProperty) -> Mapping | None:
    """Turn one resolved property into a Mapping; ignored properties yield None."""
    d = prop.directives
    if d.ignored:
        return None
    return Mapping(
        property_name=prop.name,
        attribute_name=d.attribute_name or prop.name,
        getter=prop.getter,
        setter=prop.setter,
        declaring_class=prop.declaring_class,
        is_hash_key=d.hash_key,
        is_range_key=d.range_key,
        index_hash_key_names=d.index_hash_key_names,
        index_range_key_names=d.index_range_key_names,
        is_auto_generated_key=d.auto_generated_key,
        is_version=d.version,
        marshaller=_marshaller_instance(d.marshaller),
        value_type=prop.value_type,
    )


def build_mappings(model: type, *, settings: Settings) -> Mappings:
    """Run discover -> extract -> resolve -> build -> validate for `model`."""
    try:
        entries: list[Mapping] = []
        for prop in resolve_properties(model, settings=settings):
            mapping = build_mapping(prop)
            if mapping is None:
                log.debug("property_ignored", model=model_name(model), property=prop.name)
                continue
            entries.append(mapping)

        validate_mappings(model, entries)
    except MappingConfigurationError as e:
        log.warning(
            "mappings_invalid",
            model=model_name(model),
            reason=e.reason,
            property=e.property_name,
            attribute=e.attribute_name,
            error=str(e),
        )
        raise

    mappings = Mappings.of(model, entries, table_name=resolve_table_name(model))
    log.info(
        "mappings_built",
        model=model_name(model),
        table=mappings.table_name,
        attributes=len(mappings),
        hash_key=mappings.hash_key.attribute_name,
        range_key=mappings.range_key.attribute_name if mappings.range_key else None,
    )
    return mappings
