from __future__ import annotations

from collections import Counter

from .errors import (
    AUTO_GENERATED_NON_KEY,
    DUPLICATE_ATTRIBUTE_NAME,
    DUPLICATE_HASH_KEY,
    DUPLICATE_INDEX_KEY,
    DUPLICATE_RANGE_KEY,
    DUPLICATE_VERSION,
    MISSING_HASH_KEY,
    MappingConfigurationError,
    model_name,
)
from .mappings import Mapping


def _names(entries: list[Mapping]) -> list[str]:
    return [m.property_name for m in entries]


def validate_mappings(model: type, entries: list[Mapping]) -> None:
    """
    Check the key-role invariants over every mapping of `model`.

    Raises MappingConfigurationError naming the class and the violation.
    """
    name = model_name(model)

    hash_keys = [m for m in entries if m.is_hash_key]
    if not hash_keys:
        raise MappingConfigurationError(
            message=f"{name} does not declare a hash key",
            model=model,
            reason=MISSING_HASH_KEY,
        )
    if len(hash_keys) > 1:
        raise MappingConfigurationError(
            message=f"{name} declares more than one hash key: {_names(hash_keys)}",
            model=model,
            property_name=hash_keys[1].property_name,
            reason=DUPLICATE_HASH_KEY,
        )

    range_keys = [m for m in entries if m.is_range_key]
    if len(range_keys) > 1:
        raise MappingConfigurationError(
            message=f"{name} declares more than one range key: {_names(range_keys)}",
            model=model,
            property_name=range_keys[1].property_name,
            reason=DUPLICATE_RANGE_KEY,
        )

    counts = Counter(m.attribute_name for m in entries)
    for attribute_name, n in counts.items():
        if n > 1:
            clashing = [m for m in entries if m.attribute_name == attribute_name]
            raise MappingConfigurationError(
                message=(
                    f"{name} maps more than one property to attribute "
                    f"'{attribute_name}': {_names(clashing)}"
                ),
                model=model,
                attribute_name=attribute_name,
                reason=DUPLICATE_ATTRIBUTE_NAME,
            )

    versions = [m for m in entries if m.is_version]
    if len(versions) > 1:
        raise MappingConfigurationError(
            message=f"{name} declares more than one version attribute: {_names(versions)}",
            model=model,
            property_name=versions[1].property_name,
            reason=DUPLICATE_VERSION,
        )

    for m in entries:
        if m.is_auto_generated_key and not m.is_key:
            raise MappingConfigurationError(
                message=(
                    f"{name}.{m.property_name} is auto-generated but is neither "
                    f"the hash key nor the range key"
                ),
                model=model,
                property_name=m.property_name,
                attribute_name=m.attribute_name,
                reason=AUTO_GENERATED_NON_KEY,
            )

    index_names = set().union(*(m.index_names for m in entries))
    for index_name in sorted(index_names):
        for role, members in (
            ("hash", [m for m in entries if index_name in m.index_hash_key_names]),
            ("range", [m for m in entries if index_name in m.index_range_key_names]),
        ):
            if len(members) > 1:
                raise MappingConfigurationError(
                    message=(
                        f"{name} declares more than one {role} key for index "
                        f"'{index_name}': {_names(members)}"
                    ),
                    model=model,
                    property_name=members[1].property_name,
                    reason=DUPLICATE_INDEX_KEY,
                )
