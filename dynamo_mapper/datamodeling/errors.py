from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class MappingError(Exception):
    """Base error for model reflection and attribute mapping.

    Carries enough structured context (model, property, attribute, reason)
    for the calling item engine to report which class must be fixed.
    """

    message: str
    model: type | None = None
    property_name: str | None = None
    attribute_name: str | None = None
    reason: str | None = None
    cause: Exception | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class MappingConfigurationError(MappingError):
    """The model class violates a structural mapping invariant."""


# Stable reason codes for MappingConfigurationError.
MISSING_HASH_KEY = "missing_hash_key"
DUPLICATE_HASH_KEY = "duplicate_hash_key"
DUPLICATE_RANGE_KEY = "duplicate_range_key"
DUPLICATE_ATTRIBUTE_NAME = "duplicate_attribute_name"
DUPLICATE_VERSION = "duplicate_version"
DUPLICATE_INDEX_KEY = "duplicate_index_key"
DUPLICATE_PROPERTY_SITE = "duplicate_property_site"
AUTO_GENERATED_NON_KEY = "auto_generated_non_key"
CONFLICTING_DIRECTIVES = "conflicting_directives"
UNRESOLVABLE_ANNOTATION = "unresolvable_annotation"

# Reason codes for runtime MappingError.
MISSING_KEY_VALUE = "missing_key_value"
READ_ONLY_PROPERTY = "read_only_property"


def model_name(model: type | None) -> str:
    if model is None:
        return "<unknown>"
    return f"{model.__module__}.{model.__qualname__}"
