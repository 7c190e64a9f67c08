"""Model reflection for DynamoDB items.

This package centralizes:
- mapping directives (keys, indexes, versioning, marshalling, ignore)
- property discovery across a model's class hierarchy
- inheritance-aware directive resolution
- key-role validation
- a process-wide, memoized Mappings registry

"""

from .directives import (
    Attribute,
    AutoGeneratedKey,
    HashKey,
    Ignore,
    IndexHashKey,
    IndexRangeKey,
    Marshaller,
    Marshalling,
    RangeKey,
    Table,
    Version,
)
from .errors import MappingConfigurationError, MappingError
from .mappings import Mapping, Mappings
from .registry import MappingsRegistry, get_registry, mappings_of

__all__ = [
    "Attribute",
    "AutoGeneratedKey",
    "HashKey",
    "Ignore",
    "IndexHashKey",
    "IndexRangeKey",
    "Mapping",
    "MappingConfigurationError",
    "MappingError",
    "Mappings",
    "MappingsRegistry",
    "Marshaller",
    "Marshalling",
    "RangeKey",
    "Table",
    "Version",
    "get_registry",
    "mappings_of",
]
