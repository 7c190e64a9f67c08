from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any

from .directives import (
    Attribute,
    AutoGeneratedKey,
    Directive,
    HashKey,
    Ignore,
    IndexHashKey,
    IndexRangeKey,
    Marshalling,
    RangeKey,
    Version,
)
from .discovery import PropertySite
from .errors import CONFLICTING_DIRECTIVES, MappingConfigurationError, model_name


@dataclass(frozen=True, slots=True)
class DirectiveSet:
    """The reconciled directives of one property at one class level."""

    hash_key: bool = False
    range_key: bool = False
    auto_generated_key: bool = False
    version: bool = False
    ignored: bool = False
    attribute_name: str | None = None
    index_hash_key_names: frozenset[str] = frozenset()
    index_range_key_names: frozenset[str] = frozenset()
    marshaller: Any = None
    directives: tuple[Directive, ...] = ()

    @property
    def index_names(self) -> frozenset[str]:
        return self.index_hash_key_names | self.index_range_key_names

    @property
    def is_empty(self) -> bool:
        return not self.directives


EMPTY = DirectiveSet()

# Index directives may be stacked on one site; their index names are unioned.
_STACKABLE = (IndexHashKey, IndexRangeKey)


def _distinct(values: list[Any]) -> list[Any]:
    # Equality, not hashing: marshaller instances need not be hashable.
    out: list[Any] = []
    for v in values:
        if not any(v == seen for seen in out):
            out.append(v)
    return out


def extract_directives(site: PropertySite) -> DirectiveSet:
    """
    Read the directives on the accessor and the field of `site` and reconcile
    them into one DirectiveSet.

    A directive repeated on both sites is fine when the declarations agree;
    genuinely different values, or the same kind declared twice on one site,
    raise MappingConfigurationError.
    """
    directives = (*site.accessor_directives, *site.field_directives)
    if not directives:
        return EMPTY

    def conflict(detail: str) -> MappingConfigurationError:
        return MappingConfigurationError(
            message=(
                f"Conflicting directives on {model_name(site.declaring_class)}.{site.name}: {detail}"
            ),
            model=site.declaring_class,
            property_name=site.name,
            reason=CONFLICTING_DIRECTIVES,
        )

    for where, declared in (("getter", site.accessor_directives), ("field", site.field_directives)):
        kinds = Counter(type(d) for d in declared if not isinstance(d, _STACKABLE))
        repeated = sorted(k.__name__ for k, n in kinds.items() if n > 1)
        if repeated:
            raise conflict(f"{', '.join(repeated)} declared more than once on the {where}")

    names = _distinct(
        [
            d.attribute_name
            for d in directives
            if isinstance(d, (HashKey, RangeKey, IndexHashKey, IndexRangeKey, Attribute, Version))
            and d.attribute_name
        ]
    )
    if len(names) > 1:
        raise conflict(f"different attribute names {sorted(names)}")

    marshallers = _distinct([d.marshaller for d in directives if isinstance(d, Marshalling)])
    if len(marshallers) > 1:
        raise conflict("different marshallers")

    hash_key = any(isinstance(d, HashKey) for d in directives)
    range_key = any(isinstance(d, RangeKey) for d in directives)
    if hash_key and range_key:
        raise conflict("declared as both hash key and range key")

    ignored = any(isinstance(d, Ignore) for d in directives)
    if ignored and any(not isinstance(d, Ignore) for d in directives):
        raise conflict("Ignore combined with other directives")

    index_hash: set[str] = set()
    index_range: set[str] = set()
    for d in directives:
        if isinstance(d, IndexHashKey):
            index_hash.update(d.index_names)
        elif isinstance(d, IndexRangeKey):
            index_range.update(d.index_names)
            index_range.update(d.local_index_names)

    both = index_hash & index_range
    if both:
        raise conflict(f"hash and range key of the same index {sorted(both)}")

    return DirectiveSet(
        hash_key=hash_key,
        range_key=range_key,
        auto_generated_key=any(isinstance(d, AutoGeneratedKey) for d in directives),
        version=any(isinstance(d, Version) for d in directives),
        ignored=ignored,
        attribute_name=names[0] if names else None,
        index_hash_key_names=frozenset(index_hash),
        index_range_key_names=frozenset(index_range),
        marshaller=marshallers[0] if marshallers else None,
        directives=directives,
    )
