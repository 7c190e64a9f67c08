"""
Inheritance resolution.

Flattens a class hierarchy into one directive set per canonical property
name. The most-derived class that declares anything for a name (an accessor
or a field, annotated or not) wins outright; its directives replace the
inherited ones instead of merging with them. A subclass can therefore
un-ignore a property simply by re-declaring it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from ..observability.logging import get_logger
from ..settings import Settings
from .directives import table_of
from .discovery import DiscoveredProperty, discover_properties
from .errors import model_name
from .extraction import DirectiveSet, extract_directives

log = get_logger("dynamo_mapper.inheritance")


@dataclass(frozen=True, slots=True)
class ResolvedProperty:
    name: str
    getter: Callable[[Any], Any]
    setter: Callable[[Any, Any], None] | None
    declaring_class: type
    directives: DirectiveSet
    value_type: Any = None
    inherited: bool = False


def resolve_property(cls: type, prop: DiscoveredProperty) -> ResolvedProperty:
    site = prop.site
    return ResolvedProperty(
        name=prop.name,
        getter=prop.getter,
        setter=prop.setter,
        declaring_class=site.declaring_class,
        directives=extract_directives(site),
        value_type=prop.value_type,
        inherited=site.declaring_class is not cls,
    )


def resolve_properties(cls: type, *, settings: Settings) -> list[ResolvedProperty]:
    """Resolve every readable property of `cls` to its winning directive set."""
    out: list[ResolvedProperty] = []
    for prop in discover_properties(cls, settings=settings):
        resolved = resolve_property(cls, prop)

        if (
            resolved.setter is None
            and resolved.directives.is_empty
            and not prop.has_field
            and not settings.include_readonly_properties
        ):
            log.debug(
                "property_excluded",
                model=model_name(cls),
                property=prop.name,
                why="read_only_without_directives",
            )
            continue

        if len(prop.lineage) > 1:
            log.debug(
                "property_overridden",
                model=model_name(cls),
                property=prop.name,
                winner=model_name(resolved.declaring_class),
                overridden=[model_name(s.declaring_class) for s in prop.lineage[:-1]],
            )
        out.append(resolved)
    return out


def resolve_table_name(cls: type) -> str | None:
    table = table_of(cls)
    return table.table_name if table is not None else None
