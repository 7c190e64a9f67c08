"""
Property discovery.

Enumerates the candidate properties of a model class across its full MRO
(excluding `object`). A property is contributed by a `property` in a class
body (the accessor site) and/or by an entry in that class's own
`__annotations__` (the field site). Private fields (`_order_id`) pair with the
accessor of the same name minus the configured prefix; public fields are
readable properties on their own.
"""

from __future__ import annotations

import inspect
import operator
import sys
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Annotated, Any, Callable, ClassVar, get_args, get_origin

from ..observability.logging import get_logger
from ..settings import Settings
from .directives import Directive, directives_of
from .errors import (
    DUPLICATE_PROPERTY_SITE,
    UNRESOLVABLE_ANNOTATION,
    MappingConfigurationError,
    model_name,
)

log = get_logger("dynamo_mapper.discovery")


class SiteKind(str, Enum):
    ACCESSOR = "accessor"
    FIELD = "field"
    BOTH = "both"


@dataclass(frozen=True, slots=True)
class PropertySite:
    """Everything one class body declares for one canonical property name."""

    name: str
    declaring_class: type
    accessor: property | None = None
    field_name: str | None = None
    annotation: Any = None

    @property
    def kind(self) -> SiteKind:
        if self.accessor is not None and self.field_name is not None:
            return SiteKind.BOTH
        if self.accessor is not None:
            return SiteKind.ACCESSOR
        return SiteKind.FIELD

    @property
    def public_field(self) -> bool:
        return self.field_name is not None and self.field_name == self.name

    @property
    def accessor_directives(self) -> tuple[Directive, ...]:
        return directives_of(self.accessor)

    @property
    def field_directives(self) -> tuple[Directive, ...]:
        if self.field_name is None:
            return ()
        return directives_of(self.annotation)


@dataclass(frozen=True, slots=True)
class DiscoveredProperty:
    """A readable property with its effective accessor and its declaration lineage."""

    name: str
    getter: Callable[[Any], Any]
    setter: Callable[[Any, Any], None] | None
    # Root-most class first; the last entry is the most-derived declaration.
    lineage: tuple[PropertySite, ...]
    value_type: Any = None

    @property
    def site(self) -> PropertySite:
        return self.lineage[-1]

    @property
    def has_field(self) -> bool:
        return any(s.field_name is not None for s in self.lineage)


@lru_cache(maxsize=None)
def field_getter(owner: type, name: str) -> Callable[[Any], Any]:
    # Cached per declaring class so subclasses share the same getter object.
    return operator.attrgetter(name)


@lru_cache(maxsize=None)
def field_setter(owner: type, name: str) -> Callable[[Any, Any], None]:
    def _set(instance: Any, value: Any) -> None:
        setattr(instance, name, value)

    _set.__qualname__ = f"{owner.__qualname__}.{name}.<setter>"
    return _set


def model_classes(cls: type) -> tuple[type, ...]:
    """The classes whose bodies can declare properties, root-most first."""
    return tuple(k for k in reversed(cls.__mro__) if k is not object)


def _unresolvable(klass: type, field_name: str | None, e: Exception) -> MappingConfigurationError:
    where = f"{model_name(klass)}.{field_name}" if field_name else model_name(klass)
    return MappingConfigurationError(
        message=f"Cannot resolve field annotation of {where}: {e}",
        model=klass,
        property_name=field_name,
        reason=UNRESOLVABLE_ANNOTATION,
        cause=e,
    )


def _own_annotations(klass: type) -> dict[str, Any]:
    """
    The class's own annotations, with string annotations evaluated one by one.

    An annotation that cannot be resolved (e.g. a `TYPE_CHECKING`-only import)
    stays a plain string unless it is an `Annotated[...]` that may carry
    directives; those must resolve.
    """
    try:
        raw = dict(inspect.get_annotations(klass))
    except Exception as e:  # noqa: BLE001
        raise _unresolvable(klass, None, e) from e

    module = sys.modules.get(klass.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    localns = dict(vars(klass))

    out: dict[str, Any] = {}
    for field_name, annotation in raw.items():
        if not isinstance(annotation, str):
            out[field_name] = annotation
            continue
        try:
            out[field_name] = eval(annotation, globalns, localns)  # noqa: S307
        except Exception as e:  # noqa: BLE001
            if "Annotated" in annotation:
                raise _unresolvable(klass, field_name, e) from e
            log.debug(
                "annotation_unresolved",
                model=model_name(klass),
                field=field_name,
                annotation=annotation,
                error=str(e),
            )
            out[field_name] = annotation
    return out


def _is_class_var(annotation: Any) -> bool:
    if isinstance(annotation, str):
        head = annotation.strip().split("[", 1)[0].strip()
        return head in ("ClassVar", "typing.ClassVar", "t.ClassVar")
    return annotation is ClassVar or get_origin(annotation) is ClassVar


def _canonical_field_name(field_name: str, prefix: str) -> str:
    if field_name.startswith(prefix) and len(field_name) > len(prefix):
        return field_name[len(prefix):]
    return field_name


def declared_sites(klass: type, *, settings: Settings) -> dict[str, PropertySite]:
    """Return the property sites declared directly in one class body."""
    accessors: dict[str, property] = {}
    for attr, value in vars(klass).items():
        if attr.startswith("__") or not isinstance(value, property):
            continue
        accessors[attr] = value

    fields: dict[str, tuple[str, Any]] = {}
    for field_name, annotation in _own_annotations(klass).items():
        if field_name.startswith("__") or _is_class_var(annotation):
            continue
        name = _canonical_field_name(field_name, settings.field_prefix)
        if name in fields:
            raise MappingConfigurationError(
                message=(
                    f"{model_name(klass)} declares both '{fields[name][0]}' and "
                    f"'{field_name}' for property '{name}'"
                ),
                model=klass,
                property_name=name,
                reason=DUPLICATE_PROPERTY_SITE,
            )
        fields[name] = (field_name, annotation)

    sites: dict[str, PropertySite] = {}
    for name in [*accessors, *(n for n in fields if n not in accessors)]:
        field_name, annotation = fields.get(name, (None, None))
        sites[name] = PropertySite(
            name=name,
            declaring_class=klass,
            accessor=accessors.get(name),
            field_name=field_name,
            annotation=annotation,
        )
    return sites


def _effective_accessor(cls: type, name: str) -> property | None:
    # The accessor an instance of `cls` actually uses: most-derived wins.
    for klass in cls.__mro__:
        if name in vars(klass):
            value = vars(klass)[name]
            # A plain class attribute (field default, slot) shadows inherited accessors.
            return value if isinstance(value, property) else None
    return None


def _value_type(lineage: tuple[PropertySite, ...]) -> Any:
    for site in reversed(lineage):
        if site.field_name is None:
            continue
        if get_origin(site.annotation) is Annotated:
            return get_args(site.annotation)[0]
        return site.annotation
    return None


def discover_properties(cls: type, *, settings: Settings) -> list[DiscoveredProperty]:
    """
    Enumerate the readable properties of `cls`.

    One entry per canonical name, in first-declaration order (root class first).
    Sites with no readable accessor and no public field are excluded.
    """
    lineages: dict[str, list[PropertySite]] = {}
    for klass in model_classes(cls):
        for name, site in declared_sites(klass, settings=settings).items():
            lineages.setdefault(name, []).append(site)

    out: list[DiscoveredProperty] = []
    for name, sites in lineages.items():
        lineage = tuple(sites)
        accessor = _effective_accessor(cls, name)

        getter: Callable[[Any], Any] | None = None
        setter: Callable[[Any, Any], None] | None = None
        if accessor is not None:
            getter = accessor.fget
            setter = accessor.fset
        else:
            public = [s for s in lineage if s.public_field]
            if public:
                owner = public[-1].declaring_class
                getter = field_getter(owner, name)
                setter = field_setter(owner, name)

        if getter is None:
            log.debug(
                "property_excluded",
                model=model_name(cls),
                property=name,
                why="no_readable_site",
            )
            continue

        out.append(
            DiscoveredProperty(
                name=name,
                getter=getter,
                setter=setter,
                lineage=lineage,
                value_type=_value_type(lineage),
            )
        )
    return out
