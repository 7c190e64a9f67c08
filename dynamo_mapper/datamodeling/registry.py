"""
Process-wide Mappings registry.

Memoizes the Mappings of each model class, keyed by the class itself. The
first call for a class runs the full reflection pipeline; the result is
published with `dict.setdefault` so that, even when several threads race on
an uncached class, exactly one Mappings instance is ever handed out.
Failures are raised to the caller and never cached.
"""

from __future__ import annotations

from functools import lru_cache

from ..settings import Settings, get_settings
from .builder import build_mappings
from .mappings import Mappings


class MappingsRegistry:
    def __init__(self, *, settings: Settings | None = None):
        self._settings = settings or get_settings()
        self._cache: dict[type, Mappings] = {}

    @property
    def settings(self) -> Settings:
        return self._settings

    def mappings_of(self, model: type) -> Mappings:
        if not isinstance(model, type):
            raise TypeError(f"mappings_of expects a class, got {type(model).__name__}")
        cached = self._cache.get(model)
        if cached is not None:
            return cached

        built = build_mappings(model, settings=self._settings)
        return self._cache.setdefault(model, built)

    def is_cached(self, model: type) -> bool:
        return model in self._cache

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)


@lru_cache(maxsize=1)
def get_registry() -> MappingsRegistry:
    return MappingsRegistry()


def mappings_of(model: type) -> Mappings:
    return get_registry().mappings_of(model)
