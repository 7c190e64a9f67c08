from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure the repo root is on sys.path so `import dynamo_mapper.*` works in tests.
ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT_DIR))

from dynamo_mapper.datamodeling.registry import MappingsRegistry  # noqa: E402
from dynamo_mapper.settings import Settings  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def registry(settings: Settings) -> MappingsRegistry:
    return MappingsRegistry(settings=settings)
