from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=None, extra="ignore", populate_by_name=True)

    # Logging
    log_level: str = Field(default="INFO", validation_alias="DYNAMO_MAPPER_LOG_LEVEL")

    # Reflection
    # Unannotated properties without a setter are treated as derived values unless enabled.
    include_readonly_properties: bool = Field(
        default=False, validation_alias="DYNAMO_MAPPER_INCLUDE_READONLY_PROPERTIES"
    )
    # Stripped from private field names to pair `_order_id` with the `order_id` property.
    field_prefix: str = Field(default="_", validation_alias="DYNAMO_MAPPER_FIELD_PREFIX")

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return (v or "INFO").strip().upper() or "INFO"

    @field_validator("field_prefix")
    @classmethod
    def _require_prefix(cls, v: str) -> str:
        if not v or v.strip() != v:
            raise ValueError("DYNAMO_MAPPER_FIELD_PREFIX must be a non-empty prefix without whitespace")
        return v

    def public_summary(self) -> dict[str, object]:
        return {
            "log_level": self.log_level,
            "include_readonly_properties": bool(self.include_readonly_properties),
            "field_prefix": self.field_prefix,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
