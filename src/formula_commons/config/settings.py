"""
Runtime settings for the permission engine.

Values are read from the environment (prefix ``FORMULA_``) or a ``.env`` file.
"""
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_COST_FIELDS


class PermissionSettings(BaseSettings):
    """Settings consumed by the authorization service and repositories."""

    model_config = SettingsConfigDict(
        env_prefix="FORMULA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Fields removed from records for actors without financial visibility
    cost_fields: List[str] = Field(default_factory=lambda: list(DEFAULT_COST_FIELDS))

    # Reject unknown legacy permission names instead of skipping them
    strict_legacy_names: bool = False

    # Emit an INFO line for every denied decision; shown with
    # ENABLE_DECISION_LOGGING=true and LOG_VERBOSITY=VERBOSE
    log_denials: bool = True

    # Schema holding project_approvers and user_profiles
    database_schema: str = "public"

    @field_validator("cost_fields")
    @classmethod
    def _strip_cost_fields(cls, value: List[str]) -> List[str]:
        """Drop blanks and surrounding whitespace."""
        return [field.strip() for field in value if field and field.strip()]

    @field_validator("database_schema")
    @classmethod
    def _validate_schema(cls, value: str) -> str:
        """Only plain identifiers are interpolated into SQL."""
        if not value.replace("_", "").isalnum():
            raise ValueError(f"Invalid schema name: {value}")
        return value


@lru_cache()
def get_settings() -> PermissionSettings:
    """Get cached settings instance."""
    return PermissionSettings()
