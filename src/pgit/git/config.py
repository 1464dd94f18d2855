"""Configuration for exclude-file management."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Any, Mapping

from pydantic import Field, field_validator
from pydantic.alias_generators import to_snake
from pydantic_settings import BaseSettings, SettingsConfigDict

PGIT_MARKER_COMMENT = "# pgit-cli managed exclusions"


class FallbackBehavior(str, Enum):
    """How disabled or failing exclude operations are reported."""

    WARN = "warn"
    SILENT = "silent"
    ERROR = "error"


class GitExcludeSettings(BaseSettings):
    """Settings controlling `.git/info/exclude` management.

    Attributes:
        enabled: When False, exclude mutations are skipped and the fallback
            behavior decides how the skip is reported.
        marker_comment: Comment line introducing the managed section.
        fallback_behavior: warn, silent or error.
        validate_operations: Run integrity and conflict checks around writes.
    """

    model_config = SettingsConfigDict(
        env_prefix="PGIT_EXCLUDE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    enabled: bool = Field(default=True, description="Enable exclude-file management")
    marker_comment: str = Field(
        default=PGIT_MARKER_COMMENT,
        description="Comment line that introduces the managed section",
    )
    fallback_behavior: FallbackBehavior = Field(
        default=FallbackBehavior.WARN,
        description="Behavior when operations are disabled or fail: warn, silent, error",
    )
    validate_operations: bool = Field(
        default=True, description="Run integrity and conflict checks around writes"
    )

    @field_validator("marker_comment")
    @classmethod
    def validate_marker_comment(cls, value: str) -> str:
        marker = value.strip()
        if not marker.startswith("#"):
            raise ValueError("marker_comment must start with '#'")
        if "\n" in marker or "\r" in marker:
            raise ValueError("marker_comment must be a single line")
        return marker

    @field_validator("fallback_behavior", mode="before")
    @classmethod
    def default_fallback_behavior(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return FallbackBehavior.WARN
        if isinstance(value, str):
            return value.strip().lower()
        return value


@lru_cache
def get_exclude_settings() -> GitExcludeSettings:
    """Return memoized exclude settings."""
    return GitExcludeSettings()


def snapshot_settings(
    settings: GitExcludeSettings | Mapping[str, Any] | None,
) -> GitExcludeSettings:
    """Return a private copy of the supplied settings."""
    if settings is None:
        return get_exclude_settings().model_copy(deep=True)
    if isinstance(settings, GitExcludeSettings):
        return settings.model_copy(deep=True)
    # camelCase keys map onto the snake_case fields.
    return GitExcludeSettings(**{to_snake(str(key)): value for key, value in settings.items()})
