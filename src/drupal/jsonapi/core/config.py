# drupal/jsonapi/core/config.py
"""
Central configuration for the resolver runtime.

Environment variables (prefix ``DRUPAL_JSONAPI_``) override defaults.
Hook callables (transformers, value processors) are not environment
driven; they are declared in the YAML files listed in
``hooks_config_paths``.
"""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven settings with sensible defaults."""

    model_config = SettingsConfigDict(
        env_prefix="DRUPAL_JSONAPI_",
        env_file=".env",
        extra="ignore",
    )

    log_level: str = "INFO"

    drupal_url: str = Field(
        default="",
        description="Base URL of the Drupal site serving /jsonapi",
    )
    alias_prefix: str = Field(
        default="",
        description="Path prefix prepended to slugs, e.g. a language prefix",
    )
    strict_generation: bool = Field(
        default=False,
        description="Abort the run when a resource cannot be resolved",
    )
    static: bool = Field(
        default=False,
        description="Read resources from exported files instead of the live site",
    )
    resources_dir: str = Field(
        default="dist",
        description="Directory holding the exported /_resources tree",
    )
    timeout: float = Field(default=30.0, gt=0)
    max_attempts: int = Field(
        default=20,
        ge=1,
        description="Attempts per address before strict generation aborts",
    )

    hooks_config_paths: list[str] = Field(
        default_factory=lambda: ["config/hooks.yaml"]
    )


settings = Settings()
