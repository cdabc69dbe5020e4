"""Configuration and environment for the diagnostics collector."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_OUTPUT_PATH = Path("./fossa-diag.tar.gz")


class Settings(BaseSettings):
    """Collector settings loaded from environment and .env."""

    model_config = SettingsConfigDict(
        env_prefix="FOSSA_DIAG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Release selection
    release_name: str | None = Field(default=None, description="Name of the fossa-core release")
    namespace: str | None = Field(default=None, description="Namespace fossa-core is installed in")
    non_interactive: bool = Field(
        default=False,
        validation_alias=AliasChoices("FOSSA_DIAG_NON_INTERACTIVE", "NON_INTERACTIVE"),
        description="Error instead of prompting when required input is missing",
    )
    no_exit: bool = Field(
        default=False,
        validation_alias=AliasChoices("FOSSA_DIAG_NO_EXIT", "NO_EXIT"),
        description="Report every missing command before failing instead of stopping at the first",
    )

    # Kubernetes
    kubeconfig: Path | None = Field(
        default=None,
        description="Path to kubeconfig; uses KUBECONFIG env or default location if unset",
    )
    context: str | None = Field(default=None, description="Kubernetes context to use")

    # Product
    chart_name: str = Field(
        default="fossa-core",
        description="Chart identifier a release must contain to be collected",
    )
    image_marker: str = Field(
        default="fossa",
        description="Substring identifying product container images",
    )

    # Output and pacing
    output_path: Path = Field(default=DEFAULT_OUTPUT_PATH, description="Where to write the tarball")
    countdown_seconds: int = Field(
        default=15,
        ge=0,
        description="Seconds to wait before collection starts, giving the operator time to cancel",
    )
    step_pause_seconds: float = Field(
        default=3,
        ge=0,
        description="Pause before each collection step in interactive mode",
    )

    @field_validator("non_interactive", "no_exit", mode="before")
    @classmethod
    def _set_when_non_empty(cls, value: Any) -> bool:
        """Switch variables count as set whenever they hold any non-empty value."""
        if value is None:
            return False
        if isinstance(value, str):
            return value != ""
        return bool(value)


def get_settings() -> Settings:
    """Return validated settings instance."""
    return Settings()
