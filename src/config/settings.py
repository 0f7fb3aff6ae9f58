# src/config/settings.py - v1
"""Typed configuration loaded from .env via pydantic-settings.

Variables use the ``IRRGRAPH_`` prefix, e.g. ``IRRGRAPH_COMMUNITY_METRIC=strict``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from irrgraph.core.errors import ConfigurationError
from irrgraph.graph.validation import check_parameters
from irrgraph.logging.logger import parse_size

__all__ = ["ConfigurationError", "Settings", "load_settings"]


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_prefix="IRRGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Community detection ===
    community_algorithm: Literal["louvain", "leiden"] = "leiden"
    community_resolution: float = 1.0
    community_weight: Literal["nweight", "ncweight"] = "ncweight"
    community_metric: Literal["average", "strict", "loose"] = "average"
    community_chains: str = "CDR3b"
    community_seed: int | None = None
    leiden_iterations: int = 100

    # === Output ===
    output_dir: Path = Path("irrgraph_output")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("log_rotation")
    @classmethod
    def validate_log_rotation(cls, v: str) -> str:  # noqa: N805
        parse_size(v)
        return v

    @field_validator("log_retention")
    @classmethod
    def validate_log_retention(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("log_retention must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_detection_parameters(self) -> Settings:
        """Apply the same checks detect_communities runs on its arguments."""
        check_parameters(
            algorithm=self.community_algorithm,
            resolution=self.community_resolution,
            weight=self.community_weight,
            metric=self.community_metric,
            chains=self.community_chains_list,
            seed=self.community_seed,
            n_iterations=self.leiden_iterations,
        )
        return self

    # --- Helpers ---

    @property
    def community_chains_list(self) -> list[str]:
        """Parse comma-separated chain names."""
        return [c.strip() for c in self.community_chains.split(",") if c.strip()]


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Raises:
        ConfigurationError: If the detection parameters are invalid.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
