"""
Scheduler Configuration

This module provides type-safe configuration loading using Pydantic settings.
Environment variables (SRS_ prefix) are loaded from the process environment
and an optional .env file, and validated.

Usage:
    from srs_engine.config import settings

    retention = settings.DESIRED_RETENTION
    steps = settings.LEARNING_STEPS

    # Or load the YAML defaults shipped with the package
    from srs_engine.config import settings_from_yaml
    custom = settings_from_yaml("/etc/srs/scheduler.yaml")
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from srs_engine.constants import DEFAULT_WEIGHTS, WEIGHT_COUNT

# Installed as package data of srs_engine.config
DEFAULT_CONFIG_PATH = Path(__file__).parent / "default.yaml"


class SchedulerSettings(BaseSettings):
    """
    Scheduler settings loaded from environment variables.

    Attributes are grouped by category:
    - Interval targets and bounds
    - Learning/relearning ladders (minutes per step)
    - Fuzz
    - Memory model weights
    """

    model_config = SettingsConfigDict(
        env_prefix="SRS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =========================================================================
    # INTERVALS
    # =========================================================================

    # Target recall probability at the due date; 0.9 makes interval == S
    DESIRED_RETENTION: float = Field(0.9, gt=0.0, lt=1.0)

    # Review-state interval bounds (days)
    MINIMUM_INTERVAL: int = Field(1, ge=1)
    MAXIMUM_INTERVAL: int = Field(365, ge=1)

    # =========================================================================
    # LADDERS
    # =========================================================================
    # Step durations in minutes, applied before the long-horizon model

    LEARNING_STEPS: list[float] = Field(default_factory=lambda: [1.0, 10.0])
    RELEARNING_STEPS: list[float] = Field(default_factory=lambda: [10.0])

    # =========================================================================
    # FUZZ
    # =========================================================================
    # Review -> Review intervals are scaled by 1 +/- FUZZ_FACTOR

    ENABLE_FUZZ: bool = True
    FUZZ_FACTOR: float = Field(0.05, ge=0.0, lt=1.0)

    # =========================================================================
    # MEMORY MODEL
    # =========================================================================

    WEIGHTS: list[float] = Field(default_factory=lambda: list(DEFAULT_WEIGHTS))

    @field_validator("LEARNING_STEPS", "RELEARNING_STEPS")
    @classmethod
    def _validate_ladder(cls, steps: list[float]) -> list[float]:
        if not steps:
            raise ValueError("ladder must contain at least one step")
        if any(step <= 0 for step in steps):
            raise ValueError("ladder steps must be positive")
        if any(later < earlier for earlier, later in zip(steps, steps[1:])):
            raise ValueError("ladder steps must be non-decreasing")
        return steps

    @field_validator("WEIGHTS")
    @classmethod
    def _validate_weights(cls, weights: list[float]) -> list[float]:
        if len(weights) != WEIGHT_COUNT:
            raise ValueError(f"expected {WEIGHT_COUNT} weights, got {len(weights)}")
        return weights

    @model_validator(mode="after")
    def _validate_interval_bounds(self) -> "SchedulerSettings":
        if self.MINIMUM_INTERVAL > self.MAXIMUM_INTERVAL:
            raise ValueError("MINIMUM_INTERVAL must not exceed MAXIMUM_INTERVAL")
        return self


@lru_cache()
def get_settings() -> SchedulerSettings:
    """Get cached settings instance."""
    return SchedulerSettings()


settings = get_settings()


def load_yaml_config(path: Optional[Union[str, Path]] = None) -> dict[str, Any]:
    """
    Load scheduler configuration from a YAML file.

    Args:
        path: YAML file to read (default: the packaged default.yaml)

    Returns:
        Parsed mapping, or {} when the file does not exist or is empty
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return {}

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def settings_from_yaml(path: Optional[Union[str, Path]] = None) -> SchedulerSettings:
    """
    Build settings from the `scheduler:` section of a YAML file.

    Keys are matched case-insensitively against SchedulerSettings fields.
    Values given in the file take precedence over environment variables.
    """
    section = load_yaml_config(path).get("scheduler") or {}
    return SchedulerSettings(**{key.upper(): value for key, value in section.items()})
