"""
Engine settings.

Settings are read from an optional JSON file; anything missing takes its
default, and an unreadable file yields the defaults with a warning.
"""

import json
import logging
from pathlib import Path
from typing import Any

from catchery import log_warning
from pydantic import BaseModel, Field, ValidationError, field_validator

from rollforge.core.constants import (
    DEFAULT_AVAILABLE_FACES,
    DEFAULT_MAX_CANDIDATES,
    DEFAULT_SIMULATION_COUNT,
    MAX_TRIALS,
)


class EngineSettings(BaseModel):
    """Defaults used by the command line and the interactive console."""

    simulation_count: int = Field(
        default=DEFAULT_SIMULATION_COUNT,
        ge=1,
        le=MAX_TRIALS,
        description="Rolls simulated for a histogram",
    )
    max_candidates: int = Field(
        default=DEFAULT_MAX_CANDIDATES,
        ge=1,
        description="Combinations kept by the generator",
    )
    available_faces: list[str] = Field(
        default_factory=lambda: list(DEFAULT_AVAILABLE_FACES),
        description="Face tags offered to the generator",
    )
    locale: str = Field(default="en", description="Locale used to render labels")
    log_level: str = Field(default="INFO", description="Logging level name")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"unknown log level: {value}")
        return value

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)


def load_settings(path: Path | None = None, **overrides: Any) -> EngineSettings:
    """
    Loads settings from a JSON file.

    Args:
        path (Path | None): The settings file, defaults only if None.
        **overrides: Values taking precedence over the file, None values are
            skipped.

    Returns:
        EngineSettings: The validated settings.

    """
    data: dict[str, Any] = {}
    if path is not None:
        try:
            with open(path, encoding="utf-8") as f:
                loaded = json.load(f)
            if isinstance(loaded, dict):
                data.update(loaded)
            else:
                log_warning(
                    f"Settings file '{path}' does not contain an object, using defaults",
                    {"path": str(path)},
                )
        except (OSError, json.JSONDecodeError) as e:
            log_warning(
                f"Could not read settings file '{path}': {e!s}, using defaults",
                {"path": str(path), "error": str(e)},
            )
    data.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return EngineSettings(**data)
    except ValidationError as e:
        log_warning(
            f"Invalid settings, using defaults: {e!s}",
            {"path": str(path), "error": str(e)},
        )
        return EngineSettings()
