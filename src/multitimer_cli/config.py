"""Configuration management for Multitimer CLI."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError, field_validator

from multitimer_cli.utils.logger import get_logger


class Settings(BaseModel):
    """User settings, stored as config.json in the platform config dir."""

    timers_file: str | None = Field(
        default=None, description="Where timer programs are saved"
    )
    notifications: bool = Field(default=True)
    bell: bool = Field(default=False)
    tick_interval: float = Field(default=1.0, gt=0)
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {v!r}")
        return level


class SettingsManager:
    """Loads, edits and saves ``Settings``."""

    def __init__(self, config_dir: Path | None = None):
        self.config_dir = config_dir or Path(user_config_dir("multitimer_cli"))
        self.config_file = self.config_dir / "config.json"
        self._settings: Settings | None = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> Settings:
        """Read settings from disk; defaults if missing or corrupted."""
        try:
            raw = self.config_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            return Settings()
        except OSError as e:
            get_logger().warning("Cannot read %s: %s", self.config_file, e)
            return Settings()

        try:
            return Settings.model_validate_json(raw)
        except ValidationError as e:
            get_logger().warning("Ignoring corrupted %s: %s", self.config_file, e)
            return Settings()

    def save(self, settings: Settings | None = None) -> None:
        if settings is not None:
            self._settings = settings
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.config_file.write_text(
                self.settings.model_dump_json(indent=2), encoding="utf-8"
            )
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def get(self, key: str) -> Any:
        if key not in Settings.model_fields:
            raise KeyError(key)
        return getattr(self.settings, key)

    def set(self, key: str, value: Any) -> None:
        """Set one setting, validate the result and save it.

        Raises:
            KeyError: unknown setting.
            ValueError: the value does not validate.
        """
        if key not in Settings.model_fields:
            raise KeyError(key)
        data = self.settings.model_dump()
        data[key] = value
        self.save(Settings(**data))

    def reset(self, key: str | None = None) -> None:
        if key is None:
            self.save(Settings())
            return
        if key not in Settings.model_fields:
            raise KeyError(key)
        self.set(key, getattr(Settings(), key))


@lru_cache(maxsize=1)
def get_settings_manager() -> SettingsManager:
    """Return the process-wide SettingsManager."""
    return SettingsManager()
