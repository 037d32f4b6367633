"""File-backed store of timer programs."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from platformdirs import user_data_dir
from pydantic import TypeAdapter, ValidationError

from multitimer_cli.models.exceptions import PersistenceError
from multitimer_cli.models.timer import TimerConfig
from multitimer_cli.utils.logger import get_logger

_TIMERS_FILE = "timers.json"
_configs_adapter = TypeAdapter(list[TimerConfig])


def default_timers_path() -> Path:
    return Path(user_data_dir("multitimer_cli")) / _TIMERS_FILE


class TimerStore:
    """Load and save the full list of timer configurations as JSON.

    Durations are written as integer nanoseconds so that a save/load cycle
    reproduces them exactly.
    """

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path) if path is not None else default_timers_path()

    def load(self) -> list[TimerConfig]:
        """Return the saved configurations; an empty list if none were saved."""
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as e:
            raise PersistenceError(f"Cannot read {self.path}: {e}") from e

        try:
            configs = _configs_adapter.validate_json(raw)
        except ValidationError as e:
            raise PersistenceError(f"Invalid timer file {self.path}: {e}") from e

        get_logger().debug("Loaded %d timer(s) from %s", len(configs), self.path)
        return configs

    def save(self, configs: list[TimerConfig]) -> None:
        """Overwrite the store with *configs*, atomically."""
        data = _configs_adapter.dump_json(list(configs), by_alias=True, indent=2)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=".timers-", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Cannot write {self.path}: {e}") from e

        get_logger().debug("Saved %d timer(s) to %s", len(configs), self.path)
