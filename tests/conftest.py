"""Shared test fixtures and configuration.

Keeps every test away from the real platform directories: the log file,
settings and timer store all land in *tmp_path*.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest

from multitimer_cli.models.timer import Phase, TimerConfig
from multitimer_cli.services.manager import TimerManager
from multitimer_cli.services.storage import TimerStore


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_logger(tmp_path):
    """Send the application log to a temporary directory."""
    import multitimer_cli.utils.logger as logger_mod

    logger_mod._logger = None
    logging.getLogger("multitimer_cli").handlers.clear()
    with patch(
        "multitimer_cli.utils.logger.user_log_dir",
        return_value=str(tmp_path / "logs"),
    ):
        yield
    for handler in logging.getLogger("multitimer_cli").handlers:
        handler.close()
    logging.getLogger("multitimer_cli").handlers.clear()
    logger_mod._logger = None


@pytest.fixture()
def isolated_dirs(tmp_path):
    """Point settings and the default timer store at *tmp_path*."""
    from multitimer_cli.config import get_settings_manager

    get_settings_manager.cache_clear()
    with patch(
        "multitimer_cli.config.user_config_dir", return_value=str(tmp_path / "config")
    ):
        with patch(
            "multitimer_cli.services.storage.user_data_dir",
            return_value=str(tmp_path / "data"),
        ):
            yield tmp_path
    get_settings_manager.cache_clear()


# ---------------------------------------------------------------------------
# Domain helpers
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_config():
    """Factory for TimerConfig with whole-second phases.

    ``phases`` is a list of ``(work_seconds, break_seconds)`` pairs.
    """

    def _make(
        name: str = "Focus",
        text: str = "Stretch",
        phases: list[tuple[int, int]] | None = None,
        max_cycles: int | None = None,
    ) -> TimerConfig:
        pairs = phases if phases is not None else [(2, 1)]
        return TimerConfig(
            name=name,
            notification_text=text,
            phases=tuple(
                Phase(
                    work_duration=timedelta(seconds=work),
                    break_duration=timedelta(seconds=rest),
                )
                for work, rest in pairs
            ),
            max_cycles=max_cycles,
        )

    return _make


@pytest.fixture()
def notifier():
    return MagicMock()


@pytest.fixture()
def store(tmp_path):
    return TimerStore(tmp_path / "timers.json")


@pytest.fixture()
def manager(store, notifier):
    return TimerManager(store, notifier)
