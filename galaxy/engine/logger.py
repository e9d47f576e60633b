"""Content logging with per-channel toggles and problem tallies.

Content problems are reported as log records on four channels: ``loader``
(file and document handling), ``systems`` (setter warnings), ``validation``
(sanity checks) and ``factions``. Each channel also counts the warnings and
errors it was asked to report, enabled or not, so a load can be summarised
even when a noisy channel is switched off.
"""
from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

DEFAULT_CHANNELS = {
    "systems": True,
    "loader": True,
    "factions": True,
    "validation": True,
}

ROOT_LOGGER = "galaxy"


@dataclass
class LoggerConfig:
    """Configuration for content logging."""

    level: int = logging.INFO
    channels: Dict[str, bool] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LoggerConfig":
        """Build a config from parsed settings (``logLevel``, ``logChannels``)."""

        level_name = str(data.get("logLevel", "INFO")).upper()
        level = getattr(logging, level_name, logging.INFO)
        if not isinstance(level, int):
            level = logging.INFO
        channels = DEFAULT_CHANNELS.copy()
        overrides = data.get("logChannels", {})
        if isinstance(overrides, Mapping):
            channels.update({str(name): bool(flag) for name, flag in overrides.items()})
        return cls(level=level, channels=channels)

    @classmethod
    def from_settings(cls, settings_path: Path) -> "LoggerConfig":
        if not settings_path.exists():
            return cls(level=logging.INFO, channels=DEFAULT_CHANNELS.copy())
        try:
            data = json.loads(settings_path.read_text())
        except json.JSONDecodeError:
            return cls(level=logging.INFO, channels=DEFAULT_CHANNELS.copy())
        if not isinstance(data, Mapping):
            return cls(level=logging.INFO, channels=DEFAULT_CHANNELS.copy())
        return cls.from_dict(data)


class ChannelLogger:
    """Wrapper that only emits records when the channel is enabled."""

    def __init__(self, name: str, logger: logging.Logger, enabled: bool) -> None:
        self._logger = logger
        self._enabled = enabled
        self._name = name
        self.warnings = 0
        self.errors = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value

    def debug(self, msg: str, *args, **kwargs) -> None:
        if self._enabled:
            self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        if self._enabled:
            self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self.warnings += 1
        if self._enabled:
            self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        self.errors += 1
        if self._enabled:
            self._logger.error(msg, *args, **kwargs)

    def reset_counts(self) -> None:
        self.warnings = 0
        self.errors = 0


class GameLogger:
    """Registry of content channels under the ``galaxy`` logger."""

    def __init__(self, config: LoggerConfig) -> None:
        logging.basicConfig(
            level=config.level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            stream=sys.stdout,
        )
        self._root = logging.getLogger(ROOT_LOGGER)
        self._root.setLevel(config.level)
        self._channels: Dict[str, ChannelLogger] = {}
        for name, enabled in (config.channels or {}).items():
            self._channels[name] = self._make_channel(name, enabled)

    def _make_channel(self, name: str, enabled: bool) -> ChannelLogger:
        return ChannelLogger(name, self._root.getChild(name), enabled)

    def channel(self, name: str) -> ChannelLogger:
        if name not in self._channels:
            # Unknown channels start disabled until explicitly enabled.
            self._channels[name] = self._make_channel(name, False)
        return self._channels[name]

    def set_enabled(self, name: str, enabled: bool) -> None:
        self.channel(name).enabled = enabled

    def channels(self) -> Iterable[str]:
        return self._channels.keys()

    def problem_counts(self) -> Dict[str, Tuple[int, int]]:
        """Warnings and errors reported per channel since the last reset."""

        return {
            name: (channel.warnings, channel.errors)
            for name, channel in self._channels.items()
            if channel.warnings or channel.errors
        }

    def reset_counts(self) -> None:
        for channel in self._channels.values():
            channel.reset_counts()


def init_logger(settings_path: Optional[Path] = None) -> GameLogger:
    """Initialise a logger from settings.json."""

    settings_path = settings_path or Path("settings.json")
    config = LoggerConfig.from_settings(settings_path)
    return GameLogger(config)


def channel_of(logger: Optional[GameLogger], name: str) -> Optional[ChannelLogger]:
    """Return the named channel, or ``None`` when logging is not wired up."""

    if logger is None:
        return None
    return logger.channel(name)


__all__ = [
    "ChannelLogger",
    "DEFAULT_CHANNELS",
    "GameLogger",
    "LoggerConfig",
    "channel_of",
    "init_logger",
]
