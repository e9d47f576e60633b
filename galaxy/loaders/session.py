"""Ingestion sessions: one loader namespace per batch or single-file load."""
from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Optional

from galaxy.engine.logger import ChannelLogger
from galaxy.loaders.document import load_system_from_json
from galaxy.loaders.script import create_loader_namespace, execute_script
from galaxy.systems.errors import BATCH_FATAL_ERRORS, IngestionActiveError

if TYPE_CHECKING:
    from galaxy.systems.database import CustomSystemsDatabase


class IngestionSession:
    """Explicit context for one ingestion pass.

    Only one session may be active in the process at a time; entering a
    second one raises :class:`IngestionActiveError`. Every adapter call gets
    the session passed in, so no loader code reaches for global state.
    """

    _active: ClassVar[Optional["IngestionSession"]] = None

    def __init__(self, database: "CustomSystemsDatabase") -> None:
        self.database = database
        self.namespace: Optional[Dict[str, Any]] = None
        self.loader_log: Optional[ChannelLogger] = database.channel("loader")
        self.systems_log: Optional[ChannelLogger] = database.channel("systems")
        self.validation_log: Optional[ChannelLogger] = database.channel("validation")
        self.current_file: Optional[Path] = None

    @classmethod
    def active(cls) -> Optional["IngestionSession"]:
        return cls._active

    def __enter__(self) -> "IngestionSession":
        if IngestionSession._active is not None:
            raise IngestionActiveError("a custom systems ingestion session is already active")
        IngestionSession._active = self
        self.namespace = create_loader_namespace(self)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        IngestionSession._active = None
        self.namespace = None
        self.current_file = None

    @property
    def factions(self):
        return self.database.factions

    def run_script(self, path: Path) -> bool:
        """Execute one content script; a failure skips the rest of that file only."""

        if self.namespace is None:
            raise RuntimeError("ingestion session is not active")
        self.current_file = path
        try:
            execute_script(self, path)
        except BATCH_FATAL_ERRORS:
            raise
        except Exception as exc:
            if self.loader_log:
                self.loader_log.error("Error loading custom system file %s: %s", path, exc)
            return False
        finally:
            self.current_file = None
        return True

    def run_document(self, path: Path) -> int:
        """Load a JSON file holding one system or a list of systems."""

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            if self.loader_log:
                self.loader_log.error("Could not read JSON system definition %s: %s", path, exc)
            return 0
        entries = data if isinstance(data, list) else [data]
        loaded = 0
        for entry in entries:
            if load_system_from_json(self.database, path.name, entry) is not None:
                loaded += 1
        return loaded


__all__ = ["IngestionSession"]
