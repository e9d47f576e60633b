"""Content loading entry point."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from galaxy.engine.logger import GameLogger, channel_of
from galaxy.factions import FactionsDatabase
from galaxy.systems.database import CustomSystemsDatabase

FACTIONS_FILE = "factions.json"
SYSTEMS_DIR = "systems"


class ContentManager:
    """Loads factions and custom systems in the order the two-phase faction
    lookup needs: systems register their faction names first, then the
    faction registry is initialised and resolves them."""

    def __init__(
        self,
        root: Path,
        logger: Optional[GameLogger] = None,
        systems_dir: str = SYSTEMS_DIR,
    ) -> None:
        self.root = root
        self.logger = logger
        self.factions = FactionsDatabase(channel_of(logger, "factions"))
        self.custom_systems = CustomSystemsDatabase(root / systems_dir, self.factions, logger)

    def load(self) -> None:
        self.factions.load(self.root / FACTIONS_FILE)
        self.custom_systems.load()
        self.factions.initialize()


__all__ = ["ContentManager"]
