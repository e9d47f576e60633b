"""Sector-indexed storage for hand-authored star systems."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from galaxy.engine.logger import ChannelLogger, GameLogger, channel_of
from galaxy.factions import FactionRegistry
from galaxy.loaders.document import load_system_from_json
from galaxy.loaders.session import IngestionSession
from galaxy.systems.sector import SystemPath
from galaxy.systems.system import CustomSystem

SCRIPT_SUFFIX = ".py"
DOCUMENT_SUFFIX = ".json"


class CustomSystemsDatabase:
    """Owns every custom system, grouped by sector in registration order.

    Systems are only ever appended, so a system's ``system_index`` always
    matches its position in the sector list. The database is filled once at
    startup and read by the generator afterwards.
    """

    _EMPTY_SYSTEM_LIST: Tuple[CustomSystem, ...] = ()

    def __init__(
        self,
        directory: Optional[Path],
        factions: FactionRegistry,
        logger: Optional[GameLogger] = None,
    ) -> None:
        self.directory = directory
        self.factions = factions
        self.logger = logger
        self._sector_map: Dict[SystemPath, List[CustomSystem]] = {}
        self._last_added: Optional[Tuple[SystemPath, int]] = None

    def __len__(self) -> int:
        return sum(len(systems) for systems in self._sector_map.values())

    def __iter__(self) -> Iterator[CustomSystem]:
        for path in sorted(self._sector_map):
            yield from self._sector_map[path]

    def channel(self, name: str) -> Optional[ChannelLogger]:
        return channel_of(self.logger, name)

    def sectors(self) -> Mapping[SystemPath, Sequence[CustomSystem]]:
        return {path: tuple(systems) for path, systems in self._sector_map.items()}

    def add_custom_system(self, path: SystemPath, system: CustomSystem) -> None:
        systems = self._sector_map.setdefault(path, [])
        system.system_index = len(systems)
        self._last_added = (path, system.system_index)
        systems.append(system)

    def get_custom_systems_for_sector(self, x: int, y: int, z: int) -> Sequence[CustomSystem]:
        systems = self._sector_map.get(SystemPath(x, y, z))
        if not systems:
            return self._EMPTY_SYSTEM_LIST
        return tuple(systems)

    def last_added(self) -> Optional[CustomSystem]:
        if self._last_added is None:
            return None
        path, index = self._last_added
        return self._sector_map[path][index]

    def load(self) -> None:
        """Load every script and document below ``directory``."""

        log = self.channel("loader")
        if self.directory is None or not self.directory.exists():
            if log:
                log.warning("Custom systems directory %s not found", self.directory)
            return
        paths = sorted(
            path
            for path in self.directory.rglob("*")
            if path.is_file() and path.suffix in (SCRIPT_SUFFIX, DOCUMENT_SUFFIX)
        )
        with IngestionSession(self) as session:
            for path in paths:
                if path.suffix == SCRIPT_SUFFIX:
                    session.run_script(path)
                else:
                    session.run_document(path)
        if log:
            log.info("Loaded %d custom systems in %d sectors", len(self), len(self._sector_map))

    def load_system(self, path: Path) -> Optional[CustomSystem]:
        """Run one script and return the system it registered, if any."""

        with IngestionSession(self) as session:
            self._last_added = None
            session.run_script(path)
        return self.last_added()

    def load_system_from_json(self, filename: str, systemdef: object) -> Optional[CustomSystem]:
        return load_system_from_json(self, filename, systemdef)


__all__ = ["CustomSystemsDatabase", "DOCUMENT_SUFFIX", "SCRIPT_SUFFIX", "SystemPath"]
