"""Faction registry consumed by custom systems.

Factions load in two phases. While names are still being registered no
lookups are possible, so custom systems park their requested faction name
here; :meth:`FactionsDatabase.initialize` then resolves every parked system.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Protocol, Tuple

from galaxy.engine.logger import ChannelLogger
from galaxy.systems.types import GovType

if TYPE_CHECKING:
    from galaxy.systems.system import CustomSystem

BAD_FACTION_IDX = 0xFFFFFFFF


@dataclass(frozen=True)
class Faction:
    idx: int
    name: str
    gov_type: GovType = GovType.NONE
    homeworld: Optional[Tuple[int, int, int]] = None

    @property
    def is_bad(self) -> bool:
        return self.idx == BAD_FACTION_IDX


BAD_FACTION = Faction(idx=BAD_FACTION_IDX, name="<bad faction>", gov_type=GovType.INVALID)


class FactionRegistry(Protocol):
    def is_initialized(self) -> bool:
        ...

    def register_custom_system(self, system: "CustomSystem", faction_name: str) -> None:
        ...

    def get_faction(self, name: str) -> Faction:
        ...


class FactionsDatabase:
    """Minimal in-process faction registry."""

    def __init__(self, logger: Optional[ChannelLogger] = None) -> None:
        self._factions: Dict[str, Faction] = {}
        self._pending: List[Tuple["CustomSystem", str]] = []
        self._initialized = False
        self._logger = logger

    def __len__(self) -> int:
        return len(self._factions)

    def is_initialized(self) -> bool:
        return self._initialized

    def add_faction(
        self,
        name: str,
        gov_type: object = GovType.NONE,
        homeworld: Optional[Tuple[int, int, int]] = None,
    ) -> Faction:
        if name in self._factions:
            return self._factions[name]
        faction = Faction(
            idx=len(self._factions),
            name=name,
            gov_type=GovType.parse(gov_type),
            homeworld=homeworld,
        )
        self._factions[name] = faction
        return faction

    def load(self, path: Path) -> None:
        if not path.exists():
            return
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError:
            if self._logger:
                self._logger.warning("Invalid faction file %s", path)
            return
        if isinstance(data, dict):
            data = [data]
        for entry in data:
            try:
                homeworld = entry.get("homeworld")
                self.add_faction(
                    entry["name"],
                    entry.get("govtype", GovType.NONE),
                    tuple(int(c) for c in homeworld) if homeworld else None,
                )
            except (KeyError, TypeError, ValueError) as exc:
                if self._logger:
                    self._logger.warning("Skipping faction entry in %s: %s", path, exc)

    def register_custom_system(self, system: "CustomSystem", faction_name: str) -> None:
        if self._initialized:
            raise RuntimeError("custom systems can only be registered before factions are initialised")
        self._pending.append((system, faction_name))

    def pending(self) -> List[Tuple["CustomSystem", str]]:
        return list(self._pending)

    def get_faction(self, name: str) -> Faction:
        return self._factions.get(name, BAD_FACTION)

    def initialize(self) -> None:
        """Enter the resolved phase and hand parked systems their faction."""

        self._initialized = True
        for system, name in self._pending:
            faction = self.get_faction(name)
            if faction.is_bad:
                if self._logger:
                    self._logger.warning("Unknown faction %s for custom system %s", name, system.name)
                continue
            system.faction = faction
        self._pending.clear()


__all__ = ["BAD_FACTION", "BAD_FACTION_IDX", "Faction", "FactionRegistry", "FactionsDatabase"]
