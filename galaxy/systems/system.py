"""Authored star system records."""
from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from typing import TYPE_CHECKING, Dict, Iterable, Iterator, List, Optional, Tuple

from pygame.math import Vector3

from galaxy.constants import MAX_PRIMARY_STARS
from galaxy.engine.logger import ChannelLogger
from galaxy.math.fixed import to_fixed
from galaxy.systems.body import CustomSystemBody
from galaxy.systems.errors import CustomSystemError
from galaxy.systems.types import BodyType, GovType

if TYPE_CHECKING:
    from galaxy.factions import Faction, FactionRegistry


def _padded_star_types(types: Iterable[BodyType]) -> List[BodyType]:
    primary = list(types)[:MAX_PRIMARY_STARS]
    primary.extend([BodyType.GRAVPOINT] * (MAX_PRIMARY_STARS - len(primary)))
    return primary


@dataclass(eq=False)
class CustomSystem:
    """One hand-authored star system.

    ``root`` is the owned body tree; a system without one is random and is
    synthesised entirely by the generator. ``primary_type`` is the declared
    star signature, checked against the tree once it is attached.
    """

    name: str
    num_stars: int = 0
    primary_type: List[BodyType] = field(default_factory=lambda: _padded_star_types(()))
    other_names: List[str] = field(default_factory=list)
    sector_x: int = 0
    sector_y: int = 0
    sector_z: int = 0
    pos: Vector3 = field(default_factory=lambda: Vector3(0.0, 0.0, 0.0))
    seed: int = 0
    explored: bool = True
    short_desc: str = ""
    long_desc: str = ""
    gov_type: GovType = GovType.NONE
    lawlessness: Fraction = Fraction(0)
    faction: Optional["Faction"] = None
    faction_name: str = ""
    want_rand_seed: bool = True
    want_rand_explored: bool = True
    want_rand_lawlessness: bool = True
    system_index: int = -1
    root: Optional[CustomSystemBody] = None

    def __repr__(self) -> str:
        return (
            f"CustomSystem({self.name!r}, sector={self.sector}, index={self.system_index}, "
            f"stars={self.num_stars})"
        )

    @property
    def sector(self) -> Tuple[int, int, int]:
        return (self.sector_x, self.sector_y, self.sector_z)

    def is_random(self) -> bool:
        return self.root is None

    def bodies(self) -> Iterator[CustomSystemBody]:
        if self.root is not None:
            yield from self.root.walk()

    def set_star_types(self, types: Iterable[object]) -> None:
        """Declare the primary stars, stopping at the first gravpoint or ``None``."""

        declared: List[BodyType] = []
        for index, value in enumerate(types):
            if index >= MAX_PRIMARY_STARS:
                break
            if value is None:
                break
            if not isinstance(value, (str, BodyType)):
                raise CustomSystemError(f"system star {index + 1} is not a string constant")
            star = BodyType.parse(value)
            if not star.is_star_or_gravpoint:
                raise CustomSystemError(f"system star {index + 1} does not have a valid star type")
            if star is BodyType.GRAVPOINT:
                break
            declared.append(star)
        self.primary_type = _padded_star_types(declared)
        self.num_stars = len(declared)

    def set_seed(self, seed: int) -> None:
        if isinstance(seed, bool) or not isinstance(seed, int) or seed < 0:
            raise CustomSystemError(f"seed of system '{self.name}' must be a non-negative integer")
        self.seed = seed
        self.want_rand_seed = seed == 0

    def set_explored(self, explored: bool) -> None:
        self.explored = bool(explored)
        self.want_rand_explored = False

    def set_lawlessness(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self.lawlessness = to_fixed(value, "lawlessness")
        self.want_rand_lawlessness = False
        if logger and not 0 <= self.lawlessness <= 1:
            logger.warning(
                "Lawlessness of system %s is %s, outside 0..1", self.name, float(self.lawlessness)
            )

    def set_gov_type(self, value: object) -> None:
        self.gov_type = GovType.parse(value)

    def set_other_names(self, names: Iterable[object]) -> None:
        self.other_names = [str(name) for name in names]

    def set_short_desc(self, text: str) -> None:
        self.short_desc = str(text)

    def set_long_desc(self, text: str) -> None:
        self.long_desc = str(text)

    def assign_faction(self, factions: "FactionRegistry", name: str) -> bool:
        """Attach the named faction, deferring while factions are still registering.

        Returns ``False`` when the faction registry is already resolved and
        does not know ``name``; ``faction`` is left unset in that case.
        """

        self.faction_name = name
        if not factions.is_initialized():
            factions.register_custom_system(self, name)
            return True
        faction = factions.get_faction(name)
        if faction.is_bad:
            self.faction = None
            return False
        self.faction = faction
        return True

    def set_root(self, root: CustomSystemBody, expected_stars: Optional[int] = None) -> None:
        """Attach the body tree and cross-check the declared star count."""

        self.root = root
        expected = self.num_stars if expected_stars is None else expected_stars
        found = root.count_stars()
        if found != expected:
            raise CustomSystemError(
                f"expected {expected} star(s) in system {self.name}, but found {found} "
                "(did you forget star types in CustomSystem.new?)"
            )

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {"name": self.name}
        if self.other_names:
            data["otherNames"] = list(self.other_names)
        data["stars"] = [star.name for star in self.primary_type[: self.num_stars]]
        data["numStars"] = self.num_stars
        data["sectorX"] = self.sector_x
        data["sectorY"] = self.sector_y
        data["sectorZ"] = self.sector_z
        data["pos"] = [self.pos.x, self.pos.y, self.pos.z]
        if not self.want_rand_seed:
            data["seed"] = self.seed
        if not self.want_rand_explored:
            data["explored"] = self.explored
        if not self.want_rand_lawlessness:
            data["lawlessness"] = str(self.lawlessness)
        data["govType"] = self.gov_type.name
        data["shortDesc"] = self.short_desc
        data["longDesc"] = self.long_desc
        if self.faction_name:
            data["faction"] = self.faction_name
        return data


__all__ = ["CustomSystem"]
