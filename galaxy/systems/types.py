"""Closed enumerations shared by the body and system records."""
from __future__ import annotations

from enum import Enum, IntEnum

from galaxy.systems.errors import CustomSystemError


class BodyType(IntEnum):
    GRAVPOINT = 0
    BROWN_DWARF = 1
    WHITE_DWARF = 2
    STAR_M = 3
    STAR_K = 4
    STAR_G = 5
    STAR_F = 6
    STAR_A = 7
    STAR_B = 8
    STAR_O = 9
    STAR_M_GIANT = 10
    STAR_K_GIANT = 11
    STAR_G_GIANT = 12
    STAR_F_GIANT = 13
    STAR_A_GIANT = 14
    STAR_B_GIANT = 15
    STAR_O_GIANT = 16
    STAR_M_SUPER_GIANT = 17
    STAR_K_SUPER_GIANT = 18
    STAR_G_SUPER_GIANT = 19
    STAR_F_SUPER_GIANT = 20
    STAR_A_SUPER_GIANT = 21
    STAR_B_SUPER_GIANT = 22
    STAR_O_SUPER_GIANT = 23
    STAR_M_HYPER_GIANT = 24
    STAR_K_HYPER_GIANT = 25
    STAR_G_HYPER_GIANT = 26
    STAR_F_HYPER_GIANT = 27
    STAR_A_HYPER_GIANT = 28
    STAR_B_HYPER_GIANT = 29
    STAR_O_HYPER_GIANT = 30
    STAR_M_WF = 31
    STAR_B_WF = 32
    STAR_O_WF = 33
    STAR_S_BH = 34
    STAR_IM_BH = 35
    STAR_SM_BH = 36
    PLANET_GAS_GIANT = 37
    PLANET_ASTEROID = 38
    PLANET_TERRESTRIAL = 39
    STARPORT_ORBITAL = 40
    STARPORT_SURFACE = 41

    @classmethod
    def parse(cls, value: object) -> "BodyType":
        return _parse(cls, value, "TYPE_")

    @property
    def is_star(self) -> bool:
        return STAR_MIN <= self <= STAR_MAX

    @property
    def is_black_hole(self) -> bool:
        return self in BLACK_HOLE_TYPES

    @property
    def is_station(self) -> bool:
        return self in STATION_TYPES

    @property
    def is_star_or_gravpoint(self) -> bool:
        return self is BodyType.GRAVPOINT or self.is_star


STAR_MIN = BodyType.BROWN_DWARF
STAR_MAX = BodyType.STAR_SM_BH

BLACK_HOLE_TYPES = frozenset(
    {BodyType.STAR_S_BH, BodyType.STAR_IM_BH, BodyType.STAR_SM_BH}
)
STATION_TYPES = frozenset({BodyType.STARPORT_ORBITAL, BodyType.STARPORT_SURFACE})


class GovType(IntEnum):
    INVALID = 0
    NONE = 1
    EARTHCOLONIAL = 2
    EARTHDEMOC = 3
    EMPIRERULE = 4
    CISLIBDEM = 5
    CISSOCDEM = 6
    LIBDEM = 7
    CORPORATE = 8
    SOCDEM = 9
    EARTHMILDICT = 10
    MILDICT1 = 11
    MILDICT2 = 12
    EMPIREMILDICT = 13
    COMMUNIST = 14
    PLUTOCRATIC = 15
    DISORDER = 16

    @classmethod
    def parse(cls, value: object) -> "GovType":
        return _parse(cls, value, "GOV_")


class RingStatus(Enum):
    NONE = "none"
    RANDOM = "random"
    CUSTOM = "custom"


def _parse(enum_cls, value: object, prefix: str):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return enum_cls(value)
        except ValueError:
            raise CustomSystemError(f"{value} is not a valid {enum_cls.__name__}")
    if isinstance(value, str):
        key = value.strip().upper()
        if key.startswith(prefix):
            key = key[len(prefix):]
        try:
            return enum_cls[key]
        except KeyError:
            raise CustomSystemError(f"'{value}' is not a valid {enum_cls.__name__}")
    raise CustomSystemError(
        f"{enum_cls.__name__} must be a name or index, got {type(value).__name__}"
    )


__all__ = [
    "BLACK_HOLE_TYPES",
    "BodyType",
    "GovType",
    "RingStatus",
    "STAR_MAX",
    "STAR_MIN",
    "STATION_TYPES",
]
