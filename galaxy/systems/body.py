"""Hand-authored body nodes: stars, planets, moons and stations."""
from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from pygame import Color

from galaxy.constants import (
    EARTH_RADIUS_KM,
    MAX_ASPECT_RATIO,
    MIN_ASPECT_RATIO,
    RING_DEFAULT_ALPHA,
    TWO_PI,
)
from galaxy.engine.logger import ChannelLogger
from galaxy.math.fixed import to_fixed, to_real
from galaxy.systems.errors import CustomSystemError
from galaxy.systems.types import BodyType, RingStatus

HEIGHTMAP_DIR = "heightmaps"
# Terrain fractals that accept a height map: 0 and 1.
HEIGHTMAP_FRACTALS = 2

RGBA = Tuple[float, float, float, float]

_ZERO = Fraction(0)


def _phase(value: object, what: str) -> Fraction:
    real = to_real(value, what)
    if real < 0.0 or real >= TWO_PI:
        raise CustomSystemError(
            f"{what} must be between 0 and 2 PI radians (including 0 but not 2 PI), got {real}"
        )
    return to_fixed(value, what)


@dataclass(eq=False)
class CustomSystemBody:
    """One node of an authored body tree.

    A body owns its ``children`` in generation order. The ``want_rand_*``
    flags stay set until the matching value is authored so the generator
    knows which fields it may still randomise.
    """

    name: str
    type: BodyType = BodyType.GRAVPOINT
    seed: int = 0
    radius: Fraction = _ZERO
    aspect_ratio: Fraction = Fraction(1)
    mass: Fraction = _ZERO
    average_temp: int = 1
    semi_major_axis: Fraction = _ZERO
    eccentricity: Fraction = _ZERO
    orbital_offset: Fraction = _ZERO
    orbital_phase_at_start: Fraction = _ZERO
    rotation_period: Fraction = _ZERO
    rotational_phase_at_start: Fraction = _ZERO
    axial_tilt: Fraction = _ZERO
    arg_of_periapsis: Fraction = _ZERO
    # Surface bodies call this latitude, orbiting bodies inclination.
    latitude: float = 0.0
    longitude: float = 0.0
    metallicity: Fraction = _ZERO
    volcanicity: Fraction = _ZERO
    volatile_gas: Fraction = _ZERO
    volatile_liquid: Fraction = _ZERO
    volatile_ices: Fraction = _ZERO
    atmos_oxidizing: Fraction = _ZERO
    atmos_density: float = 0.0
    atmos_color: Color = field(default_factory=lambda: Color(0, 0, 0, 0))
    life: Fraction = _ZERO
    population: Fraction = _ZERO
    agricultural: Fraction = _ZERO
    space_station_type: str = ""
    height_map_filename: str = ""
    height_map_fractal: int = 0
    ring_status: RingStatus = RingStatus.RANDOM
    ring_inner_radius: Fraction = _ZERO
    ring_outer_radius: Fraction = _ZERO
    ring_color: RGBA = (0.0, 0.0, 0.0, RING_DEFAULT_ALPHA)
    want_rand_seed: bool = True
    want_rand_offset: bool = True
    want_rand_phase: bool = True
    want_rand_arg_periapsis: bool = True
    children: List["CustomSystemBody"] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.type = BodyType.parse(self.type)

    def __repr__(self) -> str:
        return f"CustomSystemBody({self.name!r}, {self.type.name}, children={len(self.children)})"

    @property
    def is_star(self) -> bool:
        return self.type.is_star

    @property
    def is_black_hole(self) -> bool:
        return self.type.is_black_hole

    @property
    def is_station(self) -> bool:
        return self.type.is_station

    def walk(self) -> Iterator["CustomSystemBody"]:
        """Yield this body and its descendants in pre-order."""

        stack = [self]
        while stack:
            body = stack.pop()
            yield body
            stack.extend(reversed(body.children))

    def count_stars(self) -> int:
        return sum(1 for body in self.walk() if body.is_star)

    # -- magnitudes that are non-negative by convention -----------------

    def _set_magnitude(
        self, attr: str, label: str, value: object, logger: Optional[ChannelLogger]
    ) -> None:
        number = to_fixed(value, label)
        if number < 0 and logger:
            logger.warning(
                "Custom system definition: value cannot be negative (%s) for %s : %s",
                float(number),
                self.name,
                label,
            )
        setattr(self, attr, number)

    def set_radius(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self._set_magnitude("radius", "radius", value, logger)

    def set_radius_km(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self._set_magnitude("radius", "radius_km", to_real(value, "radius_km") / EARTH_RADIUS_KM, logger)

    def set_mass(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self._set_magnitude("mass", "mass", value, logger)

    def set_semi_major_axis(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self._set_magnitude("semi_major_axis", "semi_major_axis", value, logger)

    def set_eccentricity(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self._set_magnitude("eccentricity", "eccentricity", value, logger)

    def set_rotation_period(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self._set_magnitude("rotation_period", "rotation_period", value, logger)

    def set_axial_tilt(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self._set_magnitude("axial_tilt", "axial_tilt", value, logger)

    def set_metallicity(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self._set_magnitude("metallicity", "metallicity", value, logger)

    def set_volcanicity(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self._set_magnitude("volcanicity", "volcanicity", value, logger)

    def set_atmos_density(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self._set_magnitude("volatile_gas", "atmos_density", value, logger)

    def set_atmos_oxidizing(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self._set_magnitude("atmos_oxidizing", "atmos_oxidizing", value, logger)

    def set_ocean_cover(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self._set_magnitude("volatile_liquid", "ocean_cover", value, logger)

    def set_ice_cover(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self._set_magnitude("volatile_ices", "ice_cover", value, logger)

    def set_life(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self._set_magnitude("life", "life", value, logger)

    def set_population(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self._set_magnitude("population", "population", value, logger)

    def set_agricultural(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self._set_magnitude("agricultural", "agricultural", value, logger)

    # -- plain values ---------------------------------------------------

    def set_temp(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise CustomSystemError(f"temp of '{self.name}' must be an integer, got {value!r}")
        self.average_temp = value

    def set_latitude(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self.latitude = to_real(value, "latitude")

    def set_longitude(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self.longitude = to_real(value, "longitude")

    def set_space_station_type(self, value: str, logger: Optional[ChannelLogger] = None) -> None:
        self.space_station_type = str(value)

    # -- values with an auto-randomise flag ------------------------------

    def set_seed(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise CustomSystemError(f"seed of '{self.name}' must be a non-negative integer, got {value!r}")
        self.seed = value
        self.want_rand_seed = False

    def set_orbital_offset(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self.orbital_offset = to_fixed(value, "orbital_offset")
        self.want_rand_offset = False

    def set_orbital_phase_at_start(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self.orbital_phase_at_start = _phase(value, "Orbital phase at game start")
        self.want_rand_phase = False

    def set_arg_of_periapsis(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self.arg_of_periapsis = to_fixed(value, "arg_of_periapsis")
        self.want_rand_arg_periapsis = False

    # -- bounded values ---------------------------------------------------

    def set_rotational_phase_at_start(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        self.rotational_phase_at_start = _phase(value, "Rotational phase at start")

    def set_aspect_ratio(self, value: object, logger: Optional[ChannelLogger] = None) -> None:
        real = to_real(value, "equatorial_to_polar_radius")
        if real < MIN_ASPECT_RATIO:
            raise CustomSystemError(
                "Equatorial to Polar radius ratio cannot be less than 1."
            )
        if real > MAX_ASPECT_RATIO:
            raise CustomSystemError(
                "Equatorial to Polar radius ratio cannot be greater than 10000.0."
            )
        self.aspect_ratio = to_fixed(value, "equatorial_to_polar_radius")

    def set_height_map(self, filename: str, fractal: int, logger: Optional[ChannelLogger] = None) -> None:
        if isinstance(fractal, bool) or not isinstance(fractal, int) or not 0 <= fractal < HEIGHTMAP_FRACTALS:
            raise CustomSystemError(f"invalid terrain fractal type {fractal!r}")
        self.height_map_filename = posixpath.join(HEIGHTMAP_DIR, str(filename))
        self.height_map_fractal = fractal

    def set_rings(self, *args: object, logger: Optional[ChannelLogger] = None) -> None:
        """``set_rings(flag)`` or ``set_rings(inner, outer, (r, g, b[, a]))``."""

        if len(args) == 1 and isinstance(args[0], bool):
            self.ring_status = RingStatus.RANDOM if args[0] else RingStatus.NONE
            return
        if len(args) != 3:
            raise CustomSystemError("rings expects a boolean or (inner, outer, color)")
        inner = to_fixed(args[0], "ring inner radius")
        outer = to_fixed(args[1], "ring outer radius")
        self.ring_color = _ring_color(args[2])
        self.ring_inner_radius = inner
        self.ring_outer_radius = outer
        self.ring_status = RingStatus.CUSTOM

    # -- document format ----------------------------------------------------

    def to_dict(self) -> Dict[str, object]:
        """Serialise this body (without children) in the document format."""

        data: Dict[str, object] = {
            "name": self.name,
            "type": self.type.name,
            "radius": str(self.radius),
            "aspectRatio": str(self.aspect_ratio),
            "mass": str(self.mass),
            "rotationPeriod": str(self.rotation_period),
            "rotationalPhase": str(self.rotational_phase_at_start),
            "semiMajorAxis": str(self.semi_major_axis),
            "eccentricity": str(self.eccentricity),
            "axialTilt": str(self.axial_tilt),
            "inclination": self.latitude,
            "longitude": self.longitude,
            "averageTemp": self.average_temp,
            "metallicity": str(self.metallicity),
            "volatileGas": str(self.volatile_gas),
            "volatileLiquid": str(self.volatile_liquid),
            "volatileIces": str(self.volatile_ices),
            "volcanicity": str(self.volcanicity),
            "atmosOxidizing": str(self.atmos_oxidizing),
            "atmosDensity": self.atmos_density,
            "atmosColor": list(self.atmos_color),
            "life": str(self.life),
            "population": str(self.population),
            "agricultural": str(self.agricultural),
        }
        if not self.want_rand_seed:
            data["seed"] = self.seed
        if not self.want_rand_offset:
            data["orbitalOffset"] = str(self.orbital_offset)
        if not self.want_rand_phase:
            data["orbitalPhase"] = str(self.orbital_phase_at_start)
        if not self.want_rand_arg_periapsis:
            data["argOfPeriapsis"] = str(self.arg_of_periapsis)
        if self.space_station_type:
            data["spaceStationType"] = self.space_station_type
        if self.height_map_filename:
            data["heightMapFilename"] = posixpath.basename(self.height_map_filename)
            data["heightMapFractal"] = self.height_map_fractal
        if self.ring_status is RingStatus.NONE:
            data["rings"] = False
        elif self.ring_status is RingStatus.CUSTOM:
            data["rings"] = {
                "inner": str(self.ring_inner_radius),
                "outer": str(self.ring_outer_radius),
                "color": list(self.ring_color),
            }
        return data


def _ring_color(value: object) -> RGBA:
    if not isinstance(value, Sequence) or isinstance(value, str) or len(value) not in (3, 4):
        raise CustomSystemError("ring color must have 3 or 4 components")
    components = [to_real(item, "ring color") for item in value]
    if len(components) == 3:
        components.append(RING_DEFAULT_ALPHA)
    return (components[0], components[1], components[2], components[3])


__all__ = ["CustomSystemBody", "HEIGHTMAP_DIR"]
