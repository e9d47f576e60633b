"""JSON document front end for custom systems.

A document describes one system with a flat ``bodies`` array. Bodies refer
to their children by index into that array, so the tree can only be built
after every body exists: bodies are parsed first, then the index lists are
checked and turned into owned child lists. The first body is the root.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Set, Tuple

from pygame import Color
from pygame.math import Vector3

from galaxy.constants import MAX_PRIMARY_STARS
from galaxy.engine.logger import ChannelLogger
from galaxy.math.fixed import to_real
from galaxy.systems.body import CustomSystemBody
from galaxy.systems.errors import BATCH_FATAL_ERRORS, CustomSystemError
from galaxy.systems.sector import SystemPath
from galaxy.systems.system import CustomSystem
from galaxy.systems.types import BodyType
from galaxy.systems.validation import sanity_check_system

if TYPE_CHECKING:
    from galaxy.systems.database import CustomSystemsDatabase

# Document key -> CustomSystemBody setter. ``inclination`` is the document
# name of the latitude slot.
BODY_FIELDS: Dict[str, str] = {
    "seed": "set_seed",
    "radius": "set_radius",
    "aspectRatio": "set_aspect_ratio",
    "mass": "set_mass",
    "rotationPeriod": "set_rotation_period",
    "rotationalPhase": "set_rotational_phase_at_start",
    "semiMajorAxis": "set_semi_major_axis",
    "eccentricity": "set_eccentricity",
    "orbitalOffset": "set_orbital_offset",
    "orbitalPhase": "set_orbital_phase_at_start",
    "axialTilt": "set_axial_tilt",
    "inclination": "set_latitude",
    "longitude": "set_longitude",
    "argOfPeriapsis": "set_arg_of_periapsis",
    "averageTemp": "set_temp",
    "metallicity": "set_metallicity",
    "volatileGas": "set_atmos_density",
    "volatileLiquid": "set_ocean_cover",
    "volatileIces": "set_ice_cover",
    "volcanicity": "set_volcanicity",
    "atmosOxidizing": "set_atmos_oxidizing",
    "life": "set_life",
    "population": "set_population",
    "agricultural": "set_agricultural",
    "spaceStationType": "set_space_station_type",
}


@dataclass
class FlatBody:
    """A parsed body that still refers to its children by index."""

    body: CustomSystemBody
    child_indices: List[int] = field(default_factory=list)


def _parse_color(value: Any) -> Color:
    if isinstance(value, (list, tuple)):
        components = [to_real(c, "atmosColor") for c in value]
        if not all(0 <= c <= 255 for c in components):
            raise CustomSystemError(f"atmosColor components must lie in 0..255, got {value!r}")
        return Color(*[int(c) for c in components])
    return Color(value)


def _parse_rings(body: CustomSystemBody, value: Any, logger: Optional[ChannelLogger]) -> None:
    if isinstance(value, bool):
        body.set_rings(value, logger=logger)
        return
    if not isinstance(value, Mapping):
        raise CustomSystemError(f"rings of body '{body.name}' must be a boolean or an object")
    body.set_rings(value["inner"], value["outer"], value["color"], logger=logger)


def parse_body(
    entry: Mapping[str, Any],
    num_bodies: int,
    filename: str,
    logger: Optional[ChannelLogger] = None,
) -> FlatBody:
    if not isinstance(entry, Mapping):
        raise CustomSystemError("bodies[] entries must be objects")
    body = CustomSystemBody(
        name=str(entry.get("name", "")),
        type=BodyType.parse(entry.get("type", "GRAVPOINT")),
    )
    for key, setter in BODY_FIELDS.items():
        if key in entry:
            try:
                getattr(body, setter)(entry[key], logger=logger)
            except CustomSystemError as exc:
                raise CustomSystemError(f"body '{body.name}' {key}: {exc}") from exc
    if "atmosDensity" in entry:
        body.atmos_density = to_real(entry["atmosDensity"], "atmosDensity")
    if "atmosColor" in entry:
        body.atmos_color = _parse_color(entry["atmosColor"])
    if entry.get("heightMapFilename"):
        body.set_height_map(entry["heightMapFilename"], entry.get("heightMapFractal", 0))
    if "rings" in entry:
        _parse_rings(body, entry["rings"], logger)

    flat = FlatBody(body)
    for child in entry.get("children", ()):
        if isinstance(child, bool) or not isinstance(child, int) or not 0 <= child < num_bodies:
            if logger:
                logger.warning(
                    "Body %s in system %s has out-of-range child index %s", body.name, filename, child
                )
            continue
        flat.child_indices.append(child)
    return flat


def resolve_body_tree(
    flat: List[FlatBody], filename: str, logger: Optional[ChannelLogger] = None
) -> CustomSystemBody:
    """Turn index lists into owned children and return the root body."""

    if not flat:
        raise CustomSystemError(f"system {filename} has no bodies")

    parent_of: Dict[int, int] = {}
    for index, item in enumerate(flat):
        for child in item.child_indices:
            if child == index or child == 0:
                raise CustomSystemError(
                    f"body {index} ('{item.body.name}') in system {filename} lists body {child} "
                    "as a child, which forms a cycle"
                )
            if child in parent_of:
                raise CustomSystemError(
                    f"body {child} in system {filename} is a child of both body "
                    f"{parent_of[child]} and body {index}"
                )
            parent_of[child] = index

    order: List[int] = []
    on_path: Set[int] = set()
    stack: List[Tuple[int, bool]] = [(0, False)]
    while stack:
        index, leaving = stack.pop()
        if leaving:
            on_path.discard(index)
            continue
        if index in on_path:
            raise CustomSystemError(f"body {index} in system {filename} is part of a cycle")
        on_path.add(index)
        order.append(index)
        stack.append((index, True))
        for child in reversed(flat[index].child_indices):
            stack.append((child, False))

    for index in order:
        item = flat[index]
        item.body.children.extend(flat[child].body for child in item.child_indices)

    unreachable = sorted(set(range(len(flat))) - set(order))
    if unreachable and logger:
        logger.warning(
            "Bodies %s in system %s are not connected to the root body and were dropped",
            unreachable,
            filename,
        )
    return flat[0].body


def _parse_position(value: Any) -> Vector3:
    if isinstance(value, Mapping):
        return Vector3(float(value["x"]), float(value["y"]), float(value["z"]))
    if isinstance(value, (list, tuple)) and len(value) == 3:
        return Vector3(*[float(c) for c in value])
    raise CustomSystemError(f"pos must be a 3-vector, got {value!r}")


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise CustomSystemError(f"{key} must be an integer, got {value!r}")
    return value


def parse_system(
    systemdef: Mapping[str, Any], filename: str, logger: Optional[ChannelLogger] = None
) -> Tuple[CustomSystem, int]:
    """Parse the system fields; returns the record and its declared star count."""

    if not isinstance(systemdef, Mapping):
        raise CustomSystemError("system definition must be an object")
    system = CustomSystem(name=str(systemdef["name"]))

    other_names = systemdef.get("otherNames")
    if isinstance(other_names, list):
        system.set_other_names(other_names)

    stars = [BodyType.parse(star) for star in systemdef["stars"]]
    declared = len(stars)
    if declared > MAX_PRIMARY_STARS:
        if logger:
            logger.warning(
                "Custom system %s defines %d stars of %d max! Extra stars will not be used in "
                "Sector generation.",
                filename,
                declared,
                MAX_PRIMARY_STARS,
            )
        stars = stars[:MAX_PRIMARY_STARS]
    system.primary_type = stars + [BodyType.GRAVPOINT] * (MAX_PRIMARY_STARS - len(stars))
    system.num_stars = len(stars)

    system.sector_x = _as_int(systemdef["sectorX"], "sectorX")
    system.sector_y = _as_int(systemdef["sectorY"], "sectorY")
    system.sector_z = _as_int(systemdef["sectorZ"], "sectorZ")
    system.pos = _parse_position(systemdef["pos"])

    if "seed" in systemdef:
        seed = _as_int(systemdef["seed"], "seed")
        if seed < 0:
            raise CustomSystemError("seed must be non-negative")
        system.seed = seed
        system.want_rand_seed = False
    if "explored" in systemdef:
        system.set_explored(bool(systemdef["explored"]))
    if "lawlessness" in systemdef:
        system.set_lawlessness(systemdef["lawlessness"], logger)

    system.set_gov_type(systemdef.get("govType", "NONE"))
    system.set_short_desc(systemdef.get("shortDesc", ""))
    system.set_long_desc(systemdef.get("longDesc", ""))
    return system, declared


def load_system_from_json(
    database: "CustomSystemsDatabase", filename: str, systemdef: Any
) -> Optional[CustomSystem]:
    """Build, validate and register one system; ``None`` if it was rejected."""

    log = database.channel("loader")
    try:
        system, declared = parse_system(systemdef, filename, log)
        entries = systemdef["bodies"]
        if not isinstance(entries, list):
            raise CustomSystemError("bodies must be an array")
        flat = [parse_body(entry, len(entries), filename, log) for entry in entries]
        system.set_root(resolve_body_tree(flat, filename, log), expected_stars=declared)
        sanity_check_system(system, database.channel("validation"))

        faction_name = systemdef.get("faction", "")
        if faction_name and not system.assign_faction(database.factions, str(faction_name)):
            if log:
                log.warning("Unknown faction %s for custom system %s.", faction_name, filename)

        database.add_custom_system(
            SystemPath(system.sector_x, system.sector_y, system.sector_z), system
        )
        return system
    except BATCH_FATAL_ERRORS:
        raise
    except Exception as exc:
        if log:
            log.warning("Could not load JSON system definition %s: %s", filename, exc)
        return None


def dump_system_to_json(system: CustomSystem) -> Dict[str, Any]:
    """Flatten a system and its tree into the document format."""

    data = system.to_dict()
    bodies = list(system.bodies())
    index_of = {id(body): index for index, body in enumerate(bodies)}
    entries = []
    for body in bodies:
        entry = body.to_dict()
        if body.children:
            entry["children"] = [index_of[id(child)] for child in body.children]
        entries.append(entry)
    data["bodies"] = entries
    return data


__all__ = [
    "BODY_FIELDS",
    "FlatBody",
    "dump_system_to_json",
    "load_system_from_json",
    "parse_body",
    "parse_system",
    "resolve_body_tree",
]
