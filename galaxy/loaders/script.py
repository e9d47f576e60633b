"""Scripting front end for authoring custom systems.

Content scripts are plain Python run inside a loader namespace that
exposes ``CustomSystemBody``, ``CustomSystem``, ``f`` (fixed-point values)
and ``v`` (vectors)::

    sol = CustomSystemBody.new("Sol", "STAR_G").radius(f(1, 1)).mass(f(1, 1)).temp(5700)
    earth = CustomSystemBody.new("Earth", "PLANET_TERRESTRIAL").radius(f(1, 1)).mass(f(1, 1))
    moon = CustomSystemBody.new("Moon", "PLANET_TERRESTRIAL").radius(f(273, 1000))

    system = CustomSystem.new("Sol", ["STAR_G"]).govtype("EARTHDEMOC")
    system.bodies(sol, [earth, [moon]])
    system.add_to_sector(0, 0, 0, v(0.5, 0.5, 0.0))

Bodies are listed in pre-order; a nested list holds the direct children
of the body right before it.
"""
from __future__ import annotations

import math
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, Sequence

from pygame.math import Vector3

from galaxy.math.fixed import fixed
from galaxy.systems.body import CustomSystemBody
from galaxy.systems.errors import CustomSystemError
from galaxy.systems.handle import Owned
from galaxy.systems.sector import SystemPath
from galaxy.systems.system import CustomSystem
from galaxy.systems.types import BodyType, GovType
from galaxy.systems.validation import sanity_check_system

if TYPE_CHECKING:
    from galaxy.loaders.session import IngestionSession

# Script method -> CustomSystemBody setter. ``inclination`` and ``latitude``
# write the same slot.
BODY_SETTERS: Dict[str, str] = {
    "seed": "set_seed",
    "radius": "set_radius",
    "radius_km": "set_radius_km",
    "equatorial_to_polar_radius": "set_aspect_ratio",
    "mass": "set_mass",
    "temp": "set_temp",
    "semi_major_axis": "set_semi_major_axis",
    "eccentricity": "set_eccentricity",
    "orbital_offset": "set_orbital_offset",
    "orbital_phase_at_start": "set_orbital_phase_at_start",
    "latitude": "set_latitude",
    "inclination": "set_latitude",
    "longitude": "set_longitude",
    "arg_of_periapsis": "set_arg_of_periapsis",
    "rotation_period": "set_rotation_period",
    "rotational_phase_at_start": "set_rotational_phase_at_start",
    "axial_tilt": "set_axial_tilt",
    "height_map": "set_height_map",
    "metallicity": "set_metallicity",
    "volcanicity": "set_volcanicity",
    "atmos_density": "set_atmos_density",
    "atmos_oxidizing": "set_atmos_oxidizing",
    "ocean_cover": "set_ocean_cover",
    "ice_cover": "set_ice_cover",
    "space_station_type": "set_space_station_type",
    "life": "set_life",
    "population": "set_population",
    "agricultural": "set_agricultural",
    "rings": "set_rings",
}


class ScriptBody:
    """Script-side handle to a body that has not been attached yet."""

    def __init__(self, session: "IngestionSession", body: CustomSystemBody) -> None:
        self._session = session
        self._slot: Owned[CustomSystemBody] = Owned(body, "body")

    def __repr__(self) -> str:
        return f"ScriptBody({self._slot!r})"

    @property
    def body(self) -> CustomSystemBody:
        return self._slot.get()

    def take(self) -> CustomSystemBody:
        return self._slot.take()


def _body_method(script_name: str, setter_name: str) -> Callable[..., ScriptBody]:
    def method(self: ScriptBody, *args: Any) -> ScriptBody:
        body = self._slot.get()
        try:
            getattr(body, setter_name)(*args, logger=self._session.systems_log)
        except CustomSystemError as exc:
            raise CustomSystemError(f"body '{body.name}' {script_name}: {exc}") from exc
        return self

    method.__name__ = script_name
    method.__doc__ = f"Chaining wrapper for :meth:`CustomSystemBody.{setter_name}`."
    return method


for _script_name, _setter_name in BODY_SETTERS.items():
    setattr(ScriptBody, _script_name, _body_method(_script_name, _setter_name))


def attach_nested(parent: CustomSystemBody, items: Sequence[Any]) -> None:
    """Move the bodies in ``items`` under ``parent``.

    Each body may be followed by any number of lists; every such list holds
    children of that body, never of the list before it.
    """

    index = 0
    while index < len(items):
        item = items[index]
        if not isinstance(item, ScriptBody):
            raise CustomSystemError(
                f"expected a body at position {index + 1} under '{parent.name}', "
                f"got {type(item).__name__}"
            )
        kid = item.take()
        index += 1
        while index < len(items) and isinstance(items[index], (list, tuple)):
            attach_nested(kid, items[index])
            index += 1
        parent.children.append(kid)


class ScriptSystem:
    """Script-side handle to a system that has not been added to a sector."""

    def __init__(self, session: "IngestionSession", system: CustomSystem) -> None:
        self._session = session
        self._slot: Owned[CustomSystem] = Owned(system, "system")

    def __repr__(self) -> str:
        return f"ScriptSystem({self._slot!r})"

    @property
    def system(self) -> CustomSystem:
        return self._slot.get()

    def seed(self, value: int) -> "ScriptSystem":
        self._slot.get().set_seed(value)
        return self

    def explored(self, value: object) -> "ScriptSystem":
        self._slot.get().set_explored(bool(value))
        return self

    def short_desc(self, text: str) -> "ScriptSystem":
        self._slot.get().set_short_desc(text)
        return self

    def long_desc(self, text: str) -> "ScriptSystem":
        self._slot.get().set_long_desc(text)
        return self

    def govtype(self, value: object) -> "ScriptSystem":
        self._slot.get().set_gov_type(value)
        return self

    def lawlessness(self, value: object) -> "ScriptSystem":
        self._slot.get().set_lawlessness(value, self._session.systems_log)
        return self

    def other_names(self, names: object) -> "ScriptSystem":
        system = self._slot.get()
        system.set_other_names(names if isinstance(names, (list, tuple)) else ())
        return self

    def faction(self, name: str) -> "ScriptSystem":
        system = self._slot.get()
        if not isinstance(name, str):
            raise CustomSystemError(f"faction of system '{system.name}' must be a string")
        if not system.assign_faction(self._session.factions, name):
            raise CustomSystemError(f"Faction not found: {name}")
        return self

    def bodies(self, primary: ScriptBody, children: Sequence[Any] = ()) -> "ScriptSystem":
        system = self._slot.get()
        if not isinstance(primary, ScriptBody):
            raise CustomSystemError(f"bodies of system '{system.name}' must start with a body")
        if not isinstance(children, (list, tuple)):
            raise CustomSystemError(f"children of system '{system.name}' must be a list")
        primary_type = primary.body.type
        if not primary_type.is_star_or_gravpoint:
            raise CustomSystemError("first body does not have a valid star type")
        if primary_type is not BodyType.GRAVPOINT and primary_type != system.primary_type[0]:
            raise CustomSystemError("first body type does not match the system's primary star type")
        root = primary.take()
        attach_nested(root, children)
        system.set_root(root)
        return self

    def add_to_sector(self, x: int, y: int, z: int, pos: object) -> None:
        system = self._slot.get()
        sanity_check_system(system, self._session.validation_log)
        path = SystemPath(x, y, z)
        if isinstance(pos, Vector3):
            position = Vector3(pos)
        elif isinstance(pos, (list, tuple)) and len(pos) == 3:
            position = Vector3(*pos)
        else:
            raise CustomSystemError(f"position of system '{system.name}' must be a vector")
        system.sector_x, system.sector_y, system.sector_z = path.x, path.y, path.z
        system.pos = position
        self._session.database.add_custom_system(path, self._slot.take())
        if self._session.loader_log:
            self._session.loader_log.debug("Added %s to sector %s", system.name, path)


class BodyApi:
    """The ``CustomSystemBody`` global seen by scripts."""

    def __init__(self, session: "IngestionSession") -> None:
        self._session = session

    def new(self, name: str, body_type: object) -> ScriptBody:
        if not isinstance(name, str):
            raise CustomSystemError("body name must be a string")
        try:
            kind = BodyType.parse(body_type)
        except CustomSystemError:
            raise CustomSystemError(f"body '{name}' does not have a valid type")
        return ScriptBody(self._session, CustomSystemBody(name=name, type=kind))


class SystemApi:
    """The ``CustomSystem`` global seen by scripts."""

    def __init__(self, session: "IngestionSession") -> None:
        self._session = session

    def new(self, name: str, star_types: Sequence[object]) -> ScriptSystem:
        if not isinstance(name, str):
            raise CustomSystemError("system name must be a string")
        if not isinstance(star_types, (list, tuple)):
            raise CustomSystemError(f"star types of system '{name}' must be a list")
        system = CustomSystem(name=name)
        system.set_star_types(star_types)
        return ScriptSystem(self._session, system)


def create_loader_namespace(session: "IngestionSession") -> Dict[str, Any]:
    """Build the fresh globals shared by every script of one session."""

    return {
        "__name__": "__custom_systems__",
        "CustomSystem": SystemApi(session),
        "CustomSystemBody": BodyApi(session),
        "f": fixed,
        "fixed": fixed,
        "v": Vector3,
        "Vector3": Vector3,
        "math": math,
        "BodyType": BodyType,
        "GovType": GovType,
    }


def execute_script(session: "IngestionSession", path: Path) -> None:
    source = path.read_text(encoding="utf-8")
    code = compile(source, str(path), "exec")
    exec(code, session.namespace)


__all__ = [
    "BODY_SETTERS",
    "BodyApi",
    "ScriptBody",
    "ScriptSystem",
    "SystemApi",
    "attach_nested",
    "create_loader_namespace",
    "execute_script",
]
