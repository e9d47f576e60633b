"""Consistency checks run over a body tree before it is registered."""
from __future__ import annotations

from typing import Optional

from galaxy.constants import schwarzschild_radius
from galaxy.engine.logger import ChannelLogger
from galaxy.math.fixed import fixed_from_float
from galaxy.systems.body import CustomSystemBody
from galaxy.systems.errors import CustomSystemError
from galaxy.systems.system import CustomSystem
from galaxy.systems.types import BodyType


def _needs_physical_size(body: CustomSystemBody) -> bool:
    return not (body.is_station or body.type is BodyType.GRAVPOINT)


def _check_body(body: CustomSystemBody, logger: Optional[ChannelLogger]) -> None:
    if not body.name:
        raise CustomSystemError("custom system body with name not set")
    if _needs_physical_size(body):
        if body.radius <= 0 and body.mass <= 0:
            raise CustomSystemError(
                f"custom system body '{body.name}' with both radius and mass left undefined"
            )
        if logger:
            if body.radius <= 0:
                logger.warning("'radius' is %f for body '%s'", float(body.radius), body.name)
            if body.mass <= 0:
                logger.warning("'mass' is %f for body '%s'", float(body.mass), body.name)
            if body.average_temp <= 0:
                logger.warning("'averageTemp' is %i for body '%s'", body.average_temp, body.name)
    if body.is_black_hole:
        minimum = schwarzschild_radius(float(body.mass))
        if body.radius < minimum:
            body.radius = fixed_from_float(minimum, round_up=True)
            if logger:
                logger.warning(
                    "Blackhole radius of '%s' defaulted to Schwarzschild radius (%f Sol radii)",
                    body.name,
                    minimum,
                )


def sanity_check_body(root: CustomSystemBody, logger: Optional[ChannelLogger] = None) -> None:
    """Check ``root`` and its descendants in pre-order."""

    for body in root.walk():
        _check_body(body, logger)


def sanity_check_system(system: CustomSystem, logger: Optional[ChannelLogger] = None) -> None:
    if system.is_random():
        return
    sanity_check_body(system.root, logger)


__all__ = ["sanity_check_body", "sanity_check_system"]
