"""Physical constants used by the content validator."""
from __future__ import annotations

import math

import astropy.constants as const
import astropy.units as u

# Mean earth radius used by ``radius_km`` authoring.
EARTH_RADIUS_KM = 6371.0

TWO_PI = 2.0 * math.pi

MAX_PRIMARY_STARS = 4

MIN_ASPECT_RATIO = 1
MAX_ASPECT_RATIO = 10000

RING_DEFAULT_ALPHA = 0.85


def schwarzschild_radius(mass: float) -> float:
    """Return the Schwarzschild radius in solar radii for ``mass`` solar masses."""

    radius = 2 * float(mass) * const.M_sun * const.G / const.c**2
    return float(radius.to_value(u.R_sun))


__all__ = [
    "EARTH_RADIUS_KM",
    "MAX_ASPECT_RATIO",
    "MAX_PRIMARY_STARS",
    "MIN_ASPECT_RATIO",
    "RING_DEFAULT_ALPHA",
    "TWO_PI",
    "schwarzschild_radius",
]
