"""Sector coordinates used to bucket custom systems."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class SystemPath:
    """Integer sector coordinate; hashable so it can key the sector map."""

    x: int
    y: int
    z: int

    def __post_init__(self) -> None:
        for axis in ("x", "y", "z"):
            value = getattr(self, axis)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"sector {axis} must be an integer, got {value!r}")

    def __str__(self) -> str:
        return f"({self.x},{self.y},{self.z})"


__all__ = ["SystemPath"]
