"""Coordinates and rectangular domains on the complex plane."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T", int, float)


@dataclass(frozen=True)
class Coord(Generic[T]):
    """A pair of values along the horizontal and vertical axes."""

    x: T
    y: T


def domain_bound(sign: float, resolution: int, center: float, delta: float, factor: float) -> float:
    """Return the lower (``sign=-1``) or upper (``sign=+1``) edge of one axis.

    ``factor`` retracts the edge toward ``center``; 1.0 gives the full domain.
    """

    return center + sign * 0.5 * factor * resolution * delta


def lower_corner(resolution: Coord[int], center: Coord[float], delta: float) -> Coord[float]:
    return Coord(
        x=domain_bound(-1.0, resolution.x, center.x, delta, 1.0),
        y=domain_bound(-1.0, resolution.y, center.y, delta, 1.0),
    )


def pixel_to_complex(corner: Coord[float], delta: float, row: int, col: int) -> Coord[float]:
    return Coord(x=corner.x + col * delta, y=corner.y + row * delta)
