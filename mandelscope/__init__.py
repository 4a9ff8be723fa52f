"""Public API for locating and rendering complex regions of the Mandelbrot set."""

from .domain import Coord, domain_bound, lower_corner, pixel_to_complex
from .errors import InvalidConfiguration, MandelscopeError, NoStructureFound
from .finder import (
    CenterFinder,
    ZoomStep,
    find_center,
    random_offset,
    recenter,
    retraction_factors,
    score_quadrants,
    select_quadrant,
)
from .options import Options
from .output import normalized_iterations, phase_palette, pixelise, write_ppm
from .solver import MAX_ITERATIONS, PointResult, SolveResult, solve, solve_point, solve_points

__all__ = [
    "CenterFinder",
    "Coord",
    "InvalidConfiguration",
    "MAX_ITERATIONS",
    "MandelscopeError",
    "NoStructureFound",
    "Options",
    "PointResult",
    "SolveResult",
    "ZoomStep",
    "domain_bound",
    "find_center",
    "lower_corner",
    "normalized_iterations",
    "phase_palette",
    "pixel_to_complex",
    "pixelise",
    "random_offset",
    "recenter",
    "retraction_factors",
    "score_quadrants",
    "select_quadrant",
    "solve",
    "solve_point",
    "solve_points",
    "write_ppm",
]
