"""Search for a structurally complex region of the Mandelbrot set."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Optional

import numpy as np

from .domain import Coord, domain_bound
from .errors import InvalidConfiguration, NoStructureFound
from .solver import solve

OffsetFn = Callable[[], Coord[float]]


@dataclass(frozen=True)
class ZoomStep:
    """One iteration of the zoom search."""

    index: int
    delta: float
    center: Coord[float]
    quadrant: int
    complexity: int
    next_center: Coord[float]


@dataclass(frozen=True)
class CenterFinder:
    """Zoom toward the quadrant with the most divergence boundaries.

    ``shrinkage`` divides the requested resolution into the coarse grid solved
    at every step. ``zoom_factor`` multiplies the inter-pixel distance after
    each step; values near 0 converge quickly but may overshoot, values near 1
    are slow but robust.
    """

    shrinkage: int = 4
    zoom_factor: float = 0.75
    plane_range: tuple[float, float] = (-2.0, 2.0)

    def __post_init__(self) -> None:
        if self.shrinkage < 1:
            raise InvalidConfiguration("shrinkage", f"expect a positive divisor, got {self.shrinkage}")
        if not 0.0 < self.zoom_factor < 1.0:
            raise InvalidConfiguration("zoom_factor", f"expect a value in (0, 1), got {self.zoom_factor}")
        if not self.plane_range[0] < self.plane_range[1]:
            raise InvalidConfiguration("plane_range", f"expect an increasing range, got {self.plane_range}")

    def coarse_resolution(self, full_resolution: Coord[int]) -> Coord[int]:
        if full_resolution.x <= 0 or full_resolution.y <= 0:
            raise InvalidConfiguration(
                "resolution", f"expect positive pixel counts, got {full_resolution.x}x{full_resolution.y}"
            )
        resolution = Coord(x=full_resolution.x // self.shrinkage, y=full_resolution.y // self.shrinkage)
        if resolution.x == 0 or resolution.y == 0:
            raise InvalidConfiguration(
                "resolution",
                f"{full_resolution.x}x{full_resolution.y} is too small for shrinkage {self.shrinkage}",
            )
        return resolution

    def initial_delta(self, resolution: Coord[int]) -> float:
        """Largest per-axis spacing that fits ``plane_range`` into ``resolution``, keeping pixels square."""

        lo, hi = self.plane_range
        deltas = Coord(x=(hi - lo) / resolution.x, y=(hi - lo) / resolution.y)
        return deltas.x if deltas.y < deltas.x else deltas.y

    def starting_center(
        self, initial_center: Optional[Coord[float]] = None, offset: Optional[OffsetFn] = None
    ) -> Coord[float]:
        """``initial_center`` (midpoint of ``plane_range`` by default) shifted by one ``offset`` draw."""

        if initial_center is None:
            lo, hi = self.plane_range
            origin = 0.5 * lo + 0.5 * hi
            initial_center = Coord(x=origin, y=origin)
        if offset is None:
            return initial_center
        shift = offset()
        return Coord(x=initial_center.x + shift.x, y=initial_center.y + shift.y)

    def iteration_bound(self, full_resolution: Coord[int], target_delta: float) -> int:
        """Number of zoom steps ``zoom_steps`` runs when no step fails.

        This is ``floor(log(d0 / target) / log(1 / zoom_factor)) + 1`` for an initial
        spacing ``d0 >= target``; the spacing is replayed with the same products as
        the search so an exact power of the zoom factor is counted like the loop does.
        """

        delta = self.initial_delta(self.coarse_resolution(full_resolution))
        steps = 0
        while not delta < target_delta:
            delta = self.zoom_factor * delta
            steps += 1
        return steps

    def zoom_steps(
        self,
        full_resolution: Coord[int],
        target_delta: float,
        center: Coord[float],
        *,
        device: Optional[str] = None,
    ) -> Iterator[ZoomStep]:
        """Yield each zoom step from ``center`` until the spacing falls below ``target_delta``.

        Raises :class:`NoStructureFound` as soon as a coarse grid shows no
        boundary at all.
        """

        if not target_delta > 0.0:
            raise InvalidConfiguration("grid_size", f"expect positive number, got {target_delta}")
        resolution = self.coarse_resolution(full_resolution)
        delta = self.initial_delta(resolution)
        index = 0
        while not delta < target_delta:
            result = solve(resolution, center, delta, device=device)
            complexities = score_quadrants(resolution, result.diverged)
            quadrant, complexity = select_quadrant(complexities)
            if complexity == 0:
                raise NoStructureFound(delta, center)
            next_center = recenter(resolution, center, delta, quadrant, self.zoom_factor)
            yield ZoomStep(
                index=index,
                delta=delta,
                center=center,
                quadrant=quadrant,
                complexity=complexity,
                next_center=next_center,
            )
            center = next_center
            delta = self.zoom_factor * delta
            index += 1

    def find_center(
        self,
        full_resolution: Coord[int],
        target_delta: float,
        initial_center: Optional[Coord[float]] = None,
        offset: Optional[OffsetFn] = None,
        *,
        device: Optional[str] = None,
        on_step: Optional[Callable[[ZoomStep], None]] = None,
    ) -> Coord[float]:
        """Return a center whose neighbourhood at ``target_delta`` shows boundary structure."""

        center = self.starting_center(initial_center, offset)
        for step in self.zoom_steps(full_resolution, target_delta, center, device=device):
            if on_step is not None:
                on_step(step)
            center = step.next_center
        return center


def score_quadrants(resolution: Coord[int], diverged: np.ndarray) -> np.ndarray:
    """Count divergence disagreements between interior pixels and their four neighbours.

    The grid is split at ``resolution // 2`` on both axes; the score of quadrant
    ``2 * row_half + col_half`` accumulates, for every interior pixel in it, the
    number of axis neighbours whose flag differs from its own. Pixels on the
    outermost rows and columns are not scored.
    """

    flags = np.asarray(diverged, dtype=np.uint64).reshape(resolution.y, resolution.x)
    scores = np.zeros_like(flags)
    if resolution.x >= 3 and resolution.y >= 3:
        inner = flags[1:-1, 1:-1]
        scores[1:-1, 1:-1] = (
            (inner ^ flags[1:-1, :-2])
            + (inner ^ flags[1:-1, 2:])
            + (inner ^ flags[:-2, 1:-1])
            + (inner ^ flags[2:, 1:-1])
        )

    half_x = resolution.x // 2
    half_y = resolution.y // 2
    return np.array(
        [
            scores[:half_y, :half_x].sum(),
            scores[:half_y, half_x:].sum(),
            scores[half_y:, :half_x].sum(),
            scores[half_y:, half_x:].sum(),
        ],
        dtype=np.uint64,
    )


def select_quadrant(complexities: np.ndarray) -> tuple[int, int]:
    """Pick the quadrant with the highest score; ties go to the lowest index."""

    index = int(np.argmax(complexities))
    return index, int(complexities[index])


def retraction_factors(quadrant: int, zoom_factor: float) -> tuple[Coord[float], Coord[float]]:
    """Per-axis factors for the lower and upper domain edges when zooming into ``quadrant``.

    The edges facing away from the quadrant are pulled toward the center.
    """

    one = 1.0
    f = zoom_factor
    table = (
        (Coord(x=one, y=one), Coord(x=f, y=f)),
        (Coord(x=f, y=one), Coord(x=one, y=f)),
        (Coord(x=one, y=f), Coord(x=f, y=one)),
        (Coord(x=f, y=f), Coord(x=one, y=one)),
    )
    if not 0 <= quadrant < len(table):
        raise ValueError(f"quadrant must be in [0, 3], got {quadrant}")
    return table[quadrant]


def recenter(
    resolution: Coord[int],
    center: Coord[float],
    delta: float,
    quadrant: int,
    zoom_factor: float,
) -> Coord[float]:
    """Midpoint of the domain retracted toward ``quadrant``."""

    lower, upper = retraction_factors(quadrant, zoom_factor)
    corners = (
        Coord(
            x=domain_bound(-1.0, resolution.x, center.x, delta, lower.x),
            y=domain_bound(-1.0, resolution.y, center.y, delta, lower.y),
        ),
        Coord(
            x=domain_bound(1.0, resolution.x, center.x, delta, upper.x),
            y=domain_bound(1.0, resolution.y, center.y, delta, upper.y),
        ),
    )
    return Coord(
        x=0.5 * corners[0].x + 0.5 * corners[1].x,
        y=0.5 * corners[0].y + 0.5 * corners[1].y,
    )


def random_offset(seed: int, low: float = -1.0, high: float = 1.0) -> OffsetFn:
    """Offset strategy drawing ``x`` then ``y`` uniformly from ``[low, high)``."""

    rng = np.random.default_rng(seed)

    def draw() -> Coord[float]:
        x = float(rng.uniform(low, high))
        y = float(rng.uniform(low, high))
        return Coord(x=x, y=y)

    return draw


def find_center(
    full_resolution: Coord[int],
    target_delta: float,
    initial_center: Optional[Coord[float]] = None,
    offset: Optional[OffsetFn] = None,
) -> Coord[float]:
    """Run :meth:`CenterFinder.find_center` with the default search parameters."""

    return CenterFinder().find_center(full_resolution, target_delta, initial_center, offset)
