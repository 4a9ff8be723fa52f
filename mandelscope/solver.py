"""Escape-time solver for the quadratic Mandelbrot recurrence."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np
import tensorflow as tf

from .domain import Coord, lower_corner
from .errors import InvalidConfiguration

MAX_ITERATIONS = 1024
# squared escape radius
HORIZON = 4.0


@dataclass(frozen=True)
class PointResult:
    """Outcome of the recurrence for a single pixel."""

    is_diverged: bool
    iterations: int


@dataclass(frozen=True, eq=False)
class SolveResult(Sequence):
    """Row-major results of a solved grid, indexed ``row * resolution.x + column``.

    The flags and counts are kept as flat numpy arrays; indexing yields
    :class:`PointResult` values.
    """

    resolution: Coord[int]
    diverged: np.ndarray
    iterations: np.ndarray

    def __len__(self) -> int:
        return int(self.diverged.size)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self)))]
        return PointResult(
            is_diverged=bool(self.diverged[index]),
            iterations=int(self.iterations[index]),
        )

    def __iter__(self) -> Iterator[PointResult]:
        for flag, count in zip(self.diverged.tolist(), self.iterations.tolist()):
            yield PointResult(is_diverged=flag, iterations=count)

    def grid(self) -> tuple[np.ndarray, np.ndarray]:
        """Return ``(diverged, iterations)`` shaped ``(rows, columns)``."""

        shape = (self.resolution.y, self.resolution.x)
        return self.diverged.reshape(shape), self.iterations.reshape(shape)


@tf.function
def _escape_step(
    xs: tf.Tensor, ys: tf.Tensor, zx: tf.Tensor, zy: tf.Tensor, active: tf.Tensor
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance every still-bounded orbit by one step and flag the ones that escape."""

    zx_next = xs + zx * zx - zy * zy
    zy_next = ys + 2.0 * zx * zy
    zx = tf.where(active, zx_next, zx)
    zy = tf.where(active, zy_next, zy)
    horizon = tf.constant(HORIZON, dtype=zx.dtype)
    escaped = tf.logical_and(active, zx * zx + zy * zy > horizon)
    return zx, zy, escaped


@tf.function
def _escape_run(xs: tf.Tensor, ys: tf.Tensor, max_iterations: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor]:
    """Iterate all orbits until they escape or ``max_iterations`` steps have run."""

    max_iterations = tf.cast(max_iterations, tf.int32)
    i = tf.constant(0, dtype=tf.int32)
    zx = tf.zeros_like(xs)
    zy = tf.zeros_like(ys)
    ns = tf.fill(tf.shape(xs), max_iterations)
    active = tf.ones_like(xs, dtype=tf.bool)

    def cond(i, zx, zy, ns, active):
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i, zx, zy, ns, active):
        i = i + 1
        zx, zy, escaped = _escape_step(xs, ys, zx, zy, active)
        ns = tf.where(escaped, tf.fill(tf.shape(ns), i), ns)
        active = tf.logical_and(active, tf.logical_not(escaped))
        return i, zx, zy, ns, active

    _, _, _, ns, active = tf.while_loop(cond, body, (i, zx, zy, ns, active))
    return ns, tf.logical_not(active)


def solve_points(
    xs: np.ndarray,
    ys: np.ndarray,
    *,
    max_iterations: int = MAX_ITERATIONS,
    device: Optional[str] = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Run the escape-time test on arbitrary plane coordinates.

    Returns ``(diverged, iterations)`` with the shape of ``xs``. A point that
    is still bounded after ``max_iterations`` steps reports ``max_iterations``.
    """

    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    if xs.shape != ys.shape:
        raise ValueError(f"coordinate shapes differ: {xs.shape} != {ys.shape}")
    if xs.size == 0:
        return np.zeros(xs.shape, dtype=bool), np.zeros(xs.shape, dtype=np.int64)

    with tf.device(device if device is not None else "/CPU:0"):
        xs_tf = tf.convert_to_tensor(xs, dtype=tf.float64)
        ys_tf = tf.convert_to_tensor(ys, dtype=tf.float64)
        ns, diverged = _escape_run(xs_tf, ys_tf, tf.constant(max_iterations, dtype=tf.int32))

    return diverged.numpy(), ns.numpy().astype(np.int64)


def solve_point(c: Coord[float], *, max_iterations: int = MAX_ITERATIONS) -> PointResult:
    diverged, iterations = solve_points(
        np.array([c.x], dtype=np.float64),
        np.array([c.y], dtype=np.float64),
        max_iterations=max_iterations,
    )
    return PointResult(is_diverged=bool(diverged[0]), iterations=int(iterations[0]))


def solve(
    resolution: Coord[int],
    center: Coord[float],
    delta: float,
    *,
    max_iterations: int = MAX_ITERATIONS,
    device: Optional[str] = None,
) -> SolveResult:
    """Solve every pixel of the domain ``(resolution, center, delta)``."""

    if resolution.x <= 0 or resolution.y <= 0:
        raise InvalidConfiguration("resolution", f"expect positive pixel counts, got {resolution.x}x{resolution.y}")
    if not delta > 0.0:
        raise InvalidConfiguration("delta", f"expect positive inter-pixel distance, got {delta}")

    corner = lower_corner(resolution, center, delta)
    x = corner.x + np.arange(resolution.x, dtype=np.float64) * np.float64(delta)
    y = corner.y + np.arange(resolution.y, dtype=np.float64) * np.float64(delta)
    xs, ys = np.meshgrid(x, y)

    diverged, iterations = solve_points(
        xs.ravel(), ys.ravel(), max_iterations=max_iterations, device=device
    )
    return SolveResult(resolution=resolution, diverged=diverged, iterations=iterations)
