"""Colour mapping and PPM encoding of solved grids."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
import PIL.Image
from matplotlib import colormaps

from .domain import Coord
from .solver import SolveResult


def get_colormap(name: str):
    return colormaps[name]


def normalized_iterations(result: SolveResult) -> np.ndarray:
    """Scale escape counts to [0, 1] across the whole grid; bounded points map to 1."""

    iterations = result.iterations.astype(np.float64)
    lo = iterations.min()
    hi = iterations.max()
    span = hi - lo
    if span > 0:
        scaled = (iterations - lo) / span
    else:
        scaled = np.zeros_like(iterations)
    return np.where(result.diverged, scaled, 1.0)


def phase_palette(values: np.ndarray, resolution: Coord[int]) -> np.ndarray:
    """Tint each pixel by its angle around the image center.

    ``values`` is the flat row-major brightness; the result has shape
    ``(rows, columns, 3)`` with channels in [0, 1] before clamping.
    """

    index = np.arange(resolution.x * resolution.y)
    x = (index % resolution.x) / resolution.x - 0.5
    y = (index // resolution.x) / resolution.y - 0.5
    theta = np.arctan2(y, x)
    channels = [
        0.5 * values * (1.0 + np.sin(0.0 / 3.0 * np.pi + theta)),
        0.5 * values * (1.0 + np.sin(2.0 / 3.0 * np.pi + theta)),
        0.5 * values * (1.0 + np.sin(4.0 / 3.0 * np.pi + theta)),
    ]
    return np.stack(channels, axis=-1).reshape(resolution.y, resolution.x, 3)


def pixelise(result: SolveResult, resolution: Coord[int], colormap: Optional[str] = None) -> np.ndarray:
    """Convert solved points into an RGB byte array of shape ``(rows, columns, 3)``."""

    if len(result) != resolution.x * resolution.y:
        raise ValueError(
            f"result holds {len(result)} points, expected {resolution.x * resolution.y} for {resolution.x}x{resolution.y}"
        )
    values = normalized_iterations(result)
    if colormap is None:
        rgb = phase_palette(values, resolution)
    else:
        cmap = get_colormap(colormap)
        rgb = np.asarray(cmap(values))[..., :3].reshape(resolution.y, resolution.x, 3)
    return (255.0 * np.clip(rgb, 0.0, 1.0)).astype(np.uint8)


def write_ppm(pixels: np.ndarray, path: Path) -> Path:
    """Write ``pixels`` as a binary ``P6`` Portable Pixmap."""

    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError(f"expect an array shaped (rows, columns, 3), got {pixels.shape}")
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    image = PIL.Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
    image.save(str(path), format="PPM")
    return path
