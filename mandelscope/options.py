"""Run-time parameters of the center search and the final render."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from matplotlib import colormaps

from .domain import Coord
from .errors import InvalidConfiguration

SEED_LIMIT = 2 ** 64


@dataclass(frozen=True)
class Options:
    """Validated settings for one run."""

    seed: int = 0
    # inter-pixel distance of the final image
    grid_size: float = 5.0e-7
    width: int = 1280
    height: int = 800
    fname: str = "image.ppm"
    zoom_factor: float = 0.75
    shrinkage: int = 4
    colormap: Optional[str] = None

    @property
    def resolution(self) -> Coord[int]:
        return Coord(x=self.width, y=self.height)

    @property
    def output_path(self) -> Path:
        return Path(self.fname).expanduser()

    def validate(self) -> "Options":
        if not 0 <= self.seed < SEED_LIMIT:
            raise InvalidConfiguration("seed", "expect an integer in [0, 2**64)")
        if not self.grid_size > 0.0:
            raise InvalidConfiguration("grid_size", "expect positive number")
        if self.width <= 0:
            raise InvalidConfiguration("width", "expect positive integer")
        if self.height <= 0:
            raise InvalidConfiguration("height", "expect positive integer")
        if not self.fname.endswith(".ppm"):
            raise InvalidConfiguration("fname", 'expect suffix ".ppm"')
        if not 0.0 < self.zoom_factor < 1.0:
            raise InvalidConfiguration("zoom_factor", "expect a value in (0, 1)")
        if self.shrinkage < 1:
            raise InvalidConfiguration("shrinkage", "expect positive integer")
        if self.width // self.shrinkage == 0 or self.height // self.shrinkage == 0:
            raise InvalidConfiguration(
                "shrinkage", f"coarse grid of {self.width}x{self.height} / {self.shrinkage} has no pixels"
            )
        if self.colormap is not None and self.colormap not in colormaps:
            raise InvalidConfiguration("colormap", f"unknown matplotlib colormap {self.colormap!r}")
        return self

    def summary(self) -> list[str]:
        return [
            f"    random seed     : {self.seed}",
            f"    grid size       : {self.grid_size}",
            f"    width           : {self.width}",
            f"    height          : {self.height}",
            f"    image file name : {self.fname}",
        ]
