from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--width", "320", "--height", "200", "--grid-size", "1e-5"]


@dataclass
class Example:
    name: str
    args: list[str]
    output: Path
    # a run may legitimately stop when the seed leads nowhere
    allow_no_structure: bool = False

    def full_args(self) -> list[str]:
        return [sys.executable, "explore.py", *self.args, "--fname", str(self.output)]


EXAMPLES: list[Example] = [
    Example(name="defaults", args=list(BASE_ARGS), output=EXAMPLES_ROOT / "defaults" / "seed-0.ppm"),
    Example(
        name="seed",
        args=[*BASE_ARGS, "--seed", "2024"],
        output=EXAMPLES_ROOT / "seed" / "seed-2024.ppm",
        allow_no_structure=True,
    ),
    Example(
        name="grid-size",
        args=["--width", "320", "--height", "200", "--grid-size", "5e-7"],
        output=EXAMPLES_ROOT / "grid-size" / "deep.ppm",
    ),
    Example(
        name="zoom-factor",
        args=[*BASE_ARGS, "--zoom-factor", "0.9"],
        output=EXAMPLES_ROOT / "zoom-factor" / "slow-zoom.ppm",
    ),
    Example(
        name="shrinkage",
        args=[*BASE_ARGS, "--shrinkage", "2"],
        output=EXAMPLES_ROOT / "shrinkage" / "finer-search.ppm",
    ),
    Example(
        name="colormap",
        args=[*BASE_ARGS, "--colormap", "inferno"],
        output=EXAMPLES_ROOT / "colormap" / "inferno.ppm",
    ),
    Example(
        name="verbose",
        args=[*BASE_ARGS, "--verbose"],
        output=EXAMPLES_ROOT / "verbose" / "diagnostic.ppm",
    ),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            shutil.rmtree(path)


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _ensure_clean([example.output.parent])
        example.output.parent.mkdir(parents=True, exist_ok=True)
        completed = subprocess.run(example.full_args())
        if completed.returncode == 1 and example.allow_no_structure:
            print(f"[cli-example] {example.name}: no structure for this seed, skipped")
            continue
        if completed.returncode != 0:
            raise RuntimeError(f"Example {example.name} failed with {completed.returncode}")
        if not example.output.is_file():
            raise RuntimeError(f"Expected file {example.output} was not created")
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
