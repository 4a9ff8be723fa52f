import numpy as np
import pytest

from mandelscope import (
    MAX_ITERATIONS,
    Coord,
    SolveResult,
    normalized_iterations,
    pixelise,
    solve,
    write_ppm,
)


def _result(resolution, diverged, iterations):
    return SolveResult(
        resolution=resolution,
        diverged=np.asarray(diverged, dtype=bool),
        iterations=np.asarray(iterations, dtype=np.int64),
    )


def test_normalization_spans_the_whole_grid():
    result = _result(Coord(3, 1), [True, True, False], [2, 10, MAX_ITERATIONS])
    values = normalized_iterations(result)
    assert values[0] == 0.0
    assert values[1] == pytest.approx(8 / (MAX_ITERATIONS - 2))
    assert values[2] == 1.0


def test_flat_grid_maps_diverged_points_to_black():
    result = _result(Coord(2, 2), [True] * 4, [3] * 4)
    assert normalized_iterations(result).tolist() == [0.0] * 4
    assert not pixelise(result, Coord(2, 2)).any()


def test_phase_palette_at_image_center():
    resolution = Coord(4, 2)
    result = _result(resolution, [False] * 8, [MAX_ITERATIONS] * 8)
    pixels = pixelise(result, resolution)
    assert pixels.shape == (2, 4, 3)
    assert pixels.dtype == np.uint8
    # theta is 0 where x and y both vanish
    assert pixels[1, 2].tolist() == [127, 237, 17]


def test_colormap_palette():
    resolution = Coord(4, 3)
    result = _result(resolution, [False] * 12, [MAX_ITERATIONS] * 12)
    pixels = pixelise(result, resolution, colormap="viridis")
    assert pixels.shape == (3, 4, 3)
    assert len({tuple(p) for p in pixels.reshape(-1, 3).tolist()}) == 1


def test_mismatched_resolution_is_rejected():
    result = _result(Coord(2, 2), [True] * 4, [1, 2, 3, 4])
    with pytest.raises(ValueError):
        pixelise(result, Coord(3, 2))


def test_ppm_layout(tmp_path):
    resolution = Coord(6, 4)
    result = solve(resolution, Coord(-0.5, 0.0), 0.5)
    pixels = pixelise(result, resolution)
    path = write_ppm(pixels, tmp_path / "nested" / "image.ppm")

    data = path.read_bytes()
    header = b"P6\n6 4\n255\n"
    assert data[: len(header)] == header
    assert data[len(header):] == pixels.tobytes()
    assert len(data) == len(header) + 6 * 4 * 3


def test_ppm_requires_rgb_triples(tmp_path):
    with pytest.raises(ValueError):
        write_ppm(np.zeros((2, 2), dtype=np.uint8), tmp_path / "gray.ppm")
