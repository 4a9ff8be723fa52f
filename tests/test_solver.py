import numpy as np
import pytest

from mandelscope import (
    MAX_ITERATIONS,
    Coord,
    InvalidConfiguration,
    PointResult,
    lower_corner,
    pixel_to_complex,
    solve,
    solve_point,
)


def _reference_escape(cx, cy, cap=MAX_ITERATIONS):
    zx, zy = 0.0, 0.0
    iteration = 0
    while True:
        nx = cx + zx * zx - zy * zy
        ny = cy + 2.0 * zx * zy
        iteration += 1
        if iteration > cap:
            return PointResult(False, cap)
        if nx * nx + ny * ny > 4.0:
            return PointResult(True, iteration)
        zx, zy = nx, ny


def test_point_beyond_cusp_diverges_at_second_iteration():
    assert solve_point(Coord(2.0, 0.0)) == PointResult(is_diverged=True, iterations=2)


@pytest.mark.parametrize("c", [Coord(0.0, 0.0), Coord(-2.0, 0.0)])
def test_bounded_points_report_the_cap(c):
    assert solve_point(c) == PointResult(is_diverged=False, iterations=MAX_ITERATIONS)


def test_real_axis_right_of_cusp_diverges():
    for x in (0.26, 0.3, 0.5, 1.0):
        result = solve_point(Coord(x, 0.0))
        assert result.is_diverged
        assert 1 <= result.iterations <= MAX_ITERATIONS


def test_far_point_diverges_immediately():
    assert solve_point(Coord(3.0, 3.0)) == PointResult(True, 1)


def test_grid_matches_scalar_recurrence():
    resolution = Coord(9, 7)
    center = Coord(-0.75, 0.1)
    delta = 0.21
    result = solve(resolution, center, delta)
    corner = lower_corner(resolution, center, delta)

    assert len(result) == resolution.x * resolution.y
    for row in range(resolution.y):
        for col in range(resolution.x):
            c = pixel_to_complex(corner, delta, row, col)
            assert result[row * resolution.x + col] == _reference_escape(c.x, c.y)


def test_results_satisfy_iteration_invariant():
    result = solve(Coord(24, 16), Coord(-0.5, 0.0), 0.15)
    for point in result:
        if point.is_diverged:
            assert 1 <= point.iterations <= MAX_ITERATIONS
        else:
            assert point.iterations == MAX_ITERATIONS


def test_solve_is_idempotent():
    args = (Coord(32, 20), Coord(-0.7436, 0.1318), 1.0e-3)
    first = solve(*args)
    second = solve(*args)
    assert first.diverged.tobytes() == second.diverged.tobytes()
    assert first.iterations.tobytes() == second.iterations.tobytes()


def test_grid_view_is_row_major():
    result = solve(Coord(5, 3), Coord(0.0, 0.0), 0.7)
    diverged, iterations = result.grid()
    assert diverged.shape == (3, 5)
    assert iterations[2, 4] == result[2 * 5 + 4].iterations
    assert list(result)[7] == result[7]


def test_custom_iteration_cap():
    result = solve_point(Coord(0.0, 0.0), max_iterations=16)
    assert result == PointResult(False, 16)


def test_escape_on_the_last_allowed_step_counts_as_diverged():
    assert solve_point(Coord(2.0, 0.0), max_iterations=2) == PointResult(True, 2)
    assert solve_point(Coord(2.0, 0.0), max_iterations=1) == PointResult(False, 1)
    assert _reference_escape(2.0, 0.0, cap=2) == PointResult(True, 2)


def test_slicing_returns_point_results():
    result = solve(Coord(4, 3), Coord(0.0, 0.0), 0.9)
    head = result[0:2]
    assert head == [result[0], result[1]]
    assert result[::5] == [result[0], result[5], result[10]]
    assert result[-1] == result[11]


@pytest.mark.parametrize("resolution", [Coord(0, 4), Coord(4, 0)])
def test_zero_resolution_axis_is_rejected(resolution):
    with pytest.raises(InvalidConfiguration):
        solve(resolution, Coord(0.0, 0.0), 0.1)


def test_non_positive_delta_is_rejected():
    with pytest.raises(InvalidConfiguration):
        solve(Coord(4, 4), Coord(0.0, 0.0), 0.0)


def test_index_past_end_raises():
    result = solve(Coord(2, 2), Coord(0.0, 0.0), 1.0)
    with pytest.raises(IndexError):
        result[4]
    assert isinstance(result.iterations, np.ndarray)
