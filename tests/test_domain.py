import pytest

from mandelscope import Coord, domain_bound, lower_corner, pixel_to_complex


def test_domain_bound_full_edges():
    assert domain_bound(-1.0, 8, 0.0, 0.5, 1.0) == -2.0
    assert domain_bound(1.0, 8, 0.0, 0.5, 1.0) == 2.0


def test_domain_bound_matches_formula_bit_for_bit():
    center, delta, factor = -0.743643887037151, 3.1e-5, 0.75
    expected = center + 1.0 * 0.5 * factor * 80 * delta
    assert domain_bound(1.0, 80, center, delta, factor) == expected


def test_retraction_pulls_edge_toward_center():
    full = domain_bound(1.0, 10, 1.0, 0.1, 1.0)
    retracted = domain_bound(1.0, 10, 1.0, 0.1, 0.5)
    assert 1.0 < retracted < full
    assert retracted == pytest.approx(1.25)


def test_lower_corner_and_pixel_coordinates():
    corner = lower_corner(Coord(4, 2), Coord(0.0, 0.0), 0.5)
    assert corner == Coord(-1.0, -0.5)
    assert pixel_to_complex(corner, 0.5, row=1, col=3) == Coord(0.5, 0.0)
