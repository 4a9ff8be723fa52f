from dataclasses import replace

import pytest

from mandelscope import Coord, InvalidConfiguration, Options


def test_defaults_are_valid():
    options = Options().validate()
    assert options.resolution == Coord(1280, 800)
    assert options.grid_size == 5.0e-7
    assert options.fname == "image.ppm"


@pytest.mark.parametrize(
    "changes, key",
    [
        ({"grid_size": 0.0}, "grid_size"),
        ({"grid_size": -1.0e-3}, "grid_size"),
        ({"width": 0}, "width"),
        ({"height": 0}, "height"),
        ({"fname": "image.png"}, "fname"),
        ({"seed": -1}, "seed"),
        ({"seed": 2 ** 64}, "seed"),
        ({"zoom_factor": 1.0}, "zoom_factor"),
        ({"shrinkage": 0}, "shrinkage"),
        ({"width": 3, "height": 3}, "shrinkage"),
        ({"colormap": "no-such-map"}, "colormap"),
    ],
)
def test_invalid_values_are_rejected(changes, key):
    with pytest.raises(InvalidConfiguration) as excinfo:
        replace(Options(), **changes).validate()
    assert excinfo.value.key == key
    assert excinfo.value.code == "INVALID_CONFIGURATION"


def test_invalid_configuration_is_a_value_error():
    with pytest.raises(ValueError):
        Options(grid_size=float("nan")).validate()


def test_summary_lists_settings():
    lines = Options(seed=7, fname="out/x.ppm").summary()
    assert any("random seed" in line and "7" in line for line in lines)
    assert any("out/x.ppm" in line for line in lines)
