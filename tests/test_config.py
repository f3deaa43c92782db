from __future__ import annotations

import pytest

from fractal_nav.config import ViewerConfig
from fractal_nav.view import DEFAULT_VIEW, View


def test_defaults_match_viewer_constants() -> None:
    config = ViewerConfig()

    assert config.default_view == DEFAULT_VIEW
    assert config.pan_fraction == 0.25
    assert config.zoom_in_factor == 0.75
    assert config.zoom_out_factor == 1.25
    assert config.timeout is None
    assert config.alt_text == "Render of the mandelbrot set"


def test_replace_returns_validated_copy() -> None:
    config = ViewerConfig()
    other = config.replace(endpoint="http://example.invalid/render", default_view=View(0.0, 0.0, 1.0))

    assert other.endpoint == "http://example.invalid/render"
    assert other.default_view == View(0.0, 0.0, 1.0)
    assert config.endpoint != other.endpoint

    with pytest.raises(ValueError, match="zoom_in_factor"):
        config.replace(zoom_in_factor=0)


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"endpoint": ""}, "endpoint"),
        ({"pan_fraction": -0.25}, "pan_fraction"),
        ({"zoom_out_factor": 0.0}, "zoom_out_factor"),
        ({"max_workers": 0}, "max_workers"),
        ({"default_view": (-0.5, 0.0, 3.0)}, "default_view"),
    ],
)
def test_invalid_options_are_rejected(kwargs: dict, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        ViewerConfig(**kwargs)
