"""
Shared test fixtures for layout and outline tests.
"""
import pytest

from flatboard.config import KeyboardConfig, deep_merge, resolve_parameters
from flatboard.engines import ShapelyEngine
from flatboard.model import KeyPlacement, Point2D


@pytest.fixture
def engine():
    return ShapelyEngine(resolution=64)


@pytest.fixture
def make_grid():
    """Unrotated grid of keys, row by row, starting at the origin."""
    def factory(columns, rows, pitch, rotation=0.0):
        return [
            KeyPlacement(Point2D(column * pitch, row * pitch), rotation)
            for row in range(rows)
            for column in range(columns)
        ]
    return factory


@pytest.fixture
def grid_2x2(make_grid):
    """2x2 grid on a 19mm pitch."""
    return make_grid(2, 2, 19.0)


@pytest.fixture
def base_params():
    """A 3x3 single-side choc board with an 18mm pitch, 18mm keys and no thumb cluster."""
    return {
        "layout": {
            "matrix": {
                "row_layout": [{"start": 0, "length": 3, "offset": 0}] * 3,
                "pitch": 18.0,
            },
            "edge_margin": 5.0,
        },
        "switch": {"type": "choc", "cutout": {"footprint": 18.0}},
        "enclosure": {"walls": {"thickness": 1.5, "height": 8.0}},
    }


@pytest.fixture
def make_config(base_params):
    """Build a resolved configuration from the base parameters plus overrides."""
    def factory(overrides=None):
        return KeyboardConfig.from_dict(resolve_parameters(deep_merge(base_params, overrides or {})))
    return factory
