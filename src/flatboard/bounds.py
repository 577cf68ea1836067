from collections.abc import Sequence
import logging

from .errors import ConfigurationError
from .geometry import projected_half_extent
from .model import Bounds, EdgeMargin, KeyPlacement, PlateDimensions


def calculate_key_bounds(key_placements: Sequence, key_size: float) -> Bounds:
    """
    Axis-aligned bounds containing every key's rotated square footprint.
    """
    logging.debug("calculate_key_bounds()")
    if not key_placements:
        raise ConfigurationError("cannot compute bounds of an empty key set")

    xs = []
    ys = []
    for placement in key_placements:
        extent = projected_half_extent(placement.rot, key_size)
        xs.extend((placement.pos.x - extent, placement.pos.x + extent))
        ys.extend((placement.pos.y - extent, placement.pos.y + extent))

    return Bounds(min(xs), max(xs), min(ys), max(ys))


def translate_placements(key_placements: Sequence, dx: float, dy: float) -> list:
    return [KeyPlacement(placement.pos + (dx, dy), placement.rot) for placement in key_placements]


def calculate_plate_dimensions(key_placements: Sequence, key_size: float, edge_margin: EdgeMargin) -> PlateDimensions:
    bounds = calculate_key_bounds(key_placements, key_size)
    return PlateDimensions(
        plate_width=bounds.width + edge_margin.left + edge_margin.right,
        plate_height=bounds.height + edge_margin.top + edge_margin.bottom,
    )
