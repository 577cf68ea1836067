"""
Key placement.

Matrix rows are laid out on a uniform pitch with X running along a row and Y
stepping from row to row. The thumb cluster hangs off an anchor resolved from
the matrix, then everything is rotated about the origin, optionally mirrored
into a second half, and finally shifted so the keys start at the edge margins.
"""
from collections.abc import Sequence
import logging

from .bounds import calculate_key_bounds, translate_placements
from .config import KeyboardConfig
from .errors import ConfigurationError
from .geometry import half_index, rotate_point
from .model import ORIGIN, KeyPlacement, Point2D, ThumbClusterSpec


def matrix_key_position(row_index: int, column: int, offset: float, pitch: float) -> Point2D:
    return Point2D(column * pitch + offset, row_index * pitch)


def build_matrix_keys(row_layout: Sequence, pitch: float) -> list:
    logging.debug("build_matrix_keys()")
    if not row_layout:
        raise ConfigurationError("row_layout must be defined and non-empty")

    keys = []
    for row_index, row in enumerate(row_layout):
        for key_index in range(row.length):
            position = matrix_key_position(row_index, row.start + key_index, row.offset, pitch)
            keys.append(KeyPlacement(position, 0.0))
    return keys


def resolve_thumb_anchor(row_layout: Sequence, pitch: float, base_offset: Point2D = ORIGIN) -> Point2D:
    """
    Thumb cluster reference point.

    Every key whose absolute column equals its row's `thumb_anchor` adds its position
    to `base_offset`. When several rows name an anchor, all of them are summed.
    """
    anchor = Point2D(*base_offset)
    matches = 0
    for row_index, row in enumerate(row_layout):
        if row.thumb_anchor is None:
            continue
        for key_index in range(row.length):
            if row.start + key_index == row.thumb_anchor:
                anchor = anchor + matrix_key_position(row_index, row.thumb_anchor, row.offset, pitch)
                matches += 1

    if matches > 1:
        logging.warning("%d rows define a thumb anchor, their positions are summed", matches)
    return anchor


def build_thumb_keys(thumb: ThumbClusterSpec, anchor: Point2D) -> list:
    logging.debug("build_thumb_keys()")
    center = half_index(thumb.count)
    keys = []
    for thumb_index in range(thumb.count):
        offset = thumb.key_offset(thumb_index)
        position = anchor + (offset.x, (center - thumb_index) * thumb.spacing + offset.y)
        keys.append(KeyPlacement(
            rotate_point(position, anchor, thumb.rotation),
            thumb.key_rotation(thumb_index) + thumb.rotation,
        ))
    return keys


def apply_global_rotation(key_placements: Sequence, degrees: float) -> list:
    if not degrees:
        return list(key_placements)
    return [
        KeyPlacement(rotate_point(placement.pos, ORIGIN, degrees), placement.rot + degrees)
        for placement in key_placements
    ]


def mirror_layout(key_placements: Sequence, center_gap: float, key_size: float) -> list:
    """
    Split the layout into two halves about a horizontal axis.

    The reflected copy (negated Y and rotation) is placed below the axis, followed by
    the input keys moved above it, leaving `center_gap` between the key centers'
    extents plus half a key on each side.
    """
    logging.debug("mirror_layout()")
    ys = [placement.pos.y for placement in key_placements]
    center_y = (max(ys) + min(ys)) / 2
    half_extent = (max(ys) - min(ys)) / 2 + key_size / 2
    half_gap = center_gap / 2

    kept = [
        KeyPlacement(Point2D(p.pos.x, p.pos.y - center_y + half_gap + half_extent), p.rot)
        for p in key_placements
    ]
    mirrored = [
        KeyPlacement(Point2D(p.pos.x, -(p.pos.y - center_y) - half_gap - half_extent), -p.rot)
        for p in key_placements
    ]
    return mirrored + kept


def build_layout(config: KeyboardConfig) -> list:
    """
    Matrix keys followed by thumb keys, before any global transform.
    """
    matrix = config.layout.matrix
    keys = build_matrix_keys(matrix.row_layout, matrix.pitch)

    thumb = config.thumb
    if thumb is None or thumb.count == 0:
        return keys

    anchor = resolve_thumb_anchor(matrix.row_layout, matrix.pitch, thumb.base_offset)
    return keys + build_thumb_keys(thumb, anchor)


def get_layout(config: KeyboardConfig) -> list:
    """
    Final key placements, anchored so the keys' bounds start at the edge margins.
    """
    logging.debug("get_layout()")
    layout = config.layout
    key_size = config.switch.footprint

    keys = apply_global_rotation(build_layout(config), layout.base_degrees)
    if layout.mode.mirrored:
        keys = mirror_layout(keys, layout.center_gap, key_size)

    bounds = calculate_key_bounds(keys, key_size)
    wall_thickness = config.enclosure.wall_thickness
    offset_x = -bounds.min_x + layout.edge_margin.left + wall_thickness
    offset_y = -bounds.min_y + layout.edge_margin.bottom + wall_thickness

    logging.info("Placed %d keys", len(keys))
    return translate_placements(keys, offset_x, offset_y)
