"""
Organic case outlines.

The outline follows the keys instead of their bounding rectangle. Every key
contributes a pole at each of its four rotated corners. For each face of the
keyboard the perpendicular axis is cut into sections, and within each section
the poles furthest out on that face are kept. Walking the kept poles around
the keyboard (left face upward, top face rightward, right face downward,
bottom face leftward) and hulling each consecutive pair of pole markers gives
a closed band, which is filled and then grown by the requested margin.
"""
from collections.abc import Sequence
from enum import Enum
import logging
from typing import NamedTuple, Optional

import numpy as np

from .engines import OutlineEngine, ShapelyEngine
from .errors import OutlineError
from .geometry import rotate_offset
from .model import Bounds

# Corner marker radius used while stitching the outline
POLE_RADIUS = 0.5
# Poles this close to a section's extreme value are all kept
EPSILON = 0.001


class Corner(Enum):
    TL = "tl"
    TR = "tr"
    BR = "br"
    BL = "bl"


class Face(Enum):
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"


class Pole(NamedTuple):
    x: float
    y: float
    key_index: int
    corner: Corner


def corner_offsets(key_size: float) -> list:
    half = key_size / 2
    return [
        (-half, half, Corner.TL),
        (half, half, Corner.TR),
        (half, -half, Corner.BR),
        (-half, -half, Corner.BL),
    ]


def create_poles_for_key(placement, key_size: float, key_index: int) -> list:
    poles = []
    for offset_x, offset_y, corner in corner_offsets(key_size):
        rotated = rotate_offset(offset_x, offset_y, placement.rot)
        poles.append(Pole(placement.pos.x + rotated.x, placement.pos.y + rotated.y, key_index, corner))
    return poles


def create_all_poles(key_placements: Sequence, key_size: float) -> list:
    if key_size <= 0:
        raise OutlineError(f"key size must be positive, got {key_size}")

    poles = []
    for key_index, placement in enumerate(key_placements):
        poles.extend(create_poles_for_key(placement, key_size, key_index))
    return poles


def calculate_pole_bounds(poles: Sequence) -> Bounds:
    if not poles:
        raise OutlineError("cannot compute bounds without poles")

    xs = [pole.x for pole in poles]
    ys = [pole.y for pole in poles]
    return Bounds(min(xs), max(xs), min(ys), max(ys))


def section_edges(section_min: float, section_max: float, section_size: float, section_offset: float = 0.0) -> list:
    """
    Lower edges of the sections covering ``[section_min, section_max]``.

    Regular sections start ``section_offset mod section_size`` above the minimum; the
    remainder below that start forms a short leading section. The last section is
    closed at the maximum, so every pole lands in exactly one section.
    """
    start = section_min + (section_offset % section_size)
    edges = [section_min] if start > section_min else []

    section = 0
    while start + section * section_size < section_max - EPSILON:
        edges.append(start + section * section_size)
        section += 1
    return edges or [section_min]


def _extreme_poles_by_section(
        poles: Sequence,
        section_axis: int,
        section_min: float,
        section_max: float,
        section_size: float,
        section_offset: float,
        find_max: bool,
) -> list:
    coordinates = np.array([(pole.x, pole.y) for pole in poles])
    along = coordinates[:, section_axis]
    outward = coordinates[:, 1 - section_axis]
    edges = section_edges(section_min, section_max, section_size, section_offset)

    result = []
    for section, low in enumerate(edges):
        if section + 1 < len(edges):
            mask = (along >= low) & (along < edges[section + 1])
        else:
            mask = (along >= low) & (along <= section_max)

        in_section = np.flatnonzero(mask)
        if not in_section.size:
            continue

        values = outward[in_section]
        extreme = values.max() if find_max else values.min()
        selected = in_section[np.abs(values - extreme) < EPSILON]
        selected = selected[np.argsort(along[selected], kind="stable")]
        result.extend(poles[index] for index in selected)

    return result


def find_extreme_poles(
        poles: Sequence,
        face: Face,
        bounds: Bounds,
        section_size: float,
        section_offset: float = 0.0,
) -> list:
    """
    Poles furthest out on `face`, one group per non-empty section.

    Left and right faces section the Y axis, top and bottom faces the X axis.
    The result is ordered along the sectioned axis.
    """
    if section_size <= 0:
        raise OutlineError(f"section size must be positive, got {section_size}")
    if not poles:
        return []

    if face is Face.LEFT:
        return _extreme_poles_by_section(poles, 1, bounds.min_y, bounds.max_y, section_size, section_offset, False)
    elif face is Face.RIGHT:
        return _extreme_poles_by_section(poles, 1, bounds.min_y, bounds.max_y, section_size, section_offset, True)
    elif face is Face.TOP:
        return _extreme_poles_by_section(poles, 0, bounds.min_x, bounds.max_x, section_size, section_offset, True)
    elif face is Face.BOTTOM:
        return _extreme_poles_by_section(poles, 0, bounds.min_x, bounds.max_x, section_size, section_offset, False)
    raise ValueError(f"Unknown face {face!r}")


def extreme_poles_by_face(poles: Sequence, bounds: Bounds, section_size: float, section_offset: float = 0.0) -> dict:
    return {face: find_extreme_poles(poles, face, bounds, section_size, section_offset) for face in Face}


def assemble_pole_cycle(poles: Sequence, bounds: Bounds, section_size: float, section_offset: float = 0.0) -> list:
    """
    Extreme poles ordered around the perimeter: left and top ascending, right and bottom descending.
    """
    extremes = extreme_poles_by_face(poles, bounds, section_size, section_offset)
    logging.debug(
        "extreme poles: %s",
        ", ".join(f"{face.value}={len(extremes[face])}" for face in Face),
    )
    return [
        *extremes[Face.LEFT],
        *extremes[Face.TOP],
        *reversed(extremes[Face.RIGHT]),
        *reversed(extremes[Face.BOTTOM]),
    ]


def stitch_outline(cycle: Sequence, engine: OutlineEngine, pole_radius: float = POLE_RADIUS):
    """
    Chain hull around the pole cycle, filled.

    The boundary runs `pole_radius` outside the pole centers.
    """
    logging.debug("stitch_outline()")
    if not cycle:
        raise OutlineError("cannot stitch an outline without poles")

    markers = [engine.circle(pole_radius, (pole.x, pole.y)) for pole in cycle]
    hulls = [
        engine.convex_hull([markers[i], markers[(i + 1) % len(markers)]])
        for i in range(len(markers))
    ]
    return engine.fill(engine.union(hulls))


def expand_outline(stitched, expansion: float, engine: OutlineEngine, pole_radius: float = POLE_RADIUS):
    """
    Grow a stitched outline so its boundary lies `expansion` outside the pole centers.

    The stitched band is grown by `expansion - pole_radius`, which keeps thin bridges
    between groups of keys connected. Its rounded marker corners are covered by the
    outline pulled back onto the pole centers and grown with mitred joins, which
    keeps the corners at the poles sharp.
    """
    logging.debug("expand_outline()")
    core = engine.simplify(engine.offset(stitched, -pole_radius), pole_radius / 10)
    return engine.union([
        engine.offset(stitched, expansion - pole_radius),
        engine.offset(core, expansion),
    ])


def create_organic_outline_2d(
        key_placements: Sequence,
        key_size: float,
        expansion: float,
        corner_radius: float = 0.0,
        section_size: Optional[float] = None,
        section_offset: float = 0.0,
        engine: Optional[OutlineEngine] = None,
):
    """
    Closed outline hugging the keys.

    `section_size` defaults to half the key size; smaller sections follow the keys
    more closely. `expansion` grows the outline with sharp corners, and a positive
    `corner_radius` then rounds it with a Minkowski sum of a disk.
    """
    logging.debug("create_organic_outline_2d()")
    if engine is None:
        engine = ShapelyEngine()
    if section_size is None:
        section_size = key_size / 2
    if section_size <= 0:
        raise OutlineError(f"section size must be positive, got {section_size}")

    poles = create_all_poles(key_placements, key_size)
    if not poles:
        raise OutlineError("Failed to create organic outline: no keys to trace")

    bounds = calculate_pole_bounds(poles)
    cycle = assemble_pole_cycle(poles, bounds, section_size, section_offset)
    if not cycle:
        raise OutlineError("Failed to create organic outline: no valid face outlines generated")

    stitched = stitch_outline(cycle, engine)
    if not engine.is_simple(stitched):
        raise OutlineError("Failed to create organic outline: stitched poles do not form a single region")

    outline = expand_outline(stitched, expansion, engine)
    if corner_radius > 0:
        outline = engine.minkowski_circle(outline, corner_radius)

    if not engine.is_simple(outline):
        raise OutlineError(f"Expanding the organic outline by {expansion} does not give a single simple region")
    return outline
