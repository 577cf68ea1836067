from collections.abc import Sequence
import logging
from typing import NamedTuple

from .config import CaseStyle, KeyboardConfig
from .engines import GeometryEngine, OutlineEngine
from .model import PlateDimensions
from .organic_case import create_organic_outline_2d

# Extra depth on cavity cuts so the boolean never leaves a skin
EXTRUSION_TOLERANCE = 0.1


class WallOutlines(NamedTuple):
    outer: object
    inner: object


def rectangular_outlines(dimensions: PlateDimensions, wall_thickness: float, engine: OutlineEngine) -> WallOutlines:
    outer = engine.rectangle(
        dimensions.plate_width + 2 * wall_thickness,
        dimensions.plate_height + 2 * wall_thickness,
        dimensions.plate_offset,
    )
    inner = engine.rectangle(
        dimensions.plate_width,
        dimensions.plate_height,
        (dimensions.plate_offset.x + wall_thickness, dimensions.plate_offset.y + wall_thickness),
    )
    return WallOutlines(outer, inner)


def organic_outlines(key_placements: Sequence, config: KeyboardConfig, engine: OutlineEngine) -> WallOutlines:
    organic = config.enclosure.organic
    margin = config.layout.edge_margin.smallest()

    def outline(expansion):
        return create_organic_outline_2d(
            key_placements,
            config.switch.footprint,
            expansion,
            corner_radius=organic.corner_radius,
            section_size=organic.section_size,
            section_offset=organic.section_offset,
            engine=engine,
        )

    return WallOutlines(outline(margin + config.enclosure.wall_thickness), outline(margin))


def wall_outlines(
        key_placements: Sequence,
        dimensions: PlateDimensions,
        config: KeyboardConfig,
        engine: OutlineEngine,
) -> WallOutlines:
    """
    Outer and inner wall boundaries for the configured case style.
    """
    case_style = config.enclosure.case_style
    logging.debug("wall_outlines(%s)", case_style.value)
    if case_style is CaseStyle.RECTANGULAR:
        return rectangular_outlines(dimensions, config.enclosure.wall_thickness, engine)
    elif case_style is CaseStyle.ORGANIC:
        return organic_outlines(key_placements, config, engine)
    raise ValueError(f"Unknown case style {case_style!r}")


def create_wall_box(
        outlines: WallOutlines,
        config: KeyboardConfig,
        outline_engine: OutlineEngine,
        solid_engine: GeometryEngine,
):
    """
    Hollow wall frame: the outer outline at full height with the inner cavity cut from below,
    leaving the top plate thickness closed.
    """
    logging.info("Creating %s wall box", config.enclosure.case_style.value)
    enclosure = config.enclosure
    total_height = enclosure.total_height

    outer = solid_engine.linear_extrude(outline_engine.coordinates(outlines.outer), total_height)
    cavity = solid_engine.linear_extrude(
        outline_engine.coordinates(outlines.inner),
        total_height - enclosure.top_thickness + EXTRUSION_TOLERANCE,
    )
    cavity = solid_engine.translate(cavity, (0, 0, -EXTRUSION_TOLERANCE))
    return solid_engine.difference(outer, [cavity])
