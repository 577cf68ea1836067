from dataclasses import dataclass
import logging
from typing import Optional, Tuple

from .bounds import calculate_plate_dimensions
from .case import WallOutlines, wall_outlines
from .config import KeyboardConfig, resolve_config
from .engines import OutlineEngine, ShapelyEngine
from .layout import get_layout
from .model import PlateDimensions
from .organic_case import calculate_pole_bounds, create_all_poles, extreme_poles_by_face


@dataclass(frozen=True)
class KeyboardBuild:
    config: KeyboardConfig
    key_placements: Tuple
    dimensions: PlateDimensions
    outlines: WallOutlines


def build(config: KeyboardConfig, outline_engine: Optional[OutlineEngine] = None) -> KeyboardBuild:
    """
    Place the keys, size the plate and trace the wall outlines for a resolved configuration.
    """
    if outline_engine is None:
        outline_engine = ShapelyEngine(config.resolution)

    key_placements = get_layout(config)
    dimensions = calculate_plate_dimensions(key_placements, config.switch.footprint, config.layout.edge_margin)
    outlines = wall_outlines(key_placements, dimensions, config, outline_engine)

    logging.info("Keyboard size: %d keys", len(key_placements))
    logging.info("Plate dimensions: %.1fx%.1fmm", dimensions.plate_width, dimensions.plate_height)
    return KeyboardBuild(config, tuple(key_placements), dimensions, outlines)


def build_report(keyboard: KeyboardBuild, outline_engine: OutlineEngine, include_poles: bool = False) -> dict:
    """
    JSON-ready summary of a build.
    """
    config = keyboard.config
    report = {
        "profile": config.name,
        "case_style": config.enclosure.case_style.value,
        "keys": [
            {"x": placement.pos.x, "y": placement.pos.y, "rotation": placement.rot}
            for placement in keyboard.key_placements
        ],
        "plate": {
            "width": keyboard.dimensions.plate_width,
            "height": keyboard.dimensions.plate_height,
            "offset": list(keyboard.dimensions.plate_offset),
        },
        "outline": {
            "outer": outline_engine.coordinates(keyboard.outlines.outer),
            "inner": outline_engine.coordinates(keyboard.outlines.inner),
            "bounds": list(outline_engine.bounds(keyboard.outlines.outer)),
        },
    }

    if include_poles:
        organic = config.enclosure.organic
        section_size = config.switch.footprint / 2 if organic.section_size is None else organic.section_size
        poles = create_all_poles(keyboard.key_placements, config.switch.footprint)
        extremes = extreme_poles_by_face(poles, calculate_pole_bounds(poles), section_size, organic.section_offset)
        report["poles"] = {
            face.value: [{"x": pole.x, "y": pole.y, "key": pole.key_index, "corner": pole.corner.value} for pole in face_poles]
            for face, face_poles in extremes.items()
        }
    return report


def describe_profile(name: str) -> str:
    """
    One-line summary of a profile, e.g. ``split-36: 36 keys {0:3,0:3,...} + 3 thumbs (split) [choc]``.
    """
    config = resolve_config(name)
    row_layout = config.layout.matrix.row_layout
    matrix_keys = sum(row.length for row in row_layout)
    thumb_keys = config.thumb.count if config.thumb else 0
    total_keys = (matrix_keys + thumb_keys) * (2 if config.layout.mode.mirrored else 1)

    pattern = ",".join(f"{row.start}:{row.length}" for row in row_layout)
    thumb_info = f" + {thumb_keys} thumbs" if thumb_keys else ""
    mode_info = f" ({config.layout.mode.value})" if config.layout.mode.mirrored else ""
    return f"{name}: {total_keys} keys {{{pattern}}}{thumb_info}{mode_info} [{config.switch.type}]"
