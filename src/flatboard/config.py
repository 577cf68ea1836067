"""
Keyboard configuration.

A resolved configuration is produced by merging, in order, the base parameters, the
switch specification, a named profile, and any user overrides. The merged parameters
are validated once and frozen into a `KeyboardConfig`; nothing downstream reads
configuration from anywhere else.
"""
from collections.abc import Mapping
import copy
from dataclasses import dataclass
from enum import Enum
from functools import reduce
import importlib.resources as resources
import json
import logging
import numbers
import pathlib
from typing import Any, Optional, Tuple

from .errors import ConfigurationError
from .model import EdgeMargin, Point2D, RowLayoutItem, ThumbClusterSpec

DEFAULT_PROFILE = "split-36"

BASE_PARAMETERS = {
    "layout": {
        "mode": "single",
        "center_gap": 25.0,
        "edge_margin": 6.0,
        "base_degrees": 0.0,
        "matrix": {
            "row_layout": [],
            "pitch": 18.2,
        },
    },
    "switch": {
        "type": "choc",
        "cutout": {
            "size": 13.8,
            "footprint": 15.0,
        },
        "plate": {
            "thickness": 1.6,
            "total_thickness": 4.0,
        },
    },
    "thumb": {
        "cluster": {
            "keys": 0,
            "spacing": 20.0,
            "rotation": 0.0,
        },
        "offset": {"x": 0.0, "y": 0.0},
        "per_key": {
            "rotations": [],
            "offsets": [],
        },
    },
    "enclosure": {
        "case_style": "rectangular",
        "plate": {
            "top_thickness": 1.5,
            "bottom_thickness": 1.0,
        },
        "walls": {
            "thickness": 1.5,
            "height": 8.0,
        },
        "organic": {
            "corner_radius": 0.0,
            "section_size": None,
            "section_offset": 0.0,
        },
    },
    "output": {
        "resolution": 64,
    },
}

SWITCH_SPECS = {
    "choc": {
        "description": "Kailh Choc Low Profile",
        "switch": {
            "cutout": {"size": 13.8, "footprint": 15.0},
            "plate": {"thickness": 1.6, "total_thickness": 8.0},
        },
        "layout": {"matrix": {"pitch": 18.0}},
    },
    "mx": {
        "description": "Cherry MX Compatible",
        "switch": {
            "cutout": {"size": 13.9, "footprint": 15.9},
            "plate": {"thickness": 4.1, "total_thickness": 7.1},
        },
        "layout": {"matrix": {"pitch": 18.6}},
    },
}


class LayoutMode(Enum):
    SINGLE = "single"
    SPLIT = "split"
    UNIBODY = "unibody"

    @property
    def mirrored(self) -> bool:
        return self is not LayoutMode.SINGLE


class CaseStyle(Enum):
    RECTANGULAR = "rectangular"
    ORGANIC = "organic"


@dataclass(frozen=True)
class MatrixConfig:
    row_layout: Tuple[RowLayoutItem, ...]
    pitch: float


@dataclass(frozen=True)
class LayoutConfig:
    matrix: MatrixConfig
    mode: LayoutMode = LayoutMode.SINGLE
    center_gap: float = 25.0
    edge_margin: EdgeMargin = EdgeMargin.uniform(6.0)
    base_degrees: float = 0.0


@dataclass(frozen=True)
class SwitchConfig:
    type: str
    cutout_size: float
    footprint: float
    plate_thickness: float
    total_thickness: float


@dataclass(frozen=True)
class OrganicConfig:
    corner_radius: float = 0.0
    section_size: Optional[float] = None
    section_offset: float = 0.0


@dataclass(frozen=True)
class EnclosureConfig:
    case_style: CaseStyle
    top_thickness: float
    bottom_thickness: float
    wall_thickness: float
    wall_height: float
    organic: OrganicConfig = OrganicConfig()

    @property
    def total_height(self) -> float:
        return self.top_thickness + self.wall_height


@dataclass(frozen=True)
class KeyboardConfig:
    layout: LayoutConfig
    switch: SwitchConfig
    thumb: Optional[ThumbClusterSpec]
    enclosure: EnclosureConfig
    resolution: int = 64
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, params: Mapping, name: Optional[str] = None) -> "KeyboardConfig":
        """
        Validate merged parameters and build the immutable configuration.
        """
        logging.debug("KeyboardConfig.from_dict()")
        layout = _section(params, "layout")
        matrix = _section(layout, "matrix")
        switch = _section(params, "switch")
        cutout = _section(switch, "cutout")
        plate = _section(switch, "plate")
        enclosure = _section(params, "enclosure")
        walls = _section(enclosure, "walls")
        enclosure_plate = _section(enclosure, "plate")
        organic = _section(enclosure, "organic")

        switch_type = switch.get("type")
        if switch_type not in SWITCH_SPECS:
            raise ConfigurationError(f"Unknown switch type {switch_type!r}, expected one of {sorted(SWITCH_SPECS)}")

        section_size = organic.get("section_size")
        return cls(
            layout=LayoutConfig(
                matrix=MatrixConfig(
                    row_layout=_parse_rows(matrix.get("row_layout")),
                    pitch=_number(matrix, "pitch"),
                ),
                mode=_enum(LayoutMode, layout.get("mode"), "layout.mode"),
                center_gap=_number(layout, "center_gap"),
                edge_margin=_parse_edge_margin(layout.get("edge_margin")),
                base_degrees=_number(layout, "base_degrees"),
            ),
            switch=SwitchConfig(
                type=switch_type,
                cutout_size=_number(cutout, "size"),
                footprint=_number(cutout, "footprint"),
                plate_thickness=_number(plate, "thickness"),
                total_thickness=_number(plate, "total_thickness"),
            ),
            thumb=_parse_thumb(params.get("thumb")),
            enclosure=EnclosureConfig(
                case_style=_enum(CaseStyle, enclosure.get("case_style"), "enclosure.case_style"),
                top_thickness=_number(enclosure_plate, "top_thickness"),
                bottom_thickness=_number(enclosure_plate, "bottom_thickness"),
                wall_thickness=_number(walls, "thickness"),
                wall_height=_number(walls, "height"),
                organic=OrganicConfig(
                    corner_radius=_number(organic, "corner_radius"),
                    section_size=None if section_size is None else _number(organic, "section_size"),
                    section_offset=_number(organic, "section_offset"),
                ),
            ),
            resolution=int(_number(_section(params, "output"), "resolution")),
            name=name,
        )


def deep_merge(base: Any, override: Any) -> Any:
    """
    Merge `override` into a copy of `base`.

    Mappings are merged recursively; lists and scalars in `override` replace the base
    value; `None` values in `override` leave the base value untouched.
    """
    if not isinstance(override, Mapping):
        return copy.deepcopy(base) if override is None else copy.deepcopy(override)
    if not isinstance(base, Mapping):
        return copy.deepcopy(override)

    result = copy.deepcopy(dict(base))
    for key, value in override.items():
        if value is None:
            continue
        if isinstance(result.get(key), Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def merge_layers(*layers: Optional[Mapping]) -> dict:
    return reduce(deep_merge, (layer for layer in layers if layer), {})


def _profiles_dir():
    return resources.files("flatboard") / "profiles"


def available_profiles() -> list:
    return sorted(
        entry.name[: -len(".json")]
        for entry in _profiles_dir().iterdir()
        if entry.name.endswith(".json")
    )


def load_profile(name: str) -> dict:
    if name not in available_profiles():
        raise ConfigurationError(f"Profile '{name}' not found. Available profiles: {', '.join(available_profiles())}")

    logging.info("Loading profile %s", name)
    return json.loads((_profiles_dir() / f"{name}.json").read_text(encoding="utf-8"))


def load_overrides(path: pathlib.Path) -> dict:
    logging.info("Loading configuration overrides from %s", path)
    try:
        with open(path, mode="rt", encoding="utf-8") as fid:
            overrides = json.load(fid)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Unable to read configuration file {path}: {e}") from e

    if not isinstance(overrides, Mapping):
        raise ConfigurationError(f"Configuration file {path} must contain a JSON object")
    return overrides


def switch_layer(switch_type: str) -> dict:
    if switch_type not in SWITCH_SPECS:
        raise ConfigurationError(f"Unknown switch type {switch_type!r}, expected one of {sorted(SWITCH_SPECS)}")
    return {key: value for key, value in SWITCH_SPECS[switch_type].items() if key != "description"}


def resolve_parameters(profile: Optional[Mapping] = None, overrides: Optional[Mapping] = None) -> dict:
    """
    Merge base parameters <- switch spec <- profile <- overrides.

    The switch spec is chosen from the switch type the later layers ask for.
    """
    switch_type = merge_layers(BASE_PARAMETERS, profile, overrides)["switch"]["type"]
    return merge_layers(BASE_PARAMETERS, switch_layer(switch_type), profile, overrides)


def resolve_config(profile: Optional[str] = None, overrides: Optional[Mapping] = None) -> KeyboardConfig:
    profile_params = load_profile(profile) if profile else None
    return KeyboardConfig.from_dict(resolve_parameters(profile_params, overrides), name=profile)


def _section(params: Mapping, key: str) -> Mapping:
    value = params.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{key}' must be an object")
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _number(params: Mapping, key: str) -> float:
    value = params.get(key)
    if not _is_number(value):
        raise ConfigurationError(f"'{key}' must be a number, got {value!r}")
    return float(value)


def _enum(enum_type, value: Any, key: str):
    try:
        return enum_type(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_type)
        raise ConfigurationError(f"'{key}' must be one of {choices}, got {value!r}") from None


def _parse_point(value: Any, key: str) -> Point2D:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"'{key}' must be an object with x and y")
    return Point2D(_number(value, "x"), _number(value, "y"))


def _parse_rows(rows: Any) -> Tuple[RowLayoutItem, ...]:
    if not rows:
        raise ConfigurationError("row_layout must be defined and non-empty")
    if not isinstance(rows, (list, tuple)):
        raise ConfigurationError("row_layout must be a list of rows")

    parsed = []
    for index, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise ConfigurationError(f"row_layout[{index}] must be an object")
        start = row.get("start")
        length = row.get("length")
        offset = row.get("offset", 0.0)
        anchor = row.get("thumb_anchor")
        if not isinstance(start, int) or isinstance(start, bool):
            raise ConfigurationError(f"row_layout[{index}].start must be an integer")
        if not isinstance(length, int) or isinstance(length, bool) or length <= 0:
            raise ConfigurationError(f"row_layout[{index}].length must be a positive integer")
        if not _is_number(offset):
            raise ConfigurationError(f"row_layout[{index}].offset must be a number")
        if anchor is not None and (not isinstance(anchor, int) or isinstance(anchor, bool)):
            raise ConfigurationError(f"row_layout[{index}].thumb_anchor must be an integer")
        parsed.append(RowLayoutItem(start, length, float(offset), anchor))
    return tuple(parsed)


def _parse_edge_margin(value: Any) -> EdgeMargin:
    if _is_number(value):
        return EdgeMargin.uniform(float(value))
    if isinstance(value, Mapping):
        return EdgeMargin(*(_number(value, side) for side in EdgeMargin._fields))
    raise ConfigurationError(f"edge_margin must be a number or an object with {', '.join(EdgeMargin._fields)}")


def _parse_thumb(thumb: Any) -> Optional[ThumbClusterSpec]:
    if thumb is None:
        return None
    if not isinstance(thumb, Mapping):
        raise ConfigurationError("'thumb' must be an object")

    cluster = _section(thumb, "cluster")
    per_key = _section(thumb, "per_key")
    count = cluster.get("keys", 0)
    if not isinstance(count, int) or isinstance(count, bool) or count < 0:
        raise ConfigurationError("thumb cluster keys must be a non-negative integer")
    if count == 0:
        return None

    rotations = per_key.get("rotations") or []
    offsets = per_key.get("offsets") or []
    if not all(_is_number(rotation) for rotation in rotations):
        raise ConfigurationError("thumb per_key rotations must be numbers")
    if len(rotations) != count or len(offsets) != count:
        logging.debug(
            "thumb per_key lengths (%d rotations, %d offsets) differ from %d keys, missing entries default to zero",
            len(rotations), len(offsets), count,
        )

    return ThumbClusterSpec(
        count=count,
        spacing=_number(cluster, "spacing"),
        rotation=_number(cluster, "rotation"),
        base_offset=_parse_point(thumb.get("offset", {"x": 0, "y": 0}), "thumb.offset"),
        rotations=tuple(float(rotation) for rotation in rotations),
        offsets=tuple(_parse_point(offset, "thumb.per_key.offsets") for offset in offsets),
    )
