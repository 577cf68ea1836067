from typing import NamedTuple, Optional, Tuple


class Point2D(NamedTuple):
    """
    A point on the plate plane, in millimeters.
    """
    x: float
    y: float

    def __add__(self, other):
        return Point2D(self.x + other[0], self.y + other[1])

    def __sub__(self, other):
        return Point2D(self.x - other[0], self.y - other[1])


ORIGIN = Point2D(0.0, 0.0)


class KeyPlacement(NamedTuple):
    """
    Center and orientation (degrees) of a single key.
    """
    pos: Point2D
    rot: float = 0.0


class RowLayoutItem(NamedTuple):
    """
    One matrix row.

    `start` is the column index of the first key and `length` the number of keys.
    `offset` staggers the whole row along X. When `thumb_anchor` equals the absolute
    column of a key in this row, that key seeds the thumb cluster position.
    """
    start: int
    length: int
    offset: float = 0.0
    thumb_anchor: Optional[int] = None


class ThumbClusterSpec(NamedTuple):
    """
    Thumb cluster description.

    `rotations` and `offsets` are per-key adjustments; missing entries are treated as zero.
    """
    count: int
    spacing: float = 18.0
    rotation: float = 0.0
    base_offset: Point2D = ORIGIN
    rotations: Tuple[float, ...] = ()
    offsets: Tuple[Point2D, ...] = ()

    def key_rotation(self, index: int) -> float:
        return self.rotations[index] if index < len(self.rotations) else 0.0

    def key_offset(self, index: int) -> Point2D:
        return self.offsets[index] if index < len(self.offsets) else ORIGIN


class Bounds(NamedTuple):
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


class EdgeMargin(NamedTuple):
    left: float
    right: float
    top: float
    bottom: float

    @classmethod
    def uniform(cls, margin: float) -> "EdgeMargin":
        return cls(margin, margin, margin, margin)

    def smallest(self) -> float:
        return min(self)


class PlateDimensions(NamedTuple):
    plate_width: float
    plate_height: float
    plate_offset: Point2D = ORIGIN
