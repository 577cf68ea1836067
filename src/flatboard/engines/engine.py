from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Generic, Tuple, TypeVar

TGeometry = TypeVar("TGeometry")
TRegion = TypeVar("TRegion")


class GeometryExporter(ABC, Generic[TGeometry]):
    """
    A class that encapsulates the ability to export geometry.
    """

    @staticmethod
    @abstractmethod
    def file_type() -> str:
        """
        The file extension this exporter supports
        """
        raise NotImplementedError

    @staticmethod
    @abstractmethod
    def export_geometry(shape: TGeometry, path: Path):
        """
        Export the given shape to path.
        """
        raise NotImplementedError


class OutlineEngine(ABC, Generic[TRegion]):
    """
    Planar region engine base class.

    Dimensions are in millimeters.
    All operations return new regions; no in-place manipulation is performed.
    """

    @abstractmethod
    def circle(self, radius: float, center: Sequence = (0, 0)) -> TRegion:
        """
        Create a disk with the given radius around center.
        """
        raise NotImplementedError

    @abstractmethod
    def rectangle(self, width: float, height: float, origin: Sequence = (0, 0)) -> TRegion:
        """
        Create an axis-aligned rectangle whose minimum corner sits at origin.
        """
        raise NotImplementedError

    @abstractmethod
    def convex_hull(self, regions: Iterable[TRegion]) -> TRegion:
        """
        Construct the convex hull of a collection of regions.
        It is an error to pass an empty collection.
        """
        raise NotImplementedError

    @abstractmethod
    def union(self, regions: Iterable[TRegion]) -> TRegion:
        """
        Create a new region from the union of multiple other regions.
        It is an error to pass an empty collection.
        """
        raise NotImplementedError

    @abstractmethod
    def fill(self, region: TRegion) -> TRegion:
        """
        Return the region bounded by the outer boundary of `region`, without holes.
        """
        raise NotImplementedError

    @abstractmethod
    def offset(self, region: TRegion, delta: float) -> TRegion:
        """
        Move every edge of the region outward by delta (inward when negative), keeping sharp corners.
        """
        raise NotImplementedError

    @abstractmethod
    def simplify(self, region: TRegion, tolerance: float) -> TRegion:
        """
        Drop boundary vertices that deviate from their neighbours' chord by less than tolerance.
        """
        raise NotImplementedError

    @abstractmethod
    def minkowski_circle(self, region: TRegion, radius: float) -> TRegion:
        """
        Minkowski sum of the region with a disk of the given radius.
        """
        raise NotImplementedError

    @abstractmethod
    def bounds(self, region: TRegion) -> Tuple[float, float, float, float]:
        """
        (min_x, min_y, max_x, max_y) of the region.
        """
        raise NotImplementedError

    @abstractmethod
    def is_simple(self, region: TRegion) -> bool:
        """
        True when the region is a single, non-empty, non-self-intersecting area.
        """
        raise NotImplementedError

    @abstractmethod
    def coordinates(self, region: TRegion) -> list:
        """
        The outer boundary of a simple region as a list of (x, y) points.
        """
        raise NotImplementedError


class GeometryEngine(ABC, Generic[TGeometry]):
    """
    Solid engine base class.

    Dimensions are in millimeters.
    All operations that manipulate shapes return copies; no in-place manipulation is performed.
    """

    @staticmethod
    @abstractmethod
    def translate(shape: TGeometry, vector: Sequence) -> TGeometry:
        """
        Translate the given shape, and return a copy.
        """
        raise NotImplementedError

    @staticmethod
    @abstractmethod
    def difference(initial_shape: TGeometry, subtractions: Sequence[TGeometry]) -> TGeometry:
        """
        Create a new shape from the subtraction of multiple shapes from a starting shape.
        If `subtractions` is empty, a copy of `initial_shape` is returned.
        """
        raise NotImplementedError

    @staticmethod
    @abstractmethod
    def linear_extrude(outline: Sequence, height: float) -> TGeometry:
        """
        Extrude the region bounded by the closed ring `outline` along +Z.
        """
        raise NotImplementedError

    @staticmethod
    @abstractmethod
    def exporters() -> Iterable[GeometryExporter[TGeometry]]:
        """
        Get the exporters this engine supports.
        """
        raise NotImplementedError
