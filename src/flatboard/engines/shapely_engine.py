from collections.abc import Iterable, Sequence
import logging
from typing import Tuple

from numpy import array, vstack
from scipy.spatial import ConvexHull as sphull
from shapely.geometry import MultiPolygon, Point, Polygon, box
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

from .engine import OutlineEngine

MITRE_LIMIT = 10.0


class ShapelyEngine(OutlineEngine[BaseGeometry]):
    """
    Shapely outline engine

    `resolution` is the number of segments used to approximate a full circle.
    """

    def __init__(self, resolution: int = 64):
        self.resolution = resolution

    @property
    def quad_segs(self) -> int:
        return max(1, self.resolution // 4)

    def circle(self, radius: float, center: Sequence = (0, 0)) -> BaseGeometry:
        return Point(center[0], center[1]).buffer(radius, quad_segs=self.quad_segs)

    def rectangle(self, width: float, height: float, origin: Sequence = (0, 0)) -> BaseGeometry:
        return box(origin[0], origin[1], origin[0] + width, origin[1] + height)

    def convex_hull(self, regions: Iterable[BaseGeometry]) -> BaseGeometry:
        regions = list(regions)
        if not regions:
            raise ValueError("regions cannot be empty")

        return ShapelyEngine._hull_from_points(vstack([ShapelyEngine._vertices(region) for region in regions]))

    @staticmethod
    def _vertices(region: BaseGeometry):
        if isinstance(region, MultiPolygon):
            return vstack([ShapelyEngine._vertices(part) for part in region.geoms])
        return array(region.exterior.coords)

    @staticmethod
    def _hull_from_points(points):
        hull_calc = sphull(points)
        return Polygon(points[hull_calc.vertices])

    def union(self, regions: Iterable[BaseGeometry]) -> BaseGeometry:
        logging.debug("union()")
        regions = list(regions)
        if not regions:
            raise ValueError("regions cannot be empty")
        return unary_union(regions)

    def fill(self, region: BaseGeometry) -> BaseGeometry:
        if region.is_empty:
            return region
        if isinstance(region, MultiPolygon):
            return MultiPolygon([Polygon(part.exterior) for part in region.geoms])
        return Polygon(region.exterior)

    def offset(self, region: BaseGeometry, delta: float) -> BaseGeometry:
        if not delta:
            return region
        return region.buffer(delta, join_style="mitre", mitre_limit=MITRE_LIMIT)

    def simplify(self, region: BaseGeometry, tolerance: float) -> BaseGeometry:
        return region.simplify(tolerance, preserve_topology=True)

    def minkowski_circle(self, region: BaseGeometry, radius: float) -> BaseGeometry:
        return region.buffer(radius, quad_segs=self.quad_segs)

    def bounds(self, region: BaseGeometry) -> Tuple[float, float, float, float]:
        return tuple(region.bounds)

    def is_simple(self, region: BaseGeometry) -> bool:
        return isinstance(region, Polygon) and not region.is_empty and region.is_valid

    def coordinates(self, region: BaseGeometry) -> list:
        return [(float(x), float(y)) for x, y in region.exterior.coords[:-1]]
