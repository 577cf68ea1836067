from collections.abc import Iterable, Sequence
from functools import reduce
import logging
from pathlib import Path

from cadquery import Shape, Solid, Vector, Wire, exporters

from .engine import GeometryEngine, GeometryExporter


class _CadQueryStepExporter(GeometryExporter[Shape]):
    """
    Exporter for cadquery that can export STEP files
    """

    @staticmethod
    def file_type() -> str:
        return ".step"

    @staticmethod
    def export_geometry(shape: Shape, path: Path):
        logging.info("Exporting to %s", path)
        exporters.export(shape, str(path), exportType=exporters.ExportTypes.STEP)


class CadQueryEngine(GeometryEngine[Shape]):
    """
    CadQuery geometry engine
    """

    @staticmethod
    def translate(shape: Shape, vector: Sequence) -> Shape:
        return shape.translate(Vector(*vector))

    @staticmethod
    def difference(initial_shape: Shape, subtractions: Sequence[Shape]) -> Shape:
        logging.debug("difference()")
        if not any(subtractions):
            return initial_shape.copy()
        return reduce(lambda initial, to_remove: initial.cut(to_remove), subtractions, initial_shape)

    @staticmethod
    def _wire_from_points(points: Sequence) -> Wire:
        points = [tuple(point) for point in points]
        if points[0] != points[-1]:
            points.append(points[0])
        vertices = [Vector(x, y, 0) for x, y in points]
        return Wire.makePolygon(vertices)

    @staticmethod
    def linear_extrude(outline: Sequence, height: float) -> Shape:
        logging.debug("linear_extrude()")
        return Solid.extrudeLinear(
            CadQueryEngine._wire_from_points(outline),
            [],
            Vector(0, 0, height),
        )

    @staticmethod
    def exporters() -> Iterable[GeometryExporter[Shape]]:
        return [_CadQueryStepExporter]
