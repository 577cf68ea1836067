from .engine import GeometryEngine, GeometryExporter, OutlineEngine
from .shapely_engine import ShapelyEngine
