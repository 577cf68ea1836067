"""Tests for the shapely outline engine."""
import math

import pytest
from shapely.geometry import MultiPolygon, Polygon, box

from flatboard.engines import ShapelyEngine


def test_circle_resolution():
    coarse = ShapelyEngine(resolution=8).circle(1.0)
    fine = ShapelyEngine(resolution=128).circle(1.0)
    assert len(ShapelyEngine().coordinates(coarse)) < len(ShapelyEngine().coordinates(fine))
    assert fine.area == pytest.approx(math.pi, rel=1e-2)


def test_circle_center(engine):
    assert engine.bounds(engine.circle(2.0, (5, -1))) == pytest.approx((3, -3, 7, 1))


def test_rectangle(engine):
    assert engine.bounds(engine.rectangle(4, 3, (1, 2))) == (1, 2, 5, 5)


def test_convex_hull_of_disks(engine):
    hull = engine.convex_hull([engine.circle(1.0, (0, 0)), engine.circle(1.0, (10, 0))])
    assert hull.area == pytest.approx(20 + math.pi, rel=1e-2)
    assert engine.is_simple(hull)


def test_convex_hull_of_squares(engine):
    hull = engine.convex_hull([engine.rectangle(1, 1), engine.rectangle(1, 1, (3, 3))])
    assert hull.area == pytest.approx(7.0)


@pytest.mark.parametrize("operation", ["union", "convex_hull"])
def test_empty_collections_rejected(engine, operation):
    with pytest.raises(ValueError):
        getattr(engine, operation)([])


def test_union(engine):
    region = engine.union([engine.rectangle(2, 2), engine.rectangle(2, 2, (1, 0))])
    assert region.area == pytest.approx(6.0)


def test_fill_removes_holes(engine):
    ring = box(0, 0, 10, 10).difference(box(2, 2, 8, 8))
    assert engine.fill(ring).area == pytest.approx(100.0)


def test_offset_keeps_sharp_corners(engine):
    grown = engine.offset(engine.rectangle(10, 10), 1.0)
    assert engine.bounds(grown) == pytest.approx((-1, -1, 11, 11))
    assert grown.area == pytest.approx(144.0)
    assert engine.offset(grown, -1.0).area == pytest.approx(100.0)


def test_zero_offset(engine):
    square = engine.rectangle(10, 10)
    assert engine.offset(square, 0.0).equals(square)


def test_minkowski_circle_rounds_corners(engine):
    rounded = engine.minkowski_circle(engine.rectangle(10, 10), 1.0)
    assert engine.bounds(rounded) == pytest.approx((-1, -1, 11, 11))
    assert rounded.area == pytest.approx(100 + 40 + math.pi, rel=1e-3)


def test_simplify_drops_collinear_points(engine):
    square = Polygon([(0, 0), (5, 0.001), (10, 0), (10, 10), (0, 10)])
    assert len(engine.coordinates(engine.simplify(square, 0.01))) == 4


def test_is_simple(engine):
    assert engine.is_simple(engine.rectangle(1, 1))
    assert not engine.is_simple(Polygon())
    assert not engine.is_simple(MultiPolygon([box(0, 0, 1, 1), box(2, 2, 3, 3)]))
    assert not engine.is_simple(Polygon([(0, 0), (1, 1), (1, 0), (0, 1)]))


def test_coordinates_are_open_ring(engine):
    coordinates = engine.coordinates(engine.rectangle(1, 2))
    assert len(coordinates) == 4
    assert set(coordinates) == {(0, 0), (1, 0), (1, 2), (0, 2)}
