"""Unit tests for slider path geometry."""

import math

import numpy as np
import pytest

from ctb_stars.curves import (
    Bezier,
    Catmull,
    InvalidCurveError,
    Linear,
    PathType,
    PerfectArc,
    create_curve,
    resolve_path_type,
)

SHAPES = {
    'linear': ('L', [(0, 0), (100, 0)]),
    'polyline': ('L', [(0, 0), (100, 0), (100, 80)]),
    'bezier': ('B', [(0, 0), (50, 100), (100, 0)]),
    'bezier_multi': ('B', [(0, 0), (50, 50), (100, 0), (100, 0), (150, 50), (200, 0)]),
    'catmull': ('C', [(0, 0), (50, 50), (100, 0), (150, 50)]),
    'perfect': ('P', [(0, 0), (50, 50), (100, 0)]),
}


def _curve(name):
    path_type, points = SHAPES[name]
    return create_curve(path_type, points)


@pytest.mark.parametrize('name', sorted(SHAPES))
def test_walk_starts_at_first_and_ends_at_last_control_point(name):
    curve = _curve(name)
    _, points = SHAPES[name]

    assert curve.point_at_distance(0) == pytest.approx(points[0], abs=1e-6)
    assert curve.point_at_distance(curve.length) == pytest.approx(points[-1], abs=1e-6)


@pytest.mark.parametrize('name', sorted(SHAPES))
def test_distance_is_clamped_to_path(name):
    curve = _curve(name)

    assert curve.point_at_distance(-25) == pytest.approx(curve.point_at_distance(0))
    assert curve.point_at_distance(curve.length + 50) == pytest.approx(curve.point_at_distance(curve.length))


@pytest.mark.parametrize('name', sorted(SHAPES))
def test_walk_never_jumps_further_than_the_distance_travelled(name):
    curve = _curve(name)
    distances = np.linspace(0.0, curve.length, 200)
    points = np.array([curve.point_at_distance(d) for d in distances])

    chords = np.hypot(*np.diff(points, axis=0).T)
    step = distances[1] - distances[0]
    assert np.all(chords <= step + 1e-6)
    # The chords of a fine walk add up to (almost) the full arc length.
    assert chords.sum() == pytest.approx(curve.length, rel=0.01)


def test_linear_midpoint():
    curve = _curve('linear')

    assert curve.length == pytest.approx(100.0)
    assert curve.point_at_distance(50) == pytest.approx((50.0, 0.0))


def test_linear_with_more_points_is_a_polyline():
    curve = _curve('polyline')

    assert isinstance(curve, Linear)
    assert curve.length == pytest.approx(180.0)
    assert curve.point_at_distance(140) == pytest.approx((100.0, 40.0))


def test_bezier_with_evenly_spaced_collinear_points_is_walked_by_arc_length():
    curve = create_curve('B', [(0, 0), (50, 0), (100, 0)])

    assert curve.length == pytest.approx(100.0)
    assert curve.point_at_distance(25) == pytest.approx((25.0, 0.0), abs=1e-6)


def test_bezier_splits_at_repeated_points():
    segments = Bezier.split_segments(np.array(SHAPES['bezier_multi'][1], dtype=float))

    assert len(segments) == 2
    assert tuple(segments[0][-1]) == pytest.approx((100.0, 0.0))
    assert tuple(segments[1][0]) == pytest.approx((100.0, 0.0))


def test_bezier_with_all_points_equal_has_zero_length():
    curve = create_curve('B', [(30, 30), (30, 30), (30, 30)])

    assert curve.length == 0.0
    assert curve.point_at_distance(10) == (30.0, 30.0)


def test_catmull_passes_through_its_control_points():
    curve = _curve('catmull')

    assert isinstance(curve, Catmull)
    for point in SHAPES['catmull'][1]:
        assert any(np.allclose(sample, point) for sample in curve.path)


def test_perfect_arc_semicircle():
    curve = _curve('perfect')

    assert isinstance(curve, PerfectArc)
    assert curve.radius == pytest.approx(50.0)
    assert curve.length == pytest.approx(math.pi * 50.0)
    assert curve.point_at_distance(curve.length / 2) == pytest.approx((50.0, 50.0))


def test_perfect_arc_on_the_other_side():
    curve = create_curve('P', [(0, 0), (50, -50), (100, 0)])

    assert curve.length == pytest.approx(math.pi * 50.0)
    assert curve.point_at_distance(curve.length / 2) == pytest.approx((50.0, -50.0))


def test_collinear_perfect_arc_is_walked_as_a_line():
    curve = create_curve('P', [(0, 0), (50, 0), (100, 0)])

    assert curve.is_degenerate
    assert curve.length == pytest.approx(100.0)
    assert curve.point_at_distance(50) == pytest.approx((50.0, 0.0))


def test_perfect_arc_with_four_points_is_bezier():
    points = [(0, 0), (40, 60), (90, 60), (120, 0)]
    arc = create_curve('P', points)
    bezier_curve = create_curve('B', points)

    assert isinstance(arc, Bezier)
    assert arc.length == pytest.approx(bezier_curve.length)
    for d in (0.0, 30.0, 75.0, arc.length):
        assert arc.point_at_distance(d) == pytest.approx(bezier_curve.point_at_distance(d))


@pytest.mark.parametrize('path_type', ['B', 'C', 'P'])
def test_two_point_paths_are_linear(path_type):
    curve = create_curve(path_type, [(0, 0), (30, 40)])

    assert isinstance(curve, Linear)
    assert curve.length == pytest.approx(50.0)


def test_resolve_path_type():
    assert resolve_path_type('P', 3) is PathType.PERFECT_CURVE
    assert resolve_path_type('P', 5) is PathType.BEZIER
    assert resolve_path_type('C', 2) is PathType.LINEAR
    assert resolve_path_type('B', 4) is PathType.BEZIER


@pytest.mark.parametrize('points', [[], [(10, 10)]])
def test_fewer_than_two_points_is_invalid(points):
    with pytest.raises(InvalidCurveError):
        create_curve('B', points)


def test_malformed_points_are_invalid():
    with pytest.raises(InvalidCurveError):
        create_curve('L', [(0, 0, 0), (1, 1, 1)])
    with pytest.raises(InvalidCurveError):
        create_curve('L', [('a', 'b'), (1, 1)])


def test_invalid_curve_error_is_a_value_error():
    assert issubclass(InvalidCurveError, ValueError)


def test_path_type_parse():
    assert PathType.parse('B') is PathType.BEZIER
    assert PathType.parse('bezier') is PathType.BEZIER
    assert PathType.parse('l') is PathType.LINEAR
    assert PathType.parse('perfect') is PathType.PERFECT_CURVE
    assert PathType.parse(PathType.CATMULL) is PathType.CATMULL
    with pytest.raises(ValueError):
        PathType.parse('Q')
