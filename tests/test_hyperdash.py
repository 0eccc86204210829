"""Unit tests for hyperdash classification."""

import pytest

from ctb_stars.catch_objects import CatchObject
from ctb_stars.config import HYPER_DASH_GRACE_MS
from ctb_stars.hyperdash import hyper_dash_half_width, initialise_hyper_dash

# CS5: 106.75 * 0.8 wide plate, halved, margins excluded.
HALF_WIDTH = 53.375


def _objects(*points):
    return [CatchObject(x, time) for x, time in points]


def _state(objects):
    return [(obj.hyper_dash_target, obj.distance_to_hyper_dash, obj.force_no_buffer) for obj in objects]


def test_half_width():
    assert hyper_dash_half_width(5.0) == pytest.approx(HALF_WIDTH)
    assert hyper_dash_half_width(7.0) < HALF_WIDTH


def test_far_fast_move_is_a_hyperdash():
    objects = _objects((0, 0), (400, 100), (400, 1000))
    count = initialise_hyper_dash(objects, HALF_WIDTH)

    assert count == 1
    assert objects[0].hyper_dash
    assert objects[0].hyper_dash_target == 400.0
    assert not objects[1].hyper_dash
    assert objects[1].distance_to_hyper_dash == pytest.approx(900.0 - HYPER_DASH_GRACE_MS + HALF_WIDTH)
    assert not objects[1].force_no_buffer


def test_last_object_is_never_classified():
    objects = _objects((0, 0), (500, 50))
    initialise_hyper_dash(objects, HALF_WIDTH)

    assert objects[0].hyper_dash
    assert _state(objects[1:]) == [(None, 0.0, False)]


def test_tight_move_is_an_edge_dash():
    objects = _objects((0, 0), (100, 70))
    count = initialise_hyper_dash(objects, HALF_WIDTH)

    assert count == 0
    assert not objects[0].hyper_dash
    assert objects[0].distance_to_hyper_dash == pytest.approx(70.0 - HYPER_DASH_GRACE_MS - (100.0 - HALF_WIDTH))
    assert objects[0].force_no_buffer


def test_excess_carries_over_in_the_same_direction():
    objects = _objects((0, 0), (100, 60), (150, 120))
    initialise_hyper_dash(objects, HALF_WIDTH)

    first_excess = 60.0 - HYPER_DASH_GRACE_MS - (100.0 - HALF_WIDTH)
    assert objects[0].distance_to_hyper_dash == pytest.approx(first_excess)
    assert objects[1].distance_to_hyper_dash == pytest.approx(60.0 - HYPER_DASH_GRACE_MS - (50.0 - first_excess))


def test_direction_change_resets_the_excess():
    objects = _objects((0, 0), (100, 60), (50, 120))
    initialise_hyper_dash(objects, HALF_WIDTH)

    assert objects[1].distance_to_hyper_dash == pytest.approx(60.0 - HYPER_DASH_GRACE_MS - (50.0 - HALF_WIDTH))


def test_classification_is_idempotent():
    objects = _objects((0, 0), (400, 100), (100, 180), (120, 250), (500, 300), (20, 900))

    first_count = initialise_hyper_dash(objects, HALF_WIDTH)
    first = _state(objects)
    second_count = initialise_hyper_dash(objects, HALF_WIDTH)

    assert first_count == second_count
    assert _state(objects) == first


def test_empty_and_single_object_streams():
    assert initialise_hyper_dash([], HALF_WIDTH) == 0

    objects = _objects((256, 0))
    assert initialise_hyper_dash(objects, HALF_WIDTH) == 0
    assert not objects[0].hyper_dash
