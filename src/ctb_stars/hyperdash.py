# hyperdash.py
#
# Marks which catchable points force the catcher into a hyperdash: the next
# point is too far away to be reached at full dash speed in the time left.
#
# The catcher's reachable zone depends on where the previous move left it,
# so the classification is a single forward pass that carries the last
# move's direction and leftover slack ("excess") from pair to pair.

from typing import Sequence

from . import config as cfg
from .utils import calculate_catch_width, clamp


def hyper_dash_half_width(cs: float) -> float:
    """Half-width used for hyperdash decisions (full plate, margins excluded)."""
    return calculate_catch_width(cs) / 2.0 / cfg.ALLOWED_CATCH_RANGE


def initialise_hyper_dash(objects: Sequence, half_catcher_width: float):
    """
    Sets the hyperdash fields of every object in `objects`.

    Args:
        objects (sequence): CatchObjects in stream order. Mutated in place.
        half_catcher_width (float): See `hyper_dash_half_width`.

    Returns:
        int: Number of objects that trigger a hyperdash.
    """
    last_direction = 0
    last_excess = half_catcher_width
    n_hyper_dashes = 0

    for obj in objects:
        obj.reset_hyper_dash()

    for current, following in zip(objects, objects[1:]):
        direction = 1 if following.x > current.x else -1
        time_to_next = following.time - current.time - cfg.HYPER_DASH_GRACE_MS
        distance_to_next = abs(following.x - current.x) - (
            last_excess if last_direction == direction else half_catcher_width
        )
        distance_to_hyper = time_to_next * cfg.BASE_SPEED - distance_to_next

        if distance_to_hyper < 0:
            current.hyper_dash_target = following.x
            last_excess = half_catcher_width
            n_hyper_dashes += 1
        else:
            current.distance_to_hyper_dash = distance_to_hyper
            current.force_no_buffer = distance_to_hyper <= cfg.EDGE_DASH_THRESHOLD
            last_excess = clamp(distance_to_hyper, 0.0, half_catcher_width)

        last_direction = direction

    return n_hyper_dashes
