# movement.py
#
# Contains the movement strain skill. Every move adds a bonus to a running
# strain value that decays exponentially over time; the peak of that value
# is sampled once per fixed-length section. Combining the peaks into stars
# happens in difficulty_calculator.py.

import math
from typing import List, Optional

from . import config as cfg
from .utils import calculate_catch_width, clamp


def movement_half_width(cs: float) -> float:
    return calculate_catch_width(cs) * 0.5


def strain_decay(ms: float) -> float:
    """Fraction of strain left after `ms` milliseconds."""
    return math.pow(cfg.STRAIN_DECAY_BASE, ms / 1000.0)


class Movement:
    """
    Movement strain skill.

    `process` must be called with difficulty objects in stream order; the
    caller closes sections with `save_current_peak` and
    `start_new_section_from` whenever an object lies beyond the current
    section end.
    """

    def __init__(self, cs: float):
        self.half_catcher_width = movement_half_width(cs)

        self.current_strain = cfg.INITIAL_STRAIN
        self.current_section_peak = cfg.INITIAL_STRAIN
        self.strain_peaks: List[float] = []
        self.previous_time: Optional[float] = None

        self.last_player_position: Optional[float] = None
        self.last_distance_moved = 0.0
        self.last_strain_time = 0.0

    def process(self, current):
        self.current_strain *= strain_decay(current.delta_time)
        self.current_strain += self.strain_value_of(current) * cfg.SKILL_MULTIPLIER
        self.current_section_peak = max(self.current_strain, self.current_section_peak)
        self.previous_time = current.time

    def save_current_peak(self):
        self.strain_peaks.append(self.current_section_peak)

    def start_new_section_from(self, time: float):
        """Starts a section whose initial peak is the strain decayed up to `time`."""
        if self.previous_time is not None:
            self.current_section_peak = self.current_strain * strain_decay(time - self.previous_time)

    def strain_value_of(self, current) -> float:
        last_player_position = self.last_player_position
        if last_player_position is None:
            last_player_position = current.last_normalized_x

        reach = cfg.NORMALIZED_HITOBJECT_RADIUS - cfg.ABSOLUTE_PLAYER_POSITIONING_ERROR
        player_position = clamp(last_player_position, current.normalized_x - reach, current.normalized_x + reach)
        distance_moved = player_position - last_player_position

        weighted_strain_time = current.strain_time + 13.0 + 3.0 / current.clock_rate
        distance_addition = math.pow(abs(distance_moved), 1.3) / 510.0
        sqrt_strain = math.sqrt(weighted_strain_time)

        if abs(distance_moved) > 0.1:
            if abs(self.last_distance_moved) > 0.1 and _sign(distance_moved) != _sign(self.last_distance_moved):
                bonus_factor = min(50.0, abs(distance_moved)) / 50.0
                anti_flow_factor = max(min(70.0, abs(self.last_distance_moved)) / 70.0, 0.38)
                distance_addition += (cfg.DIRECTION_CHANGE_BONUS / math.sqrt(self.last_strain_time + 16.0)
                                      * bonus_factor * anti_flow_factor
                                      * max(1.0 - math.pow(weighted_strain_time / 1000.0, 3), 0.0))

            # Base bonus for every movement, giving some weight to streams.
            distance_addition += (12.5 * min(abs(distance_moved), cfg.NORMALIZED_HITOBJECT_RADIUS * 2.0)
                                  / (cfg.NORMALIZED_HITOBJECT_RADIUS * 6.0) / sqrt_strain)

        last = current.last
        if last.hyper_dash or last.force_no_buffer:
            edge_dash_bonus = 0.0
            if not last.hyper_dash:
                edge_dash_bonus += cfg.EDGE_DASH_BONUS
            else:
                # A hyperdash always lands exactly on the fruit.
                player_position = current.normalized_x

            # Edge dashes are easier at lower ms values.
            distance_addition *= 1.0 + (edge_dash_bonus
                                        * ((cfg.EDGE_DASH_THRESHOLD - last.distance_to_hyper_dash)
                                           / cfg.EDGE_DASH_THRESHOLD)
                                        * math.pow(min(current.strain_time * current.clock_rate, 265.0) / 265.0,
                                                   1.5))

        self.last_player_position = player_position
        self.last_distance_moved = distance_moved
        self.last_strain_time = current.strain_time

        return distance_addition / weighted_strain_time


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)
