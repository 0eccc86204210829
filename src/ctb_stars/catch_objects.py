# catch_objects.py
#
# Contains the logic that turns a beatmap's hit objects into the flat stream
# of catchable points the catcher has to reach: one fruit per circle and,
# for every slider, its head, ticks, reverse points and tail.
#
# Objects are expanded strictly in file order. A slider whose body overlaps
# later circles (common on maps with several objects per time point) is not
# re-interleaved, so the stream can be imperfectly ordered for such maps.
# Reference star ratings are computed from the same ordering.

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from . import config as cfg
from .beatmap import Circle, Slider
from .curves import create_curve
from .utils import clamp


class ObjectKind(Enum):
    FRUIT = 'fruit'
    DROPLET = 'droplet'


class CatchObject:
    """A point in the catch sequence."""

    __slots__ = ('x', 'time', 'kind', 'hyper_dash_target', 'distance_to_hyper_dash', 'force_no_buffer')

    def __init__(self, x: float, time: float, kind: ObjectKind = ObjectKind.FRUIT):
        self.x = float(x)
        self.time = float(time)
        self.kind = kind
        self.hyper_dash_target: Optional[float] = None
        self.distance_to_hyper_dash = 0.0
        self.force_no_buffer = False

    @property
    def hyper_dash(self) -> bool:
        return self.hyper_dash_target is not None

    def reset_hyper_dash(self):
        self.hyper_dash_target = None
        self.distance_to_hyper_dash = 0.0
        self.force_no_buffer = False

    def __repr__(self):
        flag = f", hyper_dash_target={self.hyper_dash_target:g}" if self.hyper_dash else ""
        return f"CatchObject(x={self.x:g}, time={self.time:g}, kind={self.kind.value}{flag})"


@dataclass
class CatchStream:
    objects: List[CatchObject] = field(default_factory=list)
    n_fruits: int = 0
    n_droplets: int = 0

    @property
    def max_combo(self) -> int:
        return self.n_fruits + self.n_droplets


class LegacyRandom:
    """
    The xorshift generator osu!stable uses to place objects under Hard Rock.
    Same seed, same sequence, so ratings stay reproducible.
    """

    INT_MASK = 0x7FFFFFFF
    UINT_MASK = 0xFFFFFFFF
    INT_TO_REAL = 1.0 / (0x7FFFFFFF + 1.0)

    def __init__(self, seed: int):
        self.x = seed & self.UINT_MASK
        self.y = 842502087
        self.z = 3579807591
        self.w = 273326509
        self._bit_buffer = 0
        self._bit_index = 32

    def next_uint(self) -> int:
        t = (self.x ^ (self.x << 11)) & self.UINT_MASK
        self.x, self.y, self.z = self.y, self.z, self.w
        self.w = (self.w ^ (self.w >> 19) ^ t ^ (t >> 8)) & self.UINT_MASK
        return self.w

    def next_int(self) -> int:
        return self.INT_MASK & self.next_uint()

    def next_double(self) -> float:
        return self.INT_TO_REAL * self.next_int()

    def next_range(self, lower: float, upper: float) -> int:
        return int(lower + self.next_double() * (upper - lower))

    def next_bool(self) -> bool:
        if self._bit_index == 32:
            self._bit_buffer = self.next_uint()
            self._bit_index = 1
            return (self._bit_buffer & 1) == 1

        self._bit_index += 1
        self._bit_buffer >>= 1
        return (self._bit_buffer & 1) == 1


class HardRockOffsets:
    """
    Shifts fruit positions the way Hard Rock does: fruits close in time to
    the previous object are pushed further away from it, and fruits stacked
    on the previous position get a small random nudge.
    """

    def __init__(self, seed: int = cfg.HARD_ROCK_RNG_SEED):
        self.rng = LegacyRandom(seed)
        self.last_x: Optional[float] = None
        self.last_time = 0.0

    def remember(self, x: float, time: float):
        self.last_x = x
        self.last_time = time

    def apply(self, x: float, time: float) -> float:
        if self.last_x is None:
            self.remember(x, time)
            return x

        position_diff = x - self.last_x
        # Stable measured this gap in whole milliseconds.
        time_diff = int(time - self.last_time)

        if time_diff > cfg.HARD_ROCK_MAX_TIME_DIFF:
            self.remember(x, time)
            return x

        if position_diff == 0:
            # The remembered position is not updated.
            return self._random_offset(x, time_diff / 4.0)

        if abs(position_diff) < time_diff // 3:
            x = self._offset(x, position_diff)

        self.remember(x, time)
        return x

    def _random_offset(self, x: float, max_offset: float) -> float:
        right = self.rng.next_bool()
        rand = min(cfg.HARD_ROCK_MAX_RANDOM_OFFSET, float(self.rng.next_range(0, max(0.0, max_offset))))

        if right:
            return x + rand if x + rand <= cfg.PLAYFIELD_WIDTH else x - rand
        return x - rand if x - rand >= 0 else x + rand

    @staticmethod
    def _offset(x: float, amount: float) -> float:
        if amount > 0:
            if x + amount < cfg.PLAYFIELD_WIDTH:
                x += amount
        elif x + amount > 0:
            x += amount
        return x


def clamp_speed_multiplier(speed_multiplier: float) -> float:
    """Restricts a slider velocity multiplier to [0.1, 10]. Zero or negative values become 0.1."""
    return clamp(speed_multiplier, cfg.MIN_SPEED_MULTIPLIER, cfg.MAX_SPEED_MULTIPLIER)


def tick_distance(beatmap, speed_multiplier: float) -> float:
    """Distance in osu! pixels between two slider ticks."""
    distance = 100.0 * beatmap.slider_multiplier / beatmap.tick_rate
    if beatmap.version >= cfg.TICK_DISTANCE_MIN_VERSION:
        distance *= clamp_speed_multiplier(speed_multiplier)
    return distance


def slider_duration(beatmap, slider: Slider) -> float:
    """Duration of all spans of `slider` in milliseconds."""
    beat_length, timing_time = beatmap.timing_point_at(slider.start_time)
    speed_multiplier, difficulty_time = beatmap.difficulty_point_at(slider.start_time)

    # Legacy quirk: a timing point placed after the active velocity point
    # resets the velocity for the duration, but not for the tick spacing.
    if timing_time > difficulty_time:
        speed_multiplier = 1.0
    speed_multiplier = clamp_speed_multiplier(speed_multiplier)

    return (slider.repeats * beat_length * slider.pixel_length
            / (beatmap.slider_multiplier * speed_multiplier) / 100.0)


def expand_slider(beatmap, slider: Slider) -> List[CatchObject]:
    """
    Expands a slider into its head, ticks, reverse points and tail.

    Ticks are placed every `tick_distance` pixels along the path and timed
    linearly within the first span. Later spans reuse the same ticks in
    reverse order without re-deriving their times.

    Raises:
        InvalidCurveError: If the slider has fewer than 2 control points.
    """
    speed_multiplier, _ = beatmap.difficulty_point_at(slider.start_time)
    spacing = tick_distance(beatmap, speed_multiplier)
    duration = slider_duration(beatmap, slider)
    repeats = slider.repeats
    pixel_length = slider.pixel_length

    curve = create_curve(slider.path_type, slider.curve_points)

    ticks = []
    if pixel_length > 0:
        time_add = duration * (spacing / (pixel_length * repeats))
        target = pixel_length - spacing / 8.0
        current_distance = spacing
        while current_distance < target:
            x, _ = curve.point_at_distance(current_distance)
            ticks.append(CatchObject(x, slider.start_time + time_add * (len(ticks) + 1), ObjectKind.DROPLET))
            current_distance += spacing

    points = [CatchObject(slider.x, slider.start_time, ObjectKind.FRUIT)]
    points.extend(ticks)

    span_duration = duration / repeats
    for repeat_index in range(1, repeats):
        x, _ = curve.point_at_distance((repeat_index % 2) * pixel_length)
        points.append(CatchObject(x, slider.start_time + span_duration * repeat_index, ObjectKind.FRUIT))

        ticks.reverse()
        points.extend(CatchObject(tick.x, tick.time, ObjectKind.DROPLET) for tick in ticks)

    x, _ = curve.point_at_distance((repeats % 2) * pixel_length)
    points.append(CatchObject(x, slider.start_time + duration, ObjectKind.FRUIT))
    return points


def build_catch_stream(beatmap, hard_rock: bool = False) -> CatchStream:
    """
    Builds the ordered stream of catchable points for a beatmap.

    Args:
        beatmap (Beatmap): The parsed beatmap.
        hard_rock (bool): Apply Hard Rock position offsets to fruits.

    Returns:
        CatchStream: The points plus the fruit and droplet totals.
    """
    stream = CatchStream()
    offsets = HardRockOffsets() if hard_rock else None

    for hit_object in beatmap.hit_objects:
        if isinstance(hit_object, Circle):
            x = hit_object.x
            if offsets is not None:
                x = offsets.apply(x, hit_object.start_time)

            stream.objects.append(CatchObject(x, hit_object.start_time, ObjectKind.FRUIT))
            stream.n_fruits += 1

        elif isinstance(hit_object, Slider):
            points = expand_slider(beatmap, hit_object)

            # Slider parts never draw from the Hard Rock RNG. Stable also advances
            # it for droplets and banana showers, so random nudges of later
            # stacked fruits can differ from stable on maps with sliders.
            if offsets is not None:
                first, last = hit_object.curve_points[0], hit_object.curve_points[-1]
                offsets.remember(hit_object.x + last[0] - first[0], hit_object.start_time)

            stream.objects.extend(points)
            stream.n_fruits += 1 + hit_object.repeats
            stream.n_droplets += len(points) - 1 - hit_object.repeats

        # Spinners and hold notes give nothing to catch.

    return stream
