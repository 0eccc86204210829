# beatmap.py
#
# Contains the already-parsed beatmap model consumed by the difficulty
# calculator: hit objects, timing and difficulty control points and the
# global map attributes. Beatmaps can also be loaded from the JSON form
# written by external parsers (see `Beatmap.from_dict`).

import json
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from . import config as cfg
from .curves import PathType


class HitObject:
    """Base class for every hit object. Positions are in osu! pixels, times in ms."""

    def __init__(self, x: float, y: float, start_time: float):
        self.x = float(x)
        self.y = float(y)
        self.start_time = float(start_time)

    @property
    def position(self) -> Tuple[float, float]:
        return self.x, self.y

    def __repr__(self):
        return f"{type(self).__name__}(x={self.x:g}, y={self.y:g}, start_time={self.start_time:g})"


class Circle(HitObject):
    pass


class Slider(HitObject):
    """
    A slider.

    Args:
        repeats (int): Number of spans (1 for a slider without reverse arrows).
        pixel_length (float): Travel distance of one span in osu! pixels.
        curve_points (sequence): Control points including the head position first.
        path_type (PathType | str): Curve kind as tagged in the beatmap.
    """

    def __init__(self, x, y, start_time, repeats, pixel_length, curve_points, path_type=PathType.BEZIER):
        super().__init__(x, y, start_time)
        self.repeats = int(repeats)
        self.pixel_length = float(pixel_length)
        self.curve_points = [(float(px), float(py)) for px, py in curve_points]
        self.path_type = PathType.parse(path_type)

        if self.repeats < 1:
            raise ValueError(f"Slider at {self.start_time:g}ms has {self.repeats} spans, expected at least 1")
        if self.pixel_length < 0:
            raise ValueError(f"Slider at {self.start_time:g}ms has negative length {self.pixel_length:g}")

    def __repr__(self):
        return (f"Slider(x={self.x:g}, y={self.y:g}, start_time={self.start_time:g}, "
                f"repeats={self.repeats}, pixel_length={self.pixel_length:g}, "
                f"path_type={self.path_type.name})")


class Spinner(HitObject):
    def __init__(self, x, y, start_time, end_time):
        super().__init__(x, y, start_time)
        self.end_time = float(end_time)


class HoldNote(HitObject):
    def __init__(self, x, y, start_time, end_time):
        super().__init__(x, y, start_time)
        self.end_time = float(end_time)


@dataclass(frozen=True)
class TimingPoint:
    time: float
    beat_length: float


@dataclass(frozen=True)
class DifficultyPoint:
    time: float
    speed_multiplier: float


@dataclass
class Beatmap:
    hit_objects: List[HitObject]
    timing_points: List[TimingPoint] = field(default_factory=list)
    difficulty_points: List[DifficultyPoint] = field(default_factory=list)
    cs: float = 5.0
    ar: float = 5.0
    od: float = 5.0
    hp: float = 5.0
    slider_multiplier: float = 1.4
    tick_rate: float = 1.0
    version: int = 14

    def __post_init__(self):
        if self.slider_multiplier <= 0:
            raise ValueError("slider_multiplier must be > 0.")
        if self.tick_rate <= 0:
            raise ValueError("tick_rate must be > 0.")
        self._timing_times = [p.time for p in self.timing_points]
        self._difficulty_times = [p.time for p in self.difficulty_points]

    def timing_point_at(self, time: float) -> Tuple[float, float]:
        """
        Finds the uninherited timing point active at `time`.

        Returns:
            tuple: (beat_length, point_time), or the defaults (1000, 0) if no
                   point precedes the given time.
        """
        idx = bisect_right(self._timing_times, time)
        if idx == 0:
            return cfg.DEFAULT_BEAT_LENGTH, 0.0
        point = self.timing_points[idx - 1]
        return point.beat_length, point.time

    def difficulty_point_at(self, time: float) -> Tuple[float, float]:
        """
        Finds the slider velocity point active at `time`.

        Returns:
            tuple: (speed_multiplier, point_time), or the defaults (1.0, 0) if no
                   point precedes the given time.
        """
        idx = bisect_right(self._difficulty_times, time)
        if idx == 0:
            return cfg.DEFAULT_SPEED_MULTIPLIER, 0.0
        point = self.difficulty_points[idx - 1]
        return point.speed_multiplier, point.time

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Beatmap":
        """
        Builds a beatmap from its JSON form.

        Required keys: `hit_objects`. Optional keys: `timing_points`,
        `difficulty_points`, `cs`, `ar`, `od`, `hp`, `slider_multiplier`,
        `tick_rate`, `version`.

        Raises:
            ValueError: If a hit object or control point is malformed.
        """
        if 'hit_objects' not in data:
            raise ValueError("Beatmap data has no 'hit_objects'.")

        hit_objects = [_hit_object_from_dict(i, obj) for i, obj in enumerate(data['hit_objects'])]
        try:
            timing_points = sorted(
                (TimingPoint(float(p['time']), float(p['beat_length'])) for p in data.get('timing_points', [])),
                key=lambda p: p.time,
            )
            difficulty_points = sorted(
                (DifficultyPoint(float(p['time']), float(p['speed_multiplier']))
                 for p in data.get('difficulty_points', [])),
                key=lambda p: p.time,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed control point: {e}") from e

        return cls(
            hit_objects=hit_objects,
            timing_points=timing_points,
            difficulty_points=difficulty_points,
            cs=float(data.get('cs', 5.0)),
            ar=float(data.get('ar', 5.0)),
            od=float(data.get('od', 5.0)),
            hp=float(data.get('hp', 5.0)),
            slider_multiplier=float(data.get('slider_multiplier', 1.4)),
            tick_rate=float(data.get('tick_rate', 1.0)),
            version=int(data.get('version', 14)),
        )

    @classmethod
    def from_json(cls, path) -> "Beatmap":
        """Loads a beatmap from a JSON file written by an external parser."""
        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Could not decode JSON from {path}: {e}") from e
        return cls.from_dict(data)


def _hit_object_from_dict(index: int, obj: Dict[str, Any]) -> HitObject:
    kind = str(obj.get('type', 'circle')).lower()
    try:
        x, y, time = obj['x'], obj['y'], obj['time']
        if kind == 'circle':
            return Circle(x, y, time)
        if kind == 'slider':
            return Slider(x, y, time,
                          repeats=obj.get('repeats', 1),
                          pixel_length=obj['pixel_length'],
                          curve_points=obj['curve_points'],
                          path_type=obj.get('path_type', 'B'))
        if kind == 'spinner':
            return Spinner(x, y, time, obj.get('end_time', time))
        if kind in ('hold', 'hold_note'):
            return HoldNote(x, y, time, obj.get('end_time', time))
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Malformed hit object #{index}: {e}") from e

    raise ValueError(f"Hit object #{index} has unknown type {obj.get('type')!r}")
