# curves.py
#
# Contains the slider path geometry. Every curve is built from the slider's
# control points (head position first) and can be walked by arc length:
# `point_at_distance(d)` returns the point reached after travelling `d` osu!
# pixels along the path, clamped to [0, length].
#
# Bezier sub-curves are evaluated with the `bezier` library; all other
# shapes are sampled with numpy. The resulting polyline and its cumulative
# length table are what the distance lookup walks.

import math
from abc import ABC, abstractmethod
from enum import Enum
from typing import Sequence, Tuple

import bezier
import numpy as np

from . import config as cfg

Point = Tuple[float, float]


class InvalidCurveError(ValueError):
    """Raised when control points cannot describe a slider path."""


class PathType(Enum):
    LINEAR = 'L'
    BEZIER = 'B'
    CATMULL = 'C'
    PERFECT_CURVE = 'P'

    @classmethod
    def parse(cls, value) -> "PathType":
        """Accepts a PathType, its .osu letter ('B') or its name ('bezier')."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for path_type in cls:
            if text.upper() == path_type.value or text.upper() == path_type.name:
                return path_type
        if text.lower() in ('perfect', 'perfect_arc', 'arc'):
            return cls.PERFECT_CURVE
        raise ValueError(f"Unknown slider path type: {value!r}")


def _as_point_array(points) -> np.ndarray:
    try:
        array = np.asarray(points, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidCurveError(f"Control points are not numeric: {e}") from e

    if array.ndim != 2 or array.shape[1] != 2:
        raise InvalidCurveError(f"Control points must be (x, y) pairs, got shape {array.shape}")
    if len(array) < 2:
        raise InvalidCurveError(f"A slider path needs at least 2 control points, got {len(array)}")
    return array


def _to_point(array) -> Point:
    return float(array[0]), float(array[1])


class Curve(ABC):
    """
    Base class for slider paths.

    Subclasses only produce a polyline approximation of the path; the
    arc-length table and distance lookup are shared.
    """

    def __init__(self, points):
        self.points = _as_point_array(points)
        self.path = self._approximate()
        segment_lengths = np.hypot(*np.diff(self.path, axis=0).T)
        self.cumulative_lengths = np.concatenate(([0.0], np.cumsum(segment_lengths)))

    @abstractmethod
    def _approximate(self) -> np.ndarray:
        """Returns an (N, 2) polyline through the path, N >= 1."""

    @property
    def length(self) -> float:
        return float(self.cumulative_lengths[-1])

    @property
    def start_point(self) -> Point:
        return _to_point(self.points[0])

    @property
    def end_point(self) -> Point:
        return _to_point(self.points[-1])

    def point_at_distance(self, distance: float) -> Point:
        """Returns the point reached after `distance` pixels along the path."""
        length = self.length
        if distance <= 0 or length <= 0:
            return _to_point(self.path[0])
        if distance >= length:
            return _to_point(self.path[-1])

        # First vertex at or beyond the requested distance.
        idx = int(np.searchsorted(self.cumulative_lengths, distance, side='left'))
        d0 = self.cumulative_lengths[idx - 1]
        d1 = self.cumulative_lengths[idx]
        p0 = self.path[idx - 1]
        p1 = self.path[idx]

        t = (distance - d0) / (d1 - d0)
        return _to_point(p0 + (p1 - p0) * t)

    def __repr__(self):
        return f"{type(self).__name__}(points={len(self.points)}, length={self.length:.2f})"


class Linear(Curve):
    """Straight segments through every control point."""

    def _approximate(self):
        return self.points.copy()


class Bezier(Curve):
    """
    Piecewise Bezier path. A control point repeated twice in a row ends one
    sub-curve and starts the next one.
    """

    def _approximate(self):
        pieces = []
        for segment in self.split_segments(self.points):
            samples = self._sample_segment(segment)
            pieces.append(samples if not pieces else samples[1:])

        if not pieces:
            # Every control point is the same position.
            return self.points[:1].copy()
        return np.vstack(pieces)

    @staticmethod
    def split_segments(points: np.ndarray):
        """Splits control points into independent sub-curves at duplicated points."""
        segments = []
        current = [points[0]]
        for prev, point in zip(points, points[1:]):
            if np.array_equal(point, prev):
                if len(current) > 1:
                    segments.append(np.array(current))
                current = [point]
            else:
                current.append(point)

        if len(current) > 1:
            segments.append(np.array(current))
        return segments

    @staticmethod
    def _sample_segment(segment: np.ndarray) -> np.ndarray:
        if len(segment) == 2:
            return segment.copy()

        polygon_length = float(np.sum(np.hypot(*np.diff(segment, axis=0).T)))
        n_samples = int(math.ceil(polygon_length / cfg.BEZIER_TOLERANCE)) + 1
        n_samples = max(cfg.BEZIER_MIN_SAMPLES, min(cfg.BEZIER_MAX_SAMPLES, n_samples))

        nodes = np.asfortranarray(segment.T)
        curve = bezier.Curve(nodes, degree=len(segment) - 1)
        samples = curve.evaluate_multi(np.linspace(0.0, 1.0, n_samples)).T

        # Pin the ends so joins between sub-curves are exact.
        samples[0] = segment[0]
        samples[-1] = segment[-1]
        return samples


def _catmull_point(v1, v2, v3, v4, t):
    t2 = t * t
    t3 = t2 * t
    return 0.5 * (2.0 * v2
                  + (-v1 + v3) * t
                  + (2.0 * v1 - 5.0 * v2 + 4.0 * v3 - v4) * t2
                  + (-v1 + 3.0 * v2 - 3.0 * v3 + v4) * t3)


class Catmull(Curve):
    """Catmull-Rom spline through every control point."""

    def _approximate(self):
        points = self.points
        n = len(points)
        t = np.linspace(0.0, 1.0, cfg.CATMULL_DETAIL + 1)[:, None]

        pieces = [points[:1].copy()]
        for i in range(n - 1):
            v1 = points[i - 1] if i > 0 else points[i]
            v2 = points[i]
            v3 = points[i + 1]
            v4 = points[i + 2] if i + 2 < n else v3 + (v3 - v2)

            samples = _catmull_point(v1, v2, v3, v4, t)
            samples[-1] = v3
            pieces.append(samples[1:])
        return np.vstack(pieces)


class PerfectArc(Curve):
    """
    Circular arc through exactly three points. Collinear points have no
    finite circumcircle and are walked as a straight line from the first
    to the last point instead.
    """

    def __init__(self, points):
        array = _as_point_array(points)
        if len(array) != 3:
            raise InvalidCurveError(f"A perfect arc needs exactly 3 control points, got {len(array)}")

        self.centre = None
        self.radius = 0.0
        self.theta_start = 0.0
        self.theta_range = 0.0
        self.direction = 1.0
        self._fit_circle(array)
        super().__init__(array)

    def _fit_circle(self, points):
        (ax, ay), (bx, by), (cx, cy) = points
        d = 2.0 * (ax * (by - cy) + bx * (cy - ay) + cx * (ay - by))
        if abs(d) < cfg.PERFECT_ARC_COLLINEAR_EPSILON:
            return

        a_sq = ax * ax + ay * ay
        b_sq = bx * bx + by * by
        c_sq = cx * cx + cy * cy
        ux = (a_sq * (by - cy) + b_sq * (cy - ay) + c_sq * (ay - by)) / d
        uy = (a_sq * (cx - bx) + b_sq * (ax - cx) + c_sq * (bx - ax)) / d

        self.centre = np.array([ux, uy])
        self.radius = math.hypot(ax - ux, ay - uy)

        self.theta_start = math.atan2(ay - uy, ax - ux)
        theta_end = math.atan2(cy - uy, cx - ux)
        while theta_end < self.theta_start:
            theta_end += 2.0 * math.pi
        self.theta_range = theta_end - self.theta_start

        # Walk the other way round when B lies on the other side of AC.
        ortho_x, ortho_y = cy - ay, -(cx - ax)
        if ortho_x * (bx - ax) + ortho_y * (by - ay) < 0:
            self.direction = -1.0
            self.theta_range = 2.0 * math.pi - self.theta_range

    @property
    def is_degenerate(self) -> bool:
        return self.centre is None

    def _approximate(self):
        if self.is_degenerate:
            return self.points[[0, -1]].copy()

        n_samples = max(2, int(math.ceil(self.radius * self.theta_range / cfg.BEZIER_TOLERANCE)) + 1)
        n_samples = min(cfg.BEZIER_MAX_SAMPLES, n_samples)
        thetas = self.theta_start + self.direction * np.linspace(0.0, self.theta_range, n_samples)
        samples = self.centre + self.radius * np.column_stack((np.cos(thetas), np.sin(thetas)))
        samples[0] = self.points[0]
        samples[-1] = self.points[-1]
        return samples

    @property
    def length(self) -> float:
        if self.is_degenerate:
            return super().length
        return self.radius * self.theta_range

    def point_at_distance(self, distance: float) -> Point:
        if self.is_degenerate:
            return super().point_at_distance(distance)

        distance = max(0.0, min(self.length, distance))
        theta = self.theta_start + self.direction * distance / self.radius
        return (float(self.centre[0] + self.radius * math.cos(theta)),
                float(self.centre[1] + self.radius * math.sin(theta)))


_CURVE_TYPES = {
    PathType.LINEAR: Linear,
    PathType.BEZIER: Bezier,
    PathType.CATMULL: Catmull,
    PathType.PERFECT_CURVE: PerfectArc,
}


def resolve_path_type(path_type, n_points: int) -> PathType:
    """
    Applies the legacy reinterpretation rules: perfect arcs with more than
    three points are Bezier paths and any two-point path is linear.
    """
    path_type = PathType.parse(path_type)
    if path_type is PathType.PERFECT_CURVE and n_points > 3:
        return PathType.BEZIER
    if n_points == 2:
        return PathType.LINEAR
    return path_type


def create_curve(path_type, points: Sequence[Sequence[float]]) -> Curve:
    """
    Builds the curve for a slider.

    Args:
        path_type (PathType | str): The path kind as tagged in the beatmap.
        points (sequence): Control points, slider head first.

    Returns:
        Curve: A curve that can be walked with `point_at_distance`.

    Raises:
        InvalidCurveError: If fewer than 2 control points are given.
    """
    array = _as_point_array(points)
    return _CURVE_TYPES[resolve_path_type(path_type, len(array))](array)
