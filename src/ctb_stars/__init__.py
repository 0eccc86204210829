"""
ctb_stars: osu!catch difficulty (star rating) and performance calculation.

Expands a parsed beatmap into the stream of fruits and droplets the catcher
has to reach, classifies hyperdashes, accumulates movement strain per
section and combines the section peaks into a star rating.
"""

__version__ = '0.1.0'

from .beatmap import Beatmap, Circle, DifficultyPoint, HoldNote, Slider, Spinner, TimingPoint
from .catch_objects import CatchObject, ObjectKind, build_catch_stream
from .curves import InvalidCurveError, PathType, create_curve
from .difficulty_calculator import DifficultyAttributes, DifficultyCalculator, calculate_difficulty
from .mods import Mods
from .performance import PerformanceCalculator, PerformanceResult

__all__ = [
    '__version__',
    'Beatmap',
    'Circle',
    'Slider',
    'Spinner',
    'HoldNote',
    'TimingPoint',
    'DifficultyPoint',
    'CatchObject',
    'ObjectKind',
    'build_catch_stream',
    'InvalidCurveError',
    'PathType',
    'create_curve',
    'DifficultyAttributes',
    'DifficultyCalculator',
    'calculate_difficulty',
    'Mods',
    'PerformanceCalculator',
    'PerformanceResult',
]
