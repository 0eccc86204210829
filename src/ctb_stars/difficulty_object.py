# difficulty_object.py
#
# Contains the pairwise view of two consecutive catchable points that the
# movement strain model consumes.

from . import config as cfg


class CatchDifficultyObject:
    """
    The move from `last` to `base`.

    Positions are normalized so that the movement half-width maps to the
    radius of a standard hit object. Times are converted to real
    milliseconds by dividing by the clock rate.

    Args:
        base (CatchObject): The object being moved to.
        last (CatchObject): The object being moved from.
        half_catcher_width (float): Movement half-width in osu! pixels.
        clock_rate (float): Speed multiplier from the active mods.
    """

    def __init__(self, base, last, half_catcher_width: float, clock_rate: float):
        self.base = base
        self.last = last
        self.clock_rate = clock_rate

        scaling_factor = cfg.NORMALIZED_HITOBJECT_RADIUS / half_catcher_width
        self.normalized_x = base.x * scaling_factor
        self.last_normalized_x = last.x * scaling_factor

        self.delta_time = (base.time - last.time) / clock_rate
        self.strain_time = max(cfg.MIN_STRAIN_TIME, self.delta_time)

    @property
    def time(self) -> float:
        """Map time of the object being moved to."""
        return self.base.time

    @property
    def normalized_distance(self) -> float:
        return self.normalized_x - self.last_normalized_x

    @property
    def is_hyper_dash(self) -> bool:
        return self.last.hyper_dash

    def __repr__(self):
        return (f"CatchDifficultyObject(time={self.time:g}, distance={self.normalized_distance:.2f}, "
                f"strain_time={self.strain_time:.1f}, hyper_dash={self.is_hyper_dash})")
