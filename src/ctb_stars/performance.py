# performance.py
#
# Contains the osu!catch performance point (pp) formula. It is a stateless
# calculation over the difficulty attributes and the play's hit counts;
# everything except the star rating comes from the play, not the map.

import math
from dataclasses import dataclass
from typing import Optional

from . import config as cfg
from .difficulty_calculator import DifficultyAttributes, DifficultyCalculator
from .mods import Mods


@dataclass(frozen=True)
class PerformanceResult:
    pp: float
    stars: float
    # Accuracy in percent the pp value was calculated with.
    accuracy: float = 100.0


class PerformanceCalculator:
    """
    Builder for a pp calculation of one full play.

    Any hit count that is not set is derived from the map: an unset play
    is treated as a full combo with the given number of misses.

    Example:
        PerformanceCalculator(beatmap).mods("HDHR").misses(1).calculate()
    """

    def __init__(self, beatmap):
        self.beatmap = beatmap
        self._attributes: Optional[DifficultyAttributes] = None
        self._mods = Mods(0)
        self._combo: Optional[int] = None

        self._n_fruits: Optional[int] = None
        self._n_droplets: Optional[int] = None
        self._n_tiny_droplets: Optional[int] = None
        self._n_tiny_droplet_misses: Optional[int] = None
        self._n_misses = 0

    def attributes(self, attributes: DifficultyAttributes) -> "PerformanceCalculator":
        """Reuses previously calculated difficulty attributes (must match the mods)."""
        self._attributes = attributes
        return self

    def mods(self, mods) -> "PerformanceCalculator":
        self._mods = Mods(mods)
        return self

    def combo(self, combo: int) -> "PerformanceCalculator":
        self._combo = combo
        return self

    def fruits(self, n_fruits: int) -> "PerformanceCalculator":
        self._n_fruits = n_fruits
        return self

    def droplets(self, n_droplets: int) -> "PerformanceCalculator":
        self._n_droplets = n_droplets
        return self

    def tiny_droplets(self, n_tiny_droplets: int) -> "PerformanceCalculator":
        self._n_tiny_droplets = n_tiny_droplets
        return self

    def tiny_droplet_misses(self, n_tiny_droplet_misses: int) -> "PerformanceCalculator":
        self._n_tiny_droplet_misses = n_tiny_droplet_misses
        return self

    def misses(self, n_misses: int) -> "PerformanceCalculator":
        self._n_misses = n_misses
        return self

    def _difficulty(self) -> DifficultyAttributes:
        if self._attributes is None:
            self._attributes = DifficultyCalculator().calculate(self.beatmap, self._mods)
        return self._attributes

    def accuracy(self, acc_percent: float) -> "PerformanceCalculator":
        """
        Generates hit counts for the given accuracy (0-100).

        Set `misses` first. Misses are taken from droplets before fruits.

        Only tiny droplets can be missed without breaking combo, and the
        stream builder does not generate any. Every fruit and droplet that is
        not a miss therefore counts as caught: the percentage has no effect
        and the accuracy the pp value uses depends on the misses alone. See
        `PerformanceResult.accuracy` for the value actually used.
        """
        attributes = self._difficulty()
        acc = max(0.0, min(100.0, acc_percent)) / 100.0

        n_droplets = self._n_droplets
        if n_droplets is None:
            n_droplets = max(0, attributes.n_droplets - self._n_misses)

        n_fruits = self._n_fruits
        if n_fruits is None:
            n_fruits = max(0, attributes.max_combo - self._n_misses - n_droplets)

        max_tiny_droplets = 0
        n_tiny_droplets = self._n_tiny_droplets
        if n_tiny_droplets is None:
            n_tiny_droplets = round(acc * (attributes.max_combo + max_tiny_droplets)) - n_fruits - n_droplets
            n_tiny_droplets = max(0, min(max_tiny_droplets, n_tiny_droplets))

        self._n_fruits = n_fruits
        self._n_droplets = n_droplets
        self._n_tiny_droplets = n_tiny_droplets
        self._n_tiny_droplet_misses = max(0, max_tiny_droplets - n_tiny_droplets)
        return self

    def _combo_hits(self) -> int:
        return (self._n_fruits or 0) + (self._n_droplets or 0) + self._n_misses

    def _successful_hits(self) -> int:
        return (self._n_fruits or 0) + (self._n_droplets or 0) + (self._n_tiny_droplets or 0)

    def _total_hits(self) -> int:
        return self._successful_hits() + (self._n_tiny_droplet_misses or 0) + self._n_misses

    def _acc(self) -> float:
        total_hits = self._total_hits()
        if total_hits == 0:
            return 0.0
        return max(0.0, min(1.0, self._successful_hits() / total_hits))

    def calculate(self) -> PerformanceResult:
        attributes = self._difficulty()
        if self._n_fruits is None and self._n_droplets is None:
            # Nothing set: full play with the configured misses.
            self.accuracy(100.0)

        stars = attributes.stars

        # Relying heavily on aim
        pp = math.pow(5.0 * max(stars / 0.0049, 1.0) - 4.0, 2) / 100000.0

        combo_hits = self._combo_hits() or attributes.max_combo

        # Longer maps are worth more
        length_bonus = 0.95 + 0.3 * min(combo_hits / cfg.LENGTH_BONUS_OBJECTS, 1.0)
        if combo_hits > cfg.LENGTH_BONUS_OBJECTS:
            length_bonus += math.log10(combo_hits / cfg.LENGTH_BONUS_OBJECTS) * 0.475
        pp *= length_bonus

        # Penalize misses exponentially
        pp *= math.pow(cfg.MISS_PENALTY_BASE, self._n_misses)

        if self._combo is not None and attributes.max_combo > 0:
            pp *= min(math.pow(self._combo / attributes.max_combo, 0.8), 1.0)

        ar = attributes.approach_rate
        ar_factor = 1.0
        if ar > 9.0:
            ar_factor += 0.1 * (ar - 9.0)
            if ar > 10.0:
                ar_factor += 0.1 * (ar - 10.0)
        elif ar < 8.0:
            ar_factor += 0.025 * (8.0 - ar)
        pp *= ar_factor

        if self._mods.hd:
            if ar <= 10.0:
                pp *= 1.05 + 0.075 * (10.0 - ar)
            else:
                pp *= 1.01 + 0.04 * (11.0 - min(ar, 11.0))

        if self._mods.fl:
            pp *= 1.35 * length_bonus

        pp *= math.pow(self._acc(), cfg.ACCURACY_EXPONENT)

        if self._mods.nf:
            pp *= cfg.NO_FAIL_MULTIPLIER

        return PerformanceResult(pp=pp, stars=stars, accuracy=self._acc() * 100.0)
