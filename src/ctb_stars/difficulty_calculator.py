# difficulty_calculator.py
#
# Contains the star rating pipeline for osu!catch maps:
# hit objects -> catchable points -> hyperdash classification ->
# movement strain per section -> weighted peak sum -> stars.

import math
from dataclasses import dataclass
from typing import List

from . import config as cfg
from .catch_objects import build_catch_stream
from .difficulty_object import CatchDifficultyObject
from .hyperdash import hyper_dash_half_width, initialise_hyper_dash
from .mods import Mods
from .movement import Movement
from .utils import print_status


@dataclass(frozen=True)
class DifficultyAttributes:
    stars: float = 0.0
    max_combo: int = 0
    n_fruits: int = 0
    n_droplets: int = 0
    approach_rate: float = 0.0


class DifficultyCalculator:
    """
    Calculates the star rating of an osu!catch map from the difficulty of
    moving the catcher between consecutive fruits and droplets.
    """

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def calculate(self, beatmap, mods=0) -> DifficultyAttributes:
        """
        Calculates the difficulty attributes of `beatmap` played with `mods`.

        Maps with fewer than 2 hit objects (or fewer than 2 catchable points
        after expansion) are rated 0 stars.

        Raises:
            InvalidCurveError: If a slider's path cannot be built.
        """
        mods = Mods(mods)
        attributes = mods.apply(beatmap)

        if len(beatmap.hit_objects) < 2:
            if self.verbose:
                print_status(f"Only {len(beatmap.hit_objects)} hit object(s), skipping strain calculation.",
                             level="WARN")
            return DifficultyAttributes(approach_rate=attributes.ar)

        stream = build_catch_stream(beatmap, hard_rock=mods.hr)
        objects = stream.objects
        if self.verbose:
            print_status(f"Built {len(objects)} catchable points ({stream.n_fruits} fruits, "
                         f"{stream.n_droplets} droplets) with mods {mods.acronyms()}.")

        if len(objects) < 2:
            return DifficultyAttributes(
                max_combo=stream.max_combo,
                n_fruits=stream.n_fruits,
                n_droplets=stream.n_droplets,
                approach_rate=attributes.ar,
            )

        n_hyper_dashes = initialise_hyper_dash(objects, hyper_dash_half_width(attributes.cs))
        if self.verbose:
            print_status(f"Found {n_hyper_dashes} hyperdash(es).")

        strain_peaks = self.compute_strain_peaks(objects, attributes, beatmap.hit_objects[0].start_time)

        stars = self._calculate_difficulty_value(strain_peaks)
        if self.verbose:
            print_status(f"{len(strain_peaks)} strain sections, {stars:.4f} stars.")

        return DifficultyAttributes(
            stars=stars,
            max_combo=stream.max_combo,
            n_fruits=stream.n_fruits,
            n_droplets=stream.n_droplets,
            approach_rate=attributes.ar,
        )

    @staticmethod
    def compute_strain_peaks(objects, attributes, start_time: float) -> List[float]:
        """
        Runs the movement skill over classified catch objects.

        Args:
            objects (list): CatchObjects with hyperdash fields initialised.
            attributes (MapAttributes): Mod-adjusted settings (cs, clock_rate).
            start_time (float): Start time of the map's first hit object; the
                                first section ends at the next multiple of the
                                section length.

        Returns:
            list: Peak strain of every section in chronological order.
        """
        movement = Movement(attributes.cs)
        section_length = cfg.SECTION_LENGTH * attributes.clock_rate
        current_section_end = math.ceil(start_time / section_length) * section_length

        for last, current in zip(objects, objects[1:]):
            difficulty_object = CatchDifficultyObject(current, last, movement.half_catcher_width,
                                                      attributes.clock_rate)

            # A long gap can close several sections at once.
            while difficulty_object.time > current_section_end:
                movement.save_current_peak()
                movement.start_new_section_from(current_section_end)
                current_section_end += section_length

            movement.process(difficulty_object)

        movement.save_current_peak()
        return movement.strain_peaks

    def _calculate_difficulty_value(self, strains: List[float]) -> float:
        """Weights the section peaks from hardest to easiest and scales the sum to stars."""
        if not strains:
            return 0.0

        difficulty = 0.0
        weight = 1.0
        for strain in sorted(strains, reverse=True):
            difficulty += strain * weight
            weight *= cfg.DECAY_WEIGHT

        return math.sqrt(difficulty) * cfg.STAR_SCALING_FACTOR


def calculate_difficulty(beatmap, mods=0) -> DifficultyAttributes:
    """Shortcut for `DifficultyCalculator().calculate(beatmap, mods)`."""
    return DifficultyCalculator().calculate(beatmap, mods)
