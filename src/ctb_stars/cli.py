#!/usr/bin/env python3
"""
ctb-stars: star rating and pp calculator for parsed osu!catch beatmaps.

The beatmap is read from the JSON form produced by an external .osu parser
(see `Beatmap.from_dict` for the schema).
"""

import argparse
import json
import math
import sys

from .beatmap import Beatmap
from .difficulty_calculator import DifficultyCalculator
from .mods import Mods
from .performance import PerformanceCalculator
from .utils import print_status


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ctb-stars",
        description="Calculate the osu!catch star rating and pp of a parsed beatmap.",
    )
    parser.add_argument("beatmap", help="Path to the beatmap JSON file.")
    parser.add_argument("-m", "--mods", default="NM", help="Mod acronyms (e.g. HDHR) or a bitmask.")
    parser.add_argument("-a", "--accuracy", type=float, default=None,
                        help="Accuracy in percent. Without tiny droplets only misses lower it (default: 100).")
    parser.add_argument("-x", "--misses", type=int, default=0, help="Number of misses (default: 0).")
    parser.add_argument("-c", "--combo", type=int, default=None, help="Max combo of the play (default: full combo).")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print pipeline status messages.")
    return parser


def _parse_mods(value: str) -> Mods:
    return Mods(int(value)) if value.isdigit() else Mods(value)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        mods = _parse_mods(args.mods)
        if args.verbose:
            print_status(f"Loading beatmap: {args.beatmap}")
        beatmap = Beatmap.from_json(args.beatmap)

        attributes = DifficultyCalculator(verbose=args.verbose).calculate(beatmap, mods)

        calculator = PerformanceCalculator(beatmap).attributes(attributes).mods(mods).misses(args.misses)
        if args.combo is not None:
            calculator = calculator.combo(args.combo)
        requested_accuracy = 100.0 if args.accuracy is None else args.accuracy
        performance = calculator.accuracy(requested_accuracy).calculate()
    except FileNotFoundError:
        print_status(f"Beatmap file not found at: {args.beatmap}", level="ERROR")
        return 1
    except ValueError as e:
        print_status(f"Could not rate beatmap: {e}", level="ERROR")
        return 1

    if args.accuracy is not None and not args.json and not math.isclose(args.accuracy, performance.accuracy):
        print_status(f"Requested {args.accuracy:g}% accuracy cannot be applied: only misses lower accuracy "
                     f"on maps without tiny droplets. Using {performance.accuracy:.2f}%.", level="WARN")

    result = {
        "stars": attributes.stars,
        "pp": performance.pp,
        "accuracy": performance.accuracy,
        "max_combo": attributes.max_combo,
        "n_fruits": attributes.n_fruits,
        "n_droplets": attributes.n_droplets,
        "mods": mods.acronyms(),
    }

    if args.json:
        print(json.dumps(result, indent=4))
    else:
        print(f"Stars: {attributes.stars:.4f} [mods={result['mods']}]")
        print(f"PP: {performance.pp:.2f} ({performance.accuracy:.2f}% acc, {args.misses} miss(es))")
        print(f"Max combo: {attributes.max_combo} ({attributes.n_fruits} fruits, "
              f"{attributes.n_droplets} droplets)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
