# utils.py
#
# Contains small helpers shared across the difficulty modules.

import math

from . import config as cfg


def print_status(message, level="INFO"):
    """Prints a formatted status message to the console."""
    print(f"[{level}] {message}")


def clamp(value, lower, upper):
    """Restricts value to the closed interval [lower, upper]."""
    return max(lower, min(upper, value))


def calculate_catch_width(cs):
    """
    Calculates the width of the catcher plate that can catch fruit.

    Args:
        cs (float): The (mod-adjusted) Circle Size of the beatmap.

    Returns:
        float: Catchable width in osu! pixels.
    """
    scale = 1.0 - 0.7 * (cs - 5.0) / 5.0
    return cfg.CATCHER_SIZE * math.fabs(scale) * cfg.ALLOWED_CATCH_RANGE
