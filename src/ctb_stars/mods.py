# mods.py
#
# Contains the game modifier set and the logic that applies it to the
# beatmap's difficulty settings. Only the parts that matter for osu!catch
# difficulty are modelled: clock rate (DT/NC/HT), the CS/AR/OD/HP transform
# (HR/EZ) and the flags the performance formula looks at (HD/FL/NF).

from dataclasses import dataclass

from . import config as cfg

NO_FAIL = 1 << 0
EASY = 1 << 1
TOUCH_DEVICE = 1 << 2
HIDDEN = 1 << 3
HARD_ROCK = 1 << 4
SUDDEN_DEATH = 1 << 5
DOUBLE_TIME = 1 << 6
RELAX = 1 << 7
HALF_TIME = 1 << 8
NIGHTCORE = 1 << 9
FLASHLIGHT = 1 << 10
SPUN_OUT = 1 << 12
PERFECT = 1 << 14

MOD_ACRONYMS = {
    'NF': NO_FAIL,
    'EZ': EASY,
    'TD': TOUCH_DEVICE,
    'HD': HIDDEN,
    'HR': HARD_ROCK,
    'SD': SUDDEN_DEATH,
    'DT': DOUBLE_TIME,
    'RX': RELAX,
    'HT': HALF_TIME,
    # Nightcore always implies Double Time.
    'NC': NIGHTCORE | DOUBLE_TIME,
    'FL': FLASHLIGHT,
    'SO': SPUN_OUT,
    'PF': PERFECT | SUDDEN_DEATH,
}


def get_ar_ms(ar):
    """
    Converts an approach rate to the time in ms a fruit falls before it
    reaches the catcher (1800ms at AR0, 1200ms at AR5, 450ms at AR10).
    """
    if ar < 5:
        return 1200.0 + 600.0 * (5.0 - ar) / 5.0
    return 1200.0 - 750.0 * (ar - 5.0) / 5.0


def ar_ms_to_val(ar_ms):
    """Inverse of `get_ar_ms`. Fall times below 450ms give AR above 10 (DT)."""
    if ar_ms > 1200:
        return 5.0 - (ar_ms - 1200.0) / 120.0
    return 5.0 + (1200.0 - ar_ms) / 150.0


def od_ms_to_val(great_window_ms):
    """
    Converts a great-hit window in ms back to an OD value. Catch scores
    ignore OD, but the value is reported after clock rate scaling.
    """
    return (80.0 - great_window_ms) / 6.0


@dataclass(frozen=True)
class MapAttributes:
    """Difficulty settings after mods have been applied."""
    cs: float
    ar: float
    od: float
    hp: float
    clock_rate: float


class Mods:
    """
    An osu! modifier combination stored as the game's bit flags.

    Accepts an int bitmask, an acronym string such as "HDHR" (case
    insensitive, optionally separated by spaces, commas or '+') or
    another Mods instance.
    """

    def __init__(self, value=0):
        if isinstance(value, Mods):
            self.bits = value.bits
        elif isinstance(value, str):
            self.bits = self.parse_acronyms(value)
        else:
            self.bits = int(value)

    @staticmethod
    def parse_acronyms(text: str) -> int:
        cleaned = ''.join(ch for ch in text.upper() if ch.isalpha())
        if cleaned in ('', 'NM', 'NOMOD'):
            return 0
        if len(cleaned) % 2 != 0:
            raise ValueError(f"Cannot split mod string {text!r} into acronyms")

        bits = 0
        for i in range(0, len(cleaned), 2):
            acronym = cleaned[i:i + 2]
            if acronym not in MOD_ACRONYMS:
                raise ValueError(f"Unknown mod acronym {acronym!r} in {text!r}")
            bits |= MOD_ACRONYMS[acronym]
        return bits

    def _has(self, flag: int) -> bool:
        return self.bits & flag == flag

    @property
    def nf(self) -> bool:
        return self._has(NO_FAIL)

    @property
    def ez(self) -> bool:
        return self._has(EASY)

    @property
    def hd(self) -> bool:
        return self._has(HIDDEN)

    @property
    def hr(self) -> bool:
        return self._has(HARD_ROCK)

    @property
    def dt(self) -> bool:
        return self._has(DOUBLE_TIME) or self._has(NIGHTCORE)

    @property
    def ht(self) -> bool:
        return self._has(HALF_TIME)

    @property
    def fl(self) -> bool:
        return self._has(FLASHLIGHT)

    @property
    def clock_rate(self) -> float:
        if self.dt:
            return cfg.DOUBLE_TIME_RATE
        if self.ht:
            return cfg.HALF_TIME_RATE
        return 1.0

    def apply(self, beatmap) -> MapAttributes:
        """
        Calculates the difficulty settings of `beatmap` with these mods.

        AR and OD are converted to their millisecond windows, scaled by the
        clock rate and converted back, so DT can push them above 10.
        """
        clock_rate = self.clock_rate

        if self.hr:
            multiplier = cfg.HARD_ROCK_DIFFICULTY_MULTIPLIER
        elif self.ez:
            multiplier = cfg.EASY_DIFFICULTY_MULTIPLIER
        else:
            multiplier = 1.0

        cs = beatmap.cs
        if self.hr:
            cs = min(cs * cfg.HARD_ROCK_CS_MULTIPLIER, 10.0)
        elif self.ez:
            cs *= cfg.EASY_CS_MULTIPLIER

        ar = min(beatmap.ar * multiplier, 10.0)
        ar = ar_ms_to_val(get_ar_ms(ar) / clock_rate)

        od = min(beatmap.od * multiplier, 10.0)
        od = od_ms_to_val((80.0 - 6.0 * od) / clock_rate)

        hp = min(beatmap.hp * multiplier, 10.0)

        return MapAttributes(cs=cs, ar=ar, od=od, hp=hp, clock_rate=clock_rate)

    def acronyms(self) -> str:
        names = []
        for acronym, flag in MOD_ACRONYMS.items():
            if self._has(flag) and not (acronym == 'DT' and self._has(NIGHTCORE)) \
                    and not (acronym == 'SD' and self._has(PERFECT)):
                names.append(acronym)
        return ''.join(names) or 'NM'

    def __eq__(self, other):
        if isinstance(other, Mods):
            return self.bits == other.bits
        return NotImplemented

    def __hash__(self):
        return hash(self.bits)

    def __repr__(self):
        return f"Mods({self.acronyms()})"
