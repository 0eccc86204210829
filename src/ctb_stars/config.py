# config.py
#
# Stores all tuning constants for the osu!catch difficulty pipeline:
# catcher geometry, curve sampling quality, the movement strain model and
# the performance formula. Values are fixed by the game; changing them
# changes every star rating.

# --- Playfield & Catcher Configuration ---
PLAYFIELD_WIDTH = 512.0
CATCHER_SIZE = 106.75
# Fraction of the catcher plate that actually catches fruit.
ALLOWED_CATCH_RANGE = 0.8
# Catcher movement speed in osu! pixels per millisecond (no dash).
BASE_SPEED = 1.0
# Quarter of a 60fps frame of grace time when deciding hyperdashes.
HYPER_DASH_GRACE_MS = 1000.0 / 60.0 / 4.0
# Objects whose slack to the next object is at most this many pixels are edge dashes.
EDGE_DASH_THRESHOLD = 20.0

# --- Curve Sampling Configuration ---
# Bezier sub-curves get one sample per this many pixels of control polygon.
BEZIER_TOLERANCE = 0.25
BEZIER_MIN_SAMPLES = 2
BEZIER_MAX_SAMPLES = 5000
# Samples per Catmull segment.
CATMULL_DETAIL = 50
# Below this determinant three arc points are treated as collinear.
PERFECT_ARC_COLLINEAR_EPSILON = 1e-3

# --- Timing Defaults ---
# Used when no control point precedes an object.
DEFAULT_BEAT_LENGTH = 1000.0
DEFAULT_SPEED_MULTIPLIER = 1.0
# Slider velocity multipliers only affect tick spacing from this format version on.
TICK_DISTANCE_MIN_VERSION = 8
# Slider velocity multipliers outside this range are clamped to it.
MIN_SPEED_MULTIPLIER = 0.1
MAX_SPEED_MULTIPLIER = 10.0

# --- Strain Model Configuration ---
SECTION_LENGTH = 750.0
STAR_SCALING_FACTOR = 0.153
SKILL_MULTIPLIER = 900.0
STRAIN_DECAY_BASE = 0.2
DECAY_WEIGHT = 0.94
INITIAL_STRAIN = 1.0

NORMALIZED_HITOBJECT_RADIUS = 41.0
ABSOLUTE_PLAYER_POSITIONING_ERROR = 16.0
DIRECTION_CHANGE_BONUS = 21.0
EDGE_DASH_BONUS = 5.7
# Every strain interval is capped at the equivalent of 375 BPM 1/4 streams.
MIN_STRAIN_TIME = 40.0

# --- Hard Rock Configuration ---
HARD_ROCK_RNG_SEED = 1337
HARD_ROCK_MAX_TIME_DIFF = 1000
HARD_ROCK_MAX_RANDOM_OFFSET = 20.0

# --- Mod Configuration ---
DOUBLE_TIME_RATE = 1.5
HALF_TIME_RATE = 0.75
HARD_ROCK_CS_MULTIPLIER = 1.3
HARD_ROCK_DIFFICULTY_MULTIPLIER = 1.4
EASY_CS_MULTIPLIER = 0.5
EASY_DIFFICULTY_MULTIPLIER = 0.5

# --- Performance Configuration ---
LENGTH_BONUS_OBJECTS = 2500.0
MISS_PENALTY_BASE = 0.97
ACCURACY_EXPONENT = 5.5
NO_FAIL_MULTIPLIER = 0.9
