"""Shared constants for astro-purpose-mcp.

Centralizes values used by the ephemeris bridge, the chart calculator and the
cycle engines, so they are defined once and imported wherever needed.
"""

import swisseph as swe

# Zodiac signs in ecliptic order (index 0 = Aries, index 11 = Pisces).
# Used to convert an absolute longitude to a sign name: sign = ZODIAC_SIGNS[int(lon // 30)]
ZODIAC_SIGNS: list[str] = [
    "Aries", "Taurus", "Gemini", "Cancer",
    "Leo", "Virgo", "Libra", "Scorpio",
    "Sagittarius", "Capricorn", "Aquarius", "Pisces",
]

SIGN_ELEMENTS: dict[str, str] = {
    "Aries": "fire", "Leo": "fire", "Sagittarius": "fire",
    "Taurus": "earth", "Virgo": "earth", "Capricorn": "earth",
    "Gemini": "air", "Libra": "air", "Aquarius": "air",
    "Cancer": "water", "Scorpio": "water", "Pisces": "water",
}

ELEMENTS: list[str] = ["fire", "earth", "air", "water"]

# Bodies queried from the ephemeris, in output order.
# Each entry is a (pysweph_constant, display_name) pair so the two lists stay in sync.
_PLANET_PAIRS: list[tuple[int, str]] = [
    (swe.SUN,     "Sun"),
    (swe.MOON,    "Moon"),
    (swe.MERCURY, "Mercury"),
    (swe.VENUS,   "Venus"),
    (swe.MARS,    "Mars"),
    (swe.JUPITER, "Jupiter"),
    (swe.SATURN,  "Saturn"),
    (swe.URANUS,  "Uranus"),
    (swe.NEPTUNE, "Neptune"),
    (swe.PLUTO,   "Pluto"),
]

PLANET_IDS:   list[int] = [p[0] for p in _PLANET_PAIRS]
PLANET_NAMES: list[str] = [p[1] for p in _PLANET_PAIRS]

NORTH_NODE = "North Node"
SOUTH_NODE = "South Node"
CHIRON = "Chiron"

NODE_BODIES: dict[str, int] = {
    "true": swe.TRUE_NODE,
    "mean": swe.MEAN_NODE,
}

CHIRON_ID: int = swe.CHIRON

# Maps full house system names to single-letter codes used by swe.houses().
# Single-letter codes pass through unchanged (looked up as their own key).
HOUSE_SYSTEM_CODES: dict[str, str] = {
    "Placidus":          "P",
    "Koch":              "K",
    "Porphyrius":        "O",
    "Regiomontanus":     "R",
    "Campanus":          "C",
    "Equal":             "E",
    "Equal (Ascendant)": "A",
    "Vehlow Equal":      "V",
    "Whole Sign":        "W",
    "Axial Rotation":    "X",
    "Azimuthal":         "H",
    "Polich/Page":       "T",
    "Alcabitus":         "B",
    "Morinus":           "M",
    "Gauquelin Sectors": "G",
}

HOUSE_SYSTEM_NAMES: dict[str, str] = {
    code: name for name, code in HOUSE_SYSTEM_CODES.items()
}

# Quadrant systems that have no solution inside the polar circles.
POLAR_SENSITIVE_SYSTEMS = frozenset({"P", "K", "G"})

MORNING_STAR = "Morning Star"
EVENING_STAR = "Evening Star"

# Mars–Sun synodic phases: (phase name, Sun−Mars elongation at which it begins).
MARS_PHASE_BOUNDARIES: list[tuple[str, float]] = [
    ("Inception",          0.0),
    ("Preparation",       15.0),
    ("Emergence",         45.0),
    ("Exploration",       72.0),
    ("Identity Challenge", 90.0),
    ("Maturity",         120.0),
    ("Transcendence",    150.0),
    ("Re-Orientation",   180.0),
    ("Resurgence",       210.0),
    ("Destiny Challenge", 270.0),
    ("Service",          300.0),
    ("Elder",            330.0),
    ("Transition",       345.0),
]

MARS_PHASE_NAMES: list[str] = [p[0] for p in MARS_PHASE_BOUNDARIES]

# Eight-fold synodic phase names, 45° each, starting at the conjunction.
SYNODIC_PHASES: list[str] = [
    "New", "Crescent", "First Quarter", "Gibbous",
    "Full", "Disseminating", "Last Quarter", "Balsamic",
]

LUNAR_PHASES: list[str] = [
    "New Moon", "Crescent", "First Quarter", "Gibbous",
    "Full Moon", "Disseminating", "Last Quarter", "Balsamic",
]

DAYS_PER_YEAR = 365.25
