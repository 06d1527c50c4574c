"""Aspect definitions and detection.

The table order matters: a separation is tested against each definition in
turn and the first one within orb wins.
"""

from typing import Iterable, Mapping, Optional

from ..models.chart import Aspect, BodyPosition
from .position_utils import angular_separation

# (name, exact angle), in match order
ASPECT_ANGLES: list[tuple[str, float]] = [
    ("conjunction", 0.0),
    ("sextile", 60.0),
    ("square", 90.0),
    ("trine", 120.0),
    ("opposition", 180.0),
    ("quincunx", 150.0),
    ("semisextile", 30.0),
    ("semisquare", 45.0),
    ("sesquiquadrate", 135.0),
]

NATAL_ORBS: dict[str, float] = {
    "conjunction": 8.0,
    "sextile": 6.0,
    "square": 8.0,
    "trine": 8.0,
    "opposition": 8.0,
    "quincunx": 3.0,
    "semisextile": 2.0,
    "semisquare": 2.0,
    "sesquiquadrate": 2.0,
}

TRANSIT_ORBS: dict[str, float] = {
    "conjunction": 8.0,
    "sextile": 4.0,
    "square": 6.0,
    "trine": 6.0,
    "opposition": 8.0,
    "quincunx": 2.0,
    "semisextile": 1.0,
    "semisquare": 1.0,
    "sesquiquadrate": 1.0,
}

# Step (days) used to extrapolate positions when deciding applying vs separating
_APPLYING_STEP_DAYS = 0.01


def identify_aspect(
    separation: float,
    orbs: Mapping[str, float] = NATAL_ORBS,
) -> Optional[tuple[str, float, float]]:
    """
    Identify what aspect (if any) a separation represents.

    Args:
        separation: Shortest arc between two bodies, 0-180°
        orbs: Orb per aspect name; aspects missing from the mapping are skipped

    Returns:
        (name, exact_angle, orb) for the first matching definition, or None
    """
    for name, exact_angle in ASPECT_ANGLES:
        if name not in orbs:
            continue
        diff = abs(separation - exact_angle)
        if diff <= orbs[name]:
            return name, exact_angle, diff
    return None


def is_applying(
    lon_a: float,
    speed_a: float,
    lon_b: float,
    speed_b: float,
    exact_angle: float,
) -> bool:
    """True when the orb shrinks as both bodies move on at their current speeds.

    This is a first-order approximation from the instantaneous speeds, not an
    integration of the orbits.
    """
    now = abs(angular_separation(lon_a, lon_b) - exact_angle)
    later = abs(
        angular_separation(
            lon_a + speed_a * _APPLYING_STEP_DAYS,
            lon_b + speed_b * _APPLYING_STEP_DAYS,
        )
        - exact_angle
    )
    return later < now


def aspect_between(
    a: BodyPosition,
    b: BodyPosition,
    orbs: Mapping[str, float] = NATAL_ORBS,
) -> Optional[Aspect]:
    """Return the aspect formed by two bodies, or None."""
    separation = angular_separation(a.longitude, b.longitude)
    found = identify_aspect(separation, orbs)
    if found is None:
        return None
    name, exact_angle, orb = found
    return Aspect(
        body_a=a.name,
        body_b=b.name,
        aspect=name,
        exact_angle=exact_angle,
        actual_angle=separation,
        orb=orb,
        applying=is_applying(a.longitude, a.speed, b.longitude, b.speed, exact_angle),
    )


def find_aspects(
    positions: Iterable[BodyPosition],
    orbs: Mapping[str, float] = NATAL_ORBS,
) -> list[Aspect]:
    """Scan every unordered pair of bodies; each pair is reported once."""
    bodies = list(positions)
    aspects = []
    for i, a in enumerate(bodies):
        for b in bodies[i + 1:]:
            aspect = aspect_between(a, b, orbs)
            if aspect is not None:
                aspects.append(aspect)
    return aspects
