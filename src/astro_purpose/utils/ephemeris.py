"""Ephemeris access using pysweph (Swiss Ephemeris Python bindings).

Two pieces live here:

    EphemerisContext  immutable configuration created once per process. It
                      sets the library's data-file path (a process-global
                      setting in the C library) and owns the lock that
                      serialises calls into it.
    EphemerisBridge   a thin per-call adapter: positions, house cusps, Julian
                      Day conversion and eclipse searches. Library failures
                      come back as EphemerisError / HouseCalculationError.

Precision:
    - Moshier (default, no files needed): ~1 arcminute
    - Swiss Ephemeris files (.se1):       ~0.001 arcsecond
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

import swisseph as swe

from ..constants import (
    HOUSE_SYSTEM_NAMES,
    NODE_BODIES,
    POLAR_SENSITIVE_SYSTEMS,
)
from ..exceptions import EphemerisError, HouseCalculationError, InvalidInput
from ..models.birth_event import normalize_house_system

logger = logging.getLogger(__name__)

# The C library keeps one data path and one set of caches per process.
_provider_lock = threading.RLock()
_PATH_STATE = {"configured": False, "path": None}


@dataclass(frozen=True)
class RawPosition:
    longitude: float
    latitude: float
    distance: float
    speed: float


@dataclass(frozen=True)
class EclipseHit:
    jd_ut: float
    flags: int
    magnitude: Optional[float]


@dataclass(frozen=True)
class EphemerisContext:
    """Process-wide ephemeris configuration.

    Usage:
        context = EphemerisContext.create()                        # Moshier
        context = EphemerisContext.create(ephe_path="/path/ephe")  # .se1 files
    """

    ephe_path: Optional[str]
    node_type: str
    flags: int
    lock: threading.RLock = field(default=_provider_lock, compare=False, repr=False)

    @classmethod
    def create(cls, ephe_path: Optional[str] = None, node_type: str = "true") -> "EphemerisContext":
        """Configure the ephemeris source and return the context.

        Args:
            ephe_path: Path to directory containing .se1 ephemeris files.
                       Pass None (default) to use the built-in Moshier ephemeris,
                       which requires no external files.
            node_type: "true" (osculating) or "mean" lunar node.

        Raises:
            EphemerisError: If a different data path was already configured in
                this process.
            InvalidInput: If node_type is not recognised.
        """
        if node_type not in NODE_BODIES:
            raise InvalidInput(f"Invalid node type: {node_type}. Valid: {sorted(NODE_BODIES)}")

        with _provider_lock:
            if _PATH_STATE["configured"]:
                if _PATH_STATE["path"] != ephe_path:
                    raise EphemerisError(
                        f"Ephemeris path already set to {_PATH_STATE['path']!r}; "
                        f"cannot switch to {ephe_path!r} in a running process"
                    )
            else:
                swe.set_ephe_path(ephe_path)
                _PATH_STATE["configured"] = True
                _PATH_STATE["path"] = ephe_path
                logger.info("Ephemeris configured (%s)", "sweph" if ephe_path else "moshier")

        source = swe.FLG_SWIEPH if ephe_path else swe.FLG_MOSEPH
        return cls(ephe_path=ephe_path, node_type=node_type, flags=source | swe.FLG_SPEED)

    @property
    def node_body(self) -> int:
        return NODE_BODIES[self.node_type]

    def get_mode(self) -> str:
        """Return the active ephemeris mode: 'moshier' or 'sweph'."""
        return "moshier" if self.ephe_path is None else "sweph"


class EphemerisBridge:
    """Calls into the Swiss Ephemeris under the context's lock."""

    def __init__(self, context: EphemerisContext):
        self.context = context

    @property
    def version(self) -> str:
        return getattr(swe, "__version__", "unknown")

    def get_mode(self) -> str:
        return self.context.get_mode()

    # ------------------------------------------------------------------
    # Positions
    # ------------------------------------------------------------------

    def calc(self, jd_et: float, body: int) -> RawPosition:
        """Geocentric ecliptic position of a body at an ephemeris-time Julian Day.

        Raises:
            EphemerisError: If the library cannot compute the body (for example
                Chiron without the asteroid file).
        """
        with self.context.lock:
            try:
                # pysweph fork returns (xx, ret_flags, warning_str); unpack flexibly
                raw = swe.calc(jd_et, body, self.context.flags)
            except swe.Error as exc:
                raise EphemerisError(f"Failed to calculate body {body}: {exc}") from exc
        xx = raw[0]  # lon, lat, dist, speed_lon, speed_lat, speed_dist
        return RawPosition(longitude=xx[0], latitude=xx[1], distance=xx[2], speed=xx[3])

    def obliquity(self, jd_ut: float) -> float:
        """True obliquity of the ecliptic in degrees."""
        with self.context.lock:
            try:
                raw = swe.calc_ut(jd_ut, swe.ECL_NUT, 0)
            except swe.Error as exc:
                raise EphemerisError(f"Failed to calculate obliquity: {exc}") from exc
        return raw[0][0]

    # ------------------------------------------------------------------
    # Houses
    # ------------------------------------------------------------------

    def houses(
        self, jd_ut: float, latitude: float, longitude: float, code: str
    ) -> tuple[tuple[float, ...], tuple[float, ...]]:
        """Calculate the twelve house cusps and the ascmc array.

        Returns:
            (cusps, ascmc): twelve cusp longitudes (first house first) and the
            library's ascmc tuple (0 = Ascendant, 1 = MC, 3 = Vertex).

        Raises:
            HouseCalculationError: If the system has no solution at this
                latitude or the library rejects the request.
        """
        code = house_system_code(code)
        if code in POLAR_SENSITIVE_SYSTEMS:
            limit = 90.0 - self.obliquity(jd_ut)
            if abs(latitude) > limit:
                raise HouseCalculationError(
                    f"{house_system_name(code)} houses are undefined at latitude "
                    f"{latitude:.2f}° (polar circle at ±{limit:.2f}°); "
                    "use Whole Sign, Equal or Porphyrius instead"
                )

        with self.context.lock:
            try:
                cusps, ascmc = swe.houses(jd_ut, latitude, longitude, code.encode())
            except swe.Error as exc:
                raise HouseCalculationError(f"Failed to calculate houses: {exc}") from exc

        cusps = tuple(cusps)
        # Some builds prepend an unused element 0.
        if len(cusps) in (13, 37):
            cusps = cusps[1:]
        if len(cusps) == 36:
            # Gauquelin sectors run clockwise from the Ascendant; sector
            # 1 - 3(h - 1) opens house h.
            cusps = tuple(cusps[(-3 * h) % 36] for h in range(12))
        if len(cusps) != 12:
            raise HouseCalculationError(f"Unexpected cusp count {len(cusps)} for system {code}")
        return cusps, tuple(ascmc)

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------

    def civil_to_jd(
        self, year: int, month: int, day: int, hour: int, minute: int, second: float = 0.0
    ) -> tuple[float, float]:
        """UTC calendar date (Gregorian) to the (jd_et, jd_ut) pair."""
        with self.context.lock:
            try:
                jd_et, jd_ut = swe.utc_to_jd(year, month, day, hour, minute, second, swe.GREG_CAL)
            except swe.Error as exc:
                raise InvalidInput(f"Invalid UTC date/time: {exc}") from exc
        return jd_et, jd_ut

    def jd_to_civil(self, jd_ut: float) -> datetime:
        """Julian Day (UT) to an aware UTC datetime, rounded to the second."""
        with self.context.lock:
            year, month, day, hour = swe.revjul(jd_ut, swe.GREG_CAL)
        moment = datetime(year, month, day, tzinfo=timezone.utc) + timedelta(hours=hour)
        return moment.replace(microsecond=0) + timedelta(seconds=round(moment.microsecond / 1e6))

    def ut_to_et(self, jd_ut: float) -> float:
        with self.context.lock:
            return jd_ut + swe.deltat(jd_ut)

    # ------------------------------------------------------------------
    # Eclipses
    # ------------------------------------------------------------------

    def solar_eclipse_before(self, jd_ut: float) -> EclipseHit:
        """Most recent solar eclipse (any type, anywhere on Earth) before jd_ut."""
        flags = self.context.flags & ~swe.FLG_SPEED
        with self.context.lock:
            try:
                # ecltype 0 = any type; last argument searches backward
                retflags, tret = swe.sol_eclipse_when_glob(jd_ut, flags, 0, True)
            except swe.Error as exc:
                raise EphemerisError(f"Solar eclipse search failed: {exc}") from exc
            magnitude = None
            try:
                _, _, attr = swe.sol_eclipse_where(tret[0], flags)
                magnitude = attr[0]
            except swe.Error as exc:
                logger.warning("Solar eclipse magnitude unavailable: %s", exc)
        return EclipseHit(jd_ut=tret[0], flags=retflags, magnitude=magnitude)

    def lunar_eclipse_before(self, jd_ut: float) -> EclipseHit:
        """Most recent lunar eclipse before jd_ut, with its umbral magnitude."""
        flags = self.context.flags & ~swe.FLG_SPEED
        with self.context.lock:
            try:
                retflags, tret = swe.lun_eclipse_when(jd_ut, flags, 0, True)
            except swe.Error as exc:
                raise EphemerisError(f"Lunar eclipse search failed: {exc}") from exc
            magnitude = None
            try:
                _, attr = swe.lun_eclipse_how(tret[0], (0.0, 0.0, 0.0), flags)
                magnitude = attr[0]
            except swe.Error as exc:
                logger.warning("Lunar eclipse magnitude unavailable: %s", exc)
        return EclipseHit(jd_ut=tret[0], flags=retflags, magnitude=magnitude)


def house_system_code(code: str) -> str:
    """Return the single-letter house system code for a code or full name.

    Raises:
        InvalidInput: For unknown systems.
    """
    return normalize_house_system(code)


def house_system_name(code: str) -> str:
    """Return the display name for a house system code."""
    return HOUSE_SYSTEM_NAMES[house_system_code(code)]
