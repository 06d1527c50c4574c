"""Birth event and resolved instant value types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..constants import HOUSE_SYSTEM_CODES, HOUSE_SYSTEM_NAMES
from ..exceptions import InvalidInput


def normalize_house_system(code: str) -> str:
    """Return the single-letter house system code for a code or full name.

    Raises:
        InvalidInput: If the value names no supported house system.
    """
    if not isinstance(code, str) or not code.strip():
        raise InvalidInput(f"Invalid house system: {code!r}")
    value = code.strip()
    value = HOUSE_SYSTEM_CODES.get(value, value)
    if value.upper() in HOUSE_SYSTEM_NAMES:
        return value.upper()
    raise InvalidInput(
        f"Invalid house system: {code!r}. Valid: {sorted(HOUSE_SYSTEM_NAMES)}"
    )


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float

    def __post_init__(self):
        if not -90 <= self.latitude <= 90:
            raise InvalidInput(
                f"Invalid latitude: {self.latitude}. Must be between -90 and 90"
            )
        if not -180 <= self.longitude <= 180:
            raise InvalidInput(
                f"Invalid longitude: {self.longitude}. Must be between -180 and 180"
            )


@dataclass(frozen=True)
class BirthEvent:
    """A validated civil birth moment and place.

    Construction checks every field; an impossible calendar date (e.g. Feb 30)
    or an unsupported house system raises InvalidInput. The timezone is only
    checked for shape here, it is resolved later by the TimeResolver.
    """

    year: int
    month: int
    day: int
    hour: int
    minute: int
    latitude: float
    longitude: float
    timezone: str
    house_system: str = "P"

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise InvalidInput(f"Invalid month: {self.month}. Must be between 1 and 12")
        if not 1 <= self.day <= 31:
            raise InvalidInput(f"Invalid day: {self.day}. Must be between 1 and 31")
        if not 0 <= self.hour <= 23:
            raise InvalidInput(f"Invalid hour: {self.hour}. Must be between 0 and 23")
        if not 0 <= self.minute <= 59:
            raise InvalidInput(f"Invalid minute: {self.minute}. Must be between 0 and 59")
        try:
            datetime(self.year, self.month, self.day, self.hour, self.minute)
        except ValueError as exc:
            raise InvalidInput(
                f"Invalid date: {self.year:04d}-{self.month:02d}-{self.day:02d} ({exc})"
            ) from exc

        # Raises InvalidInput on bad latitude / longitude
        Coordinates(self.latitude, self.longitude)

        if not isinstance(self.timezone, str) or not self.timezone.strip():
            raise InvalidInput("Timezone is required (IANA name, e.g. 'America/New_York')")

        object.__setattr__(self, "house_system", normalize_house_system(self.house_system))

    @classmethod
    def from_strings(
        cls,
        date: str,
        time: str,
        latitude: float,
        longitude: float,
        timezone: str,
        house_system: str = "P",
    ) -> "BirthEvent":
        """Build a BirthEvent from 'YYYY-MM-DD' and 'HH:MM' strings.

        Raises:
            InvalidInput: If the date or time string cannot be parsed.
        """
        try:
            dt = datetime.strptime(date.strip(), "%Y-%m-%d")
        except (ValueError, AttributeError) as exc:
            raise InvalidInput(
                f"Invalid date format: {date!r}. Expected YYYY-MM-DD."
            ) from exc

        hour, minute = parse_time(time)
        return cls(
            year=dt.year,
            month=dt.month,
            day=dt.day,
            hour=hour,
            minute=minute,
            latitude=float(latitude),
            longitude=float(longitude),
            timezone=timezone,
            house_system=house_system,
        )

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.latitude, self.longitude)

    def date_string(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    def time_string(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date_string(),
            "time": self.time_string(),
            "latitude": self.latitude,
            "longitude": self.longitude,
            "timezone": self.timezone,
            "house_system": self.house_system,
        }


def parse_time(time_str: str) -> tuple[int, int]:
    """Convert 'HH:MM' (seconds ignored) to an (hour, minute) pair.

    Raises:
        InvalidInput: If the time string is not valid HH:MM.
    """
    try:
        parts = time_str.strip().split(":")
        if len(parts) < 2:
            raise ValueError("not enough parts")
        h = int(parts[0])
        m = int(parts[1])
        if not (0 <= h <= 23 and 0 <= m <= 59):
            raise ValueError(f"out of range: {h}:{m}")
        return h, m
    except (ValueError, AttributeError) as exc:
        raise InvalidInput(
            f"Invalid time format: {time_str!r}. Expected HH:MM."
        ) from exc


@dataclass(frozen=True)
class Instant:
    """A birth moment resolved to UTC and the ET/UT Julian Day pair."""

    local: datetime
    utc: datetime
    jd_et: float
    jd_ut: float

    @property
    def utc_offset_hours(self) -> float:
        offset = self.local.utcoffset()
        return offset.total_seconds() / 3600.0 if offset is not None else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "local": self.local.isoformat(),
            "utc": self.utc.isoformat(),
            "utc_offset_hours": self.utc_offset_hours,
            "jd_et": self.jd_et,
            "jd_ut": self.jd_ut,
        }
