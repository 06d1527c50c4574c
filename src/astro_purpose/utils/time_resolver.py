"""Civil time → UTC → Julian Day resolution."""

from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..exceptions import InvalidCivilTime, InvalidInput, InvalidTimeZone
from ..models.birth_event import BirthEvent, Instant
from .ephemeris import EphemerisBridge


def load_zone(name: str) -> ZoneInfo:
    """Return the ZoneInfo for an IANA identifier.

    Raises:
        InvalidTimeZone: If the identifier is unknown or malformed.
    """
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError, AttributeError) as exc:
        raise InvalidTimeZone(f"Unknown timezone: {name!r}") from exc


class TimeResolver:
    """Resolves local wall-clock moments to UTC and the ET/UT Julian Day pair.

    Ambiguous wall times (the repeated hour when clocks go back) resolve to
    their first occurrence. Wall times skipped by a DST jump raise
    InvalidCivilTime.
    """

    def __init__(self, bridge: EphemerisBridge):
        self.bridge = bridge

    def resolve(self, event: BirthEvent) -> Instant:
        return self.resolve_civil(
            event.year, event.month, event.day, event.hour, event.minute, event.timezone
        )

    def resolve_civil(
        self, year: int, month: int, day: int, hour: int, minute: int, tz_name: str
    ) -> Instant:
        zone = load_zone(tz_name)
        try:
            local = datetime(year, month, day, hour, minute, tzinfo=zone, fold=0)
        except ValueError as exc:
            raise InvalidInput(f"Invalid date/time: {exc}") from exc

        utc = local.astimezone(timezone.utc)
        round_trip = utc.astimezone(zone)
        if round_trip.replace(tzinfo=None) != local.replace(tzinfo=None):
            raise InvalidCivilTime(
                f"{local.replace(tzinfo=None).isoformat(timespec='minutes')} does not "
                f"exist in {tz_name} (skipped by a daylight-saving transition)"
            )
        return self._instant(local, utc)

    def resolve_utc(self, moment: datetime) -> Instant:
        """Resolve an aware datetime (naive values are taken as UTC)."""
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        utc = moment.astimezone(timezone.utc)
        return self._instant(moment, utc)

    def now(self) -> Instant:
        return self.resolve_utc(datetime.now(timezone.utc))

    def _instant(self, local: datetime, utc: datetime) -> Instant:
        seconds = utc.second + utc.microsecond / 1e6
        jd_et, jd_ut = self.bridge.civil_to_jd(
            utc.year, utc.month, utc.day, utc.hour, utc.minute, seconds
        )
        return Instant(local=local, utc=utc, jd_et=jd_et, jd_ut=jd_ut)
