"""Read-only reference bundle: event tables plus interpretation texts.

Loaded once at startup and shared by every engine. Nested mappings are
wrapped in MappingProxyType and lists become tuples, so nothing downstream
can modify the bundle.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from ..exceptions import ReferenceDataError
from ..models.cycles import MarsPhaseEvent, VspEvent
from .cycle_tables import (
    MARS_TABLE_FILE,
    VSP_TABLE_FILE,
    build_mars_phase_table,
    build_vsp_table,
    write_tables,
)
from .ephemeris import EphemerisBridge

logger = logging.getLogger(__name__)

PACKAGE_DATA_DIR = Path(__file__).resolve().parent.parent / "data"

VSP_INTERPRETATIONS_FILE = "vsp-interpretations.json"
MARS_INTERPRETATIONS_FILE = "mars-phase-interpretations.json"
IKIGAI_MAPPING_FILE = "ikigai-mapping.json"
IKIGAI_INTERPRETATIONS_FILE = "ikigai-interpretations.json"
PHASE_TEXTS_FILE = "phase-texts.json"


def _freeze(value: Any) -> Any:
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _read_json(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        raise ReferenceDataError(f"Failed to load reference data from {path}: {e}")


def parse_vsp_events(records: Iterable[Mapping[str, Any]]) -> tuple[VspEvent, ...]:
    """Build VspEvents from JSON records ({date, longitude, type}), sorted by date."""
    events = []
    for record in records:
        try:
            events.append(VspEvent(
                date=date.fromisoformat(record["date"]),
                longitude=float(record["longitude"]),
                star_type=record["type"],
            ))
        except (KeyError, TypeError, ValueError) as e:
            raise ReferenceDataError(f"Malformed VSP record {record!r}: {e}")
    return tuple(sorted(events, key=lambda e: e.date))


def parse_mars_events(records: Iterable[Mapping[str, Any]]) -> tuple[MarsPhaseEvent, ...]:
    """Build MarsPhaseEvents from JSON records ({date, cycle, phase}), sorted by date."""
    events = []
    for record in records:
        try:
            longitude = record.get("longitude")
            events.append(MarsPhaseEvent(
                date=date.fromisoformat(record["date"]),
                cycle=record["cycle"],
                phase=record["phase"],
                longitude=float(longitude) if longitude is not None else None,
            ))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ReferenceDataError(f"Malformed Mars phase record {record!r}: {e}")
    return tuple(sorted(events, key=lambda e: e.date))


@dataclass(frozen=True)
class ReferenceData:
    vsp_events: tuple[VspEvent, ...]
    mars_events: tuple[MarsPhaseEvent, ...]
    vsp_interpretations: Mapping[str, Any]
    mars_interpretations: Mapping[str, Any]
    ikigai_mapping: Mapping[str, Any]
    ikigai_interpretations: Mapping[str, Any]
    phase_texts: Mapping[str, Any]

    @classmethod
    def from_tables(
        cls,
        vsp_events: Iterable[VspEvent] = (),
        mars_events: Iterable[MarsPhaseEvent] = (),
        texts_dir: Optional[Path] = None,
    ) -> "ReferenceData":
        """Bundle in-memory event tables with the packaged interpretation texts."""
        texts_dir = Path(texts_dir) if texts_dir else PACKAGE_DATA_DIR
        return cls(
            vsp_events=tuple(sorted(vsp_events, key=lambda e: e.date)),
            mars_events=tuple(sorted(mars_events, key=lambda e: e.date)),
            vsp_interpretations=_freeze(_read_json(texts_dir / VSP_INTERPRETATIONS_FILE)),
            mars_interpretations=_freeze(_read_json(texts_dir / MARS_INTERPRETATIONS_FILE)),
            ikigai_mapping=_freeze(_read_json(texts_dir / IKIGAI_MAPPING_FILE)),
            ikigai_interpretations=_freeze(_read_json(texts_dir / IKIGAI_INTERPRETATIONS_FILE)),
            phase_texts=_freeze(_read_json(texts_dir / PHASE_TEXTS_FILE)),
        )

    @classmethod
    def load(
        cls,
        data_dir: Optional[Path] = None,
        bridge: Optional[EphemerisBridge] = None,
        start_year: int = 1900,
        end_year: int = 2100,
    ) -> "ReferenceData":
        """Load the bundle, deriving missing event tables from the ephemeris.

        Event tables are looked up in data_dir first, then the package data
        directory. When neither has them and a bridge is given, both tables are
        computed for start_year..end_year and cached in data_dir.
        """
        search = [Path(data_dir)] if data_dir else []
        search.append(PACKAGE_DATA_DIR)

        vsp_path = _first_existing(search, VSP_TABLE_FILE)
        mars_path = _first_existing(search, MARS_TABLE_FILE)

        if vsp_path and mars_path:
            vsp = parse_vsp_events(_table_records(vsp_path))
            mars = parse_mars_events(_table_records(mars_path))
        elif bridge is not None:
            start, end = date(start_year, 1, 1), date(end_year, 12, 31)
            logger.info("Cycle tables not found; deriving %s..%s from the ephemeris", start, end)
            vsp = tuple(build_vsp_table(bridge, start, end))
            mars = tuple(build_mars_phase_table(bridge, start, end))
            if data_dir:
                try:
                    write_tables(Path(data_dir), vsp, mars)
                except OSError as e:
                    logger.warning("Could not cache cycle tables in %s: %s", data_dir, e)
        else:
            logger.warning("Cycle tables not found and no ephemeris given; VSP and Mars lookups will be unavailable")
            vsp, mars = (), ()

        return cls.from_tables(vsp, mars)


def _first_existing(directories: list[Path], filename: str) -> Optional[Path]:
    for directory in directories:
        candidate = directory / filename
        if candidate.exists():
            return candidate
    return None


def _table_records(path: Path) -> list:
    payload = _read_json(path)
    if not isinstance(payload, dict) or not isinstance(payload.get("events"), list):
        raise ReferenceDataError(f"{path} has no 'events' list")
    return payload["events"]
