#!/usr/bin/env python3
"""Derive the Venus Star Point and Mars phase tables and write them as JSON.

Usage:
    python scripts/build_reference_tables.py                     # configured data dir, 1900-2100
    python scripts/build_reference_tables.py --start 1950 --end 2050 --out ./tables
    python scripts/build_reference_tables.py --ephe-path ~/ephe  # use .se1 files
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from astro_purpose.config import ConfigManager
from astro_purpose.utils.cycle_tables import build_mars_phase_table, build_vsp_table, write_tables
from astro_purpose.utils.ephemeris import EphemerisBridge, EphemerisContext


def main():
    config = ConfigManager()
    settings = config.to_settings()

    parser = argparse.ArgumentParser(description="Build cycle event tables from the ephemeris")
    parser.add_argument("--start", type=int, default=settings.table_start_year, help="First year")
    parser.add_argument("--end", type=int, default=settings.table_end_year, help="Last year")
    parser.add_argument("--out", type=Path, default=config.get_data_dir(), help="Output directory")
    parser.add_argument("--ephe-path", default=settings.ephe_path, help="Directory of .se1 files")
    args = parser.parse_args()

    if args.end < args.start:
        parser.error("--end must not be before --start")

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    bridge = EphemerisBridge(EphemerisContext.create(args.ephe_path, settings.node_type))
    start, end = date(args.start, 1, 1), date(args.end, 12, 31)

    print(f"Ephemeris mode: {bridge.get_mode()}")
    print(f"Scanning {start} to {end}...")

    vsp = build_vsp_table(bridge, start, end)
    print(f"  Venus Star Points: {len(vsp)}")
    mars = build_mars_phase_table(bridge, start, end)
    print(f"  Mars phase events: {len(mars)}")

    vsp_path, mars_path = write_tables(args.out, vsp, mars)
    print(f"\nWrote {vsp_path}")
    print(f"Wrote {mars_path}")


if __name__ == "__main__":
    main()
