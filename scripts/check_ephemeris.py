#!/usr/bin/env python3
"""Diagnostic tool to check the ephemeris setup and a known chart."""

import sys
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from astro_purpose.config import ConfigManager
from astro_purpose.exceptions import AstroError
from astro_purpose.models.birth_event import BirthEvent
from astro_purpose.utils.chart_calculator import ChartCalculator
from astro_purpose.utils.ephemeris import EphemerisBridge, EphemerisContext


def main():
    """Print the ephemeris mode and calculate a reference chart."""
    print("Checking ephemeris setup...\n")

    config = ConfigManager()
    settings = config.to_settings()
    print(f"Config: {config.config_path}")
    print(f"Ephemeris path: {settings.ephe_path or '(none, Moshier built-in)'}")

    try:
        bridge = EphemerisBridge(EphemerisContext.create(settings.ephe_path, settings.node_type))
        calculator = ChartCalculator(bridge, settings)
        event = BirthEvent.from_strings(
            "1988-01-14", "10:22", 40.7128, -74.0060, "America/New_York"
        )
        chart = calculator.calculate(event)
    except AstroError as e:
        print(f"\nFAILED: {e}")
        sys.exit(1)

    print(f"Mode: {bridge.get_mode()}")
    print(f"pysweph version: {bridge.version}\n")
    print("Reference chart (1988-01-14 10:22 New York):")
    for name, body in chart.planets.items():
        retro = " R" if body.retrograde else ""
        print(f"  {name:<11} {body.formatted} {body.sign}{retro}")
    for warning in chart.warnings:
        print(f"  ! {warning.body}: {warning.reason}")

    sun = chart.planets.get("Sun")
    if sun is None or sun.sign != "Capricorn":
        print("\nUnexpected result: Sun should be in Capricorn")
        sys.exit(1)
    print("\nAll set! The ephemeris is working.")


if __name__ == "__main__":
    main()
