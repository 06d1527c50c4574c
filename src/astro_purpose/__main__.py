#!/usr/bin/env python3
"""Entry point for astro-purpose-mcp server."""

from astro_purpose.server import run

if __name__ == "__main__":
    run()
