#!/usr/bin/env python3
"""Command-line entrypoint for browsing flights and passenger rosters."""

from flight_browser.cli import main

if __name__ == "__main__":  # pragma: no cover - script entrypoint
    raise SystemExit(main())
