#!/usr/bin/env python3
"""Convenience runner for the ridetrack command-line tool.

Usage:
    python run.py normalize ride.json
    python run.py investigate ride.json --max-points 30
"""
from ridetrack.main import main

if __name__ == "__main__":
    raise SystemExit(main())
