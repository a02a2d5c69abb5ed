"""
Common helpers.

Used by:
  - simulator.py (default seed when DH_SEED is not set)
"""

import time


def now_ms() -> int:
    """Current UNIX time in milliseconds as int."""
    return int(time.time() * 1000)


def time_seed() -> int:
    """Seed derived from the wall clock, for runs without DH_SEED."""
    return now_ms()
