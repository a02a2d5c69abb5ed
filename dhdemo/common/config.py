"""
Exchange configuration from environment variables / .env.

Recognised keys (all optional):

    DH_SMALL_PRIME_MIN=3
    DH_SMALL_PRIME_MAX=10
    DH_LARGE_PRIME_MIN=100
    DH_LARGE_PRIME_MAX=500
    DH_SEED=                 # empty -> time-derived seed
    DH_MAX_ATTEMPTS=10000    # 0 -> search for primes forever

Ranges are half-open: [min, max).
"""

from __future__ import annotations

import os
from typing import Optional, Tuple

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator


DEFAULT_SMALL_PRIME_RANGE: Tuple[int, int] = (3, 10)
DEFAULT_LARGE_PRIME_RANGE: Tuple[int, int] = (100, 500)
DEFAULT_MAX_ATTEMPTS = 10_000


class ExchangeConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    small_prime_range: Tuple[int, int] = DEFAULT_SMALL_PRIME_RANGE
    large_prime_range: Tuple[int, int] = DEFAULT_LARGE_PRIME_RANGE
    seed: Optional[int] = None
    max_attempts: Optional[int] = DEFAULT_MAX_ATTEMPTS

    @field_validator("small_prime_range", "large_prime_range")
    @classmethod
    def _check_range(cls, value: Tuple[int, int]) -> Tuple[int, int]:
        lo, hi = value
        if lo < 3:
            raise ValueError(f"prime range must start at 3 or above, got [{lo}, {hi})")
        if lo >= hi:
            raise ValueError(f"empty prime range [{lo}, {hi})")
        return value

    @field_validator("max_attempts")
    @classmethod
    def _check_attempts(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 1:
            raise ValueError("max_attempts must be positive (or None for unbounded)")
        return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def load_config() -> ExchangeConfig:
    """
    Build an ExchangeConfig from the process environment.

    A .env file in the working directory is loaded first; variables that
    are already set in the environment win.

    Raises:
        ValueError: On non-integer values or invalid ranges.
    """
    load_dotenv(find_dotenv(usecwd=True))

    seed_raw = os.getenv("DH_SEED", "").strip()
    seed = _env_int("DH_SEED", 0) if seed_raw else None

    max_attempts: Optional[int] = _env_int("DH_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS)
    if max_attempts == 0:
        max_attempts = None

    return ExchangeConfig(
        small_prime_range=(
            _env_int("DH_SMALL_PRIME_MIN", DEFAULT_SMALL_PRIME_RANGE[0]),
            _env_int("DH_SMALL_PRIME_MAX", DEFAULT_SMALL_PRIME_RANGE[1]),
        ),
        large_prime_range=(
            _env_int("DH_LARGE_PRIME_MIN", DEFAULT_LARGE_PRIME_RANGE[0]),
            _env_int("DH_LARGE_PRIME_MAX", DEFAULT_LARGE_PRIME_RANGE[1]),
        ),
        seed=seed,
        max_attempts=max_attempts,
    )
