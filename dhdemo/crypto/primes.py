"""
Random odd prime generation by trial division.

Used twice per exchange:

- small prime  (generator basis "g"), default range [3, 10)
- large prime  (modulus "p"),         default range [100, 500)

The search is plain rejection sampling: draw a random integer from
[lo, hi) and keep drawing until it is an odd prime. Ranges are tiny, so
trial division is fast enough.

NOTE: the random source is `random.Random`, NOT `secrets`. This is a
demonstration tool and the primes are far too small for real use.
"""

from __future__ import annotations

import random
from typing import Optional


class NoPrimeFound(ValueError):
    """Raised when a bounded prime search runs out of attempts."""

    def __init__(self, lo: int, hi: int, attempts: int):
        self.lo = lo
        self.hi = hi
        self.attempts = attempts
        super().__init__(
            f"no odd prime found in [{lo}, {hi}) after {attempts} attempts"
        )


def is_prime(n: int) -> bool:
    """
    Trial-division primality test.

    Even numbers other than 2 are rejected outright; odd candidates are
    divided by every odd d with d*d <= n.
    """
    if n < 2:
        return False
    if n == 2:
        return True
    if n % 2 == 0:
        return False

    d = 3
    while d * d <= n:
        if n % d == 0:
            return False
        d += 2
    return True


def generate_prime(
    lo: int,
    hi: int,
    rng: Optional[random.Random] = None,
    max_attempts: Optional[int] = None,
) -> int:
    """
    Return a random odd prime p with lo <= p < hi.

    Args:
        lo: Inclusive lower bound (must be positive).
        hi: Exclusive upper bound (must be greater than lo).
        rng: Random source; a fresh random.Random() if omitted.
        max_attempts: Give up after this many rejected samples.
            None means search forever, so the caller must make sure the
            range actually holds an odd prime.

    Returns:
        An odd prime in [lo, hi).

    Raises:
        ValueError: If the range is empty or not positive.
        NoPrimeFound: If max_attempts samples were all rejected.
    """
    if lo < 1:
        raise ValueError(f"prime range must be positive, got [{lo}, {hi})")
    if lo >= hi:
        raise ValueError(f"empty prime range [{lo}, {hi})")

    if rng is None:
        rng = random.Random()

    attempts = 0
    while True:
        candidate = rng.randrange(lo, hi)
        # 2 is prime but never an acceptable generator/modulus here
        if candidate % 2 == 1 and is_prime(candidate):
            return candidate

        attempts += 1
        if max_attempts is not None and attempts >= max_attempts:
            raise NoPrimeFound(lo, hi, attempts)
