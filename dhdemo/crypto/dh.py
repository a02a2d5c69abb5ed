"""
Classic DH key derivation helpers.

This module implements the three arithmetic steps of a "plain" modular
Diffie–Hellman exchange over the small demonstration primes produced by
`dhdemo.crypto.primes`:

- generate_private()   : pick random a or b in [1, g]
- compute_public()     : A = g^a mod p, B = g^b mod p
- compute_shared()     : Ks = B^a mod p  (or A^b mod p)

Both sides end up with the same Ks because (g^a)^b = (g^b)^a (mod p).

All exponentiation goes through three-argument pow(), i.e. square-and-
multiply with a reduction after every multiplication. Never compute the
full power first and reduce afterwards.
"""

from __future__ import annotations

import random
from typing import Optional


def _check_modulus(p: int) -> None:
    if p <= 0:
        raise ValueError(f"DH modulus must be positive, got {p}")


def generate_private(small_prime: int, rng: Optional[random.Random] = None) -> int:
    """
    Generate a random private exponent in [1, small_prime].

    Args:
        small_prime: The agreed generator basis g.
        rng: Random source; a fresh random.Random() if omitted.

    Returns:
        A random integer usable as a DH private key.
    """
    if small_prime < 1:
        raise ValueError("small prime must be positive")

    if rng is None:
        rng = random.Random()

    # randint is inclusive on both ends
    return rng.randint(1, small_prime)


def compute_public(g: int, x: int, p: int) -> int:
    """
    Compute public value: Y = g^x mod p.

    Args:
        g: Generator (the small prime).
        x: Private exponent.
        p: Prime modulus (the large prime).

    Returns:
        Public value (integer).
    """
    _check_modulus(p)
    return pow(g, x, p)


def compute_shared(peer_public: int, x: int, p: int) -> int:
    """
    Compute shared secret Ks = (peer_public)^x mod p.

    Unlike a real handshake, the peer value is not range-checked: the
    demonstration primes are small enough that A or B may legitimately be
    1 or p-1.

    Args:
        peer_public: Peer's DH public value (A or B).
        x: Our private exponent.
        p: Prime modulus.

    Returns:
        Shared secret Ks as integer.
    """
    _check_modulus(p)
    return pow(peer_public, x, p)
