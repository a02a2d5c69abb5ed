#!/usr/bin/env python3
"""
Diffie-Hellman exchange simulator

Stages:
  0. Alice and Bob agree on a small prime (g) and a large prime (p).
  1. Alice picks a private key a and publishes A = g^a mod p.
  2. Bob picks a private key b and publishes B = g^b mod p.
  3. Alice computes Ks = B^a mod p.
  4. Bob computes Ks = A^b mod p.
  5. Both shared keys are compared.

The full state is narrated after every stage. Exit codes:
  0 - shared keys match
  1 - bad configuration
  2 - shared keys do not match
  3 - no prime found within DH_MAX_ATTEMPTS

Demonstration only: small primes, `random.Random`, no validation of g.

Run with:
    python -m dhdemo.simulator
"""

from __future__ import annotations

import random
import sys
from typing import Optional

from dhdemo.common.config import ExchangeConfig, load_config
from dhdemo.common.models import (
    ExchangeParameters,
    ExchangeResult,
    ExchangeState,
    Participant,
    Stage,
)
from dhdemo.common.utils import time_seed
from dhdemo.crypto import dh
from dhdemo.crypto.primes import NoPrimeFound, generate_prime
from dhdemo.report.transcript import StageReporter


EXIT_CONFIG_ERROR = 1
EXIT_NO_PRIME = 3


class ExchangeSimulator:
    """
    Runs one exchange between Alice and Bob.

    Each stage method takes the current ExchangeState and returns the next
    one; nothing is mutated. All randomness comes from a single
    random.Random seeded from config (or the clock), drawn in a fixed
    order: small prime, large prime, Alice's key, Bob's key.
    """

    def __init__(
        self,
        config: Optional[ExchangeConfig] = None,
        reporter: Optional[StageReporter] = None,
    ):
        self.config = config if config is not None else ExchangeConfig()
        self.reporter = reporter if reporter is not None else StageReporter()
        self.seed = self.config.seed if self.config.seed is not None else time_seed()
        self.rng = random.Random(self.seed)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def agree_parameters(self) -> ExchangeState:
        small_lo, small_hi = self.config.small_prime_range
        large_lo, large_hi = self.config.large_prime_range

        small_prime = generate_prime(
            small_lo, small_hi, self.rng, self.config.max_attempts
        )
        large_prime = generate_prime(
            large_lo, large_hi, self.rng, self.config.max_attempts
        )

        return ExchangeState(
            stage=Stage.PARAMETERS_AGREED,
            params=ExchangeParameters(small_prime=small_prime, large_prime=large_prime),
            alice=Participant(name="Alice"),
            bob=Participant(name="Bob"),
        )

    def _publish(self, state: ExchangeState, who: Participant) -> Participant:
        g = state.params.small_prime
        p = state.params.large_prime
        private_key = dh.generate_private(g, self.rng)
        return who.with_keys(private_key, dh.compute_public(g, private_key, p))

    def alice_publishes(self, state: ExchangeState) -> ExchangeState:
        alice = self._publish(state, state.alice)
        return state.advance(Stage.ALICE_PUBLISHED, alice=alice)

    def bob_publishes(self, state: ExchangeState) -> ExchangeState:
        bob = self._publish(state, state.bob)
        return state.advance(Stage.BOB_PUBLISHED, bob=bob)

    def alice_computes_shared(self, state: ExchangeState) -> ExchangeState:
        shared = dh.compute_shared(
            state.bob.public_key, state.alice.private_key, state.params.large_prime
        )
        return state.advance(Stage.ALICE_SHARED, alice=state.alice.with_shared(shared))

    def bob_computes_shared(self, state: ExchangeState) -> ExchangeState:
        shared = dh.compute_shared(
            state.alice.public_key, state.bob.private_key, state.params.large_prime
        )
        return state.advance(Stage.BOB_SHARED, bob=state.bob.with_shared(shared))

    def verify(self, state: ExchangeState) -> ExchangeResult:
        final = state.advance(Stage.VERIFIED)
        alice_shared = final.alice.shared_key
        bob_shared = final.bob.shared_key

        if alice_shared is None or alice_shared != bob_shared:
            return ExchangeResult(
                outcome="key_mismatch",
                alice_shared=alice_shared,
                bob_shared=bob_shared,
                state=final,
            )

        return ExchangeResult(
            outcome="success",
            alice_shared=alice_shared,
            bob_shared=bob_shared,
            shared_key=alice_shared,
            state=final,
        )

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def run(self) -> ExchangeResult:
        """
        Run all stages in order, narrating after each one.

        Raises:
            NoPrimeFound: If a prime range is exhausted (bounded search only).
        """
        self.reporter.header()

        state = self.agree_parameters()
        self.reporter.report(state)

        for step in (
            self.alice_publishes,
            self.bob_publishes,
            self.alice_computes_shared,
            self.bob_computes_shared,
        ):
            state = step(state)
            self.reporter.report(state)

        result = self.verify(state)
        self.reporter.result(result)
        return result


def main() -> int:
    try:
        config = load_config()
    except ValueError as e:
        print(f"[CONFIG] {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    simulator = ExchangeSimulator(config)
    print(f"[INFO] seed={simulator.seed}")

    try:
        result = simulator.run()
    except NoPrimeFound as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return EXIT_NO_PRIME

    print(f"[INFO] transcript sha256={simulator.reporter.transcript_hash_hex()}")
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
