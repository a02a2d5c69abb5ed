"""
Pydantic models: participant, exchange parameters, per-stage state and
the final exchange result.

Every model is frozen. A stage never edits a snapshot in place; it builds
the next one with `model_copy(update=...)` so the reporter always sees an
explicit, complete state.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict


EXIT_OK = 0
EXIT_KEY_MISMATCH = 2


# ---------------------------------------------------------------------------
# Base model: immutable snapshots
# ---------------------------------------------------------------------------


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Protocol stages
# ---------------------------------------------------------------------------


class Stage(IntEnum):
    PARAMETERS_AGREED = 0
    ALICE_PUBLISHED = 1
    BOB_PUBLISHED = 2
    ALICE_SHARED = 3
    BOB_SHARED = 4
    VERIFIED = 5


# ---------------------------------------------------------------------------
# Participants + public parameters
# ---------------------------------------------------------------------------


class ExchangeParameters(FrozenModel):
    small_prime: int  # generator basis g
    large_prime: int  # modulus p


class Participant(FrozenModel):
    """
    One side of the exchange.

    Key fields are write-once and must be filled in order:
    private_key -> public_key -> shared_key.
    """

    name: str
    private_key: Optional[int] = None
    public_key: Optional[int] = None
    shared_key: Optional[int] = None

    def with_keys(self, private_key: int, public_key: int) -> "Participant":
        """Return a copy holding the key pair. Raises if already set."""
        if self.private_key is not None or self.public_key is not None:
            raise ValueError(f"{self.name} already has a key pair")
        return self.model_copy(
            update={"private_key": private_key, "public_key": public_key}
        )

    def with_shared(self, shared_key: int) -> "Participant":
        """Return a copy holding the shared key. Raises if out of order."""
        if self.private_key is None:
            raise ValueError(f"{self.name} has no private key yet")
        if self.shared_key is not None:
            raise ValueError(f"{self.name} already has a shared key")
        return self.model_copy(update={"shared_key": shared_key})


# ---------------------------------------------------------------------------
# Exchange state + result
# ---------------------------------------------------------------------------


class ExchangeState(FrozenModel):
    stage: Stage
    params: ExchangeParameters
    alice: Participant
    bob: Participant

    def advance(
        self,
        stage: Stage,
        alice: Optional[Participant] = None,
        bob: Optional[Participant] = None,
    ) -> "ExchangeState":
        """Build the snapshot for the next stage."""
        return self.model_copy(
            update={
                "stage": stage,
                "alice": alice if alice is not None else self.alice,
                "bob": bob if bob is not None else self.bob,
            }
        )


class ExchangeResult(FrozenModel):
    outcome: Literal["success", "key_mismatch"]
    alice_shared: Optional[int]
    bob_shared: Optional[int]
    shared_key: Optional[int] = None  # only set on success
    state: Optional[ExchangeState] = None  # terminal VERIFIED snapshot

    @property
    def ok(self) -> bool:
        return self.outcome == "success"

    @property
    def exit_code(self) -> int:
        return EXIT_OK if self.ok else EXIT_KEY_MISMATCH
