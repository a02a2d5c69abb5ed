"""
Stage-by-stage narration + TranscriptHash helpers.

The reporter renders every ExchangeState as a fixed-width block with
three columns (Alice | Public | Bob), followed by a one-line description
of what happened in that stage:

    Stage      Alice                Public               Bob
    1          Private Key :: 6     Small Prime :: 5     Private Key :: 0
               Public Key  :: 8     Large Prime :: 23    Public Key  :: 0
               Shared Key  :: 0                          Shared Key  :: 0

    Stage 1 Description :: Alice chooses private key 6 and sends Bob ...

Unset keys are shown as 0.

Like the chat transcript it grew out of, the reporter keeps a running
SHA-256 over the exact narration lines it writes, so two runs with the
same seed can be compared by hash alone.

Typical usage:

    reporter = StageReporter()
    reporter.header()
    reporter.report(state)        # once per stage
    reporter.result(result)
    h_hex = reporter.transcript_hash_hex()
"""

from __future__ import annotations

import hashlib
import sys
from typing import List, Optional, TextIO

from dhdemo.common.models import ExchangeResult, ExchangeState, Stage


COLUMN = 20
INDENT = " " * 11


def _k(value: Optional[int]) -> int:
    return 0 if value is None else value


def describe(state: ExchangeState) -> str:
    """One-line natural-language description of a stage."""
    g = state.params.small_prime
    p = state.params.large_prime
    a = state.alice
    b = state.bob

    if state.stage == Stage.PARAMETERS_AGREED:
        return (
            f"Alice and Bob agree to use a small prime number of {g} "
            f"and a large prime number of {p}"
        )
    if state.stage == Stage.ALICE_PUBLISHED:
        return (
            f"Alice chooses private key {_k(a.private_key)} and sends Bob her "
            f"public key {_k(a.public_key)} "
            f"({_k(a.public_key)} = {g} pow {_k(a.private_key)} mod {p})"
        )
    if state.stage == Stage.BOB_PUBLISHED:
        return (
            f"Bob chooses private key {_k(b.private_key)} and sends Alice his "
            f"public key {_k(b.public_key)} "
            f"({_k(b.public_key)} = {g} pow {_k(b.private_key)} mod {p})"
        )
    if state.stage == Stage.ALICE_SHARED:
        return (
            f"Alice computes the shared key of {_k(a.shared_key)} "
            f"({_k(a.shared_key)} = {_k(b.public_key)} pow {_k(a.private_key)} mod {p})"
        )
    if state.stage == Stage.BOB_SHARED:
        return (
            f"Bob computes the shared key of {_k(b.shared_key)} "
            f"({_k(b.shared_key)} = {_k(a.public_key)} pow {_k(b.private_key)} mod {p})"
        )
    raise ValueError(f"stage {int(state.stage)} has no narration block")


def format_stage(state: ExchangeState) -> List[str]:
    """Render one stage block as a list of lines (no trailing newlines)."""
    a = state.alice
    b = state.bob
    params = state.params

    alice_cols = [
        f"Private Key :: {_k(a.private_key)}",
        f"Public Key  :: {_k(a.public_key)}",
        f"Shared Key  :: {_k(a.shared_key)}",
    ]
    public_cols = [
        f"Small Prime :: {params.small_prime}",
        f"Large Prime :: {params.large_prime}",
        "",
    ]
    bob_cols = [
        f"Private Key :: {_k(b.private_key)}",
        f"Public Key  :: {_k(b.public_key)}",
        f"Shared Key  :: {_k(b.shared_key)}",
    ]

    lines = []
    for row, (left, mid, right) in enumerate(zip(alice_cols, public_cols, bob_cols)):
        lead = f"{int(state.stage):<10} " if row == 0 else INDENT
        lines.append(f"{lead}{left:<{COLUMN}} {mid:<{COLUMN}} {right}")

    lines.append("")
    lines.append(f"Stage {int(state.stage)} Description :: {describe(state)}")
    lines.append("")
    return lines


class StageReporter:
    """
    Writes the exchange narration and hashes it as it goes.

    - Narration goes to `out` (stdout by default), one line at a time.
    - Key-mismatch errors go to `err` (stderr by default) and are not
      part of the hash.
    - The running SHA-256 covers every narration line including its '\n'.
    """

    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        # resolved at construction so redirected/captured streams are honoured
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self._hasher = hashlib.sha256()

    # ------------------------------------------------------------------
    # Append helpers
    # ------------------------------------------------------------------

    def write_line(self, line: str) -> None:
        """Write one narration line and fold it into the transcript hash."""
        if "\n" in line:
            raise ValueError("line must not contain newline characters")

        record = line + "\n"
        self.out.write(record)
        self.out.flush()
        self._hasher.update(record.encode("utf-8"))

    def header(self) -> None:
        self.write_line(
            f"{'Stage':<10} {'Alice':<{COLUMN}} {'Public':<{COLUMN}} {'Bob':<{COLUMN}}"
        )

    def report(self, state: ExchangeState) -> None:
        for line in format_stage(state):
            self.write_line(line)

    def result(self, result: ExchangeResult) -> None:
        if result.ok:
            self.write_line(
                f"Result :: Alice and Bob have the same shared keys ({result.shared_key})"
            )
            return

        print(
            "Error in key exchange: Alice's shared key and Bob's shared key "
            f"do not match ({result.alice_shared} != {result.bob_shared})",
            file=self.err,
        )

    # ------------------------------------------------------------------
    # Finalization helpers
    # ------------------------------------------------------------------

    def transcript_hash_hex(self) -> str:
        """Hex-encoded SHA-256 of all narration lines written so far."""
        return self._hasher.hexdigest()
