"""
End-to-end tests for the exchange simulator.
"""

import io

import pytest

from dhdemo import simulator as simulator_module
from dhdemo.common.config import ExchangeConfig
from dhdemo.common.models import Stage
from dhdemo.crypto import dh
from dhdemo.crypto.primes import NoPrimeFound, is_prime
from dhdemo.report.transcript import StageReporter
from dhdemo.simulator import ExchangeSimulator


TEXTBOOK = ExchangeConfig(small_prime_range=(3, 10), large_prime_range=(20, 30), seed=0)


class RecordingReporter(StageReporter):
    def __init__(self):
        super().__init__(out=io.StringIO(), err=io.StringIO())
        self.states = []

    def report(self, state):
        self.states.append(state)
        super().report(state)


class WrongModulusSimulator(ExchangeSimulator):
    """Bob reduces modulo the wrong prime."""

    def bob_computes_shared(self, state):
        shared = dh.compute_shared(
            state.alice.public_key, state.bob.private_key, state.params.large_prime + 6
        )
        return state.advance(Stage.BOB_SHARED, bob=state.bob.with_shared(shared))


def _textbook(cls, scripted_random, reporter=None):
    sim = cls(TEXTBOOK, reporter or RecordingReporter())
    sim.rng = scripted_random(ranges=[5, 23], ints=[3, 4])
    return sim


def test_textbook_run(scripted_random):
    reporter = RecordingReporter()
    result = _textbook(ExchangeSimulator, scripted_random, reporter).run()

    assert result.ok
    assert result.exit_code == 0
    assert result.shared_key == 18

    final = reporter.states[-1]
    assert (final.alice.public_key, final.bob.public_key) == (10, 4)

    out = reporter.out.getvalue()
    assert "(10 = 5 pow 3 mod 23)" in out
    assert "(4 = 5 pow 4 mod 23)" in out
    assert out.rstrip().endswith("Result :: Alice and Bob have the same shared keys (18)")

    assert result.state.stage == Stage.VERIFIED
    assert result.state.alice.shared_key == result.state.bob.shared_key == 18


def test_stages_reported_in_order(scripted_random):
    reporter = RecordingReporter()
    _textbook(ExchangeSimulator, scripted_random, reporter).run()

    states = reporter.states
    assert [s.stage for s in states] == [
        Stage.PARAMETERS_AGREED,
        Stage.ALICE_PUBLISHED,
        Stage.BOB_PUBLISHED,
        Stage.ALICE_SHARED,
        Stage.BOB_SHARED,
    ]

    assert states[0].alice.private_key is None and states[0].bob.private_key is None
    assert states[1].alice.public_key == 10 and states[1].bob.private_key is None
    assert states[2].bob.public_key == 4 and states[2].alice.shared_key is None
    assert states[3].alice.shared_key == 18 and states[3].bob.shared_key is None
    assert states[4].bob.shared_key == 18

    out = reporter.out.getvalue()
    for n in range(5):
        assert f"Stage {n} Description ::" in out


def test_wrong_modulus_is_a_key_mismatch(scripted_random):
    reporter = RecordingReporter()
    result = _textbook(WrongModulusSimulator, scripted_random, reporter).run()

    assert result.outcome == "key_mismatch"
    assert result.exit_code == 2
    assert result.shared_key is None
    assert (result.alice_shared, result.bob_shared) == (18, 24)
    assert result.state.stage == Stage.VERIFIED
    assert "do not match" in reporter.err.getvalue()
    assert "Result ::" not in reporter.out.getvalue()


def test_random_runs_agree():
    for seed in range(25):
        reporter = RecordingReporter()
        result = ExchangeSimulator(ExchangeConfig(seed=seed), reporter).run()

        params = reporter.states[0].params
        assert result.ok
        assert is_prime(params.small_prime) and 3 <= params.small_prime < 10
        assert is_prime(params.large_prime) and 100 <= params.large_prime < 500
        assert 1 <= reporter.states[-1].alice.private_key <= params.small_prime


def test_same_seed_same_run():
    runs = []
    for _ in range(2):
        reporter = RecordingReporter()
        result = ExchangeSimulator(ExchangeConfig(seed=1234), reporter).run()
        runs.append((result, reporter.states[-1], reporter.transcript_hash_hex()))

    assert runs[0] == runs[1]


def test_prime_free_range_raises():
    config = ExchangeConfig(large_prime_range=(24, 29), seed=1, max_attempts=20)
    with pytest.raises(NoPrimeFound):
        ExchangeSimulator(config, RecordingReporter()).run()


def test_seed_defaults_to_clock():
    sim = ExchangeSimulator(ExchangeConfig(), RecordingReporter())
    assert isinstance(sim.seed, int)
    assert sim.seed > 0


# ---------------------------------------------------------------------------
# main()
# ---------------------------------------------------------------------------


def test_main_success(monkeypatch, capsys):
    monkeypatch.setenv("DH_SEED", "42")

    assert simulator_module.main() == 0

    out = capsys.readouterr().out
    assert "[INFO] seed=42" in out
    assert "Result :: Alice and Bob have the same shared keys" in out
    assert "[INFO] transcript sha256=" in out


def test_main_key_mismatch(monkeypatch, capsys, scripted_random):
    class Buggy(WrongModulusSimulator):
        def __init__(self, config, reporter=None):
            super().__init__(config, reporter)
            self.rng = scripted_random(ranges=[5, 23], ints=[3, 4])

    monkeypatch.setattr(simulator_module, "ExchangeSimulator", Buggy)

    assert simulator_module.main() == 2

    captured = capsys.readouterr()
    assert "Error in key exchange" in captured.err
    assert "Result ::" not in captured.out


def test_main_config_error(monkeypatch, capsys):
    monkeypatch.setenv("DH_SMALL_PRIME_MIN", "4")
    monkeypatch.setenv("DH_SMALL_PRIME_MAX", "4")

    assert simulator_module.main() == 1
    assert "[CONFIG]" in capsys.readouterr().err


def test_main_no_prime(monkeypatch, capsys):
    monkeypatch.setenv("DH_LARGE_PRIME_MIN", "24")
    monkeypatch.setenv("DH_LARGE_PRIME_MAX", "29")
    monkeypatch.setenv("DH_MAX_ATTEMPTS", "25")

    assert simulator_module.main() == 3
    assert "[ERROR] no odd prime found in [24, 29)" in capsys.readouterr().err
