import threading
import pytest

from media_organizer.watching.stability import StabilityGate, StabilityState


def _sized_reads(values):
    """_read_size replacement that replays values (exceptions are raised)."""
    it = iter(values)

    def read(path):
        value = next(it)
        if isinstance(value, Exception):
            raise value
        return value
    return read


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def gate(sleeps):
    return StabilityGate(sleep=sleeps.append)


@pytest.fixture
def growing_file(tmp_path):
    p = tmp_path / "incoming.mov"
    p.write_bytes(b"x" * 100)
    return p


def test_unchanged_size_becomes_stable(gate, sleeps, growing_file):
    result = gate.await_stable(growing_file)

    assert result.ok
    assert result.state is StabilityState.STABLE
    assert result.attempts == 3
    assert sleeps == [5.0, 5.0, 5.0]


def test_three_matching_polls_after_entry_read(gate, growing_file, monkeypatch):
    monkeypatch.setattr(gate, "_read_size", _sized_reads([100, 100, 100, 100]))

    result = gate.await_stable(growing_file)

    assert result.state is StabilityState.STABLE
    assert result.attempts == 3


def test_growth_resets_the_count(gate, growing_file, monkeypatch):
    monkeypatch.setattr(gate, "_read_size", _sized_reads([10, 20, 20, 30, 30, 30, 30]))

    result = gate.await_stable(growing_file)

    assert result.state is StabilityState.STABLE
    assert result.attempts == 6


def test_never_settling_file_is_unstable(gate, sleeps, growing_file, monkeypatch):
    counter = iter(range(10_000))
    monkeypatch.setattr(gate, "_read_size", lambda path: next(counter))

    result = gate.await_stable(growing_file)

    assert result.state is StabilityState.UNSTABLE
    assert not result.ok
    assert result.attempts == 360
    assert len(sleeps) == 360


def test_missing_file_vanishes_immediately(gate, sleeps, tmp_path):
    result = gate.await_stable(tmp_path / "nope.jpg")

    assert result.state is StabilityState.VANISHED
    assert sleeps == []


def test_file_deleted_between_polls_vanishes(growing_file):
    gate = StabilityGate(sleep=lambda s: growing_file.unlink(missing_ok=True))

    result = gate.await_stable(growing_file)

    assert result.state is StabilityState.VANISHED
    assert result.attempts == 1


def test_transient_read_error_cannot_count_as_match(gate, growing_file, monkeypatch):
    reads = [100, 100, PermissionError("locked"), 100, 100, 100, 100]
    monkeypatch.setattr(gate, "_read_size", _sized_reads(reads))

    result = gate.await_stable(growing_file)

    # The read after the error only re-seeds last_size
    assert result.state is StabilityState.STABLE
    assert result.attempts == 6


def test_transient_errors_still_use_up_attempts(growing_file, monkeypatch):
    gate = StabilityGate(max_attempts=4, sleep=lambda s: None)
    monkeypatch.setattr(gate, "_read_size", _sized_reads([100] + [OSError("busy")] * 4))

    result = gate.await_stable(growing_file)

    assert result.state is StabilityState.UNSTABLE
    assert result.attempts == 4


def test_stop_event_cancels_in_flight_check(growing_file):
    stop = threading.Event()
    stop.set()
    gate = StabilityGate(interval=0.01, stop_event=stop)

    result = gate.await_stable(growing_file)

    assert result.state is StabilityState.CANCELLED
    assert result.attempts == 0
