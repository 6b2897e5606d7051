"""
File stability detection.

Uses polling to decide when a file that just appeared in the watched tree
has finished being written. External writers give no completion signal,
so a file counts as stable once its size has stayed the same for N
consecutive checks. Polling is bounded so a write that never finishes
cannot wedge the watcher.
"""

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from .. import config

# Size that no real read can return; forces the next read to start over
_UNMATCHABLE_SIZE = -1


class StabilityState(Enum):
    STABLE = 'stable'
    UNSTABLE = 'unstable'
    VANISHED = 'vanished'
    CANCELLED = 'cancelled'


@dataclass
class StabilityRecord:
    """Polling state for one await_stable() call. Never shared."""
    last_size: int
    consecutive_matches: int = 0
    attempts: int = 0


@dataclass(frozen=True)
class StabilityResult:
    path: Path
    state: StabilityState
    attempts: int = 0
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.state is StabilityState.STABLE


class StabilityGate:
    """
    Poll-based write-completion gate.

    Configuration:
        interval: Seconds between size checks (default: 5)
        required_matches: Consecutive unchanged reads required (default: 3)
        max_attempts: Polls before giving up (default: 360, i.e. 30 minutes)
        stop_event: Session shutdown flag. When set, an in-flight check
                    ends as CANCELLED at its next wait.
    """

    def __init__(self,
                 interval: float = config.STABILITY_INTERVAL_SEC,
                 required_matches: int = config.STABILITY_REQUIRED_MATCHES,
                 max_attempts: int = config.STABILITY_MAX_ATTEMPTS,
                 stop_event: Optional[threading.Event] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.interval = interval
        self.required_matches = required_matches
        self.max_attempts = max_attempts
        self.stop_event = stop_event
        self._sleep = sleep

    def await_stable(self, path: Path) -> StabilityResult:
        path = Path(path)
        if not path.exists():
            return StabilityResult(path, StabilityState.VANISHED, reason="File does not exist")

        try:
            record = StabilityRecord(last_size=self._read_size(path))
        except FileNotFoundError:
            return StabilityResult(path, StabilityState.VANISHED, reason="File disappeared")
        except OSError as e:
            logging.debug(f"Initial size read failed for {path}: {e}")
            record = StabilityRecord(last_size=_UNMATCHABLE_SIZE)

        while record.attempts < self.max_attempts:
            if self._wait():
                return StabilityResult(path, StabilityState.CANCELLED, record.attempts, "Session is shutting down")

            record.attempts += 1

            if not path.exists():
                return StabilityResult(path, StabilityState.VANISHED, record.attempts, "File disappeared")

            try:
                size = self._read_size(path)
            except FileNotFoundError:
                return StabilityResult(path, StabilityState.VANISHED, record.attempts, "File disappeared")
            except OSError as e:
                logging.debug(f"Size read failed for {path} (attempt {record.attempts}): {e}")
                record.consecutive_matches = 0
                record.last_size = _UNMATCHABLE_SIZE
                continue

            if size == record.last_size:
                record.consecutive_matches += 1
                if record.consecutive_matches >= self.required_matches:
                    logging.debug(f"{path} stable at {size} bytes after {record.attempts} checks")
                    return StabilityResult(path, StabilityState.STABLE, record.attempts)
            else:
                record.consecutive_matches = 0
                record.last_size = size

        return StabilityResult(
            path,
            StabilityState.UNSTABLE,
            record.attempts,
            f"Size still changing after {record.attempts} checks",
        )

    def _read_size(self, path: Path) -> int:
        return path.stat().st_size

    def _wait(self) -> bool:
        """Sleeps one interval. Returns True if the session was stopped."""
        if self.stop_event is not None:
            return self.stop_event.wait(self.interval)
        self._sleep(self.interval)
        return False
