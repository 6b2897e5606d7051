import logging
import os
import queue
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Tuple

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from ..exceptions import WatchError

KIND_CREATE = 'create'
KIND_MODIFY = 'modify'
KIND_OTHER = 'other'


@dataclass(frozen=True)
class WatchEvent:
    kind: str
    paths: Tuple[Path, ...]
    queued_at: float = field(default_factory=time.monotonic, compare=False)


def _as_path(raw) -> Path:
    return Path(os.fsdecode(raw))


class QueueingEventHandler(FileSystemEventHandler):
    """Collect file system events into one ordered queue."""

    def __init__(self, event_queue: "queue.Queue[WatchEvent]"):
        super().__init__()
        self._queue = event_queue

    def on_any_event(self, event):
        if event.is_directory:
            return

        if event.event_type == EVENT_TYPE_CREATED:
            item = WatchEvent(KIND_CREATE, (_as_path(event.src_path),))
        elif event.event_type == EVENT_TYPE_MODIFIED:
            item = WatchEvent(KIND_MODIFY, (_as_path(event.src_path),))
        elif event.event_type == EVENT_TYPE_MOVED:
            # Only the landing side can still be a file worth processing
            item = WatchEvent(KIND_MODIFY, (_as_path(event.dest_path),))
        else:
            item = WatchEvent(KIND_OTHER, (_as_path(event.src_path),))

        logging.debug(f"Queued {item.kind} event for {', '.join(str(p) for p in item.paths)}")
        self._queue.put(item)


class FolderWatcher:
    """
    Runs a watchdog observer over one tree and exposes its events as a
    blocking iterator, in arrival order.

    Iteration ends when stop_event is set. If the watched root disappears
    or the observer or one of its emitters dies while the session is live,
    WatchError is raised.
    """

    def __init__(self,
                 root: Path,
                 stop_event: Optional[threading.Event] = None,
                 poll_timeout: float = 0.5):
        self.root = Path(root)
        self.stop_event = stop_event or threading.Event()
        self.poll_timeout = poll_timeout
        self._queue: "queue.Queue[WatchEvent]" = queue.Queue()
        self._observer = Observer()
        self._handler = QueueingEventHandler(self._queue)
        self._started = False

    def __enter__(self) -> "FolderWatcher":
        logging.debug(f"Scheduling watchdog observer for {self.root}")
        try:
            self._observer.schedule(self._handler, str(self.root), recursive=True)
            self._observer.start()
        except OSError as e:
            raise WatchError(f"Cannot watch {self.root}: {e}") from e
        self._started = True
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        self.stop_event.set()
        if self._started:
            logging.debug("Stopping watchdog observer")
            self._observer.stop()
            self._observer.join(timeout=5)
            self._started = False

    def __iter__(self) -> Iterator[WatchEvent]:
        return self.iter_events()

    def iter_events(self) -> Iterator[WatchEvent]:
        while not self.stop_event.is_set():
            try:
                event = self._queue.get(timeout=self.poll_timeout)
            except queue.Empty:
                if self._started:
                    self._check_alive()
                continue
            yield event

    def _check_alive(self):
        """
        The observer thread outlives its emitters: losing the watched root
        stops the inotify reader while the observer keeps idling.
        """
        if not self.root.is_dir():
            raise WatchError(f"Watched directory {self.root} is gone")
        if not self._observer.is_alive():
            raise WatchError(f"Watch channel for {self.root} closed unexpectedly")
        if any(not emitter.is_alive() for emitter in self._observer.emitters):
            raise WatchError(f"Watch emitter for {self.root} stopped")
