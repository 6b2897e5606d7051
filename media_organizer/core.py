import logging
import threading
import time
from pathlib import Path
from typing import Dict, Optional

from tqdm import tqdm

from .exceptions import OrganizerError
from .metadata.camera import CameraResolver
from .metadata.resolver import MetadataResolver
from .models import CandidateFile, OrganizerOptions, Placement
from .organization.mover import FileMover
from .organization.rules import PathPlanner
from .reporting import RunReport, DEFERRED
from .scanning.filesystem import DiskScanner
from .watching.stability import StabilityGate, StabilityState
from .watching.watcher import FolderWatcher, WatchEvent, KIND_CREATE, KIND_MODIFY


class Dispatcher:
    """
    Turns one path into a placement and hands it to the mover.

    Media files get date -> camera -> path planning. Other files go to
    <dest>/unknown/ in move mode and are left alone in copy mode.
    """

    def __init__(self,
                 options: OrganizerOptions,
                 resolver: Optional[MetadataResolver] = None,
                 camera_resolver: Optional[CameraResolver] = None,
                 planner: Optional[PathPlanner] = None,
                 mover: Optional[FileMover] = None):
        self.options = options
        self.resolver = resolver or MetadataResolver()
        self.camera_resolver = camera_resolver or CameraResolver(self.resolver.extractor)
        self.planner = planner or PathPlanner(remember_planned=options.dry_run)
        self.mover = mover or FileMover(dry_run=options.dry_run)

    def plan(self, path: Path) -> Optional[Placement]:
        """Returns the placement for path, or None when it should be skipped."""
        opts = self.options
        candidate = CandidateFile.from_path(path)

        if not candidate.is_media:
            if opts.copy_instead_of_move:
                logging.debug(f"Skipping non-media file (copy mode enabled): {candidate.path}")
                return None
            dest = self.planner.plan_unknown(opts.destination_root, candidate.path).path
            logging.debug(f"Non-media file will be moved to: {dest}")
            return Placement(candidate.path, dest, is_copy=False)

        logging.debug(f"Processing media file: {candidate.path}")
        meta = self.resolver.resolve(candidate.path, opts.prefer_modified_time)
        camera = self.camera_for(candidate.path)

        plan = self.planner.plan(
            opts.destination_root,
            meta.timestamp,
            camera,
            candidate.path,
            keep_original_name=opts.keep_original_filenames,
            camera_is_prefix=opts.camera_grouping_is_prefix,
        )
        return Placement(candidate.path, plan.path, is_copy=opts.copy_instead_of_move)

    def camera_for(self, path: Path) -> str:
        """Manual override > EXIF extraction > "" (grouping disabled)."""
        if self.options.manual_camera_override is not None:
            return self.options.manual_camera_override
        if self.options.enable_camera_grouping:
            return self.camera_resolver.resolve(path)
        return ""

    def process(self, path: Path) -> Optional[Placement]:
        placement = self.plan(path)
        if placement is None:
            logging.info(f"Skipping file {path} (no destination path determined, likely a non-media file in copy mode)")
            return None
        self.mover.execute(placement)
        return placement


class OrganizerApp:
    def __init__(self, source_root: Path, options: OrganizerOptions,
                 dispatcher: Optional[Dispatcher] = None,
                 stop_event: Optional[threading.Event] = None):
        self.source_root = Path(source_root)
        self.options = options
        self.dispatcher = dispatcher or Dispatcher(options)
        self.stop_event = stop_event or threading.Event()

        # Never re-ingest our own output when dest lives inside source
        skip = set()
        dest = Path(options.destination_root)
        if self.source_root in dest.parents:
            skip.add(dest)
        self.scanner = DiskScanner(skip_dirs=skip)
        self.gate = StabilityGate(stop_event=self.stop_event)
        self.report = RunReport()
        # Watch events only keep counters; rows would grow for the whole session
        self.session_report = RunReport(keep_rows=False)
        # path -> monotonic time it was last placed from a watch event
        self._handled_at: Dict[Path, float] = {}

    def process_file(self, path: Path, report: Optional[RunReport] = None) -> Optional[Placement]:
        """Runs one file through the dispatcher. Failures are logged, never raised."""
        report = report if report is not None else self.report
        try:
            placement = self.dispatcher.process(path)
        except (OrganizerError, OSError) as e:
            logging.warning(f"Failed to process file {path}: {e}")
            report.record(path, error=e)
            return None
        report.record(path, placement)
        return placement

    def run_once(self) -> RunReport:
        """
        Processes everything currently under the source root, then
        removes the empty folders left behind.
        """
        logging.info(f"Processing directory: {self.source_root}")

        files = list(self.scanner.iter_files(self.source_root))
        for path in tqdm(files, desc="Organizing", unit="file"):
            self.process_file(path)

        if not self.options.dry_run:
            self.scanner.delete_empty_folders(self.source_root)

        logging.info(f"Directory processing complete: {self.report.summary()}")
        if self.report.failed:
            logging.warning(f"{self.report.failed} file(s) could not be processed; see warnings above.")

        if self.options.report_csv:
            self.report.write_csv(self.options.report_csv)
        return self.report

    def monitor(self):
        """
        Initial pass, then process files as they land until stopped.

        Raises:
            WatchError: the notification source failed.
        """
        logging.info(f"Starting to monitor directory: {self.source_root}")
        self.run_once()

        with FolderWatcher(self.source_root, stop_event=self.stop_event) as watcher:
            logging.info("Watching for changes...")
            try:
                for event in watcher:
                    self.handle_event(event)
            finally:
                logging.info(f"Watch session ended: {self.session_report.summary()}")

    def stop(self):
        self.stop_event.set()

    def handle_event(self, event: WatchEvent):
        if event.kind not in (KIND_CREATE, KIND_MODIFY):
            return

        # Events arrive in queue order: a placement older than this event
        # cannot shadow anything still waiting in the queue.
        self._handled_at = {p: t for p, t in self._handled_at.items() if t >= event.queued_at}

        for path in event.paths:
            if self.scanner.is_skipped(path) or not path.is_file():
                continue
            if self._handled_at.get(path, float('-inf')) >= event.queued_at:
                logging.debug(f"Ignoring event for {path}; already placed after it was queued")
                continue

            result = self.gate.await_stable(path)
            if result.state is StabilityState.VANISHED:
                logging.debug(f"{path} vanished before it settled; skipping")
                continue
            if result.state is StabilityState.CANCELLED:
                logging.info(f"Stability check for {path} cancelled")
                return
            if not result.ok:
                logging.warning(f"Skipping {path}: {result.reason}")
                self.session_report.record(path, status=DEFERRED, notes=result.reason)
                continue

            if self.process_file(path, self.session_report) is not None:
                self._handled_at[path] = time.monotonic()

        if not self.options.dry_run:
            self.scanner.delete_empty_folders(self.source_root)
