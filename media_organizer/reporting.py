import csv
import logging
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .models import Placement

MOVED = 'moved'
COPIED = 'copied'
SKIPPED = 'skipped'
FAILED = 'failed'
DEFERRED = 'deferred'  # watch mode: file never became stable


@dataclass
class ReportRow:
    source: Path
    status: str
    destination: Optional[Path] = None
    notes: str = ""


class RunReport:
    """
    Tally of what happened to every file handed to the dispatcher during
    one one-shot pass or one watch session.

    Watch sessions never end on their own, so they use keep_rows=False
    and only maintain the counters.
    """

    def __init__(self, keep_rows: bool = True):
        self.keep_rows = keep_rows
        self.rows: List[ReportRow] = []
        self.counts: Counter = Counter()

    def record(self,
               source: Path,
               placement: Optional[Placement] = None,
               error: Optional[Exception] = None,
               status: Optional[str] = None,
               notes: str = ""):
        if status is None:
            if error is not None:
                status = FAILED
            elif placement is None:
                status = SKIPPED
            else:
                status = COPIED if placement.is_copy else MOVED

        if error is not None and not notes:
            notes = str(error)

        self.counts[status] += 1
        if not self.keep_rows:
            return
        self.rows.append(ReportRow(
            source=Path(source),
            status=status,
            destination=placement.destination if placement else None,
            notes=notes,
        ))

    @property
    def failed(self) -> int:
        return self.counts[FAILED]

    def summary(self) -> str:
        parts = [f"{self.counts[s]} {s}" for s in (MOVED, COPIED, SKIPPED, FAILED, DEFERRED) if self.counts[s]]
        return ", ".join(parts) if parts else "no files"

    def write_csv(self, output_csv: Path):
        """One row per file: source, status, destination, notes."""
        logging.info(f"Writing report -> {output_csv}")
        output_csv = Path(output_csv)
        output_csv.parent.mkdir(parents=True, exist_ok=True)

        headers = ["Source Path", "Status", "Destination Path", "Notes"]
        with open(output_csv, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(headers)
            for row in self.rows:
                writer.writerow([
                    str(row.source),
                    row.status,
                    str(row.destination) if row.destination else "",
                    row.notes,
                ])
