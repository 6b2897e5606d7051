import shutil
import logging
from pathlib import Path

from ..exceptions import FileOperationError
from ..models import Placement


class FileMover:
    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run

    def execute(self, placement: Placement):
        """
        Applies one placement, creating missing destination folders.
        """
        src = Path(placement.source)
        dest = Path(placement.destination)
        verb = 'Copying' if placement.is_copy else 'Moving'

        if self.dry_run:
            logging.info(f"[DRY RUN] {verb} file {src} to {dest}")
            return

        logging.info(f"{verb} file {src} to {dest}")
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)

            if placement.is_copy:
                shutil.copy2(str(src), str(dest))
            else:
                shutil.move(str(src), str(dest))
        except OSError as e:
            raise FileOperationError(f"Failed to process {src} -> {dest}: {e}") from e
