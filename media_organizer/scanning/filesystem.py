import os
import logging
from pathlib import Path
from typing import Iterator, Set, Optional


class DiskScanner:
    def __init__(self, skip_dirs: Optional[Set[Path]] = None):
        # Typically the destination root, when it lives inside the source
        self.skip_dirs = {Path(d) for d in (skip_dirs or set())}

    def is_skipped(self, path: Path) -> bool:
        path = Path(path)
        return any(sd == path or sd in path.parents for sd in self.skip_dirs)

    def iter_files(self, root: Path) -> Iterator[Path]:
        """Depth-first walker using os.scandir for speed."""
        stack = [Path(root)]
        while stack:
            current = stack.pop()
            if self.is_skipped(current):
                continue

            try:
                with os.scandir(current) as it:
                    entries = list(it)
            except (OSError, PermissionError):
                logging.warning(f"Permission denied: {current}")
                continue

            # Sort for stable traversal order
            entries.sort(key=lambda e: e.name.lower())

            dirs = []
            files = []
            for e in entries:
                if e.is_dir(follow_symlinks=False):
                    dirs.append(Path(e.path))
                elif e.is_file(follow_symlinks=False):
                    files.append(Path(e.path))

            # Push dirs to stack (reversed so we process A before Z)
            for d in reversed(dirs):
                stack.append(d)

            for f in files:
                yield f

    def delete_empty_folders(self, root: Path) -> int:
        """
        Removes empty directories below root, deepest first, so a chain
        of nested empty folders disappears in one pass. Root is kept.
        """
        root = Path(root)
        removed = 0
        for dirpath, _, _ in os.walk(root, topdown=False):
            folder = Path(dirpath)
            if folder == root or self.is_skipped(folder):
                continue
            try:
                if not any(folder.iterdir()):
                    folder.rmdir()
                    removed += 1
                    logging.debug(f"Removed empty folder {folder}")
            except OSError as e:
                logging.warning(f"Could not remove folder {folder}: {e}")
        return removed
