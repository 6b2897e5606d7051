import logging
from pathlib import Path
from datetime import datetime
from collections import defaultdict
from typing import Dict, List, Set

from .. import config
from ..exceptions import PlanningError
from ..models import DestinationPlan


class PathPlanner:
    """
    Builds <root>/[camera/]YYYY/MM/DD[/camera]/<name> destinations.

    Uniqueness is a plain existence check against the filesystem at
    planning time. Nothing reserves the name until the mover writes it,
    so a concurrent writer picking the same name can still win the race.
    """

    def __init__(self, remember_planned: bool = False):
        # Dry runs never write anything, so names handed out earlier in the
        # run have to be remembered to keep the simulated plan collision-free.
        self.remember_planned = remember_planned
        self.used_names: Dict[Path, Set[str]] = defaultdict(set)

    def plan(self,
             destination_root: Path,
             timestamp: datetime,
             camera: str,
             original_path: Path,
             keep_original_name: bool = False,
             camera_is_prefix: bool = False) -> DestinationPlan:
        """
        Args:
            camera: Normalized camera segment. Empty string disables
                    camera grouping entirely.
        """
        root = Path(destination_root)
        directory = self.build_directory(timestamp, camera, camera_is_prefix)
        filename = self.build_filename(timestamp, Path(original_path), keep_original_name)

        folder = root.joinpath(*directory)
        unique = self._resolve_collision(folder, filename)
        return DestinationPlan(root, tuple(directory), unique)

    def plan_unknown(self, destination_root: Path, original_path: Path) -> DestinationPlan:
        """Non-media files: <root>/unknown/<original name>, no suffixing."""
        original_path = Path(original_path)
        if not original_path.name:
            raise PlanningError(f"Invalid original filename: {original_path}")
        return DestinationPlan(Path(destination_root), (config.UNKNOWN_DIR,), original_path.name)

    def build_directory(self, timestamp: datetime, camera: str, camera_is_prefix: bool) -> List[str]:
        segments: List[str] = []
        if camera_is_prefix and camera:
            segments.append(camera)

        segments.extend([str(timestamp.year), f"{timestamp.month:02d}", f"{timestamp.day:02d}"])

        if not camera_is_prefix and camera:
            segments.append(camera)
        return segments

    def build_filename(self, timestamp: datetime, original_path: Path, keep_original_name: bool) -> str:
        if keep_original_name:
            if not original_path.name:
                raise PlanningError(f"Invalid original filename: {original_path}")
            return original_path.name

        # "2023-07-04T10-15-30" + original extension, case preserved
        return f"{timestamp.strftime(config.FILENAME_TIMESTAMP_FORMAT)}{original_path.suffix}"

    def _resolve_collision(self, folder: Path, filename: str) -> str:
        """Appends _1, _2, ... before the extension until the name is free."""
        stem = Path(filename).stem
        ext = Path(filename).suffix
        candidate = filename
        counter = 1

        while self._is_taken(folder, candidate):
            candidate = config.COLLISION_SUFFIX.format(stem=stem, counter=counter, ext=ext)
            counter += 1

        if candidate != filename:
            logging.debug(f"Saving file to {folder / candidate} as file with same name already exists.")
        if self.remember_planned:
            self.used_names[folder].add(candidate)
        return candidate

    def _is_taken(self, folder: Path, name: str) -> bool:
        return (folder / name).exists() or name in self.used_names[folder]
