# llm_renamer/file_system_ops.py
import logging
import os
from pathlib import Path
from typing import List

from .exceptions import FileOperationError, RenamerError, TargetExistsError
from .models import DirectoryNode
from .utils import PathLike

log = logging.getLogger(__name__)
CONFLICT_MODES = ('skip', 'overwrite', 'suffix', 'fail')
MAX_SUFFIX_ATTEMPTS = 100


def traverse_directory(directory: PathLike) -> DirectoryNode:
    """
    Snapshot of a directory tree. Entries are sorted by name; symlinked
    directories are listed as files and never followed.
    """
    root = Path(directory)
    files: List[Path] = []
    subfolders: List[DirectoryNode] = []
    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise FileOperationError(f"Cannot list directory '{root}': {e}") from e

    for entry in entries:
        if entry.is_dir() and not entry.is_symlink():
            subfolders.append(traverse_directory(entry))
        else:
            files.append(entry)
    return DirectoryNode(path=root, files=tuple(files), subfolders=tuple(subfolders))


def _handle_conflict(original_path: Path, target_path: Path, conflict_mode: str) -> Path:
    if not target_path.exists() and not target_path.is_symlink():
        return target_path

    log.warning(f"Conflict detected: Target '{target_path}' exists.")
    if conflict_mode == 'skip':
        raise TargetExistsError(f"Target '{target_path.name}' exists (mode: skip).")
    if conflict_mode == 'fail':
        raise FileExistsError(f"Target '{target_path.name}' exists (mode: fail). Stopping.")
    if conflict_mode == 'overwrite':
        log.warning(f"Overwrite mode: Target '{target_path.name}' will be overwritten.")
        return target_path
    if conflict_mode == 'suffix':
        counter = 1
        suffixed_path = target_path
        while suffixed_path.exists() or suffixed_path.is_symlink():
            suffixed_path = target_path.with_name(f"{target_path.stem}_{counter}{target_path.suffix}")
            counter += 1
            if counter > MAX_SUFFIX_ATTEMPTS:
                raise FileOperationError(f"Suffix failed: >{MAX_SUFFIX_ATTEMPTS} attempts for '{target_path.stem}'")
        log.info(f"Conflict resolved: Using suffixed name '{suffixed_path.name}' for original '{original_path.name}'.")
        return suffixed_path

    raise RenamerError(f"Internal Error: Unknown conflict mode '{conflict_mode}'")


class FileSystemOps:
    """Rename/move primitive used by the driver. Nothing is touched unless `live` is set."""

    def __init__(self, live: bool = False, on_conflict: str = 'skip'):
        if on_conflict not in CONFLICT_MODES:
            raise RenamerError(f"Unknown conflict mode '{on_conflict}'")
        self.live = live
        self.on_conflict = on_conflict

    def ensure_parent(self, target: Path) -> None:
        if target.parent.is_dir():
            return
        if not self.live:
            log.info(f"DRY RUN: Would create directory '{target.parent}'")
            return
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            log.debug(f"Created directory '{target.parent}'")
        except OSError as e:
            raise FileOperationError(f"Cannot create directory '{target.parent}': {e}") from e

    def rename(self, source: Path, target: Path) -> Path:
        """Moves `source` to `target` (after conflict handling) and returns the final path."""
        if source == target:
            return target
        final_target = _handle_conflict(source, target, self.on_conflict)
        if not self.live:
            log.info(f"DRY RUN: {source} -> {final_target}")
            return final_target
        try:
            os.replace(source, final_target)
        except OSError as e:
            raise FileOperationError(f"Failed to move '{source}' to '{final_target}': {e}") from e
        return final_target
