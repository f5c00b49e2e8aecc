# llm_renamer/main_processor.py
import logging
from pathlib import Path
from typing import Optional

from .classifier import FileClassifier
from .enums import BatchCheckStrategy, Classification, ProcessingStatus, RenameStrategy
from .exceptions import FileOperationError, RenamerError, TargetExistsError
from .file_system_ops import FileSystemOps, traverse_directory
from .format_checker import BatchFormatChecker
from .metadata_extractor import MetadataExtractor
from .models import DirectoryNode, RenameAction, RunSummary
from .path_planner import PathPlanner, new_file_name
from .utils import PathLike

log = logging.getLogger(__name__)


class MainProcessor:
    """
    Walks a directory tree and renames (FLAT) or moves (NESTED) every episode it
    finds. Directory listings are snapshots taken before any change; a failure on
    one file is recorded and the walk continues.
    """

    def __init__(self, classifier: FileClassifier, extractor: MetadataExtractor,
                 checker: BatchFormatChecker, planner: PathPlanner, fs_ops: FileSystemOps,
                 strategy: RenameStrategy = RenameStrategy.FLAT):
        self.classifier = classifier
        self.extractor = extractor
        self.checker = checker
        self.planner = planner
        self.fs_ops = fs_ops
        self.strategy = strategy
        self.summary = RunSummary(strategy=strategy.value, live=fs_ops.live)

    @classmethod
    def from_generator(cls, generator, fs_ops: FileSystemOps,
                       strategy: RenameStrategy = RenameStrategy.FLAT,
                       check_strategy: BatchCheckStrategy = BatchCheckStrategy.REGEX) -> "MainProcessor":
        classifier = FileClassifier(generator)
        extractor = MetadataExtractor(generator)
        checker = BatchFormatChecker(classifier, extractor, generator, strategy=check_strategy)
        return cls(classifier, extractor, checker, PathPlanner(extractor), fs_ops, strategy)

    async def run(self, directory: PathLike) -> RunSummary:
        root = Path(directory)
        if not root.is_dir():
            raise FileOperationError(f"Not a directory: '{root}'")
        log.info(f"Starting {self.strategy.value} run in '{root}' ({'LIVE' if self.fs_ops.live else 'DRY RUN'})")
        node = traverse_directory(root)
        if self.strategy is RenameStrategy.NESTED:
            await self.move_files_to_season_folders(node)
        else:
            await self.rename_files_in_directory(node)
        log.info(f"Run finished: {self.summary.changed} changed, {self.summary.skipped} skipped, "
                 f"{self.summary.failed} failed.")
        return self.summary

    def _changed_status(self, moved: bool) -> ProcessingStatus:
        if not self.fs_ops.live:
            return ProcessingStatus.DRY_RUN
        return ProcessingStatus.MOVED if moved else ProcessingStatus.RENAMED

    def _record_skip(self, file_path: Path, status: ProcessingStatus, message: str, action_type: str) -> None:
        log.info(f"Skipping: {file_path} ({message})")
        self.summary.record(RenameAction(file_path, None, action_type, status, message))

    def _record_failure(self, file_path: Path, error: BaseException, action_type: str,
                        new_path: Optional[Path] = None) -> None:
        log.error(f"Failed to {action_type} '{file_path}': {error}")
        self.summary.record(RenameAction(file_path, new_path, action_type, ProcessingStatus.FAILED, str(error)))

    async def _is_episode(self, file_path: Path, action_type: str) -> bool:
        classification = await self.classifier.classify(file_path)
        if classification is not Classification.EPISODE:
            self._record_skip(file_path, ProcessingStatus.SKIPPED_NOT_EPISODE,
                              f"Not an episode: {classification}", action_type)
            return False
        return True

    async def rename_file(self, file_path: Path) -> None:
        """Renames one file in place to its canonical name."""
        try:
            if not await self._is_episode(file_path, 'rename'):
                return
            details = await self.extractor.get_details(file_path)
            target = file_path.parent / new_file_name(details, file_path)
            if target == file_path:
                self._record_skip(file_path, ProcessingStatus.SKIPPED_ALREADY_CORRECT,
                                  "Already named correctly", 'rename')
                return
            final_path = self.fs_ops.rename(file_path, target)
            log.info(f"Renamed: {file_path} -> {final_path}")
            self.summary.record(RenameAction(file_path, final_path, 'rename', self._changed_status(False)))
        except TargetExistsError as e:
            self._record_skip(file_path, ProcessingStatus.SKIPPED_CONFLICT, str(e), 'rename')
        except (RenamerError, OSError) as e:
            self._record_failure(file_path, e, 'rename')

    async def rename_files_in_directory(self, node: DirectoryNode) -> None:
        self.summary.directories_visited += 1
        self.summary.files_seen += len(node.files)

        if await self.checker.check_batch(node.files):
            self.summary.directories_conformant += 1
            log.info(f"All files in {node.path} are already in the correct format.")
        else:
            for file_path in node.files:
                await self.rename_file(file_path)

        for subfolder in node.subfolders:
            await self.rename_files_in_directory(subfolder)

    async def move_file(self, file_path: Path) -> None:
        """Moves one file into {series}/Season xx/ beneath its current directory."""
        target: Optional[Path] = None
        try:
            if not await self._is_episode(file_path, 'move'):
                return
            if await self.planner.is_already_correct(file_path):
                self._record_skip(file_path, ProcessingStatus.SKIPPED_ALREADY_CORRECT,
                                  "Already in its season folder", 'move')
                return
            target = await self.planner.plan_path(file_path)
            self.fs_ops.ensure_parent(target)
            final_path = self.fs_ops.rename(file_path, target)
            log.info(f"Moved: {file_path} -> {final_path}")
            self.summary.record(RenameAction(file_path, final_path, 'move', self._changed_status(True)))
        except TargetExistsError as e:
            self._record_skip(file_path, ProcessingStatus.SKIPPED_CONFLICT, str(e), 'move')
        except (RenamerError, OSError) as e:
            self._record_failure(file_path, e, 'move', target)

    async def move_files_to_season_folders(self, node: DirectoryNode) -> None:
        self.summary.directories_visited += 1
        self.summary.files_seen += len(node.files)

        for file_path in node.files:
            await self.move_file(file_path)

        for subfolder in node.subfolders:
            await self.move_files_to_season_folders(subfolder)
