# llm_renamer/path_planner.py

import logging
from pathlib import Path

from .metadata_extractor import MetadataExtractor
from .models import EpisodeDetails
from .utils import PathLike, file_extension, sanitize_os_chars, strip_extension

log = logging.getLogger(__name__)


def season_folder(season: int) -> str:
    return f"Season {season:02d}"


def new_file_name(details: EpisodeDetails, file_name: PathLike) -> str:
    """Canonical flat name: '{series} SxxEyy{ext}'."""
    return f"{sanitize_os_chars(details.series)} {details.episode_code}{file_extension(file_name)}"


class PathPlanner:
    """
    Computes the nested destination of an episode: {series}/Season xx/{file name}.

    The destination is always relative to the file's immediate directory. An
    existing series or season folder higher up the tree is not looked for.
    """

    def __init__(self, extractor: MetadataExtractor):
        self.extractor = extractor

    async def plan_relative_path(self, file_name: PathLike) -> Path:
        details = await self.extractor.get_details(strip_extension(file_name))
        return Path(sanitize_os_chars(details.series), season_folder(details.season), Path(file_name).name)

    async def plan_path(self, file_name: PathLike) -> Path:
        relative = await self.plan_relative_path(file_name)
        return Path(file_name).parent / relative

    async def is_already_correct(self, file_name: PathLike) -> bool:
        """Loose idempotence check: the file's trailing path components equal the planned ones."""
        relative = await self.plan_relative_path(file_name)
        parts = Path(file_name).parts
        expected = relative.parts
        result = len(parts) >= len(expected) and parts[-len(expected):] == expected
        log.debug(f"'{file_name}' {'already' if result else 'not'} at {relative}")
        return result
