# llm_renamer/metadata_extractor.py

import logging
from typing import Any, Tuple

from .exceptions import ValidationError
from .models import EpisodeDetails, FewShotExample, LLMRequest
from .prompts import (
    EPISODE_EXAMPLES, EPISODE_SYSTEM, SEASON_EXAMPLES, SEASON_SYSTEM,
    SERIES_EXAMPLES, SERIES_SYSTEM,
)
from .utils import PathLike, parse_positive_number

log = logging.getLogger(__name__)

MIN_NUMBER = 1
MAX_NUMBER = 99  # season/episode must render as two zero-padded digits


def _field(response: Any, name: str) -> Any:
    if not isinstance(response, dict):
        raise ValidationError(f"{name} not found")
    return response.get(name)


def _validate_number(response: Any, name: str) -> int:
    raw = _field(response, name)
    if raw is None or raw == "":
        raise ValidationError(f"{name} not found")
    number = parse_positive_number(raw)
    if number is None:
        raise ValidationError(f"{name} not a number")
    if not MIN_NUMBER <= number <= MAX_NUMBER:
        raise ValidationError(f"{name} out of range")
    return number


class MetadataExtractor:
    """
    Extracts series name, season and episode number from a noisy path.

    Every facet is a separate request through the injected generator (normally
    the cached, retrying Ollama stack). Failures propagate: a LLMError from the
    generator or a ValidationError when the answer has the wrong shape.
    """

    def __init__(self, generator):
        self.generator = generator

    async def _ask(self, system: str, path: PathLike, examples: Tuple[FewShotExample, ...]) -> Any:
        return await self.generator.request(LLMRequest(system, str(path), examples))

    async def extract_episode(self, path: PathLike) -> int:
        response = await self._ask(EPISODE_SYSTEM, path, EPISODE_EXAMPLES)
        episode = _validate_number(response, "episode")
        log.debug(f"Episode {episode} for '{path}'")
        return episode

    async def extract_series(self, path: PathLike) -> str:
        response = await self._ask(SERIES_SYSTEM, path, SERIES_EXAMPLES)
        series = _field(response, "series")
        if not isinstance(series, str) or not series.strip():
            raise ValidationError("series not found")
        log.debug(f"Series '{series.strip()}' for '{path}'")
        return series.strip()

    async def extract_season(self, path: PathLike) -> int:
        response = await self._ask(SEASON_SYSTEM, path, SEASON_EXAMPLES)
        season = _validate_number(response, "season")
        log.debug(f"Season {season} for '{path}'")
        return season

    async def get_details(self, path: PathLike) -> EpisodeDetails:
        episode = await self.extract_episode(path)
        series = await self.extract_series(path)
        season = await self.extract_season(path)
        return EpisodeDetails(series=series, season=season, episode=episode)
