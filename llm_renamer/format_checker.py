# llm_renamer/format_checker.py

import json
import logging
import re
from typing import Pattern, Sequence

from .classifier import FileClassifier
from .enums import BatchCheckStrategy, Classification, FailurePolicy
from .exceptions import ValidationError
from .metadata_extractor import MetadataExtractor
from .models import LLMRequest, capture
from .prompts import BATCH_FORMAT_EXAMPLES, BATCH_FORMAT_SYSTEM
from .utils import PathLike, file_stem, sanitize_os_chars

log = logging.getLogger(__name__)


def canonical_stem_pattern(series: str, season: int) -> Pattern[str]:
    return re.compile(rf'^{re.escape(series)} S{season:02d}E\d{{2}}$')


class BatchFormatChecker:
    """
    Decides whether a set of sibling files is already named canonically.

    True means no rename is needed. An empty batch is vacuously canonical. Any
    error resolves to False so that ambiguity leads to a rename attempt.
    """

    def __init__(self, classifier: FileClassifier, extractor: MetadataExtractor, generator,
                 strategy: BatchCheckStrategy = BatchCheckStrategy.REGEX,
                 policy: FailurePolicy = FailurePolicy.FAIL_CLOSED):
        self.classifier = classifier
        self.extractor = extractor
        self.generator = generator
        self.strategy = strategy
        self.policy = policy

    async def check_batch(self, paths: Sequence[PathLike]) -> bool:
        if not paths:
            return True
        if self.strategy is BatchCheckStrategy.MODEL:
            outcome = await capture(self.check_with_model(paths))
        else:
            outcome = await capture(self.check_with_pattern(paths))
        if not outcome.ok:
            log.warning(f"Batch format check ({self.strategy}) failed for {len(paths)} files: {outcome.error}")
        return outcome.resolve(self.policy, False)

    async def check_with_pattern(self, paths: Sequence[PathLike]) -> bool:
        """
        Bootstraps the expected name shape from the first file only: it must be an
        Episode, and its series and season define the pattern every stem must match.
        """
        if not paths:
            return True
        representative = paths[0]
        classification = await self.classifier.classify(representative)
        if classification is not Classification.EPISODE:
            log.debug(f"First file '{representative}' is {classification}, batch not canonical.")
            return False

        series = sanitize_os_chars(await self.extractor.extract_series(representative))
        season = await self.extractor.extract_season(representative)
        pattern = canonical_stem_pattern(series, season)
        log.debug(f"Checking {len(paths)} files against {pattern.pattern}")

        for path in paths:
            if not pattern.match(file_stem(path)):
                log.debug(f"'{path}' does not match the canonical format.")
                return False
        return True

    async def check_with_model(self, paths: Sequence[PathLike]) -> bool:
        if not paths:
            return True
        payload = json.dumps([str(p) for p in paths])
        response = await self.generator.request(LLMRequest(BATCH_FORMAT_SYSTEM, payload, BATCH_FORMAT_EXAMPLES))
        matches = response.get("matches") if isinstance(response, dict) else None
        if not isinstance(matches, bool):
            raise ValidationError("matches field not found")
        return matches
