# llm_renamer/classifier.py

import logging

from .enums import Classification, FailurePolicy
from .exceptions import ValidationError
from .models import LLMRequest, Outcome, capture
from .prompts import CLASSIFY_EXAMPLES, CLASSIFY_SYSTEM
from .utils import PathLike

log = logging.getLogger(__name__)


class FileClassifier:
    """
    Sorts a path into Movie / Episode / Unrelated.

    Used as a cheap gate in front of metadata extraction, so by default any
    failure degrades to Unrelated instead of propagating.
    """

    def __init__(self, generator, policy: FailurePolicy = FailurePolicy.FAIL_CLOSED):
        self.generator = generator
        self.policy = policy

    async def _classify(self, path: PathLike) -> Classification:
        response = await self.generator.request(LLMRequest(CLASSIFY_SYSTEM, str(path), CLASSIFY_EXAMPLES))
        if not isinstance(response, dict) or not response.get("classification"):
            raise ValidationError("classification not found")
        try:
            return Classification.parse(response["classification"])
        except ValueError as e:
            raise ValidationError(str(e)) from e

    async def try_classify(self, path: PathLike) -> Outcome[Classification]:
        return await capture(self._classify(path))

    async def classify(self, path: PathLike) -> Classification:
        outcome = await self.try_classify(path)
        if not outcome.ok:
            log.warning(f"Classification failed for '{path}', treating as {Classification.UNRELATED}: {outcome.error}")
        result = outcome.resolve(self.policy, Classification.UNRELATED)
        log.debug(f"Classified '{path}' as {result}")
        return result
