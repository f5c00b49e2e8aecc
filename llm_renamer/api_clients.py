# llm_renamer/api_clients.py

import json
import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx
from ollama import AsyncClient, RequestError, ResponseError
from tenacity import AsyncRetrying, RetryCallState, RetryError, retry_if_exception_type, stop_after_attempt, wait_none

from .exceptions import ParseError, RetryExhaustedError, TransportError
from .models import LLMRequest
from .response_cache import CachedTextClient, ResponseCache

log = logging.getLogger(__name__)

DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "llama3.2"
DEFAULT_MAX_ATTEMPTS = 15
FENCE = "```"
JSON_FENCE = FENCE + "json"


class TextGenerator(Protocol):
    async def request(self, request: LLMRequest) -> Any: ...


def build_messages(request: LLMRequest) -> List[Dict[str, str]]:
    """System turn, few-shot pairs in order, then the user input biased towards a JSON block."""
    messages = [{"role": "system", "content": request.system}]
    for example in request.examples:
        messages.append({"role": "user", "content": example.input})
        messages.append({"role": "assistant", "content": example.output})
    messages.append({"role": "user", "content": request.user_input + JSON_FENCE})
    return messages


def strip_json_fence(content: str) -> str:
    text = content.strip()
    if text.startswith(JSON_FENCE):
        text = text[len(JSON_FENCE):]
    elif text.startswith(FENCE):
        text = text[len(FENCE):]
    if text.endswith(FENCE):
        text = text[:-len(FENCE)]
    return text.strip()


class OllamaTextClient:
    """Sends one chat request to Ollama and decodes the completion as JSON."""

    def __init__(self, host: str = DEFAULT_OLLAMA_HOST, model: str = DEFAULT_OLLAMA_MODEL,
                 timeout: Optional[float] = None, client: Optional[AsyncClient] = None):
        self.host = host
        self.model = model
        self.client = client or AsyncClient(host=host, timeout=timeout)

    async def request(self, request: LLMRequest) -> Any:
        try:
            response = await self.client.chat(
                model=self.model,
                messages=build_messages(request),
                options={"stop": [FENCE]},
            )
            content = response["message"]["content"]
        except (ResponseError, RequestError, httpx.HTTPError, OSError) as e:
            raise TransportError(f"Ollama request to {self.host} failed: {e}") from e

        log.debug(f"Ollama response: {content}")
        try:
            return json.loads(strip_json_fence(content or ""))
        except json.JSONDecodeError as e:
            log.warning(f"Failed to parse JSON response from Ollama: {content!r}")
            raise ParseError(f"Completion is not valid JSON: {e}", content=content or "") from e


class RetryingTextClient:
    """
    Retries the wrapped client on transport or parse failures.

    The request is re-sent unchanged, relying on the model's non-determinism to
    eventually produce well-formed output. No delay is applied between attempts.
    Exhaustion raises RetryExhaustedError.
    """

    def __init__(self, inner: TextGenerator, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.inner = inner
        self.max_attempts = max_attempts

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        log.warning(f"Failed to get a valid JSON response (attempt {retry_state.attempt_number}/{self.max_attempts}): {error}. Trying again ...")

    async def request(self, request: LLMRequest) -> Any:
        retryer = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_none(),
            retry=retry_if_exception_type((ParseError, TransportError)),
            before_sleep=self._log_retry,
            reraise=False,
        )
        try:
            return await retryer(self.inner.request, request)
        except RetryError as e:
            last_error = e.last_attempt.exception()
            log.error(f"Giving up after {self.max_attempts} attempts: {last_error}")
            raise RetryExhaustedError(self.max_attempts, last_error) from last_error


def create_text_client(cfg_helper) -> CachedTextClient:
    """Client stack for one run: cache -> retry -> Ollama."""
    host = cfg_helper('ollama_host', DEFAULT_OLLAMA_HOST)
    model = cfg_helper('ollama_model', DEFAULT_OLLAMA_MODEL)
    timeout = cfg_helper('request_timeout', None)
    max_attempts = int(cfg_helper('max_attempts', DEFAULT_MAX_ATTEMPTS))
    cache_max_entries = cfg_helper('cache_max_entries', None)

    ollama_client = OllamaTextClient(host=host, model=model, timeout=timeout)
    log.info(f"Ollama client initialized (host: {host}, model: {model}, max attempts: {max_attempts}).")
    return CachedTextClient(RetryingTextClient(ollama_client, max_attempts), ResponseCache(cache_max_entries))
