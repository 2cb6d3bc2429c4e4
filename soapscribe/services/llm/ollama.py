"""
Note generation on a local Ollama server.

Keeps transcripts on the machine when a hosted completion service is not
wanted. Connection failures are retried up to ``llm_max_retries`` times.
"""

import logging

import httpx
from ollama import AsyncClient, ResponseError
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from soapscribe.core.config import get_settings
from soapscribe.core.exceptions import NoteGenerationError
from soapscribe.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)

SERVICE_NAME = "Ollama"


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, NoteGenerationError) and exc.connection_failed


class OllamaLLM(BaseLLM):
    """Chat completions from an Ollama server via ``ollama.AsyncClient``."""

    def __init__(
        self,
        base_url: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
    ) -> None:
        settings = get_settings()
        self._base_url = base_url or settings.ollama_base_url
        self.model = model or settings.ollama_model
        self._temperature = temperature if temperature is not None else settings.llm_temperature
        self._timeout = timeout if timeout is not None else settings.llm_timeout
        self._max_retries = max_retries if max_retries is not None else settings.llm_max_retries
        self._wait = wait_exponential(multiplier=1, min=1, max=16)
        self._client = AsyncClient(host=self._base_url, timeout=self._timeout)

    async def _call_api(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
    ) -> str:
        """One chat call; SDK failures become ``NoteGenerationError``."""
        try:
            response = await self._client.chat(
                model=self.model,
                messages=messages,
                options={
                    "temperature": temperature if temperature is not None else self._temperature
                },
            )
        except (ConnectionError, httpx.TransportError) as exc:
            logger.warning("Ollama unreachable at %s: %s", self._base_url, exc)
            raise NoteGenerationError(
                service=SERVICE_NAME,
                detail=f"Connection error: failed to reach Ollama at {self._base_url}: {exc}",
                connection_failed=True,
            ) from exc
        except ResponseError as exc:
            logger.error("Ollama rejected the request (%s): %s", exc.status_code, exc.error)
            raise NoteGenerationError(
                service=SERVICE_NAME,
                detail=f"Ollama error: {exc.status_code} - {exc.error}",
                upstream_status=exc.status_code,
            ) from exc

        return response.message.content or ""

    async def generate(self, prompt: str, **kwargs) -> str:
        """Return the completion for ``prompt``, retrying connection failures."""
        messages: list[dict[str, str]] = []
        system = kwargs.pop("system", None)
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        temperature = kwargs.pop("temperature", None)
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._max_retries + 1),
            wait=self._wait,
            retry=retry_if_exception(_is_transient),
            reraise=True,
        ):
            with attempt:
                return await self._call_api(messages=messages, temperature=temperature)
        return ""
