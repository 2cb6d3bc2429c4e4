"""
Note generation through the Anthropic Messages API.

Uses the Anthropic Python SDK (``anthropic.AsyncAnthropic``). The SDK's own
retries are disabled; transient failures are retried by ``tenacity`` so the
attempt budget matches ``settings.llm_max_retries``.
"""

import logging

from anthropic import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncAnthropic,
    RateLimitError,
)
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

SERVICE_NAME = "Claude"


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, NoteGenerationError) and (
        exc.connection_failed or exc.upstream_status == 429
    )


class ClaudeLLM(BaseLLM):
    """Claude API LLM provider with bounded retry logic."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.claude_api_key
        self.model = model or settings.claude_model
        self._max_tokens = max_tokens or settings.claude_max_tokens
        self._temperature = temperature if temperature is not None else settings.llm_temperature
        self._timeout = timeout if timeout is not None else settings.llm_timeout
        self._max_retries = max_retries if max_retries is not None else settings.llm_max_retries
        self._wait = wait_exponential(multiplier=1, min=1, max=16)
        self._client = AsyncAnthropic(api_key=self._api_key, timeout=self._timeout, max_retries=0)

    async def _call_api(
        self,
        user_prompt: str,
        system: str | None = None,
        temperature: float | None = None,
    ) -> str:
        """Send one request to Claude, translating SDK errors.

        All SDK exceptions become ``NoteGenerationError`` carrying the
        downstream status so the API layer can classify them.
        """
        try:
            kwargs: dict = {
                "model": self.model,
                "max_tokens": self._max_tokens,
                "temperature": temperature if temperature is not None else self._temperature,
                "messages": [{"role": "user", "content": user_prompt}],
            }
            if system:
                kwargs["system"] = system

            response = await self._client.messages.create(**kwargs)
        except APITimeoutError as exc:
            logger.warning("Claude request timed out after %ss", self._timeout)
            raise NoteGenerationError(
                service=SERVICE_NAME,
                detail=f"Connection error: Claude API request timed out: {exc}",
                connection_failed=True,
            ) from exc
        except APIConnectionError as exc:
            logger.warning("Claude unreachable: %s", exc)
            raise NoteGenerationError(
                service=SERVICE_NAME,
                detail=f"Connection error: failed to connect to Claude API: {exc}",
                connection_failed=True,
            ) from exc
        except RateLimitError as exc:
            logger.warning("Claude rate limited the request")
            raise NoteGenerationError(
                service=SERVICE_NAME,
                detail=f"Claude API rate limit exceeded: {exc}",
                upstream_status=429,
            ) from exc
        except APIStatusError as exc:
            logger.error("Claude API error %s: %s", exc.status_code, exc)
            raise NoteGenerationError(
                service=SERVICE_NAME,
                detail=f"Claude API error: {exc.status_code} - {exc.message}",
                upstream_status=exc.status_code,
            ) from exc

        if not response.content:
            return ""
        return getattr(response.content[0], "text", "") or ""

    async def generate(self, prompt: str, **kwargs) -> str:
        """Return the completion for ``prompt``; transient failures are retried."""
        system = kwargs.pop("system", None)
        temperature = kwargs.pop("temperature", None)
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._max_retries + 1),
            wait=self._wait,
            retry=retry_if_exception(_is_transient),
            reraise=True,
        ):
            with attempt:
                return await self._call_api(
                    user_prompt=prompt,
                    system=system,
                    temperature=temperature,
                )
        return ""
