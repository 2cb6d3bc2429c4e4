"""
OpenAI LLM provider implementation.

Uses the OpenAI Python SDK (``openai.AsyncOpenAI``) for chat completions.
Timeout and automatic retries are configured on the client itself, so
the connection carries one uniform policy for every call.
"""

import logging

from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI

from soapscribe.core.config import get_settings
from soapscribe.core.exceptions import NoteGenerationError
from soapscribe.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)


class OpenAILLM(BaseLLM):
    """OpenAI chat-completions provider."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.openai_api_key
        self.model = model or settings.openai_chat_model
        self._temperature = temperature if temperature is not None else settings.llm_temperature
        self._timeout = timeout if timeout is not None else settings.llm_timeout
        self._max_retries = max_retries if max_retries is not None else settings.llm_max_retries
        self._client = AsyncOpenAI(
            api_key=self._api_key,
            timeout=self._timeout,
            max_retries=self._max_retries,
        )

    async def generate(self, prompt: str, **kwargs) -> str:
        """Generate a chat completion for ``prompt``."""
        system = kwargs.pop("system", None)
        temperature = kwargs.pop("temperature", None)

        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature if temperature is not None else self._temperature,
            )
        except APITimeoutError as exc:
            logger.warning("OpenAI completion timeout: %s", exc)
            raise NoteGenerationError(
                detail=f"Connection error: request timed out after {self._timeout:g}s",
                connection_failed=True,
            ) from exc
        except APIConnectionError as exc:
            logger.warning("OpenAI completion connection error: %s", exc)
            raise NoteGenerationError(
                detail=f"Connection error: {exc}",
                connection_failed=True,
            ) from exc
        except APIStatusError as exc:
            logger.warning("OpenAI completion returned %s: %s", exc.status_code, exc.message)
            raise NoteGenerationError(
                detail=f"OpenAI API error: {exc.status_code} - {exc.message}",
                upstream_status=exc.status_code,
            ) from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
