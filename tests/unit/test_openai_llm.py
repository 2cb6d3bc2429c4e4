"""Unit tests for the OpenAI chat-completions provider."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from openai import APIConnectionError, APIStatusError, APITimeoutError

from soapscribe.core.exceptions import NoteGenerationError
from soapscribe.services.llm import create_llm
from soapscribe.services.llm.openai import OpenAILLM

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _mock_settings():
    return SimpleNamespace(
        openai_api_key="sk-from-settings",
        openai_chat_model="gpt-4o",
        llm_temperature=0.3,
        llm_timeout=120.0,
        llm_max_retries=2,
    )


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def openai_client():
    """Patch AsyncOpenAI and yield (constructor mock, client mock)."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=_completion("S: ...\nO: ..."))
    with (
        patch("soapscribe.services.llm.openai.get_settings", return_value=_mock_settings()),
        patch("soapscribe.services.llm.openai.AsyncOpenAI", return_value=client) as ctor,
    ):
        yield ctor, client


class TestOpenAILLMInit:
    def test_defaults_from_settings(self, openai_client):
        ctor, _ = openai_client

        llm = OpenAILLM()

        assert llm.model == "gpt-4o"
        ctor.assert_called_once_with(api_key="sk-from-settings", timeout=120.0, max_retries=2)

    def test_explicit_arguments(self, openai_client):
        ctor, _ = openai_client

        llm = OpenAILLM(api_key="sk-explicit", model="gpt-4o-mini", timeout=30.0, max_retries=0)

        assert llm.model == "gpt-4o-mini"
        ctor.assert_called_once_with(api_key="sk-explicit", timeout=30.0, max_retries=0)

    def test_factory(self, openai_client):
        assert isinstance(create_llm("openai", api_key="sk-x"), OpenAILLM)

    def test_factory_unknown(self):
        with pytest.raises(ValueError, match="Unknown LLM provider"):
            create_llm("gemini")


class TestOpenAILLMGenerate:
    async def test_messages_and_temperature(self, openai_client):
        _, client = openai_client

        result = await OpenAILLM().generate("transcript here", system="be a clinician")

        assert result == "S: ...\nO: ..."
        client.chat.completions.create.assert_awaited_once_with(
            model="gpt-4o",
            messages=[
                {"role": "system", "content": "be a clinician"},
                {"role": "user", "content": "transcript here"},
            ],
            temperature=0.3,
        )

    async def test_temperature_override_without_system(self, openai_client):
        _, client = openai_client

        await OpenAILLM().generate("hello", temperature=0.0)

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["messages"] == [{"role": "user", "content": "hello"}]
        assert kwargs["temperature"] == 0.0

    async def test_empty_content(self, openai_client):
        _, client = openai_client
        client.chat.completions.create.return_value = _completion(None)

        assert await OpenAILLM().generate("x") == ""

    async def test_no_choices(self, openai_client):
        _, client = openai_client
        client.chat.completions.create.return_value = SimpleNamespace(choices=[])

        assert await OpenAILLM().generate("x") == ""


class TestOpenAILLMErrors:
    async def test_connection_error(self, openai_client):
        _, client = openai_client
        client.chat.completions.create.side_effect = APIConnectionError(request=_REQUEST)

        with pytest.raises(NoteGenerationError) as exc_info:
            await OpenAILLM().generate("x")

        assert exc_info.value.connection_failed is True
        assert exc_info.value.detail.startswith("Connection error")

    async def test_timeout(self, openai_client):
        _, client = openai_client
        client.chat.completions.create.side_effect = APITimeoutError(request=_REQUEST)

        with pytest.raises(NoteGenerationError) as exc_info:
            await OpenAILLM().generate("x")

        assert exc_info.value.connection_failed is True
        assert "timed out after 120s" in exc_info.value.detail

    async def test_status_error(self, openai_client):
        _, client = openai_client
        client.chat.completions.create.side_effect = APIStatusError(
            "Incorrect API key provided",
            response=httpx.Response(401, request=_REQUEST),
            body=None,
        )

        with pytest.raises(NoteGenerationError) as exc_info:
            await OpenAILLM().generate("x")

        exc = exc_info.value
        assert exc.upstream_status == 401
        assert exc.connection_failed is False
        assert exc.detail == "OpenAI API error: 401 - Incorrect API key provided"
        assert exc.service == "OpenAI"
