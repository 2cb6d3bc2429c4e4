"""Unit tests for the Ollama LLM provider."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from ollama import ResponseError
from tenacity import wait_none

from soapscribe.core.exceptions import NoteGenerationError
from soapscribe.services.llm.ollama import OllamaLLM


def _mock_settings():
    return SimpleNamespace(
        ollama_base_url="http://localhost:11434",
        ollama_model="llama3.2",
        llm_temperature=0.3,
        llm_timeout=120.0,
        llm_max_retries=2,
    )


def _chat_response(content):
    return SimpleNamespace(message=SimpleNamespace(content=content))


@pytest.fixture
def ollama():
    client = MagicMock()
    client.chat = AsyncMock(return_value=_chat_response("S: local"))
    with (
        patch("soapscribe.services.llm.ollama.get_settings", return_value=_mock_settings()),
        patch("soapscribe.services.llm.ollama.AsyncClient", return_value=client) as ctor,
    ):
        llm = OllamaLLM()
        llm._wait = wait_none()
        yield llm, client, ctor


class TestOllamaGenerate:
    def test_client_configured(self, ollama):
        _, _, ctor = ollama
        ctor.assert_called_once_with(host="http://localhost:11434", timeout=120.0)

    async def test_messages_and_options(self, ollama):
        llm, client, _ = ollama

        result = await llm.generate("transcript", system="sys")

        assert result == "S: local"
        client.chat.assert_awaited_once_with(
            model="llama3.2",
            messages=[
                {"role": "system", "content": "sys"},
                {"role": "user", "content": "transcript"},
            ],
            options={"temperature": 0.3},
        )

    async def test_connection_error_retried(self, ollama):
        llm, client, _ = ollama
        client.chat.side_effect = httpx.ConnectError("refused")

        with pytest.raises(NoteGenerationError) as exc_info:
            await llm.generate("x")

        assert exc_info.value.connection_failed is True
        assert client.chat.await_count == 3
        assert exc_info.value.service == "Ollama"

    async def test_response_error_not_retried(self, ollama):
        llm, client, _ = ollama
        client.chat.side_effect = ResponseError("model 'llama3.2' not found", 404)

        with pytest.raises(NoteGenerationError) as exc_info:
            await llm.generate("x")

        assert exc_info.value.upstream_status == 404
        assert "not found" in exc_info.value.detail
        assert client.chat.await_count == 1
