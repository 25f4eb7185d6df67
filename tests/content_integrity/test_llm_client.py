"""Tests for content_integrity/judgment/client.py - vLLM client."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from content_integrity.config import LLMConfig
from content_integrity.errors import (
    EvidenceUnavailable,
    JudgmentConnectionError,
    JudgmentError,
    JudgmentTimeoutError,
    JudgmentValidationError,
)
from content_integrity.judgment.client import (
    LLMResponse,
    Message,
    VLLMClient,
    create_client,
    extract_json,
    strip_reasoning,
)
from content_integrity.judgment.schemas import SourceProposal


def completion(content: str, **extra) -> dict:
    return {
        "choices": [{"message": {"content": content}, "finish_reason": "stop"}],
        "usage": {"prompt_tokens": 40, "completion_tokens": 3},
        "model": "test-model",
        **extra,
    }


def http_client_returning(payload: dict) -> MagicMock:
    mock_http_response = MagicMock()
    mock_http_response.json.return_value = payload
    mock_http_response.raise_for_status = MagicMock()
    mock_http_client = MagicMock()
    mock_http_client.post = AsyncMock(return_value=mock_http_response)
    return mock_http_client


# ============================================================================
# Helpers
# ============================================================================


class TestResponseHelpers:
    """Tests for strip_reasoning() and extract_json()."""

    def test_strip_reasoning(self):
        assert strip_reasoning("<think>\nlet me see\n</think>\n0.7") == "0.7"

    def test_strip_reasoning_without_block(self):
        assert strip_reasoning("  0.3 ") == "0.3"

    def test_extract_fenced_json(self):
        assert extract_json('```json\n{"sources": []}\n```') == '{"sources": []}'

    def test_extract_embedded_json(self):
        content = 'Here you go: {"sources": []} Hope this helps.'
        assert extract_json(content) == '{"sources": []}'

    def test_extract_after_reasoning(self):
        assert extract_json('<think>{"draft": 1}</think>{"sources": []}') == '{"sources": []}'


class TestLLMResponse:
    """Tests for LLMResponse and Message dataclasses."""

    def test_defaults(self):
        response = LLMResponse(text="0.5")

        assert response.input_tokens == 0
        assert response.finish_reason == "stop"
        assert response.model == ""

    def test_message(self):
        msg = Message(role="system", content="You are a detector.")
        assert msg.role == "system"


# ============================================================================
# VLLMClient
# ============================================================================


class TestVLLMClient:
    """Tests for VLLMClient."""

    def test_create_client(self, llm_config):
        client = create_client(llm_config)

        assert isinstance(client, VLLMClient)
        assert client.config.model_name == "test-model"

    @pytest.mark.asyncio
    async def test_http_client_lifecycle(self, llm_config):
        client = VLLMClient(llm_config)

        http_client = await client._get_client()
        assert isinstance(http_client, httpx.AsyncClient)
        assert str(http_client.base_url).startswith("http://test:8000/v1")
        assert await client._get_client() is http_client

        await client.close()
        assert client._client is None

    @pytest.mark.asyncio
    async def test_context_manager_closes(self, llm_config):
        async with VLLMClient(llm_config) as client:
            await client._get_client()
        assert client._client is None

    @pytest.mark.asyncio
    async def test_chat(self, llm_config, metrics):
        client = VLLMClient(llm_config)

        with patch.object(client, "_get_client") as mock_get_client:
            mock_http_client = http_client_returning(completion("0.42"))
            mock_get_client.return_value = mock_http_client

            response = await client.chat(
                [Message(role="user", content="hi"), {"role": "assistant", "content": "hello"}],
                temperature=0.0,
            )

        assert response.text == "0.42"
        assert response.input_tokens == 40
        assert response.output_tokens == 3
        assert response.model == "test-model"

        args, kwargs = mock_http_client.post.call_args
        assert args[0] == "/chat/completions"
        body = kwargs["json"]
        assert body["model"] == "test-model"
        assert body["temperature"] == 0.0
        assert body["max_tokens"] == llm_config.max_tokens
        assert body["messages"][0] == {"role": "user", "content": "hi"}
        assert "response_format" not in body

        assert metrics.counters["llm_requests"] == 1
        assert metrics.timing["llm_inference"].count == 1

    @pytest.mark.asyncio
    async def test_timeout_maps_to_judgment_error(self, llm_config):
        client = VLLMClient(llm_config)

        with patch.object(client, "_get_client") as mock_get_client:
            mock_http_client = MagicMock()
            mock_http_client.post = AsyncMock(side_effect=httpx.ReadTimeout("timed out"))
            mock_get_client.return_value = mock_http_client

            with pytest.raises(JudgmentTimeoutError) as exc_info:
                await client.chat([Message(role="user", content="hi")])

        assert isinstance(exc_info.value, EvidenceUnavailable)
        # No retry by default
        assert mock_http_client.post.call_count == 1

    @pytest.mark.asyncio
    async def test_connection_error(self, llm_config):
        client = VLLMClient(llm_config)

        with patch.object(client, "_get_client") as mock_get_client:
            mock_http_client = MagicMock()
            mock_http_client.post = AsyncMock(side_effect=httpx.ConnectError("refused"))
            mock_get_client.return_value = mock_http_client

            with pytest.raises(JudgmentConnectionError):
                await client.chat([Message(role="user", content="hi")])

    @pytest.mark.asyncio
    async def test_http_status_error(self, llm_config):
        client = VLLMClient(llm_config)
        request = httpx.Request("POST", "http://test:8000/v1/chat/completions")
        error = httpx.HTTPStatusError(
            "503 Service Unavailable", request=request, response=httpx.Response(503, request=request)
        )

        with patch.object(client, "_get_client") as mock_get_client:
            mock_http_client = http_client_returning({})
            mock_http_client.post.return_value.raise_for_status.side_effect = error
            mock_get_client.return_value = mock_http_client

            with pytest.raises(JudgmentConnectionError):
                await client.chat([Message(role="user", content="hi")])

    @pytest.mark.asyncio
    async def test_retries_when_configured(self):
        client = VLLMClient(LLMConfig(api_base="http://test:8000/v1", max_attempts=2))

        with patch.object(client, "_get_client") as mock_get_client:
            mock_http_client = http_client_returning(completion("0.9"))
            ok = mock_http_client.post.return_value
            mock_http_client.post.side_effect = [httpx.ConnectError("refused"), ok]
            mock_get_client.return_value = mock_http_client

            response = await client.chat([Message(role="user", content="hi")])

        assert response.text == "0.9"
        assert mock_http_client.post.call_count == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [{}, {"choices": []}, {"choices": [{"message": {}}]}, {"choices": None}],
    )
    async def test_malformed_payload(self, llm_config, payload):
        client = VLLMClient(llm_config)

        with patch.object(client, "_get_client") as mock_get_client:
            mock_get_client.return_value = http_client_returning(payload)

            with pytest.raises(JudgmentValidationError):
                await client.chat([Message(role="user", content="hi")])

    @pytest.mark.asyncio
    async def test_empty_content(self, llm_config):
        client = VLLMClient(llm_config)

        with patch.object(client, "_get_client") as mock_get_client:
            mock_get_client.return_value = http_client_returning(completion("   "))

            with pytest.raises(JudgmentError):
                await client.chat([Message(role="user", content="hi")])

    @pytest.mark.asyncio
    async def test_non_json_body(self, llm_config):
        client = VLLMClient(llm_config)

        with patch.object(client, "_get_client") as mock_get_client:
            mock_http_client = http_client_returning({})
            mock_http_client.post.return_value.json.side_effect = json.JSONDecodeError("x", "", 0)
            mock_get_client.return_value = mock_http_client

            with pytest.raises(JudgmentValidationError):
                await client.chat([Message(role="user", content="hi")])


# ============================================================================
# Structured output
# ============================================================================


class TestChatStructured:
    """Tests for VLLMClient.chat_structured()."""

    @pytest.mark.asyncio
    async def test_parses_fenced_json(self, llm_config):
        client = VLLMClient(llm_config)
        content = '```json\n{"sources": [{"title": "Wiki", "type": "wikipedia", "similarity": 0.7}]}\n```'

        with patch.object(client, "_get_client") as mock_get_client:
            mock_http_client = http_client_returning(completion(content))
            mock_get_client.return_value = mock_http_client

            proposal = await client.chat_structured([Message(role="user", content="hi")], SourceProposal)

        assert proposal.sources[0].title == "Wiki"
        assert proposal.sources[0].similarity == 0.7

        body = mock_http_client.post.call_args.kwargs["json"]
        assert body["response_format"]["type"] == "json_schema"
        assert body["response_format"]["json_schema"]["name"] == "SourceProposal"

    @pytest.mark.asyncio
    async def test_extra_fields_ignored(self, llm_config):
        client = VLLMClient(llm_config)
        content = json.dumps(
            {"sources": [{"title": "T", "type": "journal", "similarity": 0.5, "url": "x"}], "note": 1}
        )

        with patch.object(client, "_get_client") as mock_get_client:
            mock_get_client.return_value = http_client_returning(completion(content))

            proposal = await client.chat_structured([Message(role="user", content="hi")], SourceProposal)

        assert len(proposal.sources) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "content",
        [
            "I could not find any sources.",
            '{"sources": [{"title": "missing fields"}]}',
            '{"sources": [{"title": "T", "type": "web", "similarity": "high"}]}',
        ],
    )
    async def test_invalid_answer(self, llm_config, content):
        client = VLLMClient(llm_config)

        with patch.object(client, "_get_client") as mock_get_client:
            mock_get_client.return_value = http_client_returning(completion(content))

            with pytest.raises(JudgmentValidationError):
                await client.chat_structured([Message(role="user", content="hi")], SourceProposal)
