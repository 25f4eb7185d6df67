"""Async client for an OpenAI-compatible chat completions endpoint."""

import json
import re
from dataclasses import dataclass
from typing import Any, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..config import LLMConfig, get_config
from ..errors import (
    JudgmentConnectionError,
    JudgmentError,
    JudgmentTimeoutError,
    JudgmentValidationError,
)
from ..utils.logging import get_logger
from ..utils.metrics import get_operation_metrics, timed_operation

logger = get_logger("llm_client")

T = TypeVar("T", bound=BaseModel)

_THINK_BLOCK = re.compile(r"<think>.*?</think>", re.DOTALL)
_FENCED_JSON = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


@dataclass
class LLMResponse:
    """Response from LLM inference."""

    text: str
    input_tokens: int = 0
    output_tokens: int = 0
    finish_reason: str = "stop"
    model: str = ""


@dataclass
class Message:
    """A chat message."""

    role: str  # "system", "user", "assistant"
    content: str


def strip_reasoning(content: str) -> str:
    """Remove <think>...</think> blocks some models prepend."""
    return _THINK_BLOCK.sub("", content).strip()


def extract_json(content: str) -> str:
    """Pull a JSON object out of a possibly fenced or chatty answer."""
    content = strip_reasoning(content)
    match = _FENCED_JSON.search(content)
    if match:
        content = match.group(1).strip()
    if not content.startswith("{"):
        match = _JSON_OBJECT.search(content)
        if match:
            content = match.group(0)
    return content


class VLLMClient:
    """Client for a vLLM (OpenAI-compatible) server.

    Transport errors surface as :class:`JudgmentError` subclasses. Retries
    happen only when ``config.max_attempts`` is above 1.
    """

    def __init__(self, config: LLMConfig | None = None):
        self.config = config or get_config().llm
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.api_base,
                timeout=httpx.Timeout(self.config.timeout),
                headers={"Authorization": f"Bearer {self.config.api_key}"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "VLLMClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def chat(
        self,
        messages: list[dict[str, str] | Message],
        response_format: dict[str, Any] | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Chat completion with multiple messages.

        Args:
            messages: Role-tagged messages
            response_format: Optional OpenAI ``response_format`` payload
            max_tokens: Max tokens to generate
            temperature: Sampling temperature

        Returns:
            LLMResponse with generated text and usage info

        Raises:
            JudgmentError: On transport failure or an unusable response
        """
        msg_dicts = [
            {"role": m.role, "content": m.content} if isinstance(m, Message) else m
            for m in messages
        ]

        request_body: dict[str, Any] = {
            "model": self.config.model_name,
            "messages": msg_dicts,
            "max_tokens": max_tokens or self.config.max_tokens,
            "temperature": temperature if temperature is not None else self.config.temperature,
        }
        if response_format:
            request_body["response_format"] = response_format

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.config.max_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type((JudgmentTimeoutError, JudgmentConnectionError)),
            reraise=True,
        ):
            with attempt:
                data = await self._post(request_body)

        return self._parse_response(data)

    async def chat_structured(
        self,
        messages: list[dict[str, str] | Message],
        schema: Type[T],
        max_tokens: int | None = None,
    ) -> T:
        """Chat completion validated against a Pydantic schema.

        Raises:
            JudgmentValidationError: If the answer is not valid JSON for schema
        """
        response_format = {
            "type": "json_schema",
            "json_schema": {
                "name": schema.__name__,
                "schema": schema.model_json_schema(),
                "strict": True,
            },
        }
        response = await self.chat(messages, response_format=response_format, max_tokens=max_tokens)
        content = extract_json(response.text)

        try:
            return schema.model_validate(json.loads(content))
        except json.JSONDecodeError as e:
            raise JudgmentValidationError(f"Failed to parse JSON: {e}; response: {content[:200]}") from e
        except ValidationError as e:
            raise JudgmentValidationError(f"Failed to validate {schema.__name__}: {e}") from e

    async def _post(self, request_body: dict[str, Any]) -> dict[str, Any]:
        client = await self._get_client()
        get_operation_metrics().increment("llm_requests")

        try:
            with timed_operation("llm_inference"):
                response = await client.post("/chat/completions", json=request_body)
                response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.warning(f"LLM request timed out after {self.config.timeout}s")
            raise JudgmentTimeoutError(f"Request timed out: {e}") from e
        except httpx.HTTPError as e:
            logger.warning(f"LLM request failed: {str(e)[:100]}")
            raise JudgmentConnectionError(f"Request failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise JudgmentValidationError(f"Non-JSON response body: {e}") from e

    def _parse_response(self, data: dict[str, Any]) -> LLMResponse:
        try:
            choice = data["choices"][0]
            content = choice["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise JudgmentValidationError(f"Malformed completion payload: {e!r}") from e

        if not isinstance(content, str) or not content.strip():
            raise JudgmentError("Empty content in response")

        usage = data.get("usage") or {}
        return LLMResponse(
            text=content,
            input_tokens=usage.get("prompt_tokens", 0),
            output_tokens=usage.get("completion_tokens", 0),
            finish_reason=choice.get("finish_reason") or "stop",
            model=data.get("model", self.config.model_name),
        )


def create_client(config: LLMConfig | None = None) -> VLLMClient:
    """Create a vLLM client instance."""
    return VLLMClient(config)
