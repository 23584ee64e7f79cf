"""Unit tests for OpenAIClient."""

from __future__ import annotations

import json

import httpx
import pytest
import respx
from pydantic import BaseModel

from scanscore.llm.client.openai import OpenAIClient, schema_instruction
from scanscore.llm.exceptions import (
    LLMConfigurationError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
    LLMValidationError,
)
from tests.fixtures.llm_responses import create_openai_response


pytestmark = pytest.mark.unit

CHAT_URL = "https://api.openai.com/v1/chat/completions"


class SampleSchema(BaseModel):
    """Sample schema for testing structured output."""

    title: str
    items: list[str]


def make_client(**kwargs: object) -> OpenAIClient:
    options: dict[str, object] = {
        "api_key": "sk-test",
        "model": "gpt-4o-mini",
        "max_retries": 0,
        # No throttling between retries in tests
        "requests_per_minute": 600_000.0,
    }
    options.update(kwargs)
    return OpenAIClient(**options)  # type: ignore[arg-type]


def request_body(route: respx.Route) -> dict[str, object]:
    return json.loads(route.calls.last.request.content)


class TestOpenAIClientLifecycle:
    """Tests for initialization and shutdown."""

    async def test_requires_api_key(self) -> None:
        """Should refuse to initialize without an API key."""
        client = make_client(api_key="")

        with pytest.raises(LLMConfigurationError):
            await client.initialize()

    async def test_initialize_and_shutdown(self) -> None:
        """Should create and close the HTTP client."""
        client = make_client()

        await client.initialize()
        assert client._http_client is not None

        await client.shutdown()
        assert client._http_client is None

    def test_chat_url_strips_trailing_slash(self) -> None:
        """Should build the endpoint from a base URL with a trailing slash."""
        client = make_client(base_url="https://gateway.example.com/v1/")

        assert client.chat_url == "https://gateway.example.com/v1/chat/completions"


class TestOpenAIClientRequests:
    """Tests for request construction."""

    @respx.mock
    async def test_sends_bearer_token(self) -> None:
        """Should authenticate with the API key."""
        route = respx.post(CHAT_URL).mock(
            return_value=httpx.Response(200, json=create_openai_response("Hi"))
        )
        client = make_client()

        await client.generate("Hello")

        assert route.calls.last.request.headers["Authorization"] == "Bearer sk-test"
        await client.shutdown()

    @respx.mock
    async def test_plain_prompt_message(self) -> None:
        """Should send system and user messages with string content."""
        route = respx.post(CHAT_URL).mock(
            return_value=httpx.Response(200, json=create_openai_response("Hi"))
        )
        client = make_client()

        await client.generate("Compare these", system="You are a food safety educator.")

        body = request_body(route)
        assert body["model"] == "gpt-4o-mini"
        assert body["messages"] == [
            {"role": "system", "content": "You are a food safety educator."},
            {"role": "user", "content": "Compare these"},
        ]
        assert "response_format" not in body
        await client.shutdown()

    @respx.mock
    async def test_json_output_enables_json_mode(self) -> None:
        """Should request a JSON object response format."""
        route = respx.post(CHAT_URL).mock(
            return_value=httpx.Response(200, json=create_openai_response("{}"))
        )
        client = make_client()

        await client.generate("Score", json_output=True, options={"temperature": 0.2})

        body = request_body(route)
        assert body["response_format"] == {"type": "json_object"}
        assert body["temperature"] == 0.2
        await client.shutdown()

    @respx.mock
    async def test_num_predict_maps_to_max_completion_tokens(self) -> None:
        """Should translate the token limit option to the chat API name."""
        route = respx.post(CHAT_URL).mock(
            return_value=httpx.Response(200, json=create_openai_response("{}"))
        )
        client = make_client()

        await client.generate("Score", options={"num_predict": 4096})

        assert request_body(route)["max_completion_tokens"] == 4096
        await client.shutdown()

    @respx.mock
    async def test_images_sent_as_data_url_parts(self) -> None:
        """Should send images as image_url parts before the text part."""
        route = respx.post(CHAT_URL).mock(
            return_value=httpx.Response(200, json=create_openai_response("{}"))
        )
        client = make_client()

        await client.generate("Analyze this food label.", images=["aGVsbG8="])

        messages = request_body(route)["messages"]
        assert isinstance(messages, list)
        content = messages[-1]["content"]
        assert content[0] == {
            "type": "image_url",
            "image_url": {"url": "data:image/jpeg;base64,aGVsbG8=", "detail": "high"},
        }
        assert content[1] == {"type": "text", "text": "Analyze this food label."}
        await client.shutdown()

    @respx.mock
    async def test_schema_described_in_system_prompt(self) -> None:
        """Should append the JSON schema instruction to the system prompt."""
        route = respx.post(CHAT_URL).mock(
            return_value=httpx.Response(
                200, json=create_openai_response('{"title": "T", "items": []}')
            )
        )
        client = make_client()

        await client.generate("Extract", system="Base prompt.", schema=SampleSchema)

        messages = request_body(route)["messages"]
        assert isinstance(messages, list)
        assert messages[0]["content"] == f"Base prompt.\n\n{schema_instruction(SampleSchema)}"
        await client.shutdown()


class TestOpenAIClientResponses:
    """Tests for response handling."""

    @respx.mock
    async def test_returns_completion(self) -> None:
        """Should map content and usage into the completion result."""
        respx.post(CHAT_URL).mock(
            return_value=httpx.Response(200, json=create_openai_response("Hello, world!"))
        )
        client = make_client()

        result = await client.generate("Say hello")

        assert result.raw_response == "Hello, world!"
        assert result.model == "gpt-4o-mini"
        assert result.prompt_tokens == 120
        assert result.completion_tokens == 80
        await client.shutdown()

    @respx.mock
    async def test_generate_structured(self) -> None:
        """Should return the parsed schema instance."""
        respx.post(CHAT_URL).mock(
            return_value=httpx.Response(
                200, json=create_openai_response('{"title": "Test", "items": ["x"]}')
            )
        )
        client = make_client()

        result = await client.generate_structured("Extract", schema=SampleSchema)

        assert result == SampleSchema(title="Test", items=["x"])
        await client.shutdown()

    @respx.mock
    async def test_structured_validation_error(self) -> None:
        """Should raise LLMValidationError when the answer does not fit the schema."""
        respx.post(CHAT_URL).mock(
            return_value=httpx.Response(200, json=create_openai_response('{"nope": 1}'))
        )
        client = make_client()

        with pytest.raises(LLMValidationError):
            await client.generate_structured("Extract", schema=SampleSchema)
        await client.shutdown()

    @respx.mock
    async def test_empty_completion(self) -> None:
        """Should raise LLMResponseError when the message content is empty."""
        respx.post(CHAT_URL).mock(
            return_value=httpx.Response(200, json=create_openai_response(""))
        )
        client = make_client()

        with pytest.raises(LLMResponseError):
            await client.generate("Test")
        await client.shutdown()


class TestOpenAIClientErrors:
    """Tests for error mapping and retries."""

    @respx.mock
    async def test_rate_limit(self) -> None:
        """Should raise LLMRateLimitError on 429."""
        respx.post(CHAT_URL).mock(
            return_value=httpx.Response(429, headers={"retry-after": "20"}, json={})
        )
        client = make_client()

        with pytest.raises(LLMRateLimitError, match="20s"):
            await client.generate("test")
        await client.shutdown()

    @respx.mock
    async def test_client_error_not_retried(self) -> None:
        """Should raise LLMResponseError on 4xx without retrying."""
        route = respx.post(CHAT_URL).mock(return_value=httpx.Response(400, json={}))
        client = make_client(max_retries=2)

        with pytest.raises(LLMResponseError):
            await client.generate("test")

        assert route.call_count == 1
        await client.shutdown()

    @respx.mock
    async def test_server_error_retried_then_unavailable(self) -> None:
        """Should retry 5xx and finally report the provider unavailable."""
        route = respx.post(CHAT_URL).mock(return_value=httpx.Response(503, json={}))
        client = make_client(max_retries=1)

        with pytest.raises(LLMUnavailableError):
            await client.generate("test")

        assert route.call_count == 2
        await client.shutdown()

    @respx.mock
    async def test_server_error_recovers(self) -> None:
        """Should return the completion when a retry succeeds."""
        route = respx.post(CHAT_URL)
        route.side_effect = [
            httpx.Response(502, json={}),
            httpx.Response(200, json=create_openai_response("Recovered")),
        ]
        client = make_client(max_retries=1)

        result = await client.generate("test")

        assert result.raw_response == "Recovered"
        await client.shutdown()

    @respx.mock
    async def test_timeout(self) -> None:
        """Should raise LLMTimeoutError once retries are exhausted."""
        respx.post(CHAT_URL).mock(side_effect=httpx.ReadTimeout("timeout"))
        client = make_client(max_retries=1)

        with pytest.raises(LLMTimeoutError):
            await client.generate("test")
        await client.shutdown()

    @respx.mock
    async def test_connection_error(self) -> None:
        """Should raise LLMUnavailableError when the API cannot be reached."""
        respx.post(CHAT_URL).mock(side_effect=httpx.ConnectError("refused"))
        client = make_client()

        with pytest.raises(LLMUnavailableError):
            await client.generate("test")
        await client.shutdown()
