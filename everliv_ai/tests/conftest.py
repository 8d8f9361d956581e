"""Shared fixtures: a test config and a service wired to httpx.MockTransport."""
import json

import httpx
import pytest

from everliv_ai.config import DeepSeekConfig
from everliv_ai.service import HealthAnalysisService

TEST_BASE_URL = "https://api.deepseek.test/v1"


def completion_envelope(content) -> dict:
    """OpenAI-compatible chat.completion body with one choice."""
    return {
        "id": "cmpl-test",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "deepseek-chat",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "logprobs": None,
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 10, "total_tokens": 20},
    }


def reply_with(content, status_code: int = 200):
    """Handler that answers every request with the given completion content."""
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=completion_envelope(content))
    return handler


def reply_json(payload: dict):
    return reply_with(json.dumps(payload, ensure_ascii=False))


def reply_status(status_code: int, body: str = "upstream error"):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, text=body)
    return handler


def connection_refused(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("Connection refused", request=request)


@pytest.fixture()
def config() -> DeepSeekConfig:
    return DeepSeekConfig(api_key="test-key", base_url=TEST_BASE_URL)


@pytest.fixture()
def make_service(config):
    """Factory returning (service, recorded requests) for a handler."""
    def factory(handler):
        recorded: list[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            recorded.append(request)
            return handler(request)

        service = HealthAnalysisService.from_config(
            config, transport=httpx.MockTransport(recording_handler)
        )
        return service, recorded
    return factory
