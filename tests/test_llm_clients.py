from __future__ import annotations

import json

import httpx
import pytest

from config import Config
from brreg_report.infrastructure.errors import GenerationError
from brreg_report.infrastructure.llm.factory import build_text_generator
from brreg_report.infrastructure.llm.huggingface_client import (
    HuggingFaceClient,
    extract_generated_text,
)
from brreg_report.infrastructure.llm.openai_client import OpenAICompatibleClient


def _hf(handler) -> HuggingFaceClient:
    return HuggingFaceClient(
        "hf-test-token",
        "mistralai/Mixtral-8x7B-Instruct-v0.1",
        base_url="https://inference.test/models",
        transport=httpx.MockTransport(handler),
    )


def test_huggingface_request_shape():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"generated_text": "MARKET_POSITION: Strong."}])

    assert _hf(handler).generate("Analyze") == "MARKET_POSITION: Strong."

    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/models/mistralai/Mixtral-8x7B-Instruct-v0.1"
    assert request.headers["Authorization"] == "Bearer hf-test-token"
    body = json.loads(request.content)
    assert body["inputs"] == "Analyze"
    assert body["parameters"] == {"max_new_tokens": 1200, "temperature": 0.7, "return_full_text": False}


def test_huggingface_accepts_bare_string():
    assert _hf(lambda request: httpx.Response(200, json="plain answer")).generate("x") == "plain answer"


def test_huggingface_failures_raise_generation_error():
    with pytest.raises(GenerationError):
        _hf(lambda request: httpx.Response(503, json={"error": "Model is loading"})).generate("x")
    with pytest.raises(GenerationError):
        _hf(lambda request: httpx.Response(200, json={"error": "odd"})).generate("x")

    def unreachable(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timeout", request=request)

    with pytest.raises(GenerationError):
        _hf(unreachable).generate("x")


def test_extract_generated_text_rejects_empty_list():
    with pytest.raises(GenerationError):
        extract_generated_text([])
    with pytest.raises(GenerationError):
        extract_generated_text([{"generated_text": ""}])


def test_huggingface_requires_token():
    with pytest.raises(ValueError):
        HuggingFaceClient("", "some/model")


def test_openai_compatible_client_returns_message_content():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/chat/completions"
        payload = json.loads(request.content)
        assert payload["model"] == "test-model"
        assert payload["messages"][-1] == {"role": "user", "content": "Analyze"}
        return httpx.Response(
            200,
            json={
                "id": "chatcmpl-1",
                "object": "chat.completion",
                "created": 0,
                "model": "test-model",
                "choices": [
                    {
                        "index": 0,
                        "message": {"role": "assistant", "content": "FUTURE_OUTLOOK: Bright."},
                        "finish_reason": "stop",
                    }
                ],
            },
        )

    client = OpenAICompatibleClient(
        "sk-test",
        "test-model",
        base_url="https://llm.test/v1",
        transport=httpx.MockTransport(handler),
    )
    try:
        assert client.generate("Analyze") == "FUTURE_OUTLOOK: Bright."
    finally:
        client.close()


def test_openai_compatible_client_wraps_api_errors():
    client = OpenAICompatibleClient(
        "sk-test",
        "test-model",
        base_url="https://llm.test/v1",
        transport=httpx.MockTransport(lambda request: httpx.Response(500, json={"error": {"message": "down"}})),
    )
    with pytest.raises(GenerationError):
        client.generate("Analyze")


def test_factory_selects_backend_from_config():
    hf = build_text_generator(Config(hf_api_token="hf-token"))
    assert isinstance(hf, HuggingFaceClient)
    hf.close()

    openai_client = build_text_generator(Config(llm_provider="openai", openai_api_key="sk-test"))
    assert isinstance(openai_client, OpenAICompatibleClient)
    openai_client.close()


def test_factory_rejects_missing_credentials_and_unknown_provider():
    with pytest.raises(ValueError):
        build_text_generator(Config(hf_api_token=None))
    with pytest.raises(ValueError):
        build_text_generator(Config(llm_provider="openai"))
    with pytest.raises(ValueError):
        build_text_generator(Config(llm_provider="nonsense"))
