"""Hugging Face Inference API text-generation client."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from brreg_report.infrastructure.errors import GenerationError

logger = logging.getLogger(__name__)

SOURCE = "text generation"


class HuggingFaceClient:
    """POST a prompt to a hosted model and return the generated continuation."""

    def __init__(
        self,
        api_token: str,
        model: str,
        *,
        base_url: str = "https://api-inference.huggingface.co/models",
        proxy_url: Optional[str] = None,
        timeout: float = 30.0,
        max_new_tokens: int = 1200,
        temperature: float = 0.7,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if not api_token:
            raise ValueError("HF_API_TOKEN is required to contact the inference endpoint.")

        http_client_kwargs: Dict[str, Any] = {
            "base_url": base_url.rstrip("/"),
            "headers": {"Authorization": f"Bearer {api_token}", "Content-Type": "application/json"},
            "timeout": httpx.Timeout(timeout, connect=min(timeout, 10.0)),
        }
        if proxy_url:
            http_client_kwargs["proxy"] = proxy_url
        if transport is not None:
            http_client_kwargs["transport"] = transport

        self._http_client = httpx.Client(**http_client_kwargs)
        self._model = model
        self._parameters = {
            "max_new_tokens": max_new_tokens,
            "temperature": temperature,
            "return_full_text": False,
        }

    def generate(self, prompt: str) -> str:
        """Return generated text; raise ``GenerationError`` on any failure."""
        body = {"inputs": prompt, "parameters": dict(self._parameters)}
        try:
            response = self._http_client.post(f"/{self._model}", json=body)
        except httpx.HTTPError as exc:
            raise GenerationError(SOURCE, str(exc) or type(exc).__name__) from exc
        if not response.is_success:
            raise GenerationError(SOURCE, f"request failed: {response.status_code}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise GenerationError(SOURCE, "response is not JSON") from exc
        return extract_generated_text(payload)

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self._http_client.close()


def extract_generated_text(payload: Any) -> str:
    """Accept ``[{"generated_text": ...}]`` or a bare string; reject anything else."""
    if isinstance(payload, list) and payload:
        first = payload[0]
        if isinstance(first, dict) and first.get("generated_text"):
            return str(first["generated_text"])
    if isinstance(payload, str):
        return payload
    logger.debug("Unexpected generation payload: %r", payload)
    raise GenerationError(SOURCE, "unexpected AI response format")
