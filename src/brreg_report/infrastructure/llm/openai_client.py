"""LLM gateway for OpenAI-compatible chat-completion endpoints."""
from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from openai import OpenAI, OpenAIError

from brreg_report.infrastructure.errors import GenerationError

SYSTEM_PROMPT = (
    "You are a financial analyst covering Norwegian companies. "
    "Answer strictly in the requested section format."
)


class OpenAICompatibleClient:
    """Minimal chat client hiding transport plumbing from workflow nodes."""

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        base_url: Optional[str] = None,
        proxy_url: Optional[str] = None,
        timeout: float = 30.0,
        max_tokens: int = 1200,
        temperature: float = 0.7,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if not api_key:
            raise ValueError("OPENAI_API_KEY is required to contact the chat endpoint.")

        http_client_kwargs: Dict[str, Any] = {
            "timeout": httpx.Timeout(timeout, connect=min(timeout, 10.0)),
        }
        if proxy_url:
            http_client_kwargs["proxy"] = proxy_url
        if transport is not None:
            http_client_kwargs["transport"] = transport

        self._http_client = httpx.Client(**http_client_kwargs)
        self._client = OpenAI(
            api_key=api_key,
            base_url=base_url or None,
            http_client=self._http_client,
            max_retries=0,
        )
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature

    def generate(self, prompt: str) -> str:
        """Fire a chat completion request and return the assistant message content."""
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
            )
        except OpenAIError as exc:
            raise GenerationError("chat completion", str(exc)) from exc
        if not response.choices:
            raise GenerationError("chat completion", "no choices returned")
        return response.choices[0].message.content or ""

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self._http_client.close()
