"""Pick a text-generation backend from configuration."""
from __future__ import annotations

from typing import Union

from config import Config
from brreg_report.infrastructure.llm.huggingface_client import HuggingFaceClient
from brreg_report.infrastructure.llm.openai_client import OpenAICompatibleClient

TextGenerationClient = Union[HuggingFaceClient, OpenAICompatibleClient]

PROVIDERS = ("huggingface", "openai")


def build_text_generator(config: Config) -> TextGenerationClient:
    """Instantiate the configured backend; ``ValueError`` when unusable."""
    provider = (config.llm_provider or "huggingface").lower()
    if provider == "huggingface":
        return HuggingFaceClient(
            api_token=config.hf_api_token or "",
            model=config.hf_model,
            base_url=config.hf_base_url,
            proxy_url=config.proxy_url,
            timeout=config.llm_timeout,
            max_new_tokens=config.llm_max_new_tokens,
            temperature=config.llm_temperature,
        )
    if provider == "openai":
        return OpenAICompatibleClient(
            api_key=config.openai_api_key or "",
            model=config.openai_model,
            base_url=config.openai_base_url,
            proxy_url=config.proxy_url,
            timeout=config.llm_timeout,
            max_tokens=config.llm_max_new_tokens,
            temperature=config.llm_temperature,
        )
    raise ValueError(f"Unknown LLM_PROVIDER '{provider}'; expected one of {', '.join(PROVIDERS)}.")
