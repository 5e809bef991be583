"""Helpers to scrub model scaffolding before section parsing."""
from __future__ import annotations

import re

from brreg_report.domain.services.enhancer import TextGenerator


def clean_llm_output(text: str) -> str:
    """Drop reasoning blocks, code fences, markdown emphasis and quote markers."""
    if not text:
        return ""
    cleaned = str(text).strip()
    cleaned = re.sub(r"(?is)<think>.*?</think>", "", cleaned)
    cleaned = re.sub(r"(?m)^```[a-zA-Z]*\s*$", "", cleaned)
    cleaned = re.sub(r"\*\*([A-Z_]+:)\*\*", r"\1", cleaned)
    cleaned = re.sub(r"(?m)^>\s?", "", cleaned)
    cleaned = re.sub(r"(?m)^[ \t]*[*•][ \t]+", "- ", cleaned)
    cleaned = re.sub(r"\n{3,}", "\n\n", cleaned)
    return cleaned.strip()


class CleaningGenerator:
    """Wrap a generator so every answer goes through ``clean_llm_output``."""

    def __init__(self, inner: TextGenerator) -> None:
        self._inner = inner

    def generate(self, prompt: str) -> str:
        return clean_llm_output(self._inner.generate(prompt))
