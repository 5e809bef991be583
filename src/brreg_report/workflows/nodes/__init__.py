"""Convenience re-exports for workflow nodes."""
from __future__ import annotations

from . import (
    accounting_load,
    chart_builder,
    company_lookup,
    llm_clean,
    narrative,
    synthesis,
    writing,
)

__all__ = [
    "accounting_load",
    "chart_builder",
    "company_lookup",
    "llm_clean",
    "narrative",
    "synthesis",
    "writing",
]
