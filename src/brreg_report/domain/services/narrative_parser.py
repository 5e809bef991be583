"""Parse section-tagged LLM answers into report overrides.

The model is asked for a fixed template (``MARKET_POSITION: ...``,
``STRENGTHS:`` followed by dash bullets, ...). Each section is matched on its
own, so one missing or malformed section never blocks the others.
"""
from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from typing import List, Optional

from brreg_report.domain.models.financials import FinancialReport

MAX_SWOT_ITEMS = 3

SENTENCE_SECTIONS = (
    "MARKET_POSITION",
    "FUTURE_OUTLOOK",
    "COMPETITIVE_ADVANTAGE",
    "INVESTMENT_REASONING",
)
LIST_SECTIONS = ("STRENGTHS", "WEAKNESSES", "OPPORTUNITIES", "THREATS")

_BULLET_PREFIX = re.compile(r"^\s*-\s*")


@dataclass(frozen=True)
class NarrativeOverrides:
    """Fields recovered from a model answer; ``None`` means keep the base value."""

    market_position: Optional[str] = None
    future_outlook: Optional[str] = None
    competitive_advantage: Optional[str] = None
    investment_reasoning: Optional[str] = None
    strengths: Optional[List[str]] = None
    weaknesses: Optional[List[str]] = None
    opportunities: Optional[List[str]] = None
    threats: Optional[List[str]] = None

    def is_empty(self) -> bool:
        return all(value is None for value in self.__dict__.values())


def parse_narrative(raw_text: str) -> NarrativeOverrides:
    """Extract every recognizable section from ``raw_text``."""
    text = raw_text or ""
    sentences = {label.lower(): _sentence(text, label) for label in SENTENCE_SECTIONS}
    bullets = {label.lower(): _bullets(text, label) for label in LIST_SECTIONS}
    return NarrativeOverrides(**sentences, **bullets)


def apply_overrides(report: FinancialReport, overrides: NarrativeOverrides) -> FinancialReport:
    """Return a copy of ``report`` with overridden narrative fields."""
    enhanced = copy.deepcopy(report)
    if overrides.market_position is not None:
        enhanced.trend_analysis.market_position = overrides.market_position
    if overrides.future_outlook is not None:
        enhanced.trend_analysis.future_outlook = overrides.future_outlook
    if overrides.competitive_advantage is not None:
        enhanced.competitor_analysis.competitive_advantage = overrides.competitive_advantage
    if overrides.investment_reasoning is not None:
        enhanced.investment_recommendation.reasoning = overrides.investment_reasoning

    swot = enhanced.swot_analysis
    if overrides.strengths:
        swot.strengths = list(overrides.strengths)
    if overrides.weaknesses:
        swot.weaknesses = list(overrides.weaknesses)
    if overrides.opportunities:
        swot.opportunities = list(overrides.opportunities)
    if overrides.threats:
        swot.threats = list(overrides.threats)
    return enhanced


def _sentence(text: str, label: str) -> Optional[str]:
    match = re.search(rf"{label}:\s*(.+?)(?=\n|$)", text, re.IGNORECASE)
    if not match:
        return None
    value = match.group(1).strip()
    return value or None


def _bullets(text: str, label: str) -> Optional[List[str]]:
    # Anchor at line start so "THREATS" does not match inside another label.
    match = re.search(
        rf"(?:^|\n)[ \t]*{label}:[ \t]*(?:\n\s*)?((?:\s*-[ \t]*.+(?:\n|$))+)",
        text,
        re.IGNORECASE,
    )
    if not match:
        return None
    items = [_BULLET_PREFIX.sub("", line).strip() for line in match.group(1).splitlines()]
    items = [item for item in items if item][:MAX_SWOT_ITEMS]
    return items or None
