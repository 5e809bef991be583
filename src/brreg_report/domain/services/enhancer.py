"""Best-effort LLM enrichment of the synthesized report narrative."""
from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence

from brreg_report.domain.models.company import CompanyProfile
from brreg_report.domain.models.financials import FinancialReport, YearlyFinancialSummary
from brreg_report.domain.services.narrative_parser import (
    NarrativeOverrides,
    apply_overrides,
    parse_narrative,
)

PROMPT_YEARS = 3

ANSWER_TEMPLATE = """MARKET_POSITION: [One sentence about the company's position in the Norwegian market]

FUTURE_OUTLOOK: [One sentence about future prospects considering Norwegian market conditions]

COMPETITIVE_ADVANTAGE: [One sentence about main competitive advantages]

INVESTMENT_REASONING: [One sentence about investment potential and rationale]

STRENGTHS:
- [Strength 1 - focus on Norwegian market advantages]
- [Strength 2 - operational or industry-specific strength]
- [Strength 3 - financial or strategic strength]

WEAKNESSES:
- [Weakness 1 - market or competitive challenge]
- [Weakness 2 - operational or financial limitation]
- [Weakness 3 - strategic or growth constraint]

OPPORTUNITIES:
- [Opportunity 1 - Norwegian market opportunity]
- [Opportunity 2 - industry or technology opportunity]
- [Opportunity 3 - expansion or strategic opportunity]

THREATS:
- [Threat 1 - market or competitive threat]
- [Threat 2 - economic or regulatory threat]
- [Threat 3 - industry or operational threat]"""


class TextGenerator(Protocol):
    def generate(self, prompt: str) -> str:
        ...


def _millions(value: Optional[float], currency: str = "NOK") -> str:
    if value is None:
        return "N/A"
    return f"{value / 1_000_000:.1f}M {currency}"


def _size_label(employees: int) -> str:
    if employees > 100:
        return "large"
    if employees > 20:
        return "medium"
    return "small"


def build_prompt(
    report: FinancialReport,
    profile: CompanyProfile,
    summaries: Sequence[YearlyFinancialSummary],
    data_source_message: str,
) -> str:
    """Render the analysis request sent to the text-generation service."""
    metrics = report.key_metrics
    employees = profile.employees or metrics.employees
    industry = profile.industry_label

    if summaries:
        lines = [
            f"- Year {s.year}: Revenue: {_millions(s.revenue, s.currency)}, "
            f"Profit: {_millions(s.profit, s.currency)}"
            for s in list(summaries)[:PROMPT_YEARS]
        ]
        financial_block = "Real Financial Data Available:\n" + "\n".join(lines)
    else:
        financial_block = (
            f"Data Source: {data_source_message}\n"
            f"Estimated Revenue: {_millions(metrics.revenue, metrics.currency)}\n"
            "Analysis based on industry benchmarks and company size"
        )

    return (
        "Analyze this Norwegian company and provide specific business insights:\n\n"
        "COMPANY INFORMATION:\n"
        f"- Name: {profile.name}\n"
        f"- Organization Number: {profile.organization_number}\n"
        f"- Industry: {industry}\n"
        f"- Legal Form: {profile.legal_form}\n"
        f"- Location: {profile.location}\n"
        f"- Employees: {employees}\n"
        f"- VAT Registered: {'Yes' if profile.vat_registered else 'No'}\n"
        f"- Founded: {metrics.founded_year}\n"
        f"- Status: {profile.status}\n\n"
        "FINANCIAL ANALYSIS:\n"
        f"{financial_block}\n\n"
        "MARKET CONTEXT:\n"
        f"- Norwegian {industry.lower()} sector\n"
        f"- {employees} employees indicating {_size_label(employees)} company size\n"
        f"- Located in {profile.location}\n\n"
        "Based on this comprehensive analysis, provide insights in this exact format:\n\n"
        f"{ANSWER_TEMPLATE}"
    )


class NarrativeEnhancer:
    """Overwrite narrative fields with model output; fall back to the base report."""

    def __init__(self, generator: TextGenerator, *, logger: Optional[logging.Logger] = None) -> None:
        self._generator = generator
        self._logger = logger or logging.getLogger(__name__)

    def enhance(
        self,
        report: FinancialReport,
        profile: CompanyProfile,
        summaries: Sequence[YearlyFinancialSummary],
        data_source_message: str,
    ) -> FinancialReport:
        prompt = build_prompt(report, profile, summaries, data_source_message)
        try:
            raw = self._generator.generate(prompt)
            overrides = parse_narrative(raw)
        except Exception as exc:  # pylint: disable=broad-except
            self._logger.warning("Narrative enhancement failed, keeping base report: %s", exc)
            return report

        if overrides.is_empty():
            self._logger.info("Model answer contained no recognizable sections")
            return report
        self._logger.info("Applied model narrative to %s", ", ".join(_applied(overrides)))
        return apply_overrides(report, overrides)


def _applied(overrides: NarrativeOverrides) -> Sequence[str]:
    return [name for name, value in overrides.__dict__.items() if value is not None]
