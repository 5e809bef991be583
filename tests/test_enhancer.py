from __future__ import annotations

import logging

from brreg_report.domain.models.company import CompanyProfile
from brreg_report.domain.models.financials import YearlyFinancialSummary
from brreg_report.domain.services.enhancer import NarrativeEnhancer, build_prompt
from brreg_report.domain.services.synthesizer import ReportSynthesizer
from brreg_report.infrastructure.errors import GenerationError

PROFILE = CompanyProfile(
    organization_number="923609016",
    name="Fjordkode AS",
    industry_code="62.010",
    industry_label="Programmeringstjenester",
    employees=20,
    vat_registered=True,
    postal_place="OSLO",
)


class FakeGenerator:
    def __init__(self, answer: str = "", error: Exception = None) -> None:
        self.answer = answer
        self.error = error
        self.prompts = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.answer


def _report(summaries=()):
    return ReportSynthesizer(current_year=2024).synthesize(PROFILE, list(summaries))


def test_prompt_lists_at_most_three_filed_years_in_millions():
    summaries = [
        YearlyFinancialSummary(year=year, revenue=10_000_000 + year, profit=1_000_000)
        for year in (2024, 2023, 2022, 2021)
    ]
    prompt = build_prompt(_report(summaries), PROFILE, summaries, "Using official financial statements")

    assert "Real Financial Data Available" in prompt
    assert "Year 2022" in prompt
    assert "Year 2021" not in prompt
    assert "Revenue: 10.0M NOK" in prompt
    assert "Organization Number: 923609016" in prompt
    assert "STRENGTHS:" in prompt


def test_prompt_in_estimate_mode_mentions_data_source():
    message = "Analysis will use company registration data and industry estimates"
    prompt = build_prompt(_report(), PROFILE, [], message)

    assert f"Data Source: {message}" in prompt
    assert "Estimated Revenue: 44.9M NOK" in prompt
    assert "small company size" in prompt


def test_enhance_applies_parsed_sections():
    generator = FakeGenerator("MARKET_POSITION: Niche leader.\n\nTHREATS:\n- Wage inflation\n")
    base = _report()
    enhanced = NarrativeEnhancer(generator).enhance(base, PROFILE, [], "msg")

    assert len(generator.prompts) == 1
    assert enhanced.trend_analysis.market_position == "Niche leader."
    assert enhanced.swot_analysis.threats == ["Wage inflation"]
    assert enhanced.swot_analysis.strengths == base.swot_analysis.strengths


def test_generation_failure_returns_base_report(caplog):
    base = _report()
    enhancer = NarrativeEnhancer(FakeGenerator(error=GenerationError("text generation", "HTTP 503")))

    with caplog.at_level(logging.WARNING):
        result = enhancer.enhance(base, PROFILE, [], "msg")

    assert result is base
    assert "Narrative enhancement failed" in caplog.text


def test_unparseable_answer_returns_base_report():
    base = _report()
    result = NarrativeEnhancer(FakeGenerator("Sorry, no idea.")).enhance(base, PROFILE, [], "msg")
    assert result is base
