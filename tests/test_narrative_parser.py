from __future__ import annotations

from brreg_report.domain.models.company import CompanyProfile
from brreg_report.domain.services.narrative_parser import apply_overrides, parse_narrative
from brreg_report.domain.services.synthesizer import ReportSynthesizer

FULL_ANSWER = """MARKET_POSITION: A leading niche consultancy in Oslo.

FUTURE_OUTLOOK: Demand for cloud migration should keep growing.

COMPETITIVE_ADVANTAGE: Deep domain expertise in public sector projects.

INVESTMENT_REASONING: Solid margins and a growing client base.

STRENGTHS:
- Strong client relationships
- Experienced senior staff
- Healthy cash position
- Fourth strength that must be dropped

WEAKNESSES:
- Small sales team
- Concentrated customer base

OPPORTUNITIES:
- Nordic expansion

THREATS:
- Wage inflation
- Larger competitors
"""


def _base_report():
    profile = CompanyProfile(organization_number="923609016", name="Fjordkode AS", employees=20)
    return ReportSynthesizer(current_year=2024).synthesize(profile, [])


def test_parse_full_answer():
    overrides = parse_narrative(FULL_ANSWER)

    assert overrides.market_position == "A leading niche consultancy in Oslo."
    assert overrides.future_outlook == "Demand for cloud migration should keep growing."
    assert overrides.competitive_advantage == "Deep domain expertise in public sector projects."
    assert overrides.investment_reasoning == "Solid margins and a growing client base."
    assert overrides.strengths == [
        "Strong client relationships",
        "Experienced senior staff",
        "Healthy cash position",
    ]
    assert overrides.weaknesses == ["Small sales team", "Concentrated customer base"]
    assert overrides.opportunities == ["Nordic expansion"]
    assert overrides.threats == ["Wage inflation", "Larger competitors"]


def test_labels_are_case_insensitive():
    overrides = parse_narrative("market_position: Lowercase works\nStrengths:\n- One\n")
    assert overrides.market_position == "Lowercase works"
    assert overrides.strengths == ["One"]


def test_missing_strengths_keep_default_list():
    base = _base_report()
    answer = FULL_ANSWER.split("STRENGTHS:")[0] + "WEAKNESSES:\n- Thin margins\n"
    enhanced = apply_overrides(base, parse_narrative(answer))

    assert enhanced.swot_analysis.strengths == base.swot_analysis.strengths
    assert len(enhanced.swot_analysis.strengths) == 3
    assert enhanced.swot_analysis.weaknesses == ["Thin margins"]
    assert enhanced.trend_analysis.market_position == "A leading niche consultancy in Oslo."


def test_label_without_bullets_is_ignored():
    overrides = parse_narrative("STRENGTHS:\n\nWEAKNESSES:\n- Only weakness\n")
    assert overrides.strengths is None
    assert overrides.weaknesses == ["Only weakness"]


def test_blank_lines_inside_bullet_sections_are_tolerated():
    overrides = parse_narrative(
        "STRENGTHS:\n\n- Alpha\n- Beta\n\nWEAKNESSES:\n- Alpha\n\n- Beta\n\n- Gamma\n"
    )
    assert overrides.strengths == ["Alpha", "Beta"]
    assert overrides.weaknesses == ["Alpha", "Beta", "Gamma"]


def test_unrelated_text_yields_empty_overrides():
    assert parse_narrative("I am not able to help with that.").is_empty()
    assert parse_narrative("").is_empty()


def test_apply_overrides_leaves_base_untouched():
    base = _base_report()
    original_position = base.trend_analysis.market_position
    original_threats = list(base.swot_analysis.threats)

    enhanced = apply_overrides(base, parse_narrative(FULL_ANSWER))

    assert enhanced is not base
    assert base.trend_analysis.market_position == original_position
    assert base.swot_analysis.threats == original_threats
    assert enhanced.investment_recommendation.reasoning == "Solid margins and a growing client base."
    assert enhanced.investment_recommendation.rating == base.investment_recommendation.rating
    assert enhanced.key_metrics == base.key_metrics
