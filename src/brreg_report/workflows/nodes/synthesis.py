"""Combine registry data, filed accounts and estimates into the base report."""
from __future__ import annotations

from brreg_report.workflows.context import WorkflowContext
from brreg_report.workflows.state import ReportState


def run(state: ReportState, context: WorkflowContext) -> ReportState:
    logs = state.setdefault("logs", [])
    profile = state.get("company")
    if profile is None:
        raise RuntimeError("Synthesis requires a resolved company.")

    summaries = state.get("summaries") or []
    source = state.get("data_source_message")
    if source:
        report = context.synthesizer.synthesize(profile, summaries, data_source_message=source)
    else:
        report = context.synthesizer.synthesize(profile, summaries)

    state["base_report"] = report
    state["report"] = report
    recommendation = report.investment_recommendation
    logs.append(
        "Synthesis -> revenue {:,.0f} {}, growth {}%, rating {}, risk {}".format(
            report.key_metrics.revenue,
            report.key_metrics.currency,
            report.trend_analysis.growth_rate,
            recommendation.rating.value,
            recommendation.risk_level.value,
        )
    )
    return state
