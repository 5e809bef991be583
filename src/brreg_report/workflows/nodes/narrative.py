"""LangGraph node that lets a text-generation model rewrite narrative fields."""
from __future__ import annotations

from brreg_report.domain.services.enhancer import NarrativeEnhancer
from brreg_report.workflows.context import WorkflowContext
from brreg_report.workflows.nodes.llm_clean import CleaningGenerator
from brreg_report.workflows.state import ReportState


def run(state: ReportState, context: WorkflowContext) -> ReportState:
    logs = state.setdefault("logs", [])
    base = state.get("base_report")
    profile = state.get("company")
    state["enhanced"] = False

    if base is None or profile is None:
        logs.append("NarrativeAgent -> skipped (no base report)")
        return state
    if not context.config.enhance_narrative:
        logs.append("NarrativeAgent -> skipped (enhancement disabled)")
        return state

    enhancer = context.enhancer
    if enhancer is None and context.generator is not None:
        enhancer = NarrativeEnhancer(CleaningGenerator(context.generator))
        context.enhancer = enhancer
    if enhancer is None:
        logs.append("NarrativeAgent -> skipped (text generation not configured)")
        return state

    logs.append("NarrativeAgent -> requesting narrative from text generation backend")
    enhanced = enhancer.enhance(
        base,
        profile,
        state.get("summaries") or [],
        state.get("data_source_message") or "",
    )
    state["report"] = enhanced
    state["enhanced"] = enhanced is not base
    if state["enhanced"]:
        logs.append("NarrativeAgent -> narrative fields updated")
    else:
        logs.append("NarrativeAgent -> kept synthesized narrative")
    return state
