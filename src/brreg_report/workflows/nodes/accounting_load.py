"""Load filed annual accounts; fall back to estimate mode on any registry issue."""
from __future__ import annotations

import logging

from brreg_report.domain.services.synthesizer import PARTIAL_SOURCE_MESSAGE, REAL_SOURCE_MESSAGE
from brreg_report.infrastructure.errors import NoAccountingDataError, UpstreamError
from brreg_report.workflows.context import WorkflowContext
from brreg_report.workflows.state import ReportState

logger = logging.getLogger(__name__)

FALLBACK_SOURCE_MESSAGE = "Analysis will use company registration data and industry estimates"


def run(state: ReportState, context: WorkflowContext) -> ReportState:
    logs = state.setdefault("logs", [])
    errors = state.setdefault("errors", [])
    profile = state.get("company")
    if profile is None:
        errors.append("AccountingLoad -> no company in state, skipped")
        return _estimate_mode(state)

    orgnr = profile.organization_number
    try:
        summaries = context.accounting.fetch_summaries(
            orgnr, current_year=context.synthesizer.current_year
        )
    except NoAccountingDataError as exc:
        logs.append(f"AccountingLoad -> {exc.detail}; switching to estimates")
        return _estimate_mode(state)
    except UpstreamError as exc:
        logger.warning("Accounting data unavailable for %s: %s", orgnr, exc)
        errors.append(f"AccountingLoad failed: {exc}")
        return _estimate_mode(state)

    state["summaries"] = summaries
    state["has_accounting_data"] = True
    years = ", ".join(str(s.year) for s in summaries)
    logs.append(f"AccountingLoad -> {len(summaries)} filed year(s): {years}")
    if summaries[0].revenue is None:
        # Latest filing has no revenue line; the synthesizer estimates it.
        state["data_source_message"] = PARTIAL_SOURCE_MESSAGE
        logs.append(f"AccountingLoad -> {summaries[0].year} filing has no revenue")
    else:
        state["data_source_message"] = REAL_SOURCE_MESSAGE
    return state


def _estimate_mode(state: ReportState) -> ReportState:
    state["summaries"] = []
    state["has_accounting_data"] = False
    state["data_source_message"] = FALLBACK_SOURCE_MESSAGE
    return state
