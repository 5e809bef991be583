"""LangGraph node resolving the query to a registered company."""
from __future__ import annotations

from brreg_report.workflows.context import WorkflowContext
from brreg_report.workflows.state import ReportState


def run(state: ReportState, context: WorkflowContext) -> ReportState:
    logs = state.setdefault("logs", [])
    query = (state.get("query") or "").strip()

    logs.append(f"CompanyLookup -> resolving '{query}'")
    # Lookup failures propagate: there is no report without a company.
    profile = context.brreg.lookup(query)
    state["company"] = profile
    logs.append(
        f"CompanyLookup -> {profile.name} ({profile.organization_number}), "
        f"{profile.industry_label}, {profile.location}"
    )
    return state
