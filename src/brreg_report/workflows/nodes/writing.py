"""LangGraph node responsible for final Markdown assembly."""
from __future__ import annotations

from datetime import date
from itertools import zip_longest
from typing import Any, Dict, List

from brreg_report.domain.models.financials import FinancialReport
from brreg_report.reports.renderer import ReportRenderer
from brreg_report.workflows.context import WorkflowContext
from brreg_report.workflows.state import ReportState


def _pairs(left: List[str], right: List[str]) -> List[tuple]:
    return list(zip_longest(left, right, fillvalue=""))


def _series_rows(report: FinancialReport) -> List[Dict[str, Any]]:
    employees = {p.year: p.value for p in report.chart_data.employees}
    return [
        {
            "year": point.year,
            "revenue": point.value,
            "employees": int(employees.get(point.year, 0)),
            "is_real": point.is_real,
        }
        for point in report.chart_data.revenue
    ]


def run(state: ReportState, context: WorkflowContext) -> ReportState:
    logs = state.setdefault("logs", [])
    errors = state.setdefault("errors", [])

    report = state.get("report")
    if report is None:
        errors.append("WritingAgent -> no report to render")
        return state

    logs.append("WritingAgent -> render Markdown output")
    renderer = ReportRenderer()
    swot = report.swot_analysis
    render_context = {
        "report": report,
        "report_date": state.get("report_date") or date.today().isoformat(),
        "enhanced": bool(state.get("enhanced")),
        "swot_rows": {
            "top": _pairs(swot.strengths, swot.weaknesses),
            "bottom": _pairs(swot.opportunities, swot.threats),
        },
        "series_rows": _series_rows(report),
        "charts": state.get("charts") or [],
    }

    try:
        state["markdown_report"] = renderer.render(render_context)
    except Exception as exc:  # pylint: disable=broad-except
        errors.append(f"Markdown render failed: {exc}")
    return state
