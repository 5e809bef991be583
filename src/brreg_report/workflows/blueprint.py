"""Workflow blueprint describing report stages and their handlers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, TYPE_CHECKING

from brreg_report.workflows.nodes import (
    accounting_load,
    chart_builder,
    company_lookup,
    narrative,
    synthesis,
    writing,
)

if TYPE_CHECKING:
    from brreg_report.workflows.context import WorkflowContext
    from brreg_report.workflows.state import ReportState


@dataclass
class StageSpec:
    """Single LangGraph stage definition."""

    key: str
    description: str
    handler: Callable[["ReportState", "WorkflowContext"], "ReportState"]
    depends_on: List[str] = field(default_factory=list)


def build_default_stages() -> List[StageSpec]:
    """Return the ordered stages for the report workflow."""
    return [
        StageSpec(
            key="lookup_company",
            description="Resolve name or organization number against Enhetsregisteret.",
            handler=company_lookup.run,
        ),
        StageSpec(
            key="load_accounting",
            description="Fetch and normalize filed accounts; fall back to estimate mode.",
            handler=accounting_load.run,
            depends_on=["lookup_company"],
        ),
        StageSpec(
            key="synthesize",
            description="Merge filed years with industry estimates into the base report.",
            handler=synthesis.run,
            depends_on=["load_accounting"],
        ),
        StageSpec(
            key="enhance_narrative",
            description="Best-effort rewrite of narrative and SWOT fields by a text-generation model.",
            handler=narrative.run,
            depends_on=["synthesize"],
        ),
        StageSpec(
            key="chart_builder",
            description="Render revenue, employee, profit and market-share charts.",
            handler=chart_builder.run,
            depends_on=["enhance_narrative"],
        ),
        StageSpec(
            key="writing",
            description="Render the final Markdown report.",
            handler=writing.run,
            depends_on=["enhance_narrative", "chart_builder"],
        ),
    ]
