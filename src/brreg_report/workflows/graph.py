"""LangGraph workflow assembly for the end-to-end report pipeline."""
from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from langgraph.graph import END, StateGraph

from config import Config
from brreg_report.domain.services.estimator import Estimator, EstimatorSettings
from brreg_report.domain.services.synthesizer import ReportSynthesizer
from brreg_report.infrastructure.llm.factory import build_text_generator
from brreg_report.infrastructure.registry.accounting_client import AccountingClient
from brreg_report.infrastructure.registry.brreg_client import BrregClient
from brreg_report.workflows import context as context_module
from brreg_report.workflows.blueprint import StageSpec, build_default_stages
from brreg_report.workflows.state import ReportState

logger = logging.getLogger(__name__)


def build_context(config: Config) -> context_module.WorkflowContext:
    """Wire registry clients, estimator and (optionally) a text generator."""
    brreg = BrregClient(
        config.brreg_base_url,
        user_agent=config.http_user_agent,
        timeout=config.http_timeout,
        page_size=config.search_page_size,
    )
    accounting = AccountingClient(
        config.accounting_base_url,
        username=config.accounting_username,
        password=config.accounting_password,
        user_agent=config.http_user_agent,
        timeout=config.http_timeout,
    )

    generator = None
    if config.enhance_narrative:
        try:
            generator = build_text_generator(config)
        except ValueError as exc:
            logger.info("Narrative enhancement disabled: %s", exc)

    return context_module.WorkflowContext(
        config=config,
        brreg=brreg,
        accounting=accounting,
        synthesizer=ReportSynthesizer(Estimator(EstimatorSettings.from_config(config))),
        generator=generator,
    )


class ReportWorkflow:
    """Compose LangGraph nodes into a runnable workflow."""

    def __init__(self, config: Config, context: Optional[context_module.WorkflowContext] = None) -> None:
        self._config = config
        self._context = context or build_context(config)
        self._stages: List[StageSpec] = build_default_stages()
        self._graph = self._build_graph()

    @property
    def context(self) -> context_module.WorkflowContext:
        return self._context

    def _build_graph(self):
        builder = StateGraph(dict)

        if not self._stages:
            raise RuntimeError("Workflow blueprint is empty; cannot build LangGraph.")

        for stage in self._stages:
            builder.add_node(stage.key, self._wrap(stage.handler))

        # Serialize execution in declared stage order to avoid concurrent state writes.
        builder.set_entry_point(self._stages[0].key)
        for current, nxt in zip(self._stages, self._stages[1:]):
            builder.add_edge(current.key, nxt.key)
        builder.add_edge(self._stages[-1].key, END)

        return builder.compile(checkpointer=None)

    def _wrap(self, func: Callable[[ReportState, context_module.WorkflowContext], ReportState]):
        def wrapper(state: Dict[str, Any]) -> Dict[str, Any]:
            return func(state, self._context)

        return wrapper

    def run(self, query: str) -> ReportState:
        """Execute the workflow for a single company name or organization number."""
        cleaned = (query or "").strip()
        if not cleaned:
            raise ValueError("query is required")
        initial_state: ReportState = {
            "query": cleaned,
            "report_date": date.today().isoformat(),
            "logs": [],
            "errors": [],
            "stage_order": [stage.key for stage in self._stages],
        }
        result: ReportState = self._graph.invoke(initial_state)
        return result  # type: ignore[return-value]

    def persist_report(self, state: ReportState, path: Path) -> None:
        """Write the final report as camelCase JSON."""
        report = state.get("report")
        if report is None:
            raise ValueError("Workflow produced no report to persist.")
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(report.to_dict(), indent=2, ensure_ascii=False)
        path.write_text(payload, encoding="utf-8")

    def persist_markdown(self, markdown: str, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(markdown, encoding="utf-8")

    def describe_stages(self) -> List[str]:
        """Return human-readable workflow stage descriptions."""
        return [f"{stage.key}: {stage.description}" for stage in self._stages]

    def close(self) -> None:
        self._context.close()
