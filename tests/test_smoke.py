"""End-to-end workflow runs against mocked registries."""
from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import httpx
import pytest

from config import Config
from brreg_report.domain.services.synthesizer import (
    PARTIAL_SOURCE_MESSAGE,
    REAL_SOURCE_MESSAGE,
    ReportSynthesizer,
)
from brreg_report.infrastructure.errors import CompanyNotFoundError, GenerationError
from brreg_report.infrastructure.registry.accounting_client import AccountingClient
from brreg_report.infrastructure.registry.brreg_client import BrregClient
from brreg_report.workflows.context import WorkflowContext
from brreg_report.workflows.graph import ReportWorkflow
from brreg_report.workflows.nodes.accounting_load import FALLBACK_SOURCE_MESSAGE

ENTITY = {
    "organisasjonsnummer": "912345678",
    "navn": "FJORDKODE AS",
    "organisasjonsform": {"kode": "AS", "beskrivelse": "Aksjeselskap"},
    "naeringskode1": {"kode": "62.010", "beskrivelse": "Programmeringstjenester"},
    "antallAnsatte": 20,
    "stiftelsesdato": "2012-03-01",
    "registrertIMvaregisteret": True,
    "forretningsadresse": {"poststed": "BERGEN", "kommune": "BERGEN"},
}

ACCOUNTS = [
    {
        "id": 10,
        "virksomhet": {"organisasjonsnummer": "912345678"},
        "regnskapsperiode": {"tilDato": f"{year}-12-31"},
        "valuta": "NOK",
        "resultatregnskapResultat": {
            "aarsresultat": profit,
            "driftsresultat": {"driftsinntekter": {"sumDriftsinntekter": revenue}},
        },
    }
    for year, revenue, profit in ((2023, 14_641_000, 1_100_000), (2020, 10_000_000, 400_000))
]

ANSWER = "MARKET_POSITION: A nimble Bergen software house.\n\nSTRENGTHS:\n- Senior developers\n"


class FakeGenerator:
    def __init__(self, answer: str = ANSWER, error: Exception = None) -> None:
        self.answer = answer
        self.error = error
        self.closed = False

    def generate(self, prompt: str) -> str:
        if self.error is not None:
            raise self.error
        return self.answer

    def close(self) -> None:
        self.closed = True


def _company_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("/enheter/912345678"):
        return httpx.Response(200, json=ENTITY)
    if request.url.path.endswith("/enheter"):
        hits = [ENTITY] if "fjord" in request.url.params.get("navn", "").lower() else []
        return httpx.Response(200, json={"_embedded": {"enheter": hits}} if hits else {"page": {}})
    return httpx.Response(404)


def _workflow(tmp_path, accounting_handler, generator=None, **config_overrides) -> ReportWorkflow:
    config = Config(output_dir=tmp_path, **config_overrides)
    config.ensure_directories()
    context = WorkflowContext(
        config=config,
        brreg=BrregClient(config.brreg_base_url, transport=httpx.MockTransport(_company_handler)),
        accounting=AccountingClient(
            config.accounting_base_url, transport=httpx.MockTransport(accounting_handler)
        ),
        synthesizer=ReportSynthesizer(current_year=2024),
        generator=generator,
    )
    return ReportWorkflow(config, context=context)


def test_workflow_stages(tmp_path):
    workflow = _workflow(tmp_path, lambda request: httpx.Response(404))
    stages = workflow.describe_stages()
    assert [s.split(":")[0] for s in stages] == [
        "lookup_company",
        "load_accounting",
        "synthesize",
        "enhance_narrative",
        "chart_builder",
        "writing",
    ]


def test_full_run_with_filed_accounts_and_enhancement(tmp_path):
    generator = FakeGenerator()
    workflow = _workflow(tmp_path, lambda request: httpx.Response(200, json=ACCOUNTS), generator)

    state = workflow.run("912345678")
    report = state["report"]

    assert state["errors"] == []
    assert state["has_accounting_data"] is True
    assert state["enhanced"] is True
    assert report.data_source_message == REAL_SOURCE_MESSAGE
    assert report.key_metrics.has_real_financial_data is True
    assert report.key_metrics.financial_data_year == 2023
    assert date.fromisoformat(report.generated_at)
    assert report.generated_at == state["base_report"].generated_at
    assert "extras" not in state
    assert report.trend_analysis.growth_rate == 13.6
    assert report.trend_analysis.market_position == "A nimble Bergen software house."
    assert report.swot_analysis.strengths == ["Senior developers"]
    assert state["base_report"].trend_analysis.market_position != report.trend_analysis.market_position

    assert len(state["charts"]) == 4
    for chart in state["charts"]:
        assert Path(chart["path"]).parent == tmp_path / "charts"
        assert Path(chart["path"]).exists()

    markdown = state["markdown_report"]
    assert "# FJORDKODE AS (912345678)" in markdown
    assert "Using official financial statements" in markdown
    assert "Senior developers" in markdown

    target = tmp_path / "912345678.json"
    workflow.persist_report(state, target)
    payload = json.loads(target.read_text(encoding="utf-8"))
    assert payload["organizationNumber"] == "912345678"
    assert payload["keyMetrics"]["hasRealFinancialData"] is True

    workflow.close()
    assert generator.closed is True


def test_missing_accounts_switch_to_estimate_mode(tmp_path):
    workflow = _workflow(tmp_path, lambda request: httpx.Response(404))
    state = workflow.run("fjordkode")
    report = state["report"]

    assert state["errors"] == []
    assert state["has_accounting_data"] is False
    assert report.data_source_message == FALLBACK_SOURCE_MESSAGE
    assert report.key_metrics.has_real_financial_data is False
    assert report.key_metrics.revenue == 44_880_000
    assert report.chart_data.profit == []
    assert state["enhanced"] is False
    assert len(state["charts"]) == 3
    assert "(estimate)" in state["markdown_report"]


def test_filing_without_revenue_is_labelled_as_estimated(tmp_path):
    filing = {
        "id": 11,
        "regnskapsperiode": {"tilDato": "2023-12-31"},
        "resultatregnskapResultat": {"aarsresultat": 250_000},
    }
    workflow = _workflow(tmp_path, lambda request: httpx.Response(200, json=[filing]))
    state = workflow.run("912345678")
    report = state["report"]

    assert state["has_accounting_data"] is True
    assert report.data_source_message == PARTIAL_SOURCE_MESSAGE
    assert report.key_metrics.has_real_financial_data is False
    assert report.key_metrics.profit == 250_000
    assert "official financial statements" not in report.trend_analysis.market_position
    assert PARTIAL_SOURCE_MESSAGE.lower() in report.trend_analysis.market_position


def test_accounting_outage_is_absorbed(tmp_path):
    workflow = _workflow(tmp_path, lambda request: httpx.Response(500, text="down"))
    state = workflow.run("912345678")

    assert state["report"].key_metrics.has_real_financial_data is False
    assert any("AccountingLoad failed" in e for e in state["errors"])
    assert state["markdown_report"]


def test_generation_failure_keeps_base_report(tmp_path):
    generator = FakeGenerator(error=GenerationError("text generation", "HTTP 503"))
    workflow = _workflow(tmp_path, lambda request: httpx.Response(404), generator)
    state = workflow.run("912345678")

    assert state["enhanced"] is False
    assert state["report"].to_dict() == state["base_report"].to_dict()


def test_enhancement_can_be_disabled(tmp_path):
    workflow = _workflow(
        tmp_path, lambda request: httpx.Response(404), FakeGenerator(), enhance_narrative=False
    )
    state = workflow.run("912345678")

    assert state["enhanced"] is False
    assert any("enhancement disabled" in line for line in state["logs"])


def test_unknown_company_propagates(tmp_path):
    workflow = _workflow(tmp_path, lambda request: httpx.Response(404))
    with pytest.raises(CompanyNotFoundError):
        workflow.run("ukjent selskap")
    with pytest.raises(ValueError):
        workflow.run("  ")
