"""Chart builder node rendering revenue, headcount, profit and market-share charts."""
from __future__ import annotations

import io
from pathlib import Path
from typing import List

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from brreg_report.domain.models.financials import ChartData
from brreg_report.workflows.context import WorkflowContext
from brreg_report.workflows.state import ReportState

REAL_COLOR = "#38bdf8"
ESTIMATE_COLOR = "#94a3b8"
PIE_COLORS = ["#a855f7", "#e2e8f0"]


def _ensure_output_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def _maybe_save_chart(fig, path: Path, logs, errors, caption: str, charts: List[dict]):
    try:
        buf = io.BytesIO()
        fig.tight_layout()
        fig.savefig(buf, format="png")
        path.write_bytes(buf.getvalue())
        charts.append({"path": str(path), "caption": caption})
        logs.append(f"ChartBuilder -> saved chart to {path}")
    except Exception as exc:  # pylint: disable=broad-except
        errors.append(f"ChartBuilder save failed: {exc}")
    finally:
        plt.close(fig)


def _millions(values):
    return [v / 1_000_000 for v in values]


def run(state: ReportState, context: WorkflowContext) -> ReportState:
    logs = state.setdefault("logs", [])
    errors = state.setdefault("errors", [])
    charts: List[dict] = []

    report = state.get("report")
    if report is None:
        logs.append("ChartBuilder -> no report, skip charts")
        state["charts"] = charts
        return state

    output_dir = Path(context.config.output_dir) / "charts"
    _ensure_output_dir(output_dir)
    orgnr = report.organization_number
    data: ChartData = report.chart_data
    currency = report.key_metrics.currency

    # Revenue bars: filed years vs backfilled estimates
    if data.revenue:
        try:
            years = [str(p.year) for p in data.revenue]
            colors = [REAL_COLOR if p.is_real else ESTIMATE_COLOR for p in data.revenue]
            fig, ax = plt.subplots(figsize=(6.5, 3.5))
            ax.bar(years, _millions(p.value for p in data.revenue), color=colors)
            ax.set_title(f"{report.company_name} Revenue")
            ax.set_ylabel(f"Revenue (M {currency})")
            ax.grid(True, axis="y", linestyle="--", alpha=0.3)
            handles = [
                plt.Rectangle((0, 0), 1, 1, color=REAL_COLOR, label="Filed"),
                plt.Rectangle((0, 0), 1, 1, color=ESTIMATE_COLOR, label="Estimated"),
            ]
            ax.legend(handles=handles)
            chart_path = output_dir / f"{orgnr}_revenue.png"
            _maybe_save_chart(fig, chart_path, logs, errors, "Revenue Development", charts)
        except Exception as exc:  # pylint: disable=broad-except
            errors.append(f"ChartBuilder revenue chart failed: {exc}")

    if data.employees:
        try:
            years = [str(p.year) for p in data.employees]
            fig, ax = plt.subplots(figsize=(6.5, 3.5))
            ax.plot(years, [p.value for p in data.employees], marker="o", color="#22c55e", label="Employees")
            for year, point in zip(years, data.employees):
                if not point.is_real:
                    ax.plot(year, point.value, marker="o", color=ESTIMATE_COLOR)
            ax.set_title(f"{report.company_name} Employees")
            ax.grid(True, linestyle="--", alpha=0.3)
            ax.legend()
            chart_path = output_dir / f"{orgnr}_employees.png"
            _maybe_save_chart(fig, chart_path, logs, errors, "Employee Development", charts)
        except Exception as exc:  # pylint: disable=broad-except
            errors.append(f"ChartBuilder employee chart failed: {exc}")

    # Profit is only ever drawn from filed years
    if data.profit:
        try:
            years = [str(p.year) for p in data.profit]
            values = _millions(p.value for p in data.profit)
            colors = ["#22c55e" if v >= 0 else "#f43f5e" for v in values]
            fig, ax = plt.subplots(figsize=(6.5, 3.5))
            ax.bar(years, values, color=colors)
            ax.axhline(0, color="#94a3b8", linewidth=0.8, linestyle="--", alpha=0.6)
            ax.set_title(f"{report.company_name} Profit")
            ax.set_ylabel(f"Profit (M {currency})")
            chart_path = output_dir / f"{orgnr}_profit.png"
            _maybe_save_chart(fig, chart_path, logs, errors, "Profit", charts)
        except Exception as exc:  # pylint: disable=broad-except
            errors.append(f"ChartBuilder profit chart failed: {exc}")
    else:
        logs.append("ChartBuilder -> no filed profit figures, skip profit chart")

    if data.market_share:
        try:
            fig, ax = plt.subplots(figsize=(4.5, 4.5))
            ax.pie(
                [s.value for s in data.market_share],
                labels=[s.category for s in data.market_share],
                colors=PIE_COLORS,
                autopct="%1.1f%%",
                startangle=90,
            )
            ax.set_title("Estimated Market Share")
            chart_path = output_dir / f"{orgnr}_market_share.png"
            _maybe_save_chart(fig, chart_path, logs, errors, "Market Share", charts)
        except Exception as exc:  # pylint: disable=broad-except
            errors.append(f"ChartBuilder market share chart failed: {exc}")

    state["charts"] = charts
    return state
