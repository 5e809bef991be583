"""CLI command definitions for the company report generator."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from config import Config
from brreg_report.infrastructure.errors import (
    CompanyNotFoundError,
    RegistryTransportError,
    UpstreamError,
)
from brreg_report.infrastructure.registry.brreg_client import BrregClient
from brreg_report.settings.loader import load_settings
from brreg_report.utils.logging import configure_logging
from brreg_report.workflows.graph import ReportWorkflow
from brreg_report.workflows.state import ReportState

console = Console()
app = typer.Typer(help="Generate financial analysis reports for Norwegian companies from the terminal.")


@dataclass
class AppContext:
    """Holds reusable process-wide objects for CLI commands."""

    config: Config


def _init_context(
    debug_override: Optional[bool] = None, output_dir: Optional[Path] = None
) -> AppContext:
    """Create a context with configuration and logging."""
    config = load_settings(debug_override, output_dir=output_dir)
    configure_logging(debug=config.debug)
    return AppContext(config=config)


def _fail(message: str) -> None:
    console.print(f"[bold red]{message}[/bold red]")
    raise typer.Exit(code=1)


def _require_query(query: str) -> str:
    cleaned = (query or "").strip()
    if not cleaned:
        _fail("Error: query is required.")
    return cleaned


@app.callback()
def main_callback(
    ctx: typer.Context,
    debug: Optional[bool] = typer.Option(
        None,
        "--debug/--no-debug",
        help="Temporarily toggle verbose logging without touching environment variables.",
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", help="Directory for reports and charts (overrides OUTPUT_DIR)."
    ),
) -> None:
    """Attach the application context to Typer."""
    ctx.obj = _init_context(debug_override=debug, output_dir=output_dir)


@app.command()
def search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Company name fragment."),
    size: Optional[int] = typer.Option(None, "--size", min=1, help="Maximum number of suggestions."),
) -> None:
    """List registered companies whose name matches QUERY."""
    context: AppContext = ctx.obj
    query = _require_query(query)
    config = context.config
    client = BrregClient(
        config.brreg_base_url,
        user_agent=config.http_user_agent,
        timeout=config.http_timeout,
        page_size=config.search_page_size,
    )
    try:
        profiles = client.search(query, size=size)
    except RegistryTransportError as exc:
        _fail(f"Company registry unreachable: {exc.detail}")
    except UpstreamError as exc:
        _fail(f"Company registry error: {exc}")
    finally:
        client.close()

    if not profiles:
        console.print(f"[yellow]No companies match '{query}'.[/yellow]")
        return

    table = Table(title=f"Companies matching '{query}'")
    table.add_column("Org. nr", style="cyan")
    table.add_column("Name")
    table.add_column("Industry")
    table.add_column("Employees", justify="right")
    table.add_column("Location")
    for profile in profiles:
        table.add_row(
            profile.organization_number,
            profile.name,
            profile.industry_label,
            str(profile.employees) if profile.employees is not None else "-",
            profile.location,
        )
    console.print(table)


@app.command()
def generate(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Company name or 9-digit organization number."),
    emit_json: bool = typer.Option(False, "--json", help="Persist the report as camelCase JSON."),
    markdown_path: Optional[Path] = typer.Option(
        None,
        "--markdown",
        help="Optional custom path for the rendered Markdown report.",
    ),
    no_enhance: bool = typer.Option(
        False, "--no-enhance", help="Skip the text-generation narrative step."
    ),
) -> None:
    """Run the LangGraph workflow for a single company and present the outcome."""
    context: AppContext = ctx.obj
    query = _require_query(query)
    config = context.config
    if no_enhance:
        config = dataclasses.replace(config, enhance_narrative=False)
    config.ensure_directories()

    console.rule(f"Generating report for {query}")
    workflow = ReportWorkflow(config=config)
    try:
        with console.status("[bold cyan]Running workflow..."):
            result: ReportState = workflow.run(query)
    except CompanyNotFoundError:
        _fail(f"Company not found: no registered company matches '{query}'.")
    except RegistryTransportError as exc:
        _fail(f"Company registry unreachable: {exc.detail}")
    except UpstreamError as exc:
        _fail(f"Company registry error: {exc}")
    finally:
        workflow.close()

    if result.get("errors"):
        console.print("[bold yellow]Workflow completed with warnings:[/bold yellow]")
        for issue in result["errors"]:
            console.print(f"- {issue}")
    else:
        console.print("[bold green]Workflow completed successfully.[/bold green]")

    _print_run_summary(result)

    orgnr = result["report"].organization_number
    if emit_json:
        target = config.output_dir / f"{orgnr}.json"
        workflow.persist_report(result, target)
        console.print(f"JSON report saved to {target}")

    if result.get("markdown_report"):
        output_md = markdown_path or config.output_dir / f"{orgnr}.md"
        workflow.persist_markdown(result["markdown_report"], output_md)
        console.print(f"Markdown report available at {output_md}")


@app.command()
def plan(ctx: typer.Context) -> None:
    """Display the high-level workflow path for quick operator reference."""
    context: AppContext = ctx.obj
    workflow = ReportWorkflow(config=dataclasses.replace(context.config, enhance_narrative=False))
    table = Table(title="Workflow Stages")
    table.add_column("Step", style="cyan")
    table.add_column("Description")

    for idx, step in enumerate(workflow.describe_stages(), start=1):
        table.add_row(str(idx), step)
    workflow.close()

    console.print(table)


def _print_run_summary(state: ReportState) -> None:
    """Pretty-print a short run summary for operators."""
    report = state["report"]
    metrics = report.key_metrics
    recommendation = report.investment_recommendation

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Key")
    table.add_column("Value")

    table.add_row("Company", f"{report.company_name} ({report.organization_number})")
    table.add_row("Report Date", state.get("report_date") or "N/A")
    table.add_row("Data Source", report.data_source_message)
    table.add_row("Revenue", f"{metrics.revenue:,.0f} {metrics.currency}")
    table.add_row("Employees", str(metrics.employees))
    table.add_row("Growth Rate", f"{report.trend_analysis.growth_rate}%")
    table.add_row("Market Share", f"{report.competitor_analysis.market_share}%")
    table.add_row("Rating", recommendation.rating.value)
    table.add_row("Risk", recommendation.risk_level.value)
    table.add_row("Narrative", "model-enhanced" if state.get("enhanced") else "synthesized")
    table.add_row("Charts", str(len(state.get("charts") or [])))
    table.add_row("Errors", str(len(state.get("errors", []))))

    console.print(table)
