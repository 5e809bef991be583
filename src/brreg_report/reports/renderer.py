"""Report rendering helpers using Jinja2 templates."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"


def format_amount(value: Optional[float], currency: str = "NOK") -> str:
    """Format a currency amount, switching to millions above one million."""
    if value is None:
        return "N/A"
    if abs(value) >= 1_000_000:
        return f"{value / 1_000_000:,.1f}M {currency}"
    return f"{value:,.0f} {currency}"


def format_percent(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    return f"{value:.1f}%"


def yes_no(value: Optional[bool]) -> str:
    if value is None:
        return "Unknown"
    return "Yes" if value else "No"


@dataclass
class ReportRenderer:
    """Render reports from structured workflow outputs."""

    template_dir: Path = TEMPLATE_DIR
    template_name: str = "report.md.j2"

    def __post_init__(self) -> None:
        self._env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._env.filters["amount"] = format_amount
        self._env.filters["percent"] = format_percent
        self._env.filters["yes_no"] = yes_no

    def render(self, context: Dict[str, Any]) -> str:
        """Render the configured template with supplied context."""
        return self.render_template(self.template_name, context)

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        template = self._env.get_template(template_name)
        return template.render(**context)
