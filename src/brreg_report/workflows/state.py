"""Workflow state definitions shared by LangGraph nodes."""
from __future__ import annotations

from typing import Dict, List, Optional, TypedDict

from brreg_report.domain.models.company import CompanyProfile
from brreg_report.domain.models.financials import FinancialReport, YearlyFinancialSummary


class ReportState(TypedDict, total=False):
    query: str
    report_date: str

    company: Optional[CompanyProfile]
    summaries: List[YearlyFinancialSummary]
    has_accounting_data: bool
    data_source_message: str

    base_report: Optional[FinancialReport]
    report: Optional[FinancialReport]
    enhanced: bool

    charts: List[Dict[str, str]]
    markdown_report: Optional[str]
    stage_order: List[str]

    logs: List[str]
    errors: List[str]
