"""Assemble a complete FinancialReport from registry data and filed accounts."""
from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Sequence

from brreg_report.domain.models.company import CompanyProfile
from brreg_report.domain.models.financials import (
    ChartData,
    CompetitorAnalysis,
    FinancialReport,
    InvestmentRecommendation,
    KeyMetrics,
    MarketShareSlice,
    SwotAnalysis,
    TrendAnalysis,
    YearlyFinancialSummary,
)
from brreg_report.domain.services import calculations, industry_tables
from brreg_report.domain.services.estimator import Estimator

ESTIMATE_SOURCE_MESSAGE = "Using industry estimates and company registration data"
REAL_SOURCE_MESSAGE = "Using official financial statements"
PARTIAL_SOURCE_MESSAGE = "Using filed balance sheet figures with estimated revenue"

COMPETITOR_THREATS = [
    "Increased competition from international players",
    "Economic uncertainty affecting Norwegian market",
    "Digital transformation and technology disruption",
]
SWOT_WEAKNESSES = [
    "Limited international market presence",
    "Dependency on Norwegian economic conditions",
    "Need for continuous innovation and market adaptation",
]
SWOT_OPPORTUNITIES = [
    "Digital transformation and automation opportunities",
    "Expansion to other Nordic markets",
    "Strategic partnerships and market consolidation",
]
SWOT_THREATS = [
    "Economic downturn affecting domestic demand",
    "Increased regulatory compliance requirements",
    "Rising competition from larger international firms",
]


class ReportSynthesizer:
    """Merge real accounting years with estimator output into one report."""

    def __init__(
        self,
        estimator: Optional[Estimator] = None,
        *,
        growth_calculator: Optional[calculations.GrowthCalculator] = None,
        current_year: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._estimator = estimator or Estimator()
        self._growth = growth_calculator or calculations.GrowthCalculator()
        self._current_year = current_year
        self._logger = logger or logging.getLogger(__name__)

    @property
    def current_year(self) -> int:
        return self._current_year or date.today().year

    def synthesize(
        self,
        profile: CompanyProfile,
        summaries: Sequence[YearlyFinancialSummary],
        data_source_message: str = ESTIMATE_SOURCE_MESSAGE,
    ) -> FinancialReport:
        current_year = self.current_year
        summaries = list(summaries)
        latest = summaries[0] if summaries else None
        code = profile.industry_code
        industry_name = profile.industry_label
        legal_form = profile.legal_form
        location = profile.location

        has_real = latest is not None and latest.revenue is not None
        if has_real:
            revenue = latest.revenue
            employees = self._estimator.resolve_employees(
                latest.employees or profile.employees or None
            )
            self._logger.info(
                "Using filed accounts from %s for %s", latest.year, profile.organization_number
            )
        else:
            estimate = self._estimator.estimate(profile.employees, code, profile.vat_registered)
            revenue = estimate.revenue
            employees = estimate.employees
            self._logger.info(
                "No usable revenue on file for %s; using industry estimates",
                profile.organization_number,
            )

        industry_growth = industry_tables.growth_rate_percent(code)
        actual_growth = self._growth.calculate(summaries)
        effective_growth = actual_growth if actual_growth is not None else industry_growth
        market_share = self._estimator.market_share(employees, code)

        provenance = (
            f" ({latest.year} financials)" if has_real else f" ({data_source_message.lower()})"
        )
        key_metrics = self._key_metrics(
            profile, latest, revenue, employees, has_real, current_year
        )

        return FinancialReport(
            company_name=profile.name,
            organization_number=profile.organization_number,
            key_metrics=key_metrics,
            trend_analysis=TrendAnalysis(
                growth_rate=effective_growth,
                market_position=(
                    f"{legal_form.lower()} operating in the {industry_name.lower()} sector "
                    f"with {employees} employees in {location}{provenance}"
                ),
                future_outlook=(
                    f"{'Based on recent financial performance' if has_real else 'Based on industry analysis and company profile'}"
                    f", projected {effective_growth}% annual growth in the Norwegian "
                    f"{industry_name.lower()} market"
                ),
            ),
            competitor_analysis=CompetitorAnalysis(
                market_share=market_share,
                competitive_advantage=(
                    f"Established Norwegian {legal_form.lower()} with "
                    f"{'documented financial performance' if has_real else 'strong market positioning'}"
                    f" in {industry_name.lower()}"
                ),
                threats=list(COMPETITOR_THREATS),
            ),
            swot_analysis=SwotAnalysis(
                strengths=[
                    f"Established {legal_form.lower()} with {employees} employees"
                    f"{' and proven financial track record' if has_real else ''}",
                    f"Specialized expertise in {industry_name.lower()}",
                    "VAT registered with full commercial operations"
                    if profile.vat_registered
                    else "Streamlined business structure",
                ],
                weaknesses=list(SWOT_WEAKNESSES),
                opportunities=list(SWOT_OPPORTUNITIES),
                threats=list(SWOT_THREATS),
            ),
            investment_recommendation=InvestmentRecommendation(
                rating=self._estimator.rating(
                    employees, industry_growth, profile.vat_registered, has_real_data=has_real
                ),
                target_price=self._estimator.target_price(revenue, code),
                reasoning=(
                    f"{legal_form} with {employees} employees showing "
                    f"{'documented' if has_real else 'estimated'} performance in the Norwegian "
                    f"{industry_name.lower()} sector"
                ),
                risk_level=self._estimator.risk_level(
                    employees, industry_growth, has_real_data=has_real
                ),
            ),
            chart_data=ChartData(
                revenue=calculations.revenue_series(
                    summaries, revenue, effective_growth, current_year
                ),
                employees=calculations.employee_series(summaries, employees, current_year),
                profit=calculations.profit_series(summaries),
                market_share=_market_share_slices(market_share),
            ),
            data_source_message=data_source_message,
            generated_at=date.today().isoformat(),
        )

    @staticmethod
    def _key_metrics(
        profile: CompanyProfile,
        latest: Optional[YearlyFinancialSummary],
        revenue: float,
        employees: int,
        has_real: bool,
        current_year: int,
    ) -> KeyMetrics:
        metrics = KeyMetrics(
            revenue=revenue,
            employees=employees,
            founded_year=profile.founded_year(current_year),
            industry=profile.industry_label,
            legal_form=profile.legal_form,
            registration_date=profile.registration_date or "Unknown",
            vat_registered=profile.vat_registered,
            location=profile.location,
            has_real_financial_data=has_real,
        )
        if latest is None:
            return metrics
        # Balance-sheet figures are reported whenever a filing exists.
        metrics.profit = latest.profit
        metrics.operating_profit = latest.operating_profit
        metrics.total_assets = latest.total_assets
        metrics.equity = latest.equity
        metrics.debt = latest.debt
        metrics.current_assets = latest.current_assets
        metrics.fixed_assets = latest.fixed_assets
        metrics.financial_income = latest.financial_income
        metrics.financial_costs = latest.financial_costs
        metrics.company_size = latest.company_size
        metrics.is_parent_company = latest.is_parent_company
        if has_real:
            metrics.financial_data_year = latest.year
            metrics.currency = latest.currency
        return metrics


def _market_share_slices(market_share: float) -> List[MarketShareSlice]:
    return [
        MarketShareSlice(category="Company", value=market_share),
        MarketShareSlice(category="Competitors", value=calculations.round1(100 - market_share)),
    ]
