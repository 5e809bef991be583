"""Heuristic estimates for companies without filed accounts."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from brreg_report.domain.models.financials import Rating, RiskLevel
from brreg_report.domain.services import industry_tables
from brreg_report.domain.services.calculations import round1, round_int

MARKET_SHARE_FLOOR = 0.1
MARKET_SHARE_CAP = 15.0


@dataclass(frozen=True)
class EstimatorSettings:
    """Replaceable baseline constants for the revenue heuristic."""

    revenue_per_employee: float = 850_000.0
    vat_revenue_multiplier: float = 1.2
    default_employees: int = 10

    @classmethod
    def from_config(cls, config) -> "EstimatorSettings":
        return cls(
            revenue_per_employee=config.revenue_per_employee,
            vat_revenue_multiplier=config.vat_revenue_multiplier,
            default_employees=config.default_employees,
        )


@dataclass(frozen=True)
class Estimate:
    employees: int
    revenue: int
    growth_rate: float
    market_share: float
    target_price: int
    rating: Rating
    risk_level: RiskLevel


class Estimator:
    """Derive revenue, share, valuation, rating and risk from registry attributes."""

    def __init__(self, settings: Optional[EstimatorSettings] = None) -> None:
        self.settings = settings or EstimatorSettings()

    def resolve_employees(self, employees: Optional[int]) -> int:
        if employees is None:
            return self.settings.default_employees
        return max(1, int(employees))

    def estimate(
        self, employees: Optional[int], industry_code: Optional[str], vat_registered: bool
    ) -> Estimate:
        headcount = self.resolve_employees(employees)
        revenue = self.revenue(headcount, industry_code, vat_registered)
        growth = industry_tables.growth_rate_percent(industry_code)
        return Estimate(
            employees=headcount,
            revenue=revenue,
            growth_rate=growth,
            market_share=self.market_share(headcount, industry_code),
            target_price=self.target_price(revenue, industry_code),
            rating=self.rating(headcount, growth, vat_registered, has_real_data=False),
            risk_level=self.risk_level(headcount, growth, has_real_data=False),
        )

    def revenue(self, employees: int, industry_code: Optional[str], vat_registered: bool) -> int:
        base = max(1, employees) * self.settings.revenue_per_employee
        vat = self.settings.vat_revenue_multiplier if vat_registered else 1.0
        return round_int(base * industry_tables.revenue_multiplier(industry_code) * vat)

    @staticmethod
    def market_share(employees: int, industry_code: Optional[str]) -> float:
        base_share = min(MARKET_SHARE_CAP, max(MARKET_SHARE_FLOOR, employees / 500 * 5))
        return round1(base_share * industry_tables.concentration_factor(industry_code))

    @staticmethod
    def target_price(revenue: float, industry_code: Optional[str]) -> int:
        return round_int(revenue * industry_tables.valuation_multiple(industry_code))

    @staticmethod
    def rating(
        employees: int, growth_rate: float, vat_registered: bool, *, has_real_data: bool
    ) -> Rating:
        score = 0
        if employees > 100:
            score += 2
        elif employees > 50:
            score += 1
        elif employees < 5:
            score -= 1

        if growth_rate > 10:
            score += 2
        elif growth_rate > 7:
            score += 1
        elif growth_rate < 3:
            score -= 1

        if vat_registered:
            score += 1
        if has_real_data:
            score += 1

        if score >= 4:
            return Rating.BUY
        if score <= -1:
            return Rating.SELL
        return Rating.HOLD

    @staticmethod
    def risk_level(employees: int, growth_rate: float, *, has_real_data: bool) -> RiskLevel:
        if employees > 100 and growth_rate > 5 and has_real_data:
            return RiskLevel.LOW
        if employees < 10 or growth_rate < 2:
            return RiskLevel.HIGH
        return RiskLevel.MEDIUM
