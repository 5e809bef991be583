"""Domain models describing the financial data exchanged between services."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

SCHEMA_VERSION = "1.0"


class CompanySize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class Rating(str, Enum):
    BUY = "BUY"
    HOLD = "HOLD"
    SELL = "SELL"


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


@dataclass(frozen=True)
class YearlyFinancialSummary:
    """One filed annual account, flattened from the accounting registry."""

    year: int
    currency: str = "NOK"
    revenue: Optional[float] = None
    profit: Optional[float] = None
    operating_profit: Optional[float] = None
    total_assets: Optional[float] = None
    equity: Optional[float] = None
    debt: Optional[float] = None
    current_assets: Optional[float] = None
    fixed_assets: Optional[float] = None
    financial_income: Optional[float] = None
    financial_costs: Optional[float] = None
    employees: Optional[int] = None
    company_size: CompanySize = CompanySize.MEDIUM
    is_parent_company: bool = False
    accounting_type: str = "unknown"

    @property
    def has_real_data(self) -> bool:
        return any(
            value is not None for value in (self.revenue, self.profit, self.total_assets)
        )


@dataclass
class KeyMetrics:
    revenue: float
    employees: int
    founded_year: int
    industry: str
    legal_form: str
    registration_date: str
    vat_registered: bool
    location: str
    has_real_financial_data: bool
    currency: str = "NOK"
    profit: Optional[float] = None
    operating_profit: Optional[float] = None
    total_assets: Optional[float] = None
    equity: Optional[float] = None
    debt: Optional[float] = None
    current_assets: Optional[float] = None
    fixed_assets: Optional[float] = None
    financial_income: Optional[float] = None
    financial_costs: Optional[float] = None
    financial_data_year: Optional[int] = None
    company_size: Optional[CompanySize] = None
    is_parent_company: Optional[bool] = None


@dataclass
class TrendAnalysis:
    growth_rate: float
    market_position: str
    future_outlook: str


@dataclass
class CompetitorAnalysis:
    market_share: float
    competitive_advantage: str
    threats: List[str] = field(default_factory=list)


@dataclass
class SwotAnalysis:
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    opportunities: List[str] = field(default_factory=list)
    threats: List[str] = field(default_factory=list)


@dataclass
class InvestmentRecommendation:
    rating: Rating
    target_price: float
    reasoning: str
    risk_level: RiskLevel


@dataclass(frozen=True)
class ChartPoint:
    year: int
    value: float
    is_real: bool


@dataclass(frozen=True)
class MarketShareSlice:
    category: str
    value: float


@dataclass
class ChartData:
    revenue: List[ChartPoint] = field(default_factory=list)
    employees: List[ChartPoint] = field(default_factory=list)
    profit: List[ChartPoint] = field(default_factory=list)
    market_share: List[MarketShareSlice] = field(default_factory=list)


@dataclass
class FinancialReport:
    """Synthesized report handed to the presentation layer."""

    company_name: str
    organization_number: str
    key_metrics: KeyMetrics
    trend_analysis: TrendAnalysis
    competitor_analysis: CompetitorAnalysis
    swot_analysis: SwotAnalysis
    investment_recommendation: InvestmentRecommendation
    chart_data: ChartData
    data_source_message: str = ""
    generated_at: Optional[str] = None
    schema_version: str = SCHEMA_VERSION

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase mapping consumed by dashboards."""
        return _camelize(asdict(self))


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _camelize(value: Any) -> Any:
    if isinstance(value, dict):
        return {_camel(str(k)): _camelize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_camelize(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    return value
