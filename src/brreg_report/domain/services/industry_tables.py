"""Industry lookup tables keyed by the two-digit NACE prefix (næringskode).

Each table maps a sector prefix to one scalar factor; unknown or malformed
codes resolve to the documented default and never raise.
"""
from __future__ import annotations

from typing import Dict, Optional

DEFAULT_REVENUE_MULTIPLIER = 1.2
DEFAULT_GROWTH_RATE_PERCENT = 6.5
DEFAULT_VALUATION_MULTIPLE = 1.8
DEFAULT_CONCENTRATION_FACTOR = 1.0

REVENUE_MULTIPLIERS: Dict[str, float] = {
    "62": 2.2,  # Information technology
    "63": 2.0,  # Information services
    "64": 2.5,  # Financial services
    "65": 2.3,  # Insurance
    "70": 1.8,  # Management consulting
    "71": 1.6,  # Architecture and engineering
    "72": 2.1,  # Scientific research
    "47": 1.1,  # Retail
    "46": 1.2,  # Wholesale
    "41": 1.4,  # Construction
    "42": 1.3,  # Civil engineering
    "86": 1.0,  # Healthcare
    "85": 0.9,  # Education
    "56": 1.1,  # Food service
    "68": 1.5,  # Real estate
    "35": 1.7,  # Electricity, gas, steam
    "49": 1.3,  # Land transport
    "52": 1.4,  # Warehousing and logistics
}

GROWTH_RATES_PERCENT: Dict[str, float] = {
    "62": 15.2,
    "63": 12.8,
    "64": 7.5,
    "65": 6.2,
    "70": 9.8,
    "71": 6.5,
    "72": 11.2,
    "47": 4.2,
    "46": 5.1,
    "41": 6.8,
    "42": 5.9,
    "86": 3.8,
    "85": 2.9,
    "56": 4.5,
    "68": 7.2,
    "35": 8.5,
    "49": 5.2,
    "52": 6.1,
}

VALUATION_MULTIPLES: Dict[str, float] = {
    "62": 3.5,
    "63": 3.2,
    "64": 2.8,
    "65": 2.5,
    "70": 2.2,
    "71": 1.8,
    "72": 2.5,
    "47": 1.2,
    "46": 1.4,
    "41": 1.6,
    "42": 1.5,
    "86": 1.8,
    "85": 1.5,
    "56": 1.3,
    "68": 2.0,
    "35": 2.3,
    "49": 1.7,
    "52": 1.9,
}

# >1 means a fragmented market where share is easier to win, <1 concentrated.
CONCENTRATION_FACTORS: Dict[str, float] = {
    "62": 0.8,
    "63": 0.9,
    "64": 0.3,
    "65": 0.4,
    "70": 1.2,
    "71": 1.0,
    "72": 1.1,
    "47": 0.7,
    "46": 0.8,
    "41": 1.0,
    "42": 0.9,
    "86": 0.6,
    "85": 0.5,
    "56": 1.1,
    "68": 0.9,
    "35": 0.4,
    "49": 0.8,
    "52": 0.9,
}


def industry_prefix(industry_code: Optional[str]) -> str:
    """Return the two-character sector prefix, or an empty string."""
    if not isinstance(industry_code, str):
        return ""
    return industry_code.strip()[:2]


def _lookup(table: Dict[str, float], industry_code: Optional[str], default: float) -> float:
    return table.get(industry_prefix(industry_code), default)


def revenue_multiplier(industry_code: Optional[str]) -> float:
    return _lookup(REVENUE_MULTIPLIERS, industry_code, DEFAULT_REVENUE_MULTIPLIER)


def growth_rate_percent(industry_code: Optional[str]) -> float:
    return _lookup(GROWTH_RATES_PERCENT, industry_code, DEFAULT_GROWTH_RATE_PERCENT)


def valuation_multiple(industry_code: Optional[str]) -> float:
    return _lookup(VALUATION_MULTIPLES, industry_code, DEFAULT_VALUATION_MULTIPLE)


def concentration_factor(industry_code: Optional[str]) -> float:
    return _lookup(CONCENTRATION_FACTORS, industry_code, DEFAULT_CONCENTRATION_FACTOR)
