"""Domain service layer providing financial calculations.

This module implements:
- Half-up rounding helpers shared by the estimator and synthesizer
- Compound annual revenue growth from filed accounts (pandas-based)
- Chart series reconciliation of real and estimated points over a trailing window

Where a value cannot be computed (too few points, zero base) the result is ``None``.
"""
from __future__ import annotations

import math
from typing import Dict, List, Optional, Sequence

import pandas as pd

from brreg_report.domain.models.financials import ChartPoint, YearlyFinancialSummary

TRAILING_WINDOW_YEARS = 5
EMPLOYEE_GROWTH_RATE = 0.05


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with halves going toward positive infinity (2.5 -> 3, -2.5 -> -2)."""
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def round1(value: float) -> float:
    return round_half_up(value, 1)


def round_int(value: float) -> int:
    return int(round_half_up(value))


class GrowthCalculator:
    """Compute compound annual revenue growth from filed accounts."""

    def calculate(self, summaries: Sequence[YearlyFinancialSummary]) -> Optional[float]:
        """Return CAGR in percent (one decimal) between oldest and newest revenue years."""
        frame = _revenue_frame(summaries)
        if len(frame) < 2:
            return None
        oldest = frame.iloc[0]
        newest = frame.iloc[-1]
        span = int(newest["year"]) - int(oldest["year"])
        start_val = float(oldest["revenue"])
        end_val = float(newest["revenue"])
        if span == 0 or start_val == 0:
            return None
        ratio = end_val / start_val
        if ratio < 0:
            # A sign flip has no real-valued compound rate.
            return None
        return round1((ratio ** (1.0 / span) - 1.0) * 100.0)


def _revenue_frame(summaries: Sequence[YearlyFinancialSummary]) -> pd.DataFrame:
    rows = [{"year": s.year, "revenue": s.revenue} for s in summaries]
    frame = pd.DataFrame(rows, columns=["year", "revenue"])
    if frame.empty:
        return frame
    frame = frame.dropna(subset=["revenue"])
    # Input is newest-first; keep the first filing seen for a year.
    frame = frame.drop_duplicates(subset="year", keep="first")
    return frame.sort_values("year").reset_index(drop=True)


def trailing_years(current_year: int, window: int = TRAILING_WINDOW_YEARS) -> List[int]:
    return [current_year - offset for offset in range(window - 1, -1, -1)]


def reconcile_series(
    real_points: Dict[int, float],
    current_value: float,
    annual_growth: float,
    current_year: int,
    *,
    floor: Optional[float] = None,
) -> List[ChartPoint]:
    """Merge real points inside the trailing window with backfilled estimates.

    ``annual_growth`` is a fraction (0.05 == 5 %). Estimates compound backward
    from ``current_value`` so the current year carries ``current_value`` itself.
    A year with a real point is never overwritten by an estimate.
    """
    years = trailing_years(current_year)
    last_offset = len(years) - 1
    points: List[ChartPoint] = []
    for offset, year in enumerate(years):
        if year in real_points:
            points.append(ChartPoint(year=year, value=real_points[year], is_real=True))
            continue
        base = 1.0 + annual_growth
        if base > 0:
            estimate = round_int(current_value * math.pow(base, offset - last_offset))
        else:
            # Total decline: nothing to compound back from.
            estimate = round_int(current_value)
        if floor is not None:
            estimate = max(floor, estimate)
        points.append(ChartPoint(year=year, value=estimate, is_real=False))
    return sorted(points, key=lambda p: p.year)


def real_points_by_year(
    summaries: Sequence[YearlyFinancialSummary], attribute: str
) -> Dict[int, float]:
    """Collect non-null ``attribute`` values keyed by year (newest filing wins)."""
    points: Dict[int, float] = {}
    for summary in summaries:
        value = getattr(summary, attribute)
        if value is None or summary.year in points:
            continue
        points[summary.year] = value
    return points


def revenue_series(
    summaries: Sequence[YearlyFinancialSummary],
    current_revenue: float,
    growth_rate_percent: float,
    current_year: int,
) -> List[ChartPoint]:
    return reconcile_series(
        real_points_by_year(summaries, "revenue"),
        current_revenue,
        growth_rate_percent / 100.0,
        current_year,
    )


def employee_series(
    summaries: Sequence[YearlyFinancialSummary],
    current_employees: int,
    current_year: int,
) -> List[ChartPoint]:
    return reconcile_series(
        real_points_by_year(summaries, "employees"),
        current_employees,
        EMPLOYEE_GROWTH_RATE,
        current_year,
        floor=1,
    )


def profit_series(summaries: Sequence[YearlyFinancialSummary]) -> List[ChartPoint]:
    """Real profit points only; profit is never estimated."""
    points = real_points_by_year(summaries, "profit")
    return [ChartPoint(year=year, value=value, is_real=True) for year, value in sorted(points.items())]
