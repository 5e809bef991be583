"""Accounting registry payload classification and normalization.

The registry answers in one of three envelopes (bare array, ``_embedded``
list, single record). ``classify_envelope`` resolves the shape once into a
closed set of variants so normalization never probes properties ad hoc.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from brreg_report.domain.models.financials import CompanySize, YearlyFinancialSummary

logger = logging.getLogger(__name__)


# -----------------
# Envelope variants
# -----------------


@dataclass(frozen=True)
class RecordList:
    """Bare JSON array of accounting records."""

    records: Tuple[Any, ...]


@dataclass(frozen=True)
class EmbeddedRecords:
    """HAL-style object carrying ``_embedded.regnskap``."""

    records: Tuple[Any, ...]


@dataclass(frozen=True)
class SingleRecord:
    """A lone accounting record object."""

    record: Mapping[str, Any]


@dataclass(frozen=True)
class UnrecognizedEnvelope:
    """Anything else; keeps the top-level keys for diagnostics."""

    keys: Tuple[str, ...] = field(default_factory=tuple)
    type_name: str = "unknown"


AccountingEnvelope = Union[RecordList, EmbeddedRecords, SingleRecord, UnrecognizedEnvelope]


def classify_envelope(payload: Any) -> AccountingEnvelope:
    """Resolve a raw registry response into one envelope variant."""
    if isinstance(payload, list):
        return RecordList(records=tuple(payload))
    if isinstance(payload, Mapping):
        embedded = payload.get("_embedded")
        if isinstance(embedded, Mapping) and isinstance(embedded.get("regnskap"), list):
            return EmbeddedRecords(records=tuple(embedded["regnskap"]))
        if payload.get("id") is not None and payload.get("virksomhet") is not None:
            return SingleRecord(record=payload)
        return UnrecognizedEnvelope(keys=tuple(str(k) for k in payload.keys()), type_name="object")
    return UnrecognizedEnvelope(type_name=type(payload).__name__)


def envelope_records(envelope: AccountingEnvelope) -> List[Any]:
    """Return the raw records carried by an envelope (empty when unrecognized)."""
    if isinstance(envelope, (RecordList, EmbeddedRecords)):
        return list(envelope.records)
    if isinstance(envelope, SingleRecord):
        return [envelope.record]
    return []


def normalize_envelope(
    payload: Any, *, current_year: Optional[int] = None
) -> List[YearlyFinancialSummary]:
    """Classify and normalize a raw payload; unknown shapes yield ``[]``."""
    envelope = classify_envelope(payload)
    if isinstance(envelope, UnrecognizedEnvelope):
        logger.warning(
            "Unrecognized accounting envelope (%s) with keys: %s",
            envelope.type_name,
            ", ".join(envelope.keys) or "-",
        )
        return []
    return normalize_records(envelope_records(envelope), current_year=current_year)


# -----------------
# Normalization
# -----------------


FIELD_PATHS: Dict[str, Tuple[str, ...]] = {
    "revenue": ("resultatregnskapResultat", "driftsresultat", "driftsinntekter", "sumDriftsinntekter"),
    "profit": ("resultatregnskapResultat", "aarsresultat"),
    "operating_profit": ("resultatregnskapResultat", "driftsresultat", "driftsresultat"),
    "total_assets": ("eiendeler", "sumEiendeler"),
    "equity": ("egenkapitalGjeld", "egenkapital", "sumEgenkapital"),
    "debt": ("egenkapitalGjeld", "gjeldOversikt", "sumGjeld"),
    "current_assets": ("eiendeler", "omloepsmidler", "sumOmloepsmidler"),
    "fixed_assets": ("eiendeler", "anleggsmidler", "sumAnleggsmidler"),
    "financial_income": ("resultatregnskapResultat", "finansresultat", "finansinntekt", "sumFinansinntekter"),
    "financial_costs": ("resultatregnskapResultat", "finansresultat", "finanskostnad", "sumFinanskostnad"),
}

LARGE_PRESENTATION_PLAN = "store"


def normalize_records(
    records: Sequence[Any], *, current_year: Optional[int] = None
) -> List[YearlyFinancialSummary]:
    """Flatten raw records into newest-first summaries, dropping empty ones."""
    fallback_year = current_year or date.today().year
    summaries: List[YearlyFinancialSummary] = []
    for record in records:
        if not isinstance(record, Mapping):
            logger.debug("Skipping non-object accounting record: %r", type(record).__name__)
            continue
        summary = _normalize_record(record, fallback_year)
        if not summary.has_real_data:
            logger.debug("Dropping accounting record for %s without usable metrics", summary.year)
            continue
        summaries.append(summary)
    # sorted() is stable, so same-year records keep registry order.
    return sorted(summaries, key=lambda s: s.year, reverse=True)


def _normalize_record(record: Mapping[str, Any], fallback_year: int) -> YearlyFinancialSummary:
    metrics = {name: _safe_float(_dig(record, path)) for name, path in FIELD_PATHS.items()}
    currency = _dig(record, ("valuta",))
    accounting_type = _dig(record, ("regnskapstype",))
    return YearlyFinancialSummary(
        year=_period_year(record) or fallback_year,
        currency=str(currency) if currency else "NOK",
        employees=None,  # not part of the structured accounts
        company_size=_company_size(record),
        is_parent_company=_dig(record, ("virksomhet", "morselskap")) is True,
        accounting_type=str(accounting_type) if accounting_type else "unknown",
        **metrics,
    )


def _dig(record: Any, path: Sequence[str]) -> Any:
    current = record
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
        if current is None:
            return None
    return current


def _safe_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return None if pd.isna(result) else result


def _period_year(record: Mapping[str, Any]) -> Optional[int]:
    end_date = _dig(record, ("regnskapsperiode", "tilDato"))
    if not end_date:
        return None
    try:
        return int(pd.to_datetime(end_date).year)
    except (TypeError, ValueError, OverflowError):
        return None


def _company_size(record: Mapping[str, Any]) -> CompanySize:
    if _dig(record, ("regnkapsprinsipper", "smaaForetak")) is True:
        return CompanySize.SMALL
    if _dig(record, ("oppstillingsplan",)) == LARGE_PRESENTATION_PLAN:
        return CompanySize.LARGE
    return CompanySize.MEDIUM
