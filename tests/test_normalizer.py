from __future__ import annotations

from brreg_report.domain.models.financials import CompanySize
from brreg_report.domain.services.normalizer import (
    EmbeddedRecords,
    RecordList,
    SingleRecord,
    UnrecognizedEnvelope,
    classify_envelope,
    normalize_envelope,
    normalize_records,
)


def _mk_record(year, revenue=None, profit=None, assets=None, operating=None, **extra):
    record = {
        "id": year,
        "virksomhet": {"organisasjonsnummer": "923609016", "morselskap": False},
        "regnskapsperiode": {"fraDato": f"{year}-01-01", "tilDato": f"{year}-12-31"},
        "valuta": "NOK",
        "regnskapstype": "SELSKAP",
        "resultatregnskapResultat": {
            "aarsresultat": profit,
            "driftsresultat": {
                "driftsresultat": operating,
                "driftsinntekter": {"sumDriftsinntekter": revenue},
            },
        },
        "eiendeler": {"sumEiendeler": assets},
    }
    record.update(extra)
    return record


def test_classify_envelope_variants():
    rec = _mk_record(2023, revenue=1.0)
    assert isinstance(classify_envelope([rec]), RecordList)
    assert isinstance(classify_envelope({"_embedded": {"regnskap": [rec]}}), EmbeddedRecords)
    assert isinstance(classify_envelope(rec), SingleRecord)
    unknown = classify_envelope({"status": 500, "message": "oops"})
    assert isinstance(unknown, UnrecognizedEnvelope)
    assert unknown.keys == ("status", "message")
    assert isinstance(classify_envelope("nope"), UnrecognizedEnvelope)


def test_normalize_flattens_nested_fields():
    record = _mk_record(
        2023, revenue=12_000_000, profit=900_000, assets=8_000_000, operating=1_200_000
    )
    record["egenkapitalGjeld"] = {
        "egenkapital": {"sumEgenkapital": 3_000_000},
        "gjeldOversikt": {"sumGjeld": 5_000_000},
    }
    [summary] = normalize_records([record])

    assert summary.year == 2023
    assert summary.currency == "NOK"
    assert summary.revenue == 12_000_000
    assert summary.profit == 900_000
    assert summary.operating_profit == 1_200_000
    assert summary.total_assets == 8_000_000
    assert summary.equity == 3_000_000
    assert summary.debt == 5_000_000
    assert summary.employees is None
    assert summary.accounting_type == "SELSKAP"
    assert summary.is_parent_company is False


def test_records_without_revenue_profit_or_assets_are_dropped():
    empty = _mk_record(2022)
    assets_only = _mk_record(2021, assets=1_000)
    summaries = normalize_records([empty, assets_only, "garbage"])
    assert [s.year for s in summaries] == [2021]
    assert all(s.has_real_data for s in summaries)


def test_output_is_newest_first_and_stable_for_same_year():
    first = _mk_record(2022, revenue=1.0)
    second = _mk_record(2022, revenue=2.0)
    newest = _mk_record(2023, revenue=3.0)
    summaries = normalize_records([first, newest, second])
    assert [s.year for s in summaries] == [2023, 2022, 2022]
    assert [s.revenue for s in summaries[1:]] == [1.0, 2.0]


def test_missing_period_uses_current_year():
    record = _mk_record(2020, revenue=5.0)
    del record["regnskapsperiode"]
    [summary] = normalize_records([record], current_year=2031)
    assert summary.year == 2031


def test_non_numeric_values_become_missing():
    record = _mk_record(2023, revenue="n/a", profit=True, assets="1500")
    [summary] = normalize_records([record])
    assert summary.revenue is None
    assert summary.profit is None
    assert summary.total_assets == 1500.0


def test_company_size_classification():
    small = _mk_record(2023, revenue=1.0, regnkapsprinsipper={"smaaForetak": True})
    large = _mk_record(2022, revenue=1.0, oppstillingsplan="store")
    medium = _mk_record(2021, revenue=1.0)
    sizes = [s.company_size for s in normalize_records([small, large, medium])]
    assert sizes == [CompanySize.SMALL, CompanySize.LARGE, CompanySize.MEDIUM]


def test_normalize_is_idempotent():
    payload = {"_embedded": {"regnskap": [_mk_record(2023, revenue=10.0), _mk_record(2022, profit=1.0)]}}
    assert normalize_envelope(payload) == normalize_envelope(payload)


def test_unrecognized_envelope_yields_empty_list():
    assert normalize_envelope({"unexpected": True}) == []
    assert normalize_envelope(None) == []
