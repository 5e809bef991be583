"""Company registry model shared by lookup, synthesis and prompting."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class CompanyProfile:
    """Immutable snapshot of a registry entity (Enhetsregisteret)."""

    organization_number: str
    name: str
    industry_code: str = ""
    industry_label: str = "General Business"
    legal_form_code: str = ""
    legal_form: str = "Limited Company"
    employees: Optional[int] = None
    founded_date: Optional[str] = None
    registration_date: Optional[str] = None
    vat_registered: bool = False
    postal_place: Optional[str] = None
    municipality: Optional[str] = None
    bankrupt: bool = False
    under_liquidation: bool = False
    under_forced_liquidation: bool = False

    @classmethod
    def from_registry(cls, payload: Mapping[str, Any]) -> "CompanyProfile":
        """Parse a raw ``enheter`` record as returned by the company registry."""
        if not isinstance(payload, Mapping):
            raise ValueError("Company record must be a JSON object.")
        orgnr = str(payload.get("organisasjonsnummer") or "").strip()
        name = str(payload.get("navn") or "").strip()
        if not orgnr or not name:
            raise ValueError("Company record is missing organization number or name.")

        industry = _mapping(payload.get("naeringskode1"))
        legal_form = _mapping(payload.get("organisasjonsform"))
        address = _mapping(payload.get("forretningsadresse"))

        return cls(
            organization_number=orgnr,
            name=name,
            industry_code=str(industry.get("kode") or ""),
            industry_label=str(industry.get("beskrivelse") or "General Business"),
            legal_form_code=str(legal_form.get("kode") or ""),
            legal_form=str(legal_form.get("beskrivelse") or "Limited Company"),
            employees=_safe_int(payload.get("antallAnsatte")),
            founded_date=payload.get("stiftelsesdato") or None,
            registration_date=payload.get("registreringsdatoEnhetsregisteret") or None,
            vat_registered=bool(payload.get("registrertIMvaregisteret")),
            postal_place=address.get("poststed") or None,
            municipality=address.get("kommune") or None,
            bankrupt=bool(payload.get("konkurs")),
            under_liquidation=bool(payload.get("underAvvikling")),
            under_forced_liquidation=bool(
                payload.get("underTvangsavviklingEllerTvangsopplosning")
            ),
        )

    @property
    def location(self) -> str:
        parts = [part for part in (self.postal_place, self.municipality) if part]
        return ", ".join(parts) if parts else "Norway"

    @property
    def status(self) -> str:
        if self.bankrupt:
            return "Bankrupt"
        if self.under_liquidation or self.under_forced_liquidation:
            return "Under liquidation"
        return "Active"

    def founded_year(self, current_year: Optional[int] = None) -> int:
        """Founding year, falling back to registration date, then a decade ago."""
        current_year = current_year or date.today().year
        for candidate in (self.founded_date, self.registration_date):
            year = _year_of(candidate)
            if year is not None:
                return year
        return current_year - 10


def _mapping(value: Any) -> Dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


def _safe_int(value: Any) -> Optional[int]:
    try:
        return int(value) if value is not None and value != "" else None
    except (TypeError, ValueError):
        return None


def _year_of(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10]).year
    except ValueError:
        return None
