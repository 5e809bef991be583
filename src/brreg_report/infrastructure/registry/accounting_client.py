"""Accounting registry (Regnskapsregisteret) client with a fixed attempt list."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

import httpx

from brreg_report.domain.models.financials import YearlyFinancialSummary
from brreg_report.domain.services.normalizer import (
    UnrecognizedEnvelope,
    classify_envelope,
    envelope_records,
    normalize_records,
)
from brreg_report.infrastructure.errors import (
    AccountingUnavailableError,
    NoAccountingDataError,
    RegistryTransportError,
    UnrecognizedEnvelopeError,
    UpstreamAuthError,
    UpstreamError,
    UpstreamStatusError,
)

logger = logging.getLogger(__name__)

SOURCE = "accounting registry"


@dataclass(frozen=True)
class AccessAttempt:
    """One way of calling the registry; tried in declared order."""

    description: str
    auth: Optional[Tuple[str, str]] = None


class AccountingClient:
    """Fetch filed annual accounts for an organization number."""

    def __init__(
        self,
        base_url: str,
        *,
        username: Optional[str] = None,
        password: Optional[str] = None,
        user_agent: str = "brreg-report/1.0",
        timeout: float = 8.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._attempts: List[AccessAttempt] = [AccessAttempt("Public access")]
        if username and password:
            self._attempts.append(AccessAttempt("Basic auth", auth=(username, password)))
        self._http = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={"Accept": "application/json", "User-Agent": user_agent},
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    @property
    def attempts(self) -> List[AccessAttempt]:
        return list(self._attempts)

    # ------------------
    # Public API helpers
    # ------------------
    def fetch(self, orgnr: str) -> Any:
        """Return the raw JSON payload from the first attempt that succeeds."""
        failure: Optional[UpstreamError] = None
        last_error: Optional[str] = None
        for attempt in self._attempts:
            logger.debug("Accounting lookup for %s: %s", orgnr, attempt.description)
            try:
                return self._request(orgnr, attempt)
            except UpstreamAuthError as exc:
                failure = exc
                last_error = f"Authentication failed: {exc.status_code}"
            except UpstreamStatusError as exc:
                failure = exc
                last_error = f"API error: {exc.detail}"
            except RegistryTransportError as exc:
                failure = exc
                last_error = f"{attempt.description}: {exc.detail}"
            logger.info("Accounting attempt '%s' rejected (%s)", attempt.description, last_error)

        raise AccountingUnavailableError(orgnr, last_error) from failure

    def _request(self, orgnr: str, attempt: AccessAttempt) -> Any:
        try:
            response = self._http.get(f"/{orgnr}", auth=attempt.auth)
        except httpx.HTTPError as exc:
            raise RegistryTransportError(SOURCE, str(exc) or type(exc).__name__) from exc

        if response.status_code == 404:
            raise NoAccountingDataError(orgnr)
        if response.status_code in (401, 403):
            raise UpstreamAuthError(SOURCE, response.status_code)
        if not response.is_success:
            raise UpstreamStatusError(SOURCE, response.status_code, response.text[:200])
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamStatusError(SOURCE, response.status_code, "response is not JSON") from exc

    def fetch_summaries(
        self, orgnr: str, *, current_year: Optional[int] = None
    ) -> List[YearlyFinancialSummary]:
        """Fetch, classify and normalize; raise when nothing usable remains."""
        envelope = classify_envelope(self.fetch(orgnr))
        if isinstance(envelope, UnrecognizedEnvelope):
            raise UnrecognizedEnvelopeError(
                SOURCE, f"unexpected response format (keys: {', '.join(envelope.keys) or '-'})"
            )
        records = envelope_records(envelope)
        if not records:
            raise NoAccountingDataError(orgnr, "no financial statements found")
        summaries = normalize_records(records, current_year=current_year)
        if not summaries:
            raise NoAccountingDataError(orgnr, "statements found but no usable metrics")
        logger.info("Normalized %d year(s) of accounts for %s", len(summaries), orgnr)
        return summaries

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self._http.close()
