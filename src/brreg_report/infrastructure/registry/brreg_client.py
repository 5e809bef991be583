"""Company registry (Enhetsregisteret) client."""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from brreg_report.domain.models.company import CompanyProfile
from brreg_report.infrastructure.errors import (
    CompanyNotFoundError,
    RegistryTransportError,
    UpstreamAuthError,
    UpstreamStatusError,
)

logger = logging.getLogger(__name__)

ORGNR_PATTERN = re.compile(r"^\d{9}$")
SOURCE = "company registry"


def is_organization_number(query: str) -> bool:
    return bool(ORGNR_PATTERN.match(query.strip()))


class BrregClient:
    """Look up and search registered entities."""

    def __init__(
        self,
        base_url: str,
        *,
        user_agent: str = "brreg-report/1.0",
        timeout: float = 8.0,
        page_size: int = 10,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._page_size = page_size
        self._http = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={"Accept": "application/json", "User-Agent": user_agent},
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    # ------------------
    # Public API helpers
    # ------------------
    def lookup(self, query: str) -> CompanyProfile:
        """Resolve one company by organization number or (first) name match."""
        query = _require_query(query)
        if is_organization_number(query):
            response = self._get(f"/enheter/{query}")
            if response.status_code == 404:
                raise CompanyNotFoundError(query)
            _raise_for_status(response)
            return self._profile(_json(response), query)

        matches = self._search_raw(query, size=1)
        if not matches:
            raise CompanyNotFoundError(query)
        return self._profile(matches[0], query)

    def search(self, query: str, size: Optional[int] = None) -> List[CompanyProfile]:
        """Suggestion mode: up to ``size`` companies whose name matches."""
        query = _require_query(query)
        profiles: List[CompanyProfile] = []
        for record in self._search_raw(query, size=size or self._page_size):
            try:
                profiles.append(CompanyProfile.from_registry(record))
            except ValueError as exc:
                logger.debug("Skipping malformed registry entry: %s", exc)
        return profiles

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self._http.close()

    # -----------------
    # Internal helpers
    # -----------------
    def _search_raw(self, query: str, *, size: int) -> List[Dict[str, Any]]:
        response = self._get("/enheter", params={"navn": query, "size": size})
        _raise_for_status(response)
        payload = _json(response)
        embedded = payload.get("_embedded") if isinstance(payload, dict) else None
        if not isinstance(embedded, dict):
            return []
        return list(embedded.get("enheter") or [])

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        logger.debug("GET %s %s", path, params or "")
        try:
            return self._http.get(path, params=params)
        except httpx.HTTPError as exc:
            raise RegistryTransportError(SOURCE, str(exc) or type(exc).__name__) from exc

    @staticmethod
    def _profile(payload: Any, query: str) -> CompanyProfile:
        try:
            return CompanyProfile.from_registry(payload)
        except ValueError as exc:
            raise UpstreamStatusError(SOURCE, 200, f"malformed entity for '{query}': {exc}") from exc


def _require_query(query: Optional[str]) -> str:
    cleaned = (query or "").strip()
    if not cleaned:
        raise ValueError("A company name or organization number is required.")
    return cleaned


def _json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise UpstreamStatusError(SOURCE, response.status_code, "response is not JSON") from exc


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return
    if response.status_code in (401, 403):
        raise UpstreamAuthError(SOURCE, response.status_code)
    raise UpstreamStatusError(SOURCE, response.status_code, response.text[:200])
