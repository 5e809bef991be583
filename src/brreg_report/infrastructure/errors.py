"""Exceptions raised by upstream collaborators (registers, text generation)."""
from __future__ import annotations

from typing import Optional


class UpstreamError(Exception):
    """Base class for failures talking to an external service."""

    def __init__(self, source: str, detail: str = "") -> None:
        self.source = source
        self.detail = detail
        super().__init__(f"{source}: {detail}" if detail else source)


class RegistryTransportError(UpstreamError):
    """Network-level failure (DNS, connect, timeout) reaching a register."""


class UpstreamStatusError(UpstreamError):
    """A register answered with an unexpected non-success status."""

    def __init__(self, source: str, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        super().__init__(source, f"HTTP {status_code}" + (f" - {detail}" if detail else ""))


class UpstreamAuthError(UpstreamStatusError):
    """401/403 from a register."""


class CompanyNotFoundError(UpstreamError):
    """The company registry has no entity matching the query."""

    def __init__(self, query: str) -> None:
        self.query = query
        super().__init__("company registry", f"no company matches '{query}'")


class NoAccountingDataError(UpstreamError):
    """The accounting registry holds no usable statements for the company."""

    def __init__(self, orgnr: str, detail: str = "no accounting data available") -> None:
        self.orgnr = orgnr
        super().__init__("accounting registry", detail)


class AccountingUnavailableError(UpstreamError):
    """Every configured attempt against the accounting registry failed."""

    def __init__(self, orgnr: str, last_error: Optional[str] = None) -> None:
        self.orgnr = orgnr
        self.last_error = last_error
        super().__init__("accounting registry", last_error or "unable to access accounting data")


class UnrecognizedEnvelopeError(UpstreamError):
    """The accounting registry answered with an unknown payload shape."""


class GenerationError(UpstreamError):
    """Text-generation request failed or returned an unusable payload."""
