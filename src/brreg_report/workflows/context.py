"""Workflow dependency container."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from config import Config
from brreg_report.domain.services.enhancer import NarrativeEnhancer, TextGenerator
from brreg_report.domain.services.synthesizer import ReportSynthesizer
from brreg_report.infrastructure.registry.accounting_client import AccountingClient
from brreg_report.infrastructure.registry.brreg_client import BrregClient


@dataclass
class WorkflowContext:
    """Holds heavy-weight dependencies shared by LangGraph nodes."""

    config: Config
    brreg: BrregClient
    accounting: AccountingClient
    synthesizer: ReportSynthesizer
    generator: Optional[TextGenerator] = None
    enhancer: Optional[NarrativeEnhancer] = None

    def close(self) -> None:
        """Release any dependencies that need explicit cleanup."""
        self.brreg.close()
        self.accounting.close()
        close = getattr(self.generator, "close", None)
        if callable(close):
            close()
