"""Application-wide configuration defaults and helpers."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# Base directory for resolving relative paths.
BASE_DIR = Path(__file__).resolve().parent


def _to_bool(value: Optional[str], default: bool = False) -> bool:
    """Parse truthy environment values like '1' or 'true'."""
    if value is None:
        return default
    # Normalize non-string inputs (e.g., int defaults) before parsing.
    if not isinstance(value, str):
        value = str(value)
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _to_int(value: Optional[str], default: Optional[int] = None) -> Optional[int]:
    """Safely parse an integer env var, returning the default on failure."""
    if value is None:
        return default
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def _to_float(value: Optional[str], default: float) -> float:
    """Safely parse a float env var, returning the default on failure."""
    if value is None:
        return default
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return default


@dataclass
class Config:
    """Runtime configuration loaded from environment variables."""

    debug: bool = False
    output_dir: Path = BASE_DIR / "reports"

    # Upstream registers
    brreg_base_url: str = "https://data.brreg.no/enhetsregisteret/api"
    accounting_base_url: str = "https://data.brreg.no/regnskapsregisteret/regnskap"
    accounting_username: Optional[str] = None
    accounting_password: Optional[str] = None
    http_user_agent: str = "brreg-report/1.0"
    http_timeout: float = 8.0
    search_page_size: int = 10

    # Text generation
    llm_provider: str = "huggingface"
    hf_api_token: Optional[str] = None
    hf_model: str = "mistralai/Mixtral-8x7B-Instruct-v0.1"
    hf_base_url: str = "https://api-inference.huggingface.co/models"
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    proxy_url: Optional[str] = None
    llm_timeout: float = 30.0
    llm_max_new_tokens: int = 1200
    llm_temperature: float = 0.7
    enhance_narrative: bool = True

    # Estimation baseline
    revenue_per_employee: float = 850_000.0
    vat_revenue_multiplier: float = 1.2
    default_employees: int = 10

    @classmethod
    def from_env(cls) -> "Config":
        """Build a configuration instance using environment overrides."""
        defaults = cls()
        output_dir = Path(os.getenv("OUTPUT_DIR", BASE_DIR / "reports"))

        config = cls(
            debug=_to_bool(os.getenv("APP_DEBUG")),
            output_dir=output_dir,
            brreg_base_url=os.getenv("BRREG_BASE_URL", defaults.brreg_base_url),
            accounting_base_url=os.getenv("ACCOUNTING_BASE_URL", defaults.accounting_base_url),
            accounting_username=os.getenv("ACCOUNTING_USERNAME"),
            accounting_password=os.getenv("ACCOUNTING_PASSWORD"),
            http_user_agent=os.getenv("HTTP_USER_AGENT", defaults.http_user_agent),
            http_timeout=_to_float(os.getenv("HTTP_TIMEOUT"), defaults.http_timeout),
            search_page_size=_to_int(os.getenv("SEARCH_PAGE_SIZE"), defaults.search_page_size)
            or defaults.search_page_size,
            llm_provider=os.getenv("LLM_PROVIDER", defaults.llm_provider).strip().lower(),
            hf_api_token=os.getenv("HF_API_TOKEN"),
            hf_model=os.getenv("HF_MODEL", defaults.hf_model),
            hf_base_url=os.getenv("HF_BASE_URL", defaults.hf_base_url),
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            openai_base_url=os.getenv("OPENAI_BASE_URL"),
            openai_model=os.getenv("OPENAI_MODEL", defaults.openai_model),
            proxy_url=os.getenv("PROXY_URL"),
            llm_timeout=_to_float(os.getenv("LLM_TIMEOUT"), defaults.llm_timeout),
            llm_max_new_tokens=_to_int(os.getenv("LLM_MAX_NEW_TOKENS"), defaults.llm_max_new_tokens)
            or defaults.llm_max_new_tokens,
            llm_temperature=_to_float(os.getenv("LLM_TEMPERATURE"), defaults.llm_temperature),
            enhance_narrative=_to_bool(os.getenv("ENHANCE_NARRATIVE"), default=True),
            revenue_per_employee=_to_float(
                os.getenv("ESTIMATE_REVENUE_PER_EMPLOYEE"), defaults.revenue_per_employee
            ),
            vat_revenue_multiplier=_to_float(
                os.getenv("ESTIMATE_VAT_MULTIPLIER"), defaults.vat_revenue_multiplier
            ),
            default_employees=_to_int(
                os.getenv("ESTIMATE_DEFAULT_EMPLOYEES"), defaults.default_employees
            )
            or defaults.default_employees,
        )
        return config

    def ensure_directories(self) -> None:
        """Create directories needed for runtime artifacts."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        (self.output_dir / "charts").mkdir(parents=True, exist_ok=True)
