"""Settings helpers to centralize configuration access."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from config import Config


def load_settings(
    debug_override: Optional[bool] = None,
    *,
    enhance_override: Optional[bool] = None,
    output_dir: Optional[Path] = None,
) -> Config:
    """Return a Config instance, applying optional runtime overrides."""
    config = Config.from_env()
    if debug_override is not None:
        config.debug = debug_override
    if enhance_override is not None:
        config.enhance_narrative = enhance_override
    if output_dir is not None:
        config.output_dir = output_dir
    return config
