"""
Runtime configuration for the Policy Lens application.

All settings are read from environment variables.  A ``.env`` file in
the working directory is loaded first when present so that local
development does not require exporting variables by hand.  The OpenAI
API key is resolved separately and only when a client is actually
needed, which keeps the package importable without credentials.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv  # type: ignore

logger = logging.getLogger(__name__)

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Resolved application settings."""

    analysis_model: str = 'gpt-4o'
    chat_model: str = 'gpt-4o-mini'
    baseline_country: str = 'Canada'
    request_timeout: float = 600.0
    api_host: str = '0.0.0.0'
    api_port: int = 8001
    ui_port: int = 8000
    max_sessions: int = 100


def _env_number(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric value for {name}: {raw!r}")
        return default


def load_settings() -> Settings:
    """Build a :class:`Settings` instance from the current environment."""
    defaults = Settings()
    return Settings(
        analysis_model=os.getenv('POLICY_ANALYSIS_MODEL', defaults.analysis_model),
        chat_model=os.getenv('POLICY_CHAT_MODEL', defaults.chat_model),
        baseline_country=os.getenv('POLICY_BASELINE_COUNTRY', defaults.baseline_country).strip()
        or defaults.baseline_country,
        request_timeout=_env_number('POLICY_REQUEST_TIMEOUT', defaults.request_timeout),
        api_host=os.getenv('POLICY_API_HOST', defaults.api_host),
        api_port=int(_env_number('POLICY_API_PORT', defaults.api_port)),
        ui_port=int(_env_number('POLICY_UI_PORT', defaults.ui_port)),
        max_sessions=max(1, int(_env_number('POLICY_MAX_SESSIONS', defaults.max_sessions))),
    )


def resolve_api_key() -> str:
    """Resolve a single OpenAI API key from environment variables."""
    single = os.getenv('OPENAI_API_KEY')
    if single:
        return single
    multiple = os.getenv('OPENAI_API_KEYS')
    if multiple:
        for key in (k.strip() for k in multiple.split(',') if k.strip()):
            return key
    raise EnvironmentError(
        'Missing OpenAI API key. Set OPENAI_API_KEY or OPENAI_API_KEYS in your environment.'
    )
