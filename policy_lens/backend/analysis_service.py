"""
Integration helpers for the OpenAI Responses API.

This module defines a thin wrapper around the OpenAI client that
constructs the comparative policy prompt, submits it together with
the declared JSON schema and parses the structured result.  In
production you should set the ``OPENAI_API_KEY`` environment variable
(or ``OPENAI_API_KEYS`` containing a comma-separated list of keys)
before using these functions.  The client is created on first use
rather than at import time.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence, Tuple

from openai import OpenAI  # type: ignore

from .config import Settings, load_settings, resolve_api_key
from .countries import validate_request
from .errors import AnalysisError
from .models import FullAnalysis
from .parsers import extract_output_text, parse_analysis
from .prompts import ANALYSIS_SCHEMA, build_analysis_prompt

logger = logging.getLogger(__name__)

ANALYSIS_FAILED_MESSAGE = (
    'Failed to analyze policies. The model may have had trouble finding data or structuring the response.'
)

_clients: Dict[Tuple[str, float], OpenAI] = {}


def get_client(settings: Optional[Settings] = None) -> OpenAI:
    """Return a shared OpenAI client for the configured key and timeout.

    Clients are cached per (API key, request timeout) pair, so callers
    passing settings with a different timeout get their own client.
    """
    settings = settings or load_settings()
    cache_key = (resolve_api_key(), settings.request_timeout)
    if cache_key not in _clients:
        _clients[cache_key] = OpenAI(api_key=cache_key[0], timeout=settings.request_timeout)
    return _clients[cache_key]


def generate_analysis(
    topic: str,
    countries: Sequence[str],
    client: Any = None,
    settings: Optional[Settings] = None,
) -> FullAnalysis:
    """Run a schema-constrained comparative analysis.

    Input validation happens before any network call and raises
    :class:`~policy_lens.backend.errors.ValidationError`.  Every other
    failure, whether from the provider or from parsing its output, is
    logged and re-raised as :class:`AnalysisError` with a generic
    message suitable for display.
    """
    validate_request(topic, countries)
    settings = settings or load_settings()
    prompt = build_analysis_prompt(topic, countries, settings.baseline_country)
    try:
        client = client or get_client(settings)
        response = client.responses.create(
            model=settings.analysis_model,
            input=prompt,
            text={
                'format': {
                    'type': 'json_schema',
                    'name': 'policy_analysis',
                    'schema': ANALYSIS_SCHEMA,
                    'strict': True,
                },
            },
        )
        analysis = parse_analysis(extract_output_text(response))
        logger.info(
            f"Analysis {getattr(response, 'id', 'unknown')} returned "
            f"{len(analysis.contracts)} policies for {len(countries)} countries"
        )
        return analysis
    except Exception as e:
        logger.error(f"Error analyzing policies: {e}")
        raise AnalysisError(ANALYSIS_FAILED_MESSAGE) from e
