"""
Parsers for model responses.

The OpenAI Responses API returns a response object whose generated
text may be exposed through the ``output_text`` convenience property
or, for older client versions, only through the ``output`` item list.
``extract_output_text`` handles both.  ``parse_analysis`` turns the
JSON text into :class:`~policy_lens.backend.models.FullAnalysis`
records, tolerating a surrounding Markdown code fence which some
models emit even when JSON output is requested.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from .errors import ResponseParseError
from .models import FullAnalysis

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r'^```(?:json)?\s*(.*?)\s*```$', re.DOTALL | re.IGNORECASE)


def extract_output_text(response: Any) -> str:
    """Return the generated text from a Responses API object."""
    text = getattr(response, 'output_text', None)
    if isinstance(text, str) and text.strip():
        return text
    output = getattr(response, 'output', None)
    if output:
        # Walk backwards; reasoning and tool items precede the final message
        for item in reversed(output):
            content = getattr(item, 'content', None)
            if content:
                part_text = getattr(content[0], 'text', None)
                if part_text:
                    return part_text
    raise ResponseParseError('Model response contained no text output')


def strip_code_fence(text: str) -> str:
    text = text.strip()
    match = _FENCE_RE.match(text)
    return match.group(1) if match else text


def parse_analysis(text: str) -> FullAnalysis:
    """Decode model JSON into analysis records, contracts ordered by id."""
    payload = strip_code_fence(text or '')
    if not payload:
        raise ResponseParseError('Model returned an empty analysis')
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f'Model returned invalid JSON: {e}') from e
    if not isinstance(data, dict):
        raise ResponseParseError('Model returned JSON that is not an object')
    try:
        analysis = FullAnalysis.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise ResponseParseError(f'Model response is missing or has malformed field: {e}') from e
    analysis.contracts.sort(key=lambda c: c.id)
    logger.debug(f"Parsed analysis with {len(analysis.contracts)} policy records")
    return analysis
