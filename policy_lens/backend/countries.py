"""
Country selection helpers.

The dashboard starts with the twenty largest economies selected and
lets the user add or remove countries before requesting an analysis.
These helpers return new lists rather than mutating their input so
they can be used directly on values held in Streamlit session state.
"""

from __future__ import annotations

from typing import List, Sequence

from .errors import ValidationError

DEFAULT_COUNTRIES: List[str] = [
    'United States', 'China', 'Germany', 'Japan', 'India', 'United Kingdom',
    'France', 'Italy', 'Brazil', 'Canada', 'Russia', 'Mexico', 'Australia',
    'South Korea', 'Spain', 'Indonesia', 'Netherlands', 'Saudi Arabia', 'Turkey', 'Switzerland',
]

EXAMPLE_PROMPTS: List[str] = [
    'Analyze national AI strategies, highlighting approaches to ethics and public investment.',
    'Compare renewable energy policies, focusing on solar and wind incentives.',
    'What are the differences in data privacy laws like GDPR across various non-EU countries?',
    'Examine public healthcare funding models and their outcomes in developed nations.',
]

MISSING_INPUT_MESSAGE = 'Please provide a prompt and select at least one country.'


def contains_country(countries: Sequence[str], name: str) -> bool:
    """Case-insensitive membership test."""
    needle = name.strip().lower()
    return any(c.lower() == needle for c in countries)


def add_country(countries: Sequence[str], name: str) -> List[str]:
    """Append ``name`` unless it is blank or already selected."""
    name = (name or '').strip()
    if not name or contains_country(countries, name):
        return list(countries)
    return [*countries, name]


def remove_country(countries: Sequence[str], name: str) -> List[str]:
    """Remove the first entry exactly equal to ``name``."""
    remaining = list(countries)
    if name in remaining:
        remaining.remove(name)
    return remaining


def validate_request(topic: str, countries: Sequence[str]) -> None:
    """Reject an analysis request that has no topic or no countries."""
    if not topic or not topic.strip() or not countries:
        raise ValidationError(MISSING_INPUT_MESSAGE)
