"""
Presentation helpers for analysis results.

These functions shape parsed analysis records into the orderings and
tables the dashboard displays: the common-clause bar chart (highest
frequency first), the per-country policy table and a small set of
headline statistics.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

import pandas as pd  # type: ignore

from .countries import contains_country
from .models import CommonClause, FullAnalysis


def sort_clauses_by_frequency(clauses: Sequence[CommonClause]) -> List[CommonClause]:
    """Return clauses in descending frequency; ties keep input order."""
    return sorted(clauses, key=lambda c: c.frequency, reverse=True)


def clause_frequency_frame(clauses: Sequence[CommonClause]) -> pd.DataFrame:
    """Build the chart table for common clauses in display order.

    Frequencies are clamped to the 0-100 range because they are drawn
    as a percentage bar width.
    """
    ordered = sort_clauses_by_frequency(clauses)
    return pd.DataFrame(
        {
            'clause': [c.clause for c in ordered],
            'frequency': [min(max(c.frequency, 0.0), 100.0) for c in ordered],
            'description': [c.description for c in ordered],
        },
        columns=['clause', 'frequency', 'description'],
    )


def contracts_frame(analysis: FullAnalysis) -> pd.DataFrame:
    """Per-country policy table ordered by id, used for display and CSV export."""
    rows = [
        {
            'id': c.id,
            'country': c.country,
            'policy_title': c.policy_title,
            'summary': c.summary,
            'suggestions': c.suggestions or '',
        }
        for c in analysis.sorted_contracts()
    ]
    return pd.DataFrame(rows, columns=['id', 'country', 'policy_title', 'summary', 'suggestions'])


def summarize_analysis(analysis: FullAnalysis, requested_countries: Sequence[str]) -> Dict[str, Any]:
    """Headline counts shown above the dashboard."""
    summary = analysis.dashboard_summary
    covered = {c.country.lower() for c in analysis.contracts if contains_country(requested_countries, c.country)}
    frequencies = [c.frequency for c in summary.common_clauses]
    return {
        'countries_requested': len(requested_countries),
        'countries_covered': len(covered),
        'policies': len(analysis.contracts),
        'key_themes': len(summary.key_themes),
        'common_clauses': len(summary.common_clauses),
        'divergent_approaches': len(summary.divergent_approaches),
        'average_clause_frequency': (sum(frequencies) / len(frequencies)) if frequencies else 0.0,
    }
