"""
Quality checks for parsed analysis results.

The provider enforces the declared JSON schema, but it cannot check
that the content agrees with the request: every requested country
should have a policy record, identifiers should be unique, clause
frequencies are percentages and divergent-approach examples should
name countries that were actually analysed.  The validator reports
these problems without rejecting the result, so the dashboard can
still be shown with a warning.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Dict, List, Sequence, Tuple

from .countries import contains_country
from .models import FullAnalysis

logger = logging.getLogger(__name__)


class AnalysisValidator:
    """Validate one analysis against the countries it was requested for.

    The primary entry point is ``validate_analysis`` which returns an
    (analysis, report) tuple.  The report contains counts of each
    issue type, a quality score and recommendations.
    """

    def __init__(self) -> None:
        self.issues: List[Dict[str, Any]] = []
        self.stats: Dict[str, int] = {
            'total': 0,
            'valid': 0,
            'duplicate_id': 0,
            'missing_country': 0,
            'unexpected_country': 0,
            'missing_suggestions': 0,
            'invalid_frequency': 0,
            'unknown_example': 0,
        }

    def _flag(self, issue_type: str, subject: str, description: str, severity: str) -> None:
        self.stats[issue_type] += 1
        self.issues.append({
            'type': issue_type,
            'subject': subject,
            'severity': severity,
            'description': description,
        })

    def validate_analysis(
        self, analysis: FullAnalysis, requested_countries: Sequence[str]
    ) -> Tuple[FullAnalysis, Dict[str, Any]]:
        contracts = analysis.contracts
        self.stats['total'] = len(contracts)
        id_counts = Counter(c.id for c in contracts)
        for contract in contracts:
            problems = 0
            if id_counts[contract.id] > 1:
                self._flag('duplicate_id', contract.country,
                           f'Policy id {contract.id} is used by {id_counts[contract.id]} records', 'high')
                problems += 1
            if not contains_country(requested_countries, contract.country):
                self._flag('unexpected_country', contract.country,
                           f'{contract.country} was not among the requested countries', 'medium')
                problems += 1
            if not contract.suggestions or not contract.suggestions.strip():
                self._flag('missing_suggestions', contract.country,
                           f'No suggestions were provided for {contract.country}', 'low')
                problems += 1
            if problems == 0:
                self.stats['valid'] += 1
        for country in requested_countries:
            if not contains_country([c.country for c in contracts], country):
                self._flag('missing_country', country, f'No policy record was returned for {country}', 'medium')
        for clause in analysis.dashboard_summary.common_clauses:
            if not 0 <= clause.frequency <= 100:
                self._flag('invalid_frequency', clause.clause,
                           f'Frequency {clause.frequency} is not a percentage', 'medium')
        for approach in analysis.dashboard_summary.divergent_approaches:
            for example in approach.examples:
                if not contains_country(requested_countries, example):
                    self._flag('unknown_example', approach.approach,
                               f'Example {example} was not among the requested countries', 'low')
        if self.issues:
            logger.info(f"Analysis validation found {len(self.issues)} issues")
        return analysis, self.generate_validation_report()

    def generate_validation_report(self) -> Dict[str, Any]:
        """Compile a report of validation statistics and recommendations."""
        total = self.stats['total']
        quality_score = (self.stats['valid'] / total * 100) if total > 0 else 0
        report: Dict[str, Any] = {
            'summary': self.stats.copy(),
            'quality_score': quality_score,
            'issues': list(self.issues),
            'recommendations': [],
        }
        if self.stats['missing_country']:
            report['recommendations'].append(
                f"{self.stats['missing_country']} requested countries have no policy record. "
                'Try a narrower topic or fewer countries.'
            )
        if self.stats['duplicate_id']:
            report['recommendations'].append(
                'Some policy records share an id. Regenerate the analysis before relying on record links.'
            )
        if self.stats['invalid_frequency']:
            report['recommendations'].append(
                'Some clause frequencies fall outside 0-100%; the chart clamps them.'
            )
        return report
