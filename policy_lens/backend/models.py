"""
Analysis result records.

These dataclasses mirror the JSON structure requested from the model.
The provider returns camelCase keys (``policyTitle``,
``dashboardSummary`` and so on); ``from_dict`` accepts that shape and
``to_dict`` produces it again so results can be passed back through
the HTTP API or exported unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _integer(value: Any, name: str) -> int:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f'{name} must be an integer, got {value!r}')
    return value


def _number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f'{name} must be a number, got {value!r}')
    return float(value)


def _array(value: Any, name: str) -> List[Any]:
    if not isinstance(value, list):
        raise TypeError(f'{name} must be a list, got {type(value).__name__}')
    return value


@dataclass
class Contract:
    """Analysis of a single country's policy on the requested topic."""

    id: int
    country: str
    policy_title: str
    summary: str
    suggestions: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Contract':
        suggestions = data.get('suggestions')
        return cls(
            id=_integer(data['id'], 'id'),
            country=str(data['country']),
            policy_title=str(data['policyTitle']),
            summary=str(data['summary']),
            suggestions=str(suggestions) if suggestions else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'country': self.country,
            'policyTitle': self.policy_title,
            'summary': self.summary,
            'suggestions': self.suggestions,
        }


@dataclass
class CommonClause:
    """A clause or policy area shared by several countries."""

    clause: str
    description: str
    frequency: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CommonClause':
        return cls(
            clause=str(data['clause']),
            description=str(data['description']),
            frequency=_number(data['frequency'], 'frequency'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {'clause': self.clause, 'description': self.description, 'frequency': self.frequency}


@dataclass
class DivergentApproach:
    """A way in which some countries handle the topic differently."""

    approach: str
    description: str
    examples: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DivergentApproach':
        return cls(
            approach=str(data['approach']),
            description=str(data['description']),
            examples=[str(e) for e in _array(data['examples'], 'examples')],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {'approach': self.approach, 'description': self.description, 'examples': list(self.examples)}


@dataclass
class DashboardSummary:
    """Cross-country overview shown at the top of the dashboard."""

    key_themes: List[str] = field(default_factory=list)
    common_clauses: List[CommonClause] = field(default_factory=list)
    divergent_approaches: List[DivergentApproach] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DashboardSummary':
        return cls(
            key_themes=[str(t) for t in _array(data['keyThemes'], 'keyThemes')],
            common_clauses=[CommonClause.from_dict(c) for c in _array(data['commonClauses'], 'commonClauses')],
            divergent_approaches=[
                DivergentApproach.from_dict(d) for d in _array(data['divergentApproaches'], 'divergentApproaches')
            ],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'keyThemes': list(self.key_themes),
            'commonClauses': [c.to_dict() for c in self.common_clauses],
            'divergentApproaches': [d.to_dict() for d in self.divergent_approaches],
        }


@dataclass
class FullAnalysis:
    """Complete result of one analysis request."""

    dashboard_summary: DashboardSummary
    contracts: List[Contract] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FullAnalysis':
        return cls(
            dashboard_summary=DashboardSummary.from_dict(data['dashboardSummary']),
            contracts=[Contract.from_dict(c) for c in _array(data['contracts'], 'contracts')],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'dashboardSummary': self.dashboard_summary.to_dict(),
            'contracts': [c.to_dict() for c in self.contracts],
        }

    def sorted_contracts(self) -> List[Contract]:
        """Return the policy records ordered by identifier."""
        return sorted(self.contracts, key=lambda c: c.id)

    def get_contract(self, contract_id: int) -> Optional[Contract]:
        for contract in self.contracts:
            if contract.id == contract_id:
                return contract
        return None
