"""
Shared fixtures for the Policy Lens test suite.

The OpenAI client is replaced by a small fake that records the keyword
arguments of each ``responses.create`` call and replays queued
results, so no test touches the network or needs an API key.
"""

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest

from policy_lens.backend.config import Settings


class FakeResponses:
    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.queue: List[Any] = []

    def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        result = self.queue.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class FakeClient:
    def __init__(self) -> None:
        self.responses = FakeResponses()

    def reply(self, text: str, response_id: str = 'resp_1') -> None:
        self.responses.queue.append(SimpleNamespace(id=response_id, output_text=text))

    def fail(self, error: Exception) -> None:
        self.responses.queue.append(error)


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def settings() -> Settings:
    return Settings(analysis_model='test-analysis', chat_model='test-chat', baseline_country='Canada')


@pytest.fixture
def sample_payload() -> Dict[str, Any]:
    """Provider JSON for a three-country analysis with contracts out of order."""
    return {
        'dashboardSummary': {
            'keyThemes': ['Public investment', 'Ethics oversight', 'Talent development'],
            'commonClauses': [
                {'clause': 'Risk classification', 'description': 'Tiered obligations by risk.', 'frequency': 30},
                {'clause': 'National AI office', 'description': 'A coordinating body.', 'frequency': 90},
                {'clause': 'Research funding', 'description': 'Dedicated grants.', 'frequency': 55},
            ],
            'divergentApproaches': [
                {
                    'approach': 'Binding regulation',
                    'description': 'Statutory rules instead of voluntary codes.',
                    'examples': ['Germany', 'France'],
                },
            ],
        },
        'contracts': [
            {'id': 2, 'country': 'Japan', 'policyTitle': 'AI Guidelines for Business',
             'summary': 'Voluntary guidance, unlike Canada.', 'suggestions': 'Add enforcement.'},
            {'id': 0, 'country': 'Germany', 'policyTitle': 'AI Strategy',
             'summary': 'Large public investment.', 'suggestions': 'Speed up procurement.'},
            {'id': 1, 'country': 'France', 'policyTitle': 'National AI Strategy',
             'summary': 'Focus on research hubs.', 'suggestions': None},
        ],
    }


@pytest.fixture
def sample_json(sample_payload: Dict[str, Any]) -> str:
    return json.dumps(sample_payload)
