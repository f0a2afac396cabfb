"""Tests for the FastAPI routes, with the model calls replaced."""

from __future__ import annotations

from collections import OrderedDict

import pytest
from fastapi.testclient import TestClient

from policy_lens.backend import api_server, chat_agent, parsers
from policy_lens.backend.analysis_service import ANALYSIS_FAILED_MESSAGE
from policy_lens.backend.errors import AnalysisError


@pytest.fixture
def client():
    api_server.app.state.sessions = OrderedDict()
    return TestClient(api_server.app)


def test_health(client) -> None:
    response = client.get('/health')
    assert response.status_code == 200
    assert response.json() == {'status': 'healthy', 'server': 'PolicyLens'}


def test_analyze_returns_analysis_and_session(client, monkeypatch, fake_client, settings, sample_json) -> None:
    seen = {}

    def fake_generate(topic, countries):
        seen['args'] = (topic, countries)
        return parsers.parse_analysis(sample_json)

    monkeypatch.setattr(api_server, 'generate_analysis', fake_generate)
    monkeypatch.setattr(api_server, 'start_chat',
                        lambda analysis: chat_agent.start_chat(analysis, client=fake_client, settings=settings))

    response = client.post('/analyze', json={'topic': 'AI', 'countries': ['Germany', 'France', 'Japan']})
    assert response.status_code == 200
    body = response.json()
    assert [c['id'] for c in body['contracts']] == [0, 1, 2]
    assert seen['args'] == ('AI', ['Germany', 'France', 'Japan'])

    fake_client.reply('Germany.', response_id='resp_x')
    reply = client.post(f"/chat/{body['sessionId']}", json={'message': 'Who invests most?'})
    assert reply.status_code == 200
    assert reply.json() == {'reply': 'Germany.'}


def test_analyze_validation_error_is_400(client) -> None:
    response = client.post('/analyze', json={'topic': '', 'countries': ['Germany']})
    assert response.status_code == 400


def test_analyze_failure_is_502(client, monkeypatch) -> None:
    def failing(topic, countries):
        raise AnalysisError(ANALYSIS_FAILED_MESSAGE)

    monkeypatch.setattr(api_server, 'generate_analysis', failing)
    response = client.post('/analyze', json={'topic': 'AI', 'countries': ['Germany']})
    assert response.status_code == 502
    assert response.json()['detail'] == ANALYSIS_FAILED_MESSAGE
    assert api_server.app.state.sessions == {}


def test_chat_unknown_session_is_404(client) -> None:
    response = client.post('/chat/missing', json={'message': 'hi'})
    assert response.status_code == 404


def test_chat_blank_and_failed_messages(client, fake_client, settings, sample_json) -> None:
    session = chat_agent.start_chat(parsers.parse_analysis(sample_json), client=fake_client, settings=settings)
    api_server.app.state.sessions['abc'] = session
    assert client.post('/chat/abc', json={'message': '  '}).status_code == 400
    fake_client.fail(RuntimeError('boom'))
    failed = client.post('/chat/abc', json={'message': 'hi'})
    assert failed.status_code == 502
    assert failed.json()['detail'] == chat_agent.CHAT_FAILED_MESSAGE


def test_session_registry_drops_oldest_past_limit(client, monkeypatch, fake_client, settings, sample_json) -> None:
    """Repeated analyses never hold more than POLICY_MAX_SESSIONS chat sessions."""
    monkeypatch.setenv('POLICY_MAX_SESSIONS', '5')
    monkeypatch.setattr(api_server, 'generate_analysis',
                        lambda topic, countries: parsers.parse_analysis(sample_json))
    monkeypatch.setattr(api_server, 'start_chat',
                        lambda analysis: chat_agent.start_chat(analysis, client=fake_client, settings=settings))

    ids = []
    for _ in range(40):
        response = client.post('/analyze', json={'topic': 'AI', 'countries': ['Germany']})
        assert response.status_code == 200
        ids.append(response.json()['sessionId'])

    sessions = api_server.app.state.sessions
    assert len(sessions) == 5
    assert list(sessions) == ids[-5:]
    assert client.post(f'/chat/{ids[0]}', json={'message': 'hi'}).status_code == 404


def test_delete_chat_session(client, fake_client, settings, sample_json) -> None:
    session = chat_agent.start_chat(parsers.parse_analysis(sample_json), client=fake_client, settings=settings)
    session_id = api_server.register_session(session)
    response = client.delete(f'/chat/{session_id}')
    assert response.status_code == 200
    assert response.json() == {'deleted': session_id}
    assert session_id not in api_server.app.state.sessions
    assert client.delete(f'/chat/{session_id}').status_code == 404
