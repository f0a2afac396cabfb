"""
Tests for the Streamlit UI request handlers.

``handle_generate`` and ``handle_chat`` operate on any mutable mapping,
so a plain dict stands in for ``st.session_state``.
"""

from __future__ import annotations

from policy_lens.backend import chat_agent, countries, parsers
from policy_lens.backend.analysis_service import ANALYSIS_FAILED_MESSAGE
from policy_lens.backend.errors import AnalysisError
from policy_lens.frontend import app


def _state() -> dict:
    return {
        'view': 'input',
        'analysis': None,
        'requested_countries': [],
        'validation_report': None,
        'chat_session': None,
        'error': None,
    }


def test_empty_input_shows_error_without_calling(fake_client, settings) -> None:
    calls = []

    def generate(topic, selected):
        calls.append(topic)

    state = _state()
    assert app.handle_generate(state, '', ['Germany'], generate=generate) is False
    assert app.handle_generate(state, 'AI', [], generate=generate) is False
    assert calls == []
    assert state['error'] == countries.MISSING_INPUT_MESSAGE
    assert state['analysis'] is None


def test_successful_generate_replaces_state(fake_client, settings, sample_json) -> None:
    state = _state()
    state['error'] = 'old error'
    ok = app.handle_generate(
        state, 'AI', ['Germany', 'France', 'Japan'],
        generate=lambda topic, selected: parsers.parse_analysis(sample_json),
        chat_factory=lambda analysis: chat_agent.start_chat(analysis, client=fake_client, settings=settings),
    )
    assert ok is True
    assert state['view'] == 'dashboard'
    assert state['error'] is None
    assert [c.id for c in state['analysis'].contracts] == [0, 1, 2]
    assert state['requested_countries'] == ['Germany', 'France', 'Japan']
    assert state['validation_report']['summary']['total'] == 3
    assert state['chat_session'] is not None


def test_failed_generate_keeps_prior_analysis(fake_client, settings, sample_json) -> None:
    prior = parsers.parse_analysis(sample_json)
    session = chat_agent.start_chat(prior, client=fake_client, settings=settings)
    state = _state()
    state.update(analysis=prior, chat_session=session, requested_countries=['Germany'])

    def failing(topic, selected):
        raise AnalysisError(ANALYSIS_FAILED_MESSAGE)

    assert app.handle_generate(state, 'Energy', ['Japan'], generate=failing) is False
    assert state['error'] == ANALYSIS_FAILED_MESSAGE
    assert state['analysis'] is prior
    assert state['chat_session'] is session
    assert state['requested_countries'] == ['Germany']


def test_chat_failure_appends_apology(fake_client, settings, sample_json) -> None:
    session = chat_agent.start_chat(parsers.parse_analysis(sample_json), client=fake_client, settings=settings)
    state = _state()
    state['chat_session'] = session
    fake_client.fail(RuntimeError('down'))
    app.handle_chat(state, 'What about France?')
    assert session.messages[-2].text == 'What about France?'
    assert session.messages[-1].text == chat_agent.CHAT_APOLOGY

    fake_client.reply('France funds research hubs.', response_id='resp_y')
    app.handle_chat(state, 'What about France?')
    assert session.messages[-1].text == 'France funds research hubs.'


def test_chat_without_session_is_noop() -> None:
    state = _state()
    app.handle_chat(state, 'hello')
    assert state['chat_session'] is None


def test_returning_to_prior_dashboard_clears_failure_banner(sample_json) -> None:
    """After a failed run, going back to the old dashboard drops the error."""
    prior = parsers.parse_analysis(sample_json)
    state = _state()
    state['analysis'] = prior

    def failing(topic, selected):
        raise AnalysisError(ANALYSIS_FAILED_MESSAGE)

    app.handle_generate(state, 'Energy', ['Japan'], generate=failing)
    assert state['error'] == ANALYSIS_FAILED_MESSAGE

    app.switch_view(state, 'dashboard')
    assert state['view'] == 'dashboard'
    assert state['error'] is None
    assert state['analysis'] is prior

    state['error'] = 'stale'
    app.switch_view(state, 'input')
    assert state['view'] == 'input'
    assert state['error'] is None
