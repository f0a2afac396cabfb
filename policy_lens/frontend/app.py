"""
Streamlit user interface for the Policy Lens comparative analysis app.

Users describe a policy topic, choose the countries to compare and
request an AI-generated analysis.  The result is shown as a dashboard
of key themes, a common-clause frequency chart, divergent approaches
and one card per country.  A chat assistant in the sidebar answers
follow-up questions using only the generated analysis as context.

If no OpenAI API key is configured, generating an analysis reports
the generic failure message and the server log shows the cause.
"""

from __future__ import annotations

import json
from typing import Any, Callable, MutableMapping, Sequence

import streamlit as st  # type: ignore

from policy_lens.backend import countries as country_list
from policy_lens.backend import insights
from policy_lens.backend.analysis_service import generate_analysis
from policy_lens.backend.chat_agent import CHAT_APOLOGY, ChatMessage, start_chat
from policy_lens.backend.data_validator import AnalysisValidator
from policy_lens.backend.errors import ChatError, PolicyLensError
from policy_lens.backend.models import FullAnalysis


def _reset_session() -> None:
    """Initialise default values in the Streamlit session state."""
    state_defaults = {
        "view": "input",  # "input" or "dashboard"
        "topic": "",
        "countries": list(country_list.DEFAULT_COUNTRIES),
        "analysis": None,  # FullAnalysis of the last successful run
        "requested_countries": [],  # countries the analysis was run for
        "validation_report": None,
        "chat_session": None,  # ChatSession seeded from the analysis
        "error": None,
    }
    for key, default in state_defaults.items():
        if key not in st.session_state:
            st.session_state[key] = default


def handle_generate(
    state: MutableMapping[str, Any],
    topic: str,
    countries: Sequence[str],
    generate: Callable[..., FullAnalysis] = generate_analysis,
    chat_factory: Callable[..., Any] = start_chat,
) -> bool:
    """Run an analysis and update ``state``.

    On success the analysis, its validation report and a freshly seeded
    chat session replace whatever was there before.  On any failure only
    ``state["error"]`` changes, so a previous analysis stays available.
    Returns True on success.
    """
    try:
        country_list.validate_request(topic, countries)
        analysis = generate(topic, list(countries))
    except PolicyLensError as e:
        state["error"] = str(e)
        return False
    _, report = AnalysisValidator().validate_analysis(analysis, countries)
    state["analysis"] = analysis
    state["requested_countries"] = list(countries)
    state["validation_report"] = report
    state["chat_session"] = chat_factory(analysis)
    state["error"] = None
    state["view"] = "dashboard"
    return True


def switch_view(state: MutableMapping[str, Any], view: str) -> None:
    """Change the main view; a banner from the previous view is dropped."""
    state["view"] = view
    state["error"] = None


def handle_chat(state: MutableMapping[str, Any], message: str) -> None:
    """Send ``message`` to the current chat session, recording failures as replies."""
    session = state.get("chat_session")
    if session is None or not message.strip():
        return
    try:
        session.send_message(message)
    except ChatError:
        session.messages.append(ChatMessage("agent", CHAT_APOLOGY))


def _add_new_country() -> None:
    # Widget callbacks may reset the input's own state; keep rejected text visible
    updated = country_list.add_country(st.session_state.countries, st.session_state.get("new_country", ""))
    if len(updated) != len(st.session_state.countries):
        st.session_state.countries = updated
        st.session_state.new_country = ""


def show_input_step() -> None:
    """Display the topic and country selection form."""
    st.header("Comparative policy analysis")
    st.write(
        "Describe the policy area you want to compare, choose the countries to include and "
        "generate an AI-assisted dashboard."
    )
    st.session_state.topic = st.text_area(
        "Policy topic",
        value=st.session_state.topic,
        placeholder="e.g., Analyze data privacy laws and their impact on international business...",
        height=100,
    )
    st.caption("Or try an example:")
    example_cols = st.columns(2)
    for i, example in enumerate(country_list.EXAMPLE_PROMPTS):
        with example_cols[i % 2]:
            if st.button(example, key=f"example_{i}", use_container_width=True):
                st.session_state.topic = example
                st.rerun()
    st.divider()
    st.subheader(f"Countries ({len(st.session_state.countries)})")
    add_col, button_col = st.columns([4, 1])
    with add_col:
        st.text_input("Add a country", key="new_country", label_visibility="collapsed",
                      placeholder="Add a country...", on_change=_add_new_country)
    with button_col:
        st.button("Add", use_container_width=True, on_click=_add_new_country)
    chip_cols = st.columns(4)
    for i, country in enumerate(st.session_state.countries):
        with chip_cols[i % 4]:
            if st.button(f"✕ {country}", key=f"remove_{i}_{country}", use_container_width=True):
                st.session_state.countries = country_list.remove_country(st.session_state.countries, country)
                st.rerun()
    st.divider()
    if st.button("Generate dashboard", type="primary"):
        with st.spinner("Generating analysis… This may take a moment."):
            handle_generate(st.session_state, st.session_state.topic, st.session_state.countries)
        st.rerun()
    if st.session_state.analysis is not None and st.button("Back to previous dashboard"):
        switch_view(st.session_state, "dashboard")
        st.rerun()


def show_clause_chart(analysis: FullAnalysis) -> None:
    """Render common clauses as percentage bars, highest frequency first."""
    frame = insights.clause_frequency_frame(analysis.dashboard_summary.common_clauses)
    if frame.empty:
        st.info("No common clauses were identified.")
        return
    for row in frame.itertuples(index=False):
        st.progress(int(round(row.frequency)), text=f"**{row.clause}**: {row.frequency:.0f}%")
        st.caption(row.description)


def show_dashboard_step() -> None:
    """Display the generated analysis."""
    analysis: FullAnalysis = st.session_state.analysis
    summary = analysis.dashboard_summary
    stats = insights.summarize_analysis(analysis, st.session_state.requested_countries)
    if st.button("← New analysis"):
        switch_view(st.session_state, "input")
        st.rerun()
    st.header("Analysis dashboard")
    st.write(f"Topic: *{st.session_state.topic}*")
    metric_cols = st.columns(4)
    metric_cols[0].metric("Countries covered", f"{stats['countries_covered']}/{stats['countries_requested']}")
    metric_cols[1].metric("Key themes", stats["key_themes"])
    metric_cols[2].metric("Common clauses", stats["common_clauses"])
    metric_cols[3].metric("Divergent approaches", stats["divergent_approaches"])
    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Key themes")
        for theme in summary.key_themes:
            st.markdown(f"- {theme}")
        st.subheader("Divergent approaches")
        for approach in summary.divergent_approaches:
            st.markdown(f"**{approach.approach}**")
            st.write(approach.description)
            if approach.examples:
                st.caption("Examples: " + ", ".join(approach.examples))
    with col2:
        st.subheader("Common clauses")
        show_clause_chart(analysis)
    report = st.session_state.validation_report
    if report and report["issues"]:
        with st.expander(f"Data quality: {report['quality_score']:.0f}% ({len(report['issues'])} issues)"):
            for issue in report["issues"]:
                st.warning(f"{issue['subject']}: {issue['description']} (severity: {issue['severity']})")
            for rec in report["recommendations"]:
                st.info(rec)
    st.divider()
    st.subheader("Individual policy analyses")
    for contract in analysis.sorted_contracts():
        with st.container(border=True):
            st.markdown(f"**{contract.policy_title}**")
            st.caption(contract.country)
            with st.expander("View details & suggestions"):
                st.markdown("**Summary**")
                st.write(contract.summary)
                if contract.suggestions:
                    st.markdown("**Suggestions**")
                    st.write(contract.suggestions)
    frame = insights.contracts_frame(analysis)
    download_cols = st.columns(2)
    download_cols[0].download_button(
        label="Download policies as CSV",
        data=frame.to_csv(index=False).encode("utf-8"),
        file_name="policy_analysis.csv",
        mime="text/csv",
    )
    download_cols[1].download_button(
        label="Download full analysis as JSON",
        data=json.dumps(analysis.to_dict(), indent=2).encode("utf-8"),
        file_name="policy_analysis.json",
        mime="application/json",
    )


def show_chat_panel() -> None:
    """Sidebar chat assistant for follow-up questions."""
    session = st.session_state.chat_session
    st.title("Chat agent")
    if session is None:
        st.caption("Generate an analysis to start chatting about it.")
        return
    for msg in session.messages:
        with st.chat_message("user" if msg.sender == "user" else "assistant"):
            st.write(msg.text)
    with st.form("chat_form", clear_on_submit=True):
        message = st.text_input("Ask about the policies...", label_visibility="collapsed",
                                placeholder="Ask about the policies...")
        sent = st.form_submit_button("Send")
    if sent and message.strip():
        with st.spinner("Thinking…"):
            handle_chat(st.session_state, message)
        st.rerun()
    if st.button("Clear conversation"):
        session.reset()
        st.rerun()


def main() -> None:
    """Entry point for the Streamlit application."""
    st.set_page_config(
        page_title="Policy Lens",
        page_icon="🌐",
        layout="wide",
    )
    _reset_session()
    with st.sidebar:
        show_chat_panel()
    if st.session_state.error:
        st.error(st.session_state.error)
    if st.session_state.view == "dashboard" and st.session_state.analysis is not None:
        show_dashboard_step()
    else:
        show_input_step()


if __name__ == "__main__":
    main()
