"""
Prompt templates and the declared output schema.

The analysis prompt asks the model for a comparative review of one
policy topic across a list of countries, with every per-country
summary contrasted against a baseline country.  ``ANALYSIS_SCHEMA``
is sent alongside it so that the provider constrains its output to
the record structure defined in :mod:`policy_lens.backend.models`.
"""

from __future__ import annotations

from typing import Any, Dict, Sequence

from .models import FullAnalysis

CHAT_GREETING = 'Hello! I have full context on the generated analysis. How can I help you explore the data?'

ANALYSIS_PROMPT = """Analyze government policies related to "{topic}" for the following countries: {countries}.

Your task is to perform a comprehensive comparison and provide a detailed analysis in the specified JSON format.

**Instructions:**
1.  **Overall Dashboard Summary:**
    *   Identify 3-5 high-level **key themes** that emerge across all policies.
    *   Pinpoint the **most common clauses** or policy areas. For each, provide its name, a brief description, and its frequency as a percentage.
    *   Highlight significant **divergent approaches** where countries handle the same topic differently.
2.  **Individual Policy Analysis:**
    *   For each country, create a separate entry.
    *   Assign a unique 'id' starting from 0.
    *   Identify the 'country' and a descriptive 'policyTitle'.
    *   Provide a detailed 'summary' of its main provisions. **Crucially, for each summary, you MUST highlight notable differences from {baseline} policies on the same topic.**
    *   Offer concrete 'suggestions' for improvement for each policy.

Please find the relevant, up-to-date policies and provide the full analysis in the specified JSON structure."""

CHAT_INSTRUCTIONS = """You are an expert policy analysis assistant. Your knowledge base is strictly limited to the analysis provided below. Answer questions based ONLY on this context. Pay special attention to comparisons with {baseline} policy. If the answer isn't in the context, state that clearly.

**CONTEXT:**
{dashboard_context}

{contract_context}"""


def _string_array(description: str) -> Dict[str, Any]:
    return {'type': 'array', 'items': {'type': 'string'}, 'description': description}


ANALYSIS_SCHEMA: Dict[str, Any] = {
    'type': 'object',
    'additionalProperties': False,
    'properties': {
        'dashboardSummary': {
            'type': 'object',
            'additionalProperties': False,
            'properties': {
                'keyThemes': _string_array('Key themes identified across all policies.'),
                'commonClauses': {
                    'type': 'array',
                    'description': 'Clauses or policy areas that appear frequently.',
                    'items': {
                        'type': 'object',
                        'additionalProperties': False,
                        'properties': {
                            'clause': {'type': 'string', 'description': 'The name of the common clause/policy area.'},
                            'description': {'type': 'string', 'description': "A brief description of the clause's purpose."},
                            'frequency': {'type': 'number', 'description': 'The percentage of countries sharing this clause/policy.'},
                        },
                        'required': ['clause', 'description', 'frequency'],
                    },
                },
                'divergentApproaches': {
                    'type': 'array',
                    'description': 'Different ways countries handle a similar topic.',
                    'items': {
                        'type': 'object',
                        'additionalProperties': False,
                        'properties': {
                            'approach': {'type': 'string', 'description': 'The name of the divergent approach.'},
                            'description': {'type': 'string', 'description': 'A description of how this approach differs from others.'},
                            'examples': _string_array('Specific countries that use this approach.'),
                        },
                        'required': ['approach', 'description', 'examples'],
                    },
                },
            },
            'required': ['keyThemes', 'commonClauses', 'divergentApproaches'],
        },
        'contracts': {
            'type': 'array',
            'description': "An array of detailed analyses for each individual country's policy.",
            'items': {
                'type': 'object',
                'additionalProperties': False,
                'properties': {
                    'id': {'type': 'integer', 'description': 'A unique identifier for the policy, starting from 0.'},
                    'country': {'type': 'string', 'description': 'The country associated with the policy.'},
                    'policyTitle': {'type': 'string', 'description': 'The official title or a descriptive name of the policy.'},
                    'summary': {'type': 'string', 'description': "A concise summary of the policy's key points, highlighting notable differences from the baseline country's policies."},
                    'suggestions': {'type': ['string', 'null'], 'description': 'Actionable suggestions for improving or aligning the policy based on the comparative analysis.'},
                },
                'required': ['id', 'country', 'policyTitle', 'summary', 'suggestions'],
            },
        },
    },
    'required': ['dashboardSummary', 'contracts'],
}


def build_analysis_prompt(topic: str, countries: Sequence[str], baseline_country: str = 'Canada') -> str:
    """Compose the comparative analysis instruction for the model."""
    return ANALYSIS_PROMPT.format(
        topic=topic.strip(),
        countries=', '.join(countries),
        baseline=baseline_country,
    )


def build_chat_instructions(analysis: FullAnalysis, baseline_country: str = 'Canada') -> str:
    """Embed a completed analysis as the chat assistant's only context."""
    summary = analysis.dashboard_summary
    dashboard_context = '\n'.join([
        '**Dashboard Summary**',
        f"Key Themes: {', '.join(summary.key_themes)}",
        f"Common Clauses: {', '.join(c.clause for c in summary.common_clauses)}",
        f"Divergent Approaches: {', '.join(d.approach for d in summary.divergent_approaches)}",
    ])
    contract_context = '\n\n'.join(
        '\n'.join([
            f'**Policy: {c.policy_title} ({c.country})**',
            f'Summary (vs. {baseline_country}): {c.summary}',
            f"Suggestions: {c.suggestions or 'None provided'}",
        ])
        for c in analysis.sorted_contracts()
    )
    return CHAT_INSTRUCTIONS.format(
        baseline=baseline_country,
        dashboard_context=dashboard_context,
        contract_context=contract_context,
    )
