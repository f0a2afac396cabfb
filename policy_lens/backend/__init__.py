"""
Backend package for the Policy Lens application.

Contains the analysis records, prompt builders, response parsers,
the analysis and chat wrappers around the OpenAI API, validation
helpers and the HTTP API server.
"""
