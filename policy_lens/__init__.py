"""
Policy Lens comparative policy analysis package.

This package contains an AI-assisted dashboard for comparing government
policies across countries.  It includes the backend prompt, parsing and
session helpers built on the OpenAI API, an optional HTTP API, and a
Streamlit frontend.
"""
