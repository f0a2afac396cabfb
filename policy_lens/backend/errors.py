"""Exception hierarchy for the Policy Lens backend."""


class PolicyLensError(Exception):
    """Base exception for the Policy Lens backend."""
    pass


class ValidationError(PolicyLensError, ValueError):
    """Raised when user input is rejected before any API call is made."""
    pass


class ResponseParseError(PolicyLensError):
    """Raised when model output cannot be turned into analysis records."""
    pass


class AnalysisError(PolicyLensError):
    """Generic user-facing failure of the analysis call."""
    pass


class ChatError(PolicyLensError):
    """Generic user-facing failure of a chat turn."""
    pass
