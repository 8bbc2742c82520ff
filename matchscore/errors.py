"""
Error taxonomy for the match scoring engine.

ProviderError and InputError demand different remediation at the caller
(retry later vs. fix the request), so they never share a branch.
"""

from typing import Optional


class MatchScoreError(Exception):
    """Base class for all engine errors."""
    pass


class ProviderError(MatchScoreError):
    """An external summarization/similarity call failed or timed out."""

    def __init__(self, message: str, capability: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message)
        self.capability = capability
        self.status = status


class CircuitOpenError(ProviderError):
    """The provider circuit is open; calls are refused until recovery."""
    pass


class InputError(MatchScoreError):
    """Missing or empty résumé / job text. Raised before any provider call."""

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = list(errors or [])


class InvariantError(MatchScoreError):
    """A computed value broke an engine invariant. Indicates a defect."""
    pass
