"""
Error taxonomy for the scoring and status tracking core.

Per-item errors (one posting, one application) are caught by the batch
loops and turned into a skip or a degraded result. Only whole-batch
infrastructure failures (profile or application list cannot be loaded)
propagate to the caller.
"""
from typing import Optional


class InternScoutError(Exception):
    """Base exception for core errors."""
    pass


class DimensionMismatch(InternScoutError):
    """Raised when two vectors of unequal length are compared."""

    def __init__(self, left_dim: int, right_dim: int):
        super().__init__(f"Vector dimensions do not match: {left_dim} != {right_dim}")
        self.left_dim = left_dim
        self.right_dim = right_dim


class ScoreUnavailable(InternScoutError):
    """Raised when LLM sub-scores could not be obtained or parsed."""
    pass


class ExternalServiceError(InternScoutError):
    """Raised when an embedding, LLM or HTTP call fails outright."""

    def __init__(self, service: str, message: str = "External service error"):
        super().__init__(f"{service}: {message}")
        self.service = service


class CircuitOpenError(ExternalServiceError):
    """Raised instead of calling a service whose circuit breaker is open."""

    def __init__(self, service: str):
        super().__init__(service, "Service temporarily unavailable (circuit open)")


class InvalidStatusProposed(InternScoutError):
    """Raised when a signal source proposes a status outside the enumeration."""

    def __init__(self, proposed: str, source: Optional[str] = None):
        where = f" by {source}" if source else ""
        super().__init__(f"Invalid status proposed{where}: {proposed!r}")
        self.proposed = proposed
        self.source = source


class ReconciliationFetchError(InternScoutError):
    """Raised when the application list for a user cannot be loaded."""
    pass


class ProfileNotFoundError(InternScoutError):
    """Raised when the profile for a scoring run cannot be loaded."""
    pass
