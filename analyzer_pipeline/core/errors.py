"""
Error Taxonomy
Structured error kinds shared by the provider clients, the key rotator and the flows.
"""

from enum import Enum
from typing import Optional


class AnalyzerError(Exception):
    """Base class for every error the analyzer surfaces to the user."""
    pass


class ProviderError(AnalyzerError):
    """
    A call to an external provider (YouTube, Gemini, Google Sheets) failed.

    Attributes:
        provider: Short provider name ("youtube", "gemini", "sheet").
        reason: Machine-readable reason reported by the provider, if any.
    """

    def __init__(self, message: str, provider: str = "", reason: str = ""):
        super().__init__(message)
        self.provider = provider
        self.reason = reason


class QuotaExhaustedError(ProviderError):
    """The credential used for the call has no quota left for the current period."""
    pass


class NotFoundError(ProviderError):
    """The requested channel, video or resource does not exist."""
    pass


class TransientProviderError(ProviderError):
    """Network failure or provider-side (5xx) error. Not retried automatically."""
    pass


class FatalProviderError(ProviderError):
    """Any other provider failure: malformed request, invalid key, forbidden."""
    pass


class EmptyPoolError(AnalyzerError):
    """Raised when a key rotation is requested over an empty pool."""
    pass


class AllCredentialsExhaustedError(AnalyzerError):
    """Every key in the pool reported quota exhaustion."""

    def __init__(self, pool_name: str, attempts: int):
        super().__init__(
            f"All {attempts} {pool_name} API key(s) have exhausted their quota."
        )
        self.pool_name = pool_name
        self.attempts = attempts


class ConfigurationError(AnalyzerError):
    """Remote or local configuration is missing, unreachable or malformed."""
    pass


class ValidationError(AnalyzerError):
    """Bad user input."""
    pass


class AccessDeniedReason(str, Enum):
    EMPTY = "empty"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    MALFORMED_DATE = "malformed_date"


_ACCESS_MESSAGES = {
    AccessDeniedReason.EMPTY: "Please enter an access key.",
    AccessDeniedReason.NOT_FOUND: "Access key not found. Please try again.",
    AccessDeniedReason.EXPIRED: "Access key has expired. Contact the administrator to renew it.",
    AccessDeniedReason.MALFORMED_DATE: (
        "The expiration date stored for this key is malformed. Contact the administrator."
    ),
}


class AccessDeniedError(AnalyzerError):
    """Login gate refused an access key."""

    def __init__(self, reason: AccessDeniedReason, message: Optional[str] = None):
        super().__init__(message or _ACCESS_MESSAGES[reason])
        self.reason = reason
