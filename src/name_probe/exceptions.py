"""
Exception classes for the name probe system.

All exceptions inherit from NameProbeError and provide structured
error information with codes, messages, and optional details.
"""

from typing import Optional


class NameProbeError(Exception):
    """Base exception for all name probe errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(NameProbeError):
    """Raised when a candidate name is rejected before probing."""

    pass


class TransportError(NameProbeError):
    """Raised when a probe's network or DNS exchange fails or returns an unexpected status."""

    pass


class RateLimitedError(TransportError):
    """Raised when a remote service answers with HTTP 429."""

    pass


class CacheFault(NameProbeError):
    """Raised when a cache entry cannot be read, parsed, or written."""

    pass
