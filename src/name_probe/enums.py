"""
Enumeration types for the name probe system.

These enums provide type-safe constants for platforms, probe outcomes,
error codes, and logging levels throughout the system.
"""

from enum import Enum


class Platform(Enum):
    """External namespace a probe targets."""

    GITHUB = "github"
    NPM = "npm"
    PYPI = "pypi"
    INSTAGRAM = "instagram"
    X = "x"
    DOMAIN = "domain"


class ProbeStatus(Enum):
    """Availability status reported by a single probe."""

    AVAILABLE = "available"
    TAKEN = "taken"
    ERROR = "error"


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class ProbeErrorCode(Enum):
    """Error codes for probe and cache failures."""

    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    UNEXPECTED_STATUS = "unexpected_status"
    PARSE_ERROR = "parse_error"
    RATE_LIMITED = "rate_limited"
    RESOLVER_ERROR = "resolver_error"
    IO_ERROR = "io_error"
    EMPTY_NAME = "empty_name"
