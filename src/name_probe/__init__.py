"""
Name Probe - name availability checks across platforms.

This package checks whether a candidate name is free on GitHub, npm, PyPI,
Instagram, X, and as a domain, caches the results, and ranks generated name
variations by how widely available they are. An "available" result means no
public record was found, not that the name can actually be registered.
"""

__version__ = "0.1.0"
__author__ = "Name Probe Team"

from name_probe.exceptions import (
    NameProbeError,
    ValidationError,
    TransportError,
    RateLimitedError,
    CacheFault,
)
from name_probe.enums import (
    Platform,
    ProbeStatus,
    LogLevel,
    ProbeErrorCode,
)
from name_probe.config import (
    CacheConfig,
    GitHubConfig,
    HttpConfig,
    DnsConfig,
    LoggingConfig,
    SystemConfig,
)
from name_probe.models import (
    ProbeResult,
    CacheEntry,
    SuggestionResult,
)
from name_probe.probes import (
    Probe,
    GitHubProbe,
    RegistryProbe,
    InstagramProbe,
    XProbe,
)
from name_probe.dns_probe import (
    DomainProbe,
)
from name_probe.registry import (
    DEFAULT_PLATFORMS,
    ProbeRegistry,
    resolve_probes,
)
from name_probe.result_cache import (
    ResultCache,
    cached_check,
)
from name_probe.suggest import (
    SuggestionEngine,
    generate_variations,
    calculate_score,
)
from name_probe.audit_logger import (
    AuditLogger,
    LogEntry,
)
from name_probe.orchestrator import (
    NameProbe,
)
from name_probe.cli import (
    main as cli_main,
    create_parser,
    load_config_from_env,
)

__all__ = [
    # Exceptions
    "NameProbeError",
    "ValidationError",
    "TransportError",
    "RateLimitedError",
    "CacheFault",
    # Enums
    "Platform",
    "ProbeStatus",
    "LogLevel",
    "ProbeErrorCode",
    # Configuration
    "CacheConfig",
    "GitHubConfig",
    "HttpConfig",
    "DnsConfig",
    "LoggingConfig",
    "SystemConfig",
    # Models
    "ProbeResult",
    "CacheEntry",
    "SuggestionResult",
    # Probes
    "Probe",
    "GitHubProbe",
    "RegistryProbe",
    "InstagramProbe",
    "XProbe",
    "DomainProbe",
    # Registry
    "DEFAULT_PLATFORMS",
    "ProbeRegistry",
    "resolve_probes",
    # Result Cache
    "ResultCache",
    "cached_check",
    # Suggestion Engine
    "SuggestionEngine",
    "generate_variations",
    "calculate_score",
    # Audit Logger
    "AuditLogger",
    "LogEntry",
    # Orchestrator
    "NameProbe",
    # CLI
    "cli_main",
    "create_parser",
    "load_config_from_env",
]
