"""
Configuration dataclasses for the name probe system.

Configuration is built once by the caller and passed explicitly into the
result cache, the probes, and the orchestrator.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


def default_cache_dir() -> Path:
    """Default location of the on-disk result cache."""
    return Path.home() / ".name_probe" / "cache"


@dataclass
class CacheConfig:
    """Result cache location and TTLs."""

    cache_dir: Path = field(default_factory=default_cache_dir)
    ttl_available_seconds: int = 3600
    ttl_taken_seconds: int = 86400


@dataclass
class GitHubConfig:
    """GitHub probe settings."""

    token: Optional[str] = None


@dataclass
class HttpConfig:
    """Shared HTTP client settings."""

    timeout_seconds: float = 10.0
    user_agent: str = "name-probe"


@dataclass
class DnsConfig:
    """DNS probe settings."""

    timeout_seconds: float = 5.0


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"
    output_format: str = "text"  # 'json', 'text', 'both'


@dataclass
class SystemConfig:
    """Main system configuration combining all sub-configurations."""

    cache: CacheConfig = field(default_factory=CacheConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    dns: DnsConfig = field(default_factory=DnsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    default_tlds: list[str] = field(default_factory=lambda: ["com"])
