"""
Data models for the name probe system.

This module defines the normalized probe result, the persisted cache entry,
and the ranked suggestion result.
"""

from dataclasses import dataclass, field
from typing import Optional

from .enums import Platform, ProbeStatus


@dataclass(frozen=True)
class ProbeResult:
    """
    Normalized outcome of one probe for one name.

    ``error`` is set if and only if ``status`` is ERROR. ``cached`` is True
    only for results served from the result cache.
    """

    platform: Platform
    name: str  # 'name.tld' for domain probes
    status: ProbeStatus
    error: Optional[str] = None
    cached: bool = False

    def __post_init__(self) -> None:
        if self.status == ProbeStatus.ERROR and not self.error:
            raise ValueError("An error result requires an error message")
        if self.status != ProbeStatus.ERROR and self.error is not None:
            raise ValueError(f"A {self.status.value} result cannot carry an error message")

    @property
    def key(self) -> str:
        """Identity used for caching and display, e.g. 'npm:foo' or 'domain:foo.com'."""
        return f"{self.platform.value}:{self.name}"

    def to_dict(self) -> dict:
        """Convert result to a JSON-serializable dictionary."""
        data = {
            "platform": self.platform.value,
            "name": self.name,
            "status": self.status.value,
            "cached": self.cached,
        }
        if self.error is not None:
            data["error"] = self.error
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ProbeResult":
        """Rebuild a result from ``to_dict`` output."""
        return cls(
            platform=Platform(data["platform"]),
            name=data["name"],
            status=ProbeStatus(data["status"]),
            error=data.get("error"),
            cached=bool(data.get("cached", False)),
        )


@dataclass(frozen=True)
class CacheEntry:
    """A persisted probe result with its creation time and TTL."""

    result: ProbeResult
    created_at: float  # Epoch seconds
    ttl_seconds: int

    def is_expired(self, now: float) -> bool:
        """Return True once the entry is older than its TTL."""
        return now - self.created_at > self.ttl_seconds

    def to_dict(self) -> dict:
        return {
            "result": self.result.to_dict(),
            "created_at": self.created_at,
            "ttl_seconds": self.ttl_seconds,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CacheEntry":
        return cls(
            result=ProbeResult.from_dict(data["result"]),
            created_at=float(data["created_at"]),
            ttl_seconds=int(data["ttl_seconds"]),
        )


@dataclass(frozen=True)
class SuggestionResult:
    """A generated name variation with its probe results and availability score."""

    name: str
    results: tuple[ProbeResult, ...] = field(default_factory=tuple)
    score: int = 0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "score": self.score,
            "results": [result.to_dict() for result in self.results],
        }
