"""
Name probe orchestrator.

This module is the entry point used by the CLI and by library callers. It
wires the shared HTTP client, the probe registry, the result cache, and the
suggestion engine together and exposes:
- check_name: probe one name on every requested platform
- suggest: generate, probe, and rank variations of a base name
- clear_cache: drop all cached results

An AVAILABLE result only means that no public record was found. It does not
prove that a name or domain can actually be registered.
"""

import asyncio
import time
from typing import Any, Iterable, Optional

import httpx

from .audit_logger import AuditLogger
from .config import SystemConfig
from .enums import LogLevel, ProbeErrorCode, ProbeStatus
from .exceptions import ValidationError
from .models import ProbeResult, SuggestionResult
from .registry import PlatformId, ProbeRegistry
from .result_cache import ResultCache, cached_check
from .suggest import DEFAULT_CONCURRENCY_LIMIT, SuggestionEngine


class NameProbe:
    """
    Coordinates probes, cache, and suggestion engine.

    Use as an async context manager so the HTTP client is closed:

        async with NameProbe(config) as prober:
            results = await prober.check_name("myproject")
    """

    def __init__(
        self,
        config: Optional[SystemConfig] = None,
        logger: Optional[AuditLogger] = None,
        client: Optional[httpx.AsyncClient] = None,
        resolver: Optional[Any] = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            config: System configuration
            logger: Optional audit logger
            client: HTTP client to use; if omitted one is created and owned
            resolver: Optional DNS resolver for the domain probes
        """
        self._config = config or SystemConfig()
        self._logger = logger
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(self._config.http.timeout_seconds),
            follow_redirects=False,
        )
        self._registry = ProbeRegistry(self._client, self._config, resolver)
        self._cache = ResultCache(self._config.cache, logger=logger)
        self._engine = SuggestionEngine(self._registry, self._cache, logger=logger)

    async def __aenter__(self) -> "NameProbe":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def check_name(
        self,
        name: str,
        platforms: Optional[Iterable[PlatformId]] = None,
        tlds: Optional[Iterable[str]] = None,
        no_cache: bool = False,
    ) -> list[ProbeResult]:
        """
        Check one name on every requested platform.

        All probes run concurrently; results come back in registry order.

        Args:
            name: Candidate name
            platforms: Platform ids (None for the defaults)
            tlds: TLDs for the domain platform
            no_cache: Skip reading and writing the result cache

        Returns:
            One ProbeResult per resolved probe

        Raises:
            ValidationError: If the name is empty
        """
        name = self._validate(name)
        start_time = time.perf_counter()
        probes = self._registry.resolve(platforms, tlds)
        cache = None if no_cache else self._cache

        self._log_info(
            f"Checking {name!r} on {len(probes)} probe(s)",
            {"name": name, "probes": [p.target(name) for p in probes], "no_cache": no_cache},
        )

        results = list(await asyncio.gather(
            *(cached_check(probe, name, cache) for probe in probes)
        ))

        for result in results:
            if result.status == ProbeStatus.ERROR:
                self._log_warn(
                    f"Probe failed for {result.key}: {result.error}",
                    {"platform": result.platform.value, "name": result.name, "error": result.error},
                )

        self._log_info(
            f"Check completed for {name!r}",
            {
                "name": name,
                "available": sum(1 for r in results if r.status == ProbeStatus.AVAILABLE),
                "taken": sum(1 for r in results if r.status == ProbeStatus.TAKEN),
                "errors": sum(1 for r in results if r.status == ProbeStatus.ERROR),
                "cached": sum(1 for r in results if r.cached),
                "duration_ms": (time.perf_counter() - start_time) * 1000,
            },
        )
        return results

    async def suggest(
        self,
        base_name: str,
        platforms: Optional[Iterable[PlatformId]] = None,
        tlds: Optional[Iterable[str]] = None,
        no_cache: bool = False,
        max_results: int = 10,
        concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT,
    ) -> list[SuggestionResult]:
        """
        Generate variations of a base name and return the best ones.

        Args:
            base_name: Name to derive variations from
            platforms: Platform ids (None for the defaults)
            tlds: TLDs for the domain platform
            no_cache: Skip reading and writing the result cache
            max_results: Maximum number of suggestions returned
            concurrency_limit: Variations evaluated concurrently per batch

        Returns:
            Up to max_results suggestions, highest score first

        Raises:
            ValidationError: If the base name is empty
        """
        base_name = self._validate(base_name)
        start_time = time.perf_counter()

        suggestions = await self._engine.evaluate(
            base_name,
            platforms=platforms,
            tlds=tlds,
            use_cache=not no_cache,
            concurrency_limit=concurrency_limit,
        )

        self._log_info(
            f"Suggestions ranked for {base_name!r}",
            {
                "base_name": base_name,
                "evaluated": len(suggestions),
                "returned": min(len(suggestions), max(max_results, 0)),
                "duration_ms": (time.perf_counter() - start_time) * 1000,
            },
        )
        return suggestions[:max(max_results, 0)]

    def clear_cache(self) -> int:
        """Remove all cached results and return how many were removed."""
        removed = self._cache.clear()
        self._log_info(f"Cleared {removed} cache entries", {"removed": removed})
        return removed

    def _validate(self, name: str) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError(
                code=ProbeErrorCode.EMPTY_NAME.value,
                message="Name must not be empty",
                details={"raw_input": name},
            )
        return cleaned

    def _log_info(self, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(LogLevel.INFO, "NameProbe", message, data)

    def _log_warn(self, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(LogLevel.WARN, "NameProbe", message, data)

    @property
    def registry(self) -> ProbeRegistry:
        return self._registry

    @property
    def cache(self) -> ResultCache:
        return self._cache

    @property
    def config(self) -> SystemConfig:
        return self._config
