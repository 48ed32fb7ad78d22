"""
Suggestion engine: generates name variations and ranks them by availability.

Variations are evaluated in fixed-size batches. Names inside a batch run
concurrently; batches run one after another, so at most
``concurrency_limit`` names are in flight at any time.
"""

import asyncio
from typing import Callable, Iterable, Optional, Sequence

from .audit_logger import AuditLogger
from .enums import LogLevel, ProbeStatus
from .models import ProbeResult, SuggestionResult
from .probes import Probe
from .registry import PlatformId, ProbeRegistry
from .result_cache import ResultCache, cached_check


PREFIXES = ("go", "get", "use", "try", "my", "the")
SUFFIXES = ("hq", "app", "io", "lab", "kit", "dev", "hub")
COMBOS = (
    ("go", "hub"),
    ("get", "app"),
    ("my", "app"),
    ("the", "hub"),
)

DEFAULT_CONCURRENCY_LIMIT = 3


def generate_variations(
    base_name: str,
    prefixes: Sequence[str] = PREFIXES,
    suffixes: Sequence[str] = SUFFIXES,
    combos: Sequence[tuple[str, str]] = COMBOS,
) -> list[str]:
    """
    Generate candidate names from a base name.

    Order: the base name, then ``pbase`` and ``p-base`` per prefix, then
    ``bases`` and ``base-s`` per suffix, then ``pbases`` per combo.
    Duplicates are dropped, keeping the first occurrence.

    Args:
        base_name: The name to derive variations from
        prefixes: Prefix vocabulary
        suffixes: Suffix vocabulary
        combos: (prefix, suffix) pairs for combined variations

    Returns:
        Ordered list of unique variations, starting with base_name
    """
    candidates = [base_name]
    for prefix in prefixes:
        candidates.append(f"{prefix}{base_name}")
        candidates.append(f"{prefix}-{base_name}")
    for suffix in suffixes:
        candidates.append(f"{base_name}{suffix}")
        candidates.append(f"{base_name}-{suffix}")
    for prefix, suffix in combos:
        candidates.append(f"{prefix}{base_name}{suffix}")
    return list(dict.fromkeys(candidates))


def calculate_score(results: Iterable[ProbeResult]) -> int:
    """
    Percentage of non-error results that report the name as available.

    Errors are excluded from both numerator and denominator. Halves round up.
    Returns 0 when every result is an error (or there are none).
    """
    results = list(results)
    available = sum(1 for r in results if r.status == ProbeStatus.AVAILABLE)
    total = sum(1 for r in results if r.status != ProbeStatus.ERROR)
    if total == 0:
        return 0
    return (200 * available + total) // (2 * total)


def rank_suggestions(suggestions: Iterable[SuggestionResult]) -> list[SuggestionResult]:
    """Sort by score, highest first; equal scores keep their generation order."""
    return sorted(suggestions, key=lambda s: -s.score)


class SuggestionEngine:
    """Evaluates generated variations against all requested probes."""

    def __init__(
        self,
        registry: ProbeRegistry,
        cache: Optional[ResultCache] = None,
        generator: Callable[[str], list[str]] = generate_variations,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the suggestion engine.

        Args:
            registry: Resolves platform ids to probes
            cache: Result cache; None disables caching
            generator: Produces the variations of a base name
            logger: Optional audit logger
        """
        self._registry = registry
        self._cache = cache
        self._generator = generator
        self._logger = logger

    async def evaluate(
        self,
        base_name: str,
        platforms: Optional[Iterable[PlatformId]] = None,
        tlds: Optional[Iterable[str]] = None,
        use_cache: bool = True,
        concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT,
    ) -> list[SuggestionResult]:
        """
        Check every variation of a base name and rank the results.

        Args:
            base_name: Name to generate variations from
            platforms: Platform ids to probe (None for the defaults)
            tlds: TLDs for the domain platform (None for the configured default)
            use_cache: Consult and update the result cache
            concurrency_limit: Number of variations evaluated concurrently

        Returns:
            One SuggestionResult per variation, sorted by descending score

        Raises:
            ValueError: If concurrency_limit is less than 1
        """
        if concurrency_limit < 1:
            raise ValueError(f"concurrency_limit must be at least 1, got {concurrency_limit}")

        probes = self._registry.resolve(platforms, tlds)
        variations = self._generator(base_name)
        cache = self._cache if use_cache else None

        self._log_info(
            f"Evaluating {len(variations)} variations of {base_name!r}",
            {
                "base_name": base_name,
                "variations": len(variations),
                "probes": len(probes),
                "concurrency_limit": concurrency_limit,
            },
        )

        suggestions: list[SuggestionResult] = []
        for start in range(0, len(variations), concurrency_limit):
            batch = variations[start:start + concurrency_limit]
            self._log_debug(
                f"Batch {start // concurrency_limit + 1}: {', '.join(batch)}",
                {"batch": batch},
            )
            batch_results = await asyncio.gather(
                *(self._evaluate_name(name, probes, cache) for name in batch)
            )
            suggestions.extend(batch_results)

        return rank_suggestions(suggestions)

    async def _evaluate_name(
        self,
        name: str,
        probes: Sequence[Probe],
        cache: Optional[ResultCache],
    ) -> SuggestionResult:
        # Probes for one name run sequentially, in registry order
        results = []
        for probe in probes:
            results.append(await cached_check(probe, name, cache))
        return SuggestionResult(
            name=name,
            results=tuple(results),
            score=calculate_score(results),
        )

    def _log_info(self, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(LogLevel.INFO, "SuggestionEngine", message, data)

    def _log_debug(self, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(LogLevel.DEBUG, "SuggestionEngine", message, data)
