"""
Result Cache module for persistent probe results.

Stores one JSON file per (platform, name) pair with a status-dependent TTL.
Caching is best-effort: read and write faults are logged and absorbed, never
raised to the probing pipeline.
"""

import hashlib
import json
import os
import tempfile
import time
from dataclasses import replace
from pathlib import Path
from typing import Callable, Optional, Union

from .audit_logger import AuditLogger
from .config import CacheConfig
from .enums import LogLevel, Platform, ProbeErrorCode, ProbeStatus
from .exceptions import CacheFault
from .models import CacheEntry, ProbeResult
from .probes import Probe


class ResultCache:
    """
    File-backed TTL cache for probe results.

    Entries are immutable once written and expire lazily: the first lookup
    that sees an expired entry deletes it.
    """

    SUFFIX = ".json"

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        clock: Callable[[], float] = time.time,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the result cache.

        Args:
            config: Cache directory and TTLs
            clock: Returns the current time in epoch seconds
            logger: Optional audit logger for absorbed faults
        """
        self._config = config or CacheConfig()
        self._cache_dir = Path(self._config.cache_dir)
        self._clock = clock
        self._logger = logger

    @staticmethod
    def compute_key(platform: Union[Platform, str], name: str) -> str:
        """
        Derive the storage key for a (platform, name) pair.

        Returns:
            Hex SHA-256 digest of 'platform:name'
        """
        platform_value = platform.value if isinstance(platform, Platform) else str(platform)
        return hashlib.sha256(f"{platform_value}:{name}".encode("utf-8")).hexdigest()

    def path_for(self, platform: Union[Platform, str], name: str) -> Path:
        return self._cache_dir / f"{self.compute_key(platform, name)}{self.SUFFIX}"

    def ttl_for(self, status: ProbeStatus) -> int:
        if status == ProbeStatus.AVAILABLE:
            return self._config.ttl_available_seconds
        return self._config.ttl_taken_seconds

    def lookup(self, platform: Union[Platform, str], name: str) -> Optional[ProbeResult]:
        """
        Get a cached result if one exists and has not expired.

        Args:
            platform: Platform the result was reported for
            name: The result's name ('name.tld' for domains)

        Returns:
            The stored result with ``cached=True``, or None on a miss, an
            expired entry, or an unreadable entry
        """
        path = self.path_for(platform, name)
        try:
            entry = self._read_entry(path)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                self._delete(path)
                return None
            return replace(entry.result, cached=True)
        except CacheFault as e:
            self._log(LogLevel.DEBUG, f"Cache read failed, treating as miss: {e.message}", e.details)
            return None

    def store(self, result: ProbeResult) -> None:
        """
        Persist a result. ERROR results are never cached.

        Write failures are logged and swallowed.
        """
        if result.status == ProbeStatus.ERROR:
            return

        entry = CacheEntry(
            result=replace(result, cached=False),
            created_at=self._clock(),
            ttl_seconds=self.ttl_for(result.status),
        )
        try:
            self._write_entry(self.path_for(result.platform, result.name), entry)
        except CacheFault as e:
            self._log(LogLevel.WARN, f"Cache write failed: {e.message}", e.details)

    def clear(self) -> int:
        """
        Remove all cache entries.

        Returns:
            Number of entries removed
        """
        removed = 0
        try:
            if not self._cache_dir.exists():
                return 0
            for path in self._cache_dir.glob(f"*{self.SUFFIX}"):
                try:
                    path.unlink()
                    removed += 1
                except OSError as e:
                    self._log(LogLevel.WARN, f"Failed to delete cache entry: {e}", {"file_path": str(path)})
        except OSError as e:
            self._log(LogLevel.WARN, f"Failed to clear cache: {e}", {"cache_dir": str(self._cache_dir)})
        return removed

    def _read_entry(self, path: Path) -> Optional[CacheEntry]:
        """
        Read and parse an entry file.

        Returns:
            The entry, or None if the file does not exist

        Raises:
            CacheFault: If the file cannot be read or parsed
        """
        try:
            if not path.exists():
                return None
            with open(path, "r", encoding="utf-8") as f:
                raw_data = json.load(f)
        except FileNotFoundError:
            return None
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CacheFault(
                code=ProbeErrorCode.PARSE_ERROR.value,
                message=f"Failed to parse cache entry: {e}",
                details={"file_path": str(path)},
            )
        except OSError as e:
            raise CacheFault(
                code=ProbeErrorCode.IO_ERROR.value,
                message=f"Failed to read cache entry: {e}",
                details={"file_path": str(path)},
            )

        try:
            return CacheEntry.from_dict(raw_data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise CacheFault(
                code=ProbeErrorCode.PARSE_ERROR.value,
                message=f"Malformed cache entry: {e}",
                details={"file_path": str(path)},
            )

    def _write_entry(self, path: Path, entry: CacheEntry) -> None:
        """
        Write an entry atomically via a temporary file in the same directory.

        Raises:
            CacheFault: If the entry cannot be written
        """
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(entry.to_dict(), f, indent=2, sort_keys=True)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
            raise CacheFault(
                code=ProbeErrorCode.IO_ERROR.value,
                message=f"Failed to write cache entry: {e}",
                details={"file_path": str(path)},
            )

    def _delete(self, path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise CacheFault(
                code=ProbeErrorCode.IO_ERROR.value,
                message=f"Failed to delete expired cache entry: {e}",
                details={"file_path": str(path)},
            )

    def _log(self, level: LogLevel, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(level, "ResultCache", message, data)

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    @property
    def config(self) -> CacheConfig:
        return self._config


async def cached_check(
    probe: Probe,
    name: str,
    cache: Optional[ResultCache] = None,
) -> ProbeResult:
    """
    Check a name with one probe, consulting the cache first.

    Args:
        probe: The probe to run on a cache miss
        name: The candidate name
        cache: Result cache, or None to bypass caching entirely

    Returns:
        The cached result on a hit, otherwise the live result (stored on success)
    """
    if cache is not None:
        hit = cache.lookup(probe.platform, probe.target(name))
        if hit is not None:
            return hit

    result = await probe.check(name)

    if cache is not None:
        cache.store(result)
    return result
