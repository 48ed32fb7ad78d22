"""
Audit Logger module for the name probe system.

Provides structured logging with text and JSON output, severity filtering,
and masking of sensitive values such as API tokens.
"""

import json
import sys
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Optional, TextIO

from name_probe.enums import LogLevel


_LEVEL_ORDER = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 1,
    LogLevel.WARN: 2,
    LogLevel.ERROR: 3,
}


@dataclass
class LogEntry:
    """One structured event from a probe, the cache, or the engine."""

    timestamp: str
    level: LogLevel
    component: str
    message: str
    data: dict = field(default_factory=dict)


class AuditLogger:
    """
    Structured logger shared by ResultCache, SuggestionEngine and NameProbe.

    Entries below min_level are dropped before formatting. Values under
    token-like keys are masked so a configured GITHUB_TOKEN never reaches
    stderr, even in verbose runs.
    """

    # Substrings that mark a key as secret
    SENSITIVE_KEYS = frozenset({
        'token', 'secret', 'password', 'api_key', 'auth', 'authorization',
        'credential', 'credentials', 'access_token', 'github_token',
    })

    MASK_VALUE = "***MASKED***"

    def __init__(
        self,
        output_format: str = "text",
        output_stream: Optional[TextIO] = None,
        min_level: LogLevel = LogLevel.INFO,
    ):
        """
        Initialize the audit logger.

        Args:
            output_format: Output format - 'json', 'text', or 'both'
            output_stream: Output stream for log entries (defaults to sys.stderr)
            min_level: Entries below this level are discarded
        """
        if output_format not in ("json", "text", "both"):
            raise ValueError(f"Invalid output_format: {output_format}")

        self._output_format = output_format
        self._output_stream = output_stream or sys.stderr
        self._min_level = min_level
        self._entries: list[LogEntry] = []  # Store entries for testing

    @classmethod
    def from_level_name(
        cls,
        level: str,
        output_format: str = "text",
        output_stream: Optional[TextIO] = None,
    ) -> "AuditLogger":
        """Build a logger from a level name such as 'debug' or 'warn'."""
        try:
            min_level = LogLevel(level.lower())
        except ValueError:
            min_level = LogLevel.INFO
        return cls(output_format=output_format, output_stream=output_stream, min_level=min_level)

    @property
    def output_format(self) -> str:
        return self._output_format

    @property
    def min_level(self) -> LogLevel:
        return self._min_level

    @property
    def entries(self) -> list[LogEntry]:
        """Get all logged entries (for testing)."""
        return self._entries.copy()

    def clear_entries(self) -> None:
        self._entries.clear()

    def is_enabled_for(self, level: LogLevel) -> bool:
        return _LEVEL_ORDER[level] >= _LEVEL_ORDER[self._min_level]

    def log(
        self,
        level: LogLevel,
        component: str,
        message: str,
        data: Optional[dict] = None,
    ) -> Optional[LogEntry]:
        """
        Log an entry in the configured format(s).

        Args:
            level: Log severity level
            component: Component name generating the log
            message: Human-readable log message
            data: Optional additional data to include

        Returns:
            The created LogEntry, or None if the level is filtered out
        """
        if not self.is_enabled_for(level):
            return None

        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            level=level,
            component=component,
            message=message,
            data=self.mask_sensitive_data(data or {}),
        )

        self._entries.append(entry)
        self._output_entry(entry)
        return entry

    def is_sensitive_key(self, key: object) -> bool:
        """True for keys such as 'github_token' or 'Authorization'."""
        lowered = str(key).lower()
        return any(marker in lowered for marker in self.SENSITIVE_KEYS)

    def mask_sensitive_data(self, data: dict) -> dict:
        """
        Copy log data with secret values replaced by MASK_VALUE.

        Probe and config payloads nest request headers inside lists and
        sub-dicts, so masking descends into both. The input is not modified.
        """
        if not isinstance(data, dict):
            return data
        return {
            key: self.MASK_VALUE if self.is_sensitive_key(key) else self._mask_value(value)
            for key, value in data.items()
        }

    def _mask_value(self, value):
        if isinstance(value, dict):
            return self.mask_sensitive_data(value)
        if isinstance(value, (list, tuple)):
            return [self._mask_value(item) for item in value]
        return value

    def _output_entry(self, entry: LogEntry) -> None:
        lines = []
        if self._output_format != "text":
            lines.append(self.format_json(entry))
        if self._output_format != "json":
            lines.append(self.format_text(entry))
        self._output_stream.write("".join(f"{line}\n" for line in lines))
        self._output_stream.flush()

    @staticmethod
    def _dump(value) -> str:
        return json.dumps(value, ensure_ascii=False, default=str)

    def format_json(self, entry: LogEntry) -> str:
        """One JSON object per line, for piping `name-probe -v` output into jq."""
        payload = asdict(entry)
        payload["level"] = entry.level.value
        return self._dump(payload)

    def format_text(self, entry: LogEntry) -> str:
        """
        Human-readable line, e.g.:

            [2024-05-01T12:00:00+00:00] WARN [NameProbe] Probe failed for npm:foo: Rate limited {...}
        """
        line = f"[{entry.timestamp}] {entry.level.value.upper()} [{entry.component}] {entry.message}"
        if entry.data:
            line = f"{line} {self._dump(entry.data)}"
        return line
