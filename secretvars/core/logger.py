"""
secretvars.core.logger
======================
Structured logger for the secretvars contract.
Records operations as JSON-style dicts with timestamps and context,
standing in for the host platform's debug channel.

Fields that could carry confidential material are redacted before
an entry is stored or printed.
"""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


# ── Fields that are never written verbatim ────────────────────────────────────
_REDACTED_FIELDS = {
    "viewing_key", "key", "secret_variables", "secret_payload",
    "prng_seed", "seed", "seed_hash", "entropy",
}
_REDACTED = "<redacted>"


class StructuredLogger:
    """
    Lightweight structured logger that records operations as JSON-style dicts.

    Two output modes:
      console: prints formatted log lines to stderr
      silent:  stores entries in memory only (default)

    Usage
    -----
    logger = StructuredLogger(name="contract", console=True)
    logger.debug("instantiate", message="Contract was initialized by creator")
    entries = logger.get_entries(operation="instantiate")
    """

    def __init__(
        self,
        name: str = "secretvars",
        console: bool = False,
        max_entries: int = 10_000,
    ):
        self.name        = name
        self.console     = console
        self.max_entries = max_entries
        self._entries: List[Dict[str, Any]] = []

    def log(
        self,
        operation: str,
        level: str = "INFO",
        **kwargs: Any,
    ) -> Dict[str, Any]:
        """
        Record a structured log entry.

        Parameters
        ----------
        operation : str
            Short operation name (e.g. "instantiate", "set_viewers").
        level : str
            Log level: DEBUG / INFO / WARNING / ERROR / CRITICAL.
        **kwargs
            Additional key-value pairs to include in the entry.
            Confidential field names are replaced with a redaction marker.

        Returns
        -------
        dict
            The log entry that was recorded.
        """
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "logger":    self.name,
            "level":     level,
            "operation": operation,
            **_redact(kwargs),
        }

        # Trim oldest entries if cap exceeded
        if len(self._entries) >= self.max_entries:
            self._entries = self._entries[-(self.max_entries // 2):]

        self._entries.append(entry)

        if self.console:
            self._print_entry(entry)

        return entry

    def debug(self, operation: str, **kwargs: Any) -> Dict[str, Any]:
        return self.log(operation, level="DEBUG", **kwargs)

    def warn(self, operation: str, **kwargs: Any) -> Dict[str, Any]:
        return self.log(operation, level="WARNING", **kwargs)

    def get_entries(
        self,
        operation: Optional[str] = None,
        level: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Return stored log entries, optionally filtered.

        Parameters
        ----------
        operation : str or None
            Filter by operation name.
        level : str or None
            Filter by log level.
        """
        entries = self._entries
        if operation:
            entries = [e for e in entries if e.get("operation") == operation]
        if level:
            entries = [e for e in entries if e.get("level") == level]
        return list(entries)

    def clear(self) -> None:
        """Remove all stored log entries."""
        self._entries.clear()

    def _print_entry(self, entry: Dict[str, Any]) -> None:
        """Pretty-print a log entry to stderr."""
        ts  = entry.get("timestamp", "")[:19]
        lvl = entry.get("level", "INFO").ljust(8)
        op  = entry.get("operation", "")
        extras = {
            k: v for k, v in entry.items()
            if k not in ("timestamp", "logger", "level", "operation")
        }
        extra_str = " " + json.dumps(extras, default=str) if extras else ""
        print(
            f"[{ts}] {lvl} [{self.name}] {op}{extra_str}",
            file=sys.stderr,
            flush=True,
        )

    def __repr__(self) -> str:
        return (
            f"StructuredLogger(name={self.name!r}, "
            f"entries={len(self._entries)}, "
            f"console={self.console})"
        )


def _redact(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {
        k: (_REDACTED if k in _REDACTED_FIELDS else v)
        for k, v in fields.items()
    }
