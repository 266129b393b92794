"""
secretvars.contract._core.gate.audit_log
=========================================
Bounded audit log of every authorization decision.

Each entry records: timestamp, operation, principal, result, reason.
Principals are masked. Viewing keys, payloads, and seeds are never recorded.
"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from secretvars.contract._core.gate.identity import mask_identity


class AuditLog:
    """
    In-memory audit log, capped at max_entries (oldest half dropped).

    Usage
    -----
    log = AuditLog()
    log.record("set_viewers", principal="creator", result="success", count=2)
    entries = log.get_entries(operation="set_viewers")
    """

    def __init__(self, max_entries: int = 10_000):
        self.max_entries = max_entries
        self._entries: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def record(
        self,
        operation: str,
        principal: str = "",
        result: str = "success",
        **kwargs: Any,
    ) -> Dict[str, Any]:
        """
        Append one audit log entry.

        Parameters
        ----------
        operation : "instantiate" | "set_viewers" | "set_secret_variables"
                    | "generate_viewing_key" | "get_secret_variables"
        principal : Caller identity, or the queried account for reads.
        result    : "success" | "denied" | "malformed"
        **kwargs  : Extra non-confidential fields (reason, count, ...).

        Returns
        -------
        dict
            The log entry that was recorded.
        """
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "operation": operation,
            "principal": mask_identity(principal) if principal else "",
            "result":    result,
        }
        entry.update(kwargs)
        with self._lock:
            if len(self._entries) >= self.max_entries:
                self._entries = self._entries[-(self.max_entries // 2):]
            self._entries.append(entry)
        return entry

    def get_entries(
        self,
        operation: Optional[str] = None,
        result:    Optional[str] = None,
        principal: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Return audit entries, optionally filtered."""
        entries = list(self._entries)
        if operation:
            entries = [e for e in entries if e.get("operation") == operation]
        if result:
            entries = [e for e in entries if e.get("result") == result]
        if principal:
            masked = mask_identity(principal)
            entries = [e for e in entries if e.get("principal") == masked]
        return entries

    def clear(self) -> None:
        """Remove all audit entries (TEST USE ONLY)."""
        self._entries.clear()

    def __repr__(self) -> str:
        return f"AuditLog(entries={len(self._entries)})"
