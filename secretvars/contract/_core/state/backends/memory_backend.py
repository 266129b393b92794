"""
secretvars.contract._core.state.backends.memory_backend
========================================================
In-memory storage backend.
All values stored in a Python dict. Data is lost on process restart.
Intended for development, demo, and testing.
"""

from __future__ import annotations

import threading
from typing import Dict, List, Optional

from secretvars.contract._core.state.backends.base_backend import BaseStorageBackend


class MemoryBackend(BaseStorageBackend):
    """
    Dict-based in-memory storage backend.

    Thread-safety: every operation runs under an internal lock, so a
    concurrent reader never sees a half-applied write.
    """

    def __init__(self):
        self._store: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[bytes]:
        """Return the value for key, or None if absent."""
        with self._lock:
            return self._store.get(key)

    def set(self, key: str, value: bytes) -> None:
        with self._lock:
            self._store[key] = bytes(value)

    def remove(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def keys(self, prefix: str = "") -> List[str]:
        with self._lock:
            return sorted(k for k in self._store if k.startswith(prefix))

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"MemoryBackend(entries={len(self._store)})"
