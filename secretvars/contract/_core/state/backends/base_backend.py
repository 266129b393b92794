"""Abstract backend interface."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional


class BaseStorageBackend(ABC):
    """
    Abstract byte key-value store that all storage backends must implement.

    A backend is responsible for:
      - Storing opaque byte values under string keys
      - Retrieving them by key
      - Removing keys
      - Listing keys under a prefix

    A single set() must be atomic: readers observe either the old value
    or the new one, never a partial write. Encryption is handled by the
    caller (PrefixedStorage), so a backend only ever sees ciphertext when
    encryption is enabled.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """
        Return the value stored under key.

        Returns
        -------
        bytes or None
            None if no such key exists.
        """
        ...

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """Store value under key, replacing any previous value."""
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete key. Missing keys are ignored."""
        ...

    @abstractmethod
    def keys(self, prefix: str = "") -> List[str]:
        """Return all keys starting with prefix, sorted."""
        ...

    def close(self) -> None:
        """Optional: release any resources (connections, file handles)."""
        pass
