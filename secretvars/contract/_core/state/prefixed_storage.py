"""
secretvars.contract._core.state.prefixed_storage
=================================================
A namespaced view over a storage backend.

The state record and the credential table share one backend; each
owner gets its own key prefix. When a ValueCipher is supplied, values
are encrypted before they reach the backend and decrypted on the way
back, with the full backend key bound as associated data.
"""

from __future__ import annotations

from typing import List, Optional

from secretvars.contract._core.state.backends.base_backend import BaseStorageBackend
from secretvars.contract._core.state.backends.encryption import ValueCipher


class PrefixedStorage:
    """
    Parameters
    ----------
    backend : BaseStorageBackend
        Underlying byte key-value store.
    prefix : str
        Namespace prepended to every key (e.g. "state/").
    cipher : ValueCipher or None
        Optional at-rest encryption.
    """

    def __init__(
        self,
        backend: BaseStorageBackend,
        prefix: str,
        cipher: Optional[ValueCipher] = None,
    ):
        self._backend = backend
        self._prefix  = prefix
        self._cipher  = cipher

    def get(self, key: str) -> Optional[bytes]:
        full_key = self._prefix + key
        raw = self._backend.get(full_key)
        if raw is None or self._cipher is None:
            return raw
        return self._cipher.decrypt(full_key, raw)

    def set(self, key: str, value: bytes) -> None:
        full_key = self._prefix + key
        if self._cipher is not None:
            value = self._cipher.encrypt(full_key, value)
        self._backend.set(full_key, value)

    def remove(self, key: str) -> None:
        self._backend.remove(self._prefix + key)

    def keys(self) -> List[str]:
        """Return keys in this namespace, with the prefix stripped."""
        n = len(self._prefix)
        return [k[n:] for k in self._backend.keys(self._prefix)]

    def __repr__(self) -> str:
        return (
            f"PrefixedStorage(prefix={self._prefix!r}, "
            f"encrypted={self._cipher is not None})"
        )
