"""
secretvars.contract._core.state.backends.encryption
====================================================
At-rest encryption for stored values.

Values are sealed with AES-256-GCM. The encryption key is derived once
per cipher from the storage secret via PBKDF2-HMAC-SHA256. The storage
key is bound as associated data, so a ciphertext copied under another
key fails to decrypt.
"""

from __future__ import annotations

import hashlib
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from secretvars.core.exceptions import BackendError


STORAGE_SECRET_ENV = "SECRETVARS_STORAGE_SECRET"
_DEFAULT_SECRET = "secretvars-storage-secret-v1-changeme-in-production"
_SALT = b"secretvars-storage"
_NONCE_SIZE = 12


def storage_secret_from_env() -> str:
    """Return the storage secret (in production, set it in the environment)."""
    return os.environ.get(STORAGE_SECRET_ENV, _DEFAULT_SECRET)


def derive_key(secret: str, iterations: int = 100_000) -> bytes:
    """
    Derive a 32-byte AES-256 key from the storage secret.
    Deterministic for a given secret, so no key needs to be stored.
    """
    return hashlib.pbkdf2_hmac(
        hash_name  = "sha256",
        password   = secret.encode("utf-8"),
        salt       = _SALT,
        iterations = iterations,
        dklen      = 32,
    )


class ValueCipher:
    """
    Seals and opens stored values with AES-256-GCM.

    Format: nonce (12 bytes) + ciphertext + tag (16 bytes).
    """

    def __init__(self, secret: str | None = None):
        self._aesgcm = AESGCM(derive_key(secret or storage_secret_from_env()))

    def encrypt(self, key: str, plaintext: bytes) -> bytes:
        nonce = os.urandom(_NONCE_SIZE)
        return nonce + self._aesgcm.encrypt(nonce, plaintext, key.encode("utf-8"))

    def decrypt(self, key: str, sealed: bytes) -> bytes:
        """
        Open a value previously sealed with encrypt().

        Raises
        ------
        BackendError
            If the value is truncated, tampered with, or sealed under
            another secret or another key.
        """
        if len(sealed) < _NONCE_SIZE + 16:
            raise BackendError(
                "Stored value is too short to decrypt.",
                details={"reason": "truncated"},
            )
        nonce, ct = sealed[:_NONCE_SIZE], sealed[_NONCE_SIZE:]
        try:
            return self._aesgcm.decrypt(nonce, ct, key.encode("utf-8"))
        except InvalidTag as exc:
            raise BackendError(
                "Stored value failed authentication.",
                details={"reason": "invalid_tag"},
            ) from exc

    def __repr__(self) -> str:
        return "ValueCipher(algorithm='AES-256-GCM')"
