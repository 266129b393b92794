"""
secretvars.contract._core.credentials.viewing_key
==================================================
The credential manager: binds a secret seed to the instance and uses it
to derive and verify per-account viewing keys.

Public operations:
  set_seed(raw_seed)                         (once, at instantiate)
  create(account, entropy, context) → key    (overwrites any prior key)
  check(account, presented_key)              (raises UnauthorizedError)

Only digests are persisted: sha256(raw_seed) as the initial seed, and
sha256(viewing_key) per account. The key value itself leaves this class
exactly once, as the return value of create(). A viewing key is a
bearer credential; whoever holds it can read the payload.
"""

from __future__ import annotations

import threading

from secretvars.core.data_types import CallContext
from secretvars.core.exceptions import (
    AlreadyInitializedError, MalformedError, NotFoundError, UnauthorizedError,
)
from secretvars.contract._core.credentials.key_engine import (
    DEFAULT_PREFIX, DIGEST_SIZE, constant_time_compare, derive_viewing_key,
    hash_viewing_key, sha256, validate_viewing_key,
)
from secretvars.contract._core.gate.identity import mask_identity
from secretvars.contract._core.state.prefixed_storage import PrefixedStorage


SEED_KEY    = "seed"
_KEY_PREFIX = "key/"

# Compared against when no key is stored, so a miss costs the same as a mismatch
_DUMMY_DIGEST = bytes(DIGEST_SIZE)


class ViewingKeyManager:
    """
    Derives, persists, and verifies viewing keys.

    Parameters
    ----------
    storage : PrefixedStorage
        Namespace for the seed and the per-account key digests.
    key_prefix : str
        Prefix of generated keys (default "api_key_").
    max_entropy_length : int
        Upper bound on the caller-supplied entropy string.
    """

    def __init__(
        self,
        storage: PrefixedStorage,
        key_prefix: str = DEFAULT_PREFIX,
        max_entropy_length: int = 1024,
    ):
        self._storage     = storage
        self._prefix      = key_prefix
        self._max_entropy = max_entropy_length
        self._lock        = threading.Lock()

    # ── Seed ──────────────────────────────────────────────────────────────────

    def set_seed(self, raw_seed: bytes) -> None:
        """
        Hash raw_seed and store the digest. The raw seed is never persisted.

        Raises
        ------
        MalformedError
            If raw_seed is not bytes.
        AlreadyInitializedError
            If a seed has already been set.
        """
        if not isinstance(raw_seed, (bytes, bytearray)):
            raise MalformedError(
                f"Seed must be bytes, got {type(raw_seed).__name__}",
                details={"reason": "seed_not_bytes"},
            )
        with self._lock:
            if self._storage.get(SEED_KEY) is not None:
                raise AlreadyInitializedError(
                    "Viewing key seed is already set.",
                    details={"reason": "seed_already_set"},
                )
            self._storage.set(SEED_KEY, sha256(bytes(raw_seed)))

    def has_seed(self) -> bool:
        return self._storage.get(SEED_KEY) is not None

    # ── Create ────────────────────────────────────────────────────────────────

    def create(self, account: str, entropy: str, context: CallContext) -> str:
        """
        Derive a new viewing key for account and persist its digest,
        replacing any earlier key for the same account.

        The stored seed advances after every derivation, so a later call
        cannot reproduce an earlier key even with identical inputs.

        Returns
        -------
        str
            The viewing key. It is not retrievable afterwards.

        Raises
        ------
        MalformedError
            If entropy is not a UTF-8 encodable string or exceeds
            max_entropy_length.
        NotFoundError
            If set_seed() has not run.
        """
        if not isinstance(entropy, str):
            raise MalformedError(
                f"Entropy must be a string, got {type(entropy).__name__}",
                details={"reason": "entropy_not_string"},
            )
        if len(entropy) > self._max_entropy:
            raise MalformedError(
                "Entropy string is too long.",
                details={"reason": "entropy_too_long", "max_length": self._max_entropy},
            )
        try:
            entropy.encode("utf-8")
        except UnicodeEncodeError:
            raise MalformedError(
                "Entropy must be valid UTF-8 text.",
                details={"reason": "entropy_not_utf8"},
            ) from None

        with self._lock:
            seed = self._storage.get(SEED_KEY)
            if seed is None:
                raise NotFoundError(
                    "Viewing key seed not found; instantiate must run first.",
                    details={"reason": "seed_missing"},
                )
            viewing_key, next_seed = derive_viewing_key(
                seed, account, entropy, context, prefix=self._prefix,
            )
            self._storage.set(_KEY_PREFIX + account, hash_viewing_key(viewing_key))
            self._storage.set(SEED_KEY, next_seed)

        return viewing_key

    # ── Check ─────────────────────────────────────────────────────────────────

    def check(self, account: str, presented_key: str) -> None:
        """
        Verify presented_key against the stored key for account.

        Raises
        ------
        UnauthorizedError
            If account holds no key, or presented_key does not match.
            The message is the same in both cases.
        """
        stored = self._storage.get(_KEY_PREFIX + account)
        presented = hash_viewing_key(presented_key) if isinstance(presented_key, str) else b""

        if stored is None:
            constant_time_compare(_DUMMY_DIGEST, presented or _DUMMY_DIGEST)
            matched = False
        else:
            matched = constant_time_compare(stored, presented)

        if not matched:
            raise UnauthorizedError(
                "Wrong viewing key for this address or viewing key not set.",
                details={"account": mask_identity(account), "reason": "key_mismatch"},
            )

    def is_well_formed(self, presented_key: str) -> bool:
        """True if presented_key has the shape of a key this manager issues."""
        return validate_viewing_key(presented_key, self._prefix)

    def has_key(self, account: str) -> bool:
        return self._storage.get(_KEY_PREFIX + account) is not None

    def __repr__(self) -> str:
        return f"ViewingKeyManager(prefix={self._prefix!r})"
