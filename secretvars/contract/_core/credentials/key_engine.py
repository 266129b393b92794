"""
secretvars.contract._core.credentials.key_engine
=================================================
Viewing key derivation, hashing, and comparison primitives.

Key format: {prefix}{base64(sha256(rand))}
  prefix defaults to "api_key_"; the body is always 44 base64 chars.
Example:
  api_key_Q2w9yJ7m0Xl1rT0pQ1bq1hZ6mV4s3k8cD7fJb9aE2nA=

Derivation:
  rand      = sha256(seed ‖ height ‖ time ‖ counter ‖ chain ‖ account ‖ entropy)
  key       = prefix + base64(sha256(rand))
  next_seed = sha256(seed ‖ rand)

Every field is length-prefixed before hashing so that two different
field splits can never produce the same preimage.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import struct
from typing import Tuple

import regex

from secretvars.core.data_types import CallContext


DEFAULT_PREFIX = "api_key_"
DIGEST_SIZE    = 32

_BODY_RE = r"[A-Za-z0-9+/]{43}="


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def derive_viewing_key(
    seed: bytes,
    account: str,
    entropy: str,
    context: CallContext,
    prefix: str = DEFAULT_PREFIX,
) -> Tuple[str, bytes]:
    """
    Derive a fresh viewing key and the next seed.

    Parameters
    ----------
    seed : bytes
        The current stored seed (itself a SHA-256 digest).
    account : str
        Canonical identity the key is bound to.
    entropy : str
        Caller-supplied entropy string.
    context : CallContext
        Platform-supplied height / time / counter. Two calls with the
        same entropy still differ because the context differs.
    prefix : str
        Human-readable key prefix.

    Returns
    -------
    (viewing_key, next_seed)
    """
    rand = sha256(
        _frame(seed)
        + _frame(context.to_bytes())
        + _frame(account.encode("utf-8"))
        + _frame(entropy.encode("utf-8"))
    )
    body = base64.b64encode(sha256(rand)).decode("ascii")
    next_seed = sha256(_frame(seed) + _frame(rand))
    return prefix + body, next_seed


def hash_viewing_key(viewing_key: str) -> bytes:
    """
    Return the digest under which a viewing key is stored.
    Lone surrogates are hashed as-is; such a key can never match an issued one.
    """
    return sha256(viewing_key.encode("utf-8", errors="surrogatepass"))


def constant_time_compare(a: bytes, b: bytes) -> bool:
    """
    Compare two byte strings in time independent of where they differ.
    Inputs of different length compare unequal.
    """
    return hmac.compare_digest(a, b)


def validate_viewing_key(viewing_key: str, prefix: str = DEFAULT_PREFIX) -> bool:
    """Return True if viewing_key has the exact {prefix}{44 base64 chars} shape."""
    if not isinstance(viewing_key, str):
        return False
    return bool(regex.fullmatch(regex.escape(prefix) + _BODY_RE, viewing_key))


def _frame(part: bytes) -> bytes:
    return struct.pack("!I", len(part)) + part
