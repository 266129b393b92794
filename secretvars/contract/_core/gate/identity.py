"""
secretvars.contract._core.gate.identity
========================================
Identity canonicalization.

The platform hands the contract already-authenticated identity strings.
Before an identity is compared or stored it is brought to canonical form:
lower-cased, length-bounded, and restricted to a safe charset.
Anything else is rejected with MalformedError.
"""

from __future__ import annotations

from typing import Iterable, List

import regex

from secretvars.core.exceptions import MalformedError


IDENTITY_RE = regex.compile(r"[a-z0-9][a-z0-9_.:\-]*")

DEFAULT_MIN_LENGTH = 3
DEFAULT_MAX_LENGTH = 90


def canonicalize(
    identity: str,
    min_length: int = DEFAULT_MIN_LENGTH,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> str:
    """
    Return the canonical form of an identity string.

    Parameters
    ----------
    identity : str
        Raw identity as supplied by the platform or a message.
    min_length, max_length : int
        Inclusive length bounds for the canonical form.

    Raises
    ------
    MalformedError
        If the identity is not a string, is out of bounds, or contains
        characters outside [a-z0-9_.:-].
    """
    if not isinstance(identity, str):
        raise MalformedError(
            f"Identity must be a string, got {type(identity).__name__}",
            details={"reason": "not_a_string"},
        )

    canonical = identity.lower()

    if len(canonical) < min_length:
        raise MalformedError(
            "Invalid identity: too short.",
            details={"reason": "too_short", "min_length": min_length},
        )
    if len(canonical) > max_length:
        raise MalformedError(
            "Invalid identity: too long.",
            details={"reason": "too_long", "max_length": max_length},
        )
    if not IDENTITY_RE.fullmatch(canonical):
        raise MalformedError(
            "Invalid identity: unsupported characters.",
            details={"reason": "bad_charset", "identity": mask_identity(identity)},
        )
    return canonical


def canonicalize_all(
    identities: Iterable[str],
    min_length: int = DEFAULT_MIN_LENGTH,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> List[str]:
    """Canonicalize every identity, failing on the first malformed one."""
    return [canonicalize(i, min_length, max_length) for i in identities]


def mask_identity(identity: str) -> str:
    """Return a safe, partially masked identity for messages and audit."""
    if not identity:
        return "<empty>"
    identity = str(identity)
    return identity[:10] + "..." if len(identity) > 10 else identity
