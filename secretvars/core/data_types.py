"""
secretvars.core.data_types
==========================
Core data structures shared by the store, the credential manager,
the authorization gate and the contract facade.
"""

from __future__ import annotations

import json
import struct
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from secretvars.core.exceptions import MalformedError


# ── Audit results (as string constants, no extra import) ──────────────────────

class Result:
    SUCCESS   = "success"
    DENIED    = "denied"
    MALFORMED = "malformed"


# ── Contract State ────────────────────────────────────────────────────────────

@dataclass
class ContractState:
    """
    The single durable record of a contract instance.

    Attributes:
        owner           : Canonical identity of the instantiating caller.
                          Set once and never changed.
        allowed_viewers : Canonical identities allowed to mint a viewing key.
                          Order is kept; duplicates are not removed.
                          Replaced wholesale on every update.
        secret_payload  : Opaque string, overwritten by each owner update.
    """
    owner:           str
    allowed_viewers: List[str] = field(default_factory=list)
    secret_payload:  str       = ""

    def copy(self) -> "ContractState":
        """Return a detached snapshot (the viewer list is not shared)."""
        return ContractState(
            owner           = self.owner,
            allowed_viewers = list(self.allowed_viewers),
            secret_payload  = self.secret_payload,
        )

    def is_viewer(self, identity: str) -> bool:
        return identity in self.allowed_viewers

    def to_bytes(self) -> bytes:
        """Serialize for the storage backend."""
        return json.dumps(
            {
                "owner":           self.owner,
                "allowed_viewers": self.allowed_viewers,
                "secret_payload":  self.secret_payload,
            },
            separators=(",", ":"),
        ).encode("utf-8")

    @classmethod
    def from_bytes(cls, raw: bytes) -> "ContractState":
        """Rebuild a ContractState from its stored form."""
        try:
            data = json.loads(raw.decode("utf-8"))
            return cls(
                owner           = data["owner"],
                allowed_viewers = list(data["allowed_viewers"]),
                secret_payload  = data["secret_payload"],
            )
        except (ValueError, KeyError, TypeError) as exc:
            raise MalformedError(
                "Stored contract state could not be decoded.",
                details={"reason": "corrupt_state"},
            ) from exc

    def __repr__(self) -> str:
        # The payload is never rendered
        return (
            f"ContractState(owner={self.owner!r}, "
            f"allowed_viewers={self.allowed_viewers!r}, "
            f"secret_payload=<{len(self.secret_payload)} chars>)"
        )


# ── Call Context ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CallContext:
    """
    Environment data supplied by the host platform for each call.

    Attributes:
        height   : Monotonic block height / sequence number of the call.
        time_ns  : Platform timestamp in nanoseconds.
        counter  : Per-instance call counter; advances on every execute.
        chain_id : Identifier of the hosting deployment.
    """
    height:   int
    time_ns:  int
    counter:  int = 0
    chain_id: str = "secretvars-local"

    def to_bytes(self) -> bytes:
        """Fixed-layout encoding mixed into viewing-key derivation."""
        return (
            struct.pack("!QQQ", self.height, self.time_ns, self.counter)
            + self.chain_id.encode("utf-8")
        )


# ── Response ──────────────────────────────────────────────────────────────────

@dataclass
class Response:
    """
    Result of a successful execute or instantiate call.

    Attributes:
        data       : Optional answer payload (e.g. a ViewingKeyResponse).
        attributes : Flat key/value event attributes for the platform.
    """
    data:       Optional[Any]  = None
    attributes: Dict[str, str] = field(default_factory=dict)

    def add_attribute(self, key: str, value: str) -> "Response":
        self.attributes[key] = value
        return self
