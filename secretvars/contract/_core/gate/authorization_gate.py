"""
secretvars.contract._core.gate.authorization_gate
==================================================
The authorization gate: policy dispatcher for every contract operation.
Wires together identity canonicalization, access_control, the state
store, the viewing key manager, and the audit log.

Public operations:
  instantiate(caller, raw_seed, context)            → ContractState
  set_viewers(caller, viewers)                      → ContractState
  set_secret_variables(caller, secret_payload)      → ContractState
  generate_viewing_key(caller, entropy, context)    → viewing key
  get_secret_variables(account, viewing_key)        → secret payload

Every mutation is a pure transform over ContractState committed by
StateStore.update(); a denial inside the transform aborts the commit.
Allow-list replacement only affects future key generation: keys that
were already issued keep verifying after their holder is removed.
"""

from __future__ import annotations

from typing import List, Optional

from secretvars.core.data_types import CallContext, ContractState, Result
from secretvars.core.exceptions import (
    AlreadyInitializedError, MalformedError, UnauthorizedError,
)
from secretvars.core.logger import StructuredLogger
from secretvars.contract._core.credentials.viewing_key import ViewingKeyManager
from secretvars.contract._core.gate.access_control import AccessControl, Action
from secretvars.contract._core.gate.audit_log import AuditLog
from secretvars.contract._core.gate.identity import (
    DEFAULT_MAX_LENGTH, DEFAULT_MIN_LENGTH, canonicalize, canonicalize_all,
    mask_identity,
)
from secretvars.contract._core.state.state_store import StateStore


# ── Pure state transforms ─────────────────────────────────────────────────────

def replace_viewers(
    state: ContractState, caller: str, viewers: List[str],
) -> ContractState:
    """Owner-only: replace allowed_viewers wholesale."""
    AccessControl.check_owner(caller, state, Action.SET_VIEWERS)
    state.allowed_viewers = list(viewers)
    return state


def replace_secret_payload(
    state: ContractState, caller: str, secret_payload: str,
) -> ContractState:
    """Owner-only: overwrite the secret payload."""
    AccessControl.check_owner(caller, state, Action.SET_SECRET_VARIABLES)
    state.secret_payload = secret_payload
    return state


class AuthorizationGate:
    """
    Admits or rejects each operation, then performs it.

    Parameters
    ----------
    store : StateStore
        Holder of the ContractState record.
    keys : ViewingKeyManager
        Holder of the seed and per-account viewing keys.
    logger : StructuredLogger or None
        Debug channel. Defaults to a silent logger.
    audit : AuditLog or None
        Decision log. Defaults to a fresh AuditLog.
    identity_min_length, identity_max_length : int
        Bounds applied by identity canonicalization.
    """

    def __init__(
        self,
        store: StateStore,
        keys: ViewingKeyManager,
        logger: StructuredLogger = None,
        audit: AuditLog = None,
        identity_min_length: int = DEFAULT_MIN_LENGTH,
        identity_max_length: int = DEFAULT_MAX_LENGTH,
    ):
        self._store  = store
        self._keys   = keys
        self._logger = logger or StructuredLogger(name="gate")
        self._audit  = audit or AuditLog()
        self._min_len = identity_min_length
        self._max_len = identity_max_length

    @property
    def audit(self) -> AuditLog:
        return self._audit

    # ── Instantiate ───────────────────────────────────────────────────────────

    def instantiate(
        self, caller: str, raw_seed: bytes, context: Optional[CallContext] = None,
    ) -> ContractState:
        """
        Record caller as owner and seed the viewing key manager.
        If seeding fails the state record is removed again.

        Raises
        ------
        MalformedError
            If caller is malformed or raw_seed is not bytes.
        AlreadyInitializedError
            If this instance was already instantiated.
        """
        owner = self._canonical(Action.INSTANTIATE, caller)
        if not isinstance(raw_seed, (bytes, bytearray)):
            self._audit.record(Action.INSTANTIATE, principal=owner,
                               result=Result.MALFORMED, reason="seed_not_bytes")
            raise MalformedError(
                f"prng_seed must be bytes, got {type(raw_seed).__name__}",
                details={"reason": "seed_not_bytes"},
            )
        if self._store.is_initialized() or self._keys.has_seed():
            self._audit.record(Action.INSTANTIATE, principal=owner,
                               result=Result.DENIED, reason="already_initialized")
            raise AlreadyInitializedError(
                "Contract was already instantiated.",
                details={"reason": "already_initialized"},
            )

        state = self._store.initialize(owner)
        try:
            self._keys.set_seed(bytes(raw_seed))
        except Exception:
            self._store.discard()
            raise

        self._logger.debug(Action.INSTANTIATE, message=f"Contract was initialized by {owner}",
                           height=context.height if context is not None else None)
        self._audit.record(Action.INSTANTIATE, principal=owner, result=Result.SUCCESS)
        return state

    # ── Owner-only mutations ──────────────────────────────────────────────────

    def set_viewers(self, caller: str, viewers: List[str]) -> ContractState:
        """
        Replace the allow-list. Only the owner may call this.

        An empty list revokes every non-owner's right to mint new keys;
        keys issued earlier stay valid.

        Raises
        ------
        MalformedError
            If caller or any viewer identity is malformed.
        UnauthorizedError
            If caller is not the owner. The allow-list is unchanged.
        """
        sender = self._canonical(Action.SET_VIEWERS, caller)
        if not isinstance(viewers, (list, tuple)):
            self._audit.record(Action.SET_VIEWERS, principal=sender,
                               result=Result.MALFORMED, reason="viewers_not_list")
            raise MalformedError(
                "viewers must be a list of identities.",
                details={"reason": "viewers_not_list"},
            )
        try:
            canonical_viewers = canonicalize_all(viewers, self._min_len, self._max_len)
        except MalformedError:
            self._audit.record(Action.SET_VIEWERS, principal=sender,
                               result=Result.MALFORMED, reason="bad_viewer")
            raise

        try:
            state = self._store.update(
                lambda s: replace_viewers(s, sender, canonical_viewers)
            )
        except UnauthorizedError:
            self._audit.record(Action.SET_VIEWERS, principal=sender,
                               result=Result.DENIED, reason="not_owner")
            self._logger.warn(Action.SET_VIEWERS, message="non-owner tried to set viewers",
                              caller=mask_identity(sender))
            raise

        self._logger.debug(Action.SET_VIEWERS, message="viewers set successfully",
                           count=len(canonical_viewers))
        self._audit.record(Action.SET_VIEWERS, principal=sender,
                           result=Result.SUCCESS, count=len(canonical_viewers))
        return state

    def set_secret_variables(self, caller: str, secret_payload: str) -> ContractState:
        """
        Overwrite the secret payload. Only the owner may call this.

        Raises
        ------
        MalformedError
            If caller is malformed or secret_payload is not a string.
        UnauthorizedError
            If caller is not the owner. The payload is unchanged.
        """
        sender = self._canonical(Action.SET_SECRET_VARIABLES, caller)
        if not isinstance(secret_payload, str):
            self._audit.record(Action.SET_SECRET_VARIABLES, principal=sender,
                               result=Result.MALFORMED, reason="payload_not_string")
            raise MalformedError(
                "secret_variables must be a string.",
                details={"reason": "payload_not_string"},
            )

        try:
            state = self._store.update(
                lambda s: replace_secret_payload(s, sender, secret_payload)
            )
        except UnauthorizedError:
            self._audit.record(Action.SET_SECRET_VARIABLES, principal=sender,
                               result=Result.DENIED, reason="not_owner")
            self._logger.warn(Action.SET_SECRET_VARIABLES,
                              message="non-owner tried to set secret variables",
                              caller=mask_identity(sender))
            raise

        self._logger.debug(Action.SET_SECRET_VARIABLES,
                           message="secret variables set successfully")
        self._audit.record(Action.SET_SECRET_VARIABLES, principal=sender,
                           result=Result.SUCCESS)
        return state

    # ── Viewer-only mutation ──────────────────────────────────────────────────

    def generate_viewing_key(
        self, caller: str, entropy: str, context: CallContext,
    ) -> str:
        """
        Mint a viewing key for the caller itself.

        Raises
        ------
        MalformedError
            If caller or entropy is malformed.
        UnauthorizedError
            If caller is not in allowed_viewers. No key is created or
            overwritten.
        """
        sender = self._canonical(Action.GENERATE_VIEWING_KEY, caller)
        state = self._store.load()

        try:
            AccessControl.check_viewer(sender, state)
        except UnauthorizedError:
            self._audit.record(Action.GENERATE_VIEWING_KEY, principal=sender,
                               result=Result.DENIED, reason="not_allowed_viewer")
            self._logger.warn(Action.GENERATE_VIEWING_KEY,
                              message="caller is not an allowed viewer",
                              caller=mask_identity(sender))
            raise

        try:
            key = self._keys.create(sender, entropy, context)
        except MalformedError:
            self._audit.record(Action.GENERATE_VIEWING_KEY, principal=sender,
                               result=Result.MALFORMED, reason="bad_entropy")
            raise

        self._logger.debug(Action.GENERATE_VIEWING_KEY,
                           message="viewing key generated", account=sender)
        self._audit.record(Action.GENERATE_VIEWING_KEY, principal=sender,
                           result=Result.SUCCESS)
        return key

    # ── Query ─────────────────────────────────────────────────────────────────

    def get_secret_variables(self, account: str, viewing_key: str) -> str:
        """
        Reveal the secret payload to the holder of a valid viewing key.

        There is no caller identity on this path: the key is the
        authentication. Allow-list membership is not re-checked.

        Raises
        ------
        MalformedError
            If account is malformed.
        UnauthorizedError
            If viewing_key does not verify for account.
        """
        target = self._canonical(Action.GET_SECRET_VARIABLES, account)
        state = self._store.load()

        try:
            self._keys.check(target, viewing_key)
        except UnauthorizedError as exc:
            reason = "key_mismatch" if self._keys.is_well_formed(viewing_key) else "bad_key_format"
            self._audit.record(Action.GET_SECRET_VARIABLES, principal=target,
                               result=Result.DENIED, reason=reason)
            raise UnauthorizedError(
                "Only allowed viewers can query secret variables",
                details={"reason": reason},
            ) from exc

        self._audit.record(Action.GET_SECRET_VARIABLES, principal=target,
                           result=Result.SUCCESS)
        return state.secret_payload

    def load_state(self) -> ContractState:
        """Committed state snapshot, for operator views inside this package."""
        return self._store.load()

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _canonical(self, operation: str, identity: str) -> str:
        try:
            return canonicalize(identity, self._min_len, self._max_len)
        except MalformedError:
            self._audit.record(operation, result=Result.MALFORMED, reason="bad_identity")
            raise

    def __repr__(self) -> str:
        return f"AuthorizationGate(store={self._store!r}, keys={self._keys!r})"
