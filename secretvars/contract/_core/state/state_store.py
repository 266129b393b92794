"""
secretvars.contract._core.state.state_store
============================================
Durable, atomic access to the single ContractState record.

Public operations:
  initialize(owner)      → ContractState   (once per instance)
  load()                 → ContractState   (detached snapshot)
  update(transform)      → ContractState   (all-or-nothing read-modify-write)
  discard()              → None            (rollback of a failed instantiate)

update() is the only way to modify the record. It holds the store lock for the
whole read → transform → commit step, so two updates never observe
each other's intermediate state. A transform that raises leaves the
stored record untouched.
"""

from __future__ import annotations

import threading
from typing import Callable

from secretvars.core.data_types import ContractState
from secretvars.core.exceptions import (
    AlreadyInitializedError, MalformedError, NotFoundError,
)
from secretvars.contract._core.state.prefixed_storage import PrefixedStorage


STATE_KEY = "config"

Transform = Callable[[ContractState], ContractState]


class StateStore:
    """
    Owner of the ContractState record.

    Parameters
    ----------
    storage : PrefixedStorage
        Namespace where the record is kept.
    """

    def __init__(self, storage: PrefixedStorage):
        self._storage = storage
        self._lock    = threading.RLock()

    def initialize(self, owner: str) -> ContractState:
        """
        Write the initial record: given owner, empty allow-list, empty payload.

        Raises
        ------
        AlreadyInitializedError
            If a record already exists for this instance.
        """
        with self._lock:
            if self._storage.get(STATE_KEY) is not None:
                raise AlreadyInitializedError(
                    "Contract state already exists; instantiate runs only once.",
                    details={"reason": "already_initialized"},
                )
            state = ContractState(owner=owner, allowed_viewers=[], secret_payload="")
            self._storage.set(STATE_KEY, state.to_bytes())
            return state.copy()

    def load(self) -> ContractState:
        """
        Return a snapshot of the committed record.

        Raises
        ------
        NotFoundError
            If called before initialize().
        """
        raw = self._storage.get(STATE_KEY)
        if raw is None:
            raise NotFoundError(
                "Contract state not found; instantiate must run first.",
                details={"reason": "not_initialized"},
            )
        return ContractState.from_bytes(raw)

    def update(self, transform: Transform) -> ContractState:
        """
        Read the record, apply transform, and commit the result.

        The transform receives a private copy; mutating it has no effect
        unless the transform returns normally. Any exception raised by
        the transform propagates and nothing is written.

        Returns
        -------
        ContractState
            A snapshot of the newly committed record.
        """
        with self._lock:
            current = self.load()
            new_state = transform(current.copy())
            if new_state.owner != current.owner:
                raise MalformedError(
                    "Contract owner is immutable.",
                    details={"reason": "owner_changed"},
                )
            self._storage.set(STATE_KEY, new_state.to_bytes())
            return new_state.copy()

    def is_initialized(self) -> bool:
        return self._storage.get(STATE_KEY) is not None

    def discard(self) -> None:
        """Delete the record. Used only to undo an instantiate that failed part-way."""
        with self._lock:
            self._storage.remove(STATE_KEY)

    def __repr__(self) -> str:
        return f"StateStore(storage={self._storage!r})"
