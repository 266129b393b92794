"""
secretvars — State Store Tests
==============================
Run with: python -m pytest tests/ -v
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from secretvars.core.data_types import ContractState
from secretvars.core.exceptions import (
    AlreadyInitializedError, MalformedError, NotFoundError, UnauthorizedError,
)
from secretvars.contract._core.state.backends.memory_backend import MemoryBackend
from secretvars.contract._core.state.prefixed_storage import PrefixedStorage
from secretvars.contract._core.state.state_store import StateStore


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def store():
    return StateStore(PrefixedStorage(MemoryBackend(), "state/"))


@pytest.fixture
def ready(store):
    store.initialize("creator")
    return store


# ── Initialize / load ─────────────────────────────────────────────────────────

class TestInitialize:
    def test_initial_record(self, store):
        state = store.initialize("creator")
        assert state.owner == "creator"
        assert state.allowed_viewers == []
        assert state.secret_payload == ""

    def test_second_initialize_rejected(self, ready):
        with pytest.raises(AlreadyInitializedError):
            ready.initialize("someone")
        assert ready.load().owner == "creator"

    def test_load_before_initialize(self, store):
        assert not store.is_initialized()
        with pytest.raises(NotFoundError):
            store.load()

    def test_load_returns_detached_snapshot(self, ready):
        snapshot = ready.load()
        snapshot.allowed_viewers.append("intruder")
        snapshot.secret_payload = "changed"
        fresh = ready.load()
        assert fresh.allowed_viewers == []
        assert fresh.secret_payload == ""

    def test_discard_allows_fresh_initialize(self, ready):
        ready.discard()
        assert not ready.is_initialized()
        assert ready.initialize("other").owner == "other"


# ── Update ────────────────────────────────────────────────────────────────────

class TestUpdate:
    def test_update_commits(self, ready):
        def transform(s):
            s.allowed_viewers = ["viewer1"]
            return s

        result = ready.update(transform)
        assert result.allowed_viewers == ["viewer1"]
        assert ready.load().allowed_viewers == ["viewer1"]

    def test_failed_transform_writes_nothing(self, ready):
        def transform(s):
            s.secret_payload = "half-done"
            s.allowed_viewers = ["viewer1"]
            raise UnauthorizedError("denied")

        with pytest.raises(UnauthorizedError):
            ready.update(transform)
        state = ready.load()
        assert state.secret_payload == ""
        assert state.allowed_viewers == []

    def test_update_before_initialize(self, store):
        with pytest.raises(NotFoundError):
            store.update(lambda s: s)

    def test_owner_survives_updates(self, ready):
        ready.update(lambda s: ContractState(s.owner, ["a1b"], "x"))
        assert ready.load().owner == "creator"

    def test_owner_change_rejected(self, ready):
        with pytest.raises(MalformedError):
            ready.update(lambda s: ContractState("usurper", s.allowed_viewers, "x"))
        state = ready.load()
        assert state.owner == "creator"
        assert state.secret_payload == ""


# ── Serialization ─────────────────────────────────────────────────────────────

class TestContractState:
    def test_bytes_round_trip(self):
        state = ContractState("creator", ["viewer1", "viewer1"], "secret")
        assert ContractState.from_bytes(state.to_bytes()) == state

    def test_corrupt_bytes_rejected(self):
        with pytest.raises(MalformedError):
            ContractState.from_bytes(b"{not json")

    def test_repr_hides_payload(self):
        text = repr(ContractState("creator", [], "hunter2"))
        assert "hunter2" not in text
        assert "creator" in text
