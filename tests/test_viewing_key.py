"""
secretvars — Viewing Key Tests
==============================
Run with: python -m pytest tests/ -v
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import hashlib

import pytest

from secretvars.core.data_types import CallContext
from secretvars.core.exceptions import (
    AlreadyInitializedError, MalformedError, NotFoundError, UnauthorizedError,
)
from secretvars.contract._core.credentials.key_engine import (
    constant_time_compare,
    derive_viewing_key,
    hash_viewing_key,
    validate_viewing_key,
)
from secretvars.contract._core.credentials.viewing_key import SEED_KEY, ViewingKeyManager
from secretvars.contract._core.state.backends.memory_backend import MemoryBackend
from secretvars.contract._core.state.prefixed_storage import PrefixedStorage


CTX = CallContext(height=12_345, time_ns=1_571_797_419_879_305_533)
SEED = hashlib.sha256(b"prng_seed").digest()


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def storage():
    return PrefixedStorage(MemoryBackend(), "viewing_keys/")


@pytest.fixture
def manager(storage):
    m = ViewingKeyManager(storage)
    m.set_seed(b"prng_seed")
    return m


# ── Constant-time comparison ──────────────────────────────────────────────────

class TestConstantTimeCompare:
    def test_equal(self):
        assert constant_time_compare(b"abc", b"abc")

    def test_differs_in_last_byte(self):
        assert not constant_time_compare(b"abc", b"abd")

    def test_differs_in_first_byte(self):
        assert not constant_time_compare(b"xbc", b"abc")

    def test_length_mismatch(self):
        assert not constant_time_compare(b"abc", b"abcd")

    def test_empty(self):
        assert constant_time_compare(b"", b"")
        assert not constant_time_compare(b"", b"a")


# ── Derivation ────────────────────────────────────────────────────────────────

class TestDerivation:
    def test_key_shape(self):
        key, _ = derive_viewing_key(SEED, "viewer1", "entropy", CTX)
        assert key.startswith("api_key_")
        assert len(key) == len("api_key_") + 44
        assert validate_viewing_key(key)

    def test_custom_prefix(self):
        key, _ = derive_viewing_key(SEED, "viewer1", "entropy", CTX, prefix="vk_")
        assert validate_viewing_key(key, prefix="vk_")
        assert not validate_viewing_key(key)

    def test_deterministic_for_identical_inputs(self):
        assert derive_viewing_key(SEED, "viewer1", "e", CTX) == \
               derive_viewing_key(SEED, "viewer1", "e", CTX)

    def test_every_input_matters(self):
        base, _ = derive_viewing_key(SEED, "viewer1", "e", CTX)
        other_ctx = CallContext(height=CTX.height, time_ns=CTX.time_ns, counter=1)
        variants = [
            derive_viewing_key(hashlib.sha256(b"other").digest(), "viewer1", "e", CTX)[0],
            derive_viewing_key(SEED, "viewer2", "e", CTX)[0],
            derive_viewing_key(SEED, "viewer1", "f", CTX)[0],
            derive_viewing_key(SEED, "viewer1", "e", other_ctx)[0],
        ]
        assert base not in variants
        assert len(set(variants)) == len(variants)

    def test_field_boundaries_are_framed(self):
        a, _ = derive_viewing_key(SEED, "viewer1", "ab", CTX)
        b, _ = derive_viewing_key(SEED, "viewer1a", "b", CTX)
        assert a != b

    def test_seed_advances(self):
        _, next_seed = derive_viewing_key(SEED, "viewer1", "e", CTX)
        assert next_seed != SEED
        assert len(next_seed) == 32

    def test_validate_rejects_garbage(self):
        assert not validate_viewing_key("asda")
        assert not validate_viewing_key(None)
        assert not validate_viewing_key("api_key_" + "!" * 43 + "=")


# ── Manager ───────────────────────────────────────────────────────────────────

class TestViewingKeyManager:
    def test_seed_is_stored_hashed(self, storage):
        m = ViewingKeyManager(storage)
        m.set_seed(b"prng_seed")
        assert storage.get(SEED_KEY) == SEED
        assert storage.get(SEED_KEY) != b"prng_seed"

    def test_seed_set_once(self, manager):
        with pytest.raises(AlreadyInitializedError):
            manager.set_seed(b"again")

    def test_seed_must_be_bytes(self, storage):
        with pytest.raises(MalformedError):
            ViewingKeyManager(storage).set_seed("prng_seed")

    def test_create_before_seed(self, storage):
        with pytest.raises(NotFoundError):
            ViewingKeyManager(storage).create("viewer1", "e", CTX)

    def test_create_then_check(self, manager):
        key = manager.create("viewer1", "entropy", CTX)
        manager.check("viewer1", key)

    def test_only_digest_is_stored(self, manager, storage):
        key = manager.create("viewer1", "entropy", CTX)
        stored = storage.get("key/viewer1")
        assert stored == hash_viewing_key(key)
        assert key.encode() not in stored

    def test_identical_requests_give_new_keys(self, manager):
        first = manager.create("viewer1", "entropy", CTX)
        second = manager.create("viewer1", "entropy", CTX)
        assert first != second
        with pytest.raises(UnauthorizedError):
            manager.check("viewer1", first)
        manager.check("viewer1", second)

    def test_check_unknown_account(self, manager):
        with pytest.raises(UnauthorizedError):
            manager.check("nobody", "api_key_" + "A" * 43 + "=")

    def test_check_wrong_key(self, manager):
        manager.create("viewer1", "entropy", CTX)
        with pytest.raises(UnauthorizedError) as exc_info:
            manager.check("viewer1", "asda")
        assert "asda" not in str(exc_info.value)

    def test_check_non_string_key(self, manager):
        manager.create("viewer1", "entropy", CTX)
        with pytest.raises(UnauthorizedError):
            manager.check("viewer1", None)

    def test_entropy_limits(self, storage):
        m = ViewingKeyManager(storage, max_entropy_length=4)
        m.set_seed(b"prng_seed")
        with pytest.raises(MalformedError):
            m.create("viewer1", "too long", CTX)
        with pytest.raises(MalformedError):
            m.create("viewer1", 1234, CTX)
        assert not m.has_key("viewer1")

    def test_check_unencodable_key(self, manager):
        manager.create("viewer1", "entropy", CTX)
        with pytest.raises(UnauthorizedError):
            manager.check("viewer1", "\ud800")
        with pytest.raises(UnauthorizedError):
            manager.check("nobody", "api_key_\udfff")

    def test_unencodable_entropy_rejected(self, manager):
        with pytest.raises(MalformedError) as exc_info:
            manager.create("viewer1", "\ud800", CTX)
        assert exc_info.value.details["reason"] == "entropy_not_utf8"
        assert not manager.has_key("viewer1")
