"""
secretvars — Storage Backend Tests
==================================
Run with: python -m pytest tests/ -v
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from secretvars.core.exceptions import BackendError
from secretvars.contract._core.state.backends import (
    FileBackend, MemoryBackend, ValueCipher,
)
from secretvars.contract._core.state.prefixed_storage import PrefixedStorage


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture(params=["memory", "file"])
def backend(request, tmp_path):
    if request.param == "memory":
        return MemoryBackend()
    return FileBackend(str(tmp_path / "kv"))


@pytest.fixture(scope="module")
def cipher():
    return ValueCipher("test-secret")


# ── Backend contract ──────────────────────────────────────────────────────────

class TestBackend:
    def test_get_missing(self, backend):
        assert backend.get("nope") is None

    def test_set_get_overwrite(self, backend):
        backend.set("state/config", b"one")
        backend.set("state/config", b"two")
        assert backend.get("state/config") == b"two"

    def test_remove(self, backend):
        backend.set("k", b"v")
        backend.remove("k")
        backend.remove("k")
        assert backend.get("k") is None

    def test_keys_by_prefix(self, backend):
        backend.set("viewing_keys/key/b", b"1")
        backend.set("viewing_keys/key/a", b"2")
        backend.set("state/config", b"3")
        assert backend.keys("viewing_keys/") == ["viewing_keys/key/a", "viewing_keys/key/b"]


class TestFileBackend:
    def test_values_persist_across_instances(self, tmp_path):
        FileBackend(str(tmp_path)).set("state/config", b"durable")
        assert FileBackend(str(tmp_path)).get("state/config") == b"durable"

    def test_no_temp_files_left(self, tmp_path):
        b = FileBackend(str(tmp_path))
        b.set("a", b"1")
        assert [n for n in os.listdir(tmp_path) if n.endswith(".tmp")] == []

    def test_requires_path(self):
        with pytest.raises(BackendError):
            FileBackend("")


# ── Encryption ────────────────────────────────────────────────────────────────

class TestEncryption:
    def test_round_trip_and_opaque(self, cipher):
        sealed = cipher.encrypt("state/config", b"this is a secret")
        assert b"this is a secret" not in sealed
        assert cipher.decrypt("state/config", sealed) == b"this is a secret"

    def test_bound_to_key(self, cipher):
        sealed = cipher.encrypt("viewing_keys/key/a", b"digest")
        with pytest.raises(BackendError):
            cipher.decrypt("viewing_keys/key/b", sealed)

    def test_wrong_secret(self, cipher):
        sealed = cipher.encrypt("k", b"v")
        with pytest.raises(BackendError):
            ValueCipher("another-secret").decrypt("k", sealed)

    def test_truncated(self, cipher):
        with pytest.raises(BackendError):
            cipher.decrypt("k", b"short")

    def test_prefixed_storage_encrypts(self, cipher):
        backend = MemoryBackend()
        storage = PrefixedStorage(backend, "state/", cipher)
        storage.set("config", b"plaintext")
        assert backend.get("state/config") != b"plaintext"
        assert storage.get("config") == b"plaintext"
        assert storage.keys() == ["config"]
