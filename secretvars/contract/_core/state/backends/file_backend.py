"""
secretvars.contract._core.state.backends.file_backend
======================================================
Durable file-system backend.

Each key is stored as one file inside a root directory. File names are
the URL-safe base64 encoding of the key, so any key string maps to a
valid name. Writes go to a temporary file in the same directory and are
moved into place with os.replace(), which is atomic on POSIX and
Windows: a reader sees the old value or the new one, never a torn file.
"""

from __future__ import annotations

import base64
import binascii
import os
import tempfile
import threading
from typing import List, Optional

from secretvars.core.exceptions import BackendError
from secretvars.contract._core.state.backends.base_backend import BaseStorageBackend


_SUFFIX = ".val"


class FileBackend(BaseStorageBackend):
    """
    One-file-per-key backend rooted at `path`.

    Parameters
    ----------
    path : str
        Directory that holds the values. Created if missing.
    """

    def __init__(self, path: str):
        if not path:
            raise BackendError(
                "FileBackend requires a directory path.",
                details={"reason": "missing_path"},
            )
        self._root = os.path.abspath(path)
        self._lock = threading.Lock()
        try:
            os.makedirs(self._root, exist_ok=True)
        except OSError as exc:
            raise BackendError(
                f"Cannot create storage directory: {self._root!r}",
                details={"error": str(exc)},
            ) from exc

    def get(self, key: str) -> Optional[bytes]:
        path = self._path_for(key)
        try:
            with open(path, "rb") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise BackendError(
                "Failed to read storage value.",
                details={"error": str(exc)},
            ) from exc

    def set(self, key: str, value: bytes) -> None:
        path = self._path_for(key)
        with self._lock:
            fd, tmp_path = tempfile.mkstemp(dir=self._root, suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(value)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, path)
            except OSError as exc:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise BackendError(
                    "Failed to write storage value.",
                    details={"error": str(exc)},
                ) from exc

    def remove(self, key: str) -> None:
        with self._lock:
            try:
                os.unlink(self._path_for(key))
            except FileNotFoundError:
                pass

    def keys(self, prefix: str = "") -> List[str]:
        found = []
        for name in os.listdir(self._root):
            if not name.endswith(_SUFFIX):
                continue
            key = _decode_name(name[: -len(_SUFFIX)])
            if key is not None and key.startswith(prefix):
                found.append(key)
        return sorted(found)

    def _path_for(self, key: str) -> str:
        return os.path.join(self._root, _encode_name(key) + _SUFFIX)

    def __repr__(self) -> str:
        return f"FileBackend(root={self._root!r})"


def _encode_name(key: str) -> str:
    return base64.urlsafe_b64encode(key.encode("utf-8")).decode("ascii").rstrip("=")


def _decode_name(name: str) -> Optional[str]:
    padded = name + "=" * (-len(name) % 4)
    try:
        return base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None
