"""Storage backends package."""
from secretvars.contract._core.state.backends.base_backend import BaseStorageBackend
from secretvars.contract._core.state.backends.memory_backend import MemoryBackend
from secretvars.contract._core.state.backends.file_backend import FileBackend
from secretvars.contract._core.state.backends.encryption import ValueCipher

__all__ = ["BaseStorageBackend", "MemoryBackend", "FileBackend", "ValueCipher"]
