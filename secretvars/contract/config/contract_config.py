"""
secretvars.contract.config.contract_config
==========================================
ContractConfig class.
Provides a typed, validated configuration object for SecretVarsContract.
Can be initialized from:
  - A preset name string ("default", "local")
  - A YAML file path
  - A raw dict
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from secretvars.core.config_loader import load_config
from secretvars.contract.config.validator import ConfigValidator


class ContractConfig:
    """
    Typed configuration for SecretVarsContract.

    Usage
    -----
    # From preset
    cfg = ContractConfig("local")

    # From dict
    cfg = ContractConfig({
        "storage":     {"backend": "file", "path": "/var/lib/secretvars"},
        "credentials": {"key_prefix": "api_key_"},
    })

    # From YAML file
    cfg = ContractConfig("/path/to/contract.yaml")
    """

    def __init__(self, source: Union[str, Dict[str, Any], None] = None):
        raw = load_config(source) if source is not None else {}
        raw = ConfigValidator.validate(raw)

        # ── Storage config ─────────────────────────────────────────────────
        storage_cfg = raw.get("storage", {})
        self.backend: str                = storage_cfg.get("backend", "memory")
        self.storage_path: Optional[str] = storage_cfg.get("path")
        self.encryption: bool            = storage_cfg.get("encryption", True)

        # ── Credentials config ─────────────────────────────────────────────
        cred_cfg = raw.get("credentials", {})
        self.key_prefix: str             = cred_cfg.get("key_prefix", "api_key_")
        self.max_entropy_length: int     = int(cred_cfg.get("max_entropy_length", 1024))

        # ── Identity config ────────────────────────────────────────────────
        identity_cfg = raw.get("identity", {})
        self.identity_min_length: int    = int(identity_cfg.get("min_length", 3))
        self.identity_max_length: int    = int(identity_cfg.get("max_length", 90))

        # ── Logging config ─────────────────────────────────────────────────
        logging_cfg = raw.get("logging", {})
        self.log_console: bool           = logging_cfg.get("console", False)
        self.log_max_entries: int        = int(logging_cfg.get("max_entries", 10_000))

    def __repr__(self) -> str:
        return (
            f"ContractConfig(backend={self.backend!r}, "
            f"encryption={self.encryption}, "
            f"key_prefix={self.key_prefix!r})"
        )
