"""
secretvars.contract.config.validator
====================================
Config validation. Raises ConfigError with descriptive messages
when fields have unsupported values or wrong types.
"""

from __future__ import annotations

from typing import Any, Dict

from secretvars.core.exceptions import ConfigError


_VALID_SECTIONS = {"storage", "credentials", "identity", "logging"}
_VALID_BACKENDS = {"memory", "file"}


class ConfigValidator:
    """
    Validates a contract config dict.
    All fields are optional (defaults are applied in ContractConfig).
    """

    @staticmethod
    def validate(config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate the config dict. Returns the same dict if valid.
        Raises ConfigError if any value is invalid.
        """
        if not isinstance(config, dict):
            raise ConfigError(
                f"Config must be a dict, got {type(config).__name__}",
                details={"type": type(config).__name__},
            )

        unknown = set(config) - _VALID_SECTIONS
        if unknown:
            raise ConfigError(
                f"Unknown config section(s): {sorted(unknown)}",
                details={"valid": sorted(_VALID_SECTIONS)},
            )

        for section in sorted(_VALID_SECTIONS):
            if not isinstance(config.get(section, {}), dict):
                raise ConfigError(f"{section} must be a dict")

        storage     = config.get("storage", {})
        credentials = config.get("credentials", {})
        identity    = config.get("identity", {})
        logging_cfg = config.get("logging", {})

        # ── Storage validation ─────────────────────────────────────────────
        if "backend" in storage:
            b = storage["backend"]
            if b not in _VALID_BACKENDS:
                raise ConfigError(
                    f"Invalid storage.backend: {b!r}",
                    details={"valid": sorted(_VALID_BACKENDS)},
                )
            if b == "file" and not storage.get("path"):
                raise ConfigError("storage.path is required for the file backend")

        if "path" in storage and not isinstance(storage["path"], str):
            raise ConfigError("storage.path must be a string")

        if "encryption" in storage and not isinstance(storage["encryption"], bool):
            raise ConfigError("storage.encryption must be a bool")

        # ── Credentials validation ─────────────────────────────────────────
        if "key_prefix" in credentials:
            p = credentials["key_prefix"]
            if not isinstance(p, str) or not p:
                raise ConfigError(
                    f"credentials.key_prefix must be a non-empty string, got {p!r}"
                )

        if "max_entropy_length" in credentials:
            m = credentials["max_entropy_length"]
            if not _is_int(m) or m < 0:
                raise ConfigError(
                    f"credentials.max_entropy_length must be a non-negative int, got {m!r}"
                )

        # ── Identity validation ────────────────────────────────────────────
        for name in ("min_length", "max_length"):
            if name in identity:
                value = identity[name]
                if not _is_int(value) or value < 1:
                    raise ConfigError(
                        f"identity.{name} must be a positive int, got {value!r}"
                    )
        if "min_length" in identity and "max_length" in identity:
            if identity["min_length"] > identity["max_length"]:
                raise ConfigError(
                    "identity.min_length must not exceed identity.max_length",
                    details={
                        "min_length": identity["min_length"],
                        "max_length": identity["max_length"],
                    },
                )

        # ── Logging validation ─────────────────────────────────────────────
        if "console" in logging_cfg and not isinstance(logging_cfg["console"], bool):
            raise ConfigError("logging.console must be a bool")

        if "max_entries" in logging_cfg:
            n = logging_cfg["max_entries"]
            if not _is_int(n) or n < 2:
                raise ConfigError(
                    f"logging.max_entries must be an int >= 2, got {n!r}"
                )

        return config


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
