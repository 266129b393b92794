"""secretvars.core — Foundation layer for the secretvars contract."""

from secretvars.core.data_types import (
    CallContext,
    ContractState,
    Response,
    Result,
)
from secretvars.core.exceptions import (
    SecretVarsError,
    UnauthorizedError,
    NotFoundError,
    AlreadyInitializedError,
    MalformedError,
    ConfigError,
    BackendError,
)
from secretvars.core.base_contract import BaseContract
from secretvars.core.config_loader import load_config
from secretvars.core.logger import StructuredLogger

__all__ = [
    "CallContext",
    "ContractState",
    "Response",
    "Result",
    "SecretVarsError",
    "UnauthorizedError",
    "NotFoundError",
    "AlreadyInitializedError",
    "MalformedError",
    "ConfigError",
    "BackendError",
    "BaseContract",
    "load_config",
    "StructuredLogger",
]
