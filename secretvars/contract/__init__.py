"""
secretvars.contract — THE BOUNDARY FILE
=======================================
Package boundary. Exports the public API only.
Everything inside _core/ is private and should NOT be imported directly.

PUBLIC API:
  SecretVarsContract       — contract facade (instantiate / execute / query)
  ContractConfig           — typed config builder
  CallContext, Response    — platform call context and call result
  ContractState            — the durable state record
  ViewingKeyResponse       — answer carried by generate_viewing_key
  BaseStorageBackend       — base class for custom storage backends
  UnauthorizedError, NotFoundError, AlreadyInitializedError, MalformedError
"""

from secretvars.contract.secret_vars import SecretVarsContract
from secretvars.contract.config.contract_config import ContractConfig
from secretvars.contract.messages import (
    GenerateViewingKey,
    GetSecretVariables,
    InstantiateMsg,
    SetSecretVariables,
    SetViewers,
    ViewingKeyResponse,
)
from secretvars.core.data_types import CallContext, ContractState, Response
from secretvars.core.exceptions import (
    AlreadyInitializedError,
    MalformedError,
    NotFoundError,
    SecretVarsError,
    UnauthorizedError,
)
from secretvars.contract._core.state.backends.base_backend import BaseStorageBackend


__all__ = [
    "SecretVarsContract",
    "ContractConfig",
    "CallContext",
    "ContractState",
    "Response",
    "InstantiateMsg",
    "SetViewers",
    "SetSecretVariables",
    "GenerateViewingKey",
    "GetSecretVariables",
    "ViewingKeyResponse",
    "BaseStorageBackend",
    "SecretVarsError",
    "UnauthorizedError",
    "NotFoundError",
    "AlreadyInitializedError",
    "MalformedError",
]
