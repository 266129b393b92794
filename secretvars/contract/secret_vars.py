"""
secretvars.contract.secret_vars
===============================
SecretVarsContract, the contract facade.
Wires together the storage backend, the State Store, the viewing key
manager, and the Authorization Gate, and dispatches platform calls.

Public API:
  instantiate(caller, msg, context)      → Response
  execute(caller, msg, context)          → Response  (data = ViewingKeyResponse for keys)
  query(msg)                             → str       (the secret payload)
  audit(operation)                       → list[dict]
  owner() / allowed_viewers()            → non-secret state for operators
"""

from __future__ import annotations

import dataclasses
import threading
import time
from typing import Any, Dict, List, Optional, Union

from secretvars.core.base_contract import BaseContract
from secretvars.core.data_types import CallContext, Response
from secretvars.core.exceptions import ConfigError
from secretvars.core.logger import StructuredLogger
from secretvars.contract.config.contract_config import ContractConfig
from secretvars.contract.messages import (
    SetSecretVariables, SetViewers, ViewingKeyResponse,
    parse_execute, parse_instantiate, parse_query,
)
from secretvars.contract._core.credentials.viewing_key import ViewingKeyManager
from secretvars.contract._core.gate.audit_log import AuditLog
from secretvars.contract._core.gate.authorization_gate import AuthorizationGate
from secretvars.contract._core.state.backends.base_backend import BaseStorageBackend
from secretvars.contract._core.state.backends.encryption import ValueCipher
from secretvars.contract._core.state.backends.file_backend import FileBackend
from secretvars.contract._core.state.backends.memory_backend import MemoryBackend
from secretvars.contract._core.state.prefixed_storage import PrefixedStorage
from secretvars.contract._core.state.state_store import StateStore


class SecretVarsContract(BaseContract):
    """
    Access-controlled secret store.

    One owner holds one secret payload and an allow-list of viewers.
    Allow-listed viewers mint viewing keys for themselves; anyone holding
    a valid key for an account can read the payload through query().

    Usage
    -----
    contract = SecretVarsContract(config="default")
    contract.instantiate("creator", {"prng_seed": b"prng_seed"})
    contract.execute("creator", {"set_viewers": {"viewers": ["viewer1"]}})
    contract.execute("creator", {"set_secret_variables": {"secret_variables": "s3cr3t"}})

    res = contract.execute("viewer1", {"generate_viewing_key": {"entropy": "entropy"}})
    key = res.data.key

    contract.query({"get_secret_variables": {"viewing_key": key, "account": "viewer1"}})
    # → "s3cr3t"
    """

    # ── Contract Manifest ─────────────────────────────────────────────────────
    contract_name    = "secretvars"
    contract_version = "0.1.0"

    def __init__(
        self,
        config: Union[str, Dict[str, Any], ContractConfig, None] = None,
        backend: Optional[BaseStorageBackend] = None,
    ):
        """
        Parameters
        ----------
        config : str, dict, ContractConfig, or None
            str  → preset name ("default", "local") or path to a YAML file
            dict → raw config dict
            ContractConfig → already-built config object
            None → defaults (encrypted in-memory storage)
        backend : BaseStorageBackend or None
            Overrides the backend named in config. Lets several contract
            objects share one store, as a host restarting would.
        """
        super().__init__(config)

        if isinstance(config, ContractConfig):
            self._cfg = config
        else:
            self._cfg = ContractConfig(config)

        self._backend: Optional[BaseStorageBackend] = backend
        self._gate:    Optional[AuthorizationGate]  = None
        self._logger:  Optional[StructuredLogger]   = None

        # At most one execute in flight; queries do not take this lock
        self._execute_lock = threading.Lock()
        self._counter = 0

    def initialize(self) -> "SecretVarsContract":
        """Build all internal components. Called automatically on first use."""
        cfg = self._cfg

        if self._backend is None:
            self._backend = _build_backend(cfg)

        cipher = ValueCipher() if cfg.encryption else None

        self._logger = StructuredLogger(
            name        = self.contract_name,
            console     = cfg.log_console,
            max_entries = cfg.log_max_entries,
        )
        store = StateStore(PrefixedStorage(self._backend, "state/", cipher))
        keys = ViewingKeyManager(
            PrefixedStorage(self._backend, "viewing_keys/", cipher),
            key_prefix         = cfg.key_prefix,
            max_entropy_length = cfg.max_entropy_length,
        )
        self._gate = AuthorizationGate(
            store               = store,
            keys                = keys,
            logger              = self._logger,
            audit               = AuditLog(max_entries=cfg.log_max_entries),
            identity_min_length = cfg.identity_min_length,
            identity_max_length = cfg.identity_max_length,
        )

        self._initialized = True
        return self

    # ── Entry points ──────────────────────────────────────────────────────────

    def instantiate(
        self,
        caller: str,
        msg: Any,
        context: Optional[CallContext] = None,
    ) -> Response:
        """
        Create the contract: caller becomes owner, prng_seed seeds the keys.

        Raises
        ------
        MalformedError
            If msg or caller is malformed.
        AlreadyInitializedError
            If the contract was already instantiated.
        """
        if not self._initialized:
            self.initialize()

        parsed = parse_instantiate(msg)
        with self._execute_lock:
            self._counter += 1
            ctx = self._stamp(context)
            state = self._gate.instantiate(caller, parsed.prng_seed, ctx)
        return Response().add_attribute("action", "instantiate") \
                         .add_attribute("owner", state.owner)

    def execute(
        self,
        caller: str,
        msg: Any,
        context: Optional[CallContext] = None,
    ) -> Response:
        """
        Dispatch a mutating call from an authenticated caller.

        Parameters
        ----------
        caller : str
            Identity supplied by the platform; trusted as-is.
        msg : dict or typed message
            One of set_viewers / set_secret_variables / generate_viewing_key.
        context : CallContext or None
            Platform environment. When absent, one is built from the
            wall clock; the call counter is always stamped here.

        Returns
        -------
        Response
            For generate_viewing_key, data is a ViewingKeyResponse.

        Raises
        ------
        UnauthorizedError, MalformedError, NotFoundError
            Nothing is written when any of these is raised.
        """
        if not self._initialized:
            self.initialize()

        parsed = parse_execute(msg)

        with self._execute_lock:
            self._counter += 1
            ctx = self._stamp(context)

            if isinstance(parsed, SetViewers):
                self._gate.set_viewers(caller, list(parsed.viewers))
                return Response().add_attribute("action", "set_viewers")

            if isinstance(parsed, SetSecretVariables):
                self._gate.set_secret_variables(caller, parsed.secret_variables)
                return Response().add_attribute("action", "set_secret_variables")

            # parse_execute admits only the three variants
            key = self._gate.generate_viewing_key(caller, parsed.entropy, ctx)
            return Response(data=ViewingKeyResponse(key=key)) \
                .add_attribute("action", "generate_viewing_key")

    def query(self, msg: Any) -> str:
        """
        Return the secret payload to the holder of a valid viewing key.

        Raises
        ------
        UnauthorizedError
            If the key does not verify for the named account.
        MalformedError
            If msg or the account identity is malformed.
        """
        if not self._initialized:
            self.initialize()

        parsed = parse_query(msg)
        return self._gate.get_secret_variables(parsed.account, parsed.viewing_key)

    # ── Operator views (no secrets) ───────────────────────────────────────────

    def owner(self) -> str:
        if not self._initialized:
            self.initialize()
        return self._gate.load_state().owner

    def allowed_viewers(self) -> List[str]:
        if not self._initialized:
            self.initialize()
        return list(self._gate.load_state().allowed_viewers)

    def audit(self, operation: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return audit entries, optionally for a single operation."""
        if not self._initialized:
            self.initialize()
        return self._gate.audit.get_entries(operation=operation)

    def logs(self, operation: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return the debug log entries."""
        if not self._initialized:
            self.initialize()
        return self._logger.get_entries(operation=operation)

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _stamp(self, context: Optional[CallContext]) -> CallContext:
        if context is None:
            return CallContext(
                height  = self._counter,
                time_ns = time.time_ns(),
                counter = self._counter,
            )
        return dataclasses.replace(context, counter=self._counter)

    def close(self) -> None:
        if self._backend is not None:
            self._backend.close()


def _build_backend(cfg: ContractConfig) -> BaseStorageBackend:
    if cfg.backend == "memory":
        return MemoryBackend()
    if cfg.backend == "file":
        return FileBackend(cfg.storage_path)
    raise ConfigError(
        f"Unsupported storage backend: {cfg.backend!r}",
        details={"valid": ["memory", "file"]},
    )
