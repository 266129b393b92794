"""
secretvars.core.base_contract
=============================
Abstract base class for contracts hosted by the platform.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from secretvars.core.data_types import CallContext, Response


class BaseContract(ABC):
    """
    Abstract base class for platform contracts.

    A contract exposes three entry points, all driven by the host:
      instantiate(caller, msg)    → runs exactly once
      execute(caller, msg)        → mutating call from an authenticated caller
      query(msg)                  → read-only, no caller identity

    Usage
    -----
    class MyContract(BaseContract):
        contract_name    = "my_contract"
        contract_version = "1.0.0"

        def instantiate(self, caller, msg, context=None): ...
        def execute(self, caller, msg, context=None): ...
        def query(self, msg): ...
    """

    # ── Contract Manifest (set by subclass) ───────────────────────────────────
    contract_name:    str = "unnamed"
    contract_version: str = "0.0.0"

    def __init__(self, config: Any = None):
        """
        Parameters
        ----------
        config : str, dict, or None
            A str is treated as a preset name or YAML file path.
            A dict is used directly.
        """
        self._config_raw = config
        self._initialized = False

    def initialize(self) -> "BaseContract":
        """
        Build internal components (backend, store, etc.).
        Called automatically by the entry points if not already done.
        Returns self for chaining.
        """
        self._initialized = True
        return self

    @abstractmethod
    def instantiate(
        self,
        caller: str,
        msg: Any,
        context: Optional[CallContext] = None,
    ) -> Response:
        ...

    @abstractmethod
    def execute(
        self,
        caller: str,
        msg: Any,
        context: Optional[CallContext] = None,
    ) -> Response:
        ...

    @abstractmethod
    def query(self, msg: Any) -> Any:
        ...

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"contract={self.contract_name!r}, "
            f"version={self.contract_version!r})"
        )
