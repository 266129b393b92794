"""
secretvars.testing
==================
Helpers that stand in for the host platform in tests and demos.
"""

from __future__ import annotations

from typing import Any, Dict, List

from secretvars.core.data_types import CallContext
from secretvars.contract.secret_vars import SecretVarsContract


MOCK_HEIGHT   = 12_345
MOCK_TIME_NS  = 1_571_797_419_879_305_533
MOCK_CHAIN_ID = "secretvars-testnet"

MOCK_SEED = b"prng_seed"


def mock_context(
    height: int = MOCK_HEIGHT,
    time_ns: int = MOCK_TIME_NS,
    chain_id: str = MOCK_CHAIN_ID,
) -> CallContext:
    """Return a fixed CallContext, like a platform's mock environment."""
    return CallContext(height=height, time_ns=time_ns, chain_id=chain_id)


def instantiated_contract(
    owner: str = "creator",
    config: Any = None,
    seed: bytes = MOCK_SEED,
) -> SecretVarsContract:
    """Build a contract and instantiate it with owner and seed."""
    contract = SecretVarsContract(config=config)
    contract.instantiate(owner, {"prng_seed": seed}, mock_context())
    return contract


def set_viewers_msg(viewers: List[str]) -> Dict[str, Any]:
    return {"set_viewers": {"viewers": list(viewers)}}


def set_secret_msg(secret: str) -> Dict[str, Any]:
    return {"set_secret_variables": {"secret_variables": secret}}


def generate_key_msg(entropy: str) -> Dict[str, Any]:
    return {"generate_viewing_key": {"entropy": entropy}}


def query_msg(viewing_key: str, account: str) -> Dict[str, Any]:
    return {"get_secret_variables": {"viewing_key": viewing_key, "account": account}}
