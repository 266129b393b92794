"""
secretvars.contract._core.gate.access_control
==============================================
Principal checks for the authorization gate.

  set viewers             → caller must be the owner
  set secret variables    → caller must be the owner
  generate viewing key    → caller must be in allowed_viewers

The owner is NOT implicitly a viewer. All denials raise UnauthorizedError.
These rules are not configurable.
"""

from __future__ import annotations

from secretvars.core.data_types import ContractState
from secretvars.core.exceptions import UnauthorizedError
from secretvars.contract._core.gate.identity import mask_identity


class Action:
    INSTANTIATE          = "instantiate"
    SET_VIEWERS          = "set_viewers"
    SET_SECRET_VARIABLES = "set_secret_variables"
    GENERATE_VIEWING_KEY = "generate_viewing_key"
    GET_SECRET_VARIABLES = "get_secret_variables"


_OWNER_MESSAGES = {
    Action.SET_VIEWERS:          "Only the owner can set viewers",
    Action.SET_SECRET_VARIABLES: "Only the owner can set secret variables",
}


class AccessControl:
    """
    Enforces the owner / allowed-viewer rules against a state snapshot.
    Both checks are pure: they read the state and raise or return.
    """

    @staticmethod
    def check_owner(caller: str, state: ContractState, action: str) -> None:
        """
        Raise UnauthorizedError unless caller is the contract owner.

        Parameters
        ----------
        caller : str
            Canonical caller identity.
        state : ContractState
            Snapshot the decision is made against.
        action : str
            One of the owner-only Action.* constants (for the message).
        """
        if caller != state.owner:
            raise UnauthorizedError(
                _OWNER_MESSAGES.get(action, "Only the owner can perform this action"),
                details={
                    "caller": mask_identity(caller),
                    "action": action,
                    "reason": "not_owner",
                },
            )

    @staticmethod
    def check_viewer(caller: str, state: ContractState) -> None:
        """Raise UnauthorizedError unless caller is in allowed_viewers."""
        if not state.is_viewer(caller):
            raise UnauthorizedError(
                "Only allowed viewers can generate viewing keys",
                details={
                    "caller": mask_identity(caller),
                    "action": Action.GENERATE_VIEWING_KEY,
                    "reason": "not_allowed_viewer",
                },
            )
