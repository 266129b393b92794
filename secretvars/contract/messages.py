"""
secretvars.contract.messages
============================
Typed contract messages and their wire (dict) shapes.

Instantiate:
  {"prng_seed": <bytes | base64 str>}
Execute (exactly one variant):
  {"set_viewers":          {"viewers": ["viewer1", ...]}}
  {"set_secret_variables": {"secret_variables": "..."}}
  {"generate_viewing_key": {"entropy": "..."}}
Query:
  {"get_secret_variables": {"viewing_key": "...", "account": "..."}}
Answer:
  {"viewing_key_response": {"key": "..."}}

parse_* functions raise MalformedError on any shape mismatch.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union

from secretvars.core.exceptions import MalformedError


# ── Message types ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class InstantiateMsg:
    prng_seed: bytes

    def __repr__(self) -> str:
        return f"InstantiateMsg(prng_seed=<{len(self.prng_seed)} bytes>)"


@dataclass(frozen=True)
class SetViewers:
    viewers: Tuple[str, ...]


@dataclass(frozen=True)
class SetSecretVariables:
    secret_variables: str

    def __repr__(self) -> str:
        return "SetSecretVariables(secret_variables=<redacted>)"


@dataclass(frozen=True)
class GenerateViewingKey:
    entropy: str

    def __repr__(self) -> str:
        return "GenerateViewingKey(entropy=<redacted>)"


@dataclass(frozen=True)
class GetSecretVariables:
    viewing_key: str
    account: str

    def __repr__(self) -> str:
        return f"GetSecretVariables(viewing_key=<redacted>, account={self.account!r})"


@dataclass(frozen=True)
class ViewingKeyResponse:
    key: str

    def __repr__(self) -> str:
        return "ViewingKeyResponse(key=<redacted>)"


ExecuteMsg = Union[SetViewers, SetSecretVariables, GenerateViewingKey]
QueryMsg   = GetSecretVariables


# ── Parsers ───────────────────────────────────────────────────────────────────

def parse_instantiate(raw: Union[InstantiateMsg, Dict[str, Any]]) -> InstantiateMsg:
    """Accept an InstantiateMsg or its dict form. A str seed is base64-decoded."""
    if isinstance(raw, InstantiateMsg):
        return raw
    if not isinstance(raw, dict) or set(raw) != {"prng_seed"}:
        raise MalformedError(
            "Instantiate message must be {'prng_seed': ...}.",
            details={"reason": "bad_instantiate_shape"},
        )
    seed = raw["prng_seed"]
    if isinstance(seed, str):
        try:
            seed = base64.b64decode(seed, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise MalformedError(
                "prng_seed string must be valid base64.",
                details={"reason": "bad_seed_encoding"},
            ) from exc
    if not isinstance(seed, (bytes, bytearray)):
        raise MalformedError(
            f"prng_seed must be bytes or base64 text, got {type(seed).__name__}",
            details={"reason": "seed_not_bytes"},
        )
    return InstantiateMsg(prng_seed=bytes(seed))


def parse_execute(raw: Union[ExecuteMsg, Dict[str, Any]]) -> ExecuteMsg:
    """Accept a typed execute message or its single-variant dict form."""
    if isinstance(raw, (SetViewers, SetSecretVariables, GenerateViewingKey)):
        return raw
    variant, body = _single_variant(raw, "execute")

    if variant == "set_viewers":
        viewers = _field(body, "viewers", list, variant)
        if not all(isinstance(v, str) for v in viewers):
            raise MalformedError(
                "set_viewers.viewers must contain only strings.",
                details={"reason": "viewer_not_string"},
            )
        return SetViewers(viewers=tuple(viewers))
    if variant == "set_secret_variables":
        return SetSecretVariables(
            secret_variables=_field(body, "secret_variables", str, variant)
        )
    if variant == "generate_viewing_key":
        return GenerateViewingKey(entropy=_field(body, "entropy", str, variant))

    raise MalformedError(
        f"Unknown execute message: {variant!r}",
        details={"valid": ["set_viewers", "set_secret_variables", "generate_viewing_key"]},
    )


def parse_query(raw: Union[QueryMsg, Dict[str, Any]]) -> QueryMsg:
    """Accept a GetSecretVariables or its dict form."""
    if isinstance(raw, GetSecretVariables):
        return raw
    variant, body = _single_variant(raw, "query")
    if variant != "get_secret_variables":
        raise MalformedError(
            f"Unknown query message: {variant!r}",
            details={"valid": ["get_secret_variables"]},
        )
    return GetSecretVariables(
        viewing_key=_field(body, "viewing_key", str, variant),
        account=_field(body, "account", str, variant),
    )


def _single_variant(raw: Any, kind: str) -> Tuple[str, Dict[str, Any]]:
    if not isinstance(raw, dict) or len(raw) != 1:
        raise MalformedError(
            f"A {kind} message must be a dict with exactly one variant.",
            details={"reason": f"bad_{kind}_shape"},
        )
    (variant, body), = raw.items()
    if not isinstance(body, dict):
        raise MalformedError(
            f"Body of {variant!r} must be a dict.",
            details={"reason": "body_not_dict"},
        )
    return variant, body


def _field(body: Dict[str, Any], name: str, kind: type, variant: str) -> Any:
    if name not in body:
        raise MalformedError(
            f"{variant}.{name} is required.",
            details={"reason": "missing_field", "field": name},
        )
    value = body[name]
    if not isinstance(value, kind):
        raise MalformedError(
            f"{variant}.{name} must be a {kind.__name__}.",
            details={"reason": "wrong_type", "field": name},
        )
    return value
