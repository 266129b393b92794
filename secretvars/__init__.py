"""
secretvars
==========
An access-controlled secret store.

One owner holds one secret payload and an allow-list of viewers.
Viewers mint bearer viewing keys; a valid key unlocks the payload.
"""

__version__ = "0.1.0"

# Lazy import to avoid circular dependencies
def __getattr__(name):
    if name == "SecretVarsContract":
        from secretvars.contract import SecretVarsContract
        return SecretVarsContract
    raise AttributeError(f"module 'secretvars' has no attribute {name!r}")


__all__ = [
    "__version__",
]
