"""
secretvars.core.exceptions
==========================
All custom exceptions for the secretvars contract.

Messages and details must never carry the secret payload, a viewing key,
or the stored seed hash. Identities in details are masked.
"""


class SecretVarsError(Exception):
    """Base class for all secretvars exceptions."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message


class UnauthorizedError(SecretVarsError):
    """
    Raised when a principal or credential check fails.

    Causes:
      - A non-owner tried to set viewers or the secret payload
      - A caller outside allowed_viewers tried to generate a viewing key
      - A query presented a viewing key that does not verify
      - A query named an account that holds no viewing key
    """
    pass


class NotFoundError(SecretVarsError):
    """
    Raised when the contract state is loaded before instantiation.
    This is a usage fault: every entry point runs after instantiate().
    """
    pass


class AlreadyInitializedError(SecretVarsError):
    """Raised when instantiate() or set_seed() runs a second time."""
    pass


class MalformedError(SecretVarsError):
    """
    Raised when input fails basic shape validation.

    Example: an identity with forbidden characters, a message dict with
    an unknown variant, or a seed that is not bytes.
    """
    pass


class ConfigError(SecretVarsError):
    """
    Raised when a configuration is invalid, missing required fields,
    or contains unsupported values.
    """
    pass


class BackendError(SecretVarsError):
    """Raised when the storage backend encounters an error."""
    pass
