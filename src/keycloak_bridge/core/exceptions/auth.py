"""Authentication-flow exceptions for keycloak-bridge."""

from typing import Any, Dict, Optional

from .base import KeycloakBridgeError


class ConfigError(KeycloakBridgeError):
    """Raised when the Keycloak provider configuration is malformed or incomplete.

    Configuration errors are administrator-facing and fail fast.
    """

    def __init__(self, message: str, *, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details={**(details or {}), **({"field": field} if field else {})})
        self.field = field


class BuildError(KeycloakBridgeError):
    """Raised when the Keycloak client descriptor cannot be built."""
    pass


class CallbackError(KeycloakBridgeError):
    """Raised when the provider callback cannot be completed.

    The reason is one of ``missing_code``, ``provider_error``, ``state_mismatch``,
    ``token_exchange_failed``, ``missing_id_token`` or ``malformed_id_token``.
    """

    MISSING_CODE = "missing_code"
    PROVIDER_ERROR = "provider_error"
    STATE_MISMATCH = "state_mismatch"
    TOKEN_EXCHANGE_FAILED = "token_exchange_failed"
    MISSING_ID_TOKEN = "missing_id_token"
    MALFORMED_ID_TOKEN = "malformed_id_token"

    def __init__(self, message: str, *, reason: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details={"reason": reason, **(details or {})})
        self.reason = reason


class IdentityMappingError(KeycloakBridgeError):
    """Base exception for failures while mapping ID token claims to a user identity."""
    pass


class MissingLoginError(IdentityMappingError):
    """Raised when neither ``preferred_username`` nor ``username`` is present."""

    def __init__(self, message: str = "ID token does not carry a login claim"):
        super().__init__(message)


class UnsupportedStrategyError(IdentityMappingError):
    """Raised when the configured login strategy is not supported."""

    def __init__(self, strategy: str):
        super().__init__(
            f"Login strategy not supported : {strategy}",
            details={"login_strategy": strategy},
        )
        self.strategy = strategy


class AuthenticationFailed(KeycloakBridgeError):
    """Generic per-attempt failure handed to the host.

    Only the reason code is exposed; the underlying error is chained as
    ``__cause__`` and logged.
    """

    def __init__(self, message: str = "Authentication failed", *, reason: str = "authentication_error"):
        super().__init__(message, details={"reason": reason})
        self.reason = reason

    @classmethod
    def from_error(cls, error: KeycloakBridgeError) -> "AuthenticationFailed":
        """Create a generic failure for the given per-request error."""
        if isinstance(error, CallbackError):
            reason = error.reason
        elif isinstance(error, MissingLoginError):
            reason = "missing_login"
        elif isinstance(error, UnsupportedStrategyError):
            reason = "unsupported_login_strategy"
        else:
            reason = "authentication_error"
        failure = cls(reason=reason)
        failure.__cause__ = error
        return failure


class InvalidTransitionError(KeycloakBridgeError):
    """Raised when a login attempt is moved into a state it cannot reach."""

    def __init__(self, current: str, target: str):
        super().__init__(
            f"Cannot move login attempt from {current} to {target}",
            details={"current": current, "target": target},
        )
