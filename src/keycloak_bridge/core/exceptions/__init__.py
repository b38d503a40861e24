"""Keycloak bridge exceptions."""

from .base import KeycloakBridgeError, create_error_response
from .auth import (
    AuthenticationFailed,
    BuildError,
    CallbackError,
    ConfigError,
    IdentityMappingError,
    InvalidTransitionError,
    MissingLoginError,
    UnsupportedStrategyError,
)

__all__ = [
    "KeycloakBridgeError",
    "create_error_response",
    "ConfigError",
    "BuildError",
    "CallbackError",
    "IdentityMappingError",
    "MissingLoginError",
    "UnsupportedStrategyError",
    "AuthenticationFailed",
    "InvalidTransitionError",
]
