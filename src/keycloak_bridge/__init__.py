"""Keycloak Authentication Bridge.

Lets a host application delegate user login to Keycloak through the
OAuth2/OIDC authorization-code flow and maps the returned ID token into the
host's user identity.

Architecture:
- core/: domain objects, exceptions and host contracts only
- config/: provider JSON, host settings and logging configuration
- infrastructure/: python-keycloak client descriptor and ID token decoding
- application/: identity mapping and login flow orchestration
- api/: reusable FastAPI routes

Usage:
    from keycloak_bridge import KeycloakAuthModule, MappingSettingsSource
    from keycloak_bridge.api import create_keycloak_router

    module = KeycloakAuthModule(MappingSettingsSource(host_settings))
    app.include_router(create_keycloak_router(module.identity_provider, establish_session))
"""

from .__version__ import __version__
from .application import AuthFlowController, IdentityMapper
from .config import (
    AuthSettings,
    EnvironmentSettingsSource,
    KeycloakSettings,
    MappingSettingsSource,
    ProviderConfig,
    setup_logging,
)
from .core.entities import FlowState, LoginAttempt
from .core.exceptions import (
    AuthenticationFailed,
    BuildError,
    CallbackError,
    ConfigError,
    KeycloakBridgeError,
    MissingLoginError,
    UnsupportedStrategyError,
)
from .core.value_objects import IdentityClaims, LoginStrategy, UserIdentity
from .infrastructure import ClientDescriptor, DeploymentClient
from .module import KeycloakAuthModule

__all__ = [
    "__version__",
    # Application
    "AuthFlowController",
    "IdentityMapper",
    "KeycloakAuthModule",
    # Configuration
    "AuthSettings",
    "EnvironmentSettingsSource",
    "KeycloakSettings",
    "MappingSettingsSource",
    "ProviderConfig",
    "setup_logging",
    # Domain
    "FlowState",
    "IdentityClaims",
    "LoginAttempt",
    "LoginStrategy",
    "UserIdentity",
    # Infrastructure
    "ClientDescriptor",
    "DeploymentClient",
    # Exceptions
    "KeycloakBridgeError",
    "AuthenticationFailed",
    "BuildError",
    "CallbackError",
    "ConfigError",
    "MissingLoginError",
    "UnsupportedStrategyError",
]
