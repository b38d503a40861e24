"""Keycloak bridge configuration."""

from .environment import EnvironmentSettingsSource, KeycloakEnvironmentSettings, MappingSettingsSource
from .logging_config import LoggingConfig, setup_logging
from .provider_config import ProviderConfig, ProviderCredentials
from .settings import AuthSettings, KeycloakSettings, PropertyDefinition

__all__ = [
    "AuthSettings",
    "EnvironmentSettingsSource",
    "KeycloakEnvironmentSettings",
    "KeycloakSettings",
    "LoggingConfig",
    "MappingSettingsSource",
    "PropertyDefinition",
    "ProviderConfig",
    "ProviderCredentials",
    "setup_logging",
]
