"""Settings sources: in-memory host mappings and process environment."""

from typing import Mapping, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .settings import (
    ALLOW_USERS_TO_SIGN_UP,
    ENABLED,
    GROUPS_SYNC,
    KEYCLOAK_JSON,
    LOGIN_STRATEGY,
)


class MappingSettingsSource:
    """Settings source over any host-provided mapping of setting keys to values."""

    def __init__(self, values: Optional[Mapping[str, object]] = None):
        self._values = values if values is not None else {}

    def get(self, key: str) -> Optional[str]:
        value = self._values.get(key)
        if value is None:
            return None
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)


class KeycloakEnvironmentSettings(BaseSettings):
    """Keycloak settings loaded from ``KEYCLOAK_AUTH_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="KEYCLOAK_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    enabled: Optional[bool] = Field(default=None)
    config_json: Optional[str] = Field(default=None)
    allow_users_to_sign_up: Optional[bool] = Field(default=None)
    login_strategy: Optional[str] = Field(default=None)
    groups_sync: Optional[bool] = Field(default=None)


class EnvironmentSettingsSource(MappingSettingsSource):
    """Settings source backed by the process environment.

    Values are reloaded on every construction; hosts wanting live updates
    create a new source per request.
    """

    def __init__(self, environment: Optional[KeycloakEnvironmentSettings] = None):
        environment = environment or KeycloakEnvironmentSettings()
        super().__init__({
            ENABLED: environment.enabled,
            KEYCLOAK_JSON: environment.config_json,
            ALLOW_USERS_TO_SIGN_UP: environment.allow_users_to_sign_up,
            LOGIN_STRATEGY: environment.login_strategy,
            GROUPS_SYNC: environment.groups_sync,
        })
