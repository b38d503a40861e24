"""Keycloak adapter configuration parsed from the "Keycloak OIDC JSON" export."""

import logging
from typing import Any, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, model_validator

from ..core.exceptions import ConfigError

logger = logging.getLogger(__name__)


class ProviderCredentials(BaseModel):
    """Client credentials block of the adapter configuration."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    secret: Optional[SecretStr] = None


class ProviderConfig(BaseModel):
    """How to reach the Keycloak realm and which client to act as.

    Parsed once from the JSON an administrator copies from
    ``[realm] -> Clients -> [client] -> Installation -> Keycloak OIDC JSON``.
    Authorization and token endpoints are derived from ``auth-server-url`` and
    ``realm`` unless given explicitly.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    realm: str = ""
    auth_server_url: str = Field(default="", alias="auth-server-url")
    client_id: str = Field(default="", alias="resource")
    credentials: ProviderCredentials = Field(default_factory=ProviderCredentials)
    public_client: bool = Field(default=False, alias="public-client")
    disable_trust_manager: bool = Field(default=False, alias="disable-trust-manager")
    authorization_endpoint: str = Field(default="", alias="authorization-endpoint")
    token_endpoint: str = Field(default="", alias="token-endpoint")

    @model_validator(mode="before")
    @classmethod
    def _derive_endpoints(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        data = dict(data)
        server_url = str(data.get("auth-server-url") or data.get("auth_server_url") or "").rstrip("/")
        realm = data.get("realm")
        if server_url and isinstance(realm, str) and realm:
            base = f"{server_url}/realms/{quote(realm, safe='')}/protocol/openid-connect"
            if not (data.get("authorization-endpoint") or data.get("authorization_endpoint")):
                data["authorization-endpoint"] = f"{base}/auth"
            if not (data.get("token-endpoint") or data.get("token_endpoint")):
                data["token-endpoint"] = f"{base}/token"
        return data

    @model_validator(mode="after")
    def _check_required(self) -> "ProviderConfig":
        for field_name in ("client_id", "authorization_endpoint", "token_endpoint"):
            if not getattr(self, field_name).strip():
                raise ValueError(f"Missing required Keycloak config field: {field_name}")
        return self

    @classmethod
    def parse(cls, json_text: Optional[str]) -> "ProviderConfig":
        """Parse the adapter JSON configuration.

        Args:
            json_text: Raw JSON text stored in the host settings

        Returns:
            ProviderConfig instance

        Raises:
            ConfigError: If the text is empty, not a JSON object, or lacks
                the client id or endpoints
        """
        if not json_text or not json_text.strip():
            raise ConfigError("Keycloak JSON configuration is empty", field="config")

        try:
            return cls.model_validate_json(json_text)
        except ValidationError as e:
            first = e.errors()[0] if e.errors() else {}
            location = ".".join(str(part) for part in first.get("loc", ())) or None
            logger.error(f"Parse Keycloak json configuration failed: {first.get('msg', e)}")
            raise ConfigError(
                "Parse Keycloak json configuration failed",
                field=location,
                details={"errors": [error.get("msg") for error in e.errors()]},
            ) from e

    @property
    def client_secret(self) -> Optional[str]:
        secret = self.credentials.secret
        return secret.get_secret_value() if secret is not None else None

    @property
    def verify_ssl(self) -> bool:
        return not self.disable_trust_manager
