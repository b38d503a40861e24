"""Pytest configuration and fixtures for keycloak-bridge tests."""

import json
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from jose import jwt

from keycloak_bridge.config import KeycloakSettings, MappingSettingsSource, ProviderConfig
from keycloak_bridge.config.settings import (
    ALLOW_USERS_TO_SIGN_UP,
    ENABLED,
    GROUPS_SYNC,
    KEYCLOAK_JSON,
    LOGIN_STRATEGY,
)
from keycloak_bridge.core.value_objects import UserIdentity
from keycloak_bridge.infrastructure import ClientDescriptor

CALLBACK_URL = "https://sonar.example.com/oauth2/callback/keycloak"


def make_id_token(claims: Dict[str, Any]) -> str:
    """Signed JWT carrying ``claims``; the bridge reads it unverified."""
    return jwt.encode(claims, "test-secret", algorithm="HS256")


def make_descriptor(config: ProviderConfig, token_response: Optional[Dict[str, Any]] = None) -> ClientDescriptor:
    """Descriptor over a mocked python-keycloak client."""
    client = MagicMock()
    client.connection.headers = {}
    client.connection.async_s.is_closed = False
    client.connection.async_s.aclose = AsyncMock()
    client.connection.a_raw_post = AsyncMock(return_value=httpx.Response(200, json=token_response or {}))
    return ClientDescriptor(config=config, client=client)


class FakeInitContext:
    """In-memory InitContext."""

    def __init__(self, callback_url: str = CALLBACK_URL):
        self.callback_url = callback_url
        self.saved_state: Optional[str] = None
        self.saved_return_url: Optional[str] = None
        self.redirected_to: Optional[str] = None

    def save_state(self, state_token: str, return_url: Optional[str]) -> None:
        self.saved_state = state_token
        self.saved_return_url = return_url

    def redirect_to(self, url: str) -> None:
        self.redirected_to = url


class FakeCallbackContext:
    """In-memory CallbackContext recording what the bridge asked of the host."""

    def __init__(self, query_params: Dict[str, str], expected_state: Optional[str] = "state-123",
                 callback_url: str = CALLBACK_URL):
        self.callback_url = callback_url
        self.query_params = query_params
        self.expected_state = expected_state
        self.verified_states: List[Optional[str]] = []
        self.authenticated: List[UserIdentity] = []
        self.redirected_to_requested_page = False

    def verify_state(self, state_token: Optional[str]) -> bool:
        self.verified_states.append(state_token)
        return state_token is not None and state_token == self.expected_state

    async def authenticate(self, identity: UserIdentity) -> None:
        self.authenticated.append(identity)

    def redirect_to_requested_page(self) -> None:
        self.redirected_to_requested_page = True


class RecordingExtensionContext:
    """ExtensionContext collecting registered extensions."""

    def __init__(self):
        self.extensions: List[Any] = []

    def add_extensions(self, *extensions: Any) -> None:
        self.extensions.extend(extensions)


@pytest.fixture
def adapter_config() -> Dict[str, Any]:
    """Keycloak OIDC JSON as exported by the admin console."""
    return {
        "realm": "acme",
        "auth-server-url": "https://sso.example.com/auth/",
        "ssl-required": "external",
        "resource": "sonarqube",
        "credentials": {"secret": "s3cr3t"},
        "confidential-port": 0,
    }


@pytest.fixture
def adapter_json(adapter_config) -> str:
    return json.dumps(adapter_config)


@pytest.fixture
def provider_config(adapter_json) -> ProviderConfig:
    return ProviderConfig.parse(adapter_json)


@pytest.fixture
def settings_values(adapter_json) -> Dict[str, Any]:
    return {
        ENABLED: "true",
        KEYCLOAK_JSON: adapter_json,
        ALLOW_USERS_TO_SIGN_UP: "true",
        LOGIN_STRATEGY: "Same as Keycloak login",
        GROUPS_SYNC: "false",
    }


@pytest.fixture
def keycloak_settings(settings_values) -> KeycloakSettings:
    return KeycloakSettings(MappingSettingsSource(settings_values))


@pytest.fixture
def id_token_claims() -> Dict[str, Any]:
    return {
        "sub": "f3a1c2d4-0000-4000-8000-000000000001",
        "iss": "https://sso.example.com/auth/realms/acme",
        "aud": "sonarqube",
        "preferred_username": "ada",
        "email": "ada@example.com",
        "given_name": "Ada",
        "family_name": "Lovelace",
        "name": "Ada Lovelace",
        "groups": ["developers", "reviewers"],
    }
