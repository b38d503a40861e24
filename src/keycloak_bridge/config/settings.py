"""Keycloak authentication settings read from the host key/value store."""

from dataclasses import dataclass
from typing import List, Optional

from ..core.protocols import SettingsSource
from ..core.value_objects import LoginStrategy
from .provider_config import ProviderConfig

KEY_PREFIX = "auth.keycloak."

KEYCLOAK_JSON = KEY_PREFIX + "config"
ENABLED = KEY_PREFIX + "enabled"
ALLOW_USERS_TO_SIGN_UP = KEY_PREFIX + "allowUsersToSignUp"
GROUPS_SYNC = KEY_PREFIX + "groupsSync"
LOGIN_STRATEGY = KEY_PREFIX + "loginStrategy"

LOGIN_STRATEGY_DEFAULT_VALUE = LoginStrategy.PROVIDER_LOGIN.value

CATEGORY = "keycloak"
SUBCATEGORY = "authentication"

_TRUE_VALUES = {"true", "1", "yes", "on"}


@dataclass(frozen=True)
class AuthSettings:
    """Snapshot of the Keycloak settings taken once per request.

    Every step of one login attempt reads the same snapshot, even if an
    administrator changes the settings mid-flow.
    """

    enabled: bool = False
    config_json: str = ""
    allow_users_to_sign_up: bool = True
    login_strategy: str = LOGIN_STRATEGY_DEFAULT_VALUE
    groups_sync: bool = False

    @property
    def is_enabled(self) -> bool:
        """Provider is usable only when enabled AND the JSON config is set."""
        return self.enabled and bool(self.config_json.strip())

    def provider_config(self) -> ProviderConfig:
        """Parse the JSON configuration of this snapshot.

        Raises:
            ConfigError: If the configuration is missing or invalid
        """
        return ProviderConfig.parse(self.config_json)


@dataclass(frozen=True)
class PropertyDefinition:
    """Describes one setting for the host admin UI."""

    key: str
    name: str
    description: str
    type: str
    index: int
    default_value: Optional[str] = None
    options: tuple = ()
    category: str = CATEGORY
    subcategory: str = SUBCATEGORY


class KeycloakSettings:
    """Read-only view over the host settings.

    Values are read fresh on each access; use ``snapshot`` to pin them for a
    request.
    """

    def __init__(self, source: SettingsSource):
        self._source = source

    def _get_string(self, key: str, default: str = "") -> str:
        value = self._source.get(key)
        return default if value is None else str(value)

    def _get_boolean(self, key: str, default: bool) -> bool:
        value = self._source.get(key)
        if value is None or str(value).strip() == "":
            return default
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in _TRUE_VALUES

    def is_enabled(self) -> bool:
        return self._get_boolean(ENABLED, False) and bool(self.keycloak_json().strip())

    def keycloak_json(self) -> str:
        return self._get_string(KEYCLOAK_JSON)

    def login_strategy(self) -> str:
        return self._get_string(LOGIN_STRATEGY, LOGIN_STRATEGY_DEFAULT_VALUE)

    def allow_users_to_sign_up(self) -> bool:
        return self._get_boolean(ALLOW_USERS_TO_SIGN_UP, True)

    def sync_groups(self) -> bool:
        return self._get_boolean(GROUPS_SYNC, False)

    def snapshot(self) -> AuthSettings:
        """Capture the current settings."""
        return AuthSettings(
            enabled=self._get_boolean(ENABLED, False),
            config_json=self.keycloak_json(),
            allow_users_to_sign_up=self.allow_users_to_sign_up(),
            login_strategy=self.login_strategy(),
            groups_sync=self.sync_groups(),
        )

    @staticmethod
    def definitions() -> List[PropertyDefinition]:
        """Setting definitions the host persists and shows to administrators."""
        return [
            PropertyDefinition(
                key=ENABLED,
                name="Enabled",
                description="Enable Keycloak users to login. Value is ignored if 'Keycloak JSON' is not defined.",
                type="BOOLEAN",
                default_value="false",
                index=1,
            ),
            PropertyDefinition(
                key=KEYCLOAK_JSON,
                name="Keycloak JSON",
                description=(
                    "Keycloak json configuration content. You can copy it from '[Your realm] -> Clients -> "
                    "[The client for this application] -> Installation -> [Choose 'Keycloak OIDC JSON' option]'"
                ),
                type="TEXT",
                index=2,
            ),
            PropertyDefinition(
                key=ALLOW_USERS_TO_SIGN_UP,
                name="Allow users to sign-up",
                description=(
                    "Allow new users to authenticate. When set to 'false', only existing users "
                    "will be able to authenticate to the server."
                ),
                type="BOOLEAN",
                default_value="true",
                index=3,
            ),
            PropertyDefinition(
                key=LOGIN_STRATEGY,
                name="Login generation strategy",
                description=(
                    f"When the login strategy is set to '{LoginStrategy.UNIQUE.value}', the user's login will be "
                    f"auto-generated the first time so that it is unique. When the login strategy is set to "
                    f"'{LoginStrategy.PROVIDER_LOGIN.value}', the user's login will be the Keycloak login."
                ),
                type="SINGLE_SELECT_LIST",
                default_value=LOGIN_STRATEGY_DEFAULT_VALUE,
                options=tuple(LoginStrategy.options()),
                index=4,
            ),
            PropertyDefinition(
                key=GROUPS_SYNC,
                name="Synchronize user client roles",
                description=(
                    "The user will be associated to a group which has the same name "
                    "with the client role in the host application."
                ),
                type="BOOLEAN",
                default_value="false",
                index=5,
            ),
        ]
