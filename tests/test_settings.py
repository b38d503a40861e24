"""Tests for host settings access."""

import pytest

from keycloak_bridge.config import (
    EnvironmentSettingsSource,
    KeycloakEnvironmentSettings,
    KeycloakSettings,
    MappingSettingsSource,
)
from keycloak_bridge.config.settings import (
    ALLOW_USERS_TO_SIGN_UP,
    ENABLED,
    GROUPS_SYNC,
    KEYCLOAK_JSON,
    LOGIN_STRATEGY,
    AuthSettings,
)
from keycloak_bridge.core.exceptions import ConfigError


class TestKeycloakSettings:
    """KeycloakSettings reads."""

    def test_defaults_when_nothing_is_stored(self):
        settings = KeycloakSettings(MappingSettingsSource({}))

        assert settings.is_enabled() is False
        assert settings.keycloak_json() == ""
        assert settings.allow_users_to_sign_up() is True
        assert settings.login_strategy() == "Same as Keycloak login"
        assert settings.sync_groups() is False

    def test_enabled_with_config(self, keycloak_settings):
        assert keycloak_settings.is_enabled() is True

    @pytest.mark.parametrize("enabled", ["true", "false", True, False, None])
    @pytest.mark.parametrize("config_json", ["", "  "])
    def test_never_enabled_without_config(self, enabled, config_json):
        settings = KeycloakSettings(MappingSettingsSource({ENABLED: enabled, KEYCLOAK_JSON: config_json}))

        assert settings.is_enabled() is False
        assert settings.snapshot().is_enabled is False

    def test_disabled_flag_wins_over_config(self, settings_values):
        settings_values[ENABLED] = "false"
        settings = KeycloakSettings(MappingSettingsSource(settings_values))

        assert settings.is_enabled() is False

    def test_values_are_read_fresh(self, settings_values):
        settings = KeycloakSettings(MappingSettingsSource(settings_values))
        snapshot = settings.snapshot()

        settings_values[GROUPS_SYNC] = "true"
        settings_values[LOGIN_STRATEGY] = "Unique"

        assert settings.sync_groups() is True
        assert settings.login_strategy() == "Unique"
        assert snapshot.groups_sync is False
        assert snapshot.login_strategy == "Same as Keycloak login"

    def test_snapshot(self, settings_values, adapter_json):
        settings_values[ALLOW_USERS_TO_SIGN_UP] = "false"
        snapshot = KeycloakSettings(MappingSettingsSource(settings_values)).snapshot()

        assert snapshot == AuthSettings(
            enabled=True,
            config_json=adapter_json,
            allow_users_to_sign_up=False,
            login_strategy="Same as Keycloak login",
            groups_sync=False,
        )
        assert snapshot.provider_config().client_id == "sonarqube"

    def test_snapshot_without_config_raises_config_error(self):
        with pytest.raises(ConfigError):
            AuthSettings(enabled=True).provider_config()


class TestDefinitions:
    """Setting definitions offered to the host admin UI."""

    def test_definitions_cover_every_option(self):
        definitions = KeycloakSettings.definitions()

        assert [d.key for d in definitions] == [
            ENABLED,
            KEYCLOAK_JSON,
            ALLOW_USERS_TO_SIGN_UP,
            LOGIN_STRATEGY,
            GROUPS_SYNC,
        ]
        assert [d.index for d in definitions] == [1, 2, 3, 4, 5]
        assert all(d.category == "keycloak" and d.subcategory == "authentication" for d in definitions)

    def test_login_strategy_definition(self):
        definition = next(d for d in KeycloakSettings.definitions() if d.key == LOGIN_STRATEGY)

        assert definition.type == "SINGLE_SELECT_LIST"
        assert definition.default_value == "Same as Keycloak login"
        assert definition.options == ("Unique", "Same as Keycloak login")

    def test_boolean_defaults(self):
        defaults = {d.key: d.default_value for d in KeycloakSettings.definitions()}

        assert defaults[ENABLED] == "false"
        assert defaults[ALLOW_USERS_TO_SIGN_UP] == "true"
        assert defaults[GROUPS_SYNC] == "false"


class TestSettingsSources:
    """Mapping and environment sources."""

    def test_mapping_source_stringifies_values(self):
        source = MappingSettingsSource({ENABLED: True, GROUPS_SYNC: False, "other": 3})

        assert source.get(ENABLED) == "true"
        assert source.get(GROUPS_SYNC) == "false"
        assert source.get("other") == "3"
        assert source.get("missing") is None

    def test_environment_source(self, monkeypatch, adapter_json):
        monkeypatch.setenv("KEYCLOAK_AUTH_ENABLED", "true")
        monkeypatch.setenv("KEYCLOAK_AUTH_CONFIG_JSON", adapter_json)
        monkeypatch.setenv("KEYCLOAK_AUTH_LOGIN_STRATEGY", "Unique")
        monkeypatch.setenv("KEYCLOAK_AUTH_GROUPS_SYNC", "1")

        settings = KeycloakSettings(EnvironmentSettingsSource(KeycloakEnvironmentSettings(_env_file=None)))

        assert settings.is_enabled() is True
        assert settings.login_strategy() == "Unique"
        assert settings.sync_groups() is True
        assert settings.allow_users_to_sign_up() is True
