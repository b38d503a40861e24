"""Tests for Keycloak adapter configuration parsing."""

import json

import pytest

from keycloak_bridge.config import ProviderConfig
from keycloak_bridge.core.exceptions import ConfigError


class TestProviderConfigParse:
    """ProviderConfig.parse behaviour."""

    def test_derives_endpoints_from_server_url_and_realm(self, adapter_json):
        config = ProviderConfig.parse(adapter_json)

        assert config.client_id == "sonarqube"
        assert config.realm == "acme"
        assert config.authorization_endpoint == (
            "https://sso.example.com/auth/realms/acme/protocol/openid-connect/auth"
        )
        assert config.token_endpoint == (
            "https://sso.example.com/auth/realms/acme/protocol/openid-connect/token"
        )

    def test_reads_client_secret(self, provider_config):
        assert provider_config.client_secret == "s3cr3t"
        assert "s3cr3t" not in repr(provider_config)

    def test_public_client_without_credentials(self, adapter_config):
        del adapter_config["credentials"]
        adapter_config["public-client"] = True

        config = ProviderConfig.parse(json.dumps(adapter_config))

        assert config.public_client is True
        assert config.client_secret is None

    def test_explicit_endpoints_win(self, adapter_config):
        adapter_config["authorization-endpoint"] = "https://login.example.com/authorize"
        adapter_config["token-endpoint"] = "https://login.example.com/token"

        config = ProviderConfig.parse(json.dumps(adapter_config))

        assert config.authorization_endpoint == "https://login.example.com/authorize"
        assert config.token_endpoint == "https://login.example.com/token"

    def test_disable_trust_manager_turns_off_tls_verification(self, adapter_config):
        assert ProviderConfig.parse(json.dumps(adapter_config)).verify_ssl is True

        adapter_config["disable-trust-manager"] = True
        assert ProviderConfig.parse(json.dumps(adapter_config)).verify_ssl is False

    def test_unused_adapter_keys_are_ignored(self, adapter_config):
        adapter_config["ssl-required"] = "all"
        adapter_config["use-resource-role-mappings"] = True
        config = ProviderConfig.parse(json.dumps(adapter_config))

        assert "ssl_required" not in ProviderConfig.model_fields
        assert config.model_dump() == ProviderConfig.parse(json.dumps({
            key: value for key, value in adapter_config.items()
            if key not in ("ssl-required", "use-resource-role-mappings", "confidential-port")
        })).model_dump()

    def test_config_is_immutable(self, provider_config):
        with pytest.raises(Exception):
            provider_config.realm = "other"

    @pytest.mark.parametrize("text", [None, "", "   \n"])
    def test_empty_text_fails(self, text):
        with pytest.raises(ConfigError) as exc_info:
            ProviderConfig.parse(text)
        assert exc_info.value.field == "config"

    def test_invalid_json_fails(self):
        with pytest.raises(ConfigError, match="Parse Keycloak json configuration failed"):
            ProviderConfig.parse("{realm: acme")

    def test_non_object_json_fails(self):
        with pytest.raises(ConfigError):
            ProviderConfig.parse('["acme"]')

    def test_missing_client_id_fails(self, adapter_config):
        del adapter_config["resource"]

        with pytest.raises(ConfigError) as exc_info:
            ProviderConfig.parse(json.dumps(adapter_config))
        assert any("client_id" in error for error in exc_info.value.details["errors"])

    def test_missing_realm_leaves_no_endpoints(self, adapter_config):
        del adapter_config["realm"]

        with pytest.raises(ConfigError):
            ProviderConfig.parse(json.dumps(adapter_config))
