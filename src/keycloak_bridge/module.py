"""Keycloak authentication module registration.

Usage:
    from keycloak_bridge.module import KeycloakAuthModule

    module = KeycloakAuthModule(settings_source)
    module.define(host_extension_context)
"""

import logging
from typing import Any, List, Optional

from .application import AuthFlowController, IdentityMapper
from .config.settings import KeycloakSettings
from .core.protocols import ExtensionContext, SettingsSource
from .infrastructure import DeploymentClient

logger = logging.getLogger(__name__)


class KeycloakAuthModule:
    """Wires the Keycloak bridge and registers it with the host.

    Registers the identity provider, the settings accessor, the identity
    factory and the setting definitions the host must persist.
    """

    def __init__(self, settings_source: SettingsSource, deployment_client: Optional[DeploymentClient] = None):
        self.settings = KeycloakSettings(settings_source)
        self.identity_mapper = IdentityMapper()
        self.identity_provider = AuthFlowController(
            self.settings,
            self.identity_mapper,
            deployment_client=deployment_client,
        )

    def extensions(self) -> List[Any]:
        return [self.identity_provider, self.settings, self.identity_mapper]

    def define(self, context: ExtensionContext) -> None:
        """Register the module's extensions with the host."""
        context.add_extensions(*self.extensions())
        context.add_extensions(*KeycloakSettings.definitions())
        logger.debug("Registered Keycloak authentication extensions")
