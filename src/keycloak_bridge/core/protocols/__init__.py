"""Keycloak bridge protocols.

Contracts the host application implements.
"""

from .host_context import CallbackContext, ExtensionContext, InitContext
from .settings_source import SettingsSource

__all__ = [
    "CallbackContext",
    "ExtensionContext",
    "InitContext",
    "SettingsSource",
]
