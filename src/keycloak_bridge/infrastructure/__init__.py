"""Keycloak bridge infrastructure adapters."""

from .deployment_client import ClientDescriptor, DeploymentClient, build_descriptor
from .id_token import decode_id_token

__all__ = [
    "ClientDescriptor",
    "DeploymentClient",
    "build_descriptor",
    "decode_id_token",
]
