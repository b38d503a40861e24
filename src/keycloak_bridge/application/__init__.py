"""Keycloak bridge application services."""

from .auth_flow_controller import AuthFlowController, generate_state_token
from .identity_mapper import PROVIDER_KEY, IdentityMapper

__all__ = [
    "AuthFlowController",
    "IdentityMapper",
    "PROVIDER_KEY",
    "generate_state_token",
]
