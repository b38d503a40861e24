"""FastAPI integration for keycloak-bridge."""

from .router import create_keycloak_router

__all__ = ["create_keycloak_router"]
