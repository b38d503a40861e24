"""Version information for keycloak-auth-bridge."""

__version__ = "1.0.0"
