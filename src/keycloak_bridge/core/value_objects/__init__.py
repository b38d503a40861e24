"""Keycloak bridge value objects."""

from .display import Display
from .identity_claims import IdentityClaims
from .login_strategy import LoginStrategy
from .user_identity import UserIdentity

__all__ = [
    "Display",
    "IdentityClaims",
    "LoginStrategy",
    "UserIdentity",
]
