"""Maps Keycloak ID token claims to the host user identity."""

import logging
from typing import Any, FrozenSet, Optional

from typing_extensions import assert_never

from ..config.settings import AuthSettings
from ..core.exceptions import MissingLoginError
from ..core.value_objects import IdentityClaims, LoginStrategy, UserIdentity

logger = logging.getLogger(__name__)

PROVIDER_KEY = "keycloak"


class IdentityMapper:
    """Identity factory turning decoded claims into a ``UserIdentity``.

    Stateless; the login strategy and group synchronization flags come from
    the settings snapshot passed to ``map``.
    """

    def __init__(self, provider_key: str = PROVIDER_KEY):
        self.provider_key = provider_key

    def map(self, claims: IdentityClaims, settings: AuthSettings) -> UserIdentity:
        """Build the user identity for ``claims``.

        Args:
            claims: Decoded ID token claims
            settings: Settings snapshot of the current login attempt

        Returns:
            UserIdentity for the host

        Raises:
            MissingLoginError: If the token carries no login claim
            UnsupportedStrategyError: If the configured login strategy is unknown
        """
        strategy = LoginStrategy.parse(settings.login_strategy)
        provider_login = self.resolve_login(claims)

        groups: Optional[FrozenSet[str]] = None
        if settings.groups_sync:
            groups = self.resolve_groups(claims)

        return UserIdentity(
            provider_id=claims.subject,
            provider_login=provider_login,
            login=self.generate_login(provider_login, strategy),
            name=self.resolve_name(claims, provider_login),
            email=claims.email or "",
            groups=groups,
        )

    @staticmethod
    def resolve_login(claims: IdentityClaims) -> str:
        """Keycloak login: ``preferred_username``, else the ``username`` claim."""
        if claims.preferred_username:
            return claims.preferred_username

        if claims.has_claim("username"):
            login = str(claims.get_claim("username"))
            if login:
                return login

        raise MissingLoginError()

    def generate_login(self, login: str, strategy: LoginStrategy) -> str:
        if strategy is LoginStrategy.PROVIDER_LOGIN:
            return login
        if strategy is LoginStrategy.UNIQUE:
            return f"{login}@{self.provider_key}"
        assert_never(strategy)

    @staticmethod
    def resolve_name(claims: IdentityClaims, login: str) -> str:
        name = claims.name
        if not name:
            name = f"{claims.given_name or ''} {claims.family_name or ''}"

        name = name.strip()
        return name or login

    @staticmethod
    def resolve_groups(claims: IdentityClaims) -> FrozenSet[str]:
        """Group names from the ``groups`` claim, falling back to ``roles``."""
        claim_name = "groups" if claims.has_claim("groups") else "roles"
        value: Any = claims.get_claim(claim_name)
        if value is None:
            return frozenset()

        logger.info(f"Keycloak client roles/groups: {value} ({type(value).__name__})")

        if isinstance(value, str):
            return frozenset(part.strip() for part in value.split(",") if part.strip())
        if isinstance(value, (list, tuple, set, frozenset)):
            return frozenset(str(item) for item in value if item is not None)

        logger.warning(f"Ignoring '{claim_name}' claim of unsupported type {type(value).__name__}")
        return frozenset()
