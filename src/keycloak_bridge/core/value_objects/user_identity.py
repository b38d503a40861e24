"""Normalized user identity handed to the host."""

from dataclasses import dataclass
from typing import FrozenSet, Optional


@dataclass(frozen=True)
class UserIdentity:
    """User identity built from Keycloak claims.

    ``groups`` is None when group synchronization is disabled, so hosts can tell
    "do not touch memberships" apart from "member of no group".
    """

    provider_login: str
    login: str
    name: str
    email: str = ""
    provider_id: Optional[str] = None
    groups: Optional[FrozenSet[str]] = None

    @property
    def syncs_groups(self) -> bool:
        return self.groups is not None

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "provider_id": self.provider_id,
            "provider_login": self.provider_login,
            "login": self.login,
            "name": self.name,
            "email": self.email,
            "groups": sorted(self.groups) if self.groups is not None else None,
        }
