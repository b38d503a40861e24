"""Decoded ID token claims value object."""

from dataclasses import dataclass, field
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Optional

# Claims exposed as typed attributes; everything else lands in other_claims.
_PROFILE_CLAIMS = ("preferred_username", "email", "name", "given_name", "family_name")


@dataclass(frozen=True)
class IdentityClaims:
    """Identity claims of one ID token.

    Created per callback and discarded once the identity has been mapped.
    Provider-specific claims (``username``, ``groups``, ``roles``...) are kept in
    a read-only mapping and accessed through explicit presence checks.
    """

    preferred_username: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    subject: Optional[str] = None
    other_claims: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.other_claims, MappingProxyType):
            object.__setattr__(self, "other_claims", MappingProxyType(dict(self.other_claims)))

    @classmethod
    def from_token_payload(cls, payload: Mapping[str, Any]) -> "IdentityClaims":
        """Create claims from a decoded ID token payload.

        Args:
            payload: JSON object of the token body

        Returns:
            IdentityClaims instance
        """
        if not isinstance(payload, Mapping):
            raise TypeError("ID token payload must be a JSON object")

        def text(claim: str) -> Optional[str]:
            value = payload.get(claim)
            return None if value is None else str(value)

        return cls(
            preferred_username=text("preferred_username"),
            email=text("email"),
            name=text("name"),
            given_name=text("given_name"),
            family_name=text("family_name"),
            subject=text("sub"),
            other_claims={
                key: value for key, value in payload.items()
                if key not in _PROFILE_CLAIMS and key != "sub"
            },
        )

    def has_claim(self, claim_name: str) -> bool:
        """Check if a provider-specific claim is present and not null."""
        return self.other_claims.get(claim_name) is not None

    def get_claim(self, claim_name: str, default: Any = None) -> Any:
        """Get a provider-specific claim value with default."""
        value = self.other_claims.get(claim_name)
        return default if value is None else value
