"""Login generation strategy value object."""

from enum import Enum

from ..exceptions import UnsupportedStrategyError


class LoginStrategy(str, Enum):
    """How the host-side login is derived from the Keycloak login."""

    UNIQUE = "Unique"
    PROVIDER_LOGIN = "Same as Keycloak login"

    @classmethod
    def parse(cls, value: str) -> "LoginStrategy":
        """Resolve a configured strategy value.

        Raises:
            UnsupportedStrategyError: If the value is not a known strategy
        """
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedStrategyError(value) from None

    @classmethod
    def options(cls) -> list:
        """Values offered to administrators, in display order."""
        return [strategy.value for strategy in cls]
