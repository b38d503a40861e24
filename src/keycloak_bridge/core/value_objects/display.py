"""Login button display value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Display:
    """How the host renders the "Log in with Keycloak" button."""

    icon_path: str = "/static/authkeycloak/keycloak.svg"
    background_color: str = "#444444"
