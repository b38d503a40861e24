"""Host request context protocol contracts.

The host implements these for each HTTP request of the login flow. They are
the only way the bridge reads the request and acts on the response.
"""

from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from ..value_objects import UserIdentity


@runtime_checkable
class InitContext(Protocol):
    """Context of the request that starts a login."""

    @property
    def callback_url(self) -> str:
        """Absolute URL the provider redirects back to."""
        ...

    def save_state(self, state_token: str, return_url: Optional[str]) -> None:
        """Remember the anti-forgery state token for the callback request."""
        ...

    def redirect_to(self, url: str) -> None:
        """Send the user agent to ``url``."""
        ...


@runtime_checkable
class CallbackContext(Protocol):
    """Context of the provider callback request."""

    @property
    def callback_url(self) -> str:
        """Same callback URL used when the login was initiated."""
        ...

    @property
    def query_params(self) -> Mapping[str, str]:
        """Query parameters of the callback request."""
        ...

    def verify_state(self, state_token: Optional[str]) -> bool:
        """Check ``state_token`` against the one saved when the login started."""
        ...

    async def authenticate(self, identity: UserIdentity) -> None:
        """Establish the host session for ``identity``."""
        ...

    def redirect_to_requested_page(self) -> None:
        """Send the user agent back to the page originally requested."""
        ...


@runtime_checkable
class ExtensionContext(Protocol):
    """Host extension registry used by the module definition."""

    def add_extensions(self, *extensions: Any) -> None:
        ...
