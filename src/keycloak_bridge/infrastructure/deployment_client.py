"""Lazily built, cached Keycloak client descriptor."""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Union
from urllib.parse import urlencode, urlsplit

from keycloak import KeycloakOpenID
from keycloak.exceptions import KeycloakError, KeycloakPostError, raise_error_from_response

from ..config.provider_config import ProviderConfig
from ..core.exceptions import BuildError, CallbackError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60


@dataclass(frozen=True)
class ClientDescriptor:
    """Ready-to-use representation of how to talk to the Keycloak realm."""

    config: ProviderConfig
    client: KeycloakOpenID

    @property
    def client_id(self) -> str:
        return self.config.client_id

    @property
    def is_usable(self) -> bool:
        """False once the underlying HTTP connection has been torn down."""
        connection = getattr(self.client, "connection", None)
        if connection is None:
            return False
        async_session = getattr(connection, "async_s", None)
        return not getattr(async_session, "is_closed", False)

    def authorization_url(self, redirect_uri: str, state: str) -> str:
        """Build the URL the user agent is redirected to for login.

        Args:
            redirect_uri: Host callback URL
            state: Anti-forgery state token

        Returns:
            Authorization endpoint URL with the code-flow query parameters
        """
        query = urlencode({
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "state": state,
            "response_type": "code",
            "scope": "openid",
        })
        endpoint = self.config.authorization_endpoint
        separator = "&" if "?" in endpoint else "?"
        return f"{endpoint}{separator}{query}"

    async def exchange_code(self, code: str, redirect_uri: str) -> Dict[str, Any]:
        """Exchange an authorization code for tokens at the token endpoint.

        Args:
            code: Authorization code from the callback
            redirect_uri: Same redirect URI used for the authorization request

        Returns:
            Token response (``access_token``, ``id_token``...)

        Raises:
            CallbackError: If the exchange fails, times out or returns garbage
        """
        payload = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri,
            "client_id": self.client_id,
        }
        if self.config.client_secret:
            payload["client_secret"] = self.config.client_secret

        connection = self.client.connection
        try:
            logger.debug(f"Exchanging authorization code at {self.config.token_endpoint}")
            content_type = connection.headers.get("Content-Type")
            connection.add_param_headers("Content-Type", "application/x-www-form-urlencoded")
            try:
                response = await connection.a_raw_post(self.config.token_endpoint, data=payload)
            finally:
                if content_type:
                    connection.add_param_headers("Content-Type", content_type)
                else:
                    connection.del_param_headers("Content-Type")
            token_data = raise_error_from_response(response, KeycloakPostError)
        except KeycloakError as e:
            logger.warning(f"Keycloak rejected authorization code exchange: {e}")
            raise CallbackError(
                "Authorization code exchange failed",
                reason=CallbackError.TOKEN_EXCHANGE_FAILED,
                details={"error": str(e)},
            ) from e
        except Exception as e:
            logger.error(f"Authorization code exchange failed: {e}")
            raise CallbackError(
                "Authorization code exchange failed",
                reason=CallbackError.TOKEN_EXCHANGE_FAILED,
                details={"error": str(e)},
            ) from e

        if not isinstance(token_data, dict):
            raise CallbackError(
                "Invalid token response from Keycloak",
                reason=CallbackError.TOKEN_EXCHANGE_FAILED,
            )
        return token_data

    async def aclose(self) -> None:
        """Close the HTTP session of the underlying python-keycloak connection."""
        connection = getattr(self.client, "connection", None)
        async_session = getattr(connection, "async_s", None)
        if async_session is None or getattr(async_session, "is_closed", False):
            return
        await async_session.aclose()


DescriptorBuilder = Callable[
    [ProviderConfig, float],
    Union[ClientDescriptor, Awaitable[ClientDescriptor]],
]


def build_descriptor(config: ProviderConfig, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> ClientDescriptor:
    """Build a descriptor backed by a python-keycloak OpenID client.

    Raises:
        BuildError: If the client cannot be created from the configuration
    """
    # Exchanges post to config.token_endpoint; the server URL only backs the connection.
    server_url = config.auth_server_url
    if not server_url:
        parts = urlsplit(config.token_endpoint)
        if not parts.scheme or not parts.netloc:
            raise BuildError(
                "Keycloak token endpoint must be an absolute URL",
                details={"token_endpoint": config.token_endpoint},
            )
        server_url = f"{parts.scheme}://{parts.netloc}"

    try:
        client = KeycloakOpenID(
            server_url=server_url,
            realm_name=config.realm,
            client_id=config.client_id,
            client_secret_key=config.client_secret,
            verify=config.verify_ssl,
            timeout=timeout,
        )
    except Exception as e:
        logger.error(f"Failed to create Keycloak OpenID client for realm {config.realm}: {e}")
        raise BuildError(
            "Keycloak OpenID client creation failed",
            details={"realm": config.realm, "error": str(e)},
        ) from e

    logger.info(f"Initialized Keycloak OpenID client for realm: {config.realm}")
    return ClientDescriptor(config=config, client=client)


class DeploymentClient:
    """Build-or-reuse cell holding at most one client descriptor.

    The descriptor is built on first use and reused until it becomes unusable
    or is requested for a different configuration. Building happens under an
    ``asyncio.Lock`` so concurrent login attempts share a single build.
    """

    def __init__(
        self,
        builder: Optional[DescriptorBuilder] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self._builder = builder or build_descriptor
        self._timeout = timeout
        self._descriptor: Optional[ClientDescriptor] = None
        self._lock = asyncio.Lock()

    def _reusable(self, config: ProviderConfig) -> Optional[ClientDescriptor]:
        descriptor = self._descriptor
        if descriptor is not None and descriptor.config == config and descriptor.is_usable:
            return descriptor
        return None

    async def get_or_build(self, config: ProviderConfig) -> ClientDescriptor:
        """Return the cached descriptor for ``config``, building it if needed.

        Raises:
            BuildError: If the descriptor cannot be built
        """
        descriptor = self._reusable(config)
        if descriptor is not None:
            return descriptor

        async with self._lock:
            # Another caller may have finished the build while we waited.
            descriptor = self._reusable(config)
            if descriptor is not None:
                return descriptor

            if self._descriptor is not None:
                logger.info("Rebuilding Keycloak client descriptor")

            try:
                result = self._builder(config, self._timeout)
                if inspect.isawaitable(result):
                    result = await result
            except BuildError:
                raise
            except Exception as e:
                logger.error(f"Failed to build Keycloak client descriptor: {e}")
                raise BuildError(
                    "Keycloak client descriptor build failed",
                    details={"error": str(e)},
                ) from e

            replaced, self._descriptor = self._descriptor, result
            if replaced is not None and replaced is not result:
                try:
                    await replaced.aclose()
                except Exception as e:
                    logger.warning(f"Failed to close replaced Keycloak connection: {e}")
            return result

    def invalidate(self) -> None:
        """Drop the cached descriptor; the next call rebuilds it."""
        self._descriptor = None
