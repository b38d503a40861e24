"""Keycloak OAuth2 authorization-code flow orchestration."""

import logging
import secrets
from typing import Any, Callable, Dict, Optional

from ..config.provider_config import ProviderConfig
from ..config.settings import AuthSettings, KeycloakSettings
from ..core.entities import FlowState, LoginAttempt
from ..core.exceptions import (
    AuthenticationFailed,
    CallbackError,
    ConfigError,
    IdentityMappingError,
)
from ..core.protocols import CallbackContext, InitContext
from ..core.value_objects import Display, IdentityClaims, UserIdentity
from ..infrastructure.deployment_client import DeploymentClient
from ..infrastructure.id_token import decode_id_token
from .identity_mapper import PROVIDER_KEY, IdentityMapper

logger = logging.getLogger(__name__)


def generate_state_token() -> str:
    """Random opaque anti-forgery token for one login attempt."""
    return secrets.token_urlsafe(32)


class AuthFlowController:
    """Keycloak identity provider driving the two-phase login flow.

    ``initiate`` redirects the user to Keycloak; ``complete_callback`` handles
    the redirect back, exchanges the code and hands the mapped identity to the
    host. Configuration errors are raised; per-request errors end the attempt
    in the FAILED state and never escape ``complete_callback``.
    """

    KEY = PROVIDER_KEY
    NAME = "Keycloak"

    def __init__(
        self,
        settings: KeycloakSettings,
        identity_mapper: IdentityMapper,
        deployment_client: Optional[DeploymentClient] = None,
        token_decoder: Callable[[str], Dict[str, Any]] = decode_id_token,
        state_factory: Callable[[], str] = generate_state_token,
    ):
        self._settings = settings
        self._identity_mapper = identity_mapper
        self._deployment_client = deployment_client or DeploymentClient()
        self._token_decoder = token_decoder
        self._state_factory = state_factory

    @property
    def key(self) -> str:
        return self.KEY

    @property
    def name(self) -> str:
        return self.NAME

    @property
    def display(self) -> Display:
        return Display()

    def is_enabled(self) -> bool:
        return self._settings.is_enabled()

    def allows_users_to_sign_up(self) -> bool:
        return self._settings.allow_users_to_sign_up()

    def _enabled_snapshot(self) -> AuthSettings:
        settings = self._settings.snapshot()
        if not settings.is_enabled:
            raise ConfigError("Keycloak authentication is not enabled", field="enabled")
        return settings

    async def initiate(self, context: InitContext, return_url: Optional[str] = None) -> LoginAttempt:
        """Start a login by redirecting the user agent to Keycloak.

        Args:
            context: Host context of the login request
            return_url: Page to return to once logged in

        Returns:
            The attempt, awaiting the provider callback

        Raises:
            ConfigError: If the provider is disabled or misconfigured
            BuildError: If the Keycloak client cannot be built
        """
        settings = self._enabled_snapshot()
        descriptor = await self._deployment_client.get_or_build(settings.provider_config())

        state_token = self._state_factory()
        authorization_url = descriptor.authorization_url(context.callback_url, state_token)

        context.save_state(state_token, return_url)
        context.redirect_to(authorization_url)

        logger.debug(f"Redirecting to Keycloak realm {descriptor.config.realm} for login")
        return LoginAttempt().advance(
            FlowState.AWAITING_CALLBACK,
            state_token=state_token,
            return_url=return_url,
        )

    async def complete_callback(self, context: CallbackContext) -> LoginAttempt:
        """Finish a login from the Keycloak redirect.

        Args:
            context: Host context of the callback request

        Returns:
            The attempt, COMPLETED with an identity or FAILED with a generic
            ``AuthenticationFailed``

        Raises:
            ConfigError: If the provider is disabled or misconfigured
            BuildError: If the Keycloak client cannot be built
        """
        settings = self._enabled_snapshot()
        config = settings.provider_config()
        attempt = LoginAttempt.awaiting_callback(state_token=context.query_params.get("state"))

        try:
            identity = await self._exchange_and_map(context, settings, config)
        except (CallbackError, IdentityMappingError) as e:
            logger.warning(
                f"Keycloak login attempt failed: {e.message} "
                f"(reason={e.details.get('reason', e.error_code)})"
            )
            return attempt.fail(AuthenticationFailed.from_error(e))

        await context.authenticate(identity)
        context.redirect_to_requested_page()

        logger.info(f"User {identity.login} authenticated via Keycloak")
        return attempt.complete(identity)

    async def _exchange_and_map(
        self,
        context: CallbackContext,
        settings: AuthSettings,
        config: ProviderConfig,
    ) -> UserIdentity:
        params = context.query_params

        if params.get("error"):
            raise CallbackError(
                "Keycloak returned an error on callback",
                reason=CallbackError.PROVIDER_ERROR,
                details={"error": params.get("error"), "error_description": params.get("error_description")},
            )

        code = params.get("code")
        if not code:
            raise CallbackError("Authorization code is missing", reason=CallbackError.MISSING_CODE)

        if not context.verify_state(params.get("state")):
            raise CallbackError("State token does not match", reason=CallbackError.STATE_MISMATCH)

        descriptor = await self._deployment_client.get_or_build(config)
        token_response = await descriptor.exchange_code(code, context.callback_url)

        id_token = token_response.get("id_token")
        if not id_token:
            raise CallbackError("Token response has no ID token", reason=CallbackError.MISSING_ID_TOKEN)

        try:
            claims = IdentityClaims.from_token_payload(self._token_decoder(id_token))
        except TypeError as e:
            raise CallbackError("ID token payload is malformed", reason=CallbackError.MALFORMED_ID_TOKEN) from e

        return self._identity_mapper.map(claims, settings)
