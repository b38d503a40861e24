"""FastAPI routes running the Keycloak login flow for a host application.

The anti-forgery state token and the return URL travel in short-lived
HttpOnly cookies; the callback compares the cookie with the ``state`` query
parameter before any code is exchanged.
"""

import logging
import secrets
from typing import Awaitable, Callable, Mapping, Optional
from urllib.parse import quote, unquote

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from ..application.auth_flow_controller import AuthFlowController
from ..core.entities import FlowState
from ..core.exceptions import BuildError, ConfigError, KeycloakBridgeError, create_error_response
from ..core.value_objects import UserIdentity

logger = logging.getLogger(__name__)

STATE_COOKIE = "keycloak_auth_state"
RETURN_URL_COOKIE = "keycloak_auth_return"
STATE_COOKIE_MAX_AGE = 600  # 10 minutes to complete the login

AuthenticatedHook = Callable[[UserIdentity, Request], Awaitable[None]]


def safe_return_url(url: Optional[str], default: str = "/") -> str:
    """Only same-site relative paths are accepted as return URLs."""
    if not url or not url.startswith("/") or url.startswith("//") or "\\" in url:
        return default
    return url


class RequestInitContext:
    """``InitContext`` collecting what the login response must carry."""

    def __init__(self, callback_url: str):
        self._callback_url = callback_url
        self.state_token: Optional[str] = None
        self.return_url: Optional[str] = None
        self.redirect_url: Optional[str] = None

    @property
    def callback_url(self) -> str:
        return self._callback_url

    def save_state(self, state_token: str, return_url: Optional[str]) -> None:
        self.state_token = state_token
        self.return_url = return_url

    def redirect_to(self, url: str) -> None:
        self.redirect_url = url


class RequestCallbackContext:
    """``CallbackContext`` over the FastAPI callback request."""

    def __init__(
        self,
        request: Request,
        callback_url: str,
        on_authenticated: AuthenticatedHook,
        default_return_url: str = "/",
    ):
        self._request = request
        self._callback_url = callback_url
        self._on_authenticated = on_authenticated
        self._default_return_url = default_return_url
        self.redirect_url: Optional[str] = None

    @property
    def callback_url(self) -> str:
        return self._callback_url

    @property
    def query_params(self) -> Mapping[str, str]:
        return self._request.query_params

    def verify_state(self, state_token: Optional[str]) -> bool:
        expected = self._request.cookies.get(STATE_COOKIE)
        if not state_token or not expected:
            return False
        return secrets.compare_digest(state_token.encode(), expected.encode())

    async def authenticate(self, identity: UserIdentity) -> None:
        await self._on_authenticated(identity, self._request)

    def redirect_to_requested_page(self) -> None:
        requested = self._request.cookies.get(RETURN_URL_COOKIE)
        self.redirect_url = safe_return_url(unquote(requested) if requested else None, self._default_return_url)


def _configuration_error_response(error: KeycloakBridgeError) -> JSONResponse:
    logger.error(f"Keycloak authentication is misconfigured: {error.message} {error.details}")
    status_code = (
        status.HTTP_503_SERVICE_UNAVAILABLE if isinstance(error, BuildError)
        else status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    return JSONResponse(status_code=status_code, content=create_error_response(error, include_details=False))


def _clear_flow_cookies(response: Response) -> None:
    response.delete_cookie(STATE_COOKIE, path="/")
    response.delete_cookie(RETURN_URL_COOKIE, path="/")


def create_keycloak_router(
    controller: AuthFlowController,
    on_authenticated: AuthenticatedHook,
    *,
    prefix: str = "/auth/keycloak",
    secure_cookies: bool = True,
    default_return_url: str = "/",
) -> APIRouter:
    """Create the login and callback routes for ``controller``.

    Args:
        controller: Keycloak identity provider
        on_authenticated: Host hook establishing the session for an identity
        prefix: Route prefix
        secure_cookies: Send flow cookies over HTTPS only
        default_return_url: Where to land when no valid return URL was given

    Returns:
        Router to include in the host application
    """
    router = APIRouter(prefix=prefix, tags=["Keycloak Authentication"])

    def _ensure_enabled() -> None:
        if not controller.is_enabled():
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Keycloak login is not enabled")

    @router.get("/login", name="keycloak_login", summary="Redirect to Keycloak login")
    async def login(request: Request, return_to: Optional[str] = None) -> Response:
        _ensure_enabled()
        context = RequestInitContext(str(request.url_for("keycloak_callback")))

        try:
            await controller.initiate(context, safe_return_url(return_to, default_return_url))
        except (ConfigError, BuildError) as e:
            return _configuration_error_response(e)

        response = RedirectResponse(context.redirect_url, status_code=status.HTTP_302_FOUND)
        cookie_options = dict(
            max_age=STATE_COOKIE_MAX_AGE,
            path="/",
            httponly=True,
            samesite="lax",
            secure=secure_cookies,
        )
        response.set_cookie(STATE_COOKIE, context.state_token, **cookie_options)
        if context.return_url:
            response.set_cookie(RETURN_URL_COOKIE, quote(context.return_url, safe=""), **cookie_options)
        return response

    @router.get("/callback", name="keycloak_callback", summary="Complete Keycloak login")
    async def callback(request: Request) -> Response:
        _ensure_enabled()
        context = RequestCallbackContext(
            request,
            str(request.url_for("keycloak_callback")),
            on_authenticated,
            default_return_url,
        )

        try:
            attempt = await controller.complete_callback(context)
        except (ConfigError, BuildError) as e:
            return _configuration_error_response(e)

        if attempt.state is FlowState.COMPLETED:
            response: Response = RedirectResponse(
                context.redirect_url or default_return_url,
                status_code=status.HTTP_302_FOUND,
            )
        else:
            response = JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content=create_error_response(attempt.failure, include_details=False),
            )
        _clear_flow_cookies(response)
        return response

    return router
