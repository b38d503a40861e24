"""Base exceptions for keycloak-bridge.

All exceptions inherit from KeycloakBridgeError and carry an error code and
structured details so hosts can log them and build API error responses.
"""

from typing import Any, Dict, Optional


class KeycloakBridgeError(Exception):
    """Base exception for all keycloak-bridge errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


def create_error_response(exception: KeycloakBridgeError, include_details: bool = True) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The keycloak-bridge exception
        include_details: Whether structured details may be exposed to the caller

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details if include_details else {},
            "type": exception.__class__.__name__,
        }
    }
