"""ID token decoding."""

import logging
from typing import Any, Dict

from jose import jwt, JWTError

from ..core.exceptions import CallbackError

logger = logging.getLogger(__name__)


def decode_id_token(id_token: str) -> Dict[str, Any]:
    """Read the claims of an ID token.

    The token comes straight from the token endpoint over the back channel,
    so its claims are read without signature validation.

    Raises:
        CallbackError: If the token is not a well-formed JWT with a JSON object body
    """
    try:
        claims = jwt.get_unverified_claims(id_token)
    except JWTError as e:
        logger.warning(f"Malformed ID token: {e}")
        raise CallbackError(
            "ID token could not be decoded",
            reason=CallbackError.MALFORMED_ID_TOKEN,
        ) from e

    if not isinstance(claims, dict):
        raise CallbackError(
            "ID token payload is not a JSON object",
            reason=CallbackError.MALFORMED_ID_TOKEN,
        )
    return claims
