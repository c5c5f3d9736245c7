"""
Authorization gate for the data access routes.

``require_session`` is declared as a dependency of ``/accounts`` and
``/transactions`` only. It reads ``Authorization: Bearer <token>``, verifies
the token, and hands the handler a ``SessionContext``. Missing and invalid
tokens are told apart in logs and metrics, but the client receives the same
401 body for both.
"""
from typing import Optional

from fastapi import Depends, Request

from openbank.api.dependencies import get_token_service
from openbank.errors import InvalidCredentialError, MissingCredentialError
from openbank.logging import bind_persona, get_logger
from openbank.schemas import SessionContext
from openbank.services.tokens import TokenService
from openbank import metrics

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(header: Optional[str]) -> Optional[str]:
    """Return the token from a ``Bearer <token>`` header, or None for any other form."""
    if not header or not header.startswith(BEARER_PREFIX):
        return None
    return header[len(BEARER_PREFIX):] or None


async def require_session(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
) -> SessionContext:
    """
    Resolve the caller's session from its bearer token.

    Raises:
        MissingCredentialError: No header, a scheme other than Bearer, or no token
        InvalidCredentialError: The token failed verification
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        metrics.record_auth_rejection("missing")
        logger.warning("auth_rejected", reason="missing", path=request.url.path)
        raise MissingCredentialError()

    try:
        claims = tokens.verify(token)
    except InvalidCredentialError as e:
        metrics.record_auth_rejection("invalid")
        logger.warning(
            "auth_rejected",
            reason="invalid",
            detail=e.detail,
            path=request.url.path,
        )
        raise

    bind_persona(claims.persona)
    logger.debug("auth_accepted", item_id=claims.item_id)

    return SessionContext(persona=claims.persona, item_id=claims.item_id)
