"""Issuing and verifying signed access tokens."""
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from pydantic import ValidationError

from openbank.errors import InvalidCredentialError
from openbank.schemas import Claims

DEFAULT_ALGORITHM = "HS256"


@dataclass(frozen=True)
class IssuedCredential:
    """A freshly minted access token together with the claims it carries."""
    access_token: str
    claims: Claims


class TokenService:
    """
    Stateless access token service.

    Tokens are HS256 JWTs carrying ``persona``, ``item_id``, ``iat`` and
    ``exp``. Validity depends only on the signature and expiry inside the
    token, so nothing is stored server side and a token cannot be revoked
    before it expires.
    """

    def __init__(
        self,
        signing_key: str,
        ttl_seconds: int = 3600,
        algorithm: str = DEFAULT_ALGORITHM,
    ):
        """
        Initialize the token service.

        Args:
            signing_key: Secret used to sign and verify tokens
            ttl_seconds: Lifetime of issued tokens
            algorithm: JWT signing algorithm
        """
        if not signing_key:
            raise ValueError("signing_key must not be empty")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")

        self._signing_key = signing_key
        self.ttl = timedelta(seconds=ttl_seconds)
        self.algorithm = algorithm

    def issue(self, persona: str, now: Optional[datetime] = None) -> IssuedCredential:
        """
        Mint a token for ``persona`` with a new random item_id.

        The caller is responsible for checking that the persona exists.

        Args:
            persona: Persona name to bind into the token
            now: Issuance time, defaults to the current UTC time

        Returns:
            The encoded token and its claims
        """
        issued_at = (now or datetime.now(timezone.utc)).replace(microsecond=0)
        claims = Claims(
            persona=persona,
            item_id=str(uuid.uuid4()),
            issued_at=issued_at,
            expires_at=issued_at + self.ttl,
        )
        payload = {
            "persona": claims.persona,
            "item_id": claims.item_id,
            "iat": int(claims.issued_at.timestamp()),
            "exp": int(claims.expires_at.timestamp()),
        }
        token = jwt.encode(payload, self._signing_key, algorithm=self.algorithm)
        return IssuedCredential(access_token=token, claims=claims)

    def verify(self, token: str) -> Claims:
        """
        Validate ``token`` and return its claims.

        Raises:
            InvalidCredentialError: For any empty, malformed, forged or
                expired token. ``detail`` names the cause for logging.
        """
        if not token:
            raise InvalidCredentialError("empty")

        try:
            payload = jwt.decode(
                token,
                self._signing_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidCredentialError("expired")
        except jwt.InvalidSignatureError:
            raise InvalidCredentialError("bad_signature")
        except jwt.InvalidTokenError:
            raise InvalidCredentialError("malformed")

        try:
            return Claims(
                persona=payload.get("persona"),
                item_id=payload.get("item_id"),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (ValidationError, TypeError, ValueError, OverflowError):
            raise InvalidCredentialError("bad_claims")
