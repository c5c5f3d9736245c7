"""Link handshake: placeholder link tokens and public token exchange."""
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from openbank.errors import RequestValidationFailed, UnknownPersonaError
from openbank.fixtures import FixtureStore
from openbank.logging import get_logger
from openbank.schemas import ExchangeResponse, LinkTokenResponse
from openbank.services.tokens import TokenService
from openbank import metrics

logger = get_logger(__name__)


class LinkService:
    """
    Front door of the link flow.

    ``exchange_public_token`` is the only place where a persona name becomes
    a bearer token. Anyone who can name a persona gets read access to it.
    """

    def __init__(
        self,
        store: FixtureStore,
        tokens: TokenService,
        link_token: str = "mock-link-token",
        link_token_ttl_seconds: int = 3600,
    ):
        self.store = store
        self.tokens = tokens
        self.link_token = link_token
        self.link_token_ttl = timedelta(seconds=link_token_ttl_seconds)

    def create_link_token(self, now: Optional[datetime] = None) -> LinkTokenResponse:
        """Return the fixed placeholder link token with an expiry in the future.

        The link token is never verified anywhere.
        """
        now = now or datetime.now(timezone.utc)
        metrics.LINK_TOKENS_CREATED.inc()
        return LinkTokenResponse(
            link_token=self.link_token,
            expiration=now + self.link_token_ttl,
        )

    def exchange_public_token(self, payload: Any) -> ExchangeResponse:
        """
        Exchange a persona name (sent as ``public_token``) for an access token.

        Args:
            payload: Decoded JSON body, or None if the body was absent/invalid

        Returns:
            The signed access token and the item_id minted with it

        Raises:
            RequestValidationFailed: If public_token is missing or not a string
            UnknownPersonaError: If public_token names no known persona
        """
        public_token = payload.get("public_token") if isinstance(payload, dict) else None

        if not isinstance(public_token, str) or not public_token:
            metrics.record_exchange("missing_public_token")
            logger.warning("token_exchange_rejected", outcome="missing_public_token")
            raise RequestValidationFailed("public_token is required")

        if public_token not in self.store:
            metrics.record_exchange("unknown_persona")
            logger.warning("token_exchange_rejected", outcome="unknown_persona")
            raise UnknownPersonaError()

        issued = self.tokens.issue(public_token)

        metrics.record_exchange("issued")
        logger.info(
            "token_exchanged",
            persona=issued.claims.persona,
            item_id=issued.claims.item_id,
            expires_at=issued.claims.expires_at.isoformat(),
        )

        return ExchangeResponse(
            access_token=issued.access_token,
            item_id=issued.claims.item_id,
        )
