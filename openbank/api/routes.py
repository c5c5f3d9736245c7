"""API route handlers for the open banking mock API."""
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request

from openbank.api.auth import require_session
from openbank.api.dependencies import get_data_service, get_link_service
from openbank.schemas import (
    AccountsResponse,
    ErrorResponse,
    ExchangeResponse,
    LinkTokenResponse,
    SessionContext,
    TransactionsResponse,
    WebhookAck,
)
from openbank.services.data import DataService
from openbank.services.link import LinkService
from openbank.services.webhook import record_webhook

link_router = APIRouter(tags=["link"])
data_router = APIRouter(
    tags=["data"],
    responses={401: {"model": ErrorResponse}},
)
webhook_router = APIRouter(tags=["webhook"])


async def _read_json(request: Request) -> Optional[Any]:
    """Decode the request body, treating an empty or invalid body as absent."""
    try:
        return await request.json()
    except ValueError:
        return None


@link_router.post("/link/token/create", response_model=LinkTokenResponse)
async def create_link_token(link: LinkService = Depends(get_link_service)):
    """
    Start the link handshake.

    Returns a placeholder link token that expires in one hour. It mirrors an
    aggregator's first call and is not checked anywhere else.
    """
    return link.create_link_token()


@link_router.post(
    "/item/public_token/exchange",
    response_model=ExchangeResponse,
    responses={400: {"model": ErrorResponse}},
)
async def exchange_public_token(
    request: Request,
    link: LinkService = Depends(get_link_service),
):
    """
    Exchange a public token for an access token.

    The public token is the name of a fixture persona. Each successful call
    mints a new, independent access token and item_id.
    """
    payload = await _read_json(request)
    return link.exchange_public_token(payload)


@data_router.get("/accounts", response_model=AccountsResponse)
async def get_accounts(
    session: SessionContext = Depends(require_session),
    data: DataService = Depends(get_data_service),
):
    """Return every account of the authenticated persona."""
    return AccountsResponse(accounts=data.get_accounts(session))


@data_router.get("/transactions", response_model=TransactionsResponse)
async def get_transactions(
    start: Optional[str] = None,
    end: Optional[str] = None,
    session: SessionContext = Depends(require_session),
    data: DataService = Depends(get_data_service),
):
    """
    Return the authenticated persona's transactions.

    ``start`` and ``end`` are optional inclusive YYYY-MM-DD bounds. A bound
    that does not parse as a date is ignored instead of rejected.
    """
    return TransactionsResponse(
        transactions=data.get_transactions(session, start=start, end=end)
    )


@webhook_router.post("/webhook", response_model=WebhookAck)
async def webhook(request: Request):
    """Accept any notification and acknowledge it."""
    payload = await _read_json(request)
    return record_webhook(payload)
