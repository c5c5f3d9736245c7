"""Pydantic schemas for fixture data and request/response bodies."""
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Account(BaseModel):
    """A single account belonging to a persona."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = Field(..., description="Human friendly account name, e.g. Checking")
    type: str = Field(..., description="Generic type such as depository or credit")
    balance: float = Field(..., description="Current balance, may be negative")


class Transaction(BaseModel):
    """A single posted transaction."""
    model_config = ConfigDict(frozen=True)

    id: str
    account_id: str = Field(..., description="Account the transaction belongs to (not enforced)")
    date: date
    name: str
    amount: float = Field(..., description="Negative for debits, positive for credits")


class PersonaData(BaseModel):
    """The immutable test data bundle for one persona."""
    model_config = ConfigDict(frozen=True)

    accounts: tuple[Account, ...] = ()
    transactions: tuple[Transaction, ...] = ()


class Claims(BaseModel):
    """Payload carried inside a verified access token."""
    model_config = ConfigDict(frozen=True)

    persona: str = Field(..., min_length=1)
    item_id: str = Field(..., min_length=1)
    issued_at: datetime
    expires_at: datetime


class SessionContext(BaseModel):
    """Per-request identity attached by the authorization gate."""
    model_config = ConfigDict(frozen=True)

    persona: str
    item_id: str


class LinkTokenResponse(BaseModel):
    """Response body for POST /link/token/create."""
    link_token: str
    expiration: datetime


class ExchangeResponse(BaseModel):
    """Response body for POST /item/public_token/exchange."""
    access_token: str
    item_id: str


class AccountsResponse(BaseModel):
    """Response body for GET /accounts."""
    accounts: list[Account]


class TransactionsResponse(BaseModel):
    """Response body for GET /transactions."""
    transactions: list[Transaction]


class WebhookAck(BaseModel):
    """Response body for POST /webhook."""
    status: str = "ok"


class ErrorResponse(BaseModel):
    """Body of every deliberate error response."""
    error: str


def error_body(message: str) -> dict[str, Any]:
    return ErrorResponse(error=message).model_dump()
