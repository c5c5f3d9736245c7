"""Service layer for the open banking mock API."""
from openbank.services.data import DataService
from openbank.services.link import LinkService
from openbank.services.tokens import IssuedCredential, TokenService
from openbank.services.webhook import record_webhook

__all__ = ["DataService", "IssuedCredential", "LinkService", "TokenService", "record_webhook"]
