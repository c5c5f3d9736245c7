"""FastAPI dependencies resolving the services built in ``create_app``."""
from fastapi import Request

from openbank.services.data import DataService
from openbank.services.link import LinkService
from openbank.services.tokens import TokenService


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_link_service(request: Request) -> LinkService:
    return request.app.state.link_service


def get_data_service(request: Request) -> DataService:
    return request.app.state.data_service
