"""Application container dependency."""

from fastapi import Request

from cryptopay.core.container import ApplicationContainer


def get_container(request: Request) -> ApplicationContainer:
    return request.app.state.container
