"""FastAPI dependencies shared by the routers."""

from typing import Annotated

from fastapi import Depends, Request
from starlette.responses import JSONResponse

from ojp.core.settings import ProviderSettings
from ojp.crypto.provider import KeyProvider
from ojp.errors import ProviderError

HTTP_SERVER_ERROR = 500


def load_settings() -> ProviderSettings:
    return ProviderSettings()


def get_key_provider(request: Request) -> KeyProvider:
    """The application-wide key provider created by ``create_app``."""
    return request.app.state.key_provider


def get_public_url(
    request: Request,
    settings: Annotated[ProviderSettings, Depends(load_settings)],
) -> str:
    """Configured public URL, else the origin the request was addressed to."""
    return settings.resolve_public_url(f"{request.url.scheme}://{request.url.netloc}")


def server_error(exc: ProviderError) -> JSONResponse:
    """OAuth-style 500 response for a key or signing failure."""
    return JSONResponse(
        {"error": "server_error", "error_description": str(exc)},
        status_code=HTTP_SERVER_ERROR,
    )
