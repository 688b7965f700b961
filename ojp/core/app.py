"""FastAPI application factory for the OAuth JWT provider."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from ojp import __version__
from ojp.api.routes_client import router as client_router
from ojp.api.routes_token import router as token_router
from ojp.core.settings import ProviderSettings
from ojp.crypto.provider import KeyProvider, build_key_provider
from ojp.errors import KeyMaterialError

logger = logging.getLogger(__name__)

SERVICE_NAME = "oauth-jwt-provider"
HTTP_NOT_FOUND = 404


async def _not_found(_request: Request, _exc: Exception) -> JSONResponse:
    return JSONResponse(
        {"error": "not_found", "error_description": "Endpoint not found"},
        status_code=HTTP_NOT_FOUND,
    )


def create_app(key_provider: KeyProvider | None = None) -> FastAPI:
    """Build and configure the FastAPI application."""
    settings = ProviderSettings()
    provider = key_provider or build_key_provider(settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        # A broken key only disables /jwks and the token endpoints.
        try:
            provider.get_key_material()
        except KeyMaterialError as exc:
            logger.warning("Signing key unavailable at startup: %s", exc)
        yield

    app = FastAPI(
        title="OAuth JWT Provider",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.key_provider = provider

    origins = settings.get_cors_origin_list()
    if origins:
        # "*" reflects the caller's Origin rather than sending a literal "*".
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[] if "*" in origins else origins,
            allow_origin_regex=".*" if "*" in origins else None,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type"],
        )

    app.add_exception_handler(HTTP_NOT_FOUND, _not_found)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Liveness check; does not touch key material."""
        return {"status": "healthy", "service": SERVICE_NAME}

    app.include_router(client_router)
    app.include_router(token_router)

    return app
