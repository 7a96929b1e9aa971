"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mealmigo_site.api.account import account_router, onboarding_router
from mealmigo_site.api.admin import router as admin_router
from mealmigo_site.api.public import router as public_router
from mealmigo_site.app_logging import configure_logging
from mealmigo_site.config import parse_allowed_origins
from mealmigo_site.containers import AppContainer
from mealmigo_site.services.auth import AuthError
from mealmigo_site.services.chat import ChatNotConfiguredError, ChatUpstreamError
from mealmigo_site.services.cms import InvalidSectionError
from mealmigo_site.services.documents import (
    ConflictError,
    DocumentNotFoundError,
    InvalidStoragePathError,
    PermissionDeniedError,
)
from mealmigo_site.services.dropdowns import InvalidOptionError
from mealmigo_site.services.guards import RedirectRequired
from mealmigo_site.services.health import ConsentRequiredError, InvalidAnswersError
from mealmigo_site.services.media import UploadValidationError
from mealmigo_site.services.onboarding import DraftNotFoundError
from mealmigo_site.services.recipes import InvalidRecipeError
from mealmigo_site.services.site_settings import AppLinksUnavailableError

_ERROR_STATUS: dict[type[Exception], int] = {
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    DocumentNotFoundError: status.HTTP_404_NOT_FOUND,
    DraftNotFoundError: status.HTTP_404_NOT_FOUND,
    AppLinksUnavailableError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    InvalidSectionError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    UploadValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidStoragePathError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidOptionError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidRecipeError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ConsentRequiredError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidAnswersError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    AuthError: status.HTTP_401_UNAUTHORIZED,
    ChatNotConfiguredError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ChatUpstreamError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        feed = app.state.container.content_feed
        session = app.state.container.auth_session
        try:
            feed.start()
        except Exception:
            logger.exception("Failed to subscribe to landing page content")
        session.start()
        yield
        session.close()
        feed.close()
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_allowed_origins(container.settings.cors_allowed_origins),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RedirectRequired)
    async def redirect_required(_request: Request, exc: RedirectRequired) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_307_TEMPORARY_REDIRECT,
            content={"redirect": exc.location},
            headers={"Location": exc.location},
        )

    async def mapped_error(request: Request, exc: Exception) -> JSONResponse:
        status_code = next(
            code for error, code in _ERROR_STATUS.items() if isinstance(exc, error)
        )
        log = logger.warning if status_code < 500 else logger.error
        log(
            "Request failed: %s",
            exc,
            extra={"path": request.url.path, "error": type(exc).__name__},
        )
        return JSONResponse(status_code=status_code, content={"error": str(exc)})

    for error in _ERROR_STATUS:
        app.add_exception_handler(error, mapped_error)

    app.include_router(public_router)
    app.include_router(onboarding_router)
    app.include_router(account_router)
    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
