"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from almadle.api.cookies import clear_session_cookie, read_session_token
from almadle.api.game import router as game_router
from almadle.app_logging import configure_logging
from almadle.containers import AppContainer
from almadle.services.disclosure import RenderError
from almadle.services.game import (
    GameInProgressError,
    NoActiveGameError,
    UnknownDishError,
)
from almadle.services.selector import InvalidSeedError

_RAW_ASSET_PREFIX = "/images"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Catalog loaded",
            extra={"dishes": len(app.state.container.catalog_service.list_dishes())},
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(game_router)

    @app.middleware("http")
    async def block_raw_assets(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Original photos are only reachable through the gated image route."""
        if _is_raw_asset_path(request.url.path):
            return PlainTextResponse("Not Found", status_code=status.HTTP_404_NOT_FOUND)
        return await call_next(request)

    @app.exception_handler(NoActiveGameError)
    async def no_active_game(request: Request, exc: NoActiveGameError) -> Response:
        response = JSONResponse(
            {"detail": "No active game"}, status_code=status.HTTP_409_CONFLICT
        )
        if read_session_token(request):
            clear_session_cookie(response, request.app.state.container.settings)
        return response

    @app.exception_handler(GameInProgressError)
    async def game_in_progress(request: Request, exc: GameInProgressError) -> Response:
        return JSONResponse(
            {"detail": "Game still in progress"}, status_code=status.HTTP_409_CONFLICT
        )

    @app.exception_handler(UnknownDishError)
    @app.exception_handler(InvalidSeedError)
    @app.exception_handler(RequestValidationError)
    async def bad_request(request: Request, exc: Exception) -> Response:
        return JSONResponse(
            {"detail": "Bad Request"}, status_code=status.HTTP_400_BAD_REQUEST
        )

    @app.exception_handler(RenderError)
    async def render_failed(request: Request, exc: RenderError) -> Response:
        logger.error("Image rendering failed", exc_info=exc)
        return JSONResponse(
            {"detail": "Image processing failed"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _is_raw_asset_path(path: str) -> bool:
    normalized = path.rstrip("/").lower()
    return normalized == _RAW_ASSET_PREFIX or normalized.startswith(
        f"{_RAW_ASSET_PREFIX}/"
    )
