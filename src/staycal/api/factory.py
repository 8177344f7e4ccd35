"""FastAPI application factory."""

from fastapi import FastAPI, Request, Response

from staycal.config import Settings, load_settings
from staycal.observability.correlation import (
    CORRELATION_ID_HEADER,
    generate_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)

from .routers import public
from .routes import calendar


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the calendar API.

    Args:
        settings: Explicit settings. If None, read from the environment.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="staycal",
        docs_url=None,
        redoc_url=None,
    )
    app.state.settings = settings if settings is not None else load_settings()

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next) -> Response:
        cid = request.headers.get(CORRELATION_ID_HEADER) or generate_correlation_id()
        token = set_correlation_id(cid)
        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = cid
            return response
        finally:
            reset_correlation_id(token)

    app.include_router(public.router)
    app.include_router(calendar.router)

    return app
