"""FastAPI application for the bases-bridge API."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from bases_bridge import __version__ as version
from bases_bridge.api.routers import bases_router, engine_router, search_router
from bases_bridge.bases.errors import (
    BaseNotFoundError,
    BasesError,
    MtimeConflictError,
    NoteNotFoundError,
)
from bases_bridge.bases.snapshot import EngineState
from bases_bridge.config import init_logging
from bases_bridge.deps import get_config_manager
from bases_bridge.semantic.semantic_errors import (
    EmbeddingDimensionMismatchError,
    NoEmbeddingsFoundError,
    SemanticDependenciesMissingError,
    SemanticSearchDisabledError,
    SemanticSearchError,
)


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover
    """Lifecycle manager for the FastAPI app."""
    app_config = get_config_manager().config
    init_logging(app_config)
    logger.info(f"Starting bases-bridge API (vault={app_config.vault_root})")

    app.state.engine.set_enabled(app_config.engine_enabled)

    yield

    logger.info("Shutting down bases-bridge API")


def error_status(exc: Exception) -> int:
    """HTTP status for a domain error."""
    if isinstance(exc, (BaseNotFoundError, NoteNotFoundError, NoEmbeddingsFoundError)):
        return 404
    if isinstance(exc, MtimeConflictError):
        return 409
    if isinstance(exc, (SemanticSearchDisabledError, SemanticDependenciesMissingError)):
        return 503
    if isinstance(exc, EmbeddingDimensionMismatchError):
        return 422
    if isinstance(exc, BasesError):
        return 422
    return 500


def error_code(exc: Exception) -> str:
    if isinstance(exc, BasesError):
        return exc.code.value
    return type(exc).__name__


def create_app() -> FastAPI:
    app = FastAPI(
        title="bases-bridge API",
        description="Query, edit and search Obsidian Bases over HTTP",
        version=version,
        lifespan=lifespan,
    )
    app.state.engine = EngineState()

    app.include_router(engine_router)
    app.include_router(bases_router)
    app.include_router(search_router)

    @app.exception_handler(BasesError)
    @app.exception_handler(SemanticSearchError)
    async def domain_exception_handler(request: Request, exc: Exception):
        status = error_status(exc)
        logger.warning(f"{request.method} {request.url.path} -> {status}: {exc}")
        return JSONResponse(status_code=status, content={"detail": str(exc), "code": error_code(exc)})

    @app.exception_handler(Exception)
    async def exception_handler(request: Request, exc: Exception):  # pragma: no cover
        logger.exception(
            "API unhandled exception",
            url=str(request.url),
            method=request.method,
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return JSONResponse(status_code=500, content={"detail": str(exc), "code": "internal_error"})

    return app


app = create_app()
