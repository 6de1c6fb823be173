"""
FastAPI application factory.

This module builds the qsol-simplify HTTP service. It is responsible for:
1.  **Middleware Setup**: CORS so editor extensions and web clients can call it.
2.  **Exception Handling**: Every error returns structured JSON.
3.  **Routing**: Mounting the simplification router and the health probe.

Error mapping
-------------
- Request validation errors and `InvalidInputError` → 400 Bad Request
- `TransportError` / other `SimplifyError`            → 502 Bad Gateway
- Anything else                                       → 500 Internal Server Error
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from qsol_simplify import __version__
from qsol_simplify.api.routers import simplify
from qsol_simplify.core.errors import InvalidInputError, SimplifyError
from qsol_simplify.core.settings import get_logger, load_settings

logger = get_logger("qsol_simplify.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log startup and shutdown with the active configuration."""
    cfg = load_settings()
    logger.info(
        "Starting qsol-simplify API (env=%s, oracle=%s, paths=%d, target=%.1f)",
        cfg.environment,
        cfg.oracle_backend.value,
        cfg.num_paths,
        cfg.target_score,
    )
    yield
    logger.info("Shutting down qsol-simplify API")


def create_app() -> FastAPI:
    """
    Construct and configure the qsol-simplify FastAPI application.

    Returns
    -------
    FastAPI
        The configured ASGI application ready to be served by Uvicorn.
    """
    app = FastAPI(
        title="qsol-simplify API",
        description="Readability-targeted text simplification",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report malformed request bodies as 400 with field-level detail."""
        problems = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={"error": "Bad Request", "detail": "; ".join(problems)},
        )

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": "Bad Request", "detail": str(exc)},
        )

    @app.exception_handler(SimplifyError)
    async def simplify_error_handler(request: Request, exc: SimplifyError) -> JSONResponse:
        logger.warning("Upstream failure on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=502,
            content={"error": "Bad Gateway", "detail": str(exc)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all so unhandled exceptions still return structured JSON."""
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": str(exc),
                "path": request.url.path,
            },
        )

    app.include_router(simplify.router)

    @app.get("/health", tags=["System"])
    async def health_check() -> dict[str, str]:
        """Simple liveness probe."""
        return {
            "status": "ok",
            "environment": load_settings().environment,
            "version": __version__,
        }

    return app


__all__ = ["create_app"]
