"""
FastAPI application for repository triage.

Provides REST endpoints for:
- Duplicate analysis
- Spam/quality analysis
- Health checks
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..errors import FatalInputError, TriageError
from ..observability.tracing import configure_langsmith
from .routes import analyze_router, health_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    configure_langsmith()
    yield


async def triage_error_handler(request: Request, exc: TriageError) -> JSONResponse:
    """Render triage errors as ``{errorKind, message}``."""
    status_code = 500
    if isinstance(exc, FatalInputError):
        status_code = exc.status_code or 502
    return JSONResponse(status_code=status_code, content=exc.to_dict())


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Repository Triage API",
        description="Duplicate and spam/quality triage for open GitHub issues and pull requests",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TriageError, triage_error_handler)

    app.include_router(health_router)
    app.include_router(analyze_router)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": "repo-triage",
            "version": __version__,
            "docs": "/docs",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "triage.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
