"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

try:
    __version__ = (Path(__file__).resolve().parent / "VERSION").read_text().strip()
except OSError:  # pragma: no cover
    __version__ = "0.0.0-dev"

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import api_router
from config import settings
from services.errors import EditorError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Configure unified logging before anything else
    from logging_config import setup_logging
    setup_logging("Server")

    logger.info(
        "Editor sessions expire after %ds idle, expressions capped at %d chars",
        settings.SESSION_TTL_SECONDS, settings.MAX_EXPRESSION_LENGTH,
    )
    yield

    from services.sessions import editor_sessions
    logger.info("Shutting down with %d open editor session(s)", len(editor_sessions))


app = FastAPI(title="Flowcanvas Editor API", version=__version__, lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.CORS_ALLOW_ALL_ORIGINS else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(EditorError)
async def editor_error_handler(request: Request, exc: EditorError):
    """Editor rejections are reported to the UI, never treated as faults."""
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


# API routes
app.include_router(api_router)


@app.get("/health")
def health_check():
    return {"status": "healthy", "version": __version__}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True, log_config=None)
