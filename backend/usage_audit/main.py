"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from usage_audit.api.v1.router import router as api_router
from usage_audit.core.config import settings
from usage_audit.core.logging import setup_logging
from usage_audit.core.request_logging import RequestLoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    setup_logging(debug=settings.debug)
    logger.info(
        f"Serving usage audit from {settings.usage_file} "
        f"(recompute_summary={settings.audit_recompute_summary})"
    )
    yield


app = FastAPI(
    title=settings.app_name,
    description="Audit trail of AI-assisted changes: sessions, tokens and files touched",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "Origin", "X-Requested-With"],
)

app.add_middleware(
    RequestLoggingMiddleware,
    exclude_paths=["/", "/api/v1/health"],
)

app.include_router(api_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"service": "usage-audit", "status": "running"}


def run() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("usage_audit.main:app", host="0.0.0.0", port=8000)
