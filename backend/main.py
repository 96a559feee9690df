"""FastAPI application for the UX audit backend."""

import logging

from fastapi import FastAPI

import settings
from routes import ux_audit


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="UX Audit API")
    app.include_router(ux_audit.router, prefix="/api/ux-audit", tags=["ux-audit"])
    return app


app = create_app()
