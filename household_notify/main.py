"""household-notify - push notifications for shared household tasks."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from household_notify.core.db_client import close_connection, init_db
from household_notify.core.logging import configure_logfire, instrument_fastapi
from household_notify.interface.endpoint_router import router as endpoint_router
from household_notify.interface.event_router import router as event_router
from household_notify.interface.sqlite_stores import SqliteEndpointStore
from household_notify.services.wiring import build_task_event_handlers


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Startup
    configure_logfire()

    await init_db()
    logger.info("Database initialized")

    # Fails fast when FCM credentials are missing
    app.state.task_event_handlers = build_task_event_handlers()
    app.state.endpoint_store = SqliteEndpointStore()
    logger.info("startup_complete", extra={"status": "ok"})
    yield
    # Shutdown
    await close_connection()


app = FastAPI(
    title="household-notify",
    description="Push notifications for shared household tasks",
    version="0.1.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

# Register routers
app.include_router(event_router)
app.include_router(endpoint_router)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=200)
