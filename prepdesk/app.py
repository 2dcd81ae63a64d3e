"""Main FastAPI application with modularized routes."""
import asyncio
import contextlib
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prepdesk.database import init_db
from prepdesk.logging_setup import setup_console_logging
from prepdesk.routes import sessions, submissions, tests
from prepdesk.services.session_service import purge_idle_sessions_forever, registry

setup_console_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables, run idle-session cleanup, stop all timers on shutdown."""
    init_db()
    cleanup = asyncio.create_task(
        purge_idle_sessions_forever(registry), name="sessions_cleanup"
    )
    try:
        yield
    finally:
        cleanup.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await cleanup
        registry.close_all()


app = FastAPI(title="Prepdesk API", lifespan=lifespan)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# Include routers
app.include_router(tests.router)
app.include_router(submissions.router)
app.include_router(sessions.router)
