import asyncio
import logging
from contextlib import asynccontextmanager
import uvicorn
from fastapi import FastAPI, status
from app.api.outbox import router as outbox_router, internal_router
from app.api.submissions import router as submissions_router
from app.consumers.outbox_dispatcher import run_dispatcher
from app.core.config import (
    DISPATCH_BATCH_SIZE,
    DISPATCH_INTERVAL_MS,
    LOG_LEVEL,
    PORT,
    PROJECT_NAME,
    SERVICE_NAME,
    VERSION,
)
from app.core.db import init_db, close_db, is_db_ready
from app.core.exception_handlers import setup_exception_handlers
from app.core.exceptions import NotReady
from app.core.logging_setup import configure_logging
from app.events.outbox_queue import OutboxQueue

log = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handles startup and shutdown events."""
    configure_logging(LOG_LEVEL)
    log.info(f"Starting {PROJECT_NAME} v{VERSION}...")
    await init_db() # Fatal on failure: the server must not serve without a store

    queue = OutboxQueue()
    app.state.outbox_queue = queue
    stop_event = asyncio.Event()
    dispatcher = asyncio.create_task(
        run_dispatcher(queue, DISPATCH_INTERVAL_MS, DISPATCH_BATCH_SIZE, stop_event)
    )
    yield
    stop_event.set()
    await dispatcher
    await close_db()
    log.info(f"{PROJECT_NAME} stopped.")

app = FastAPI(
    title=PROJECT_NAME,
    version=VERSION,
    lifespan=lifespan,
    # Configure API documentation and paths
    docs_url="/docs",
    redoc_url="/redoc"
)

app.include_router(submissions_router, prefix="/submissions", tags=["Submissions"])
app.include_router(outbox_router, prefix="/outbox", tags=["Outbox"])
app.include_router(internal_router, prefix="/internal", tags=["Internal"])

setup_exception_handlers(app)

@app.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Simple liveness endpoint."""
    return {"status": "ok", "service": SERVICE_NAME}

@app.get("/ready", status_code=status.HTTP_200_OK)
async def readiness_check():
    """200 while the store connection answers, 503 otherwise."""
    if not await is_db_ready():
        raise NotReady("Store connection is not active")
    return {"ready": True}

def run():
    uvicorn.run("app.main:app", host="0.0.0.0", port=PORT)

if __name__ == "__main__":
    run()
