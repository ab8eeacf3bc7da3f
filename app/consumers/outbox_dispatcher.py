import asyncio
import logging
from typing import Optional
from app.core.config import DISPATCH_INTERVAL_MS, DISPATCH_BATCH_SIZE, LOG_LEVEL
from app.core.db import init_db, close_db
from app.core.logging_setup import configure_logging
from app.events.outbox_queue import OutboxQueue

log = logging.getLogger(__name__)


async def dispatch_tick(queue: OutboxQueue, batch_size: int = DISPATCH_BATCH_SIZE) -> int:
    """
    Drains up to `batch_size` pending events. Errors are logged and swallowed
    so one bad tick never stops the loop.
    """
    try:
        drained = await queue.drain_batch(batch_size)
    except Exception:
        log.exception("Outbox dispatcher error")
        return 0

    if drained:
        log.debug(f"Dispatcher tick drained {len(drained)} event(s)")
    return len(drained)


async def run_dispatcher(
    queue: OutboxQueue,
    interval_ms: int = DISPATCH_INTERVAL_MS,
    batch_size: int = DISPATCH_BATCH_SIZE,
    stop_event: Optional[asyncio.Event] = None,
):
    """Main loop: one tick every `interval_ms` until `stop_event` is set."""
    stop_event = stop_event or asyncio.Event()
    log.info(f"Outbox dispatcher started (interval={interval_ms}ms, batch={batch_size})")

    while not stop_event.is_set():
        await dispatch_tick(queue, batch_size)
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=interval_ms / 1000)
        except asyncio.TimeoutError:
            pass

    log.info("Outbox dispatcher stopped")


async def start_outbox_dispatcher():
    """Runs the dispatcher as its own process, outside the API server."""
    configure_logging(LOG_LEVEL)
    await init_db()
    try:
        await run_dispatcher(OutboxQueue())
    finally:
        await close_db()

def main():
    try:
        asyncio.run(start_outbox_dispatcher())
    except KeyboardInterrupt:
        log.info("Dispatcher service stopped.")

if __name__ == "__main__":
    main()
