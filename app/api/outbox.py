import logging
from typing import Optional
from fastapi import APIRouter, Depends
from app.api.deps import get_outbox_queue
from app.events.outbox_queue import OutboxQueue
from app.schemas.outbox import (
    ConsumeOutboxRequest,
    ConsumeOutboxResponse,
    OutboxEventResponse,
    PendingEventsResponse,
)
from app.schemas.response import SuccessResponse, ok

log = logging.getLogger(__name__)

router = APIRouter()
internal_router = APIRouter()


@router.get("/pending", response_model=SuccessResponse[PendingEventsResponse])
async def list_pending_endpoint(queue: OutboxQueue = Depends(get_outbox_queue)):
    """Oldest-first view of up to 50 events still waiting for dispatch."""
    events = await queue.list_pending()
    return ok(PendingEventsResponse(items=[OutboxEventResponse.model_validate(e) for e in events]))


@internal_router.post("/consume-outbox", response_model=SuccessResponse[ConsumeOutboxResponse])
async def consume_outbox_endpoint(
    body: Optional[ConsumeOutboxRequest] = None,
    queue: OutboxQueue = Depends(get_outbox_queue),
):
    """
    Manual drain for operations/debugging. Competes with the background
    dispatcher for the same events; each event is claimed by exactly one of them.
    """
    limit = body.limit if body else None
    drained = await queue.drain_batch(limit)
    log.info(f"Manual outbox drain processed {len(drained)} event(s)")
    return ok(ConsumeOutboxResponse(processed_count=len(drained), processed=[e.id for e in drained]))
