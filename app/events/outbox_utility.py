import logging
from typing import Dict, Any
from app.models.outbox import OutboxEvent, OutboxStatus

log = logging.getLogger(__name__)

async def create_outbox_event(
    event_type: str,
    payload: Dict[str, Any],
    conn: Any = None
) -> OutboxEvent:
    """
    Creates a new pending Outbox event record using the provided database connection (transaction).
    
    CRITICAL: Passing 'conn' ensures the event is created atomically with the business data.
    """
    event = await OutboxEvent.create(
        event_type=event_type,
        payload=payload,
        status=OutboxStatus.PENDING,
        attempts=0,
        using_db=conn
    )
    log.info(f"Queued event in outbox: {event_type} (ID: {event.id})")
    return event
