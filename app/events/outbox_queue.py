import logging
from typing import Any, Awaitable, Callable, List, Optional
from tortoise import timezone
from tortoise.expressions import F
from tortoise.transactions import in_transaction
from app.core.config import DEFAULT_DRAIN_LIMIT, MAX_DRAIN_LIMIT, PENDING_LIST_LIMIT
from app.models.outbox import OutboxEvent, OutboxStatus

log = logging.getLogger(__name__)

Publisher = Callable[[OutboxEvent], Awaitable[Any]]


async def stub_publish(event: OutboxEvent):
    """
    Routes an OutboxEvent to its (simulated) message bus topic.
    Nothing leaves the process; a real broker client would publish here.
    """
    if event.event_type == "FormSubmitted":
        payload = event.payload or {}
        log.info(
            f"Dispatched event (stub): {event.event_type} (ID: {event.id}) "
            f"submission={payload.get('submission_id')} business={payload.get('business_id')}"
        )
    else:
        log.warning(f"No topic configured for event type: {event.event_type} (ID: {event.id})")


class OutboxQueue:
    """
    Pending-event queue over the submission_outbox collection.

    Claims are conditional updates keyed on (id, status='pending'), so any
    number of concurrent drainers (the background dispatcher and the manual
    drain endpoint) never claim the same event twice.
    """

    def __init__(self, publisher: Optional[Publisher] = None):
        self._publisher = publisher or stub_publish

    async def _oldest_pending(self) -> Optional[OutboxEvent]:
        return await OutboxEvent.filter(status=OutboxStatus.PENDING).order_by("created_at", "id").first()

    async def drain_one(self) -> Optional[OutboxEvent]:
        """
        Claims the oldest pending event, publishes it and returns it in its final state.
        Returns None when nothing is pending.
        """
        while True:
            candidate = await self._oldest_pending()
            if candidate is None:
                return None

            async with in_transaction() as conn:
                claimed = await OutboxEvent.filter(
                    id=candidate.id, status=OutboxStatus.PENDING
                ).using_db(conn).update(
                    status=OutboxStatus.SENT, attempts=F("attempts") + 1, updated_at=timezone.now()
                )

                if claimed:
                    try:
                        await self._publisher(candidate)
                    except Exception as e:
                        # Still inside the claim transaction: pending -> failed, never sent -> failed
                        log.error(f"Failed to dispatch {candidate.event_type} (ID: {candidate.id}): {e}")
                        await OutboxEvent.filter(id=candidate.id).using_db(conn).update(
                            status=OutboxStatus.FAILED,
                            last_error=str(e) or type(e).__name__,
                            updated_at=timezone.now(),
                        )

            if claimed:
                return await OutboxEvent.get(id=candidate.id)
            log.debug(f"Event {candidate.id} claimed by another drainer, retrying.")

    async def drain_batch(self, limit: Optional[int] = None) -> List[OutboxEvent]:
        """Drains up to `limit` events (default 10, max 100), stopping at the first empty claim."""
        limit = max(min(limit or DEFAULT_DRAIN_LIMIT, MAX_DRAIN_LIMIT), 1)
        drained = []
        for _ in range(limit):
            event = await self.drain_one()
            if event is None:
                break
            drained.append(event)
        return drained

    async def list_pending(self, limit: int = PENDING_LIST_LIMIT) -> List[OutboxEvent]:
        return await OutboxEvent.filter(status=OutboxStatus.PENDING).order_by("created_at", "id").limit(limit)
