from fastapi import Request
from app.events.outbox_queue import OutboxQueue


def get_outbox_queue(request: Request) -> OutboxQueue:
    """Returns the queue built at startup; falls back to a stub-publishing queue."""
    queue = getattr(request.app.state, "outbox_queue", None)
    return queue if queue is not None else OutboxQueue()
