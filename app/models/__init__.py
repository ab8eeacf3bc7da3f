# app/models/__init__.py
from .outbox import OutboxEvent, OutboxStatus
from .submission import Submission

# Export all models
__all__ = [
    "OutboxEvent",
    "OutboxStatus",
    "Submission",
]
