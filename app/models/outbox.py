from enum import Enum
from tortoise import fields, models
import uuid


class OutboxStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"      # Terminal
    FAILED = "failed"  # Terminal, last_error holds the publish failure


class OutboxEvent(models.Model):
    """
    Queued notification of a domain occurrence (e.g. 'FormSubmitted').
    Rows are never deleted and double as an audit log of dispatched events.
    """
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    event_type = fields.CharField(max_length=128)
    payload = fields.JSONField() # The actual event data
    status = fields.CharEnumField(OutboxStatus, default=OutboxStatus.PENDING)
    attempts = fields.IntField(default=0)
    last_error = fields.TextField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "submission_outbox"
        indexes = [
            ("status",),
            ("status", "created_at"),  # Oldest-pending lookup
        ]
