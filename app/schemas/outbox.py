import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict
from app.models.outbox import OutboxStatus


class OutboxEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    event_type: str
    payload: Dict[str, Any]
    status: OutboxStatus
    attempts: int
    last_error: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PendingEventsResponse(BaseModel):
    items: List[OutboxEventResponse]


class ConsumeOutboxRequest(BaseModel):
    limit: Optional[int] = None # Defaults to 10, capped at 100


class ConsumeOutboxResponse(BaseModel):
    processed_count: int
    processed: List[uuid.UUID]
