import uuid
from typing import Generic, Optional, TypeVar
from pydantic import BaseModel, Field

DataT = TypeVar("DataT")


def _rid():
    return uuid.uuid4().hex


class SuccessResponse(BaseModel, Generic[DataT]):
    """
    Envelope for every store-backed endpoint. Parametrize with the payload
    schema (e.g. SuccessResponse[SubmissionResponse]) so OpenAPI documents it.
    """
    success: bool = True
    request_id: str = Field(default_factory=_rid)
    data: Optional[DataT] = None


def ok(data: BaseModel) -> SuccessResponse:
    """Wraps a response schema; the route's response_model re-validates `data`."""
    return SuccessResponse(data=data.model_dump())
