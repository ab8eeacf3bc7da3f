import uuid
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class CategoryScore(BaseModel):
    key: str
    score: float


class SubmissionRequest(BaseModel):
    """
    Body of POST /submissions. Presence of business_id, form_id and rating is
    checked by the service so a missing field is reported as invalid_input (400).
    """
    business_id: Optional[str] = None
    franchise_id: Optional[str] = None
    form_id: Optional[str] = None
    rating: Optional[int] = Field(None, description="Integer from 1 to 5.")
    categories: List[CategoryScore] = Field(default_factory=list)
    comment: Optional[str] = None
    staff_id: Optional[str] = None
    device_id: Optional[str] = None


class SubmissionResponse(BaseModel):
    """Schema for a stored submission."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    business_id: str
    franchise_id: Optional[str] = None
    form_id: str
    rating: int
    categories: List[CategoryScore] = Field(default_factory=list)
    comment: Optional[str] = None
    staff_id: Optional[str] = None
    device_id: Optional[str] = None
    ip: Optional[str] = None
    dedupe_key: str
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class SubmissionPage(BaseModel):
    items: List[SubmissionResponse]
    total: int
    page: int
    limit: int
