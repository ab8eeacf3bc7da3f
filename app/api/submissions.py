from typing import Optional
from fastapi import APIRouter, Header, Request, status
from app.schemas.response import SuccessResponse, ok
from app.schemas.submission import SubmissionPage, SubmissionRequest, SubmissionResponse
from app.services.submission_service import create_submission, list_submissions_by_business

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse[SubmissionResponse])
async def create_submission_endpoint(
    request: Request,
    body: SubmissionRequest,
    x_user_id: Optional[str] = Header(default=None),
):
    """
    Stores a form submission and queues a FormSubmitted event.
    Returns 429 when the same submitter already answered this form in the current 15 minute window.
    """
    submission = await create_submission(
        business_id=body.business_id,
        franchise_id=body.franchise_id,
        form_id=body.form_id,
        rating=body.rating,
        categories=[c.model_dump() for c in body.categories],
        comment=body.comment,
        staff_id=body.staff_id,
        device_id=body.device_id,
        ip=request.client.host if request.client else None,
        created_by=x_user_id,
    )
    return ok(SubmissionResponse.model_validate(submission))


@router.get("/by-business/{business_id}", response_model=SuccessResponse[SubmissionPage])
async def list_by_business_endpoint(business_id: str, page: Optional[str] = None, limit: Optional[str] = None):
    """Pages through a business's submissions, newest first. Bad page/limit values fall back to defaults."""
    result = await list_submissions_by_business(business_id, page=page, limit=limit)
    return ok(SubmissionPage(
        items=[SubmissionResponse.model_validate(s) for s in result["items"]],
        total=result["total"],
        page=result["page"],
        limit=result["limit"],
    ))
