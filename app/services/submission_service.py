import logging
from typing import Any, Dict, List, Optional, Tuple, Union
from tortoise.exceptions import BaseORMException, IntegrityError
from tortoise.transactions import in_transaction
from app.core.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from app.core.exceptions import DuplicateSubmission, InvalidInput, StorageFailure
from app.events.outbox_utility import create_outbox_event
from app.models.submission import Submission
from app.services.dedupe import build_dedupe_key

log = logging.getLogger(__name__)

FORM_SUBMITTED = "FormSubmitted"
DUPLICATE_MESSAGE = "Duplicate submission detected. Please try later."


def _validate(business_id, form_id, rating) -> None:
    if not business_id or not form_id or not rating:
        raise InvalidInput("business_id, form_id, rating are required")
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise InvalidInput("rating must be an integer between 1 and 5")


async def create_submission(
    business_id: Optional[str],
    form_id: Optional[str],
    rating: Optional[int],
    franchise_id: Optional[str] = None,
    categories: Optional[List[Dict[str, Any]]] = None,
    comment: Optional[str] = None,
    staff_id: Optional[str] = None,
    device_id: Optional[str] = None,
    ip: Optional[str] = None,
    created_by: Optional[str] = None,
    now_ms: Optional[int] = None,
) -> Submission:
    """
    Creates a Submission and its 'FormSubmitted' OutboxEvent atomically.

    Rejects the request with DuplicateSubmission when a submission already
    exists for the same form and submitter within the current 15 minute
    window. The explicit lookup rejects the common case early; the unique
    constraint on dedupe_key rejects concurrent requests that both passed it.
    """
    _validate(business_id, form_id, rating)
    dedupe_key = build_dedupe_key(form_id, device_id=device_id, ip=ip, now_ms=now_ms)

    try:
        async with in_transaction() as conn:
            if await Submission.filter(dedupe_key=dedupe_key).using_db(conn).exists():
                raise DuplicateSubmission(DUPLICATE_MESSAGE)

            submission = await Submission.create(
                business_id=business_id,
                franchise_id=franchise_id,
                form_id=form_id,
                rating=rating,
                categories=categories or [],
                comment=comment,
                staff_id=staff_id,
                device_id=device_id,
                ip=ip,
                dedupe_key=dedupe_key,
                created_by=created_by,
                using_db=conn
            )

            # Same transaction: the event exists if and only if the submission does
            await create_outbox_event(
                event_type=FORM_SUBMITTED,
                payload={
                    "submission_id": str(submission.id),
                    "business_id": business_id,
                    "franchise_id": franchise_id,
                    "form_id": form_id,
                    "rating": rating,
                    "created_at": submission.created_at.isoformat(),
                },
                conn=conn
            )
    except IntegrityError as e:
        log.info(f"Dedupe key {dedupe_key} claimed concurrently: {e}")
        raise DuplicateSubmission(DUPLICATE_MESSAGE) from e
    except (BaseORMException, OSError) as e:
        log.error(f"Failed to create submission for form {form_id}: {e}")
        raise StorageFailure("Failed to store submission") from e

    log.info(f"Submission {submission.id} created for business {business_id}, form {form_id}.")
    return submission


def _to_int(value: Union[int, str, None]) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def normalize_paging(page: Union[int, str, None], limit: Union[int, str, None]) -> Tuple[int, int]:
    """
    page >= 1 (default 1); 1 <= limit <= 100 (default 20).
    Unparseable query values fall back to the defaults.
    """
    page = max(_to_int(page) or 1, 1)
    limit = max(min(_to_int(limit) or DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT), 1)
    return page, limit


async def list_submissions_by_business(
    business_id: str,
    page: Union[int, str, None] = None,
    limit: Union[int, str, None] = None,
) -> Dict[str, Any]:
    """Returns one page of a business's submissions, newest first, with the total count."""
    page, limit = normalize_paging(page, limit)
    query = Submission.filter(business_id=business_id)
    try:
        items = await query.order_by("-created_at", "-id").offset((page - 1) * limit).limit(limit)
        total = await query.count()
    except (BaseORMException, OSError) as e:
        log.error(f"Failed to list submissions for business {business_id}: {e}")
        raise StorageFailure("Failed to list submissions") from e

    return {"items": items, "total": total, "page": page, "limit": limit}
