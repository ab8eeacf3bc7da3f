import asyncio
from datetime import timedelta
from unittest.mock import MagicMock, patch
import pytest
from tortoise import timezone
from tortoise.exceptions import DBConnectionError
from app.core.config import DEDUPE_WINDOW_MS
from app.core.exceptions import DuplicateSubmission, InvalidInput, StorageFailure
from app.models import OutboxEvent, OutboxStatus, Submission
from app.services.submission_service import (
    create_submission,
    list_submissions_by_business,
    normalize_paging,
)

BUCKET_START_MS = 1767225600000


@pytest.mark.asyncio
async def test_create_submission_persists_fields_and_queues_event(db, submission_fields):
    submission = await create_submission(**submission_fields, created_by="user-7", now_ms=BUCKET_START_MS)

    assert submission.id is not None
    stored = await Submission.get(id=submission.id)
    assert stored.business_id == "biz-1"
    assert stored.form_id == "form-1"
    assert stored.rating == 4
    assert stored.categories == [{"key": "service", "score": 5}]
    assert stored.ip == "10.0.0.1"
    assert stored.created_by == "user-7"
    assert stored.dedupe_key == f"form-1:device-1:{BUCKET_START_MS // DEDUPE_WINDOW_MS}"

    events = await OutboxEvent.all()
    assert len(events) == 1
    assert events[0].event_type == "FormSubmitted"
    assert events[0].status == OutboxStatus.PENDING
    assert events[0].attempts == 0
    assert events[0].payload["submission_id"] == str(submission.id)
    assert events[0].payload["rating"] == 4
    assert events[0].payload["created_at"]


@pytest.mark.asyncio
async def test_second_submission_in_same_window_is_rejected(db, submission_fields):
    await create_submission(**submission_fields, now_ms=BUCKET_START_MS)

    with pytest.raises(DuplicateSubmission):
        await create_submission(**submission_fields, now_ms=BUCKET_START_MS + DEDUPE_WINDOW_MS - 1)

    assert await Submission.all().count() == 1
    assert await OutboxEvent.all().count() == 1


@pytest.mark.asyncio
async def test_submissions_across_bucket_boundary_both_succeed(db, submission_fields):
    await create_submission(**submission_fields, now_ms=BUCKET_START_MS - 1)
    await create_submission(**submission_fields, now_ms=BUCKET_START_MS)

    assert await Submission.all().count() == 2
    assert await OutboxEvent.filter(status=OutboxStatus.PENDING).count() == 2


@pytest.mark.asyncio
async def test_distinct_submitters_share_a_window(db, submission_fields):
    await create_submission(**submission_fields, now_ms=BUCKET_START_MS)
    other = dict(submission_fields, device_id="device-2")
    await create_submission(**other, now_ms=BUCKET_START_MS)
    anonymous = dict(submission_fields, device_id=None, ip=None)
    created = await create_submission(**anonymous, now_ms=BUCKET_START_MS)

    assert created.dedupe_key.startswith("form-1:anonymous:")
    assert await Submission.all().count() == 3


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["business_id", "form_id", "rating"])
async def test_missing_required_field_is_invalid(db, submission_fields, missing):
    submission_fields[missing] = None

    with pytest.raises(InvalidInput):
        await create_submission(**submission_fields)

    assert await Submission.all().count() == 0
    assert await OutboxEvent.all().count() == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("rating", [0, 6, -1, True])
async def test_rating_outside_range_is_invalid(db, submission_fields, rating):
    submission_fields["rating"] = rating

    with pytest.raises(InvalidInput):
        await create_submission(**submission_fields)

    assert await Submission.all().count() == 0


@pytest.mark.asyncio
async def test_concurrent_duplicates_store_only_one(db, submission_fields):
    results = await asyncio.gather(
        *[create_submission(**submission_fields, now_ms=BUCKET_START_MS) for _ in range(5)],
        return_exceptions=True,
    )

    created = [r for r in results if isinstance(r, Submission)]
    rejected = [r for r in results if isinstance(r, DuplicateSubmission)]
    assert len(created) == 1
    assert len(rejected) == 4
    assert await Submission.all().count() == 1
    assert await OutboxEvent.all().count() == 1


@pytest.mark.asyncio
async def test_store_unavailable_raises_storage_failure(submission_fields):
    failing = MagicMock(side_effect=DBConnectionError("connection refused"))
    with patch("app.services.submission_service.in_transaction", failing):
        with pytest.raises(StorageFailure):
            await create_submission(**submission_fields)


@pytest.mark.asyncio
async def test_listing_pages_newest_first(db):
    base = timezone.now() - timedelta(days=1)
    for i in range(1, 26):
        await Submission.create(
            business_id="biz-page",
            form_id="form-1",
            rating=3,
            comment=f"#{i}",
            dedupe_key=f"form-1:dev-{i}:0",
            created_at=base + timedelta(minutes=i),
        )
    await Submission.create(business_id="other", form_id="form-1", rating=5, dedupe_key="form-1:x:0")

    result = await list_submissions_by_business("biz-page", page=2, limit=10)

    assert result["total"] == 25
    assert result["page"] == 2
    assert result["limit"] == 10
    assert [s.comment for s in result["items"]] == [f"#{i}" for i in range(15, 5, -1)]


@pytest.mark.asyncio
async def test_listing_unknown_business_is_empty(db):
    result = await list_submissions_by_business("nobody")
    assert result == {"items": [], "total": 0, "page": 1, "limit": 20}


@pytest.mark.parametrize(
    "page, limit, expected",
    [
        (None, None, (1, 20)),
        (0, 0, (1, 20)),
        (-3, 500, (1, 100)),
        (3, -5, (3, 1)),
        (2, 10, (2, 10)),
        ("3", "15", (3, 15)),
        ("abc", "lots", (1, 20)),
        ("", "", (1, 20)),
    ],
)
def test_normalize_paging(page, limit, expected):
    assert normalize_paging(page, limit) == expected


@pytest.mark.asyncio
async def test_listing_pages_are_stable_with_equal_timestamps(db):
    created_at = timezone.now() - timedelta(hours=1)
    for i in range(7):
        await Submission.create(
            business_id="biz-tie", form_id="form-1", rating=2,
            dedupe_key=f"form-1:tie-{i}:0", created_at=created_at,
        )

    seen = []
    for page in (1, 2, 3, 4):
        result = await list_submissions_by_business("biz-tie", page=page, limit=2)
        seen.extend(s.id for s in result["items"])

    assert len(seen) == 7
    assert len(set(seen)) == 7
    assert seen == sorted(seen, reverse=True)
