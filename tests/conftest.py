import pytest
import pytest_asyncio
from tortoise import Tortoise
from app.core.db import MODELS_MODULES


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory store per test."""
    await Tortoise.init(db_url="sqlite://:memory:", modules={"models": MODELS_MODULES}, _enable_global_fallback=True)
    await Tortoise.generate_schemas()
    yield
    await Tortoise.close_connections()


@pytest.fixture
def submission_fields():
    return {
        "business_id": "biz-1",
        "form_id": "form-1",
        "rating": 4,
        "categories": [{"key": "service", "score": 5}],
        "comment": "Great visit",
        "device_id": "device-1",
        "ip": "10.0.0.1",
    }
