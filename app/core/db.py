import logging
from tortoise import Tortoise, connections
from app.core.config import STORE_URL

log = logging.getLogger(__name__)

# Define all models modules for the ORM
MODELS_MODULES = [
    "app.models.submission",
    "app.models.outbox",
]

async def init_db(db_url: str = STORE_URL):
    """Initializes the Tortoise ORM connection and generates schemas."""
    try:
        await Tortoise.init(
            db_url=db_url,
            modules={"models": MODELS_MODULES},
            # Lifespan task initializes; request handlers run in other tasks
            _enable_global_fallback=True,
        )
        # Generate the database schema (create tables and indexes)
        await Tortoise.generate_schemas()
        log.info("Connected to store and generated schemas.")
    except Exception:
        log.critical("Could not connect to store at %s", db_url, exc_info=True)
        # Re-raise to prevent the application from starting without a store
        raise

async def close_db():
    """Closes all database connections."""
    await Tortoise.close_connections()
    log.info("Store connections closed.")

async def is_db_ready() -> bool:
    """Returns True when the default connection answers a trivial query."""
    try:
        await connections.get("default").execute_query("SELECT 1")
    except Exception as e:
        log.warning(f"Readiness check failed: {e}")
        return False
    return True
