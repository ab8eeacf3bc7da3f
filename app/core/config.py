import os

# Store Configuration
# Uses default credentials for local Docker Compose setup
STORE_URL = os.getenv("STORE_URL", "postgres://user:password@db:5432/submissions_db")

# Application Metadata
PROJECT_NAME = "Submissions Intake Service"
SERVICE_NAME = "submissions-service"
VERSION = "1.0.0"

PORT = int(os.getenv("PORT", 3005))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Outbox Dispatcher Configuration
DISPATCH_INTERVAL_MS = int(os.getenv("DISPATCH_INTERVAL_MS", 5000)) # Dispatcher tick period
DISPATCH_BATCH_SIZE = int(os.getenv("DISPATCH_BATCH_SIZE", 1)) # Events drained per tick

# Dedupe window: fixed 15 minute grid aligned to epoch time
DEDUPE_WINDOW_MS = 15 * 60 * 1000

# Listing / draining limits
DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100
DEFAULT_DRAIN_LIMIT = 10
MAX_DRAIN_LIMIT = 100
PENDING_LIST_LIMIT = 50
