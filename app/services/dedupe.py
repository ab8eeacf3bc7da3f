import time
from typing import Optional
from app.core.config import DEDUPE_WINDOW_MS


def current_time_ms() -> int:
    return int(time.time() * 1000)


def build_dedupe_key(
    form_id: str,
    device_id: Optional[str] = None,
    ip: Optional[str] = None,
    now_ms: Optional[int] = None,
) -> str:
    """
    Builds '{form_id}:{basis}:{bucket}' where basis is the device id, else the
    client ip, else 'anonymous', and bucket is the 15 minute epoch window.

    The window is a fixed grid, not a sliding one: two calls a few
    milliseconds apart on either side of a bucket boundary get different keys.
    """
    basis = device_id or ip or "anonymous"
    if now_ms is None:
        now_ms = current_time_ms()
    bucket = now_ms // DEDUPE_WINDOW_MS
    return f"{form_id}:{basis}:{bucket}"
