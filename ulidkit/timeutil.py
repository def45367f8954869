from __future__ import annotations

import secrets
import time
from datetime import datetime, timedelta, timezone


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def secure_random_bytes(n: int) -> bytes:
    return secrets.token_bytes(n)


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def ms_to_datetime(ms: int) -> datetime:
    # Raises OverflowError past year 9999, which 48-bit times can reach.
    return _EPOCH + timedelta(milliseconds=ms)


def ms_to_iso(ms: int) -> str:
    # ISO8601 with millisecond precision, Z suffix.
    return ms_to_datetime(ms).isoformat(timespec="milliseconds").replace("+00:00", "Z")
