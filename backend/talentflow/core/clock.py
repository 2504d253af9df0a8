"""Time helpers."""

from datetime import datetime
from typing import Callable
import uuid

import pytz

UTC = pytz.UTC

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(tz=UTC)


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"
