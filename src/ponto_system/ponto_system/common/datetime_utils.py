from __future__ import annotations

from datetime import datetime, time
from typing import Optional, Tuple

DAY_START = time(0, 0, 0, 0)
DAY_END = time(23, 59, 59, 999000)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def day_bounds(moment: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Return [00:00:00.000, 23:59:59.999] of the local calendar day of ``moment``."""
    moment = moment or now_local()
    today = moment.date()
    return datetime.combine(today, DAY_START), datetime.combine(today, DAY_END)


def format_hour(value: datetime) -> str:
    return value.strftime("%H:%M:%S")
