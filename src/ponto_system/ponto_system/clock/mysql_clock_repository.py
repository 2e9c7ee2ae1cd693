from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional, Sequence

from ..core.enums import ClockEventType
from ..core.exceptions import UserNotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ClockEvent
from .repository import ClockEventRepository, ClockEventWriter

_SELECT_RANGE = """
    SELECT event_id, user_id, event_type, occurred_at, report
    FROM clock_events
    WHERE user_id=%s AND occurred_at BETWEEN %s AND %s
    ORDER BY occurred_at ASC, event_id ASC
"""


def _to_event(r: dict) -> ClockEvent:
    return ClockEvent(
        event_id=int(r["event_id"]),
        user_id=int(r["user_id"]),
        event_type=ClockEventType(r["event_type"]),
        occurred_at=r["occurred_at"],
        report=r.get("report"),
    )


class _MySQLClockWriter(ClockEventWriter):
    def __init__(self, cur):
        self._cur = cur

    def list_in_range(self, user_id: int, start: datetime, end: datetime) -> Sequence[ClockEvent]:
        # locking read: always the latest committed rows, whatever the isolation level
        self._cur.execute(_SELECT_RANGE + " LOCK IN SHARE MODE", (int(user_id), start, end))
        return [_to_event(r) for r in fetchall(self._cur)]

    def create_event(
        self,
        *,
        user_id: int,
        event_type: ClockEventType,
        report: Optional[str],
        occurred_at: datetime,
    ) -> ClockEvent:
        self._cur.execute(
            """
            INSERT INTO clock_events(user_id, event_type, occurred_at, report)
            VALUES(%s,%s,%s,%s)
            """,
            (int(user_id), event_type.value, occurred_at, report),
        )
        return ClockEvent(
            event_id=int(self._cur.lastrowid),
            user_id=int(user_id),
            event_type=event_type,
            occurred_at=occurred_at,
            report=report,
        )


class MySQLClockEventRepository(ClockEventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_in_range(self, user_id: int, start: datetime, end: datetime) -> Sequence[ClockEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_RANGE, (int(user_id), start, end))
            return [_to_event(r) for r in fetchall(cur)]

    @contextmanager
    def locked_for_user(self, user_id: int) -> Iterator[ClockEventWriter]:
        with db_cursor(self._conn_factory) as (_, cur):
            # Row lock on the user: a concurrent submission for the same user waits
            # here until this transaction commits, then reads the new event.
            cur.execute("SELECT user_id FROM users WHERE user_id=%s FOR UPDATE", (int(user_id),))
            if not fetchone(cur):
                raise UserNotFoundError("Utilizador não encontrado.")
            yield _MySQLClockWriter(cur)
