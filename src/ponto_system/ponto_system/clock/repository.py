from __future__ import annotations

from datetime import datetime
from typing import ContextManager, Optional, Protocol, Sequence

from ..core.enums import ClockEventType
from .model import ClockEvent


class ClockEventWriter(Protocol):
    """Reads and appends inside one transaction that holds the user's lock."""

    def list_in_range(self, user_id: int, start: datetime, end: datetime) -> Sequence[ClockEvent]:
        raise NotImplementedError

    def create_event(
        self,
        *,
        user_id: int,
        event_type: ClockEventType,
        report: Optional[str],
        occurred_at: datetime,
    ) -> ClockEvent:
        raise NotImplementedError


class ClockEventRepository(Protocol):
    def list_in_range(self, user_id: int, start: datetime, end: datetime) -> Sequence[ClockEvent]:
        """Events with start <= occurred_at <= end, ascending by occurred_at."""

        raise NotImplementedError

    def locked_for_user(self, user_id: int) -> ContextManager[ClockEventWriter]:
        """Serialize writers per user.

        Raises UserNotFoundError when the user does not exist. Everything done
        through the yielded writer commits together on exit.
        """

        raise NotImplementedError
