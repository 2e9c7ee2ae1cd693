from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Union

from ..common.datetime_utils import day_bounds, format_hour, now_local
from ..common.store_guard import store_guard
from ..core.constants import STRICT_POLICY, ClockPolicy
from ..core.enums import ClockEventType
from ..core.exceptions import OutOfSequenceError, ValidationError
from .model import ClockEvent
from .repository import ClockEventRepository

logger = logging.getLogger(__name__)


def next_event_type(events: Sequence[ClockEvent]) -> ClockEventType:
    """ENTRADA when there is nothing yet today or the last event was SAIDA, else SAIDA."""
    if events and events[-1].event_type == ClockEventType.ENTRADA:
        return ClockEventType.SAIDA
    return ClockEventType.ENTRADA


def parse_event_type(value: Union[str, ClockEventType, None]) -> ClockEventType:
    if isinstance(value, ClockEventType):
        return value
    try:
        return ClockEventType((value or "").strip().upper())
    except ValueError:
        raise ValidationError("Tipo de ponto inválido.") from None


@dataclass(frozen=True)
class ClockStatus:
    events: List[ClockEvent]
    next_type: ClockEventType


class ClockService:
    def __init__(
        self,
        events: ClockEventRepository,
        *,
        policy: ClockPolicy = STRICT_POLICY,
        clock: Callable[[], datetime] = now_local,
    ):
        self._events = events
        self._policy = policy
        self._clock = clock

    @property
    def policy(self) -> ClockPolicy:
        return self._policy

    def todays_events(self, user_id: int) -> List[ClockEvent]:
        start, end = day_bounds(self._clock())
        with store_guard("today's events"):
            events = self._events.list_in_range(int(user_id), start, end)
        return sorted(events, key=lambda e: (e.occurred_at, e.event_id))

    def status(self, user_id: int) -> ClockStatus:
        events = self.todays_events(user_id)
        return ClockStatus(events=events, next_type=next_event_type(events))

    def _check_report(self, event_type: ClockEventType, report: Optional[str]) -> Optional[str]:
        if event_type != ClockEventType.SAIDA:
            return None

        text = (report or "").strip()
        if self._policy.report_required_on_exit and len(text) < self._policy.report_min_length:
            raise ValidationError(
                f"Por favor, detalhe o seu relatório (mínimo {self._policy.report_min_length} caracteres)."
            )
        return text or None

    def record_event(
        self,
        user_id: int,
        claimed_type: Union[str, ClockEventType],
        report: Optional[str] = None,
    ) -> ClockEvent:
        claimed = parse_event_type(claimed_type)
        clean_report = self._check_report(claimed, report)

        with store_guard("clock event"):
            with self._events.locked_for_user(int(user_id)) as writer:
                now = self._clock()
                start, end = day_bounds(now)
                current = sorted(
                    writer.list_in_range(int(user_id), start, end),
                    key=lambda e: (e.occurred_at, e.event_id),
                )
                expected = next_event_type(current)
                if claimed != expected:
                    logger.info(
                        "out of sequence for user %s: claimed %s, expected %s",
                        user_id, claimed.value, expected.value,
                    )
                    raise OutOfSequenceError(
                        f"O próximo registo deve ser {expected.value}. Atualize a página e tente novamente."
                    )

                event = writer.create_event(
                    user_id=int(user_id),
                    event_type=expected,
                    report=clean_report,
                    occurred_at=now,
                )

        logger.info("user %s recorded %s at %s", user_id, event.event_type.value, event.occurred_at)
        return event

    @staticmethod
    def to_ui(event: ClockEvent) -> dict:
        return {
            "id": event.event_id,
            "tipo": event.event_type.value,
            "horario": event.occurred_at.isoformat(),
            "hora": format_hour(event.occurred_at),
            "relatorio": event.report,
        }
