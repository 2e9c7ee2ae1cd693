from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ClockEventType


@dataclass(frozen=True)
class ClockEvent:
    """Entidade de domínio: registo de ponto (append-only)."""

    event_id: int
    user_id: int
    event_type: ClockEventType
    occurred_at: datetime
    report: Optional[str] = None
