from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import MutableMapping, Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_SESSION_DAYS

SESSION_USER_KEY = "auth_user_id"
SESSION_ISSUED_KEY = "auth_issued_at"


@dataclass(frozen=True)
class SessionToken:
    user_id: int
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class SessionTokenService:
    """Session token over a signed-cookie store (the Flask ``session``).

    The expiry is fixed at issuance: reading or re-saving the cookie never moves it,
    only a fresh login does.
    """

    def __init__(self, *, lifetime_days: int = DEFAULT_SESSION_DAYS):
        self._lifetime = timedelta(days=int(lifetime_days))

    @property
    def lifetime(self) -> timedelta:
        return self._lifetime

    def issue(self, store: MutableMapping, user_id: int, *, now: Optional[datetime] = None) -> SessionToken:
        now = now or now_local()
        self.invalidate(store)
        store[SESSION_USER_KEY] = int(user_id)
        store[SESSION_ISSUED_KEY] = now.isoformat()
        if hasattr(store, "permanent"):
            store.permanent = True  # type: ignore[attr-defined]
        return SessionToken(user_id=int(user_id), issued_at=now, expires_at=now + self._lifetime)

    def peek(self, store: MutableMapping) -> Optional[SessionToken]:
        raw_user = store.get(SESSION_USER_KEY)
        raw_issued = store.get(SESSION_ISSUED_KEY)
        if raw_user is None or not raw_issued:
            return None
        try:
            user_id = int(raw_user)
            issued_at = datetime.fromisoformat(str(raw_issued))
        except (TypeError, ValueError):
            return None
        return SessionToken(user_id=user_id, issued_at=issued_at, expires_at=issued_at + self._lifetime)

    def resolve(self, store: MutableMapping, *, now: Optional[datetime] = None) -> Optional[int]:
        token = self.peek(store)
        if token is None:
            if SESSION_USER_KEY in store or SESSION_ISSUED_KEY in store:
                # tampered or half-written token
                self.invalidate(store)
            return None
        if token.is_expired(now or now_local()):
            self.invalidate(store)
            return None
        return token.user_id

    def invalidate(self, store: MutableMapping) -> bool:
        """Drop the token. Returns False when there was nothing to drop."""
        had_token = SESSION_USER_KEY in store
        store.pop(SESSION_USER_KEY, None)
        store.pop(SESSION_ISSUED_KEY, None)
        return had_token
