from __future__ import annotations

import dataclasses
import threading
from collections import defaultdict
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Iterable, Optional

import pytest
from werkzeug.security import generate_password_hash

from ponto_system.clock.model import ClockEvent
from ponto_system.container import wire_container
from ponto_system.core.constants import STRICT_POLICY
from ponto_system.core.enums import ClockEventType, Role
from ponto_system.core.exceptions import UserNotFoundError
from ponto_system.users.department_model import Department
from ponto_system.users.model import User, UserSummary


class InMemoryUsers:
    def __init__(self, users: Iterable[User] = ()):
        self._by_id = {u.user_id: u for u in users}
        self.update_calls = 0

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(int(user_id))

    def list_all(self, *, dept_id=None):
        users = sorted(self._by_id.values(), key=lambda u: u.name)
        if dept_id is not None:
            users = [u for u in users if u.dept_id == dept_id]
        return [UserSummary(user_id=u.user_id, name=u.name, dept_id=u.dept_id) for u in users]

    def update_password_hash(self, user_id: int, password_hash: str) -> bool:
        self.update_calls += 1
        user = self._by_id.get(int(user_id))
        if not user or user.password_hash:
            return False
        self._by_id[user.user_id] = dataclasses.replace(user, password_hash=password_hash)
        return True

    def delete(self, user_id: int) -> None:
        self._by_id.pop(int(user_id), None)


class InMemoryDepartments:
    def __init__(self, departments: Iterable[Department] = ()):
        self._items = list(departments)

    def list_all(self):
        return sorted(self._items, key=lambda d: d.dept_name)


class InMemoryClockEvents:
    """Clock event store with one lock per user, like the row lock of the MySQL repo."""

    def __init__(self, users: InMemoryUsers):
        self._users = users
        self._events: list[ClockEvent] = []
        self._next_id = 0
        self._guard = threading.Lock()
        self._locks: dict[int, threading.Lock] = defaultdict(threading.Lock)
        self.create_calls = 0

    def all_events(self) -> list[ClockEvent]:
        return list(self._events)

    def list_in_range(self, user_id: int, start: datetime, end: datetime):
        items = [e for e in self._events if e.user_id == user_id and start <= e.occurred_at <= end]
        return sorted(items, key=lambda e: (e.occurred_at, e.event_id))

    def create_event(self, *, user_id, event_type, report, occurred_at) -> ClockEvent:
        with self._guard:
            self.create_calls += 1
            self._next_id += 1
            event = ClockEvent(
                event_id=self._next_id,
                user_id=int(user_id),
                event_type=event_type,
                occurred_at=occurred_at,
                report=report,
            )
            self._events.append(event)
            return event

    def add(self, user_id: int, event_type: ClockEventType, occurred_at: datetime, report=None) -> ClockEvent:
        return self.create_event(user_id=user_id, event_type=event_type, report=report, occurred_at=occurred_at)

    @contextmanager
    def locked_for_user(self, user_id: int):
        if self._users.get_by_id(user_id) is None:
            raise UserNotFoundError("Utilizador não encontrado.")
        with self._guard:
            lock = self._locks[int(user_id)]
        with lock:
            yield self


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 8, 30, 0)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture(scope="session")
def secret_hash() -> str:
    return generate_password_hash("secret1")


@pytest.fixture
def departments_repo() -> InMemoryDepartments:
    return InMemoryDepartments(
        [
            Department(dept_id=1, dept_name="Comercial"),
            Department(dept_id=2, dept_name="Administrativo"),
        ]
    )


@pytest.fixture
def users_repo(secret_hash) -> InMemoryUsers:
    return InMemoryUsers(
        [
            # u1: first access, no password yet
            User(user_id=1, name="Bruno Lima", role=Role.MEMBER, dept_id=1, password_hash=None),
            User(user_id=2, name="Ana Souza", role=Role.DIRECTOR, dept_id=2, password_hash=secret_hash),
            User(user_id=3, name="Carla Dias", role=Role.MEMBER, dept_id=1, password_hash=secret_hash),
        ]
    )


@pytest.fixture
def events_repo(users_repo) -> InMemoryClockEvents:
    return InMemoryClockEvents(users_repo)


@pytest.fixture
def policy():
    return STRICT_POLICY


@pytest.fixture
def container(users_repo, departments_repo, events_repo, clock, policy):
    return wire_container(
        users_repo=users_repo,
        departments_repo=departments_repo,
        clock_repo=events_repo,
        policy=policy,
        clock_service_kwargs={"clock": clock},
    )


@pytest.fixture
def app(container):
    from ponto_system.main import create_app

    return create_app(container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()
