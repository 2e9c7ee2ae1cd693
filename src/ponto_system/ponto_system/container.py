from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .clock.mysql_clock_repository import MySQLClockEventRepository
from .clock.repository import ClockEventRepository
from .clock.service import ClockService
from .core.constants import DEFAULT_SESSION_DAYS, STRICT_POLICY, ClockPolicy
from .database.connection import DBConfig, DatabaseConnection
from .users.department_repository import DepartmentRepository
from .users.mysql_department_repository import MySQLDepartmentRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import DirectoryService, SessionWorkflow
from .users.session_tokens import SessionTokenService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    departments_repo: DepartmentRepository
    clock_repo: ClockEventRepository

    session_tokens: SessionTokenService
    session_workflow: SessionWorkflow
    directory_service: DirectoryService
    clock_service: ClockService

    policy: ClockPolicy
    conn: Optional[DatabaseConnection] = None


def wire_container(
    *,
    users_repo: UserRepository,
    departments_repo: DepartmentRepository,
    clock_repo: ClockEventRepository,
    policy: ClockPolicy = STRICT_POLICY,
    session_days: int = DEFAULT_SESSION_DAYS,
    conn: Optional[DatabaseConnection] = None,
    clock_service_kwargs: Optional[dict] = None,
) -> Container:
    session_tokens = SessionTokenService(lifetime_days=session_days)
    session_workflow = SessionWorkflow(users_repo, session_tokens, policy=policy)
    directory_service = DirectoryService(users_repo, departments_repo)
    clock_service = ClockService(clock_repo, policy=policy, **(clock_service_kwargs or {}))

    return Container(
        users_repo=users_repo,
        departments_repo=departments_repo,
        clock_repo=clock_repo,
        session_tokens=session_tokens,
        session_workflow=session_workflow,
        directory_service=directory_service,
        clock_service=clock_service,
        policy=policy,
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    policy: ClockPolicy = STRICT_POLICY,
    session_days: int = DEFAULT_SESSION_DAYS,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return wire_container(
        users_repo=MySQLUserRepository(conn),
        departments_repo=MySQLDepartmentRepository(conn),
        clock_repo=MySQLClockEventRepository(conn),
        policy=policy,
        session_days=session_days,
        conn=conn,
    )
