from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User, UserSummary
from .repository import UserRepository


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, name, role, dept_id, password_hash
                FROM users
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return User(
                user_id=int(row["user_id"]),
                name=row["name"],
                role=Role(row["role"]),
                dept_id=row.get("dept_id"),
                password_hash=row.get("password_hash") or None,
            )

    def list_all(self, *, dept_id: Optional[int] = None) -> Sequence[UserSummary]:
        sql = "SELECT user_id, name, dept_id FROM users"
        params: tuple = ()
        if dept_id is not None:
            sql += " WHERE dept_id=%s"
            params = (int(dept_id),)
        sql += " ORDER BY name"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            rows = fetchall(cur)
            return [
                UserSummary(user_id=int(r["user_id"]), name=r["name"], dept_id=r.get("dept_id"))
                for r in rows
            ]

    def update_password_hash(self, user_id: int, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET password_hash=%s WHERE user_id=%s AND password_hash IS NULL",
                (password_hash, int(user_id)),
            )
            return cur.rowcount > 0
