from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Entidade de domínio: User.

    Nota: objeto de dados puro (sem código de acesso à BD).
    ``password_hash`` is None until the first-access password setup.
    """

    user_id: int
    name: str
    role: Role
    dept_id: Optional[int]
    password_hash: Optional[str] = None

    @property
    def needs_setup(self) -> bool:
        return not self.password_hash


@dataclass(frozen=True)
class UserSummary:
    """Login-screen read model: never carries the password hash."""

    user_id: int
    name: str
    dept_id: Optional[int]
