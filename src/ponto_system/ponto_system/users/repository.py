from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import User, UserSummary


class UserRepository(Protocol):
    """Interface do repositório de User (credential store).

    Nota (DIP): a camada de serviço depende desta interface, não de uma BD concreta.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def list_all(self, *, dept_id: Optional[int] = None) -> Sequence[UserSummary]:
        raise NotImplementedError

    def update_password_hash(self, user_id: int, password_hash: str) -> bool:
        """Store the first password hash of a user that has none yet.

        Returns False when the user no longer exists or already has a hash.
        """

        raise NotImplementedError
