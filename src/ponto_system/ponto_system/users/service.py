from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import MutableMapping, Optional, Sequence, Union

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.store_guard import store_guard
from ..common.validators import validate_new_password
from ..core.constants import STRICT_POLICY, ClockPolicy
from ..core.exceptions import InvalidCredentialsError, UserNotFoundError, ValidationError
from .department_model import Department
from .department_repository import DepartmentRepository
from .model import User, UserSummary
from .repository import UserRepository
from .session_tokens import SessionToken, SessionTokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Authenticated:
    """Login or password setup succeeded; the caller opens a session."""

    user_id: int
    name: str


@dataclass(frozen=True)
class NeedsSetup:
    """User has no password yet; the caller shows the password-setup screen."""

    user_id: int
    name: str


LoginOutcome = Union[Authenticated, NeedsSetup]


class SessionWorkflow:
    """Use case: LOGIN -> (SETUP_PASSWORD) -> ACTIVE, and back to LOGIN on logout.

    Stateless between calls: which screen applies is decided from the credential
    store on every call, the session itself lives in the token store.
    """

    def __init__(
        self,
        users: UserRepository,
        tokens: SessionTokenService,
        *,
        policy: ClockPolicy = STRICT_POLICY,
    ):
        self._users = users
        self._tokens = tokens
        self._policy = policy

    @property
    def policy(self) -> ClockPolicy:
        return self._policy

    def _get_user(self, user_id: int, action: str) -> User:
        with store_guard(action):
            user = self._users.get_by_id(int(user_id))
        if not user:
            raise UserNotFoundError("Utilizador não encontrado.")
        return user

    @staticmethod
    def _verify(password_hash: str, supplied: str) -> bool:
        try:
            return check_password_hash(password_hash, supplied)
        except ValueError:
            # unknown hash method, e.g. a hand-edited row
            logger.warning("unreadable password hash, treating as mismatch")
            return False

    def begin_login(self, user_id: int, supplied_password: Optional[str]) -> LoginOutcome:
        user = self._get_user(user_id, "login")

        if user.needs_setup:
            logger.info("user %s needs password setup", user.user_id)
            return NeedsSetup(user_id=user.user_id, name=user.name)

        if not self._verify(user.password_hash or "", supplied_password or ""):
            logger.info("invalid password for user %s", user.user_id)
            raise InvalidCredentialsError("Senha incorreta.")

        logger.info("user %s authenticated", user.user_id)
        return Authenticated(user_id=user.user_id, name=user.name)

    def complete_setup(self, user_id: int, new_password: str, confirmation: str) -> Authenticated:
        validate_new_password(new_password, confirmation, min_len=self._policy.password_min_length)

        user = self._get_user(user_id, "password setup")
        if not user.needs_setup:
            raise ValidationError("A senha deste utilizador já foi configurada.")

        password_hash = generate_password_hash(new_password)
        with store_guard("password setup"):
            updated = self._users.update_password_hash(user.user_id, password_hash)

        if not updated:
            # deleted (raises) or set up concurrently since the read above
            self._get_user(user_id, "password setup")
            raise ValidationError("A senha deste utilizador já foi configurada.")

        logger.info("user %s completed password setup", user.user_id)
        return Authenticated(user_id=user.user_id, name=user.name)

    def start_session(self, store: MutableMapping, outcome: Authenticated) -> SessionToken:
        return self._tokens.issue(store, outcome.user_id)

    def end_session(self, store: MutableMapping) -> None:
        if self._tokens.invalidate(store):
            logger.info("session ended")

    def current_user(self, store: MutableMapping) -> Optional[User]:
        """User behind the session token, only if it still exists and has a password."""
        user_id = self._tokens.resolve(store)
        if user_id is None:
            return None

        with store_guard("session lookup"):
            user = self._users.get_by_id(user_id)
        if not user or user.needs_setup:
            self._tokens.invalidate(store)
            return None
        return user


@dataclass(frozen=True)
class InitialData:
    departments: Sequence[Department]
    users: Sequence[UserSummary]


class DirectoryService:
    """Use case: department and user lists for the login screen."""

    def __init__(self, users: UserRepository, departments: DepartmentRepository):
        self._users = users
        self._departments = departments

    def initial_data(self) -> InitialData:
        with store_guard("initial data"):
            departments = list(self._departments.list_all())
            users = list(self._users.list_all())
        return InitialData(departments=departments, users=users)

    def users_in_department(self, dept_id: int) -> Sequence[UserSummary]:
        with store_guard("department users"):
            return list(self._users.list_all(dept_id=int(dept_id)))
