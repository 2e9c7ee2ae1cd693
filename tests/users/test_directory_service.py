from __future__ import annotations

import pytest

from ponto_system.core.exceptions import StoreUnavailableError
from ponto_system.users.service import DirectoryService


def test_initial_data_is_sorted_and_has_no_hashes(users_repo, departments_repo):
    data = DirectoryService(users_repo, departments_repo).initial_data()

    assert [d.dept_name for d in data.departments] == ["Administrativo", "Comercial"]
    assert [u.name for u in data.users] == ["Ana Souza", "Bruno Lima", "Carla Dias"]
    assert all(not hasattr(u, "password_hash") for u in data.users)


def test_users_in_department(users_repo, departments_repo):
    users = DirectoryService(users_repo, departments_repo).users_in_department(1)
    assert [u.user_id for u in users] == [1, 3]


def test_initial_data_store_failure(users_repo):
    class BrokenDepartments:
        def list_all(self):
            raise StoreUnavailableError("Access denied for user 'root'@'localhost'")

    with pytest.raises(StoreUnavailableError, match="Erro ao conectar ao banco de dados."):
        DirectoryService(users_repo, BrokenDepartments()).initial_data()
