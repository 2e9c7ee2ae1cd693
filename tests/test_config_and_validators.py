from __future__ import annotations

from datetime import datetime, time

import pytest

from config import get_settings_module
from ponto_system.common.datetime_utils import day_bounds
from ponto_system.common.validators import require_int, validate_new_password
from ponto_system.core.constants import LENIENT_POLICY, STRICT_POLICY, policy_by_name
from ponto_system.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "env, expected",
    [
        ("production", "config.production"),
        ("prod", "config.production"),
        ("testing", "config.testing"),
        ("dev", "config.development"),
    ],
)
def test_settings_module_from_app_env(monkeypatch, env, expected):
    monkeypatch.setenv("APP_ENV", env)
    assert get_settings_module() == expected


def test_policies_by_name():
    assert policy_by_name("strict") is STRICT_POLICY
    assert policy_by_name(" Lenient ") is LENIENT_POLICY
    with pytest.raises(ValueError):
        policy_by_name("whatever")


def test_policy_values():
    assert (STRICT_POLICY.password_min_length, STRICT_POLICY.report_required_on_exit, STRICT_POLICY.report_min_length) == (6, True, 10)
    assert (LENIENT_POLICY.password_min_length, LENIENT_POLICY.report_required_on_exit) == (4, False)


def test_validate_new_password():
    assert validate_new_password("secret1", "secret1", min_len=6) == "secret1"
    with pytest.raises(ValidationError, match="pelo menos 6"):
        validate_new_password("abc", "abc", min_len=6)
    with pytest.raises(ValidationError, match="não coincidem"):
        validate_new_password("secret1", "secret", min_len=6)


@pytest.mark.parametrize("raw", [None, "", "abc", "1.5"])
def test_require_int_rejects(raw):
    with pytest.raises(ValidationError):
        require_int(raw, "Utilizador")


def test_day_bounds():
    start, end = day_bounds(datetime(2026, 3, 2, 15, 45))
    assert start == datetime(2026, 3, 2, 0, 0)
    assert end.time() == time(23, 59, 59, 999000)
    assert end.date() == start.date()
