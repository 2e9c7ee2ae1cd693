"""Constants and policy defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_SESSION_DAYS = 7

STRICT_PASSWORD_MIN_LENGTH = 6
LENIENT_PASSWORD_MIN_LENGTH = 4
STRICT_REPORT_MIN_LENGTH = 10

GENERIC_STORE_MESSAGE = "Erro ao conectar ao banco de dados."


@dataclass(frozen=True)
class ClockPolicy:
    """Password and shift-end report rules, decided once per deployment."""

    password_min_length: int
    report_required_on_exit: bool
    report_min_length: int = 0


STRICT_POLICY = ClockPolicy(
    password_min_length=STRICT_PASSWORD_MIN_LENGTH,
    report_required_on_exit=True,
    report_min_length=STRICT_REPORT_MIN_LENGTH,
)

LENIENT_POLICY = ClockPolicy(
    password_min_length=LENIENT_PASSWORD_MIN_LENGTH,
    report_required_on_exit=False,
)

POLICIES = {
    "strict": STRICT_POLICY,
    "lenient": LENIENT_POLICY,
}


def policy_by_name(name: str) -> ClockPolicy:
    try:
        return POLICIES[(name or "").strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown clock policy: {name!r} (expected one of {sorted(POLICIES)})") from None
