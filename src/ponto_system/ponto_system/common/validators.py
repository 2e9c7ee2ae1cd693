from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} deve ter pelo menos {min_len} caracteres.")
    return value


def require_int(value: Optional[str], field_name: str) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} inválido.") from None


def validate_new_password(new_password: str, confirmation: str, *, min_len: int) -> str:
    """Pre-store check for first-access passwords (length, then confirmation)."""
    require_min_length(new_password, "A senha", min_len)
    if new_password != confirmation:
        raise ValidationError("As senhas não coincidem.")
    return new_password
