from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Cargo do utilizador."""

    MEMBER = "MEMBRO"
    DIRECTOR = "DIRETOR"


class ClockEventType(str, Enum):
    """Tipo de registo de ponto. Alternates ENTRADA, SAIDA, ENTRADA, ..."""

    ENTRADA = "ENTRADA"
    SAIDA = "SAIDA"
