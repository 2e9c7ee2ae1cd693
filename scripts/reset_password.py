"""Credential reset: clears a user's password so the next login asks for a new one.

Usage: python scripts/reset_password.py <user_id>
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "ponto_system"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from ponto_system.database.bootstrap import clear_password


def main(argv: list[str]) -> int:
    if len(argv) != 1 or not argv[0].isdigit():
        print(__doc__.strip())
        return 2

    settings = importlib.import_module(get_settings_module())
    if not clear_password(dict(settings.DB_CONFIG), user_id=int(argv[0])):
        print(f"Utilizador {argv[0]} não encontrado (ou já sem senha).")
        return 1

    print(f"OK: senha do utilizador {argv[0]} removida; será pedida no próximo login.")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
