from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent
if str(REPO_ROOT / "src" / "ponto_system") not in sys.path:
    sys.path.insert(0, str(REPO_ROOT / "src" / "ponto_system"))

from ponto_system.main import create_app

app = create_app()


if __name__ == "__main__":
    app.run(debug=bool(app.config.get("DEBUG", False)))
