"""Exemplo: usar a camada de serviços sem passar pelo Flask.

Controllers são uma camada fina; as regras (login, alternância ENTRADA/SAIDA) vivem nos serviços.
"""

import importlib

from config import get_settings_module

from ponto_system.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    status = container.clock_service.status(user_id=1)
    print("próximo:", status.next_type.value)
    for event in status.events:
        print(container.clock_service.to_ui(event))


if __name__ == "__main__":
    main()
