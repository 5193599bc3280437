#!/usr/bin/env python3
# main.py
"""
Точка входа сервиса хранения геоданных.
Загружает конфигурацию и запускает HTTP сервер (uvicorn).
"""

from __future__ import annotations

import sys

import uvicorn

from src.common.logger import get_logger, setup_logging
from src.config.loader import ConfigError, get_config_path, get_settings
from src.services.geo_webhook.app import create_app


def print_usage() -> None:
    """Выводит справку по использованию."""
    print(f"""
Использование: python main.py [-c PATH]

Параметры:
    -c, --config PATH    Путь к файлу конфигурации (JSON или YAML)
                         По умолчанию: $CONFIG_PATH или {get_config_path()}
    -h, --help           Показать эту справку

Примеры:
    python main.py
    python main.py -c config/config.example.yaml
    """)


def parse_args(argv: list[str]) -> str | None:
    """
    Разбирает аргументы командной строки.

    Returns:
        Путь к конфигурации или None (значение по умолчанию)
    """
    config_path = None
    args = iter(argv)
    for arg in args:
        if arg in ("-h", "--help"):
            print_usage()
            sys.exit(0)
        elif arg in ("-c", "--config"):
            config_path = next(args, None)
            if not config_path:
                print(f"Ошибка: для {arg} требуется путь к файлу")
                print_usage()
                sys.exit(1)
        elif arg.startswith("--config="):
            config_path = arg.split("=", 1)[1]
        else:
            print(f"Ошибка: неизвестный аргумент '{arg}'")
            print_usage()
            sys.exit(1)
    return config_path


def main(argv: list[str] | None = None) -> None:
    """Главная функция запуска."""
    config_path = parse_args(sys.argv[1:] if argv is None else argv)

    try:
        settings = get_settings(config_path)
    except ConfigError as e:
        setup_logging()
        get_logger().critical(f"Failed to load config: {e}")
        sys.exit(1)

    setup_logging(settings.logging)
    get_logger().info(
        f"{settings.system.PROJECT_NAME} v{settings.system.VERSION}: "
        f"server starting on {settings.server.SERVER_ADDRESS}:{settings.server.SERVER_PORT}"
    )

    uvicorn.run(
        create_app(settings),
        host=settings.server.SERVER_ADDRESS,
        port=settings.server.SERVER_PORT,
        log_level=settings.logging.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pass
