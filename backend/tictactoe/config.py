"""Конфигурация приложения."""
import os
from functools import lru_cache


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except ValueError:
        return default


@lru_cache
def get_config():
    return type("Config", (), {
        "host": os.environ.get("HOST", "0.0.0.0"),
        "port": _int_env("PORT", 8080),
        "debug": os.environ.get("DEBUG", "0").lower() in ("1", "true", "yes"),
        "allowed_origins": os.environ.get("ALLOWED_ORIGINS", "*").split(","),
        # Первый ход можно обдумывать дольше, дальше лимит короче
        "first_move_timeout_seconds": _float_env("FIRST_MOVE_TIMEOUT_SECONDS", 120),
        "move_timeout_seconds": _float_env("MOVE_TIMEOUT_SECONDS", 30),
    })()
