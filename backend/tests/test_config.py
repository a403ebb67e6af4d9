import pytest

from tictactoe.config import get_config


@pytest.fixture(autouse=True)
def fresh_config():
    get_config.cache_clear()
    yield
    get_config.cache_clear()


def test_defaults(monkeypatch):
    for name in ("PORT", "HOST", "DEBUG", "FIRST_MOVE_TIMEOUT_SECONDS", "MOVE_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    config = get_config()
    assert config.port == 8080
    assert config.host == "0.0.0.0"
    assert config.debug is False
    assert config.first_move_timeout_seconds == 120
    assert config.move_timeout_seconds == 30


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("MOVE_TIMEOUT_SECONDS", "12.5")
    config = get_config()
    assert config.port == 9000
    assert config.debug is True
    assert config.move_timeout_seconds == 12.5


def test_bad_numbers_fall_back(monkeypatch):
    monkeypatch.setenv("PORT", "eighty")
    monkeypatch.setenv("FIRST_MOVE_TIMEOUT_SECONDS", "soon")
    config = get_config()
    assert config.port == 8080
    assert config.first_move_timeout_seconds == 120
