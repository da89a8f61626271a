from taskboard.core.config import Settings


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./board.db")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("API_PORT", "8080")

    settings = Settings(_env_file=None)

    assert settings.database_url == "sqlite+aiosqlite:///./board.db"
    assert settings.log_level == "debug"
    assert settings.api_port == 8080
    assert settings.create_tables_on_startup is False
