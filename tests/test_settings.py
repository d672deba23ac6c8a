from tiny_inventory.settings import Settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.port == 3001
    assert settings.rate_limit_requests == 100
    assert settings.rate_limit_window_seconds == 60
    assert not settings.is_production


def test_async_database_url_rewrites_plain_postgres():
    settings = Settings(_env_file=None, database_url="postgres://u:p@db:5432/inv")
    assert settings.async_database_url == "postgresql+asyncpg://u:p@db:5432/inv"

    settings = Settings(_env_file=None, database_url="postgresql://u:p@db/inv")
    assert settings.async_database_url == "postgresql+asyncpg://u:p@db/inv"

    settings = Settings(_env_file=None, database_url="sqlite+aiosqlite://")
    assert settings.async_database_url == "sqlite+aiosqlite://"


def test_cors_origins_accepts_comma_separated(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, http://localhost:3000")
    settings = Settings(_env_file=None)
    assert settings.cors_origins == ["https://a.example", "http://localhost:3000"]


def test_cors_origins_accepts_json_array(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", '["https://a.example"]')
    settings = Settings(_env_file=None)
    assert settings.cors_origins == ["https://a.example"]


def test_environment_alias(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    assert Settings(_env_file=None).is_production
