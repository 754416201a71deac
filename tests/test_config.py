from noticias.core import config
from noticias.core.config import Settings


def test_database_url_is_assembled_from_postgres_settings(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)

    settings = Settings(
        _env_file=None,
        POSTGRES_SERVER="db",
        POSTGRES_USER="noticias",
        POSTGRES_PASSWORD="secreto",
        POSTGRES_DB="noticias_pachuca",
    )

    assert settings.DATABASE_URL == "postgresql://noticias:secreto@db:5432/noticias_pachuca"


def test_explicit_database_url_wins(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///./local.db")

    assert Settings(_env_file=None).DATABASE_URL == "sqlite:///./local.db"


def test_cors_origins_accept_comma_separated_string():
    settings = Settings(_env_file=None, BACKEND_CORS_ORIGINS="http://a.test, http://b.test")

    assert settings.BACKEND_CORS_ORIGINS == ["http://a.test", "http://b.test"]


def test_cors_origins_from_environment(monkeypatch):
    monkeypatch.setenv("BACKEND_CORS_ORIGINS", "http://a.test, http://b.test")
    assert Settings(_env_file=None).BACKEND_CORS_ORIGINS == ["http://a.test", "http://b.test"]

    monkeypatch.setenv("BACKEND_CORS_ORIGINS", '["http://c.test"]')
    assert Settings(_env_file=None).BACKEND_CORS_ORIGINS == ["http://c.test"]


def test_defaults(monkeypatch):
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    settings = Settings(_env_file=None)

    assert settings.CONFIRMATION_TOKEN_TTL_HOURS == 24
    assert settings.CATEGORY_CACHE_TTL_SECONDS == 300
    assert settings.BULLETIN_TIMEZONE == "America/Mexico_City"
    assert settings.PROTOCOL == "http"
    assert settings.EMAIL_API.get_secret_value() == ""


def test_secrets_are_skipped_without_gcp_project(monkeypatch):
    monkeypatch.delenv("GOOGLE_CLOUD_PROJECT", raising=False)

    assert config.get_secrets() is None


def test_production_settings_come_from_secret_manager(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setattr(config, "get_secrets", lambda: {"ADMIN_EMAIL": "editor@example.com", "EMAIL_API": "xkeysib"})

    settings = config.get_settings()

    assert settings.ADMIN_EMAIL == "editor@example.com"
    assert settings.EMAIL_API.get_secret_value() == "xkeysib"
    assert settings.PROTOCOL == "https"
