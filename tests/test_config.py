from support_backend.database.config.config import Settings


def test_defaults(monkeypatch):
    for name in ("OPENAI_MODEL", "MAX_TOKENS", "MAX_CONVERSATION_HISTORY", "DATABASE_PATH", "ENVIRONMENT", "PORT"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.OPENAI_MODEL == "gpt-3.5-turbo"
    assert settings.MAX_TOKENS == 500
    assert settings.MAX_CONVERSATION_HISTORY == 20
    assert settings.DATABASE_PATH == "./data/chat.db"
    assert settings.PORT == 3000
    assert settings.is_production is False


def test_environment_variables_override_defaults(monkeypatch):
    monkeypatch.setenv("MAX_CONVERSATION_HISTORY", "6")
    monkeypatch.setenv("OPENAI_MODEL", "gpt-4o-mini")

    settings = Settings(_env_file=None)

    assert settings.MAX_CONVERSATION_HISTORY == 6
    assert settings.OPENAI_MODEL == "gpt-4o-mini"


def test_cors_origins_in_development():
    settings = Settings(_env_file=None, ENVIRONMENT="development")
    assert "http://localhost:5173" in settings.cors_origins


def test_cors_origins_in_production():
    settings = Settings(_env_file=None, ENVIRONMENT="production", FRONTEND_URL="https://chat.techstyle.com")
    assert settings.is_production is True
    assert settings.cors_origins == ["https://chat.techstyle.com"]

    assert Settings(_env_file=None, ENVIRONMENT="production", FRONTEND_URL=None).cors_origins == []
