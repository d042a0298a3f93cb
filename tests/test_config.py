from config import Settings


def test_empty_ports_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("EMAIL_PORT", "")
    monkeypatch.setenv("PORT", "")

    settings = Settings.from_env()

    assert settings.email_port == 465
    assert settings.port == 5000


def test_cors_origins_are_split_and_trimmed(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "https://offerbunch.in, https://www.offerbunch.in,")

    settings = Settings.from_env()

    assert settings.cors_origins == ["https://offerbunch.in", "https://www.offerbunch.in"]


def test_admin_inbox_defaults_to_smtp_user(monkeypatch):
    settings = Settings.from_env()

    assert settings.admin_inbox == "admin@cloudmasa.test"
    assert settings.email_secure is True
