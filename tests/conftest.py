import email
import email.header
import smtplib

import mongomock
import pytest
from fastapi.testclient import TestClient

import database
import mailer
from config import get_settings


@pytest.fixture(autouse=True)
def settings_env(monkeypatch):
    monkeypatch.setenv("MONGO_URL", "mongodb://localhost:27017")
    monkeypatch.setenv("DATABASE_NAME", "forms_test")
    monkeypatch.setenv("EMAIL_HOST", "smtp.test")
    monkeypatch.setenv("EMAIL_PORT", "465")
    monkeypatch.setenv("EMAIL_SECURE", "true")
    monkeypatch.setenv("EMAIL_USER", "admin@cloudmasa.test")
    monkeypatch.setenv("EMAIL_PASS", "secret")
    monkeypatch.setenv("CORS_ORIGINS", "*")
    monkeypatch.delenv("ADMIN_EMAIL", raising=False)
    monkeypatch.delenv("BRAND_NAME", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def mongo(monkeypatch, settings_env):
    monkeypatch.setattr(database, "MongoClient", mongomock.MongoClient)
    database.reset_connection()
    yield database.ensure_connected()
    database.reset_connection()


class Outbox:
    def __init__(self):
        self.messages = []
        self.fail_to = set()
        self.connections = []

    def recipients(self):
        return [m["to"] for m in self.messages]

    def to(self, address):
        return [m for m in self.messages if m["to"] == address]


@pytest.fixture(autouse=True)
def outbox(monkeypatch):
    box = Outbox()

    class FakeSMTP:
        def __init__(self, host, port, timeout=None):
            self.host = host
            self.port = port
            self.starttls_called = False
            self.login_args = None
            box.connections.append(self)

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def starttls(self):
            self.starttls_called = True

        def login(self, user, password):
            self.login_args = (user, password)

        def sendmail(self, from_addr, to_addrs, msg):
            for address in to_addrs:
                if address in box.fail_to:
                    raise smtplib.SMTPRecipientsRefused({address: (550, b"rejected")})
            parsed = email.message_from_string(msg)
            html = parsed.get_payload()[0].get_payload(decode=True).decode("utf-8")
            box.messages.append({
                "from": from_addr,
                "to": to_addrs[0],
                "subject": str(email.header.make_header(email.header.decode_header(parsed["Subject"]))),
                "html": html,
            })

    monkeypatch.setattr(mailer.smtplib, "SMTP_SSL", FakeSMTP)
    monkeypatch.setattr(mailer.smtplib, "SMTP", FakeSMTP)
    return box


@pytest.fixture
def client():
    from main import app

    with TestClient(app) as c:
        yield c
