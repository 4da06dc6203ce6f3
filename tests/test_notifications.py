"""Order confirmation notifications."""

from types import SimpleNamespace

from shop.core.config import Settings
from shop.services import notifications
from shop.services.notifications import EmailNotifier, LogNotifier, build_notifier


def _order(email="buyer@example.com"):
    return SimpleNamespace(id=7, user_id=3, user=SimpleNamespace(email=email))


def _settings(**overrides):
    config = Settings()
    for key, value in overrides.items():
        setattr(config, key, value)
    return config


class FakeSMTP:
    sent = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.logged_in = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, user, password):
        self.logged_in = (user, password)

    def send_message(self, message):
        FakeSMTP.sent.append(message)


def test_build_notifier_follows_config():
    assert isinstance(build_notifier(_settings(MAIL_ENABLED=False)), LogNotifier)
    assert isinstance(build_notifier(_settings(MAIL_ENABLED=True)), EmailNotifier)


def test_email_message(monkeypatch):
    FakeSMTP.sent = []
    monkeypatch.setattr(notifications.smtplib, "SMTP", FakeSMTP)
    notifier = EmailNotifier(_settings(MAIL_FROM="shop@example.com", SMTP_USER=None))

    notifier.order_placed(_order())

    assert len(FakeSMTP.sent) == 1
    message = FakeSMTP.sent[0]
    assert message["To"] == "buyer@example.com"
    assert "shop@example.com" in message["From"]
    assert "#7" in message.get_content()


def test_user_without_email_is_skipped(monkeypatch):
    FakeSMTP.sent = []
    monkeypatch.setattr(notifications.smtplib, "SMTP", FakeSMTP)

    EmailNotifier(_settings()).order_placed(_order(email=None))

    assert FakeSMTP.sent == []


def test_log_notifier(caplog):
    with caplog.at_level("INFO", logger="shop.services.notifications"):
        LogNotifier().order_placed(_order())
    assert "Order 7" in caplog.text
