# shop/services/notifications.py
# Уведомления покупателю после оформления заказа: письмо по SMTP или запись в лог.
import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from typing import Protocol

from shop.core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

SUBJECT = "Your order has shipped - Mercurial's Shop"
BODY = (
    "Your order #{order_id} has shipped.\n"
    "To confirm receipt, reply to this email.\n"
    "Thank you for your purchase.\n"
)


class Notifier(Protocol):
    def order_placed(self, order) -> None: ...


class LogNotifier:
    """Пишет подтверждение заказа в лог вместо отправки письма."""

    def order_placed(self, order) -> None:
        email = order.user.email if order.user is not None else None
        logger.info(f"Order {order.id} confirmation for user {order.user_id} <{email or '-'}>")


class EmailNotifier:
    """Отправляет письмо-подтверждение через SMTP."""

    def __init__(self, config: Settings):
        self.config = config

    def build_message(self, order) -> EmailMessage | None:
        if order.user is None or not order.user.email:
            logger.warning(f"Order {order.id}: user has no email, confirmation not sent")
            return None
        message = EmailMessage()
        message["From"] = formataddr((self.config.MAIL_FROM_NAME, self.config.MAIL_FROM))
        message["To"] = order.user.email
        message["Subject"] = SUBJECT
        message.set_content(BODY.format(order_id=order.id))
        return message

    def order_placed(self, order) -> None:
        message = self.build_message(order)
        if message is None:
            return
        with smtplib.SMTP(self.config.SMTP_HOST, self.config.SMTP_PORT, timeout=10) as smtp:
            if self.config.SMTP_USE_TLS:
                smtp.starttls()
            if self.config.SMTP_USER:
                smtp.login(self.config.SMTP_USER, self.config.SMTP_PASSWORD or "")
            smtp.send_message(message)
        logger.info(f"Order {order.id} confirmation sent to {message['To']}")


def build_notifier(config: Settings = default_settings) -> Notifier:
    if config.MAIL_ENABLED:
        return EmailNotifier(config)
    return LogNotifier()
