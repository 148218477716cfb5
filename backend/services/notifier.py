"""Envoi des mails fournisseurs (Mailgun, SMTP, ou simple journalisation)."""
from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Protocol

import requests

from backend.app.core.config import Settings
from backend.app.db.models.core_types import NotifierBackend

logger = logging.getLogger(__name__)

MAILGUN_API_BASE = "https://api.mailgun.net/v3"


class NotificationError(RuntimeError):
    pass


class Notifier(Protocol):
    def send(self, to: str, subject: str, body: str) -> None:
        ...


class MailgunNotifier:
    def __init__(
        self,
        *,
        api_key: str | None,
        domain: str | None,
        from_email: str,
        timeout_seconds: int = 10,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.domain = domain
        self.from_email = from_email
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def send(self, to: str, subject: str, body: str) -> None:
        if not self.api_key or not self.domain:
            raise NotificationError("MAILGUN_API_KEY / MAILGUN_DOMAIN manquant")

        logger.info("Envoi de mail via Mailgun à %s (Sujet: %s)", to, subject)
        try:
            response = self.session.post(
                f"{MAILGUN_API_BASE}/{self.domain}/messages",
                auth=("api", self.api_key),
                data={
                    "from": self.from_email,
                    "to": to,
                    "subject": subject,
                    "text": body,
                },
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Erreur lors de l'envoi du mail via Mailgun à %s: %s", to, exc)
            raise NotificationError("Échec de l'envoi de mail via Mailgun") from exc

        logger.debug("Mailgun Response: %s", response.text)


class SmtpNotifier:
    def __init__(
        self,
        *,
        host: str | None,
        port: int = 587,
        username: str | None = None,
        password: str | None = None,
        from_email: str,
        use_tls: bool = True,
        use_ssl: bool = False,
        timeout_seconds: int = 10,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_email = from_email
        self.use_tls = use_tls
        self.use_ssl = use_ssl
        self.timeout_seconds = timeout_seconds

    def _build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.from_email
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)
        return message

    def _login_if_needed(self, server: smtplib.SMTP) -> None:
        if self.username and self.password:
            server.login(self.username, self.password)

    def send(self, to: str, subject: str, body: str) -> None:
        if not self.host:
            raise NotificationError("SMTP_HOST manquant")

        message = self._build_message(to, subject, body)
        logger.info("Envoi de mail via SMTP à %s (Sujet: %s)", to, subject)
        try:
            if self.use_ssl:
                with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout_seconds) as server:
                    self._login_if_needed(server)
                    server.send_message(message)
            else:
                with smtplib.SMTP(self.host, self.port, timeout=self.timeout_seconds) as server:
                    server.ehlo()
                    if self.use_tls:
                        server.starttls()
                        server.ehlo()
                    self._login_if_needed(server)
                    server.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Échec de l'envoi SMTP à %s: %s", to, exc)
            raise NotificationError("Échec de l'envoi SMTP") from exc


class LogNotifier:
    """Sink de développement : le mail est seulement journalisé."""

    def send(self, to: str, subject: str, body: str) -> None:
        logger.info("[EMAIL] dev sink to=%s subject=%s\n%s", to, subject, body)


def build_notifier(settings: Settings) -> Notifier:
    backend = settings.notifier_backend
    if backend == NotifierBackend.smtp:
        return SmtpNotifier(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            from_email=settings.mail_from,
            use_tls=settings.smtp_use_tls,
            use_ssl=settings.smtp_use_ssl,
            timeout_seconds=settings.mail_timeout_seconds,
        )
    if backend == NotifierBackend.log:
        return LogNotifier()
    return MailgunNotifier(
        api_key=settings.mailgun_api_key,
        domain=settings.mailgun_domain,
        from_email=settings.mail_from,
        timeout_seconds=settings.mail_timeout_seconds,
    )
