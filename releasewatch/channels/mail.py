"""Email channel: Jinja2 templates delivered over SMTP."""

import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from pathlib import Path
from typing import List, Optional, Tuple

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape

from ..core.release import NotificationMessage
from .base import BaseChannel, ChannelDeliveryError

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"


def build_recipients(*candidates: Optional[str]) -> List[str]:
    """Keep non-empty addresses in the order given."""
    return [c.strip() for c in candidates if c and c.strip()]


def route_recipients(recipients: List[str], default_address: str) -> Tuple[str, List[str]]:
    """
    Split recipients into a To address and a Cc list.

    Args:
        recipients: Ordered, non-empty addresses.
        default_address: Used as To when there are no recipients.

    Returns:
        (to, cc). The first recipient is To, every other one is Cc.
    """
    if not recipients:
        return default_address, []
    return recipients[0], list(recipients[1:])


class EmailChannel(BaseChannel):
    """
    Send notifications by email.

    The body is rendered from ``<template>.txt`` and ``<template>.html``
    in the templates directory; the HTML part is optional.
    """

    def __init__(
        self,
        sender_email: str = "",
        sender_name: str = "Release Watch",
        customer_email: str = "",
        developer_email: str = "",
        template: str = "update_notify",
        smtp_host: str = "localhost",
        smtp_port: int = 25,
        smtp_username: str = "",
        smtp_password: str = "",
        use_tls: bool = False,
        timeout: float = 10.0,
        template_dir: Path = TEMPLATE_DIR,
        dry_run: bool = False,
    ):
        """
        Initialize the email channel.

        Args:
            sender_email: From address, also the fallback recipient.
            sender_name: Display name for the From header.
            customer_email: Optional primary recipient.
            developer_email: Optional secondary recipient.
            template: Template identifier (file name without extension).
            smtp_host: SMTP server host.
            smtp_port: SMTP server port.
            smtp_username: Login user; login is skipped if empty.
            smtp_password: Login password.
            use_tls: Issue STARTTLS before login.
            timeout: SMTP connection timeout in seconds.
            template_dir: Directory holding the templates.
            dry_run: Log instead of sending.
        """
        super().__init__(dry_run=dry_run)
        self.sender_email = sender_email
        self.sender_name = sender_name
        self.customer_email = customer_email
        self.developer_email = developer_email
        self.template = template
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_username = smtp_username
        self.smtp_password = smtp_password
        self.use_tls = use_tls
        self.timeout = timeout

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
        )

    @property
    def name(self) -> str:
        return "email"

    def is_configured(self) -> bool:
        return bool(self.sender_email and self.smtp_host)

    def recipients(self) -> Tuple[str, List[str]]:
        return route_recipients(
            build_recipients(self.customer_email, self.developer_email),
            self.sender_email,
        )

    def describe(self, message: NotificationMessage) -> str:
        to, cc = self.recipients()
        return f"to={to} cc={cc} subject={self._subject(message)!r}"

    def _subject(self, message: NotificationMessage) -> str:
        return message.subject or f"New release available: {message.latest}"

    def render(self, message: NotificationMessage) -> Tuple[str, Optional[str]]:
        """
        Render the plain-text and HTML bodies.

        Raises:
            ChannelDeliveryError: If the text template is missing.
        """
        try:
            text = self.jinja_env.get_template(f"{self.template}.txt").render(**message.email_vars)
        except TemplateNotFound as e:
            raise ChannelDeliveryError(f"Email template not found: {e}") from e

        try:
            html = self.jinja_env.get_template(f"{self.template}.html").render(**message.email_vars)
        except TemplateNotFound:
            html = None

        return text, html

    def build_message(self, message: NotificationMessage) -> EmailMessage:
        """Build the MIME message for a notification."""
        text, html = self.render(message)
        to, cc = self.recipients()

        mail = EmailMessage()
        mail["Subject"] = self._subject(message)
        mail["From"] = formataddr((self.sender_name, self.sender_email))
        mail["To"] = to
        if cc:
            mail["Cc"] = ", ".join(cc)
        mail.set_content(text)
        if html:
            mail.add_alternative(html, subtype="html")
        return mail

    def _deliver(self, message: NotificationMessage) -> None:
        mail = self.build_message(message)
        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.smtp_username:
                    server.login(self.smtp_username, self.smtp_password)
                server.send_message(mail)
        except (smtplib.SMTPException, OSError) as e:
            raise ChannelDeliveryError(f"SMTP delivery failed: {e}") from e

        self.log.debug(f"Email sent to {mail['To']} (cc: {mail.get('Cc', '-')})")
