"""
Email service for the Folklore Garden back office.
Sends payment links and password reset messages.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Optional

from folklore_admin.core.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    """SMTP email service"""

    def __init__(self, smtp_host: Optional[str] = None, smtp_port: int = 587):
        self.smtp_host = smtp_host or "localhost"
        self.smtp_port = smtp_port
        self.username = ""
        self.password = ""
        self.use_tls = True
        self.from_email = "info@folkloregarden.cz"
        self.from_name = "Folklore Garden"
        self.configured = False

    def configure(
        self,
        smtp_host: str,
        smtp_port: int,
        username: str,
        password: str,
        use_tls: bool = True,
        from_email: str = "info@folkloregarden.cz",
        from_name: str = "Folklore Garden",
    ) -> None:
        """Configure SMTP settings"""
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.from_email = from_email
        self.from_name = from_name
        self.configured = True
        logger.info(f"Email service configured for {smtp_host}")

    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: Optional[str] = None,
    ) -> bool:
        """
        Send an email

        Args:
            to: Recipient email address
            subject: Email subject
            body: Plain text body
            html_body: Optional HTML body

        Returns:
            True if sent successfully
        """
        if not self.configured:
            logger.warning(f"Email not configured, would send to {to}: {subject}")
            return False

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = formataddr((self.from_name, self.from_email))
        msg["To"] = to
        msg.attach(MIMEText(body, "plain", "utf-8"))
        if html_body:
            msg.attach(MIMEText(html_body, "html", "utf-8"))

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=10) as server:
                if self.use_tls:
                    server.starttls()
                if self.username:
                    server.login(self.username, self.password)
                server.sendmail(self.from_email, [to], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to}: {e}")
            return False

        logger.info(f"Email sent to {to}: {subject}")
        return True


# Global email service instance
_email_service = EmailService()


def configure_email_from_settings() -> None:
    """Configure the global email service from application settings"""
    if not settings.email_configured:
        logger.info("SMTP_HOST not set, outgoing email disabled")
        return
    _email_service.configure(
        smtp_host=settings.smtp_host,
        smtp_port=settings.smtp_port,
        username=settings.smtp_user,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
        from_email=settings.smtp_from_email,
        from_name=settings.smtp_from_name,
    )


def send_email(to: str, subject: str, body: str, html_body: Optional[str] = None) -> bool:
    """Send an email using the global service"""
    return _email_service.send(to=to, subject=subject, body=body, html_body=html_body)


def send_payment_link_email(to: str, reservation_id: int, amount: str, payment_url: str) -> bool:
    """Send the payment link for a reservation"""
    subject = f"Folklore Garden - platba rezervace #{reservation_id}"
    body = f"""
Dobrý den,

děkujeme za Vaši rezervaci #{reservation_id} ve Folklore Garden.
Částka k úhradě: {amount} CZK

Zaplatit můžete zde:
{payment_url}

Folklore Garden
"""
    return send_email(to=to, subject=subject, body=body)


def send_password_reset_email(to: str, username: str, reset_url: str) -> bool:
    """Send a password reset link"""
    subject = "Folklore Garden admin - obnovení hesla"
    body = f"""
Dobrý den {username},

pro nastavení nového hesla použijte tento odkaz (platí {settings.password_reset_expire_minutes} minut):
{reset_url}

Pokud jste o obnovení hesla nežádali, tento email ignorujte.
"""
    return send_email(to=to, subject=subject, body=body)
