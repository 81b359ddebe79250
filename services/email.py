import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Iterable, List, Optional, Protocol

from pydantic import BaseModel

from analytics.digest import WeeklyDigest, render_html, render_plain_text
from models.profile import Profile

log = logging.getLogger(__name__)

SENDER_NAME = "PGC Performance"


class EmailResult(BaseModel):
    email: str
    success: bool
    error: Optional[str] = None


class EmailSender(Protocol):
    """Interface for outbound email.

    Implementors deliver one pre-rendered message to one recipient and raise
    on failure.
    """

    def send(self, to: str, subject: str, html: str, text: str) -> None:
        ...


class NullEmailSender:
    """Records messages instead of sending them. Used when SMTP is not configured."""

    def __init__(self):
        self.sent: List[dict] = []

    def send(self, to: str, subject: str, html: str, text: str) -> None:
        log.info("Email not configured; skipping send to %s", to)
        self.sent.append({"to": to, "subject": subject, "html": html, "text": text})


class SmtpEmailSender:
    """Sends multipart (text + HTML) mail over SMTP with STARTTLS."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        user: Optional[str] = None,
        password: Optional[str] = None,
        from_email: str = "noreply@pgc-performance.com",
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.from_email = from_email

    @property
    def from_header(self) -> str:
        return f"{SENDER_NAME} <{self.from_email}>"

    def build_message(self, to: str, subject: str, html: str, text: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_header
        msg["To"] = to
        msg.attach(MIMEText(text, "plain", "utf-8"))
        msg.attach(MIMEText(html, "html", "utf-8"))
        return msg

    def send(self, to: str, subject: str, html: str, text: str) -> None:
        msg = self.build_message(to, subject, html, text)
        context = ssl.create_default_context()
        with smtplib.SMTP(self.host, self.port) as server:
            server.starttls(context=context)
            if self.user and self.password:
                server.login(self.user, self.password)
            server.sendmail(self.from_email, [to], msg.as_string())
        log.info("Sent %r to %s", subject, to)


def send_weekly_digest(
    sender: EmailSender, digest: WeeklyDigest, recipients: Iterable[Profile]
) -> List[EmailResult]:
    """
    Deliver the digest to each recipient in turn.

    The message is rendered once. A failure for one recipient is recorded
    in its result and does not stop the others.
    """
    html = render_html(digest)
    text = render_plain_text(digest)

    results = []
    for recipient in recipients:
        try:
            sender.send(recipient.email, digest.subject, html, text)
        except (smtplib.SMTPException, OSError) as exc:
            log.error("Failed to send weekly digest to %s: %s", recipient.email, exc)
            results.append(EmailResult(email=recipient.email, success=False, error=str(exc)))
        else:
            results.append(EmailResult(email=recipient.email, success=True))
    return results
