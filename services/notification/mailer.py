# ============================================================
# mailer.py - Rendu et envoi des emails
# ------------------------------------------------------------
# Les corps d'email sont des templates Jinja2 (templates/*.txt).
# Sans SMTP_HOST configuré, l'email est seulement journalisé
# ("mock email"), comme en développement.
# ============================================================
import logging
import smtplib
from email.message import EmailMessage
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from services.notification import config

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    undefined=StrictUndefined,
    keep_trailing_newline=True,
)


def render(template: str, **ctx) -> str:
    return env.get_template(template).render(**ctx)


class Mailer:
    def __init__(self, host=None, port=None, user=None, password=None, use_tls=None, sender=None):
        self.host = config.SMTP_HOST if host is None else host
        self.port = port or config.SMTP_PORT
        self.user = config.SMTP_USER if user is None else user
        self.password = config.SMTP_PASS if password is None else password
        self.use_tls = config.SMTP_USE_TLS if use_tls is None else use_tls
        self.sender = sender or config.MAIL_FROM

    # Retourne False en cas d'échec : une erreur d'envoi ne doit pas
    # interrompre le traitement des autres destinataires.
    def send(self, to: str, subject: str, template: str, **ctx) -> bool:
        try:
            body = render(template, **ctx)
            if not self.host:
                logger.info("mock email to=%s subject=%r\n%s", to, subject, body)
                return True

            msg = EmailMessage()
            msg["From"] = self.sender
            msg["To"] = to
            msg["Subject"] = subject
            msg.set_content(body)
            with smtplib.SMTP(self.host, self.port, timeout=30) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.user:
                    smtp.login(self.user, self.password)
                smtp.send_message(msg)
            logger.info("email sent to %s | subject=%s", to, subject)
            return True
        except Exception as e:
            logger.exception("send email to %s failed: %s", to, e)
            return False
