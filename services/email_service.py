from email.message import EmailMessage
from dotenv import load_dotenv
from config.settings import DEFAULT_MAIL_FROM
import asyncio
import logging
import os
import smtplib

load_dotenv(override=True)

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(self):
        self.smtp_host = os.getenv('SMTP_HOST')
        self.smtp_port = int(os.getenv('SMTP_PORT', '587'))
        self.smtp_user = os.getenv('SMTP_USER')
        self.smtp_password = os.getenv('SMTP_PASSWORD')
        self.mail_from = os.getenv('MAIL_FROM', DEFAULT_MAIL_FROM)
        self.use_tls = os.getenv('SMTP_USE_TLS', 'true').lower() in ('1', 'true', 'yes')

        if not all([self.smtp_host, self.smtp_user, self.smtp_password]):
            raise ValueError("Missing SMTP credentials")

    def _build_message(self, to_address: str, subject: str, html: str) -> EmailMessage:
        message = EmailMessage()
        message['From'] = self.mail_from
        message['To'] = to_address
        message['Subject'] = subject
        message.set_content("Este mensaje requiere un cliente de correo compatible con HTML.")
        message.add_alternative(html, subtype='html')
        return message

    def _deliver(self, message: EmailMessage):
        with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=30) as server:
            if self.use_tls:
                server.starttls()
            server.login(self.smtp_user, self.smtp_password)
            server.send_message(message)

    async def send_email(self, to_address: str, subject: str, html: str) -> bool:
        """Send an HTML e-mail through the relay. Returns False instead of raising on failure."""
        try:
            message = self._build_message(to_address, subject, html)
            await asyncio.to_thread(self._deliver, message)
            logger.info(f"E-mail '{subject}' sent to {to_address}")
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Error sending e-mail to {to_address}: {str(e)}")
            return False
        except Exception as e:
            logger.error(f"Unexpected error sending e-mail to {to_address}: {str(e)}", exc_info=True)
            return False
