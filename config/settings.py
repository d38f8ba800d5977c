from dotenv import load_dotenv
from typing import List, Optional
import logging
import os

# Load environment variables
load_dotenv()

DEFAULT_MAIL_FROM = '"NUVÓ Essence Ritual" <noreply@nuvoessence.com>'


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Install the root logging configuration shared by the API and the worker."""
    level = level or os.getenv('LOG_LEVEL', 'INFO')
    log_file = log_file or os.getenv('LOG_FILE')

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def get_cors_origins() -> List[str]:
    origins = os.getenv('CORS_ORIGINS', '*')
    return [origin.strip() for origin in origins.split(',') if origin.strip()]


def get_logo_url() -> str:
    return os.getenv('LOGO_URL', 'https://nuvoessence.com/logo.png')


def get_contact_email() -> str:
    return os.getenv('CONTACT_EMAIL', 'contacto@nuvoessence.com')


def get_studio_address() -> str:
    return os.getenv('STUDIO_ADDRESS', 'Av. Siempreviva 742, Buenos Aires')
