import logging
from boldem_mailer.core.settings import Settings, get_settings
from boldem_mailer.services.email_service import EmailService, NoopEmailProvider
from boldem_mailer.services.transport import BoldemTransport

logger = logging.getLogger("boldem_factory")

def get_email_service(settings: Settings | None = None) -> EmailService:
    """
    Factory for EmailService.
    - EMAIL_PROVIDER=boldem (default): uses CLIENT_ID/CLIENT_SECRET; if missing, falls back to Noop.
    - EMAIL_PROVIDER=noop: always Noop.

    Raises:
        ValueError: If the provider is unsupported.
    """
    settings = settings or get_settings()
    provider = settings.EMAIL_PROVIDER.lower()
    if provider == "boldem":
        if settings.has_credentials:
            return BoldemTransport.from_settings(settings)
        logger.warning("BOLDEM_CLIENT_ID/BOLDEM_CLIENT_SECRET not set; using NoopEmailProvider")
        return NoopEmailProvider()
    if provider == "noop":
        return NoopEmailProvider()
    raise ValueError(f"Unsupported email provider: {provider}")
