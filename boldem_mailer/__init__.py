"""Boldem transactional-email transport: message -> JSON payload, OAuth token caching."""
from .models import Address, Header, HeaderKind, Message, MimePart
from .services import BoldemTransport, PayloadBuilder, from_email_message, get_email_service

__all__ = [
    'Address', 'Header', 'HeaderKind', 'Message', 'MimePart',
    'BoldemTransport', 'PayloadBuilder', 'from_email_message', 'get_email_service',
]
