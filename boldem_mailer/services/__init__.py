from .email_service import EmailService, NoopEmailProvider
from .events import EventDispatcher, ResponseEvent, SendEvent, SendListener, SendResult
from .factory import get_email_service
from .mime import from_email_message
from .payload import PayloadBuilder
from .transport import BoldemTransport

__all__ = [
    'BoldemTransport', 'PayloadBuilder', 'from_email_message',
    'EmailService', 'NoopEmailProvider', 'get_email_service',
    'EventDispatcher', 'ResponseEvent', 'SendEvent', 'SendListener', 'SendResult',
]
