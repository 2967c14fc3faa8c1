import logging

from boldem_mailer.models import Message


class EmailService:
    """
    Provider-agnostic email sender interface.
    Subclasses should implement the send method for specific email providers.
    """

    def send(self, message: Message) -> int:
        """
        Send an email message.

        Args:
            message (Message): Fully assembled message (recipients, parts, headers).
        Returns:
            int: Number of accepted recipients; 0 on failure or cancellation.
        """
        raise NotImplementedError("EmailService.send() must be implemented by a provider-specific subclass.")


class NoopEmailProvider(EmailService):
    """Used when no provider credentials are configured; logs and sends nothing."""

    def __init__(self):
        self.logger = logging.getLogger("NoopEmailProvider")

    def send(self, message: Message) -> int:
        to = [a.address for a in message.all_recipients()]
        self.logger.info(f"NOOP email to={to} subject={message.subject}")
        return 0
