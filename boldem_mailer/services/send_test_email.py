"""Send a one-off test message with the environment-configured transport.

    BOLDEM_CLIENT_ID=... BOLDEM_CLIENT_SECRET=... \
        python -m boldem_mailer.services.send_test_email from@example.com to@example.com
"""
import sys

from boldem_mailer.models import Address, Message, MimePart
from boldem_mailer.services.factory import get_email_service


def build_test_message(sender: str, recipient: str) -> Message:
    return Message(
        subject="Boldem test email",
        sender=Address(sender, "Boldem Mailer"),
        to=[Address(recipient)],
        content_type="multipart/alternative",
        parts=[
            MimePart("text/plain", "This is a test email."),
            MimePart("text/html", "<p>This is a <b>test</b> email.</p>"),
        ],
    )


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 2:
        print("usage: send_test_email FROM TO", file=sys.stderr)
        return 2
    service = get_email_service()
    sent = service.send(build_test_message(args[0], args[1]))
    if not sent:
        print("Test email was not sent", file=sys.stderr)
        return 1
    print(f"Test email sent to {sent} recipient(s)!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
