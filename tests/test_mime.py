import base64
from email.message import EmailMessage

from boldem_mailer.models import HeaderKind
from boldem_mailer.services.mime import from_email_message
from boldem_mailer.services.payload import KEEP_ID_HEADER, PayloadBuilder


def _alternative_message() -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = "Quarterly report"
    msg["From"] = "Alice <a@x.com>"
    msg["To"] = "Bob <b@x.com>, c@x.com"
    msg["Cc"] = "d@x.com"
    msg["Reply-To"] = "Support <s@x.com>"
    msg["Message-ID"] = "<abc123@x.com>"
    msg["X-MK-Tag"] = "reports"
    msg["X-Campaign"] = "q3"
    msg.set_content("plain body")
    msg.add_alternative("<p>html body</p>", subtype="html")
    return msg


def test_addresses_and_subject():
    message = from_email_message(_alternative_message())
    assert message.subject == "Quarterly report"
    assert message.sender.address == "a@x.com"
    assert message.sender.display_name == "Alice"
    assert [a.address for a in message.to] == ["b@x.com", "c@x.com"]
    assert message.to[1].display_name is None
    assert [a.address for a in message.cc] == ["d@x.com"]
    assert message.reply_to[0].display_name == "Support"


def test_header_kinds():
    kinds = {h.name: h.kind for h in from_email_message(_alternative_message()).headers}
    assert kinds["From"] is HeaderKind.ADDRESS
    assert kinds["Message-ID"] is HeaderKind.STRUCTURED
    assert kinds["Content-Type"] is HeaderKind.STRUCTURED
    assert kinds["X-Campaign"] is HeaderKind.SIMPLE


def test_payload_from_alternative_message():
    payload = PayloadBuilder().build(from_email_message(_alternative_message()))
    assert payload["bodyText"].strip() == "plain body"
    assert payload["bodyHtml"].strip() == "<p>html body</p>"
    assert payload["Tag"] == "reports"
    assert payload["headers"]["X-Campaign"] == "q3"
    assert payload["headers"]["Message-ID"] == "<abc123@x.com>"
    assert payload["headers"][KEEP_ID_HEADER] is True
    for name in ("Subject", "Content-Type", "MIME-Version", "From", "To", "X-MK-Tag"):
        assert name not in payload["headers"]
    assert payload["attachments"] == []


def test_attachments_and_inline_images():
    msg = EmailMessage()
    msg["Subject"] = "Files"
    msg["From"] = "a@x.com"
    msg["To"] = "b@x.com"
    msg.set_content("see attached")
    msg.add_alternative('<p><img src="cid:logo"></p>', subtype="html")
    msg.get_payload()[1].add_related(b"\x89PNGdata", "image", "png", cid="<logo>")
    msg.add_attachment(b"%PDF-1.4", maintype="application", subtype="pdf", filename="report.pdf")

    message = from_email_message(msg)
    payload = PayloadBuilder().build(message)
    by_type = {a["contentType"]: a for a in payload["attachments"]}
    assert set(by_type) == {"image/png", "application/pdf"}
    assert base64.b64decode(by_type["application/pdf"]["content"]) == b"%PDF-1.4"
    assert by_type["application/pdf"]["name"] == "report.pdf"
    assert "ContentID" not in by_type["application/pdf"]
    assert by_type["image/png"]["ContentID"] == "cid:logo"
    assert payload["bodyText"].strip() == "see attached"
    assert "cid:logo" in payload["bodyHtml"]


def test_single_part_message():
    msg = EmailMessage()
    msg["Subject"] = "Hi"
    msg["From"] = "a@x.com"
    msg["To"] = "b@x.com"
    msg.set_content("hello")
    message = from_email_message(msg)
    assert message.content_type == "text/plain"
    assert message.parts == []
    payload = PayloadBuilder().build(message)
    assert payload["bodyText"].strip() == "hello"
    assert "attachments" not in payload
