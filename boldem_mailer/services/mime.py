"""Convert stdlib `email.message.EmailMessage` objects into `Message`.

Header kinds follow `email.headerregistry` (policy `email.policy.default`):
unstructured headers are copied by value, date / message-id / MIME parameter
headers by rendered body, address headers only feed the recipient fields.
Messages built with the legacy compat32 policy have plain string headers and
are treated as unstructured, except for the address headers.
"""
from __future__ import annotations

from email import headerregistry
from email.message import EmailMessage, Message as StdMessage
from email.utils import getaddresses
from typing import List, Optional

from boldem_mailer.models import Address, Header, HeaderKind, Message, MimePart

ADDRESS_FIELDS = {"from", "to", "cc", "bcc", "reply-to", "sender", "resent-from", "resent-to",
                  "resent-cc", "resent-bcc", "resent-sender"}

_STRUCTURED = (
    headerregistry.DateHeader,
    headerregistry.MessageIDHeader,
    headerregistry.ParameterizedMIMEHeader,
    headerregistry.ContentTransferEncodingHeader,
    headerregistry.MIMEVersionHeader,
)


def _header_kind(name: str, value: object) -> HeaderKind:
    if isinstance(value, headerregistry.AddressHeader) or name.lower() in ADDRESS_FIELDS:
        return HeaderKind.ADDRESS
    if isinstance(value, _STRUCTURED):
        return HeaderKind.STRUCTURED
    return HeaderKind.SIMPLE


def _addresses(msg: StdMessage, name: str) -> List[Address]:
    out: List[Address] = []
    for value in msg.get_all(name) or []:
        parsed = getattr(value, "addresses", None)
        if parsed is not None:
            out.extend(Address(a.addr_spec, a.display_name or None) for a in parsed)
        else:
            out.extend(Address(addr, display or None) for display, addr in getaddresses([str(value)]) if addr)
    return out


def _is_attachment(part: StdMessage) -> bool:
    if part.get_content_disposition() == "attachment" or part.get_filename():
        return True
    # inline resources referenced from HTML (cid:)
    return bool(part.get("Content-ID")) and part.get_content_type() not in ("text/plain", "text/html")


def _text(part: StdMessage) -> str:
    if isinstance(part, EmailMessage):
        content = part.get_content()
        if isinstance(content, str):
            return content
    payload = part.get_payload(decode=True) or b""
    return payload.decode(part.get_content_charset() or "utf-8", errors="replace")


def _leaf_parts(msg: StdMessage) -> List[MimePart]:
    parts: List[MimePart] = []
    for part in msg.walk():
        if part is msg or part.is_multipart():
            continue
        if _is_attachment(part):
            cid = part.get("Content-ID")
            parts.append(MimePart(
                content_type=part.get_content_type(),
                body=part.get_payload(decode=True) or b"",
                is_attachment=True,
                filename=part.get_filename(),
                disposition=part.get_content_disposition(),
                content_id=str(cid).strip().strip("<>") if cid else None,
            ))
        else:
            parts.append(MimePart(content_type=part.get_content_type(), body=_text(part)))
    return parts


def _primary_body(msg: StdMessage) -> str:
    if not msg.is_multipart():
        return _text(msg)
    if isinstance(msg, EmailMessage):
        body: Optional[StdMessage] = msg.get_body(preferencelist=("html", "plain"))
        if body is not None:
            return _text(body)
    return ""


def from_email_message(msg: StdMessage) -> Message:
    """Build a `Message` from a parsed or composed stdlib email message."""
    senders = _addresses(msg, "From")
    headers = [
        Header(name=name, value=str(value), kind=_header_kind(name, value), field_body=str(value))
        for name, value in msg.items()
    ]
    return Message(
        subject=str(msg.get("Subject", "")),
        sender=senders[-1] if senders else None,
        to=_addresses(msg, "To"),
        cc=_addresses(msg, "Cc"),
        bcc=_addresses(msg, "Bcc"),
        reply_to=_addresses(msg, "Reply-To"),
        content_type=msg.get_content_type(),
        body=_primary_body(msg),
        parts=_leaf_parts(msg) if msg.is_multipart() else [],
        headers=headers,
    )


__all__ = ["from_email_message"]
