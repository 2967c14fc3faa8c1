"""Generic outgoing message model consumed by the payload builder.

The transport never parses MIME itself; callers either build a `Message`
directly or convert a stdlib `email.message.EmailMessage` with
`boldem_mailer.services.mime.from_email_message`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class HeaderKind(str, Enum):
    """How a header's content is copied into the payload.

    SIMPLE covers unstructured and DKIM style headers (plain value).
    STRUCTURED covers date, identification, parameterized and path headers
    (rendered field body). ADDRESS headers (From/To/...) are represented by the
    recipient fields and never copied.
    """
    SIMPLE = "simple"
    STRUCTURED = "structured"
    ADDRESS = "address"


@dataclass(frozen=True)
class Address:
    address: str
    display_name: Optional[str] = None


@dataclass(frozen=True)
class Header:
    name: str
    value: str
    kind: HeaderKind = HeaderKind.SIMPLE
    field_body: Optional[str] = None  # rendered form; falls back to value

    @property
    def rendered(self) -> str:
        return self.field_body if self.field_body is not None else self.value


@dataclass
class MimePart:
    """A child part: an alternative body or an attachment."""
    content_type: str
    body: str | bytes = ""
    is_attachment: bool = False
    filename: Optional[str] = None
    disposition: Optional[str] = None  # "attachment" / "inline"
    content_id: Optional[str] = None  # without angle brackets

    @property
    def content(self) -> bytes:
        if isinstance(self.body, bytes):
            return self.body
        return self.body.encode("utf-8")

    @property
    def text(self) -> str:
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8", errors="replace")
        return self.body


@dataclass
class Message:
    subject: str = ""
    sender: Optional[Address] = None
    to: List[Address] = field(default_factory=list)
    cc: List[Address] = field(default_factory=list)
    bcc: List[Address] = field(default_factory=list)
    reply_to: List[Address] = field(default_factory=list)
    content_type: str = "text/plain"
    body: str = ""
    parts: List[MimePart] = field(default_factory=list)
    headers: Optional[List[Header]] = field(default_factory=list)

    def all_recipients(self) -> List[Address]:
        """To, then Cc, then Bcc. Duplicates are kept."""
        return [*self.to, *self.cc, *self.bcc]

    def find_part(self, mime_type: str) -> Optional[MimePart]:
        """First non-attachment child whose content type starts with `mime_type`."""
        for part in self.parts:
            if part.content_type.startswith(mime_type) and not part.is_attachment:
                return part
        return None


__all__ = ["Address", "Header", "HeaderKind", "Message", "MimePart"]
