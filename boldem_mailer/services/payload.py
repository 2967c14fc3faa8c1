"""Translate a `Message` into the JSON body of `POST /transactionalemails`.

Rules:
 - `to` holds To, Cc and Bcc entries in that order (Boldem has no cc/bcc field)
 - explicit text/plain and text/html parts override the content-type default body
 - message headers always shadow default headers of the same (case-sensitive) name
 - `X-MK-Tag` is lifted into the top-level `Tag` field
"""
from __future__ import annotations

import base64
from typing import Any, Dict, Mapping, Optional

from boldem_mailer.models import Address, HeaderKind, Message

TAG_HEADER = "X-MK-Tag"
KEEP_ID_HEADER = "X-MK-KeepID"
MESSAGE_ID_HEADER = "Message-ID"
EXCLUDED_HEADERS = frozenset({"Subject", "Content-Type", "MIME-Version", "Date"})
HTML_CONTENT_TYPES = frozenset({"text/html", "multipart/alternative", "multipart/mixed"})


def _recipient(addr: Address) -> Dict[str, str]:
    if addr.display_name:
        return {"address": addr.address, "displayName": addr.display_name}
    return {"address": addr.address}


class PayloadBuilder:
    def __init__(self, default_headers: Optional[Mapping[str, Any]] = None):
        self.default_headers: Dict[str, Any] = dict(default_headers or {})

    def build(self, message: Message) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        self._apply_recipients(payload, message)
        self._apply_parts(payload, message)
        if message.headers is not None:
            self._apply_headers(payload, message)
        return payload

    def _apply_recipients(self, payload: Dict[str, Any], message: Message) -> None:
        payload["subject"] = message.subject
        if message.sender is not None:
            payload["from"] = message.sender.address
            if message.sender.display_name:
                payload["fromDisplayName"] = message.sender.display_name
        payload["to"] = [_recipient(a) for a in message.all_recipients()]
        if message.reply_to:
            # last entry wins; earlier Reply-To addresses are dropped
            reply_to = message.reply_to[-1]
            payload["replyTo"] = reply_to.address
            if reply_to.display_name:
                payload["replyToDisplayName"] = reply_to.display_name

    def _apply_parts(self, payload: Dict[str, Any], message: Message) -> None:
        if message.content_type in HTML_CONTENT_TYPES:
            payload["bodyHtml"] = message.body
        else:
            payload["bodyText"] = message.body

        plain = message.find_part("text/plain")
        if plain is not None:
            payload["bodyText"] = plain.text
        html = message.find_part("text/html")
        if html is not None:
            payload["bodyHtml"] = html.text

        if not message.parts:
            return
        attachments = []
        for part in message.parts:
            if not part.is_attachment:
                continue
            item = {
                "name": part.filename,
                "content": base64.b64encode(part.content).decode("ascii"),
                "contentType": part.content_type,
            }
            if part.disposition != "attachment" and part.content_id:
                item["ContentID"] = f"cid:{part.content_id}"
            attachments.append(item)
        payload["attachments"] = attachments

    def _apply_headers(self, payload: Dict[str, Any], message: Message) -> None:
        headers: Dict[str, Any] = {}
        seen = set()

        for header in message.headers or []:
            name = header.name
            if name in EXCLUDED_HEADERS:
                continue
            seen.add(name)
            if header.kind is HeaderKind.SIMPLE:
                if name == TAG_HEADER:
                    payload["Tag"] = header.value
                else:
                    headers[name] = header.value
            elif header.kind is HeaderKind.STRUCTURED:
                headers[name] = header.rendered
                if name == MESSAGE_ID_HEADER:
                    headers[KEEP_ID_HEADER] = True

        # Defaults never append to a name present in the message, however many times it occurred.
        for name, value in self.default_headers.items():
            if name in seen or name in EXCLUDED_HEADERS:
                continue
            if name == TAG_HEADER:
                payload["Tag"] = value
            else:
                headers[name] = value

        payload["headers"] = headers


__all__ = [
    "PayloadBuilder", "TAG_HEADER", "KEEP_ID_HEADER", "MESSAGE_ID_HEADER",
    "EXCLUDED_HEADERS", "HTML_CONTENT_TYPES",
]
