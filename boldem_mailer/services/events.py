"""Observer hooks fired around a send.

Listeners are plain objects registered with `BoldemTransport.register_plugin`;
any of these methods is optional:

    before_send_performed(evt: SendEvent)   # may call evt.cancel_bubble()
    response_received(evt: ResponseEvent)
    send_performed(evt: SendEvent)          # evt.result is SUCCESS or FAILED
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Protocol, Union

from boldem_mailer.models import Message


class SendResult(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class _Event:
    source: Any
    _cancelled: bool = field(default=False, init=False, repr=False)

    def cancel_bubble(self, cancel: bool = True) -> None:
        self._cancelled = cancel

    def bubble_cancelled(self) -> bool:
        return self._cancelled


@dataclass
class SendEvent(_Event):
    message: Optional[Message] = None
    result: SendResult = SendResult.PENDING


@dataclass
class ResponseEvent(_Event):
    response: str = ""
    valid: bool = False


class SendListener(Protocol):
    def before_send_performed(self, evt: SendEvent) -> None: ...
    def send_performed(self, evt: SendEvent) -> None: ...
    def response_received(self, evt: ResponseEvent) -> None: ...


class EventDispatcher:
    def __init__(self):
        self.listeners: List[Any] = []

    def bind_event_listener(self, listener: Any) -> None:
        if listener not in self.listeners:
            self.listeners.append(listener)

    def create_send_event(self, source: Any, message: Message) -> SendEvent:
        return SendEvent(source=source, message=message)

    def create_response_event(self, source: Any, response: str, valid: bool) -> ResponseEvent:
        return ResponseEvent(source=source, response=response, valid=valid)

    def dispatch_event(self, evt: Union[SendEvent, ResponseEvent], method: str) -> None:
        """Call `method` on each listener that defines it; stops once a listener cancels."""
        for listener in self.listeners:
            handler = getattr(listener, method, None)
            if callable(handler):
                handler(evt)
            if evt.bubble_cancelled():
                break


__all__ = ["EventDispatcher", "ResponseEvent", "SendEvent", "SendListener", "SendResult"]
