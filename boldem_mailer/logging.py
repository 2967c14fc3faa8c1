"""Centralized structlog configuration and event helpers for the transport.

Import order safety: no side-effects beyond logging config; safe to import from
any module in the package.
"""
from __future__ import annotations

import logging
import contextvars
import os
import structlog
from typing import Any

# -------------------------
# ContextVars for send-scoped data
# -------------------------
_send_id_var = contextvars.ContextVar("send_id", default=None)
_client_id_var = contextvars.ContextVar("client_id", default=None)


def _add_context(logger, method_name: str, event_dict: dict[str, Any]):  # noqa: D401
    sid = _send_id_var.get()
    if sid:
        event_dict["send_id"] = sid
    cid = _client_id_var.get()
    if cid:
        event_dict["client_id"] = cid
    return event_dict


# -------------------------
# One-time structlog configuration (idempotent)
# -------------------------
if not getattr(structlog, "_BOLDEM_CONFIGURED", False):
    _level = logging.getLevelName(os.getenv("BOLDEM_LOG_LEVEL", "INFO").upper())
    if not isinstance(_level, int):
        _level = logging.INFO
    logging_logger = logging.getLogger("boldem_mailer")
    logging_logger.setLevel(_level)
    if not logging_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        logging_logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _add_context,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_level),
        cache_logger_on_first_use=True,
    )
    structlog._BOLDEM_CONFIGURED = True  # type: ignore[attr-defined]

slog = structlog.get_logger()

# -------------------------
# Public helper functions
# -------------------------

def set_log_send(send_id: str | None):
    return _send_id_var.set(send_id)

def reset_log_send(token: contextvars.Token):
    _send_id_var.reset(token)

def set_log_client(client_id: str | None):
    return _client_id_var.set(client_id)

def reset_log_client(token: contextvars.Token):
    _client_id_var.reset(token)

def log_token_acquired(success: bool, status_code: int | None = None, **extra):
    slog.info("token_acquired", success=success, status_code=status_code, **extra)

def log_send_performed(success: bool, status_code: int | None, recipients: int, **extra):
    slog.info("send_performed", success=success, status_code=status_code, recipients=recipients, **extra)

def log_send_cancelled(**extra):
    slog.info("send_cancelled", **extra)
