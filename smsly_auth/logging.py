"""
Structured Logging
==================
structlog configuration for smsly-auth with secret redaction.

Usage:
    from smsly_auth.logging import configure_logging

    configure_logging(service_name="smsly-auth", level="INFO", json_output=True)
"""

import logging
import sys
from typing import Any, Dict

import structlog

# Keys whose values must never reach a log sink
REDACTED_KEYS = frozenset({
    "secret",
    "token",
    "passcode",
    "otp",
    "password",
    "authorization",
})
REDACTED = "***"


def redact_secrets(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """structlog processor that masks secret-bearing keys."""
    for key in list(event_dict):
        if key.lower() in REDACTED_KEYS:
            event_dict[key] = REDACTED
    return event_dict


def mask_subject(subject: str) -> str:
    """
    Mask a phone number for logs.

    "+15551234567" -> "+155***4567"
    """
    if not subject:
        return ""
    if len(subject) <= 6:
        return "***"
    return f"{subject[:4]}***{subject[-4:]}"


def configure_logging(
    service_name: str,
    level: str = "INFO",
    json_output: bool = True,
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        service_name: Name bound to every log line
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render JSON (production) instead of console output
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            redact_secrets,
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(service=service_name)

    structlog.get_logger(__name__).info("Logging configured", service=service_name)
