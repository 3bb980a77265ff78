"""Application-wide structlog configuration for JSON logging."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from typing import Any

import structlog
from structlog.stdlib import add_logger_name
from opentelemetry.trace import get_current_span

REDACTED = "***"
QUIET_LOGGERS = ("httpx", "httpcore")


def _add_trace_context(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    """Inject trace_id/span_id from the current OpenTelemetry span, if any."""
    try:
        span = get_current_span()
        span_context = span.get_span_context()
    except Exception:
        return event_dict

    if getattr(span_context, "trace_id", 0):
        event_dict["trace_id"] = f"{span_context.trace_id:032x}"
        event_dict["span_id"] = f"{span_context.span_id:016x}"
    return event_dict


def redact(text: str, secrets: Iterable[str]) -> str:
    """Replace every non-empty secret in text with a placeholder."""
    for secret in secrets:
        if secret:
            text = text.replace(secret, REDACTED)
    return text


def make_redactor(secrets: Iterable[str]) -> structlog.types.Processor:
    """Build a processor that scrubs secrets from string values in the event dict."""
    secrets = tuple(s for s in secrets if s)

    def _redact_secrets(
        _logger: structlog.types.WrappedLogger,
        _method_name: str,
        event_dict: structlog.types.EventDict,
    ) -> structlog.types.EventDict:
        if not secrets:
            return event_dict
        for key, value in event_dict.items():
            if isinstance(value, str):
                event_dict[key] = redact(value, secrets)
        return event_dict

    return _redact_secrets


def setup_logging(
    service_name: str,
    environment: str | None = None,
    secrets: Iterable[str] = (),
) -> None:
    """Configure structlog and stdlib logging for JSON output to stdout."""
    timestamper = structlog.processors.TimeStamper(fmt="iso")

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        add_logger_name,
        timestamper,
        _add_trace_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        # Last before rendering so formatted tracebacks are scrubbed too.
        make_redactor(secrets),
    ]

    structlog.configure(
        processors=shared_processors
        + [
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
        stream=sys.stdout,
    )

    # httpx logs each request URL at INFO, and search URLs carry the API key.
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # Static context merged into every log line.
    bind_args: dict[str, Any] = {"service": service_name}
    if environment:
        bind_args["environment"] = environment
    structlog.contextvars.bind_contextvars(**bind_args)
