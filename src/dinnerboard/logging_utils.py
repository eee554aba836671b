"""Logging setup for the API and CLI, with redaction of the API token and webhook secret."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Iterable, Tuple

REDACTED = "[redacted]"

# Each pattern keeps group 1 and masks what follows it.
_REDACTION_PATTERNS: Tuple[re.Pattern[str], ...] = (
    re.compile(r"(Bearer\s+)[A-Za-z0-9\-._~+/=]+", re.IGNORECASE),
    re.compile(r"((?:api_token|X-API-Key)[=:]\s*)[^&\s,'\"]+", re.IGNORECASE),
    re.compile(r"(['\"]secret['\"]\s*:\s*['\"])[^'\"]+", re.IGNORECASE),
)

_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class SensitiveDataFilter(logging.Filter):
    """Rewrite records so credentials never reach a handler."""

    def __init__(self, secrets: Iterable[str]):
        super().__init__()
        self._secrets = sorted({s.strip() for s in secrets if s and s.strip()}, key=len, reverse=True)

    def redact(self, text: str) -> str:
        for pattern in _REDACTION_PATTERNS:
            text = pattern.sub(lambda match: match.group(1) + REDACTED, text)
        for secret in self._secrets:
            text = text.replace(secret, REDACTED)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self.redact(message)
        if redacted != message:
            record.msg, record.args = redacted, ()

        # Extras such as request_id land on the record as plain attributes.
        for key, value in list(vars(record).items()):
            if key != "msg" and isinstance(value, str):
                setattr(record, key, self.redact(value))
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line; carries the request id when the access log sets one."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = getattr(record, "request_id", None)
        if request_id:
            payload["request_id"] = request_id
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def _build_formatter(fmt: str) -> logging.Formatter:
    if (fmt or "plain").lower() == "json":
        return JsonFormatter()
    return logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )


def configure_logging(level_name: str, fmt: str, secrets: Iterable[str]) -> logging.Handler:
    """Install a single redacting stderr handler on the root logger and return it.

    uvicorn's loggers are routed through the same handler. SQLAlchemy engine
    chatter stays at WARNING unless the level asks for DEBUG.
    """

    level = getattr(logging, level_name.upper(), logging.INFO)
    redactor = SensitiveDataFilter(secrets)

    handler = logging.StreamHandler()
    handler.setFormatter(_build_formatter(fmt))
    handler.addFilter(redactor)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)
    logging.captureWarnings(True)

    for name in _SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = []
        server_logger.setLevel(level)
        server_logger.propagate = True
        server_logger.addFilter(redactor)

    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    )
    return handler
