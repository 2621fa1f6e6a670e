"""Structured JSON logging with trace correlation and credential redaction."""

import json
import logging
import os
import re
import sys
from datetime import UTC, datetime
from typing import Any, Optional

from whisperlink.core.telemetry import get_trace_context

# Patterns to redact from log output
SECRET_PATTERNS = (
    re.compile(r"(api_key|token|secret|password)\s*[:=]\s*['\"]?[\w-]{20,}['\"]?", re.I),
    re.compile(r"(authorization)\s*[:=]\s*['\"]?(bearer\s+)?[\w.-]{8,}['\"]?", re.I),
)

# Retrieval ids are bearer credentials; only their first block may be logged.
_UUID_PATTERN = re.compile(
    r"\b([0-9a-f]{8})-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}\b", re.I
)

_REDACTED_KEYS = ("api_key", "token", "secret", "password", "authorization", "content", "payload")


def secret_ref(secret_id: str) -> str:
    """Loggable reference for a secret id: its first 8 characters.

    Ids on the read path are caller-supplied, so control characters are
    escaped to keep one entry per line.
    """
    if not secret_id:
        return ""
    prefix = secret_id[:8].encode("unicode_escape").decode("ascii")
    return f"{prefix}…"


def _redact(message: str) -> str:
    def repl(m: re.Match[str]) -> str:
        if m.lastindex and m.lastindex >= 1:
            return f"{m.group(1)}=***REDACTED***"
        return "***REDACTED***"

    for pat in SECRET_PATTERNS:
        message = pat.sub(repl, message)
    return _UUID_PATTERN.sub(lambda m: f"{m.group(1)}-****", message)


def _redact_dict(obj: Any) -> Any:
    if isinstance(obj, dict):
        redacted = {}
        for k, v in obj.items():
            key_lower = str(k).lower()
            if any(s in key_lower for s in _REDACTED_KEYS):
                redacted[k] = "***REDACTED***"
            else:
                redacted[k] = _redact_dict(v)
        return redacted
    if isinstance(obj, list):
        return [_redact_dict(i) for i in obj]
    if isinstance(obj, str):
        return _redact(obj)
    return obj


def structured_log(
    level: str,
    message: str,
    *,
    secret_id: Optional[str] = None,
    trace_id: Optional[str] = None,
    span_id: Optional[str] = None,
    operation: Optional[str] = None,
    duration_ms: Optional[int | float] = None,
    metadata: Optional[dict[str, Any]] = None,
    error: Optional[dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """Emit a structured log entry.

    ``secret_id`` is never written out in full; the entry carries
    ``secret_ref`` (an 8 character prefix) instead.
    """
    log = logging.getLogger(logger.name if logger else __name__)
    if trace_id is None and span_id is None:
        ctx = get_trace_context()
        trace_id = ctx.get("trace_id")
        span_id = ctx.get("span_id")

    payload: dict[str, Any] = {
        "severity": level.upper(),
        "message": _redact(message),
        "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
    }
    if secret_id:
        payload["secret_ref"] = secret_ref(secret_id)
    if trace_id:
        payload["trace_id"] = trace_id
    if span_id:
        payload["span_id"] = span_id
    if operation:
        payload["operation"] = operation
    if duration_ms is not None:
        payload["duration_ms"] = round(duration_ms, 2)
    if metadata:
        payload["metadata"] = _redact_dict(metadata)
    if error:
        payload["error"] = _redact_dict(error)

    msg = json.dumps(payload) if _use_json() else _format_readable(payload)
    getattr(log, level.lower(), log.info)(msg)


def _use_json() -> bool:
    """Use JSON format unless LOG_FORMAT asks for readable output."""
    return os.getenv("LOG_FORMAT", "json").lower() == "json"


def _format_readable(payload: dict[str, Any]) -> str:
    parts = [f"[{payload.get('severity', 'INFO')}]", payload.get("message", "")]
    if payload.get("secret_ref"):
        parts.append(f"secret_ref={payload['secret_ref']}")
    if payload.get("operation"):
        parts.append(f"operation={payload['operation']}")
    if payload.get("duration_ms") is not None:
        parts.append(f"duration_ms={payload['duration_ms']}")
    for k, v in (payload.get("metadata") or {}).items():
        parts.append(f"{k}={v}")
    return " ".join(parts)


def configure_logging(log_level: str = "INFO") -> None:
    """Configure root logger with JSON or readable format."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        if _use_json():
            handler.setFormatter(JsonFormatter())
        else:
            handler.setFormatter(RedactingFormatter("%(message)s"))
        root.addHandler(handler)


class RedactingFormatter(logging.Formatter):
    """Plain formatter that still scrubs credentials (e.g. ids in access logs)."""

    def format(self, record: logging.LogRecord) -> str:
        return _redact(super().format(record))


class JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if message.startswith("{"):
            # Already emitted by structured_log
            return message
        payload: dict[str, Any] = {
            "severity": record.levelname,
            "message": _redact(message),
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat().replace("+00:00", "Z"),
            "logger": record.name,
        }
        if getattr(record, "operation", None):
            payload["operation"] = record.operation
        if getattr(record, "metadata", None):
            payload["metadata"] = _redact_dict(record.metadata)
        if record.exc_info:
            payload["error"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else "",
                "message": _redact(str(record.exc_info[1])) if record.exc_info[1] else "",
                "stack_trace": _redact(self.formatException(record.exc_info)) if record.exc_info[2] else "",
            }
        return json.dumps(payload)
