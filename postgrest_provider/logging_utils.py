# postgrest_provider/logging_utils.py
from __future__ import annotations

import json
import logging
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

# Per-dispatch correlation ID
correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="-")

_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"


class CorrelationIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        # provide %(correlation_id)s to all formatters
        record.correlation_id = correlation_id_ctx.get()
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", "-"),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


_CONFIGURED = False


def setup_logging(
    level: Optional[int] = None, json_logs: Optional[bool] = None
) -> None:
    """
    Idempotent logging setup for the package logger.
    Every line gets %(correlation_id)s; LOG_JSON switches to one JSON object per line.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    if level is None or json_logs is None:
        from postgrest_provider.config import get_settings

        settings = get_settings()
        if level is None:
            level = settings.log_level_value
        if json_logs is None:
            json_logs = settings.LOG_JSON

    filt = CorrelationIdFilter()
    handler = logging.StreamHandler()
    handler.addFilter(filt)
    handler.setFormatter(JsonFormatter() if json_logs else logging.Formatter(_FORMAT))

    pkg_logger = logging.getLogger("postgrest_provider")
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(level)

    _CONFIGURED = True


@contextmanager
def correlation_scope(cid: Optional[str] = None) -> Iterator[str]:
    """Bind a correlation id for the duration of one dispatch."""
    cid = cid or uuid.uuid4().hex
    token = correlation_id_ctx.set(cid)
    try:
        yield cid
    finally:
        correlation_id_ctx.reset(token)
