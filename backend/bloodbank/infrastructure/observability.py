"""Structured Logging — JSON log lines carrying the blood bank audit fields.

Invariants:
    - Every line has timestamp, level, logger name and message
    - Audit extras (entity, entity_id, user_id, operation, error_code, path,
      affected) are copied only when the call site set them
    - setup_logging is idempotent: a second call replaces, never stacks, its handler

Design Decisions:
    - JSONFormatter on the stdlib logging module: no extra dependency
    - log_format "text" for local runs, "json" everywhere else
    - SQLAlchemy engine chatter capped at WARNING regardless of the root level
"""

import json
import logging
from datetime import datetime, timezone

AUDIT_KEYS = (
    "entity", "entity_id", "user_id", "operation",
    "error_code", "path", "affected",
)

_HANDLER_NAME = "bloodbank"


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log.update(
            (key, record.__dict__[key])
            for key in AUDIT_KEYS
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the application handler on the root logger."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        JSONFormatter() if fmt == "json"
        else logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
