import json
import logging
import os
import threading

_lock = threading.Lock()
_configured = False

ROOT_LOGGER_NAME = "grocery"


# output key -> LogRecord attribute
RECORD_FIELDS = {
    "timestamp": "asctime",
    "level": "levelname",
    "logger": "name",
    "line": "lineno",
    "message": "message",
}


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON line keyed by ``fields``."""

    def __init__(self, fields=None):
        super().__init__()
        self.fields = dict(fields or RECORD_FIELDS)

    def format(self, record):
        record.message = record.getMessage()
        record.asctime = self.formatTime(record)
        entry = {key: getattr(record, attr, None) for key, attr in self.fields.items()}
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: str = None) -> logging.Logger:
    """
    Attach a single JSON console handler to the package root logger.

    Safe to call more than once; only the level is updated on later calls.
    """
    global _configured
    root = logging.getLogger(ROOT_LOGGER_NAME)
    level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()

    with _lock:
        if not _configured:
            handler = logging.StreamHandler()
            handler.setFormatter(JsonFormatter())
            root.addHandler(handler)
            root.propagate = False
            _configured = True
        root.setLevel(getattr(logging, level, logging.INFO))
    return root


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    if not _configured:
        configure_logging()
    return logging.getLogger(name)
