import logging
import os
from logging.handlers import RotatingFileHandler
from collections import deque
from typing import Deque, Dict, Any, List, Optional

from config.settings import LOG_DIR, LOG_LEVEL, RING_BUFFER_SIZE, RING_BUFFER_MIN_LEVEL


LOG_FILE = os.path.join(LOG_DIR, "shapegeom.log")


class RingBufferHandler(logging.Handler):
    """
    Keeps the most recent log records in memory for the /logs endpoint.

    Records logged with ``extra={"record_number": ...}`` keep that number so
    the messages for one shapefile record can be pulled back together.
    """

    def __init__(self, maxlen: int = 2000):
        super().__init__()
        self.buffer: Deque[Dict[str, Any]] = deque(maxlen=maxlen)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.buffer.append({
                "ts": record.created,
                "level": record.levelname,
                "name": record.name,
                "message": record.getMessage(),
                "lineno": record.lineno,
                "record_number": getattr(record, "record_number", None),
            })
        except Exception:
            self.handleError(record)

    def get_recent(self, limit: int = 500, record_number: Optional[int] = None) -> List[Dict[str, Any]]:
        entries = list(self.buffer)
        if record_number is not None:
            entries = [entry for entry in entries if entry["record_number"] == record_number]
        if limit <= 0:
            return entries
        return entries[-limit:]


_ring_handler: RingBufferHandler | None = None


def get_ring_handler() -> RingBufferHandler:
    global _ring_handler
    if _ring_handler is None:
        _ring_handler = RingBufferHandler(maxlen=RING_BUFFER_SIZE)
    return _ring_handler


def init_logging(log_file: str = LOG_FILE) -> None:
    os.makedirs(os.path.dirname(log_file), exist_ok=True)

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    root = logging.getLogger()
    # Preserve any level previously set by the app; otherwise, apply env level
    if root.level == logging.NOTSET:
        root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=5_000_000,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    ring = get_ring_handler()
    ring.setFormatter(fmt)
    ring.setLevel(getattr(logging, RING_BUFFER_MIN_LEVEL, logging.INFO))
    root.addHandler(ring)

    # Per-ring orientation logs are DEBUG; keep them out unless asked for
    if LOG_LEVEL != "DEBUG":
        logging.getLogger("pipelines.shapefile.geometry").setLevel(logging.INFO)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    # Keep uvicorn.error at INFO to see startup/errors
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
