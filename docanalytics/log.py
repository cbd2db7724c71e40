# docanalytics/log.py
import json
import logging
from datetime import datetime, timezone
from typing import Any

from docanalytics.config import LOG_LEVEL

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """
    Attach a single console handler to the package logger.
    Safe to call more than once (create_app runs per test session).
    """
    root = logging.getLogger("docanalytics")
    root.setLevel(level.upper())
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)


def _payload(kind: str, name: str, data: dict[str, Any]) -> str:
    body = {"timestamp": datetime.now(timezone.utc).isoformat(), kind: name}
    body.update(data)
    return json.dumps(body, default=str)


def log_step(logger: logging.Logger, step: str, **data: Any) -> None:
    logger.info("STEP: %s", _payload("step", step, data))


def log_error(logger: logging.Logger, error_type: str, **data: Any) -> None:
    logger.error("ERROR: %s", _payload("error", error_type, data))
