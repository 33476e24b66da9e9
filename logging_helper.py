import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

RED = "\033[91m"
YELLOW = "\033[93m"
GREEN = "\033[92m"
RESET = "\033[0m"
WHITE = "\033[97m"

LOGGER_NAME = "petclinic"


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def setup_logging(settings) -> logging.Logger:
    """
    Configure the `petclinic` logger for JSON-lines output.

    - FLASK_ENV=testing -> RotatingFileHandler at settings.log_path, so a test
      process can read the events back from disk
    - otherwise         -> StreamHandler (stderr)

    Handlers are cleared first so repeated create_app() calls reconfigure
    cleanly instead of stacking handlers.
    """
    logger = get_logger()
    logger.setLevel(logging.INFO)
    logger.propagate = False

    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    log_path = None
    if settings.testing:
        log_path = Path(settings.log_path).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            str(log_path),
            maxBytes=2_000_000,
            backupCount=2,
            encoding="utf-8",
        )
    else:
        handler = logging.StreamHandler()

    handler.setFormatter(logging.Formatter("%(message)s"))  # JSON lines only
    logger.addHandler(handler)

    log_event("logger_ready", env=settings.env or "unknown",
              log_path=str(log_path) if log_path else None)
    return logger


def log_event(event: str, level: int = logging.INFO, **fields) -> None:
    payload = {"event": event}
    payload.update(fields)
    get_logger().log(level, json.dumps(payload, default=str, ensure_ascii=False))


def log_status(status, message, extra=""):
    status = status.lower()
    color = WHITE  # default

    if status == "error":
        color = RED
    elif status == "warning":
        color = YELLOW
    elif status == "good":
        color = GREEN

    logging.getLogger("petclinic.console").info(f"{color}{message}{extra}{RESET}")
