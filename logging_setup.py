import logging
import sys
from pathlib import Path

# Modules of this service; everything else is treated as third-party.
_APP_LOGGERS = (
    "todo_server",
    "todo_store",
    "claude_client",
    "slack_notifier",
    "summary_pipeline",
    "database",
    "uvicorn",
)


class _ThirdPartyNoiseFilter(logging.Filter):
    """
    Keep the console readable:
    - our own modules and uvicorn pass through at the configured level
    - httpx/anthropic/urllib3/sqlalchemy only at WARNING and above
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "__main__" or record.name.startswith(_APP_LOGGERS):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: str | int = logging.INFO, log_file: str | Path | None = None) -> None:
    """
    Configure the root logger with a stderr handler and, optionally, a file handler.

    Call once, before the server starts handling requests.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setFormatter(fmt)
    ch.addFilter(_ThirdPartyNoiseFilter())
    root.addHandler(ch)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(path), encoding="utf-8")
        fh.setFormatter(fmt)
        root.addHandler(fh)

    logging.captureWarnings(True)


def ensure_logging(level: str | int = logging.INFO, log_file: str | Path | None = None) -> bool:
    """
    Configure logging unless the host process already did.

    `uvicorn todo_server:app` leaves the root logger bare, so the app sets it up
    on startup; returns True when this call installed the handlers.
    """
    if logging.getLogger().handlers:
        return False
    setup_logging(level, log_file)
    return True
