"""Logging setup for the service-order web app."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from config import Settings, get_settings

LOG_FILE_NAME = "service_orders.log"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s │ %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# HTTP client libraries log every request at INFO/DEBUG.
CHATTY_LOGGERS = ("urllib3", "httpx", "httpcore", "openai")


class PeeweeFilter(logging.Filter):
    """Hides peewee ``SELECT`` statements.

    peewee logs each query as an ``(sql, params)`` tuple.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        sql = getattr(record, "sql", None)
        if sql is None:
            sql = record.msg[0] if isinstance(record.msg, tuple) else record.getMessage()
        return not str(sql).lstrip().upper().startswith("SELECT")


def log_file_path(settings: Settings) -> Path:
    logs_dir = Path(settings.log_dir).expanduser()
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir / LOG_FILE_NAME


def _handlers(settings: Settings, level: int) -> list[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    file_handler = RotatingFileHandler(
        log_file_path(settings),
        maxBytes=2_000_000,  # 2 MB
        backupCount=3,
        encoding="utf-8",
    )
    handlers: list[logging.Handler] = [file_handler, logging.StreamHandler()]
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
    return handlers


def setup_logging(settings: Settings | None = None) -> None:
    """Send logs to the console and to ``service_orders.log`` in ``LOG_DIR``.

    ``DETAILED_LOGGING`` switches everything to DEBUG, including peewee
    ``SELECT`` statements and the HTTP client libraries.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level, logging.INFO)
    if settings.detailed_logging:
        level = logging.DEBUG

    logging.basicConfig(level=level, handlers=_handlers(settings, level), force=True)

    if settings.detailed_logging:
        return
    logging.getLogger("peewee").addFilter(PeeweeFilter())
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
