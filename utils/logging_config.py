"""Логи Timely CRM: консоль и ротируемый файл ``timely.log`` в ``LOG_DIR``."""

import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler

from config import Settings, get_settings

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s │ %(message)s"


class PeeweeFilter(logging.Filter):
    """Скрывает SELECT-запросы peewee: чтения коллекций связей идут на каждый запрос."""

    def filter(self, record: logging.LogRecord) -> bool:
        sql = getattr(record, "sql", None)
        text = sql if sql is not None else record.getMessage()
        return not str(text).lstrip().startswith("SELECT")


def setup_logging(settings: Settings | None = None) -> None:
    """Настроить корневой логгер по ``LOG_LEVEL`` и ``DETAILED_LOGGING``.

    В подробном режиме уровень DEBUG и SQL-запросы peewee пишутся полностью.
    """
    settings = settings or get_settings()
    logs_dir = Path(settings.log_dir).expanduser()
    logs_dir.mkdir(parents=True, exist_ok=True)

    level = logging.DEBUG if settings.detailed_logging else logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        level = logging.INFO

    fmt = logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            logs_dir / "timely.log",
            maxBytes=2_000_000,
            backupCount=3,
            encoding="utf-8",
        ),
        logging.StreamHandler(),
    ]
    for handler in handlers:
        handler.setFormatter(fmt)
        handler.setLevel(level)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    # httpx пишет каждый запрос синхронизации на INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

    if not settings.detailed_logging:
        logging.getLogger("peewee").addFilter(PeeweeFilter())
