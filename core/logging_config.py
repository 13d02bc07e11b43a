import logging.config
import structlog
from pythonjsonlogger import jsonlogger
import coloredlogs

from core.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

CONSOLE_FIELD_STYLES = {
    "asctime": {"color": "green"},
    "levelname": {"bold": True, "color": "cyan"},
    "name": {"color": "blue"},
}

CONSOLE_LEVEL_STYLES = {
    "debug": {"color": "blue"},
    "info": {"color": "green"},
    "warning": {"color": "yellow"},
    "error": {"color": "red"},
    "critical": {"bold": True, "color": "red"},
}

# Noisy libraries kept at WARNING unless asked for
QUIET_LOGGERS = ("uvicorn.access", "httpx")


def build_logging_config(json_logs: bool, level: str, sql_echo: bool = False) -> dict:
    """dictConfig for the root logger; one handler, picked by `json_logs`"""
    handler = "json" if json_logs else "console"
    loggers = {
        "": {"handlers": [handler], "level": level.upper()},
        "sqlalchemy.engine": {"level": "INFO" if sql_echo else "WARNING"},
    }
    loggers.update({name: {"level": "WARNING"} for name in QUIET_LOGGERS})

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": jsonlogger.JsonFormatter,
                "fmt": LOG_FORMAT,
                "rename_fields": {"levelname": "level", "name": "logger"},
            },
            "colored": {
                "()": coloredlogs.ColoredFormatter,
                "fmt": LOG_FORMAT,
                "field_styles": CONSOLE_FIELD_STYLES,
                "level_styles": CONSOLE_LEVEL_STYLES,
            },
        },
        "handlers": {
            handler: {
                "class": "logging.StreamHandler",
                "formatter": "json" if json_logs else "colored",
            },
        },
        "loggers": loggers,
    }


def setup_logging(json_logs: bool | None = None, level: str | None = None):
    settings = get_settings()
    if json_logs is None:
        json_logs = settings.LOG_JSON
    logging.config.dictConfig(
        build_logging_config(json_logs, level or settings.LOG_LEVEL, settings.SQL_ECHO)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            # event becomes the message, bound keys travel as `extra`
            structlog.stdlib.render_to_log_kwargs,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
