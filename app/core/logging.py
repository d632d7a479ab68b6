import logging
import sys
from logging.config import dictConfig

ACCESS_FIELDS = (
    "client_addr",
    "request_id",
    "account_id",
    "user_id",
    "method",
    "path",
    "status_code",
    "process_time_ms",
)


class AccessDefaultsFilter(logging.Filter):
    """Fills access fields missing from a record so the formatter never fails."""

    def filter(self, record: logging.LogRecord) -> bool:
        for name in ACCESS_FIELDS:
            if not hasattr(record, name):
                setattr(record, name, "-")
        return True


def setup_logging(level: str = "INFO"):
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "access_defaults": {"()": AccessDefaultsFilter},
            },
            "formatters": {
                "default": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                },
                "access": {
                    "format": (
                        "%(asctime)s | ACCESS | %(request_id)s | "
                        "%(client_addr)s | account=%(account_id)s user=%(user_id)s | "
                        "%(method)s %(path)s | %(status_code)s | "
                        "%(process_time_ms)sms"
                    ),
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stdout,
                    "formatter": "default",
                },
                "access_console": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stdout,
                    "formatter": "access",
                    "filters": ["access_defaults"],
                },
            },
            "loggers": {
                # request_logging_middleware
                "access": {
                    "handlers": ["access_console"],
                    "level": "INFO",
                    "propagate": False,
                },
                # replaced by the access logger above
                "uvicorn.access": {
                    "level": "WARNING",
                },
                "sqlalchemy.engine": {
                    "level": "WARNING",
                },
            },
            "root": {
                "level": level,
                "handlers": ["console"],
            },
        }
    )
