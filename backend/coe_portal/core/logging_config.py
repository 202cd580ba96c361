# coe_portal/core/logging_config.py
import logging
import logging.config

from coe_portal.config import settings


def setup_logging() -> None:
    """
    Configure console logging for the `coe_portal` namespace and uvicorn.
    Level comes from LOG_LEVEL (default INFO).
    """
    level = settings.log_level.upper()
    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "simple": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "simple",
                "level": level,
                "stream": "ext://sys.stdout",
            }
        },
        "loggers": {
            "coe_portal": {
                "level": level,
                "handlers": ["console"],
                "propagate": False,
            },
            "uvicorn": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
        },
        "root": {
            "level": "WARNING",
            "handlers": ["console"],
        },
    }

    logging.config.dictConfig(logging_config)
    logging.getLogger("coe_portal").info("Logging initialized (level=%s)", level)
