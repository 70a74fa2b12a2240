"""Default values for catalogprep."""

from enum import IntEnum


class EXITCODES(IntEnum):
    """Exit codes for catalogprep."""

    SUCCESS = 0
    """Successful execution."""
    ERROR = 1
    """General unspecified error."""
    CONFIGURATION_ERROR = 2
    """An error in the configuration."""
    PIPELINE_ERROR = 3
    """An error during record processing."""


DEFAULT_CONFIG_LOCATION = "/etc/catalogprep/catalogprep.yml"
DEFAULT_LOG_FORMAT = "%(asctime)-15s %(threadName)-12s %(name)-10s %(levelname)-8s: %(message)s"
DEFAULT_LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_HANDOFF_CAPACITY = 0
DEFAULT_METRICS_PORT = 8000
DEFAULT_STOP_TIMEOUT = 5.0

# dictconfig as described in
# https://docs.python.org/3/library/logging.config.html#configuration-dictionary-schema
DEFAULT_LOG_CONFIG: dict = {
    "version": 1,
    "formatters": {
        "catalogprep": {
            "class": "catalogprep.util.logging.CatalogprepFormatter",
            "format": DEFAULT_LOG_FORMAT,
            "datefmt": DEFAULT_LOG_DATE_FORMAT,
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "catalogprep",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "root": {"level": "INFO", "handlers": ["console"]},
        "Handoff": {"level": "INFO"},
    },
    "filters": {},
    "disable_existing_loggers": False,
}
