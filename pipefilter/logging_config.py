"""
Logging configuration for pipefilter with repeated deprecation warnings suppressed
"""

import logging
import logging.config
import threading
from typing import Any, Dict, Set


class RepeatedWarningFilter(logging.Filter):
    """Filter that lets each distinct deprecation message through only once."""

    def __init__(self, name: str = ""):
        super().__init__(name)
        self._seen: Set[str] = set()
        self._lock = threading.Lock()

    def filter(self, record: logging.LogRecord) -> bool:
        """Drop deprecation warnings that were already emitted."""
        if record.name != "pipefilter.deprecation":
            return True

        message = record.getMessage()
        with self._lock:
            if message in self._seen:
                return False  # Already reported
            self._seen.add(message)
        return True


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """Get logging configuration with repeated deprecation warnings suppressed."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "repeated_warning_filter": {
                "()": RepeatedWarningFilter
            }
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
            "deprecation": {
                "format": "%(levelname)s: %(message)s"
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stderr"
            },
            "deprecation": {
                "class": "logging.StreamHandler",
                "formatter": "deprecation",
                "stream": "ext://sys.stderr",
                "filters": ["repeated_warning_filter"]  # Apply filter to deprecation warnings
            }
        },
        "loggers": {
            "pipefilter": {
                "handlers": ["default"],
                "level": level,
                "propagate": False
            },
            "pipefilter.deprecation": {
                "handlers": ["deprecation"],
                "level": "WARNING",
                "propagate": False
            }
        },
        "root": {
            "level": level,
            "handlers": ["default"]
        }
    }


def setup_logging(level: str = "INFO") -> None:
    """Apply the pipefilter logging configuration."""
    logging.config.dictConfig(get_logging_config(level))
