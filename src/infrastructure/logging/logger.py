"""Logging helpers for the site ledger.

The module exposes a fluent ``LoggerBuilder`` that writes daily log files
under ``<project root>/logs/<subdir>/`` and optionally mirrors records to the
console, plus two process-wide singletons:

* ``AppLogger`` for operational messages (recomputes, failures);
* ``UsageLogger`` for the audit trail of ledger mutations.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable

from src.utils.utils import get_project_root

_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


class LoggerBuilder:
    """Fluent builder for file and console loggers."""

    def __init__(self) -> None:
        self._name = "app"
        self._subdir = "app"
        self._prefix = "app_logs"
        self._console = True
        self._level = logging.INFO
        self._formatter_factory: Callable[[], logging.Formatter] = (
            LoggerBuilder._default_formatter
        )
        self._file_handler_factory = LoggerBuilder._default_file_handler
        self._console_handler_factory = (
            LoggerBuilder._default_console_handler
        )

    def name(self, name: str) -> "LoggerBuilder":
        self._name = name
        return self

    def subdir(self, subdir: str) -> "LoggerBuilder":
        self._subdir = subdir
        return self

    def prefix(self, prefix: str) -> "LoggerBuilder":
        self._prefix = prefix
        return self

    def console(self, enabled: bool) -> "LoggerBuilder":
        self._console = enabled
        return self

    def level(self, level: int) -> "LoggerBuilder":
        self._level = level
        return self

    def formatter(
        self,
        factory: Callable[[], logging.Formatter],
    ) -> "LoggerBuilder":
        self._formatter_factory = factory
        return self

    def file_handler(
        self,
        factory: Callable[[Path, logging.Formatter], logging.Handler],
    ) -> "LoggerBuilder":
        self._file_handler_factory = factory
        return self

    def console_handler(
        self,
        factory: Callable[[logging.Formatter], logging.Handler],
    ) -> "LoggerBuilder":
        self._console_handler_factory = factory
        return self

    def build(self) -> logging.Logger:
        """Create or reuse the configured logger.

        Handlers are attached only once per logger name, so building the
        same logger twice returns the existing instance untouched.

        Returns:
            logging.Logger: Configured standard library logger.
        """
        logger = logging.getLogger(self._name)
        logger.setLevel(self._level)
        if logger.handlers:
            return logger

        fmt = self._formatter_factory()
        log_dir = get_project_root() / "logs" / self._subdir
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / f"{self._today_stamp()}_{self._prefix}.log"
        logger.addHandler(self._file_handler_factory(log_path, fmt))
        if self._console:
            logger.addHandler(self._console_handler_factory(fmt))
        logger.propagate = False
        return logger

    @staticmethod
    def _today_stamp() -> str:
        return datetime.now().strftime("%Y%m%d")

    @staticmethod
    def _default_formatter() -> logging.Formatter:
        return logging.Formatter(_DEFAULT_FORMAT, datefmt=_DEFAULT_DATEFMT)

    @staticmethod
    def _default_file_handler(
        path: Path,
        fmt: logging.Formatter,
    ) -> logging.Handler:
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setLevel(logging.INFO)
        handler.setFormatter(fmt)
        return handler

    @staticmethod
    def _default_console_handler(fmt: logging.Formatter) -> logging.Handler:
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)
        handler.setFormatter(fmt)
        return handler


class Logger:
    """Singleton wrapper delegating to a built ``logging.Logger``."""

    _instance = None
    _subdir = "app"
    _prefix = "app_logs"

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._initialized = False
            cls._instance = instance
        return cls._instance

    def __init__(self, name: str = "app") -> None:
        if self._initialized:
            return
        self.logger = (
            LoggerBuilder()
            .name(name)
            .subdir(self._subdir)
            .prefix(self._prefix)
            .build()
        )
        self._initialized = True

    def info(self, msg: str) -> None:
        self.logger.info(msg)

    def warning(self, msg: str) -> None:
        self.logger.warning(msg)

    def error(self, msg: str) -> None:
        self.logger.error(msg)

    def debug(self, msg: str) -> None:
        self.logger.debug(msg)

    def critical(self, msg: str) -> None:
        self.logger.critical(msg)


class AppLogger(Logger):
    """Operational logger for the ledger services."""

    _instance = None
    _subdir = "app"
    _prefix = "app_logs"


class UsageLogger(Logger):
    """Audit logger recording who changed which site's books."""

    _instance = None
    _subdir = "usage"
    _prefix = "usage_logs"


def get_app_logger() -> AppLogger:
    """Return the process-wide operational logger."""
    return AppLogger("site_ledger.app")


def get_usage_logger() -> UsageLogger:
    """Return the process-wide audit logger."""
    return UsageLogger("site_ledger.usage")


__all__ = [
    "LoggerBuilder",
    "Logger",
    "AppLogger",
    "UsageLogger",
    "get_app_logger",
    "get_usage_logger",
]
