"""
Logging setup for augtools.

Log records from structlog and from plain stdlib loggers share one
processor chain and are rendered by a ``ProcessorFormatter``: coloured
console output with rich tracebacks, plus an optional rotating JSON file.

Environment variables (``<NAME>`` is the upper-cased logger name):

- ``<NAME>_LOG_LEVEL``: DEBUG, INFO, WARNING (default), ERROR or CRITICAL
- ``<NAME>_ENABLE_JSON_LOGGING``: ``1`` writes JSON logs to ``.augtools/logs``
- ``<NAME>_LOG_TIMEZONE``: pytz zone for timestamps, default ``US/Eastern``
"""

import json as jsonlib
import logging
import logging.config
import os
from datetime import datetime
from pathlib import Path
from typing import Dict, List

import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder
from structlog.typing import Processor

from augtools.loggers.processors import (
    CallPrettifier,
    GeometryPrettifier,
    PathPrettifier,
    ZonedTimeStamper,
)

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_TIMEZONE = "US/Eastern"

LOG_DIR_NAME = Path(".augtools/logs")
MAX_LOG_BYTES = 10 * 1024 * 1024


class LoggingManager:
    """
    Configure stdlib logging and structlog for one named logger.

    Examples
    --------
        >>> manager = LoggingManager(name="augtools")
        >>> logger = manager.get_logger()
        >>> logger.info("Resampled", image=image, domain_size=(128, 128))
    """

    def __init__(
        self,
        name: str,
        base_dir: Path | None = None,
    ) -> None:
        self.name = name
        self.base_dir = base_dir or Path.cwd()
        self.level = self.env_level
        self.timezone = self._env("LOG_TIMEZONE", DEFAULT_TIMEZONE)
        self.enable_json_logging = self._env("ENABLE_JSON_LOGGING", "0") == "1"
        self._initialize_logger()

    def _env(self, suffix: str, default: str) -> str:
        return os.environ.get(f"{self.name}_{suffix}".upper(), default)

    @property
    def env_level(self) -> str:
        return self._env("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

    @property
    def pre_chain(self) -> List[Processor]:
        return [
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.PositionalArgumentsFormatter(),
            CallsiteParameterAdder(
                [
                    CallsiteParameter.MODULE,
                    CallsiteParameter.FUNC_NAME,
                    CallsiteParameter.LINENO,
                ]
            ),
            PathPrettifier(base_dir=self.base_dir),
            GeometryPrettifier(),
            structlog.stdlib.ExtraAdder(),
            structlog.processors.StackInfoRenderer(),
        ]

    def _console_formatter(self) -> Dict:
        return {
            "()": structlog.stdlib.ProcessorFormatter,
            "processors": [
                ZonedTimeStamper(fmt="%H:%M:%S", timezone=self.timezone),
                CallPrettifier(concise=True),
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.dev.ConsoleRenderer(
                    colors=True,
                    sort_keys=False,
                    exception_formatter=structlog.dev.RichTracebackFormatter(
                        width=-1,
                        show_locals=False,
                    ),
                ),
            ],
            "foreign_pre_chain": self.pre_chain,
        }

    def _json_formatter(self) -> Dict:
        return {
            "()": structlog.stdlib.ProcessorFormatter,
            "processors": [
                ZonedTimeStamper(timezone=self.timezone),
                CallPrettifier(concise=False),
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.dict_tracebacks,
                structlog.processors.JSONRenderer(
                    serializer=jsonlib.dumps, indent=2
                ),
            ],
            "foreign_pre_chain": self.pre_chain,
        }

    def _json_handler(self) -> Dict:
        """Rotating file handler for a new timestamped log, linked from ``latest.log``."""
        log_dir = self.base_dir / LOG_DIR_NAME
        log_dir.mkdir(parents=True, exist_ok=True)
        logfile = log_dir / f"{self.name}_{datetime.now():%Y-%m-%d_%H-%M-%S}.log"

        latest = log_dir / "latest.log"
        if latest.exists() or latest.is_symlink():
            latest.unlink()
        latest.symlink_to(logfile.name, target_is_directory=False)

        return {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "json",
            "filename": logfile,
            "maxBytes": MAX_LOG_BYTES,
            "backupCount": 5,
        }

    @property
    def logging_config(self) -> Dict:
        """``logging.config.dictConfig`` settings for the current level."""
        handlers: Dict[str, Dict] = {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "console",
            },
        }
        if self.enable_json_logging:
            handlers["json"] = self._json_handler()

        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": self._console_formatter(),
                "json": self._json_formatter(),
            },
            "handlers": handlers,
            "loggers": {
                self.name: {
                    "handlers": list(handlers),
                    "level": self.level,
                    "propagate": False,
                },
            },
        }

    def _initialize_logger(self) -> None:
        logging.config.dictConfig(self.logging_config)
        structlog.configure(
            processors=[
                *self.pre_chain,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    def get_logger(self) -> structlog.stdlib.BoundLogger:
        return structlog.get_logger(self.name)

    def configure_logging(
        self, level: str = DEFAULT_LOG_LEVEL
    ) -> structlog.stdlib.BoundLogger:
        """
        Reconfigure logging at the given level.

        Raises
        ------
        ValueError
            If `level` is not a valid logging level name.
        """
        level = level.upper()
        if level not in VALID_LOG_LEVELS:
            msg = f"Invalid logging level: {level}"
            raise ValueError(msg)

        self.level = level
        self._initialize_logger()
        return self.get_logger()
