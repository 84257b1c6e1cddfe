"""Centralized Logging Management for CargoLink

Root logger setup for the client: coloured console output, rotating log
files and redaction of bearer credentials from every record.
"""

import logging
import logging.handlers
import re
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from .config_manager import LoggingConfig


HANDLER_PREFIX = "cargolink."
BEARER_PATTERN = re.compile(r"(Bearer\s+)[A-Za-z0-9\-._~+/]+=*", re.IGNORECASE)


class CredentialRedactionFilter(logging.Filter):
    """Masks bearer tokens before a record reaches any handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = BEARER_PATTERN.sub(r"\1[REDACTED]", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


class ColoredFormatter(logging.Formatter):
    """Console formatter that colours the level name on terminals."""

    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[1;31m',
    }
    RESET = '\033[0m'

    def __init__(self, fmt: str, datefmt: Optional[str] = None, use_color: bool = True):
        super().__init__(fmt, datefmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_color:
            return super().format(record)
        original = record.levelname
        color = self.LEVEL_COLORS.get(record.levelno, '')
        record.levelname = f"{color}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


class LoggingManager:
    """Owns the CargoLink handlers on the root logger (one instance per process)."""

    _instance: Optional['LoggingManager'] = None
    _initialized: bool = False

    def __new__(cls, *args, **kwargs) -> 'LoggingManager':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(
        self,
        log_dir: Optional[Path] = None,
        console_level: str = "INFO",
        log_to_file: bool = True,
        log_to_console: bool = True
    ):
        """Attach the CargoLink handlers; later instantiations are no-ops.

        Args:
            log_dir: Directory for the rotating log files
            console_level: Threshold of the console handler
            log_to_file: Write cargolink_<date>.log and the errors-only file
            log_to_console: Write to stdout
        """
        if self._initialized:
            return

        self.log_dir = Path(log_dir) if log_dir else Path("logs")
        self.loggers: Dict[str, logging.Logger] = {}
        self.redaction_filter = CredentialRedactionFilter()
        self._install_handlers(self._to_level(console_level), log_to_file, log_to_console)
        self._initialized = True

    @classmethod
    def from_config(cls, config: LoggingConfig, console_level: Optional[str] = None) -> 'LoggingManager':
        return cls(
            log_dir=Path(config.log_dir).expanduser(),
            console_level=console_level or config.level,
            log_to_file=config.log_to_file,
            log_to_console=config.log_to_console
        )

    def _install_handlers(self, console_level: int, log_to_file: bool, log_to_console: bool):
        root_logger = logging.getLogger()
        root_logger.setLevel(logging.DEBUG)
        self._remove_own_handlers(root_logger)

        if log_to_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.set_name(HANDLER_PREFIX + "console")
            console_handler.setLevel(console_level)
            console_handler.setFormatter(ColoredFormatter(
                '%(asctime)s %(levelname)-8s %(name)s: %(message)s',
                datefmt='%H:%M:%S',
                use_color=sys.stdout.isatty()
            ))
            self._add(root_logger, console_handler)

        if not log_to_file:
            return

        self.log_dir.mkdir(parents=True, exist_ok=True)
        file_formatter = logging.Formatter(
            '%(asctime)s %(levelname)-8s [%(threadName)s] %(name)s.%(funcName)s: %(message)s'
        )
        stamp = datetime.now().strftime('%Y%m%d')

        # (file name, level, max bytes, backups)
        for suffix, level, max_bytes, backups in (
            ("", logging.DEBUG, 10 * 1024 * 1024, 5),
            ("_errors", logging.ERROR, 5 * 1024 * 1024, 10),
        ):
            handler = logging.handlers.RotatingFileHandler(
                self.log_dir / f"cargolink{suffix}_{stamp}.log",
                maxBytes=max_bytes,
                backupCount=backups,
                encoding="utf-8"
            )
            handler.set_name(f"{HANDLER_PREFIX}file{suffix}")
            handler.setLevel(level)
            handler.setFormatter(file_formatter)
            self._add(root_logger, handler)

    def _add(self, root_logger: logging.Logger, handler: logging.Handler):
        handler.addFilter(self.redaction_filter)
        root_logger.addHandler(handler)

    @staticmethod
    def _remove_own_handlers(root_logger: logging.Logger):
        for handler in list(root_logger.handlers):
            if (handler.get_name() or "").startswith(HANDLER_PREFIX):
                root_logger.removeHandler(handler)
                handler.close()

    @staticmethod
    def _to_level(level: str) -> int:
        numeric_level = getattr(logging, level.upper(), None)
        if not isinstance(numeric_level, int):
            raise ValueError(f'Invalid log level: {level}')
        return numeric_level

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Logger for a module, configuring defaults on first use."""
        manager = cls()
        if name not in manager.loggers:
            manager.loggers[name] = logging.getLogger(name)
        return manager.loggers[name]

    def set_log_level(self, level: str):
        """Change the console threshold (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""
        numeric_level = self._to_level(level)
        for handler in logging.getLogger().handlers:
            if handler.get_name() == HANDLER_PREFIX + "console":
                handler.setLevel(numeric_level)

    @classmethod
    def reset(cls):
        """Detach the CargoLink handlers and forget the singleton."""
        cls._remove_own_handlers(logging.getLogger())
        cls._instance = None
        cls._initialized = False
