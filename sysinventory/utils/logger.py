"""
SysInventory Logging System
Singleton logger: warnings to stderr (stdout carries the report), full history to a UTF-8 file.
"""
import logging
import sys
from typing import Optional


class Logger:
    """Singleton logger with console (stderr) and optional file handlers."""

    _instance = None

    def __new__(cls, log_file: Optional[str] = "sysinventory.log", level: str = "INFO"):
        if cls._instance is None:
            cls._instance = super(Logger, cls).__new__(cls)
            cls._instance._initialize_logger(log_file, level)
        return cls._instance

    def _initialize_logger(self, log_file: Optional[str], level: str) -> None:
        """Configure logger with console and file handlers."""
        self.logger = logging.getLogger("sysinventory")
        self.logger.setLevel(getattr(logging, level, logging.INFO))

        if self.logger.hasHandlers():
            self.logger.handlers.clear()

        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if log_file:
            try:
                file_handler = logging.FileHandler(log_file, encoding='utf-8')
                file_handler.setFormatter(formatter)
                self.logger.addHandler(file_handler)
            except PermissionError:
                pass

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton so the next call reconfigures handlers."""
        if cls._instance is not None:
            for handler in list(cls._instance.logger.handlers):
                handler.close()
                cls._instance.logger.removeHandler(handler)
        cls._instance = None

    def debug(self, msg: str) -> None:
        self.logger.debug(msg)

    def info(self, msg: str) -> None:
        self.logger.info(msg)

    def warning(self, msg: str) -> None:
        self.logger.warning(msg)

    def error(self, msg: str) -> None:
        self.logger.error(msg)

    def success(self, msg: str) -> None:
        self.logger.info(f"[SUCCESS] {msg}")
