"""
Logging configuration for the transit catalogue routing engine
"""

import logging
import os
import sys
from typing import Optional

from .config import config


def resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


class CatalogueLogger:
    """Centralized logging for the transit catalogue routing engine"""

    def __init__(self, name: str = "transitrouting", level: int = logging.INFO,
                 log_file: Optional[str] = None):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)

        # Prevent duplicate handlers
        if not any(not isinstance(h, logging.NullHandler) for h in self.logger.handlers):
            self._setup_handlers(log_file)

    def _setup_handlers(self, log_file: Optional[str]):
        """Setup console and optional file handlers"""
        # Console handler; stdout carries CLI output
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(self.logger.level)
        console_format = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        console_handler.setFormatter(console_format)
        self.logger.addHandler(console_handler)

        if log_file:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.DEBUG)
            file_format = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
            )
            file_handler.setFormatter(file_format)
            self.logger.addHandler(file_handler)

    def set_level(self, level: int):
        self.logger.setLevel(level)
        for handler in self.logger.handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                handler.setLevel(level)

    def info(self, message: str):
        """Log info message"""
        self.logger.info(message)

    def debug(self, message: str):
        """Log debug message"""
        self.logger.debug(message)

    def warning(self, message: str):
        """Log warning message"""
        self.logger.warning(message)

    def error(self, message: str):
        """Log error message"""
        self.logger.error(message)

    def critical(self, message: str):
        """Log critical message"""
        self.logger.critical(message)

    def log_route_request(self, origin: str, destination: str, duration_ms: float, success: bool):
        """Log route request metrics"""
        self.info(f"Route request: {origin} -> {destination}, "
                  f"duration={duration_ms:.2f}ms, success={success}")

    def log_stat_request(self, request_id: int, request_type: str, duration_ms: float, success: bool):
        """Log stat request metrics"""
        self.debug(f"Stat request #{request_id}: type={request_type}, "
                   f"duration={duration_ms:.2f}ms, success={success}")


# Global logger instance
logger = CatalogueLogger(level=resolve_level(config.log_level), log_file=config.log_file)
