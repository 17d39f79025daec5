"""
Configuration management for the transit catalogue routing engine
"""

import logging
import os
from typing import Optional

from .exceptions import InvalidConfigurationError


class Config:
    """Configuration class for the transit catalogue routing engine"""

    def __init__(self):
        # Input document served by the HTTP API
        self.input_path: Optional[str] = os.getenv('CATALOGUE_INPUT')

        # JSON output
        self.json_indent: int = int(os.getenv('JSON_INDENT', '2'))

        # API configuration
        self.host: str = os.getenv('HOST', '0.0.0.0')
        self.port: int = int(os.getenv('PORT', '5000'))
        self.debug: bool = os.getenv('DEBUG', 'False').lower() == 'true'

        # Logging
        self.log_level: str = os.getenv('LOG_LEVEL', 'INFO')
        self.log_file: Optional[str] = os.getenv('LOG_FILE')

    def validate(self):
        """Validate configuration"""
        if self.input_path is not None and not os.path.exists(self.input_path):
            raise InvalidConfigurationError(f"Input document does not exist: {self.input_path}")

        if not 0 < self.port < 65536:
            raise InvalidConfigurationError(f"Port out of range: {self.port}")

        if self.json_indent < 0:
            raise InvalidConfigurationError("JSON indent must not be negative")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise InvalidConfigurationError(f"Unknown log level: {self.log_level}")

    def get_api_config(self) -> dict:
        """Get configuration for Flask API"""
        return {
            'host': self.host,
            'port': self.port,
            'debug': self.debug
        }


# Global configuration instance
config = Config()
