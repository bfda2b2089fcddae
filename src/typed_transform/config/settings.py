"""Configuration management using environment variables with validation."""

import os
from typing import Any, Dict

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Engine Configuration
    DEFAULT_DIALECT: str = os.getenv("DEFAULT_DIALECT", "postgresql")

    # Batch Configuration
    BATCH_SIZE: int = int(os.getenv("BATCH_SIZE", "1000"))
    ON_ERROR: str = os.getenv("ON_ERROR", "skip")
    INCLUDE_WARNINGS: bool = os.getenv("INCLUDE_WARNINGS", "true").lower() == "true"

    # Logging Configuration
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json")

    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        upper_value = value.upper()
        if upper_value not in valid_levels:
            raise ValueError(f"Invalid LOG_LEVEL: {value}. Must be one of {valid_levels}")
        return upper_value

    @classmethod
    def validate_log_format(cls, value: str) -> str:
        """Validate log format."""
        valid_formats = ["json", "text", "console"]
        lower_value = value.lower()
        if lower_value not in valid_formats:
            raise ValueError(f"Invalid LOG_FORMAT: {value}. Must be one of {valid_formats}")
        return lower_value

    @classmethod
    def validate_dialect(cls, value: str) -> str:
        """Validate destination dialect."""
        valid_dialects = ["postgresql", "mysql", "sqlserver", "sqlite"]
        lower_value = value.lower()
        if lower_value not in valid_dialects:
            raise ValueError(
                f"Invalid DEFAULT_DIALECT: {value}. Must be one of {valid_dialects}"
            )
        return lower_value

    @classmethod
    def validate_on_error(cls, value: str) -> str:
        """Validate batch error policy."""
        valid_policies = ["skip", "raise"]
        lower_value = value.lower()
        if lower_value not in valid_policies:
            raise ValueError(f"Invalid ON_ERROR: {value}. Must be one of {valid_policies}")
        return lower_value

    def get_engine_config(self) -> Dict[str, Any]:
        """Get engine configuration as dictionary."""
        return {
            "default_dialect": self.validate_dialect(self.DEFAULT_DIALECT),
        }

    def get_batch_config(self) -> Dict[str, Any]:
        """Get batch configuration as dictionary."""
        return {
            "batch_size": self.BATCH_SIZE,
            "on_error": self.validate_on_error(self.ON_ERROR),
            "include_warnings": self.INCLUDE_WARNINGS,
        }

    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration as dictionary."""
        return {
            "level": self.validate_log_level(self.LOG_LEVEL),
            "format": self.validate_log_format(self.LOG_FORMAT),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert all settings to dictionary."""
        return {
            "engine": self.get_engine_config(),
            "batch": self.get_batch_config(),
            "logging": self.get_logging_config(),
        }


# Global settings instance
settings = Settings()
