"""Configuration management for Impact Mapper.

Loads environment variables and provides centralized config access.
"""
import os
from pathlib import Path
from typing import List
from dotenv import load_dotenv

__version__ = "1.0.0"

DEFAULT_D3_URL = "https://d3js.org/d3.v7.min.js"
DEFAULT_MAX_REFERENCES = 50


class Config:
    """Configuration loader with environment variable support."""

    def __init__(self, env_path: str | Path | None = None):
        """Initialize config by loading a .env file.

        Args:
            env_path: Explicit .env location; defaults to the working directory
        """
        if env_path is None:
            env_path = Path.cwd() / ".env"
        load_dotenv(env_path)

    @property
    def extra_exclude_dirs(self) -> List[str]:
        """Directory names skipped during discovery on top of the defaults.

        Read from IMPACT_MAPPER_EXCLUDE_DIRS as a comma-separated list.

        Returns:
            List of directory names (may be empty)
        """
        raw = os.getenv("IMPACT_MAPPER_EXCLUDE_DIRS", "")
        return [part.strip() for part in raw.split(",") if part.strip()]

    @property
    def d3_url(self) -> str:
        """Script URL embedded into exported HTML graphs."""
        return os.getenv("IMPACT_MAPPER_D3_URL", DEFAULT_D3_URL)

    @property
    def max_references(self) -> int:
        """Reference rows printed per module in the terminal report.

        Falls back to the default when the variable is missing or not a
        positive integer.
        """
        raw = os.getenv("IMPACT_MAPPER_MAX_REFERENCES")
        if raw is None:
            return DEFAULT_MAX_REFERENCES
        try:
            value = int(raw)
        except ValueError:
            return DEFAULT_MAX_REFERENCES
        return value if value > 0 else DEFAULT_MAX_REFERENCES


# Singleton instance
_config = None


def get_config() -> Config:
    """Get or create singleton Config instance.

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config
