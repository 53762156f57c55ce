"""
Configuration management for the mappings bot.
Loads environment variables and provides configuration settings.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


@dataclass(frozen=True)
class Config:
    """Bot configuration settings."""

    # Discord
    DISCORD_TOKEN: str

    # Database (empty disables PostgreSQL storage)
    DATABASE_URL: str = ""

    # Commands
    COMMAND_PREFIX: str = "!"

    # Storage
    DATA_DIR: str = "data"
    MAPPINGS_DIR: str = "mappings"

    # Debug
    DEBUG: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            DISCORD_TOKEN=os.getenv("DISCORD_TOKEN", ""),
            DATABASE_URL=os.getenv("DATABASE_URL", ""),
            COMMAND_PREFIX=os.getenv("COMMAND_PREFIX", "!"),
            DATA_DIR=os.getenv("DATA_DIR", "data"),
            MAPPINGS_DIR=os.getenv("MAPPINGS_DIR", "mappings"),
            DEBUG=os.getenv("DEBUG", "false").lower() == "true",
        )

    def validate(self) -> None:
        """Validate required configuration."""
        if not self.DISCORD_TOKEN:
            raise ValueError("DISCORD_TOKEN is required")
        if not self.COMMAND_PREFIX or self.COMMAND_PREFIX != self.COMMAND_PREFIX.strip():
            raise ValueError("COMMAND_PREFIX must be non-empty and contain no surrounding whitespace")


# Global config instance
config = Config.from_env()
