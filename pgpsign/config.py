"""Configuration management with Pydantic settings."""

import logging
import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from pgpsign.app.ports.signer import BackendConfig


def get_gnupg_home() -> Path:
    """Get the GnuPG home directory, defaulting to ~/.gnupg."""
    gnupg_home = os.getenv("GNUPGHOME")
    if gnupg_home:
        return Path(gnupg_home)
    return Path.home() / ".gnupg"


class Settings(BaseSettings):
    """pgpsign configuration settings.

    Precedence: CLI flag > environment variable > .env file > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="PGPSIGN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Engine selection
    path: str | None = Field(
        default=None,
        description="Path to the GnuPG binary (defaults to gpg or gpg1 depending on style)",
    )

    style: Literal["GPG", "GPG1"] = Field(
        default="GPG",
        description="Backend style: GPG for GnuPG 2.1.12+, GPG1 for GnuPG 1.x",
    )

    # Key rings and scratch space
    home: Path | None = Field(
        default=None,
        description="GnuPG home directory (defaults to GNUPGHOME or ~/.gnupg)",
    )

    tmpdir: Path | None = Field(
        default=None,
        description="Directory for verification temp files (defaults to the system temp dir)",
    )

    # Data handling
    munge: bool = Field(
        default=False,
        description="Strip trailing whitespace from each line before signing or verifying",
    )

    log_level: str = Field(
        default="WARNING",
        description="Logging level for pgpsign loggers",
    )

    def get_home(self) -> Path:
        """Return the key-ring directory the engine will use."""
        if self.home is not None:
            return self.home
        return get_gnupg_home()

    def get_log_level(self) -> int:
        """Return ``log_level`` as a :mod:`logging` level number."""
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.WARNING

    def backend_config(self) -> BackendConfig:
        """Freeze the current settings into a signer configuration."""
        return BackendConfig(
            path=self.path or "",
            home=self.home,
            style=self.style,
            tmpdir=self.tmpdir,
            munge=self.munge,
        )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
