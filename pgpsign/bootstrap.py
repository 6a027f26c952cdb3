"""Application bootstrap wiring settings into the signer adapter."""

from __future__ import annotations

import logging

from pgpsign.app.adapters import GnuPGSigner
from pgpsign.config import Settings, get_settings


def configure_logging(settings: Settings | None = None, *, verbose: bool = False) -> None:
    """Route pgpsign log records to stderr at the configured level."""
    settings = settings or get_settings()
    level = logging.DEBUG if verbose else settings.get_log_level()
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("pgpsign").setLevel(level)


def bootstrap_signer(settings: Settings | None = None) -> GnuPGSigner:
    """Create a signer from ``settings`` (the global settings by default)."""
    settings = settings or get_settings()
    return GnuPGSigner(settings.backend_config())
