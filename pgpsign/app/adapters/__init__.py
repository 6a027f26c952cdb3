"""Concrete adapters wiring application ports to built-in implementations."""

from __future__ import annotations

from .gnupg import GnuPGSigner

__all__ = [
    "GnuPGSigner",
]
