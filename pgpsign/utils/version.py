"""Probe the installed GnuPG binary to pick a backend style."""

from __future__ import annotations

import logging
import re
import subprocess

logger = logging.getLogger(__name__)

# --pinentry-mode=loopback, which the GPG style relies on, appeared in 2.1.12.
MIN_GPG2_VERSION = (2, 1, 12)

_BANNER = re.compile(r"^gpg[^\n]*\s(\d+(?:\.\d+)*)", re.MULTILINE)


def engine_version(path: str = "gpg", *, timeout: float = 10.0) -> str | None:
    """Return the version reported by ``<path> --version``, or None."""
    try:
        result = subprocess.run(
            [path, "--version"],
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        logger.debug("Cannot run %s --version: %s", path, exc)
        return None
    if result.returncode != 0:
        return None

    match = _BANNER.search(result.stdout)
    if match is None:
        logger.warning("Cannot determine version of %s", path)
        return None
    return match.group(1)


def parse_version(version: str) -> tuple[int, ...]:
    """Turn ``"2.2.40"`` into ``(2, 2, 40)``."""
    return tuple(int(part) for part in version.split(".") if part.isdigit())


def is_gpg1(path: str = "gpg") -> bool:
    """Return True when ``path`` is a GnuPG 1.x binary."""
    version = engine_version(path)
    return version is not None and parse_version(version)[:1] == (1,)


def gpg2_is_new_enough(path: str = "gpg") -> bool:
    """Return True when ``path`` is GnuPG 2.1.12 or newer."""
    version = engine_version(path)
    if version is None:
        return False
    parsed = parse_version(version)
    return parsed[:1] == (2,) and parsed >= MIN_GPG2_VERSION


def detect_style(path: str = "gpg") -> str | None:
    """Return ``"GPG1"`` or ``"GPG"`` for ``path``, or None if unusable."""
    version = engine_version(path)
    if version is None:
        return None
    parsed = parse_version(version)
    if parsed[:1] == (1,):
        return "GPG1"
    if parsed >= MIN_GPG2_VERSION:
        return "GPG"
    return None
