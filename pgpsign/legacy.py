"""Function-style API driven by module-level settings.

This is the historical interface: set the module globals, call
:func:`pgp_sign` or :func:`pgp_verify`, and check :func:`pgp_error` when they
return None. Each call builds a one-shot :class:`BackendConfig` from the
globals and delegates to :class:`GnuPGSigner`. New code should use
``GnuPGSigner`` directly.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import ValidationError

from pgpsign.app.adapters.gnupg import GnuPGSigner
from pgpsign.app.ports.signer import BackendConfig
from pgpsign.errors import PGPSignError

# Strip trailing whitespace from each line before signing or verifying.
MUNGE: bool = False

# Paths to the signing and verifying binaries. These used to be different
# programs; both default to the style's binary.
PGPS: str | None = None
PGPV: str | None = None

# Key-ring directory; GnuPG falls back to $GNUPGHOME or ~/.gnupg when unset.
PGPPATH: str | Path | None = None

# Backend style, "GPG" or "GPG1".
PGPSTYLE: str | None = None

# Directory for temporary files.
TMPDIR: str | Path | None = None

# Version string returned alongside signatures. GnuPG no longer emits a
# Version header, so this is a fixed value.
VERSION = "GnuPG"

_errors: list[str] = []


def _config(path: str | None) -> BackendConfig:
    return BackendConfig(
        path=path or "",
        home=PGPPATH,
        style=PGPSTYLE or "GPG",
        tmpdir=TMPDIR,
        munge=MUNGE,
    )


def _record(exc: Exception) -> None:
    _errors[:] = str(exc).splitlines()


def pgp_sign(keyid: str, passphrase: str, *sources: Any) -> tuple[str, str] | None:
    """Sign ``sources``, returning ``(signature, "GnuPG")`` or None on error."""
    _errors.clear()
    try:
        signature = GnuPGSigner(_config(PGPS)).sign(keyid, passphrase, *sources)
    except (PGPSignError, ValidationError) as exc:
        _record(exc)
        return None
    return signature, VERSION


def pgp_verify(signature: str, version: str | None, *sources: Any) -> str | None:
    """Verify ``signature`` over ``sources``.

    ``version`` is whatever :func:`pgp_sign` returned with the signature; it
    is accepted for compatibility and does not affect verification.

    Returns:
        The signer's user ID, an empty string for a bad signature, or None
        on error (see :func:`pgp_error`).
    """
    _errors.clear()
    try:
        return GnuPGSigner(_config(PGPV)).verify(signature, *sources)
    except (PGPSignError, ValidationError) as exc:
        _record(exc)
        return None


def pgp_error_lines() -> list[str]:
    """Errors from the previous call, one newline-terminated line each."""
    return [f"{line}\n" for line in _errors]


def pgp_error() -> str:
    """Errors from the previous call as one block ("" if it succeeded)."""
    return "".join(pgp_error_lines())
