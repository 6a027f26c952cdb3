"""ASCII armor handling for detached signatures.

A signature produced by GnuPG looks like::

    -----BEGIN PGP SIGNATURE-----
    Version: GnuPG v0.9.2 (SunOS)
    Comment: For info see http://www.gnupg.org

    iEYEARECAAYFAjbA/fsACgkQ+YXjQAr8dHYsMQCgpzOkRRopdW0nuiSNMB6Qx2Iw
    bw0AoMl82UxQEkh4uIcLSZMdY31Z8gtL
    =Dj7i
    -----END PGP SIGNATURE-----

Callers only ever see the body and checksum lines. The headers carry nothing
needed for verification, and the markers are re-added before the signature
is handed back to the engine.
"""

from __future__ import annotations

from pgpsign.errors import NoSignatureError

BEGIN_MARKER = "-----BEGIN PGP SIGNATURE-----"
END_MARKER = "-----END PGP SIGNATURE-----"


def extract_signature(output: str) -> str:
    """Return the armored body of the first signature block in ``output``.

    Raises:
        NoSignatureError: If no complete signature block is present.
    """
    lines = iter(output.splitlines())

    for line in lines:
        if BEGIN_MARKER in line:
            break
    else:
        raise NoSignatureError(
            "No signature returned by GnuPG; check that the configured "
            "executable exists and is GnuPG",
            output=output,
        )

    # Armor headers run up to the first blank line.
    for line in lines:
        if not line.strip():
            break

    body: list[str] = []
    for line in lines:
        if line.startswith(END_MARKER):
            return "\n".join(body)
        body.append(line)

    raise NoSignatureError("Truncated signature returned by GnuPG", output=output)


def armor_signature(body: str, version: str | None = None) -> str:
    """Wrap a bare signature body in armor markers for the engine."""
    if body.endswith("\n"):
        body = body[:-1]

    parts = [BEGIN_MARKER]
    if version:
        parts.append(f"Version: {version}")
    parts.extend(["", body, END_MARKER])
    return "\n".join(parts) + "\n"
