"""Signer port interface for detached OpenPGP signatures."""

from pathlib import Path
from typing import Any, Literal, Protocol

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pgpsign.utils.status import Verdict

BackendStyle = Literal["GPG", "GPG1"]


class BackendConfig(BaseModel):
    """Immutable description of the OpenPGP engine a signer talks to."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str = Field(
        default="",
        description="Engine executable (defaults to the lower-cased style: gpg or gpg1)",
    )
    home: Path | None = Field(
        default=None,
        description="GnuPG home directory holding the key rings (passed as --homedir)",
    )
    style: BackendStyle = Field(
        default="GPG",
        description="Command-line dialect: GPG (GnuPG 2.1.12+) or GPG1 (GnuPG 1.x)",
    )
    tmpdir: Path | None = Field(
        default=None,
        description="Directory for verification temp files (defaults to the system temp dir)",
    )
    munge: bool = Field(
        default=False,
        description="Strip trailing spaces from every line before signing or verifying",
    )

    @model_validator(mode="before")
    @classmethod
    def _default_path(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("path"):
            data = dict(data)
            data["path"] = str(data.get("style") or "GPG").lower()
        return data


class SignerPort(Protocol):
    """Port interface for detached-signature operations.

    Adapters: GnuPG subprocess (GPG and GPG1 styles).

    Side effects: spawns the engine; verification writes short-lived temp files.
    """

    def sign(self, keyid: str, passphrase: str, *sources: Any) -> str:
        """Create a detached signature.

        Args:
            keyid: Key to sign with
            passphrase: Passphrase for that key
            sources: Data to sign (bytes, str, streams, callables, iterables)

        Returns:
            Armored signature body without markers or headers

        Raises:
            PGPSignError: Any failure; a passphrase too long for the pipe
                raises the PassphraseError subclass
        """
        ...

    def verify(self, signature: str, *sources: Any, version: str | None = None) -> str:
        """Verify a detached signature.

        Returns:
            Signer's user ID for a good signature, empty string for a bad one
        """
        ...

    def check(self, signature: str, *sources: Any, version: str | None = None) -> Verdict:
        """Verify a detached signature, returning the full verdict."""
        ...
