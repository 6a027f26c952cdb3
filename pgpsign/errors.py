"""Exceptions raised by signing and verification operations."""

from __future__ import annotations


class PGPSignError(RuntimeError):
    """Base class for failures talking to the OpenPGP engine.

    Carries the captured engine output and, when the engine ran, its exit
    status so callers can report or log the real cause.
    """

    def __init__(
        self,
        message: str,
        *,
        output: str = "",
        returncode: int | None = None,
    ) -> None:
        super().__init__(message)
        self.output = output
        self.returncode = returncode

    def __str__(self) -> str:
        message = super().__str__()
        if self.output and self.output not in message:
            return f"{self.output.rstrip()}\n{message}"
        return message


class SpawnError(PGPSignError):
    """Raised when the engine executable cannot be started."""

    pass


class WriteError(PGPSignError):
    """Raised when feeding data to the engine fails (e.g. broken pipe)."""

    pass


class NoSignatureError(PGPSignError):
    """Raised when signing produced no recognizable armored signature."""

    pass


class ExecutionError(PGPSignError):
    """Raised when the engine exits abnormally with no clearer diagnosis."""

    pass


class TempFileError(PGPSignError):
    """Raised when an exclusive temporary file cannot be created."""

    pass


class PassphraseError(PGPSignError):
    """Raised when a passphrase cannot be handed to the engine safely."""

    pass
