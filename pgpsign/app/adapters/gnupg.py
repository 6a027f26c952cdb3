"""GnuPG adapter creating and checking detached signatures via a subprocess."""

from __future__ import annotations

import logging
from contextlib import ExitStack
from functools import partial
from pathlib import Path
from typing import Any

from pgpsign.app.ports.signer import BackendConfig, SignerPort
from pgpsign.errors import ExecutionError
from pgpsign.utils.armor import armor_signature, extract_signature
from pgpsign.utils.feeder import feed
from pgpsign.utils.process import PassphraseChannel, ProcessResult, run_process
from pgpsign.utils.status import Verdict, parse_status
from pgpsign.utils.tempfiles import secure_tempfile

logger = logging.getLogger(__name__)

SIGN_FLAGS: dict[str, tuple[str, ...]] = {
    "GPG": (
        "--detach-sign", "--armor",
        "--quiet", "--textmode", "--batch", "--no-tty", "--pinentry-mode=loopback",
        "--no-greeting", "--no-permission-warning",
    ),
    "GPG1": (
        "--detach-sign", "--armor",
        "--quiet", "--textmode", "--batch", "--no-tty", "--no-use-agent",
        "--no-greeting", "--no-permission-warning",
        "--force-v3-sigs", "--allow-weak-digest-algos",
    ),
}  # fmt: skip

VERIFY_FLAGS: dict[str, tuple[str, ...]] = {
    "GPG": (
        "--verify",
        "--quiet", "--batch", "--no-tty",
        "--no-greeting", "--no-permission-warning",
        "--no-auto-key-retrieve", "--no-auto-check-trustdb",
        "--allow-weak-digest-algos",
        "--disable-dirmngr",
    ),
    "GPG1": (
        "--verify",
        "--quiet", "--batch", "--no-tty",
        "--no-greeting", "--no-permission-warning",
        "--no-auto-key-retrieve", "--no-auto-check-trustdb",
        "--allow-weak-digest-algos",
    ),
}  # fmt: skip


class GnuPGSigner(SignerPort):
    """Create and verify detached signatures with an external GnuPG binary.

    The instance holds nothing but its frozen :class:`BackendConfig`; every
    call gets its own process, passphrase pipe, munging state and temp files,
    so one signer can serve any number of sequential operations.
    """

    def __init__(self, config: BackendConfig | None = None, **overrides: Any) -> None:
        if config is None:
            config = BackendConfig(**overrides)
        elif overrides:
            data = config.model_dump()
            # A path that only came from the old style follows the new one.
            if "path" not in overrides and data["path"] == config.style.lower():
                del data["path"]
            config = BackendConfig(**{**data, **overrides})
        self.config = config

    # ------------------------------------------------------------------
    # Command construction
    # ------------------------------------------------------------------

    def build_sign_command(self, keyid: str, passphrase_fd: int) -> list[str]:
        """Command line for signing, reading the passphrase from ``passphrase_fd``."""
        command = [self.config.path, "-u", keyid, "--passphrase-fd", str(passphrase_fd)]
        command.extend(SIGN_FLAGS[self.config.style])
        if self.config.home:
            command.extend(["--homedir", str(self.config.home)])
        return command

    def build_verify_command(self, signature_file: Path, data_file: Path) -> list[str]:
        """Command line for verification, with status and log output on stdout."""
        command = [self.config.path, "--status-fd", "1", "--logger-fd", "1"]
        command.extend(VERIFY_FLAGS[self.config.style])
        if self.config.home:
            command.extend(["--homedir", str(self.config.home)])
        command.extend([str(signature_file), str(data_file)])
        return command

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def sign(self, keyid: str, passphrase: str, *sources: Any) -> str:
        """Create a detached signature over ``sources``.

        Returns:
            The armored signature body (no markers, no headers) joined with
            newlines and without a trailing newline.

        Raises:
            SpawnError: The engine could not be started.
            WriteError: Feeding data failed.
            ExecutionError: The engine exited with a non-zero status.
            NoSignatureError: The engine printed no signature.
            PassphraseError: The passphrase is too long to pass through a pipe.
        """
        with PassphraseChannel(passphrase) as channel:
            command = self.build_sign_command(keyid, channel.fd)
            result = run_process(
                command,
                feed=partial(self._feed, sources=sources),
                pass_fds=(channel.fd,),
            )

        if result.returncode != 0:
            raise self._execution_error(result, result.errors)

        return extract_signature(result.stdout.decode("utf-8", errors="replace"))

    def verify(self, signature: str, *sources: Any, version: str | None = None) -> str:
        """Check ``signature`` against ``sources``.

        Returns:
            The signer's user ID for a good signature, or an empty string if
            the signature does not match the data.

        Raises:
            SpawnError, TempFileError, WriteError, ExecutionError: The check
                could not be completed. A bad signature never raises.
        """
        return self.check(signature, *sources, version=version).signer

    def check(self, signature: str, *sources: Any, version: str | None = None) -> Verdict:
        """Like :meth:`verify` but return the full :class:`Verdict`."""
        armored = armor_signature(signature, version).encode("utf-8")
        tmpdir = self.config.tmpdir

        with ExitStack() as stack:
            sig_path, sig_handle = stack.enter_context(secure_tempfile(tmpdir, suffix=".asc"))
            sig_handle.write(armored)
            sig_handle.close()

            data_path, data_handle = stack.enter_context(secure_tempfile(tmpdir))
            self._feed(data_handle, sources=sources)
            data_handle.close()

            result = run_process(self.build_verify_command(sig_path, data_path))

        verdict = parse_status(result.output)
        if verdict is None:
            logger.warning(
                "%s produced no signature status (exit status %d)",
                result.command[0],
                result.returncode,
            )
            raise self._execution_error(result, result.output)

        logger.debug("Verification verdict: good=%s key=%s", verdict.good, verdict.key_id)
        return verdict

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _feed(self, destination: Any, *, sources: tuple[Any, ...]) -> int:
        return feed(destination, sources, munge=self.config.munge)

    @staticmethod
    def _execution_error(result: ProcessResult, output: str) -> ExecutionError:
        message = result.failure_message()
        if result.returncode == 0:
            message = f"{result.command[0]} produced no recognizable output"
        return ExecutionError(message, output=output, returncode=result.returncode)
