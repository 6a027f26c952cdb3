"""Drive the OpenPGP engine as a subprocess without pipe deadlocks.

Input is written from the calling thread while two reader threads drain the
child's stdout and stderr, so a child that produces output before it has
consumed all of its input never blocks against a full pipe buffer.
"""

from __future__ import annotations

import logging
import os
import select
import subprocess
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import IO

from pgpsign.errors import PassphraseError, SpawnError, WriteError

logger = logging.getLogger(__name__)

_READ_SIZE = 64 * 1024

# Anything up to PIPE_BUF fits in an empty pipe in one write, so writing the
# passphrase before the child exists can never block.
MAX_PASSPHRASE_BYTES = getattr(select, "PIPE_BUF", 512)


class PassphraseChannel:
    """Hand a passphrase to a child process through an inherited pipe.

    The passphrase is written into an anonymous pipe and the write end is
    closed before the child is spawned. Only the read end's descriptor
    number is passed on the command line (``--passphrase-fd N``); the
    secret itself never appears in argv, the environment or on disk.

    Example:
        >>> with PassphraseChannel("secret") as channel:
        ...     run_process([..., "--passphrase-fd", str(channel.fd)],
        ...                 pass_fds=(channel.fd,))
    """

    def __init__(self, passphrase: str | bytes) -> None:
        secret = passphrase.encode("utf-8") if isinstance(passphrase, str) else passphrase
        if len(secret) > MAX_PASSPHRASE_BYTES:
            raise PassphraseError(
                f"Passphrase longer than {MAX_PASSPHRASE_BYTES} bytes is not supported"
            )
        self._secret = secret
        self._read_fd: int | None = None

    @property
    def fd(self) -> int:
        if self._read_fd is None:
            raise RuntimeError("Passphrase channel is not open")
        return self._read_fd

    def open(self) -> int:
        read_fd, write_fd = os.pipe()
        try:
            os.set_inheritable(write_fd, False)
            os.set_inheritable(read_fd, True)
            view = memoryview(self._secret)
            while view:
                view = view[os.write(write_fd, view) :]
        except BaseException:
            os.close(read_fd)
            raise
        finally:
            os.close(write_fd)
        self._read_fd = read_fd
        return read_fd

    def close(self) -> None:
        if self._read_fd is not None:
            os.close(self._read_fd)
            self._read_fd = None

    def __enter__(self) -> PassphraseChannel:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@dataclass(slots=True)
class ProcessResult:
    """Captured outcome of one engine invocation."""

    command: list[str]
    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def output(self) -> str:
        """Decoded stdout followed by stderr."""
        return (self.stdout + self.stderr).decode("utf-8", errors="replace")

    @property
    def errors(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")

    def failure_message(self) -> str:
        return f"Execution of {self.command[0]} failed with status {self.returncode}"


def _drain(stream: IO[bytes], sink: list[bytes]) -> None:
    try:
        for chunk in iter(lambda: stream.read1(_READ_SIZE), b""):
            sink.append(chunk)
    finally:
        stream.close()


def _start_reader(stream: IO[bytes], sink: list[bytes], name: str) -> threading.Thread:
    thread = threading.Thread(target=_drain, args=(stream, sink), name=name, daemon=True)
    thread.start()
    return thread


def run_process(
    command: Sequence[str],
    *,
    feed: Callable[[IO[bytes]], object] | None = None,
    pass_fds: Sequence[int] = (),
) -> ProcessResult:
    """Run ``command`` to completion and capture its output.

    Args:
        command: Executable followed by its arguments
        feed: Called with the child's stdin when data must be streamed to it;
            stdin is ``/dev/null`` otherwise
        pass_fds: Descriptors the child inherits (the passphrase pipe)

    Returns:
        ProcessResult with the exit status and both output streams.

    Raises:
        SpawnError: If the executable cannot be started.
        WriteError: If ``feed`` fails; raised only after the child is reaped,
            with its diagnostics attached.
    """
    argv = [str(part) for part in command]
    logger.debug("Running %s (%d arguments)", argv[0], len(argv) - 1)

    try:
        proc = subprocess.Popen(
            argv,
            stdin=subprocess.PIPE if feed is not None else subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            close_fds=True,
            pass_fds=tuple(pass_fds),
        )
    except OSError as exc:
        raise SpawnError(f"Cannot execute {argv[0]}: {exc}") from exc

    stdout: list[bytes] = []
    stderr: list[bytes] = []
    readers = [
        _start_reader(proc.stdout, stdout, "pgpsign-stdout"),  # type: ignore[arg-type]
        _start_reader(proc.stderr, stderr, "pgpsign-stderr"),  # type: ignore[arg-type]
    ]

    write_error: WriteError | None = None
    try:
        if feed is not None:
            assert proc.stdin is not None
            try:
                feed(proc.stdin)
            except WriteError as exc:
                write_error = exc
            finally:
                try:
                    proc.stdin.close()
                except BrokenPipeError as exc:
                    # Buffered data could not be flushed to a child that
                    # already exited.
                    if write_error is None:
                        write_error = WriteError(f"Failed writing data: {exc}")
                        write_error.__cause__ = exc
    finally:
        returncode = proc.wait()
        for reader in readers:
            reader.join()

    result = ProcessResult(
        command=argv,
        returncode=returncode,
        stdout=b"".join(stdout),
        stderr=b"".join(stderr),
    )
    logger.debug("%s exited with status %d", argv[0], returncode)

    if write_error is not None:
        raise WriteError(
            f"{write_error}; {result.failure_message()}",
            output=result.output,
            returncode=returncode,
        ) from write_error.__cause__
    return result
