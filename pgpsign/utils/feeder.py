"""Stream signed data to the OpenPGP engine, optionally munging whitespace."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from typing import IO, Any

from pgpsign.errors import WriteError
from pgpsign.utils.sources import Chunk, Source, as_source, to_bytes

_SPACES_BEFORE_NEWLINE = re.compile(rb" +\n")
_TRAILING_SPACES = re.compile(rb" +\Z")


class WhitespaceMunger:
    """Strip spaces at the end of each line across arbitrary chunk boundaries.

    A run of spaces at the end of a chunk is held back until the next chunk
    shows whether it precedes a newline. Whatever is still held when the
    input ends is real trailing content and is returned by :meth:`flush`.
    """

    __slots__ = ("enabled", "_pending")

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._pending = b""

    def process(self, chunk: bytes) -> bytes:
        if self._pending:
            chunk = self._pending + chunk
            self._pending = b""
        if not self.enabled:
            return chunk

        chunk = _SPACES_BEFORE_NEWLINE.sub(b"\n", chunk)
        match = _TRAILING_SPACES.search(chunk)
        if match:
            self._pending = match.group(0)
            chunk = chunk[: match.start()]
        return chunk

    def flush(self) -> bytes:
        pending, self._pending = self._pending, b""
        return pending


def iter_chunks(source: Source) -> Iterator[Chunk]:
    """Yield the chunks of ``source`` lazily, in order."""
    kind = source.kind
    if kind == "buffer":
        yield source.data  # type: ignore[union-attr]
    elif kind == "chunks":
        yield from source.items  # type: ignore[union-attr]
    elif kind == "stream":
        stream = source.stream  # type: ignore[union-attr]
        size = source.chunk_size  # type: ignore[union-attr]
        while True:
            chunk = stream.readline(size)
            if not chunk:
                return
            yield chunk
    elif kind == "callable":
        func = source.func  # type: ignore[union-attr]
        while True:
            chunk = func()
            if chunk is None:
                return
            yield chunk
    else:  # pragma: no cover - exhaustive over SourceKind
        raise TypeError(f"Unknown source kind: {kind!r}")


def feed(destination: IO[bytes], sources: Iterable[Any], *, munge: bool = False) -> int:
    """Write every source to ``destination`` in order.

    Args:
        destination: Binary file object (a pipe to the engine or a temp file)
        sources: Source variants or plain values accepted by ``as_source``
        munge: Strip trailing spaces from every line before writing

    Returns:
        Number of bytes written.

    Raises:
        WriteError: If writing to ``destination`` fails (e.g. the engine
            exited and closed its end of the pipe).
        OSError: Reading a source fails; such errors propagate unchanged.
    """
    munger = WhitespaceMunger(munge)
    written = 0
    for value in sources:
        for chunk in iter_chunks(as_source(value)):
            written += _write(destination, munger.process(to_bytes(chunk)))
    written += _write(destination, munger.flush())
    return written


def _write(destination: IO[bytes], data: bytes) -> int:
    if not data:
        return 0
    try:
        destination.write(data)
    except OSError as exc:
        raise WriteError(f"Failed writing data: {exc}") from exc
    return len(data)
