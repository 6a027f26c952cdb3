"""Input source variants consumed by the data feeder.

Every way of handing data to a sign or verify call is represented by one
variant class tagged with ``kind``. The feeder dispatches on that tag;
:func:`as_source` converts plain Python values at the API edge.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import IO, Any, ClassVar, Literal, Union

Chunk = Union[bytes, bytearray, memoryview, str]
SourceKind = Literal["buffer", "chunks", "stream", "callable"]

# Upper bound on a single readline() from a stream source so one enormous
# line cannot be pulled into memory at once.
STREAM_CHUNK_SIZE = 64 * 1024


def to_bytes(chunk: Chunk) -> bytes:
    """Return ``chunk`` as bytes, encoding text as UTF-8."""
    if isinstance(chunk, str):
        return chunk.encode("utf-8")
    if isinstance(chunk, (bytes, bytearray, memoryview)):
        return bytes(chunk)
    raise TypeError(f"Unsupported chunk type: {type(chunk)!r}")


@dataclass(frozen=True, slots=True)
class BufferSource:
    """A single in-memory buffer."""

    kind: ClassVar[SourceKind] = "buffer"

    data: Chunk


@dataclass(frozen=True, slots=True)
class ChunksSource:
    """An ordered sequence (or any iterable) of chunks."""

    kind: ClassVar[SourceKind] = "chunks"

    items: Iterable[Chunk]


@dataclass(frozen=True, slots=True)
class StreamSource:
    """An open readable stream, text or binary, read a line at a time."""

    kind: ClassVar[SourceKind] = "stream"

    stream: IO[Any]
    chunk_size: int = STREAM_CHUNK_SIZE


@dataclass(frozen=True, slots=True)
class CallableSource:
    """A zero-argument callable returning one chunk per call.

    ``None`` signals exhaustion. An empty chunk is a valid (empty) value and
    does not stop iteration.
    """

    kind: ClassVar[SourceKind] = "callable"

    func: Callable[[], Chunk | None]


Source = Union[BufferSource, ChunksSource, StreamSource, CallableSource]
_VARIANTS = (BufferSource, ChunksSource, StreamSource, CallableSource)


def as_source(value: Any) -> Source:
    """Wrap a plain value in the matching source variant.

    Accepts existing variants unchanged, bytes-like and ``str`` buffers,
    readable streams (anything with ``readline``), zero-argument callables,
    and other iterables of chunks.
    """
    if isinstance(value, _VARIANTS):
        return value
    if isinstance(value, (bytes, bytearray, memoryview, str)):
        return BufferSource(value)
    if hasattr(value, "readline"):
        return StreamSource(value)
    if callable(value):
        return CallableSource(value)
    if isinstance(value, Iterable):
        return ChunksSource(value)
    raise TypeError(
        f"Unsupported data source: {type(value)!r}. Provide bytes, str, a "
        "readable stream, a callable, or an iterable of chunks."
    )
