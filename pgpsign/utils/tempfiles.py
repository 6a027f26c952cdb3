"""Exclusive, owner-only temporary files for verification inputs."""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from collections.abc import Iterator
from pathlib import Path
from typing import IO

from pgpsign.errors import TempFileError

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def secure_tempfile(
    directory: Path | str | None = None,
    *,
    suffix: str = "",
    prefix: str = "pgpsign-",
) -> Iterator[tuple[Path, IO[bytes]]]:
    """Create a temporary file and remove it on exit, whatever happens.

    The file is created with ``O_CREAT | O_EXCL`` and mode 0600 (via
    :func:`tempfile.mkstemp`), so it can neither follow a planted symlink nor
    be read by other users.

    Yields:
        ``(path, handle)`` where ``handle`` is an open binary writer. Close
        the handle before handing the path to another process.

    Raises:
        TempFileError: If the file cannot be created.
    """
    try:
        fd, name = tempfile.mkstemp(
            suffix=suffix,
            prefix=prefix,
            dir=str(directory) if directory is not None else None,
        )
    except OSError as exc:
        location = directory if directory is not None else tempfile.gettempdir()
        raise TempFileError(f"Cannot create temporary file in {location}: {exc}") from exc

    path = Path(name)
    try:
        with os.fdopen(fd, "wb") as handle:
            yield path, handle
    finally:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Failed to remove temporary file %s: %s", path, exc)
