"""
Framed file store.

Applies the length-prefixed codec to a file on disk. Two write
policies exist: APPEND extends the file with a new frame, OVERWRITE
replaces the whole file with a single frame. Reads decode the first
frame; FrameSequence walks all of them.

Contract:
- Single writer per path. Nothing here serializes concurrent writers.
- No caching: every call opens and closes the file itself.
- Frames are encoded before the file is opened, so a rejected payload
  or mode never touches the file.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from enum import Enum
from pathlib import Path

from . import codec
from .exceptions import StorageIOError, UnknownWriteModeError
from .file_ops import append_file, file_exists, overwrite_file, read_file
from .logging_utils import StoreLoggerAdapter

logger = logging.getLogger(__name__)


class WriteMode(Enum):
    """Write policies for framed files."""

    APPEND = "append"
    OVERWRITE = "overwrite"


def write_frame(path: Path, mode: WriteMode, payload: bytes) -> None:
    """Encode a payload and write it to ``path``.

    Args:
        path: Target file, created if absent
        mode: APPEND to add a frame, OVERWRITE to replace the file
        payload: Record bytes

    Raises:
        UnknownWriteModeError: If mode is not a WriteMode
        PayloadTooLargeError: If the payload exceeds the codec limit
        StorageIOError: If the file cannot be written
    """
    if not isinstance(mode, WriteMode):
        raise UnknownWriteModeError(mode)

    frame = codec.encode(payload)

    if mode is WriteMode.APPEND:
        append_file(path, frame)
    else:
        overwrite_file(path, frame)


def read_frame(path: Path) -> bytes:
    """Read a file and decode its first frame.

    Raises:
        StorageIOError: If the file is missing or unreadable
        TooShortForPrefixError: If the file is shorter than a prefix
        TruncatedPayloadError: If the first frame is cut short
    """
    return codec.decode(read_file(path))


def read_frames(path: Path) -> FrameSequence:
    """Return a lazy, restartable sequence over every frame in ``path``."""
    return FrameSequence(path)


class FrameSequence:
    """Lazy iterable over the payloads of a framed file.

    Nothing is read until iteration starts, and each new iteration
    re-reads the file, so the sequence reflects appends made since the
    last pass. An absent file iterates as empty. Corruption raises at the
    frame where it is found; the frames before it have already been
    yielded.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def __iter__(self) -> Iterator[bytes]:
        if not file_exists(self.path):
            return iter(())
        return codec.iter_frames(read_file(self.path))

    def __repr__(self) -> str:
        return f"FrameSequence({str(self.path)!r})"


class FramedFileStore:
    """A framed file bound to one path.

    Example usage:
        store = FramedFileStore(Path(".tribble/backlog"))
        store.append(b"first")
        store.append(b"second")
        store.read()            # b"first"
        list(store.frames())    # [b"first", b"second"]
        store.overwrite(b"only")
        list(store.frames())    # [b"only"]
    """

    def __init__(self, path: Path):
        """Bind the store to a file path.

        Args:
            path: File holding the frames. Its parent directory must exist.
        """
        self.path = Path(path)
        self._log = StoreLoggerAdapter(logger, {"path": str(self.path)})

    def write(self, mode: WriteMode, payload: bytes) -> None:
        """Write one frame with the given policy."""
        write_frame(self.path, mode, payload)
        self._log.debug(f"Wrote {len(payload)} byte frame ({mode.value})")

    def append(self, payload: bytes) -> None:
        """Add a frame after the existing content."""
        self.write(WriteMode.APPEND, payload)

    def overwrite(self, payload: bytes) -> None:
        """Replace the file with a single frame."""
        self.write(WriteMode.OVERWRITE, payload)

    def read(self) -> bytes:
        """Decode the first frame of the file."""
        return read_frame(self.path)

    def frames(self) -> FrameSequence:
        """Iterate all frames in write order."""
        return FrameSequence(self.path)

    def exists(self) -> bool:
        return file_exists(self.path)

    def size(self) -> int:
        """Current file size in bytes, 0 if absent."""
        try:
            return self.path.stat().st_size
        except FileNotFoundError:
            return 0
        except OSError as e:
            raise StorageIOError("stat", str(self.path), e) from e

    def __repr__(self) -> str:
        return f"FramedFileStore({str(self.path)!r})"
