"""
Tribble Store

Length-prefixed record storage for a single local file.

Provides:
- A pure codec between payload bytes and 4-byte little-endian framed bytes
- A framed file store with append and overwrite write policies
- A backlog log of JSON records built on the store
- Explicit, YAML-backed configuration

Usage:

    >>> from tribble_store import Backlog, BacklogEntry, load_config
    >>> backlog = Backlog.from_config(load_config("."))
    >>> _ = backlog.add(BacklogEntry(title="Write the release notes"))
    >>> [entry.title for entry in backlog.latest()]
    ['Write the release notes']

Low-level framing:

    >>> from tribble_store import encode, decode
    >>> encode(b"hello")
    b'\\x05\\x00\\x00\\x00hello'
    >>> decode(encode(b"hello"))
    b'hello'
"""

from .backlog import Backlog, BacklogEntry, EntryStatus, new_entry_id
from .codec import (
    MAX_FRAME_LENGTH,
    MAX_PAYLOAD_LENGTH,
    PREFIX_WIDTH,
    DecodedFrame,
    decode,
    decode_frame,
    encode,
    iter_frames,
)
from .config import StoreConfig, apply_log_settings, bootstrap_folders, load_config, save_config
from .exceptions import (
    ConfigError,
    CorruptFrameError,
    EntryNotFoundError,
    EntryValidationError,
    FrameError,
    PayloadTooLargeError,
    StorageIOError,
    TooShortForPrefixError,
    TribbleStoreError,
    TruncatedPayloadError,
    UnknownWriteModeError,
)
from .logging_utils import configure_structured_logging, get_store_logger, log_store_error
from .store import FramedFileStore, FrameSequence, WriteMode, read_frame, read_frames, write_frame

__version__ = "0.1.0"

__all__ = [
    # Codec
    "PREFIX_WIDTH",
    "MAX_PAYLOAD_LENGTH",
    "MAX_FRAME_LENGTH",
    "DecodedFrame",
    "encode",
    "decode",
    "decode_frame",
    "iter_frames",
    # File store
    "WriteMode",
    "FramedFileStore",
    "FrameSequence",
    "write_frame",
    "read_frame",
    "read_frames",
    # Backlog
    "Backlog",
    "BacklogEntry",
    "EntryStatus",
    "new_entry_id",
    # Config
    "StoreConfig",
    "load_config",
    "save_config",
    "bootstrap_folders",
    "apply_log_settings",
    # Logging
    "configure_structured_logging",
    "get_store_logger",
    "log_store_error",
    # Exceptions
    "TribbleStoreError",
    "FrameError",
    "PayloadTooLargeError",
    "CorruptFrameError",
    "TooShortForPrefixError",
    "TruncatedPayloadError",
    "StorageIOError",
    "UnknownWriteModeError",
    "ConfigError",
    "EntryNotFoundError",
    "EntryValidationError",
]
