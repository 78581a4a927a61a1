"""
Backlog records on top of the framed file store.

Each BacklogEntry is serialized to UTF-8 JSON and appended as one
frame. Updating an entry appends a new record with the same entry_id;
the newest record for an id wins when the log is replayed. Old frames
are never rewritten.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from .config import StoreConfig
from .exceptions import CorruptFrameError, EntryNotFoundError, EntryValidationError
from .file_ops import ensure_directory
from .logging_utils import StoreLoggerAdapter, get_store_logger, log_store_error
from .store import FramedFileStore

logger = get_store_logger("backlog")


def new_entry_id() -> str:
    """Generate a new entry ID."""
    return uuid.uuid4().hex


class EntryStatus(Enum):
    """Workflow state of a backlog entry."""

    TODO = "todo"
    DOING = "doing"
    DONE = "done"


@dataclass
class BacklogEntry:
    """A single backlog item.

    Attributes:
        title: Short summary, must not be blank
        description: Free-form details
        status: Workflow state
        tags: Labels for filtering
        entry_id: Stable identifier shared by every revision of the entry
        created: When the entry was first created
    """

    title: str
    description: str = ""
    status: EntryStatus = EntryStatus.TODO
    tags: list[str] = field(default_factory=list)
    entry_id: str = field(default_factory=new_entry_id)
    created: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        if not isinstance(self.title, str) or not self.title.strip():
            raise EntryValidationError("title", "must be a non-empty string")
        if not isinstance(self.entry_id, str) or not self.entry_id:
            raise EntryValidationError("entry_id", "must be a non-empty string")
        if not isinstance(self.description, str):
            raise EntryValidationError("description", "must be a string")
        if not isinstance(self.tags, list) or not all(isinstance(t, str) for t in self.tags):
            raise EntryValidationError("tags", "must be a list of strings")
        if not isinstance(self.created, datetime):
            raise EntryValidationError("created", "must be a datetime")
        if isinstance(self.status, str):
            try:
                self.status = EntryStatus(self.status)
            except ValueError as e:
                raise EntryValidationError("status", f"unknown status {self.status!r}") from e
        elif not isinstance(self.status, EntryStatus):
            raise EntryValidationError("status", f"unknown status {self.status!r}")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for storage."""
        return {
            "entry_id": self.entry_id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "tags": list(self.tags),
            "created": self.created.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BacklogEntry:
        """Deserialize from dictionary.

        Raises:
            EntryValidationError: Naming the first missing or malformed field
        """
        for key in ("entry_id", "title", "created"):
            if key not in data:
                raise EntryValidationError(key, "missing")

        created = data["created"]
        if not isinstance(created, str):
            raise EntryValidationError("created", "must be an ISO 8601 string")
        try:
            created_at = datetime.fromisoformat(created)
        except ValueError as e:
            raise EntryValidationError("created", str(e)) from e

        return cls(
            entry_id=data["entry_id"],
            title=data["title"],
            description=data.get("description", ""),
            status=data.get("status", EntryStatus.TODO.value),
            tags=data.get("tags", []),
            created=created_at,
        )

    def to_bytes(self) -> bytes:
        """Encode as a frame payload."""
        return json.dumps(self.to_dict(), ensure_ascii=False, sort_keys=True).encode("utf-8")

    @classmethod
    def from_bytes(cls, payload: bytes) -> BacklogEntry:
        """Decode a frame payload."""
        try:
            data = json.loads(payload.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise EntryValidationError("payload", str(e)) from e
        if not isinstance(data, dict):
            raise EntryValidationError("payload", "expected a JSON object")
        return cls.from_dict(data)


class Backlog:
    """
    Append-only backlog log.

    Contract:
    - Inputs: BacklogEntry values
    - Outputs: Entries replayed in write order
    - Side Effects: One appended frame per add()
    - Corruption: replay stops with the codec's error; nothing is repaired
    """

    def __init__(self, store: FramedFileStore):
        self.store = store
        self._log = StoreLoggerAdapter(logger, {"path": str(store.path)})

    @classmethod
    def from_config(cls, config: StoreConfig) -> Backlog:
        """Open the backlog file named by a config, creating its folder."""
        path = config.backlog_path
        ensure_directory(path.parent)
        return cls(FramedFileStore(path))

    def add(self, entry: BacklogEntry) -> BacklogEntry:
        """Append an entry (or a new revision of one).

        Returns:
            The entry, for chaining
        """
        self.store.append(entry.to_bytes())
        self._log.debug(f"Logged entry {entry.entry_id}", extra={"entry_id": entry.entry_id})
        return entry

    def entries(self) -> Iterator[BacklogEntry]:
        """Replay every record in write order, revisions included."""
        try:
            for payload in self.store.frames():
                yield BacklogEntry.from_bytes(payload)
        except (CorruptFrameError, EntryValidationError) as e:
            log_store_error(self._log, "Backlog replay failed", e)
            raise

    def latest(self) -> list[BacklogEntry]:
        """Newest revision of each entry, in first-seen order."""
        current: dict[str, BacklogEntry] = {}
        for entry in self.entries():
            current[entry.entry_id] = entry
        return list(current.values())

    def get(self, entry_id: str) -> BacklogEntry:
        """Newest revision of one entry.

        Raises:
            EntryNotFoundError: If no record carries this id
        """
        found: BacklogEntry | None = None
        for entry in self.entries():
            if entry.entry_id == entry_id:
                found = entry
        if found is None:
            raise EntryNotFoundError(entry_id)
        return found

    def count(self) -> int:
        """Number of records in the log, revisions included."""
        return sum(1 for _ in self.store.frames())
