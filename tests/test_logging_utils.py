"""Tests for store logging helpers."""

import json
import logging
import sys
from pathlib import Path

import pytest

from tribble_store.exceptions import StorageIOError, TruncatedPayloadError
from tribble_store.logging_utils import (
    ROOT_LOGGER,
    StoreLoggerAdapter,
    StructuredJsonFormatter,
    configure_structured_logging,
    get_store_logger,
    log_store_error,
)
from tribble_store.store import FramedFileStore


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="tribble_store.store",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="frame at %d",
        args=(7,),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredJsonFormatter:
    """Tests for StructuredJsonFormatter."""

    def test_basic_fields(self) -> None:
        out = json.loads(StructuredJsonFormatter().format(_record()))

        assert out["level"] == "WARNING"
        assert out["logger"] == "tribble_store.store"
        assert out["message"] == "frame at 7"
        assert "timestamp" in out

    def test_store_context_emitted(self) -> None:
        """Path and frame details become JSON fields."""
        record = _record(path="/data/backlog", offset=9, declared=64, available=9)
        out = json.loads(StructuredJsonFormatter().format(record))

        assert out["path"] == "/data/backlog"
        assert out["offset"] == 9
        assert out["declared"] == 64
        assert out["available"] == 9

    def test_other_attributes_dropped(self) -> None:
        out = json.loads(StructuredJsonFormatter().format(_record(color="blue")))

        assert "color" not in out

    def test_exception_included(self) -> None:
        try:
            raise TruncatedPayloadError(5, 0)
        except TruncatedPayloadError:
            record = _record()
            record.exc_info = sys.exc_info()

        out = json.loads(StructuredJsonFormatter().format(record))
        assert "TruncatedPayloadError" in out["exception"]


class TestLogStoreError:
    """Tests for log_store_error."""

    def test_details_attached(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_store_logger("test_details")
        err = TruncatedPayloadError(declared=64, available=9, offset=13)

        with caplog.at_level(logging.WARNING, logger=logger.name):
            log_store_error(logger, "Replay failed", err)

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.getMessage().startswith("Replay failed: missing bytes")
        assert record.error_type == "TruncatedPayloadError"
        assert (record.offset, record.declared, record.available) == (13, 64, 9)

    def test_cause_not_attached(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_store_logger("test_cause")
        err = StorageIOError("read_file", "/x", FileNotFoundError("gone"))

        with caplog.at_level(logging.ERROR, logger=logger.name):
            log_store_error(logger, "Read failed", err, level=logging.ERROR)

        record = caplog.records[-1]
        assert record.operation == "read_file"
        assert record.path == "/x"
        assert not hasattr(record, "cause")

    def test_adapter_context_kept(self, caplog: pytest.LogCaptureFixture) -> None:
        adapter = StoreLoggerAdapter(get_store_logger("test_adapter"), {"path": "/b"})

        with caplog.at_level(logging.WARNING, logger="tribble_store.test_adapter"):
            log_store_error(adapter, "Replay failed", TruncatedPayloadError(4, 1, 0))

        assert caplog.records[-1].path == "/b"


class TestConfigureStructuredLogging:
    """Tests for configure_structured_logging."""

    @pytest.fixture
    def logger_name(self):
        name = f"{ROOT_LOGGER}.test_configure"
        yield name
        logging.getLogger(name).handlers.clear()

    def test_installs_single_json_handler(self, logger_name: str) -> None:
        logger = configure_structured_logging(logging.DEBUG, logger_name)
        configure_structured_logging(logging.INFO, logger_name)

        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, StructuredJsonFormatter)

    def test_store_writes_as_json(
        self, logger_name: str, tmp_path: Path, capsys: pytest.CaptureFixture
    ) -> None:
        """A store's write record reaches stdout with its path as a field."""
        configure_structured_logging(logging.DEBUG, "tribble_store.store")
        try:
            FramedFileStore(tmp_path / "backlog").append(b"hello")
        finally:
            store_logger = logging.getLogger("tribble_store.store")
            store_logger.handlers.clear()
            store_logger.setLevel(logging.NOTSET)

        lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        assert lines[-1]["path"] == str(tmp_path / "backlog")
        assert lines[-1]["logger"] == "tribble_store.store"


def test_get_store_logger() -> None:
    assert get_store_logger("backlog").name == "tribble_store.backlog"
