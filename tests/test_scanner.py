"""Tests for the content scanner."""

from __future__ import annotations

import codecs

import pytest

from conftest import MemoryStore
from logfinder.errors import ScanError, ScanFailure
from logfinder.search.scanner import scan


class FlakyStore(MemoryStore):
    """Store whose open fails a fixed number of times before succeeding."""

    def __init__(self, files, *, failures: int) -> None:
        super().__init__(files)
        self.failures = failures

    def open(self, path):
        if self.failures:
            self.failures -= 1
            self.opened.append(path)
            raise ConnectionResetError("transient")
        return super().open(path)


class TestScan:
    """Test scan function."""

    def test_match_found(self) -> None:
        """Should return True when a line contains the needle."""
        store = MemoryStore({"A\\app.log": b"starting\nan ERROR occurred\nstopping\n"})

        assert scan(store, "A\\app.log", "ERROR") is True

    def test_no_match(self) -> None:
        """Should return False at end of stream without a match."""
        store = MemoryStore({"A\\app.log": b"starting\nstopping\n"})

        assert scan(store, "A\\app.log", "ERROR") is False

    def test_empty_file(self) -> None:
        store = MemoryStore({"A\\app.log": b""})

        assert scan(store, "A\\app.log", "ERROR") is False

    def test_needle_split_across_lines(self) -> None:
        """Should not match text broken by a line terminator."""
        store = MemoryStore({"A\\app.log": b"ERR\nOR\n"})

        assert scan(store, "A\\app.log", "ERROR") is False

    def test_needle_at_line_start(self) -> None:
        """Should match UTF-8 text at the start of a line without BOM confusion."""
        store = MemoryStore({"A\\app.log": b"first line\nERROR at start\n"})

        assert scan(store, "A\\app.log", "ERROR") is True

    def test_utf16_le_file(self) -> None:
        """Should detect a match in a UTF-16LE file with a BOM."""
        content = codecs.BOM_UTF16_LE + "fatal ERROR in worker\r\n".encode("utf-16-le")
        store = MemoryStore({"A\\app.log": content})

        assert scan(store, "A\\app.log", "ERROR") is True

    def test_utf16_be_file(self) -> None:
        """Should detect a match in a UTF-16BE file with a BOM."""
        content = codecs.BOM_UTF16_BE + "fatal ERROR in worker\n".encode("utf-16-be")
        store = MemoryStore({"A\\app.log": content})

        assert scan(store, "A\\app.log", "ERROR") is True

    def test_long_line_needle_in_last_byte(self) -> None:
        """Should reassemble a line ten times the buffer size."""
        store = MemoryStore({"A\\app.log": b"a" * 159 + b"Z" + b"\n"})

        assert scan(store, "A\\app.log", "Z", buffer_size=16) is True

    def test_long_line_without_needle(self) -> None:
        store = MemoryStore({"A\\app.log": b"a" * 160})

        assert scan(store, "A\\app.log", "Z", buffer_size=16) is False

    def test_stops_at_first_match(self) -> None:
        """Should not read past the chunk holding the first match."""
        content = b"ERROR\n" + b"filler\n" * 100
        store = MemoryStore({"A\\app.log": content}, broken=["A\\app.log"])

        assert scan(store, "A\\app.log", "ERROR", buffer_size=64) is True

    def test_idempotent(self) -> None:
        """Should give the same answer on repeated scans."""
        store = MemoryStore({"A\\app.log": b"one\ntwo ERROR\n"})

        first = scan(store, "A\\app.log", "ERROR")
        second = scan(store, "A\\app.log", "ERROR")

        assert first == second is True

    def test_normalizes_path_separator(self) -> None:
        """Should open the store-native form of a forward-slash path."""
        store = MemoryStore({"A\\logs\\app.log": b"ERROR\n"})

        assert scan(store, "A/logs/app.log", "ERROR") is True
        assert store.opened == ["A\\logs\\app.log"]


class TestScanErrors:
    """Test scan failure reporting."""

    def test_open_failure(self) -> None:
        store = MemoryStore({"A\\app.log": b"ERROR\n"}, unreadable=["A\\app.log"])

        with pytest.raises(ScanError) as excinfo:
            scan(store, "A\\app.log", "ERROR")

        assert excinfo.value.kind is ScanFailure.OPEN
        assert excinfo.value.path == "A\\app.log"

    def test_read_failure(self) -> None:
        """Should report a stream error raised mid-file."""
        store = MemoryStore({"A\\app.log": b"nothing here\n" * 20}, broken=["A\\app.log"])

        with pytest.raises(ScanError) as excinfo:
            scan(store, "A\\app.log", "ERROR", buffer_size=16)

        assert excinfo.value.kind is ScanFailure.READ
        assert isinstance(excinfo.value.__cause__, OSError)

    def test_open_retried(self) -> None:
        """Should retry a failing open up to the configured count."""
        store = FlakyStore({"A\\app.log": b"ERROR\n"}, failures=2)

        assert scan(store, "A\\app.log", "ERROR", open_retries=2) is True
        assert len(store.opened) == 3

    def test_open_retries_exhausted(self) -> None:
        store = FlakyStore({"A\\app.log": b"ERROR\n"}, failures=2)

        with pytest.raises(ScanError) as excinfo:
            scan(store, "A\\app.log", "ERROR", open_retries=1)

        assert excinfo.value.kind is ScanFailure.OPEN
        assert len(store.opened) == 2
