"""Unit tests for Parcel logging and the log buffer."""

from __future__ import annotations

import logging
import threading

from parcel.core.logging import (
    BufferHandler,
    LogBuffer,
    LogEntry,
    Verbosity,
    attach_buffer,
    detach_buffer,
)
from parcel.materialize import CreateFile, FileSystem


class TestLogBuffer:
    def test_add_and_entries(self):
        buffer = LogBuffer()
        buffer.add("INFO", "hello")
        buffer.add("WARNING", "careful")
        entries = buffer.entries()
        assert [(e.level, e.message) for e in entries] == [("INFO", "hello"), ("WARNING", "careful")]
        assert all(isinstance(e.timestamp, int) and e.timestamp > 0 for e in entries)

    def test_bounded_drops_oldest(self):
        buffer = LogBuffer(max_entries=2)
        for i in range(5):
            buffer.add("INFO", str(i))
        assert [e.message for e in buffer.entries()] == ["3", "4"]
        assert len(buffer) == 2

    def test_clear(self):
        buffer = LogBuffer()
        buffer.add("INFO", "x")
        buffer.clear()
        assert buffer.entries() == []

    def test_entries_is_snapshot(self):
        buffer = LogBuffer()
        buffer.add("INFO", "x")
        snapshot = buffer.entries()
        buffer.add("INFO", "y")
        assert len(snapshot) == 1

    def test_concurrent_adds(self):
        buffer = LogBuffer()

        def worker():
            for _ in range(200):
                buffer.add("INFO", "m")

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(buffer) == 800

    def test_entry_to_dict(self):
        entry = LogEntry(timestamp=1, level="ERROR", message="boom")
        assert entry.to_dict() == {"timestamp": 1, "level": "ERROR", "message": "boom"}


class TestBufferHandler:
    def test_mirrors_records(self):
        buffer = LogBuffer()
        logger = logging.getLogger("parcel.test.handler")
        logger.propagate = False
        logger.setLevel(logging.DEBUG)
        handler = BufferHandler(buffer)
        logger.addHandler(handler)
        try:
            logger.debug("hidden")
            logger.info("shown %d", 1)
        finally:
            logger.removeHandler(handler)
        assert [(e.level, e.message) for e in buffer.entries()] == [("INFO", "shown 1")]

    def test_attach_captures_materializer_diagnostics(self, output_root):
        buffer = LogBuffer()
        handler = attach_buffer(buffer)
        try:
            fs = FileSystem.from_root(output_root)
            fs.apply(CreateFile("missing/x.lua", b""))
            fs.finalize()
        finally:
            detach_buffer(handler)

        levels = [e.level for e in buffer.entries()]
        assert "ERROR" in levels
        assert any("Created default.project.json" in e.message for e in buffer.entries())

    def test_detach_stops_capture(self):
        buffer = LogBuffer()
        handler = attach_buffer(buffer)
        detach_buffer(handler)
        logging.getLogger("parcel.materialize").warning("after detach")
        assert buffer.entries() == []

    def test_detach_restores_logger_level(self):
        logger = logging.getLogger("parcel")
        before = logger.level
        logger.setLevel(logging.WARNING)
        try:
            handler = attach_buffer(LogBuffer(), level=logging.DEBUG)
            assert logger.level == logging.DEBUG
            detach_buffer(handler)
            assert logger.level == logging.WARNING
        finally:
            logger.setLevel(before)


class TestVerbosity:
    def test_ordering(self):
        assert Verbosity.DEFAULT < Verbosity.VERBOSE
        assert int(Verbosity.VERBOSE) == 1
