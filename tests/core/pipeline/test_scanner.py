"""Unit tests for FileScanner and FileScannerPool."""

from __future__ import annotations

import re

import pytest

from walkgrep.core.models import FileResult, Line
from walkgrep.core.pipeline.components import scanner as scanner_module
from walkgrep.core.pipeline.components import FileScanner, FileScannerPool, ResultStream
from walkgrep.core.pipeline.domain.coordinator import Coordinator
from walkgrep.core.pipeline.utils import BoundedQueue
from walkgrep.shared.errors import ErrorCode


@pytest.fixture
def coordinator() -> Coordinator:
    return Coordinator()


@pytest.fixture
def results() -> ResultStream:
    return ResultStream(maxsize=8, poll_interval=0.01)


def _scanner(coordinator: Coordinator, results: ResultStream, pattern: str = "world", context_size: int = 1) -> FileScanner:
    return FileScanner(
        BoundedQueue(maxsize=8),
        results,
        coordinator,
        re.compile(pattern),
        context_size,
        worker_id="scanner_test",
        poll_interval=0.01,
    )


def _collect(results: ResultStream) -> list[FileResult]:
    results.close()
    return list(results)


class TestFileScanner:
    """Test cases for scanning single files."""

    def test_matching_file_is_delivered(self, write_file, coordinator, results) -> None:
        # Given
        path = str(write_file("sample.txt", "word\nhello\nworld\nfoo\nbar\n"))
        scanner = _scanner(coordinator, results)

        # When
        keep_going = scanner.scan(path)

        # Then
        assert keep_going is True
        delivered = _collect(results)
        assert [result.path for result in delivered] == [path]
        block = delivered[0].blocks[0]
        assert block.before == (Line(2, "hello"),)
        assert block.matched_line == Line(3, "world")
        assert block.after == (Line(4, "foo"),)
        assert coordinator.stats.files_scanned == 1
        assert coordinator.stats.files_matched == 1

    def test_file_without_match_is_not_delivered(self, write_file, coordinator, results) -> None:
        path = str(write_file("plain.txt", "nothing here\n"))

        assert _scanner(coordinator, results).scan(path) is True
        assert _collect(results) == []
        assert coordinator.stats.files_scanned == 1
        assert coordinator.stats.files_matched == 0

    def test_duplicate_path_is_scanned_once(self, write_file, coordinator, results) -> None:
        path = str(write_file("twice.txt", "world\n"))
        scanner = _scanner(coordinator, results)

        scanner.scan(path)
        scanner.scan(path)

        assert len(_collect(results)) == 1
        assert coordinator.stats.duplicates_skipped == 1

    def test_invalid_encoding_is_skipped(self, write_file, coordinator, results) -> None:
        path = str(write_file("binary.bin", b"world\n\xff\xfe\n"))

        keep_going = _scanner(coordinator, results).scan(path)

        assert keep_going is True
        assert _collect(results) == []
        assert coordinator.error is not None
        assert coordinator.error.code == ErrorCode.INVALID_ENCODING
        assert not coordinator.stop_event.is_set()

    def test_vanished_file_is_skipped(self, temp_dir, coordinator, results) -> None:
        keep_going = _scanner(coordinator, results).scan(str(temp_dir / "gone.txt"))

        assert keep_going is True
        assert coordinator.error is not None
        assert coordinator.error.code == ErrorCode.FILE_NOT_FOUND

    def test_unreadable_path_is_fatal(self, temp_dir, coordinator, results) -> None:
        # Given: a directory where a file was expected
        keep_going = _scanner(coordinator, results).scan(str(temp_dir))

        assert keep_going is False
        assert coordinator.error is not None
        assert coordinator.error.code == ErrorCode.FILE_READ_ERROR
        assert coordinator.stop_event.is_set()

    def test_unexpected_exception_is_fatal(self, write_file, coordinator, results, mocker) -> None:
        path = str(write_file("sample.txt", "world\n"))
        mocker.patch.object(scanner_module, "extract_contexts", side_effect=RuntimeError("boom"))

        keep_going = _scanner(coordinator, results).scan(path)

        assert keep_going is False
        assert coordinator.error is not None
        assert coordinator.error.code == ErrorCode.SCANNER_ERROR
        assert coordinator.error.fatal
        assert isinstance(coordinator.error.original_error, RuntimeError)

    def test_result_is_dropped_after_stop(self, write_file, coordinator) -> None:
        # Given: a full result stream nobody reads
        results = ResultStream(maxsize=1, poll_interval=0.01)
        results.put(FileResult(path="/other"), coordinator.stop_event)
        coordinator.stop_event.set()
        path = str(write_file("late.txt", "world\n"))

        keep_going = _scanner(coordinator, results).scan(path)

        assert keep_going is False
        assert coordinator.stats.files_matched == 0


class TestFileScannerPool:
    """Test cases for FileScannerPool."""

    def test_pool_scans_queued_files(self, write_file, coordinator, results) -> None:
        # Given
        file_queue = BoundedQueue(maxsize=8)
        paths = [str(write_file(f"f{i}.txt", f"world {i}\n")) for i in range(3)]
        coordinator.add_work(len(paths))
        for path in paths:
            file_queue.put(path)
        pool = FileScannerPool(2, file_queue, results, coordinator, re.compile("world"), 0, poll_interval=0.01)

        # When
        pool.start()
        assert coordinator.stop_event.wait(timeout=5)
        pool.join(timeout=5)

        # Then
        assert coordinator.completed
        assert sorted(result.path for result in _collect(results)) == sorted(paths)
        assert pool.get_worker_count() == 2
        assert not pool.is_alive()
