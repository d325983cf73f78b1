"""Unit tests for the context extraction state machine and line reader."""

from __future__ import annotations

import re
from collections.abc import Iterator

import pytest

from walkgrep.core.models import ContextBlock, Line
from walkgrep.core.pipeline.components.extractor import (
    ContextExtractor,
    SlidingBuffer,
    extract_contexts,
    extract_from_lines,
    iter_lines,
)
from walkgrep.shared.errors import ErrorCode, ScanError


def _lines(text: str) -> list[Line]:
    return [Line(number, value) for number, value in enumerate(text.split("\n"), start=1)]


def _extract(text: str, pattern: str, context_size: int) -> list[ContextBlock]:
    # Mirrors a file ending with a newline: no trailing empty line
    body = text[:-1] if text.endswith("\n") else text
    lines = _lines(body) if body else []
    return extract_from_lines(lines, re.compile(pattern), ContextExtractor(context_size))


class TestSlidingBuffer:
    """Test cases for SlidingBuffer."""

    def test_push_evicts_oldest_when_full(self) -> None:
        buffer = SlidingBuffer(2)

        buffer.push(Line(1, "a"))
        buffer.push(Line(2, "b"))
        buffer.push(Line(3, "c"))

        assert len(buffer) == 2
        assert buffer.is_full()
        assert buffer.drain_all() == (Line(2, "b"), Line(3, "c"))

    def test_drain_all_empties_buffer(self) -> None:
        buffer = SlidingBuffer(3)
        buffer.push(Line(1, "a"))

        assert buffer.drain_all() == (Line(1, "a"),)
        assert len(buffer) == 0
        assert buffer.drain_all() == ()

    def test_capacity_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            SlidingBuffer(0)


class TestContextExtraction:
    """Block construction over in-memory lines."""

    def test_no_match_yields_no_blocks(self) -> None:
        assert _extract("alpha\nbeta\n", "gamma", 2) == []

    def test_empty_input_yields_no_blocks(self) -> None:
        assert _extract("", "anything", 3) == []

    def test_single_match_with_one_line_of_context(self) -> None:
        # Given
        text = "word\nhello\nworld\nfoo\nbar\n"

        # When
        blocks = _extract(text, "world", 1)

        # Then
        assert blocks == [
            ContextBlock(
                matched_line=Line(3, "world"),
                before=(Line(2, "hello"),),
                after=(Line(4, "foo"),),
            ),
        ]

    def test_close_matches_produce_adjacent_blocks(self) -> None:
        # Given: the second "word" falls inside the first block's after-window
        text = "word\nhello world\nword\nfoo\nbar\n"

        # When
        blocks = _extract(text, "word", 2)

        # Then: the first block closes early, the second starts with no before
        assert blocks == [
            ContextBlock(
                matched_line=Line(1, "word"),
                before=(),
                after=(Line(2, "hello world"),),
            ),
            ContextBlock(
                matched_line=Line(3, "word"),
                before=(),
                after=(Line(4, "foo"), Line(5, "bar")),
            ),
        ]

    def test_open_block_is_flushed_at_end_of_input(self) -> None:
        blocks = _extract("word\nlast one", "word", 2)

        assert blocks == [
            ContextBlock(
                matched_line=Line(1, "word"),
                before=(),
                after=(Line(2, "last one"),),
            ),
        ]

    def test_before_context_keeps_only_the_last_lines(self) -> None:
        blocks = _extract("1\n2\n3\n4\nfoo\n", "foo", 2)

        assert blocks == [
            ContextBlock(
                matched_line=Line(5, "foo"),
                before=(Line(3, "3"), Line(4, "4")),
            ),
        ]

    def test_zero_context_gives_one_bare_block_per_match(self) -> None:
        blocks = _extract("a\nfoo\nb\nfoo\n", "foo", 0)

        assert blocks == [
            ContextBlock(matched_line=Line(2, "foo")),
            ContextBlock(matched_line=Line(4, "foo")),
        ]

    def test_negative_context_behaves_like_zero(self) -> None:
        assert _extract("x\nfoo\ny\n", "foo", -3) == _extract("x\nfoo\ny\n", "foo", 0)

    def test_blocks_are_line_ordered(self) -> None:
        text = "\n".join("match" if i % 3 == 0 else f"line {i}" for i in range(1, 40))

        blocks = _extract(text, "match", 1)

        numbers = [line.number for block in blocks for line in block.lines()]
        assert numbers == sorted(numbers)
        assert len(numbers) == len(set(numbers))

    def test_pattern_is_unanchored(self) -> None:
        blocks = _extract("the needle is here\n", "needle", 0)

        assert [block.matched_line.number for block in blocks] == [1]


class TestContextExtractorReuse:
    """The extractor is reused by a worker across files."""

    def test_finish_resets_state_between_files(self) -> None:
        extractor = ContextExtractor(2)
        pattern = re.compile("hit")

        first = extract_from_lines(_lines("a\nhit\nb"), pattern, extractor)
        second = extract_from_lines(_lines("hit"), pattern, extractor)

        assert first[0].before == (Line(1, "a"),)
        assert second == [ContextBlock(matched_line=Line(1, "hit"))]

    def test_failure_mid_file_discards_partial_state(self) -> None:
        extractor = ContextExtractor(2)

        def broken() -> Iterator[Line]:
            yield Line(1, "hit")
            raise ScanError(ErrorCode.INVALID_ENCODING, "bad bytes", "/tmp/x")

        with pytest.raises(ScanError):
            extract_from_lines(broken(), re.compile("hit"), extractor)

        assert not extractor.has_open_block
        assert extractor.finish() == []


class TestIterLines:
    """Reading files as validated UTF-8 lines."""

    def test_strips_lf_and_crlf_terminators(self, write_file) -> None:
        path = write_file("crlf.txt", "foo\r\nbar\nbaz")

        assert list(iter_lines(str(path))) == [
            Line(1, "foo"),
            Line(2, "bar"),
            Line(3, "baz"),
        ]

    def test_empty_file_yields_nothing(self, write_file) -> None:
        path = write_file("empty.txt", b"")

        assert list(iter_lines(str(path))) == []

    def test_line_at_limit_is_accepted(self, write_file) -> None:
        path = write_file("limit.txt", "x" * 8 + "\n")

        assert list(iter_lines(str(path), max_line_bytes=8)) == [Line(1, "x" * 8)]

    def test_crlf_line_at_limit_is_accepted(self, write_file) -> None:
        path = write_file("limit_crlf.txt", "x" * 8 + "\r\ny\r\n")

        assert list(iter_lines(str(path), max_line_bytes=8)) == [Line(1, "x" * 8), Line(2, "y")]

    def test_terminated_line_one_byte_over_limit_is_rejected(self, write_file) -> None:
        path = write_file("over.txt", "x" * 9 + "\n")

        with pytest.raises(ScanError) as exc_info:
            list(iter_lines(str(path), max_line_bytes=8))

        assert exc_info.value.code == ErrorCode.LINE_TOO_LONG

    def test_line_over_limit_is_skippable(self, write_file) -> None:
        path = write_file("long.txt", "short\n" + "x" * 20 + "\n")

        with pytest.raises(ScanError) as exc_info:
            list(iter_lines(str(path), max_line_bytes=8))

        assert exc_info.value.code == ErrorCode.LINE_TOO_LONG
        assert exc_info.value.skippable
        assert exc_info.value.path == str(path)

    def test_invalid_utf8_is_skippable(self, write_file) -> None:
        path = write_file("binary.dat", b"ok\n\xff\xfe\n")

        with pytest.raises(ScanError) as exc_info:
            list(iter_lines(str(path)))

        assert exc_info.value.code == ErrorCode.INVALID_ENCODING
        assert exc_info.value.skippable
        assert isinstance(exc_info.value.original_error, UnicodeDecodeError)

    def test_line_number_overflow_is_fatal(self, write_file) -> None:
        path = write_file("many.txt", "a\nb\nc\n")

        with pytest.raises(ScanError) as exc_info:
            list(iter_lines(str(path), max_line_number=2))

        assert exc_info.value.code == ErrorCode.TOO_MANY_LINES
        assert exc_info.value.fatal

    def test_missing_file_raises_os_error(self, temp_dir) -> None:
        with pytest.raises(FileNotFoundError):
            list(iter_lines(str(temp_dir / "missing.txt")))


class TestExtractContexts:
    """End-to-end extraction from a file on disk."""

    def test_reads_file_and_builds_blocks(self, write_file) -> None:
        path = write_file("sample.txt", "word\nhello\nworld\nfoo\nbar\n")

        blocks = extract_contexts(str(path), re.compile("world"), 1)

        assert blocks == [
            ContextBlock(
                matched_line=Line(3, "world"),
                before=(Line(2, "hello"),),
                after=(Line(4, "foo"),),
            ),
        ]

    def test_unicode_content_is_matched(self, write_file) -> None:
        path = write_file("unicode.txt", "héllo\nwörld\n")

        blocks = extract_contexts(str(path), re.compile("wörld"), 0)

        assert blocks == [ContextBlock(matched_line=Line(2, "wörld"))]
