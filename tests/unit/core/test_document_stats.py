"""Tests for document statistics."""

import pytest

from docgraph.core.document_stats import (
    compute_document_stats,
    count_lines,
    count_words,
    extract_description,
    extract_title,
    format_file_size,
)


class TestFormatFileSize:
    @pytest.mark.parametrize(
        ("size", "expected"),
        [
            (0, "0 B"),
            (512, "512 B"),
            (1023, "1023 B"),
            (1024, "1.0 KB"),
            (1536, "1.5 KB"),
            (1024 * 1024, "1.0 MB"),
            (5 * 1024**3, "5.0 GB"),
            (2 * 1024**4, "2.0 TB"),
            (-10, "0 B"),
        ],
    )
    def test_format(self, size, expected):
        assert format_file_size(size) == expected


class TestCounts:
    def test_words_split_on_any_whitespace(self):
        assert count_words("  one\ttwo\n\nthree   four ") == 4

    def test_empty_has_no_words(self):
        assert count_words("") == 0

    def test_blank_document_has_no_lines(self):
        assert count_lines("") == 0
        assert count_lines("   \n\n  ") == 0

    def test_trailing_newline_is_not_a_line(self):
        assert count_lines("a\nb\n") == 2
        assert count_lines("a\nb") == 2

    def test_inner_blank_lines_count(self):
        assert count_lines("a\n\nb\n") == 3


class TestTitleAndDescription:
    def test_front_matter_title_wins(self):
        assert extract_title("# Heading", "x.md", {"title": "Meta"}) == "Meta"

    def test_non_string_title_is_ignored(self):
        assert extract_title("# Heading", "x.md", {"title": 42}) == "Heading"

    def test_first_h1_anywhere(self):
        content = "Intro paragraph\n\n## Sub\n\n# Real Title\n\n# Second\n"
        assert extract_title(content, "x.md", {}) == "Real Title"

    def test_filename_fallback(self):
        assert extract_title("no headings", "notes/meeting-2024.md", {}) == "meeting-2024"

    def test_description_priority(self):
        meta = {"summary": "from summary", "overview": "from overview"}
        assert extract_description(meta) == "from overview"

    def test_description_must_be_string(self):
        assert extract_description({"description": 5, "tldr": "short"}) == "short"

    def test_no_description(self):
        assert extract_description({"title": "x"}) is None


def test_compute_document_stats():
    content = "---\ntitle: Setup Guide\ndescription: How to install\n---\n# Ignored\nword word\n"
    stats = compute_document_stats(content, "guides/setup.md", 2048)

    assert stats.title == "Setup Guide"
    assert stats.description == "How to install"
    assert stats.line_count == 6
    assert stats.word_count == 13
    assert stats.size == "2.0 KB"
    assert stats.file_path == "guides/setup.md"
