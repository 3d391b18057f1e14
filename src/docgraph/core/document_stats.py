"""Document statistics for graph node display.

Computes title, optional description, line/word counts and a human-readable
size for a markdown document.
"""

from __future__ import annotations

import posixpath
import re
from typing import Any

from ..config.defaults import DESCRIPTION_KEYS
from .link_parser import parse_front_matter
from .models import DocumentStats

H1_PATTERN = re.compile(r"^#\s+(.+)$", re.MULTILINE)

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_file_size(num_bytes: float) -> str:
    """Format a byte count as e.g. ``512 B``, ``1.2 KB`` or ``3.4 MB``.

    Whole bytes below 1024, one decimal place from KB up. Negative sizes
    clamp to ``0 B``.
    """
    if num_bytes < 0:
        return "0 B"

    size = float(num_bytes)
    unit_index = 0
    while size >= 1024 and unit_index < len(SIZE_UNITS) - 1:
        size /= 1024
        unit_index += 1

    if unit_index == 0:
        return f"{round(size)} {SIZE_UNITS[0]}"
    return f"{size:.1f} {SIZE_UNITS[unit_index]}"


def count_words(content: str) -> int:
    """Count whitespace-separated words."""
    return len(content.split())


def count_lines(content: str) -> int:
    """Count newline-delimited lines.

    Blank documents have 0 lines and a trailing newline does not add an
    empty final line.
    """
    if not content or not content.strip():
        return 0

    lines = content.split("\n")
    if lines[-1] == "":
        return len(lines) - 1
    return len(lines)


def extract_title(content: str, file_path: str, front_matter: dict[str, Any]) -> str:
    """Resolve a document title.

    Precedence: front matter ``title`` (strings only), then the first H1
    heading anywhere in the text, then the filename without extension.
    """
    title = front_matter.get("title")
    if isinstance(title, str) and title:
        return title

    match = H1_PATTERN.search(content)
    if match:
        return match.group(1).strip()

    return posixpath.splitext(posixpath.basename(file_path))[0]


def extract_description(front_matter: dict[str, Any]) -> str | None:
    """Return the first non-empty string among the known description keys."""
    for key in DESCRIPTION_KEYS:
        value = front_matter.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def compute_document_stats(
    content: str, file_path: str, file_size: int
) -> DocumentStats:
    """Compute display statistics for a document.

    Args:
        content: Markdown text (possibly a truncated prefix of a large file)
        file_path: Relative path of the document
        file_size: Size in bytes used for the formatted size string

    Returns:
        DocumentStats for the document
    """
    front_matter = parse_front_matter(content)

    return DocumentStats(
        title=extract_title(content, file_path, front_matter),
        line_count=count_lines(content),
        word_count=count_words(content),
        size=format_file_size(file_size),
        file_path=file_path,
        description=extract_description(front_matter),
    )
