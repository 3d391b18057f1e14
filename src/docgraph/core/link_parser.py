"""Link and front matter extraction from markdown documents.

Recognizes:
    - Wiki-style links: [[Note]], [[Folder/Note]], [[Folder/Note|Display Text]]
    - Standard markdown links: [text](target)
    - A leading ``---`` delimited front matter block of ``key: value`` lines

Pure functions only; no I/O happens here.
"""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import unquote, urlparse

from ..config.defaults import DOCUMENT_EXTENSION, IMAGE_EXTENSIONS
from .models import ExternalLink

# [1] = target path; pipe display text is matched but ignored
WIKI_LINK_PATTERN = re.compile(r"\[\[([^\]|]+)(?:\|[^\]]+)?\]\]")

# [1] = display text, [2] = target
MARKDOWN_LINK_PATTERN = re.compile(r"\[([^\]]*)\]\(([^)]+)\)")

FRONT_MATTER_PATTERN = re.compile(r"^---\r?\n([\s\S]*?)\r?\n---")

URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)

DOMAIN_FALLBACK_PATTERN = re.compile(r"^https?://(?:www\.)?([^/]+)", re.IGNORECASE)

NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


@dataclass
class ParsedMarkdownLinks:
    """Links and metadata extracted from one document."""

    internal_links: list[str] = field(default_factory=list)
    external_links: list[ExternalLink] = field(default_factory=list)
    front_matter: dict[str, Any] = field(default_factory=dict)


def extract_domain(url: str) -> str:
    """Extract the host of a URL with any leading ``www.`` removed.

    Args:
        url: Full URL string

    Returns:
        Domain name (e.g. ``github.com`` for ``https://www.github.com/user/repo``),
        a best-effort regex extraction when the URL cannot be parsed, or the
        input unchanged if even that fails.
    """
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        hostname = None

    if hostname:
        if hostname.startswith("www."):
            hostname = hostname[4:]
        return hostname

    match = DOMAIN_FALLBACK_PATTERN.match(url)
    return match.group(1) if match else url


def _coerce_scalar(value: str) -> str | bool | int | float:
    if value == "true":
        return True
    if value == "false":
        return False
    if value and NUMBER_PATTERN.match(value):
        if any(ch in value for ch in ".eE"):
            return float(value)
        return int(value)
    return value


def parse_front_matter(content: str) -> dict[str, Any]:
    """Parse flat ``key: value`` pairs from a leading front matter block.

    Nested objects and lists are not supported. Lines without a colon, or
    starting with ``#``, are skipped. Returns an empty dict when the document
    has no front matter.
    """
    match = FRONT_MATTER_PATTERN.match(content)
    if not match:
        return {}

    result: dict[str, Any] = {}
    for line in match.group(1).split("\n"):
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue

        colon_index = trimmed.find(":")
        if colon_index <= 0:
            continue

        key = trimmed[:colon_index].strip()
        value = trimmed[colon_index + 1 :].strip()

        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]

        result[key] = _coerce_scalar(value)

    return result


def resolve_relative_path(link_path: str, current_file_path: str) -> str | None:
    """Resolve a link target against the directory of the referencing file.

    Args:
        link_path: Target as written in the link (e.g. ``../docs/file.md``)
        current_file_path: Relative path of the file containing the link

    Returns:
        Normalized path relative to the scan root, or None for URLs, anchors
        and mailto links.
    """
    if (
        URL_PATTERN.match(link_path)
        or link_path.startswith("#")
        or link_path.startswith("mailto:")
    ):
        return None

    current_dir = posixpath.dirname(current_file_path)
    decoded = unquote(link_path).replace("\\", "/")

    resolved = posixpath.normpath(posixpath.join(current_dir, decoded))
    if resolved.startswith("./"):
        resolved = resolved[2:]

    if not posixpath.splitext(resolved)[1]:
        resolved = resolved + DOCUMENT_EXTENSION

    return resolved


def parse_markdown_links(content: str, file_path: str) -> ParsedMarkdownLinks:
    """Extract internal links, external links and front matter from a document.

    Internal links are deduplicated by resolved path, external links by exact
    URL, both preserving first-seen order.

    Args:
        content: Markdown text
        file_path: Relative path of the document, used to resolve relative links

    Returns:
        ParsedMarkdownLinks for the document
    """
    parsed = ParsedMarkdownLinks(front_matter=parse_front_matter(content))
    seen_internal: set[str] = set()
    seen_external: set[str] = set()

    for match in WIKI_LINK_PATTERN.finditer(content):
        link_path = match.group(1).strip()
        if not link_path:
            continue

        # Image embeds are not document references
        if link_path.lower().endswith(IMAGE_EXTENSIONS):
            continue

        resolved = resolve_relative_path(link_path, file_path)
        if resolved and resolved not in seen_internal:
            seen_internal.add(resolved)
            parsed.internal_links.append(resolved)

    for match in MARKDOWN_LINK_PATTERN.finditer(content):
        link_url = match.group(2).strip()

        if URL_PATTERN.match(link_url):
            if link_url not in seen_external:
                seen_external.add(link_url)
                parsed.external_links.append(
                    ExternalLink(url=link_url, domain=extract_domain(link_url))
                )
            continue

        resolved = resolve_relative_path(link_url, file_path)
        if (
            resolved
            and resolved not in seen_internal
            and resolved.endswith(DOCUMENT_EXTENSION)
        ):
            seen_internal.add(resolved)
            parsed.internal_links.append(resolved)

    return parsed
