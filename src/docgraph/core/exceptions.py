"""Typed exception hierarchy for docgraph.

Hierarchy
---------
DocGraphError (base)
├── GraphBuildError        – build-fatal failures surfaced by build_graph_data()
│   └── ScanError          – root directory could not be listed
├── ParsingError           – single-file read/parse failure (absorbed by the builder)
├── LayoutError            – invalid layout arguments
└── ConfigError            – configuration / validation errors

Only ``GraphBuildError`` (and subclasses) ever escapes a build. Per-file
``ParsingError`` is logged and the file is skipped; a broken link is data on
the node, not an exception.
"""

from typing import Any


class DocGraphError(Exception):
    """Base exception for docgraph."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


# ── Build layer ─────────────────────────────────────────────────────────


class GraphBuildError(DocGraphError):
    """Graph build failed and produced no result."""

    pass


class ScanError(GraphBuildError):
    """Root directory of a scan could not be listed.

    The underlying OS error is chained (``raise ... from``) and also kept on
    ``cause`` so callers can render it without walking ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, context)
        self.cause = cause


class ParsingError(DocGraphError):
    """A single document could not be read or parsed."""

    pass


# ── Layout layer ────────────────────────────────────────────────────────


class LayoutError(DocGraphError):
    """Layout was invoked with invalid arguments."""

    pass


# ── Configuration layer ─────────────────────────────────────────────────


class ConfigError(DocGraphError):
    """Configuration / validation errors."""

    pass
