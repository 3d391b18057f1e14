"""Core graph construction for docgraph."""

from .exceptions import (
    ConfigError,
    DocGraphError,
    GraphBuildError,
    LayoutError,
    ParsingError,
    ScanError,
)

__all__ = [
    "ConfigError",
    "DocGraphError",
    "GraphBuildError",
    "LayoutError",
    "ParsingError",
    "ScanError",
]
