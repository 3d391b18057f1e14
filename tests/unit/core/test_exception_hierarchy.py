"""Tests for the typed exception hierarchy."""

from __future__ import annotations

import pytest

from docgraph.core.exceptions import (
    ConfigError,
    DocGraphError,
    GraphBuildError,
    LayoutError,
    ParsingError,
    ScanError,
)


class TestExceptionHierarchy:
    @pytest.mark.parametrize(
        "exc_class", [GraphBuildError, ParsingError, LayoutError, ConfigError]
    )
    def test_subclasses_of_base(self, exc_class):
        assert issubclass(exc_class, DocGraphError)

    def test_scan_error_is_build_error(self):
        assert issubclass(ScanError, GraphBuildError)

    def test_parsing_error_is_not_build_fatal(self):
        assert not issubclass(ParsingError, GraphBuildError)

    def test_context_defaults_to_empty_dict(self):
        assert DocGraphError("boom").context == {}

    def test_context_is_kept(self):
        err = LayoutError("bad", context={"rank_direction": "XY"})
        assert err.context == {"rank_direction": "XY"}
        assert str(err) == "bad"

    def test_scan_error_keeps_cause(self):
        cause = PermissionError("denied")
        err = ScanError("Failed to scan directory /x: denied", cause=cause)
        assert err.cause is cause

    def test_base_exported_from_package_root(self):
        import docgraph

        assert docgraph.DocGraphError is DocGraphError
