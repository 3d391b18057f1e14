"""Configuration for docgraph."""

from .settings import DocGraphSettings, get_settings

__all__ = ["DocGraphSettings", "get_settings"]
