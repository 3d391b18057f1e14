"""docgraph - document-graph construction and layout for markdown trees."""

__version__ = "0.3.0"
__author__ = "Robert Matsuoka"
__email__ = "bobmatnyc@gmail.com"

from .core.exceptions import DocGraphError

__all__ = ["DocGraphError", "__version__"]
