"""Runtime settings for docgraph.

Settings are loaded from:
1. Keyword arguments
2. Environment variables (prefixed with DOCGRAPH_)
3. A ``.env`` file in the working directory
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.exceptions import ConfigError
from .defaults import MINDMAP_MAX_DEPTH

LayoutAlgorithm = Literal["mindmap", "force", "hierarchical"]
RankDirection = Literal["TB", "LR"]


class DocGraphSettings(BaseSettings):
    """docgraph configuration settings."""

    include_external_links: bool = False
    max_nodes: int | None = Field(default=None, ge=1)
    layout_algorithm: LayoutAlgorithm = "mindmap"
    max_depth: int = Field(default=2, ge=1, le=MINDMAP_MAX_DEPTH)
    canvas_width: int = Field(default=1200, gt=0)
    canvas_height: int = Field(default=800, gt=0)
    rank_direction: RankDirection = "TB"
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="DOCGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR"}:
            raise ValueError(f"Unknown log level: {value}")
        return level


def load_settings(**overrides) -> DocGraphSettings:
    """Build settings, translating validation failures into ConfigError."""
    try:
        return DocGraphSettings(**overrides)
    except ValidationError as e:
        raise ConfigError(f"Invalid docgraph settings: {e}") from e


@lru_cache
def get_settings() -> DocGraphSettings:
    """Process-wide settings loaded from the environment."""
    return load_settings()
