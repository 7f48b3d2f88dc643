"""Application settings.

All configuration is sourced from environment variables (and optionally `.env`).
Every field has a default, so `Settings()` works in a bare environment.
"""

from __future__ import annotations

from typing import List, Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.exceptions import ConfigurationError

ContinuationPolicy = Literal["keep", "drop", "error"]
ManyToManyPolicy = Literal["bipartite", "strict"]
DuplicatePolicy = Literal["keep", "first", "last", "error"]


class Settings(BaseSettings):
    """Typed environment-backed settings for stepflow."""

    model_config = SettingsConfigDict(
        env_prefix="STEPFLOW_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Layout
    node_width: float = Field(default=200, gt=0)
    node_height: float = Field(default=60, gt=0)
    vertical_spacing: float = Field(default=100, gt=0)
    horizontal_spacing: float = Field(default=250, gt=0)

    # Node styling
    single_background: str = "#dbeafe"
    single_border: str = "#3b82f6"
    parallel_background: str = "#fef3c7"
    parallel_border: str = "#f59e0b"

    # Edge styling
    edge_type: str = "smoothstep"
    simple_stroke: str = "#6b7280"
    simple_stroke_width: float = 2
    fan_stroke: str = "#f59e0b"
    fan_stroke_width: float = 2
    bipartite_stroke: str = "#6b7280"
    bipartite_stroke_width: float = 1

    # Markers
    start_glyph: str = "▶"
    end_glyph: str = "🏁"

    # Policies for irregular plans
    continuation_policy: ContinuationPolicy = "keep"
    many_to_many_policy: ManyToManyPolicy = "bipartite"
    duplicate_policy: DuplicatePolicy = "keep"

    # Hosts
    log_level: str = "INFO"
    json_logs: bool = False
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"
    rate_limit: str = "120 per minute"

    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def get_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigurationError(
            "Invalid stepflow settings", context={"errors": exc.errors(include_url=False)}
        ) from exc
