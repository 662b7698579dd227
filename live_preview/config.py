"""
Live preview configuration.

All settings can be overridden via ``LIVE_PREVIEW_*`` environment variables.
"""

import logging
import sys
from functools import lru_cache
from typing import Dict

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Live preview settings with validation."""

    model_config = SettingsConfigDict(env_prefix="LIVE_PREVIEW_")

    # === Rendering ===
    full_view_mode_type: str = Field(
        default="learn_article",
        description="Content type that always renders in the full view mode",
    )
    default_view_mode: str = Field(
        default="full",
        description="View mode used when nothing else is configured",
    )

    # === Block ===
    block_id: str = Field(
        default="livepreviewblock",
        description="Config object suffix of the placed preview block",
    )
    preview_selector: str = Field(
        default=".c-block-sparklearn-live-preview",
        description="DOM region replaced by a live preview",
    )
    placeholder_text: str = Field(
        default="View Preview Here",
        description="Shown by the block when there is nothing to display",
    )
    library: str = Field(
        default="live_preview/live_preview-lib",
        description="Client asset carrying the link target behaviour",
    )

    library_assets: Dict[str, str] = Field(
        default={"live_preview/live_preview-lib": "/assets/live_preview.js"},
        description="Script URL loaded for each attached library",
    )

    # === Forms ===
    form_cache_ttl_seconds: int = Field(default=3600, ge=0)
    form_cache_max_entries: int = Field(default=1000, ge=1)

    # === Logging ===
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="simple", pattern="^(simple|json)$")

    @property
    def preview_class(self) -> str:
        """CSS class form of ``preview_selector``."""
        return self.preview_selector.lstrip(".")

    @property
    def block_config_name(self) -> str:
        return f"block.block.{self.block_id}"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def setup_logging(level: str = "INFO", format: str = "simple") -> None:
    """
    Configure global logging settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format: Log format ("simple" or "json")
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    if format == "json":
        formatter = logging.Formatter(
            '{"time": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}'
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)
