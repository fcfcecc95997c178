"""Package configuration from environment variables."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


class Settings(BaseSettings):
    svgmap_env: str = "development"
    svgmap_log_level: str = "info"

    # Loader defaults
    svgmap_tolerance: float = Field(0.1, gt=0)
    svgmap_canvas_width: float | None = None
    svgmap_canvas_height: float | None = None

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Load ``.env`` and set up root logging at ``level`` (default: the configured level)."""
    load_dotenv()
    name = (level or settings.svgmap_log_level).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format=LOG_FORMAT,
    )
