"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "LECTUREHUB_"


class Settings(BaseModel):
    app_name:          str = "lecturehub"
    hub_name:          str = Field(default="Business Analytics Hub", description="Name printed on exported documents")
    data_dir:          str = Field(default="data", description="Directory with courses/teachers/lectures JSON and note files")
    db_url:            str = Field(default="sqlite:///lecturehub.db", description="Progress database URL")
    cache_ttl:         int = Field(default=300, ge=0, description="Seconds a loaded dataset stays cached; 0 disables")
    min_search_length: int = Field(default=2,   ge=1, description="Shortest query the search index answers")
    max_keywords:      int = Field(default=10,  ge=0, description="Max related keywords per search; 0 = none")
    output_dir:        str = Field(default="dist", description="Directory for exported lecture documents")
    headings_per_page: int = Field(default=5,   ge=1, description="Headings per page when estimating TOC pages")
    log_level:         str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR)$")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then LECTUREHUB_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
