"""Run configuration, read from YAML and overridable from the command line."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError

from api_doc_builder.errors import ConfigError
from api_doc_builder.handler.base import DEFAULT_BASE_URL
from api_doc_builder.handler.registry import DEFAULT_PIPELINE

DEFAULT_OUT = Path("build") / "api-docs"


class DocConfig(BaseModel):
    """Everything one documentation run needs besides its input file."""

    id: str = "index"
    title: str = "API Documentation"
    version: str | None = None
    description: str | None = None
    readme: str | None = None
    out: Path = DEFAULT_OUT
    classifier: str = "controller"
    use_buckets: bool = True
    handlers: list[str] = list(DEFAULT_PIPELINE)
    ignore: list[str] = []  # parameter types left out of every table
    css: str | None = None
    base_url: str = DEFAULT_BASE_URL
    parallel: bool = False

    def merged(self, **overrides: Any) -> "DocConfig":
        """Copy with ``overrides`` applied; None and empty values are skipped."""
        values = {k: v for k, v in overrides.items() if v not in (None, "", (), [])}
        try:
            return self.model_validate({**self.model_dump(), **values})
        except ValidationError as e:
            raise ConfigError(f"Invalid option: {e}") from e


def load_config(path: Path) -> DocConfig:
    """Read a YAML config file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping")

    try:
        return DocConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e
