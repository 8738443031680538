from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from subword_detok.errors import ConfigError
from subword_detok.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_DIR = "configs"
DEFAULT_INPUT_FORMAT = "piece"
DEFAULT_OUTPUT_FORMAT = "string"
STDIN_SOURCE = ""


class DecodeConfig(BaseModel):
    """
    Run configuration, built once at start-up and passed to every component.

    Format names are kept as plain strings so an unknown name surfaces from
    ``select_mode`` as a configuration error rather than a validation error.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    model: str = ""
    input: str = ""  # empty: use ``sources``, or stdin when there are none
    output: str = ""  # empty: stdout
    input_format: str = DEFAULT_INPUT_FORMAT
    output_format: str = DEFAULT_OUTPUT_FORMAT
    extra_options: str = Field(
        default="",
        description="':' separated decode options forwarded verbatim, e.g. 'reverse:bos:eos'",
    )
    sources: List[str] = Field(default_factory=list)
    strict_ids: bool = False

    def input_sources(self) -> list[str]:
        """Sources in processing order: ``input``, else positionals, else stdin."""
        if self.input:
            return [self.input]
        if self.sources:
            return list(self.sources)
        return [STDIN_SOURCE]


def resolve_config_path(path: str | Path | None, config_dir: str | Path | None = None) -> Path | None:
    if path is None:
        return None
    candidate = Path(path)
    if candidate.is_absolute():
        return candidate
    if candidate.exists():
        return candidate
    base_dir = Path(config_dir or os.getenv("SUBWORD_DETOK_CONFIG_DIR", DEFAULT_CONFIG_DIR))
    fallback = base_dir / candidate
    if fallback.exists():
        return fallback
    return candidate


def load_config_file(path: str | Path) -> Dict[str, Any]:
    """
    Load default flag values from a JSON file.

    Schema (every key optional):
    {
      "model": "models/wiki.model",
      "input_format": "id",
      "output_format": "string",
      "extra_options": "reverse",
      "output": "out.txt",
      "strict_ids": false
    }

    Unknown keys are ignored with a warning.
    """
    resolved = resolve_config_path(path)
    if resolved is None or not resolved.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        data = json.loads(resolved.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file {resolved}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {resolved} must contain a JSON object")

    known = set(DecodeConfig.model_fields)
    for key in sorted(set(data) - known):
        logger.warning("Ignoring unknown key %r in config file %s", key, resolved)
    return {key: value for key, value in data.items() if key in known}


def build_config(
    overrides: Dict[str, Any],
    defaults: Optional[Dict[str, Any]] = None,
) -> DecodeConfig:
    """Merge file defaults with explicit overrides; ``None`` overrides are skipped."""
    merged: Dict[str, Any] = dict(defaults or {})
    merged.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return DecodeConfig(**merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
