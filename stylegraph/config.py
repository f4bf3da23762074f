"""Settings for an extraction run.

Configuration is read from ``config/stylegraph.yaml`` when present and
falls back to built-in defaults otherwise. Environment variables override
the YAML values:

  - STYLEGRAPH_MAX_DEPTH: depth limit for the tree walk
  - STYLEGRAPH_INCLUDE_HIDDEN: visit nodes with ``visible: false``
  - STYLEGRAPH_PARENT_THRESHOLD: minimum similarity for parent linkage
  - STYLEGRAPH_MERGE_MIN_SCORE: minimum merge-candidate score
  - STYLEGRAPH_AUTO_MERGE: apply merges at the end of ``extract_tokens``
  - STYLEGRAPH_LOG_LEVEL: structlog level name
  - STYLEGRAPH_LOG_JSON: render logs as JSON lines
"""

import os
from pathlib import Path
from typing import Any, Optional

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError

from stylegraph.errors import ConfigError

logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_PATH = "config/stylegraph.yaml"

# env var -> (section, key)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "STYLEGRAPH_MAX_DEPTH": ("extraction", "max_depth"),
    "STYLEGRAPH_INCLUDE_HIDDEN": ("extraction", "include_hidden"),
    "STYLEGRAPH_PARENT_THRESHOLD": ("registry", "parent_threshold"),
    "STYLEGRAPH_MERGE_MIN_SCORE": ("merge", "min_score"),
    "STYLEGRAPH_AUTO_MERGE": ("merge", "auto_apply"),
    "STYLEGRAPH_LOG_LEVEL": ("logging", "level"),
    "STYLEGRAPH_LOG_JSON": ("logging", "json"),
}


class ExtractionSettings(BaseModel):
    """Tree walk and extractor defaults.

    Attributes:
        max_depth: Nodes deeper than this (root = 0) are skipped with their subtree.
        include_hidden: Visit nodes marked ``visible: false``.
        default_font_family: Used when a text style has no family.
        default_font_size: Used when a text style has no size.
        default_font_weight: Used when a text style has no weight.
    """

    max_depth: int = Field(default=5, ge=0)
    include_hidden: bool = Field(default=False)
    default_font_family: str = Field(default="Roboto", min_length=1)
    default_font_size: float = Field(default=16, gt=0)
    default_font_weight: int = Field(default=400, ge=1, le=1000)


class RegistrySettings(BaseModel):
    """Token registry thresholds.

    Attributes:
        parent_threshold: Minimum similarity for linking a new token to a parent.
    """

    parent_threshold: float = Field(default=0.8, ge=0.0, le=1.0)


class MergeSettings(BaseModel):
    """Merge engine thresholds.

    Attributes:
        min_score: Merge candidates scoring below this are discarded.
        compatibility_threshold: ``can_merge`` requires compatibility above this.
        benefit_threshold: ``can_merge`` requires merge benefit above this.
        usage_divisor: Normalizes combined usage in the merge benefit.
        auto_apply: Apply the greedy merge pass at the end of a run.
    """

    min_score: float = Field(default=0.6, ge=0.0, le=1.0)
    compatibility_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    benefit_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    usage_divisor: float = Field(default=20.0, gt=0)
    auto_apply: bool = Field(default=False)


class LoggingSettings(BaseModel):
    """structlog output options."""

    level: str = Field(default="INFO")
    json_output: bool = Field(default=False, alias="json")

    model_config = {"populate_by_name": True}


class StyleGraphSettings(BaseModel):
    """Complete settings for one extraction run."""

    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    registry: RegistrySettings = Field(default_factory=RegistrySettings)
    merge: MergeSettings = Field(default_factory=MergeSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def read_yaml_config(config_path: str | Path) -> dict[str, Any]:
    """Load the raw configuration mapping from a YAML file.

    Args:
        config_path: Path to YAML config file.

    Returns:
        Configuration dictionary, empty when the file does not exist.

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    config_file = Path(config_path)
    if not config_file.exists():
        return {}

    try:
        with open(config_file, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(str(config_file), str(exc)) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(str(config_file), "top-level YAML value must be a mapping")
    return data


def apply_env_overrides(
    data: dict[str, Any],
    environ: Optional[dict[str, str]] = None,
) -> dict[str, Any]:
    """Return a copy of ``data`` with STYLEGRAPH_* environment values applied.

    Values stay strings; pydantic coerces them during validation.
    """
    environ = os.environ if environ is None else environ
    merged = {section: dict(values or {}) for section, values in data.items()}
    for env_key, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(env_key)
        if value is None or value == "":
            continue
        merged.setdefault(section, {})[key] = value
    return merged


def load_settings(
    config_path: str | Path = DEFAULT_CONFIG_PATH,
    environ: Optional[dict[str, str]] = None,
) -> StyleGraphSettings:
    """Build settings from YAML, environment overrides and defaults.

    Args:
        config_path: Path to YAML config file; missing files mean defaults.
        environ: Environment mapping, ``os.environ`` when omitted.

    Returns:
        Validated settings.

    Raises:
        ConfigError: If the file or an override does not validate.
    """
    raw = read_yaml_config(config_path)
    for section, values in raw.items():
        if values is not None and not isinstance(values, dict):
            raise ConfigError(str(config_path), f"section '{section}' must be a mapping")

    merged = apply_env_overrides(raw, environ)
    try:
        settings = StyleGraphSettings.model_validate(merged)
    except ValidationError as exc:
        logger.error("config_invalid", path=str(config_path), errors=exc.error_count())
        raise ConfigError(str(config_path), str(exc)) from exc

    logger.debug(
        "config_loaded",
        path=str(config_path),
        max_depth=settings.extraction.max_depth,
        parent_threshold=settings.registry.parent_threshold,
        merge_min_score=settings.merge.min_score,
    )
    return settings
