"""Configuration management."""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional, Union, get_args, get_origin

import yaml

from labor_feed.adapters.http_client import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT

SOURCE_KEYS = ("nyc_council", "nyc_rules", "city_record", "nys_register", "nys_dol")


class ConfigError(ValueError):
    """Raised for invalid configuration values."""


@dataclass
class HttpConfig:
    """HTTP client settings."""
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT


@dataclass
class OutputConfig:
    """Feed output settings."""
    path: Path = Path("updates.json")
    indent: int = 2


@dataclass
class AggregationConfig:
    """Aggregation settings."""
    concurrent: bool = True


@dataclass
class SourceConfig:
    """Per-source overrides. None means the source's own default."""
    enabled: bool = True
    max_items: Optional[int] = None
    keywords: Optional[list[str]] = None


@dataclass
class Settings:
    """Application settings."""

    http: HttpConfig = field(default_factory=HttpConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    aggregation: AggregationConfig = field(default_factory=AggregationConfig)
    sources: dict[str, SourceConfig] = field(
        default_factory=lambda: {key: SourceConfig() for key in SOURCE_KEYS}
    )

    @property
    def output_path(self) -> Path:
        return self.output.path

    def source(self, key: str) -> SourceConfig:
        return self.sources.get(key) or SourceConfig()


def load_config(config_path: Path = Path("config.yaml")) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        try:
            config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"{config_path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"{config_path}: top level must be a mapping")
    return config


def _coerce(value: object, expected: object, name: str) -> object:
    """Check a YAML value against a config field type.

    Ints are accepted for floats and strings for paths. Anything else
    must already have the declared type.
    """
    if get_origin(expected) is Union:
        if value is None:
            return None
        (expected,) = [arg for arg in get_args(expected) if arg is not type(None)]

    if expected is bool:
        if not isinstance(value, bool):
            raise ConfigError(f"'{name}' must be true or false")
        return value

    if expected is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"'{name}' must be an integer")
        return value

    if expected is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"'{name}' must be a number")
        return float(value)

    if expected is str:
        if not isinstance(value, str):
            raise ConfigError(f"'{name}' must be a string")
        return value

    if expected is Path:
        if not isinstance(value, (str, Path)) or not str(value):
            raise ConfigError(f"'{name}' must be a path")
        return Path(value)

    if get_origin(expected) is list:
        if not isinstance(value, list) or not all(
            isinstance(entry, str) and entry.strip() for entry in value
        ):
            raise ConfigError(f"'{name}' must be a list of non-empty strings")
        return value

    raise ConfigError(f"'{name}' has an unsupported type")


def _apply(section: object, values: dict, name: str) -> None:
    """Copy known keys from a YAML mapping onto a config dataclass."""
    if not isinstance(values, dict):
        raise ConfigError(f"'{name}' must be a mapping")

    types = {f.name: f.type for f in fields(section)}
    for key, value in values.items():
        if key not in types:
            raise ConfigError(f"Unknown setting '{name}.{key}'")
        setattr(section, key, _coerce(value, types[key], f"{name}.{key}"))


def _source_config(key: str, values: dict) -> SourceConfig:
    source = SourceConfig()
    _apply(source, values, f"sources.{key}")

    if source.max_items is not None and source.max_items < 0:
        raise ConfigError(f"'sources.{key}.max_items' cannot be negative")
    if source.keywords is not None and not source.keywords:
        raise ConfigError(f"'sources.{key}.keywords' cannot be empty")
    return source


def get_settings(config_path: Path = Path("config.yaml")) -> Settings:
    """Get application settings from YAML config and environment."""
    config = load_config(config_path)
    settings = Settings()

    if "http" in config:
        _apply(settings.http, config["http"], "http")
        if settings.http.timeout <= 0:
            raise ConfigError("'http.timeout' must be positive")

    if "output" in config:
        _apply(settings.output, config["output"], "output")
        if settings.output.indent < 0:
            raise ConfigError("'output.indent' cannot be negative")

    if "aggregation" in config:
        _apply(settings.aggregation, config["aggregation"], "aggregation")

    if "sources" in config:
        sources = config["sources"] or {}
        if not isinstance(sources, dict):
            raise ConfigError("'sources' must be a mapping")
        for key, values in sources.items():
            if key not in SOURCE_KEYS:
                raise ConfigError(f"Unknown source '{key}'")
            settings.sources[key] = _source_config(key, values or {})

    # Environment wins over the file
    output_override = os.getenv("LABOR_FEED_OUTPUT")
    if output_override:
        settings.output.path = Path(output_override)

    return settings
