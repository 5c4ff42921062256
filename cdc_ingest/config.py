"""Application configuration loaded from a YAML file and the environment."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import MISSING, dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any

import yaml

CONFIG_NAME = "application"
CONFIG_EXTENSIONS = ("yaml", "yml")
ENV_PREFIX = "APP"


class ConfigError(Exception):
    """Raised when the configuration cannot be found, read or decoded."""


@dataclass
class TopicConfig:
    partitions: int = 0
    replication_factor: int = 0


@dataclass
class KafkaConfig:
    brokers: list[str] = field(default_factory=lambda: ["localhost:9092"])
    topic: str = "cdc-events"
    group_id: str = "cdc-consumer-group"
    client_id: str = "cdc-client"
    topic_config: TopicConfig = field(default_factory=TopicConfig)


@dataclass
class OpenSearchConfig:
    hosts: list[str] = field(default_factory=lambda: ["http://localhost:9200"])
    index_prefix: str = "cdc"


@dataclass
class ProducerConfig:
    input_file: str = "stream.jsonl"


@dataclass
class ConsumerConfig:
    batch_size: int = 100
    commit_interval: str = "1s"


@dataclass
class LogConfig:
    level: str = "info"
    format: str = "json"


@dataclass
class Config:
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    opensearch: OpenSearchConfig = field(default_factory=OpenSearchConfig)
    producer: ProducerConfig = field(default_factory=ProducerConfig)
    consumer: ConsumerConfig = field(default_factory=ConsumerConfig)
    log: LogConfig = field(default_factory=LogConfig)


def _find_config_file(search_paths: Iterable[str | os.PathLike[str]]) -> Path:
    paths = list(search_paths)
    for directory in paths:
        for extension in CONFIG_EXTENSIONS:
            candidate = Path(directory) / f"{CONFIG_NAME}.{extension}"
            if candidate.is_file():
                return candidate
    shown = ", ".join(str(p) for p in paths)
    raise ConfigError(f'config file "{CONFIG_NAME}" not found in [{shown}]')


def _flatten(mapping: Mapping[Any, Any], prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for raw_key, value in mapping.items():
        key = f"{prefix}{str(raw_key).lower()}"
        if isinstance(value, Mapping):
            flat.update(_flatten(value, f"{key}."))
        else:
            flat[key] = value
    return flat


def _read_file(path: Path) -> dict[str, Any]:
    try:
        content = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"cannot read {path}: {exc}") from exc
    if content is None:
        return {}
    if not isinstance(content, Mapping):
        raise ConfigError(f"{path} must hold a mapping at the top level")
    return _flatten(content)


def _to_str(key: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return str(value)
    raise ConfigError(f"{key}: cannot use {type(value).__name__} as a string")


def _to_int(key: str, value: Any) -> int:
    if isinstance(value, (bool, int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value, 0) if value else 0
        except ValueError as exc:
            raise ConfigError(f"{key}: cannot parse {value!r} as an integer") from exc
    raise ConfigError(f"{key}: cannot use {type(value).__name__} as an integer")


def _to_list(key: str, value: Any) -> list[str]:
    if isinstance(value, str):
        return value.split(",") if value else []
    if isinstance(value, (list, tuple)):
        return [_to_str(key, item) for item in value]
    return [_to_str(key, value)]


_CONVERTERS = {str: _to_str, int: _to_int, list: _to_list}


def _build(cls: type, prefix: str, file_values: Mapping[str, Any], environ: Mapping[str, str]) -> Any:
    values: dict[str, Any] = {}
    for item in fields(cls):
        key = f"{prefix}{item.name}"
        default = item.default if item.default is not MISSING else item.default_factory()
        if is_dataclass(default):
            values[item.name] = _build(type(default), f"{key}.", file_values, environ)
            continue
        env_value = environ.get(f"{ENV_PREFIX}_{key.upper()}")
        if env_value:
            raw = env_value
        elif file_values.get(key) is not None:
            raw = file_values[key]
        else:
            raw = default
        values[item.name] = _CONVERTERS[type(default)](key, raw)
    return cls(**values)


def load_config(
    search_paths: Iterable[str | os.PathLike[str]] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Load the configuration.

    The first ``application.yaml`` or ``application.yml`` in the search paths
    is read. Non-empty ``APP_<KEY>`` environment variables (for example
    ``APP_KAFKA.BROKERS``) override the file, which overrides the defaults.
    Comma-separated strings are split where a list is expected.
    """
    paths = ["."] if search_paths is None else search_paths
    env = os.environ if environ is None else environ
    file_values = _read_file(_find_config_file(paths))
    return _build(Config, "", file_values, env)